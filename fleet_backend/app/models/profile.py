"""
Profile database model.

One profile per authenticated user.
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.sql import func
from fleet_backend.app.db.session import Base


class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    full_name = Column(String(255), nullable=False)
    mobile_phone = Column(String(50), nullable=True)
    base_station = Column(String(100), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Profile(id={self.id}, full_name='{self.full_name}')>"
