"""
Driver database model.

A driver row may exist without a linked login (``user_id`` is nullable)
and is assigned at most one vehicle at a time.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleet_backend.app.db.session import Base


class Driver(Base):
    __tablename__ = "drivers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="SET NULL"), nullable=True, unique=True, index=True)

    license_number = Column(String(100), nullable=False)

    # Performance counters
    performance_score = Column(Integer, default=100, nullable=True)
    total_trips = Column(Integer, default=0, nullable=True)
    speeding_incidents = Column(Integer, default=0, nullable=True)
    harsh_braking_events = Column(Integer, default=0, nullable=True)
    idle_time_hours = Column(Float, default=0, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    profile = relationship("Profile", primaryjoin="foreign(Driver.user_id) == Profile.id", viewonly=True, lazy="raise")
    vehicle = relationship("Vehicle", lazy="raise")

    def __repr__(self):
        return f"<Driver(id={self.id}, license='{self.license_number}')>"
