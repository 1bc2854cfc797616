"""
Role assignment model.

A separate one-row-per-user mapping into AppRole. Used for view gating
only, never for entity ownership.
"""

from sqlalchemy import Column, Integer, DateTime, ForeignKey
from sqlalchemy.sql import func
from fleet_backend.app.db.session import Base
from fleet_backend.app.models.enums import AppRole, db_enum


class UserRoleAssignment(Base):
    __tablename__ = "user_roles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), unique=True, nullable=False, index=True)
    role = Column(db_enum(AppRole, "app_role"), nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<UserRoleAssignment(user_id={self.user_id}, role='{self.role.value}')>"
