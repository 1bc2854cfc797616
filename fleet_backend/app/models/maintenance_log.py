"""
Maintenance log database model.
"""

from sqlalchemy import Column, Integer, String, Text, Float, Date, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleet_backend.app.db.session import Base


class MaintenanceLog(Base):
    __tablename__ = "maintenance_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)

    service_type = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    performed_by = Column(String(255), nullable=True)
    date_performed = Column(Date, nullable=False, index=True)
    next_due_date = Column(Date, nullable=True)
    cost_kes = Column(Float, nullable=False)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    vehicle = relationship("Vehicle", lazy="raise")

    def __repr__(self):
        return f"<MaintenanceLog(id={self.id}, vehicle_id={self.vehicle_id}, service='{self.service_type}')>"
