"""
Fuel log database model.

``total_cost_kes`` is stored for display; analytics recompute cost from
``liters`` and ``price_per_liter_kes``.
"""

from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleet_backend.app.db.session import Base


class FuelLog(Base):
    __tablename__ = "fuel_logs"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True, index=True)

    liters = Column(Float, nullable=False)
    price_per_liter_kes = Column(Float, nullable=False)
    total_cost_kes = Column(Float, nullable=True)

    route = Column(String(255), nullable=True)
    station_location = Column(String(255), nullable=True)
    odometer_reading = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)

    vehicle = relationship("Vehicle", lazy="raise")

    def __repr__(self):
        return f"<FuelLog(id={self.id}, vehicle_id={self.vehicle_id}, liters={self.liters})>"
