"""
Trip database model.

A trip belongs to one vehicle and optionally one driver.
"""

from sqlalchemy import Column, Integer, String, Float, ForeignKey, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from fleet_backend.app.db.session import Base
from fleet_backend.app.models.enums import db_enum
from fleet_backend.app.models.trip_enums import TripStatus


class Trip(Base):
    __tablename__ = "trips"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    vehicle_id = Column(Integer, ForeignKey("vehicles.id", ondelete="CASCADE"), nullable=False, index=True)
    driver_id = Column(Integer, ForeignKey("drivers.id", ondelete="SET NULL"), nullable=True, index=True)

    # Route
    route = Column(String(255), nullable=False, index=True)
    start_location = Column(String(255), nullable=False)
    end_location = Column(String(255), nullable=False)
    distance_km = Column(Float, nullable=True)

    # Schedule
    start_time = Column(DateTime(timezone=True), nullable=False, index=True)
    end_time = Column(DateTime(timezone=True), nullable=True)
    estimated_duration_hours = Column(Float, nullable=True)

    # Status
    status = Column(db_enum(TripStatus, "trip_status"), default=TripStatus.SCHEDULED, nullable=False, index=True)
    progress_percent = Column(Integer, default=0, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    vehicle = relationship("Vehicle", lazy="raise")
    driver = relationship("Driver", lazy="raise")

    def __repr__(self):
        return f"<Trip(id={self.id}, route='{self.route}', status='{self.status}')>"
