"""
Vehicle database model.

A vehicle carries two independent status axes: the operational ``status``
and the ``maintenance_status``. An active vehicle can need service.
"""

from sqlalchemy import Column, Integer, String, Float, Date, DateTime
from sqlalchemy.sql import func
from fleet_backend.app.db.session import Base
from fleet_backend.app.models.enums import VehicleStatus, MaintenanceStatus, db_enum


class Vehicle(Base):
    __tablename__ = "vehicles"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)

    # Identification
    license_plate = Column(String(50), unique=True, nullable=False, index=True)
    vehicle_type = Column(String(100), nullable=False)  # e.g., "Truck", "Matatu", "Van"

    # Operations
    status = Column(db_enum(VehicleStatus, "vehicle_status"), default=VehicleStatus.ACTIVE, nullable=False, index=True)
    route_assigned = Column(String(255), nullable=True)

    # Last known position
    current_latitude = Column(Float, nullable=True)
    current_longitude = Column(Float, nullable=True)
    last_location_update = Column(DateTime(timezone=True), nullable=True)

    # Maintenance and insurance
    maintenance_status = Column(db_enum(MaintenanceStatus, "maintenance_status"), default=MaintenanceStatus.GOOD, nullable=True)
    last_service_date = Column(Date, nullable=True)
    insurance_expiry = Column(Date, nullable=True)

    # Fuel figures
    fuel_efficiency_kml = Column(Float, nullable=True)
    monthly_fuel_consumption_liters = Column(Float, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<Vehicle(id={self.id}, plate='{self.license_plate}', status='{self.status}')>"
