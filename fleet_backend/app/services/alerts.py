"""
Alert derivation.

Turns current vehicle rows and in-progress trips into a prioritised list of
alerts: maintenance due, insurance expiring or expired, and trips running
behind schedule. Pure functions only; nothing here touches the database.

Known quirks kept as-is:
- the "Service Due" status alert and the "Service Overdue" date alert can
  both fire for the same vehicle;
- elapsed trip time is counted in whole days times 24, not true hours;
- acknowledging or dismissing only changes the list the caller holds, so a
  dismissed alert comes back on the next derivation.
"""

from datetime import datetime
from typing import Dict, Iterable, List, Optional

from fleet_backend.app.core.dates import as_utc, utcnow, whole_days_between
from fleet_backend.app.models.enums import MaintenanceStatus
from fleet_backend.app.schemas.alert import Alert, AlertType

SERVICE_OVERDUE_DAYS = 30
INSURANCE_WARNING_DAYS = 7
EXPECTED_PROGRESS_THRESHOLD = 80
PROGRESS_LAG_TOLERANCE = 20

PRIORITY = {
    AlertType.CRITICAL: 0,
    AlertType.MAINTENANCE: 1,
    AlertType.SCHEDULE: 2,
}


def _vehicle_alerts(vehicle, now: datetime) -> List[Alert]:
    alerts = []
    plate = vehicle.license_plate

    status = vehicle.maintenance_status
    if status in (MaintenanceStatus.NEEDS_SERVICE, MaintenanceStatus.CRITICAL):
        critical = status == MaintenanceStatus.CRITICAL
        alerts.append(Alert(
            id=f"maint-{vehicle.id}",
            type=AlertType.CRITICAL if critical else AlertType.MAINTENANCE,
            title="Critical Maintenance Required" if critical else "Service Due",
            description=f"{plate} requires immediate attention",
            timestamp=now,
            vehicle_id=vehicle.id,
            license_plate=plate,
        ))

    if vehicle.last_service_date:
        days_since_service = whole_days_between(now, vehicle.last_service_date)
        if days_since_service > SERVICE_OVERDUE_DAYS:
            alerts.append(Alert(
                id=f"service-{vehicle.id}",
                type=AlertType.MAINTENANCE,
                title="Service Overdue",
                description=f"{plate} last serviced {days_since_service} days ago",
                timestamp=as_utc(vehicle.last_service_date),
                vehicle_id=vehicle.id,
                license_plate=plate,
            ))

    if vehicle.insurance_expiry:
        expiry = as_utc(vehicle.insurance_expiry)
        days_until_expiry = whole_days_between(expiry, now)
        if 0 <= days_until_expiry <= INSURANCE_WARNING_DAYS:
            alerts.append(Alert(
                id=f"insurance-{vehicle.id}",
                type=AlertType.MAINTENANCE,
                title="Insurance Expiring Soon",
                description=f"{plate} insurance expires in {days_until_expiry} days",
                timestamp=expiry,
                vehicle_id=vehicle.id,
                license_plate=plate,
            ))
        elif expiry < now:
            alerts.append(Alert(
                id=f"insurance-expired-{vehicle.id}",
                type=AlertType.CRITICAL,
                title="Insurance Expired",
                description=f"{plate} insurance has expired!",
                timestamp=expiry,
                vehicle_id=vehicle.id,
                license_plate=plate,
            ))

    return alerts


def expected_progress(start_time: datetime, estimated_duration_hours: float, now: datetime) -> float:
    """Expected completion percentage, with elapsed time counted in whole days."""
    hours_elapsed = whole_days_between(now, start_time) * 24
    return min((hours_elapsed / estimated_duration_hours) * 100, 100)


def _trip_alert(trip, plates: Dict[int, str], now: datetime) -> Optional[Alert]:
    if not trip.estimated_duration_hours or not trip.start_time:
        return None

    progress = trip.progress_percent or 0
    expected = expected_progress(trip.start_time, trip.estimated_duration_hours, now)
    if expected > EXPECTED_PROGRESS_THRESHOLD and progress < expected - PROGRESS_LAG_TOLERANCE:
        plate = getattr(trip, "vehicle_license_plate", None) or plates.get(trip.vehicle_id)
        return Alert(
            id=f"delay-{trip.id}",
            type=AlertType.SCHEDULE,
            title="Schedule Deviation",
            description=f"{plate or 'Vehicle'} on {trip.route} is behind schedule",
            timestamp=now,
            vehicle_id=trip.vehicle_id,
            license_plate=plate,
        )
    return None


def sort_alerts(alerts: List[Alert]) -> List[Alert]:
    """Critical first, then maintenance, then schedule; newest first within a type."""
    by_time = sorted(alerts, key=lambda a: as_utc(a.timestamp), reverse=True)
    return sorted(by_time, key=lambda a: PRIORITY[a.type])


def derive_alerts(vehicles: Iterable, in_progress_trips: Iterable, now: Optional[datetime] = None) -> List[Alert]:
    """
    Derive the alert list from vehicle rows and in-progress trips.

    Args:
        vehicles: objects with ``id``, ``license_plate``, ``maintenance_status``,
            ``last_service_date`` and ``insurance_expiry``
        in_progress_trips: objects with ``id``, ``vehicle_id``, ``route``,
            ``start_time``, ``estimated_duration_hours`` and ``progress_percent``
        now: evaluation time; defaults to the current UTC time

    Returns:
        Alerts ordered by priority, then by timestamp descending
    """
    now = as_utc(now) if now else utcnow()
    vehicles = list(vehicles)

    alerts: List[Alert] = []
    for vehicle in vehicles:
        alerts.extend(_vehicle_alerts(vehicle, now))

    plates = {v.id: v.license_plate for v in vehicles}
    for trip in in_progress_trips:
        alert = _trip_alert(trip, plates, now)
        if alert is not None:
            alerts.append(alert)

    return sort_alerts(alerts)


def acknowledge_alert(alerts: List[Alert], alert_id: str) -> List[Alert]:
    return [a.model_copy(update={"acknowledged": True}) if a.id == alert_id else a for a in alerts]


def dismiss_alert(alerts: List[Alert], alert_id: str) -> List[Alert]:
    return [a for a in alerts if a.id != alert_id]


def unacknowledged_count(alerts: List[Alert]) -> int:
    return sum(1 for a in alerts if not a.acknowledged)
