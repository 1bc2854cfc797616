"""
Unit tests for alert derivation.
"""

from datetime import date, datetime, timedelta, timezone
from types import SimpleNamespace

from fleet_backend.app.models.enums import MaintenanceStatus
from fleet_backend.app.schemas.alert import AlertType
from fleet_backend.app.services.alerts import (
    acknowledge_alert,
    derive_alerts,
    dismiss_alert,
    expected_progress,
    unacknowledged_count,
)

NOW = datetime(2026, 10, 18, tzinfo=timezone.utc)


def make_vehicle(id=1, plate="KCA 123A", maintenance_status=MaintenanceStatus.GOOD,
                 last_service_date=None, insurance_expiry=None):
    return SimpleNamespace(
        id=id,
        license_plate=plate,
        maintenance_status=maintenance_status,
        last_service_date=last_service_date,
        insurance_expiry=insurance_expiry,
    )


def make_trip(id=1, vehicle_id=1, route="Nairobi-Mombasa", start_time=None,
              estimated_duration_hours=24, progress_percent=0):
    return SimpleNamespace(
        id=id,
        vehicle_id=vehicle_id,
        route=route,
        start_time=start_time or NOW - timedelta(days=2),
        estimated_duration_hours=estimated_duration_hours,
        progress_percent=progress_percent,
    )


def test_healthy_fleet_has_no_alerts():
    vehicles = [make_vehicle(last_service_date=date(2026, 10, 1), insurance_expiry=date(2027, 6, 1))]
    assert derive_alerts(vehicles, [], now=NOW) == []


def test_critical_maintenance_status():
    alerts = derive_alerts([make_vehicle(maintenance_status=MaintenanceStatus.CRITICAL)], [], now=NOW)

    assert len(alerts) == 1
    alert = alerts[0]
    assert alert.id == "maint-1"
    assert alert.type == AlertType.CRITICAL
    assert alert.title == "Critical Maintenance Required"
    assert alert.description == "KCA 123A requires immediate attention"
    assert alert.acknowledged is False


def test_service_due_and_overdue_fire_together():
    """A vehicle flagged for service and serviced long ago raises both alerts."""
    vehicle = make_vehicle(
        maintenance_status=MaintenanceStatus.NEEDS_SERVICE,
        last_service_date=NOW.date() - timedelta(days=45),
    )
    alerts = derive_alerts([vehicle], [], now=NOW)

    titles = {a.title for a in alerts}
    assert titles == {"Service Due", "Service Overdue"}
    overdue = next(a for a in alerts if a.id == "service-1")
    assert overdue.description == "KCA 123A last serviced 45 days ago"
    assert overdue.type == AlertType.MAINTENANCE


def test_critical_and_overdue_fire_together():
    """Critical status and a stale service date are separate alerts, critical first."""
    vehicle = make_vehicle(
        maintenance_status=MaintenanceStatus.CRITICAL,
        last_service_date=NOW.date() - timedelta(days=45),
    )
    alerts = derive_alerts([vehicle], [], now=NOW)

    assert [(a.id, a.type) for a in alerts] == [
        ("maint-1", AlertType.CRITICAL),
        ("service-1", AlertType.MAINTENANCE),
    ]
    assert [a.title for a in alerts] == ["Critical Maintenance Required", "Service Overdue"]


def test_recent_service_is_not_overdue():
    vehicle = make_vehicle(last_service_date=NOW.date() - timedelta(days=30))
    assert derive_alerts([vehicle], [], now=NOW) == []


def test_insurance_expiring_soon():
    vehicle = make_vehicle(insurance_expiry=NOW.date() + timedelta(days=5))
    alerts = derive_alerts([vehicle], [], now=NOW)

    assert [a.id for a in alerts] == ["insurance-1"]
    assert alerts[0].title == "Insurance Expiring Soon"
    assert alerts[0].description == "KCA 123A insurance expires in 5 days"


def test_insurance_expiring_today_is_not_expired():
    afternoon = datetime(2026, 10, 18, 15, 30, tzinfo=timezone.utc)
    vehicle = make_vehicle(insurance_expiry=afternoon.date())
    alerts = derive_alerts([vehicle], [], now=afternoon)

    assert [a.id for a in alerts] == ["insurance-1"]
    assert alerts[0].title == "Insurance Expiring Soon"
    assert alerts[0].type == AlertType.MAINTENANCE
    assert alerts[0].description == "KCA 123A insurance expires in 0 days"


def test_insurance_expiring_beyond_window_is_ignored():
    vehicle = make_vehicle(insurance_expiry=NOW.date() + timedelta(days=8))
    assert derive_alerts([vehicle], [], now=NOW) == []


def test_insurance_expired_is_critical():
    vehicle = make_vehicle(insurance_expiry=NOW.date() - timedelta(days=3))
    alerts = derive_alerts([vehicle], [], now=NOW)

    assert [a.id for a in alerts] == ["insurance-expired-1"]
    assert alerts[0].type == AlertType.CRITICAL
    assert alerts[0].description == "KCA 123A insurance has expired!"


def test_trip_behind_schedule():
    vehicles = [make_vehicle()]
    trips = [make_trip(progress_percent=10)]

    alerts = derive_alerts(vehicles, trips, now=NOW)

    assert len(alerts) == 1
    assert alerts[0].id == "delay-1"
    assert alerts[0].type == AlertType.SCHEDULE
    assert alerts[0].description == "KCA 123A on Nairobi-Mombasa is behind schedule"


def test_trip_close_to_expected_progress_is_fine():
    trips = [make_trip(progress_percent=85)]
    assert derive_alerts([make_vehicle()], trips, now=NOW) == []


def test_trip_without_estimate_is_skipped():
    trips = [make_trip(estimated_duration_hours=None)]
    assert derive_alerts([make_vehicle()], trips, now=NOW) == []


def test_trip_for_unknown_vehicle_uses_generic_name():
    trips = [make_trip(vehicle_id=99)]
    alerts = derive_alerts([], trips, now=NOW)
    assert alerts[0].description == "Vehicle on Nairobi-Mombasa is behind schedule"


def test_elapsed_time_counts_whole_days():
    """Twenty hours in, no whole day has passed yet."""
    start = NOW - timedelta(hours=20)
    assert expected_progress(start, 10, NOW) == 0
    assert expected_progress(NOW - timedelta(days=1, hours=2), 48, NOW) == 50


def test_alerts_are_ordered_by_priority():
    vehicles = [
        make_vehicle(id=1, plate="KCA 001A", insurance_expiry=NOW.date() + timedelta(days=2)),
        make_vehicle(id=2, plate="KCB 002B", maintenance_status=MaintenanceStatus.CRITICAL),
    ]
    trips = [make_trip(id=7, vehicle_id=1)]

    alerts = derive_alerts(vehicles, trips, now=NOW)

    assert [a.type for a in alerts] == [AlertType.CRITICAL, AlertType.MAINTENANCE, AlertType.SCHEDULE]


def test_same_priority_newest_first():
    vehicles = [
        make_vehicle(id=1, plate="KCA 001A", last_service_date=NOW.date() - timedelta(days=90)),
        make_vehicle(id=2, plate="KCB 002B", last_service_date=NOW.date() - timedelta(days=40)),
    ]
    alerts = derive_alerts(vehicles, [], now=NOW)
    assert [a.id for a in alerts] == ["service-2", "service-1"]


def test_acknowledge_and_dismiss():
    vehicles = [
        make_vehicle(id=1, maintenance_status=MaintenanceStatus.CRITICAL),
        make_vehicle(id=2, plate="KCB 002B", maintenance_status=MaintenanceStatus.NEEDS_SERVICE),
    ]
    alerts = derive_alerts(vehicles, [], now=NOW)
    assert unacknowledged_count(alerts) == 2

    acknowledged = acknowledge_alert(alerts, "maint-1")
    assert unacknowledged_count(acknowledged) == 1
    assert alerts[0].acknowledged is False

    remaining = dismiss_alert(acknowledged, "maint-2")
    assert [a.id for a in remaining] == ["maint-1"]

    # Dismissal is not persisted: the alert comes back on the next derivation
    assert len(derive_alerts(vehicles, [], now=NOW)) == 2
