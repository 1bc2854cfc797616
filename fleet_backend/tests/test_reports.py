"""
Tests for report assembly and PDF rendering.
"""

import pytest
from datetime import date, datetime, timezone
from types import SimpleNamespace

from pydantic import ValidationError

from fleet_backend.app.models.enums import AppRole, MaintenanceStatus, VehicleStatus
from fleet_backend.app.models.fuel_log import FuelLog
from fleet_backend.app.models.maintenance_log import MaintenanceLog
from fleet_backend.app.models.trip_enums import TripStatus
from fleet_backend.app.schemas.report import ReportFilters, ReportSections, ReportType, SectionType
from fleet_backend.app.services.metrics import aggregate
from fleet_backend.app.services.pdf_report import ReportRenderer, render_report_pdf
from fleet_backend.app.services.reports import (
    ReportRows,
    build_report,
    date_range_label,
    filter_rows,
    report_filename,
)

NOW = datetime(2026, 10, 18, 10, 0, tzinfo=timezone.utc)


def sample_rows(trip_count=3, fuel_count=2):
    vehicles = [
        SimpleNamespace(id=1, license_plate="KCA 123A", vehicle_type="Truck", status=VehicleStatus.ACTIVE,
                        route_assigned="Nairobi-Mombasa", maintenance_status=MaintenanceStatus.NEEDS_SERVICE,
                        fuel_efficiency_kml=4.5),
        SimpleNamespace(id=2, license_plate="KBZ 456B", vehicle_type="Van", status=VehicleStatus.IDLE,
                        route_assigned=None, maintenance_status=MaintenanceStatus.GOOD,
                        fuel_efficiency_kml=None),
    ]
    drivers = [
        SimpleNamespace(id=1, vehicle_id=1, full_name="John Kamau", license_number="DL-1001",
                        performance_score=85, total_trips=12, speeding_incidents=1, harsh_braking_events=0),
        SimpleNamespace(id=2, vehicle_id=2, full_name="Mary Njeri", license_number="DL-1002",
                        performance_score=93, total_trips=20, speeding_incidents=0, harsh_braking_events=2),
    ]
    trips = [
        SimpleNamespace(id=i, vehicle_id=1 + i % 2, route="Nairobi-Mombasa", status=TripStatus.COMPLETED,
                        start_time=datetime(2026, 10, 1 + i % 28, 6, 0, tzinfo=timezone.utc))
        for i in range(trip_count)
    ]
    fuel_logs = [
        SimpleNamespace(id=i, vehicle_id=1 + i % 2, liters=100.0, price_per_liter_kes=180.0,
                        total_cost_kes=18000.0, station_location="Total Mlolongo",
                        created_at=datetime(2026, 10, 1 + i % 28, 7, 0, tzinfo=timezone.utc))
        for i in range(fuel_count)
    ]
    maintenance_logs = [
        SimpleNamespace(id=1, vehicle_id=1, service_type="Oil Change", performed_by="AutoXpress",
                        cost_kes=6000.0, date_performed=date(2026, 9, 20), next_due_date=date(2026, 12, 20)),
    ]
    return ReportRows(vehicles, drivers, trips, fuel_logs, maintenance_logs)


def make_report(rows=None, filters=None):
    rows = rows or sample_rows()
    filters = filters or ReportFilters()
    metrics = aggregate(*filter_rows(rows, filters), now=NOW)
    return build_report(metrics, rows, filters, generated_by="Grace Wanjiru", now=NOW)


def section_titles(report):
    return [s.title for s in report.sections]


def test_analytics_report_sections():
    report = make_report()

    assert report.title == "Fleet Analytics Report"
    assert report.date_range == "All Time"
    assert section_titles(report) == [
        "Fuel Transactions",
        "Maintenance Records",
        "Vehicle Summary",
        "Driver Performance",
        "Route Analysis",
        "Monthly Trends",
        "Strategic Insights",
    ]
    fuel = report.sections[0]
    assert fuel.type == SectionType.TABLE
    assert fuel.table.body[0][1] == "KCA 123A"
    assert fuel.table.body[0][4] == "18,000"
    assert report.summary[0].value == "KES 42,000"


def test_finance_report_leaves_out_operations_sections():
    report = make_report(filters=ReportFilters(report_type=ReportType.FINANCE))

    assert report.title == "Financial Report"
    assert "Driver Performance" not in section_titles(report)
    assert "Route Analysis" not in section_titles(report)


def test_sections_can_be_switched_off():
    filters = ReportFilters(include_sections=ReportSections(summary=False, fuel_logs=False, insights=False))
    report = make_report(filters=filters)

    assert report.summary == []
    assert "Fuel Transactions" not in section_titles(report)
    assert "Strategic Insights" not in section_titles(report)


def test_vehicle_type_filter_applies_to_related_rows():
    filtered = filter_rows(sample_rows(), ReportFilters(vehicle_types=["Van"]))

    assert [v.license_plate for v in filtered.vehicles] == ["KBZ 456B"]
    assert [d.full_name for d in filtered.drivers] == ["Mary Njeri"]
    assert all(t.vehicle_id == 2 for t in filtered.trips)
    assert all(f.vehicle_id == 2 for f in filtered.fuel_logs)
    assert filtered.maintenance_logs == []


def test_date_range_is_inclusive():
    filters = ReportFilters(date_from=date(2026, 9, 20), date_to=date(2026, 10, 1))
    filtered = filter_rows(sample_rows(), filters)

    assert len(filtered.maintenance_logs) == 1
    assert [t.id for t in filtered.trips] == [0]
    assert date_range_label(filters) == "20 Sep 2026 - 01 Oct 2026"


def test_date_range_labels():
    assert date_range_label(ReportFilters(date_from=date(2026, 1, 1))) == "From 01 Jan 2026"
    assert date_range_label(ReportFilters(date_to=date(2026, 1, 31))) == "Until 31 Jan 2026"


def test_reversed_date_range_is_rejected():
    with pytest.raises(ValidationError):
        ReportFilters(date_from=date(2026, 10, 2), date_to=date(2026, 10, 1))


def test_insights_mention_vehicles_needing_service():
    report = make_report()
    insights = report.sections[-1].text
    assert "KCA 123A" in insights
    assert "Top driver is Mary" in insights


def test_report_filename():
    report = make_report()
    assert report_filename(report, NOW) == "safiri-smart-fleet-fleet-analytics-report-2026-10-18.pdf"


def test_pdf_has_numbered_footer():
    pdf = render_report_pdf(make_report(), now=NOW, compress=False)

    assert pdf.startswith(b"%PDF")
    assert b"Page 1 of" in pdf
    assert b"SAFIRI SMART FLEET - Confidential Report" in pdf


def test_long_report_spans_pages():
    report = make_report(rows=sample_rows(trip_count=120, fuel_count=150))
    renderer = ReportRenderer(report, now=NOW, compress=False)
    pdf = renderer.render()

    assert renderer.page_count > 1
    last = renderer.page_count
    assert f"Page {last} of {last}".encode() in pdf
    assert f"Page {last + 1} of".encode() not in pdf


def test_empty_report_still_renders():
    rows = ReportRows([], [], [], [], [])
    pdf = render_report_pdf(make_report(rows=rows), now=NOW, compress=False)
    assert b"No records for the selected period." in pdf


@pytest.mark.asyncio
async def test_report_endpoint_returns_pdf(client, create_user, vehicle, db_session):
    """Finance users download the report as a PDF attachment."""
    db_session.add(FuelLog(vehicle_id=vehicle.id, liters=80, price_per_liter_kes=190, total_cost_kes=15200))
    db_session.add(MaintenanceLog(vehicle_id=vehicle.id, service_type="Tyres", cost_kes=32000,
                                  date_performed=date(2026, 10, 1)))
    await db_session.commit()
    _, headers = await create_user("finance@safirismart.co.ke", AppRole.FINANCE, "Amina Hassan")

    response = await client.post("/v1/reports", json={"report_type": "finance"}, headers=headers)

    assert response.status_code == 200
    assert response.headers["content-type"] == "application/pdf"
    disposition = response.headers["content-disposition"]
    assert disposition.startswith('attachment; filename="safiri-smart-fleet-financial-report-')
    assert disposition.endswith('.pdf"')
    assert response.content.startswith(b"%PDF")


@pytest.mark.asyncio
async def test_report_endpoint_denied_for_operations(client, operations_headers):
    response = await client.post("/v1/reports", json={}, headers=operations_headers)
    assert response.status_code == 403
    assert response.json()["error_code"] == "ERR_PERM_001"
