"""
Report assembly.

Filters raw rows by the dialog's date range and vehicle types and turns
them, together with the aggregated metrics, into a ``ReportData`` document
for the PDF renderer.
"""

import logging
import re
from datetime import date, datetime
from typing import List, NamedTuple, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.core.config import settings
from fleet_backend.app.core.dates import as_utc, utcnow
from fleet_backend.app.models.enums import MaintenanceStatus
from fleet_backend.app.schemas.analytics import MetricsView
from fleet_backend.app.schemas.report import (
    LabelValue,
    ReportData,
    ReportFilters,
    ReportSection,
    ReportType,
    SectionType,
    SummaryMetric,
    TableData,
)
from fleet_backend.app.services.analytics import AnalyticsService
from fleet_backend.app.services.metrics import aggregate

logger = logging.getLogger(__name__)

DATE_FORMAT = "%d %b %Y"


class ReportRows(NamedTuple):
    vehicles: list
    drivers: list
    trips: list
    fuel_logs: list
    maintenance_logs: list


def money(amount: float) -> str:
    return f"KES {amount:,.0f}"


def _fmt_date(value) -> str:
    if value is None:
        return "-"
    if isinstance(value, datetime):
        value = as_utc(value).date()
    return value.strftime(DATE_FORMAT)


def _enum_text(value) -> str:
    if value is None:
        return "-"
    text = value.value if hasattr(value, "value") else str(value)
    return text.replace("_", " ").title()


def _in_range(day: Optional[date], filters: ReportFilters) -> bool:
    if day is None:
        return filters.date_from is None and filters.date_to is None
    if filters.date_from and day < filters.date_from:
        return False
    if filters.date_to and day > filters.date_to:
        return False
    return True


def _day(value) -> Optional[date]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return as_utc(value).date()
    return value


def filter_rows(rows: ReportRows, filters: ReportFilters) -> ReportRows:
    """
    Apply the vehicle-type filter to vehicles and everything that belongs
    to them, and the inclusive date range to dated rows.
    """
    vehicles = list(rows.vehicles)
    if filters.vehicle_types:
        wanted = set(filters.vehicle_types)
        vehicles = [v for v in vehicles if v.vehicle_type in wanted]
    vehicle_ids = {v.id for v in vehicles}

    def kept(row) -> bool:
        return not filters.vehicle_types or row.vehicle_id in vehicle_ids

    drivers = [d for d in rows.drivers if not filters.vehicle_types or d.vehicle_id in vehicle_ids]
    trips = [t for t in rows.trips if kept(t) and _in_range(_day(t.start_time), filters)]
    fuel_logs = [f for f in rows.fuel_logs if kept(f) and _in_range(_day(f.created_at), filters)]
    maintenance_logs = [
        m for m in rows.maintenance_logs if kept(m) and _in_range(_day(m.date_performed), filters)
    ]
    return ReportRows(vehicles, drivers, trips, fuel_logs, maintenance_logs)


def date_range_label(filters: ReportFilters) -> str:
    if filters.date_from and filters.date_to:
        return f"{_fmt_date(filters.date_from)} - {_fmt_date(filters.date_to)}"
    if filters.date_from:
        return f"From {_fmt_date(filters.date_from)}"
    if filters.date_to:
        return f"Until {_fmt_date(filters.date_to)}"
    return "All Time"


def report_title(filters: ReportFilters) -> str:
    if filters.report_type == ReportType.FINANCE:
        return "Financial Report"
    return "Fleet Analytics Report"


def summary_metrics(metrics: MetricsView, rows: ReportRows, filters: ReportFilters) -> List[SummaryMetric]:
    summary = [
        SummaryMetric(label="Total Operating Cost", value=money(metrics.total_operating_cost), subtext="Fuel + maintenance"),
        SummaryMetric(label="Fuel Costs", value=money(metrics.total_fuel_cost), subtext=f"{metrics.fuel_percentage}% of total"),
        SummaryMetric(
            label="Maintenance Costs",
            value=money(metrics.total_maintenance_cost),
            subtext=f"{metrics.maintenance_percentage}% of total",
        ),
        SummaryMetric(label="Fuel Consumed", value=f"{metrics.fuel_consumption:,.0f} L"),
    ]
    if filters.report_type == ReportType.FINANCE:
        summary.extend([
            SummaryMetric(label="Fuel Transactions", value=str(len(rows.fuel_logs))),
            SummaryMetric(label="Service Records", value=str(len(rows.maintenance_logs))),
        ])
    else:
        summary.extend([
            SummaryMetric(label="Fleet Size", value=str(metrics.vehicle_count), subtext="vehicles"),
            SummaryMetric(label="Trips", value=str(len(rows.trips))),
            SummaryMetric(label="Avg Driver Score", value=f"{metrics.avg_performance_score}/100"),
        ])
    return summary


def _fuel_section(rows: ReportRows, plates: dict) -> ReportSection:
    body = [
        [
            _fmt_date(log.created_at),
            plates.get(log.vehicle_id, "-"),
            f"{log.liters:,.1f}",
            f"{log.price_per_liter_kes:,.2f}",
            f"{log.liters * log.price_per_liter_kes:,.0f}",
            log.station_location or "-",
        ]
        for log in rows.fuel_logs
    ]
    return ReportSection(
        title="Fuel Transactions",
        type=SectionType.TABLE,
        table=TableData(head=["Date", "Vehicle", "Liters", "Price/L (KES)", "Total (KES)", "Station"], body=body),
    )


def _maintenance_section(rows: ReportRows, plates: dict) -> ReportSection:
    body = [
        [
            _fmt_date(log.date_performed),
            getattr(log, "vehicle_license_plate", None) or plates.get(log.vehicle_id, "-"),
            log.service_type,
            log.performed_by or "-",
            f"{log.cost_kes:,.0f}",
            _fmt_date(log.next_due_date),
        ]
        for log in rows.maintenance_logs
    ]
    return ReportSection(
        title="Maintenance Records",
        type=SectionType.TABLE,
        table=TableData(head=["Date", "Vehicle", "Service", "Performed By", "Cost (KES)", "Next Due"], body=body),
    )


def _vehicle_section(rows: ReportRows) -> ReportSection:
    body = [
        [
            v.license_plate,
            v.vehicle_type,
            _enum_text(v.status),
            v.route_assigned or "-",
            _enum_text(v.maintenance_status),
            f"{v.fuel_efficiency_kml:.1f}" if v.fuel_efficiency_kml else "-",
        ]
        for v in rows.vehicles
    ]
    return ReportSection(
        title="Vehicle Summary",
        type=SectionType.TABLE,
        table=TableData(head=["Plate", "Type", "Status", "Route", "Maintenance", "km/L"], body=body),
    )


def _driver_section(rows: ReportRows) -> ReportSection:
    drivers = sorted(rows.drivers, key=lambda d: d.performance_score or 0, reverse=True)
    body = [
        [
            getattr(d, "full_name", None) or "Unknown",
            d.license_number,
            str(d.performance_score or 0),
            str(d.total_trips or 0),
            str(d.speeding_incidents or 0),
            str(d.harsh_braking_events or 0),
        ]
        for d in drivers
    ]
    return ReportSection(
        title="Driver Performance",
        type=SectionType.TABLE,
        table=TableData(head=["Driver", "License", "Score", "Trips", "Speeding", "Harsh Braking"], body=body),
    )


def _route_section(metrics: MetricsView) -> ReportSection:
    body = [[r.route, str(r.total), f"{r.ontime}%"] for r in metrics.route_performance]
    return ReportSection(
        title="Route Analysis",
        type=SectionType.TABLE,
        table=TableData(head=["Route", "Trips", "On-time %"], body=body),
    )


def _monthly_section(metrics: MetricsView) -> ReportSection:
    items = [
        LabelValue(
            label=f"{bucket.month} {bucket.year}",
            value=f"Fuel {money(bucket.fuel)} | Maintenance {money(bucket.maintenance)}",
        )
        for bucket in metrics.monthly_data
    ]
    return ReportSection(title="Monthly Trends", type=SectionType.METRICS, items=items)


def insights_text(metrics: MetricsView, rows: ReportRows) -> str:
    sentences = []
    if metrics.total_operating_cost > 0:
        sentences.append(
            f"Fuel accounts for {metrics.fuel_percentage}% and maintenance for "
            f"{metrics.maintenance_percentage}% of the {money(metrics.total_operating_cost)} operating cost."
        )
        if metrics.fuel_percentage > 70:
            sentences.append("Fuel dominates spending; review routes and idle time for savings.")
    else:
        sentences.append("No fuel or maintenance spending was recorded for this period.")

    due = [
        v.license_plate for v in rows.vehicles
        if v.maintenance_status in (MaintenanceStatus.NEEDS_SERVICE, MaintenanceStatus.CRITICAL)
    ]
    if due:
        sentences.append(f"{len(due)} vehicle(s) need service: {', '.join(due)}.")

    if metrics.driver_performance:
        best = metrics.driver_performance[0]
        sentences.append(f"Top driver is {best.name} with a score of {best.score}.")

    weak_routes = [r.route for r in metrics.route_performance if r.ontime < 75]
    if weak_routes:
        sentences.append(f"Routes below 75% on-time: {', '.join(weak_routes)}.")

    return " ".join(sentences)


def build_report(
    metrics: MetricsView,
    rows: ReportRows,
    filters: ReportFilters,
    generated_by: str,
    now: Optional[datetime] = None,
) -> ReportData:
    """
    Assemble the report document. ``rows`` are filtered here; ``metrics``
    should be aggregated from the same filtered rows.
    """
    rows = filter_rows(rows, filters)
    sections_wanted = filters.include_sections
    finance = filters.report_type == ReportType.FINANCE
    plates = {v.id: v.license_plate for v in rows.vehicles}

    sections: List[ReportSection] = []
    if sections_wanted.fuel_logs:
        sections.append(_fuel_section(rows, plates))
    if sections_wanted.maintenance_logs:
        sections.append(_maintenance_section(rows, plates))
    if sections_wanted.vehicles:
        sections.append(_vehicle_section(rows))
    if sections_wanted.drivers and not finance:
        sections.append(_driver_section(rows))
    if sections_wanted.routes and not finance:
        sections.append(_route_section(metrics))
    if sections_wanted.monthly_trend:
        sections.append(_monthly_section(metrics))
    if sections_wanted.insights:
        sections.append(ReportSection(
            title="Strategic Insights",
            type=SectionType.TEXT,
            text=insights_text(metrics, rows),
        ))

    return ReportData(
        title=report_title(filters),
        generated_by=generated_by,
        date_range=date_range_label(filters),
        summary=summary_metrics(metrics, rows, filters) if sections_wanted.summary else [],
        sections=sections,
    )


def slugify(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")


def report_filename(report: ReportData, now: Optional[datetime] = None) -> str:
    now = as_utc(now) if now else utcnow()
    return f"{slugify(settings.brand_name)}-{slugify(report.title)}-{now.date().isoformat()}.pdf"


class ReportService:

    @staticmethod
    async def generate(db: AsyncSession, filters: ReportFilters, generated_by: str, now: Optional[datetime] = None):
        """
        Fetch, filter, aggregate and assemble a report.

        Returns:
            (ReportData, errors) where errors lists fetches that failed
        """
        now = as_utc(now) if now else utcnow()
        fetched, errors = await AnalyticsService.fetch_rows(db)
        rows = ReportRows(**fetched)
        filtered = filter_rows(rows, filters)
        metrics = aggregate(*filtered, now=now)
        report = build_report(metrics, rows, filters, generated_by, now)
        logger.info("Built %s with %d sections", report.title, len(report.sections))
        return report, errors
