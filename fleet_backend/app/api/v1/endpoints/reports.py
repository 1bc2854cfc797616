"""
Report API endpoints.
"""

import logging
from fastapi import APIRouter, Depends
from fastapi.responses import Response
from sqlalchemy.ext.asyncio import AsyncSession

from fleet_backend.app.db.session import get_db
from fleet_backend.app.core.dates import utcnow
from fleet_backend.app.core.dependencies import CurrentSession
from fleet_backend.app.core.guards import require_route
from fleet_backend.app.schemas.report import ReportFilters
from fleet_backend.app.services.pdf_report import render_report_pdf
from fleet_backend.app.services.reports import ReportService, report_filename

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reports", tags=["Reports"])


@router.post(
    "",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}, "description": "The report as a PDF download"}},
)
async def generate_report(
    filters: ReportFilters,
    session: CurrentSession = Depends(require_route("reports")),
    db: AsyncSession = Depends(get_db)
):
    """
    Build a branded PDF report for the selected period and vehicle types.

    Sections can be switched off individually through ``include_sections``.
    """
    now = utcnow()
    report, errors = await ReportService.generate(
        db, filters, generated_by=session.full_name or session.email, now=now
    )
    if errors:
        logger.warning("Report for user %s built with missing data: %s", session.user_id, errors)

    pdf = render_report_pdf(report, now=now)
    filename = report_filename(report, now)
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
