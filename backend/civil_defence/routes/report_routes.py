"""
Report Routes
=============

Dashboard statistics, the MIS summary report and record exports.
Admin only; every figure is limited to the caller's district scope.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import Response
from sqlalchemy.orm import Session

from civil_defence.core.dependencies.rbac import require_admin, require_export
from civil_defence.core.enums import ExportFormat, ExportResource
from civil_defence.db.session import get_db
from civil_defence.models.user import User
from civil_defence.schemas import DistrictStats, ErrorResponse, SummaryReport
from civil_defence.services.export_service import ExportError, export_records
from civil_defence.services.report_service import (
    generate_district_stats,
    generate_summary_report,
)

router = APIRouter(
    tags=["Reports"],
    responses={
        401: {"model": ErrorResponse, "description": "Not authenticated"},
        403: {"model": ErrorResponse, "description": "Insufficient permissions"},
    },
)


@router.get(
    "/district-stats",
    response_model=List[DistrictStats],
    summary="District Statistics",
    description="Volunteer, incident and training counts per district.",
)
def district_stats(
    district: Optional[str] = Query(default=None),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return generate_district_stats(db, current_user, district)


@router.get(
    "/reports/summary",
    response_model=SummaryReport,
    summary="MIS Summary Report",
    description="Overview totals, breakdowns and rates for a district or the whole state.",
)
def summary_report(
    district: Optional[str] = Query(default=None),
    current_user: User = Depends(require_admin),
    db: Session = Depends(get_db),
):
    return generate_summary_report(db, current_user, district)


@router.get(
    "/reports/export/{resource}",
    summary="Export Records",
    description="Download volunteers, incidents or inventory as CSV or PDF.",
    responses={
        200: {
            "content": {"text/csv": {}, "application/pdf": {}},
            "description": "Export file",
        },
    },
)
def export_report(
    resource: ExportResource,
    fmt: ExportFormat = Query(default=ExportFormat.CSV, alias="format"),
    district: Optional[str] = Query(default=None),
    current_user: User = Depends(require_export),
    db: Session = Depends(get_db),
):
    try:
        document = export_records(db, current_user, resource, fmt, district)
    except ExportError:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate export",
        )

    return Response(
        content=document.content,
        media_type=document.media_type,
        headers={
            "Content-Disposition": f"attachment; filename={document.filename}"
        },
    )
