"""Moderation endpoints: review theft reports and set their status."""

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from backend.api.admin_auth import require_admin_key
from backend.database.db import get_db
from backend.database.models import TheftReport
from backend.services.moderation_service import (
    list_reports,
    set_report_status,
    ReportNotFoundError,
)

admin_router = APIRouter(
    prefix="/admin/reports",
    tags=["admin"],
    dependencies=[Depends(require_admin_key)],
)


# --- Request/Response Models ---

class ReportStatusRequest(BaseModel):
    status: str = Field(..., min_length=1, max_length=20)


class ReportSummary(BaseModel):
    id: int
    bikeId: int
    reportedBy: int
    status: str
    theftDate: str
    theftLocation: str
    policeReport: str | None
    reportedAt: str


# --- Endpoints ---

@admin_router.get("", response_model=list[ReportSummary])
def get_reports(
    status: str | None = Query(None),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
):
    """List theft reports, newest first."""
    try:
        reports = list_reports(db, status=status, limit=limit)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [_to_summary(r) for r in reports]


@admin_router.patch("/{report_id}", response_model=ReportSummary)
def update_report_status(
    report_id: int,
    req: ReportStatusRequest,
    db: Session = Depends(get_db),
):
    """Approve, reject or reset a theft report."""
    try:
        report = set_report_status(report_id, req.status.strip().lower(), db)
    except ReportNotFoundError:
        raise HTTPException(status_code=404, detail="Theft report not found")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_summary(report)


# --- Helpers ---

def _to_summary(r: TheftReport) -> ReportSummary:
    return ReportSummary(
        id=r.id,
        bikeId=r.bike_id,
        reportedBy=r.reported_by,
        status=r.status,
        theftDate=r.theft_date.isoformat(),
        theftLocation=r.theft_location,
        policeReport=r.police_report,
        reportedAt=r.created_at.isoformat(),
    )
