"""Report moderation: list theft reports and set their status field."""

import logging

from sqlalchemy.orm import Session

from backend.database.models import TheftReport, REPORT_STATUSES

logger = logging.getLogger(__name__)


class ReportNotFoundError(Exception):
    """Raised when a theft report id does not exist."""
    pass


def list_reports(db: Session, status: str | None = None, limit: int = 100) -> list[TheftReport]:
    """Reports newest first, optionally filtered by status."""
    if status is not None and status not in REPORT_STATUSES:
        raise ValueError(f"Status must be one of: {', '.join(REPORT_STATUSES)}")

    query = db.query(TheftReport)
    if status:
        query = query.filter(TheftReport.status == status)
    return query.order_by(TheftReport.created_at.desc(), TheftReport.id.desc()).limit(limit).all()


def set_report_status(report_id: int, status: str, db: Session) -> TheftReport:
    """Set a report's status. Raises ValueError for unknown statuses."""
    if status not in REPORT_STATUSES:
        raise ValueError(f"Status must be one of: {', '.join(REPORT_STATUSES)}")

    report = db.get(TheftReport, report_id)
    if not report:
        raise ReportNotFoundError(f"Theft report {report_id} not found")

    previous = report.status
    report.status = status
    db.commit()
    db.refresh(report)
    logger.info("Theft report %s status %s -> %s", report_id, previous, status)
    return report
