"""Bike lookup by identifier, and full bike detail for the /api/bikes/{id} view."""

from datetime import datetime

from sqlalchemy import func
from sqlalchemy.orm import Session

from backend.database.models import Bike, TheftReport, REPORT_STATUS_APPROVED

# Search type -> backing column
SEARCH_FIELDS = {
    "vin": Bike.vin,
    "engine": Bike.engine_number,
    "plate": Bike.plate_number,
}

STATUS_STOLEN = "stolen"
STATUS_CLEAN = "clean"


def derive_status(approved_report: TheftReport | None) -> str:
    """A bike is stolen iff it has at least one approved report."""
    return STATUS_STOLEN if approved_report is not None else STATUS_CLEAN


def latest_approved_report(bike_id: int, db: Session) -> TheftReport | None:
    return (
        db.query(TheftReport)
        .filter(TheftReport.bike_id == bike_id, TheftReport.status == REPORT_STATUS_APPROVED)
        .order_by(TheftReport.created_at.desc(), TheftReport.id.desc())
        .first()
    )


def search_bike(search_type: str | None, value: str | None, db: Session) -> dict:
    """
    Find at most one bike by VIN, engine number or plate number.

    Matching is case-insensitive on the trimmed value. Raises ValueError for
    missing or invalid parameters; a miss is returned as ``found: False``.
    """
    if not search_type or not value:
        raise ValueError("Missing search parameters")
    if search_type not in SEARCH_FIELDS:
        raise ValueError("Invalid search type")

    value = value.strip()
    if not value:
        if search_type == "vin":
            raise ValueError("VIN value cannot be empty")
        raise ValueError("Search value cannot be empty")

    column = SEARCH_FIELDS[search_type]
    bike = (
        db.query(Bike)
        .filter(func.lower(column) == value.lower())
        .order_by(Bike.id)
        .first()
    )
    searched_at = datetime.utcnow().isoformat()

    if not bike:
        return {
            "found": False,
            "message": "No bike found with the provided information",
            "searchedAt": searched_at,
        }

    report = latest_approved_report(bike.id, db)
    return {
        "found": True,
        "status": derive_status(report),
        "bike": {
            "id": bike.id,
            "make": bike.make,
            "model": bike.model,
            "year": bike.year,
            "color": bike.color,
            "category": bike.category,
            "images": [
                {"id": img.id, "url": img.url, "filename": img.filename}
                for img in bike.images
            ],
        },
        "theftReport": {
            "id": report.id,
            "theftDate": report.theft_date.isoformat(),
            "theftLocation": report.theft_location,
            "description": report.description,
            "policeReport": report.police_report,
            "reportedAt": report.created_at.isoformat(),
        } if report else None,
        "lastUpdated": bike.updated_at.isoformat() if bike.updated_at else None,
        "searchedAt": searched_at,
    }


def get_bike_detail(bike_id: int, db: Session) -> dict | None:
    """Full record of one bike: owner, images, every report newest first. None if missing."""
    bike = db.get(Bike, bike_id)
    if not bike:
        return None

    reports = (
        db.query(TheftReport)
        .filter(TheftReport.bike_id == bike.id)
        .order_by(TheftReport.created_at.desc(), TheftReport.id.desc())
        .all()
    )
    approved = next((r for r in reports if r.status == REPORT_STATUS_APPROVED), None)

    return {
        "id": bike.id,
        "status": derive_status(approved),
        "bike": {
            "make": bike.make,
            "model": bike.model,
            "year": bike.year,
            "color": bike.color,
            "category": bike.category,
            "vin": bike.vin,
            "engineNumber": bike.engine_number,
            "plateNumber": bike.plate_number,
            "owner": {
                "id": bike.owner.id,
                "name": bike.owner.name,
                "email": bike.owner.email,
                "phone": bike.owner.phone,
            },
            "images": [
                {
                    "id": img.id,
                    "url": img.url,
                    "filename": img.filename,
                    "createdAt": img.created_at.isoformat(),
                }
                for img in bike.images
            ],
        },
        "reports": [
            {
                "id": r.id,
                "status": r.status,
                "theftDate": r.theft_date.isoformat(),
                "theftLocation": r.theft_location,
                "description": r.description,
                "policeReport": r.police_report,
                "reportedAt": r.created_at.isoformat(),
                "reporter": {
                    "id": r.reporter.id,
                    "name": r.reporter.name,
                    "email": r.reporter.email,
                },
            }
            for r in reports
        ],
        "createdAt": bike.created_at.isoformat(),
        "updatedAt": bike.updated_at.isoformat(),
    }
