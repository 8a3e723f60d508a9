"""Theft report intake: validate, resolve owner and bike, store photos, file the report."""

import logging
import re
import time
from datetime import datetime, timezone

from fastapi import UploadFile
from pydantic import BaseModel, EmailStr, TypeAdapter, ValidationError, model_validator
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from backend.database.models import Owner, Bike, BikeImage, TheftReport, REPORT_STATUS_PENDING
from backend.services.storage_service import ImageStorage

logger = logging.getLogger(__name__)

IDENTITY_VIN_UPSERT = "vin_upsert"
IDENTITY_ALWAYS_CREATE = "always_create"

# Field name -> label used in the "missing fields" message
REQUIRED_FIELDS = {
    "make": "Make",
    "theft_date": "Theft Date",
    "theft_location": "Location",
    "reporter_email": "Reporter Email",
}

BIKE_FIELDS = ("vin", "make", "model", "year", "color", "category", "engine_number", "plate_number")

_email_adapter = TypeAdapter(EmailStr)


class MissingFieldsError(ValueError):
    """Raised when required report fields are absent or blank."""

    def __init__(self, fields: list[str]):
        self.fields = fields
        labels = ", ".join(REQUIRED_FIELDS[f] for f in fields)
        super().__init__(f"Missing required fields: {labels}")


class InvalidReportError(ValueError):
    """Raised when a report field is present but malformed."""
    pass


class DuplicateDataError(Exception):
    """Raised when the database rejects a row on a unique constraint."""

    def __init__(self, field: str | None = None):
        self.field = field
        super().__init__(f"{field or 'Record'} is already registered")


class ReportForm(BaseModel):
    """Raw report submission. Blank strings are stored as None."""

    reporter_email: str | None = None
    reporter_name: str | None = None
    reporter_phone: str | None = None
    vin: str | None = None
    make: str | None = None
    model: str | None = None
    year: str | None = None
    color: str | None = None
    category: str | None = None
    engine_number: str | None = None
    plate_number: str | None = None
    theft_date: str | None = None
    theft_location: str | None = None
    description: str | None = None
    police_report: str | None = None

    @model_validator(mode="before")
    @classmethod
    def blank_to_none(cls, data):
        if isinstance(data, dict):
            cleaned = {}
            for key, value in data.items():
                if isinstance(value, str):
                    value = value.strip() or None
                cleaned[key] = value
            return cleaned
        return data


class ValidReport(BaseModel):
    reporter_email: str
    reporter_name: str | None
    reporter_phone: str | None
    vin: str | None
    make: str
    model: str | None
    year: int | None
    color: str | None
    category: str | None
    engine_number: str | None
    plate_number: str | None
    theft_date: datetime
    theft_location: str
    description: str | None
    police_report: str | None


def validate_report(form: ReportForm) -> ValidReport:
    """Check required fields and parse typed values. No database access."""
    missing = [field for field in REQUIRED_FIELDS if not getattr(form, field)]
    if missing:
        raise MissingFieldsError(missing)

    try:
        email = _email_adapter.validate_python(form.reporter_email)
    except ValidationError:
        raise InvalidReportError("Reporter email is not a valid email address")

    year = None
    if form.year:
        try:
            year = int(form.year)
        except ValueError:
            raise InvalidReportError("Year must be a number")
        if year < 1900 or year > datetime.utcnow().year + 1:
            raise InvalidReportError("Year is out of range")

    try:
        theft_date = datetime.fromisoformat(form.theft_date)
    except ValueError:
        raise InvalidReportError("Theft date must be an ISO date (YYYY-MM-DD)")
    if theft_date.tzinfo is not None:
        # Stored as naive UTC like every other timestamp
        theft_date = theft_date.astimezone(timezone.utc).replace(tzinfo=None)

    return ValidReport(
        reporter_email=email.lower(),
        reporter_name=form.reporter_name,
        reporter_phone=form.reporter_phone,
        vin=_upper(form.vin),
        make=form.make,
        model=form.model,
        year=year,
        color=form.color,
        category=form.category,
        engine_number=_upper(form.engine_number),
        plate_number=_upper(form.plate_number),
        theft_date=theft_date,
        theft_location=form.theft_location,
        description=form.description,
        police_report=form.police_report,
    )


async def submit_theft_report(
    form: ReportForm,
    images: list[UploadFile],
    db: Session,
    storage: ImageStorage,
    identity_policy: str = IDENTITY_VIN_UPSERT,
) -> dict:
    """File a theft report in a single transaction.

    Validation runs before any write. Owner and bike rows are created or
    updated, every non-empty image is stored sequentially, then the report
    row is added and everything commits together. A storage failure rolls
    the transaction back and propagates.

    Raises MissingFieldsError / InvalidReportError on bad input,
    DuplicateDataError on a unique-constraint violation, and StorageError
    when an image cannot be stored.
    """
    report = validate_report(form)

    try:
        owner = _resolve_owner(report, db)
        bike = _resolve_bike(report, owner, db, identity_policy)
        db.flush()

        image_urls = []
        for upload in images:
            content = await upload.read()
            if not content:
                continue
            name = build_image_name(bike.id, upload.filename)
            url = await storage.save(name, content, upload.content_type)
            db.add(BikeImage(bike_id=bike.id, url=url, filename=upload.filename))
            image_urls.append(url)

        theft_report = TheftReport(
            bike_id=bike.id,
            reported_by=owner.id,
            theft_date=report.theft_date,
            theft_location=report.theft_location,
            description=report.description,
            police_report=report.police_report,
            status=REPORT_STATUS_PENDING,
        )
        db.add(theft_report)
        db.commit()
    except IntegrityError as exc:
        db.rollback()
        raise DuplicateDataError(_conflicting_field(exc)) from exc
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Theft report %s filed for bike %s by owner %s (%d images)",
        theft_report.id, bike.id, owner.id, len(image_urls),
    )
    return {
        "message": "Theft report submitted successfully",
        "reportId": theft_report.id,
        "bikeId": bike.id,
        "imageCount": len(image_urls),
        "imageUrls": image_urls,
    }


def build_image_name(bike_id: int, original_name: str | None) -> str:
    """``{epoch_ms}-{bike_id}-{filename}`` with unsafe characters replaced."""
    base = (original_name or "image").replace("\\", "/").rsplit("/", 1)[-1]
    safe = re.sub(r"[^A-Za-z0-9._-]", "_", base) or "image"
    return f"{int(time.time() * 1000)}-{bike_id}-{safe}"


# --- Helpers ---

def _resolve_owner(report: ValidReport, db: Session) -> Owner:
    owner = db.query(Owner).filter(Owner.email == report.reporter_email).first()
    if owner:
        owner.name = report.reporter_name
        owner.phone = report.reporter_phone
        return owner

    owner = Owner(
        email=report.reporter_email,
        name=report.reporter_name,
        phone=report.reporter_phone,
    )
    db.add(owner)
    return owner


def _resolve_bike(report: ValidReport, owner: Owner, db: Session, identity_policy: str) -> Bike:
    fields = {name: getattr(report, name) for name in BIKE_FIELDS}

    if identity_policy == IDENTITY_VIN_UPSERT and report.vin:
        bike = db.query(Bike).filter(Bike.vin == report.vin).first()
        if bike:
            for key, value in fields.items():
                setattr(bike, key, value)
            bike.owner = owner
            return bike

    bike = Bike(**fields, owner=owner)
    db.add(bike)
    return bike


def _upper(value: str | None) -> str | None:
    return value.upper() if value else None


_UNIQUE_PATTERNS = (
    re.compile(r"UNIQUE constraint failed: \w+\.(\w+)"),  # SQLite
    re.compile(r"Key \((\w+)\)="),  # PostgreSQL
)


def _conflicting_field(exc: IntegrityError) -> str | None:
    message = str(exc.orig)
    for pattern in _UNIQUE_PATTERNS:
        match = pattern.search(message)
        if match:
            return match.group(1)
    return None
