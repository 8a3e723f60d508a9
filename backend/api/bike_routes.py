"""Public bike endpoints: theft report intake, identifier search, bike detail."""

import logging

from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from backend.config.settings import get_settings
from backend.database.db import get_db
from backend.services.lookup_service import search_bike, get_bike_detail
from backend.services.report_service import (
    ReportForm,
    submit_theft_report,
    MissingFieldsError,
    InvalidReportError,
    DuplicateDataError,
)
from backend.services.storage_service import (
    STORAGE_MISCONFIGURED,
    ImageStorage,
    StorageConfigError,
    StorageError,
    get_image_storage,
)

logger = logging.getLogger(__name__)

bike_router = APIRouter(prefix="/bikes", tags=["bikes"])


def _error(status_code: int, error: str, **extra) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, **extra})


def report_form(
    reporter_email: str = Form("", alias="reporterEmail"),
    reporter_name: str = Form("", alias="reporterName"),
    reporter_phone: str = Form("", alias="reporterPhone"),
    vin: str = Form(""),
    make: str = Form(""),
    model: str = Form(""),
    year: str = Form(""),
    color: str = Form(""),
    category: str = Form(""),
    engine_number: str = Form("", alias="engineNumber"),
    plate_number: str = Form("", alias="plateNumber"),
    theft_date: str = Form("", alias="theftDate"),
    theft_location: str = Form("", alias="theftLocation"),
    description: str = Form(""),
    police_report: str = Form("", alias="policeReport"),
) -> ReportForm:
    """Dependency: collect the multipart report fields into a ReportForm."""
    return ReportForm(
        reporter_email=reporter_email,
        reporter_name=reporter_name,
        reporter_phone=reporter_phone,
        vin=vin,
        make=make,
        model=model,
        year=year,
        color=color,
        category=category,
        engine_number=engine_number,
        plate_number=plate_number,
        theft_date=theft_date,
        theft_location=theft_location,
        description=description,
        police_report=police_report,
    )


async def file_report(
    form: ReportForm,
    images: list[UploadFile],
    db: Session,
    storage: ImageStorage,
) -> tuple[int, dict]:
    """Run intake and map its outcome to (status_code, body). Shared with the web form."""
    settings = get_settings()
    try:
        result = await submit_theft_report(
            form,
            images,
            db=db,
            storage=storage,
            identity_policy=settings.vehicle_identity_policy,
        )
    except (MissingFieldsError, InvalidReportError) as e:
        return 400, {"error": str(e)}
    except DuplicateDataError as e:
        logger.warning("Theft report rejected as duplicate (field=%s)", e.field)
        return 409, {"error": "Duplicate data", "message": str(e)}
    except StorageConfigError:
        logger.exception("Image storage is not configured")
        return 500, {"error": STORAGE_MISCONFIGURED}
    except StorageError:
        logger.exception("Image storage failed while filing theft report")
        return 500, {"error": "Image upload failed"}
    except Exception:
        logger.exception("Error submitting theft report")
        return 500, {"error": "Internal server error"}
    return 201, result


@bike_router.post("/report", status_code=201)
async def report_stolen_bike(
    form: ReportForm = Depends(report_form),
    images: list[UploadFile] | None = File(None),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    """File a theft report (multipart form with optional images)."""
    status_code, body = await file_report(form, images or [], db, storage)
    return JSONResponse(status_code=status_code, content=body)


@bike_router.get("/search")
def search(
    search_type: str | None = Query(None, alias="type"),
    value: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """Check whether a VIN, engine number or plate number belongs to a stolen bike."""
    try:
        return search_bike(search_type, value, db)
    except ValueError as e:
        return _error(400, str(e))
    except Exception:
        logger.exception("Error searching bike (type=%s)", search_type)
        return _error(500, "Internal server error")


@bike_router.get("/{bike_id}")
def bike_detail(bike_id: int, db: Session = Depends(get_db)):
    """Full bike record with owner, images and report history."""
    try:
        result = get_bike_detail(bike_id, db)
    except Exception:
        logger.exception("Error fetching bike details for %s", bike_id)
        return _error(500, "Internal server error")
    if result is None:
        return _error(404, "Bike not found")
    return result
