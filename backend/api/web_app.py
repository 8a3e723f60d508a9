"""Curi Engine public web app: server-rendered Jinja2 + HTMX views."""

import logging
import os
from datetime import date

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from backend.api.bike_routes import report_form, file_report
from backend.config.settings import get_settings
from backend.database.db import get_db
from backend.services.lookup_service import search_bike
from backend.services.report_service import ReportForm
from backend.services.storage_service import ImageStorage, get_image_storage

logger = logging.getLogger(__name__)

web_router = APIRouter(tags=["web"])

_TEMPLATE_DIR = os.path.join(os.path.dirname(__file__), "..", "templates")
templates = Jinja2Templates(directory=_TEMPLATE_DIR)

BIKE_CATEGORIES = [
    "Sport",
    "Cruiser",
    "Touring",
    "Standard",
    "Dual-Sport",
    "Off-Road",
    "Scooter",
    "Moped",
    "Other",
]

SEARCH_TYPES = [
    ("vin", "VIN Number"),
    ("engine", "Engine Number"),
    ("plate", "License Plate"),
]


def error_partial(request: Request, error: str):
    return templates.TemplateResponse(request, "web/partials/_error.html", {
        "error": error,
    })


@web_router.get("/", response_class=HTMLResponse)
def landing_page(request: Request):
    return templates.TemplateResponse(request, "web/landing.html", {
        "categories": BIKE_CATEGORIES,
        "search_types": SEARCH_TYPES,
        "today": date.today().isoformat(),
    })


@web_router.post("/tools/check", response_class=HTMLResponse)
def check_submit(
    request: Request,
    search_type: str = Form("", alias="type"),
    value: str = Form(""),
    db: Session = Depends(get_db),
):
    try:
        result = search_bike(search_type or None, value, db)
    except ValueError as e:
        return error_partial(request, str(e))
    except Exception:
        logger.exception("Bike check failed (type=%s)", search_type)
        return error_partial(request, "Could not check this bike. Please try again later.")

    return templates.TemplateResponse(request, "web/partials/_check_results.html", {
        "result": result,
        "search_type": search_type,
        "value": value.strip(),
    })


@web_router.post("/tools/report", response_class=HTMLResponse)
async def report_submit(
    request: Request,
    form: ReportForm = Depends(report_form),
    images: list[UploadFile] | None = File(None),
    db: Session = Depends(get_db),
    storage: ImageStorage = Depends(get_image_storage),
):
    status_code, body = await file_report(form, images or [], db, storage)
    if status_code != 201:
        message = body.get("message") or body["error"]
        return error_partial(request, message)

    return templates.TemplateResponse(request, "web/partials/_report_success.html", {
        "result": body,
    })


# --- SEO ---


@web_router.get("/robots.txt", response_class=HTMLResponse)
def robots_txt():
    settings = get_settings()
    base = settings.base_url or "http://localhost:8000"
    content = (
        "User-agent: *\n"
        "Allow: /\n"
        "Disallow: /api/\n"
        f"\nSitemap: {base}/sitemap.xml\n"
    )
    return HTMLResponse(content=content, media_type="text/plain")


@web_router.get("/sitemap.xml", response_class=HTMLResponse)
def sitemap_xml():
    settings = get_settings()
    base = settings.base_url or "http://localhost:8000"
    today = date.today().isoformat()
    xml = (
        '<?xml version="1.0" encoding="UTF-8"?>\n'
        '<urlset xmlns="http://www.sitemaps.org/schemas/sitemap/0.9">\n'
        "  <url>\n"
        f"    <loc>{base}/</loc>\n"
        f"    <lastmod>{today}</lastmod>\n"
        "    <changefreq>weekly</changefreq>\n"
        "    <priority>1.0</priority>\n"
        "  </url>\n"
        "</urlset>"
    )
    return HTMLResponse(content=xml, media_type="application/xml")
