import logging
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy.engine import Engine

from backend.api.bike_routes import bike_router
from backend.api.admin_routes import admin_router
from backend.api.web_app import web_router, error_partial
from backend.database.db import build_engine, build_session_factory, init_db
from backend.config.settings import get_settings
from backend.services.storage_service import StorageConfigError, STORAGE_MISCONFIGURED

settings = get_settings()
logger = logging.getLogger(__name__)

VERSION = "0.3.0"


def create_app(engine: Engine | None = None) -> FastAPI:
    # Disable Swagger/ReDoc in production
    docs_kwargs = {}
    if settings.is_production:
        docs_kwargs = {"docs_url": None, "redoc_url": None}

    app = FastAPI(
        title="Curi Engine API",
        description="Stolen motorcycle reports and identifier checks",
        version=VERSION,
        **docs_kwargs,
    )

    if engine is None:
        engine = build_engine(settings.database_url, echo=settings.debug)
    app.state.engine = engine
    app.state.session_factory = build_session_factory(engine)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"] + ([settings.base_url] if settings.base_url else []),
        allow_credentials=False,
        allow_methods=["GET", "POST", "PATCH"],
        allow_headers=["Content-Type", "X-API-Key"],
    )

    # Static files for site CSS
    static_dir = os.path.join(os.path.dirname(__file__), "..", "static")
    app.mount("/static", StaticFiles(directory=static_dir), name="static")

    # Photos written by the local storage backend
    if settings.storage_backend == "local" and settings.upload_dir:
        os.makedirs(settings.upload_dir, exist_ok=True)
        app.mount(
            settings.upload_url_prefix,
            StaticFiles(directory=settings.upload_dir),
            name="uploads",
        )

    app.include_router(bike_router, prefix="/api")
    app.include_router(admin_router, prefix="/api")
    app.include_router(web_router)  # Registered last to avoid prefix conflicts

    @app.exception_handler(StorageConfigError)
    async def storage_config_error(request: Request, exc: StorageConfigError):
        logger.error("Image storage misconfigured: %s", exc)
        if not request.url.path.startswith("/api/"):
            # HTMX forms swap the partial in place
            return error_partial(request, STORAGE_MISCONFIGURED)
        return JSONResponse(status_code=500, content={"error": STORAGE_MISCONFIGURED})

    @app.get("/health", tags=["health"])
    def health_check():
        return {"status": "ok", "version": VERSION}

    @app.on_event("startup")
    def on_startup():
        settings.validate_production()
        if not settings.is_deployed:
            init_db(app.state.engine)  # Deployed envs use: alembic upgrade head

    @app.on_event("shutdown")
    def on_shutdown():
        app.state.engine.dispose()

    return app


app = create_app()
