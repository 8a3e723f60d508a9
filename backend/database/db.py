"""Engine and session factory construction.

The application owns its engine: ``create_app`` builds one (or takes one from
the caller) and keeps it on ``app.state``. Request handlers get sessions through
the ``get_db`` dependency, which reads the factory from the running app.
"""

from fastapi import Request
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, Session

from backend.database.models import Base


def build_engine(database_url: str, echo: bool = False) -> Engine:
    engine_kwargs = {"echo": echo}

    if "sqlite" in database_url:
        engine_kwargs["connect_args"] = {"check_same_thread": False}
    else:
        engine_kwargs["pool_size"] = 10
        engine_kwargs["max_overflow"] = 20
        engine_kwargs["pool_pre_ping"] = True

    return create_engine(database_url, **engine_kwargs)


def build_session_factory(engine: Engine) -> sessionmaker:
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


def init_db(engine: Engine):
    """Create all tables."""
    Base.metadata.create_all(bind=engine)


def get_db(request: Request) -> Session:
    """Dependency for FastAPI - yields a session from the app's factory."""
    db = request.app.state.session_factory()
    try:
        yield db
    finally:
        db.close()
