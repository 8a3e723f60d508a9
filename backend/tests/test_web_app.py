"""Tests for the Curi Engine web app: landing page, check and report forms, SEO."""

from datetime import datetime

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from backend.api.app import create_app
from backend.config.settings import get_settings
from backend.database.models import Base, Owner, Bike, TheftReport
from backend.services.storage_service import get_image_storage


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    return engine


@pytest.fixture
def test_session(engine):
    return sessionmaker(bind=engine, autocommit=False, autoflush=False)


@pytest.fixture
def client(engine, test_session, memory_storage):
    db = test_session()
    owner = Owner(email="owner@example.com", name="Owner")
    stolen = Bike(vin="JH2PC40046M200123", make="Honda", model="CBR600RR", year=2006, owner=owner)
    clean = Bike(vin="MH3SG3120LJ000002", make="Yamaha", model="NMAX", owner=owner)
    db.add_all([owner, stolen, clean])
    db.flush()
    db.add(TheftReport(
        bike_id=stolen.id, reported_by=owner.id, theft_date=datetime(2024, 3, 14),
        theft_location="Jakarta Selatan", police_report="LP/1/2024", status="approved",
    ))
    db.commit()
    db.close()

    app = create_app(engine=engine)
    app.dependency_overrides[get_image_storage] = lambda: memory_storage
    return TestClient(app)


class TestLandingPage:

    def test_landing_page(self, client):
        r = client.get("/")
        assert r.status_code == 200
        assert "Curi Engine" in r.text
        assert "Report Lost Bike" in r.text
        assert "Check a Bike" in r.text

    def test_forms_use_api_field_names(self, client):
        r = client.get("/")
        for field in ("reporterEmail", "theftDate", "theftLocation", "engineNumber", "plateNumber"):
            assert f'name="{field}"' in r.text
        assert 'minlength="10"' in r.text
        assert 'type="email"' in r.text


class TestCheckForm:

    def test_stolen_result(self, client):
        r = client.post("/tools/check", data={"type": "vin", "value": "jh2pc40046m200123"})
        assert r.status_code == 200
        assert "Reported stolen" in r.text
        assert "Jakarta Selatan" in r.text
        assert "LP/1/2024" in r.text

    def test_clean_result(self, client):
        r = client.post("/tools/check", data={"type": "vin", "value": "MH3SG3120LJ000002"})
        assert "No approved theft report" in r.text

    def test_not_found_result(self, client):
        r = client.post("/tools/check", data={"type": "plate", "value": "Z1Z"})
        assert "No record found" in r.text

    def test_validation_error(self, client):
        r = client.post("/tools/check", data={"type": "frame", "value": "X"})
        assert "Invalid search type" in r.text


class TestReportForm:

    FORM = {
        "reporterEmail": "rider@example.com",
        "reporterName": "Rider",
        "make": "Suzuki",
        "model": "Satria",
        "theftDate": "2024-07-07",
        "theftLocation": "Surabaya",
        "description": "Stolen outside the market at noon.",
    }

    def test_success_partial(self, client, memory_storage):
        r = client.post(
            "/tools/report",
            data=self.FORM,
            files=[("images", ("bike.jpg", b"jpeg", "image/jpeg"))],
        )
        assert r.status_code == 200
        assert "Report submitted" in r.text
        assert "1 photo" in r.text
        assert len(memory_storage.saved) == 1

    def test_server_validation_error_surfaced(self, client):
        r = client.post("/tools/report", data={**self.FORM, "theftLocation": ""})
        assert r.status_code == 200
        assert "Missing required fields" in r.text
        assert "Location" in r.text

    def test_storage_misconfiguration_renders_partial(self, engine, test_session, monkeypatch):
        monkeypatch.setattr(get_settings(), "storage_backend", "ftp")
        client = TestClient(create_app(engine=engine))

        r = client.post("/tools/report", data=self.FORM)
        assert r.status_code == 200
        assert "Server misconfiguration" in r.text
        assert "text/html" in r.headers["content-type"]

        db = test_session()
        assert db.query(TheftReport).count() == 0
        db.close()


class TestSEO:

    def test_robots_txt(self, client):
        r = client.get("/robots.txt")
        assert r.status_code == 200
        assert "Disallow: /api/" in r.text

    def test_sitemap(self, client):
        r = client.get("/sitemap.xml")
        assert r.status_code == 200
        assert "<urlset" in r.text
