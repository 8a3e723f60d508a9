"""
Seed the database with demo owners, bikes and theft reports.

Gives the check tool one stolen bike, one clean bike and one bike with a
pending report to search for locally.
Run: python -m backend.seed_data
"""

from datetime import datetime
from backend.config.settings import get_settings
from backend.database.db import build_engine, build_session_factory, init_db
from backend.database.models import (
    Owner, Bike, TheftReport, REPORT_STATUS_APPROVED, REPORT_STATUS_PENDING,
)


DEMO_BIKES = [
    {
        "owner": {"email": "budi@example.com", "name": "Budi Santoso", "phone": "+62 812 0000 0001"},
        "bike": {"vin": "MH1JFZ110NK000001", "make": "Honda", "model": "Vario 160", "year": 2022,
                 "color": "Black", "category": "Scooter", "engine_number": "KF41E1000001", "plate_number": "B1234XYZ"},
        "report": {"theft_date": datetime(2024, 3, 14), "theft_location": "Jakarta Selatan",
                   "description": "Taken from a mall parking lot in the evening.", "police_report": "LP/B/1234/III/2024",
                   "status": REPORT_STATUS_APPROVED},
    },
    {
        "owner": {"email": "sari@example.com", "name": "Sari Wulandari", "phone": None},
        "bike": {"vin": "MH3SG3120LJ000002", "make": "Yamaha", "model": "NMAX", "year": 2020,
                 "color": "White", "category": "Scooter", "engine_number": "G3E4E0000002", "plate_number": "D5678ABC"},
        "report": {"theft_date": datetime(2024, 6, 2), "theft_location": "Bandung",
                   "description": "Stolen from in front of the house overnight.", "police_report": None,
                   "status": REPORT_STATUS_PENDING},
    },
    {
        "owner": {"email": "andi@example.com", "name": "Andi Pratama", "phone": "+62 813 0000 0003"},
        "bike": {"vin": "MH4ZX636FPJ000003", "make": "Kawasaki", "model": "Ninja ZX-6R", "year": 2023,
                 "color": "Green", "category": "Sport", "engine_number": "ZX636EE000003", "plate_number": "L9012DEF"},
        "report": None,
    },
]


def seed_bikes(db):
    """Insert demo rows, skipping owners and VINs that already exist."""
    for entry in DEMO_BIKES:
        owner = db.query(Owner).filter(Owner.email == entry["owner"]["email"]).first()
        if not owner:
            owner = Owner(**entry["owner"])
            db.add(owner)

        if db.query(Bike).filter(Bike.vin == entry["bike"]["vin"]).first():
            continue

        bike = Bike(**entry["bike"], owner=owner)
        db.add(bike)

        if entry["report"]:
            db.add(TheftReport(bike=bike, reporter=owner, **entry["report"]))

    db.commit()
    print(f"Seeded {len(DEMO_BIKES)} demo bikes")


def main():
    engine = build_engine(get_settings().database_url)
    init_db(engine)
    db = build_session_factory(engine)()
    try:
        seed_bikes(db)
    finally:
        db.close()
        engine.dispose()


if __name__ == "__main__":
    main()
