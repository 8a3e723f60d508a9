from datetime import datetime
from sqlalchemy import String, Integer, DateTime, Text, Index, ForeignKey
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


class Base(DeclarativeBase):
    pass


REPORT_STATUS_PENDING = "pending"
REPORT_STATUS_APPROVED = "approved"
REPORT_STATUS_REJECTED = "rejected"
REPORT_STATUSES = (REPORT_STATUS_PENDING, REPORT_STATUS_APPROVED, REPORT_STATUS_REJECTED)


class Owner(Base):
    """Bike owner / reporter, identified by email."""
    __tablename__ = "owners"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(String(255), unique=True, index=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(100))
    phone: Mapped[str | None] = mapped_column(String(50))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    bikes: Mapped[list["Bike"]] = relationship(back_populates="owner")
    reports: Mapped[list["TheftReport"]] = relationship(back_populates="reporter")


class Bike(Base):
    """A motorcycle, looked up by VIN, engine number or plate number."""
    __tablename__ = "bikes"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    vin: Mapped[str | None] = mapped_column(String(32), unique=True)
    make: Mapped[str] = mapped_column(String(50), nullable=False)
    model: Mapped[str | None] = mapped_column(String(100))
    year: Mapped[int | None] = mapped_column(Integer)
    color: Mapped[str | None] = mapped_column(String(50))
    category: Mapped[str | None] = mapped_column(String(50))  # Sport, Cruiser, Scooter, ...
    engine_number: Mapped[str | None] = mapped_column(String(50), index=True)
    plate_number: Mapped[str | None] = mapped_column(String(20), index=True)
    owner_id: Mapped[int] = mapped_column(Integer, ForeignKey("owners.id"), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    owner: Mapped[Owner] = relationship(back_populates="bikes")
    images: Mapped[list["BikeImage"]] = relationship(
        back_populates="bike", order_by="BikeImage.id"
    )
    reports: Mapped[list["TheftReport"]] = relationship(back_populates="bike")


class TheftReport(Base):
    """A theft report filed against a bike. Status is set by moderation."""
    __tablename__ = "theft_reports"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bike_id: Mapped[int] = mapped_column(Integer, ForeignKey("bikes.id"), nullable=False)
    reported_by: Mapped[int] = mapped_column(Integer, ForeignKey("owners.id"), index=True, nullable=False)
    theft_date: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    theft_location: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text)
    police_report: Mapped[str | None] = mapped_column(String(100))
    status: Mapped[str] = mapped_column(String(20), default=REPORT_STATUS_PENDING, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime, default=datetime.utcnow, onupdate=datetime.utcnow
    )

    bike: Mapped[Bike] = relationship(back_populates="reports")
    reporter: Mapped[Owner] = relationship(back_populates="reports")

    __table_args__ = (
        Index("ix_theft_reports_bike_status", "bike_id", "status"),
    )


class BikeImage(Base):
    """Uploaded photo of a bike; url points at blob storage or /uploads."""
    __tablename__ = "bike_images"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    bike_id: Mapped[int] = mapped_column(Integer, ForeignKey("bikes.id"), index=True, nullable=False)
    url: Mapped[str] = mapped_column(Text, nullable=False)
    filename: Mapped[str | None] = mapped_column(String(255))
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)

    bike: Mapped[Bike] = relationship(back_populates="images")
