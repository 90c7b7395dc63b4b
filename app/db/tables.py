"""Table definitions for the credential and record stores."""

from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, String, Text, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Declarative base for all tables."""


class Admin(Base):
    """Administrator account."""

    __tablename__ = "admins"
    __table_args__ = {"sqlite_autoincrement": True}
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    username: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)


class PatientRecord(Base):
    """Vaccination record of one patient, published under its slug."""

    __tablename__ = "patients"
    # AUTOINCREMENT keeps SQLite from reusing ids of deleted rows
    __table_args__ = {"sqlite_autoincrement": True}
    __mapper_args__ = {"eager_defaults": True}

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    slug: Mapped[str] = mapped_column(String(50), unique=True, nullable=False)

    name: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str] = mapped_column(Text, nullable=False)
    birth_date: Mapped[date] = mapped_column(Date, nullable=False)
    sex: Mapped[str] = mapped_column(String(255), nullable=False)
    nationality: Mapped[str] = mapped_column(String(255), nullable=False)
    national_id: Mapped[str | None] = mapped_column(String(255))
    doctor_name: Mapped[str] = mapped_column(String(255), nullable=False)
    vaccine_type: Mapped[str] = mapped_column(String(255), nullable=False)
    vaccine_date: Mapped[date] = mapped_column(Date, nullable=False)
    valid_until: Mapped[date | None] = mapped_column(Date)
    administration_location: Mapped[str] = mapped_column(String(255), nullable=False)
    vaccine_batch_number: Mapped[str | None] = mapped_column(String(255))
    disease_targeted: Mapped[str | None] = mapped_column(String(255))
    disease_date: Mapped[date | None] = mapped_column(Date)
    manufacture_brand_batch: Mapped[str | None] = mapped_column(String(255))
    next_booster_date: Mapped[date | None] = mapped_column(Date)
    official_stamp_signature: Mapped[str | None] = mapped_column(String(255))

    created_at: Mapped[datetime] = mapped_column(DateTime, server_default=func.now(), nullable=False)
