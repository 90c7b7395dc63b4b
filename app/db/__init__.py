"""Relational store for admins and patient records."""

from app.db.database import Database
from app.db.tables import Admin, Base, PatientRecord

__all__ = ["Admin", "Base", "Database", "PatientRecord"]
