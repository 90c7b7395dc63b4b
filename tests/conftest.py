"""Shared fixtures for API and service tests."""

from collections.abc import Iterator
from typing import Any

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from app.config import Settings
from app.db.database import Database
from app.main import create_app
from app.models.patient import PatientFields

ADMIN_USERNAME = "admin"
ADMIN_PASSWORD = "admin123"


def make_fields(**overrides: Any) -> dict[str, Any]:
    """Complete record payload as the editor form sends it."""
    payload: dict[str, Any] = {
        "name": "Budi Santoso",
        "address": "Jl. Merdeka 10, Jakarta",
        "birth_date": "1990-04-12",
        "sex": "Male",
        "nationality": "Indonesian",
        "national_id": "3171234567890001",
        "doctor_name": "Dr. Siti Rahma",
        "vaccine_type": "Yellow Fever",
        "vaccine_date": "2024-03-05",
        "valid_until": "2034-03-05",
        "administration_location": "Prima Medical Center III",
        "vaccine_batch_number": "YF-2024-0113",
        "disease_targeted": "Yellow Fever",
        "disease_date": "2024-03-05",
        "manufacture_brand_batch": "Sanofi Stamaril YF-2024-0113",
        "next_booster_date": "2034-03-05",
        "official_stamp_signature": "PMC-III/Rahma",
    }
    payload.update(overrides)
    return payload


class ForcedSlugGenerator:
    """Slug generator that hands out a fixed sequence without checking the store."""

    def __init__(self, slugs: list[str]):
        self.slugs = list(slugs)
        self.calls = 0

    async def generate(self, exists) -> str:
        self.calls += 1
        return self.slugs.pop(0)


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a fresh SQLite file."""
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        jwt_secret_key="test-jwt-secret",
        bcrypt_rounds=4,
        default_admin_username=ADMIN_USERNAME,
        default_admin_password=ADMIN_PASSWORD,
        public_base_url="https://vaccine.example.org",
        log_level="WARNING",
    )


@pytest.fixture
def client(settings) -> Iterator[TestClient]:
    """Test client for an app with its own database."""
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def auth_headers(client) -> dict[str, str]:
    """Authorization header of the default admin."""
    response = client.post("/login", json={"username": ADMIN_USERNAME, "password": ADMIN_PASSWORD})
    assert response.status_code == 200
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def fields() -> PatientFields:
    """Validated record fields."""
    return PatientFields.model_validate(make_fields())


@pytest_asyncio.fixture
async def database(settings):
    """Database handle with tables created."""
    database = Database(settings)
    await database.create_all()
    yield database
    await database.dispose()


@pytest_asyncio.fixture
async def session(database):
    """Store session for service tests."""
    async with database.session() as session:
        yield session
