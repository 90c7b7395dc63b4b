"""Tests for data models and settings."""

import json
from datetime import date

import pytest
from conftest import make_fields
from pydantic import ValidationError

from app.config import Settings
from app.models.auth import LoginRequest, LoginResponse
from app.models.patient import Pagination, PatientFields


class TestPatientFields:
    """Tests for record field validation."""

    def test_valid_fields_from_json(self):
        """Test parsing a full editor payload."""
        fields = PatientFields.model_validate(json.loads(json.dumps(make_fields())))
        assert fields.name == "Budi Santoso"
        assert fields.birth_date == date(1990, 4, 12)
        assert fields.valid_until == date(2034, 3, 5)

    def test_optional_fields_may_be_absent(self):
        """Test that only required fields are needed."""
        payload = {
            key: value
            for key, value in make_fields().items()
            if key
            in {
                "name",
                "address",
                "birth_date",
                "sex",
                "nationality",
                "doctor_name",
                "vaccine_type",
                "vaccine_date",
                "administration_location",
            }
        }
        fields = PatientFields.model_validate(payload)
        assert fields.national_id is None
        assert fields.next_booster_date is None

    def test_blank_optional_values_become_none(self):
        """Test that empty strings in optional fields are treated as missing."""
        fields = PatientFields.model_validate(make_fields(vaccine_batch_number="  ", disease_date=""))
        assert fields.vaccine_batch_number is None
        assert fields.disease_date is None

    def test_required_fields_are_enforced(self):
        """Test that each required field is mandatory."""
        for field in ("name", "address", "birth_date", "sex", "doctor_name", "vaccine_date"):
            payload = make_fields()
            del payload[field]
            with pytest.raises(ValidationError):
                PatientFields.model_validate(payload)

    def test_invalid_date_is_rejected(self):
        """Test that dates must be real calendar dates."""
        with pytest.raises(ValidationError):
            PatientFields.model_validate(make_fields(vaccine_date="2024-02-31"))

    def test_identity_fields_are_ignored(self):
        """Test that id, slug and created_at in the body are dropped."""
        fields = PatientFields.model_validate(make_fields(id=7, slug="E-AAAAA", created_at="2024-01-01T00:00:00"))
        dumped = fields.model_dump()
        assert "id" not in dumped
        assert "slug" not in dumped
        assert "created_at" not in dumped


class TestPagination:
    """Tests for the pagination summary."""

    def test_serializes_camel_case(self):
        """Test that pagination keys use camelCase on the wire."""
        pagination = Pagination(
            current_page=1,
            total_pages=3,
            total_records=25,
            records_per_page=10,
            has_next_page=True,
            has_prev_page=False,
        )
        assert pagination.model_dump(by_alias=True) == {
            "currentPage": 1,
            "totalPages": 3,
            "totalRecords": 25,
            "recordsPerPage": 10,
            "hasNextPage": True,
            "hasPrevPage": False,
        }


class TestAuthModels:
    """Tests for login models."""

    def test_login_request_from_json(self):
        """Test login request parsing."""
        request = LoginRequest.model_validate({"username": "admin", "password": "admin123"})
        assert request.username == "admin"

    def test_login_response_shape(self):
        """Test login response structure."""
        response = LoginResponse.model_validate({"token": "t", "admin": {"id": 1, "username": "admin"}})
        assert response.model_dump() == {"token": "t", "admin": {"id": 1, "username": "admin"}}


class TestSettings:
    """Tests for settings helpers."""

    def test_public_url_for(self):
        """Test that public URLs join base and path."""
        settings = Settings(public_base_url="https://vaccine.example.org/", public_path_template="/pasien/{slug}")
        assert settings.public_url_for("E-AB12C") == "https://vaccine.example.org/pasien/E-AB12C"

    def test_cors_origin_list(self):
        """Test parsing of comma separated origins."""
        settings = Settings(cors_origins="https://a.example, https://b.example,")
        assert settings.cors_origin_list == ["https://a.example", "https://b.example"]

    def test_reads_environment(self, monkeypatch):
        """Test that settings come from environment variables."""
        monkeypatch.setenv("JWT_SECRET_KEY", "from-env")
        monkeypatch.setenv("MAX_PAGE_SIZE", "50")
        settings = Settings()
        assert settings.jwt_secret_key == "from-env"
        assert settings.max_page_size == 50
