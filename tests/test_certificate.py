"""Tests for QR code and PDF certificate rendering."""

from datetime import date

import pytest

from app.db.tables import PatientRecord
from app.services.certificate import (
    certificate_rows,
    format_date,
    render_certificate_pdf,
    render_qr_png,
    vaccination_table,
)


@pytest.fixture
def record() -> PatientRecord:
    """Unsaved record with only required fields and a slug."""
    return PatientRecord(
        id=1,
        slug="E-7K2QX",
        name="Ana Pereira & Filhos",
        address="Rua Augusta 12, Lisboa",
        birth_date=date(1985, 11, 2),
        sex="Female",
        nationality="Portuguese",
        doctor_name="Dr. Rui Matos",
        vaccine_type="Typhoid",
        vaccine_date=date(2024, 6, 1),
        administration_location="Centro de Vacinação <Norte>",
    )


class TestFormatting:
    """Tests for certificate text helpers."""

    def test_format_date(self):
        assert format_date(date(2024, 3, 5)) == "05 March 2024"

    def test_format_missing_date(self):
        assert format_date(None) == "-"

    def test_missing_optional_values_render_as_dash(self, record):
        """Test that absent optional fields show a placeholder."""
        rows = dict(certificate_rows(record))
        assert rows["Document number"] == "E-7K2QX"
        assert rows["National identification document"] == "-"
        assert rows["Next booster"] == "-"

    def test_vaccination_table(self, record):
        """Test the vaccination table has a header and one row."""
        header, row = vaccination_table(record)
        assert len(header) == len(row)
        assert row[0] == "Typhoid"
        assert row[1] == "01 June 2024"
        assert row[2] == "Dr. Rui Matos"


class TestRendering:
    """Tests for binary outputs."""

    def test_qr_png(self):
        """Test that QR output is a PNG."""
        png = render_qr_png("https://vaccine.example.org/pasien/E-7K2QX")
        assert png.startswith(b"\x89PNG\r\n\x1a\n")

    def test_certificate_pdf_with_markup_characters(self, record):
        """Test that values with XML special characters still render."""
        pdf = render_certificate_pdf(record, "https://vaccine.example.org/pasien/E-7K2QX")
        assert pdf.startswith(b"%PDF")
        assert len(pdf) > 1000
