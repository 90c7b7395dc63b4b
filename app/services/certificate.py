"""Rendering of the public certificate: QR code and PDF document."""

import io
from datetime import date
from xml.sax.saxutils import escape

import qrcode
from qrcode.constants import ERROR_CORRECT_H, ERROR_CORRECT_L
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import cm
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from app.db.tables import PatientRecord
from app.utils.logging import get_logger

logger = get_logger(__name__)

MISSING = "-"


def format_date(value: date | None) -> str:
    """Render a date as e.g. 05 March 2024."""
    return value.strftime("%d %B %Y") if value else MISSING


def render_qr_png(data: str, box_size: int = 10, border: int = 2, high_correction: bool = False) -> bytes:
    """Encode data as a QR code PNG."""
    qr = qrcode.QRCode(
        version=None,
        error_correction=ERROR_CORRECT_H if high_correction else ERROR_CORRECT_L,
        box_size=box_size,
        border=border,
    )
    qr.add_data(data)
    qr.make(fit=True)

    img = qr.make_image(fill_color="black", back_color="white")
    buffer = io.BytesIO()
    img.save(buffer, format="PNG")
    return buffer.getvalue()


def certificate_rows(record: PatientRecord) -> list[tuple[str, str]]:
    """Label/value pairs shown in the personal section of the certificate."""
    return [
        ("Administering centre", record.administration_location),
        ("Document number", record.slug),
        ("This is to certify that", record.name),
        ("Date of birth", format_date(record.birth_date)),
        ("Sex", record.sex),
        ("Nationality", record.nationality),
        ("National identification document", record.national_id or MISSING),
        ("Whose signature follows", record.name),
        ("Has been vaccinated or received prophylaxis against", record.vaccine_type),
        ("Disease targeted", record.disease_targeted or MISSING),
        ("Disease date", format_date(record.disease_date)),
        ("Manufacturer, brand name and batch no.", record.manufacture_brand_batch or MISSING),
        ("Next booster", format_date(record.next_booster_date)),
        ("Official stamp and signature", record.official_stamp_signature or MISSING),
    ]


def vaccination_table(record: PatientRecord) -> list[list[str]]:
    """Header row plus the single vaccination row of the certificate."""
    header = [
        "Vaccine or prophylaxis",
        "Date",
        "Supervising clinician",
        "Batch no.",
        "Valid until",
        "Administering centre",
        "Next booster",
    ]
    row = [
        record.vaccine_type,
        format_date(record.vaccine_date),
        record.doctor_name,
        record.vaccine_batch_number or MISSING,
        format_date(record.valid_until),
        record.administration_location,
        format_date(record.next_booster_date),
    ]
    return [header, row]


def render_certificate_pdf(record: PatientRecord, public_url: str) -> bytes:
    """Render the vaccination certificate of one record as a PDF."""
    buffer = io.BytesIO()
    doc = SimpleDocTemplate(
        buffer,
        pagesize=A4,
        rightMargin=1.5 * cm,
        leftMargin=1.5 * cm,
        topMargin=1.5 * cm,
        bottomMargin=1.5 * cm,
        title=f"Vaccination Record {record.slug}",
    )

    styles = getSampleStyleSheet()
    title_style = ParagraphStyle(
        "CertTitle",
        parent=styles["Heading1"],
        fontSize=20,
        textColor=colors.HexColor("#1a365d"),
        alignment=TA_CENTER,
        spaceAfter=4,
    )
    subtitle_style = ParagraphStyle(
        "CertSubtitle",
        parent=styles["Normal"],
        fontSize=11,
        textColor=colors.HexColor("#4a5568"),
        alignment=TA_CENTER,
        spaceAfter=16,
    )
    label_style = ParagraphStyle("CertLabel", parent=styles["Normal"], fontSize=9, textColor=colors.HexColor("#4a5568"))
    value_style = ParagraphStyle("CertValue", parent=styles["Normal"], fontSize=10)
    cell_style = ParagraphStyle("CertCell", parent=styles["Normal"], fontSize=7, leading=9)
    small_style = ParagraphStyle(
        "CertSmall",
        parent=styles["Normal"],
        fontSize=8,
        textColor=colors.HexColor("#718096"),
        alignment=TA_CENTER,
    )

    content = [
        Paragraph("International Certificate of Vaccination or Prophylaxis", title_style),
        Paragraph(f"No. {escape(record.slug)}", subtitle_style),
    ]

    personal = Table(
        [
            [Paragraph(label, label_style), Paragraph(escape(str(value)), value_style)]
            for label, value in certificate_rows(record)
        ],
        colWidths=[7 * cm, 10.5 * cm],
    )
    personal.setStyle(
        TableStyle(
            [
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
                ("BOTTOMPADDING", (0, 0), (-1, -1), 4),
            ]
        )
    )
    content.extend([personal, Spacer(1, 0.6 * cm)])

    rows = vaccination_table(record)
    table = Table([[Paragraph(escape(cell), cell_style) for cell in row] for row in rows], repeatRows=1)
    table.setStyle(
        TableStyle(
            [
                ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#cbd5e0")),
                ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#edf2f7")),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]
        )
    )
    content.extend([table, Spacer(1, 0.8 * cm)])

    qr_png = render_qr_png(public_url, box_size=6, high_correction=True)
    content.append(Image(io.BytesIO(qr_png), width=3.5 * cm, height=3.5 * cm))
    content.append(Paragraph("Scan to verify", small_style))
    content.append(Paragraph(escape(public_url), small_style))

    doc.build(content)
    logger.info(f"Rendered certificate PDF for {record.slug}")
    return buffer.getvalue()
