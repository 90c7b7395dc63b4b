"""API endpoints for the vaccination record service."""

from datetime import UTC, datetime

from fastapi import APIRouter, HTTPException, Response, status
from starlette.concurrency import run_in_threadpool

from app import __version__
from app.api.deps import AdminDep, AuthServiceDep, RecordServiceDep, SettingsDep
from app.db.tables import PatientRecord
from app.errors import InvalidCredentials, PersistenceError, RecordNotFound
from app.models.auth import AdminSummary, LoginRequest, LoginResponse
from app.models.health import HealthResponse, StatusResponse
from app.models.patient import (
    MessageResponse,
    PatientCreatedResponse,
    PatientFields,
    PatientListResponse,
    PatientRecordResponse,
)
from app.services.certificate import render_certificate_pdf, render_qr_png
from app.services.records import RecordService
from app.utils.logging import get_logger

logger = get_logger(__name__)

router = APIRouter()

SERVER_ERROR = "Server error"
NOT_FOUND = "Patient not found"


def parse_positive_int(value: str | None, default: int) -> int:
    """Parse a query value, falling back to default when absent, non-numeric or below 1."""
    if value is None:
        return default
    try:
        parsed = int(value.strip())
    except ValueError:
        return default
    return parsed if parsed >= 1 else default


async def fetch_record(records: RecordService, slug: str) -> PatientRecord:
    """Look up a record for a public endpoint, mapping errors to HTTP."""
    try:
        return await records.get_by_slug(slug)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND) from e
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR) from e


@router.post("/login", response_model=LoginResponse, tags=["Auth"])
async def login(request: LoginRequest, auth: AuthServiceDep) -> LoginResponse:
    """Authenticate an admin and return a bearer token."""
    try:
        token, admin = await auth.login(request.username, request.password)
    except InvalidCredentials as e:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials") from e

    return LoginResponse(token=token, admin=AdminSummary(id=admin.id, username=admin.username))


@router.post(
    "/patients",
    response_model=PatientCreatedResponse,
    status_code=status.HTTP_201_CREATED,
    tags=["Patients"],
)
async def create_patient(fields: PatientFields, records: RecordServiceDep, admin: AdminDep) -> PatientCreatedResponse:
    """Create a patient record and assign its public slug."""
    try:
        record = await records.create(fields)
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR) from e

    logger.info(f"Admin {admin.username} created patient {record.slug}")
    return PatientCreatedResponse(id=record.id, slug=record.slug)


@router.get("/patients", response_model=PatientListResponse, tags=["Patients"])
async def list_patients(
    records: RecordServiceDep,
    settings: SettingsDep,
    admin: AdminDep,
    page: str | None = None,
    limit: str | None = None,
) -> PatientListResponse:
    """List patient records newest first, one page at a time."""
    page_number = parse_positive_int(page, 1)
    page_size = min(parse_positive_int(limit, settings.default_page_size), settings.max_page_size)

    try:
        result = await records.list(page_number, page_size)
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR) from e

    return PatientListResponse(
        patients=[PatientRecordResponse.model_validate(record) for record in result.records],
        pagination=result.pagination,
    )


@router.get("/patients/{slug}", response_model=PatientRecordResponse, tags=["Public"])
async def get_patient(slug: str, records: RecordServiceDep) -> PatientRecordResponse:
    """Public, unauthenticated view of one record."""
    record = await fetch_record(records, slug)
    return PatientRecordResponse.model_validate(record)


@router.get(
    "/patients/{slug}/qr",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
    tags=["Public"],
)
async def get_patient_qr(slug: str, records: RecordServiceDep, settings: SettingsDep) -> Response:
    """QR code linking to the public view of a record."""
    record = await fetch_record(records, slug)
    png = render_qr_png(settings.public_url_for(record.slug))
    return Response(
        content=png,
        media_type="image/png",
        headers={"Content-Disposition": f'attachment; filename="qr-code-{record.slug}.png"'},
    )


@router.get(
    "/patients/{slug}/certificate.pdf",
    response_class=Response,
    responses={200: {"content": {"application/pdf": {}}}},
    tags=["Public"],
)
async def get_patient_certificate(slug: str, records: RecordServiceDep, settings: SettingsDep) -> Response:
    """Printable vaccination certificate of a record."""
    record = await fetch_record(records, slug)
    pdf = await run_in_threadpool(render_certificate_pdf, record, settings.public_url_for(record.slug))
    return Response(
        content=pdf,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="Vaccination_Record_{record.slug}.pdf"'},
    )


@router.put("/patients/{slug}", response_model=MessageResponse, tags=["Patients"])
async def update_patient(
    slug: str, fields: PatientFields, records: RecordServiceDep, admin: AdminDep
) -> MessageResponse:
    """Replace every editable field of a record."""
    try:
        await records.update(slug, fields)
    except RecordNotFound as e:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=NOT_FOUND) from e
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR) from e

    logger.info(f"Admin {admin.username} updated patient {slug}")
    return MessageResponse(message="Patient updated successfully")


@router.delete("/patients/{record_id}", response_model=MessageResponse, tags=["Patients"])
async def delete_patient(record_id: int, records: RecordServiceDep, admin: AdminDep) -> MessageResponse:
    """Delete a record by internal id; unknown ids also succeed."""
    try:
        await records.delete(record_id)
    except PersistenceError as e:
        raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=SERVER_ERROR) from e

    logger.info(f"Admin {admin.username} deleted patient {record_id}")
    return MessageResponse(message="Patient deleted successfully")


@router.get("/", response_model=StatusResponse, tags=["Health"])
async def liveness() -> StatusResponse:
    """Liveness probe."""
    return StatusResponse(status="ok")


@router.get("/health", response_model=HealthResponse, tags=["Health"])
async def health_check() -> HealthResponse:
    """Health check endpoint."""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(UTC),
        version=__version__,
    )
