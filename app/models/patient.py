"""Patient record request and response models."""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

OPTIONAL_FIELDS = (
    "national_id",
    "valid_until",
    "vaccine_batch_number",
    "disease_targeted",
    "disease_date",
    "manufacture_brand_batch",
    "next_booster_date",
    "official_stamp_signature",
)


class PatientFields(BaseModel):
    """Mutable fields of a patient record, as sent by the editor form.

    Used for both create and update; an update replaces every field.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)

    name: str = Field(..., min_length=1, max_length=255)
    address: str = Field(..., min_length=1)
    birth_date: date
    sex: str = Field(..., min_length=1, max_length=255)
    nationality: str = Field(..., min_length=1, max_length=255)
    national_id: str | None = Field(default=None, max_length=255)
    doctor_name: str = Field(..., min_length=1, max_length=255)
    vaccine_type: str = Field(..., min_length=1, max_length=255)
    vaccine_date: date
    valid_until: date | None = None
    administration_location: str = Field(..., min_length=1, max_length=255)
    vaccine_batch_number: str | None = Field(default=None, max_length=255)
    disease_targeted: str | None = Field(default=None, max_length=255)
    disease_date: date | None = None
    manufacture_brand_batch: str | None = Field(default=None, max_length=255)
    next_booster_date: date | None = None
    official_stamp_signature: str | None = Field(default=None, max_length=255)

    @field_validator(*OPTIONAL_FIELDS, mode="before")
    @classmethod
    def blank_to_none(cls, v: Any) -> Any:
        """Treat empty form inputs as missing values."""
        if isinstance(v, str) and not v.strip():
            return None
        return v


class PatientRecordResponse(PatientFields):
    """A stored patient record as returned by the public lookup."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    slug: str
    created_at: datetime


class PatientCreatedResponse(BaseModel):
    """Response model for record creation."""

    id: int
    slug: str
    message: str = "Patient record created successfully"


class MessageResponse(BaseModel):
    """Plain confirmation message."""

    message: str


class Pagination(BaseModel):
    """Pagination summary of a record listing."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    current_page: int
    total_pages: int
    total_records: int
    records_per_page: int
    has_next_page: bool
    has_prev_page: bool


class PatientListResponse(BaseModel):
    """One page of patient records, newest first."""

    patients: list[PatientRecordResponse]
    pagination: Pagination
