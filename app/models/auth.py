"""Authentication models."""

from dataclasses import dataclass

from pydantic import BaseModel


@dataclass(frozen=True)
class AdminIdentity:
    """Admin identity carried by a verified bearer credential."""

    id: int
    username: str


class LoginRequest(BaseModel):
    """Request model for the login endpoint."""

    username: str
    password: str


class AdminSummary(BaseModel):
    """Public view of an admin account."""

    id: int
    username: str


class LoginResponse(BaseModel):
    """Response model for the login endpoint."""

    token: str
    admin: AdminSummary
