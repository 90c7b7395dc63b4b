"""FastAPI dependencies shared by the endpoints."""

from collections.abc import AsyncIterator
from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import Settings
from app.errors import InvalidCredential, MissingCredential
from app.models.auth import AdminIdentity
from app.services.auth import AuthService
from app.services.records import RecordService

bearer_scheme = HTTPBearer(auto_error=False)


def get_settings(request: Request) -> Settings:
    """Settings the application was built with."""
    return request.app.state.settings


async def get_session(request: Request) -> AsyncIterator[AsyncSession]:
    """Store session scoped to one request."""
    async with request.app.state.database.session() as session:
        yield session


SettingsDep = Annotated[Settings, Depends(get_settings)]
SessionDep = Annotated[AsyncSession, Depends(get_session)]


def get_auth_service(session: SessionDep, settings: SettingsDep) -> AuthService:
    """Auth service bound to the request session."""
    return AuthService(session, settings)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]


def get_record_service(request: Request, session: SessionDep) -> RecordService:
    """Record service bound to the request session."""
    return RecordService(session, request.app.state.slug_generator)


def require_admin(
    auth: AuthServiceDep,
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer_scheme)],
) -> AdminIdentity:
    """Verified admin behind the request's bearer credential."""
    token = credentials.credentials if credentials else None
    try:
        return auth.verify(token)
    except MissingCredential as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied",
            headers={"WWW-Authenticate": "Bearer"},
        ) from e
    except InvalidCredential as e:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Invalid token") from e


RecordServiceDep = Annotated[RecordService, Depends(get_record_service)]
AdminDep = Annotated[AdminIdentity, Depends(require_admin)]
