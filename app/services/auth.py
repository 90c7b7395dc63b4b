"""Admin authentication: password checks and bearer credentials."""

from datetime import UTC, datetime, timedelta
from functools import lru_cache
from typing import Any

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.concurrency import run_in_threadpool

from app.config import Settings
from app.db.tables import Admin
from app.errors import InvalidCredential, InvalidCredentials, MissingCredential
from app.models.auth import AdminIdentity
from app.utils.logging import get_logger

logger = get_logger(__name__)

TOKEN_TYPE = "access"


def hash_password(password: str, rounds: int = 10) -> str:
    """Hash a password with bcrypt."""
    # bcrypt only looks at the first 72 bytes
    password_bytes = password.encode("utf-8")[:72]
    return bcrypt.hashpw(password_bytes, bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def check_password(password: str, password_hash: str) -> bool:
    """Compare a password against a bcrypt hash in constant time."""
    try:
        return bcrypt.checkpw(password.encode("utf-8")[:72], password_hash.encode("utf-8"))
    except ValueError:
        logger.error("Stored password hash is not a valid bcrypt hash")
        return False


@lru_cache(maxsize=4)
def _dummy_hash(rounds: int) -> str:
    """Hash compared against when the username is unknown."""
    return hash_password("not-a-real-password", rounds)


def create_access_token(admin: AdminIdentity, settings: Settings, expires_delta: timedelta | None = None) -> str:
    """Sign a bearer credential for an admin."""
    now = datetime.now(UTC)
    if expires_delta is None:
        expires_delta = timedelta(minutes=settings.access_token_expire_minutes)

    claims: dict[str, Any] = {
        "id": admin.id,
        "username": admin.username,
        "type": TOKEN_TYPE,
        "iat": now,
        "exp": now + expires_delta,
    }
    return jwt.encode(claims, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def verify_access_token(token: str | None, settings: Settings) -> AdminIdentity:
    """Verify a bearer credential and return the admin it names.

    Raises:
        MissingCredential: If no token was presented
        InvalidCredential: If the token is malformed, wrongly signed or expired
    """
    if not token:
        raise MissingCredential("Access denied")

    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except ExpiredSignatureError as e:
        logger.info("Rejected expired bearer token")
        raise InvalidCredential("Token expired") from e
    except JWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise InvalidCredential("Invalid token") from e

    admin_id = payload.get("id")
    username = payload.get("username")
    if payload.get("type") != TOKEN_TYPE or not isinstance(admin_id, int) or not isinstance(username, str):
        logger.info("Rejected bearer token with unexpected claims")
        raise InvalidCredential("Invalid token")

    return AdminIdentity(id=admin_id, username=username)


class AuthService:
    """Checks admin credentials against the credential store."""

    def __init__(self, session: AsyncSession, settings: Settings):
        """Initialize with a store session and settings."""
        self.session = session
        self.settings = settings

    async def login(self, username: str, password: str) -> tuple[str, AdminIdentity]:
        """Authenticate an admin and issue a bearer credential.

        Raises:
            InvalidCredentials: On unknown username or wrong password
        """
        admin = await self.session.scalar(select(Admin).where(Admin.username == username))

        if admin is None:
            # Spend the same hashing time as a real check
            dummy_hash = await run_in_threadpool(_dummy_hash, self.settings.bcrypt_rounds)
            await run_in_threadpool(check_password, password, dummy_hash)
            logger.warning(f"Failed login for unknown username {username!r}")
            raise InvalidCredentials("Invalid credentials")

        if not await run_in_threadpool(check_password, password, admin.password_hash):
            logger.warning(f"Failed login for {username!r}: wrong password")
            raise InvalidCredentials("Invalid credentials")

        identity = AdminIdentity(id=admin.id, username=admin.username)
        token = create_access_token(identity, self.settings)
        logger.info(f"Admin {username!r} logged in")
        return token, identity

    def verify(self, token: str | None) -> AdminIdentity:
        """Verify a bearer credential."""
        return verify_access_token(token, self.settings)

    async def ensure_default_admin(self) -> bool:
        """Create the default admin when no admin exists yet.

        Returns:
            True if an account was created
        """
        count = await self.session.scalar(select(func.count()).select_from(Admin))
        if count:
            return False

        password_hash = await run_in_threadpool(
            hash_password, self.settings.default_admin_password, self.settings.bcrypt_rounds
        )
        admin = Admin(username=self.settings.default_admin_username, password_hash=password_hash)
        self.session.add(admin)
        await self.session.commit()
        logger.info(f"Default admin created: {admin.username}")
        return True
