"""
Request dependencies.

Database session, the authenticated principal, role and theater access
checks, and the storage, QR generator and SMS client used by endpoints.
Every dependency here can be replaced through ``app.dependency_overrides``.
"""

from __future__ import annotations

from typing import Annotated, Any, AsyncGenerator, Callable, Dict, Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel
from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database import get_session
from yqpaynow.core.database.repositories import TheaterRepository
from yqpaynow.core.errors import AuthenticationError, PermissionDeniedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.enums import UserType
from yqpaynow.core.security import decode_token
from yqpaynow.notifications import Msg91Client
from yqpaynow.qr import QRCodeGenerator
from yqpaynow.server.core.config import SMSConfig, settings
from yqpaynow.storage import LocalFileStorage

logger = get_logger(__name__)

ADMIN_ROLES = (UserType.SUPER_ADMIN.value, UserType.ADMIN.value)
THEATER_ROLES = (UserType.THEATER_ADMIN.value, UserType.THEATER_USER.value)

bearer_scheme = HTTPBearer(auto_error=False)

SessionDep = Annotated[AsyncSession, Depends(get_session)]


class CurrentUser(BaseModel):
    """Principal decoded from an access token."""

    id: int
    username: str = ""
    role: str
    user_type: str
    theater_id: Optional[int] = None
    kind: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: Dict[str, Any]) -> "CurrentUser":
        try:
            return cls(
                id=int(claims["sub"]),
                username=claims.get("username") or "",
                role=claims.get("role") or claims.get("user_type") or "",
                user_type=claims.get("user_type") or claims.get("role") or "",
                theater_id=claims.get("theater_id"),
                kind=claims.get("kind"),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise AuthenticationError("Invalid token", code="TOKEN_INVALID") from e

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES or self.user_type in ADMIN_ROLES

    @property
    def is_super_admin(self) -> bool:
        return UserType.SUPER_ADMIN.value in (self.role, self.user_type)

    def has_role(self, *roles: str) -> bool:
        return self.role in roles or self.user_type in roles


async def _ensure_theater_active(session: AsyncSession, theater_id: Optional[int]) -> None:
    theater = await TheaterRepository(session).get_by_id(theater_id) if theater_id is not None else None
    if theater is None or not theater.is_active:
        raise PermissionDeniedError("Theater is deactivated or no longer exists", code="THEATER_DEACTIVATED")


async def get_current_user(
    session: SessionDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> CurrentUser:
    """
    Resolve the Bearer token into a :class:`CurrentUser`.

    Raises:
        AuthenticationError: No token (``TOKEN_MISSING``) or an invalid one
        PermissionDeniedError: The user's theater is missing or inactive
    """
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Access token is required", code="TOKEN_MISSING")
    user = CurrentUser.from_claims(decode_token(credentials.credentials))
    if user.user_type in THEATER_ROLES:
        await _ensure_theater_active(session, user.theater_id)
    return user


async def get_optional_user(
    session: SessionDep,
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(bearer_scheme),
) -> Optional[CurrentUser]:
    """Like :func:`get_current_user` but yields None for anonymous or invalid callers."""
    if credentials is None or not credentials.credentials:
        return None
    try:
        return await get_current_user(session, credentials)
    except (AuthenticationError, PermissionDeniedError) as e:
        logger.debug(f"Ignoring optional credentials: {e.code}")
        return None


CurrentUserDep = Annotated[CurrentUser, Depends(get_current_user)]
OptionalUserDep = Annotated[Optional[CurrentUser], Depends(get_optional_user)]


def require_roles(*roles: str) -> Callable[..., Any]:
    """Dependency factory admitting only users whose role or user type is in ``roles``."""

    async def dependency(user: CurrentUserDep) -> CurrentUser:
        if not user.has_role(*roles):
            raise PermissionDeniedError(
                "Insufficient permissions for this operation",
                code="INSUFFICIENT_PERMISSIONS",
                details={"required_roles": list(roles)},
            )
        return user

    return dependency


AdminUserDep = Annotated[CurrentUser, Depends(require_roles(*ADMIN_ROLES))]
SuperAdminDep = Annotated[CurrentUser, Depends(require_roles(UserType.SUPER_ADMIN.value))]


async def check_theater_access(session: AsyncSession, user: CurrentUser, theater_id: int) -> None:
    """
    Admins reach every theater; theater staff and owners only their own active theater.

    Raises:
        PermissionDeniedError: ``THEATER_ACCESS_DENIED`` or ``THEATER_INACTIVE``
    """
    if user.is_admin:
        return
    if user.theater_id != theater_id:
        raise PermissionDeniedError("You do not have access to this theater", code="THEATER_ACCESS_DENIED")
    theater = await TheaterRepository(session).get_by_id(theater_id)
    if theater is None or not theater.is_active:
        raise PermissionDeniedError("Theater is inactive", code="THEATER_INACTIVE")


async def require_theater_access(theater_id: int, session: SessionDep, user: CurrentUserDep) -> CurrentUser:
    """Path/query ``theater_id`` access check as a dependency."""
    await check_theater_access(session, user, theater_id)
    return user


TheaterAccessDep = Annotated[CurrentUser, Depends(require_theater_access)]


def get_storage() -> LocalFileStorage:
    upload = settings.upload
    return LocalFileStorage(upload.directory, public_prefix=upload.public_prefix, max_bytes=upload.max_bytes)


StorageDep = Annotated[LocalFileStorage, Depends(get_storage)]


def get_qr_generator(storage: StorageDep) -> QRCodeGenerator:
    return QRCodeGenerator(storage, settings.frontend_url)


QRGeneratorDep = Annotated[QRCodeGenerator, Depends(get_qr_generator)]


def get_sms_config() -> SMSConfig:
    return settings.sms


SmsConfigDep = Annotated[SMSConfig, Depends(get_sms_config)]


async def get_sms_client(config: SmsConfigDep) -> AsyncGenerator[Msg91Client, None]:
    client = Msg91Client(config)
    try:
        yield client
    finally:
        await client.aclose()


SmsClientDep = Annotated[Msg91Client, Depends(get_sms_client)]
