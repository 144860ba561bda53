"""
Authentication service.

Three kinds of principals log in:

- platform admins, by e-mail and password;
- theater staff, by username and password followed by their 4-digit PIN;
- theater owners, by the theater's own username and password.

Access tokens carry ``sub``, ``kind``, ``username``, ``role``, ``user_type`` and
``theater_id``. Refresh tokens carry ``{kind}:{id}`` as subject so the
principal can be reloaded without guessing its table.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database import utc_now
from yqpaynow.core.database.entities import Admin, Role, Theater, TheaterUser
from yqpaynow.core.database.repositories import (
    AdminRepository,
    RoleRepository,
    TheaterRepository,
    TheaterUserRepository,
)
from yqpaynow.core.errors import (
    AuthenticationError,
    NotFoundError,
    PermissionDeniedError,
    ValidationFailedError,
)
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.enums import UserType
from yqpaynow.core.models.io.auth import (
    AuthResponse,
    LoginRequest,
    PendingAuth,
    PinValidationRequest,
    UserSummary,
)
from yqpaynow.core.models.io.roles import PermissionEntry
from yqpaynow.core.security import (
    create_access_token,
    create_refresh_token,
    decode_token,
    verify_password_async,
)

from .deps import CurrentUser

logger = get_logger(__name__)

KIND_ADMIN = "admin"
KIND_THEATER = "theater"
KIND_STAFF = "staff"
CLAIM_FIELDS = {"username", "role", "user_type", "theater_id"}


def staff_user_type(role: Optional[Role]) -> str:
    """Staff holding a role whose name mentions "admin" act as theater admins."""
    if role is not None and "admin" in role.name.lower():
        return UserType.THEATER_ADMIN.value
    return UserType.THEATER_USER.value


class AuthService:
    """Login, PIN validation, token refresh and identity lookups."""

    def __init__(self, session: AsyncSession):
        self.session = session
        self.admins = AdminRepository(session)
        self.theaters = TheaterRepository(session)
        self.users = TheaterUserRepository(session)
        self.roles = RoleRepository(session)

    # ------------------------------------------------------------------
    # Claims and summaries
    # ------------------------------------------------------------------

    @staticmethod
    def _admin_claims(admin: Admin) -> Tuple[Dict[str, Any], UserSummary]:
        summary = UserSummary(
            id=admin.id, username=admin.email, name=admin.name, email=admin.email, role=admin.role, user_type=admin.role
        )
        return summary.model_dump(include=CLAIM_FIELDS) | {"sub": admin.id, "kind": KIND_ADMIN}, summary

    @staticmethod
    def _theater_claims(theater: Theater) -> Tuple[Dict[str, Any], UserSummary]:
        user_type = UserType.THEATER_ADMIN.value
        summary = UserSummary(
            id=theater.id,
            username=theater.username,
            name=theater.name,
            email=theater.email,
            role=user_type,
            user_type=user_type,
            theater_id=theater.id,
            theater_name=theater.name,
        )
        return summary.model_dump(include=CLAIM_FIELDS) | {"sub": theater.id, "kind": KIND_THEATER}, summary

    @staticmethod
    def _staff_claims(user: TheaterUser, theater: Theater, role: Optional[Role]) -> Tuple[Dict[str, Any], UserSummary]:
        user_type = staff_user_type(role)
        summary = UserSummary(
            id=user.id,
            username=user.username,
            name=user.full_name,
            email=user.email,
            role=user_type,
            user_type=user_type,
            theater_id=theater.id,
            theater_name=theater.name,
        )
        claims = summary.model_dump(include=CLAIM_FIELDS)
        claims.update(sub=user.id, kind=KIND_STAFF, role_id=user.role_id, role_name=role.name if role else None)
        return claims, summary

    @staticmethod
    def _issue(kind: str, claims: Dict[str, Any], summary: UserSummary, permissions: List[Dict[str, Any]]) -> AuthResponse:
        return AuthResponse(
            token=create_access_token(claims),
            refresh_token=create_refresh_token(f"{kind}:{summary.id}", summary.user_type),
            user=summary,
            role_permissions=[PermissionEntry.model_validate(perm) for perm in permissions],
        )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    async def login(self, request: LoginRequest) -> AuthResponse:
        """
        Authenticate by identifier and password.

        Admins get tokens right away. Staff get ``is_pin_required`` and a
        ``pending_auth`` block instead, tokens follow after the PIN step.

        Raises:
            ValidationFailedError: Neither e-mail nor username given
            PermissionDeniedError: Theater owner login for an inactive theater
            AuthenticationError: No principal matches
        """
        identifier = request.identifier
        if not identifier:
            raise ValidationFailedError("Email or username is required", code="MISSING_IDENTIFIER")

        if "@" in identifier:
            admin = await self.admins.get_by_email(identifier)
            if admin and admin.is_active and await verify_password_async(request.password, admin.password_hash):
                admin.last_login = utc_now()
                await self.admins.update(admin)
                claims, summary = self._admin_claims(admin)
                logger.info(f"Admin {admin.email} logged in")
                return self._issue(KIND_ADMIN, claims, summary, [])

        staff = await self.users.get_by_username(identifier)
        if staff and staff.is_active and await verify_password_async(request.password, staff.password_hash):
            logger.info(f"Staff user {staff.username} passed password step, PIN required")
            return AuthResponse(
                is_pin_required=True,
                pending_auth=PendingAuth(user_id=staff.id, username=staff.username, theater_id=staff.theater_id),
            )

        theater = await self.theaters.get_by_username(identifier)
        if theater and await verify_password_async(request.password, theater.password_hash):
            if not theater.is_active:
                raise PermissionDeniedError("Theater account is inactive", code="THEATER_INACTIVE")
            theater.last_login = utc_now()
            await self.theaters.update(theater)
            claims, summary = self._theater_claims(theater)
            logger.info(f"Theater {theater.username} logged in")
            return self._issue(KIND_THEATER, claims, summary, [])

        logger.info(f"Failed login attempt for {identifier}")
        raise AuthenticationError("Invalid credentials", code="INVALID_CREDENTIALS")

    async def validate_pin(self, request: PinValidationRequest) -> AuthResponse:
        """Second login step for staff: check the PIN and issue tokens."""
        user = await self.users.get_by_id(request.user_id)
        if user is None or not user.is_active or user.theater_id != request.theater_id:
            raise NotFoundError("User not found", code="USER_NOT_FOUND")
        if user.pin != request.pin:
            logger.info(f"Invalid PIN for staff user {user.username}")
            raise AuthenticationError("Invalid PIN", code="INVALID_PIN")

        theater = await self.theaters.get_by_id(request.theater_id)
        if theater is None:
            raise NotFoundError("Theater not found", code="THEATER_NOT_FOUND")
        if not theater.is_active:
            raise PermissionDeniedError("Theater account is inactive", code="THEATER_INACTIVE")

        role = await self.roles.get_by_id(user.role_id) if user.role_id else None
        user.last_login = utc_now()
        await self.users.update(user)

        claims, summary = self._staff_claims(user, theater, role)
        logger.info(f"Staff user {user.username} logged in as {summary.user_type}")
        return self._issue(KIND_STAFF, claims, summary, role.granted_permissions() if role else [])

    async def _load_principal(self, kind: str, principal_id: int) -> Tuple[Dict[str, Any], UserSummary]:
        if kind == KIND_ADMIN:
            admin = await self.admins.get_by_id(principal_id)
            if admin and admin.is_active:
                return self._admin_claims(admin)
        elif kind == KIND_THEATER:
            theater = await self.theaters.get_by_id(principal_id)
            if theater and theater.is_active:
                return self._theater_claims(theater)
        elif kind == KIND_STAFF:
            user = await self.users.get_by_id(principal_id)
            theater = await self.theaters.get_by_id(user.theater_id) if user else None
            if user and user.is_active and theater and theater.is_active:
                role = await self.roles.get_by_id(user.role_id) if user.role_id else None
                return self._staff_claims(user, theater, role)
        raise AuthenticationError("Account is no longer active", code="TOKEN_INVALID")

    async def refresh(self, refresh_token: str) -> str:
        """New access token for a valid refresh token whose subject is still active."""
        payload = decode_token(refresh_token, refresh=True)
        kind, _, raw_id = str(payload.get("sub", "")).partition(":")
        if not raw_id.isdigit():
            raise AuthenticationError("Invalid token", code="TOKEN_INVALID")
        claims, _ = await self._load_principal(kind, int(raw_id))
        return create_access_token(claims)

    async def describe(self, user: CurrentUser) -> UserSummary:
        """Fresh summary of the token's principal."""
        kind = user.kind or (KIND_ADMIN if user.is_admin else KIND_STAFF)
        _, summary = await self._load_principal(kind, user.id)
        return summary
