"""
Theater onboarding and lifecycle.

Registering a theater also creates its default roles. Deleting one removes
every row scoped to it.
"""

from __future__ import annotations

import math
from datetime import datetime, timedelta
from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database import utc_now
from yqpaynow.core.database.entities import Theater
from yqpaynow.core.database.repositories import (
    BannerRepository,
    CategoryRepository,
    OrderRepository,
    ProductRepository,
    ProductTypeRepository,
    QRCodeNameRepository,
    QRCodeRepository,
    QRSeatRepository,
    RoleRepository,
    StockEntryRepository,
    TheaterRepository,
    TheaterUserRepository,
)
from yqpaynow.core.errors import ConflictError, NotFoundError, ValidationFailedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.enums import TheaterStatus
from yqpaynow.core.models.io.common import to_utc
from yqpaynow.core.models.io.theaters import (
    AgreementStatus,
    ExpiringAgreement,
    TheaterCreate,
    TheaterPasswordUpdate,
    TheaterSettingsRead,
    TheaterSettingsUpdate,
    TheaterUpdate,
)
from yqpaynow.core.security import hash_password_async, verify_password_async

from .roles import RoleService

logger = get_logger(__name__)

EXPIRING_SOON_DAYS = 30
JSON_FIELDS = ("address", "settings", "branding", "owner_details")


def days_until(moment: datetime, now: Optional[datetime] = None) -> int:
    """Whole days left until ``moment``, rounded up; negative once it has passed."""
    seconds = (to_utc(moment) - to_utc(now or utc_now())).total_seconds()
    return math.ceil(seconds / 86400)


class TheaterService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.theaters = TheaterRepository(session)

    async def get(self, theater_id: int) -> Theater:
        theater = await self.theaters.get_by_id(theater_id)
        if theater is None:
            raise NotFoundError(f"Theater {theater_id} not found", code="THEATER_NOT_FOUND")
        return theater

    async def list(
        self,
        *,
        page: int,
        limit: int,
        search: Optional[str] = None,
        status: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[Theater], int]:
        filters = {"status": status, "is_active": is_active}
        rows = await self.theaters.list(limit=limit, offset=(page - 1) * limit, filters=filters, search=search)
        total = await self.theaters.count(filters, search)
        return rows, total

    async def _ensure_username_free(self, username: str) -> None:
        if await self.theaters.get_by_username(username):
            raise ConflictError(f"Username '{username}' is already taken", code="USERNAME_EXISTS")

    async def create(self, data: TheaterCreate) -> Theater:
        await self._ensure_username_free(data.username)
        theater = Theater(
            **data.model_dump(exclude={"password"}),
            password_hash=await hash_password_async(data.password),
            status=TheaterStatus.ACTIVE.value,
            is_active=True,
        )
        theater = await self.theaters.create(theater)
        await RoleService(self.session).create_default_roles(theater.id)
        logger.info(f"Registered theater {theater.name!r} ({theater.username}) as #{theater.id}")
        return theater

    async def update(self, theater_id: int, data: TheaterUpdate) -> Theater:
        theater = await self.get(theater_id)
        changes = data.model_dump(exclude_unset=True)
        if changes.get("username") and changes["username"] != theater.username:
            await self._ensure_username_free(changes["username"])
        if "status" in changes and changes["status"] is not None:
            changes["is_active"] = changes["status"] == TheaterStatus.ACTIVE.value
        start = to_utc(changes.get("agreement_start", theater.agreement_start))
        end = to_utc(changes.get("agreement_end", theater.agreement_end))
        if start and end and end <= start:
            raise ValidationFailedError("agreement_end must be after agreement_start", code="INVALID_AGREEMENT")

        for key, value in changes.items():
            if value is None and key in JSON_FIELDS:
                continue
            setattr(theater, key, value.value if isinstance(value, TheaterStatus) else value)
        return await self.theaters.update(theater, json_fields=[key for key in JSON_FIELDS if key in changes])

    async def set_active(self, theater_id: int, is_active: bool) -> Theater:
        theater = await self.get(theater_id)
        theater.is_active = is_active
        theater.status = (TheaterStatus.ACTIVE if is_active else TheaterStatus.INACTIVE).value
        logger.info(f"Theater #{theater_id} {'activated' if is_active else 'deactivated'}")
        return await self.theaters.update(theater)

    async def change_password(self, theater_id: int, data: TheaterPasswordUpdate, *, require_current: bool) -> None:
        """
        Replace the owner password.

        Raises:
            ValidationFailedError: ``require_current`` is set and the current password is missing or wrong
        """
        theater = await self.get(theater_id)
        if require_current and not await verify_password_async(data.current_password or "", theater.password_hash):
            raise ValidationFailedError("Current password is incorrect", code="INVALID_CURRENT_PASSWORD")
        theater.password_hash = await hash_password_async(data.new_password)
        await self.theaters.update(theater)
        logger.info(f"Password changed for theater #{theater_id}")

    async def get_settings(self, theater_id: int) -> TheaterSettingsRead:
        theater = await self.get(theater_id)
        return TheaterSettingsRead(theater_id=theater.id, settings=theater.settings, branding=theater.branding)

    async def update_settings(self, theater_id: int, data: TheaterSettingsUpdate) -> TheaterSettingsRead:
        """Merge the keys that were sent into the stored settings and branding."""
        theater = await self.get(theater_id)
        changed = []
        for field in ("settings", "branding"):
            patch = getattr(data, field)
            if patch is None:
                continue
            values = {
                key: value
                for key, value in patch.model_dump(exclude_unset=True).items()
                if value is not None or key.endswith("_url")
            }
            if values:
                setattr(theater, field, {**getattr(theater, field), **values})
                changed.append(field)
        if changed:
            theater = await self.theaters.update(theater, json_fields=changed)
            logger.info(f"Updated {' and '.join(changed)} of theater #{theater_id}")
        return TheaterSettingsRead(theater_id=theater.id, settings=theater.settings, branding=theater.branding)

    async def delete(self, theater_id: int) -> None:
        """Delete a theater together with every row scoped to it."""
        await self.get(theater_id)
        session = self.session

        qr_codes = QRCodeRepository(session)
        seats = QRSeatRepository(session)
        for code in await qr_codes.list_for_theater(theater_id):
            await seats.delete_where(qr_code_id=code.id)

        removed = {}
        for repo in (
            StockEntryRepository(session),
            OrderRepository(session),
            ProductRepository(session),
            CategoryRepository(session),
            ProductTypeRepository(session),
            BannerRepository(session),
            qr_codes,
            QRCodeNameRepository(session),
            TheaterUserRepository(session),
            RoleRepository(session),
        ):
            removed[repo.model.__tablename__] = await repo.delete_where(theater_id=theater_id)

        await self.theaters.delete(theater_id)
        logger.info(f"Deleted theater #{theater_id} and its data: {removed}")

    async def expiring_agreements(self, days: int = EXPIRING_SOON_DAYS) -> List[ExpiringAgreement]:
        now = utc_now()
        theaters = await self.theaters.list_agreements_ending_between(now, now + timedelta(days=days))
        return [
            ExpiringAgreement(
                theater_id=theater.id,
                name=theater.name,
                agreement_end=theater.agreement_end,
                days_remaining=days_until(theater.agreement_end, now),
            )
            for theater in theaters
        ]

    async def agreement_status(self, theater_id: int) -> AgreementStatus:
        theater = await self.get(theater_id)
        status = AgreementStatus(
            theater_id=theater.id, agreement_start=theater.agreement_start, agreement_end=theater.agreement_end
        )
        if theater.agreement_end is None:
            return status
        remaining = days_until(theater.agreement_end)
        status.days_remaining = remaining
        status.expired = remaining <= 0
        status.expiring_soon = 0 < remaining <= EXPIRING_SOON_DAYS
        return status
