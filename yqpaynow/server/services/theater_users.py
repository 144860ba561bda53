"""
Theater staff accounts.

Usernames are unique across all theaters and every account gets a PIN that
no other staff account uses.
"""

from __future__ import annotations

from typing import List, Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database.entities import TheaterUser
from yqpaynow.core.database.repositories import (
    RoleRepository,
    TheaterRepository,
    TheaterUserRepository,
)
from yqpaynow.core.errors import ConflictError, NotFoundError, ValidationFailedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.io.theater_users import TheaterUserCreate, TheaterUserUpdate
from yqpaynow.core.security import generate_pin, hash_password_async

logger = get_logger(__name__)


class TheaterUserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = TheaterUserRepository(session)
        self.roles = RoleRepository(session)
        self.theaters = TheaterRepository(session)

    async def get(self, user_id: int) -> TheaterUser:
        user = await self.users.get_by_id(user_id)
        if user is None:
            raise NotFoundError(f"Theater user {user_id} not found", code="USER_NOT_FOUND")
        return user

    async def list(
        self,
        theater_id: int,
        *,
        page: int,
        limit: int,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[TheaterUser], int]:
        filters = {"is_active": is_active}
        rows = await self.users.list_for_theater(
            theater_id, limit=limit, offset=(page - 1) * limit, filters=filters, search=search
        )
        return rows, await self.users.count_for_theater(theater_id, filters, search)

    async def _check_role(self, theater_id: int, role_id: Optional[int]) -> None:
        if role_id is None:
            return
        role = await self.roles.get_by_id(role_id)
        if role is None or role.theater_id != theater_id:
            raise ValidationFailedError("Role does not belong to this theater", code="INVALID_ROLE")

    async def create(self, data: TheaterUserCreate) -> TheaterUser:
        if await self.theaters.get_by_id(data.theater_id) is None:
            raise NotFoundError(f"Theater {data.theater_id} not found", code="THEATER_NOT_FOUND")
        if await self.users.get_by_username(data.username):
            raise ConflictError(f"Username '{data.username}' is already taken", code="USERNAME_EXISTS")
        await self._check_role(data.theater_id, data.role_id)

        user = TheaterUser(
            **data.model_dump(exclude={"password"}),
            password_hash=await hash_password_async(data.password),
            pin=generate_pin(await self.users.all_pins()),
        )
        user = await self.users.create(user)
        logger.info(f"Created staff user {user.username} for theater {user.theater_id}")
        return user

    async def update(self, user_id: int, data: TheaterUserUpdate) -> TheaterUser:
        user = await self.get(user_id)
        changes = data.model_dump(exclude_unset=True, exclude={"password", "regenerate_pin"})
        if "role_id" in changes:
            await self._check_role(user.theater_id, changes["role_id"])
        for key, value in changes.items():
            setattr(user, key, value)
        if data.password:
            user.password_hash = await hash_password_async(data.password)
        if data.regenerate_pin:
            user.pin = generate_pin(await self.users.all_pins())
            logger.info(f"Issued a new PIN to staff user {user.username}")
        return await self.users.update(user)

    async def delete(self, user_id: int) -> None:
        user = await self.get(user_id)
        await self.users.delete(user_id)
        logger.info(f"Deleted staff user {user.username} of theater {user.theater_id}")
