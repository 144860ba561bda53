"""
First-run data: the platform super admin and the page access registry.

Both functions are idempotent and are called from the server lifespan.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database.entities import Admin, PageAccess
from yqpaynow.core.database.repositories import AdminRepository, PageAccessRepository
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.domain.enums import AdminRole
from yqpaynow.core.models.domain.permissions import ALL_PAGES
from yqpaynow.core.security import hash_password_async

logger = get_logger(__name__)


async def ensure_super_admin(
    session: AsyncSession, email: str, password: str, name: str = "Super Admin"
) -> Optional[Admin]:
    """
    Create the super admin account unless one with ``email`` exists.

    Returns:
        The created admin, or None when the account was already there
    """
    repo = AdminRepository(session)
    if await repo.get_by_email(email):
        logger.debug(f"Super admin {email} already exists")
        return None
    admin = Admin(
        email=email.strip().lower(),
        password_hash=await hash_password_async(password),
        name=name,
        role=AdminRole.SUPER_ADMIN.value,
    )
    admin = await repo.create(admin)
    logger.info(f"Created super admin {admin.email}")
    return admin


async def ensure_default_pages(session: AsyncSession) -> int:
    """Register every known console page missing from the registry; returns how many were added."""
    repo = PageAccessRepository(session)
    added = 0
    for order, definition in enumerate(ALL_PAGES):
        if await repo.get_by_page(definition.page):
            continue
        session.add(
            PageAccess(
                page=definition.page,
                page_name=definition.page_name,
                route=definition.route,
                category=definition.category,
                description=definition.description or None,
                sort_order=order,
            )
        )
        added += 1
    if added:
        await session.commit()
        logger.info(f"Registered {added} console pages")
    return added
