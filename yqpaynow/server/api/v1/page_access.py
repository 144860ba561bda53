"""
Page Access API Endpoints.

CRUD over the global registry of console pages that role permissions refer to.
"""

from typing import List, Optional

from fastapi import APIRouter, HTTPException, status

from yqpaynow.core.database.entities import PageAccess
from yqpaynow.core.database.repositories import PageAccessRepository
from yqpaynow.core.errors import ConflictError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.io.common import MessageResponse
from yqpaynow.core.models.io.page_access import PageAccessCreate, PageAccessRead, PageAccessUpdate
from yqpaynow.server.services.deps import AdminUserDep, CurrentUserDep, SessionDep

logger = get_logger(__name__)

router = APIRouter(tags=["page-access"])


async def _get_or_404(repo: PageAccessRepository, page_id: int) -> PageAccess:
    page = await repo.get_by_id(page_id)
    if page is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Page access {page_id} not found")
    return page


@router.get("/", response_model=List[PageAccessRead], summary="List Pages")
async def list_pages(
    session: SessionDep,
    _: CurrentUserDep,
    category: Optional[str] = None,
    is_active: Optional[bool] = None,
) -> List[PageAccessRead]:
    rows = await PageAccessRepository(session).list(filters={"category": category, "is_active": is_active})
    return [PageAccessRead.model_validate(row) for row in rows]


@router.post(
    "/",
    response_model=PageAccessRead,
    status_code=status.HTTP_201_CREATED,
    summary="Register Page",
    responses={409: {"description": "Page key already registered"}},
)
async def create_page(data: PageAccessCreate, session: SessionDep, _: AdminUserDep) -> PageAccessRead:
    repo = PageAccessRepository(session)
    if await repo.get_by_page(data.page):
        raise ConflictError(f"Page '{data.page}' is already registered", code="PAGE_EXISTS")
    page = await repo.create(PageAccess(**data.model_dump()))
    logger.info(f"Registered page {page.page}")
    return PageAccessRead.model_validate(page)


@router.get("/{page_id}", response_model=PageAccessRead, summary="Get Page")
async def get_page(page_id: int, session: SessionDep, _: CurrentUserDep) -> PageAccessRead:
    return PageAccessRead.model_validate(await _get_or_404(PageAccessRepository(session), page_id))


@router.put("/{page_id}", response_model=PageAccessRead, summary="Update Page")
async def update_page(
    page_id: int, data: PageAccessUpdate, session: SessionDep, _: AdminUserDep
) -> PageAccessRead:
    repo = PageAccessRepository(session)
    page = await _get_or_404(repo, page_id)
    for key, value in data.model_dump(exclude_unset=True).items():
        setattr(page, key, value)
    return PageAccessRead.model_validate(await repo.update(page))


@router.patch("/{page_id}/toggle", response_model=PageAccessRead, summary="Toggle Page")
async def toggle_page(page_id: int, session: SessionDep, _: AdminUserDep) -> PageAccessRead:
    """Flip the page's ``is_active`` flag."""
    repo = PageAccessRepository(session)
    page = await _get_or_404(repo, page_id)
    page.is_active = not page.is_active
    return PageAccessRead.model_validate(await repo.update(page))


@router.delete("/{page_id}", response_model=MessageResponse, summary="Delete Page")
async def delete_page(page_id: int, session: SessionDep, _: AdminUserDep) -> MessageResponse:
    repo = PageAccessRepository(session)
    await _get_or_404(repo, page_id)
    await repo.delete(page_id)
    return MessageResponse(message="Page access deleted successfully")
