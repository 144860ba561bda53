"""
Theater Banners API Endpoints.

Promotional images shown on the customer menu and kiosk screens. Listing is
public; changes need access to the theater.
"""

from typing import List, Optional

from fastapi import APIRouter, File, Form, HTTPException, UploadFile, status

from yqpaynow.core.database.entities import Banner
from yqpaynow.core.database.repositories import BannerRepository
from yqpaynow.core.models.io.catalog import BannerRead
from yqpaynow.core.models.io.common import MessageResponse
from yqpaynow.server.services.deps import SessionDep, StorageDep, TheaterAccessDep
from yqpaynow.server.services.uploads import replace_stored, store_upload

router = APIRouter(tags=["theater-banners"])


def _folder(theater_id: int) -> str:
    return f"banners/{theater_id}"


async def _get_or_404(repo: BannerRepository, theater_id: int, banner_id: int) -> Banner:
    banner = await repo.get_for_theater(theater_id, banner_id)
    if banner is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"Banner {banner_id} not found")
    return banner


@router.get("/{theater_id}", response_model=List[BannerRead], summary="List Banners")
async def list_banners(theater_id: int, session: SessionDep, is_active: Optional[bool] = None) -> List[BannerRead]:
    rows = await BannerRepository(session).list_for_theater(theater_id, filters={"is_active": is_active})
    return [BannerRead.model_validate(row) for row in rows]


@router.post(
    "/{theater_id}",
    response_model=BannerRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Banner",
    description="Multipart upload; `sort_order` defaults to the number of existing banners.",
)
async def create_banner(
    theater_id: int,
    session: SessionDep,
    storage: StorageDep,
    _: TheaterAccessDep,
    image: UploadFile = File(...),
    is_active: bool = Form(True),
    sort_order: Optional[int] = Form(None),
) -> BannerRead:
    repo = BannerRepository(session)
    if sort_order is None:
        sort_order = await repo.count_for_theater(theater_id)
    stored = await store_upload(storage, image, folder=_folder(theater_id), prefix="banner")
    banner = Banner(theater_id=theater_id, image_url=stored.url, is_active=is_active, sort_order=sort_order)
    return BannerRead.model_validate(await repo.create(banner))


@router.put("/{theater_id}/{banner_id}", response_model=BannerRead, summary="Update Banner")
async def update_banner(
    theater_id: int,
    banner_id: int,
    session: SessionDep,
    storage: StorageDep,
    _: TheaterAccessDep,
    image: Optional[UploadFile] = File(None),
    is_active: Optional[bool] = Form(None),
    sort_order: Optional[int] = Form(None),
) -> BannerRead:
    repo = BannerRepository(session)
    banner = await _get_or_404(repo, theater_id, banner_id)
    if image is not None and image.filename:
        stored = await store_upload(storage, image, folder=_folder(theater_id), prefix="banner")
        replace_stored(storage, banner.image_url)
        banner.image_url = stored.url
    if is_active is not None:
        banner.is_active = is_active
    if sort_order is not None:
        banner.sort_order = sort_order
    return BannerRead.model_validate(await repo.update(banner))


@router.delete("/{theater_id}/{banner_id}", response_model=MessageResponse, summary="Delete Banner")
async def delete_banner(
    theater_id: int, banner_id: int, session: SessionDep, storage: StorageDep, _: TheaterAccessDep
) -> MessageResponse:
    repo = BannerRepository(session)
    banner = await _get_or_404(repo, theater_id, banner_id)
    await repo.delete(banner.id)
    replace_stored(storage, banner.image_url)
    return MessageResponse(message="Banner deleted successfully")
