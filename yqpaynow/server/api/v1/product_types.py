"""
Theater Kiosk Types API Endpoints.

Product types group products on the self-service kiosk screens.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from yqpaynow.core.models.io.catalog import ProductTypeListResponse, ProductTypeRead
from yqpaynow.core.models.io.common import MessageResponse, PaginationInfo
from yqpaynow.server.services.catalog import ProductTypeService
from yqpaynow.server.services.deps import SessionDep, StorageDep, TheaterAccessDep

router = APIRouter(tags=["theater-kiosk-types"])


@router.get("/{theater_id}", response_model=ProductTypeListResponse, summary="List Kiosk Types")
async def list_product_types(
    theater_id: int,
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    is_active: Optional[bool] = None,
) -> ProductTypeListResponse:
    rows, total = await ProductTypeService(session).list(
        theater_id, page=page, limit=limit, search=search, is_active=is_active
    )
    return ProductTypeListResponse(
        data=[ProductTypeRead.model_validate(row) for row in rows],
        pagination=PaginationInfo.build(page, limit, total),
    )


@router.post(
    "/{theater_id}",
    response_model=ProductTypeRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Kiosk Type",
    responses={409: {"description": "Name already used in the theater"}},
)
async def create_product_type(
    theater_id: int,
    session: SessionDep,
    storage: StorageDep,
    _: TheaterAccessDep,
    name: str = Form(..., min_length=1, max_length=100),
    description: str = Form("", max_length=500),
    is_active: bool = Form(True),
    sort_order: int = Form(0),
    image: Optional[UploadFile] = File(None),
) -> ProductTypeRead:
    fields = dict(name=name, description=description, is_active=is_active, sort_order=sort_order)
    entry = await ProductTypeService(session, storage).create(theater_id, fields, image)
    return ProductTypeRead.model_validate(entry)


@router.put("/{theater_id}/{type_id}", response_model=ProductTypeRead, summary="Update Kiosk Type")
async def update_product_type(
    theater_id: int,
    type_id: int,
    session: SessionDep,
    storage: StorageDep,
    _: TheaterAccessDep,
    name: Optional[str] = Form(None, min_length=1, max_length=100),
    description: Optional[str] = Form(None, max_length=500),
    is_active: Optional[bool] = Form(None),
    sort_order: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
) -> ProductTypeRead:
    fields = dict(name=name, description=description, is_active=is_active, sort_order=sort_order)
    entry = await ProductTypeService(session, storage).update(theater_id, type_id, fields, image)
    return ProductTypeRead.model_validate(entry)


@router.delete("/{theater_id}/{type_id}", response_model=MessageResponse, summary="Delete Kiosk Type")
async def delete_product_type(
    theater_id: int, type_id: int, session: SessionDep, storage: StorageDep, _: TheaterAccessDep
) -> MessageResponse:
    """Products of the type stay in the catalog without a type."""
    await ProductTypeService(session, storage).delete(theater_id, type_id)
    return MessageResponse(message="Kiosk type deleted successfully")
