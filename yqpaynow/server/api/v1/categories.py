"""
Theater Categories API Endpoints.
"""

from typing import Optional

from fastapi import APIRouter, File, Form, Query, UploadFile, status

from yqpaynow.core.models.io.catalog import CategoryListResponse, CategoryRead
from yqpaynow.core.models.io.common import MessageResponse, PaginationInfo
from yqpaynow.server.services.catalog import CategoryService
from yqpaynow.server.services.deps import SessionDep, StorageDep, TheaterAccessDep

router = APIRouter(tags=["theater-categories"])

COLOR_PATTERN = r"^#[0-9A-Fa-f]{6}$"


@router.get("/{theater_id}", response_model=CategoryListResponse, summary="List Categories")
async def list_categories(
    theater_id: int,
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    search: Optional[str] = Query(None, max_length=100),
    is_active: Optional[bool] = None,
) -> CategoryListResponse:
    rows, total = await CategoryService(session).list(
        theater_id, page=page, limit=limit, search=search, is_active=is_active
    )
    return CategoryListResponse(
        data=[CategoryRead.model_validate(row) for row in rows],
        pagination=PaginationInfo.build(page, limit, total),
    )


@router.post(
    "/{theater_id}",
    response_model=CategoryRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Category",
    responses={409: {"description": "Name already used in the theater"}},
)
async def create_category(
    theater_id: int,
    session: SessionDep,
    storage: StorageDep,
    _: TheaterAccessDep,
    name: str = Form(..., min_length=1, max_length=100),
    description: str = Form("", max_length=500),
    color: Optional[str] = Form(None, pattern=COLOR_PATTERN),
    is_active: bool = Form(True),
    sort_order: int = Form(0),
    image: Optional[UploadFile] = File(None),
) -> CategoryRead:
    fields = dict(name=name, description=description, color=color, is_active=is_active, sort_order=sort_order)
    entry = await CategoryService(session, storage).create(theater_id, fields, image)
    return CategoryRead.model_validate(entry)


@router.put("/{theater_id}/{category_id}", response_model=CategoryRead, summary="Update Category")
async def update_category(
    theater_id: int,
    category_id: int,
    session: SessionDep,
    storage: StorageDep,
    _: TheaterAccessDep,
    name: Optional[str] = Form(None, min_length=1, max_length=100),
    description: Optional[str] = Form(None, max_length=500),
    color: Optional[str] = Form(None, pattern=COLOR_PATTERN),
    is_active: Optional[bool] = Form(None),
    sort_order: Optional[int] = Form(None),
    image: Optional[UploadFile] = File(None),
) -> CategoryRead:
    fields = dict(name=name, description=description, color=color, is_active=is_active, sort_order=sort_order)
    entry = await CategoryService(session, storage).update(theater_id, category_id, fields, image)
    return CategoryRead.model_validate(entry)


@router.delete("/{theater_id}/{category_id}", response_model=MessageResponse, summary="Delete Category")
async def delete_category(
    theater_id: int, category_id: int, session: SessionDep, storage: StorageDep, _: TheaterAccessDep
) -> MessageResponse:
    await CategoryService(session, storage).delete(theater_id, category_id)
    return MessageResponse(message="Category deleted successfully")
