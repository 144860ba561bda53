"""
Products API Endpoints.

The theater menu. Listing is public so the customer menu and kiosks can
read it without a login.
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from yqpaynow.core.models.io.catalog import ProductCreate, ProductListResponse, ProductRead, ProductUpdate
from yqpaynow.core.models.io.common import MessageResponse, PaginationInfo
from yqpaynow.server.services.catalog import ProductService
from yqpaynow.server.services.deps import SessionDep, TheaterAccessDep

router = APIRouter(tags=["products"])


@router.get("/{theater_id}", response_model=ProductListResponse, summary="List Products")
async def list_products(
    theater_id: int,
    session: SessionDep,
    page: int = Query(1, ge=1),
    limit: int = Query(50, ge=1, le=100),
    category_id: Optional[int] = None,
    product_type_id: Optional[int] = None,
    search: Optional[str] = Query(None, max_length=100),
    is_active: Optional[bool] = None,
) -> ProductListResponse:
    rows, total = await ProductService(session).list(
        theater_id,
        page=page,
        limit=limit,
        category_id=category_id,
        product_type_id=product_type_id,
        search=search,
        is_active=is_active,
    )
    return ProductListResponse(
        data=[ProductRead.model_validate(row) for row in rows],
        pagination=PaginationInfo.build(page, limit, total),
    )


@router.post(
    "/{theater_id}",
    response_model=ProductRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create Product",
    responses={400: {"description": "Category or product type belongs to another theater"}},
)
async def create_product(
    theater_id: int, data: ProductCreate, session: SessionDep, _: TheaterAccessDep
) -> ProductRead:
    return ProductRead.model_validate(await ProductService(session).create(theater_id, data))


@router.put("/{theater_id}/{product_id}", response_model=ProductRead, summary="Update Product")
async def update_product(
    theater_id: int, product_id: int, data: ProductUpdate, session: SessionDep, _: TheaterAccessDep
) -> ProductRead:
    return ProductRead.model_validate(await ProductService(session).update(theater_id, product_id, data))


@router.delete("/{theater_id}/{product_id}", response_model=MessageResponse, summary="Delete Product")
async def delete_product(
    theater_id: int, product_id: int, session: SessionDep, _: TheaterAccessDep
) -> MessageResponse:
    await ProductService(session).delete(theater_id, product_id)
    return MessageResponse(message="Product deleted successfully")
