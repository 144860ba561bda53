"""
Orders API Endpoints.

Customers place orders from the QR menu without logging in; staff place
orders from the POS with their token. Listing, status and payment changes
need access to the order's theater.
"""

from datetime import datetime
from typing import Optional

from fastapi import APIRouter, Query, status

from yqpaynow.core.models.domain.enums import OrderStatus, PaymentStatus
from yqpaynow.core.models.io.common import PaginationInfo, to_utc
from yqpaynow.core.models.io.orders import (
    OrderCreate,
    OrderListResponse,
    OrderPaymentUpdate,
    OrderRead,
    OrderStats,
    OrderStatusUpdate,
)
from yqpaynow.server.services.deps import (
    CurrentUserDep,
    OptionalUserDep,
    SessionDep,
    TheaterAccessDep,
    check_theater_access,
)
from yqpaynow.server.services.orders import OrderService

router = APIRouter(tags=["orders"])


@router.post(
    "/theater",
    response_model=OrderRead,
    status_code=status.HTTP_201_CREATED,
    summary="Place Order",
    description=(
        "Prices are taken from the products at placement time. Authentication is optional; "
        "orders placed with a staff token record the staff member."
    ),
    responses={400: {"description": "Inactive theater or unknown, inactive or unavailable product"}},
)
async def create_order(data: OrderCreate, session: SessionDep, user: OptionalUserDep) -> OrderRead:
    created_by = None
    if user is not None:
        await check_theater_access(session, user, data.theater_id)
        created_by = user.username
    order = await OrderService(session).create(data, created_by=created_by)
    return OrderRead.model_validate(order)


@router.get("/theater-stats", response_model=OrderStats, summary="Theater Order Statistics")
async def theater_stats(theater_id: int, session: SessionDep, _: TheaterAccessDep) -> OrderStats:
    return await OrderService(session).stats(theater_id)


@router.get(
    "/theater/{theater_id}",
    response_model=OrderListResponse,
    summary="List Theater Orders",
    description="Newest first. `search` matches the order number or customer name.",
)
async def list_theater_orders(
    theater_id: int,
    session: SessionDep,
    _: TheaterAccessDep,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    status: Optional[OrderStatus] = None,
    payment_status: Optional[PaymentStatus] = None,
    date_from: Optional[datetime] = None,
    date_to: Optional[datetime] = None,
    search: Optional[str] = Query(None, max_length=100),
) -> OrderListResponse:
    rows, total, summary = await OrderService(session).list(
        theater_id,
        page=page,
        limit=limit,
        status=status.value if status else None,
        payment_status=payment_status.value if payment_status else None,
        date_from=to_utc(date_from),
        date_to=to_utc(date_to),
        search=search,
    )
    return OrderListResponse(
        data=[OrderRead.model_validate(row) for row in rows],
        pagination=PaginationInfo.build(page, limit, total),
        summary=summary,
    )


async def _accessible_order(order_id: int, session, user) -> OrderService:
    service = OrderService(session)
    order = await service.get(order_id)
    await check_theater_access(session, user, order.theater_id)
    return service


@router.get("/{order_id}", response_model=OrderRead, summary="Get Order")
async def get_order(order_id: int, session: SessionDep, user: CurrentUserDep) -> OrderRead:
    service = await _accessible_order(order_id, session, user)
    return OrderRead.model_validate(await service.get(order_id))


@router.put(
    "/{order_id}/status",
    response_model=OrderRead,
    summary="Update Order Status",
    responses={400: {"description": "Transition not allowed from the current status"}},
)
async def update_order_status(
    order_id: int, data: OrderStatusUpdate, session: SessionDep, user: CurrentUserDep
) -> OrderRead:
    service = await _accessible_order(order_id, session, user)
    return OrderRead.model_validate(await service.update_status(order_id, data.status))


@router.put("/{order_id}/payment", response_model=OrderRead, summary="Update Payment")
async def update_order_payment(
    order_id: int, data: OrderPaymentUpdate, session: SessionDep, user: CurrentUserDep
) -> OrderRead:
    service = await _accessible_order(order_id, session, user)
    return OrderRead.model_validate(await service.update_payment(order_id, data))
