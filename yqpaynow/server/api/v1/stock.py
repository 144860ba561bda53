"""
Stock API Endpoints.

The monthly stock ledger of a product. A month opens with the previous
month's closing balance; every write returns the month the entry falls in.
"""

from typing import Optional

from fastapi import APIRouter, Query, status

from yqpaynow.core.database import utc_now
from yqpaynow.core.models.io.common import MessageResponse
from yqpaynow.core.models.io.stock import (
    ClearMonthResponse,
    StockEntryCreate,
    StockEntryUpdate,
    StockMonthResponse,
    StockProductInfo,
)
from yqpaynow.inventory import MonthPeriod
from yqpaynow.server.services.deps import SessionDep, TheaterAccessDep
from yqpaynow.server.services.stock import StockService

router = APIRouter(tags=["stock"])


def _period(year: Optional[int], month: Optional[int]) -> MonthPeriod:
    now = MonthPeriod.containing(utc_now())
    return MonthPeriod(year or now.year, month or now.month)


@router.get(
    "/{theater_id}/{product_id}",
    response_model=StockMonthResponse,
    summary="Monthly Stock Ledger",
    description="Entries of one month with running balances. Defaults to the current UTC month.",
)
async def get_month(
    theater_id: int,
    product_id: int,
    session: SessionDep,
    _: TheaterAccessDep,
    year: Optional[int] = Query(None, ge=2000, le=9999),
    month: Optional[int] = Query(None, ge=1, le=12),
) -> StockMonthResponse:
    return await StockService(session).month(theater_id, product_id, _period(year, month))


@router.post(
    "/{theater_id}/{product_id}",
    response_model=StockMonthResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add Stock Entry",
)
async def add_entry(
    theater_id: int, product_id: int, data: StockEntryCreate, session: SessionDep, user: TheaterAccessDep
) -> StockMonthResponse:
    service = StockService(session)
    entry = await service.add(theater_id, product_id, data, created_by=user.username or None)
    return await service.month(theater_id, product_id, MonthPeriod.containing(entry.entry_date))


@router.post("/{theater_id}/{product_id}/recalculate", response_model=StockProductInfo, summary="Recalculate Stock")
async def recalculate(
    theater_id: int, product_id: int, session: SessionDep, _: TheaterAccessDep
) -> StockProductInfo:
    return await StockService(session).recalculate(theater_id, product_id)


@router.delete(
    "/{theater_id}/{product_id}/clear-month",
    response_model=ClearMonthResponse,
    summary="Clear Month",
    description="Removes the month's manual entries. Entries written by orders are kept.",
)
async def clear_month(
    theater_id: int,
    product_id: int,
    session: SessionDep,
    _: TheaterAccessDep,
    year: int = Query(..., ge=2000, le=9999),
    month: int = Query(..., ge=1, le=12),
) -> ClearMonthResponse:
    deleted, product = await StockService(session).clear_month(theater_id, product_id, MonthPeriod(year, month))
    return ClearMonthResponse(deleted=deleted, current_stock=product.current_stock)


@router.put(
    "/{theater_id}/{product_id}/{entry_id}",
    response_model=StockMonthResponse,
    summary="Update Stock Entry",
    responses={409: {"description": "The entry was written by an order"}},
)
async def update_entry(
    theater_id: int,
    product_id: int,
    entry_id: int,
    data: StockEntryUpdate,
    session: SessionDep,
    _: TheaterAccessDep,
) -> StockMonthResponse:
    service = StockService(session)
    entry = await service.update(theater_id, product_id, entry_id, data)
    return await service.month(theater_id, product_id, MonthPeriod.containing(entry.entry_date))


@router.delete(
    "/{theater_id}/{product_id}/{entry_id}",
    response_model=MessageResponse,
    summary="Delete Stock Entry",
    responses={409: {"description": "The entry was written by an order"}},
)
async def delete_entry(
    theater_id: int, product_id: int, entry_id: int, session: SessionDep, _: TheaterAccessDep
) -> MessageResponse:
    product = await StockService(session).delete(theater_id, product_id, entry_id)
    return MessageResponse(message=f"Stock entry deleted; current stock is {product.current_stock}")
