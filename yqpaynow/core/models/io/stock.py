"""
Schema models for the per-product stock ledger.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from yqpaynow.core.models.domain.enums import StockEntryType

from .common import to_utc


def _check_quantity(entry_type: Optional[StockEntryType], quantity: Optional[int]) -> None:
    if quantity is None:
        return
    if entry_type == StockEntryType.ADJUSTMENT:
        if quantity == 0:
            raise ValueError("Adjustment quantity must not be zero")
    elif quantity <= 0:
        raise ValueError("Quantity must be greater than 0")


class StockEntryCreate(BaseModel):
    """A manual ledger entry. Only ADJUSTMENT takes a negative quantity."""

    entry_date: datetime
    entry_type: StockEntryType
    quantity: int
    expire_date: Optional[datetime] = None
    batch_number: Optional[str] = Field(default=None, max_length=64)
    notes: str = Field(default="", max_length=500)

    @field_validator("entry_date", "expire_date")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)

    @model_validator(mode="after")
    def _check(self) -> "StockEntryCreate":
        _check_quantity(self.entry_type, self.quantity)
        return self


class StockEntryUpdate(BaseModel):
    entry_date: Optional[datetime] = None
    entry_type: Optional[StockEntryType] = None
    quantity: Optional[int] = None
    expire_date: Optional[datetime] = None
    batch_number: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=500)

    @field_validator("entry_date", "expire_date")
    @classmethod
    def _utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        return to_utc(value)


class StockEntryRead(BaseModel):
    """A ledger entry with the running columns replayed up to it."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    product_id: int
    entry_date: datetime
    entry_type: str
    quantity: int
    expire_date: Optional[datetime] = None
    batch_number: Optional[str] = None
    notes: str = ""
    order_id: Optional[int] = None
    created_by: Optional[str] = None
    carry_forward: int = 0
    stock_added: int = 0
    used_stock: int = 0
    expired_stock: int = 0
    damage_stock: int = 0
    balance: int = 0
    created_at: datetime
    updated_at: datetime


class StockStatistics(BaseModel):
    opening_balance: int
    total_added: int
    total_sold: int
    total_expired: int
    total_damaged: int
    closing_balance: int


class StockPeriod(BaseModel):
    year: int
    month: int
    month_name: str
    start: datetime
    end: datetime


class StockProductInfo(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    track_stock: bool
    current_stock: int
    min_stock: int
    stock_status: str


class StockMonthResponse(BaseModel):
    """One product's ledger for one month."""

    entries: List[StockEntryRead]
    current_stock: int
    statistics: StockStatistics
    period: StockPeriod
    product: StockProductInfo


class ClearMonthResponse(BaseModel):
    success: bool = True
    deleted: int
    current_stock: int
