"""
Schema models for banners, product types (kiosk types), categories and products.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from yqpaynow.core.models.domain.enums import GSTType

from .common import PaginationInfo


class BannerRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    image_url: str
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class ProductTypeRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    name: str
    description: str
    image_url: Optional[str] = None
    is_active: bool
    sort_order: int
    created_at: datetime
    updated_at: datetime


class ProductTypeListResponse(BaseModel):
    data: List[ProductTypeRead]
    pagination: PaginationInfo


class CategoryRead(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    name: str
    description: str
    image_url: Optional[str] = None
    color: str
    sort_order: int
    is_active: bool
    created_at: datetime
    updated_at: datetime


class CategoryListResponse(BaseModel):
    data: List[CategoryRead]
    pagination: PaginationInfo


class ProductBase(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    description: str = Field(default="", max_length=1000)
    category_id: Optional[int] = None
    product_type_id: Optional[int] = None
    sku: Optional[str] = Field(default=None, max_length=64)
    price: float = Field(ge=0)
    tax_rate: float = Field(default=0.0, ge=0, le=100)
    gst_type: GSTType = GSTType.EXCLUDE
    discount_percentage: float = Field(default=0.0, ge=0, le=100)
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_active: bool = True
    is_available: bool = True
    sort_order: int = 0
    track_stock: bool = False
    min_stock: int = Field(default=0, ge=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    description: Optional[str] = Field(default=None, max_length=1000)
    category_id: Optional[int] = None
    product_type_id: Optional[int] = None
    sku: Optional[str] = Field(default=None, max_length=64)
    price: Optional[float] = Field(default=None, ge=0)
    tax_rate: Optional[float] = Field(default=None, ge=0, le=100)
    gst_type: Optional[GSTType] = None
    discount_percentage: Optional[float] = Field(default=None, ge=0, le=100)
    image_url: Optional[str] = Field(default=None, max_length=500)
    is_active: Optional[bool] = None
    is_available: Optional[bool] = None
    sort_order: Optional[int] = None
    track_stock: Optional[bool] = None
    min_stock: Optional[int] = Field(default=None, ge=0)


class ProductRead(ProductBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    theater_id: int
    current_stock: int = 0
    stock_status: str = "unlimited"
    created_at: datetime
    updated_at: datetime


class ProductListResponse(BaseModel):
    data: List[ProductRead]
    pagination: PaginationInfo
