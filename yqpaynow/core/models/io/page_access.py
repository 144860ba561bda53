"""Schema models for the page access registry."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class PageAccessBase(BaseModel):
    page: str = Field(min_length=1, max_length=100)
    page_name: str = Field(min_length=1, max_length=100)
    route: str = Field(min_length=1, max_length=255)
    category: str = Field(default="theater", max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    required_role: Optional[str] = Field(default=None, max_length=50)
    sort_order: int = 0
    is_active: bool = True


class PageAccessCreate(PageAccessBase):
    pass


class PageAccessUpdate(BaseModel):
    page_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    route: Optional[str] = Field(default=None, min_length=1, max_length=255)
    category: Optional[str] = Field(default=None, max_length=50)
    description: Optional[str] = Field(default=None, max_length=500)
    required_role: Optional[str] = Field(default=None, max_length=50)
    sort_order: Optional[int] = None
    is_active: Optional[bool] = None


class PageAccessRead(PageAccessBase):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: datetime
    updated_at: datetime
