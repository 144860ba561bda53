"""
Theater catalog: product types (kiosk types), categories and products.

Product types and categories share their shape (a per-theater unique name,
description, optional image) so both go through :class:`NamedEntryService`.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Tuple, Type

from fastapi import UploadFile
from sqlalchemy.ext.asyncio import AsyncSession

from yqpaynow.core.database.entities import Category, Product, ProductType
from yqpaynow.core.database.repositories import (
    CategoryRepository,
    ProductRepository,
    ProductTypeRepository,
    StockEntryRepository,
    TheaterScopedRepository,
    normalize_name,
)
from yqpaynow.core.errors import ConflictError, NotFoundError, ValidationFailedError
from yqpaynow.core.logging_config import get_logger
from yqpaynow.core.models.io.catalog import ProductCreate, ProductUpdate
from yqpaynow.storage import LocalFileStorage

from .uploads import replace_stored, store_upload

logger = get_logger(__name__)


class NamedEntryService:
    """CRUD for per-theater entries with a unique, case-insensitive name and an optional image."""

    label = "Entry"
    folder = "entries"
    repository_class: Type[TheaterScopedRepository] = TheaterScopedRepository
    entity_class: Type[Any] = object

    def __init__(self, session: AsyncSession, storage: Optional[LocalFileStorage] = None):
        self.session = session
        self.storage = storage
        self.repo = self.repository_class(session)

    @property
    def _code(self) -> str:
        return self.label.upper().replace(" ", "_")

    async def get(self, theater_id: int, entry_id: int):
        entry = await self.repo.get_for_theater(theater_id, entry_id)
        if entry is None:
            raise NotFoundError(f"{self.label} {entry_id} not found", code=f"{self._code}_NOT_FOUND")
        return entry

    async def list(
        self,
        theater_id: int,
        *,
        page: int,
        limit: int,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[Any], int]:
        filters = {"is_active": is_active}
        rows = await self.repo.list_for_theater(
            theater_id, limit=limit, offset=(page - 1) * limit, filters=filters, search=search
        )
        total = await self.repo.count_for_theater(theater_id, filters, search)
        return rows, total

    async def _ensure_name_free(self, theater_id: int, name: str) -> None:
        if await self.repo.get_by_normalized_name(theater_id, name):
            raise ConflictError(
                f"{self.label} '{name.strip()}' already exists in this theater", code=f"{self._code}_EXISTS"
            )

    async def _store_image(self, theater_id: int, image: Optional[UploadFile]) -> Optional[str]:
        if image is None or not image.filename:
            return None
        if self.storage is None:
            raise RuntimeError(f"{type(self).__name__} needs storage to accept images")
        stored = await store_upload(self.storage, image, folder=f"{self.folder}/{theater_id}", prefix=self.folder)
        return stored.url

    async def create(self, theater_id: int, fields: Dict[str, Any], image: Optional[UploadFile] = None):
        """
        Raises:
            ConflictError: The name is already used in the theater
        """
        name = fields.pop("name").strip()
        await self._ensure_name_free(theater_id, name)
        image_url = await self._store_image(theater_id, image)
        if image_url:
            fields["image_url"] = image_url
        entry = self.entity_class(
            theater_id=theater_id,
            name=name,
            normalized_name=normalize_name(name),
            **{key: value for key, value in fields.items() if value is not None},
        )
        entry = await self.repo.create(entry)
        logger.info(f"Created {self.label.lower()} {entry.name!r} in theater {theater_id}")
        return entry

    async def update(
        self, theater_id: int, entry_id: int, fields: Dict[str, Any], image: Optional[UploadFile] = None
    ):
        """Apply the non-``None`` fields and optionally replace the image."""
        entry = await self.get(theater_id, entry_id)
        name = fields.pop("name", None)
        if name and normalize_name(name) != entry.normalized_name:
            await self._ensure_name_free(theater_id, name)
            entry.name = name.strip()
            entry.normalized_name = normalize_name(name)
        for key, value in fields.items():
            if value is not None:
                setattr(entry, key, value)
        image_url = await self._store_image(theater_id, image)
        if image_url:
            if self.storage is not None:
                replace_stored(self.storage, entry.image_url)
            entry.image_url = image_url
        return await self.repo.update(entry)

    async def delete(self, theater_id: int, entry_id: int) -> None:
        entry = await self.get(theater_id, entry_id)
        await self._detach(entry)
        await self.repo.delete(entry.id)
        if self.storage is not None:
            replace_stored(self.storage, entry.image_url)
        logger.info(f"Deleted {self.label.lower()} {entry.name!r} from theater {theater_id}")

    async def _detach(self, entry) -> None:
        """Hook for clearing references before the entry is removed."""


class ProductTypeService(NamedEntryService):
    label = "Product type"
    folder = "kiosk-types"
    repository_class = ProductTypeRepository
    entity_class = ProductType

    async def _detach(self, entry: ProductType) -> None:
        for product in await ProductRepository(self.session).list_for_theater(
            entry.theater_id, filters={"product_type_id": entry.id}
        ):
            product.product_type_id = None
            self.session.add(product)
        await self.session.commit()


class CategoryService(NamedEntryService):
    label = "Category"
    folder = "categories"
    repository_class = CategoryRepository
    entity_class = Category

    async def _detach(self, entry: Category) -> None:
        for product in await ProductRepository(self.session).list_for_theater(
            entry.theater_id, filters={"category_id": entry.id}
        ):
            product.category_id = None
            self.session.add(product)
        await self.session.commit()


class ProductService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.products = ProductRepository(session)
        self.categories = CategoryRepository(session)
        self.product_types = ProductTypeRepository(session)

    async def get(self, theater_id: int, product_id: int) -> Product:
        product = await self.products.get_for_theater(theater_id, product_id)
        if product is None:
            raise NotFoundError(f"Product {product_id} not found", code="PRODUCT_NOT_FOUND")
        return product

    async def _check_links(self, theater_id: int, category_id: Optional[int], product_type_id: Optional[int]) -> None:
        """
        Raises:
            ValidationFailedError: The category or product type is not part of the theater
        """
        if category_id is not None and await self.categories.get_for_theater(theater_id, category_id) is None:
            raise ValidationFailedError(
                f"Category {category_id} does not belong to theater {theater_id}", code="INVALID_CATEGORY"
            )
        if product_type_id is not None and await self.product_types.get_for_theater(theater_id, product_type_id) is None:
            raise ValidationFailedError(
                f"Product type {product_type_id} does not belong to theater {theater_id}",
                code="INVALID_PRODUCT_TYPE",
            )

    async def list(
        self,
        theater_id: int,
        *,
        page: int,
        limit: int,
        category_id: Optional[int] = None,
        product_type_id: Optional[int] = None,
        search: Optional[str] = None,
        is_active: Optional[bool] = None,
    ) -> Tuple[List[Product], int]:
        filters = {"category_id": category_id, "product_type_id": product_type_id, "is_active": is_active}
        rows = await self.products.list_for_theater(
            theater_id, limit=limit, offset=(page - 1) * limit, filters=filters, search=search
        )
        total = await self.products.count_for_theater(theater_id, filters, search)
        return rows, total

    async def create(self, theater_id: int, data: ProductCreate) -> Product:
        await self._check_links(theater_id, data.category_id, data.product_type_id)
        product = Product(theater_id=theater_id, **data.model_dump(mode="json"))
        product = await self.products.create(product)
        logger.info(f"Created product {product.name!r} in theater {theater_id}")
        return product

    async def update(self, theater_id: int, product_id: int, data: ProductUpdate) -> Product:
        product = await self.get(theater_id, product_id)
        changes = data.model_dump(mode="json", exclude_unset=True)
        await self._check_links(theater_id, changes.get("category_id"), changes.get("product_type_id"))
        for key, value in changes.items():
            if value is not None or key in ("category_id", "product_type_id"):
                setattr(product, key, value)
        return await self.products.update(product)

    async def delete(self, theater_id: int, product_id: int) -> None:
        product = await self.get(theater_id, product_id)
        await StockEntryRepository(self.session).delete_where(product_id=product.id)
        await self.products.delete(product.id)
        logger.info(f"Deleted product {product.name!r} from theater {theater_id}")
