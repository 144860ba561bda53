"""
Base repository interfaces and utilities.

This module provides the foundational repository patterns used across all
repository implementations in the centralized database layer.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar

from sqlalchemy import delete, func
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.attributes import flag_modified
from sqlmodel import SQLModel, select

from ..base import utc_now

# Generic type for SQLModel entities
EntityType = TypeVar("EntityType", bound=SQLModel)


class AsyncBaseRepository(ABC, Generic[EntityType]):
    """Base async repository interface with common CRUD operations using SQLModel."""

    def __init__(self, session: AsyncSession, model: Type[EntityType]) -> None:
        """Initialize repository with async database session and SQLModel entity class.

        Args:
            session: Async session for database operations
            model: SQLModel entity class for this repository
        """
        self.session = session
        self.model = model

    @abstractmethod
    async def create(self, entity: EntityType) -> EntityType:
        """Create a new entity record.

        Args:
            entity: SQLModel instance to persist

        Returns:
            Persisted entity with generated fields populated
        """

    @abstractmethod
    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        """Get entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            Entity instance or None if not found
        """

    @abstractmethod
    async def update(self, entity: EntityType) -> EntityType:
        """Update an existing entity record.

        Args:
            entity: SQLModel instance with updated fields

        Returns:
            Updated entity instance
        """

    @abstractmethod
    async def delete(self, entity_id: int) -> bool:
        """Delete entity by its primary identifier.

        Args:
            entity_id: Primary key value

        Returns:
            True if deleted, False if not found
        """

    @abstractmethod
    async def list(
        self, limit: Optional[int] = None, offset: Optional[int] = None, filters: Optional[Dict[str, Any]] = None
    ) -> List[EntityType]:
        """List entities with optional pagination and filtering.

        Args:
            limit: Maximum number of records to return
            offset: Number of records to skip
            filters: Dictionary of field filters

        Returns:
            List of entity instances
        """


class QueryBuilder:
    """Utility class for building SQLModel-based database queries."""

    @staticmethod
    def apply_filters(stmt, model: Type[EntityType], filters: Dict[str, Any]):
        """Apply equality filters to a select statement, skipping ``None`` values and unknown fields."""
        for key, value in filters.items():
            if value is not None and hasattr(model, key):
                stmt = stmt.where(getattr(model, key) == value)
        return stmt

    @staticmethod
    def apply_search(stmt, model: Type[EntityType], search: Optional[str], fields: Sequence[str]):
        """Apply a case-insensitive substring match across ``fields``."""
        if not search:
            return stmt
        pattern = f"%{search.strip()}%"
        clauses = [getattr(model, name).ilike(pattern) for name in fields]
        if not clauses:
            return stmt
        condition = clauses[0]
        for clause in clauses[1:]:
            condition = condition | clause
        return stmt.where(condition)

    @staticmethod
    def apply_pagination(stmt, limit: Optional[int], offset: Optional[int]):
        """Apply limit/offset to a select statement."""
        if limit is not None:
            stmt = stmt.limit(limit)
        if offset is not None:
            stmt = stmt.offset(offset)
        return stmt


class SqlModelRepository(AsyncBaseRepository[EntityType]):
    """Default SQL implementation of the repository interface.

    Subclasses set ``search_fields`` and ``default_order`` and add table
    specific queries.
    """

    search_fields: Sequence[str] = ()
    default_order: Sequence[str] = ("id",)

    async def create(self, entity: EntityType) -> EntityType:
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def get_by_id(self, entity_id: int) -> Optional[EntityType]:
        stmt = select(self.model).where(self.model.id == entity_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def update(self, entity: EntityType, json_fields: Sequence[str] = ()) -> EntityType:
        """Persist changes; ``json_fields`` lists JSON columns replaced in place."""
        if hasattr(entity, "updated_at"):
            entity.updated_at = utc_now()
        for name in json_fields:
            flag_modified(entity, name)
        self.session.add(entity)
        await self.session.commit()
        await self.session.refresh(entity)
        return entity

    async def delete(self, entity_id: int) -> bool:
        entity = await self.get_by_id(entity_id)
        if entity is None:
            return False
        await self.session.delete(entity)
        await self.session.commit()
        return True

    def _ordered(self, stmt):
        return stmt.order_by(*(getattr(self.model, name) for name in self.default_order))

    def _filtered(self, stmt, filters: Optional[Dict[str, Any]], search: Optional[str] = None):
        if filters:
            stmt = QueryBuilder.apply_filters(stmt, self.model, filters)
        return QueryBuilder.apply_search(stmt, self.model, search, self.search_fields)

    async def list(
        self,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
    ) -> List[EntityType]:
        stmt = self._filtered(select(self.model), filters, search)
        stmt = QueryBuilder.apply_pagination(self._ordered(stmt), limit, offset)
        result = await self.session.execute(stmt)
        return list(result.scalars().all())

    async def count(self, filters: Optional[Dict[str, Any]] = None, search: Optional[str] = None) -> int:
        stmt = self._filtered(select(func.count()).select_from(self.model), filters, search)
        result = await self.session.execute(stmt)
        return int(result.scalar_one())

    async def delete_where(self, **conditions: Any) -> int:
        """Bulk delete rows matching every equality condition; returns the row count."""
        stmt = delete(self.model)
        for key, value in conditions.items():
            stmt = stmt.where(getattr(self.model, key) == value)
        result = await self.session.execute(stmt)
        await self.session.commit()
        return result.rowcount or 0


class TheaterScopedRepository(SqlModelRepository[EntityType]):
    """Repository for tables keyed by ``theater_id``."""

    async def get_for_theater(self, theater_id: int, entity_id: int) -> Optional[EntityType]:
        stmt = select(self.model).where(self.model.id == entity_id, self.model.theater_id == theater_id)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_for_theater(
        self,
        theater_id: int,
        *,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
        filters: Optional[Dict[str, Any]] = None,
        search: Optional[str] = None,
    ) -> List[EntityType]:
        return await self.list(limit, offset, {**(filters or {}), "theater_id": theater_id}, search)

    async def count_for_theater(
        self, theater_id: int, filters: Optional[Dict[str, Any]] = None, search: Optional[str] = None
    ) -> int:
        return await self.count({**(filters or {}), "theater_id": theater_id}, search)

    async def get_by_normalized_name(self, theater_id: int, name: str) -> Optional[EntityType]:
        """Case-insensitive name lookup for tables with a ``normalized_name`` column."""
        stmt = select(self.model).where(
            self.model.theater_id == theater_id, self.model.normalized_name == normalize_name(name)
        )
        result = await self.session.execute(stmt)
        return result.scalars().first()


def normalize_name(name: str) -> str:
    """Lower-case, trimmed form used for per-theater uniqueness checks."""
    return name.strip().lower()
