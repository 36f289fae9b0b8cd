"""
Semantic cache CRUD operations.

Insert, nearest-neighbour lookup and bulk deletion of cached
completions. Candidates are scanned oldest insert first, so among
equally similar entries the first inserted wins.

Dependencies: sqlalchemy, copilot.boundary.db.CRUD.base_crud
System role: Cache persistence operations
"""

from collections.abc import Sequence
from datetime import datetime
from typing import Any

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.base_crud import VectorCRUD
from copilot.boundary.db.models.cache_item_model import CacheItemModel
from copilot.core.similarity import DistanceFunction
from copilot.models.cache_item import CacheItem


class CacheCRUD(VectorCRUD[CacheItemModel]):
    """CRUD operations for CacheItemModel."""

    def __init__(self) -> None:
        """Initialize CacheCRUD with CacheItemModel."""
        super().__init__(CacheItemModel)

    def _store_order(self) -> Sequence[Any]:
        return (CacheItemModel.created_at, CacheItemModel.id)

    async def insert(self, session: AsyncSession, item: CacheItem) -> CacheItemModel:
        """
        Add a cache entry. Never replaces an existing entry.

        Args:
            session: Async database session
            item: Cache entry to store

        Returns:
            CacheItemModel: Persisted row (flushed, not committed)
        """
        row = CacheItemModel.from_entity(item)
        session.add(row)
        await session.flush()
        return row

    async def find_nearest(
        self,
        session: AsyncSession,
        vector: Sequence[float],
        similarity_threshold: float,
        not_before: datetime | None = None,
    ) -> tuple[CacheItemModel, float] | None:
        """
        Find the single closest entry scoring strictly above a threshold.

        Args:
            session: Async database session
            vector: Query embedding
            similarity_threshold: Minimum similarity (exclusive)
            not_before: Ignore entries created before this time

        Returns:
            (row, score) of the best match, or None if nothing qualifies
        """
        filters = []
        if not_before is not None:
            filters.append(CacheItemModel.created_at >= not_before)

        matches = await self.vector_search(
            session,
            vector,
            limit=1,
            similarity_threshold=similarity_threshold,
            distance_function=DistanceFunction.COSINE,
            filters=filters,
        )
        return matches[0] if matches else None

    async def clear(self, session: AsyncSession) -> int:
        """Delete every cache entry and return how many were removed."""
        result = await session.execute(delete(CacheItemModel))
        return result.rowcount or 0

    async def purge_older_than(self, session: AsyncSession, cutoff: datetime) -> int:
        """Delete entries created before cutoff and return how many were removed."""
        result = await session.execute(
            delete(CacheItemModel).where(CacheItemModel.created_at < cutoff)
        )
        return result.rowcount or 0


cache_crud = CacheCRUD()
