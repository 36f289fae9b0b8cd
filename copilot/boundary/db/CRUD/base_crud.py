"""
Shared CRUD base classes.

BaseCRUD holds the primary-key operations every store needs. VectorCRUD
adds a similarity query over a JSON ``vectors`` column, scored in
Python, for the cache and catalog tables.

Dependencies: sqlalchemy, copilot.core.similarity
System role: Foundation for all database CRUD operations
"""

from collections.abc import Sequence
from typing import Any, Generic, TypeVar

from sqlalchemy import ColumnElement, delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.base import Base
from copilot.core.similarity import DistanceFunction, similarity_score

ModelT = TypeVar("ModelT", bound=Base)


class BaseCRUD(Generic[ModelT]):
    """
    Primary-key operations for one ORM model.

    Methods only execute statements; flushing and committing is left to
    the caller.
    """

    def __init__(self, model: type[ModelT]) -> None:
        self.model = model

    async def delete_by_id(self, session: AsyncSession, id: str) -> bool:
        """Delete a row by id. Returns False when no row matched."""
        stmt = delete(self.model).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def exists(self, session: AsyncSession, id: str) -> bool:
        """True when a row with this id is stored."""
        stmt = select(self.model.id).where(self.model.id == id)
        result = await session.execute(stmt)
        return result.scalar_one_or_none() is not None

    async def count(self, session: AsyncSession) -> int:
        """Count all records of the model."""
        stmt = select(func.count()).select_from(self.model)
        result = await session.execute(stmt)
        return result.scalar_one()


class VectorCRUD(BaseCRUD[ModelT]):
    """
    CRUD base for models carrying an embedding in a ``vectors`` column.

    Similarity is computed by scanning candidate rows; rows are read in
    store order so that equally similar records keep that order.
    """

    def _store_order(self) -> Sequence[Any]:
        return (self.model.id,)

    async def vector_search(
        self,
        session: AsyncSession,
        vector: Sequence[float],
        limit: int | None = None,
        similarity_threshold: float | None = None,
        distance_function: DistanceFunction = DistanceFunction.COSINE,
        filters: Sequence[ColumnElement[bool]] = (),
    ) -> list[tuple[ModelT, float]]:
        """
        Rank records by similarity to a query vector.

        Args:
            session: Async database session
            vector: Query embedding
            limit: Maximum number of results (None for all)
            similarity_threshold: Keep only scores strictly greater than this
            distance_function: Function used to score vectors
            filters: Extra WHERE clauses narrowing the candidates

        Returns:
            list[tuple[ModelT, float]]: (record, score) pairs, most similar first
        """
        stmt = select(self.model).where(*filters).order_by(*self._store_order())
        result = await session.execute(stmt)

        scored: list[tuple[ModelT, float]] = []
        for row in result.scalars().all():
            if not row.vectors:
                continue
            score = similarity_score(vector, row.vectors, distance_function)
            if similarity_threshold is not None and score <= similarity_threshold:
                continue
            scored.append((row, score))

        # sort is stable: ties keep store order
        scored.sort(key=lambda pair: pair[1], reverse=True)
        if limit is not None:
            return scored[:limit]
        return scored
