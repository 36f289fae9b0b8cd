"""
Product catalog CRUD operations.

Upsert/delete by (id, category_id), vector similarity search and a
term-frequency full-text ranking used by hybrid search.

Dependencies: sqlalchemy, copilot.boundary.db.CRUD.base_crud
System role: Product persistence and retrieval queries
"""

import re
from collections.abc import Sequence

from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.base_crud import VectorCRUD
from copilot.boundary.db.models.product_model import ProductModel
from copilot.core.similarity import DistanceFunction
from copilot.models.product import Product

_TERM_PATTERN = re.compile(r"[a-z0-9]+")


def tokenize_terms(text: str) -> list[str]:
    """Lowercase alphanumeric terms of a text."""
    return _TERM_PATTERN.findall(text.lower())


class ProductCRUD(VectorCRUD[ProductModel]):
    """CRUD operations for ProductModel partitioned by category_id."""

    def __init__(self) -> None:
        """Initialize ProductCRUD with ProductModel."""
        super().__init__(ProductModel)

    async def upsert(self, session: AsyncSession, product: Product) -> ProductModel:
        """
        Create or replace a product.

        Args:
            session: Async database session
            product: Product to store

        Returns:
            ProductModel: Merged row (flushed, not committed)
        """
        row = await session.merge(ProductModel.from_entity(product))
        await session.flush()
        return row

    async def get_in_category(
        self,
        session: AsyncSession,
        product_id: str,
        category_id: str,
    ) -> ProductModel | None:
        """Retrieve a product by id within its category partition."""
        stmt = select(ProductModel).where(
            ProductModel.id == product_id,
            ProductModel.category_id == category_id,
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def delete_in_category(
        self,
        session: AsyncSession,
        product_id: str,
        category_id: str,
    ) -> bool:
        """
        Delete a product by id within its category partition.

        Returns:
            True if a product was deleted, False if not found
        """
        stmt = delete(ProductModel).where(
            ProductModel.id == product_id,
            ProductModel.category_id == category_id,
        )
        result = await session.execute(stmt)
        return result.rowcount > 0

    async def search_by_vector(
        self,
        session: AsyncSession,
        vector: Sequence[float],
        limit: int,
        similarity_threshold: float | None = None,
    ) -> list[Product]:
        """
        Top products by cosine similarity to a query vector.

        Args:
            session: Async database session
            vector: Query embedding
            limit: Maximum number of products
            similarity_threshold: Optional exclusive minimum score

        Returns:
            list[Product]: Most similar first
        """
        matches = await self.vector_search(
            session,
            vector,
            limit=limit,
            similarity_threshold=similarity_threshold,
            distance_function=DistanceFunction.COSINE,
        )
        return [row.to_entity() for row, _ in matches]

    async def search_by_text(
        self,
        session: AsyncSession,
        text: str,
        limit: int,
    ) -> list[Product]:
        """
        Rank products by how often the query terms occur in their text.

        Products matching no term are left out.

        Args:
            session: Async database session
            text: Free-text query
            limit: Maximum number of products

        Returns:
            list[Product]: Best matches first, ties in store order
        """
        terms = set(tokenize_terms(text))
        if not terms:
            return []

        stmt = select(ProductModel).order_by(*self._store_order())
        result = await session.execute(stmt)

        scored: list[tuple[Product, int]] = []
        for row in result.scalars().all():
            product = row.to_entity()
            words = tokenize_terms(product.search_text())
            score = sum(1 for word in words if word in terms)
            if score:
                scored.append((product, score))

        scored.sort(key=lambda pair: pair[1], reverse=True)
        return [product for product, _ in scored[:limit]]


product_crud = ProductCRUD()
