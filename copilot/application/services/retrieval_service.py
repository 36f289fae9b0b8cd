"""
Product retrieval service.

Retrieval client of the chat orchestrator: top-K product search by
vector similarity, optionally fused with a full-text ranking.

Dependencies: sqlalchemy, copilot.boundary.db.CRUD.product_crud, copilot.core.similarity
System role: RAG retrieval of product records
"""

import logging
from collections.abc import Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.product_crud import ProductCRUD, product_crud
from copilot.core.exceptions import RetrievalError
from copilot.core.similarity import reciprocal_rank_fusion
from copilot.models.product import Product

logger = logging.getLogger(__name__)


class RetrievalService:
    """Product search over the catalog store."""

    def __init__(
        self,
        db: AsyncSession,
        crud: ProductCRUD = product_crud,
        similarity_threshold: float | None = None,
    ) -> None:
        """
        Initialize retrieval service.

        Args:
            db: Async SQLAlchemy session
            crud: Product persistence operations
            similarity_threshold: Optional exclusive minimum vector score
        """
        self.db = db
        self.crud = crud
        self.similarity_threshold = similarity_threshold

    async def search_products(self, vector: Sequence[float], max_results: int) -> list[Product]:
        """
        Top products by vector similarity.

        Args:
            vector: Query embedding
            max_results: Maximum number of products

        Returns:
            list[Product]: Most relevant first (may be empty)

        Raises:
            RetrievalError: If the catalog query fails
        """
        try:
            products = await self.crud.search_by_vector(
                self.db, vector, max_results, similarity_threshold=self.similarity_threshold
            )
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:search_products - {type(e).__name__}: {e}")
            raise RetrievalError(f"Product search failed: {e}") from e

        logger.info(f"{__name__}:search_products - Retrieved {len(products)} products")
        return products

    async def hybrid_search_products(
        self,
        text: str,
        vector: Sequence[float],
        max_results: int,
    ) -> list[Product]:
        """
        Top products by reciprocal rank fusion of vector and full-text rankings.

        Args:
            text: Free-text query
            vector: Query embedding
            max_results: Maximum number of products

        Returns:
            list[Product]: Most relevant first (may be empty)

        Raises:
            RetrievalError: If a catalog query fails
        """
        try:
            by_vector = await self.crud.search_by_vector(
                self.db, vector, max_results, similarity_threshold=self.similarity_threshold
            )
            by_text = await self.crud.search_by_text(self.db, text, max_results)
        except SQLAlchemyError as e:
            logger.error(f"{__name__}:hybrid_search_products - {type(e).__name__}: {e}")
            raise RetrievalError(f"Hybrid product search failed: {e}") from e

        products = {product.id: product for product in [*by_vector, *by_text]}
        fused = reciprocal_rank_fusion([
            [product.id for product in by_vector],
            [product.id for product in by_text],
        ])

        logger.info(
            f"{__name__}:hybrid_search_products - Fused rankings",
            extra={"vector_hits": len(by_vector), "text_hits": len(by_text)},
        )
        return [products[product_id] for product_id in fused[:max_results]]
