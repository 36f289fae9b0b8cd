"""
Product catalog service.

Loads the product catalog from an external JSON document and maintains
individual products. Loading is skipped when the catalog already holds
products. Invalid records are logged and skipped; products without an
embedding are embedded before they are stored.

Dependencies: httpx, pydantic, copilot.boundary.db.CRUD.product_crud, copilot.boundary.llm
System role: Catalog ingestion for retrieval
"""

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import httpx
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.product_crud import ProductCRUD, product_crud
from copilot.boundary.llm.provider import CompletionProvider
from copilot.core.exceptions import MalformedUpstreamDataError, ProviderUnavailableError, ValidationError
from copilot.models.product import Product

logger = logging.getLogger(__name__)


@dataclass
class CatalogLoadResult:
    """Outcome of a catalog load."""

    loaded: int = 0
    skipped: int = 0
    already_populated: bool = False


class CatalogService:
    """Product catalog ingestion and maintenance."""

    def __init__(
        self,
        db: AsyncSession,
        provider: CompletionProvider,
        crud: ProductCRUD = product_crud,
        request_timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize catalog service.

        Args:
            db: Async SQLAlchemy session
            provider: Completion provider used to embed products
            crud: Product persistence operations
            request_timeout: Timeout for downloading the catalog
            transport: Optional httpx transport (used to stub the network)
        """
        self.db = db
        self.provider = provider
        self.crud = crud
        self.request_timeout = request_timeout
        self.transport = transport

    async def _fetch_records(self, source: str) -> Any:
        if source.startswith(("http://", "https://")):
            try:
                async with httpx.AsyncClient(
                    timeout=self.request_timeout,
                    follow_redirects=True,
                    transport=self.transport,
                ) as client:
                    response = await client.get(source)
                    response.raise_for_status()
            except httpx.HTTPError as e:
                raise ProviderUnavailableError(
                    f"Could not download product data: {e}", operation="load_products"
                ) from e
            text = response.text
        else:
            text = await run_in_threadpool(Path(source).read_text, encoding="utf-8")

        try:
            return json.loads(text)
        except json.JSONDecodeError as e:
            raise MalformedUpstreamDataError(f"Product data is not valid JSON: {e}") from e

    def _parse_product(self, record: Any, position: int) -> Product | None:
        """Validate one record, returning None (and logging) when it is malformed."""
        try:
            if not isinstance(record, dict):
                raise MalformedUpstreamDataError(
                    f"Product record is a {type(record).__name__}, expected an object"
                )
            try:
                return Product.model_validate(record)
            except PydanticValidationError as e:
                raise MalformedUpstreamDataError(
                    f"Invalid product record: {e.error_count()} validation errors",
                    record_id=str(record.get("id") or ""),
                ) from e
        except MalformedUpstreamDataError as e:
            logger.warning(
                f"{__name__}:load_product_data - Skipping record {position}: {e}",
                extra={"position": position},
            )
            return None

    async def load_product_data(self, source: str) -> CatalogLoadResult:
        """
        Load products from a JSON array at an http(s) URL or a file path.

        Args:
            source: Location of the product document

        Returns:
            CatalogLoadResult: Counts of loaded and skipped records

        Raises:
            ValidationError: If no source is configured
            ProviderUnavailableError: If the document or an embedding cannot be fetched
            MalformedUpstreamDataError: If the document is not a JSON array
        """
        if await self.crud.count(self.db) > 0:
            logger.info(f"{__name__}:load_product_data - Catalog already populated, skipping load")
            return CatalogLoadResult(already_populated=True)

        if not source:
            raise ValidationError("No product data source configured", field="product_data_source_uri")

        records = await self._fetch_records(source)
        if not isinstance(records, list):
            raise MalformedUpstreamDataError("Product data must be a JSON array of products")

        result = CatalogLoadResult()
        try:
            for position, record in enumerate(records):
                product = self._parse_product(record, position)
                if product is None:
                    result.skipped += 1
                    continue
                await self._store(product)
                result.loaded += 1
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:load_product_data - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

        logger.info(
            f"{__name__}:load_product_data - Loaded catalog",
            extra={"loaded": result.loaded, "skipped": result.skipped, "source": source},
        )
        return result

    async def _store(self, product: Product) -> Product:
        if product.vectors is None:
            vectors = await self.provider.embed(product.search_text())
            product = product.model_copy(update={"vectors": vectors})
        await self.crud.upsert(self.db, product)
        return product

    async def upsert_product(self, product: Product) -> Product:
        """
        Create or replace a product, embedding it when it has no vector.

        Returns:
            Product: Stored product
        """
        try:
            stored = await self._store(product)
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:upsert_product - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise
        return stored

    async def delete_product(self, product_id: str, category_id: str) -> bool:
        """
        Delete a product from its category.

        Returns:
            True if deleted, False if not found
        """
        try:
            deleted = await self.crud.delete_in_category(self.db, product_id, category_id)
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:delete_product - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise
        return deleted
