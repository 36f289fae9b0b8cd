"""
Product catalog endpoints.

Routes:
- POST   /products/load                        - Load the configured catalog
- PUT    /products                             - Create or replace a product
- DELETE /products/{category_id}/{product_id}  - Delete a product

Dependencies: copilot.application.services.catalog_service
System role: Catalog administration HTTP API
"""

from fastapi import APIRouter, Depends, Response
from pydantic import BaseModel

from copilot.api.deps import get_catalog_service, get_settings_dependency
from copilot.api.routers.errors import to_http_exception
from copilot.application.services import CatalogService
from copilot.configs import Settings
from copilot.core.exceptions import CopilotException, NotFoundError
from copilot.models.product import Product


class CatalogLoadResponse(BaseModel):
    """Outcome of a catalog load."""

    loaded: int
    skipped: int
    already_populated: bool


router = APIRouter(prefix="/products", tags=["products"])


@router.post("/load", response_model=CatalogLoadResponse)
async def load_products(
    catalog_service: CatalogService = Depends(get_catalog_service),
    settings: Settings = Depends(get_settings_dependency),
) -> CatalogLoadResponse:
    """
    Load the product catalog from the configured source.

    Raises:
        HTTPException(422): No source configured
        HTTPException(502): Source is not a JSON array
        HTTPException(503): Source or embedding provider unavailable
    """
    try:
        result = await catalog_service.load_product_data(settings.catalog.product_data_source_uri)
    except CopilotException as e:
        raise to_http_exception(e, "load_products") from e
    return CatalogLoadResponse(
        loaded=result.loaded,
        skipped=result.skipped,
        already_populated=result.already_populated,
    )


@router.put("", response_model=Product, response_model_exclude={"vectors"})
async def upsert_product(
    product: Product,
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> Product:
    """Create or replace a product, embedding it when no vector is supplied."""
    try:
        return await catalog_service.upsert_product(product)
    except CopilotException as e:
        raise to_http_exception(e, "upsert_product") from e


@router.delete("/{category_id}/{product_id}", status_code=204)
async def delete_product(
    category_id: str,
    product_id: str,
    catalog_service: CatalogService = Depends(get_catalog_service),
) -> Response:
    """
    Delete a product.

    Raises:
        HTTPException(404): Product not found
    """
    try:
        deleted = await catalog_service.delete_product(product_id, category_id)
        if not deleted:
            raise NotFoundError(f"Product not found: {product_id}", details={"category_id": category_id})
    except CopilotException as e:
        raise to_http_exception(e, "delete_product") from e
    return Response(status_code=204)
