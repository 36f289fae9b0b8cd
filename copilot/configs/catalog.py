"""
Product catalog settings.

Location of the product data source loaded into the catalog store.

Dependencies: pydantic_settings
System role: Product ingestion configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from copilot.configs.base import BaseSettings


class CatalogSettings(BaseSettings):
    """Product catalog data source configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CATALOG_",
        case_sensitive=False,
        extra="ignore",
    )

    product_data_source_uri: str = Field(
        default="",
        description="http(s) URL or filesystem path of the product JSON document",
    )
    request_timeout: float = Field(
        default=30.0,
        description="Timeout in seconds when downloading the product data",
    )
