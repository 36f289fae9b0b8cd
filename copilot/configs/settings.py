"""
Application settings.

One Settings object groups the database, chat, completion and catalog
settings. Each group reads its own environment prefix:

  POSTGRES_*    document store connection
  CHAT_*        context window, cache and retrieval tuning
  COMPLETION_*  models and generation parameters
  CATALOG_*     product data source

Dependencies: copilot.configs
System role: Settings root and cached accessor
"""

from functools import lru_cache

from pydantic import Field

from copilot.configs.base import BaseSettings
from copilot.configs.catalog import CatalogSettings
from copilot.configs.chat import ChatSettings
from copilot.configs.completion import CompletionSettings
from copilot.configs.database import DatabaseSettings


class Settings(BaseSettings):
    """All configuration groups of the service."""

    database: DatabaseSettings = Field(default_factory=DatabaseSettings)
    chat: ChatSettings = Field(default_factory=ChatSettings)
    completion: CompletionSettings = Field(default_factory=CompletionSettings)
    catalog: CatalogSettings = Field(default_factory=CatalogSettings)


@lru_cache
def get_settings() -> Settings:
    """Settings read once from the environment and .env, then shared."""
    return Settings()
