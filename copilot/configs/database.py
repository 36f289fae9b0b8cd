"""
Document store connection settings.

Sessions, messages, cache entries and products live in one PostgreSQL
database reached through asyncpg. A full SQLAlchemy URL in
POSTGRES_URL takes precedence over the individual fields, which is how
a local SQLite file (sqlite+aiosqlite) is selected for development.

Dependencies: pydantic, pydantic_settings
System role: Connection parameters for the async engine
"""

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from copilot.configs.base import BaseSettings


class DatabaseSettings(BaseSettings):
    """Async engine configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="POSTGRES_",
        case_sensitive=False,
        extra="ignore",
    )

    url: str | None = Field(default=None, description="Complete SQLAlchemy async URL override")
    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="postgres")
    password: SecretStr = Field(default=SecretStr("postgres"))
    db: str = Field(default="cosmicworks", description="Database name")
    require_ssl: bool = Field(default=False, description="Ask asyncpg for a TLS connection")

    pool_size: int = Field(default=10)
    max_overflow: int = Field(default=20)
    pool_timeout: int = Field(default=30, description="Seconds to wait for a pooled connection")
    echo_sql: bool = Field(default=False, description="Log every SQL statement")

    @property
    def is_sqlite(self) -> bool:
        return self.async_database_url.startswith("sqlite")

    @property
    def async_database_url(self) -> str:
        """SQLAlchemy URL for create_async_engine()."""
        if self.url:
            return self.url
        ssl = "?ssl=require" if self.require_ssl else ""
        return (
            f"postgresql+asyncpg://{self.user}:{self.password.get_secret_value()}"
            f"@{self.host}:{self.port}/{self.db}{ssl}"
        )
