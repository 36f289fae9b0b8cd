"""
Shared settings base.

Every settings group reads the same .env file and ignores unknown keys,
so one file can hold the variables of all groups side by side.

Dependencies: pydantic_settings
System role: Common parent of the configuration groups
"""

from pydantic import Field
from pydantic_settings import BaseSettings as PydanticBaseSettings, SettingsConfigDict


class BaseSettings(PydanticBaseSettings):
    """Settings parent carrying the service-wide fields."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(
        default="development",
        description="Deployment environment name, attached to startup logs",
    )
    log_level: str = Field(
        default="INFO",
        description="Root log level passed to configure_logging()",
    )
