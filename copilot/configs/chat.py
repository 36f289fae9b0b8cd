"""
Chat orchestration settings.

Context window sizing, semantic cache thresholds and retrieval limits
used by the chat orchestrator.

Dependencies: pydantic, pydantic_settings
System role: Chat pipeline tuning
"""

from enum import Enum

from pydantic import Field, field_validator
from pydantic_settings import SettingsConfigDict

from copilot.configs.base import BaseSettings


class ContextWindowPolicy(str, Enum):
    """How the conversational context window is bounded."""

    DEPTH = "depth"
    TOKENS = "tokens"


class ChatSettings(BaseSettings):
    """Chat orchestrator configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="CHAT_",
        case_sensitive=False,
        extra="ignore",
    )

    max_context_window: int = Field(
        default=3,
        description="Maximum number of messages in a depth-bounded context window",
    )
    context_window_policy: ContextWindowPolicy = Field(
        default=ContextWindowPolicy.DEPTH,
        description="Context window policy: 'depth' (message count) or 'tokens'",
    )
    max_context_tokens: int = Field(
        default=500,
        description="Token ceiling for a token-bounded context window",
    )
    cache_similarity_score: float = Field(
        default=0.99,
        description="Similarity a cached completion must exceed to be reused",
    )
    cache_ttl_seconds: int | None = Field(
        default=86400,
        description="Lifetime of a cache entry in seconds (None disables expiry)",
    )
    product_max_results: int = Field(
        default=10,
        description="Maximum number of products retrieved per completion",
    )
    product_similarity_score: float | None = Field(
        default=None,
        description="Optional minimum similarity for retrieved products",
    )
    use_hybrid_search: bool = Field(
        default=False,
        description="Fuse vector and full-text product rankings",
    )

    @field_validator("max_context_window", "max_context_tokens", "product_max_results")
    @classmethod
    def _positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"value must be >= 1, got {v}")
        return v

    @field_validator("cache_similarity_score")
    @classmethod
    def _similarity_range(cls, v: float) -> float:
        if not -1.0 <= v <= 1.0:
            raise ValueError(f"cache_similarity_score must be within [-1, 1], got {v}")
        return v
