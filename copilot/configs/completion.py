"""
Completion provider settings.

Model identifiers and generation parameters for chat completion,
summarization and embedding generation.

Dependencies: pydantic, pydantic_settings
System role: LLM and embedding model configuration
"""

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from copilot.configs.base import BaseSettings


class CompletionSettings(BaseSettings):
    """Chat completion and embedding model configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="COMPLETION_",
        case_sensitive=False,
        extra="ignore",
    )

    chat_model: str = Field(
        default="gemini-2.0-flash",
        description="Chat completion model identifier",
    )
    embedding_model: str = Field(
        default="models/gemini-embedding-001",
        description="Embedding model identifier",
    )
    temperature: float = Field(default=0.2, description="Sampling temperature for chat")
    top_p: float = Field(default=0.7, description="Nucleus sampling for chat")
    max_output_tokens: int = Field(default=1000, description="Completion length limit")
    summary_max_output_tokens: int = Field(
        default=200,
        description="Completion length limit for session name summaries",
    )
    max_rag_tokens: int = Field(
        default=2500,
        description="Token budget for serialized product data in a RAG prompt",
    )
    tokenizer_model: str = Field(
        default="gpt-4o",
        description="Model name used to select the tiktoken encoding",
    )
    google_api_key: SecretStr | None = Field(
        default=None,
        description="Google Generative AI key (falls back to GOOGLE_API_KEY)",
    )
    request_timeout: float | None = Field(
        default=60.0,
        description="Timeout in seconds for a single provider call",
    )
    max_retries: int = Field(
        default=2,
        description="Client-side retries of a provider call before it is reported as failed",
    )
