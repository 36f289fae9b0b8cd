"""
Message domain entity.

One prompt/completion turn of a session. Created with an empty
completion the moment a prompt arrives, then finalized together with
its session in a single transaction.

Dependencies: pydantic, copilot.core.partition_key
System role: Chat turn state carried through the chat pipeline
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field

from copilot.core.partition_key import PartitionKey


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Message(BaseModel):
    """Prompt and completion pair with token accounting."""

    id: str = Field(default_factory=lambda: str(uuid.uuid4()), description="Unique identifier")
    tenant_id: str = Field(description="Partition key level 1")
    user_id: str = Field(description="Partition key level 2")
    session_id: str = Field(description="Partition key level 3 and owning session")
    timestamp: datetime = Field(default_factory=_utcnow, description="Prompt receipt time (UTC)")
    prompt: str = Field(description="User prompt text")
    prompt_tokens: int = Field(default=0, ge=0)
    completion: str = Field(default="", description="Assistant text, empty until generated")
    completion_tokens: int = Field(default=0, ge=0, description="Tokens in the completion text")
    generation_tokens: int = Field(
        default=0,
        ge=0,
        description="Tokens consumed by system prompt, retrieved data and context",
    )
    cache_hit: bool = Field(default=False)
    elapsed_milliseconds: int = Field(default=0, ge=0)

    @property
    def partition_key(self) -> PartitionKey:
        return PartitionKey(self.tenant_id, self.user_id, self.session_id)

    @property
    def is_completed(self) -> bool:
        return self.completion != ""

    @property
    def context_tokens(self) -> int:
        """Tokens this turn occupies when replayed in a context window."""
        return self.prompt_tokens + self.completion_tokens
