"""
Semantic cache entry.

Dependencies: pydantic
System role: Cached completion keyed by prompt-sequence embedding
"""

import uuid
from datetime import datetime, timezone

from pydantic import BaseModel, Field


class CacheItem(BaseModel):
    """
    A previously generated completion and the prompts that produced it.

    Entries are not linked to sessions; they are found by embedding
    proximity of the joined prompt sequence only.
    """

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    vectors: list[float] = Field(description="Embedding of the joined prompts")
    prompts: str = Field(description="Joined prompt sequence of the context window")
    completion: str = Field(description="Completion returned for the prompt sequence")
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
