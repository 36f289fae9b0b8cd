"""
Chat API schemas.

Request/response schemas for chat operations.

Dependencies: pydantic
System role: Chat API contracts
"""

from datetime import datetime

from pydantic import BaseModel, Field


class ChatRequest(BaseModel):
    """Request schema for a chat prompt."""

    prompt: str = Field(min_length=1, description="User prompt text")


class MessageResponse(BaseModel):
    """Single chat message."""

    id: str
    session_id: str
    timestamp: datetime
    prompt: str
    prompt_tokens: int
    completion: str
    completion_tokens: int
    generation_tokens: int
    cache_hit: bool
    elapsed_milliseconds: int


class ChatHistoryResponse(BaseModel):
    """Response schema for chat history."""

    messages: list[MessageResponse]
    total: int = Field(description="Total number of messages")
