"""
Session API schemas.

Request/response schemas for session operations.

Dependencies: pydantic
System role: Session API contracts
"""

from pydantic import BaseModel, Field


class RenameSessionRequest(BaseModel):
    """Request schema for renaming a session."""

    name: str = Field(min_length=1, max_length=200)


class SessionResponse(BaseModel):
    """Response schema for session operations."""

    id: str
    tenant_id: str
    user_id: str
    session_id: str
    name: str
    tokens: int


class SessionNameResponse(BaseModel):
    """Response schema for a generated session name."""

    session_id: str
    name: str
