"""
Session domain entity.

A chat session owned by one (tenant, user) pair. The session id doubles
as the third level of the partition key shared with its messages.

Dependencies: pydantic, copilot.core.partition_key
System role: Session state carried through the chat pipeline
"""

import uuid

from pydantic import BaseModel, Field

from copilot.core.partition_key import PartitionKey

DEFAULT_SESSION_NAME = "New Chat"


class Session(BaseModel):
    """Conversation session with a running token cost."""

    id: str = Field(description="Unique identifier, equal to session_id")
    tenant_id: str = Field(description="Partition key level 1")
    user_id: str = Field(description="Partition key level 2")
    session_id: str = Field(description="Partition key level 3")
    name: str = Field(default=DEFAULT_SESSION_NAME, description="Display label")
    tokens: int = Field(default=0, ge=0, description="Tokens consumed by this session")

    @classmethod
    def new(cls, tenant_id: str, user_id: str) -> "Session":
        """Create an empty session with a freshly generated id."""
        session_id = str(uuid.uuid4())
        return cls(id=session_id, tenant_id=tenant_id, user_id=user_id, session_id=session_id)

    @property
    def partition_key(self) -> PartitionKey:
        return PartitionKey(self.tenant_id, self.user_id, self.session_id)
