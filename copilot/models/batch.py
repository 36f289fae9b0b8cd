"""
Transactional batch operations.

A batch is a list of typed operations against one session partition:
upsert a session, upsert a message, or delete an item by id. The batch
checks that every operation targets the same partition key before it
is handed to the store, and refuses to span partitions.

Dependencies: pydantic, copilot.models, copilot.core
System role: Sum type for atomic session/message writes
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from copilot.core.exceptions import PartitionMismatchError, ValidationError
from copilot.core.partition_key import PartitionKey
from copilot.models.message import Message
from copilot.models.session import Session


class UpsertSession(BaseModel):
    """Create or replace a session."""

    op: Literal["upsert_session"] = "upsert_session"
    session: Session

    @property
    def partition_key(self) -> PartitionKey:
        return self.session.partition_key


class UpsertMessage(BaseModel):
    """Create or replace a message."""

    op: Literal["upsert_message"] = "upsert_message"
    message: Message

    @property
    def partition_key(self) -> PartitionKey:
        return self.message.partition_key


class DeleteItem(BaseModel):
    """Delete a session or message by id within a partition."""

    op: Literal["delete_item"] = "delete_item"
    item_type: Literal["session", "message"]
    item_id: str
    tenant_id: str
    user_id: str
    session_id: str

    @property
    def partition_key(self) -> PartitionKey:
        return PartitionKey(self.tenant_id, self.user_id, self.session_id)


BatchOperation = Annotated[
    Union[UpsertSession, UpsertMessage, DeleteItem],
    Field(discriminator="op"),
]


class TransactionalBatch(BaseModel):
    """Operations that commit together or not at all."""

    operations: list[BatchOperation] = Field(default_factory=list)

    @property
    def partition_key(self) -> PartitionKey:
        """
        The single partition key shared by every operation.

        Raises:
            ValidationError: If the batch is empty
            PartitionMismatchError: If operations span several partitions
        """
        if not self.operations:
            raise ValidationError("A transactional batch needs at least one operation")

        keys = list(dict.fromkeys(op.partition_key for op in self.operations))
        if len(keys) > 1:
            raise PartitionMismatchError([key.values for key in keys])
        return keys[0]

    def upsert_session(self, session: Session) -> "TransactionalBatch":
        self.operations.append(UpsertSession(session=session))
        return self

    def upsert_message(self, message: Message) -> "TransactionalBatch":
        self.operations.append(UpsertMessage(message=message))
        return self

    def delete_item(
        self,
        partition_key: PartitionKey,
        item_type: Literal["session", "message"],
        item_id: str,
    ) -> "TransactionalBatch":
        if not partition_key.is_full:
            raise ValidationError(
                "Deletes in a batch need a full partition key",
                details={"partition_key": str(partition_key)},
            )
        self.operations.append(
            DeleteItem(
                item_type=item_type,
                item_id=item_id,
                tenant_id=partition_key.tenant_id,
                user_id=partition_key.user_id,
                session_id=partition_key.session_id,
            )
        )
        return self

    def __len__(self) -> int:
        return len(self.operations)
