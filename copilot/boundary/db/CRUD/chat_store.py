"""
Session/message store.

Durable, partition-scoped persistence of chat sessions and their
messages. Sessions and messages of one conversation share the partition
(tenant_id, user_id, session_id), which is also the boundary of the
transactional batch: every operation in a batch commits together or
none does, and a batch may never span two partitions.

Insert and read methods only flush; the caller owns the commit.
execute_batch() commits (or rolls back) on its own.

Dependencies: sqlalchemy, copilot.boundary.db.CRUD, copilot.models
System role: Consistency boundary for session state and message history
"""

import logging
from datetime import datetime

from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.message_crud import MessageCRUD, message_crud
from copilot.boundary.db.CRUD.session_crud import SessionCRUD, partition_filter, session_crud
from copilot.boundary.db.models.message_model import MessageModel
from copilot.boundary.db.models.session_model import SessionModel
from copilot.core.exceptions import ItemConflictError, SessionNotFoundError, ValidationError
from copilot.core.partition_key import PartitionKey
from copilot.models.batch import DeleteItem, TransactionalBatch, UpsertMessage, UpsertSession
from copilot.models.message import Message
from copilot.models.session import Session

logger = logging.getLogger(__name__)


def _require_full(partition_key: PartitionKey) -> None:
    if not partition_key.is_full:
        raise ValidationError(
            "Operation requires a full (tenant, user, session) partition key",
            details={"partition_key": str(partition_key)},
        )


class ChatStore:
    """
    Store for Session and Message entities.

    Wraps SessionCRUD and MessageCRUD and converts rows to domain entities.
    """

    def __init__(
        self,
        sessions: SessionCRUD = session_crud,
        messages: MessageCRUD = message_crud,
    ) -> None:
        self.sessions = sessions
        self.messages = messages

    async def insert_session(self, db: AsyncSession, session: Session) -> Session:
        """
        Create a session. Create-only.

        Raises:
            ItemConflictError: If a record with the same id exists
        """
        if await self.sessions.exists(db, session.id):
            raise ItemConflictError("Session", session.id)

        db.add(SessionModel.from_entity(session))
        await db.flush()
        return session

    async def insert_message(self, db: AsyncSession, message: Message) -> Message:
        """
        Create a message. Create-only.

        Raises:
            ItemConflictError: If a record with the same id exists
        """
        if await self.messages.exists(db, message.id):
            raise ItemConflictError("Message", message.id)

        db.add(MessageModel.from_entity(message))
        await db.flush()
        return message

    async def get_session(self, db: AsyncSession, partition_key: PartitionKey) -> Session | None:
        """Read the session addressed by a full partition key."""
        _require_full(partition_key)
        row = await self.sessions.get_in_partition(db, partition_key)
        return row.to_entity() if row else None

    async def get_sessions(self, db: AsyncSession, partition_key: PartitionKey) -> list[Session]:
        """Read every session under a tenant or tenant+user key."""
        rows = await self.sessions.list_in_partition(db, partition_key)
        return [row.to_entity() for row in rows]

    async def update_session(self, db: AsyncSession, session: Session) -> Session:
        """
        Replace an existing session.

        Raises:
            SessionNotFoundError: If the session does not exist in its partition
        """
        row = await self.sessions.get_in_partition(db, session.partition_key)
        if row is None:
            raise SessionNotFoundError(session.session_id)

        row.name = session.name
        row.tokens = session.tokens
        await db.flush()
        return row.to_entity()

    async def get_message(
        self,
        db: AsyncSession,
        partition_key: PartitionKey,
        message_id: str,
    ) -> Message | None:
        """Read one message of a session partition."""
        _require_full(partition_key)
        row = await self.messages.get_in_partition(db, partition_key, message_id)
        return row.to_entity() if row else None

    async def get_session_messages(
        self,
        db: AsyncSession,
        partition_key: PartitionKey,
    ) -> list[Message]:
        """Read every message of a session, oldest first."""
        _require_full(partition_key)
        rows = await self.messages.list_ascending(db, partition_key)
        return [row.to_entity() for row in rows]

    async def get_recent_messages(
        self,
        db: AsyncSession,
        partition_key: PartitionKey,
        limit: int | None = None,
        until: datetime | None = None,
    ) -> list[Message]:
        """Read the messages of a session, newest first."""
        _require_full(partition_key)
        rows = await self.messages.list_newest_first(db, partition_key, limit=limit, until=until)
        return [row.to_entity() for row in rows]

    async def get_context_window(
        self,
        db: AsyncSession,
        partition_key: PartitionKey,
        limit: int,
    ) -> list[Message]:
        """
        Read the most recent ``limit`` messages in chronological order.

        Fetched newest-first with a limit, then re-sorted ascending.
        """
        recent = await self.get_recent_messages(db, partition_key, limit=limit)
        return list(reversed(recent))

    async def execute_batch(self, db: AsyncSession, batch: TransactionalBatch) -> None:
        """
        Apply a transactional batch and commit it.

        The partition check runs before anything is written. Any failure
        rolls the whole batch back and is re-raised unchanged.

        Raises:
            PartitionMismatchError: If operations span several partitions
            ValidationError: If the batch is empty
        """
        partition_key = batch.partition_key

        try:
            for operation in batch.operations:
                if isinstance(operation, UpsertSession):
                    await db.merge(SessionModel.from_entity(operation.session))
                elif isinstance(operation, UpsertMessage):
                    await db.merge(MessageModel.from_entity(operation.message))
                elif isinstance(operation, DeleteItem):
                    model = SessionModel if operation.item_type == "session" else MessageModel
                    await db.execute(
                        delete(model).where(
                            model.id == operation.item_id,
                            *partition_filter(model, partition_key),
                        )
                    )
            await db.flush()
            await db.commit()
        except Exception as e:
            logger.error(
                f"{__name__}:execute_batch - Rolled back: {type(e).__name__}: {e}",
                extra={"partition_key": str(partition_key), "operations": len(batch)},
            )
            await db.rollback()
            raise

        logger.debug(
            f"{__name__}:execute_batch - Committed",
            extra={"partition_key": str(partition_key), "operations": len(batch)},
        )

    async def upsert_session_and_message_transactional(
        self,
        db: AsyncSession,
        session: Session,
        message: Message,
    ) -> None:
        """
        Upsert a session and one of its messages atomically.

        Raises:
            PartitionMismatchError: If the two do not share a partition key
        """
        batch = TransactionalBatch().upsert_session(session).upsert_message(message)
        await self.execute_batch(db, batch)

    async def delete_session_and_messages(
        self,
        db: AsyncSession,
        partition_key: PartitionKey,
    ) -> int:
        """
        Delete a session and every message in its partition atomically.

        A session without messages, or a partition that is already
        empty, is not an error.

        Returns:
            int: Number of records deleted
        """
        _require_full(partition_key)
        batch = TransactionalBatch()

        for message_id in await self.messages.list_ids(db, partition_key):
            batch.delete_item(partition_key, "message", message_id)
        if await self.sessions.get_in_partition(db, partition_key) is not None:
            batch.delete_item(partition_key, "session", partition_key.session_id)

        if not len(batch):
            return 0

        await self.execute_batch(db, batch)
        return len(batch)


chat_store = ChatStore()
