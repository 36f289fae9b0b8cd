"""
Message CRUD operations.

Partition-scoped, timestamp-ordered reads of MessageModel.

Dependencies: sqlalchemy, copilot.boundary.db.models
System role: Chat message persistence operations
"""

from collections.abc import Sequence
from datetime import datetime

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.base_crud import BaseCRUD
from copilot.boundary.db.CRUD.session_crud import partition_filter
from copilot.boundary.db.models.message_model import MessageModel
from copilot.core.partition_key import PartitionKey


class MessageCRUD(BaseCRUD[MessageModel]):
    """CRUD operations for MessageModel scoped by partition key."""

    def __init__(self) -> None:
        """Initialize MessageCRUD with MessageModel."""
        super().__init__(MessageModel)

    async def get_in_partition(
        self,
        session: AsyncSession,
        partition_key: PartitionKey,
        message_id: str,
    ) -> MessageModel | None:
        """Retrieve one message by id inside a partition."""
        stmt = select(MessageModel).where(
            MessageModel.id == message_id,
            *partition_filter(MessageModel, partition_key),
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_ascending(
        self,
        session: AsyncSession,
        partition_key: PartitionKey,
    ) -> Sequence[MessageModel]:
        """
        Retrieve all messages of a partition in chronological order.

        Args:
            session: Async database session
            partition_key: Partition to read

        Returns:
            Sequence of MessageModels, oldest first
        """
        stmt = (
            select(MessageModel)
            .where(*partition_filter(MessageModel, partition_key))
            .order_by(MessageModel.timestamp, MessageModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_newest_first(
        self,
        session: AsyncSession,
        partition_key: PartitionKey,
        limit: int | None = None,
        until: datetime | None = None,
    ) -> Sequence[MessageModel]:
        """
        Retrieve messages of a partition, most recent first.

        Args:
            session: Async database session
            partition_key: Partition to read
            limit: Maximum number of messages (None for all)
            until: Ignore messages newer than this timestamp

        Returns:
            Sequence of MessageModels, newest first
        """
        stmt = select(MessageModel).where(*partition_filter(MessageModel, partition_key))
        if until is not None:
            stmt = stmt.where(MessageModel.timestamp <= until)
        stmt = stmt.order_by(MessageModel.timestamp.desc(), MessageModel.id.desc())
        if limit is not None:
            stmt = stmt.limit(limit)
        result = await session.execute(stmt)
        return result.scalars().all()

    async def list_ids(
        self,
        session: AsyncSession,
        partition_key: PartitionKey,
    ) -> Sequence[str]:
        """Retrieve the ids of every message in a partition."""
        stmt = select(MessageModel.id).where(*partition_filter(MessageModel, partition_key))
        result = await session.execute(stmt)
        return result.scalars().all()


message_crud = MessageCRUD()
