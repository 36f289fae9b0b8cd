"""
Session service orchestrator.

Coordinates session lifecycle operations: create, list, read history,
rename and delete.

Dependencies: copilot.boundary.db.CRUD, copilot.core, copilot.models
System role: Session use case orchestration
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.chat_store import ChatStore, chat_store
from copilot.core.exceptions import SessionNotFoundError, ValidationError
from copilot.core.partition_key import PartitionKey, derive_partition_key
from copilot.models.message import Message
from copilot.models.session import Session

logger = logging.getLogger(__name__)


def session_partition_key(tenant_id: str, user_id: str, session_id: str) -> PartitionKey:
    """
    Derive the full partition key of a session.

    Raises:
        ValidationError: If any of the three identifiers is empty
    """
    partition_key = derive_partition_key(tenant_id, user_id, session_id)
    if not partition_key.is_full:
        raise ValidationError(
            "tenant_id, user_id and session_id are all required",
            details={"partition_key": str(partition_key)},
        )
    return partition_key


class SessionService:
    """Session service orchestrator."""

    def __init__(self, db: AsyncSession, store: ChatStore = chat_store) -> None:
        """
        Initialize session service with async database session.

        Args:
            db: Async SQLAlchemy session
            store: Session/message store
        """
        self.db = db
        self.store = store

    async def create_new_chat_session(self, tenant_id: str, user_id: str) -> Session:
        """
        Create an empty session named "New Chat".

        Args:
            tenant_id: Owning tenant
            user_id: Owning user

        Returns:
            Session: Created session

        Raises:
            ValidationError: If tenant_id or user_id is empty
        """
        if not tenant_id or not user_id:
            raise ValidationError("tenant_id and user_id are required")

        session = Session.new(tenant_id, user_id)
        try:
            await self.store.insert_session(self.db, session)
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:create_new_chat_session - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

        logger.info(
            f"{__name__}:create_new_chat_session - Created",
            extra={"partition_key": str(session.partition_key)},
        )
        return session

    async def get_chat_session(self, tenant_id: str, user_id: str, session_id: str) -> Session:
        """
        Get one session.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        partition_key = session_partition_key(tenant_id, user_id, session_id)
        session = await self.store.get_session(self.db, partition_key)
        if session is None:
            raise SessionNotFoundError(session_id)
        return session

    async def get_all_chat_sessions(self, tenant_id: str, user_id: str) -> list[Session]:
        """List every session of a user, oldest first."""
        partition_key = derive_partition_key(tenant_id, user_id)
        return await self.store.get_sessions(self.db, partition_key)

    async def get_chat_session_messages(
        self,
        tenant_id: str,
        user_id: str,
        session_id: str,
    ) -> list[Message]:
        """
        List the messages of a session in chronological order.

        An unknown or deleted session has no messages.
        """
        partition_key = session_partition_key(tenant_id, user_id, session_id)
        return await self.store.get_session_messages(self.db, partition_key)

    async def rename_chat_session(
        self,
        tenant_id: str,
        user_id: str,
        session_id: str,
        name: str,
    ) -> Session:
        """
        Rename a session.

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        session = await self.get_chat_session(tenant_id, user_id, session_id)
        try:
            renamed = await self.store.update_session(self.db, session.model_copy(update={"name": name}))
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:rename_chat_session - {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

        return renamed

    async def delete_chat_session(self, tenant_id: str, user_id: str, session_id: str) -> int:
        """
        Delete a session and all of its messages.

        Returns:
            int: Number of records deleted (0 if the session did not exist)
        """
        partition_key = session_partition_key(tenant_id, user_id, session_id)
        deleted = await self.store.delete_session_and_messages(self.db, partition_key)

        logger.info(
            f"{__name__}:delete_chat_session - Deleted",
            extra={"partition_key": str(partition_key), "records": deleted},
        )
        return deleted
