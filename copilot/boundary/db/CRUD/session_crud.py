"""
Session CRUD operations.

Partition-scoped reads and writes for SessionModel.

Dependencies: sqlalchemy, copilot.boundary.db.models
System role: Session persistence operations
"""

from collections.abc import Sequence

from sqlalchemy import ColumnElement, select
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.base_crud import BaseCRUD
from copilot.boundary.db.models.session_model import SessionModel
from copilot.core.partition_key import PartitionKey


def partition_filter(model, partition_key: PartitionKey) -> list[ColumnElement[bool]]:
    """
    Build WHERE clauses restricting a partitioned model to a full or partial key.

    Args:
        model: ORM model using PartitionMixin
        partition_key: Key to scope the query to

    Returns:
        list: Clauses for every level present in the key
    """
    clauses = [model.tenant_id == partition_key.tenant_id]
    if partition_key.user_id is not None:
        clauses.append(model.user_id == partition_key.user_id)
    if partition_key.session_id is not None:
        clauses.append(model.session_id == partition_key.session_id)
    return clauses


class SessionCRUD(BaseCRUD[SessionModel]):
    """CRUD operations for SessionModel scoped by partition key."""

    def __init__(self) -> None:
        """Initialize SessionCRUD with SessionModel."""
        super().__init__(SessionModel)

    async def get_in_partition(
        self,
        session: AsyncSession,
        partition_key: PartitionKey,
    ) -> SessionModel | None:
        """
        Retrieve the session row of a full partition key.

        Args:
            session: Async database session
            partition_key: Full (tenant, user, session) key

        Returns:
            SessionModel if found, None otherwise
        """
        stmt = select(SessionModel).where(
            SessionModel.id == partition_key.session_id,
            *partition_filter(SessionModel, partition_key),
        )
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    async def list_in_partition(
        self,
        session: AsyncSession,
        partition_key: PartitionKey,
    ) -> Sequence[SessionModel]:
        """
        Retrieve every session under a (possibly partial) partition key.

        Args:
            session: Async database session
            partition_key: Tenant, tenant+user or full key

        Returns:
            Sequence of SessionModels, oldest first
        """
        stmt = (
            select(SessionModel)
            .where(*partition_filter(SessionModel, partition_key))
            .order_by(SessionModel.created_at, SessionModel.id)
        )
        result = await session.execute(stmt)
        return result.scalars().all()


session_crud = SessionCRUD()
