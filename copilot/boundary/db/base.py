"""
Declarative base and column mixins shared by the ORM models.

Dependencies: sqlalchemy
System role: Foundation for all database models
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


def as_utc(value: datetime) -> datetime:
    """Attach UTC to naive datetimes returned by backends without tz support."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class Base(DeclarativeBase):
    """Declarative base; create_tables() creates every model registered on it."""


class StringIdMixin:
    """
    Mixin providing a string primary key.

    Ids are UUID4 strings generated by the domain layer; the column
    default only covers rows created without one.

    Attributes:
        id: Primary key
    """

    id: Mapped[str] = mapped_column(
        String(64),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        nullable=False,
    )


class PartitionMixin:
    """
    Mixin providing the tenant -> user -> session partition columns.

    Attributes:
        tenant_id: Partition key level 1
        user_id: Partition key level 2
        session_id: Partition key level 3
    """

    tenant_id: Mapped[str] = mapped_column(String(128), nullable=False, index=True)
    user_id: Mapped[str] = mapped_column(String(128), nullable=False)
    session_id: Mapped[str] = mapped_column(String(64), nullable=False)


class TimestampMixin:
    """Row creation and last-update times, stored in UTC."""

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )
