"""
Semantic cache ORM model.

Dependencies: sqlalchemy, copilot.boundary.db.base
System role: Cached completion persistence
"""

from datetime import datetime, timezone

from sqlalchemy import JSON, DateTime, Text
from sqlalchemy.orm import Mapped, mapped_column

from copilot.boundary.db.base import Base, StringIdMixin, as_utc
from copilot.models.cache_item import CacheItem


class CacheItemModel(Base, StringIdMixin):
    """
    Cache entry ORM model.

    Independent of sessions; the vectors column holds the embedding of
    the joined prompt sequence as a JSON float array.
    """

    __tablename__ = "cache_items"

    vectors: Mapped[list[float]] = mapped_column(JSON, nullable=False)
    prompts: Mapped[str] = mapped_column(Text, nullable=False)
    completion: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )

    @classmethod
    def from_entity(cls, item: CacheItem) -> "CacheItemModel":
        return cls(
            id=item.id,
            vectors=list(item.vectors),
            prompts=item.prompts,
            completion=item.completion,
            created_at=item.created_at,
        )

    def to_entity(self) -> CacheItem:
        return CacheItem(
            id=self.id,
            vectors=self.vectors,
            prompts=self.prompts,
            completion=self.completion,
            created_at=as_utc(self.created_at),
        )
