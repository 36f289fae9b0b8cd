"""
Message ORM model.

Dependencies: sqlalchemy, copilot.boundary.db.base
System role: Chat turn persistence
"""

from datetime import datetime

from sqlalchemy import BigInteger, Boolean, DateTime, Index, Integer, Text
from sqlalchemy.orm import Mapped, mapped_column

from copilot.boundary.db.base import Base, PartitionMixin, StringIdMixin, as_utc
from copilot.models.message import Message


class MessageModel(Base, StringIdMixin, PartitionMixin):
    """
    Message ORM model.

    One prompt/completion turn. Ordered within its partition by timestamp.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_partition_timestamp", "tenant_id", "user_id", "session_id", "timestamp"),
    )

    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    prompt: Mapped[str] = mapped_column(Text, nullable=False)
    prompt_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    completion: Mapped[str] = mapped_column(Text, nullable=False, default="")
    completion_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    generation_tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cache_hit: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    elapsed_milliseconds: Mapped[int] = mapped_column(BigInteger, nullable=False, default=0)

    @classmethod
    def from_entity(cls, message: Message) -> "MessageModel":
        return cls(
            id=message.id,
            tenant_id=message.tenant_id,
            user_id=message.user_id,
            session_id=message.session_id,
            timestamp=message.timestamp,
            prompt=message.prompt,
            prompt_tokens=message.prompt_tokens,
            completion=message.completion,
            completion_tokens=message.completion_tokens,
            generation_tokens=message.generation_tokens,
            cache_hit=message.cache_hit,
            elapsed_milliseconds=message.elapsed_milliseconds,
        )

    def to_entity(self) -> Message:
        return Message(
            id=self.id,
            tenant_id=self.tenant_id,
            user_id=self.user_id,
            session_id=self.session_id,
            timestamp=as_utc(self.timestamp),
            prompt=self.prompt,
            prompt_tokens=self.prompt_tokens,
            completion=self.completion,
            completion_tokens=self.completion_tokens,
            generation_tokens=self.generation_tokens,
            cache_hit=self.cache_hit,
            elapsed_milliseconds=self.elapsed_milliseconds,
        )
