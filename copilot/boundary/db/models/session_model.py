"""
Session ORM model.

Dependencies: sqlalchemy, copilot.boundary.db.base
System role: Session persistence for chat context management
"""

from sqlalchemy import Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from copilot.boundary.db.base import Base, PartitionMixin, StringIdMixin, TimestampMixin
from copilot.models.session import DEFAULT_SESSION_NAME, Session


class SessionModel(Base, StringIdMixin, PartitionMixin, TimestampMixin):
    """
    Session ORM model.

    The row id equals session_id. Messages of the session live in the
    same (tenant_id, user_id, session_id) partition.

    Attributes:
        name: Display label
        tokens: Running token cost of the session
    """

    __tablename__ = "sessions"
    __table_args__ = (
        Index("ix_sessions_partition", "tenant_id", "user_id", "session_id"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False, default=DEFAULT_SESSION_NAME)
    tokens: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    @classmethod
    def from_entity(cls, session: Session) -> "SessionModel":
        return cls(
            id=session.id,
            tenant_id=session.tenant_id,
            user_id=session.user_id,
            session_id=session.session_id,
            name=session.name,
            tokens=session.tokens,
        )

    def to_entity(self) -> Session:
        return Session(
            id=self.id,
            tenant_id=self.tenant_id,
            user_id=self.user_id,
            session_id=self.session_id,
            name=self.name,
            tokens=self.tokens,
        )
