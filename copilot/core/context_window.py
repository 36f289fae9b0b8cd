"""
Conversational context window.

Selects the recent turns of a session that are replayed to the model
with the next prompt. Two policies are supported:

  - depth:  the last N messages
  - tokens: as many recent messages as fit a token ceiling, counting
            prompt_tokens + completion_tokens per message

Both return messages oldest first and always end with the newest
message of the session, which is the prompt being answered.

Dependencies: copilot.boundary.db.CRUD, copilot.configs, copilot.models
System role: Context assembly for the chat orchestrator
"""

import logging
from collections.abc import Sequence
from datetime import datetime

from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.chat_store import ChatStore, chat_store
from copilot.configs.chat import ContextWindowPolicy
from copilot.core.partition_key import PartitionKey
from copilot.models.message import Message

logger = logging.getLogger(__name__)


def depth_bounded(newest_first: Sequence[Message], max_messages: int) -> list[Message]:
    """
    Keep the most recent max_messages messages.

    Args:
        newest_first: Messages ordered most recent first
        max_messages: Window depth

    Returns:
        list[Message]: Kept messages in chronological order
    """
    return list(reversed(newest_first[:max_messages]))


def token_bounded(newest_first: Sequence[Message], max_tokens: int) -> list[Message]:
    """
    Keep recent messages while their cumulative token cost fits max_tokens.

    The walk stops at the first message that would push the total over
    the ceiling. The newest message is kept even if it alone exceeds it.

    Args:
        newest_first: Messages ordered most recent first
        max_tokens: Token ceiling for the whole window

    Returns:
        list[Message]: Kept messages in chronological order
    """
    if not newest_first:
        return []

    kept = [newest_first[0]]
    total = newest_first[0].context_tokens
    for message in newest_first[1:]:
        if total + message.context_tokens > max_tokens:
            break
        total += message.context_tokens
        kept.append(message)

    return list(reversed(kept))


class ContextWindowBuilder:
    """Builds the context window of a session from the chat store."""

    def __init__(
        self,
        policy: ContextWindowPolicy = ContextWindowPolicy.DEPTH,
        max_context_window: int = 3,
        max_context_tokens: int = 500,
        store: ChatStore = chat_store,
    ) -> None:
        """
        Initialize builder.

        Args:
            policy: Depth- or token-bounded selection
            max_context_window: Message limit for the depth policy
            max_context_tokens: Token ceiling for the token policy
            store: Session/message store to read from
        """
        self.policy = policy
        self.max_context_window = max_context_window
        self.max_context_tokens = max_context_tokens
        self.store = store

    async def build(
        self,
        db: AsyncSession,
        partition_key: PartitionKey,
        until: datetime | None = None,
    ) -> list[Message]:
        """
        Build the context window of a session.

        Args:
            db: Async database session
            partition_key: Full partition key of the session
            until: Ignore messages newer than this (used when re-answering
                an earlier prompt)

        Returns:
            list[Message]: Window messages, oldest first
        """
        if self.policy == ContextWindowPolicy.TOKENS:
            recent = await self.store.get_recent_messages(db, partition_key, until=until)
            window = token_bounded(recent, self.max_context_tokens)
        else:
            recent = await self.store.get_recent_messages(
                db, partition_key, limit=self.max_context_window, until=until
            )
            window = depth_bounded(recent, self.max_context_window)

        logger.debug(
            f"{__name__}:build - Context window built",
            extra={
                "partition_key": str(partition_key),
                "policy": self.policy.value,
                "messages": len(window),
            },
        )
        return window


def join_prompts(window: Sequence[Message]) -> str:
    """Cache key text: the window's prompts joined by newlines, completions left out."""
    return "\n".join(message.prompt for message in window)
