"""
Test suite for context window selection.

Covers the depth- and token-bounded policies as pure functions and the
builder reading from the chat store.

System role: Verification of conversational context assembly
"""

import pytest
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.chat_store import chat_store
from copilot.configs.chat import ContextWindowPolicy
from copilot.core.context_window import (
    ContextWindowBuilder,
    depth_bounded,
    join_prompts,
    token_bounded,
)
from copilot.models.session import Session


@pytest.fixture
def history(sample_session: Session, make_message) -> list:
    """Five completed turns, oldest first, each costing 10 + 20 tokens."""
    return [
        make_message(sample_session, i, prompt_tokens=10, completion="x", completion_tokens=20)
        for i in range(5)
    ]


class TestDepthBounded:
    """Test suite for depth_bounded()."""

    def test_depth_bounded_should_keep_last_n_in_ascending_order(self, history: list) -> None:
        window = depth_bounded(list(reversed(history)), 3)

        assert window == history[-3:]

    def test_depth_bounded_should_return_all_when_fewer_than_n(self, history: list) -> None:
        assert depth_bounded(list(reversed(history[:2])), 3) == history[:2]

    def test_depth_bounded_window_should_be_strictly_ascending(self, history: list) -> None:
        window = depth_bounded(list(reversed(history)), 4)

        timestamps = [message.timestamp for message in window]
        assert timestamps == sorted(timestamps)
        assert len(set(timestamps)) == len(timestamps)
        assert window[-1] == history[-1]


class TestTokenBounded:
    """Test suite for token_bounded()."""

    def test_token_bounded_should_stop_before_exceeding_budget(self, history: list) -> None:
        # 30 tokens per message: 90 fits three, a fourth would make 120
        window = token_bounded(list(reversed(history)), 100)

        assert window == history[-3:]

    def test_token_bounded_should_include_message_that_exactly_fills_budget(self, history: list) -> None:
        assert token_bounded(list(reversed(history)), 60) == history[-2:]

    def test_token_bounded_should_always_keep_newest_message(
        self,
        sample_session: Session,
        make_message,
    ) -> None:
        oversized = make_message(sample_session, 9, prompt_tokens=1000)

        assert token_bounded([oversized], 10) == [oversized]

    def test_token_bounded_should_not_skip_over_a_large_message(
        self,
        sample_session: Session,
        make_message,
    ) -> None:
        oldest = make_message(sample_session, 0, prompt_tokens=1)
        large = make_message(sample_session, 1, prompt_tokens=500)
        newest = make_message(sample_session, 2, prompt_tokens=5)

        assert token_bounded([newest, large, oldest], 100) == [newest]

    def test_token_bounded_should_return_empty_for_empty_history(self) -> None:
        assert token_bounded([], 100) == []


class TestJoinPrompts:
    """Test suite for join_prompts()."""

    def test_join_prompts_should_exclude_completions(self, sample_session: Session, make_message) -> None:
        window = [
            make_message(sample_session, 0, prompt="first", completion="answer"),
            make_message(sample_session, 1, prompt="second"),
        ]

        assert join_prompts(window) == "first\nsecond"


class TestContextWindowBuilder:
    """Test suite for ContextWindowBuilder.build() against the chat store."""

    @pytest.fixture
    async def stored_history(self, test_async_db: AsyncSession, sample_session: Session, history: list) -> list:
        await chat_store.insert_session(test_async_db, sample_session)
        for message in history:
            await chat_store.insert_message(test_async_db, message)
        await test_async_db.commit()
        return history

    @pytest.mark.asyncio
    async def test_build_should_return_depth_bounded_window(
        self,
        test_async_db: AsyncSession,
        sample_session: Session,
        stored_history: list,
    ) -> None:
        builder = ContextWindowBuilder(policy=ContextWindowPolicy.DEPTH, max_context_window=3)

        window = await builder.build(test_async_db, sample_session.partition_key)

        assert [m.id for m in window] == [m.id for m in stored_history[-3:]]

    @pytest.mark.asyncio
    async def test_build_should_return_token_bounded_window(
        self,
        test_async_db: AsyncSession,
        sample_session: Session,
        stored_history: list,
    ) -> None:
        builder = ContextWindowBuilder(policy=ContextWindowPolicy.TOKENS, max_context_tokens=65)

        window = await builder.build(test_async_db, sample_session.partition_key)

        assert [m.id for m in window] == [m.id for m in stored_history[-2:]]

    @pytest.mark.asyncio
    async def test_build_should_ignore_messages_after_until(
        self,
        test_async_db: AsyncSession,
        sample_session: Session,
        stored_history: list,
    ) -> None:
        builder = ContextWindowBuilder(max_context_window=2)

        window = await builder.build(
            test_async_db, sample_session.partition_key, until=stored_history[2].timestamp
        )

        assert [m.id for m in window] == [stored_history[1].id, stored_history[2].id]

    @pytest.mark.asyncio
    async def test_build_should_return_single_message_for_new_session(
        self,
        test_async_db: AsyncSession,
        sample_session: Session,
        make_message,
    ) -> None:
        first = make_message(sample_session, 0, prompt="hello")
        await chat_store.insert_session(test_async_db, sample_session)
        await chat_store.insert_message(test_async_db, first)
        await test_async_db.commit()

        window = await ContextWindowBuilder().build(test_async_db, sample_session.partition_key)

        assert window == [first]
