"""
Test suite for SemanticCache.

Runs against the in-memory SQLite database from conftest.

System role: Verification of vector-keyed completion reuse
"""

import pytest
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.cache_crud import cache_crud
from copilot.core.exceptions import VectorStoreError
from copilot.core.semantic_cache import SemanticCache


@pytest.fixture
def cache(clock) -> SemanticCache:
    """Cache without expiry on the settable clock."""
    return SemanticCache(clock=clock)


class TestSemanticCacheLookup:
    """Test suite for SemanticCache.lookup()."""

    @pytest.mark.asyncio
    async def test_lookup_should_miss_on_empty_cache(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
    ) -> None:
        assert await cache.lookup(test_async_db, [1.0, 0.0], 0.9) is None

    @pytest.mark.asyncio
    async def test_lookup_should_return_completion_above_threshold(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
    ) -> None:
        # Arrange
        await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "We sell bikes.")
        await cache.insert(test_async_db, [0.0, 1.0], "helmets?", "We sell helmets.")

        # Act
        completion = await cache.lookup(test_async_db, [0.99, 0.01], 0.9)

        # Assert
        assert completion == "We sell bikes."

    @pytest.mark.asyncio
    async def test_lookup_should_require_score_strictly_above_threshold(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
    ) -> None:
        await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "We sell bikes.")

        # identical vectors score exactly 1.0, which does not exceed 1.0
        assert await cache.lookup(test_async_db, [1.0, 0.0], 1.0) is None

    @pytest.mark.asyncio
    async def test_lookup_should_prefer_oldest_entry_on_tie(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
        clock,
    ) -> None:
        # Arrange
        await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "first answer")
        clock.advance(seconds=5)
        await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "second answer")

        # Act
        completion = await cache.lookup(test_async_db, [1.0, 0.0], 0.99)

        # Assert
        assert completion == "first answer"

    @pytest.mark.asyncio
    async def test_lookup_should_prefer_closer_entry_over_older_one(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
        clock,
    ) -> None:
        await cache.insert(test_async_db, [0.8, 0.6], "older", "older answer")
        clock.advance(seconds=5)
        await cache.insert(test_async_db, [1.0, 0.0], "newer", "newer answer")

        assert await cache.lookup(test_async_db, [1.0, 0.0], 0.5) == "newer answer"

    @pytest.mark.asyncio
    async def test_lookup_should_skip_expired_entries(
        self,
        test_async_db: AsyncSession,
        clock,
    ) -> None:
        # Arrange
        cache = SemanticCache(ttl_seconds=60, clock=clock)
        await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "We sell bikes.")

        # Act
        clock.advance(seconds=30)
        fresh = await cache.lookup(test_async_db, [1.0, 0.0], 0.99)
        clock.advance(seconds=60)
        expired = await cache.lookup(test_async_db, [1.0, 0.0], 0.99)

        # Assert
        assert fresh == "We sell bikes."
        assert expired is None

    @pytest.mark.asyncio
    async def test_lookup_should_wrap_store_errors(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
        monkeypatch,
    ) -> None:
        async def broken_find_nearest(*args, **kwargs):
            raise SQLAlchemyError("connection reset")

        monkeypatch.setattr(cache_crud, "find_nearest", broken_find_nearest)

        with pytest.raises(VectorStoreError) as exc_info:
            await cache.lookup(test_async_db, [1.0, 0.0], 0.9)

        assert exc_info.value.details["operation"] == "lookup"


class TestSemanticCacheWrites:
    """Test suite for SemanticCache insert/remove/clear/purge."""

    @pytest.mark.asyncio
    async def test_insert_should_store_duplicates_as_separate_entries(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
    ) -> None:
        first = await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "answer")
        second = await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "answer")

        assert first.id != second.id
        assert await cache_crud.count(test_async_db) == 2

    @pytest.mark.asyncio
    async def test_remove_nearest_should_delete_one_exact_match(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
    ) -> None:
        # Arrange
        await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "answer")
        await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "answer")
        await cache.insert(test_async_db, [0.0, 1.0], "helmets?", "other")

        # Act
        removed = await cache.remove_nearest(test_async_db, [1.0, 0.0])

        # Assert
        assert removed is True
        assert await cache_crud.count(test_async_db) == 2

    @pytest.mark.asyncio
    async def test_remove_nearest_should_ignore_approximate_matches(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
    ) -> None:
        await cache.insert(test_async_db, [0.8, 0.6], "bikes?", "answer")

        assert await cache.remove_nearest(test_async_db, [1.0, 0.0]) is False
        assert await cache_crud.count(test_async_db) == 1

    @pytest.mark.asyncio
    async def test_clear_should_remove_every_entry(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
    ) -> None:
        await cache.insert(test_async_db, [1.0, 0.0], "bikes?", "answer")
        await cache.insert(test_async_db, [0.0, 1.0], "helmets?", "other")

        removed = await cache.clear(test_async_db)

        assert removed == 2
        assert await cache.lookup(test_async_db, [1.0, 0.0], 0.5) is None

    @pytest.mark.asyncio
    async def test_clear_should_succeed_on_empty_cache(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
    ) -> None:
        assert await cache.clear(test_async_db) == 0

    @pytest.mark.asyncio
    async def test_purge_expired_should_remove_only_old_entries(
        self,
        test_async_db: AsyncSession,
        clock,
    ) -> None:
        # Arrange
        cache = SemanticCache(ttl_seconds=60, clock=clock)
        await cache.insert(test_async_db, [1.0, 0.0], "old", "old answer")
        clock.advance(seconds=90)
        await cache.insert(test_async_db, [0.0, 1.0], "new", "new answer")

        # Act
        removed = await cache.purge_expired(test_async_db)

        # Assert
        assert removed == 1
        assert await cache_crud.count(test_async_db) == 1

    @pytest.mark.asyncio
    async def test_purge_expired_should_do_nothing_without_ttl(
        self,
        test_async_db: AsyncSession,
        cache: SemanticCache,
        clock,
    ) -> None:
        await cache.insert(test_async_db, [1.0, 0.0], "old", "old answer")
        clock.advance(days=30)

        assert await cache.purge_expired(test_async_db) == 0
        assert await cache_crud.count(test_async_db) == 1
