"""
Semantic completion cache.

Completions are stored with the embedding of the prompt sequence that
produced them and looked up by embedding proximity instead of exact
text. Lookups return the single closest entry scoring strictly above
the threshold; among equally close entries the oldest wins.

The cache is independent of sessions and has no locking: concurrent
inserts of near-identical vectors simply produce duplicate entries,
and clear() may race with inserts.

Dependencies: sqlalchemy, copilot.boundary.db.CRUD.cache_crud
System role: Content-addressed completion reuse for the chat orchestrator
"""

import logging
from collections.abc import Callable, Sequence
from datetime import datetime, timedelta, timezone

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.boundary.db.CRUD.cache_crud import CacheCRUD, cache_crud
from copilot.core.exceptions import VectorStoreError
from copilot.models.cache_item import CacheItem

logger = logging.getLogger(__name__)

EXACT_MATCH_SIMILARITY = 0.99


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SemanticCache:
    """
    Vector-keyed cache of generated completions.

    Each write commits on its own; the cache is never part of a
    session transaction.
    """

    def __init__(
        self,
        crud: CacheCRUD = cache_crud,
        ttl_seconds: int | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """
        Initialize cache.

        Args:
            crud: Cache persistence operations
            ttl_seconds: Entry lifetime (None: entries never expire)
            clock: Source of the current UTC time
        """
        self.crud = crud
        self.ttl_seconds = ttl_seconds
        self.clock = clock

    def _not_before(self) -> datetime | None:
        if self.ttl_seconds is None:
            return None
        return self.clock() - timedelta(seconds=self.ttl_seconds)

    async def lookup(
        self,
        db: AsyncSession,
        vector: Sequence[float],
        similarity_threshold: float,
    ) -> str | None:
        """
        Return the cached completion closest to vector, if close enough.

        Args:
            db: Async database session
            vector: Embedding of the prompt sequence
            similarity_threshold: Score a match must strictly exceed

        Returns:
            str | None: Cached completion, or None on a miss
        """
        try:
            match = await self.crud.find_nearest(
                db, vector, similarity_threshold, not_before=self._not_before()
            )
        except SQLAlchemyError as e:
            raise VectorStoreError(f"Cache lookup failed: {e}", operation="lookup") from e

        if match is None:
            logger.debug(f"{__name__}:lookup - Miss", extra={"threshold": similarity_threshold})
            return None

        row, score = match
        logger.info(
            f"{__name__}:lookup - Hit",
            extra={"cache_item_id": row.id, "score": round(score, 6)},
        )
        return row.completion

    async def insert(
        self,
        db: AsyncSession,
        vector: Sequence[float],
        prompts: str,
        completion: str,
    ) -> CacheItem:
        """
        Store a completion under the embedding of its prompt sequence.

        Every call creates a new entry, even for a vector already cached.

        Returns:
            CacheItem: The stored entry
        """
        item = CacheItem(vectors=list(vector), prompts=prompts, completion=completion, created_at=self.clock())
        try:
            await self.crud.insert(db, item)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise VectorStoreError(f"Cache insert failed: {e}", operation="insert") from e

        logger.debug(f"{__name__}:insert - Cached completion", extra={"cache_item_id": item.id})
        return item

    async def remove_nearest(self, db: AsyncSession, vector: Sequence[float]) -> bool:
        """
        Delete at most one entry that exactly matches vector.

        An exact match is a similarity above EXACT_MATCH_SIMILARITY.

        Returns:
            True if an entry was deleted, False if none qualified
        """
        try:
            match = await self.crud.find_nearest(db, vector, EXACT_MATCH_SIMILARITY)
            if match is None:
                return False
            row, _ = match
            await self.crud.delete_by_id(db, row.id)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise VectorStoreError(f"Cache remove failed: {e}", operation="remove") from e

        logger.info(f"{__name__}:remove_nearest - Removed", extra={"cache_item_id": row.id})
        return True

    async def clear(self, db: AsyncSession) -> int:
        """
        Delete every cache entry.

        Returns:
            int: Number of entries removed
        """
        try:
            removed = await self.crud.clear(db)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise VectorStoreError(f"Cache clear failed: {e}", operation="clear") from e

        logger.info(f"{__name__}:clear - Cache cleared", extra={"removed": removed})
        return removed

    async def purge_expired(self, db: AsyncSession) -> int:
        """
        Delete entries older than the configured lifetime.

        Returns:
            int: Number of entries removed (0 when entries never expire)
        """
        not_before = self._not_before()
        if not_before is None:
            return 0

        try:
            removed = await self.crud.purge_older_than(db, not_before)
            await db.commit()
        except SQLAlchemyError as e:
            await db.rollback()
            raise VectorStoreError(f"Cache purge failed: {e}", operation="purge") from e

        logger.info(f"{__name__}:purge_expired - Purged", extra={"removed": removed})
        return removed
