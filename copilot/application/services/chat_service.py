"""
Chat service: the completion pipeline for one chat turn.

Flow of get_chat_completion():
  1. Count prompt tokens, record the prompt as a message with an empty
     completion and commit it
  2. Build the context window of the session, ending with that prompt
  3. Join the window's prompts and embed them
  4. Probe the semantic cache; a hit supplies the completion
  5. On a miss, retrieve products with the same vector
  6. Generate a RAG completion and cache it under the vector
  7. Stamp the elapsed time since the prompt was received
  8. Add the turn's token cost to the session and upsert session and
     message in one transaction
  9. Return the finalized message

A failure in steps 2-7 leaves the recorded prompt in place and the
session untouched; retry_chat_completion() can answer it later.

Concurrent turns in the same session are not serialized. The session
is re-read right before the final transaction, so overlapping turns can
still race on the token counter.

Dependencies: copilot.core, copilot.boundary.db.CRUD, copilot.boundary.llm
System role: Chat orchestration layer
"""

import logging
import time

from sqlalchemy.ext.asyncio import AsyncSession

from copilot.application.services.retrieval_service import RetrievalService
from copilot.application.services.session_service import SessionService, session_partition_key
from copilot.boundary.db.CRUD.chat_store import ChatStore, chat_store
from copilot.boundary.llm.provider import CompletionProvider
from copilot.configs.chat import ChatSettings
from copilot.core.context_window import ContextWindowBuilder, join_prompts
from copilot.core.exceptions import MessageNotFoundError, SessionNotFoundError
from copilot.core.partition_key import PartitionKey
from copilot.core.semantic_cache import SemanticCache
from copilot.core.token_budgeter import TokenBudgeter
from copilot.models.message import Message

logger = logging.getLogger(__name__)


class ChatService:
    """
    Chat orchestrator.

    Coordinates the context window, semantic cache, product retrieval
    and completion provider, and owns the session/message writes of a
    chat turn.
    """

    def __init__(
        self,
        db: AsyncSession,
        provider: CompletionProvider,
        budgeter: TokenBudgeter,
        settings: ChatSettings | None = None,
        store: ChatStore = chat_store,
        cache: SemanticCache | None = None,
        retrieval: RetrievalService | None = None,
        window_builder: ContextWindowBuilder | None = None,
    ) -> None:
        """
        Initialize chat service.

        Args:
            db: AsyncSession for database operations
            provider: Embedding and completion backend
            budgeter: Token counter for prompts
            settings: Chat settings (defaults apply when None)
            store: Session/message store
            cache: Semantic cache (built from settings when None)
            retrieval: Product retrieval (built from settings when None)
            window_builder: Context window builder (built from settings when None)
        """
        settings = settings or ChatSettings()
        self.db = db
        self.provider = provider
        self.budgeter = budgeter
        self.settings = settings
        self.store = store
        self.cache = cache or SemanticCache(ttl_seconds=settings.cache_ttl_seconds)
        self.retrieval = retrieval or RetrievalService(
            db, similarity_threshold=settings.product_similarity_score
        )
        self.window_builder = window_builder or ContextWindowBuilder(
            policy=settings.context_window_policy,
            max_context_window=settings.max_context_window,
            max_context_tokens=settings.max_context_tokens,
            store=store,
        )

    async def get_chat_completion(
        self,
        tenant_id: str,
        user_id: str,
        session_id: str,
        prompt: str,
    ) -> Message:
        """
        Answer a user prompt within a session.

        Args:
            tenant_id: Owning tenant
            user_id: Owning user
            session_id: Target session
            prompt: User prompt text

        Returns:
            Message: Finalized message with completion and token counts

        Raises:
            SessionNotFoundError: If the session does not exist
            ProviderUnavailableError: If embedding, retrieval or generation fails;
                the prompt stays recorded and can be retried
        """
        received_at = time.monotonic()
        partition_key = session_partition_key(tenant_id, user_id, session_id)

        if await self.store.get_session(self.db, partition_key) is None:
            raise SessionNotFoundError(session_id)

        # Step 1: record the prompt before anything can fail
        message = Message(
            tenant_id=tenant_id,
            user_id=user_id,
            session_id=session_id,
            prompt=prompt,
            prompt_tokens=self.budgeter.count_tokens(prompt),
        )
        try:
            await self.store.insert_message(self.db, message)
            await self.db.commit()
        except Exception as e:
            logger.error(f"{__name__}:get_chat_completion - Prompt insert failed: {type(e).__name__}: {e}")
            await self.db.rollback()
            raise

        logger.info(
            f"{__name__}:get_chat_completion - Prompt recorded",
            extra={"partition_key": str(partition_key), "message_id": message.id},
        )
        return await self._complete(partition_key, message, received_at)

    async def retry_chat_completion(
        self,
        tenant_id: str,
        user_id: str,
        session_id: str,
        message_id: str,
    ) -> Message:
        """
        Answer a prompt that was recorded but never completed.

        A message that already has a completion is returned unchanged.
        The context window is rebuilt as of the prompt's timestamp.

        Raises:
            MessageNotFoundError: If the message does not exist in the session
        """
        received_at = time.monotonic()
        partition_key = session_partition_key(tenant_id, user_id, session_id)

        message = await self.store.get_message(self.db, partition_key, message_id)
        if message is None:
            raise MessageNotFoundError(message_id, details={"session_id": session_id})
        if message.is_completed:
            logger.info(
                f"{__name__}:retry_chat_completion - Already completed",
                extra={"message_id": message_id},
            )
            return message

        return await self._complete(partition_key, message, received_at)

    async def _complete(
        self,
        partition_key: PartitionKey,
        message: Message,
        received_at: float,
    ) -> Message:
        """Steps 2-9 of a chat turn for a recorded prompt."""
        try:
            window = await self.window_builder.build(self.db, partition_key, until=message.timestamp)
            prompts = join_prompts(window)
            vector = await self.provider.embed(prompts)

            cached = await self.cache.lookup(self.db, vector, self.settings.cache_similarity_score)
            if cached:
                # Cached text re-enters later context windows; generation cost is zero
                update = {
                    "completion": cached,
                    "cache_hit": True,
                    "completion_tokens": self.budgeter.count_tokens(cached),
                    "generation_tokens": 0,
                }
            else:
                update = await self._generate(message, window, vector, prompts)
        except Exception as e:
            logger.error(
                f"{__name__}:_complete - Completion failed, prompt kept for retry: {type(e).__name__}: {e}",
                extra={"partition_key": str(partition_key), "message_id": message.id},
            )
            await self.db.rollback()
            raise

        update["elapsed_milliseconds"] = int((time.monotonic() - received_at) * 1000)
        finalized = message.model_copy(update=update)
        await self._finalize(partition_key, finalized)

        logger.info(
            f"{__name__}:_complete - Completed",
            extra={
                "message_id": finalized.id,
                "cache_hit": finalized.cache_hit,
                "completion_tokens": finalized.completion_tokens,
                "generation_tokens": finalized.generation_tokens,
                "elapsed_ms": finalized.elapsed_milliseconds,
            },
        )
        return finalized

    async def _generate(
        self,
        message: Message,
        window: list[Message],
        vector: list[float],
        prompts: str,
    ) -> dict:
        """Retrieve products, generate a completion and cache it."""
        max_results = self.settings.product_max_results
        if self.settings.use_hybrid_search:
            products = await self.retrieval.hybrid_search_products(message.prompt, vector, max_results)
        else:
            products = await self.retrieval.search_products(vector, max_results)

        result = await self.provider.complete_with_retrieval(window, products)
        if result.text:
            await self.cache.insert(self.db, vector, prompts, result.text)

        return {
            "completion": result.text,
            "cache_hit": False,
            "completion_tokens": result.completion_tokens,
            "generation_tokens": result.generation_tokens,
        }

    async def _finalize(self, partition_key: PartitionKey, message: Message) -> None:
        """Charge the turn to the session and persist session and message together."""
        session = await self.store.get_session(self.db, partition_key)
        if session is None:
            raise SessionNotFoundError(partition_key.session_id)

        session = session.model_copy(
            update={"tokens": session.tokens + message.completion_tokens + message.generation_tokens}
        )
        await self.store.upsert_session_and_message_transactional(self.db, session, message)

    async def summarize_chat_session_name(
        self,
        tenant_id: str,
        user_id: str,
        session_id: str,
    ) -> str:
        """
        Name a session after its conversation.

        Returns:
            str: New session name, or the current one when the summary is blank

        Raises:
            SessionNotFoundError: If the session does not exist
        """
        sessions = SessionService(self.db, self.store)
        messages = await sessions.get_chat_session_messages(tenant_id, user_id, session_id)
        conversation = " ".join(f"{m.prompt} {m.completion}" for m in messages)

        name = (await self.provider.summarize(conversation)).strip()
        if not name:
            session = await sessions.get_chat_session(tenant_id, user_id, session_id)
            logger.warning(f"{__name__}:summarize_chat_session_name - Blank summary, keeping {session.name!r}")
            return session.name
        await sessions.rename_chat_session(tenant_id, user_id, session_id, name)

        logger.info(f"{__name__}:summarize_chat_session_name - Renamed session {session_id} to {name!r}")
        return name

    async def clear_cache(self) -> int:
        """Delete every semantic cache entry."""
        return await self.cache.clear(self.db)

    async def remove_cached_completion(self, prompts: str) -> bool:
        """
        Remove the cache entry of an exact prompt sequence.

        Args:
            prompts: Prompts joined by newlines, as used for the cache key

        Returns:
            True if an entry was removed
        """
        vector = await self.provider.embed(prompts)
        return await self.cache.remove_nearest(self.db, vector)

    async def purge_expired_cache(self) -> int:
        """Delete cache entries older than the configured lifetime."""
        return await self.cache.purge_expired(self.db)
