"""
Shared test fixtures and configuration for entire test suite.

Provides: in-memory async database, byte-level token budgeter, fake
completion provider and sample entities
Dependencies: pytest, sqlalchemy, aiosqlite
System role: Test infrastructure and fixture management
"""

import hashlib
from collections.abc import Sequence
from datetime import datetime, timedelta, timezone

import pytest

from copilot.boundary.llm.provider import ChatCompletion, RagCompletion
from copilot.core.exceptions import ProviderUnavailableError
from copilot.core.token_budgeter import TokenBudgeter
from copilot.models.message import Message
from copilot.models.product import Product
from copilot.models.session import Session

TENANT_ID = "T1"
USER_ID = "U1"


def hash_embedding(text: str) -> list[float]:
    """Deterministic 32-dimensional embedding derived from a SHA-256 digest."""
    return [(byte - 127.5) / 127.5 for byte in hashlib.sha256(text.encode("utf-8")).digest()]


class ByteEncoding:
    """
    Tokenizer stand-in: one token per UTF-8 byte.

    Implements the subset of tiktoken.Encoding used by TokenBudgeter.
    """

    name = "bytes"

    def encode(self, text: str, **kwargs) -> list[int]:
        return list(text.encode("utf-8"))

    def decode_bytes(self, tokens: Sequence[int]) -> bytes:
        return bytes(tokens)


class FakeCompletionProvider:
    """
    In-memory CompletionProvider recording every call.

    Embeddings are deterministic per text, so identical prompt sequences
    map to identical vectors and different ones are far apart.
    """

    def __init__(self, budgeter: TokenBudgeter) -> None:
        self.budgeter = budgeter
        self.embed_calls: list[str] = []
        self.rag_calls: list[tuple[list[Message], list[Product]]] = []
        self.summarize_calls: list[str] = []
        self.fail_operations: set[str] = set()
        self.generation_tokens = 120
        self.summary = "Mountain Bikes"
        self.rag_texts: list[str] = []

    def _check(self, operation: str) -> None:
        if operation in self.fail_operations:
            raise ProviderUnavailableError(f"{operation} timed out", operation=operation)

    async def embed(self, text: str) -> list[float]:
        self._check("embed")
        self.embed_calls.append(text)
        return hash_embedding(text)

    async def complete(self, context: Sequence[Message]) -> ChatCompletion:
        self._check("complete")
        text = f"General answer to: {context[-1].prompt}"
        return ChatCompletion(text=text, tokens=self.budgeter.count_tokens(text))

    async def complete_with_retrieval(
        self,
        context: Sequence[Message],
        products: Sequence[Product],
    ) -> RagCompletion:
        self._check("complete_with_retrieval")
        self.rag_calls.append((list(context), list(products)))
        names = ", ".join(product.name for product in products) or "nothing in stock"
        text = f"For '{context[-1].prompt}' we have: {names}"
        if self.rag_texts:
            text = self.rag_texts.pop(0)
        return RagCompletion(
            text=text,
            generation_tokens=self.generation_tokens,
            completion_tokens=self.budgeter.count_tokens(text),
        )

    async def summarize(self, text: str) -> str:
        self._check("summarize")
        self.summarize_calls.append(text)
        return self.summary


class MutableClock:
    """Clock returning a settable UTC time."""

    def __init__(self, now: datetime | None = None) -> None:
        self.now = now or datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


@pytest.fixture
async def test_async_db():
    """
    Create in-memory SQLite async database for testing.

    Yields:
        AsyncSession: Test database session with cleanup
    """
    from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
    from sqlalchemy.pool import StaticPool

    from copilot.boundary.db import models  # noqa: F401
    from copilot.boundary.db.base import Base

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    async_session = async_sessionmaker(
        engine,
        class_=AsyncSession,
        autoflush=False,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session
        await session.rollback()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest.fixture
def budgeter() -> TokenBudgeter:
    """Token budgeter counting one token per UTF-8 byte."""
    return TokenBudgeter(encoding=ByteEncoding())


@pytest.fixture
def fake_provider(budgeter: TokenBudgeter) -> FakeCompletionProvider:
    """Recording completion provider."""
    return FakeCompletionProvider(budgeter)


@pytest.fixture
def clock() -> MutableClock:
    """Settable clock for time-dependent behavior."""
    return MutableClock()


@pytest.fixture
def sample_session() -> Session:
    """Fresh session for tenant T1 / user U1."""
    return Session.new(TENANT_ID, USER_ID)


@pytest.fixture
def make_message():
    """Factory for messages of a session at increasing timestamps."""
    base = datetime(2026, 1, 1, 9, 0, tzinfo=timezone.utc)

    def _make(session: Session, index: int, prompt: str | None = None, **fields) -> Message:
        return Message(
            tenant_id=session.tenant_id,
            user_id=session.user_id,
            session_id=session.session_id,
            timestamp=base + timedelta(minutes=index),
            prompt=prompt or f"prompt {index}",
            **fields,
        )

    return _make


@pytest.fixture
def sample_products() -> list[Product]:
    """Three bikes with hand-made two-dimensional embeddings."""
    return [
        Product(
            id="p-1",
            categoryId="c-bikes",
            categoryName="Bikes, Mountain Bikes",
            sku="BK-M68B-38",
            name="Mountain-200 Black",
            description="Trail mountain bike with hydraulic brakes",
            price=450.0,
            tags=[{"id": "t-1", "name": "Mountain"}],
            reviews=[{"customer": "Ana", "rating": 5, "review": "Great climber"}],
            vectors=[1.0, 0.0],
        ),
        Product(
            id="p-2",
            categoryId="c-bikes",
            categoryName="Bikes, Road Bikes",
            sku="BK-R50R-44",
            name="Road-650 Red",
            description="Light road bike",
            price=780.0,
            vectors=[0.0, 1.0],
        ),
        Product(
            id="p-3",
            categoryId="c-bikes",
            categoryName="Bikes, Mountain Bikes",
            sku="BK-M82S-42",
            name="Mountain-100 Silver",
            description="Cross country mountain bike",
            price=1200.0,
            vectors=[0.8, 0.6],
        ),
    ]
