"""
Completion provider interface.

The chat orchestrator talks to the language model only through this
protocol: embeddings, general chat, retrieval-augmented chat and
summarisation. Implementations raise ProviderUnavailableError for any
failure or timeout of the underlying service.

Dependencies: copilot.models
System role: Contract between the orchestrator and the LLM backend
"""

from collections.abc import Sequence
from typing import NamedTuple, Protocol, runtime_checkable

from copilot.models.message import Message
from copilot.models.product import Product


class ChatCompletion(NamedTuple):
    """General chat result."""

    text: str
    tokens: int


class RagCompletion(NamedTuple):
    """
    Retrieval-augmented chat result.

    Attributes:
        text: Generated completion
        generation_tokens: Input cost (system prompt, product data and context)
        completion_tokens: Tokens of the generated text only
    """

    text: str
    generation_tokens: int
    completion_tokens: int


@runtime_checkable
class CompletionProvider(Protocol):
    """Embedding and chat completion backend."""

    async def embed(self, text: str) -> list[float]:
        """Embed text into a fixed-dimension vector."""
        ...

    async def complete(self, context: Sequence[Message]) -> ChatCompletion:
        """Answer the last prompt of a context window as a general assistant."""
        ...

    async def complete_with_retrieval(
        self,
        context: Sequence[Message],
        products: Sequence[Product],
    ) -> RagCompletion:
        """Answer the last prompt of a context window from retrieved products."""
        ...

    async def summarize(self, text: str) -> str:
        """Produce a one to three word label for a conversation."""
        ...
