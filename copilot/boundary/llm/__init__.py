"""
Completion provider boundary.

Exports:
  - CompletionProvider: Protocol consumed by the chat orchestrator
  - LangChainCompletionProvider: LangChain/Gemini implementation
  - get_completion_provider: Cached provider built from settings
"""

from functools import lru_cache

from copilot.boundary.llm.langchain_provider import LangChainCompletionProvider
from copilot.boundary.llm.provider import ChatCompletion, CompletionProvider, RagCompletion
from copilot.configs import get_settings


@lru_cache
def get_completion_provider() -> CompletionProvider:
    """Completion provider singleton configured from settings."""
    return LangChainCompletionProvider.from_settings(get_settings().completion)


__all__ = [
    "ChatCompletion",
    "CompletionProvider",
    "LangChainCompletionProvider",
    "RagCompletion",
    "get_completion_provider",
]
