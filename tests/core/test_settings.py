"""
Test suite for configuration loading.

System role: Verification of environment-driven settings
"""

import pytest
from pydantic import ValidationError as PydanticValidationError

from copilot.configs.chat import ChatSettings, ContextWindowPolicy
from copilot.configs.completion import CompletionSettings


class TestChatSettings:
    """Test suite for ChatSettings."""

    def test_defaults_should_use_depth_window_and_near_exact_cache(self) -> None:
        settings = ChatSettings(_env_file=None)

        assert settings.context_window_policy == ContextWindowPolicy.DEPTH
        assert settings.max_context_window == 3
        assert settings.cache_similarity_score == 0.99

    def test_environment_should_override_with_prefix(self, monkeypatch) -> None:
        monkeypatch.setenv("CHAT_CONTEXT_WINDOW_POLICY", "tokens")
        monkeypatch.setenv("CHAT_MAX_CONTEXT_TOKENS", "800")
        monkeypatch.setenv("CHAT_USE_HYBRID_SEARCH", "true")

        settings = ChatSettings(_env_file=None)

        assert settings.context_window_policy == ContextWindowPolicy.TOKENS
        assert settings.max_context_tokens == 800
        assert settings.use_hybrid_search is True

    def test_should_reject_non_positive_window(self) -> None:
        with pytest.raises(PydanticValidationError):
            ChatSettings(_env_file=None, max_context_window=0)

    def test_should_reject_similarity_outside_cosine_range(self) -> None:
        with pytest.raises(PydanticValidationError):
            ChatSettings(_env_file=None, cache_similarity_score=1.5)


class TestCompletionSettings:
    """Test suite for CompletionSettings."""

    def test_api_key_should_be_secret(self, monkeypatch) -> None:
        monkeypatch.setenv("COMPLETION_GOOGLE_API_KEY", "k-123")

        settings = CompletionSettings(_env_file=None)

        assert settings.google_api_key.get_secret_value() == "k-123"
        assert "k-123" not in repr(settings)
