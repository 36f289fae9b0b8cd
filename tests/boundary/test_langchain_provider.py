"""
Test suite for LangChainCompletionProvider.

Chat and embedding models are replaced by AsyncMocks returning
LangChain messages, so no network calls are made.

System role: Verification of the LLM adapter
"""

from unittest.mock import AsyncMock

import pytest
from langchain_core.messages import AIMessage, HumanMessage, SystemMessage

from copilot.boundary.llm.langchain_provider import (
    LangChainCompletionProvider,
    content_text,
    history_messages,
    product_prompt_json,
)
from copilot.core.exceptions import ProviderUnavailableError
from copilot.models.product import Product
from copilot.models.session import Session


def ai_message(text: str, input_tokens: int | None = None, output_tokens: int | None = None) -> AIMessage:
    if input_tokens is None:
        return AIMessage(content=text)
    return AIMessage(
        content=text,
        usage_metadata={
            "input_tokens": input_tokens,
            "output_tokens": output_tokens,
            "total_tokens": input_tokens + output_tokens,
        },
    )


@pytest.fixture
def chat_model() -> AsyncMock:
    model = AsyncMock()
    model.ainvoke.return_value = ai_message("We have the Mountain-200.", 812, 9)
    return model


@pytest.fixture
def summary_model() -> AsyncMock:
    model = AsyncMock()
    model.ainvoke.return_value = ai_message("  Mountain Bikes\n")
    return model


@pytest.fixture
def embeddings() -> AsyncMock:
    model = AsyncMock()
    model.aembed_query.return_value = [0.1, 0.2, 0.3]
    return model


@pytest.fixture
def provider(chat_model, summary_model, embeddings, budgeter) -> LangChainCompletionProvider:
    return LangChainCompletionProvider(
        chat_model=chat_model,
        summary_model=summary_model,
        embeddings=embeddings,
        budgeter=budgeter,
    )


@pytest.fixture
def context(sample_session: Session, make_message) -> list:
    return [
        make_message(sample_session, 0, prompt="Do you sell bikes?", completion="Yes, many."),
        make_message(sample_session, 1, prompt="Which mountain bikes?"),
    ]


class TestHelpers:
    """Test suite for message conversion helpers."""

    def test_history_messages_should_alternate_and_skip_empty_completion(self, context: list) -> None:
        history = history_messages(context)

        assert [type(m) for m in history] == [HumanMessage, AIMessage, HumanMessage]
        assert [m.content for m in history] == ["Do you sell bikes?", "Yes, many.", "Which mountain bikes?"]

    def test_content_text_should_flatten_content_parts(self) -> None:
        content = ["Hello ", {"type": "text", "text": "world"}, {"type": "image_url", "image_url": "x"}]

        assert content_text(content) == "Hello world"
        assert content_text("plain") == "plain"

    def test_product_prompt_json_should_leave_out_ids_and_vectors(self, sample_products: list[Product]) -> None:
        serialized = product_prompt_json(sample_products[0])

        assert "Mountain-200 Black" in serialized
        assert "p-1" not in serialized
        assert "c-bikes" not in serialized
        assert "vectors" not in serialized


class TestEmbed:
    """Test suite for embed()."""

    @pytest.mark.asyncio
    async def test_embed_should_return_vector(self, provider, embeddings) -> None:
        assert await provider.embed("bikes") == [0.1, 0.2, 0.3]
        embeddings.aembed_query.assert_awaited_once_with("bikes")

    @pytest.mark.asyncio
    async def test_embed_should_wrap_failures(self, provider, embeddings) -> None:
        embeddings.aembed_query.side_effect = TimeoutError("deadline exceeded")

        with pytest.raises(ProviderUnavailableError) as exc_info:
            await provider.embed("bikes")

        assert exc_info.value.details["operation"] == "embed"
        assert isinstance(exc_info.value.__cause__, TimeoutError)


class TestCompleteWithRetrieval:
    """Test suite for complete_with_retrieval()."""

    @pytest.mark.asyncio
    async def test_should_report_usage_metadata_token_counts(
        self,
        provider,
        context: list,
        sample_products: list[Product],
    ) -> None:
        result = await provider.complete_with_retrieval(context, sample_products)

        assert result.text == "We have the Mountain-200."
        assert result.generation_tokens == 812
        assert result.completion_tokens == 9

    @pytest.mark.asyncio
    async def test_should_count_tokens_locally_without_usage_metadata(
        self,
        provider,
        chat_model,
        context: list,
        sample_products: list[Product],
        budgeter,
    ) -> None:
        # Arrange
        chat_model.ainvoke.return_value = ai_message("Try the Mountain-100.")

        # Act
        result = await provider.complete_with_retrieval(context, sample_products)

        # Assert
        prompt = chat_model.ainvoke.await_args.args[0]
        expected_input = sum(budgeter.count_tokens(m.content) for m in prompt.to_messages())
        assert result.completion_tokens == budgeter.count_tokens("Try the Mountain-100.")
        assert result.generation_tokens == expected_input

    @pytest.mark.asyncio
    async def test_should_send_system_prompt_products_and_history(
        self,
        provider,
        chat_model,
        context: list,
        sample_products: list[Product],
    ) -> None:
        await provider.complete_with_retrieval(context, sample_products)

        messages = chat_model.ainvoke.await_args.args[0].to_messages()
        assert isinstance(messages[0], SystemMessage)
        assert "Cosmic Works" in messages[0].content
        assert "Road-650 Red" in messages[0].content
        assert [m.content for m in messages[1:]] == [
            "Do you sell bikes?",
            "Yes, many.",
            "Which mountain bikes?",
        ]

    @pytest.mark.asyncio
    async def test_should_drop_products_beyond_token_budget(
        self,
        chat_model,
        summary_model,
        embeddings,
        budgeter,
        context: list,
        sample_products: list[Product],
    ) -> None:
        # Arrange
        first_cost = budgeter.count_tokens(product_prompt_json(sample_products[0]))
        provider = LangChainCompletionProvider(
            chat_model=chat_model,
            summary_model=summary_model,
            embeddings=embeddings,
            budgeter=budgeter,
            max_rag_tokens=first_cost + 1,
        )

        # Act
        await provider.complete_with_retrieval(context, sample_products)

        # Assert
        system = chat_model.ainvoke.await_args.args[0].to_messages()[0].content
        assert "Mountain-200 Black" in system
        assert "Road-650 Red" not in system
        assert "Mountain-100 Silver" not in system

    @pytest.mark.asyncio
    async def test_should_accept_empty_retrieval(self, provider, chat_model, context: list) -> None:
        result = await provider.complete_with_retrieval(context, [])

        assert result.text == "We have the Mountain-200."
        assert chat_model.ainvoke.await_args.args[0].to_messages()[0].content.endswith("[]")

    @pytest.mark.asyncio
    async def test_should_wrap_model_failures(
        self,
        provider,
        chat_model,
        context: list,
    ) -> None:
        chat_model.ainvoke.side_effect = RuntimeError("503 Service Unavailable")

        with pytest.raises(ProviderUnavailableError) as exc_info:
            await provider.complete_with_retrieval(context, [])

        assert exc_info.value.details["operation"] == "complete_with_retrieval"


class TestCompleteAndSummarize:
    """Test suite for complete() and summarize()."""

    @pytest.mark.asyncio
    async def test_complete_should_return_text_and_output_tokens(self, provider, context: list) -> None:
        result = await provider.complete(context)

        assert result.text == "We have the Mountain-200."
        assert result.tokens == 9

    @pytest.mark.asyncio
    async def test_summarize_should_strip_label(self, provider, summary_model) -> None:
        name = await provider.summarize("Do you sell bikes? Yes, many.")

        messages = summary_model.ainvoke.await_args.args[0].to_messages()
        assert name == "Mountain Bikes"
        assert messages[-1].content == "Do you sell bikes? Yes, many."

    @pytest.mark.asyncio
    async def test_summarize_should_wrap_failures(self, provider, summary_model) -> None:
        summary_model.ainvoke.side_effect = ConnectionError("reset")

        with pytest.raises(ProviderUnavailableError):
            await provider.summarize("anything")
