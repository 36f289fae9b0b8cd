"""
LangChain completion provider.

Implements CompletionProvider on top of LangChain chat and embedding
models. Production wiring uses Google Generative AI (Gemini) models;
any BaseChatModel / Embeddings pair can be injected.

Token usage is taken from the model's usage metadata when reported and
counted locally with the TokenBudgeter otherwise.

Dependencies: langchain_core, langchain_google_genai, copilot.core.token_budgeter
System role: LLM adapter for embeddings, chat, RAG and summarisation
"""

import json
import logging
from collections.abc import Sequence

from langchain_core.embeddings import Embeddings
from langchain_core.language_models import BaseChatModel
from langchain_core.messages import AIMessage, BaseMessage, HumanMessage
from langchain_core.prompt_values import PromptValue
from langchain_google_genai import ChatGoogleGenerativeAI, GoogleGenerativeAIEmbeddings

from copilot.boundary.llm.prompts import GENERAL_CHAT_PROMPT, RAG_CHAT_PROMPT, SUMMARIZE_PROMPT
from copilot.boundary.llm.provider import ChatCompletion, RagCompletion
from copilot.configs.completion import CompletionSettings
from copilot.core.exceptions import ProviderUnavailableError
from copilot.core.token_budgeter import TokenBudgeter
from copilot.models.message import Message
from copilot.models.product import Product

logger = logging.getLogger(__name__)


def history_messages(context: Sequence[Message]) -> list[BaseMessage]:
    """
    Convert a context window to alternating human/AI chat messages.

    Messages without a completion (the prompt being answered) contribute
    only their prompt.
    """
    history: list[BaseMessage] = []
    for message in context:
        history.append(HumanMessage(content=message.prompt))
        if message.completion:
            history.append(AIMessage(content=message.completion))
    return history


def content_text(content: str | list) -> str:
    """Flatten chat message content, which may be a list of parts, to text."""
    if isinstance(content, str):
        return content
    parts = []
    for part in content:
        if isinstance(part, str):
            parts.append(part)
        elif isinstance(part, dict) and part.get("type", "text") == "text":
            parts.append(part.get("text", ""))
    return "".join(parts)


def product_prompt_json(product: Product) -> str:
    """Serialized form of a product as sent to the model."""
    return json.dumps(product.to_prompt_dict())


class LangChainCompletionProvider:
    """CompletionProvider backed by LangChain models."""

    def __init__(
        self,
        chat_model: BaseChatModel,
        summary_model: BaseChatModel,
        embeddings: Embeddings,
        budgeter: TokenBudgeter,
        max_rag_tokens: int = 2500,
    ) -> None:
        """
        Initialize provider.

        Args:
            chat_model: Model used for chat and RAG completions
            summary_model: Model used for session name summaries
            embeddings: Embedding model
            budgeter: Token counter for product trimming and usage fallback
            max_rag_tokens: Token budget for serialized product data
        """
        self.chat_model = chat_model
        self.summary_model = summary_model
        self.embeddings = embeddings
        self.budgeter = budgeter
        self.max_rag_tokens = max_rag_tokens

    @classmethod
    def from_settings(
        cls,
        settings: CompletionSettings,
        budgeter: TokenBudgeter | None = None,
    ) -> "LangChainCompletionProvider":
        """
        Build a provider using Gemini chat and embedding models.

        Args:
            settings: Completion settings
            budgeter: Token budgeter (built from settings.tokenizer_model when None)

        Returns:
            LangChainCompletionProvider: Configured provider
        """
        api_key = settings.google_api_key
        credentials = {"google_api_key": api_key} if api_key else {}

        chat_model = ChatGoogleGenerativeAI(
            model=settings.chat_model,
            temperature=settings.temperature,
            top_p=settings.top_p,
            max_output_tokens=settings.max_output_tokens,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
            **credentials,
        )
        summary_model = ChatGoogleGenerativeAI(
            model=settings.chat_model,
            temperature=0.0,
            top_p=1.0,
            max_output_tokens=settings.summary_max_output_tokens,
            timeout=settings.request_timeout,
            max_retries=settings.max_retries,
            **credentials,
        )
        embeddings = GoogleGenerativeAIEmbeddings(model=settings.embedding_model, **credentials)

        logger.info(
            f"{__name__}:from_settings - Initialized with chat_model={settings.chat_model}, "
            f"embedding_model={settings.embedding_model}"
        )
        return cls(
            chat_model=chat_model,
            summary_model=summary_model,
            embeddings=embeddings,
            budgeter=budgeter or TokenBudgeter(model_name=settings.tokenizer_model),
            max_rag_tokens=settings.max_rag_tokens,
        )

    def _prompt_tokens(self, prompt: PromptValue) -> int:
        return sum(
            self.budgeter.count_tokens(content_text(message.content))
            for message in prompt.to_messages()
        )

    def _usage(self, prompt: PromptValue, response: AIMessage, text: str) -> tuple[int, int]:
        """(input_tokens, output_tokens) from usage metadata, counted locally if absent."""
        usage = response.usage_metadata
        if usage:
            return usage["input_tokens"], usage["output_tokens"]
        return self._prompt_tokens(prompt), self.budgeter.count_tokens(text)

    async def _invoke(self, model: BaseChatModel, prompt: PromptValue, operation: str) -> AIMessage:
        try:
            return await model.ainvoke(prompt)
        except Exception as e:
            logger.error(f"{__name__}:{operation} - {type(e).__name__}: {e}")
            raise ProviderUnavailableError(
                f"Completion provider call failed: {e}", operation=operation
            ) from e

    async def embed(self, text: str) -> list[float]:
        """
        Embed text.

        Raises:
            ProviderUnavailableError: If the embedding call fails
        """
        try:
            return await self.embeddings.aembed_query(text)
        except Exception as e:
            logger.error(f"{__name__}:embed - {type(e).__name__}: {e}")
            raise ProviderUnavailableError(f"Embedding call failed: {e}", operation="embed") from e

    async def complete(self, context: Sequence[Message]) -> ChatCompletion:
        """
        General assistant completion for a context window.

        Returns:
            ChatCompletion: Text and output token count
        """
        prompt = await GENERAL_CHAT_PROMPT.ainvoke({"history": history_messages(context)})
        response = await self._invoke(self.chat_model, prompt, "complete")
        text = content_text(response.content)
        _, output_tokens = self._usage(prompt, response, text)
        return ChatCompletion(text=text, tokens=output_tokens)

    async def complete_with_retrieval(
        self,
        context: Sequence[Message],
        products: Sequence[Product],
    ) -> RagCompletion:
        """
        Retail assistant completion grounded on retrieved products.

        Products are kept in retrieval order until their serialized size
        reaches max_rag_tokens; the rest are not sent.

        Args:
            context: Context window, oldest first
            products: Retrieved products, most relevant first

        Returns:
            RagCompletion: Text, input token cost and output token count
        """
        kept = self.budgeter.trim_records(products, self.max_rag_tokens, serializer=product_prompt_json)
        products_json = json.dumps([product.to_prompt_dict() for product in kept])

        prompt = await RAG_CHAT_PROMPT.ainvoke({
            "products": products_json,
            "history": history_messages(context),
        })
        response = await self._invoke(self.chat_model, prompt, "complete_with_retrieval")
        text = content_text(response.content)
        generation_tokens, completion_tokens = self._usage(prompt, response, text)

        logger.info(
            f"{__name__}:complete_with_retrieval - Completed",
            extra={
                "products_sent": len(kept),
                "products_retrieved": len(products),
                "generation_tokens": generation_tokens,
                "completion_tokens": completion_tokens,
            },
        )
        return RagCompletion(
            text=text,
            generation_tokens=generation_tokens,
            completion_tokens=completion_tokens,
        )

    async def summarize(self, text: str) -> str:
        """Summarise a conversation into a short label."""
        prompt = await SUMMARIZE_PROMPT.ainvoke({"conversation": text})
        response = await self._invoke(self.summary_model, prompt, "summarize")
        return content_text(response.content).strip()
