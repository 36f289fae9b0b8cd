"""
FastAPI dependency providers.

Services are built per request around the request's AsyncSession. The
completion provider and token budgeter are expensive to build and
stateless, so one instance of each is shared by the process.

Dependencies: copilot.configs, copilot.application, copilot.boundary
System role: Service wiring for the routers
"""

from functools import lru_cache

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from copilot.application.services import CatalogService, ChatService, SessionService
from copilot.boundary.db import get_async_db
from copilot.boundary.llm import CompletionProvider, get_completion_provider
from copilot.configs import Settings, get_settings
from copilot.core.token_budgeter import TokenBudgeter


class ServiceCache:
    """Container for process-wide service collaborators, created on first use."""

    def __init__(self) -> None:
        self._provider: CompletionProvider | None = None
        self._budgeter: TokenBudgeter | None = None

    @property
    def provider(self) -> CompletionProvider:
        """Get cached completion provider."""
        if self._provider is None:
            self._provider = get_completion_provider()
        return self._provider

    @property
    def budgeter(self) -> TokenBudgeter:
        """Get cached token budgeter."""
        if self._budgeter is None:
            self._budgeter = TokenBudgeter(model_name=get_settings().completion.tokenizer_model)
        return self._budgeter

    def clear(self) -> None:
        """Clear all cached instances."""
        self._provider = None
        self._budgeter = None


_service_cache = ServiceCache()


def get_service_cache() -> ServiceCache:
    """Get service cache singleton."""
    return _service_cache


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_session_service(db: AsyncSession = Depends(get_async_db)) -> SessionService:
    """
    Get session service instance.

    Args:
        db: Async database session (injected via Depends)

    Returns:
        SessionService: Session service instance
    """
    return SessionService(db=db)


def get_chat_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
    cache: ServiceCache = Depends(get_service_cache),
) -> ChatService:
    """
    Get chat service instance.

    Args:
        db: Async database session (injected via Depends)
        settings: Application settings
        cache: Shared provider and budgeter

    Returns:
        ChatService: Chat orchestrator bound to the request's session
    """
    return ChatService(
        db=db,
        provider=cache.provider,
        budgeter=cache.budgeter,
        settings=settings.chat,
    )


def get_catalog_service(
    db: AsyncSession = Depends(get_async_db),
    settings: Settings = Depends(get_settings_dependency),
    cache: ServiceCache = Depends(get_service_cache),
) -> CatalogService:
    """Get product catalog service instance."""
    return CatalogService(
        db=db,
        provider=cache.provider,
        request_timeout=settings.catalog.request_timeout,
    )
