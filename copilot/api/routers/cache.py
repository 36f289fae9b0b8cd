"""
Semantic cache administration endpoints.

Routes:
- DELETE /cache        - Remove every cached completion
- POST   /cache/purge  - Remove expired entries
- POST   /cache/remove - Remove the entry of an exact prompt sequence

Dependencies: copilot.application.services.chat_service
System role: Cache administration HTTP API
"""

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from copilot.api.deps import get_chat_service
from copilot.api.routers.errors import to_http_exception
from copilot.application.services import ChatService
from copilot.core.exceptions import CopilotException


class CacheRemovalResponse(BaseModel):
    """Number of cache entries removed."""

    removed: int


class RemoveCachedCompletionRequest(BaseModel):
    """Prompt sequence whose cache entry should be removed."""

    prompts: str = Field(min_length=1, description="Prompts joined by newlines")


router = APIRouter(prefix="/cache", tags=["cache"])


@router.delete("", response_model=CacheRemovalResponse)
async def clear_cache(chat_service: ChatService = Depends(get_chat_service)) -> CacheRemovalResponse:
    """Clear the semantic cache."""
    try:
        removed = await chat_service.clear_cache()
    except CopilotException as e:
        raise to_http_exception(e, "clear_cache") from e
    return CacheRemovalResponse(removed=removed)


@router.post("/purge", response_model=CacheRemovalResponse)
async def purge_cache(chat_service: ChatService = Depends(get_chat_service)) -> CacheRemovalResponse:
    """Delete cache entries past their lifetime."""
    try:
        removed = await chat_service.purge_expired_cache()
    except CopilotException as e:
        raise to_http_exception(e, "purge_cache") from e
    return CacheRemovalResponse(removed=removed)


@router.post("/remove", response_model=CacheRemovalResponse)
async def remove_cached_completion(
    request: RemoveCachedCompletionRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> CacheRemovalResponse:
    """Delete the cache entry matching a prompt sequence, if any."""
    try:
        removed = await chat_service.remove_cached_completion(request.prompts)
    except CopilotException as e:
        raise to_http_exception(e, "remove_cached_completion") from e
    return CacheRemovalResponse(removed=int(removed))
