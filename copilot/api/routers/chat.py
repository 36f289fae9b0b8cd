"""
Chat API endpoints.

Routes (under /tenants/{tenant_id}/users/{user_id}/sessions/{session_id}):
- POST /completions                    - Answer a prompt
- POST /messages/{message_id}/retry    - Answer a recorded prompt again

Dependencies: copilot.application.services.chat_service, copilot.models.chat
System role: Chat completion HTTP API
"""

import logging

from fastapi import APIRouter, Depends

from copilot.api.deps import get_chat_service
from copilot.api.routers.errors import to_http_exception
from copilot.application.services import ChatService
from copilot.core.exceptions import CopilotException
from copilot.models.chat import ChatRequest, MessageResponse
from copilot.observability.log_utils import log_with_context

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/tenants/{tenant_id}/users/{user_id}/sessions/{session_id}",
    tags=["chat"],
)


@router.post("/completions", response_model=MessageResponse)
async def get_completion(
    tenant_id: str,
    user_id: str,
    session_id: str,
    request: ChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> MessageResponse:
    """
    Answer a prompt in a session.

    Raises:
        HTTPException(404): Session not found
        HTTPException(503): Completion provider unavailable; the prompt is
            recorded and can be retried
    """
    log_with_context(
        logger,
        logging.INFO,
        f"{__name__}:get_completion - Prompt received",
        session_id=session_id,
        prompt=request.prompt,
    )
    try:
        message = await chat_service.get_chat_completion(tenant_id, user_id, session_id, request.prompt)
    except CopilotException as e:
        raise to_http_exception(e, "get_completion") from e
    return MessageResponse.model_validate(message.model_dump())


@router.post("/messages/{message_id}/retry", response_model=MessageResponse)
async def retry_completion(
    tenant_id: str,
    user_id: str,
    session_id: str,
    message_id: str,
    chat_service: ChatService = Depends(get_chat_service),
) -> MessageResponse:
    """
    Complete a prompt whose earlier completion attempt failed.

    Raises:
        HTTPException(404): Message not found
        HTTPException(503): Completion provider unavailable
    """
    try:
        message = await chat_service.retry_chat_completion(tenant_id, user_id, session_id, message_id)
    except CopilotException as e:
        raise to_http_exception(e, "retry_completion") from e
    return MessageResponse.model_validate(message.model_dump())
