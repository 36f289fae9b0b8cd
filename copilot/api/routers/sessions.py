"""
Session API endpoints.

Routes (under /tenants/{tenant_id}/users/{user_id}):
- POST   /sessions                          - Create session
- GET    /sessions                          - List sessions
- GET    /sessions/{session_id}/messages    - Chat history
- PATCH  /sessions/{session_id}             - Rename session
- POST   /sessions/{session_id}/summarize   - Name session from its transcript
- DELETE /sessions/{session_id}             - Delete session and messages

Dependencies: copilot.application.services, copilot.models
System role: Session management HTTP API
"""

import logging

from fastapi import APIRouter, Depends, Response

from copilot.api.deps import get_chat_service, get_session_service
from copilot.api.routers.errors import to_http_exception
from copilot.application.services import ChatService, SessionService
from copilot.core.exceptions import CopilotException
from copilot.models.chat import ChatHistoryResponse, MessageResponse
from copilot.models.session import Session
from copilot.models.session_schemas import RenameSessionRequest, SessionNameResponse, SessionResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/tenants/{tenant_id}/users/{user_id}/sessions", tags=["sessions"])


def _session_response(session: Session) -> SessionResponse:
    return SessionResponse.model_validate(session.model_dump())


@router.post("", response_model=SessionResponse, status_code=201)
async def create_session(
    tenant_id: str,
    user_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Create an empty chat session.

    Raises:
        HTTPException(422): Missing tenant or user
    """
    try:
        session = await session_service.create_new_chat_session(tenant_id, user_id)
    except CopilotException as e:
        raise to_http_exception(e, "create_session") from e
    return _session_response(session)


@router.get("", response_model=list[SessionResponse])
async def list_sessions(
    tenant_id: str,
    user_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> list[SessionResponse]:
    """List the sessions of a user."""
    try:
        sessions = await session_service.get_all_chat_sessions(tenant_id, user_id)
    except CopilotException as e:
        raise to_http_exception(e, "list_sessions") from e
    return [_session_response(session) for session in sessions]


@router.get("/{session_id}/messages", response_model=ChatHistoryResponse)
async def get_session_messages(
    tenant_id: str,
    user_id: str,
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> ChatHistoryResponse:
    """Chat history of a session, oldest first."""
    try:
        messages = await session_service.get_chat_session_messages(tenant_id, user_id, session_id)
    except CopilotException as e:
        raise to_http_exception(e, "get_session_messages") from e

    return ChatHistoryResponse(
        messages=[MessageResponse.model_validate(m.model_dump()) for m in messages],
        total=len(messages),
    )


@router.patch("/{session_id}", response_model=SessionResponse)
async def rename_session(
    tenant_id: str,
    user_id: str,
    session_id: str,
    request: RenameSessionRequest,
    session_service: SessionService = Depends(get_session_service),
) -> SessionResponse:
    """
    Rename a session.

    Raises:
        HTTPException(404): Session not found
    """
    try:
        session = await session_service.rename_chat_session(tenant_id, user_id, session_id, request.name)
    except CopilotException as e:
        raise to_http_exception(e, "rename_session") from e
    return _session_response(session)


@router.post("/{session_id}/summarize", response_model=SessionNameResponse)
async def summarize_session(
    tenant_id: str,
    user_id: str,
    session_id: str,
    chat_service: ChatService = Depends(get_chat_service),
) -> SessionNameResponse:
    """
    Name a session after its conversation.

    Raises:
        HTTPException(404): Session not found
        HTTPException(503): Completion provider unavailable
    """
    try:
        name = await chat_service.summarize_chat_session_name(tenant_id, user_id, session_id)
    except CopilotException as e:
        raise to_http_exception(e, "summarize_session") from e
    return SessionNameResponse(session_id=session_id, name=name)


@router.delete("/{session_id}", status_code=204)
async def delete_session(
    tenant_id: str,
    user_id: str,
    session_id: str,
    session_service: SessionService = Depends(get_session_service),
) -> Response:
    """Delete a session with all of its messages. Deleting twice is not an error."""
    try:
        await session_service.delete_chat_session(tenant_id, user_id, session_id)
    except CopilotException as e:
        raise to_http_exception(e, "delete_session") from e
    return Response(status_code=204)
