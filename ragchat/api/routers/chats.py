"""Chat API endpoints.

Routes:
- GET/POST /chats - List or create chats
- GET/DELETE /chats/{chat_id} - Read or delete a chat
- PATCH /chats/{chat_id}/title - Rename a chat
- DELETE /chats/{chat_id}/messages - Clear a chat
- GET /chats/{chat_id}/export - Download the transcript
- POST /chats/{chat_id}/messages - Send a message, return the final answer
- POST /chats/{chat_id}/messages/stream - Stream the answer using Server-Sent Events (SSE)

Dependencies: ragchat.application.services.chat_service
System role: Chat messaging HTTP API with streaming support
"""

import json
import logging
from collections.abc import AsyncGenerator

from fastapi import APIRouter, Depends, Query, Response
from fastapi.responses import StreamingResponse

from ragchat.api.deps import get_chat_service
from ragchat.api.routers.router_utils import error_code_for, to_http_exception
from ragchat.application.services.chat_service import ChatService
from ragchat.core.exceptions import RagChatException
from ragchat.models.chat import (
    ChatListFilter,
    ChatSession,
    CreateChatRequest,
    ExportFormat,
    Message,
    SendMessageRequest,
    UpdateChatTitleRequest,
)
from ragchat.models.streaming import StreamEventType
from ragchat.observability.log_utils import log_exception_with_context

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/chats", tags=["chats"])


@router.get("", response_model=list[ChatSession])
async def list_chats(
    q: str = Query(default="", description="Case-insensitive title filter"),
    type: ChatListFilter = Query(default=ChatListFilter.ALL, description="Chat type filter"),
    chat_service: ChatService = Depends(get_chat_service),
) -> list[ChatSession]:
    """List chats by title search and type."""
    return chat_service.list_chats(query=q, type_filter=type)


@router.post("", response_model=ChatSession, status_code=201)
async def create_chat(
    request: CreateChatRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatSession:
    """Create a chat with its greeting message."""
    return await chat_service.create_chat(title=request.title, chat_type=request.type)


@router.get("/{chat_id}", response_model=ChatSession)
async def get_chat(
    chat_id: str,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatSession:
    try:
        return chat_service.get_chat(chat_id)
    except RagChatException as e:
        raise to_http_exception(e) from e


@router.delete("/{chat_id}", status_code=204)
async def delete_chat(
    chat_id: str,
    chat_service: ChatService = Depends(get_chat_service),
) -> Response:
    try:
        await chat_service.delete_chat(chat_id)
    except RagChatException as e:
        raise to_http_exception(e) from e
    return Response(status_code=204)


@router.patch("/{chat_id}/title", response_model=ChatSession)
async def update_chat_title(
    chat_id: str,
    request: UpdateChatTitleRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatSession:
    try:
        return await chat_service.update_title(chat_id, request.title)
    except RagChatException as e:
        raise to_http_exception(e) from e


@router.delete("/{chat_id}/messages", response_model=ChatSession)
async def clear_chat(
    chat_id: str,
    chat_service: ChatService = Depends(get_chat_service),
) -> ChatSession:
    try:
        return await chat_service.clear_chat(chat_id)
    except RagChatException as e:
        raise to_http_exception(e) from e


@router.get("/{chat_id}/export")
async def export_chat(
    chat_id: str,
    format: ExportFormat = Query(default=ExportFormat.TXT),
    chat_service: ChatService = Depends(get_chat_service),
) -> Response:
    """Download the chat as text or JSON."""
    try:
        export = chat_service.export_chat(chat_id, format)
    except RagChatException as e:
        raise to_http_exception(e) from e
    return Response(
        content=export.content,
        media_type=export.media_type,
        headers={"Content-Disposition": f'attachment; filename="{export.file_name}"'},
    )


@router.post("/{chat_id}/messages", response_model=Message)
async def send_message(
    chat_id: str,
    request: SendMessageRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> Message:
    """Send a message and return the finalized answer.

    Raises:
        HTTPException(400): Empty message
        HTTPException(404): Chat not found
        HTTPException(503): Missing API key
        HTTPException(500): Generation failure
    """
    try:
        return await chat_service.send_message(chat_id, request.text)
    except RagChatException as e:
        logger.error(f"{__name__}:send_message - {type(e).__name__}: {e}")
        raise to_http_exception(e) from e


@router.post("/{chat_id}/messages/stream")
async def stream_message(
    chat_id: str,
    request: SendMessageRequest,
    chat_service: ChatService = Depends(get_chat_service),
) -> StreamingResponse:
    """Stream the answer using Server-Sent Events (SSE).

    SSE Format:
        event: status
        data: {"message": "Searching knowledge base..."}

        event: sources
        data: {"sources": [{"title": "...", "page": 1}]}

        event: chunk
        data: {"text": "<entire answer so far>"}

        event: complete
        data: {"message": {...}}

        event: error
        data: {"code": "...", "message": "..."}

    Args:
        chat_id: Target chat
        request: SendMessageRequest with the message text
        chat_service: Injected ChatService

    Returns:
        StreamingResponse: SSE stream of chat events
    """
    try:
        chat_service.get_chat(chat_id)
    except RagChatException as e:
        raise to_http_exception(e) from e

    logger.info(f"{__name__}:stream_message - START chat_id={chat_id}")

    async def event_generator() -> AsyncGenerator[str, None]:
        """Generate SSE events from chat stream."""
        try:
            async for event in chat_service.stream_message(chat_id, request.text):
                # Format as SSE: "event: {type}\ndata: {json}\n\n"
                yield f"event: {event.type.value}\ndata: {json.dumps(event.data)}\n\n"
            logger.info(f"{__name__}:stream_message - Stream completed for chat_id={chat_id}")

        except RagChatException as e:
            log_exception_with_context(logger, f"{__name__}:stream_message - Stream failed", e, chat_id=chat_id)
            error_data = json.dumps({"code": error_code_for(e), "message": e.message})
            yield f"event: {StreamEventType.ERROR.value}\ndata: {error_data}\n\n"

    return StreamingResponse(
        event_generator(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "X-Accel-Buffering": "no",  # Disable nginx buffering
        },
    )
