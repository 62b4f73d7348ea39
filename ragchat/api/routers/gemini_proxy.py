"""Gemini provider gateway.

Routes:
- POST /gemini - Dispatch {"action", "payload"} to the provider

Actions:
- embedding: {"model", "text"} -> {"values": [...]}
- generate-content: {"model", "contents", "systemInstruction", "config"} -> {"text"}
- chat: {"model", "history", "message", "systemInstruction", "config"} -> {"text"}
- stream-chat: same payload as chat -> chunked text/plain body in which every
  chunk is the entire answer accumulated so far

Dependencies: ragchat.boundary.llm, ragchat.application.adapters
System role: Server-side provider proxy keeping the API key off the client
"""

import logging
from collections.abc import AsyncGenerator
from typing import Any

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from ragchat.api.deps import get_embedding_client, get_gemini_client, get_settings_dependency
from ragchat.api.routers.router_utils import status_code_for
from ragchat.application.adapters.gemini_payload_adapter import GeminiPayloadAdapter
from ragchat.boundary.llm.embedding_client import EmbeddingClient
from ragchat.boundary.llm.gemini_client import GeminiClient
from ragchat.configs import Settings
from ragchat.core.exceptions import RagChatException

logger = logging.getLogger(__name__)

router = APIRouter(tags=["gemini"])


class GeminiProxyRequest(BaseModel):
    """Gateway request envelope."""

    action: str = Field(description="embedding, generate-content, chat or stream-chat")
    payload: dict[str, Any] = Field(default_factory=dict)


def _error(message: str, status_code: int) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post("/gemini")
async def gemini_proxy(
    request: GeminiProxyRequest,
    settings: Settings = Depends(get_settings_dependency),
    gemini_client: GeminiClient = Depends(get_gemini_client),
    embedding_client: EmbeddingClient = Depends(get_embedding_client),
):
    """Dispatch one provider call."""
    if not settings.gemini.is_configured:
        return _error("Missing Gemini API Key", 500)

    payload = request.payload
    logger.info(f"{__name__}:gemini_proxy - action={request.action}")

    try:
        if request.action == "chat":
            text = await gemini_client.generate(
                GeminiPayloadAdapter.to_content(payload.get("message", "")),
                system_instruction=payload.get("systemInstruction"),
                model=payload.get("model"),
                history=GeminiPayloadAdapter.to_history(payload.get("history")),
                max_output_tokens=GeminiPayloadAdapter.max_output_tokens(payload.get("config")),
            )
            return {"text": text}

        if request.action == "stream-chat":
            history = GeminiPayloadAdapter.to_history(payload.get("history"))
            message = GeminiPayloadAdapter.to_content(payload.get("message", ""))

            async def body() -> AsyncGenerator[bytes, None]:
                async for cumulative in gemini_client.stream_generate(
                    history,
                    message,
                    system_instruction=payload.get("systemInstruction"),
                    model=payload.get("model"),
                    max_output_tokens=GeminiPayloadAdapter.max_output_tokens(payload.get("config")),
                ):
                    yield cumulative.encode("utf-8")

            return StreamingResponse(body(), media_type="text/plain; charset=utf-8")

        if request.action == "generate-content":
            history, current = GeminiPayloadAdapter.split_contents(payload.get("contents"))
            text = await gemini_client.generate(
                current,
                system_instruction=payload.get("systemInstruction"),
                model=payload.get("model"),
                history=history,
                max_output_tokens=GeminiPayloadAdapter.max_output_tokens(payload.get("config")),
            )
            return {"text": text}

        if request.action == "embedding":
            values = await embedding_client.embed(payload.get("text", ""))
            return {"values": values}

    except RagChatException as e:
        logger.error(f"{__name__}:gemini_proxy - {type(e).__name__}: {e}")
        return _error(e.message or "Internal Server Error", status_code_for(e))

    return _error("Invalid action", 400)
