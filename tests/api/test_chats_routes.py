"""
Tests for the chat endpoints, including the SSE answer stream.

A real ChatService without a store is wired to a scripted orchestrator.
"""

import json
from unittest.mock import MagicMock

import pytest

from ragchat.api.deps import get_chat_service
from ragchat.application.services.chat_service import ChatService
from ragchat.core.exceptions import GenerationError
from ragchat.models.streaming import StreamEvent, StreamEventType


def _orchestrator(*events: StreamEvent, error: Exception | None = None) -> MagicMock:
    async def astream(user_message, history, chat_type, chat_id):
        for event in events:
            yield event
        if error is not None:
            raise error

    orchestrator = MagicMock()
    orchestrator.astream = MagicMock(side_effect=astream)
    return orchestrator


def _parse_sse(body: str) -> list[tuple[str, dict]]:
    events = []
    for block in body.strip().split("\n\n"):
        lines = dict(line.split(": ", 1) for line in block.splitlines())
        events.append((lines["event"], json.loads(lines["data"])))
    return events


ANSWER_EVENTS = (
    StreamEvent.status("Searching knowledge base..."),
    StreamEvent(type=StreamEventType.SOURCES, data={"sources": [{"title": "a.pdf", "page": 1}]}),
    StreamEvent.chunk("Forty"),
    StreamEvent.chunk("Forty two"),
    StreamEvent(type=StreamEventType.COMPLETE, data={"text": "Forty two"}),
)


@pytest.fixture
def chat_service(mock_gemini_client) -> ChatService:
    return ChatService(_orchestrator(*ANSWER_EVENTS), mock_gemini_client)


@pytest.fixture
def wired_client(app, client, chat_service):
    app.dependency_overrides[get_chat_service] = lambda: chat_service
    return client


def _create(client, title: str = "Named", chat_type: str = "global") -> dict:
    response = client.post("/api/v1/chats", json={"title": title, "type": chat_type})
    assert response.status_code == 201
    return response.json()


class TestChatManagementRoutes:
    """CRUD-style chat routes."""

    def test_create_and_get_chat(self, wired_client) -> None:
        # Act
        created = _create(wired_client, "", "dedicated")
        fetched = wired_client.get(f"/api/v1/chats/{created['id']}")

        # Assert
        assert created["title"] == "New Chat"
        assert created["type"] == "dedicated"
        assert len(created["messages"]) == 1
        assert fetched.json()["id"] == created["id"]

    def test_list_chats_filters(self, wired_client) -> None:
        # Arrange
        _create(wired_client, "Budget")
        _create(wired_client, "Budget notes", "dedicated")
        _create(wired_client, "Travel")

        # Act
        response = wired_client.get("/api/v1/chats", params={"q": "budget", "type": "global"})

        # Assert
        assert [c["title"] for c in response.json()] == ["Budget"]

    def test_rename_clear_and_delete(self, wired_client) -> None:
        # Arrange
        chat_id = _create(wired_client)["id"]

        # Act
        renamed = wired_client.patch(f"/api/v1/chats/{chat_id}/title", json={"title": "Renamed"})
        cleared = wired_client.delete(f"/api/v1/chats/{chat_id}/messages")
        deleted = wired_client.delete(f"/api/v1/chats/{chat_id}")
        missing = wired_client.get(f"/api/v1/chats/{chat_id}")

        # Assert
        assert renamed.json()["title"] == "Renamed"
        assert cleared.json()["messages"] == []
        assert deleted.status_code == 204
        assert missing.status_code == 404

    def test_blank_title_is_rejected(self, wired_client) -> None:
        chat_id = _create(wired_client)["id"]

        response = wired_client.patch(f"/api/v1/chats/{chat_id}/title", json={"title": "  "})

        assert response.status_code == 400

    def test_export_sets_attachment_header(self, wired_client) -> None:
        chat_id = _create(wired_client, "Project Plan")["id"]

        response = wired_client.get(f"/api/v1/chats/{chat_id}/export", params={"format": "json"})

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("application/json")
        disposition = response.headers["content-disposition"]
        assert disposition.startswith('attachment; filename="chat_Project_Plan_')
        assert disposition.endswith('.json"')
        assert json.loads(response.text)[0]["role"] == "model"


class TestMessageRoutes:
    """Send and stream routes."""

    def test_send_message_returns_final_answer(self, wired_client) -> None:
        chat_id = _create(wired_client)["id"]

        response = wired_client.post(f"/api/v1/chats/{chat_id}/messages", json={"text": "question"})

        assert response.status_code == 200
        body = response.json()
        assert body["text"] == "Forty two"
        assert body["sources"] == [{"title": "a.pdf", "page": 1}]

    def test_send_message_to_unknown_chat_is_404(self, wired_client) -> None:
        response = wired_client.post("/api/v1/chats/missing/messages", json={"text": "question"})

        assert response.status_code == 404

    def test_missing_api_key_is_503(self, app, client, mock_gemini_client) -> None:
        service = ChatService(_orchestrator(*ANSWER_EVENTS), mock_gemini_client, api_key_configured=False)
        app.dependency_overrides[get_chat_service] = lambda: service
        chat_id = _create(client)["id"]

        response = client.post(f"/api/v1/chats/{chat_id}/messages", json={"text": "question"})

        assert response.status_code == 503

    def test_stream_emits_cumulative_chunks_and_completion(self, wired_client) -> None:
        # Arrange
        chat_id = _create(wired_client)["id"]

        # Act
        response = wired_client.post(f"/api/v1/chats/{chat_id}/messages/stream", json={"text": "question"})

        # Assert
        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/event-stream")
        events = _parse_sse(response.text)
        assert [name for name, _ in events] == ["status", "sources", "chunk", "chunk", "complete"]
        assert [data["text"] for name, data in events if name == "chunk"] == ["Forty", "Forty two"]
        assert events[-1][1]["message"]["text"] == "Forty two"
        assert events[-1][1]["message"]["is_streaming"] is False

    def test_stream_failure_emits_error_event(self, app, client, mock_gemini_client) -> None:
        # Arrange
        orchestrator = _orchestrator(StreamEvent.chunk("Par"), error=GenerationError("model overloaded"))
        service = ChatService(orchestrator, mock_gemini_client)
        app.dependency_overrides[get_chat_service] = lambda: service
        chat_id = _create(client)["id"]

        # Act
        response = client.post(f"/api/v1/chats/{chat_id}/messages/stream", json={"text": "question"})

        # Assert
        events = _parse_sse(response.text)
        assert events[-1] == ("error", {"code": "PROCESSING_ERROR", "message": "model overloaded"})
        messages = client.get(f"/api/v1/chats/{chat_id}").json()["messages"]
        assert [m["role"] for m in messages] == ["model", "user"]

    def test_stream_unknown_chat_is_404(self, wired_client) -> None:
        response = wired_client.post("/api/v1/chats/missing/messages/stream", json={"text": "question"})

        assert response.status_code == 404
