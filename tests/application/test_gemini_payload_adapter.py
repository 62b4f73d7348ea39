"""Tests for GeminiPayloadAdapter."""

import pytest
from langchain_core.messages import AIMessage, HumanMessage

from ragchat.application.adapters import GeminiPayloadAdapter
from ragchat.core.exceptions import ValidationError


class TestToContent:
    """Tests for GeminiPayloadAdapter.to_content."""

    def test_plain_string_passes_through(self) -> None:
        assert GeminiPayloadAdapter.to_content("hello") == "hello"

    def test_parts_become_blocks(self) -> None:
        # Arrange
        parts = [
            {"text": "describe"},
            {"inlineData": {"data": "AAAA", "mimeType": "image/png"}},
            "tail",
        ]

        # Act
        blocks = GeminiPayloadAdapter.to_content(parts)

        # Assert
        assert blocks == [
            {"type": "text", "text": "describe"},
            {"type": "media", "mime_type": "image/png", "data": "AAAA"},
            {"type": "text", "text": "tail"},
        ]

    def test_unknown_part_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GeminiPayloadAdapter.to_content([{"fileData": {}}])

    def test_non_list_message_is_rejected(self) -> None:
        with pytest.raises(ValidationError):
            GeminiPayloadAdapter.to_content(42)


class TestHistoryAndContents:
    """Tests for to_history and split_contents."""

    def test_to_history_maps_roles(self) -> None:
        history = GeminiPayloadAdapter.to_history(
            [
                {"role": "user", "parts": [{"text": "hi"}]},
                {"role": "model", "parts": [{"text": "hello"}]},
            ]
        )

        assert isinstance(history[0], HumanMessage)
        assert isinstance(history[1], AIMessage)
        assert history[1].content == [{"type": "text", "text": "hello"}]
        assert GeminiPayloadAdapter.to_history(None) == []

    def test_split_contents_separates_current_turn(self) -> None:
        # Act
        history, current = GeminiPayloadAdapter.split_contents(
            [
                {"role": "user", "parts": [{"text": "first"}]},
                {"role": "model", "parts": [{"text": "reply"}]},
                {"role": "user", "parts": [{"text": "second"}]},
            ]
        )

        # Assert
        assert len(history) == 2
        assert current == [{"type": "text", "text": "second"}]

    def test_split_contents_accepts_string_and_single_turn(self) -> None:
        assert GeminiPayloadAdapter.split_contents("just text") == ([], "just text")
        history, current = GeminiPayloadAdapter.split_contents({"parts": [{"text": "only"}]})
        assert history == []
        assert current == [{"type": "text", "text": "only"}]

    def test_split_contents_rejects_empty(self) -> None:
        with pytest.raises(ValidationError):
            GeminiPayloadAdapter.split_contents([])

    def test_max_output_tokens(self) -> None:
        assert GeminiPayloadAdapter.max_output_tokens({"maxOutputTokens": 512}) == 512
        assert GeminiPayloadAdapter.max_output_tokens(None) is None
