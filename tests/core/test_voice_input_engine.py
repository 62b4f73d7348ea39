"""
Test suite for VoiceInputEngine.

Drives the native recognizer and the recording fallback through fake media
devices and a mocked transcription client.

System role: Verification of speech-to-text state machine
"""

import asyncio
from unittest.mock import AsyncMock, MagicMock

import pytest

from ragchat.core.exceptions import TranscriptionError
from ragchat.core.voice.speech_to_text import (
    MIC_DENIED_MESSAGE,
    TRANSCRIPTION_FAILED_MESSAGE,
    SpeechStatus,
    VoiceInputEngine,
)


@pytest.fixture
def transcripts() -> list[str]:
    return []


@pytest.fixture
def errors() -> list[str]:
    return []


@pytest.fixture
def engine(media_devices, mock_gemini_client, transcripts, errors) -> VoiceInputEngine:
    return VoiceInputEngine(
        media_devices,
        mock_gemini_client,
        on_transcript=transcripts.append,
        on_error=errors.append,
    )


class TestNativeRecognition:
    """Native recognizer path."""

    @pytest.mark.asyncio
    async def test_start_listening_should_use_native_recognizer(self, engine, media_devices) -> None:
        # Act
        await engine.start_listening()

        # Assert
        recognizer = media_devices.recognizers[0]
        assert engine.status == SpeechStatus.LISTENING
        assert recognizer.running
        assert recognizer.continuous is False
        assert recognizer.interim_results is True
        assert recognizer.lang == "en-US"

    @pytest.mark.asyncio
    async def test_result_should_forward_latest_transcript(self, engine, media_devices, transcripts) -> None:
        # Arrange
        await engine.start_listening()
        recognizer = media_devices.recognizers[0]

        # Act
        recognizer.emit_result("hel")
        recognizer.emit_result("hel", "hello world")

        # Assert
        assert transcripts == ["hel", "hello world"]

    @pytest.mark.asyncio
    async def test_end_should_return_to_idle(self, engine, media_devices) -> None:
        # Arrange
        await engine.start_listening()

        # Act
        media_devices.recognizers[0].emit_end()

        # Assert
        assert engine.status == SpeechStatus.IDLE

    @pytest.mark.asyncio
    async def test_non_service_error_should_surface(self, engine, media_devices, errors) -> None:
        """Errors outside the fallback set are reported and do not latch fallback."""
        # Arrange
        await engine.start_listening()

        # Act
        media_devices.recognizers[0].emit_error("no-speech")

        # Assert
        assert engine.status == SpeechStatus.ERROR
        assert errors == ["no-speech"]
        assert engine.is_fallback_mode is False

    @pytest.mark.asyncio
    async def test_stop_listening_should_stop_recognizer(self, engine, media_devices) -> None:
        # Arrange
        await engine.start_listening()

        # Act
        engine.stop_listening()

        # Assert
        assert media_devices.recognizers[0].stopped
        assert engine.status == SpeechStatus.IDLE


class TestFallback:
    """Recording + transcription fallback path."""

    @pytest.mark.asyncio
    async def test_network_error_should_switch_to_recording(
        self, engine, media_devices, mock_gemini_client, transcripts
    ) -> None:
        """A service error latches fallback and records the microphone."""
        # Arrange
        await engine.start_listening()
        recognizer = media_devices.recognizers[0]

        # Act
        recognizer.emit_error("network")
        await engine.drain()

        # Assert
        assert engine.is_fallback_mode is True
        assert recognizer.stopped
        assert engine.status == SpeechStatus.RECORDING
        assert len(media_devices.recorders) == 1

        # Act: stop and transcribe
        engine.stop_listening()
        await engine.drain()

        # Assert
        mock_gemini_client.transcribe.assert_awaited_once_with(b"clip", mime_type="audio/webm")
        assert transcripts == ["transcribed words"]
        assert engine.status == SpeechStatus.IDLE
        assert media_devices.microphone_streams[0].stopped

    @pytest.mark.asyncio
    async def test_stale_recognizer_events_should_be_ignored(
        self, engine, media_devices, transcripts
    ) -> None:
        """Once replaced, the old recognizer cannot deliver results."""
        # Arrange
        await engine.start_listening()
        recognizer = media_devices.recognizers[0]
        recognizer.emit_error("not-allowed")
        await engine.drain()

        # Act
        recognizer.emit_result("late words")
        recognizer.emit_end()

        # Assert
        assert transcripts == []
        assert engine.status == SpeechStatus.RECORDING

    @pytest.mark.asyncio
    async def test_fallback_should_persist_across_sessions(self, engine, media_devices) -> None:
        # Arrange
        await engine.start_listening()
        media_devices.recognizers[0].emit_error("service-not-allowed")
        await engine.drain()
        engine.stop_listening()
        await engine.drain()

        # Act
        await engine.start_listening()

        # Assert
        assert len(media_devices.recognizers) == 1
        assert len(media_devices.recorders) == 2
        assert engine.status == SpeechStatus.RECORDING

    @pytest.mark.asyncio
    async def test_native_start_failure_should_latch_fallback(self, engine, media_devices) -> None:
        # Arrange
        media_devices.fail_recognizer_start = True

        # Act
        await engine.start_listening()

        # Assert
        assert engine.is_fallback_mode is True
        assert engine.status == SpeechStatus.RECORDING

    @pytest.mark.asyncio
    async def test_no_native_recognizer_should_record(self, engine, media_devices) -> None:
        # Arrange
        media_devices.native_recognition = False

        # Act
        await engine.start_listening()

        # Assert
        assert engine.status == SpeechStatus.RECORDING
        assert engine.is_fallback_mode is False

    @pytest.mark.asyncio
    async def test_microphone_denied_should_report_error(self, engine, media_devices, errors) -> None:
        # Arrange
        media_devices.native_recognition = False
        media_devices.deny_microphone = True

        # Act
        await engine.start_listening()

        # Assert
        assert engine.status == SpeechStatus.ERROR
        assert errors == [MIC_DENIED_MESSAGE]

    @pytest.mark.asyncio
    async def test_transcription_failure_should_report_error(
        self, engine, media_devices, mock_gemini_client, transcripts, errors
    ) -> None:
        # Arrange
        media_devices.native_recognition = False
        mock_gemini_client.transcribe = AsyncMock(side_effect=TranscriptionError("bad audio"))
        await engine.start_listening()

        # Act
        engine.stop_listening()
        await engine.drain()

        # Assert
        assert engine.status == SpeechStatus.ERROR
        assert errors == [TRANSCRIPTION_FAILED_MESSAGE]
        assert transcripts == []

    @pytest.mark.asyncio
    async def test_empty_transcript_should_not_be_delivered(
        self, engine, media_devices, mock_gemini_client, transcripts
    ) -> None:
        # Arrange
        media_devices.native_recognition = False
        mock_gemini_client.transcribe = AsyncMock(return_value="")
        await engine.start_listening()

        # Act
        engine.stop_listening()
        await engine.drain()

        # Assert
        assert transcripts == []
        assert engine.status == SpeechStatus.IDLE

    @pytest.mark.asyncio
    async def test_close_should_release_without_transcribing(
        self, engine, media_devices, mock_gemini_client
    ) -> None:
        # Arrange
        media_devices.native_recognition = False
        await engine.start_listening()

        # Act
        engine.close()
        await asyncio.sleep(0)

        # Assert
        mock_gemini_client.transcribe.assert_not_awaited()
        assert media_devices.microphone_streams[0].stopped
        assert engine.status == SpeechStatus.IDLE
