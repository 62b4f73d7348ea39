"""
Voice input engine.

Push-to-talk dictation for the chat input. Prefers the platform speech
recognizer and latches into a Gemini transcription fallback (record the
microphone, transcribe on stop) once the native service proves unusable.

States: idle -> listening -> (recording | error) -> processing -> idle

Dependencies: ragchat.core.voice.media, ragchat.boundary.llm.gemini_client
System role: Speech-to-text for chat input
"""

import asyncio
import logging
from collections.abc import Callable, Coroutine
from enum import Enum
from typing import Any

from ragchat.boundary.llm.gemini_client import GeminiClient
from ragchat.core.exceptions import MediaPermissionError, TranscriptionError
from ragchat.core.voice.media import (
    RECORDER_INACTIVE,
    MediaDevices,
    MediaRecorder,
    MediaStream,
    SpeechRecognizer,
)

logger = logging.getLogger(__name__)

FALLBACK_ERROR_CODES = frozenset({"network", "not-allowed", "service-not-allowed"})
MIC_DENIED_MESSAGE = "Microphone access denied"
TRANSCRIPTION_FAILED_MESSAGE = "Transcription failed"


class SpeechStatus(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    RECORDING = "recording"
    PROCESSING = "processing"
    ERROR = "error"


class VoiceInputEngine:
    """
    Speech-to-text state machine for one input session.

    Native results are forwarded as they arrive (interim included); the
    caller merges fragments. Fallback transcripts are delivered once,
    after the recording stops.
    """

    def __init__(
        self,
        media_devices: MediaDevices,
        gemini_client: GeminiClient,
        on_transcript: Callable[[str], None],
        on_error: Callable[[str], None] | None = None,
        lang: str = "en-US",
        audio_mime_type: str = "audio/webm",
    ) -> None:
        self._media = media_devices
        self._gemini = gemini_client
        self._on_transcript = on_transcript
        self._on_error = on_error
        self._lang = lang
        self._audio_mime_type = audio_mime_type

        self.status = SpeechStatus.IDLE
        self.is_fallback_mode = False

        self._recognizer: SpeechRecognizer | None = None
        self._recorder: MediaRecorder | None = None
        self._stream: MediaStream | None = None
        self._chunks: list[bytes] = []
        self._tasks: set[asyncio.Task] = set()

    def _set_status(self, status: SpeechStatus) -> None:
        if status != self.status:
            logger.debug(f"{__name__}:status - {self.status.value} -> {status.value}")
        self.status = status

    def _spawn(self, coro: Coroutine[Any, Any, None]) -> None:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    def _report_error(self, message: str) -> None:
        self._set_status(SpeechStatus.ERROR)
        if self._on_error is not None:
            self._on_error(message)

    async def start_listening(self) -> None:
        """Start dictation through the native recognizer or the recording fallback."""
        self._set_status(SpeechStatus.LISTENING)

        if not self.is_fallback_mode:
            recognizer = self._media.create_recognizer(
                continuous=False, interim_results=True, lang=self._lang
            )
            if recognizer is not None:
                self._attach(recognizer)
                try:
                    recognizer.start()
                    logger.info(f"{__name__}:start_listening - Native recognizer started")
                    return
                except RuntimeError as e:
                    logger.error(f"{__name__}:start_listening - Native init failed", exc_info=e)
                    self._recognizer = None
                    self.is_fallback_mode = True

        await self._start_fallback_recording()

    def _attach(self, recognizer: SpeechRecognizer) -> None:
        self._recognizer = recognizer

        def on_result(results: list[str]) -> None:
            if recognizer is not self._recognizer or not results:
                return
            self._on_transcript(results[-1])

        def on_error(code: str) -> None:
            if recognizer is not self._recognizer:
                return
            logger.warning(f"{__name__}:on_error - Native recognizer error: {code}")
            if code in FALLBACK_ERROR_CODES:
                logger.info(f"{__name__}:on_error - Switching to fallback transcription")
                self.is_fallback_mode = True
                self._recognizer = None
                recognizer.stop()
                self._set_status(SpeechStatus.RECORDING)
                self._spawn(self._start_fallback_recording())
            else:
                self._report_error(code)

        def on_end() -> None:
            if recognizer is not self._recognizer:
                return
            if self.status == SpeechStatus.LISTENING:
                self._set_status(SpeechStatus.IDLE)

        recognizer.on_result = on_result
        recognizer.on_error = on_error
        recognizer.on_end = on_end

    async def _start_fallback_recording(self) -> None:
        self._set_status(SpeechStatus.RECORDING)
        self._chunks = []

        try:
            stream = await self._media.get_user_media()
        except MediaPermissionError as e:
            logger.error(f"{__name__}:_start_fallback_recording - Mic permission failed", exc_info=e)
            self._report_error(MIC_DENIED_MESSAGE)
            return

        recorder = self._media.create_recorder(stream)

        def on_data(data: bytes) -> None:
            if data:
                self._chunks.append(data)

        def on_stop() -> None:
            if recorder is self._recorder:
                self._spawn(self._transcribe_recording(stream))

        recorder.on_data = on_data
        recorder.on_stop = on_stop
        self._stream = stream
        self._recorder = recorder
        recorder.start()
        logger.info(f"{__name__}:_start_fallback_recording - Recording microphone")

    async def _transcribe_recording(self, stream: MediaStream) -> None:
        self._set_status(SpeechStatus.PROCESSING)
        stream.stop()
        audio = b"".join(self._chunks)

        try:
            text = await self._gemini.transcribe(audio, mime_type=self._audio_mime_type)
        except TranscriptionError as e:
            logger.error(f"{__name__}:_transcribe_recording - Fallback failed", exc_info=e)
            self._report_error(TRANSCRIPTION_FAILED_MESSAGE)
            return

        if text:
            self._on_transcript(text)
        self._set_status(SpeechStatus.IDLE)

    def stop_listening(self) -> None:
        """Stop dictation. A running fallback recording is transcribed."""
        if self._recognizer is not None:
            self._recognizer.stop()
        if self._recorder is not None and self._recorder.state != RECORDER_INACTIVE:
            self._recorder.stop()
        else:
            self._set_status(SpeechStatus.IDLE)

    async def drain(self) -> None:
        """Wait for pending fallback and transcription work."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def close(self) -> None:
        """Release the recognizer and any running capture without transcribing."""
        if self._recognizer is not None:
            recognizer, self._recognizer = self._recognizer, None
            recognizer.abort()
        if self._recorder is not None:
            recorder, self._recorder = self._recorder, None
            if recorder.state != RECORDER_INACTIVE:
                recorder.stop()
        if self._stream is not None:
            self._stream.stop()
            self._stream = None
        for task in list(self._tasks):
            task.cancel()
        self._set_status(SpeechStatus.IDLE)
