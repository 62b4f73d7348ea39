"""
Live session engine.

Continuous screen + microphone conversation. Voice activity (native
recognizer transcripts, or manual energy VAD in fallback mode) segments
the session into turns; each turn records the screen and voice, asks the
multimodal model about it and speaks the answer back.

States: idle -> listening -> recording -> processing -> speaking -> listening ...

All mutable per-run state lives on a LiveSessionContext. Handlers capture
the context they were registered for and ignore events once it is no
longer the active one, so late recognizer or synthesizer events after
stop_session cannot restart anything.

Dependencies: numpy (via vad), ragchat.core.voice.media, ragchat.boundary.llm
System role: Voice/screen live conversation loop
"""

import asyncio
import logging
import time
from collections.abc import Callable, Coroutine
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ragchat.application.adapters.chat_history_adapter import ChatHistoryAdapter
from ragchat.boundary.llm.gemini_client import GeminiClient
from ragchat.configs.live import LiveSessionSettings
from ragchat.core.exceptions import GenerationError, MediaPermissionError, TranscriptionError
from ragchat.core.voice.media import (
    RECORDER_INACTIVE,
    AudioFrameSource,
    MediaDevices,
    MediaRecorder,
    MediaStream,
    SpeechRecognizer,
    SpeechSynthesizer,
)
from ragchat.core.voice.vad import EnergyVoiceActivityDetector
from ragchat.models.chat import Message, Role

logger = logging.getLogger(__name__)

FALLBACK_ERROR_CODES = frozenset({"network", "service-not-allowed", "aborted"})
SCREEN_SHARE_FAILED_MESSAGE = "Failed to start screen share. Please allow permissions."
MICROPHONE_FAILED_MESSAGE = "Failed to access microphone."
TURN_MEDIA_MIME_TYPE = "video/webm"


class LiveStatus(str, Enum):
    IDLE = "idle"
    LISTENING = "listening"
    RECORDING = "recording"
    PROCESSING = "processing"
    SPEAKING = "speaking"


@dataclass
class LiveSessionContext:
    """Resources and status of one started session."""

    screen_stream: MediaStream
    audio_stream: MediaStream
    status: LiveStatus = LiveStatus.IDLE
    active: bool = True
    transcript: str = ""
    recognizer: SpeechRecognizer | None = None
    recorder: MediaRecorder | None = None
    chunks: list[bytes] = field(default_factory=list)
    silence_timer: asyncio.TimerHandle | None = None
    restart_timer: asyncio.TimerHandle | None = None
    vad_task: asyncio.Task | None = None
    frame_source: AudioFrameSource | None = None
    tasks: set[asyncio.Task] = field(default_factory=set)


class LiveSessionEngine:
    """
    Turn-based live conversation over screen share and microphone.

    The fallback flag is a one-way latch for the engine's lifetime: once
    the native recognizer fails with a service error, every later session
    uses manual VAD and transcription.
    """

    def __init__(
        self,
        media_devices: MediaDevices,
        gemini_client: GeminiClient,
        synthesizer: SpeechSynthesizer,
        on_new_message: Callable[[Message], None],
        history_provider: Callable[[], list[Message]],
        on_error: Callable[[str], None] | None = None,
        on_status_change: Callable[[LiveStatus], None] | None = None,
        settings: LiveSessionSettings | None = None,
        max_history_turns: int = 15,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._media = media_devices
        self._gemini = gemini_client
        self._synthesizer = synthesizer
        self._on_new_message = on_new_message
        self._history_provider = history_provider
        self._on_error = on_error
        self._on_status_change = on_status_change
        self._settings = settings or LiveSessionSettings()
        self._max_history_turns = max_history_turns
        self._clock = clock

        self.is_fallback_mode = False
        self._ctx: LiveSessionContext | None = None

    @property
    def status(self) -> LiveStatus:
        return self._ctx.status if self._ctx else LiveStatus.IDLE

    @property
    def transcript(self) -> str:
        return self._ctx.transcript if self._ctx else ""

    @property
    def context(self) -> LiveSessionContext | None:
        return self._ctx

    def _is_current(self, ctx: LiveSessionContext) -> bool:
        return ctx.active and ctx is self._ctx

    def _set_status(self, ctx: LiveSessionContext, status: LiveStatus) -> None:
        if ctx.status == status:
            return
        logger.debug(f"{__name__}:status - {ctx.status.value} -> {status.value}")
        ctx.status = status
        if self._on_status_change is not None:
            self._on_status_change(status)

    def _spawn(self, ctx: LiveSessionContext, coro: Coroutine[Any, Any, None]) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        ctx.tasks.add(task)
        task.add_done_callback(ctx.tasks.discard)
        return task

    def _report_error(self, message: str) -> None:
        if self._on_error is not None:
            self._on_error(message)

    # ------------------------------------------------------------------
    # Session lifecycle
    # ------------------------------------------------------------------

    async def start_session(self) -> None:
        """
        Acquire screen and microphone, then start listening.

        A permission failure is reported once through on_error and leaves
        the engine idle with nothing acquired.
        """
        if self._ctx is not None:
            logger.warning(f"{__name__}:start_session - Session already running")
            return

        logger.info(f"{__name__}:start_session - Step 1: Requesting screen share")
        try:
            screen = await self._media.get_display_media(video=True, audio=True)
        except MediaPermissionError as e:
            logger.error(f"{__name__}:start_session - Screen share denied", exc_info=e)
            self._report_error(SCREEN_SHARE_FAILED_MESSAGE)
            return

        logger.info(f"{__name__}:start_session - Step 2: Requesting microphone")
        try:
            audio = await self._media.get_user_media(
                echo_cancellation=True, noise_suppression=True, auto_gain_control=True
            )
        except MediaPermissionError as e:
            logger.error(f"{__name__}:start_session - Microphone denied", exc_info=e)
            screen.stop()
            self._report_error(MICROPHONE_FAILED_MESSAGE)
            return

        ctx = LiveSessionContext(screen_stream=screen, audio_stream=audio)
        self._ctx = ctx

        if not self.is_fallback_mode:
            recognizer = self._media.create_recognizer(
                continuous=True, interim_results=True, lang=self._settings.recognizer_lang
            )
            if recognizer is None:
                self.is_fallback_mode = True
            else:
                self._attach_recognizer(ctx, recognizer)

        logger.info(
            f"{__name__}:start_session - Step 3: Listening (fallback={self.is_fallback_mode})"
        )
        self._enter_listening(ctx)

    def stop_session(self) -> None:
        """Release every resource of the running session and return to idle."""
        ctx = self._ctx
        if ctx is None:
            return
        logger.info(f"{__name__}:stop_session - Tearing down live session")
        ctx.active = False

        ctx.screen_stream.stop()
        ctx.audio_stream.stop()

        if ctx.recognizer is not None:
            recognizer, ctx.recognizer = ctx.recognizer, None
            recognizer.abort()
        if ctx.recorder is not None and ctx.recorder.state != RECORDER_INACTIVE:
            ctx.recorder.stop()

        for timer in (ctx.silence_timer, ctx.restart_timer):
            if timer is not None:
                timer.cancel()
        ctx.silence_timer = ctx.restart_timer = None

        if ctx.vad_task is not None:
            ctx.vad_task.cancel()
        for task in list(ctx.tasks):
            task.cancel()

        self._synthesizer.cancel()
        ctx.transcript = ""
        self._set_status(ctx, LiveStatus.IDLE)
        self._ctx = None

    async def drain(self) -> None:
        """Wait for in-flight turn work of the current session."""
        while self._ctx is not None:
            pending = [t for t in self._ctx.tasks if not t.done()]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)

    # ------------------------------------------------------------------
    # Listening
    # ------------------------------------------------------------------

    def _enter_listening(self, ctx: LiveSessionContext) -> None:
        self._set_status(ctx, LiveStatus.LISTENING)
        if self.is_fallback_mode:
            self._ensure_vad(ctx)
        else:
            self._start_recognizer(ctx)

    def _start_recognizer(self, ctx: LiveSessionContext) -> None:
        if ctx.recognizer is None:
            return
        try:
            ctx.recognizer.start()
        except RuntimeError as e:
            logger.debug(f"{__name__}:_start_recognizer - Recognizer already running: {e}")

    def _attach_recognizer(self, ctx: LiveSessionContext, recognizer: SpeechRecognizer) -> None:
        ctx.recognizer = recognizer

        def is_live() -> bool:
            return self._is_current(ctx) and ctx.recognizer is recognizer

        def on_result(results: list[str]) -> None:
            if not is_live() or ctx.status not in (LiveStatus.LISTENING, LiveStatus.RECORDING):
                return
            ctx.transcript = "".join(results)
            if ctx.status == LiveStatus.LISTENING and ctx.transcript.strip():
                self._start_recording(ctx)
            if ctx.status == LiveStatus.RECORDING:
                self._reset_silence_timer(ctx)

        def on_end() -> None:
            if not is_live() or self.is_fallback_mode:
                return
            if ctx.status in (LiveStatus.LISTENING, LiveStatus.RECORDING):
                delay = self._settings.recognizer_restart_delay_ms / 1000
                ctx.restart_timer = asyncio.get_running_loop().call_later(delay, restart)

        def restart() -> None:
            ctx.restart_timer = None
            if not is_live() or self.is_fallback_mode:
                return
            if ctx.status in (LiveStatus.LISTENING, LiveStatus.RECORDING):
                self._start_recognizer(ctx)

        def on_error(code: str) -> None:
            if not is_live():
                return
            logger.error(f"{__name__}:on_error - Speech recognition error: {code}")
            if code in FALLBACK_ERROR_CODES and not self.is_fallback_mode:
                logger.warning(f"{__name__}:on_error - Switching to fallback mode (manual VAD)")
                self.is_fallback_mode = True
                ctx.recognizer = None
                recognizer.abort()
                if ctx.status == LiveStatus.LISTENING:
                    self._ensure_vad(ctx)

        recognizer.on_result = on_result
        recognizer.on_end = on_end
        recognizer.on_error = on_error

    def _reset_silence_timer(self, ctx: LiveSessionContext) -> None:
        if ctx.silence_timer is not None:
            ctx.silence_timer.cancel()
        delay = self._settings.native_silence_ms / 1000

        def on_silence() -> None:
            ctx.silence_timer = None
            if self._is_current(ctx):
                logger.info(f"{__name__}:silence - Silence detected (native), committing")
                self._spawn(ctx, self.commit_turn())

        ctx.silence_timer = asyncio.get_running_loop().call_later(delay, on_silence)

    # ------------------------------------------------------------------
    # Manual VAD
    # ------------------------------------------------------------------

    def _ensure_vad(self, ctx: LiveSessionContext) -> None:
        if ctx.vad_task is not None and not ctx.vad_task.done():
            return
        logger.info(f"{__name__}:_ensure_vad - Starting manual VAD")
        ctx.vad_task = asyncio.get_running_loop().create_task(self._run_vad(ctx))

    async def _run_vad(self, ctx: LiveSessionContext) -> None:
        settings = self._settings
        detector = EnergyVoiceActivityDetector(settings.fft_size, settings.vad_threshold)
        source = self._media.audio_frames(ctx.audio_stream)
        ctx.frame_source = source

        silence_start = self._clock()
        speaking = False
        try:
            while self._is_current(ctx):
                level = detector.level(source.read_frame())
                now = self._clock()
                if level > detector.threshold:
                    if not speaking:
                        logger.info(f"{__name__}:_run_vad - Speech detected (level={level:.2f})")
                        speaking = True
                        if ctx.status == LiveStatus.LISTENING:
                            self._start_recording(ctx)
                    silence_start = now
                elif speaking and (now - silence_start) * 1000 > settings.vad_silence_ms:
                    logger.info(f"{__name__}:_run_vad - Silence detected")
                    speaking = False
                    self._spawn(ctx, self.commit_turn())
                await asyncio.sleep(settings.frame_interval_ms / 1000)
        finally:
            source.close()
            ctx.frame_source = None

    # ------------------------------------------------------------------
    # Turns
    # ------------------------------------------------------------------

    def _start_recording(self, ctx: LiveSessionContext) -> None:
        if ctx.status == LiveStatus.RECORDING:
            return
        self._set_status(ctx, LiveStatus.RECORDING)
        ctx.chunks = []

        stream = self._media.combine(ctx.screen_stream, ctx.audio_stream)
        recorder = self._create_recorder(stream)
        if recorder is not None:

            def on_data(data: bytes) -> None:
                if data:
                    ctx.chunks.append(data)

            recorder.on_data = on_data
            ctx.recorder = recorder
            recorder.start()

        if not self.is_fallback_mode:
            self._reset_silence_timer(ctx)

    def _create_recorder(self, stream: MediaStream) -> MediaRecorder | None:
        try:
            return self._media.create_recorder(stream, mime_type=self._settings.recording_mime_type)
        except ValueError as e:
            logger.error(f"{__name__}:_create_recorder - Preferred format unsupported", exc_info=e)
        try:
            return self._media.create_recorder(stream)
        except ValueError as e:
            logger.error(f"{__name__}:_create_recorder - Backup recorder failed", exc_info=e)
            return None

    async def commit_turn(self) -> None:
        """
        Close the current turn and answer it.

        Only a recording session commits, so duplicate silence signals
        are ignored.
        """
        ctx = self._ctx
        if ctx is None or not ctx.active or ctx.status != LiveStatus.RECORDING:
            return
        logger.info(f"{__name__}:commit_turn - Step 1: Stopping capture")

        if ctx.recorder is not None and ctx.recorder.state != RECORDER_INACTIVE:
            ctx.recorder.stop()
        if ctx.recognizer is not None and not self.is_fallback_mode:
            ctx.recognizer.stop()

        self._set_status(ctx, LiveStatus.PROCESSING)
        if ctx.silence_timer is not None:
            ctx.silence_timer.cancel()
            ctx.silence_timer = None

        await asyncio.sleep(self._settings.chunk_flush_delay_ms / 1000)
        if not self._is_current(ctx):
            return

        media = b"".join(ctx.chunks)
        text = ctx.transcript

        if self.is_fallback_mode:
            logger.info(f"{__name__}:commit_turn - Step 2: Transcribing turn audio")
            try:
                text = await self._gemini.transcribe(media)
            except TranscriptionError as e:
                logger.error(f"{__name__}:commit_turn - Fallback transcription failed", exc_info=e)
                text = ""
            if not self._is_current(ctx):
                return
            ctx.transcript = text

        prompt = text or self._settings.default_prompt
        ctx.transcript = ""
        history = self._history_provider()[-self._max_history_turns:]

        logger.info(f"{__name__}:commit_turn - Step 3: Generating response (prompt_len={len(prompt)})")
        try:
            response_text = await self._gemini.generate_multimodal(
                prompt,
                ChatHistoryAdapter.to_langchain(history),
                media,
                TURN_MEDIA_MIME_TYPE,
            )
        except GenerationError as e:
            logger.error(f"{__name__}:commit_turn - Generation failed, resuming listening", exc_info=e)
            if self._is_current(ctx):
                self._enter_listening(ctx)
            return

        if not self._is_current(ctx):
            return

        message = Message(role=Role.MODEL, text=response_text)
        self._on_new_message(message)
        logger.info(f"{__name__}:commit_turn - Step 4: Speaking response")
        self._speak(ctx, response_text)

    def _speak(self, ctx: LiveSessionContext, text: str) -> None:
        self._set_status(ctx, LiveStatus.SPEAKING)

        def on_end() -> None:
            if not self._is_current(ctx) or ctx.status != LiveStatus.SPEAKING:
                return
            logger.info(f"{__name__}:_speak - Speech finished, resuming listening")
            self._enter_listening(ctx)

        self._synthesizer.speak(text, on_end)
