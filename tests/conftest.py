"""
Shared test fixtures and configuration for entire test suite.

Provides: In-memory database, Gemini client mocks, fake media devices for the
voice and live engines, temp file cleanup
Dependencies: pytest, sqlalchemy, aiosqlite, numpy
System role: Test infrastructure and fixture management
"""

import tempfile
from pathlib import Path
from unittest.mock import AsyncMock, MagicMock

import numpy as np
import pytest

from ragchat.core.exceptions import MediaPermissionError
from ragchat.core.voice.media import (
    RECORDER_INACTIVE,
    RECORDER_RECORDING,
    AudioFrameSource,
    MediaDevices,
    MediaRecorder,
    MediaStream,
    SpeechRecognizer,
    SpeechSynthesizer,
)


@pytest.fixture
async def test_engine():
    """
    Create in-memory SQLite async engine with foreign keys enforced.

    Yields:
        AsyncEngine: Engine with all tables created (lazy imported to avoid settings issues)
    """
    from sqlalchemy import event
    from sqlalchemy.ext.asyncio import create_async_engine
    from sqlalchemy.pool import StaticPool

    from ragchat.boundary.db.base import Base
    import ragchat.boundary.db.models  # noqa: F401  (registers tables)

    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    @event.listens_for(engine.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def test_session_factory(test_engine):
    """Session factory bound to the in-memory engine."""
    from sqlalchemy.ext.asyncio import async_sessionmaker

    return async_sessionmaker(bind=test_engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
async def test_async_db(test_session_factory):
    """
    Create in-memory SQLite async database session for testing.

    Yields:
        AsyncSession: Test database session
    """
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def cumulative_stream():
    """
    Build a stand-in for GeminiClient.stream_generate.

    Returns:
        Callable: factory(*texts, error=None) -> MagicMock yielding the texts in order
    """

    def factory(*texts: str, error: Exception | None = None) -> MagicMock:
        async def generate(*args, **kwargs):
            for text in texts:
                yield text
            if error is not None:
                raise error

        return MagicMock(side_effect=generate)

    return factory


@pytest.fixture
def mock_gemini_client(cumulative_stream):
    """
    Create mock GeminiClient for testing.

    Returns:
        MagicMock: Client with async generation methods and a two-step cumulative stream
    """
    client = MagicMock()
    client.generate = AsyncMock(return_value="generated")
    client.generate_chat_title = AsyncMock(return_value="Generated Title")
    client.summarize = AsyncMock(return_value="Summary of earlier turns")
    client.transcribe = AsyncMock(return_value="transcribed words")
    client.generate_multimodal = AsyncMock(return_value="Here is what I see.")
    client.stream_generate = cumulative_stream("Hel", "Hello")
    return client


@pytest.fixture
def mock_embedding_client():
    """
    Create mock EmbeddingClient for testing.

    Returns:
        MagicMock: Client whose embed() returns a fixed 3-dim vector
    """
    client = MagicMock()
    client.embed = AsyncMock(return_value=[0.1, 0.2, 0.3])
    client.dimension = 3
    return client


@pytest.fixture
def temp_pdf_file():
    """
    Create a temporary PDF-like file for testing.

    Yields:
        Path: Path to temporary PDF file
    """
    with tempfile.NamedTemporaryFile(suffix=".pdf", delete=False) as f:
        temp_path = Path(f.name)
        f.write(b"%PDF-1.4\n")
        f.write(b"1 0 obj\n<< >>\nendobj\n")

    yield temp_path

    # Cleanup
    if temp_path.exists():
        temp_path.unlink()


# ----------------------------------------------------------------------
# Media fakes
# ----------------------------------------------------------------------


class FakeStream(MediaStream):
    def __init__(self, kind: str) -> None:
        self.kind = kind
        self.stopped = False

    def stop(self) -> None:
        self.stopped = True


class FakeRecorder(MediaRecorder):
    """Emits one payload chunk, then on_stop, when stopped."""

    def __init__(self, stream: MediaStream, mime_type: str | None = None, payload: bytes = b"clip") -> None:
        super().__init__()
        self.stream = stream
        self.mime_type = mime_type
        self.payload = payload
        self._state = RECORDER_INACTIVE

    @property
    def state(self) -> str:
        return self._state

    def start(self) -> None:
        self._state = RECORDER_RECORDING

    def stop(self) -> None:
        if self._state == RECORDER_INACTIVE:
            return
        self._state = RECORDER_INACTIVE
        if self.on_data is not None:
            self.on_data(self.payload)
        if self.on_stop is not None:
            self.on_stop()


class FakeRecognizer(SpeechRecognizer):
    def __init__(self, continuous: bool, interim_results: bool, lang: str, fail_start: bool = False) -> None:
        super().__init__()
        self.continuous = continuous
        self.interim_results = interim_results
        self.lang = lang
        self.fail_start = fail_start
        self.running = False
        self.start_calls = 0
        self.stopped = False
        self.aborted = False

    def start(self) -> None:
        self.start_calls += 1
        if self.fail_start:
            raise RuntimeError("speech service unavailable")
        if self.running:
            raise RuntimeError("recognition already started")
        self.running = True

    def stop(self) -> None:
        self.running = False
        self.stopped = True

    def abort(self) -> None:
        self.running = False
        self.aborted = True

    # Test drivers
    def emit_result(self, *transcripts: str) -> None:
        self.on_result(list(transcripts))

    def emit_error(self, code: str) -> None:
        self.on_error(code)

    def emit_end(self) -> None:
        self.running = False
        self.on_end()


class FakeSynthesizer(SpeechSynthesizer):
    def __init__(self) -> None:
        self.spoken: list[str] = []
        self.cancel_calls = 0
        self._pending_on_end = None

    def speak(self, text, on_end) -> None:
        self.spoken.append(text)
        self._pending_on_end = on_end

    def cancel(self) -> None:
        self.cancel_calls += 1

    def finish(self) -> None:
        callback, self._pending_on_end = self._pending_on_end, None
        if callback is not None:
            callback()


class FakeFrameSource(AudioFrameSource):
    """Replays scripted frames, then silence."""

    def __init__(self, frames: list[np.ndarray], fft_size: int = 256) -> None:
        self._frames = list(frames)
        self._silence = np.zeros(fft_size)
        self.closed = False

    def read_frame(self) -> np.ndarray:
        if self._frames:
            return self._frames.pop(0)
        return self._silence

    def close(self) -> None:
        self.closed = True


class FakeMediaDevices(MediaDevices):
    """Scriptable capture devices recording every acquisition."""

    def __init__(self) -> None:
        self.deny_display = False
        self.deny_microphone = False
        self.native_recognition = True
        self.fail_recognizer_start = False
        self.unsupported_mime_types: set[str] = set()
        self.frames: list[np.ndarray] = []

        self.display_streams: list[FakeStream] = []
        self.microphone_streams: list[FakeStream] = []
        self.user_media_calls: list[dict] = []
        self.recognizers: list[FakeRecognizer] = []
        self.recorders: list[FakeRecorder] = []
        self.frame_sources: list[FakeFrameSource] = []

    async def get_display_media(self, video: bool = True, audio: bool = True) -> MediaStream:
        if self.deny_display:
            raise MediaPermissionError("Permission denied", device="screen")
        stream = FakeStream("screen")
        self.display_streams.append(stream)
        return stream

    async def get_user_media(
        self,
        echo_cancellation: bool = False,
        noise_suppression: bool = False,
        auto_gain_control: bool = False,
    ) -> MediaStream:
        self.user_media_calls.append(
            {
                "echo_cancellation": echo_cancellation,
                "noise_suppression": noise_suppression,
                "auto_gain_control": auto_gain_control,
            }
        )
        if self.deny_microphone:
            raise MediaPermissionError("Permission denied", device="microphone")
        stream = FakeStream("microphone")
        self.microphone_streams.append(stream)
        return stream

    def create_recorder(self, stream: MediaStream, mime_type: str | None = None) -> MediaRecorder:
        if mime_type in self.unsupported_mime_types:
            raise ValueError(f"Unsupported mime type: {mime_type}")
        recorder = FakeRecorder(stream, mime_type)
        self.recorders.append(recorder)
        return recorder

    def combine(self, video_stream: MediaStream, audio_stream: MediaStream) -> MediaStream:
        return FakeStream("combined")

    def audio_frames(self, stream: MediaStream) -> AudioFrameSource:
        source = FakeFrameSource(self.frames)
        self.frame_sources.append(source)
        return source

    def create_recognizer(self, continuous: bool, interim_results: bool, lang: str) -> SpeechRecognizer | None:
        if not self.native_recognition:
            return None
        recognizer = FakeRecognizer(continuous, interim_results, lang, fail_start=self.fail_recognizer_start)
        self.recognizers.append(recognizer)
        return recognizer


@pytest.fixture
def media_devices() -> FakeMediaDevices:
    """Fresh fake capture devices."""
    return FakeMediaDevices()


@pytest.fixture
def synthesizer() -> FakeSynthesizer:
    """Fake speech synthesizer; call finish() to end an utterance."""
    return FakeSynthesizer()


@pytest.fixture
def loud_frame() -> np.ndarray:
    """Frame of broadband noise (well above the VAD threshold)."""
    return np.random.default_rng(7).uniform(-0.5, 0.5, 256)


@pytest.fixture
def silent_frame() -> np.ndarray:
    """Frame of digital silence."""
    return np.zeros(256)
