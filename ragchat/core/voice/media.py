"""
Media capture collaborators.

Abstract interfaces for the platform pieces the voice and live engines
drive: screen and microphone streams, a recorder that segments a stream
into a blob, a speech recognizer, a speech synthesizer and a raw audio
frame source for manual voice activity detection.

Implementations deliver events by calling the callback attributes
(on_result, on_end, on_error, on_data, on_stop). Callbacks run on the
event loop thread.

Dependencies: numpy
System role: Media boundary for voice and live sessions
"""

from abc import ABC, abstractmethod
from collections.abc import Callable

import numpy as np

RECORDER_INACTIVE = "inactive"
RECORDER_RECORDING = "recording"


class MediaStream(ABC):
    """A set of live capture tracks."""

    @abstractmethod
    def stop(self) -> None:
        """Stop every track in the stream."""


class MediaRecorder(ABC):
    """Records a stream into binary chunks."""

    def __init__(self) -> None:
        self.on_data: Callable[[bytes], None] | None = None
        self.on_stop: Callable[[], None] | None = None

    @property
    @abstractmethod
    def state(self) -> str:
        """"inactive" or "recording"."""

    @abstractmethod
    def start(self) -> None: ...

    @abstractmethod
    def stop(self) -> None:
        """Stop recording. Flushes pending data, then fires on_stop."""


class SpeechRecognizer(ABC):
    """
    Platform speech-to-text recognizer.

    on_result receives the transcripts of every result in the current
    recognition run, oldest first (interim results included).
    on_error receives a platform error code such as "network",
    "not-allowed", "service-not-allowed" or "aborted".
    """

    def __init__(self) -> None:
        self.on_result: Callable[[list[str]], None] | None = None
        self.on_end: Callable[[], None] | None = None
        self.on_error: Callable[[str], None] | None = None

    @abstractmethod
    def start(self) -> None:
        """Start recognition. Raises RuntimeError when already started."""

    @abstractmethod
    def stop(self) -> None: ...

    @abstractmethod
    def abort(self) -> None: ...


class SpeechSynthesizer(ABC):
    """Text-to-speech output."""

    @abstractmethod
    def speak(self, text: str, on_end: Callable[[], None]) -> None:
        """Speak text and call on_end once the utterance finishes."""

    @abstractmethod
    def cancel(self) -> None: ...


class AudioFrameSource(ABC):
    """Time-domain microphone samples for manual voice activity detection."""

    @abstractmethod
    def read_frame(self) -> np.ndarray:
        """Return the most recent samples as floats in [-1, 1]."""

    def close(self) -> None:
        pass


class MediaDevices(ABC):
    """
    Capture device access.

    get_display_media and get_user_media raise MediaPermissionError when the
    user denies access.
    """

    @abstractmethod
    async def get_display_media(self, video: bool = True, audio: bool = True) -> MediaStream: ...

    @abstractmethod
    async def get_user_media(
        self,
        echo_cancellation: bool = False,
        noise_suppression: bool = False,
        auto_gain_control: bool = False,
    ) -> MediaStream: ...

    @abstractmethod
    def create_recorder(self, stream: MediaStream, mime_type: str | None = None) -> MediaRecorder:
        """Create a recorder. Raises ValueError for an unsupported mime type."""

    @abstractmethod
    def combine(self, video_stream: MediaStream, audio_stream: MediaStream) -> MediaStream:
        """Merge the video stream's tracks with the audio stream's audio tracks."""

    @abstractmethod
    def audio_frames(self, stream: MediaStream) -> AudioFrameSource: ...

    def create_recognizer(
        self,
        continuous: bool,
        interim_results: bool,
        lang: str,
    ) -> SpeechRecognizer | None:
        """Return a native recognizer, or None when the platform has none."""
        return None
