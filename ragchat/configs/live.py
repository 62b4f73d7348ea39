"""
Voice input and live session configuration settings.

Timing and voice-activity-detection parameters for the speech engines.

Dependencies: pydantic, pydantic_settings
System role: Voice/live session configuration
"""

from pydantic import Field
from pydantic_settings import SettingsConfigDict

from ragchat.configs.base import BaseSettings


class LiveSessionSettings(BaseSettings):
    """Voice activity detection and turn timing configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="LIVE_",
        case_sensitive=False,
        extra="ignore",
    )

    native_silence_ms: int = Field(
        default=2000,
        description="Quiet period without recognizer updates that commits a turn",
    )
    vad_silence_ms: int = Field(
        default=1500,
        description="Sub-threshold energy period that commits a turn in manual VAD mode",
    )
    vad_threshold: float = Field(
        default=5.0,
        description="Average byte-scaled frequency energy that counts as speech",
    )
    fft_size: int = Field(default=256, description="FFT window size for manual VAD")
    frame_interval_ms: int = Field(
        default=16,
        description="Polling interval of the manual VAD loop (about one animation frame)",
    )
    recognizer_restart_delay_ms: int = Field(
        default=100,
        description="Delay before restarting a native recognizer that ended unexpectedly",
    )
    chunk_flush_delay_ms: int = Field(
        default=500,
        description="Wait after stopping the recorder so trailing chunks arrive",
    )
    recognizer_lang: str = Field(default="en-US", description="Native recognizer language")
    recording_mime_type: str = Field(
        default="video/webm; codecs=vp9",
        description="Preferred recorder mime type for screen+audio turns",
    )
    default_prompt: str = Field(
        default="Describe what is happening.",
        description="Prompt used when a turn has no transcript",
    )
