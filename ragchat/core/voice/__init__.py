"""
Voice input and live session engines.

Exports: VoiceInputEngine, LiveSessionEngine, EnergyVoiceActivityDetector
"""

from ragchat.core.voice.live_session import LiveSessionContext, LiveSessionEngine, LiveStatus
from ragchat.core.voice.speech_to_text import SpeechStatus, VoiceInputEngine
from ragchat.core.voice.vad import EnergyVoiceActivityDetector

__all__ = [
    "LiveSessionContext",
    "LiveSessionEngine",
    "LiveStatus",
    "SpeechStatus",
    "VoiceInputEngine",
    "EnergyVoiceActivityDetector",
]
