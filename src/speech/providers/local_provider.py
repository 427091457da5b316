from __future__ import annotations

import logging
from typing import Optional, Protocol

from mindstream.errors import RecognitionFailed, UnsupportedCapability
from speech.audio import AudioPayload
from .base import TRANSCRIPTION_LANGUAGE, SpeechProvider

logger = logging.getLogger(__name__)


class LocalRecognizer(Protocol):
    """An on-device speech engine."""

    def transcribe(self, audio: AudioPayload, language: str) -> str:
        ...


class LocalSpeechProvider(SpeechProvider):
    """The free 'browser-speech' path, backed by whatever recognizer the host offers."""

    provider_id = "browser-speech"

    def __init__(self, recognizer: Optional[LocalRecognizer] = None, language: str = TRANSCRIPTION_LANGUAGE):
        self.recognizer = recognizer
        self.language = language

    def is_supported(self) -> bool:
        return self.recognizer is not None

    def transcribe(self, audio: AudioPayload) -> str:
        if self.recognizer is None:
            raise UnsupportedCapability(self.provider_id, "speech")
        try:
            return self.recognizer.transcribe(audio, self.language)
        except Exception as e:
            logger.error(f"Local speech recognizer failed: {e}")
            raise RecognitionFailed(str(e) or e.__class__.__name__) from e
