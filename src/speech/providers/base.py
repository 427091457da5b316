from __future__ import annotations

from abc import ABC, abstractmethod

from speech.audio import AudioPayload

TRANSCRIPTION_LANGUAGE = "zh"


class SpeechProvider(ABC):
    provider_id: str = ""

    @abstractmethod
    def transcribe(self, audio: AudioPayload) -> str:
        """Return the recognized text for one recording. Single attempt."""
        raise NotImplementedError
