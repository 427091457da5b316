from __future__ import annotations

from typing import Optional

import httpx

from llm.providers.base import dig, post_json
from speech.audio import AudioPayload
from .base import TRANSCRIPTION_LANGUAGE, SpeechProvider


class WhisperProvider(SpeechProvider):
    """OpenAI /audio/transcriptions (multipart upload, bearer auth)."""

    provider_id = "openai"
    base_url = "https://api.openai.com/v1"

    def __init__(self, api_key: str, model: str = "whisper-1",
                 transport: Optional[httpx.BaseTransport] = None):
        self.api_key = api_key
        self.model = model
        self._transport = transport

    def transcribe(self, audio: AudioPayload) -> str:
        data = post_json(
            "OpenAI",
            f"{self.base_url}/audio/transcriptions",
            headers={"Authorization": f"Bearer {self.api_key}"},
            data={"model": self.model, "language": TRANSCRIPTION_LANGUAGE},
            files={"file": (audio.upload_name, audio.data, audio.mime_type)},
            transport=self._transport,
        )
        return dig(data, "text")
