from __future__ import annotations

import logging
from typing import Optional

from llm.registry import provider_by_id
from mindstream.errors import MissingCredential, UnknownProvider, UnsupportedCapability
from speech.audio import AudioPayload
from speech.providers.base import SpeechProvider
from speech.providers.local_provider import LocalRecognizer, LocalSpeechProvider
from speech.providers.whisper_provider import WhisperProvider
from storage.credentials import CredentialResolver
from storage.settings_store import SettingsStore

logger = logging.getLogger(__name__)

DEFAULT_WHISPER_MODEL = "whisper-1"


class Transcriber:
    """Audio -> text through the user's configured speech provider."""

    def __init__(
        self,
        settings_store: Optional[SettingsStore] = None,
        credentials: Optional[CredentialResolver] = None,
        local_recognizer: Optional[LocalRecognizer] = None,
    ):
        self.settings_store = settings_store or SettingsStore()
        self.credentials = credentials or CredentialResolver(self.settings_store)
        self.local_recognizer = local_recognizer

    def provider_for(self, user_id: str) -> SpeechProvider:
        settings = self.settings_store.load(user_id)
        provider_id = settings.speech_provider
        provider = provider_by_id(provider_id)
        if provider is None or not provider.supports_speech:
            raise UnknownProvider(provider_id, "speech")

        if provider_id == "browser-speech":
            return LocalSpeechProvider(self.local_recognizer)

        if provider_id == "openai":
            api_key = self.credentials.get_api_key(user_id, "openai")
            if api_key is None:
                raise MissingCredential("openai")
            model = provider.find_model(settings.speech_model)
            model_id = model.id if model is not None and model.type == "speech" else DEFAULT_WHISPER_MODEL
            return WhisperProvider(api_key, model_id)

        raise UnsupportedCapability(provider_id, "speech")

    def transcribe(self, audio: AudioPayload, user_id: str) -> str:
        provider = self.provider_for(user_id)
        text = provider.transcribe(audio)
        logger.info(f"Transcribed {len(audio.data)} bytes with {provider.provider_id}: {len(text)} chars")
        return text
