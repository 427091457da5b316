from __future__ import annotations

import logging
import os
from typing import Callable, Dict, Optional

from llm.providers.anthropic_provider import ClaudeProvider
from llm.providers.base import TextProvider
from llm.providers.deepseek_provider import DeepSeekProvider
from llm.providers.gemini_provider import GeminiProvider
from llm.providers.mock_provider import MockProvider
from llm.providers.moonshot_provider import MoonshotProvider
from llm.providers.ollama_provider import OllamaProvider
from llm.providers.openai_provider import OpenAIProvider
from llm.providers.zhipu_provider import ZhipuProvider
from llm.registry import provider_by_id
from mindstream.errors import MissingCredential, UnknownProvider
from mindstream.models import UserSettings
from storage.credentials import CredentialResolver

logger = logging.getLogger(__name__)

ENABLE_MOCK_PROVIDER = os.getenv("MINDSTREAM_ENABLE_MOCK_PROVIDER", "false").lower() in {"1", "true", "yes"}

# provider id -> factory(model, api_key)
TEXT_PROVIDERS: Dict[str, Callable[[str, Optional[str]], TextProvider]] = {
    "openai": lambda model, key: OpenAIProvider(key, model),
    "google": lambda model, key: GeminiProvider(key, model),
    "anthropic": lambda model, key: ClaudeProvider(key, model),
    "deepseek": lambda model, key: DeepSeekProvider(key, model),
    "zhipu": lambda model, key: ZhipuProvider(key, model),
    "moonshot": lambda model, key: MoonshotProvider(key, model),
    "ollama": lambda model, key: OllamaProvider(model),
}


def create_text_provider(settings: UserSettings, credentials: CredentialResolver) -> TextProvider:
    """Resolve the user's text provider selection into a ready implementation.

    Raises UnknownProvider / MissingCredential before any network call.
    """
    provider_id = settings.text_provider
    if provider_id == "mock" and ENABLE_MOCK_PROVIDER:
        return MockProvider()

    provider = provider_by_id(provider_id)
    if provider is None or not provider.supports_text or provider_id not in TEXT_PROVIDERS:
        raise UnknownProvider(provider_id, "text")

    if provider.find_model(settings.text_model) is None:
        logger.warning(f"Model '{settings.text_model}' is not in the {provider_id} catalog; passing it through")

    api_key = None
    if provider.api_key_required:
        api_key = credentials.get_api_key(settings.user_id, provider_id)
        if api_key is None:
            raise MissingCredential(provider_id)

    return TEXT_PROVIDERS[provider_id](settings.text_model, api_key)


class LLMClient:
    """Thin wrapper that runs one prompt through the selected provider."""

    def __init__(self, provider: TextProvider):
        self.provider = provider

    @classmethod
    def for_user(cls, settings: UserSettings, credentials: CredentialResolver) -> "LLMClient":
        return cls(provider=create_text_provider(settings, credentials))

    @property
    def provider_id(self) -> str:
        return getattr(self.provider, "provider_id", "") or self.provider.__class__.__name__

    def generate_text(self, prompt: str) -> str:
        text = self.provider.generate_text(prompt)
        logger.info(f"{self.provider_id} returned {len(text or '')} chars")
        return text or ""
