from __future__ import annotations

from typing import Optional

import httpx

from llm.prompts import MAX_TOKENS, TEMPERATURE, with_system_prefix
from .base import TextProvider, dig


class GeminiProvider(TextProvider):
    provider_id = "google"
    display_name = "Gemini"
    base_url = "https://generativelanguage.googleapis.com/v1beta"

    def __init__(self, api_key: str, model: str = "gemini-pro",
                 transport: Optional[httpx.BaseTransport] = None):
        super().__init__(model, transport=transport)
        self.api_key = api_key

    def generate_text(self, prompt: str) -> str:
        url = f"{self.base_url}/models/{self.model}:generateContent"
        payload = {
            "contents": [{"parts": [{"text": with_system_prefix(prompt)}]}],
            "generationConfig": {
                "temperature": TEMPERATURE,
                "maxOutputTokens": MAX_TOKENS,
            },
        }
        data = self._post(
            url,
            json=payload,
            headers={"Content-Type": "application/json"},
            params={"key": self.api_key},
        )
        return dig(data, "candidates", 0, "content", "parts", 0, "text")
