from __future__ import annotations

from typing import Optional

import httpx

from llm.prompts import MAX_TOKENS, SYSTEM_PROMPT, TEMPERATURE
from .base import TextProvider, dig


class ChatCompletionsProvider(TextProvider):
    """OpenAI-style /chat/completions endpoint (bearer auth, system+user messages)."""

    base_url: str = ""

    def __init__(self, api_key: str, model: str, transport: Optional[httpx.BaseTransport] = None):
        super().__init__(model, transport=transport)
        self.api_key = api_key

    def generate_text(self, prompt: str) -> str:
        url = f"{self.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": TEMPERATURE,
            "max_tokens": MAX_TOKENS,
        }
        data = self._post(url, json=payload, headers=headers)
        return dig(data, "choices", 0, "message", "content")


class OpenAIProvider(ChatCompletionsProvider):
    provider_id = "openai"
    display_name = "OpenAI"
    base_url = "https://api.openai.com/v1"
