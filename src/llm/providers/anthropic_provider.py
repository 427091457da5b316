from __future__ import annotations

from typing import Optional

import httpx

from llm.prompts import MAX_TOKENS, with_system_prefix
from .base import TextProvider, dig

ANTHROPIC_VERSION = "2023-06-01"


class ClaudeProvider(TextProvider):
    provider_id = "anthropic"
    display_name = "Claude"
    base_url = "https://api.anthropic.com/v1"

    def __init__(self, api_key: str, model: str = "claude-3-haiku",
                 transport: Optional[httpx.BaseTransport] = None):
        super().__init__(model, transport=transport)
        self.api_key = api_key

    def generate_text(self, prompt: str) -> str:
        headers = {
            "x-api-key": self.api_key,
            "anthropic-version": ANTHROPIC_VERSION,
            "Content-Type": "application/json",
        }
        payload = {
            "model": self.model,
            "max_tokens": MAX_TOKENS,
            "messages": [{"role": "user", "content": with_system_prefix(prompt)}],
        }
        data = self._post(f"{self.base_url}/messages", json=payload, headers=headers)
        return dig(data, "content", 0, "text")
