from __future__ import annotations

import os
from typing import Optional

import httpx

from llm.prompts import with_system_prefix
from .base import TextProvider, dig


class OllamaProvider(TextProvider):
    """Local Ollama server; no credentials."""

    provider_id = "ollama"
    display_name = "Ollama"

    def __init__(self, model: str = "llama2", base_url: Optional[str] = None,
                 transport: Optional[httpx.BaseTransport] = None):
        super().__init__(model, transport=transport)
        self.base_url = (base_url or os.getenv("OLLAMA_BASE_URL", "http://localhost:11434")).strip().rstrip("/")

    def generate_text(self, prompt: str) -> str:
        url = f"{self.base_url}/api/generate"
        payload = {
            "model": self.model,
            "prompt": with_system_prefix(prompt),
            "stream": False,
        }
        data = self._post(url, json=payload, headers={"Content-Type": "application/json"})
        return dig(data, "response")
