from __future__ import annotations

from .openai_provider import ChatCompletionsProvider


class DeepSeekProvider(ChatCompletionsProvider):
    provider_id = "deepseek"
    display_name = "DeepSeek"
    base_url = "https://api.deepseek.com/v1"
