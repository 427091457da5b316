from __future__ import annotations

from .openai_provider import ChatCompletionsProvider


class MoonshotProvider(ChatCompletionsProvider):
    provider_id = "moonshot"
    display_name = "Moonshot"
    base_url = "https://api.moonshot.cn/v1"
