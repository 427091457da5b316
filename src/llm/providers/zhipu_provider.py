from __future__ import annotations

from .openai_provider import ChatCompletionsProvider


class ZhipuProvider(ChatCompletionsProvider):
    """GLM models via the v4 OpenAI-compatible endpoint."""

    provider_id = "zhipu"
    display_name = "GLM"
    base_url = "https://open.bigmodel.cn/api/paas/v4"
