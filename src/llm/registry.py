"""
Static catalog of the AI providers and models the app can talk to.

Lookups never raise on unknown ids; they return None and the caller decides.
"""
from __future__ import annotations

from typing import Literal, Optional, Tuple

from pydantic import BaseModel, ConfigDict, model_validator

ModelType = Literal["speech", "text"]
Capability = Literal["free", "speech", "text"]


class Model(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    type: ModelType
    max_tokens: Optional[int] = None
    cost_per_1k: Optional[float] = None  # US cents per 1k tokens


class Provider(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: str
    name: str
    description: str
    is_free: bool
    supports_speech: bool
    supports_text: bool
    api_key_required: bool
    website: Optional[str] = None
    models: Tuple[Model, ...] = ()

    @model_validator(mode="after")
    def models_match_capabilities(self) -> "Provider":
        for m in self.models:
            if m.type == "speech" and not self.supports_speech:
                raise ValueError(f"{self.id}/{m.id}: speech model on a provider without speech support")
            if m.type == "text" and not self.supports_text:
                raise ValueError(f"{self.id}/{m.id}: text model on a provider without text support")
        return self

    def find_model(self, model_id: Optional[str]) -> Optional[Model]:
        return next((m for m in self.models if m.id == model_id), None)

    def models_of_type(self, model_type: ModelType) -> Tuple[Model, ...]:
        return tuple(m for m in self.models if m.type == model_type)


AI_PROVIDERS: Tuple[Provider, ...] = (
    Provider(
        id="openai",
        name="OpenAI",
        description="最流行的AI服务，包括GPT和Whisper",
        is_free=False,
        supports_speech=True,
        supports_text=True,
        api_key_required=True,
        website="https://openai.com",
        models=(
            Model(id="whisper-1", name="Whisper", description="语音转文字模型", type="speech", cost_per_1k=0.6),
            Model(id="gpt-3.5-turbo", name="GPT-3.5 Turbo", description="快速且经济的文本生成模型",
                  type="text", max_tokens=4096, cost_per_1k=0.5),
            Model(id="gpt-4", name="GPT-4", description="最强大的文本生成模型",
                  type="text", max_tokens=8192, cost_per_1k=3.0),
            Model(id="gpt-4-turbo", name="GPT-4 Turbo", description="更快的GPT-4版本",
                  type="text", max_tokens=128000, cost_per_1k=1.0),
        ),
    ),
    Provider(
        id="anthropic",
        name="Anthropic Claude",
        description="Claude系列模型，擅长对话和分析",
        is_free=False,
        supports_speech=False,
        supports_text=True,
        api_key_required=True,
        website="https://anthropic.com",
        models=(
            Model(id="claude-3-haiku", name="Claude 3 Haiku", description="快速且经济的模型",
                  type="text", max_tokens=200000, cost_per_1k=0.25),
            Model(id="claude-3-sonnet", name="Claude 3 Sonnet", description="平衡性能和成本",
                  type="text", max_tokens=200000, cost_per_1k=3.0),
            Model(id="claude-3-opus", name="Claude 3 Opus", description="最强大的Claude模型",
                  type="text", max_tokens=200000, cost_per_1k=15.0),
        ),
    ),
    Provider(
        id="google",
        name="Google Gemini",
        description="Google的多模态AI模型",
        is_free=True,
        supports_speech=False,
        supports_text=True,
        api_key_required=True,
        website="https://ai.google.dev",
        models=(
            Model(id="gemini-pro", name="Gemini Pro", description="免费的高性能文本模型",
                  type="text", max_tokens=32768, cost_per_1k=0),
            Model(id="gemini-pro-vision", name="Gemini Pro Vision", description="支持图像的多模态模型",
                  type="text", max_tokens=16384, cost_per_1k=0),
        ),
    ),
    Provider(
        id="deepseek",
        name="DeepSeek",
        description="国产优秀AI模型，性价比极高",
        is_free=False,
        supports_speech=False,
        supports_text=True,
        api_key_required=True,
        website="https://deepseek.com",
        models=(
            Model(id="deepseek-chat", name="DeepSeek Chat", description="对话优化模型",
                  type="text", max_tokens=32768, cost_per_1k=0.14),
            Model(id="deepseek-coder", name="DeepSeek Coder", description="代码生成专用模型",
                  type="text", max_tokens=16384, cost_per_1k=0.14),
        ),
    ),
    Provider(
        id="zhipu",
        name="智谱AI (GLM)",
        description="清华系AI公司，中文能力强",
        is_free=False,
        supports_speech=False,
        supports_text=True,
        api_key_required=True,
        website="https://zhipuai.cn",
        models=(
            Model(id="glm-4", name="GLM-4", description="最新一代GLM模型",
                  type="text", max_tokens=128000, cost_per_1k=10.0),
            Model(id="glm-3-turbo", name="GLM-3 Turbo", description="快速版GLM模型",
                  type="text", max_tokens=128000, cost_per_1k=0.5),
        ),
    ),
    Provider(
        id="moonshot",
        name="Moonshot AI (Kimi)",
        description="月之暗面，超长上下文模型",
        is_free=False,
        supports_speech=False,
        supports_text=True,
        api_key_required=True,
        website="https://moonshot.cn",
        models=(
            Model(id="moonshot-v1-8k", name="Moonshot v1 8K", description="8K上下文模型",
                  type="text", max_tokens=8192, cost_per_1k=1.2),
            Model(id="moonshot-v1-32k", name="Moonshot v1 32K", description="32K上下文模型",
                  type="text", max_tokens=32768, cost_per_1k=2.4),
            Model(id="moonshot-v1-128k", name="Moonshot v1 128K", description="128K超长上下文模型",
                  type="text", max_tokens=131072, cost_per_1k=5.06),
        ),
    ),
    Provider(
        id="browser-speech",
        name="浏览器语音识别",
        description="使用浏览器内置的语音识别API，完全免费",
        is_free=True,
        supports_speech=True,
        supports_text=False,
        api_key_required=False,
        models=(
            Model(id="browser-speech-api", name="浏览器语音API", description="基于Web Speech API的免费语音识别",
                  type="speech", cost_per_1k=0),
        ),
    ),
    Provider(
        id="ollama",
        name="Ollama (本地)",
        description="在本地运行开源模型，完全免费",
        is_free=True,
        supports_speech=False,
        supports_text=True,
        api_key_required=False,
        website="https://ollama.ai",
        models=(
            Model(id="llama2", name="Llama 2", description="Meta开源模型", type="text", max_tokens=4096, cost_per_1k=0),
            Model(id="mistral", name="Mistral", description="高效的开源模型", type="text", max_tokens=8192, cost_per_1k=0),
            Model(id="qwen", name="Qwen", description="阿里开源中文模型", type="text", max_tokens=8192, cost_per_1k=0),
        ),
    ),
)

_CAPABILITY_FLAGS = {
    "free": "is_free",
    "speech": "supports_speech",
    "text": "supports_text",
}


def list_providers() -> Tuple[Provider, ...]:
    return AI_PROVIDERS


def provider_by_id(provider_id: Optional[str]) -> Optional[Provider]:
    return next((p for p in AI_PROVIDERS if p.id == provider_id), None)


def model_by_id(provider_id: Optional[str], model_id: Optional[str]) -> Optional[Model]:
    provider = provider_by_id(provider_id)
    if provider is None:
        return None
    return provider.find_model(model_id)


def list_by_capability(capability: Capability) -> Tuple[Provider, ...]:
    try:
        flag = _CAPABILITY_FLAGS[capability]
    except KeyError:
        raise ValueError(f"Unknown capability: {capability!r}") from None
    return tuple(p for p in AI_PROVIDERS if getattr(p, flag))
