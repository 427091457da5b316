from __future__ import annotations

from typing import Optional


class MindStreamError(Exception):
    """Base class for every failure surfaced by the task pipeline."""

    code = "mindstream_error"

    def __init__(self, message: str, user_message: Optional[str] = None):
        super().__init__(message)
        self.user_message = user_message or message


class MissingCredential(MindStreamError):
    code = "missing_credential"

    def __init__(self, provider_id: str):
        self.provider_id = provider_id
        super().__init__(
            f"No API key configured for provider '{provider_id}'",
            f"请先配置 {provider_id} API 密钥",
        )


class UnknownProvider(MindStreamError):
    code = "unknown_provider"

    def __init__(self, provider_id: Optional[str], capability: str = "text"):
        self.provider_id = provider_id
        self.capability = capability
        label = "文本生成" if capability == "text" else "语音识别"
        super().__init__(
            f"Unknown {capability} provider '{provider_id}'",
            f"未找到{label}提供商",
        )


class UnsupportedCapability(MindStreamError):
    code = "unsupported_capability"

    def __init__(self, provider_id: str, capability: str):
        self.provider_id = provider_id
        self.capability = capability
        super().__init__(
            f"Provider '{provider_id}' has no usable {capability} implementation",
            "当前环境不支持该服务，请在设置中选择其他服务",
        )


class RecognitionFailed(MindStreamError):
    code = "recognition_failed"

    def __init__(self, detail: str):
        self.detail = detail
        super().__init__(f"Speech recognition failed: {detail}", f"语音识别失败: {detail}")


class UpstreamError(MindStreamError):
    """Non-success response (or transport failure) from an AI provider."""

    code = "upstream_error"

    def __init__(self, provider: str, status_text: str, status_code: Optional[int] = None):
        self.provider = provider
        self.status_text = status_text
        self.status_code = status_code
        super().__init__(
            f"{provider} API error: {status_code or '-'} {status_text}",
            f"{provider} API 错误: {status_text}",
        )


class MalformedResponse(MindStreamError):
    code = "malformed_response"

    def __init__(self, parse_error: str):
        self.parse_error = parse_error
        super().__init__(
            f"Model output is not valid JSON: {parse_error}",
            "AI 返回的内容无法解析，请重试",
        )


class InvalidSchema(MindStreamError):
    code = "invalid_schema"

    def __init__(self, detail: str = "payload must contain a 'tasks' list"):
        self.detail = detail
        super().__init__(f"Invalid task payload: {detail}", "AI 返回的数据格式不正确")


class TaskNotFound(MindStreamError):
    code = "task_not_found"

    def __init__(self, task_id: str):
        self.task_id = task_id
        super().__init__(f"Task {task_id} not found", "任务不存在")


class PersistenceError(MindStreamError):
    code = "persistence_error"

    def __init__(self, detail: str, saved_count: int = 0):
        self.detail = detail
        self.saved_count = saved_count
        super().__init__(f"Saving tasks failed: {detail}", f"保存任务失败: {detail}")


class InvalidTransition(MindStreamError):
    code = "invalid_transition"

    def __init__(self, state: str, action: str):
        self.state = state
        self.action = action
        super().__init__(f"Cannot {action} while {state}")
