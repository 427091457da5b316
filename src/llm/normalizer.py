"""
Turns raw model output into a StructuredTaskPayload dict.

Only literal prefix/suffix fences are stripped. A reply that puts commentary
before the fence is left as-is and fails to parse.
"""
from __future__ import annotations

import json
import re
from typing import Any, Dict

from mindstream.errors import InvalidSchema, MalformedResponse

_FENCE_OPEN = re.compile(r"^```[\w+-]*\s*")
_FENCE_CLOSE = re.compile(r"\s*```$")


def strip_code_fence(text: str) -> str:
    cleaned = text.strip()
    if cleaned.startswith("```"):
        cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
    if cleaned.endswith("```"):
        cleaned = _FENCE_CLOSE.sub("", cleaned, count=1)
    return cleaned.strip()


def validate_payload(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise InvalidSchema(f"expected a JSON object, got {type(payload).__name__}")
    if not isinstance(payload.get("tasks"), list):
        raise InvalidSchema("'tasks' must be a list")
    return payload


def normalize(raw_model_text: str) -> Dict[str, Any]:
    cleaned = strip_code_fence(raw_model_text or "")
    try:
        payload = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise MalformedResponse(str(e)) from e
    return validate_payload(payload)
