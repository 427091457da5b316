from __future__ import annotations

import logging
import os
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from mindstream.errors import UpstreamError

logger = logging.getLogger(__name__)

HTTP_TIMEOUT_S = float(os.getenv("MINDSTREAM_HTTP_TIMEOUT_S", "30"))


class TextProvider(ABC):
    """One AI vendor's chat/completion endpoint.

    Implementations differ only in endpoint, request envelope, auth scheme and
    where the generated text lives in the response.
    """

    provider_id: str = ""
    display_name: str = ""

    def __init__(self, model: str, transport: Optional[httpx.BaseTransport] = None):
        self.model = model
        self._transport = transport

    @abstractmethod
    def generate_text(self, prompt: str) -> str:
        """
        Must return the model output as TEXT (the normalizer parses/validates JSON).
        """
        raise NotImplementedError

    def _post(self, url: str, *, json: dict, headers: Optional[dict] = None,
              params: Optional[dict] = None) -> Any:
        return post_json(
            self.display_name or self.provider_id,
            url,
            json=json,
            headers=headers,
            params=params,
            transport=self._transport,
        )


def post_json(provider_name: str, url: str, *, json: Optional[dict] = None,
              headers: Optional[dict] = None, params: Optional[dict] = None,
              data: Optional[dict] = None, files: Optional[dict] = None,
              transport: Optional[httpx.BaseTransport] = None) -> Any:
    """Single POST, no retries. Non-2xx and transport failures become UpstreamError."""
    try:
        with httpx.Client(timeout=HTTP_TIMEOUT_S, transport=transport) as client:
            r = client.post(url, json=json, headers=headers, params=params, data=data, files=files)
    except httpx.HTTPError as e:
        logger.error(f"{provider_name} request failed: {e.__class__.__name__}")
        raise UpstreamError(provider_name, str(e) or e.__class__.__name__) from e

    if not r.is_success:
        logger.error(f"{provider_name} API returned {r.status_code} {r.reason_phrase}")
        raise UpstreamError(provider_name, r.reason_phrase, r.status_code)

    try:
        return r.json()
    except ValueError as e:
        raise UpstreamError(provider_name, "response body is not JSON", r.status_code) from e


def dig(data: Any, *path: Any) -> str:
    """Follow a path of keys/indexes, returning '' when any step is missing."""
    cur = data
    for key in path:
        try:
            cur = cur[key]
        except (KeyError, IndexError, TypeError):
            return ""
    return cur if isinstance(cur, str) else ""
