from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

from extraction.materializer import materialize
from llm.llm_client import LLMClient
from llm.normalizer import normalize
from llm.prompts import build_structuring_prompt
from mindstream.models import Task
from storage.credentials import CredentialResolver
from storage.settings_store import SettingsStore

logger = logging.getLogger(__name__)


class TaskExtractor:
    """Free-form text -> StructuredTaskPayload via the user's text provider."""

    def __init__(
        self,
        settings_store: Optional[SettingsStore] = None,
        credentials: Optional[CredentialResolver] = None,
        llm_client: Optional[LLMClient] = None,
    ):
        self.settings_store = settings_store or SettingsStore()
        self.credentials = credentials or CredentialResolver(self.settings_store)
        self.llm_client = llm_client

    def _client_for(self, user_id: str) -> LLMClient:
        if self.llm_client is not None:
            return self.llm_client
        settings = self.settings_store.load(user_id)
        return LLMClient.for_user(settings, self.credentials)

    def structurize_text(self, text: str, user_id: str) -> Dict[str, Any]:
        client = self._client_for(user_id)
        raw = client.generate_text(build_structuring_prompt(text))
        payload = normalize(raw)
        logger.info(f"Structured {len(payload['tasks'])} task(s) with {client.provider_id}")
        return payload

    def extract(self, text: str, user_id: str) -> List[Task]:
        return materialize(self.structurize_text(text, user_id))
