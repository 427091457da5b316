from __future__ import annotations

import logging
from typing import Optional

from storage.settings_store import SettingsStore

logger = logging.getLogger(__name__)


def mask_api_key(key: Optional[str]) -> Optional[str]:
    if not key:
        return None
    if len(key) <= 4:
        return "*" * len(key)
    return "*" * 8 + key[-4:]


class CredentialResolver:
    """Per-user, per-provider API keys. Never logs key material."""

    def __init__(self, store: SettingsStore):
        self.store = store

    def get_api_key(self, user_id: str, provider_id: str) -> Optional[str]:
        settings = self.store.load(user_id)
        return settings.api_keys.get(provider_id) or None

    def set_api_key(self, user_id: str, provider_id: str, api_key: str) -> None:
        settings = self.store.load(user_id)
        keys = {**settings.api_keys, provider_id: api_key}
        self.store.update(user_id, api_keys=keys)
        logger.info(f"Stored API key for provider '{provider_id}' (user {user_id})")

    def remove_api_key(self, user_id: str, provider_id: str) -> None:
        settings = self.store.load(user_id)
        keys = dict(settings.api_keys)
        if keys.pop(provider_id, None) is None:
            return
        self.store.update(user_id, api_keys=keys)
        logger.info(f"Removed API key for provider '{provider_id}' (user {user_id})")
