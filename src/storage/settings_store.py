from __future__ import annotations

import hashlib
import json
import logging
import os
import re
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Optional

from cryptography.fernet import Fernet, InvalidToken

from mindstream.models import UserSettings

logger = logging.getLogger(__name__)

SETTINGS_DIR = os.getenv("MINDSTREAM_SETTINGS_DIR", "data/settings")

_SAFE_USER_ID = re.compile(r"^[A-Za-z0-9_.-]{1,64}$")


def _load_fernet(key: Optional[str]) -> Fernet:
    if not key:
        # Keys written with a temporary key cannot be read after a restart.
        logger.warning("MINDSTREAM_KEY_ENCRYPTION_KEY not set. Generating a temporary key.")
        return Fernet(Fernet.generate_key())
    return Fernet(key.encode() if isinstance(key, str) else key)


class SettingsStore:
    """One JSON file per user; API keys are Fernet-encrypted on disk."""

    def __init__(self, path: str = SETTINGS_DIR, encryption_key: Optional[str] = None):
        self.path = Path(path)
        self.fernet = _load_fernet(encryption_key or os.getenv("MINDSTREAM_KEY_ENCRYPTION_KEY"))

    def _file_for(self, user_id: str) -> Path:
        if _SAFE_USER_ID.match(user_id) and user_id not in {".", ".."}:
            name = user_id
        else:
            name = hashlib.sha256(user_id.encode("utf-8")).hexdigest()
        return self.path / f"{name}.json"

    def _encrypt_keys(self, keys: Dict[str, str]) -> Dict[str, str]:
        return {pid: self.fernet.encrypt(k.encode()).decode() for pid, k in keys.items() if k}

    def _decrypt_keys(self, keys: Dict[str, str]) -> Dict[str, str]:
        out = {}
        for pid, token in (keys or {}).items():
            try:
                out[pid] = self.fernet.decrypt(token.encode()).decode()
            except (InvalidToken, ValueError):
                logger.warning(f"Stored API key for provider '{pid}' could not be decrypted; ignoring it")
        return out

    def load(self, user_id: str) -> UserSettings:
        """
        Load a user's settings, creating defaults on first access.
        A corrupted file yields defaults (not written back).
        """
        f = self._file_for(user_id)
        if not f.exists():
            return self.create(user_id)

        try:
            data = json.loads(f.read_text(encoding="utf-8"))
            data["api_keys"] = self._decrypt_keys(data.get("api_keys") or {})
            data["user_id"] = user_id
            return UserSettings(**data)
        except Exception as e:
            logger.error(f"Failed to load settings for user {user_id}: {e.__class__.__name__}")
            return UserSettings(user_id=user_id)

    def create(self, user_id: str) -> UserSettings:
        now = datetime.now(timezone.utc)
        settings = UserSettings(user_id=user_id, created_at=now, updated_at=now)
        self.save(settings)
        logger.info(f"Created default settings for user {user_id}")
        return settings

    def save(self, settings: UserSettings) -> None:
        self.path.mkdir(parents=True, exist_ok=True)
        data = settings.model_dump(mode="json")
        data["api_keys"] = self._encrypt_keys(settings.api_keys)
        self._file_for(settings.user_id).write_text(
            json.dumps(data, ensure_ascii=False, indent=2),
            encoding="utf-8",
        )

    def update(self, user_id: str, **updates) -> UserSettings:
        current = self.load(user_id)
        updates.pop("user_id", None)
        updates["updated_at"] = datetime.now(timezone.utc)
        merged = UserSettings(**{**current.model_dump(), **updates})
        self.save(merged)
        return merged
