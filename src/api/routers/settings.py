import logging
from typing import Literal, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.backend import BackendAPI
from api.dependencies import get_backend, get_user_id
from llm.registry import provider_by_id
from mindstream.models import UserSettings
from storage.credentials import mask_api_key

router = APIRouter()
logger = logging.getLogger(__name__)


class SettingsUpdateIn(BaseModel):
    speech_provider: Optional[str] = None
    speech_model: Optional[str] = None
    text_provider: Optional[str] = None
    text_model: Optional[str] = None
    auto_save: Optional[bool] = None
    default_category: Optional[str] = None
    theme: Optional[Literal["light", "dark", "auto"]] = None
    language: Optional[str] = None


class ApiKeyIn(BaseModel):
    api_key: str = Field(..., min_length=1)


def _public(settings: UserSettings) -> dict:
    data = settings.model_dump(mode="json")
    data["api_keys"] = {pid: mask_api_key(k) for pid, k in settings.api_keys.items()}
    return data


@router.get("")
async def get_settings(
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    return _public(backend.settings_store.load(user_id))


@router.put("")
async def update_settings(
    payload: SettingsUpdateIn,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    updates = payload.model_dump(exclude_none=True)
    for field, capability in (("speech_provider", "speech"), ("text_provider", "text")):
        if field not in updates:
            continue
        provider = provider_by_id(updates[field])
        if provider is None or not getattr(provider, f"supports_{capability}"):
            raise HTTPException(status_code=400, detail=f"{updates[field]} is not a {capability} provider")
    settings = backend.settings_store.update(user_id, **updates)
    logger.info(f"Updated settings for user {user_id}: {sorted(updates)}")
    return _public(settings)


@router.put("/api-keys/{provider_id}")
async def put_api_key(
    provider_id: str,
    payload: ApiKeyIn,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    if provider_by_id(provider_id) is None:
        raise HTTPException(status_code=404, detail=f"Unknown provider: {provider_id}")
    backend.credentials.set_api_key(user_id, provider_id, payload.api_key.strip())
    return {"provider": provider_id, "api_key": mask_api_key(payload.api_key.strip())}


@router.delete("/api-keys/{provider_id}")
async def delete_api_key(
    provider_id: str,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    backend.credentials.remove_api_key(user_id, provider_id)
    return {"provider": provider_id, "status": "removed"}
