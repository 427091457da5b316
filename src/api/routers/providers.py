from typing import Optional

from fastapi import APIRouter, HTTPException

from llm.registry import list_by_capability, list_providers, provider_by_id

router = APIRouter()


@router.get("/providers")
async def get_providers(capability: Optional[str] = None) -> dict:
    """Provider catalog, optionally filtered to free/speech/text."""
    if capability:
        try:
            providers = list_by_capability(capability)
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
    else:
        providers = list_providers()
    return {"providers": [p.model_dump() for p in providers]}


@router.get("/providers/{provider_id}")
async def get_provider(provider_id: str) -> dict:
    provider = provider_by_id(provider_id)
    if provider is None:
        raise HTTPException(status_code=404, detail=f"Unknown provider: {provider_id}")
    return provider.model_dump()
