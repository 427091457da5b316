import asyncio
import logging

from fastapi import APIRouter, Depends, File, UploadFile
from pydantic import BaseModel, Field

from api.backend import BackendAPI
from api.dependencies import get_backend, get_user_id
from api.metrics import PROVIDER_CALLS_TOTAL, TASKS_STRUCTURED_TOTAL
from mindstream.errors import MindStreamError
from speech.audio import AudioPayload

router = APIRouter()
logger = logging.getLogger(__name__)


class NotesIn(BaseModel):
    text: str = Field(..., min_length=1)


@router.post("/structure")
async def structure_notes(
    payload: NotesIn,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    """Free-form text -> StructuredTaskPayload for the review screen."""
    provider_id = backend.settings_store.load(user_id).text_provider
    logger.info(f"Received notes for structuring ({len(payload.text)} chars, provider={provider_id})")
    try:
        # provider calls are blocking httpx requests
        result = await asyncio.to_thread(backend.structure_text, payload.text, user_id)
    except MindStreamError as e:
        PROVIDER_CALLS_TOTAL.labels(provider=provider_id, kind="structure", outcome=e.code).inc()
        raise
    PROVIDER_CALLS_TOTAL.labels(provider=provider_id, kind="structure", outcome="ok").inc()
    TASKS_STRUCTURED_TOTAL.inc(len(result["tasks"]))
    return result


@router.post("/transcribe")
async def transcribe(
    file: UploadFile = File(...),
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    audio = AudioPayload(
        data=await file.read(),
        mime_type=file.content_type or "audio/webm",
        filename=file.filename or "",
    )
    provider_id = backend.settings_store.load(user_id).speech_provider
    logger.info(f"Received audio for transcription ({len(audio.data)} bytes, {audio.mime_type})")
    try:
        text = await asyncio.to_thread(backend.transcribe_audio, audio, user_id)
    except MindStreamError as e:
        PROVIDER_CALLS_TOTAL.labels(provider=provider_id, kind="transcribe", outcome=e.code).inc()
        raise
    PROVIDER_CALLS_TOTAL.labels(provider=provider_id, kind="transcribe", outcome="ok").inc()
    return {"text": text}
