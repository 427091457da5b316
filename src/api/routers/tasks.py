import logging
from typing import Any, Dict, List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, ConfigDict, Field

from api.backend import BackendAPI
from api.dependencies import get_backend, get_user_id
from api.metrics import TASKS_SAVED_TOTAL
from mindstream.errors import InvalidSchema

router = APIRouter()
logger = logging.getLogger(__name__)


class StructuredPayloadIn(BaseModel):
    """What the review screen sends back, possibly edited by the user."""
    tasks: List[Dict[str, Any]]


class SubTaskIn(BaseModel):
    id: str
    title: str
    completed: bool = False


class TaskUpdateIn(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    estimated_time: Optional[int] = Field(None, alias="estimatedTime")
    subtasks: Optional[List[SubTaskIn]] = None


@router.post("")
async def save_tasks(
    payload: StructuredPayloadIn,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    try:
        tasks = await backend.save_tasks(payload.model_dump(), user_id)
    except InvalidSchema as e:
        raise HTTPException(status_code=422, detail=e.user_message)
    TASKS_SAVED_TOTAL.inc(len(tasks))
    return {"tasks": [t.to_public() for t in tasks], "total": len(tasks)}


@router.get("")
async def get_tasks(
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    tasks = await backend.list_tasks(user_id)
    return {"tasks": [t.to_public() for t in tasks], "total": len(tasks)}


@router.patch("/{task_id}")
async def update_task(
    task_id: str,
    payload: TaskUpdateIn,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    updates = payload.model_dump(exclude_none=True)
    task = await backend.update_task(task_id, user_id, updates)
    return task.to_public()


@router.post("/{task_id}/subtasks/{subtask_id}/toggle")
async def toggle_subtask(
    task_id: str,
    subtask_id: str,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    task = await backend.toggle_subtask(task_id, subtask_id, user_id)
    return task.to_public()


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    user_id: str = Depends(get_user_id),
    backend: BackendAPI = Depends(get_backend),
) -> dict:
    await backend.delete_task(task_id, user_id)
    return {"status": "deleted", "id": task_id}
