from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


TASK_CATEGORIES = ("工作", "生活", "学习", "健康", "其他")
DEFAULT_CATEGORY = "其他"


class SubTask(BaseModel):
    id: str
    title: str
    completed: bool = False


class Task(BaseModel):
    """A persisted task.

    ``completed`` is derived from the subtasks: a task is complete iff it has
    subtasks and all of them are complete. Mutate subtasks through the methods
    below so the flag never drifts.
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    category: str = DEFAULT_CATEGORY
    estimated_time: int = Field(0, alias="estimatedTime")
    subtasks: List[SubTask] = Field(default_factory=list)
    completed: bool = False
    created_at: datetime = Field(alias="createdAt")

    def recompute_completed(self) -> bool:
        self.completed = bool(self.subtasks) and all(st.completed for st in self.subtasks)
        return self.completed

    def set_subtask_completed(self, subtask_id: str, completed: bool) -> SubTask:
        for st in self.subtasks:
            if st.id == subtask_id:
                st.completed = completed
                self.recompute_completed()
                return st
        raise KeyError(subtask_id)

    def toggle_subtask(self, subtask_id: str) -> SubTask:
        for st in self.subtasks:
            if st.id == subtask_id:
                return self.set_subtask_completed(subtask_id, not st.completed)
        raise KeyError(subtask_id)

    def replace_subtasks(self, subtasks: List[SubTask]) -> None:
        self.subtasks = list(subtasks)
        self.recompute_completed()

    def to_public(self) -> dict:
        return self.model_dump(mode="json", by_alias=True)


Theme = Literal["light", "dark", "auto"]


class UserSettings(BaseModel):
    user_id: str
    # AI service selection
    speech_provider: str = "browser-speech"
    speech_model: str = "browser-speech-api"
    text_provider: str = "google"
    text_model: str = "gemini-pro"
    # provider id -> API key (encrypted by the settings store before it hits disk)
    api_keys: Dict[str, str] = Field(default_factory=dict)
    # preferences
    auto_save: bool = True
    default_category: str = "工作"
    theme: Theme = "auto"
    language: str = "zh-CN"
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @field_validator("api_keys", mode="before")
    @classmethod
    def api_keys_not_null(cls, v):
        return v or {}
