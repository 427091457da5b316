from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator

from mindstream.models import DEFAULT_CATEGORY


class StructuredSubTask(BaseModel):
    """A proposed step. Any completion flag the model sends is dropped."""

    model_config = ConfigDict(extra="ignore")

    title: str = ""

    @field_validator("title", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return "" if v is None else v


class StructuredTask(BaseModel):
    """One entry of the model's proposal. Missing fields take zero-defaults."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    title: str = ""
    category: str = DEFAULT_CATEGORY
    estimated_time: int = Field(0, alias="estimatedTime")
    subtasks: List[StructuredSubTask] = Field(default_factory=list)

    @field_validator("title", "category", mode="before")
    @classmethod
    def none_to_default(cls, v, info):
        if v is None:
            return DEFAULT_CATEGORY if info.field_name == "category" else ""
        return v

    @field_validator("estimated_time", mode="before")
    @classmethod
    def none_to_zero(cls, v):
        return 0 if v is None else v

    @field_validator("subtasks", mode="before")
    @classmethod
    def none_to_empty(cls, v):
        return v or []


class StructuredTaskPayload(BaseModel):
    tasks: List[StructuredTask] = Field(default_factory=list)
