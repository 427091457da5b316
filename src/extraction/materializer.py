from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

from pydantic import ValidationError

from llm.normalizer import validate_payload
from llm.schemas import StructuredTaskPayload
from mindstream.errors import InvalidSchema
from mindstream.models import SubTask, Task


def new_id() -> str:
    return uuid.uuid4().hex


def materialize(
    payload: Dict[str, Any],
    *,
    id_factory: Optional[Callable[[], str]] = None,
    now: Optional[datetime] = None,
) -> List[Task]:
    """Give a structured payload identity and initial state.

    Every call mints fresh ids, so materializing the same payload twice yields
    two disjoint task sets. Titles, categories and estimates are copied as-is;
    every task and subtask starts incomplete whatever the payload says.
    """
    validate_payload(payload)
    try:
        parsed = StructuredTaskPayload.model_validate(payload)
    except ValidationError as e:
        raise InvalidSchema(f"{e.error_count()} invalid field(s) in tasks") from e

    make_id = id_factory or new_id
    created_at = now or datetime.now(timezone.utc)

    tasks = []
    for item in parsed.tasks:
        subtasks = [SubTask(id=make_id(), title=st.title, completed=False) for st in item.subtasks]
        tasks.append(
            Task(
                id=make_id(),
                title=item.title,
                category=item.category,
                estimated_time=item.estimated_time,
                subtasks=subtasks,
                completed=False,
                created_at=created_at,
            )
        )
    return tasks
