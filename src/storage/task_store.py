"""
Task persistence.

PostgresTaskStore is used when USE_DATABASE is on; InMemoryTaskStore otherwise
(development and tests). Both store tasks per user, newest first.
"""
from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Dict, List, Optional

from mindstream.errors import TaskNotFound
from mindstream.models import Task
from storage import db

logger = logging.getLogger(__name__)


class TaskStore(ABC):
    @abstractmethod
    async def insert(self, task: Task, user_id: str) -> Task:
        raise NotImplementedError

    @abstractmethod
    async def list_for_user(self, user_id: str) -> List[Task]:
        raise NotImplementedError

    @abstractmethod
    async def get(self, task_id: str, user_id: str) -> Optional[Task]:
        raise NotImplementedError

    @abstractmethod
    async def save(self, task: Task, user_id: str) -> Task:
        """Overwrite an existing task. Raises TaskNotFound if it is gone."""
        raise NotImplementedError

    @abstractmethod
    async def delete(self, task_id: str, user_id: str) -> None:
        raise NotImplementedError


class InMemoryTaskStore(TaskStore):
    def __init__(self):
        self._tasks: Dict[str, Dict[str, Task]] = {}

    async def insert(self, task: Task, user_id: str) -> Task:
        self._tasks.setdefault(user_id, {})[task.id] = task.model_copy(deep=True)
        return task

    async def list_for_user(self, user_id: str) -> List[Task]:
        tasks = [t.model_copy(deep=True) for t in self._tasks.get(user_id, {}).values()]
        # insertion order breaks ties between tasks saved in the same batch
        indexed = list(enumerate(tasks))
        indexed.sort(key=lambda it: (it[1].created_at, it[0]), reverse=True)
        return [t for _, t in indexed]

    async def get(self, task_id: str, user_id: str) -> Optional[Task]:
        task = self._tasks.get(user_id, {}).get(task_id)
        return task.model_copy(deep=True) if task is not None else None

    async def save(self, task: Task, user_id: str) -> Task:
        bucket = self._tasks.get(user_id, {})
        if task.id not in bucket:
            raise TaskNotFound(task.id)
        bucket[task.id] = task.model_copy(deep=True)
        return task

    async def delete(self, task_id: str, user_id: str) -> None:
        if self._tasks.get(user_id, {}).pop(task_id, None) is None:
            raise TaskNotFound(task_id)


def _row_to_task(row) -> Task:
    return Task(
        id=row["id"],
        title=row["title"],
        category=row["category"],
        estimated_time=row["estimated_time"],
        subtasks=row["subtasks"] or [],
        completed=row["completed"],
        created_at=row["created_at"],
    )


class PostgresTaskStore(TaskStore):
    async def insert(self, task: Task, user_id: str) -> Task:
        query = """
            INSERT INTO tasks (
                id, user_id, title, category, estimated_time, subtasks, completed, created_at
            ) VALUES ($1, $2, $3, $4, $5, $6, $7, $8)
        """
        await db.execute(
            query,
            task.id,
            user_id,
            task.title,
            task.category,
            task.estimated_time,
            [st.model_dump() for st in task.subtasks],
            task.completed,
            task.created_at,
        )
        return task

    async def list_for_user(self, user_id: str) -> List[Task]:
        rows = await db.fetch(
            "SELECT * FROM tasks WHERE user_id = $1 ORDER BY created_at DESC",
            user_id,
        )
        return [_row_to_task(r) for r in rows]

    async def get(self, task_id: str, user_id: str) -> Optional[Task]:
        row = await db.fetchrow(
            "SELECT * FROM tasks WHERE id = $1 AND user_id = $2",
            task_id,
            user_id,
        )
        return _row_to_task(row) if row is not None else None

    async def save(self, task: Task, user_id: str) -> Task:
        query = """
            UPDATE tasks
            SET title = $3, category = $4, estimated_time = $5, subtasks = $6, completed = $7
            WHERE id = $1 AND user_id = $2
        """
        status = await db.execute(
            query,
            task.id,
            user_id,
            task.title,
            task.category,
            task.estimated_time,
            [st.model_dump() for st in task.subtasks],
            task.completed,
        )
        if status.endswith(" 0"):
            raise TaskNotFound(task.id)
        return task

    async def delete(self, task_id: str, user_id: str) -> None:
        status = await db.execute(
            "DELETE FROM tasks WHERE id = $1 AND user_id = $2",
            task_id,
            user_id,
        )
        if status.endswith(" 0"):
            raise TaskNotFound(task_id)
