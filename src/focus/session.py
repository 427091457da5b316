from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional

from mindstream.errors import InvalidTransition
from mindstream.models import SubTask, Task


class FocusState(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    FINISHED = "finished"


def format_clock(seconds: int) -> str:
    minutes, rest = divmod(max(int(seconds), 0), 60)
    return f"{minutes:02d}:{rest:02d}"


@dataclass
class FocusSession:
    """Countdown over one task's estimate while working through its subtasks."""

    task: Task
    state: FocusState = FocusState.IDLE
    remaining_s: int = 0
    current_index: int = 0

    def __post_init__(self) -> None:
        self.remaining_s = max(self.task.estimated_time, 0) * 60
        self.current_index = self._next_incomplete(-1)
        if self.current_index is None:
            self.current_index = 0

    def _next_incomplete(self, after: int) -> Optional[int]:
        for i, st in enumerate(self.task.subtasks):
            if i > after and not st.completed:
                return i
        return None

    @property
    def current_subtask(self) -> Optional[SubTask]:
        if 0 <= self.current_index < len(self.task.subtasks):
            return self.task.subtasks[self.current_index]
        return None

    def toggle(self) -> FocusState:
        if self.state == FocusState.IDLE:
            self.state = FocusState.RUNNING
        elif self.state == FocusState.RUNNING:
            self.state = FocusState.PAUSED
        elif self.state == FocusState.PAUSED:
            self.state = FocusState.RUNNING
        else:
            raise InvalidTransition(self.state.value, "toggle")
        return self.state

    def tick(self, seconds: int = 1) -> int:
        if self.state != FocusState.RUNNING:
            return self.remaining_s
        self.remaining_s = max(self.remaining_s - seconds, 0)
        if self.remaining_s == 0:
            self.state = FocusState.FINISHED
        return self.remaining_s

    def finish_early(self) -> None:
        self.remaining_s = 0
        self.state = FocusState.FINISHED

    def complete_current_subtask(self) -> bool:
        """Mark the current subtask done and advance. Returns True once the task is complete."""
        st = self.current_subtask
        if st is not None:
            self.task.set_subtask_completed(st.id, True)
        if self.task.completed:
            self.state = FocusState.FINISHED
            return True
        nxt = self._next_incomplete(self.current_index)
        if nxt is None:
            nxt = self._next_incomplete(-1)
        if nxt is not None:
            self.current_index = nxt
        return False
