"""
Recording lifecycle as an explicit state machine:

    idle -> recording -> transcribing -> done
                 \\            \\-> error
                  \\-> error
"""
from __future__ import annotations

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Optional

from mindstream.errors import InvalidTransition
from speech.audio import AudioPayload


class RecorderState(str, Enum):
    IDLE = "idle"
    RECORDING = "recording"
    TRANSCRIBING = "transcribing"
    DONE = "done"
    ERROR = "error"


def format_recording_time(seconds: int) -> str:
    minutes, rest = divmod(max(int(seconds), 0), 60)
    return f"{minutes}:{rest:02d}"


@dataclass
class Recorder:
    clock: Callable[[], float] = time.monotonic
    state: RecorderState = RecorderState.IDLE
    started_at: Optional[float] = None
    duration_s: float = 0.0
    audio: Optional[AudioPayload] = None
    text: Optional[str] = None
    error: Optional[str] = None
    _chunks: list = field(default_factory=list, repr=False)

    def _require(self, action: str, *allowed: RecorderState) -> None:
        if self.state not in allowed:
            raise InvalidTransition(self.state.value, action)

    def start(self) -> None:
        self._require("start", RecorderState.IDLE, RecorderState.DONE, RecorderState.ERROR)
        self._clear()
        self.started_at = self.clock()
        self.state = RecorderState.RECORDING

    def add_chunk(self, chunk: bytes) -> None:
        self._require("add_chunk", RecorderState.RECORDING)
        if chunk:
            self._chunks.append(chunk)

    def elapsed_seconds(self) -> int:
        if self.state == RecorderState.RECORDING and self.started_at is not None:
            return int(self.clock() - self.started_at)
        return int(self.duration_s)

    def stop(self, mime_type: str = "audio/webm;codecs=opus") -> AudioPayload:
        self._require("stop", RecorderState.RECORDING)
        now = self.clock()
        self.duration_s = now - (self.started_at if self.started_at is not None else now)
        self.audio = AudioPayload(data=b"".join(self._chunks), mime_type=mime_type)
        self._chunks = []
        self.state = RecorderState.TRANSCRIBING
        return self.audio

    def finish(self, text: str) -> None:
        self._require("finish", RecorderState.TRANSCRIBING)
        self.text = text
        self.state = RecorderState.DONE

    def fail(self, message: str) -> None:
        self._require("fail", RecorderState.RECORDING, RecorderState.TRANSCRIBING)
        self._chunks = []
        self.error = message
        self.state = RecorderState.ERROR

    def reset(self) -> None:
        self._clear()
        self.state = RecorderState.IDLE

    def _clear(self) -> None:
        self.started_at = None
        self.duration_s = 0.0
        self.audio = None
        self.text = None
        self.error = None
        self._chunks = []
