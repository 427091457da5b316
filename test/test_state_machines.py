from datetime import datetime, timezone

import pytest

from focus.session import FocusSession, FocusState, format_clock
from mindstream.errors import InvalidTransition
from mindstream.models import SubTask, Task
from speech.recorder import Recorder, RecorderState, format_recording_time


class FakeClock:
    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


def test_recorder_happy_path():
    clock = FakeClock()
    rec = Recorder(clock=clock)
    rec.start()
    rec.add_chunk(b"ab")
    rec.add_chunk(b"")
    rec.add_chunk(b"cd")
    clock.now = 75
    assert rec.elapsed_seconds() == 75
    audio = rec.stop()
    assert audio.data == b"abcd"
    assert rec.state == RecorderState.TRANSCRIBING
    rec.finish("hello")
    assert rec.state == RecorderState.DONE
    assert rec.text == "hello"
    assert rec.elapsed_seconds() == 75


def test_recorder_error_and_restart():
    rec = Recorder(clock=FakeClock())
    rec.start()
    rec.stop()
    rec.fail("OpenAI API 错误")
    assert rec.state == RecorderState.ERROR
    rec.start()
    assert rec.state == RecorderState.RECORDING
    assert rec.error is None


@pytest.mark.parametrize("action", ["stop", "finish", "fail"])
def test_recorder_illegal_from_idle(action):
    rec = Recorder(clock=FakeClock())
    with pytest.raises(InvalidTransition):
        getattr(rec, action)(*([] if action == "stop" else ["x"]))


def test_recorder_cannot_start_twice():
    rec = Recorder(clock=FakeClock())
    rec.start()
    with pytest.raises(InvalidTransition):
        rec.start()


def test_format_recording_time():
    assert format_recording_time(0) == "0:00"
    assert format_recording_time(75) == "1:15"


def focus_task(*completed, minutes=1):
    return Task(
        id="t",
        title="T",
        estimated_time=minutes,
        subtasks=[SubTask(id=f"s{i}", title=f"s{i}", completed=c) for i, c in enumerate(completed)],
        created_at=datetime(2026, 1, 1, tzinfo=timezone.utc),
    )


def test_focus_timer_runs_pauses_and_finishes():
    s = FocusSession(focus_task(False, minutes=1))
    assert s.remaining_s == 60
    s.tick(10)
    assert s.remaining_s == 60
    assert s.toggle() == FocusState.RUNNING
    s.tick(10)
    assert s.toggle() == FocusState.PAUSED
    s.tick(10)
    assert s.remaining_s == 50
    s.toggle()
    s.tick(100)
    assert s.remaining_s == 0
    assert s.state == FocusState.FINISHED
    with pytest.raises(InvalidTransition):
        s.toggle()


def test_focus_starts_at_first_incomplete_and_advances():
    s = FocusSession(focus_task(True, False, False))
    assert s.current_index == 1
    assert s.complete_current_subtask() is False
    assert s.current_index == 2
    assert s.task.completed is False
    assert s.complete_current_subtask() is True
    assert s.task.completed is True
    assert s.state == FocusState.FINISHED


def test_focus_finish_early():
    s = FocusSession(focus_task(False, minutes=5))
    s.toggle()
    s.finish_early()
    assert s.remaining_s == 0 and s.state == FocusState.FINISHED


def test_format_clock():
    assert format_clock(125) == "02:05"


def test_focus_wraps_back_to_an_earlier_open_subtask():
    s = FocusSession(focus_task(False, False, False))
    s.current_index = 2
    assert s.complete_current_subtask() is False
    assert s.current_index == 0
    assert s.current_subtask.id == "s0"
