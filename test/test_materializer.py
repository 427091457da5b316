import itertools
import json
from datetime import datetime, timezone

import pytest

from extraction.materializer import materialize
from llm.normalizer import normalize
from mindstream.errors import InvalidSchema

SHOPPING_PAYLOAD = {
    "tasks": [
        {
            "title": "买菜",
            "category": "生活",
            "estimatedTime": 30,
            "subtasks": [
                {"title": "列购物清单", "completed": False},
                {"title": "前往超市采购", "completed": False},
            ],
        },
        {
            "title": "打扫房间",
            "category": "生活",
            "estimatedTime": 45,
            "subtasks": [{"title": "整理客厅", "completed": False}],
        },
    ]
}


def test_shopping_scenario_end_to_end():
    raw = "```json\n" + json.dumps(SHOPPING_PAYLOAD, ensure_ascii=False) + "\n```"
    tasks = materialize(normalize(raw))

    assert len(tasks) == 2
    first, second = tasks
    assert first.title == "买菜"
    assert first.estimated_time == 30
    assert len(first.subtasks) == 2
    assert [st.title for st in first.subtasks] == ["列购物清单", "前往超市采购"]
    assert second.category == "生活"
    assert second.estimated_time == 45
    assert not first.completed and not second.completed


def test_empty_fenced_list_is_not_an_error():
    assert materialize(normalize('```json\n{"tasks":[]}\n```')) == []


def test_completion_forced_false():
    payload = {
        "tasks": [
            {
                "title": "Done already?",
                "category": "工作",
                "estimatedTime": 15,
                "subtasks": [{"title": "a", "completed": True}, {"title": "b", "completed": True}],
            }
        ]
    }
    (task,) = materialize(payload)
    assert task.completed is False
    assert all(st.completed is False for st in task.subtasks)


def test_estimates_copied_without_clamping():
    payload = {"tasks": [{"title": "Long", "category": "学习", "estimatedTime": 600, "subtasks": []}]}
    assert materialize(payload)[0].estimated_time == 600


def test_missing_fields_take_zero_defaults():
    (task,) = materialize({"tasks": [{"title": "Bare"}]})
    assert task.category == "其他"
    assert task.estimated_time == 0
    assert task.subtasks == []
    assert task.completed is False


def test_two_runs_never_share_ids():
    a = materialize(SHOPPING_PAYLOAD)
    b = materialize(SHOPPING_PAYLOAD)

    def ids(tasks):
        return {t.id for t in tasks} | {st.id for t in tasks for st in t.subtasks}

    assert ids(a).isdisjoint(ids(b))
    assert [t.title for t in a] == [t.title for t in b]


def test_injected_ids_and_clock():
    counter = itertools.count(1)
    now = datetime(2026, 1, 1, tzinfo=timezone.utc)
    tasks = materialize(SHOPPING_PAYLOAD, id_factory=lambda: f"id{next(counter)}", now=now)
    assert {t.created_at for t in tasks} == {now}
    assert tasks[0].subtasks[0].id == "id1"
    assert tasks[0].id == "id3"


def test_public_shape_uses_wire_names():
    data = materialize(SHOPPING_PAYLOAD)[0].to_public()
    assert set(data) == {"id", "title", "category", "estimatedTime", "subtasks", "completed", "createdAt"}


@pytest.mark.parametrize("payload", [{}, {"tasks": "x"}, {"tasks": [{"subtasks": "nope"}]}])
def test_bad_payload_raises_invalid_schema(payload):
    with pytest.raises(InvalidSchema):
        materialize(payload)


@pytest.mark.parametrize("flag", [None, "yes", 1, {"done": True}, True])
def test_subtask_completion_flag_is_ignored(flag):
    (task,) = materialize({"tasks": [{"title": "A", "subtasks": [{"title": "a1", "completed": flag}]}]})
    assert task.subtasks[0].title == "a1"
    assert task.subtasks[0].completed is False
    assert task.completed is False


def test_null_subtask_title_becomes_empty():
    (task,) = materialize({"tasks": [{"title": "A", "subtasks": [{"title": None}, {}]}]})
    assert [st.title for st in task.subtasks] == ["", ""]
