from datetime import date

import pytest

from event_planner.models import TaskStatus
from event_planner.utils.repair import (
    JSONExtractionError,
    category_list,
    extract_json,
    normalize_tree,
)

EVENT_DAY = date(2025, 6, 1)


def test_prefers_json_fence_over_other_blocks():
    text = (
        "Here you go\n```\n{\"tasks\": \"plain\"}\n```\n"
        "```json\n{\"tasks\": \"tagged\"}\n```\n"
    )
    assert extract_json(text) == {"tasks": "tagged"}


def test_falls_back_to_untagged_fence():
    text = "```\n{\"tasks\": []}\n```"
    assert extract_json(text) == {"tasks": []}


def test_falls_back_to_brace_span():
    text = 'Sure! {"tasks": [{"category": "A", "items": []}]} Hope it helps.'
    assert extract_json(text)["tasks"][0]["category"] == "A"


@pytest.mark.parametrize("text", ["", "no json here", "```json\n{broken\n```"])
def test_unusable_output_raises(text):
    with pytest.raises(JSONExtractionError):
        extract_json(text)


def test_category_list_accepts_wrapped_or_bare_list():
    assert category_list({"tasks": [{"category": "A"}]}) == [{"category": "A"}]
    assert category_list([{"category": "A"}]) == [{"category": "A"}]
    with pytest.raises(JSONExtractionError):
        category_list({"tasks": []})
    with pytest.raises(JSONExtractionError):
        category_list({"foo": 1})


def test_normalize_coerces_dates_and_status():
    tree = normalize_tree(
        [
            {
                "category": "集客・広報",
                "items": [
                    {"name": "ok", "dueDate": "2025-05-01", "status": "completed"},
                    {"name": "bad date", "dueDate": "May 1st"},
                    {"name": "impossible date", "dueDate": "2025-02-30", "status": "weird"},
                    {"name": "no date"},
                ],
            }
        ],
        EVENT_DAY,
    )
    items = tree.tasks[0].items
    assert [i.due_date for i in items] == ["2025-05-01", "2025-06-01", "2025-06-01", "2025-06-01"]
    assert [i.status for i in items] == [
        TaskStatus.COMPLETED,
        TaskStatus.PENDING,
        TaskStatus.PENDING,
        TaskStatus.PENDING,
    ]


def test_normalize_keeps_model_tree_unchanged_when_valid():
    raw = [
        {
            "category": "当日運営準備",
            "items": [
                {
                    "name": "名札作成",
                    "dueDate": "2025-05-20",
                    "status": "pending",
                    "subtasks": ["印刷", "ケース購入"],
                }
            ],
        }
    ]
    dumped = normalize_tree(raw, EVENT_DAY).model_dump(by_alias=True, exclude_none=True)
    assert dumped == {"tasks": raw}


def test_normalize_drops_garbage_and_names_anonymous_items():
    tree = normalize_tree(
        [
            "not a category",
            {"category": "", "items": "nope"},
            {"category": "X", "items": [None, 3, {"dueDate": "2025-01-01"}, "素のタスク"]},
        ],
        EVENT_DAY,
    )
    assert [c.category for c in tree.tasks] == ["その他", "X"]
    assert tree.tasks[0].items == []
    assert [i.name for i in tree.tasks[1].items] == ["名称未設定のタスク", "素のタスク"]
    assert tree.tasks[1].items[0].due_date == "2025-01-01"


def test_normalize_cleans_subtasks():
    tree = normalize_tree(
        [{"category": "A", "items": [{"name": "t", "subtasks": ["", " a ", None]}, {"name": "u", "subtasks": []}]}],
        EVENT_DAY,
    )
    assert tree.tasks[0].items[0].subtasks == ["a"]
    assert tree.tasks[0].items[1].subtasks is None
