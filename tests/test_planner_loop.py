from __future__ import annotations

import json
import re

import pytest

from event_planner.errors import InvalidRequestError, LLMNotConfiguredError, UpstreamCallError
from event_planner.models import TaskDetailsRequest, TaskStatus
from event_planner.planner import (
    ModelParseFailure,
    ModelSuccess,
    ModelUnavailable,
    interpret_task_output,
    resolve_task_tree,
)

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

MODEL_TREE = {
    "tasks": [
        {
            "category": "集客・広報",
            "items": [
                {"name": "告知ページ作成", "dueDate": "2025-04-15", "status": "pending"},
                {"name": "SNS告知", "dueDate": "来週", "subtasks": ["X", "LinkedIn"]},
            ],
        },
        {
            "category": "イベント実行",
            "items": [{"name": "受付開始", "dueDate": "2025-06-01", "status": "progress"}],
        },
    ]
}


def _details_request(**overrides) -> TaskDetailsRequest:
    body = {
        "taskName": "メール文案作成",
        "category": "集客・広報",
        "eventTitle": "Meetup",
        "eventDate": "2025-06-01",
        "eventDetails": "Evening networking",
    }
    body.update(overrides)
    return TaskDetailsRequest.model_validate(body)


def _assert_invariants(tree) -> None:
    for _, _, item in tree.iter_items():
        assert DATE_RE.match(item.due_date)
        assert isinstance(item.status, TaskStatus)


def test_generate_uses_fenced_model_json(make_controller, meetup_form):
    text = "計画です。\n```json\n" + json.dumps(MODEL_TREE, ensure_ascii=False) + "\n```"
    controller, provider = make_controller(text)

    tree = controller.generate(meetup_form)

    assert [c.category for c in tree.tasks] == ["集客・広報", "イベント実行"]
    promo = tree.tasks[0].items
    assert promo[0].due_date == "2025-04-15"
    assert promo[1].due_date == "2025-06-01"  # unparseable date coerced to event day
    assert promo[1].status is TaskStatus.PENDING
    assert promo[1].subtasks == ["X", "LinkedIn"]
    assert tree.tasks[1].items[0].status is TaskStatus.IN_PROGRESS
    assert "Meetup" in provider.calls[0][1]
    _assert_invariants(tree)


def test_generate_falls_back_to_template_on_unparseable_output(make_controller, meetup_form):
    controller, _ = make_controller("Sorry, I cannot help with that.")

    tree = controller.generate(meetup_form)

    assert len(tree.tasks) == 4
    assert tree.tasks[0].items[0].due_date == "2025-04-02"
    assert {i.due_date for i in tree.tasks[2].items} == {"2025-06-01"}
    _assert_invariants(tree)


def test_generate_without_credentials_is_refused(make_controller, meetup_form):
    controller, provider = make_controller(configured=False)
    with pytest.raises(LLMNotConfiguredError) as info:
        controller.generate(meetup_form)
    assert info.value.status_code == 500
    assert provider.calls == []


def test_generate_upstream_failure_carries_message(make_controller, meetup_form):
    controller, _ = make_controller(fail=True)
    with pytest.raises(UpstreamCallError) as info:
        controller.generate(meetup_form)
    assert info.value.to_body() == {
        "error": "タスクリストの生成に失敗しました",
        "message": "upstream exploded",
    }


def test_outcome_variants_resolve_through_one_step(meetup_form):
    success = interpret_task_output(json.dumps(MODEL_TREE))
    failure = interpret_task_output("nothing")
    assert isinstance(success, ModelSuccess)
    assert isinstance(failure, ModelParseFailure)

    from_failure = resolve_task_tree(failure, meetup_form.event_date)
    from_unavailable = resolve_task_tree(ModelUnavailable("offline"), meetup_form.event_date)
    assert from_failure == from_unavailable
    assert resolve_task_tree(success, meetup_form.event_date).tasks[0].items[0].name == "告知ページ作成"


def test_payload_without_usable_categories_resolves_to_template(meetup_form):
    outcome = interpret_task_output('{"tasks": ["promo", "prep"]}')
    assert isinstance(outcome, ModelSuccess)

    tree = resolve_task_tree(outcome, meetup_form.event_date)

    assert tree == resolve_task_tree(ModelUnavailable("offline"), meetup_form.event_date)
    assert len(tree.tasks) == 4


def test_details_parse_model_sections(make_controller):
    controller, provider = make_controller("## 参考テンプレート\n本文\n\n## チェックリスト\n- a\n")

    detail = controller.task_details(_details_request())

    assert detail.template == "本文"
    assert detail.checklist == ["a"]
    assert "B2Bメールマーケティング" in provider.calls[0][1]


@pytest.mark.parametrize(
    "kwargs",
    [
        {"configured": False},
        {"fail": True},
        {"text": "   "},
    ],
)
def test_details_degrade_to_canned_advisory(make_controller, kwargs):
    controller, _ = make_controller(**kwargs)

    detail = controller.task_details(_details_request(taskName="メール"))

    assert detail.template.startswith("件名: 【ご案内】Meetup")


def test_details_validation(make_controller):
    controller, _ = make_controller("irrelevant")
    with pytest.raises(InvalidRequestError):
        controller.task_details(_details_request(eventDetails=""))
