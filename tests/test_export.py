from __future__ import annotations

import csv
import io

from event_planner.client.export import build_csv, export_filename
from event_planner.models import EventForm, TaskStatus, TaskTree
from event_planner.planner import ModelUnavailable, resolve_task_tree

BOM = b"\xef\xbb\xbf"


def _rows(payload: bytes) -> list[list[str]]:
    assert payload.startswith(BOM)
    return list(csv.reader(io.StringIO(payload[len(BOM):].decode("utf-8"))))


def test_csv_has_bom_headers_and_one_row_per_task(meetup_form):
    tree = resolve_task_tree(ModelUnavailable("offline"), meetup_form.event_date)
    tree.tasks[0].items[1].status = TaskStatus.COMPLETED

    rows = _rows(build_csv(tree, meetup_form))

    assert rows[0] == ["イベント名", "Meetup"]
    assert rows[1] == ["開催日", "2025-06-01"]
    assert rows[2] == ["イベント種別", "ネットワーキング交流会"]
    assert rows[3] == []
    assert rows[4] == ["カテゴリ", "タスク名", "期限日", "状態", "サブタスク"]
    data = rows[5:]
    assert len(data) == tree.total_items
    assert data[0] == [
        "集客・広報",
        "メール文案作成",
        "2025-04-02",
        "未着手",
        "招待状送付（メール）; リマインド通知配信（参加確定者向け）",
    ]
    assert data[1][3] == "完了"


def test_commas_in_names_are_quoted(meetup_form):
    tree = TaskTree.model_validate(
        {"tasks": [{"category": "A, B", "items": [{"name": "x, y", "dueDate": "2025-05-01"}]}]}
    )
    rows = _rows(build_csv(tree, meetup_form))
    assert rows[5][:2] == ["A, B", "x, y"]


def test_export_filename_is_safe():
    form = EventForm(title="Q2/Q3 Meetup", event_date="2025-06-01", details="d")
    assert export_filename(form) == "Q2_Q3 Meetup_タスクリスト.csv"
