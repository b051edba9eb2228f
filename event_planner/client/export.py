from __future__ import annotations

import csv
import io
import re

from event_planner.models import EventForm, TaskTree

COLUMNS = ["カテゴリ", "タスク名", "期限日", "状態", "サブタスク"]
SUBTASK_SEPARATOR = "; "
_UNSAFE_FILENAME = re.compile(r'[\\/:*?"<>|\r\n\t]')


def build_csv(tree: TaskTree, form: EventForm) -> bytes:
    """Render the tree as UTF-8 CSV with a BOM so spreadsheet apps detect the encoding."""

    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(["イベント名", form.title])
    writer.writerow(["開催日", form.date_iso])
    writer.writerow(["イベント種別", form.type_label])
    writer.writerow([])
    writer.writerow(COLUMNS)
    for _, category, item in tree.iter_items():
        writer.writerow(
            [
                category.category,
                item.name,
                item.due_date,
                item.status.label,
                SUBTASK_SEPARATOR.join(item.subtasks or []),
            ]
        )
    return buffer.getvalue().encode("utf-8-sig")


def export_filename(form: EventForm) -> str:
    title = _UNSAFE_FILENAME.sub("_", form.title).strip() or "event"
    return f"{title}_タスクリスト.csv"
