from __future__ import annotations

from typing import Container, NamedTuple

from event_planner.client.session import (
    DETAIL_LOADING_MESSAGE,
    DetailCache,
    DetailEntry,
    DetailState,
)
from event_planner.models import TaskDetail, TaskTree
from event_planner.utils.time import format_display

COLLAPSED = "▶"
EXPANDED = "▼"


class TimelineEntry(NamedTuple):
    date_label: str
    category: str


def timeline(tree: TaskTree) -> list[TimelineEntry]:
    """One entry per non-empty category, dated by its first item."""

    return [
        TimelineEntry(format_display(category.items[0].due_date), category.category)
        for category in tree.tasks
        if category.items
    ]


def render_timeline(tree: TaskTree) -> str:
    return "\n".join(f"● {entry.date_label}  {entry.category}" for entry in timeline(tree))


def render_detail(task_name: str, detail: TaskDetail) -> str:
    lines = [f"📝 {task_name} - 参考資料"]
    if detail.template:
        lines += ["", "[参考テンプレート]", detail.template]
    for title, items in (
        ("チェックリスト", detail.checklist),
        ("注意点", detail.notes),
        ("追加で検討すべき項目", detail.additional_items),
    ):
        if items:
            lines += ["", f"[{title}]"] + [f"- {item}" for item in items]
    return "\n".join(lines)


def _indent(text: str, prefix: str = "      ") -> list[str]:
    return [prefix + line if line else "" for line in text.splitlines()]


def render_task_list(
    tree: TaskTree,
    expanded: Container[str] = (),
    details: DetailCache | dict[str, DetailEntry] | None = None,
) -> str:
    if details is None:
        details = {}
    lines: list[str] = []
    current = None
    for tid, category, item in tree.iter_items():
        if category is not current:
            if lines:
                lines.append("")
            lines.append(f"■ {category.category}")
            current = category

        is_open = tid in expanded
        icon = EXPANDED if is_open else COLLAPSED
        when = format_display(item.due_date)
        if item.time:
            when = f"{when} {item.time}"
        lines.append(f"  {icon} [{tid}] {item.name}  〔{item.status.label}〕  📅 {when}")
        for subtask in item.subtasks or []:
            lines.append(f"      ・{subtask}")

        if not is_open:
            continue
        entry = details.get(tid)
        if entry is None or entry.state is DetailState.LOADING:
            lines += _indent(DETAIL_LOADING_MESSAGE)
        elif entry.state is DetailState.FAILED:
            lines += _indent(entry.message)
        else:
            lines += _indent(render_detail(item.name, entry.detail))
    return "\n".join(lines)
