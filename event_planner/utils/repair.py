from __future__ import annotations

import json
import logging
import re
from datetime import date
from typing import Any

from event_planner.models import Category, TaskItem, TaskStatus, TaskTree
from event_planner.utils.time import format_date, is_date_string, parse_date

logger = logging.getLogger(__name__)

# Tried in order; only the first pattern that matches is decoded.
JSON_FENCE = re.compile(r"```json[ \t]*\n(.*?)\n[ \t]*```", re.DOTALL | re.IGNORECASE)
ANY_FENCE = re.compile(r"```[^\n`]*\n(.*?)\n[ \t]*```", re.DOTALL)
BRACES = re.compile(r"\{.*\}", re.DOTALL)

UNNAMED_CATEGORY = "その他"
UNNAMED_TASK = "名称未設定のタスク"


class JSONExtractionError(ValueError):
    """Model output did not contain decodable JSON."""


def extract_json(text: str | None) -> Any:
    """Pull the first JSON document out of free-form model output."""

    if not text:
        raise JSONExtractionError("empty model output")

    for pattern in (JSON_FENCE, ANY_FENCE, BRACES):
        match = pattern.search(text)
        if match is None:
            continue
        candidate = match.group(1) if match.groups() else match.group(0)
        try:
            return json.loads(candidate)
        except json.JSONDecodeError as exc:
            raise JSONExtractionError(f"invalid JSON: {exc}") from exc

    raise JSONExtractionError("no JSON found in model output")


def category_list(payload: Any) -> list[Any]:
    """Accept either ``{"tasks": [...]}`` or a bare category list."""

    if isinstance(payload, dict):
        payload = payload.get("tasks")
    if not isinstance(payload, list) or not payload:
        raise JSONExtractionError("payload has no task categories")
    return payload


def normalize_tree(categories: list[Any], event_date: date) -> TaskTree:
    """Coerce every item so dueDate and status always hold valid values."""

    fallback_due = format_date(event_date)
    normalized: list[Category] = []
    for raw in categories:
        if not isinstance(raw, dict):
            logger.debug("Dropping non-object category: %r", raw)
            continue
        name = str(raw.get("category") or raw.get("name") or "").strip() or UNNAMED_CATEGORY
        raw_items = raw.get("items")
        items = [
            item
            for item in (
                _normalize_item(entry, fallback_due)
                for entry in (raw_items if isinstance(raw_items, list) else [])
            )
            if item is not None
        ]
        normalized.append(Category(category=name, items=items))
    return TaskTree(tasks=normalized)


def _normalize_item(entry: Any, fallback_due: str) -> TaskItem | None:
    if isinstance(entry, str):
        entry = {"name": entry}
    if not isinstance(entry, dict):
        return None

    name = str(entry.get("name") or "").strip() or UNNAMED_TASK

    return TaskItem(
        name=name,
        due_date=_coerce_due(entry.get("dueDate"), fallback_due),
        status=TaskStatus.coerce(entry.get("status")),
        subtasks=_coerce_subtasks(entry.get("subtasks")),
        time=_coerce_text(entry.get("time")),
    )


def _coerce_due(value: Any, fallback_due: str) -> str:
    if not is_date_string(value):
        return fallback_due
    try:
        parse_date(value)
    except ValueError:
        return fallback_due
    return value


def _coerce_text(value: Any) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _coerce_subtasks(value: Any) -> list[str] | None:
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, list):
        return None
    cleaned = [str(sub).strip() for sub in value if sub is not None and str(sub).strip()]
    return cleaned or None
