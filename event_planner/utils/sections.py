from __future__ import annotations

import re

from event_planner.models import TaskDetail
from event_planner.prompts import (
    HEADING_ADDITIONAL,
    HEADING_CHECKLIST,
    HEADING_NOTES,
    HEADING_TEMPLATE,
)

BULLET = re.compile(r"^(?:\s*(?:[-*•・✓]|\d+[.)]|\[[ xX✓]?\]))+\s*")


def _section(text: str, heading: str) -> str | None:
    pattern = re.compile(
        rf"^#{{2,}}\s*{re.escape(heading)}[^\n]*\n(.*?)(?=^#{{2,}}\s|\Z)",
        re.MULTILINE | re.DOTALL,
    )
    match = pattern.search(text)
    return match.group(1) if match else None


def _bullets(block: str | None) -> list[str]:
    if not block:
        return []
    items = (BULLET.sub("", line).strip() for line in block.splitlines())
    return [item for item in items if item]


def parse_detail_sections(text: str) -> TaskDetail:
    """Split a markdown answer into the four advisory sections.

    Each section runs from its ``##`` (or deeper) heading to the next heading or the end
    of the text. When neither a template nor a checklist is recognised the
    whole answer is kept as the template.
    """

    template = (_section(text, HEADING_TEMPLATE) or "").strip()
    checklist = _bullets(_section(text, HEADING_CHECKLIST))
    detail = TaskDetail(
        template=template,
        checklist=checklist,
        notes=_bullets(_section(text, HEADING_NOTES)),
        additional_items=_bullets(_section(text, HEADING_ADDITIONAL)),
    )
    if not template and not checklist:
        detail.template = text.strip()
    return detail
