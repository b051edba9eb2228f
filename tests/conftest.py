from __future__ import annotations

from datetime import date

import pytest

from event_planner.models import EventForm
from event_planner.planner import PlannerController
from event_planner.services.llm_client import LLMClient, LLMUnavailableError


class StubProvider:
    """Chat provider returning canned text, or failing on demand."""

    name = "stub"

    def __init__(self, text: str = "", *, configured: bool = True, fail: bool = False) -> None:
        self.text = text
        self.configured = configured
        self.fail = fail
        self.calls: list[tuple[str, str, int]] = []

    def complete(self, system: str, user: str, *, max_tokens: int) -> str:
        self.calls.append((system, user, max_tokens))
        if self.fail:
            raise LLMUnavailableError("upstream exploded")
        return self.text


@pytest.fixture
def meetup_form() -> EventForm:
    return EventForm(
        title="Meetup",
        event_date=date(2025, 6, 1),
        event_type="networking",
        details="Evening networking with pitches.",
    )


@pytest.fixture
def make_controller():
    def _make(text: str = "", *, configured: bool = True, fail: bool = False):
        provider = StubProvider(text, configured=configured, fail=fail)
        return PlannerController(llm=LLMClient(provider=provider)), provider

    return _make
