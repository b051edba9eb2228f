from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Callable

from pydantic import ValidationError

from event_planner.client.api import PlannerAPI, PlannerAPIError
from event_planner.client.export import build_csv, export_filename
from event_planner.models import EventForm, EventType, TaskDetail, TaskStatus, TaskTree
from event_planner.planner import ModelUnavailable, resolve_task_tree
from event_planner.utils.time import (
    DEFAULT_LEAD_DAYS,
    add_days,
    default_event_date,
    format_date,
)

logger = logging.getLogger(__name__)

REQUIRED_FIELDS_MESSAGE = "イベント名、開催日、詳細を入力してください。"
NO_TASKS_MESSAGE = "タスクリストが生成されていません。"
DETAIL_LOADING_MESSAGE = "詳細を作成中..."
DETAIL_FAILED_MESSAGE = "詳細の作成に失敗しました。"

SAMPLE_TITLE = "ネットワーキング交流会"
SAMPLE_DETAILS = """ビジネスパーソン向けのネットワーキングイベント。
定員50名、会場は都心のカンファレンスルーム。
登壇者によるピッチセッションあり。
立食形式で交流タイムを設ける予定。"""


class FormValidationError(ValueError):
    pass


class SessionBusyError(RuntimeError):
    """A generation cycle is already in flight."""


class NoTasksError(RuntimeError):
    pass


class Phase(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    RENDERED = "rendered"


class ProgressIndicator:
    """Advances toward 95% over a fixed duration; snaps to 100% on completion."""

    TARGET = 95.0

    def __init__(
        self,
        duration: float = 25.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.duration = duration
        self._clock = clock
        self._started_at: float | None = None
        self._done = False

    def start(self) -> None:
        self._started_at = self._clock()
        self._done = False

    def complete(self) -> None:
        self._done = True

    @property
    def done(self) -> bool:
        return self._done

    def percent(self) -> float:
        if self._done:
            return 100.0
        if self._started_at is None:
            return 0.0
        elapsed = max(self._clock() - self._started_at, 0.0)
        return min(self.TARGET, self.TARGET * elapsed / self.duration)


class DetailState(str, Enum):
    LOADING = "loading"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass(slots=True)
class DetailEntry:
    state: DetailState
    detail: TaskDetail | None = None
    message: str = DETAIL_LOADING_MESSAGE


class DetailCache:
    """Fetch-once cache keyed by task id; failures are cached too."""

    def __init__(self) -> None:
        self._entries: dict[str, DetailEntry] = {}

    def get(self, task_id: str) -> DetailEntry | None:
        return self._entries.get(task_id)

    def __contains__(self, task_id: str) -> bool:
        return task_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def ensure(self, task_id: str, fetch: Callable[[], TaskDetail]) -> DetailEntry:
        entry = self._entries.get(task_id)
        if entry is not None:
            return entry

        entry = DetailEntry(state=DetailState.LOADING)
        self._entries[task_id] = entry
        try:
            entry.detail = fetch()
        except PlannerAPIError as exc:
            logger.error("Failed to load details for %s: %s", task_id, exc)
            entry.state = DetailState.FAILED
            entry.message = DETAIL_FAILED_MESSAGE
        else:
            entry.state = DetailState.LOADED
            entry.message = ""
        return entry


def build_form(
    title: str | None,
    event_date: str | date | None,
    event_type: str | None,
    details: str | None,
) -> EventForm:
    """Validate raw input into an immutable form snapshot."""

    title = (title or "").strip()
    details = (details or "").strip()
    if isinstance(event_date, date):
        event_date = format_date(event_date)
    if not title or not event_date or not details:
        raise FormValidationError(REQUIRED_FIELDS_MESSAGE)
    try:
        return EventForm(
            title=title,
            event_date=event_date,
            event_type=event_type or "",
            details=details,
        )
    except ValidationError as exc:
        raise FormValidationError(str(exc)) from exc


def sample_form(today: date | None = None) -> EventForm:
    event_date = default_event_date() if today is None else add_days(today, DEFAULT_LEAD_DAYS)
    return build_form(SAMPLE_TITLE, event_date, EventType.NETWORKING.value, SAMPLE_DETAILS)


class PlannerSession:
    """Application state for one planning session.

    Owns the submitted form, the rendered task tree and the per-task detail
    cache so rendering and export receive them explicitly.
    """

    def __init__(
        self,
        api: PlannerAPI | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
        progress_duration: float = 25.0,
    ) -> None:
        self.api = api or PlannerAPI()
        self._clock = clock
        self._progress_duration = progress_duration
        self.phase = Phase.IDLE
        self.form: EventForm | None = None
        self.last_form: EventForm | None = None
        self.tree: TaskTree | None = None
        self.progress = ProgressIndicator(progress_duration, clock)
        self.expanded: set[str] = set()
        self.details = DetailCache()
        self.used_fallback = False

    # ---------------------------------------------------------------- generate
    def generate(self, form: EventForm) -> TaskTree:
        if self.phase is Phase.REQUESTING:
            raise SessionBusyError("generation already in progress")

        previous = self.phase
        self.phase = Phase.REQUESTING
        self.progress.start()
        try:
            tree = self.api.generate(form)
            self.used_fallback = False
        except PlannerAPIError as exc:
            logger.warning("Backend API error, falling back to template plan: %s", exc)
            tree = resolve_task_tree(ModelUnavailable(str(exc)), form.event_date)
            self.used_fallback = True
        except Exception:
            self.phase = previous
            raise
        finally:
            self.progress.complete()

        self.tree = tree
        self.form = form
        self.last_form = form
        self.expanded.clear()
        self.details.clear()
        self.phase = Phase.RENDERED
        return tree

    def submit(
        self,
        title: str | None,
        event_date: str | date | None,
        event_type: str | None,
        details: str | None,
    ) -> TaskTree:
        return self.generate(build_form(title, event_date, event_type, details))

    def regenerate(self) -> TaskTree:
        if self.last_form is None:
            raise FormValidationError(REQUIRED_FIELDS_MESSAGE)
        return self.generate(self.last_form)

    def reset(self) -> None:
        self.phase = Phase.IDLE
        self.form = None
        self.last_form = None
        self.tree = None
        self.expanded.clear()
        self.details.clear()
        self.progress = ProgressIndicator(self._progress_duration, self._clock)
        self.used_fallback = False

    # ------------------------------------------------------------------- tasks
    def _require_tree(self) -> TaskTree:
        if self.tree is None or self.form is None:
            raise NoTasksError(NO_TASKS_MESSAGE)
        return self.tree

    def cycle_status(self, task_id: str) -> TaskStatus:
        _, item = self._require_tree().lookup(task_id)
        item.status = item.status.next()
        return item.status

    def toggle(self, task_id: str) -> bool:
        """Expand or collapse a task; the first expansion loads its detail."""

        category, item = self._require_tree().lookup(task_id)
        if task_id in self.expanded:
            self.expanded.discard(task_id)
            return False

        self.expanded.add(task_id)
        form = self.form
        self.details.ensure(
            task_id,
            lambda: self.api.task_details(item.name, category.category, form),
        )
        return True

    def detail(self, task_id: str) -> DetailEntry | None:
        return self.details.get(task_id)

    # ------------------------------------------------------------------ export
    def export_csv(self) -> tuple[str, bytes]:
        tree = self._require_tree()
        return export_filename(self.form), build_csv(tree, self.form)
