from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Iterator, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from event_planner.errors import InvalidRequestError
from event_planner.utils.time import parse_date


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class EventType(str, Enum):
    NETWORKING = "networking"
    SEMINAR = "seminar"
    WORKSHOP = "workshop"
    CONFERENCE = "conference"
    ONLINE = "online"
    OTHER = "other"

    @property
    def label(self) -> str:
        return EVENT_TYPE_LABELS[self]


EVENT_TYPE_LABELS = {
    EventType.NETWORKING: "ネットワーキング交流会",
    EventType.SEMINAR: "セミナー・勉強会",
    EventType.WORKSHOP: "ワークショップ",
    EventType.CONFERENCE: "カンファレンス",
    EventType.ONLINE: "オンラインイベント",
    EventType.OTHER: "その他",
}
GENERIC_EVENT_LABEL = "イベント"


def event_type_label(value: str | None) -> str:
    try:
        return EventType(value).label
    except ValueError:
        return GENERIC_EVENT_LABEL


class TaskStatus(str, Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"

    @property
    def label(self) -> str:
        return STATUS_LABELS[self]

    def next(self) -> "TaskStatus":
        order = list(TaskStatus)
        return order[(order.index(self) + 1) % len(order)]

    @classmethod
    def coerce(cls, value: object) -> "TaskStatus":
        """Map free-form model output onto the closed enum."""

        if isinstance(value, TaskStatus):
            return value
        if isinstance(value, str):
            key = value.strip().lower().replace("_", "-")
            if key == "progress":
                return cls.IN_PROGRESS
            try:
                return cls(key)
            except ValueError:
                pass
        return cls.PENDING


STATUS_LABELS = {
    TaskStatus.PENDING: "未着手",
    TaskStatus.IN_PROGRESS: "進行中",
    TaskStatus.COMPLETED: "完了",
}


class EventForm(WireModel):
    """Snapshot of the submitted form; frozen once built."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True, frozen=True)

    title: str = Field(alias="eventTitle", min_length=1)
    event_date: date = Field(alias="eventDate")
    event_type: str = Field(default="", alias="eventType")
    details: str = Field(alias="eventDetails", min_length=1)

    @field_validator("title", "details", mode="before")
    @classmethod
    def _strip(cls, value: object) -> object:
        return value.strip() if isinstance(value, str) else value

    @field_validator("event_date", mode="before")
    @classmethod
    def _strict_date(cls, value: object) -> object:
        if isinstance(value, str):
            return parse_date(value.strip())
        return value

    @property
    def type_label(self) -> str:
        return event_type_label(self.event_type)

    @property
    def date_iso(self) -> str:
        return self.event_date.isoformat()

    def to_wire(self) -> dict[str, str]:
        return {
            "eventTitle": self.title,
            "eventDate": self.date_iso,
            "eventType": self.event_type,
            "eventDetails": self.details,
        }


class TaskItem(WireModel):
    name: str
    due_date: str = Field(alias="dueDate")
    status: TaskStatus = TaskStatus.PENDING
    subtasks: Optional[list[str]] = None
    time: Optional[str] = None


class Category(WireModel):
    category: str
    items: list[TaskItem] = Field(default_factory=list)


def task_id(category_index: int, item_index: int) -> str:
    return f"task-{category_index}-{item_index}"


def parse_task_id(value: str) -> tuple[int, int]:
    prefix, _, rest = value.partition("-")
    cat, _, item = rest.partition("-")
    if prefix != "task" or not cat.isdigit() or not item.isdigit():
        raise KeyError(value)
    return int(cat), int(item)


class TaskTree(WireModel):
    tasks: list[Category] = Field(default_factory=list)

    def iter_items(self) -> Iterator[tuple[str, Category, TaskItem]]:
        for c, category in enumerate(self.tasks):
            for i, item in enumerate(category.items):
                yield task_id(c, i), category, item

    def lookup(self, tid: str) -> tuple[Category, TaskItem]:
        c, i = parse_task_id(tid)
        try:
            category = self.tasks[c]
            return category, category.items[i]
        except IndexError:
            raise KeyError(tid) from None

    @property
    def total_items(self) -> int:
        return sum(len(category.items) for category in self.tasks)


class TaskDetail(WireModel):
    template: str = ""
    checklist: list[str] = Field(default_factory=list)
    notes: list[str] = Field(default_factory=list)
    additional_items: list[str] = Field(default_factory=list, alias="additionalItems")


# --------------------------------------------------------------------- requests
REQUIRED_GENERATE_MESSAGE = "イベント名、開催日、詳細は必須です"
REQUIRED_DETAILS_MESSAGE = "タスク名、イベント名、イベント詳細は必須です"
INVALID_DATE_MESSAGE = "開催日はYYYY-MM-DD形式で指定してください"


def _blank(value: Optional[str]) -> bool:
    return not (value and value.strip())


class GenerateRequest(WireModel):
    event_title: Optional[str] = Field(default=None, alias="eventTitle")
    event_date: Optional[str] = Field(default=None, alias="eventDate")
    event_type: Optional[str] = Field(default=None, alias="eventType")
    event_details: Optional[str] = Field(default=None, alias="eventDetails")

    def to_form(self) -> EventForm:
        if any(_blank(v) for v in (self.event_title, self.event_date, self.event_details)):
            raise InvalidRequestError(REQUIRED_GENERATE_MESSAGE)
        try:
            return EventForm(
                title=self.event_title,
                event_date=self.event_date,
                event_type=self.event_type or "",
                details=self.event_details,
            )
        except ValueError as exc:
            raise InvalidRequestError(INVALID_DATE_MESSAGE, str(exc)) from exc


class TaskDetailsRequest(WireModel):
    task_name: Optional[str] = Field(default=None, alias="taskName")
    category: Optional[str] = None
    event_title: Optional[str] = Field(default=None, alias="eventTitle")
    event_date: Optional[str] = Field(default=None, alias="eventDate")
    event_details: Optional[str] = Field(default=None, alias="eventDetails")

    def validate_required(self) -> "TaskDetailsRequest":
        if any(_blank(v) for v in (self.task_name, self.event_title, self.event_details)):
            raise InvalidRequestError(REQUIRED_DETAILS_MESSAGE)
        return self


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
