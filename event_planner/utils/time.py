from __future__ import annotations

import re
from datetime import date, datetime, timedelta
import zoneinfo

DEFAULT_TZ = "Asia/Tokyo"
DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
WEEKDAYS_JA = ("月", "火", "水", "木", "金", "土", "日")  # date.weekday() order
DEFAULT_LEAD_DAYS = 60


def now_in_tz(tz: str = DEFAULT_TZ) -> datetime:
    return datetime.now(tz=zoneinfo.ZoneInfo(tz))


def today_in_tz(tz: str = DEFAULT_TZ) -> date:
    return now_in_tz(tz).date()


def default_event_date(tz: str = DEFAULT_TZ) -> date:
    return add_days(today_in_tz(tz), DEFAULT_LEAD_DAYS)


def is_date_string(value: object) -> bool:
    return isinstance(value, str) and bool(DATE_PATTERN.match(value))


def parse_date(value: str) -> date:
    """Parse a strict ``YYYY-MM-DD`` string."""

    if not is_date_string(value):
        raise ValueError(f"expected YYYY-MM-DD, got {value!r}")
    return date.fromisoformat(value)


def add_days(day: date, days: int) -> date:
    return day + timedelta(days=days)


def format_date(day: date) -> str:
    return day.strftime("%Y-%m-%d")


def format_display(value: date | str) -> str:
    """Render a date as ``6月1日(日)``."""

    day = parse_date(value) if isinstance(value, str) else value
    return f"{day.month}月{day.day}日({WEEKDAYS_JA[day.weekday()]})"
