from __future__ import annotations

import logging
from typing import Any

import requests
from pydantic import ValidationError

from event_planner.config import settings
from event_planner.models import EventForm, TaskDetail, TaskTree

logger = logging.getLogger(__name__)

GENERATE_PATH = "/api/generate"
DETAILS_PATH = "/api/task-details"


class PlannerAPIError(RuntimeError):
    """Any failure talking to the planner API: network, HTTP status or payload."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class PlannerAPI:
    """Thin requests-based gateway to the two planner endpoints."""

    def __init__(
        self,
        base_url: str | None = None,
        *,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.base_url = (base_url or settings.planner_api_url).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.client_timeout
        self._session = session or requests.Session()

    def generate(self, form: EventForm) -> TaskTree:
        data = self._post(GENERATE_PATH, form.to_wire())
        try:
            return TaskTree.model_validate(data)
        except ValidationError as exc:
            raise PlannerAPIError(f"malformed task tree: {exc}") from exc

    def task_details(self, task_name: str, category: str, form: EventForm) -> TaskDetail:
        payload = {
            "taskName": task_name,
            "category": category,
            "eventTitle": form.title,
            "eventDate": form.date_iso,
            "eventDetails": form.details,
        }
        data = self._post(DETAILS_PATH, payload)
        try:
            return TaskDetail.model_validate(data)
        except ValidationError as exc:
            raise PlannerAPIError(f"malformed task detail: {exc}") from exc

    # ----------------------------------------------------------------- internals
    def _post(self, path: str, payload: dict[str, Any]) -> Any:
        url = f"{self.base_url}{path}"
        try:
            response = self._session.post(url, json=payload, timeout=self.timeout)
        except requests.RequestException as exc:
            logger.warning("POST %s failed: %s", url, exc)
            raise PlannerAPIError(str(exc)) from exc

        if not response.ok:
            raise PlannerAPIError(_error_message(response), response.status_code)
        try:
            return response.json()
        except ValueError as exc:
            raise PlannerAPIError(f"invalid JSON from {url}") from exc


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = {}
    if isinstance(body, dict):
        message = body.get("error") or body.get("message")
        if message:
            return str(message)
    return f"API Error: {response.status_code}"
