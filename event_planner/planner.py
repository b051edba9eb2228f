from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Any, Union

from event_planner.config import settings
from event_planner.errors import LLMNotConfiguredError, UpstreamCallError
from event_planner.models import EventForm, TaskDetail, TaskDetailsRequest, TaskTree
from event_planner.prompts import (
    DETAILS_SYSTEM,
    TASKS_SYSTEM,
    build_details_prompt,
    build_tasks_prompt,
)
from event_planner.services.llm_client import LLMClient, LLMUnavailableError
from event_planner.templates import CATEGORIES, fallback_detail, fallback_task_payload
from event_planner.utils.repair import (
    JSONExtractionError,
    category_list,
    extract_json,
    normalize_tree,
)
from event_planner.utils.sections import parse_detail_sections

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "OpenAI APIキーが設定されていません"
GENERATION_FAILED_MESSAGE = "タスクリストの生成に失敗しました"


@dataclass(frozen=True, slots=True)
class ModelSuccess:
    categories: list[Any]


@dataclass(frozen=True, slots=True)
class ModelParseFailure:
    raw_text: str
    reason: str


@dataclass(frozen=True, slots=True)
class ModelUnavailable:
    reason: str


ModelOutcome = Union[ModelSuccess, ModelParseFailure, ModelUnavailable]


def interpret_task_output(text: str) -> ModelOutcome:
    try:
        return ModelSuccess(category_list(extract_json(text)))
    except JSONExtractionError as exc:
        return ModelParseFailure(raw_text=text, reason=str(exc))


def resolve_task_tree(outcome: ModelOutcome, event_date: date) -> TaskTree:
    """Single resolution step: model payload or template, always normalised."""

    tree = None
    if isinstance(outcome, ModelSuccess):
        tree = normalize_tree(outcome.categories, event_date)
        if not tree.tasks:
            logger.warning("Model output held no usable category, using template plan")
            tree = None
    elif isinstance(outcome, ModelParseFailure):
        logger.warning("Unparseable model output, using template plan: %s", outcome.reason)
    else:
        logger.warning("Model unavailable, using template plan: %s", outcome.reason)

    if tree is None:
        tree = normalize_tree(fallback_task_payload(event_date)["tasks"], event_date)
    unknown = [c.category for c in tree.tasks if c.category not in CATEGORIES]
    if unknown:
        logger.debug("Model returned categories outside the prompted set: %s", unknown)
    return tree


class PlannerController:
    """Prompt, call, parse and fall back for both endpoints."""

    def __init__(self, *, llm: LLMClient | None = None) -> None:
        self.llm = llm or LLMClient()

    # --------------------------------------------------------------- Generate
    def generate(self, form: EventForm) -> TaskTree:
        if not self.llm.configured:
            raise LLMNotConfiguredError(MISSING_KEY_MESSAGE)

        try:
            text = self.llm.complete(
                TASKS_SYSTEM, build_tasks_prompt(form), max_tokens=settings.tasks_max_tokens
            )
        except LLMUnavailableError as exc:
            raise UpstreamCallError(GENERATION_FAILED_MESSAGE, str(exc)) from exc
        return resolve_task_tree(interpret_task_output(text), form.event_date)

    # ---------------------------------------------------------------- Details
    def task_details(self, req: TaskDetailsRequest) -> TaskDetail:
        req.validate_required()
        if not self.llm.configured:
            logger.info("No LLM credential; canned advisory for %r", req.task_name)
            return _canned(req)

        prompt = build_details_prompt(
            req.task_name,
            req.category,
            req.event_title,
            req.event_date,
            req.event_details,
        )
        try:
            text = self.llm.complete(DETAILS_SYSTEM, prompt, max_tokens=settings.details_max_tokens)
        except LLMUnavailableError as exc:
            logger.warning("Detail generation failed for %r: %s", req.task_name, exc)
            return _canned(req)

        if not text.strip():
            logger.warning("Empty detail output for %r", req.task_name)
            return _canned(req)
        return parse_detail_sections(text)


def _canned(req: TaskDetailsRequest) -> TaskDetail:
    return fallback_detail(req.task_name, req.event_title, req.event_date)
