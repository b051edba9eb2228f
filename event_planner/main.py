from __future__ import annotations

import logging

from fastapi import Depends, FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from event_planner.config import settings
from event_planner.deps import get_controller
from event_planner.errors import PlannerError
from event_planner.logging_conf import setup_logging
from event_planner.models import (
    ErrorResponse,
    GenerateRequest,
    TaskDetail,
    TaskDetailsRequest,
    TaskTree,
)

setup_logging(settings.log_level)
logger = logging.getLogger(__name__)

app = FastAPI(title="Event Task Planner", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["POST", "OPTIONS"],
    allow_headers=["Content-Type"],
)


@app.exception_handler(PlannerError)
async def planner_error_handler(request: Request, exc: PlannerError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content=exc.to_body())


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"error": "リクエストの形式が不正です", "message": str(exc.errors())},
    )


@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


ERROR_RESPONSES = {400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}}


@app.post("/api/generate", response_model=TaskTree, responses=ERROR_RESPONSES)
def generate(req: GenerateRequest, ctrl=Depends(get_controller)):
    form = req.to_form()
    return ctrl.generate(form)


@app.post(
    "/api/task-details", response_model=TaskDetail, responses={400: {"model": ErrorResponse}}
)
def task_details(req: TaskDetailsRequest, ctrl=Depends(get_controller)):
    return ctrl.task_details(req)


# Bare OPTIONS without CORS preflight headers still gets an empty 200
@app.options("/api/generate")
@app.options("/api/task-details")
def options() -> Response:
    return Response(status_code=200)
