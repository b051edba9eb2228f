from __future__ import annotations

import argparse
import logging
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Callable, TextIO

from event_planner.client.api import PlannerAPI
from event_planner.client.render import render_task_list, render_timeline
from event_planner.client.session import (
    FormValidationError,
    NoTasksError,
    PlannerSession,
    build_form,
    sample_form,
)
from event_planner.config import settings
from event_planner.logging_conf import setup_logging
from event_planner.models import EventForm, EventType, TaskTree
from event_planner.utils.time import default_event_date, format_date

logger = logging.getLogger(__name__)

POLL_INTERVAL = 0.05

HELP = """コマンド:
  t <task-id>   詳細の表示/非表示
  s <task-id>   状態を切り替え (未着手 → 進行中 → 完了)
  r             再生成
  e [dir]       CSV出力
  q             終了"""


def run_with_progress(
    session: PlannerSession,
    job: Callable[[], TaskTree],
    out: TextIO | None = None,
) -> TaskTree:
    """Run a blocking generation in a worker thread while drawing progress."""

    out = out or sys.stderr
    with ThreadPoolExecutor(max_workers=1) as pool:
        future = pool.submit(job)
        while not future.done():
            out.write(f"\r✨ 生成中... {int(session.progress.percent()):3d}%")
            out.flush()
            time.sleep(POLL_INTERVAL)
        tree = future.result()
    out.write(f"\r✨ 生成中... {int(session.progress.percent()):3d}%\n")
    return tree


def show(session: PlannerSession, out: TextIO | None = None) -> None:
    out = out or sys.stdout
    if session.tree is None:
        return
    if session.used_fallback:
        print("(APIに接続できなかったため、テンプレートから生成しました)", file=out)
    print(render_timeline(session.tree), file=out)
    print("", file=out)
    print(
        render_task_list(session.tree, session.expanded, session.details),
        file=out,
    )


def export(session: PlannerSession, directory: Path, out: TextIO | None = None) -> Path:
    out = out or sys.stdout
    filename, payload = session.export_csv()
    directory.mkdir(parents=True, exist_ok=True)
    path = directory / filename
    path.write_bytes(payload)
    print(f"✓ 出力しました: {path}", file=out)
    return path


def interact(
    session: PlannerSession, stdin: TextIO | None = None, out: TextIO | None = None
) -> None:
    stdin = stdin or sys.stdin
    out = out or sys.stdout
    print(HELP, file=out)
    for raw in stdin:
        command, _, arg = raw.strip().partition(" ")
        arg = arg.strip()
        try:
            if command == "q":
                break
            if command == "t":
                session.toggle(arg)
            elif command == "s":
                session.cycle_status(arg)
            elif command == "r":
                run_with_progress(session, session.regenerate)
            elif command == "e":
                export(session, Path(arg or "."), out)
                continue
            else:
                print(HELP, file=out)
                continue
        except KeyError:
            print(f"タスクが見つかりません: {arg}", file=out)
            continue
        except NoTasksError as exc:
            print(str(exc), file=out)
            continue
        show(session, out)


def _form_from_args(args: argparse.Namespace) -> EventForm:
    if args.sample:
        return sample_form()
    return build_form(
        args.title,
        args.date or format_date(default_event_date(settings.project_timezone)),
        args.type,
        args.details,
    )


def _plan(args: argparse.Namespace) -> int:
    try:
        form = _form_from_args(args)
    except FormValidationError as exc:
        print(str(exc), file=sys.stderr)
        return 2

    session = PlannerSession(PlannerAPI(args.api_url))
    run_with_progress(session, lambda: session.generate(form))
    for task_id in args.expand or []:
        try:
            session.toggle(task_id)
        except KeyError:
            print(f"タスクが見つかりません: {task_id}", file=sys.stderr)
    show(session)

    if args.export:
        export(session, Path(args.export))
    if args.interactive:
        interact(session)
    return 0


def _serve(args: argparse.Namespace) -> int:  # pragma: no cover - starts a server
    import uvicorn

    uvicorn.run("event_planner.main:app", host=args.host, port=args.port)
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="event-planner", description="Generate an event task checklist"
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="127.0.0.1")
    serve.add_argument("--port", type=int, default=8000)
    serve.set_defaults(func=_serve)

    plan = sub.add_parser("plan", help="Fill the form and render the task list")
    plan.add_argument("--title")
    plan.add_argument("--date", help="YYYY-MM-DD (default: 60 days from today)")
    plan.add_argument(
        "--type", choices=[t.value for t in EventType], default=EventType.NETWORKING.value
    )
    plan.add_argument("--details")
    plan.add_argument("--sample", action="store_true", help="Use the built-in sample event")
    plan.add_argument("--api-url", default=None)
    plan.add_argument("--expand", action="append", metavar="TASK_ID")
    plan.add_argument("--export", metavar="DIR", help="Write the CSV into DIR")
    plan.add_argument("--interactive", "-i", action="store_true")
    plan.set_defaults(func=_plan)
    return parser


def main(argv: list[str] | None = None) -> int:
    setup_logging(settings.log_level)
    args = build_parser().parse_args(argv)
    return args.func(args)


if __name__ == "__main__":  # pragma: no cover - manual entrypoint
    sys.exit(main())
