from __future__ import annotations

from event_planner.planner import PlannerController

_controller: PlannerController | None = None


def get_controller() -> PlannerController:
    global _controller
    if _controller is None:
        _controller = PlannerController()
    return _controller
