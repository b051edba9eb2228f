from __future__ import annotations

import logging

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger once per process."""

    root = logging.getLogger()
    resolved = logging.getLevelName(str(level).upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    if not root.handlers:
        logging.basicConfig(level=resolved, format=LOG_FORMAT)
    root.setLevel(resolved)

    # openai/httpx are chatty at INFO
    logging.getLogger("httpx").setLevel(max(resolved, logging.WARNING))
    logging.getLogger("openai").setLevel(max(resolved, logging.WARNING))
