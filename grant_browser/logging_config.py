from __future__ import annotations

import logging
import os
from typing import Optional

from pythonjsonlogger import jsonlogger

# request logs from the dev server drown out everything else at ~4 polls/second
QUIET_LOGGERS = ("werkzeug",)


def configure_logging(
        level: Optional[int] = None,
        force_format: Optional[str] = None,
) -> None:
    """
    Configure root logger for the grant browser

    Modes:
    - JSON (default) in prod
    - plain text (dev mode)

    Selection Order:
        1) force_format argument ("json" or "plain") if provided
        2) env var GRANT_BROWSER_LOG_FORMAT
        3) default = "json"

    Level comes from `level`, then GRANT_BROWSER_LOG_LEVEL, then INFO.
    """

    if force_format is not None:
        format_mode = force_format
    else:
        format_mode = os.getenv("GRANT_BROWSER_LOG_FORMAT", "json").lower()

    if level is None:
        level = logging.getLevelName(os.getenv("GRANT_BROWSER_LOG_LEVEL", "INFO").upper())
        if not isinstance(level, int):
            level = logging.INFO

    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler()

    if format_mode == "plain":
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
        )
    else:
        formatter = jsonlogger.JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(threadName)s %(message)s"
        )

    handler.setFormatter(formatter)

    # Replace any existing handlers to avoid duplicate logs
    root.handlers.clear()
    root.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
