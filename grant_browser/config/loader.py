from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from grant_browser.core.exceptions import ConfigError
from .model import AppSettings

logger = logging.getLogger(__name__)

CONFIG_ENV = "GRANT_BROWSER_CONFIG"


def _resolve(root: Path, raw: Optional[str]) -> Optional[Path]:
    if raw is None:
        return None
    path = Path(raw)
    return path if path.is_absolute() else (root / path).resolve()


def _number(raw: Dict[str, Any], key: str, default: float, minimum: float = 0.0) -> float:
    value = raw.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"'{key}' must be a number, got {value!r}")
    if value < minimum:
        raise ConfigError(f"'{key}' must be >= {minimum}, got {value!r}")
    return value


def load_settings(root: Optional[Path | str] = None) -> AppSettings:
    """
    Load settings from `root`/global.json.

    Expected structure:

        root/
            global.json
            data/grants.csv   (or wherever data_file points)

    `root` defaults to $GRANT_BROWSER_CONFIG, then ./config. Relative paths in
    global.json are resolved against `root`.

    :raises ConfigError: if global.json is missing, unreadable or has bad values.
    """
    root = Path(root if root is not None else os.getenv(CONFIG_ENV, "config"))
    logger.info("Loading global config", extra={"config_root": str(root)})

    global_path = root / "global.json"
    if not global_path.is_file():
        raise ConfigError(f"File not found at {global_path}")

    try:
        with global_path.open() as f:
            raw = json.load(f)
    except ValueError as e:
        raise ConfigError(f"Invalid JSON in {global_path}: {e}") from e

    if not isinstance(raw, dict):
        raise ConfigError(f"{global_path} must contain a JSON object")

    settings = AppSettings(
        config_root=root,
        ui_title=raw.get("ui_title", "Grant Flow Network"),
        data_file=_resolve(root, raw.get("data_file")),
        debounce_delay=_number(raw, "debounce_delay", AppSettings.debounce_delay),
        paint_delay=_number(raw, "paint_delay", AppSettings.paint_delay),
        poll_interval_ms=int(_number(raw, "poll_interval_ms", AppSettings.poll_interval_ms, minimum=50)),
        graph_width=int(_number(raw, "graph_width", AppSettings.graph_width, minimum=100)),
        graph_height=int(_number(raw, "graph_height", AppSettings.graph_height, minimum=100)),
    )

    if settings.data_file is None:
        logger.warning("No data_file configured", extra={"config_root": str(root)})

    return settings
