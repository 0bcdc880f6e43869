from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from grant_browser.controller.debounce import DEBOUNCE_DELAY
from grant_browser.controller.orchestrator import PAINT_DELAY


@dataclass
class AppSettings:
    """
    Parsed global.json.

    - ui_title: browser tab / navbar title
    - data_file: grant table (.csv or .parquet); resolved against the config root
    - debounce_delay: organization search quiet period, seconds
    - paint_delay: yield before recomputation so the busy overlay shows, seconds
    - poll_interval_ms: how often the browser pulls display updates
    """
    config_root: Path
    ui_title: str = "Grant Flow Network"
    data_file: Optional[Path] = None
    debounce_delay: float = DEBOUNCE_DELAY
    paint_delay: float = PAINT_DELAY
    poll_interval_ms: int = 250
    graph_width: int = 1200
    graph_height: int = 800
