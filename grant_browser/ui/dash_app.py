from __future__ import annotations

import logging
from functools import partial
from pathlib import Path
from typing import Optional

import dash_bootstrap_components as dbc
from dash import Dash

from .config import AppConfig
from grant_browser.config.loader import load_settings
from grant_browser.services.grant_store import GrantDataStore
from grant_browser.ui.callbacks.callbacks_events import register_event_callbacks
from grant_browser.ui.callbacks.callbacks_sync import register_sync_callbacks
from grant_browser.ui.layout.build_layout import build_layout
from grant_browser.ui.session_hub import EventLoopThread, SessionHub

logger = logging.getLogger(__name__)


def create_dash_app(config_root: Optional[Path | str] = None) -> Dash:
    # 1) Load Config
    settings = load_settings(config_root)

    # 2) Services shared by every session
    store = GrantDataStore(settings.data_file)
    loop_thread = EventLoopThread().start()
    hub = SessionHub(settings, store, loop_thread)

    # 3) App Context
    ctx = AppConfig(settings=settings, store=store, hub=hub)
    ctx.validate()

    assets_path = Path(__file__).parent / "assets"

    app = Dash(
        __name__,
        external_stylesheets=[dbc.themes.FLATLY],
        assets_folder=str(assets_path),
        title=settings.ui_title,
    )

    # a fresh session id per page load
    app.layout = partial(build_layout, ctx)

    # Register callbacks
    register_sync_callbacks(app, ctx)
    register_event_callbacks(app, ctx)

    logger.info("dash_app_created", extra={"config_root": str(settings.config_root)})
    return app
