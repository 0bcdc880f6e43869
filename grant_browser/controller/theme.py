from __future__ import annotations

import logging

from grant_browser.services.storage import PreferenceStore

logger = logging.getLogger(__name__)

THEME_KEY = "theme"
LIGHT = "light"
DARK = "dark"


class ThemePreference:
    """Light/dark preference, persisted under the "theme" key (default dark)."""

    def __init__(self, storage: PreferenceStore):
        self.storage = storage

    def load(self) -> str:
        saved = self.storage.get_item(THEME_KEY)
        return LIGHT if saved == LIGHT else DARK

    def toggle(self) -> str:
        theme = DARK if self.load() == LIGHT else LIGHT
        self.storage.set_item(THEME_KEY, theme)
        logger.info("theme_changed", extra={"theme": theme})
        return theme
