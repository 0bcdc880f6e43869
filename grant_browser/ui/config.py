from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from grant_browser.config.model import AppSettings
from grant_browser.core.exceptions import ConfigError
from grant_browser.services.grant_store import GrantDataStore
from grant_browser.ui.session_hub import SessionHub


@dataclass
class AppConfig:
    settings: AppSettings
    store: Optional[GrantDataStore] = None
    hub: Optional[SessionHub] = None

    def validate(self) -> None:
        """Ensure all required services are attached before the app starts."""
        if self.store is None:
            raise ConfigError("AppConfig.store must be initialized.")
        if self.hub is None:
            raise ConfigError("AppConfig.hub must be initialized.")
