from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)


class PreferenceStore(ABC):
    """
    Abstract key/value store for user preferences (in memory, browser storage, etc.).
    """

    @abstractmethod
    def get_item(self, key: str) -> Optional[str]:
        pass

    @abstractmethod
    def set_item(self, key: str, value: str) -> None:
        pass


class MemoryPreferenceStore(PreferenceStore):
    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._items: Dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class BrowserPreferenceStore(MemoryPreferenceStore):
    """
    One browser's preferences, mirrored from its local-storage dcc.Store.

    Seeded with whatever the page holds; every set_item bumps `revision` so the
    host knows to write the items back to the browser.
    """

    def __init__(self, initial: Any = None):
        if not isinstance(initial, dict):
            if initial is not None:
                logger.warning("Ignoring malformed browser preferences", extra={"raw_type": type(initial).__name__})
            initial = {}
        super().__init__({str(k): str(v) for k, v in initial.items() if v is not None})
        self.revision = 0

    def set_item(self, key: str, value: str) -> None:
        if self.get_item(key) == value:
            return
        super().set_item(key, value)
        self.revision += 1

    def to_dict(self) -> Dict[str, str]:
        return dict(self._items)
