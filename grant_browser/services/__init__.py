"""
Reference collaborators: pandas grant store, plotly network renderer,
export and preference storage
"""

from .export_service import ExportBundle, ExportService
from .grant_store import GrantDataStore
from .network_renderer import NetworkRenderer
from .storage import BrowserPreferenceStore, MemoryPreferenceStore, PreferenceStore

__all__ = [
    "BrowserPreferenceStore",
    "ExportBundle",
    "ExportService",
    "GrantDataStore",
    "MemoryPreferenceStore",
    "NetworkRenderer",
    "PreferenceStore",
]
