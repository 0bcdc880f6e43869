"""
Config package for grant_browser.

Responsible for:
- the settings model (AppSettings)
- reading global.json (load_settings)
"""

from .model import AppSettings
from .loader import load_settings

__all__ = ["AppSettings", "load_settings"]
