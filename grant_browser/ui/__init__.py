"""
Dash adapter for the grant browser.

create_dash_app() builds the page and bridges browser events to the
per-session controllers running on a background event loop.
"""

from .dash_app import create_dash_app

__all__ = ["create_dash_app"]
