"""
Top-level package for the grant browser.

This package exposes the core architecture (filter state, controller, UI adapters).
Most code should import from submodules such as:
    grant_browser.core
    grant_browser.controller
    grant_browser.services
    grant_browser.ui
"""

__all__: list[str] = []
