from __future__ import annotations

from grant_browser.controller.theme import ThemePreference
from grant_browser.services.storage import MemoryPreferenceStore


def test_theme_defaults_to_dark():
    assert ThemePreference(MemoryPreferenceStore()).load() == "dark"
    assert ThemePreference(MemoryPreferenceStore({"theme": "sepia"})).load() == "dark"


def test_toggle_flips_and_persists():
    storage = MemoryPreferenceStore()
    theme = ThemePreference(storage)

    assert theme.toggle() == "light"
    assert storage.get_item("theme") == "light"
    assert theme.toggle() == "dark"
    assert ThemePreference(storage).load() == "dark"
