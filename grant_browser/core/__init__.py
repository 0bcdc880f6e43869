"""
Core domain layer: filter state and its clamp rules, slider transforms,
presets and the collaborator contracts (data store, renderer)
"""

from .filter_state import FilterState
from .presets import PRESETS, Preset, build_preset_state
from .transforms import dollars_to_slider, slider_to_dollars

__all__ = [
    "FilterState",
    "PRESETS",
    "Preset",
    "build_preset_state",
    "dollars_to_slider",
    "slider_to_dollars",
]
