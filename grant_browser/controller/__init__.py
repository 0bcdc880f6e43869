"""
Controller layer: widget surface, input bindings with debounce, preset replay
and the update orchestrator, all driven from one asyncio event loop
"""

from .controls import Controls
from .display import DisplayState
from .orchestrator import UpdateOrchestrator, UpdatePhase
from .visualizer import GrantVisualizer
from .widgets import Widget, WidgetSurface, build_page_surface

__all__ = [
    "Controls",
    "DisplayState",
    "GrantVisualizer",
    "UpdateOrchestrator",
    "UpdatePhase",
    "Widget",
    "WidgetSurface",
    "build_page_surface",
]
