"""
Dial rendering for Sun Moon Builder.
"""

from .dial_renderer import DialRenderer, format_date_label
from .draw_commands import DrawCommand, DrawCommandExecutor, DrawResult
from .drawing_surface import (
    DrawingSurface,
    LinearGradient,
    QtDrawingSurface,
    ensure_gui_application,
    make_gradient,
)
from .label_placement import LABEL_SLOTS, LabelPlacementPolicy

__all__ = [
    "DialRenderer",
    "format_date_label",
    "DrawCommand",
    "DrawCommandExecutor",
    "DrawResult",
    "DrawingSurface",
    "LinearGradient",
    "QtDrawingSurface",
    "ensure_gui_application",
    "make_gradient",
    "LABEL_SLOTS",
    "LabelPlacementPolicy",
]
