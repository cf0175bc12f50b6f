"""
visualization — HUD text and step-by-step logging.

Public API:
    from visualization.hud import format_dims, format_volume, hud_snapshot
    from visualization.step_logger import StepLogger
"""

from visualization.hud import (
    format_dims, format_volume,
    category_color, category_name, highlight_color,
    item_caption, hud_snapshot,
)
from visualization.step_logger import StepLogger

__all__ = [
    "format_dims", "format_volume",
    "category_color", "category_name", "highlight_color",
    "item_caption", "hud_snapshot",
    "StepLogger",
]
