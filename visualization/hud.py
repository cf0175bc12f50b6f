"""
HUD formatting — the strings and colours the presentation layer shows.

The engine hands out plain data (dimensions, volume, category, highlight,
counts, messages); these helpers turn it into display text the same way
for every front end.

Example:
    >>> item = Item(0.3, 0.2, 0.3)
    >>> format_dims(item)
    '0.30 x 0.20 x 0.30 m'
    >>> format_volume(item)
    'Vol: 0.018 m³'
"""

from typing import Optional

from engine.items import Highlight, Item
from engine.session import AppContext

PLACEHOLDER = "--"

HIGHLIGHT_COLORS = {
    Highlight.NONE: None,
    Highlight.INVALID_PLACEMENT: "#ff0000",
    Highlight.REMOVAL_TARGET: "#ffaa00",
}


def format_dims(item: Optional[Item]) -> str:
    if item is None:
        return PLACEHOLDER
    return f"{item.width:.2f} x {item.height:.2f} x {item.depth:.2f} m"


def format_volume(item: Optional[Item]) -> str:
    if item is None:
        return PLACEHOLDER
    return f"Vol: {item.volume:.3f} m³"


def category_color(item: Optional[Item]) -> str:
    """CSS colour of the item's category ('transparent' for no item)."""
    if item is None:
        return "transparent"
    return item.category.color


def category_name(item: Optional[Item]) -> str:
    if item is None:
        return ""
    return item.category.display_name


def highlight_color(item: Optional[Item]) -> Optional[str]:
    """Emissive overlay colour for the item's highlight, or None."""
    if item is None:
        return None
    return HIGHLIGHT_COLORS[item.highlight]


def item_caption(item: Item) -> str:
    """One-line status text for a freshly generated box."""
    return (
        f"{category_name(item)} box ({format_volume(item)}): "
        f"aim where you want it and press Place."
    )


def hud_snapshot(ctx: AppContext) -> dict:
    """Everything the HUD shows for the active mode."""
    engine = ctx.active_engine
    item = engine.pending_item
    snapshot = {
        "mode": ctx.mode.value,
        "mode_label": ctx.mode.label,
        "container_placed": engine.container_placed,
        "dims": format_dims(item),
        "volume": format_volume(item),
        "color": category_color(item),
        "category": category_name(item),
        "highlight": highlight_color(item),
        "count": engine.item_count,
        "caption": item_caption(item) if item is not None else "",
    }
    if engine.container_placed and engine.container.is_grid:
        snapshot["column"] = engine.selected_column + 1
    return snapshot
