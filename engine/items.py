"""
Items and placements — the pure data the engine reasons about.

Item       — a box: immutable dimensions, derived volume/category, and a
             runtime-only highlight flag for the presentation layer.
Placement  — a committed item at a resting position (x, y, z) in the
             container's local frame; y is the box centre elevation.

Items carry no rendering state.  The presentation layer keeps its own
mapping from ``Item`` identity to whatever visual it draws.
"""

import math
from dataclasses import InitVar, dataclass, field
from enum import Enum
from typing import Optional

from config import ItemConfig
from engine.classifier import Category, classify


class Highlight(str, Enum):
    """Presentation hint attached to an item.  Has no effect on placement."""
    NONE = "none"
    INVALID_PLACEMENT = "invalid_placement"
    REMOVAL_TARGET = "removal_target"


_IMMUTABLE_FIELDS = frozenset({"id", "width", "height", "depth", "volume", "category"})


@dataclass(eq=False)
class Item:
    """
    A box with fixed dimensions (m) and a derived weight category.

    Items compare by identity: two boxes with equal dimensions are still
    different boxes.  Everything except ``highlight`` is read-only after
    construction.

    Attributes:
        width:     X-axis extent.
        height:    Y-axis (vertical) extent.
        depth:     Z-axis extent.
        id:        Sequence number assigned by the engine (display only).
        volume:    width * height * depth.
        category:  Weight class derived from volume.
        highlight: Current presentation hint.

    Raises:
        ValueError: any dimension is not a positive finite number.
    """
    width: float
    height: float
    depth: float
    id: int = 0
    item_config: InitVar[Optional[ItemConfig]] = None
    volume: float = field(init=False)
    category: Category = field(init=False)
    highlight: Highlight = field(default=Highlight.NONE, compare=False)

    def __post_init__(self, item_config: Optional[ItemConfig]) -> None:
        for name in ("width", "height", "depth"):
            value = getattr(self, name)
            if not isinstance(value, (int, float)) or not math.isfinite(value) or value <= 0:
                raise ValueError(f"Item {name} must be a positive number, got {value!r}")
        cfg = item_config or ItemConfig()
        self.volume, self.category = classify(
            self.width, self.height, self.depth,
            volume_mid=cfg.volume_mid, volume_high=cfg.volume_high,
        )

    def __setattr__(self, name: str, value) -> None:
        if name in _IMMUTABLE_FIELDS and name in self.__dict__:
            raise AttributeError(f"Item.{name} is read-only")
        super().__setattr__(name, value)

    @property
    def half_width(self) -> float:
        return self.width / 2

    @property
    def half_height(self) -> float:
        return self.height / 2

    @property
    def half_depth(self) -> float:
        return self.depth / 2

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "width": round(self.width, 4),
            "height": round(self.height, 4),
            "depth": round(self.depth, 4),
            "volume": round(self.volume, 6),
            "category": self.category.value,
            "highlight": self.highlight.value,
        }

    def __repr__(self) -> str:
        return (
            f"Item(id={self.id}, "
            f"{self.width:.2f}x{self.height:.2f}x{self.depth:.2f}m, "
            f"{self.category.display_name})"
        )


@dataclass(frozen=True)
class Placement:
    """
    A committed item at its resting position.

    Frozen so resolvers and callers can hold on to placements without
    risk of accidental mutation.

    Attributes:
        item:   The placed box.
        x, z:   Footprint centre in container-local coordinates.
        y:      Elevation of the box centre.
        column: Lane index for fixed-grid containers, else None.
    """
    item: Item
    x: float
    y: float
    z: float
    column: Optional[int] = None

    @property
    def bottom(self) -> float:
        return self.y - self.item.half_height

    @property
    def top(self) -> float:
        return self.y + self.item.half_height

    def footprint_overlaps(self, other: "Placement") -> bool:
        """
        Strict AABB overlap of the two width x depth rectangles.

        Touching edges do not count as overlap.
        """
        return (
            abs(self.x - other.x) < self.item.half_width + other.item.half_width
            and abs(self.z - other.z) < self.item.half_depth + other.item.half_depth
        )

    def to_dict(self) -> dict:
        d = {
            "item": self.item.to_dict(),
            "position": [round(self.x, 4), round(self.y, 4), round(self.z, 4)],
            "top": round(self.top, 4),
        }
        if self.column is not None:
            d["column"] = self.column
        return d
