"""
Item classifier — derives a box's weight category from its dimensions.

A box's category is a pure function of its volume:

    volume >  volume_high                 -> HEAVY
    volume_mid < volume <= volume_high    -> MEDIUM
    otherwise                             -> LIGHT

The category drives both the stacking rule (heavier boxes go below) and
the colour shown to the user.
"""

from enum import Enum
from typing import Tuple

from config import VOLUME_HIGH, VOLUME_MID


class Category(str, Enum):
    """Weight class of a box, ordered HEAVY > MEDIUM > LIGHT."""

    HEAVY = "heavy"
    MEDIUM = "medium"
    LIGHT = "light"

    @property
    def weight(self) -> int:
        """Strict stacking weight: 3 / 2 / 1."""
        return _WEIGHTS[self]

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def color(self) -> str:
        """CSS colour used by the presentation layer."""
        return _COLORS[self]


_WEIGHTS = {
    Category.HEAVY: 3,
    Category.MEDIUM: 2,
    Category.LIGHT: 1,
}

_COLORS = {
    Category.HEAVY: "#e74c3c",   # red
    Category.MEDIUM: "#2ecc71",  # green
    Category.LIGHT: "#3498db",   # blue
}


def classify_volume(
    volume: float,
    volume_mid: float = VOLUME_MID,
    volume_high: float = VOLUME_HIGH,
) -> Category:
    """Map a volume (m³) onto its category."""
    if volume > volume_high:
        return Category.HEAVY
    if volume > volume_mid:
        return Category.MEDIUM
    return Category.LIGHT


def classify(
    width: float,
    height: float,
    depth: float,
    volume_mid: float = VOLUME_MID,
    volume_high: float = VOLUME_HIGH,
) -> Tuple[float, Category]:
    """
    Compute ``(volume, category)`` for a box.

    Deterministic and side-effect free.  Dimensions are assumed positive;
    ``Item`` rejects anything else before calling this.
    """
    volume = width * height * depth
    return volume, classify_volume(volume, volume_mid, volume_high)
