"""
Stacking rule validator — pure-function checks for a proposed resting spot.

All checks are stateless: they take the candidate item and whatever
the resolver found beneath it, returning a boolean / message or raising
a PlacementError.  The same functions serve the per-frame preview hint
and the commit-time re-check.

Rules:
  1. Category  — a box may rest on another only if its weight is <= the
                 support's weight (HEAVY > MEDIUM > LIGHT).  The floor
                 accepts anything.
  2. Height    — the box top must not exceed the container's height
                 bound, when it has one.
  3. Bounds    — the footprint must lie inside the container (checked by
                 Container.validate_footprint).
"""

from typing import Optional

from engine.items import Item


# ─────────────────────────────────────────────────────────────────────────────
# Errors
# ─────────────────────────────────────────────────────────────────────────────

class PlacementError(Exception):
    """Base class for expected, user-facing engine failures."""


class SequencingError(PlacementError):
    """Operation called before its preconditions (container, item) exist."""


class StackingRuleError(PlacementError):
    """Candidate is heavier than the item it would rest on."""


class OutOfBoundsError(PlacementError):
    """Candidate footprint does not fit inside the container."""


class HeightLimitError(PlacementError):
    """Candidate would stick out above the container's height bound."""


class SupportDependencyError(PlacementError):
    """Another item rests on the one being removed or moved."""


# ─────────────────────────────────────────────────────────────────────────────
# Constants
# ─────────────────────────────────────────────────────────────────────────────

# Tolerance on the height bound so a box that exactly reaches the wall top
# is not rejected by float noise.
HEIGHT_EPS = 1e-9

INVALID_PLACEMENT_MESSAGE = "Invalid placement! The box would exceed the {name} height."
OUT_OF_BOUNDS_MESSAGE = "Invalid placement! The box does not fit inside the {name}."


# ─────────────────────────────────────────────────────────────────────────────
# Category rule
# ─────────────────────────────────────────────────────────────────────────────

def can_stack(candidate: Item, support: Optional[Item]) -> bool:
    """True if *candidate* may rest directly on *support* (None = floor)."""
    if support is None:
        return True
    return candidate.category.weight <= support.category.weight


def stack_error(candidate: Item, support: Optional[Item]) -> Optional[str]:
    """Human-readable explanation when ``can_stack`` is False, else None."""
    if can_stack(candidate, support):
        return None
    return (
        f"A {candidate.category.display_name} box cannot be stacked "
        f"on a {support.category.display_name} box!"
    )


def validate_stack(candidate: Item, support: Optional[Item]) -> None:
    """
    Raise if the category rule is violated.

    Raises:
        StackingRuleError: candidate is heavier than its support.
    """
    message = stack_error(candidate, support)
    if message is not None:
        raise StackingRuleError(message)


# ─────────────────────────────────────────────────────────────────────────────
# Height bound
# ─────────────────────────────────────────────────────────────────────────────

def exceeds_height(top: float, max_stack_height: Optional[float]) -> bool:
    """True if a box top at *top* is above the bound (None = unbounded)."""
    if max_stack_height is None:
        return False
    return top > max_stack_height + HEIGHT_EPS


def validate_height(top: float, max_stack_height: Optional[float], container_name: str = "container") -> None:
    """
    Raise if a box top at *top* exceeds the container height.

    Raises:
        HeightLimitError: top > max_stack_height.
    """
    if exceeds_height(top, max_stack_height):
        raise HeightLimitError(INVALID_PLACEMENT_MESSAGE.format(name=container_name))
