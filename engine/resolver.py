"""
Surface / support resolvers — where does a box come to rest?

Given a candidate item, the committed placements and a target (footprint
centre or lane index), a resolver finds the highest occupied surface
beneath the candidate and the resulting resting elevation.

Two strategies, selected by ContainerKind:

    OpenFootprintResolver — any (x, z) on the deck.  The support is the
                            overlapping placement with the highest top;
                            overlap is a strict footprint AABB test.
    FixedGridResolver     — predetermined lanes.  The support is the last
                            item in the lane; elevation is the floor plus
                            the heights of everything already in it.

Resolvers also answer the inverse question used before a removal:
``items_above(target, placements)`` lists the placements that depend on
*target* for support.

Resolvers are stateless and never mutate the placements they are given,
so repeated queries against the same placement set return the same result.

Usage:
    resolver = get_resolver(container_config)
    result = resolver.resolve_support(item, placements, Target(x=0.1, z=0.0))
    result.y, result.support
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np

from config import ContainerConfig, ContainerKind
from engine.items import Item, Placement


# ─────────────────────────────────────────────────────────────────────────────
# Query / result types
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class Target:
    """
    Where the candidate should be evaluated.

    Open-footprint containers read ``x``/``z`` (container-local footprint
    centre); fixed-grid containers read ``column``.
    """
    x: float = 0.0
    z: float = 0.0
    column: Optional[int] = None


@dataclass(frozen=True)
class SupportResult:
    """
    Outcome of a support query.

    Attributes:
        x, z:    Footprint centre the candidate would occupy.
        y:       Resting elevation of the candidate's centre.
        base:    Elevation of the surface it rests on.
        top:     Elevation of the candidate's top face.
        support: Placement directly beneath, or None for the floor.
        column:  Lane index (fixed grid only).
    """
    x: float
    z: float
    y: float
    base: float
    top: float
    support: Optional[Placement] = None
    column: Optional[int] = None

    @property
    def support_item(self) -> Optional[Item]:
        return self.support.item if self.support is not None else None


# ─────────────────────────────────────────────────────────────────────────────
# Base resolver
# ─────────────────────────────────────────────────────────────────────────────

class SupportResolver(ABC):
    """
    Abstract base for support resolution strategies.

    Attributes:
        kind:   Container kind this resolver serves.
        config: Container geometry (floor elevation, lanes).
    """

    kind: ContainerKind

    def __init__(self, config: ContainerConfig) -> None:
        self.config = config

    @abstractmethod
    def resolve_support(
        self, candidate: Item, placements: Sequence[Placement], target: Target,
    ) -> SupportResult:
        """Find the resting spot of *candidate* at *target*."""
        ...

    @abstractmethod
    def items_above(
        self, target: Placement, placements: Sequence[Placement],
    ) -> List[Placement]:
        """Placements that rest (directly or not) above *target*."""
        ...

    def _overlapping_above(
        self, target: Placement, placements: Sequence[Placement],
    ) -> List[Placement]:
        """Placements higher than *target* whose footprint overlaps it."""
        return [
            p for p in placements
            if p.item is not target.item
            and p.y > target.y
            and p.footprint_overlaps(target)
        ]

    def _result(
        self, candidate: Item, x: float, z: float, base: float,
        support: Optional[Placement], column: Optional[int] = None,
    ) -> SupportResult:
        y = base + candidate.half_height
        return SupportResult(
            x=x, z=z, y=y, base=base, top=y + candidate.half_height,
            support=support, column=column,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(container={self.config.name!r})"


# ─────────────────────────────────────────────────────────────────────────────
# Open footprint (pallet)
# ─────────────────────────────────────────────────────────────────────────────

class OpenFootprintResolver(SupportResolver):
    """Free placement: the highest overlapping top becomes the base."""

    kind = ContainerKind.OPEN_FOOTPRINT

    def resolve_support(
        self, candidate: Item, placements: Sequence[Placement], target: Target,
    ) -> SupportResult:
        x, z = target.x, target.z
        floor = self.config.floor_y
        if not placements:
            return self._result(candidate, x, z, floor, None)

        centers = np.array([(p.x, p.z) for p in placements], dtype=np.float64)
        halves = np.array(
            [(p.item.half_width, p.item.half_depth) for p in placements], dtype=np.float64,
        )
        tops = np.array([p.top for p in placements], dtype=np.float64)

        reach = halves + np.array([candidate.half_width, candidate.half_depth])
        overlapping = np.all(np.abs(centers - np.array([x, z])) < reach, axis=1)
        masked = np.where(overlapping, tops, -np.inf)

        # argmax keeps the first of equal tops, so ties resolve to the
        # earliest placement.
        idx = int(np.argmax(masked))
        if masked[idx] > floor:
            return self._result(candidate, x, z, float(masked[idx]), placements[idx])
        return self._result(candidate, x, z, floor, None)

    def items_above(
        self, target: Placement, placements: Sequence[Placement],
    ) -> List[Placement]:
        return self._overlapping_above(target, placements)


# ─────────────────────────────────────────────────────────────────────────────
# Fixed grid (truck bed)
# ─────────────────────────────────────────────────────────────────────────────

class FixedGridResolver(SupportResolver):
    """
    Lane stacking: each column is an independent bottom-to-top sequence.

    Removal is also blocked by higher boxes in neighbouring lanes whose
    footprint overlaps the target.
    """

    kind = ContainerKind.FIXED_GRID

    def lane(self, column: int, placements: Sequence[Placement]) -> List[Placement]:
        """Placements in *column*, bottom to top."""
        if column is None or not 0 <= column < self.config.lane_count:
            raise ValueError(
                f"Column {column} out of range (0..{self.config.lane_count - 1})"
            )
        return [p for p in placements if p.column == column]

    def resolve_support(
        self, candidate: Item, placements: Sequence[Placement], target: Target,
    ) -> SupportResult:
        column = target.column
        stack = self.lane(column, placements)
        cx, cz = self.config.column_centers()[column]
        base = self.config.floor_y + sum(p.item.height for p in stack)
        support = stack[-1] if stack else None
        return self._result(candidate, cx, cz, base, support, column=column)

    def items_above(
        self, target: Placement, placements: Sequence[Placement],
    ) -> List[Placement]:
        stack = self.lane(target.column, placements)
        rest: List[Placement] = []
        for i, p in enumerate(stack):
            if p.item is target.item:
                rest = stack[i + 1:]
                break
        # Wide boxes in neighbouring lanes can overhang the target too.
        neighbours = [
            p for p in self._overlapping_above(target, placements)
            if p.column != target.column
        ]
        return rest + neighbours


# ─────────────────────────────────────────────────────────────────────────────
# Registry
# ─────────────────────────────────────────────────────────────────────────────

RESOLVERS: Dict[ContainerKind, type] = {
    ContainerKind.OPEN_FOOTPRINT: OpenFootprintResolver,
    ContainerKind.FIXED_GRID: FixedGridResolver,
}


def get_resolver(config: ContainerConfig) -> SupportResolver:
    """Return a new resolver instance for *config*'s container kind."""
    if config.kind not in RESOLVERS:
        available = ", ".join(sorted(k.value for k in RESOLVERS))
        raise ValueError(f"Unknown container kind '{config.kind}'. Available: [{available}]")
    return RESOLVERS[config.kind](config)
