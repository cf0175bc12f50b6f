"""
Container — a placed pallet or truck bed.

A Container binds a ContainerConfig to the world anchor it was placed at
and to the SupportResolver for its kind.  It is created exactly once per
engine lifetime (between resets) and never moves.

Responsibilities:
    to_local(anchor)          — world position -> container-local frame
    clamp(item, x, z)         — keep an open-footprint candidate inside
    resolve_support(...)      — delegate to the kind's resolver
    validate_footprint(...)   — reject footprints that leave the deck
"""

from typing import List, Optional, Sequence, Tuple

from config import ContainerConfig, ContainerKind, Vec3
from engine.items import Item, Placement
from engine.resolver import SupportResolver, SupportResult, Target, get_resolver
from engine.stacking_rules import OUT_OF_BOUNDS_MESSAGE, OutOfBoundsError


class Container:
    """
    A container instance anchored in the world.

    The container frame is the world frame translated to ``origin``; no
    rotation is applied.
    """

    __slots__ = ("config", "origin", "resolver", "_column_centers")

    def __init__(self, config: ContainerConfig, origin: Vec3) -> None:
        self.config: ContainerConfig = config
        self.origin: Vec3 = Vec3(*origin)
        self.resolver: SupportResolver = get_resolver(config)
        self._column_centers: List[Tuple[float, float]] = config.column_centers()

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def kind(self) -> ContainerKind:
        return self.config.kind

    @property
    def name(self) -> str:
        return self.config.name

    @property
    def is_grid(self) -> bool:
        return self.config.kind is ContainerKind.FIXED_GRID

    @property
    def column_count(self) -> int:
        return len(self._column_centers)

    @property
    def column_centers(self) -> List[Tuple[float, float]]:
        return list(self._column_centers)

    # ── Geometry ─────────────────────────────────────────────────────────

    def to_local(self, anchor: Vec3) -> Vec3:
        """Convert a world-space anchor into container-local coordinates."""
        return Vec3(*anchor) - self.origin

    def clamp(self, item: Item, x: float, z: float) -> Tuple[float, float]:
        """
        Clamp a footprint centre so the whole footprint stays on the deck.

        An item wider than the deck is centred on that axis;
        validate_footprint then rejects it.
        """
        limit_x = self.config.half_x - item.half_width
        limit_z = self.config.half_z - item.half_depth
        cx = 0.0 if limit_x < 0 else max(-limit_x, min(limit_x, x))
        cz = 0.0 if limit_z < 0 else max(-limit_z, min(limit_z, z))
        return cx, cz

    def encloses(self, item: Item, x: float, z: float, eps: float = 1e-9) -> bool:
        """True if the footprint of *item* centred at (x, z) is on the deck."""
        return (
            abs(x) + item.half_width <= self.config.half_x + eps
            and abs(z) + item.half_depth <= self.config.half_z + eps
        )

    def validate_footprint(self, item: Item, x: float, z: float) -> None:
        """
        Raise if *item* centred at (x, z) would stick out of the container.

        Raises:
            OutOfBoundsError: footprint not enclosed by the usable bounds.
        """
        if not self.encloses(item, x, z):
            raise OutOfBoundsError(OUT_OF_BOUNDS_MESSAGE.format(name=self.name))

    # ── Support ──────────────────────────────────────────────────────────

    def resolve_support(
        self,
        candidate: Item,
        placements: Sequence[Placement],
        local: Optional[Vec3] = None,
        column: Optional[int] = None,
    ) -> SupportResult:
        """
        Resolve the resting spot of *candidate*.

        Open footprint: *local* is clamped onto the deck first.
        Fixed grid: *column* selects the lane; *local* is ignored.
        """
        if self.is_grid:
            return self.resolver.resolve_support(candidate, placements, Target(column=column))
        if local is None:
            raise ValueError("Open-footprint containers need a local position")
        x, z = self.clamp(candidate, local.x, local.z)
        return self.resolver.resolve_support(candidate, placements, Target(x=x, z=z))

    def items_above(self, target: Placement, placements: Sequence[Placement]) -> List[Placement]:
        return self.resolver.items_above(target, placements)

    def to_dict(self) -> dict:
        return {
            "config": self.config.to_dict(),
            "origin": list(self.origin),
        }

    def __repr__(self) -> str:
        return f"Container({self.name!r}, kind={self.kind.value}, origin={tuple(self.origin)})"
