"""
Placement engine — the authority over one container and its boxes.

Data flow:
  1. The hit-test collaborator calls  engine.place_container(anchor)  once.
  2. The user asks for a box:         engine.generate_item()  -> pending item
  3. Every frame:                     engine.preview(anchor)  (or the
     selected lane for fixed-grid containers) re-resolves the resting spot,
     re-checks the stacking rules and updates the pending item's highlight.
  4. On commit:                       engine.place()  re-validates from
     scratch and, if legal, appends a Placement to the committed list.
  5. Picking:                         engine.remove(item) / reposition(item)
     after checking that nothing rests on the item.

State machine:

    NO_CONTAINER --place_container--> READY <--place/remove--> PREVIEWING
         ^                              |     --generate_item-->    |
         +------------- reset ----------+---------------------------+

Every mutating operation returns an OperationResult (success flag + user
message) instead of raising; the committed list is either fully updated
or left untouched.

Usage:
    engine = PlacementEngine(EngineConfig(container=PALLET, seed=7))
    engine.place_container(Vec3(0, 0, -1))
    engine.generate_item()
    engine.preview(hit_position)         # per frame
    result = engine.place()
    print(result.message, engine.item_count)
"""

import logging
import random
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from config import EngineConfig, Vec3
from dataset import generator
from engine.container import Container
from engine.items import Highlight, Item, Placement
from engine.resolver import SupportResult
from engine.stacking_rules import (
    PlacementError,
    SequencingError,
    SupportDependencyError,
    validate_height,
    validate_stack,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Messages
# ---------------------------------------------------------------------------

MSG_NO_SURFACE = "No surface detected!"
MSG_PLACE_CONTAINER_FIRST = "Place the {name} first!"
MSG_GENERATE_FIRST = "Generate a box first!"
MSG_HANDS_FULL = "Place the box in hand before picking up another one!"
MSG_NOT_FOUND = "Box not found."
MSG_ITEMS_ABOVE = "Remove the item(s) above it first!"
MSG_NO_REPOSITION = "Boxes in the {name} cannot be repositioned."


# ---------------------------------------------------------------------------
# State / result types
# ---------------------------------------------------------------------------

class EngineState(str, Enum):
    NO_CONTAINER = "no_container"
    READY = "ready"
    PREVIEWING = "previewing"


@dataclass(frozen=True)
class OperationResult:
    """
    Outcome of one engine operation (success or rejection).

    Frozen so it can be handed to the presentation layer and kept in the
    history without risk of mutation.
    """
    operation: str
    success: bool
    message: str = ""
    item: Optional[Item] = None
    placement: Optional[Placement] = None
    count: int = 0
    column: Optional[int] = None
    step: int = -1

    def to_dict(self) -> dict:
        d = {
            "step": self.step,
            "operation": self.operation,
            "success": self.success,
            "message": self.message,
            "count": self.count,
        }
        if self.item is not None:
            d["item"] = self.item.to_dict()
        if self.placement is not None:
            d["placement"] = self.placement.to_dict()
        if self.column is not None:
            d["column"] = self.column
        return d


# ---------------------------------------------------------------------------
# PlacementEngine
# ---------------------------------------------------------------------------

class PlacementEngine:
    """
    Owns one container, its committed placements and at most one pending
    item.

    The container kind decides how the support is resolved: open-footprint
    containers follow the anchor the user aims at; fixed-grid containers
    stack into the selected lane.

    Public interface
    ~~~~~~~~~~~~~~~~
    place_container(anchor)   -> OperationResult
    generate_item(dims=None)  -> OperationResult   (.item is the new box)
    preview(anchor, column)   -> SupportResult | None   (per frame, no history)
    place(anchor=None)        -> OperationResult
    remove(item)              -> OperationResult
    reposition(item)          -> OperationResult   (open footprint only)
    cycle_column()            -> int | None        (fixed grid only)
    aim(item)                 -> bool              (removal-target highlight)
    deactivate()              -> None              (drop pending item)
    reset()                   -> OperationResult
    get_history() / get_summary()
    """

    def __init__(self, config: Optional[EngineConfig] = None,
                 rng: Optional[random.Random] = None) -> None:
        self._config = config or EngineConfig()
        self._rng = rng or random.Random(self._config.seed)
        self._container: Optional[Container] = None
        self._placements: List[Placement] = []
        self._pending: Optional[Item] = None
        self._pending_spot: Optional[SupportResult] = None
        self._pending_valid: bool = False
        self._last_anchor: Optional[Vec3] = None
        self._selected_column: int = 0
        self._aimed: Optional[Item] = None
        self._history: List[OperationResult] = []
        self._step_counter: int = 0
        self._next_item_id: int = 1

    # -- Public: state access ------------------------------------------------

    @property
    def config(self) -> EngineConfig:
        return self._config

    @property
    def container_name(self) -> str:
        return self._config.container.name

    @property
    def state(self) -> EngineState:
        if self._container is None:
            return EngineState.NO_CONTAINER
        if self._pending is None:
            return EngineState.READY
        return EngineState.PREVIEWING

    @property
    def container(self) -> Optional[Container]:
        return self._container

    @property
    def container_placed(self) -> bool:
        return self._container is not None

    @property
    def pending_item(self) -> Optional[Item]:
        return self._pending

    @property
    def pending_spot(self) -> Optional[SupportResult]:
        """Resting spot from the most recent preview of the pending item."""
        return self._pending_spot

    @property
    def pending_valid(self) -> bool:
        return self._pending_valid

    @property
    def placements(self) -> Tuple[Placement, ...]:
        """Committed placements, in commit order."""
        return tuple(self._placements)

    @property
    def item_count(self) -> int:
        return len(self._placements)

    @property
    def selected_column(self) -> int:
        return self._selected_column

    def placement_of(self, item: Item) -> Optional[Placement]:
        """The committed placement of *item*, or None."""
        for p in self._placements:
            if p.item is item:
                return p
        return None

    # -- Public: container ---------------------------------------------------

    def place_container(self, anchor: Optional[Vec3]) -> OperationResult:
        """
        Anchor the container in the world.

        Ignored (success=False, empty message, nothing recorded) when a
        container is already placed.
        """
        if self._container is not None:
            logger.debug("%s already placed; ignoring anchor %s", self.container_name, anchor)
            return OperationResult("place_container", False, count=self.item_count)
        if anchor is None:
            return self._fail("place_container", MSG_NO_SURFACE)

        self._container = Container(self._config.container, Vec3(*anchor))
        self._placements = []
        self._selected_column = 0
        logger.info("%s placed at %s", self.container_name, tuple(self._container.origin))
        return self._ok("place_container", f"{self.container_name.capitalize()} placed!")

    # -- Public: pending item ------------------------------------------------

    def generate_item(
        self, dimensions: Optional[Sequence[float]] = None,
    ) -> OperationResult:
        """
        Create a new pending box, replacing (and losing) any box in hand.

        Args:
            dimensions: Optional explicit (width, height, depth).  Random
                        dimensions from the item config otherwise.

        Returns:
            OperationResult whose ``item`` is the new box.
        """
        if self._container is None:
            return self._fail(
                "generate_item", MSG_PLACE_CONTAINER_FIRST.format(name=self.container_name),
            )

        try:
            if dimensions is not None:
                width, height, depth = dimensions
                item = Item(width, height, depth, id=self._next_item_id,
                            item_config=self._config.items)
            else:
                item = generator.random_item(self._rng, self._config.items, item_id=self._next_item_id)
        except ValueError as e:
            return self._fail("generate_item", f"Invalid box dimensions: {e}")
        self._next_item_id += 1

        self._discard_pending()
        self._clear_aim()
        self._pending = item

        # Show the new box right away where it would go.
        if self._container.is_grid:
            self._preview_grid(self._selected_column)
        elif self._last_anchor is not None:
            self._preview_open(self._last_anchor)

        logger.info("Generated %r", item)
        return self._ok(
            "generate_item",
            f"{item.category.display_name} box generated (Vol: {item.volume:.3f} m³). "
            f"Aim and press Place.",
            item=item,
        )

    def preview(
        self, anchor: Optional[Vec3] = None, column: Optional[int] = None,
    ) -> Optional[SupportResult]:
        """
        Re-evaluate the pending item (per frame).

        Open footprint: follows *anchor*; no anchor is a no-op.
        Fixed grid: evaluates *column* (which becomes the selected lane)
        or the currently selected lane.

        Only the pending item's position, validity and highlight change;
        committed state never does.  Not recorded in the history.

        Returns:
            The resolved spot, or None when there is nothing to preview.
        """
        if self._container is None or self._pending is None:
            return None
        if self._container.is_grid:
            if column is not None:
                self._selected_column = column % self._container.column_count
            return self._preview_grid(self._selected_column)
        if anchor is None:
            return None
        return self._preview_open(anchor)

    # -- Public: commit ------------------------------------------------------

    def place(self, anchor: Optional[Vec3] = None) -> OperationResult:
        """
        Commit the pending item.

        The resting spot and the rules are re-derived here; the previous
        preview is only used for its footprint position when no *anchor*
        is given (open footprint).
        """
        if self._container is None:
            return self._fail("place", MSG_PLACE_CONTAINER_FIRST.format(name=self.container_name))
        if self._pending is None:
            return self._fail("place", MSG_GENERATE_FIRST)

        item = self._pending
        if self._container.is_grid:
            spot, error = self._evaluate(item, column=self._selected_column)
        else:
            if anchor is not None:
                self._last_anchor = Vec3(*anchor)
                local = self._container.to_local(anchor)
            elif self._pending_spot is not None:
                local = Vec3(self._pending_spot.x, 0.0, self._pending_spot.z)
            else:
                return self._fail("place", MSG_NO_SURFACE, item=item)
            spot, error = self._evaluate(item, local=local)

        self._pending_spot = spot
        if error is not None:
            self._pending_valid = False
            item.highlight = Highlight.INVALID_PLACEMENT
            return self._fail("place", str(error), item=item, column=spot.column)

        placement = Placement(item=item, x=spot.x, y=spot.y, z=spot.z, column=spot.column)
        self._placements.append(placement)
        item.highlight = Highlight.NONE
        self._pending = None
        self._pending_spot = None
        self._pending_valid = False

        if self._container.is_grid:
            message = f"Box loaded! (Column {spot.column + 1}, Total: {self.item_count})"
        else:
            message = f"Box stacked! (Total: {self.item_count})"
        logger.info("Placed %r at (%.3f, %.3f, %.3f)", item, spot.x, spot.y, spot.z)
        return self._ok("place", message, item=item, placement=placement, column=spot.column)

    # -- Public: picking -----------------------------------------------------

    def remove(self, target: Item) -> OperationResult:
        """
        Take a committed item out of the container.

        Requires empty hands (no pending item) and nothing resting on
        *target*.
        """
        if self._container is None:
            return self._fail("remove", MSG_PLACE_CONTAINER_FIRST.format(name=self.container_name))
        if self._pending is not None:
            return self._fail("remove", MSG_HANDS_FULL, item=target)

        try:
            placement = self._removable(target)
        except PlacementError as e:
            return self._fail("remove", str(e), item=target)

        self._placements.remove(placement)
        target.highlight = Highlight.NONE
        if self._aimed is target:
            self._aimed = None
        logger.info("Removed %r", target)
        return self._ok(
            "remove",
            f"{target.category.display_name} box removed! (Total: {self.item_count})",
            item=target, placement=placement, column=placement.column,
        )

    def reposition(self, target: Item) -> OperationResult:
        """
        Lift a committed item back into the hand so it can be moved.

        Any pending item is discarded.  Open-footprint containers only.
        """
        if self._container is None:
            return self._fail(
                "reposition", MSG_PLACE_CONTAINER_FIRST.format(name=self.container_name),
            )
        if self._container.is_grid:
            return self._fail(
                "reposition", MSG_NO_REPOSITION.format(name=self.container_name), item=target,
            )

        try:
            placement = self._removable(target)
        except PlacementError as e:
            return self._fail("reposition", str(e), item=target)

        self._discard_pending()
        self._placements.remove(placement)
        if self._aimed is target:
            self._aimed = None
        target.highlight = Highlight.NONE
        self._pending = target
        self._preview_local(Vec3(placement.x, 0.0, placement.z))

        logger.info("Lifted %r for repositioning", target)
        return self._ok(
            "reposition",
            f"{target.category.display_name} box ready to reposition!",
            item=target, placement=placement,
        )

    def aim(self, target: Optional[Item]) -> bool:
        """
        Mark *target* as the removal target (picking ray hit).

        Clears the previous target.  Returns False, leaving nothing marked,
        when *target* is None, not committed, or an item is in hand.
        """
        self._clear_aim()
        if target is None or self._pending is not None:
            return False
        if self.placement_of(target) is None:
            return False
        target.highlight = Highlight.REMOVAL_TARGET
        self._aimed = target
        return True

    # -- Public: lanes -------------------------------------------------------

    def cycle_column(self) -> Optional[int]:
        """
        Select the next lane (wrapping) and re-preview the pending item.

        Returns the new lane index, or None when no fixed-grid container
        is placed.
        """
        if self._container is None or not self._container.is_grid:
            return None
        self._selected_column = (self._selected_column + 1) % self._container.column_count
        if self._pending is not None:
            self._preview_grid(self._selected_column)
        logger.debug("Selected column %d", self._selected_column)
        return self._selected_column

    # -- Public: lifecycle ---------------------------------------------------

    def deactivate(self) -> None:
        """Called when another engine becomes active: drop the box in hand."""
        self._discard_pending()
        self._clear_aim()

    def reset(self) -> OperationResult:
        """
        Destroy container, placements and pending item.

        The history starts over with the reset itself as its first entry;
        step numbers keep counting.
        """
        self._discard_pending()
        self._clear_aim()
        for p in self._placements:
            p.item.highlight = Highlight.NONE
        self._container = None
        self._placements = []
        self._selected_column = 0
        self._last_anchor = None
        self._history = []
        logger.info("%s reset", self.container_name)
        return self._ok("reset", f"{self.container_name.capitalize()} reset!")

    # -- Public: logs & summary ----------------------------------------------

    def get_history(self) -> List[OperationResult]:
        """Return a copy of the operation history."""
        return list(self._history)

    def get_latest(self) -> Optional[OperationResult]:
        return self._history[-1] if self._history else None

    def get_summary(self) -> dict:
        """
        Summary of the current container contents and commit statistics.

        Keys: container, kind, container_placed, item_count, by_category,
              placed_volume, max_top, fill_rate, place_attempts,
              place_rejected.
        """
        cfg = self._config.container
        by_category = {}
        for p in self._placements:
            key = p.item.category.value
            by_category[key] = by_category.get(key, 0) + 1
        placed_volume = sum(p.item.volume for p in self._placements)
        attempts = [r for r in self._history if r.operation == "place"]
        container_volume = cfg.volume

        return {
            "container": cfg.name,
            "kind": cfg.kind.value,
            "container_placed": self.container_placed,
            "item_count": self.item_count,
            "by_category": by_category,
            "placed_volume": round(placed_volume, 6),
            "max_top": round(max((p.top for p in self._placements), default=cfg.floor_y), 4),
            "fill_rate": (
                round(placed_volume / container_volume, 6) if container_volume else None
            ),
            "place_attempts": len(attempts),
            "place_rejected": sum(1 for r in attempts if not r.success),
        }

    # -- Private helpers -----------------------------------------------------

    def _evaluate(
        self, item: Item, local: Optional[Vec3] = None, column: Optional[int] = None,
    ) -> Tuple[SupportResult, Optional[PlacementError]]:
        """Resolve the resting spot and run every rule against it."""
        spot = self._container.resolve_support(item, self._placements, local=local, column=column)
        try:
            self._container.validate_footprint(item, spot.x, spot.z)
            validate_stack(item, spot.support_item)
            validate_height(spot.top, self._config.container.max_stack_height, self.container_name)
        except PlacementError as e:
            return spot, e
        return spot, None

    def _preview_open(self, anchor: Vec3) -> SupportResult:
        self._last_anchor = Vec3(*anchor)
        return self._preview_local(self._container.to_local(anchor))

    def _preview_grid(self, column: int) -> SupportResult:
        spot, error = self._evaluate(self._pending, column=column)
        return self._apply_preview(spot, error)

    def _preview_local(self, local: Vec3) -> SupportResult:
        spot, error = self._evaluate(self._pending, local=local)
        return self._apply_preview(spot, error)

    def _apply_preview(self, spot: SupportResult, error: Optional[PlacementError]) -> SupportResult:
        self._pending_spot = spot
        self._pending_valid = error is None
        self._pending.highlight = Highlight.NONE if error is None else Highlight.INVALID_PLACEMENT
        logger.debug(
            "Preview %r at (%.3f, %.3f, %.3f): %s",
            self._pending, spot.x, spot.y, spot.z, "ok" if error is None else error,
        )
        return spot

    def _removable(self, target: Item) -> Placement:
        """
        Placement of *target* if it can leave the container.

        Raises:
            SequencingError:        target is not committed here.
            SupportDependencyError: something rests on target.
        """
        placement = self.placement_of(target)
        if placement is None:
            raise SequencingError(MSG_NOT_FOUND)
        if self._container.items_above(placement, self._placements):
            raise SupportDependencyError(MSG_ITEMS_ABOVE)
        return placement

    def _discard_pending(self) -> None:
        if self._pending is not None:
            logger.debug("Discarding pending %r", self._pending)
            self._pending.highlight = Highlight.NONE
        self._pending = None
        self._pending_spot = None
        self._pending_valid = False

    def _clear_aim(self) -> None:
        if self._aimed is not None and self._aimed.highlight is Highlight.REMOVAL_TARGET:
            self._aimed.highlight = Highlight.NONE
        self._aimed = None

    def _ok(self, operation: str, message: str, **kwargs) -> OperationResult:
        return self._record(OperationResult(
            operation, True, message, count=self.item_count, step=self._step_counter, **kwargs,
        ))

    def _fail(self, operation: str, message: str, **kwargs) -> OperationResult:
        logger.info("%s rejected: %s", operation, message)
        return self._record(OperationResult(
            operation, False, message, count=self.item_count, step=self._step_counter, **kwargs,
        ))

    def _record(self, result: OperationResult) -> OperationResult:
        self._history.append(result)
        self._step_counter += 1
        return result

    def __repr__(self) -> str:
        return (
            f"PlacementEngine(container={self.container_name!r}, "
            f"state={self.state.value}, items={self.item_count})"
        )
