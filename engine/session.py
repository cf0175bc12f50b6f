"""
AppContext — the mode controller that sits between the AR shell and the
two placement engines.

The AR shell owns the frame loop and the hit-test source; it calls into
the context once per frame (``tick``) and once per button press.  The
context owns:

  - one PlacementEngine per Mode (pallet and truck bed), never sharing state
  - which mode is active (only the active engine receives previews)
  - the button semantics of the AR shell:

        primary_action(anchor)  — place the container if there is none,
                                  otherwise commit the box in hand
        generate_item()         — new box (needs a container)
        switch_mode()           — other engine; the box in hand is dropped
        reset_all()             — both engines back to NO_CONTAINER

Usage:
    ctx = AppContext(load_app_config("configs/default.yaml"))
    ctx.primary_action(hit)          # places the pallet
    ctx.generate_item()
    while running:
        status = ctx.tick(hit_or_none)
    ctx.primary_action(hit)          # commits the box
"""

import logging
from enum import Enum
from typing import Dict, Optional

from config import AppConfig, Vec3
from engine.items import Item
from engine.placement_engine import OperationResult, PlacementEngine

logger = logging.getLogger(__name__)


class Mode(str, Enum):
    PALLET = "pallet"
    TRUCK = "truck"

    @property
    def label(self) -> str:
        return "Pallet loading" if self is Mode.PALLET else "Truck picking"

    @property
    def other(self) -> "Mode":
        return Mode.TRUCK if self is Mode.PALLET else Mode.PALLET


STATUS_AIM_SURFACE = "Point at a flat surface..."
STATUS_SURFACE_FOUND = "Surface detected! Press Place to put down the {name}."
STATUS_GENERATE = "Generate a new box."
STATUS_AIM_BOX = "Aim where you want the box and press Place."
STATUS_INVALID = "This spot breaks a stacking rule."


class AppContext:
    """
    Explicit application state: both engines plus the active mode.

    Replaces ambient module-level globals; pass it to (or let it be owned
    by) whatever drives the frame loop.
    """

    def __init__(self, config: Optional[AppConfig] = None, mode: Mode = Mode.PALLET) -> None:
        self._config = config or AppConfig()
        self._engines: Dict[Mode, PlacementEngine] = {
            Mode.PALLET: PlacementEngine(self._config.pallet),
            Mode.TRUCK: PlacementEngine(self._config.truck),
        }
        self._mode = Mode(mode)

    # ── Properties ────────────────────────────────────────────────────────

    @property
    def config(self) -> AppConfig:
        return self._config

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def active_engine(self) -> PlacementEngine:
        return self._engines[self._mode]

    def engine(self, mode: Mode) -> PlacementEngine:
        return self._engines[Mode(mode)]

    @property
    def container_placed(self) -> bool:
        return self.active_engine.container_placed

    # ── Frame loop ────────────────────────────────────────────────────────

    def tick(self, anchor: Optional[Vec3]) -> str:
        """
        Per-frame update from the hit-test collaborator.

        Forwards *anchor* to the active engine's preview when a box is in
        hand and returns the status line to show.  ``None`` means nothing
        was detected this frame.
        """
        engine = self.active_engine
        if not engine.container_placed:
            if anchor is None:
                return STATUS_AIM_SURFACE
            return STATUS_SURFACE_FOUND.format(name=engine.container_name)

        if engine.pending_item is None:
            return STATUS_GENERATE

        engine.preview(anchor)
        if engine.pending_spot is not None and not engine.pending_valid:
            return STATUS_INVALID
        return STATUS_AIM_BOX

    # ── Buttons ───────────────────────────────────────────────────────────

    def primary_action(self, anchor: Optional[Vec3]) -> OperationResult:
        """Place the container first; afterwards commit the box in hand."""
        engine = self.active_engine
        if not engine.container_placed:
            return engine.place_container(anchor)
        return engine.place(anchor)

    def generate_item(self, dimensions=None) -> OperationResult:
        return self.active_engine.generate_item(dimensions)

    def cycle_column(self) -> Optional[int]:
        return self.active_engine.cycle_column()

    def aim(self, item: Optional[Item]) -> bool:
        return self.active_engine.aim(item)

    def remove(self, item: Item) -> OperationResult:
        return self.active_engine.remove(item)

    def reposition(self, item: Item) -> OperationResult:
        return self.active_engine.reposition(item)

    def switch_mode(self, mode: Optional[Mode] = None) -> Mode:
        """
        Activate *mode* (default: the other one).

        The engine being left drops its box in hand.  Its container and
        placements stay as they are.
        """
        target = self._mode.other if mode is None else Mode(mode)
        if target is self._mode:
            return self._mode
        self.active_engine.deactivate()
        self._mode = target
        logger.info("Switched to %s mode", target.value)
        return self._mode

    def reset_all(self) -> None:
        """Reset both engines."""
        for engine in self._engines.values():
            engine.reset()

    def get_summary(self) -> dict:
        return {
            "active_mode": self._mode.value,
            "engines": {m.value: e.get_summary() for m, e in self._engines.items()},
        }

    def __repr__(self) -> str:
        return f"AppContext(mode={self._mode.value}, engines={list(self._engines.values())})"
