"""
Tests for the AppContext mode controller.

Run with:
    python -m pytest tests/test_session.py -v
"""

import os
import sys

import pytest

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import Vec3
from engine.placement_engine import EngineState
from engine.session import (
    STATUS_AIM_BOX,
    STATUS_AIM_SURFACE,
    STATUS_GENERATE,
    STATUS_INVALID,
    AppContext,
    Mode,
)

HIT = Vec3(0.0, 0.0, -1.0)


@pytest.fixture
def ctx():
    return AppContext()


class TestMode:
    def test_labels(self):
        assert Mode.PALLET.label == "Pallet loading"
        assert Mode.TRUCK.label == "Truck picking"

    def test_other(self):
        assert Mode.PALLET.other is Mode.TRUCK
        assert Mode.TRUCK.other is Mode.PALLET


class TestTick:
    def test_before_container(self, ctx):
        assert ctx.tick(None) == STATUS_AIM_SURFACE
        assert ctx.tick(HIT) == "Surface detected! Press Place to put down the pallet."

    def test_after_container(self, ctx):
        ctx.primary_action(HIT)
        assert ctx.tick(HIT) == STATUS_GENERATE

    def test_previews_pending_item(self, ctx):
        ctx.primary_action(HIT)
        ctx.generate_item((0.2, 0.2, 0.2))
        assert ctx.tick(HIT) == STATUS_AIM_BOX
        assert ctx.active_engine.pending_spot is not None

    def test_reports_invalid_spot(self, ctx):
        ctx.primary_action(HIT)
        ctx.generate_item((0.2, 0.2, 0.2))
        ctx.primary_action(HIT)
        ctx.generate_item((0.4, 0.4, 0.4))
        assert ctx.tick(HIT) == STATUS_INVALID


class TestPrimaryAction:
    def test_places_container_then_commits(self, ctx):
        first = ctx.primary_action(HIT)
        assert first.operation == "place_container"
        assert first.success

        ctx.generate_item((0.2, 0.2, 0.2))
        second = ctx.primary_action(HIT)
        assert second.operation == "place"
        assert second.success
        assert ctx.active_engine.item_count == 1


class TestModeSwitching:
    def test_engines_are_independent(self, ctx):
        ctx.primary_action(HIT)
        ctx.generate_item((0.2, 0.2, 0.2))
        ctx.primary_action(HIT)

        assert ctx.switch_mode() is Mode.TRUCK
        assert ctx.active_engine is ctx.engine(Mode.TRUCK)
        assert not ctx.container_placed
        assert ctx.engine(Mode.PALLET).item_count == 1

    def test_switch_drops_pending(self, ctx):
        ctx.primary_action(HIT)
        ctx.generate_item((0.2, 0.2, 0.2))
        ctx.switch_mode(Mode.TRUCK)
        pallet = ctx.engine(Mode.PALLET)
        assert pallet.pending_item is None
        assert pallet.state is EngineState.READY

    def test_switch_to_same_mode_keeps_pending(self, ctx):
        ctx.primary_action(HIT)
        ctx.generate_item((0.2, 0.2, 0.2))
        ctx.switch_mode(Mode.PALLET)
        assert ctx.active_engine.pending_item is not None

    def test_cycle_column_in_truck_mode(self, ctx):
        ctx.switch_mode(Mode.TRUCK)
        ctx.primary_action(HIT)
        assert ctx.cycle_column() == 1
        ctx.switch_mode(Mode.PALLET)
        assert ctx.cycle_column() is None

    def test_reset_all(self, ctx):
        ctx.primary_action(HIT)
        ctx.switch_mode(Mode.TRUCK)
        ctx.primary_action(HIT)
        ctx.reset_all()
        assert not ctx.engine(Mode.PALLET).container_placed
        assert not ctx.engine(Mode.TRUCK).container_placed

    def test_summary(self, ctx):
        s = ctx.get_summary()
        assert s["active_mode"] == "pallet"
        assert set(s["engines"]) == {"pallet", "truck"}
