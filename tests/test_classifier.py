"""
Unit tests for the item classifier and the Item / Placement data types.

Run with:
    python -m pytest tests/test_classifier.py -v

Tests cover:
- Category thresholds, including values exactly on a boundary
- Weight ordering and display colours
- Item validation (non-positive / non-finite dimensions)
- Read-only dimensions, identity semantics, mutable highlight
- Strict footprint overlap between placements
"""

import math
import os
import sys

import pytest

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import ItemConfig, VOLUME_HIGH, VOLUME_MID
from engine.classifier import Category, classify, classify_volume
from engine.items import Highlight, Item, Placement


# ---------------------------------------------------------------------------
# 1. Volume thresholds
# ---------------------------------------------------------------------------

class TestClassifyVolume:
    @pytest.mark.parametrize("volume, expected", [
        (0.125, Category.HEAVY),
        (0.0501, Category.HEAVY),
        (VOLUME_HIGH, Category.MEDIUM),   # boundary is inclusive for Medium
        (0.02, Category.MEDIUM),
        (VOLUME_MID, Category.LIGHT),     # boundary is inclusive for Light
        (0.001, Category.LIGHT),
    ])
    def test_thresholds(self, volume, expected):
        assert classify_volume(volume) is expected

    def test_custom_thresholds(self):
        assert classify_volume(0.02, volume_mid=0.03, volume_high=0.1) is Category.LIGHT
        assert classify_volume(0.2, volume_mid=0.03, volume_high=0.1) is Category.HEAVY

    def test_classify_returns_volume_and_category(self):
        volume, category = classify(0.3, 0.2, 0.3)
        assert volume == pytest.approx(0.018)
        assert category is Category.MEDIUM

    def test_weight_never_decreases_with_volume(self):
        volumes = [i * 0.0005 for i in range(1, 300)]
        weights = [classify_volume(v).weight for v in volumes]
        assert weights == sorted(weights)
        assert {weights[0], weights[-1]} == {1, 3}

    def test_classify_is_deterministic(self):
        assert classify(0.4, 0.4, 0.4) == classify(0.4, 0.4, 0.4)


# ---------------------------------------------------------------------------
# 2. Category properties
# ---------------------------------------------------------------------------

class TestCategory:
    def test_weight_order(self):
        assert Category.HEAVY.weight > Category.MEDIUM.weight > Category.LIGHT.weight

    def test_colors(self):
        assert Category.HEAVY.color == "#e74c3c"
        assert Category.MEDIUM.color == "#2ecc71"
        assert Category.LIGHT.color == "#3498db"

    def test_display_name(self):
        assert Category.HEAVY.display_name == "Heavy"


# ---------------------------------------------------------------------------
# 3. Item
# ---------------------------------------------------------------------------

class TestItem:
    def test_derived_fields(self):
        item = Item(0.2, 0.2, 0.2)
        assert item.volume == pytest.approx(0.008)
        assert item.category is Category.LIGHT
        assert item.highlight is Highlight.NONE
        assert item.half_height == pytest.approx(0.1)

    @pytest.mark.parametrize("dims", [
        (0.0, 0.2, 0.2),
        (0.2, -0.1, 0.2),
        (0.2, 0.2, math.nan),
        (0.2, math.inf, 0.2),
    ])
    def test_rejects_invalid_dimensions(self, dims):
        with pytest.raises(ValueError):
            Item(*dims)

    def test_dimensions_are_read_only(self):
        item = Item(0.2, 0.2, 0.2)
        with pytest.raises(AttributeError):
            item.width = 0.4
        with pytest.raises(AttributeError):
            item.category = Category.HEAVY

    def test_highlight_is_mutable(self):
        item = Item(0.2, 0.2, 0.2)
        item.highlight = Highlight.INVALID_PLACEMENT
        assert item.highlight is Highlight.INVALID_PLACEMENT

    def test_identity_semantics(self):
        a = Item(0.2, 0.2, 0.2)
        b = Item(0.2, 0.2, 0.2)
        assert a != b
        assert a == a

    def test_item_config_thresholds_apply(self):
        cfg = ItemConfig(volume_mid=0.001, volume_high=0.005)
        assert Item(0.2, 0.2, 0.2, item_config=cfg).category is Category.HEAVY

    def test_to_dict(self):
        d = Item(0.3, 0.2, 0.3, id=4).to_dict()
        assert d["id"] == 4
        assert d["category"] == "medium"
        assert d["highlight"] == "none"


# ---------------------------------------------------------------------------
# 4. Placement footprint
# ---------------------------------------------------------------------------

class TestPlacement:
    def test_top_and_bottom(self):
        p = Placement(Item(0.2, 0.4, 0.2), x=0.0, y=0.25, z=0.0)
        assert p.bottom == pytest.approx(0.05)
        assert p.top == pytest.approx(0.45)

    def test_overlap(self):
        a = Placement(Item(0.4, 0.2, 0.4), x=0.0, y=0.1, z=0.0)
        b = Placement(Item(0.2, 0.2, 0.2), x=0.25, y=0.1, z=0.0)
        assert a.footprint_overlaps(b)
        assert b.footprint_overlaps(a)

    def test_touching_edges_do_not_overlap(self):
        a = Placement(Item(0.25, 0.25, 0.25), x=-0.125, y=0.0, z=0.0)
        b = Placement(Item(0.25, 0.25, 0.25), x=0.125, y=0.0, z=0.0)
        assert not a.footprint_overlaps(b)

    def test_apart_on_one_axis_is_enough(self):
        a = Placement(Item(0.2, 0.2, 0.2), x=0.0, y=0.1, z=0.0)
        b = Placement(Item(0.2, 0.2, 0.2), x=0.05, y=0.1, z=0.5)
        assert not a.footprint_overlaps(b)
