"""
Tests for configuration presets and YAML loading.

Run with:
    python -m pytest tests/test_config.py -v
"""

import os
import sys

import pytest

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import (
    PALLET,
    TRUCK_BED,
    ConfigError,
    ContainerConfig,
    ContainerKind,
    load_app_config,
)

ROOT = os.path.join(os.path.dirname(__file__), "..")


def write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text, encoding="utf-8")
    return str(path)


class TestPresets:
    def test_pallet(self):
        assert PALLET.kind is ContainerKind.OPEN_FOOTPRINT
        assert PALLET.max_stack_height is None
        assert PALLET.lane_count == 0
        assert PALLET.volume is None

    def test_truck_bed(self):
        assert TRUCK_BED.kind is ContainerKind.FIXED_GRID
        assert TRUCK_BED.lane_count == 8
        assert TRUCK_BED.width == pytest.approx(2.0)
        assert TRUCK_BED.volume == pytest.approx(2.0 * 1.2 * 0.77)

    def test_dict_roundtrip(self):
        assert ContainerConfig.from_dict(TRUCK_BED.to_dict()) == TRUCK_BED


class TestLoad:
    def test_defaults(self):
        cfg = load_app_config()
        assert cfg.pallet.container == PALLET
        assert cfg.truck.container == TRUCK_BED
        assert cfg.pallet.seed is None

    def test_shipped_default_file(self):
        cfg = load_app_config(os.path.join(ROOT, "configs", "default.yaml"))
        assert cfg.pallet.container == PALLET
        assert cfg.truck.container == TRUCK_BED

    def test_partial_override(self, tmp_path):
        cfg = load_app_config(write(tmp_path, "seed: 5\nitems:\n  max_dim: 0.3\n"))
        assert cfg.pallet.seed == 5
        assert cfg.truck.seed == 6
        assert cfg.pallet.items.max_dim == pytest.approx(0.3)
        assert cfg.truck.items.min_dim == pytest.approx(0.1)
        assert cfg.pallet.container == PALLET

    def test_custom_truck(self, tmp_path):
        path = write(tmp_path, (
            "truck:\n"
            "  name: van\n"
            "  kind: fixed_grid\n"
            "  half_x: 0.8\n"
            "  half_z: 0.5\n"
            "  max_stack_height: 1.0\n"
            "  grid_columns: 2\n"
            "  grid_rows: 1\n"
        ))
        truck = load_app_config(path).truck.container
        assert truck.name == "van"
        assert truck.lane_count == 2

    def test_empty_file(self, tmp_path):
        cfg = load_app_config(write(tmp_path, ""))
        assert cfg.pallet.container == PALLET

    @pytest.mark.parametrize("text", [
        "items: [1, 2\n",
        "- just\n- a list\n",
        "items:\n  min_dim: 0.6\n  max_dim: 0.5\n",
        "items:\n  volume_mid: 0.1\n  volume_high: 0.05\n",
        "truck:\n  name: t\n  kind: fixed_grid\n  half_x: 1\n  half_z: 1\n",
        "pallet:\n  name: p\n  kind: round\n  half_x: 1\n  half_z: 1\n",
        "pallet:\n  name: p\n  kind: open_footprint\n  half_x: -1\n  half_z: 1\n",
    ])
    def test_invalid(self, tmp_path, text):
        with pytest.raises(ConfigError):
            load_app_config(write(tmp_path, text))

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            load_app_config(str(tmp_path / "nope.yaml"))
