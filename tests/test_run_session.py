"""
Integration tests for the simulated session runner.

Run with:
    python -m pytest tests/test_run_session.py -v
"""

import json
import os
import sys

# Ensure the project root is on the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from config import AppConfig
from run_session import main, run_session


class TestRunSession:
    def test_both_modes(self):
        result = run_session(AppConfig(), ["pallet", "truck"], n_items=6, seed=4, removals=2)
        assert set(result["modes"]) == {"pallet", "truck"}
        for data in result["modes"].values():
            summary = data["summary"]
            assert summary["container_placed"]
            assert summary["item_count"] == len(data["placements"])
            assert summary["item_count"] <= 6
            assert data["removed"] <= 2
        assert result["log"]
        assert result["session"]["seed"] == 4

    def test_same_seed_same_session(self):
        a = run_session(AppConfig(), ["pallet"], n_items=5, seed=11)
        b = run_session(AppConfig(), ["pallet"], n_items=5, seed=11)
        assert [r["message"] for r in a["log"]] == [r["message"] for r in b["log"]]

    def test_truck_stays_below_bound(self):
        result = run_session(AppConfig(), ["truck"], n_items=30, seed=2)
        for p in result["modes"]["truck"]["placements"]:
            assert p["top"] <= 0.8 + 1e-6


class TestCli:
    def test_writes_json(self, tmp_path):
        code = main(["--mode", "both", "--items", "3", "--seed", "1",
                     "--output-dir", str(tmp_path)])
        assert code == 0
        files = list(tmp_path.glob("session_*.json"))
        assert len(files) == 1
        data = json.loads(files[0].read_text(encoding="utf-8"))
        assert set(data["modes"]) == {"pallet", "truck"}

    def test_no_save(self, tmp_path):
        assert main(["--items", "2", "--no-save", "--output-dir", str(tmp_path)]) == 0
        assert not list(tmp_path.iterdir())

    def test_bad_config(self, tmp_path):
        bad = tmp_path / "bad.yaml"
        bad.write_text("items: [1, 2\n", encoding="utf-8")
        assert main(["--config", str(bad), "--no-save"]) == 2
