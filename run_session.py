"""
Session runner — drive the stacking engine through a simulated AR session.

Stands in for the AR shell: places the container at the origin, generates
boxes, "aims" each one (random anchors on the pallet deck, lane cycling in
the truck bed) until the preview turns valid, commits it, and optionally
removes a few unobstructed boxes at the end.

  1. Load configuration (YAML or built-in presets)
  2. For each requested mode:  place container → generate → aim → place
  3. Optionally remove K boxes (top-most first)
  4. Save a structured JSON result to output/

Usage (CLI):
    python run_session.py --items 30 --verbose
    python run_session.py --mode truck --items 20 --seed 7 --remove 3
    python run_session.py --config configs/default.yaml --mode both

Usage (Python):
    from run_session import run_session
    result = run_session(load_app_config(), ["pallet"], n_items=10, seed=1)
"""

import argparse
import json
import logging
import os
import random
import sys
import time
from dataclasses import replace
from datetime import datetime
from typing import List, Optional

# Put the project root on the path so all packages resolve cleanly
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from config import AppConfig, ConfigError, Vec3, ORIGIN, load_app_config
from engine.session import AppContext, Mode
from visualization.hud import hud_snapshot
from visualization.step_logger import StepLogger

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# ─────────────────────────────────────────────────────────────────────────────
# Core API
# ─────────────────────────────────────────────────────────────────────────────

def _random_anchor(ctx: AppContext, rng: random.Random, origin: Vec3) -> Vec3:
    """A hit-test position somewhere over the active container's deck."""
    cfg = ctx.active_engine.config.container
    return Vec3(
        origin.x + rng.uniform(-cfg.half_x, cfg.half_x),
        origin.y,
        origin.z + rng.uniform(-cfg.half_z, cfg.half_z),
    )


def fill_container(
    ctx: AppContext,
    n_items: int,
    rng: random.Random,
    step_logger: StepLogger,
    max_aims: int = 40,
    origin: Vec3 = ORIGIN,
) -> None:
    """
    Place the active container and try to stack *n_items* boxes in it.

    Each box is aimed up to *max_aims* times.  A box that never finds a
    legal spot is committed anyway so the rejection is recorded; the next
    generate discards it.
    """
    mode = ctx.mode.value
    engine = ctx.active_engine

    step_logger.log_step(ctx.primary_action(origin), mode)

    for _ in range(n_items):
        step_logger.log_step(ctx.generate_item(), mode)
        anchor: Optional[Vec3] = None

        for _ in range(max_aims):
            anchor = None if engine.container.is_grid else _random_anchor(ctx, rng, origin)
            ctx.tick(anchor)
            if engine.pending_valid:
                break
            if engine.container.is_grid:
                ctx.cycle_column()

        step_logger.log_step(ctx.primary_action(anchor), mode)


def remove_top_items(ctx: AppContext, count: int, step_logger: StepLogger) -> int:
    """
    Remove up to *count* boxes, newest first.

    Boxes that still carry something are refused by the engine; those
    refusals are logged like any other operation.  Returns the number
    actually removed.
    """
    mode = ctx.mode.value
    engine = ctx.active_engine
    # A box left in hand by a failed commit would block every removal.
    engine.deactivate()
    removed = 0
    for placement in reversed(engine.placements):
        if removed >= count:
            break
        ctx.aim(placement.item)
        result = ctx.remove(placement.item)
        step_logger.log_step(result, mode)
        if result.success:
            removed += 1
    return removed


def run_session(
    app_config: AppConfig,
    modes: List[str],
    n_items: int = 20,
    seed: Optional[int] = None,
    removals: int = 0,
    verbose: bool = False,
) -> dict:
    """
    Run a simulated session for each mode and return the result dict.

    Returns:
        dict with keys: session, modes, log.
    """
    if seed is not None and app_config.pallet.seed is None:
        # Box sizes follow the session seed unless the config pins its own.
        app_config = replace(
            app_config,
            pallet=replace(app_config.pallet, seed=seed),
            truck=replace(app_config.truck, seed=seed + 1),
        )

    rng = random.Random(seed)
    ctx = AppContext(app_config)
    step_logger = StepLogger(verbose=verbose)

    t_start = time.perf_counter()
    per_mode = {}
    for mode_name in modes:
        ctx.switch_mode(Mode(mode_name))
        if verbose:
            print(f"\n  Mode:       {ctx.mode.label}")
            print(f"  Container:  {ctx.active_engine.container_name}")
            print(f"  Boxes:      {n_items}")
            print("-" * 65)

        fill_container(ctx, n_items, rng, step_logger)
        removed = remove_top_items(ctx, removals, step_logger) if removals else 0

        engine = ctx.active_engine
        summary = engine.get_summary()
        if verbose:
            step_logger.print_summary(summary, title=f"{ctx.mode.label.upper()} SUMMARY")
        per_mode[mode_name] = {
            "summary": summary,
            "removed": removed,
            "hud": hud_snapshot(ctx),
            "placements": [p.to_dict() for p in engine.placements],
        }

    elapsed_ms = (time.perf_counter() - t_start) * 1000
    return {
        "session": {
            "timestamp": datetime.now().isoformat(timespec="seconds"),
            "seed": seed,
            "items_per_mode": n_items,
            "removals": removals,
            "elapsed_ms": round(elapsed_ms, 2),
            "config": app_config.to_dict(),
        },
        "modes": per_mode,
        "log": step_logger.get_records(),
    }


def save_result(result: dict, output_dir: str = "output") -> str:
    """Write *result* as JSON and return the file path."""
    os.makedirs(output_dir, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    path = os.path.join(output_dir, f"session_{stamp}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(result, f, indent=2, ensure_ascii=False)
    return path


# ─────────────────────────────────────────────────────────────────────────────
# CLI
# ─────────────────────────────────────────────────────────────────────────────

def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        description="Simulated AR box stacking session",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  python run_session.py --items 30 --verbose
  python run_session.py --mode truck --items 20 --seed 7 --remove 3
  python run_session.py --config configs/default.yaml --mode both
        """,
    )
    parser.add_argument("--config", default=None, help="YAML configuration file")
    parser.add_argument("--mode", choices=["pallet", "truck", "both"], default="pallet")
    parser.add_argument("--items", type=int, default=20, metavar="N",
                        help="Boxes to generate per mode (default: 20)")
    parser.add_argument("--seed", type=int, default=None,
                        help="Seed for aiming and (unless set in the config) box sizes")
    parser.add_argument("--remove", type=int, default=0, metavar="K",
                        help="Remove K boxes after filling (default: 0)")
    parser.add_argument("--output-dir", default="output")
    parser.add_argument("--no-save", action="store_true", help="Do not write the JSON result")
    parser.add_argument("--verbose", "-v", action="store_true")

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format=LOG_FORMAT,
    )

    # ── Config ───────────────────────────────────────────────────────────
    try:
        app_config = load_app_config(args.config)
    except ConfigError as e:
        print(f"  Config error: {e}", file=sys.stderr)
        return 2

    modes = ["pallet", "truck"] if args.mode == "both" else [args.mode]

    # ── Run ──────────────────────────────────────────────────────────────
    result = run_session(
        app_config, modes, n_items=args.items, seed=args.seed,
        removals=args.remove, verbose=args.verbose,
    )

    # ── Save ─────────────────────────────────────────────────────────────
    if not args.no_save:
        path = save_result(result, args.output_dir)
        print(f"  Results saved: {path}")

    # ── Summary ──────────────────────────────────────────────────────────
    for mode_name, data in result["modes"].items():
        s = data["summary"]
        print(f"  {mode_name:<7} placed: {s['item_count']}  |  "
              f"attempts: {s['place_attempts']} ({s['place_rejected']} rejected)  |  "
              f"volume: {s['placed_volume']:.3f} m³")
    return 0


if __name__ == "__main__":
    sys.exit(main())
