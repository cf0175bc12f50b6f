"""
Step logger — console output and structured recording of each operation.

Usage:
    logger = StepLogger(verbose=True)
    logger.log_step(operation_result, mode="pallet")
    logger.print_summary(engine.get_summary())
"""

from typing import List, Optional

from engine.placement_engine import OperationResult


class StepLogger:
    """Logs engine operations to console and stores them for JSON output."""

    def __init__(self, verbose: bool = False) -> None:
        self.verbose = verbose
        self._records: List[dict] = []

    def log_step(self, result: OperationResult, mode: Optional[str] = None) -> None:
        """Log a single operation (success or rejection)."""
        record = result.to_dict()
        if mode is not None:
            record["mode"] = mode
        self._records.append(record)

        if not self.verbose:
            return

        prefix = f"  [{mode}]" if mode else " "
        item = result.item
        item_str = (
            f"Box #{item.id:3d} ({item.width:.2f}x{item.height:.2f}x{item.depth:.2f}, "
            f"{item.category.display_name:<6}) "
            if item is not None else ""
        )

        if result.success and result.placement is not None and result.operation == "place":
            p = result.placement
            print(
                f"{prefix} Step {result.step:3d}: {result.operation:<15} "
                f"{item_str}-> ({p.x:+.2f}, {p.y:.2f}, {p.z:+.2f})  "
                f"count={result.count}  OK"
            )
        elif result.success:
            print(f"{prefix} Step {result.step:3d}: {result.operation:<15} {item_str}OK  {result.message}")
        else:
            print(
                f"{prefix} Step {result.step:3d}: {result.operation:<15} "
                f"{item_str}-> REJECTED: {result.message}"
            )

    def print_summary(self, summary: dict, title: str = "SESSION SUMMARY") -> None:
        """Print a formatted engine summary block."""
        print("\n" + "=" * 65)
        print(f"  {title}")
        print("=" * 65)
        print(f"  Container:        {summary['container']} ({summary['kind']})")
        print(f"  Boxes placed:     {summary['item_count']}")
        for category, n in sorted(summary["by_category"].items()):
            print(f"    {category:<8}        {n}")
        print(f"  Placed volume:    {summary['placed_volume']:.3f} m³")
        print(f"  Highest top:      {summary['max_top']:.3f} m")
        if summary.get("fill_rate") is not None:
            print(f"  Fill rate:        {summary['fill_rate']:.1%}")
        print(f"  Place attempts:   {summary['place_attempts']} "
              f"({summary['place_rejected']} rejected)")
        print("=" * 65 + "\n")

    def get_records(self) -> List[dict]:
        """All logged records as dicts (for JSON output)."""
        return list(self._records)
