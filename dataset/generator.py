"""
Item generator — random boxes with each side drawn from U[min_dim, max_dim].

Generators:
    random_dimension — one side length in the configured closed range
    random_item      — one Item (used by PlacementEngine.generate_item)
    generate_items   — a reproducible batch of Items

Usage:
    from dataset.generator import generate_items
    items = generate_items(50, seed=42)
"""

import random
from typing import List, Optional

from config import ItemConfig
from engine.items import Item


def random_dimension(rng: random.Random, item_config: ItemConfig) -> float:
    """One side length in [min_dim, max_dim] (m)."""
    return rng.uniform(item_config.min_dim, item_config.max_dim)


def random_item(
    rng: random.Random,
    item_config: Optional[ItemConfig] = None,
    item_id: int = 0,
) -> Item:
    """
    Build an Item whose width, height and depth are drawn independently.

    Args:
        rng:         Random source (engine-owned, so runs are reproducible).
        item_config: Dimension range and volume thresholds.
        item_id:     Display id for the new item.
    """
    cfg = item_config or ItemConfig()
    return Item(
        width=random_dimension(rng, cfg),
        height=random_dimension(rng, cfg),
        depth=random_dimension(rng, cfg),
        id=item_id,
        item_config=cfg,
    )


def generate_items(
    n: int,
    item_config: Optional[ItemConfig] = None,
    seed: Optional[int] = None,
) -> List[Item]:
    """
    Generate *n* random items with ids 1..n.

    Args:
        n:           Number of items.
        item_config: Dimension range and volume thresholds.
        seed:        Random seed for reproducibility.
    """
    rng = random.Random(seed)
    return [random_item(rng, item_config, item_id=i + 1) for i in range(n)]
