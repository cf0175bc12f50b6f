"""
engine — container packing & stacking engine.

  **Items**:
    Category            — HEAVY / MEDIUM / LIGHT with stacking weight
    classify            — (width, height, depth) -> (volume, category)
    Item, Placement     — box data and committed resting positions
    Highlight           — presentation hint carried by an item

  **Rules**:
    can_stack, stack_error, validate_stack, validate_height
    PlacementError and subclasses

  **Support resolution**:
    SupportResolver      — ABC
    OpenFootprintResolver, FixedGridResolver
    Container            — placed container + its resolver

  **Engine & session**:
    PlacementEngine      — preview / place / remove / reposition
    OperationResult      — outcome of one operation
    AppContext, Mode     — pallet/truck mode controller

Public API:
    from engine import PlacementEngine, AppContext, Mode
    from engine import Item, Category, classify, can_stack
"""

from engine.classifier import Category, classify, classify_volume
from engine.items import Highlight, Item, Placement
from engine.stacking_rules import (
    can_stack,
    stack_error,
    validate_stack,
    validate_height,
    PlacementError,
    SequencingError,
    StackingRuleError,
    OutOfBoundsError,
    HeightLimitError,
    SupportDependencyError,
)
from engine.resolver import (
    SupportResolver,
    OpenFootprintResolver,
    FixedGridResolver,
    SupportResult,
    Target,
    get_resolver,
)
from engine.container import Container
from engine.placement_engine import EngineState, OperationResult, PlacementEngine
from engine.session import AppContext, Mode

__all__ = [
    # Items
    "Category", "classify", "classify_volume",
    "Highlight", "Item", "Placement",
    # Rules
    "can_stack", "stack_error", "validate_stack", "validate_height",
    "PlacementError", "SequencingError", "StackingRuleError", "OutOfBoundsError",
    "HeightLimitError", "SupportDependencyError",
    # Support resolution
    "SupportResolver", "OpenFootprintResolver", "FixedGridResolver",
    "SupportResult", "Target", "get_resolver", "Container",
    # Engine & session
    "EngineState", "OperationResult", "PlacementEngine",
    "AppContext", "Mode",
]
