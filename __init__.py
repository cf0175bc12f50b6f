"""
ar-box-stacking — placement engine for stacking boxes in AR.

Public API:
    from config import Vec3, ContainerConfig, EngineConfig, AppConfig, load_app_config
    from engine import PlacementEngine, AppContext, Mode, Item, Category
    from dataset.generator import random_item, generate_items
    from visualization.hud import hud_snapshot
    from visualization.step_logger import StepLogger
"""
