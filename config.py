"""
Central configuration and data models for the box stacking engine.

All modules import their configuration types from here to ensure
consistency across the engine, dataset, session and visualization layers.

Classes:
    Vec3            — 3D position delivered by the hit-test collaborator
    ContainerKind   — open footprint (pallet) or fixed grid (truck bed)
    ItemConfig      — dimension range and volume thresholds for new boxes
    ContainerConfig — container geometry, floor elevation, height bound
    EngineConfig    — everything one PlacementEngine needs
    AppConfig       — one EngineConfig per mode (pallet + truck)

Loading:
    load_app_config(path)  — parse a YAML file, validate it, return AppConfig
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, NamedTuple, Optional, Tuple

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator


# ─────────────────────────────────────────────────────────────────────────────
# Positions
# ─────────────────────────────────────────────────────────────────────────────

class Vec3(NamedTuple):
    """A point in metres. y is the vertical axis."""
    x: float
    y: float
    z: float

    def __sub__(self, other: "Vec3") -> "Vec3":
        return Vec3(self.x - other.x, self.y - other.y, self.z - other.z)


ORIGIN = Vec3(0.0, 0.0, 0.0)


# ─────────────────────────────────────────────────────────────────────────────
# Item generation
# ─────────────────────────────────────────────────────────────────────────────

# Dimension range (m). With 0.1–0.5 m per side, volume spans ~0.001–0.125 m³.
DIM_MIN = 0.1
DIM_MAX = 0.5

# Volume thresholds (m³).
VOLUME_HIGH = 0.05   # above -> Heavy
VOLUME_MID = 0.015   # above (and <= VOLUME_HIGH) -> Medium, else Light


@dataclass(frozen=True)
class ItemConfig:
    """
    Random box generation parameters.

    Attributes:
        min_dim:     Smallest allowed side (m), inclusive.
        max_dim:     Largest allowed side (m), inclusive.
        volume_mid:  Medium/Light boundary (m³).
        volume_high: Heavy/Medium boundary (m³).
    """
    min_dim: float = DIM_MIN
    max_dim: float = DIM_MAX
    volume_mid: float = VOLUME_MID
    volume_high: float = VOLUME_HIGH

    def to_dict(self) -> dict:
        return {"min_dim": self.min_dim, "max_dim": self.max_dim,
                "volume_mid": self.volume_mid, "volume_high": self.volume_high}

    @classmethod
    def from_dict(cls, d: dict) -> "ItemConfig":
        return cls(**d)


# ─────────────────────────────────────────────────────────────────────────────
# Containers
# ─────────────────────────────────────────────────────────────────────────────

class ContainerKind(str, Enum):
    """How a container decides where a box may rest."""
    OPEN_FOOTPRINT = "open_footprint"
    FIXED_GRID = "fixed_grid"


@dataclass(frozen=True)
class ContainerConfig:
    """
    Static geometry of a container, in its own local frame.

    The local origin sits at the centre of the container's base; x and z
    span the footprint and y grows upwards.

    Attributes:
        name:             Display name used in messages ("pallet").
        kind:             Support-resolution strategy.
        half_x:           Usable half-extent along x (m).
        half_z:           Usable half-extent along z (m).
        floor_y:          Elevation of the surface boxes rest on (m).
        max_stack_height: Upper bound for any box top (m), or None.
        grid_columns:     Lanes along x (fixed grid only).
        grid_rows:        Lanes along z (fixed grid only).
    """
    name: str = "pallet"
    kind: ContainerKind = ContainerKind.OPEN_FOOTPRINT
    half_x: float = 0.6
    half_z: float = 0.5
    floor_y: float = 0.05
    max_stack_height: Optional[float] = None
    grid_columns: int = 0
    grid_rows: int = 0

    @property
    def width(self) -> float:
        return self.half_x * 2

    @property
    def depth(self) -> float:
        return self.half_z * 2

    @property
    def lane_count(self) -> int:
        """Number of stacking lanes (0 for open-footprint containers)."""
        if self.kind is not ContainerKind.FIXED_GRID:
            return 0
        return self.grid_columns * self.grid_rows

    @property
    def volume(self) -> Optional[float]:
        """Usable volume above the floor, or None without a height bound."""
        if self.max_stack_height is None:
            return None
        return self.width * self.depth * (self.max_stack_height - self.floor_y)

    def column_centers(self) -> List[Tuple[float, float]]:
        """
        Lane centres (x, z), row-major.

        Lanes are spaced evenly with a gap of one spacing to each wall:
        spacing = width / (columns + 1), first centre at -width/2 + spacing.
        """
        if self.kind is not ContainerKind.FIXED_GRID:
            return []
        spacing_x = self.width / (self.grid_columns + 1)
        spacing_z = self.depth / (self.grid_rows + 1)
        offset_x = -self.half_x + spacing_x
        offset_z = -self.half_z + spacing_z
        return [
            (offset_x + c * spacing_x, offset_z + r * spacing_z)
            for r in range(self.grid_rows)
            for c in range(self.grid_columns)
        ]

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "kind": self.kind.value,
            "half_x": self.half_x,
            "half_z": self.half_z,
            "floor_y": self.floor_y,
            "max_stack_height": self.max_stack_height,
            "grid_columns": self.grid_columns,
            "grid_rows": self.grid_rows,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "ContainerConfig":
        d = dict(d)
        d["kind"] = ContainerKind(d.get("kind", ContainerKind.OPEN_FOOTPRINT))
        return cls(**d)


# Wooden pallet: free placement anywhere on a 1.2 x 1.0 m deck.
PALLET = ContainerConfig(
    name="pallet",
    kind=ContainerKind.OPEN_FOOTPRINT,
    half_x=0.6,
    half_z=0.5,
    floor_y=0.05,
)

# Truck bed: 2.0 x 1.2 m floor, 0.8 m walls, 4 x 2 stacking lanes.
TRUCK_BED = ContainerConfig(
    name="truck bed",
    kind=ContainerKind.FIXED_GRID,
    half_x=1.0,
    half_z=0.6,
    floor_y=0.03,
    max_stack_height=0.8,
    grid_columns=4,
    grid_rows=2,
)


# ─────────────────────────────────────────────────────────────────────────────
# Engine / application configuration
# ─────────────────────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class EngineConfig:
    """All parameters of a single PlacementEngine."""
    container: ContainerConfig = field(default_factory=lambda: PALLET)
    items: ItemConfig = field(default_factory=ItemConfig)
    seed: Optional[int] = None

    def to_dict(self) -> dict:
        return {"container": self.container.to_dict(),
                "items": self.items.to_dict(), "seed": self.seed}


@dataclass(frozen=True)
class AppConfig:
    """Configuration for the two engines the session switches between."""
    pallet: EngineConfig = field(default_factory=lambda: EngineConfig(container=PALLET))
    truck: EngineConfig = field(default_factory=lambda: EngineConfig(container=TRUCK_BED))

    def to_dict(self) -> dict:
        return {"pallet": self.pallet.to_dict(), "truck": self.truck.to_dict()}


# ─────────────────────────────────────────────────────────────────────────────
# YAML loading
# ─────────────────────────────────────────────────────────────────────────────

class ConfigError(ValueError):
    """Configuration file is missing, malformed or fails validation."""


class ItemSchema(BaseModel):
    min_dim: float = Field(DIM_MIN, gt=0)
    max_dim: float = Field(DIM_MAX, gt=0)
    volume_mid: float = Field(VOLUME_MID, gt=0)
    volume_high: float = Field(VOLUME_HIGH, gt=0)

    @model_validator(mode="after")
    def _check_ranges(self) -> "ItemSchema":
        if self.min_dim > self.max_dim:
            raise ValueError(f"min_dim {self.min_dim} > max_dim {self.max_dim}")
        if self.volume_mid >= self.volume_high:
            raise ValueError(
                f"volume_mid {self.volume_mid} must be < volume_high {self.volume_high}"
            )
        return self

    def to_config(self) -> ItemConfig:
        return ItemConfig(**self.model_dump())


class ContainerSchema(BaseModel):
    name: str
    kind: ContainerKind
    half_x: float = Field(gt=0)
    half_z: float = Field(gt=0)
    floor_y: float = Field(0.0, ge=0)
    max_stack_height: Optional[float] = Field(None, gt=0)
    grid_columns: int = Field(0, ge=0)
    grid_rows: int = Field(0, ge=0)

    @model_validator(mode="after")
    def _check_grid(self) -> "ContainerSchema":
        if self.kind is ContainerKind.FIXED_GRID and (self.grid_columns < 1 or self.grid_rows < 1):
            raise ValueError("fixed_grid containers need grid_columns >= 1 and grid_rows >= 1")
        if self.max_stack_height is not None and self.max_stack_height <= self.floor_y:
            raise ValueError(
                f"max_stack_height {self.max_stack_height} must be above floor_y {self.floor_y}"
            )
        return self

    def to_config(self) -> ContainerConfig:
        return ContainerConfig(**self.model_dump())


class AppSchema(BaseModel):
    items: ItemSchema = Field(default_factory=ItemSchema)
    pallet: ContainerSchema = Field(
        default_factory=lambda: ContainerSchema(**PALLET.to_dict()))
    truck: ContainerSchema = Field(
        default_factory=lambda: ContainerSchema(**TRUCK_BED.to_dict()))
    seed: Optional[int] = None

    def to_config(self) -> AppConfig:
        items = self.items.to_config()
        # Distinct seeds so the two modes do not mirror each other's boxes.
        truck_seed = None if self.seed is None else self.seed + 1
        return AppConfig(
            pallet=EngineConfig(container=self.pallet.to_config(), items=items, seed=self.seed),
            truck=EngineConfig(container=self.truck.to_config(), items=items, seed=truck_seed),
        )


def load_app_config(path: Optional[str] = None) -> AppConfig:
    """
    Load an AppConfig from a YAML file.

    Missing sections fall back to the built-in presets.  With no path the
    defaults are returned unchanged.

    Raises:
        ConfigError: unreadable file, invalid YAML or failed validation.
    """
    if path is None:
        return AppSchema().to_config()

    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise ConfigError(f"Cannot read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e

    if not isinstance(data, dict):
        raise ConfigError(f"Config root in {path} must be a mapping, got {type(data).__name__}")

    try:
        return AppSchema(**data).to_config()
    except ValidationError as e:
        raise ConfigError(f"Invalid config in {path}:\n{e}") from e
