"""
Simulation parameters.

``SimulationParams`` is an immutable snapshot read by every component. Changing
a value produces a new snapshot; in-flight particles pick it up on their next
step.
"""

from __future__ import annotations

import dataclasses
import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from .errors import InvalidParamError
from .lattice import Neighborhood


class SeedPattern(str, Enum):
    POINT = "point"
    LINE = "line"
    CROSS = "cross"
    CIRCLE = "circle"
    RING = "ring"
    BLOCK = "block"
    NOISE = "noise"
    SCATTER = "scatter"
    MULTIPOINT = "multipoint"
    STARBURST = "starburst"


class SpawnMode(str, Enum):
    CIRCLE = "circle"
    EDGES = "edges"
    CORNERS = "corners"
    RANDOM = "random"
    TOP = "top"
    BOTTOM = "bottom"
    LEFT = "left"
    RIGHT = "right"


class Boundary(str, Enum):
    CLAMP = "clamp"
    WRAP = "wrap"
    BOUNCE = "bounce"
    STICK = "stick"
    ABSORB = "absorb"


class ColorMode(str, Enum):
    AGE = "age"
    DISTANCE = "distance"
    DENSITY = "density"
    DIRECTION = "direction"


class ColorScheme(str, Enum):
    ICE = "ice"
    FIRE = "fire"
    PLASMA = "plasma"
    VIRIDIS = "viridis"
    RAINBOW = "rainbow"
    GRAYSCALE = "grayscale"
    OCEAN = "ocean"
    NEON = "neon"


# name -> (low, high, upper bound inclusive)
PARAM_RANGES: Dict[str, Tuple[float, float, bool]] = {
    "particle_count": (100, 10_000, True),
    "base_stickiness": (0.1, 1.0, True),
    "steps_per_frame": (1, 50, True),
    "walk_step_size": (0.5, 5.0, True),
    "walk_angle": (0.0, 360.0, False),
    "walk_force": (0.0, 0.5, True),
    "radial_bias": (-0.3, 0.3, True),
    "multi_contact": (1, 4, True),
    "tip_stickiness": (0.1, 1.0, True),
    "side_stickiness": (0.1, 1.0, True),
    "stickiness_gradient": (-0.5, 0.5, True),
    "spawn_offset": (5.0, 50.0, True),
    "escape_mult": (2.0, 6.0, True),
    "min_radius": (20.0, 100.0, True),
    "max_iterations": (1000, 50_000, True),
    "highlight": (0, 50, True),
}

ENUM_FIELDS = {
    "seed_pattern": SeedPattern,
    "neighborhood": Neighborhood,
    "spawn_mode": SpawnMode,
    "boundary": Boundary,
    "color_mode": ColorMode,
    "color_scheme": ColorScheme,
}

INT_FIELDS = {
    "particle_count",
    "steps_per_frame",
    "multi_contact",
    "max_iterations",
    "highlight",
}

BOOL_FIELDS = {"invert", "lattice_walk", "monochrome"}

# Values that must stay positive even outside the interactive ranges.
_POSITIVE_FIELDS = ("particle_count", "steps_per_frame", "walk_step_size", "max_iterations")


@dataclass(frozen=True)
class SimulationParams:
    """Configuration snapshot consumed by the scheduler and renderer."""

    # Growth
    particle_count: int = 5000
    base_stickiness: float = 1.0
    seed_pattern: SeedPattern = SeedPattern.POINT
    steps_per_frame: int = 5

    # Movement
    walk_step_size: float = 1.0
    walk_angle: float = 0.0  # degrees
    walk_force: float = 0.0
    radial_bias: float = 0.0  # positive pulls toward the center
    lattice_walk: bool = False

    # Sticking
    neighborhood: Neighborhood = Neighborhood.VONNEUMANN
    multi_contact: int = 1
    tip_stickiness: float = 1.0
    side_stickiness: float = 1.0
    stickiness_gradient: float = 0.0

    # Spawn / boundary
    spawn_mode: SpawnMode = SpawnMode.CIRCLE
    boundary: Boundary = Boundary.ABSORB
    spawn_offset: float = 10.0
    escape_mult: float = 3.0
    min_radius: float = 20.0
    max_iterations: int = 10_000

    # Visual
    color_mode: ColorMode = ColorMode.AGE
    highlight: int = 0
    invert: bool = False
    monochrome: bool = False  # plain white dots, no palette
    color_scheme: ColorScheme = ColorScheme.ICE

    seed: Optional[int] = None

    def __post_init__(self) -> None:
        for f in dataclasses.fields(self):
            if f.name == "seed":
                continue
            object.__setattr__(self, f.name, _coerce(f.name, getattr(self, f.name)))
        for name in _POSITIVE_FIELDS:
            if getattr(self, name) <= 0:
                raise InvalidParamError(name, getattr(self, name), "must be positive")
        if self.multi_contact < 1:
            raise InvalidParamError("multi_contact", self.multi_contact, "must be at least 1")
        if self.highlight < 0:
            raise InvalidParamError("highlight", self.highlight, "must not be negative")
        if self.seed is not None and (isinstance(self.seed, bool) or not isinstance(self.seed, int)):
            raise InvalidParamError("seed", self.seed, "must be an integer or None")

    # ------------------------------------------------------------------ ranges
    def validate(self) -> "SimulationParams":
        """Check every value against its documented range and return self."""
        for name in PARAM_RANGES:
            _check_range(name, getattr(self, name))
        return self

    def with_value(self, name: str, value: Any) -> "SimulationParams":
        """Return a copy with one parameter changed, range-checked."""
        if name not in _field_names():
            raise InvalidParamError(name, value, "unknown parameter")
        if name == "seed":
            return dataclasses.replace(self, seed=value)
        coerced = _coerce(name, value)
        if name in PARAM_RANGES:
            _check_range(name, coerced)
        return dataclasses.replace(self, **{name: coerced})

    # ------------------------------------------------------------------ dict I/O
    def to_dict(self) -> Dict[str, Any]:
        out = dataclasses.asdict(self)
        for name in ENUM_FIELDS:
            out[name] = out[name].value
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, validate: bool = True) -> "SimulationParams":
        known = _field_names()
        unknown = sorted(set(data) - known)
        if unknown:
            raise InvalidParamError(unknown[0], data[unknown[0]], "unknown parameter")
        params = cls(**data)
        return params.validate() if validate else params


def _field_names() -> set:
    return {f.name for f in dataclasses.fields(SimulationParams)}


def _coerce(name: str, value: Any) -> Any:
    if name in ENUM_FIELDS:
        enum_cls = ENUM_FIELDS[name]
        if isinstance(value, enum_cls):
            return value
        if isinstance(value, str):
            try:
                return enum_cls(value.strip().lower())
            except ValueError:
                pass
        choices = ", ".join(e.value for e in enum_cls)
        raise InvalidParamError(name, value, f"expected one of {choices}")

    if name in BOOL_FIELDS:
        if isinstance(value, bool):
            return value
        raise InvalidParamError(name, value, "expected a boolean")

    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidParamError(name, value, "expected a number")
    if not math.isfinite(value):
        raise InvalidParamError(name, value, "must be finite")
    if name in INT_FIELDS:
        if float(value) != int(value):
            raise InvalidParamError(name, value, "expected an integer")
        return int(value)
    return float(value)


def _check_range(name: str, value: Any) -> None:
    low, high, inclusive = PARAM_RANGES[name]
    above = value > high if inclusive else value >= high
    if value < low or above:
        bracket = "]" if inclusive else ")"
        raise InvalidParamError(name, value, f"outside range [{low}, {high}{bracket}")


__all__ = [
    "Boundary",
    "ColorMode",
    "ColorScheme",
    "Neighborhood",
    "PARAM_RANGES",
    "SeedPattern",
    "SimulationParams",
    "SpawnMode",
]
