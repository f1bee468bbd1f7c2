"""Built-in named parameter presets."""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from typing import Any, Dict, List

from .errors import InvalidParamError
from .params import SimulationParams


@dataclass(frozen=True)
class Preset:
    name: str
    description: str
    overrides: Dict[str, Any] = field(default_factory=dict)

    def apply(self, params: SimulationParams) -> SimulationParams:
        """Defaults of the growth/sticking/spawn groups, then this preset's overrides."""
        base = SimulationParams()
        kept = {
            name: getattr(params, name)
            for name in _VISUAL_FIELDS
        }
        return dataclasses.replace(base, seed=params.seed, **kept, **self.overrides)


# Visual choices survive a preset switch.
_VISUAL_FIELDS = (
    "color_mode",
    "color_scheme",
    "highlight",
    "invert",
    "monochrome",
    "steps_per_frame",
)

PRESETS: List[Preset] = [
    Preset("Classic", "Standard DLA with default settings"),
    Preset(
        "Dense",
        "Compact structures with multiple contact requirement",
        {"multi_contact": 2, "neighborhood": "moore"},
    ),
    Preset(
        "Dendritic",
        "Thin, branching dendrite patterns",
        {"walk_step_size": 3.0, "tip_stickiness": 1.0, "side_stickiness": 0.3, "base_stickiness": 0.3},
    ),
    Preset(
        "Snowflake",
        "Symmetric snowflake-like growth",
        {"walk_step_size": 2.0, "neighborhood": "vonneumann", "seed_pattern": "cross", "base_stickiness": 0.8},
    ),
    Preset(
        "Coral",
        "Thick, coral-like structures",
        {
            "walk_step_size": 1.5,
            "tip_stickiness": 0.5,
            "side_stickiness": 1.0,
            "neighborhood": "moore",
            "seed_pattern": "ring",
            "base_stickiness": 0.7,
        },
    ),
    Preset(
        "Wind-swept",
        "Asymmetric growth with directional bias",
        {"walk_angle": 45.0, "walk_force": 0.3, "base_stickiness": 0.8},
    ),
    Preset(
        "Fractal Forest",
        "Multiple growth centers competing",
        {"walk_step_size": 2.5, "seed_pattern": "scatter", "base_stickiness": 0.4, "particle_count": 8000},
    ),
    Preset(
        "Edge Growth",
        "Particles spawn from the edges of the spawn box",
        {"spawn_mode": "edges", "boundary": "bounce", "base_stickiness": 0.9},
    ),
    Preset(
        "Angular",
        "Sharp, angular growth patterns",
        {"neighborhood": "vonneumann", "walk_step_size": 1.5},
    ),
    Preset(
        "Blob",
        "Dense, blob-like structures",
        {"neighborhood": "extended", "multi_contact": 3, "seed_pattern": "block"},
    ),
    Preset("Gradient", "Dense core with sparse edges", {"stickiness_gradient": -0.3}),
    Preset(
        "Rain",
        "Particles fall from the top edge",
        {"spawn_mode": "top", "radial_bias": 0.1, "seed_pattern": "line", "base_stickiness": 0.8},
    ),
]


def preset_names() -> List[str]:
    return [p.name for p in PRESETS]


def get_preset(name: str) -> Preset:
    for preset in PRESETS:
        if preset.name.lower() == name.strip().lower():
            return preset
    raise InvalidParamError("preset", name, f"expected one of {', '.join(preset_names())}")


def apply_preset(params: SimulationParams, name: str) -> SimulationParams:
    return get_preset(name).apply(params).validate()


__all__ = ["PRESETS", "Preset", "apply_preset", "get_preset", "preset_names"]
