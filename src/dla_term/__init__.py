"""
Terminal DLA - diffusion-limited aggregation rendered in braille.

This package provides the growth engine and its renderer:
- Lattice: dot-resolution occupancy grid with attachment attributes
- ParticleScheduler: one-walker-at-a-time spawn/walk/stick state machine
- Simulation: host-facing facade (advance, render, reset, set_param)
- braille.render: packs the lattice into colored braille cells
"""

from .errors import AlreadyOccupiedError, DLAError, InvalidParamError, SpawnExhaustedError
from .lattice import Lattice, Neighborhood
from .params import (
    Boundary,
    ColorMode,
    ColorScheme,
    SeedPattern,
    SimulationParams,
    SpawnMode,
)
from .scheduler import ParticleScheduler, ParticleState
from .braille import DisplayBuffer, grid_size_for_terminal
from .simulation import AdvanceReport, Simulation
from . import utils

__all__ = [
    # Engine
    "Simulation",
    "AdvanceReport",
    "Lattice",
    "ParticleScheduler",
    "ParticleState",
    "DisplayBuffer",
    "grid_size_for_terminal",
    # Configuration
    "SimulationParams",
    "Neighborhood",
    "SeedPattern",
    "SpawnMode",
    "Boundary",
    "ColorMode",
    "ColorScheme",
    # Errors
    "DLAError",
    "InvalidParamError",
    "AlreadyOccupiedError",
    "SpawnExhaustedError",
    # Utilities
    "utils",
]
