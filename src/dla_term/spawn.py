"""
Spawn geometry for new walkers.

All positions are drawn relative to the spawn radius
``max(current_radius + spawn_offset, min_radius)`` around the lattice center
and clipped into the grid. Occupied candidates are resampled a bounded number
of times.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, Tuple

from .boundary import EDGE_EPSILON
from .errors import SpawnExhaustedError
from .lattice import Lattice
from .params import SimulationParams, SpawnMode

SPAWN_RETRY_LIMIT = 1000
CORNER_FRACTION = 0.25

Point = Tuple[float, float]


def spawn_radius(lattice: Lattice, params: SimulationParams) -> float:
    return max(lattice.current_radius() + params.spawn_offset, params.min_radius)


def _clip(v: float, bound: int) -> float:
    return min(max(v, 0.0), bound - EDGE_EPSILON)


def _box(lattice: Lattice, radius: float):
    cx, cy = lattice.center
    return (
        _clip(cx - radius, lattice.width),
        _clip(cy - radius, lattice.height),
        _clip(cx + radius, lattice.width),
        _clip(cy + radius, lattice.height),
    )


def _pick(rng, n: int) -> int:
    return min(int(rng.random() * n), n - 1)


def _lerp(a: float, b: float, t: float) -> float:
    return a + (b - a) * t


def _circle(lattice: Lattice, radius: float, rng) -> Point:
    cx, cy = lattice.center
    theta = rng.random() * 2.0 * math.pi
    return (
        _clip(cx + radius * math.cos(theta), lattice.width),
        _clip(cy + radius * math.sin(theta), lattice.height),
    )


def _side(lattice: Lattice, radius: float, rng, side: SpawnMode) -> Point:
    x0, y0, x1, y1 = _box(lattice, radius)
    t = rng.random()
    if side is SpawnMode.TOP:
        return _lerp(x0, x1, t), y0
    if side is SpawnMode.BOTTOM:
        return _lerp(x0, x1, t), y1
    if side is SpawnMode.LEFT:
        return x0, _lerp(y0, y1, t)
    return x1, _lerp(y0, y1, t)


_SIDES = (SpawnMode.TOP, SpawnMode.BOTTOM, SpawnMode.LEFT, SpawnMode.RIGHT)


def _edges(lattice: Lattice, radius: float, rng) -> Point:
    return _side(lattice, radius, rng, _SIDES[_pick(rng, 4)])


def _corners(lattice: Lattice, radius: float, rng) -> Point:
    x0, y0, x1, y1 = _box(lattice, radius)
    size = max(1.0, radius * CORNER_FRACTION)
    corner = _pick(rng, 4)
    ox = rng.random() * size
    oy = rng.random() * size
    x = x0 + ox if corner in (0, 2) else x1 - ox
    y = y0 + oy if corner in (0, 1) else y1 - oy
    return _clip(x, lattice.width), _clip(y, lattice.height)


def _random(lattice: Lattice, radius: float, rng) -> Point:
    return (
        _clip(rng.random() * lattice.width, lattice.width),
        _clip(rng.random() * lattice.height, lattice.height),
    )


_SAMPLERS: Dict[SpawnMode, Callable[[Lattice, float, object], Point]] = {
    SpawnMode.CIRCLE: _circle,
    SpawnMode.EDGES: _edges,
    SpawnMode.CORNERS: _corners,
    SpawnMode.RANDOM: _random,
    SpawnMode.TOP: lambda lat, r, rng: _side(lat, r, rng, SpawnMode.TOP),
    SpawnMode.BOTTOM: lambda lat, r, rng: _side(lat, r, rng, SpawnMode.BOTTOM),
    SpawnMode.LEFT: lambda lat, r, rng: _side(lat, r, rng, SpawnMode.LEFT),
    SpawnMode.RIGHT: lambda lat, r, rng: _side(lat, r, rng, SpawnMode.RIGHT),
}


def next_spawn(lattice: Lattice, params: SimulationParams, rng) -> Point:
    """
    Return a free spawn position for the active spawn mode.

    Raises SpawnExhaustedError after SPAWN_RETRY_LIMIT rejected candidates.
    """
    mode = SpawnMode(params.spawn_mode)
    sampler = _SAMPLERS[mode]
    radius = spawn_radius(lattice, params)
    aggregate_radius = lattice.current_radius()

    for _ in range(SPAWN_RETRY_LIMIT):
        x, y = sampler(lattice, radius, rng)
        if mode is SpawnMode.RANDOM and lattice.distance_from_center(x, y) <= aggregate_radius:
            continue
        if not lattice.is_occupied((int(x), int(y))):
            return x, y

    raise SpawnExhaustedError(
        f"No free '{mode.value}' spawn position after {SPAWN_RETRY_LIMIT} attempts "
        f"(aggregate radius {aggregate_radius:.1f}, {lattice.occupied_count} cells occupied)"
    )


__all__ = ["CORNER_FRACTION", "SPAWN_RETRY_LIMIT", "next_spawn", "spawn_radius"]
