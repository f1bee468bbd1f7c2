"""
Seed patterns that pre-populate the lattice before any walker is released.

Seed cells are attached with sequential non-positive orders ending at 0, so the
first walker to stick always receives order 1.
"""

from __future__ import annotations

import math
from typing import Callable, Dict, List, Tuple

import numpy as np

from .lattice import Lattice
from .params import SeedPattern

Cell = Tuple[int, int]

SCATTER_SEEDS = 15
STARBURST_SPOKES = 8


def _randint(rng, low: int, high: int) -> int:
    """Uniform integer in [low, high]."""
    return low + min(int(rng.random() * (high - low + 1)), high - low)


def _point(w: int, h: int, rng) -> List[Cell]:
    return [(w // 2, h // 2)]


def _line(w: int, h: int, rng) -> List[Cell]:
    cy = h // 2
    half = min(20, w // 4)
    return [(x, cy) for x in range(w // 2 - half, w // 2 + half)]


def _cross(w: int, h: int, rng) -> List[Cell]:
    cx, cy = w // 2, h // 2
    arm = min(10, w // 8, h // 8)
    cells = []
    for i in range(arm):
        cells += [(cx - i, cy), (cx + i, cy), (cx, cy - i), (cx, cy + i)]
    return cells


def _circle(w: int, h: int, rng) -> List[Cell]:
    cx, cy = w / 2.0, h / 2.0
    radius = float(min(15, w // 8, h // 8))
    cells = []
    for deg in range(360):
        a = math.radians(deg)
        cells.append((int(cx + radius * math.cos(a)), int(cy + radius * math.sin(a))))
    return cells


def _ring(w: int, h: int, rng) -> List[Cell]:
    cx, cy = w / 2.0, h / 2.0
    min_dim = float(min(w, h))
    radius = min(max(min_dim * 0.30, 6.0), min_dim * 0.45)
    thickness = 2.5
    yy, xx = np.mgrid[0:h, 0:w]
    dist = np.hypot(xx - cx, yy - cy)
    ys, xs = np.nonzero(np.abs(dist - radius) <= thickness)
    return list(zip(xs.tolist(), ys.tolist()))


def _block(w: int, h: int, rng) -> List[Cell]:
    cx, cy = w // 2, h // 2
    half = max(min(w, h) // 8, 4)
    return [
        (x, y)
        for y in range(max(cy - half, 0), min(cy + half, h - 1) + 1)
        for x in range(max(cx - half, 0), min(cx + half, w - 1) + 1)
    ]


def _noise(w: int, h: int, rng) -> List[Cell]:
    radius = min(max(min(w, h) * 0.22, 6.0), 30.0)
    ri = int(radius)
    jitter = max(ri // 3, 1)
    pcx = min(max(w // 3 + _randint(rng, -jitter, jitter), 1), w - 2)
    pcy = min(max(h // 3 + _randint(rng, -jitter, jitter), 1), h - 2)

    cells = []
    for y in range(max(pcy - ri, 1), min(pcy + ri, h - 2) + 1):
        for x in range(max(pcx - ri, 1), min(pcx + ri, w - 2) + 1):
            dist = math.hypot(x - pcx, y - pcy)
            if dist > radius:
                continue
            # dense core, ragged edge
            if rng.random() < 0.35 + (1.0 - dist / radius) * 0.65:
                cells.append((x, y))
    return cells or [(pcx, pcy)]


def _scatter(w: int, h: int, rng) -> List[Cell]:
    cx, cy = w // 2, h // 2
    spread = min(20, w // 6, h // 6)
    cells = []
    for _ in range(SCATTER_SEEDS):
        a = rng.random() * 2.0 * math.pi
        r = rng.random() * spread
        cells.append((int(cx + r * math.cos(a)), int(cy + r * math.sin(a))))
    return cells


def _multipoint(w: int, h: int, rng) -> List[Cell]:
    cx, cy = w // 2, h // 2
    spread = min(25, w // 5, h // 5)
    return [(cx, cy), (cx - spread, cy), (cx + spread, cy), (cx, cy - spread), (cx, cy + spread)]


def _starburst(w: int, h: int, rng) -> List[Cell]:
    cx, cy = w / 2.0, h / 2.0
    spoke_len = min(max(min(w, h) * 0.35, 8.0), 40.0)
    cells = [(int(cx), int(cy))]

    def inside(x: int, y: int) -> bool:
        return 0 < x < w - 1 and 0 < y < h - 1

    for s in range(STARBURST_SPOKES):
        a = s * 2.0 * math.pi / STARBURST_SPOKES
        for step in range(1, int(spoke_len) + 1):
            x = int(round(cx + step * math.cos(a)))
            y = int(round(cy + step * math.sin(a)))
            if inside(x, y):
                cells.append((x, y))

    for deg in range(0, 360, 4):
        a = math.radians(deg)
        x = int(cx + spoke_len * math.cos(a))
        y = int(cy + spoke_len * math.sin(a))
        if inside(x, y):
            cells.append((x, y))
    return cells


_PATTERNS: Dict[SeedPattern, Callable[[int, int, object], List[Cell]]] = {
    SeedPattern.POINT: _point,
    SeedPattern.LINE: _line,
    SeedPattern.CROSS: _cross,
    SeedPattern.CIRCLE: _circle,
    SeedPattern.RING: _ring,
    SeedPattern.BLOCK: _block,
    SeedPattern.NOISE: _noise,
    SeedPattern.SCATTER: _scatter,
    SeedPattern.MULTIPOINT: _multipoint,
    SeedPattern.STARBURST: _starburst,
}


def seed_cells(pattern: SeedPattern, width: int, height: int, rng) -> List[Cell]:
    """Distinct in-bounds cells of a pattern, in placement order."""
    raw = _PATTERNS[SeedPattern(pattern)](width, height, rng)
    seen = set()
    cells = []
    for x, y in raw:
        if 0 <= x < width and 0 <= y < height and (x, y) not in seen:
            seen.add((x, y))
            cells.append((x, y))
    return cells or [(width // 2, height // 2)]


def plant_seed(lattice: Lattice, pattern: SeedPattern, rng) -> int:
    """Attach a seed pattern to an empty lattice and return the number of seed cells."""
    cells = seed_cells(pattern, lattice.width, lattice.height, rng)
    first = 1 - len(cells)
    for i, (x, y) in enumerate(cells):
        lattice.attach(
            (x, y),
            order=first + i,
            distance=lattice.distance_from_center(x, y),
            density=0,
            direction=0.0,
        )
    return len(cells)


__all__ = ["plant_seed", "seed_cells"]
