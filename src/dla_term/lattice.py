"""
Dot-resolution occupancy lattice.

The lattice is the single owned aggregate of the simulation: an occupancy mask
plus the attributes recorded when each cell was attached (order, distance,
density, direction). Arrays are indexed ``[y, x]``. Empty cells hold sentinel
values and are only ever filled through :meth:`Lattice.attach`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

import numpy as np
from numba import njit

from .errors import AlreadyOccupiedError

# One terminal cell packs a 2 x 4 block of lattice cells.
DOT_COLUMNS = 2
DOT_ROWS = 4

INT64_MIN = np.iinfo(np.int64).min
EMPTY_ORDER = INT64_MIN
EMPTY_DENSITY = -1

_VON_NEUMANN = np.array([(-1, 0), (1, 0), (0, -1), (0, 1)], dtype=np.int64)
_MOORE = np.array(
    [(dx, dy) for dy in (-1, 0, 1) for dx in (-1, 0, 1) if (dx, dy) != (0, 0)],
    dtype=np.int64,
)
_EXTENDED = np.array(
    [(dx, dy) for dy in range(-2, 3) for dx in range(-2, 3) if (dx, dy) != (0, 0)],
    dtype=np.int64,
)


class Neighborhood(str, Enum):
    """Fixed offset sets examined when counting occupied neighbors."""

    VONNEUMANN = "vonneumann"
    MOORE = "moore"
    EXTENDED = "extended"

    @property
    def offsets(self) -> np.ndarray:
        if self is Neighborhood.VONNEUMANN:
            return _VON_NEUMANN
        if self is Neighborhood.MOORE:
            return _MOORE
        return _EXTENDED

    @property
    def max_count(self) -> int:
        return int(self.offsets.shape[0])


@njit(cache=True)
def _count_neighbors(occupied: np.ndarray, x: int, y: int, offsets: np.ndarray) -> int:
    h, w = occupied.shape
    count = 0
    for i in range(offsets.shape[0]):
        nx = x + offsets[i, 0]
        ny = y + offsets[i, 1]
        if 0 <= nx < w and 0 <= ny < h and occupied[ny, nx]:
            count += 1
    return count


def check_dimensions(width: int, height: int) -> None:
    """Raise ValueError unless the size is a positive multiple of the dot block."""
    if width <= 0 or height <= 0:
        raise ValueError(f"Lattice dimensions must be positive, got {width}x{height}")
    if width % DOT_COLUMNS or height % DOT_ROWS:
        raise ValueError(
            f"Lattice {width}x{height} must be a multiple of the "
            f"{DOT_COLUMNS}x{DOT_ROWS} dot block"
        )


@dataclass(frozen=True)
class CellRecord:
    """Attributes captured when a cell was attached."""

    order: int
    distance: float
    density: int
    direction: float


class Lattice:
    """
    Occupancy/attribute grid at full dot resolution.

    Seeds and particles are written through the same :meth:`attach` primitive;
    seeds simply carry non-positive orders.
    """

    def __init__(self, width: int, height: int) -> None:
        check_dimensions(width, height)
        self.width = int(width)
        self.height = int(height)

        self.occupied = np.zeros((height, width), dtype=bool)
        self.order = np.full((height, width), EMPTY_ORDER, dtype=np.int64)
        self.stuck_distance = np.full((height, width), np.nan, dtype=np.float64)
        self.stuck_density = np.full((height, width), EMPTY_DENSITY, dtype=np.int16)
        self.stuck_direction = np.full((height, width), np.nan, dtype=np.float64)

        self._radius = 0.0
        self._count = 0
        self._min_order: Optional[int] = None
        self._max_order: Optional[int] = None

    # ------------------------------------------------------------------ geometry
    @property
    def shape(self) -> Tuple[int, int]:
        return self.height, self.width

    @property
    def center(self) -> Tuple[int, int]:
        return self.width // 2, self.height // 2

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def distance_from_center(self, x: float, y: float) -> float:
        cx, cy = self.center
        return math.hypot(x - cx, y - cy)

    # ------------------------------------------------------------------ queries
    def is_occupied(self, pos: Tuple[int, int]) -> bool:
        x, y = pos
        return self.in_bounds(x, y) and bool(self.occupied[y, x])

    def neighbor_count(self, pos: Tuple[int, int], neighborhood: Neighborhood) -> int:
        """Occupied cells among the neighborhood offsets; out of bounds counts as empty."""
        x, y = pos
        return int(_count_neighbors(self.occupied, int(x), int(y), Neighborhood(neighborhood).offsets))

    def current_radius(self) -> float:
        """Largest center distance over all occupied cells."""
        return self._radius

    @property
    def occupied_count(self) -> int:
        return self._count

    @property
    def min_order(self) -> Optional[int]:
        return self._min_order

    @property
    def max_order(self) -> Optional[int]:
        return self._max_order

    def next_order(self) -> int:
        """Order for the next attachment: one past the newest, and never below 1."""
        if self._max_order is None:
            return 1
        return max(self._max_order, 0) + 1

    def cell(self, pos: Tuple[int, int]) -> Optional[CellRecord]:
        x, y = pos
        if not self.is_occupied(pos):
            return None
        return CellRecord(
            order=int(self.order[y, x]),
            distance=float(self.stuck_distance[y, x]),
            density=int(self.stuck_density[y, x]),
            direction=float(self.stuck_direction[y, x]),
        )

    def attached_cells(self) -> dict:
        """Coordinates and attributes of every occupied cell, sorted by order."""
        ys, xs = np.nonzero(self.occupied)
        orders = self.order[ys, xs]
        idx = np.argsort(orders, kind="stable")
        ys, xs = ys[idx], xs[idx]
        return {
            "x": xs,
            "y": ys,
            "order": orders[idx],
            "distance": self.stuck_distance[ys, xs],
            "density": self.stuck_density[ys, xs],
            "direction": self.stuck_direction[ys, xs],
        }

    # ------------------------------------------------------------------ mutation
    def attach(
        self,
        pos: Tuple[int, int],
        order: int,
        distance: float,
        density: int,
        direction: float,
    ) -> None:
        """Occupy a cell and record its attachment attributes in one go."""
        x, y = int(pos[0]), int(pos[1])
        if not self.in_bounds(x, y):
            raise IndexError(f"Cell ({x}, {y}) outside {self.width}x{self.height} lattice")
        if self.occupied[y, x]:
            raise AlreadyOccupiedError(x, y)

        self.occupied[y, x] = True
        self.order[y, x] = order
        self.stuck_distance[y, x] = distance
        self.stuck_density[y, x] = density
        self.stuck_direction[y, x] = direction

        self._count += 1
        self._radius = max(self._radius, self.distance_from_center(x, y))
        if self._min_order is None or order < self._min_order:
            self._min_order = int(order)
        if self._max_order is None or order > self._max_order:
            self._max_order = int(order)


__all__ = [
    "DOT_COLUMNS",
    "DOT_ROWS",
    "CellRecord",
    "Lattice",
    "Neighborhood",
    "check_dimensions",
]
