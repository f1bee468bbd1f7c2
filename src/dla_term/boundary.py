"""
Boundary policies for walkers that leave the lattice.

Each policy is a pure function of the candidate position, the motion that
produced it and the grid extent. In-range candidates pass through untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from .params import Boundary

# Largest coordinate still inside [0, bound) is bound - EDGE_EPSILON.
EDGE_EPSILON = 1e-6


@dataclass(frozen=True)
class InBounds:
    x: float
    y: float
    dx: float
    dy: float


@dataclass(frozen=True)
class StickAtEdge:
    x: float
    y: float
    dx: float
    dy: float


@dataclass(frozen=True)
class Removed:
    pass


REMOVED = Removed()

Outcome = Union[InBounds, StickAtEdge, Removed]


def _clamp(v: float, bound: float) -> float:
    return min(max(v, 0.0), bound - EDGE_EPSILON)


def _wrap(v: float, bound: float) -> float:
    v = v % bound
    # -1e-17 % 64 rounds up to 64.0
    return 0.0 if v >= bound else v


def _reflect(v: float, d: float, bound: float):
    if v < 0.0:
        return _clamp(-v, bound), -d
    if v >= bound:
        return _clamp(2.0 * bound - v, bound), -d
    return v, d


def apply(
    policy: Boundary,
    x: float,
    y: float,
    dx: float,
    dy: float,
    width: float,
    height: float,
) -> Outcome:
    """Map a candidate position to an outcome under the given policy."""
    if 0.0 <= x < width and 0.0 <= y < height:
        return InBounds(x, y, dx, dy)

    policy = Boundary(policy)
    if policy is Boundary.CLAMP:
        return InBounds(_clamp(x, width), _clamp(y, height), dx, dy)
    if policy is Boundary.WRAP:
        return InBounds(_wrap(x, width), _wrap(y, height), dx, dy)
    if policy is Boundary.BOUNCE:
        x, dx = _reflect(x, dx, width)
        y, dy = _reflect(y, dy, height)
        return InBounds(x, y, dx, dy)
    if policy is Boundary.STICK:
        return StickAtEdge(_clamp(x, width), _clamp(y, height), dx, dy)
    return REMOVED


__all__ = ["EDGE_EPSILON", "InBounds", "Outcome", "REMOVED", "Removed", "StickAtEdge", "apply"]
