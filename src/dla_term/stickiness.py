"""Adhesion probability for a walker touching the aggregate."""

from __future__ import annotations

from typing import Tuple

from .lattice import Lattice, Neighborhood
from .params import SimulationParams


def density_fraction(count: int, neighborhood: Neighborhood) -> float:
    """Neighbor count as a fraction of the neighborhood size (tip ~ 0, side ~ 1)."""
    return min(max(count / Neighborhood(neighborhood).max_count, 0.0), 1.0)


def adhesion_probability(
    count: int,
    distance: float,
    neighborhood: Neighborhood,
    params: SimulationParams,
) -> float:
    """
    Combine base stickiness, the tip/side split and the radial gradient.

    Returns 0 when the contact count is below ``params.multi_contact``.
    """
    if count < params.multi_contact:
        return 0.0
    f = density_fraction(count, neighborhood)
    base = params.tip_stickiness * (1.0 - f) + params.side_stickiness * f
    adjusted = base + params.stickiness_gradient * (distance / 100.0)
    return min(max(adjusted * params.base_stickiness, 0.0), 1.0)


def should_stick(
    lattice: Lattice,
    position: Tuple[int, int],
    neighborhood: Neighborhood,
    params: SimulationParams,
    rng,
) -> bool:
    """Draw against the adhesion probability at ``position``."""
    count = lattice.neighbor_count(position, neighborhood)
    if count < params.multi_contact:
        return False
    p = adhesion_probability(
        count, lattice.distance_from_center(*position), neighborhood, params
    )
    return rng.random() < p


__all__ = ["adhesion_probability", "density_fraction", "should_stick"]
