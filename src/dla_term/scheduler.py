"""
Particle lifecycle driver.

Exactly one walker is in flight at a time. ``advance`` runs a bounded number of
walk steps, spawning fresh walkers as earlier ones stick, escape or are
absorbed, and stops early once ``particle_count`` walkers have stuck.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

from . import boundary, spawn, stickiness
from .lattice import Lattice
from .params import SimulationParams

_CARDINALS = ((1.0, 0.0), (-1.0, 0.0), (0.0, 1.0), (0.0, -1.0))


class ParticleState(Enum):
    IDLE = "idle"
    SPAWNED = "spawned"
    WALKING = "walking"
    STUCK = "stuck"
    ESCAPED = "escaped"
    REMOVED = "removed"  # absorbed at the boundary
    COMPLETE = "complete"


@dataclass
class Particle:
    x: float
    y: float
    steps: int = 0
    dx: float = 0.0
    dy: float = 0.0
    launch_radius: float = 0.0

    @property
    def cell(self) -> Tuple[int, int]:
        return int(self.x), int(self.y)


@dataclass
class SchedulerStats:
    spawned: int = 0
    stuck: int = 0
    escaped: int = 0
    removed: int = 0
    steps: int = 0
    longest_walk: int = 0


class ParticleScheduler:
    """Walk/check/boundary state machine for one active particle."""

    def __init__(self) -> None:
        self.state = ParticleState.IDLE
        self.particle: Optional[Particle] = None
        self.stats = SchedulerStats()

    @property
    def stuck_count(self) -> int:
        return self.stats.stuck

    def is_complete(self, params: SimulationParams) -> bool:
        return self.stats.stuck >= params.particle_count

    # ------------------------------------------------------------------ public
    def advance(self, lattice: Lattice, params: SimulationParams, steps: int, rng) -> int:
        """
        Execute up to ``steps`` walk steps and return how many ran.

        Terminal walkers are replaced without consuming a step. Raises
        SpawnExhaustedError when no spawn position can be found.
        """
        executed = 0
        while executed < steps:
            if self.is_complete(params):
                break
            if self.particle is None:
                self.spawn(lattice, params, rng)
            self.step(lattice, params, rng)
            executed += 1

        if self.is_complete(params):
            self.state = ParticleState.COMPLETE
            self.particle = None
        return executed

    def spawn(self, lattice: Lattice, params: SimulationParams, rng) -> Particle:
        x, y = spawn.next_spawn(lattice, params, rng)
        launch = max(spawn.spawn_radius(lattice, params), lattice.distance_from_center(x, y))
        self.particle = Particle(x=x, y=y, launch_radius=launch)
        self.stats.spawned += 1
        self.state = ParticleState.SPAWNED
        return self.particle

    def step(self, lattice: Lattice, params: SimulationParams, rng) -> ParticleState:
        """Advance the active particle by one walk step."""
        p = self.particle
        if p is None:
            raise RuntimeError("step() called with no active particle")
        self.state = ParticleState.WALKING

        dx, dy = self._displacement(p, lattice, params, rng)
        p.steps += 1
        self.stats.steps += 1

        outcome = boundary.apply(
            params.boundary, p.x + dx, p.y + dy, dx, dy, lattice.width, lattice.height
        )
        if isinstance(outcome, boundary.Removed):
            self.stats.removed += 1
            return self._retire(p, ParticleState.REMOVED)

        p.x, p.y, p.dx, p.dy = outcome.x, outcome.y, outcome.dx, outcome.dy
        cell = p.cell

        if isinstance(outcome, boundary.StickAtEdge) and not lattice.is_occupied(cell):
            return self._attach(lattice, params, p, cell)

        if not lattice.is_occupied(cell):
            if lattice.neighbor_count(cell, params.neighborhood) > 0 and stickiness.should_stick(
                lattice, cell, params.neighborhood, params, rng
            ):
                return self._attach(lattice, params, p, cell)

        too_far = lattice.distance_from_center(p.x, p.y) > p.launch_radius * params.escape_mult
        if p.steps >= params.max_iterations or too_far:
            self.stats.escaped += 1
            return self._retire(p, ParticleState.ESCAPED)

        return self.state

    # ------------------------------------------------------------------ internals
    def _displacement(self, p: Particle, lattice: Lattice, params: SimulationParams, rng):
        """
        One step's (dx, dy) in lattice cells.

        A unit random direction plus ``walk_force`` along ``walk_angle`` plus
        ``radial_bias`` toward the center (negative pushes outward). Both biases
        are in units of one step, so the whole sum scales with ``walk_step_size``.
        """
        if params.lattice_walk:
            ux, uy = _CARDINALS[min(int(rng.random() * 4), 3)]
        else:
            theta = rng.random() * 2.0 * math.pi
            ux, uy = math.cos(theta), math.sin(theta)

        if params.walk_force:
            a = math.radians(params.walk_angle)
            ux += params.walk_force * math.cos(a)
            uy += params.walk_force * math.sin(a)

        if params.radial_bias:
            cx, cy = lattice.center
            rx, ry = cx - p.x, cy - p.y
            r = math.hypot(rx, ry)
            if r > 0.0:
                ux += params.radial_bias * rx / r
                uy += params.radial_bias * ry / r

        return ux * params.walk_step_size, uy * params.walk_step_size

    def _attach(self, lattice: Lattice, params: SimulationParams, p: Particle, cell) -> ParticleState:
        lattice.attach(
            cell,
            order=lattice.next_order(),
            distance=lattice.distance_from_center(*cell),
            density=lattice.neighbor_count(cell, params.neighborhood),
            direction=math.atan2(p.dy, p.dx),
        )
        self.stats.stuck += 1
        return self._retire(p, ParticleState.STUCK)

    def _retire(self, p: Particle, state: ParticleState) -> ParticleState:
        self.stats.longest_walk = max(self.stats.longest_walk, p.steps)
        self.particle = None
        self.state = state
        return state


__all__ = ["Particle", "ParticleScheduler", "ParticleState", "SchedulerStats"]
