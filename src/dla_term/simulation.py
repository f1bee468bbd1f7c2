"""
Host-facing simulation object.

Owns the lattice, the scheduler and the random source for one run. The host
calls :meth:`Simulation.advance` once per frame and :meth:`Simulation.render`
to obtain a display buffer; nothing here blocks or spawns threads.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from . import braille, presets, seeds, utils
from .errors import SpawnExhaustedError
from .lattice import Lattice, check_dimensions
from .params import SimulationParams
from .scheduler import ParticleScheduler, SchedulerStats

logger = logging.getLogger(__name__)

DEFAULT_WIDTH = 160
DEFAULT_HEIGHT = 96


@dataclass
class AdvanceReport:
    """What one advance() call did."""

    steps: int = 0
    stuck: int = 0
    escaped: int = 0
    removed: int = 0
    spawned: int = 0
    complete: bool = False
    exhausted: bool = False


class Simulation:
    """
    Single-writer owner of the growing aggregate.

    ``rng`` may be any object with a ``random()`` method returning floats in
    [0, 1); by default a numpy Generator seeded from ``params.seed``.
    """

    def __init__(
        self,
        params: SimulationParams | None = None,
        *,
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
        rng=None,
    ) -> None:
        self.width = width
        self.height = height
        self._fixed_rng = rng
        self.params = params or SimulationParams()
        self.reset(self.params)

    # ------------------------------------------------------------------ lifecycle
    def reset(self, params: SimulationParams | None = None) -> None:
        """Recreate the lattice, replant the seed and start a fresh scheduler."""
        if params is not None:
            self.params = params
        self.rng = self._fixed_rng if self._fixed_rng is not None else utils.make_rng(self.params.seed)
        self.lattice = Lattice(self.width, self.height)
        self.seed_cells = seeds.plant_seed(self.lattice, self.params.seed_pattern, self.rng)
        self.scheduler = ParticleScheduler()
        self.exhausted = False
        self._next_progress = self._progress_interval()
        logger.info(
            "Reset %dx%d lattice: seed=%s (%d cells), target=%d particles",
            self.width,
            self.height,
            self.params.seed_pattern.value,
            self.seed_cells,
            self.params.particle_count,
        )

    def advance(self, steps: Optional[int] = None) -> AdvanceReport:
        """
        Run up to ``steps`` walk steps (default ``params.steps_per_frame``).

        Spawn exhaustion pauses growth instead of raising; the report and the
        ``exhausted`` flag carry the signal until the next reset or set_param.
        """
        steps = self.params.steps_per_frame if steps is None else int(steps)
        if steps < 0:
            raise ValueError(f"steps must be non-negative, got {steps}")

        before = _copy_stats(self.scheduler.stats)
        if not self.exhausted and not self.is_complete():
            try:
                self.scheduler.advance(self.lattice, self.params, steps, self.rng)
            except SpawnExhaustedError as exc:
                self.exhausted = True
                logger.warning("Growth paused, grid saturated: %s", exc)

        after = self.scheduler.stats
        report = AdvanceReport(
            steps=after.steps - before.steps,
            stuck=after.stuck - before.stuck,
            escaped=after.escaped - before.escaped,
            removed=after.removed - before.removed,
            spawned=after.spawned - before.spawned,
            complete=self.is_complete(),
            exhausted=self.exhausted,
        )
        if report.stuck:
            self._log_progress(report.complete)
        return report

    def render(self) -> braille.DisplayBuffer:
        return braille.render(self.lattice, self.params)

    def set_param(self, name: str, value: Any) -> None:
        """
        Change one parameter; takes effect from the next step.

        Raises InvalidParamError (state unchanged) for unknown names or values
        outside the documented range. ``seed_pattern`` applies on reset.
        A saturated run resumes, so the new value gets a chance to spawn.
        """
        self.params = self.params.with_value(name, value)
        self.exhausted = False
        logger.debug("Set %s=%r", name, getattr(self.params, name))

    def resize(self, width: int, height: int) -> None:
        """
        Regrow on a lattice of a new size, e.g. after a terminal resize.

        ``particle_count`` is capped at :meth:`max_particles` for the new grid.
        Same-size calls are ignored.
        """
        if (width, height) == (self.width, self.height):
            return
        check_dimensions(width, height)
        self.width = int(width)
        self.height = int(height)
        cap = self.max_particles()
        if self.params.particle_count > cap:
            logger.info("Capping particle_count %d -> %d", self.params.particle_count, cap)
            self.params = dataclasses.replace(self.params, particle_count=cap)
        self.reset()

    def max_particles(self) -> int:
        """Largest sensible particle_count: 75% of the grid area, at least 100."""
        return max(self.width * self.height * 3 // 4, 100)

    def apply_preset(self, name: str) -> SimulationParams:
        """Switch to a named preset and restart growth."""
        self.reset(presets.apply_preset(self.params, name))
        return self.params

    # ------------------------------------------------------------------ queries
    def is_complete(self) -> bool:
        return self.scheduler.is_complete(self.params)

    @property
    def stats(self) -> SchedulerStats:
        return self.scheduler.stats

    @property
    def particles_stuck(self) -> int:
        return self.scheduler.stuck_count

    def progress(self) -> float:
        return min(1.0, self.scheduler.stuck_count / self.params.particle_count)

    def to_result(self) -> utils.ClusterResult:
        """Export the aggregate for offline analysis."""
        cells = self.lattice.attached_cells()
        cx, cy = self.lattice.center
        positions = np.column_stack((cells["x"] - cx, cells["y"] - cy)).astype(np.float64)
        meta = {
            "model": "dla_term",
            "num": int(self.params.particle_count),
            "stuck": int(self.scheduler.stuck_count),
            "seed_cells": int(self.seed_cells),
            "width": self.width,
            "height": self.height,
            "radius": float(self.lattice.current_radius()),
            "params": self.params.to_dict(),
            "order": cells["order"],
            "stuck_distance": cells["distance"],
            "stuck_density": cells["density"],
            "stuck_direction": cells["direction"],
        }
        return utils.ClusterResult(occupied=self.lattice.occupied.copy(), positions=positions, meta=meta)

    # ------------------------------------------------------------------ internals
    def _progress_interval(self) -> int:
        return max(1, self.params.particle_count // 10)

    def _log_progress(self, complete: bool) -> None:
        stuck = self.scheduler.stuck_count
        if stuck < self._next_progress and not complete:
            return
        interval = self._progress_interval()
        self._next_progress = (stuck // interval + 1) * interval
        if complete:
            logger.info(
                "Growth complete: %d particles, R=%.1f, %d escaped, %d absorbed",
                stuck,
                self.lattice.current_radius(),
                self.scheduler.stats.escaped,
                self.scheduler.stats.removed,
            )
        else:
            logger.info(
                "[dla] %d/%d particles, R=%.1f",
                stuck,
                self.params.particle_count,
                self.lattice.current_radius(),
            )


def _copy_stats(stats: SchedulerStats) -> SchedulerStats:
    return SchedulerStats(**vars(stats))


__all__ = ["AdvanceReport", "DEFAULT_HEIGHT", "DEFAULT_WIDTH", "Simulation"]
