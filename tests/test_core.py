# tests/test_core.py
from dla_term import Simulation, SimulationParams


def test_small_run():
    params = SimulationParams(particle_count=10, radial_bias=0.3, boundary="clamp", seed=0)
    sim = Simulation(params, width=64, height=64)
    for _ in range(100):
        if sim.advance(10_000).complete:
            break
    assert sim.is_complete()
    assert sim.lattice.occupied.sum() >= 10
