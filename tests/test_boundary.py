"""
Tests for the boundary policies applied to walkers leaving the lattice.
"""

import numpy as np
import pytest

from dla_term import boundary
from dla_term.params import Boundary

W, H = 64, 64


@pytest.mark.parametrize("policy", list(Boundary))
def test_in_range_positions_pass_through(policy):
    outcome = boundary.apply(policy, 10.5, 63.9, 0.3, -0.7, W, H)
    assert outcome == boundary.InBounds(10.5, 63.9, 0.3, -0.7)


def test_clamp_saturates_into_range():
    outcome = boundary.apply(Boundary.CLAMP, -3.2, 70.0, -1.0, 1.0, W, H)
    assert isinstance(outcome, boundary.InBounds)
    assert outcome.x == 0.0
    assert H - 1 <= outcome.y < H
    assert (outcome.dx, outcome.dy) == (-1.0, 1.0)


def test_wrap_lands_on_opposite_side():
    outcome = boundary.apply(Boundary.WRAP, 65.5, -0.5, 1.0, -1.0, W, H)
    assert outcome.x == pytest.approx(1.5)
    assert outcome.y == pytest.approx(63.5)


def test_wrap_tiny_negative_stays_below_bound():
    outcome = boundary.apply(Boundary.WRAP, -1e-17, 5.0, -1.0, 0.0, W, H)
    assert 0.0 <= outcome.x < W


@pytest.mark.parametrize("policy", [Boundary.CLAMP, Boundary.WRAP, Boundary.BOUNCE])
def test_containing_policies_keep_walkers_inside(policy):
    rng = np.random.default_rng(11)
    for x, y in rng.uniform(-3 * W, 4 * W, size=(500, 2)):
        outcome = boundary.apply(policy, float(x), float(y), 1.0, 1.0, W, H)
        assert 0.0 <= outcome.x < W
        assert 0.0 <= outcome.y < H


def test_bounce_reflects_and_inverts_motion():
    outcome = boundary.apply(Boundary.BOUNCE, -2.0, 10.0, -1.0, 0.5, W, H)
    assert outcome == boundary.InBounds(2.0, 10.0, 1.0, 0.5)

    outcome = boundary.apply(Boundary.BOUNCE, 30.0, 66.0, 0.2, 2.0, W, H)
    assert outcome == boundary.InBounds(30.0, 62.0, 0.2, -2.0)


def test_stick_reports_clamped_edge_position():
    outcome = boundary.apply(Boundary.STICK, -1.0, 20.0, -1.0, 0.0, W, H)
    assert isinstance(outcome, boundary.StickAtEdge)
    assert int(outcome.x) == 0
    assert int(outcome.y) == 20


def test_absorb_removes_walker():
    outcome = boundary.apply(Boundary.ABSORB, 12.0, 64.0, 0.0, 1.0, W, H)
    assert isinstance(outcome, boundary.Removed)
    assert outcome is boundary.REMOVED


def test_policy_accepts_string_names():
    outcome = boundary.apply("absorb", -1.0, 0.0, -1.0, 0.0, W, H)
    assert isinstance(outcome, boundary.Removed)
