"""
Parameter snapshot, parameter files and presets.
"""

import json

import pytest

from dla_term import utils
from dla_term.errors import InvalidParamError
from dla_term.params import (
    Boundary,
    ColorScheme,
    Neighborhood,
    SeedPattern,
    SimulationParams,
)
from dla_term.presets import PRESETS, apply_preset, get_preset, preset_names


def test_defaults_are_within_ranges():
    params = SimulationParams()
    assert params.validate() is params
    assert params.particle_count == 5000
    assert params.neighborhood is Neighborhood.VONNEUMANN
    assert params.boundary is Boundary.ABSORB


def test_enum_values_coerced_from_strings():
    params = SimulationParams(neighborhood="Moore", seed_pattern=" RING ")
    assert params.neighborhood is Neighborhood.MOORE
    assert params.seed_pattern is SeedPattern.RING


@pytest.mark.parametrize(
    "name, value",
    [
        ("walk_angle", 360.0),
        ("particle_count", 99),
        ("radial_bias", 0.31),
        ("multi_contact", 5),
        ("particle_count", 250.5),
        ("invert", "yes"),
        ("boundary", "teleport"),
        ("walk_force", float("nan")),
        ("no_such_param", 1),
    ],
)
def test_with_value_rejects_bad_values(name, value):
    params = SimulationParams()
    with pytest.raises(InvalidParamError) as excinfo:
        params.with_value(name, value)
    assert excinfo.value.name == name


def test_with_value_accepts_range_edges():
    params = SimulationParams()
    assert params.with_value("walk_angle", 359.9).walk_angle == 359.9
    assert params.with_value("radial_bias", -0.3).radial_bias == -0.3
    assert params.with_value("particle_count", 10_000).particle_count == 10_000
    assert params.with_value("boundary", "wrap").boundary is Boundary.WRAP
    # snapshots are immutable
    assert params.walk_angle == 0.0


def test_direct_construction_only_checks_structure():
    small = SimulationParams(particle_count=2)
    with pytest.raises(InvalidParamError):
        small.validate()
    with pytest.raises(InvalidParamError):
        SimulationParams(particle_count=0)
    with pytest.raises(InvalidParamError):
        SimulationParams(walk_step_size=-1.0)


def test_to_dict_uses_plain_values():
    data = SimulationParams(color_scheme=ColorScheme.NEON).to_dict()
    assert data["color_scheme"] == "neon"
    assert data["neighborhood"] == "vonneumann"
    json.dumps(data)


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(InvalidParamError):
        SimulationParams.from_dict({"particle_count": 500, "colour": "red"})


def test_params_json_roundtrip(tmp_path):
    params = SimulationParams(particle_count=800, neighborhood="extended", walk_angle=90.0, seed=3)
    path = tmp_path / "params.json"
    utils.save_params(path, params)
    assert utils.load_params(path) == params


def test_params_from_toml(tmp_path):
    pytest.importorskip("tomllib")
    path = tmp_path / "params.toml"
    path.write_text(
        'particle_count = 1200\nboundary = "bounce"\nlattice_walk = true\nradial_bias = -0.1\n',
        encoding="utf-8",
    )
    params = utils.load_params(path)
    assert params.particle_count == 1200
    assert params.boundary is Boundary.BOUNCE
    assert params.lattice_walk is True
    assert params.radial_bias == -0.1


def test_out_of_range_file_is_rejected(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"escape_mult": 9.0}), encoding="utf-8")
    with pytest.raises(InvalidParamError):
        utils.load_params(path)


def test_unsupported_param_file(tmp_path):
    path = tmp_path / "params.yaml"
    path.write_text("particle_count: 100\n", encoding="utf-8")
    with pytest.raises(ValueError):
        utils.load_params(path)


@pytest.mark.parametrize("name", preset_names())
def test_every_preset_is_valid(name):
    params = apply_preset(SimulationParams(), name)
    assert params.validate() is params


def test_preset_lookup_is_case_insensitive():
    assert get_preset("wind-swept").name == "Wind-swept"
    with pytest.raises(InvalidParamError):
        get_preset("Nebula")
    assert len(PRESETS) == len(set(preset_names()))


def test_preset_keeps_visual_choices():
    current = SimulationParams(
        color_scheme=ColorScheme.PLASMA,
        highlight=5,
        invert=True,
        monochrome=True,
        seed=11,
        walk_step_size=4.0,
    )
    blob = apply_preset(current, "Blob")
    assert blob.neighborhood is Neighborhood.EXTENDED
    assert blob.multi_contact == 3
    assert blob.seed_pattern is SeedPattern.BLOCK
    assert blob.color_scheme is ColorScheme.PLASMA
    assert blob.highlight == 5
    assert blob.invert is True
    assert blob.monochrome is True
    assert blob.seed == 11
    # movement falls back to defaults
    assert blob.walk_step_size == 1.0
