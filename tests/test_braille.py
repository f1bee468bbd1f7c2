"""
Braille packing and coloring tests.
"""

import numpy as np
import pytest

from dla_term import braille, palettes
from dla_term.lattice import Lattice
from dla_term.params import ColorMode, ColorScheme, SimulationParams


def _attach(lattice, x, y, order, distance=0.0, density=0, direction=0.0):
    lattice.attach((x, y), order=order, distance=distance, density=density, direction=direction)


def test_glyph_encoding_is_a_bijection():
    glyphs = [braille.glyph_for(m) for m in range(256)]
    assert glyphs[0] == "⠀"
    assert glyphs[0xFF] == "⣿"
    assert len(set(glyphs)) == 256
    assert [braille.mask_for(g) for g in glyphs] == list(range(256))


def test_glyph_rejects_out_of_range():
    with pytest.raises(ValueError):
        braille.glyph_for(256)
    with pytest.raises(ValueError):
        braille.mask_for("a")


def test_dot_bits_cover_one_byte():
    bits = braille.DOT_BITS.ravel().tolist()
    assert sorted(bits) == [1 << i for i in range(8)]
    assert braille.DOT_BITS[0, 3] == 0x40
    assert braille.DOT_BITS[1, 3] == 0x80


@pytest.mark.parametrize("dx, dy", [(dx, dy) for dx in range(2) for dy in range(4)])
def test_single_dot_sets_its_bit(dx, dy):
    lattice = Lattice(8, 8)
    _attach(lattice, 2 + dx, 4 + dy, order=1)
    frame = braille.render(lattice, SimulationParams())
    assert frame.masks[1, 1] == braille.DOT_BITS[dx, dy]
    assert int(frame.masks.sum()) == braille.DOT_BITS[dx, dy]


def test_full_block_renders_all_dots():
    lattice = Lattice(4, 8)
    for i, (dy, dx) in enumerate(np.ndindex(4, 2)):
        _attach(lattice, dx, dy, order=i)
    frame = braille.render(lattice, SimulationParams())
    assert frame.glyph(0, 0) == "⣿"
    assert frame.cell(0, 1) is None
    assert frame.glyph(1, 0) == " "


def test_frame_dimensions():
    frame = braille.render(Lattice(160, 96), SimulationParams())
    assert (frame.rows, frame.cols) == (24, 80)
    lines = frame.lines()
    assert len(lines) == 24
    assert all(len(line) == 80 for line in lines)


def test_blank_cells_are_blank():
    lattice = Lattice(8, 8)
    _attach(lattice, 0, 0, order=1)
    frame = braille.render(lattice, SimulationParams())
    assert frame.cell(1, 3) is None
    assert tuple(frame.colors[1, 3]) == braille.BLANK_COLOR


def test_newest_dot_decides_block_color():
    lattice = Lattice(64, 64)
    _attach(lattice, 0, 0, order=1, distance=lattice.distance_from_center(0, 0))
    radius = lattice.current_radius()
    # same block, newer, recorded at a quarter of the radius
    _attach(lattice, 1, 1, order=5, distance=0.25 * radius)

    params = SimulationParams(color_mode=ColorMode.DISTANCE, color_scheme=ColorScheme.VIRIDIS)
    frame = braille.render(lattice, params)
    expected = palettes.lookup(ColorScheme.VIRIDIS, np.array([0.25]))[0]
    mask, color = frame.cell(0, 0)
    assert mask == 0x01 | 0x10
    assert color == tuple(int(v) for v in expected)


def test_render_is_idempotent():
    lattice = Lattice(16, 16)
    for i, (x, y) in enumerate([(8, 8), (9, 8), (3, 2), (15, 15)]):
        _attach(lattice, x, y, order=i, distance=float(i), density=i, direction=0.1 * i)
    params = SimulationParams(color_mode=ColorMode.DIRECTION, highlight=1)
    assert braille.render(lattice, params) == braille.render(lattice, params)


@pytest.mark.parametrize("mode", list(ColorMode))
def test_invert_complements_normalized_values(mode):
    lattice = Lattice(16, 16)
    for i, (x, y) in enumerate([(0, 0), (4, 0), (0, 4), (8, 8), (14, 12)]):
        _attach(lattice, x, y, order=i - 2, distance=2.0 * i, density=i, direction=0.5 * i - 1.0)

    plain = braille.normalized_values(lattice, SimulationParams(color_mode=mode))
    inverted = braille.normalized_values(lattice, SimulationParams(color_mode=mode, invert=True))
    filled = ~np.isnan(plain)
    assert filled.sum() == 5
    np.testing.assert_allclose(inverted[filled], 1.0 - plain[filled])
    assert np.isnan(inverted[~filled]).all()


def test_age_values_span_unit_interval():
    lattice = Lattice(16, 16)
    for i, x in enumerate(range(0, 16, 2)):
        _attach(lattice, x, 0, order=i - 3)
    values = braille.normalized_values(lattice, SimulationParams())
    row = values[0]
    assert row[0] == 0.0
    assert row[-1] == 1.0
    assert (np.diff(row) > 0).all()


def test_highlight_marks_newest_blocks():
    lattice = Lattice(16, 16)
    for order, (x, y) in enumerate([(0, 0), (4, 0), (8, 0), (12, 0)]):
        _attach(lattice, x, y, order=order)
    params = SimulationParams(highlight=2, color_scheme=ColorScheme.FIRE)
    frame = braille.render(lattice, params)

    white = braille.HIGHLIGHT_COLOR
    assert frame.cell(0, 4)[1] == white
    assert frame.cell(0, 6)[1] == white
    assert frame.cell(0, 0)[1] != white
    assert frame.cell(0, 2)[1] != white


def test_ansi_output_carries_truecolor_escapes():
    lattice = Lattice(8, 8)
    _attach(lattice, 0, 0, order=1)
    text = braille.render(lattice, SimulationParams()).to_ansi()
    lines = text.split("\n")
    assert len(lines) == 2
    assert lines[0].startswith("\x1b[38;2;")
    assert all(line.endswith("\x1b[0m") for line in lines)


@pytest.mark.parametrize("scheme", list(ColorScheme))
def test_palette_luts_are_complete(scheme):
    lut = palettes.build_lut(scheme)
    assert lut.shape == (palettes.LUT_SIZE, 3)
    assert lut.dtype == np.uint8
    assert not lut.flags.writeable


def test_grid_size_for_terminal():
    assert braille.grid_size_for_terminal(80, 24) == (160, 96)
    assert braille.grid_size_for_terminal(10, 5) == (64, 64)


@pytest.mark.parametrize("neighborhood, expected", [("vonneumann", 0.75), ("moore", 0.375), ("extended", 0.125)])
def test_density_values_scale_by_neighborhood_size(neighborhood, expected):
    lattice = Lattice(16, 16)
    _attach(lattice, 3, 5, order=1, density=3)
    params = SimulationParams(color_mode=ColorMode.DENSITY, neighborhood=neighborhood)
    values = braille.normalized_values(lattice, params)
    assert values[1, 1] == pytest.approx(expected)


def test_monochrome_draws_plain_dots():
    lattice = Lattice(16, 16)
    for order, (x, y) in enumerate([(0, 0), (4, 0), (8, 4), (12, 12)]):
        _attach(lattice, x, y, order=order, distance=float(order))
    params = SimulationParams(monochrome=True, color_scheme=ColorScheme.FIRE)
    frame = braille.render(lattice, params)

    colors = {frame.cell(r, c)[1] for r in range(frame.rows) for c in range(frame.cols) if frame.cell(r, c)}
    assert colors == {braille.MONO_COLOR}
    assert frame.masks.astype(bool).sum() == 4
    assert tuple(frame.colors[0, 1]) == braille.BLANK_COLOR
