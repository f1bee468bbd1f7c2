"""
Braille rendering for high-resolution terminal output.

Each terminal cell shows a 2x4 block of lattice cells as one Unicode braille
glyph (U+2800 + 8-bit mask). Dot positions and their bits::

    (0,0)=0x01  (1,0)=0x08
    (0,1)=0x02  (1,1)=0x10
    (0,2)=0x04  (1,2)=0x20
    (0,3)=0x40  (1,3)=0x80

The block color comes from its most recently attached dot.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional, Tuple

import numpy as np
from numba import njit

from . import palettes
from .lattice import DOT_COLUMNS, DOT_ROWS, INT64_MIN, Lattice, Neighborhood
from .params import ColorMode, SimulationParams

BRAILLE_BASE = 0x2800

# DOT_BITS[column, row]
DOT_BITS = np.array(
    [
        [0x01, 0x02, 0x04, 0x40],
        [0x08, 0x10, 0x20, 0x80],
    ],
    dtype=np.int64,
)

HIGHLIGHT_COLOR = (255, 255, 255)
MONO_COLOR = (255, 255, 255)
BLANK_COLOR = (0, 0, 0)

MIN_GRID_DIM = 64

RGB = Tuple[int, int, int]


def glyph_for(mask: int) -> str:
    if not 0 <= mask <= 0xFF:
        raise ValueError(f"Braille mask must fit in 8 bits, got {mask}")
    return chr(BRAILLE_BASE + mask)


def mask_for(glyph: str) -> int:
    mask = ord(glyph) - BRAILLE_BASE
    if not 0 <= mask <= 0xFF:
        raise ValueError(f"{glyph!r} is not a braille pattern")
    return mask


def grid_size_for_terminal(columns: int, rows: int) -> Tuple[int, int]:
    """Lattice dimensions giving one dot per braille sub-cell of a terminal canvas."""
    width = max(columns * DOT_COLUMNS, MIN_GRID_DIM)
    height = max(rows * DOT_ROWS, MIN_GRID_DIM)
    width += -width % DOT_COLUMNS
    height += -height % DOT_ROWS
    return width, height


@njit(cache=True)
def _pack_blocks(occupied, order, dot_bits, masks, newest_y, newest_x):
    """
    Fill per-block masks and the coordinates of each block's newest dot.

    Blocks with no occupied dot get mask 0 and coordinates -1.
    """
    rows, cols = masks.shape
    for r in range(rows):
        for c in range(cols):
            mask = 0
            best = INT64_MIN
            by = -1
            bx = -1
            for dx in range(2):
                for dy in range(4):
                    y = r * 4 + dy
                    x = c * 2 + dx
                    if occupied[y, x]:
                        mask |= dot_bits[dx, dy]
                        if by < 0 or order[y, x] > best:
                            best = order[y, x]
                            by = y
                            bx = x
            masks[r, c] = mask
            newest_y[r, c] = by
            newest_x[r, c] = bx


@dataclass
class BlockSample:
    masks: np.ndarray
    newest_y: np.ndarray
    newest_x: np.ndarray

    @property
    def filled(self) -> np.ndarray:
        return self.masks != 0


def sample_blocks(lattice: Lattice) -> BlockSample:
    rows = lattice.height // DOT_ROWS
    cols = lattice.width // DOT_COLUMNS
    masks = np.zeros((rows, cols), dtype=np.uint8)
    newest_y = np.full((rows, cols), -1, dtype=np.int64)
    newest_x = np.full((rows, cols), -1, dtype=np.int64)
    _pack_blocks(lattice.occupied, lattice.order, DOT_BITS, masks, newest_y, newest_x)
    return BlockSample(masks, newest_y, newest_x)


def _attribute_values(lattice: Lattice, params: SimulationParams, ys, xs) -> np.ndarray:
    mode = ColorMode(params.color_mode)
    if mode is ColorMode.AGE:
        lo = lattice.min_order or 0
        hi = lattice.max_order or 0
        return (lattice.order[ys, xs] - lo) / max(1, hi - lo)
    if mode is ColorMode.DISTANCE:
        return lattice.stuck_distance[ys, xs] / max(1.0, lattice.current_radius())
    if mode is ColorMode.DENSITY:
        return lattice.stuck_density[ys, xs] / Neighborhood(params.neighborhood).max_count
    return (lattice.stuck_direction[ys, xs] + math.pi) / (2.0 * math.pi)


def normalized_values(
    lattice: Lattice, params: SimulationParams, sample: Optional[BlockSample] = None
) -> np.ndarray:
    """
    Per-block color value in [0, 1] before palette lookup, NaN for blank blocks.

    ``invert`` is already applied.
    """
    sample = sample or sample_blocks(lattice)
    values = np.full(sample.masks.shape, np.nan, dtype=np.float64)
    filled = sample.filled
    ys = sample.newest_y[filled]
    xs = sample.newest_x[filled]
    v = np.clip(_attribute_values(lattice, params, ys, xs).astype(np.float64), 0.0, 1.0)
    if params.invert:
        v = 1.0 - v
    values[filled] = v
    return values


def render(lattice: Lattice, params: SimulationParams) -> "DisplayBuffer":
    """Pack the lattice into braille masks and per-cell colors."""
    sample = sample_blocks(lattice)
    filled = sample.filled
    values = normalized_values(lattice, params, sample)

    colors = np.zeros(sample.masks.shape + (3,), dtype=np.uint8)
    colors[...] = BLANK_COLOR
    if params.monochrome:
        colors[filled] = MONO_COLOR
    else:
        colors[filled] = palettes.lookup(params.color_scheme, values[filled])

    if params.highlight > 0 and lattice.max_order is not None:
        threshold = lattice.max_order - params.highlight + 1
        newest = np.full(sample.masks.shape, INT64_MIN, dtype=np.int64)
        newest[filled] = lattice.order[sample.newest_y[filled], sample.newest_x[filled]]
        colors[filled & (newest >= threshold)] = HIGHLIGHT_COLOR

    return DisplayBuffer(sample.masks, colors)


@dataclass(eq=False)
class DisplayBuffer:
    """Terminal-resolution grid of braille masks and RGB colors."""

    masks: np.ndarray
    colors: np.ndarray

    @property
    def rows(self) -> int:
        return int(self.masks.shape[0])

    @property
    def cols(self) -> int:
        return int(self.masks.shape[1])

    def __eq__(self, other) -> bool:
        if not isinstance(other, DisplayBuffer):
            return NotImplemented
        return np.array_equal(self.masks, other.masks) and np.array_equal(self.colors, other.colors)

    __hash__ = None

    def cell(self, row: int, col: int) -> Optional[Tuple[int, RGB]]:
        """(mask, color) of a cell, or None when it is blank."""
        mask = int(self.masks[row, col])
        if mask == 0:
            return None
        r, g, b = (int(v) for v in self.colors[row, col])
        return mask, (r, g, b)

    def glyph(self, row: int, col: int) -> str:
        mask = int(self.masks[row, col])
        return glyph_for(mask) if mask else " "

    def lines(self) -> List[str]:
        return ["".join(self.glyph(r, c) for c in range(self.cols)) for r in range(self.rows)]

    def to_ansi(self) -> str:
        """Text with 24-bit foreground escapes, one line per row."""
        out = []
        for r in range(self.rows):
            parts = []
            current = None
            for c in range(self.cols):
                cell = self.cell(r, c)
                if cell is None:
                    parts.append(" ")
                    continue
                mask, color = cell
                if color != current:
                    parts.append("\x1b[38;2;%d;%d;%dm" % color)
                    current = color
                parts.append(glyph_for(mask))
            parts.append("\x1b[0m")
            out.append("".join(parts))
        return "\n".join(out)


__all__ = [
    "BRAILLE_BASE",
    "DOT_BITS",
    "DisplayBuffer",
    "HIGHLIGHT_COLOR",
    "MONO_COLOR",
    "grid_size_for_terminal",
    "glyph_for",
    "mask_for",
    "normalized_values",
    "render",
    "sample_blocks",
]
