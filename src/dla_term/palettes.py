"""
Color schemes as 256-entry RGB lookup tables.

Schemes backed by a stock matplotlib colormap use it directly; the rest are
built from color stops with ``LinearSegmentedColormap.from_list``.
"""

from __future__ import annotations

from functools import lru_cache

import matplotlib
import numpy as np
from matplotlib.colors import Colormap, LinearSegmentedColormap

from .params import ColorScheme

LUT_SIZE = 256

_STOPS = {
    ColorScheme.ICE: ["#0b1a3a", "#1f4e8c", "#4fa3d9", "#bfe9ff", "#ffffff"],
    ColorScheme.FIRE: ["#3a0000", "#8b0000", "#d12c00", "#ff8c00", "#ffd84a", "#fff8d0"],
    ColorScheme.OCEAN: ["#001a33", "#003f5c", "#00798c", "#30c5d2", "#c9f5f5"],
    ColorScheme.NEON: ["#ff00ff", "#7a00ff", "#00e5ff", "#00ff85", "#f4ff00"],
    # dark end stays visible on a black terminal
    ColorScheme.GRAYSCALE: ["#3a3a3a", "#ffffff"],
}

_MATPLOTLIB_NAMES = {
    ColorScheme.PLASMA: "plasma",
    ColorScheme.VIRIDIS: "viridis",
    ColorScheme.RAINBOW: "rainbow",
}


def colormap(scheme: ColorScheme) -> Colormap:
    scheme = ColorScheme(scheme)
    if scheme in _STOPS:
        return LinearSegmentedColormap.from_list(f"dla_{scheme.value}", _STOPS[scheme])
    return matplotlib.colormaps[_MATPLOTLIB_NAMES[scheme]]


@lru_cache(maxsize=None)
def _lut(scheme: ColorScheme) -> np.ndarray:
    rgba = colormap(scheme)(np.linspace(0.0, 1.0, LUT_SIZE))
    lut = np.round(rgba[:, :3] * 255.0).astype(np.uint8)
    lut.setflags(write=False)
    return lut


def build_lut(scheme: ColorScheme) -> np.ndarray:
    """(LUT_SIZE, 3) uint8 table for a scheme; cached and read-only."""
    return _lut(ColorScheme(scheme))


def lut_index(values: np.ndarray) -> np.ndarray:
    """Map normalized values in [0, 1] to LUT indices."""
    v = np.clip(np.asarray(values, dtype=np.float64), 0.0, 1.0)
    return np.rint(v * (LUT_SIZE - 1)).astype(np.intp)


def lookup(scheme: ColorScheme, values: np.ndarray) -> np.ndarray:
    return build_lut(scheme)[lut_index(values)]


__all__ = ["LUT_SIZE", "build_lut", "colormap", "lookup", "lut_index"]
