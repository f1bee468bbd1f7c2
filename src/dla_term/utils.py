# src/dla_term/utils.py
from __future__ import annotations

import json
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Optional

import numpy as np

from .params import SimulationParams

try:  # Python 3.11+
    import tomllib
except ModuleNotFoundError:  # pragma: no cover
    tomllib = None  # type: ignore


@dataclass
class ClusterResult:
    """Exported aggregate: occupancy mask, attached cell coordinates, metadata."""

    occupied: Optional[np.ndarray] = None
    positions: Optional[np.ndarray] = None
    meta: Optional[Dict[str, Any]] = None


def make_rng(seed: Optional[int] = None) -> np.random.Generator:
    """Random source for one simulation run; ``None`` draws fresh OS entropy."""
    return np.random.default_rng(seed)


def save_cluster_result(
    path: str | os.PathLike[str], result: ClusterResult, *, overwrite: bool = True
) -> None:
    """Serialize a ClusterResult to .npz."""
    out_dir = Path(path).parent
    out_dir.mkdir(parents=True, exist_ok=True)
    out: Dict[str, Any] = {}
    if result.occupied is not None:
        out["occupied"] = result.occupied.astype("uint8")
    if result.positions is not None:
        out["positions"] = np.asarray(result.positions, dtype=np.float64)

    # arrays go to the top level, scalars stay in the pickled meta dict
    meta_clean = {}
    for key, value in (result.meta or {}).items():
        if isinstance(value, np.ndarray):
            out[key] = value
        else:
            meta_clean[key] = value
    out["meta"] = meta_clean

    if not overwrite and Path(path).exists():
        raise FileExistsError(f"{path} already exists")
    np.savez_compressed(path, **out)


def load_cluster(path: str | os.PathLike[str]) -> ClusterResult:
    """Load a .npz written by save_cluster_result."""
    data = np.load(path, allow_pickle=True)
    occupied = data["occupied"].astype(bool) if "occupied" in data else None
    positions = data["positions"].astype(float) if "positions" in data else None
    meta: Dict[str, Any] = {}
    if "meta" in data:
        meta_raw = data["meta"]
        meta = dict(meta_raw.item()) if meta_raw.shape == () else {}
    for key in data.files:
        if key not in ("occupied", "positions", "meta") and key not in meta:
            meta[key] = data[key]
    return ClusterResult(occupied=occupied, positions=positions, meta=meta)


def load_params(path: str | os.PathLike[str]) -> SimulationParams:
    """
    Load simulation parameters from JSON or TOML.

    Values are checked against the documented ranges; a bad file raises
    InvalidParamError and leaves nothing half-applied.
    """
    path = str(path)
    with open(path, "rb") as fh:
        data = fh.read()
    suffix = Path(path).suffix.lower()
    if suffix in {".json", ""}:
        raw = json.loads(data.decode("utf-8"))
    elif suffix in {".toml", ".tml"}:
        if tomllib is None:
            raise RuntimeError("tomllib is unavailable; cannot parse TOML files")
        raw = tomllib.loads(data.decode("utf-8"))
    else:
        raise ValueError(f"Unsupported parameter file format: {suffix}")
    if not isinstance(raw, dict):
        raise ValueError(f"{path} must contain a table of parameters")
    return SimulationParams.from_dict(raw)


def save_params(path: str | os.PathLike[str], params: SimulationParams) -> None:
    """Write parameters as pretty-printed JSON."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(json.dumps(params.to_dict(), indent=2) + "\n", encoding="utf-8")
