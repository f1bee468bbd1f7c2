"""Error kinds raised by the growth engine."""

from __future__ import annotations


class DLAError(Exception):
    """Base class for all engine errors."""


class InvalidParamError(DLAError, ValueError):
    """A parameter name is unknown or its value is outside the documented range."""

    def __init__(self, name: str, value, reason: str) -> None:
        self.name = name
        self.value = value
        super().__init__(f"Invalid value {value!r} for '{name}': {reason}")


class AlreadyOccupiedError(DLAError, RuntimeError):
    """Attach was called on a lattice cell that already holds a particle."""

    def __init__(self, x: int, y: int) -> None:
        self.position = (x, y)
        super().__init__(f"Lattice cell ({x}, {y}) is already occupied")


class SpawnExhaustedError(DLAError, RuntimeError):
    """No free spawn position could be found within the retry cap."""


__all__ = [
    "DLAError",
    "InvalidParamError",
    "AlreadyOccupiedError",
    "SpawnExhaustedError",
]
