"""Cube state value type, validation and codec helpers."""

from __future__ import annotations

from enum import Enum
from typing import Any

import numpy as np

from .errors import InvalidSizeError, StateValidationError
from .moves import FACE_NAMES, N_FACES


class Color(Enum):
    WHITE = "white"
    YELLOW = "yellow"
    ORANGE = "orange"
    RED = "red"
    GREEN = "green"
    BLUE = "blue"


# Color id i is the solved color of FACE_NAMES[i].
COLORS = (Color.WHITE, Color.YELLOW, Color.ORANGE, Color.RED, Color.GREEN, Color.BLUE)
COLOR_ID = {color: i for i, color in enumerate(COLORS)}
SOLVED_COLORS = dict(zip(FACE_NAMES, COLORS))
COLOR_LETTERS = {
    Color.WHITE: "W",
    Color.YELLOW: "Y",
    Color.ORANGE: "O",
    Color.RED: "R",
    Color.GREEN: "G",
    Color.BLUE: "B",
}


def validate_size(size: Any) -> int:
    if isinstance(size, bool) or not isinstance(size, (int, np.integer)):
        raise InvalidSizeError(f"Cube size must be an integer, got {size!r}")
    if size < 2:
        raise InvalidSizeError(f"Cube size must be >= 2, got {size}")
    return int(size)


def _validate_color_ids(arr: np.ndarray, size: int) -> np.ndarray:
    area = size * size
    arr = np.asarray(arr).reshape(-1)
    if arr.size != N_FACES * area:
        raise StateValidationError(
            f"State of size {size} must have {N_FACES * area} stickers, got {arr.size}"
        )
    if not np.issubdtype(arr.dtype, np.integer):
        raise StateValidationError("State must contain integer color IDs")
    if np.any(arr < 0) or np.any(arr >= N_FACES):
        raise StateValidationError("State contains invalid color IDs; allowed values are 0..5")

    counts = np.bincount(arr.astype(np.int64), minlength=N_FACES)
    if not np.all(counts == area):
        raise StateValidationError(
            f"Invalid sticker counts; each color must appear exactly {area} times"
        )
    return arr.astype(np.int8, copy=True)


class CubeState:
    """Immutable N x N x N cube as a flat array of color ids.

    Faces are stored in FACE_NAMES order, each face row-major with
    ``size * size`` stickers. Two states are equal when they have the same size
    and the same stickers.
    """

    __slots__ = ("_size", "_stickers")

    def __init__(self, size: int, stickers: list[int] | np.ndarray):
        self._size = validate_size(size)
        arr = _validate_color_ids(stickers, self._size)
        arr.flags.writeable = False
        self._stickers = arr

    @classmethod
    def _from_trusted(cls, size: int, stickers: np.ndarray) -> "CubeState":
        # Skips validation for arrays produced by permuting a valid state.
        obj = cls.__new__(cls)
        stickers = np.array(stickers, dtype=np.int8, copy=True)
        stickers.flags.writeable = False
        obj._size = size
        obj._stickers = stickers
        return obj

    @property
    def size(self) -> int:
        return self._size

    @property
    def stickers(self) -> np.ndarray:
        """Read-only flat color-id array of length ``6 * size * size``."""
        return self._stickers

    @property
    def faces(self) -> dict[str, list[Color]]:
        grid = self._stickers.reshape(N_FACES, -1)
        return {face: [COLORS[c] for c in grid[i]] for i, face in enumerate(FACE_NAMES)}

    def face(self, name: str) -> list[Color]:
        if name not in FACE_NAMES:
            raise StateValidationError(f"Unknown face: {name!r}")
        return self.faces[name]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CubeState):
            return NotImplemented
        return self._size == other._size and np.array_equal(self._stickers, other._stickers)

    def __hash__(self) -> int:
        return hash((self._size, self._stickers.tobytes()))

    def __repr__(self) -> str:
        letters = " ".join(faces_to_letters(self).values())
        return f"CubeState(size={self._size}, faces={letters})"


def state_to_dict(state: CubeState) -> dict[str, Any]:
    return {
        "size": state.size,
        "faces": {face: [c.value for c in colors] for face, colors in state.faces.items()},
    }


def state_from_dict(data: dict[str, Any]) -> CubeState:
    """Rebuild a CubeState from the output of ``state_to_dict`` (or parsed JSON)."""
    if not isinstance(data, dict):
        raise StateValidationError("State must be a JSON object")
    if "size" not in data or "faces" not in data:
        raise StateValidationError("State must have 'size' and 'faces' fields")

    size = validate_size(data["size"])
    faces = data["faces"]
    if not isinstance(faces, dict) or set(faces) != set(FACE_NAMES):
        raise StateValidationError(f"faces must have exactly the keys {list(FACE_NAMES)}")

    ids: list[int] = []
    for face in FACE_NAMES:
        colors = faces[face]
        if not isinstance(colors, list) or len(colors) != size * size:
            raise StateValidationError(f"Face {face!r} must list {size * size} colors")
        for value in colors:
            try:
                ids.append(COLOR_ID[Color(value)])
            except ValueError as exc:
                raise StateValidationError(f"Unknown color {value!r} on face {face!r}") from exc

    return CubeState(size, np.asarray(ids, dtype=np.int8))


def state_to_color_ids(state: CubeState) -> list[int]:
    return state.stickers.astype(int).tolist()


def faces_to_grids(state: CubeState) -> dict[str, list[list[str]]]:
    """Nested-row view of every face, for renderers that index [row][col]."""
    n = state.size
    return {
        face: [[c.value for c in colors[r * n : (r + 1) * n]] for r in range(n)]
        for face, colors in state.faces.items()
    }


def faces_to_letters(state: CubeState) -> dict[str, str]:
    return {
        face: "".join(COLOR_LETTERS[c] for c in colors) for face, colors in state.faces.items()
    }
