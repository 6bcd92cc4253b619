"""Solved-state checks for the cube engine."""

from __future__ import annotations

import numpy as np

from .moves import N_FACES
from .state_codec import CubeState


def is_solved(state: CubeState) -> bool:
    """True when every face shows a single color.

    Which color sits on which face is not checked, so a solved cube seen in
    any whole-cube orientation also counts as solved.
    """
    faces = state.stickers.reshape(N_FACES, -1)
    return bool(np.all(faces == faces[:, :1]))


def is_solved_canonical(state: CubeState) -> bool:
    """True only for the canonical solved coloring of ``state.size``."""
    expected = np.repeat(np.arange(N_FACES, dtype=np.int8), state.size * state.size)
    return bool(np.array_equal(state.stickers, expected))
