"""N x N x N Rubik's cube state model and move engine."""

from .engine import (
    apply_move,
    apply_move_sequence,
    generate_scrambled_cube,
    generate_solved_cube,
    scramble_moves,
)
from .errors import (
    CubeError,
    InvalidMoveError,
    InvalidSizeError,
    ScrambleLengthError,
    StateValidationError,
)
from .moves import invert, invert_sequence
from .session import CubeSession
from .solved_check import is_solved
from .state_codec import Color, CubeState

__all__ = [
    "Color",
    "CubeError",
    "CubeSession",
    "CubeState",
    "InvalidMoveError",
    "InvalidSizeError",
    "ScrambleLengthError",
    "StateValidationError",
    "apply_move",
    "apply_move_sequence",
    "generate_scrambled_cube",
    "generate_solved_cube",
    "invert",
    "invert_sequence",
    "is_solved",
    "scramble_moves",
]
