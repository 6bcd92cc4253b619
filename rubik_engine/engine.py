"""Core cube engine: state construction and move application."""

from __future__ import annotations

import numpy as np

from .errors import ScrambleLengthError
from .moves import FACE_LETTERS, MODIFIERS, N_FACES, move_permutations, normalize_token, parse_sequence
from .state_codec import CubeState, validate_size

DEFAULT_SCRAMBLE_LENGTHS = {2: 10, 3: 25, 4: 35}


def generate_solved_cube(size: int) -> CubeState:
    size = validate_size(size)
    stickers = np.repeat(np.arange(N_FACES, dtype=np.int8), size * size)
    return CubeState._from_trusted(size, stickers)


def default_scramble_length(size: int) -> int:
    return DEFAULT_SCRAMBLE_LENGTHS.get(size, 10 * size)


def scramble_moves(
    size: int,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    length: int | None = None,
) -> list[str]:
    """Random face-turn sequence that never turns the same face twice in a row."""
    size = validate_size(size)
    if rng is None:
        rng = np.random.default_rng(seed)
    if length is None:
        length = default_scramble_length(size)
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise ScrambleLengthError(f"Scramble length must be a non-negative integer, got {length!r}")

    letters = list(FACE_LETTERS)
    moves: list[str] = []
    prev: str | None = None
    for _ in range(length):
        candidates = [f for f in letters if f != prev]
        face = candidates[int(rng.integers(len(candidates)))]
        moves.append(face + MODIFIERS[int(rng.integers(len(MODIFIERS)))])
        prev = face
    return moves


def generate_scrambled_cube(
    size: int,
    rng: np.random.Generator | None = None,
    seed: int | None = None,
    length: int | None = None,
) -> CubeState:
    moves = scramble_moves(size, rng=rng, seed=seed, length=length)
    return apply_move_sequence(generate_solved_cube(size), moves)


def apply_move(state: CubeState, move: str) -> CubeState:
    """Return the state after one move. The input state is never modified.

    Raises:
        InvalidMoveError: if ``move`` is not a recognized token.
    """
    stickers = state.stickers
    for perm in move_permutations(state.size, normalize_token(move)):
        stickers = stickers[perm]
    return CubeState._from_trusted(state.size, stickers)


def apply_move_sequence(state: CubeState, moves: str | list[str] | tuple[str, ...]) -> CubeState:
    """Apply moves in order.

    Every token is validated before the first move is applied, so an invalid
    token raises InvalidMoveError without producing a partial result.
    """
    for move in parse_sequence(moves):
        state = apply_move(state, move)
    return state
