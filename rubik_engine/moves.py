"""Move alphabet and face-turn permutation tables for N x N x N cubes."""

from __future__ import annotations

from functools import lru_cache

import numpy as np

from .errors import InvalidMoveError

FACE_NAMES = ("front", "back", "left", "right", "top", "bottom")
FACE_INDEX = {face: i for i, face in enumerate(FACE_NAMES)}
N_FACES = len(FACE_NAMES)

FACE_LETTERS = {
    "F": "front",
    "B": "back",
    "L": "left",
    "R": "right",
    "U": "top",
    "D": "bottom",
}

MODIFIERS = ("", "'", "2")
MOVES = tuple(letter + mod for letter in "FBRLUD" for mod in MODIFIERS)
QUARTER_TURNS = tuple(m for m in MOVES if not m.endswith("2"))


# Neighbor strips of each face, listed clockwise around the face as seen from
# outside. Each strip is (face, edge, reversed): edge picks row 0 ("top"),
# row n-1 ("bottom"), col 0 ("left") or col n-1 ("right"); rows read left to
# right, columns top to bottom, flipped when reversed is True.
# A clockwise turn carries strip j into strip j+1 element by element.
ADJACENT_STRIPS = {
    "front": (
        ("top", "bottom", False),
        ("right", "left", False),
        ("bottom", "top", True),
        ("left", "right", True),
    ),
    "back": (
        ("top", "top", True),
        ("left", "left", False),
        ("bottom", "bottom", False),
        ("right", "right", True),
    ),
    "right": (
        ("top", "right", True),
        ("back", "left", False),
        ("bottom", "right", True),
        ("front", "right", True),
    ),
    "left": (
        ("top", "left", False),
        ("front", "left", False),
        ("bottom", "left", False),
        ("back", "right", True),
    ),
    "top": (
        ("back", "top", False),
        ("right", "top", False),
        ("front", "top", False),
        ("left", "top", False),
    ),
    "bottom": (
        ("front", "bottom", False),
        ("right", "bottom", False),
        ("back", "bottom", False),
        ("left", "bottom", False),
    ),
}


def normalize_token(token: str) -> str:
    """Return the canonical spelling of a move token.

    Strips whitespace, reads typographic apostrophes as ``'`` and ``X2'`` as
    ``X2`` (a half turn is its own inverse).

    Raises:
        InvalidMoveError: if the token is not one of the 18 face moves.
    """
    if not isinstance(token, str):
        raise InvalidMoveError(f"Move must be a string, got {type(token).__name__}")

    tok = token.strip().replace("’", "'").replace("‘", "'")
    if tok.endswith("2'"):
        tok = tok[:-1]
    if tok not in MOVES:
        raise InvalidMoveError(f"Unrecognized move: {token!r}")
    return tok


def parse_move(token: str) -> tuple[str, str]:
    """Split a move token into (face name, modifier)."""
    tok = normalize_token(token)
    return FACE_LETTERS[tok[0]], tok[1:]


def parse_sequence(moves: str | list[str] | tuple[str, ...]) -> list[str]:
    """Normalize a whitespace-separated string or an iterable of tokens.

    The error for a bad token names its position in the sequence.
    """
    tokens = moves.split() if isinstance(moves, str) else list(moves)
    out: list[str] = []
    for pos, tok in enumerate(tokens):
        try:
            out.append(normalize_token(tok))
        except InvalidMoveError as exc:
            raise InvalidMoveError(f"{exc} at position {pos}") from exc
    return out


def invert(move: str) -> str:
    tok = normalize_token(move)
    if tok.endswith("'"):
        return tok[0]
    if tok.endswith("2"):
        return tok
    return tok + "'"


def invert_sequence(moves: str | list[str] | tuple[str, ...]) -> list[str]:
    return [invert(m) for m in reversed(parse_sequence(moves))]


def rotate_face(grid: np.ndarray, clockwise: bool) -> np.ndarray:
    """Rotate a square face grid by 90 degrees.

    Clockwise maps ``new[row][col] = old[size-1-col][row]``.
    """
    return np.rot90(grid, k=-1 if clockwise else 1)


def strip_positions(size: int, face: str, edge: str, reversed_: bool) -> np.ndarray:
    """Flat state indices of one border strip, in strip order."""
    base = FACE_INDEX[face] * size * size
    k = np.arange(size)
    if edge == "top":
        pos = base + k
    elif edge == "bottom":
        pos = base + (size - 1) * size + k
    elif edge == "left":
        pos = base + k * size
    elif edge == "right":
        pos = base + k * size + (size - 1)
    else:
        raise ValueError(f"Unknown edge: {edge}")
    return pos[::-1] if reversed_ else pos


@lru_cache(maxsize=None)
def quarter_turn_permutation(size: int, face: str, clockwise: bool) -> np.ndarray:
    """Gather permutation for a quarter turn: ``new_state = state[perm]``.

    Built from the face rotation rule plus the ADJACENT_STRIPS cycle, so all
    six faces share this one routine.
    """
    area = size * size
    perm = np.arange(N_FACES * area, dtype=np.intp)

    base = FACE_INDEX[face] * area
    local = np.arange(area, dtype=np.intp).reshape(size, size)
    perm[base : base + area] = base + rotate_face(local, clockwise).reshape(-1)

    strips = [strip_positions(size, *s) for s in ADJACENT_STRIPS[face]]
    step = 1 if clockwise else -1
    for j, src in enumerate(strips):
        dst = strips[(j + step) % 4]
        perm[dst] = src

    perm.flags.writeable = False
    return perm


def move_permutations(size: int, move: str) -> list[np.ndarray]:
    """Quarter-turn permutations that make up one move, in application order."""
    face, mod = parse_move(move)
    if mod == "2":
        cw = quarter_turn_permutation(size, face, True)
        return [cw, cw]
    return [quarter_turn_permutation(size, face, mod == "")]
