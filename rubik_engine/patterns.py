"""Named move sequences that produce well-known patterns from a solved cube."""

from __future__ import annotations

from dataclasses import dataclass

from .engine import apply_move_sequence, generate_solved_cube
from .errors import CubeError
from .state_codec import CubeState


class UnknownPatternError(CubeError):
    """Raised when a pattern key is not in the library."""


@dataclass(frozen=True)
class ScramblePattern:
    key: str
    name: str
    description: str
    moves: tuple[str, ...]
    difficulty: str  # Easy | Medium | Hard | Expert
    category: str  # Classic | Fun | Practice | Complex


def _pattern(key: str, name: str, description: str, moves: str, difficulty: str, category: str):
    return ScramblePattern(key, name, description, tuple(moves.split()), difficulty, category)


_PATTERN_LIST = [
    # Classic
    _pattern(
        "superflip",
        "Superflip",
        "The most famous cube pattern - all edges are flipped",
        "R U R' F R F' U2 R' U' R U R' F R2 U' R' U' R U R' F'",
        "Expert",
        "Classic",
    ),
    _pattern(
        "checkerboard",
        "Checkerboard",
        "Creates a checkerboard pattern on all faces",
        "R2 L2 U2 D2 F2 B2",
        "Easy",
        "Classic",
    ),
    _pattern(
        "cross",
        "Cross Pattern",
        "Creates a cross pattern on each face",
        "F B R L U D",
        "Easy",
        "Classic",
    ),
    # Fun
    _pattern(
        "cube_in_cube",
        "Cube in Cube",
        "Creates smaller cubes within the larger cube faces",
        "F L F U' R U F2 L2 U' L' B D' B' L2 U",
        "Hard",
        "Fun",
    ),
    _pattern(
        "flower",
        "Flower Pattern",
        "Creates flower-like patterns on the faces",
        "R U R' F R F' U R U2 R' U2 R",
        "Medium",
        "Fun",
    ),
    _pattern(
        "spiral",
        "Spiral",
        "Creates spiral patterns across the cube",
        "R U R' U R U2 R' L' U' L U' L' U2 L",
        "Medium",
        "Fun",
    ),
    _pattern(
        "six_dots",
        "Six Dots",
        "Creates dot patterns on each face center",
        "U D' R L' F B' U D'",
        "Easy",
        "Fun",
    ),
    _pattern(
        "stripes",
        "Stripes",
        "Creates striped patterns across faces",
        "F U F R L' F D' F U F L R' F",
        "Medium",
        "Fun",
    ),
    _pattern(
        "tetris",
        "Tetris",
        "Creates Tetris-like block patterns",
        "L R F B U D L R",
        "Easy",
        "Fun",
    ),
    _pattern(
        "gift_box",
        "Gift Box",
        "Makes the cube look like a wrapped gift",
        "F R U R' U' R U R' U' F'",
        "Medium",
        "Fun",
    ),
    # Practice
    _pattern(
        "easy_scramble",
        "Easy Scramble",
        "Simple scramble for beginners",
        "R U R' U' F U F'",
        "Easy",
        "Practice",
    ),
    _pattern(
        "medium_scramble",
        "Medium Scramble",
        "Moderate scramble for intermediate solvers",
        "R U2 R' D R U' R' D' R2 U R' U' R U' R'",
        "Medium",
        "Practice",
    ),
    _pattern(
        "hard_scramble",
        "Hard Scramble",
        "Challenging scramble for advanced solvers",
        "R U R' F R F' U2 R' U' R U R' F R F' U R U2 R' U2 R U' R'",
        "Hard",
        "Practice",
    ),
    _pattern(
        "competition_scramble",
        "Competition Scramble",
        "Official WCA-style scramble sequence",
        "D2 F U2 R2 D2 F D2 L2 F' R2 U2 R' B L D' U L D2 R' U'",
        "Expert",
        "Practice",
    ),
    # Complex
    _pattern(
        "anaconda",
        "Anaconda",
        "Creates snake-like patterns across the cube",
        "L U B' U' R L' B R' F B' D R D' F'",
        "Expert",
        "Complex",
    ),
    _pattern(
        "python",
        "Python",
        "Another snake-like pattern with different characteristics",
        "R U' R' U' F R F' U R U2 R' U2 R",
        "Hard",
        "Complex",
    ),
]

PATTERNS: dict[str, ScramblePattern] = {p.key: p for p in _PATTERN_LIST}


def get_pattern(key: str) -> ScramblePattern:
    try:
        return PATTERNS[key]
    except KeyError:
        raise UnknownPatternError(f"Unknown pattern: {key!r}") from None


def apply_pattern(pattern: ScramblePattern | str, size: int) -> CubeState:
    if isinstance(pattern, str):
        pattern = get_pattern(pattern)
    return apply_move_sequence(generate_solved_cube(size), pattern.moves)
