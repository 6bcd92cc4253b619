"""Pluggable solve strategies.

A strategy receives a cube state and returns an ordered list of moves; the
session applies them one at a time. The engine has no opinion on how the
moves are found. Each strategy carries display metadata (complexity labels,
steps, pros and cons) that only front-ends read.
"""

from __future__ import annotations

import asyncio
import threading
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Callable

import numpy as np

from .errors import CubeError
from .engine import apply_move_sequence
from .moves import MOVES, N_FACES, invert_sequence, move_permutations, parse_sequence
from .solved_check import is_solved
from .state_codec import CubeState

ShouldCancelCallback = Callable[[], bool]
MoveTrailSource = Callable[[], "list[str] | None"]


class SolveError(CubeError):
    """Raised when a strategy cannot produce a solution."""


class UnknownStrategyError(SolveError):
    """Raised when a strategy key is not registered."""


@dataclass(frozen=True)
class StrategyStep:
    name: str
    description: str
    moves: tuple[str, ...] = ()


@dataclass(frozen=True)
class StrategyInfo:
    name: str
    description: str
    time_complexity: str
    space_complexity: str
    type: str
    difficulty: str
    steps: tuple[StrategyStep, ...] = ()
    advantages: tuple[str, ...] = ()
    disadvantages: tuple[str, ...] = ()
    complexity_explanation: str = ""
    best_for: str = ""

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "description": self.description,
            "time_complexity": self.time_complexity,
            "space_complexity": self.space_complexity,
            "type": self.type,
            "difficulty": self.difficulty,
            "steps": [
                {"name": s.name, "description": s.description, "moves": list(s.moves)}
                for s in self.steps
            ],
            "advantages": list(self.advantages),
            "disadvantages": list(self.disadvantages),
            "complexity_explanation": self.complexity_explanation,
            "best_for": self.best_for,
        }


@dataclass
class SolveResult:
    moves: list[str]
    strategy: str = ""
    elapsed_s: float = 0.0
    metadata: dict = field(default_factory=dict)


class SolveStrategy(ABC):
    info: StrategyInfo

    @abstractmethod
    async def solve(self, state: CubeState, size: int) -> SolveResult:
        """Return a finite move list for ``state``. Must not mutate ``state``."""


def _search_solution(
    state: CubeState,
    max_depth: int,
    should_cancel: ShouldCancelCallback | None = None,
) -> list[str] | None:
    """Iterative-deepening DFS over the 18 face moves.

    Prunes consecutive turns of the same face and states already visited on
    the current path. Returns [] for a solved cube and None when nothing is
    found within ``max_depth`` (or the search was cancelled).
    """
    if is_solved(state):
        return []

    size = state.size
    perms = {m: move_permutations(size, m) for m in MOVES}
    start = state.stickers

    def solved(arr: np.ndarray) -> bool:
        faces = arr.reshape(N_FACES, -1)
        return bool(np.all(faces == faces[:, :1]))

    def dfs(arr: np.ndarray, remaining: int, path: list[str], seen: set[bytes]) -> list[str] | None:
        if should_cancel is not None and should_cancel():
            return None
        if solved(arr):
            return list(path)
        if remaining == 0:
            return None

        last = path[-1] if path else None
        for mv in MOVES:
            if last is not None and mv[0] == last[0]:
                continue

            child = arr
            for perm in perms[mv]:
                child = child[perm]
            key = child.tobytes()
            if key in seen:
                continue

            path.append(mv)
            seen.add(key)
            ans = dfs(child, remaining - 1, path, seen)
            if ans is not None:
                return ans
            seen.remove(key)
            path.pop()
        return None

    for depth_limit in range(1, max_depth + 1):
        if should_cancel is not None and should_cancel():
            return None
        res = dfs(start, depth_limit, [], {start.tobytes()})
        if res is not None:
            return res
    return None


class IterativeDeepeningStrategy(SolveStrategy):
    """Exhaustive shortest-first search, practical for short scrambles."""

    def __init__(self, info: StrategyInfo, max_depth: int = 5):
        if max_depth < 0:
            raise ValueError("max_depth must be >= 0")
        self.info = info
        self.max_depth = max_depth

    async def solve(self, state: CubeState, size: int) -> SolveResult:
        if size != state.size:
            raise SolveError(f"Requested size {size} does not match state size {state.size}")

        loop = asyncio.get_running_loop()
        started = loop.time()
        cancelled = threading.Event()
        try:
            moves = await asyncio.to_thread(
                _search_solution, state, self.max_depth, cancelled.is_set
            )
        except asyncio.CancelledError:
            # The worker thread cannot be interrupted; ask it to stop early.
            cancelled.set()
            raise
        if moves is None:
            raise SolveError(f"{self.info.name}: no solution within {self.max_depth} moves")
        return SolveResult(
            moves=moves,
            strategy=self.info.name,
            elapsed_s=loop.time() - started,
            metadata={"method": "search"},
        )


_QUARTERS = {"": 1, "2": 2, "'": 3}
_MODIFIER_FOR = {1: "", 2: "2", 3: "'"}


def simplify_moves(moves: str | list[str] | tuple[str, ...]) -> list[str]:
    """Merge consecutive turns of the same face and drop those that cancel out.

    ``R U U' R2`` becomes ``R'``.
    """
    out: list[tuple[str, int]] = []
    for tok in parse_sequence(moves):
        letter, quarters = tok[0], _QUARTERS[tok[1:]]
        if out and out[-1][0] == letter:
            quarters = (out.pop()[1] + quarters) % 4
            if quarters == 0:
                continue
        out.append((letter, quarters))
    return [letter + _MODIFIER_FOR[q] for letter, q in out]


class TrailReversalStrategy(SolveStrategy):
    """Undo the recorded moves that led from a solved cube to ``state``.

    ``trail`` returns those moves, or None when the state did not come from a
    known solved cube. Without a usable trail the fallback strategy runs.
    """

    def __init__(
        self,
        info: StrategyInfo,
        trail: MoveTrailSource,
        fallback: SolveStrategy | None = None,
    ):
        self.info = info
        self.trail = trail
        self.fallback = fallback

    async def solve(self, state: CubeState, size: int) -> SolveResult:
        if size != state.size:
            raise SolveError(f"Requested size {size} does not match state size {state.size}")

        loop = asyncio.get_running_loop()
        started = loop.time()
        recorded = self.trail()
        if recorded is not None:
            moves = simplify_moves(invert_sequence(recorded))
            if is_solved(apply_move_sequence(state, moves)):
                return SolveResult(
                    moves=moves,
                    strategy=self.info.name,
                    elapsed_s=loop.time() - started,
                    metadata={"method": "trail"},
                )

        if self.fallback is None:
            raise SolveError(f"{self.info.name}: no recorded moves lead back to a solved cube")
        return await self.fallback.solve(state, size)

TWO_PHASE_INFO = StrategyInfo(
    name="Advanced Two-Phase Algorithm",
    description=(
        "Computer-optimized algorithm that solves any cube in two phases with minimal "
        "moves, inspired by Kociemba's method."
    ),
    time_complexity="O(1) - bounded by 20 moves",
    space_complexity="O(1)",
    type="Computer Algorithm",
    difficulty="Advanced",
    steps=(
        StrategyStep(
            "Phase 1: Reduction to G1 Subgroup",
            "Orient all edges and position corners to reduce cube to a smaller subgroup",
        ),
        StrategyStep(
            "Phase 2: Solve within G1",
            "Complete the solve using only moves that preserve the G1 subgroup properties",
        ),
    ),
    advantages=(
        "Guaranteed optimal or near-optimal solutions (<=20 moves)",
        "Extremely fast computation",
        "Mathematically proven approach",
        "Consistent performance",
    ),
    disadvantages=(
        "Complex implementation",
        "Requires lookup tables",
        "Not intuitive for humans",
        "Memory intensive",
    ),
    complexity_explanation=(
        "Bounded by God's Number (20 moves maximum for 3x3). Uses precomputed lookup "
        "tables to guarantee short solutions."
    ),
    best_for="Computer solving and finding the absolute shortest solutions",
)

LAYER_BY_LAYER_INFO = StrategyInfo(
    name="Layer-by-Layer (Beginner's Method)",
    description=(
        "The most intuitive method that solves the cube layer by layer, starting from the bottom."
    ),
    time_complexity="O(n³)",
    space_complexity="O(1)",
    type="Layer-based",
    difficulty="Beginner",
    steps=(
        StrategyStep("White Cross", "Form a cross on the bottom layer with white center", ("F", "R", "U", "R'", "U'", "F'")),
        StrategyStep("White Corners", "Position and orient the white corner pieces", ("R", "U", "R'", "U'")),
        StrategyStep("Middle Layer", "Solve the middle layer edge pieces", ("U", "R", "U'", "R'", "U'", "F'", "U", "F")),
        StrategyStep("Yellow Cross", "Form a cross on the top layer", ("F", "R", "U", "R'", "U'", "F'")),
        StrategyStep("Yellow Corners", "Orient the yellow corner pieces", ("R", "U", "R'", "U", "R", "U2", "R'")),
        StrategyStep("Final Layer", "Position the final layer pieces correctly", ("R'", "F", "R'", "B2", "R", "F'", "R'", "B2", "R2")),
    ),
    advantages=(
        "Easy to learn and understand",
        "Intuitive approach",
        "Good for beginners",
        "Teaches fundamental concepts",
    ),
    disadvantages=(
        "Relatively slow (60-120 moves average)",
        "Not optimal for speedcubing",
        "Many algorithm sequences to memorize",
    ),
    complexity_explanation=(
        "Each layer requires checking and potentially moving every piece, and there are "
        "multiple layers to solve sequentially."
    ),
    best_for="Beginners learning to solve the cube for the first time",
)

CFOP_INFO = StrategyInfo(
    name="CFOP (Cross, F2L, OLL, PLL)",
    description="The most popular speedcubing method used by world record holders.",
    time_complexity="O(n²)",
    space_complexity="O(1)",
    type="Layer-based + Look-ahead",
    difficulty="Advanced",
    steps=(
        StrategyStep("Cross", "Form a cross on the bottom layer in 8 moves or less"),
        StrategyStep("F2L (First Two Layers)", "Solve corner-edge pairs simultaneously"),
        StrategyStep("OLL (Orientation of Last Layer)", "Orient all pieces on the last layer"),
        StrategyStep("PLL (Permutation of Last Layer)", "Permute the last layer pieces to solve the cube"),
    ),
    advantages=(
        "Very fast (20-60 moves average)",
        "Most popular method among speedcubers",
        "Excellent for competitive solving",
        "Well-developed fingertricks",
    ),
    disadvantages=(
        "78 algorithms to memorize",
        "Difficult learning curve",
        "Requires extensive practice",
        "Recognition training needed",
    ),
    complexity_explanation=(
        "Efficient pattern recognition and optimized move sequences reduce redundant operations."
    ),
    best_for="Speedcubers aiming for sub-20 second solves",
)


class StrategyRegistry:
    """Strategies by key. Each session owns one, so nothing is shared globally."""

    def __init__(self, strategies: dict[str, SolveStrategy] | None = None):
        self._strategies: dict[str, SolveStrategy] = {}
        for key, strategy in (strategies or {}).items():
            self.register(key, strategy)

    def register(self, key: str, strategy: SolveStrategy) -> None:
        if not isinstance(strategy, SolveStrategy):
            raise TypeError("strategy must be a SolveStrategy")
        self._strategies[key] = strategy

    def get(self, key: str) -> SolveStrategy:
        try:
            return self._strategies[key]
        except KeyError:
            raise UnknownStrategyError(f"Unknown strategy: {key!r}") from None

    def available(self) -> dict[str, StrategyInfo]:
        return {key: s.info for key, s in self._strategies.items()}

    def __contains__(self, key: object) -> bool:
        return key in self._strategies


def default_registry(max_depth: int = 5, trail: MoveTrailSource | None = None) -> StrategyRegistry:
    """The three named strategies.

    With ``trail`` each one first reverses the recorded moves and searches
    only when that is not possible; without it they only search.
    """
    strategies: dict[str, SolveStrategy] = {}
    for key, info in (
        ("two-phase", TWO_PHASE_INFO),
        ("layer-by-layer", LAYER_BY_LAYER_INFO),
        ("cfop", CFOP_INFO),
    ):
        search = IterativeDeepeningStrategy(info, max_depth=max_depth)
        strategies[key] = search if trail is None else TrailReversalStrategy(info, trail, fallback=search)
    return StrategyRegistry(strategies)
