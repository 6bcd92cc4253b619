"""Stateful cube session driven by a front-end."""

from __future__ import annotations

import asyncio
import inspect
import threading
from typing import Any, Awaitable, Callable

import numpy as np

from .config import EngineConfig
from .engine import apply_move, apply_move_sequence, generate_solved_cube, scramble_moves
from .errors import CubeError
from .moves import invert, normalize_token, parse_sequence
from .patterns import ScramblePattern, apply_pattern, get_pattern
from .solved_check import is_solved
from .solvers import SolveResult, SolveStrategy, StrategyRegistry, UnknownStrategyError, default_registry
from .state_codec import CubeState, state_to_dict, validate_size

OnMoveCallback = Callable[[str, CubeState], "Awaitable[Any] | None"]


class SessionBusyError(CubeError):
    """Raised when the session is changed while a solve is being played back."""


class CubeSession:
    """Current cube of one front-end, with move history and solve playback.

    Every change replaces ``state`` with a new CubeState. Moves are applied
    one at a time; while ``solve`` is running, other mutating calls raise
    SessionBusyError. Methods may be called from several threads.

    The session records every move since the last known solved cube (the
    trail). The default strategies reverse it, so any cube the session
    scrambled itself can be solved regardless of scramble length.
    """

    def __init__(
        self,
        size: int | None = None,
        state: CubeState | None = None,
        config: EngineConfig | None = None,
        registry: StrategyRegistry | None = None,
        rng: np.random.Generator | None = None,
    ):
        self.config = config or EngineConfig()
        self.registry = registry or default_registry(
            self.config.max_search_depth, trail=self.moves_from_solved
        )
        self._rng = rng or np.random.default_rng()
        self._lock = threading.RLock()

        if state is not None:
            if size is not None and validate_size(size) != state.size:
                raise CubeError(f"size={size} does not match state size {state.size}")
            self._state = state
            self._trail: list[str] | None = [] if is_solved(state) else None
        else:
            self._state = generate_solved_cube(self.config.default_size if size is None else size)
            self._trail = []

        self.history: list[str] = []
        self.step_count = 0
        self.last_solution: SolveResult | None = None
        self._solving = False
        self._skip_requested = False
        self._paused = False
        self._loop: asyncio.AbstractEventLoop | None = None
        self._unpaused: asyncio.Event | None = None

    @property
    def state(self) -> CubeState:
        return self._state

    @property
    def size(self) -> int:
        return self._state.size

    @property
    def solving(self) -> bool:
        return self._solving

    @property
    def paused(self) -> bool:
        return self._paused

    def is_solved(self) -> bool:
        return is_solved(self._state)

    def moves_from_solved(self) -> list[str] | None:
        """Moves that turn a solved cube into the current state, if known."""
        with self._lock:
            return None if self._trail is None else list(self._trail)

    def _ensure_idle(self) -> None:
        if self._solving:
            raise SessionBusyError("A solve is in progress")

    def _replace(self, state: CubeState, trail: list[str]) -> CubeState:
        self._state = state
        self._trail = list(trail)
        self.history = []
        self.step_count = 0
        self.last_solution = None
        return state

    def reset(self, size: int | None = None) -> CubeState:
        with self._lock:
            self._ensure_idle()
            return self._replace(generate_solved_cube(self.size if size is None else size), [])

    def resize(self, size: int, seed: int | None = None) -> CubeState:
        """Switch to a new scrambled cube of another size."""
        with self._lock:
            self._ensure_idle()
            size = validate_size(size)
            moves = self._scramble_moves(size, None, seed)
            return self._replace(apply_move_sequence(generate_solved_cube(size), moves), moves)

    def _scramble_moves(self, size: int, length: int | None, seed: int | None) -> list[str]:
        rng = np.random.default_rng(seed) if seed is not None else self._rng
        if length is None:
            length = self.config.scramble_length(size)
        return scramble_moves(size, rng=rng, length=length)

    def scramble(self, length: int | None = None, seed: int | None = None) -> list[str]:
        """Replace the cube with a fresh scramble; returns the scramble moves."""
        with self._lock:
            self._ensure_idle()
            moves = self._scramble_moves(self.size, length, seed)
            self._replace(apply_move_sequence(generate_solved_cube(self.size), moves), moves)
            return moves

    def apply_pattern(self, pattern: ScramblePattern | str) -> ScramblePattern:
        with self._lock:
            self._ensure_idle()
            if not isinstance(pattern, ScramblePattern):
                pattern = get_pattern(pattern)
            self._replace(apply_pattern(pattern, self.size), list(pattern.moves))
            return pattern

    def apply(self, move: str) -> CubeState:
        with self._lock:
            self._ensure_idle()
            tok = normalize_token(move)
            self._state = apply_move(self._state, tok)
            self.history.append(tok)
            if self._trail is not None:
                self._trail.append(tok)
            self.step_count += 1
            return self._state

    def apply_sequence(self, moves: str | list[str]) -> CubeState:
        """Apply several moves; nothing changes if any token is invalid."""
        with self._lock:
            self._ensure_idle()
            tokens = parse_sequence(moves)
            self._state = apply_move_sequence(self._state, tokens)
            self.history.extend(tokens)
            if self._trail is not None:
                self._trail.extend(tokens)
            self.step_count += len(tokens)
            return self._state

    def undo(self) -> str | None:
        """Revert the last history move. Returns it, or None if history is empty."""
        with self._lock:
            self._ensure_idle()
            if not self.history:
                return None
            last = self.history.pop()
            # History is always a suffix of the trail.
            if self._trail:
                self._trail.pop()
            self._state = apply_move(self._state, invert(last))
            self.step_count += 1
            return last

    def _resolve_strategy(self, strategy: SolveStrategy | str | None) -> SolveStrategy:
        if strategy is None:
            strategy = self.config.default_strategy
        if isinstance(strategy, str):
            return self.registry.get(strategy)
        if isinstance(strategy, SolveStrategy):
            return strategy
        raise UnknownStrategyError(
            f"Strategy must be a key or a SolveStrategy, got {type(strategy).__name__}"
        )

    async def _wait_while_paused(self) -> None:
        while self._paused and not self._skip_requested:
            self._unpaused.clear()
            await self._unpaused.wait()

    def _wake(self) -> None:
        if self._loop is not None and self._unpaused is not None:
            self._loop.call_soon_threadsafe(self._unpaused.set)

    async def solve(
        self,
        strategy: SolveStrategy | str | None = None,
        on_move: OnMoveCallback | None = None,
    ) -> SolveResult:
        """Ask a strategy for moves, then play them back one at a time.

        ``on_move(move, state)`` is called after each move and awaited when it
        returns an awaitable; it is where a renderer animates the turn. If the
        strategy raises, the error propagates and the state is left untouched.
        Playback can be paused, resumed or skipped from any thread.
        """
        with self._lock:
            self._ensure_idle()
            solver = self._resolve_strategy(strategy)
            self._solving = True
            self._skip_requested = False
            self._paused = False
            self._loop = asyncio.get_running_loop()
            self._unpaused = asyncio.Event()
            start = self._state

        try:
            result = await solver.solve(start, start.size)
            moves = parse_sequence(result.moves)
            delay = self.config.move_delay_ms / 1000.0

            for i, move in enumerate(moves):
                await self._wait_while_paused()
                with self._lock:
                    if self._skip_requested:
                        self._state = apply_move_sequence(self._state, moves[i:])
                        self.step_count += len(moves) - i
                        break
                    self._state = apply_move(self._state, move)
                    self.step_count += 1
                    state = self._state

                if on_move is not None:
                    ret = on_move(move, state)
                    if inspect.isawaitable(ret):
                        await ret
                if delay > 0:
                    await asyncio.sleep(delay)

            with self._lock:
                if is_solved(self._state):
                    self._trail = []
                elif self._trail is not None:
                    self._trail.extend(moves)
                self.history = []
                self.last_solution = result
            return result
        finally:
            with self._lock:
                self._solving = False
                self._skip_requested = False
                self._paused = False
                self._loop = None
                self._unpaused = None

    def skip_to_end(self) -> bool:
        """Apply the rest of the running solve without playback.

        Returns False when no solve is in progress.
        """
        with self._lock:
            if not self._solving:
                return False
            self._skip_requested = True
            self._wake()
            return True

    def pause(self) -> bool:
        """Hold playback before the next move. False when no solve is running."""
        with self._lock:
            if not self._solving:
                return False
            self._paused = True
            return True

    def resume(self) -> bool:
        """Continue a paused playback. False when nothing is paused."""
        with self._lock:
            if not (self._solving and self._paused):
                return False
            self._paused = False
            self._wake()
            return True

    def payload(self) -> dict[str, Any]:
        with self._lock:
            return {
                "size": self.size,
                "state": state_to_dict(self._state),
                "solved": is_solved(self._state),
                "history": list(self.history),
                "step_count": self.step_count,
                "solving": self._solving,
                "paused": self._paused,
            }
