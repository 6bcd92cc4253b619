import asyncio
import unittest

from rubik_engine.engine import apply_move_sequence, generate_solved_cube, scramble_moves
from rubik_engine.solved_check import is_solved
from rubik_engine.solvers import (
    TWO_PHASE_INFO,
    IterativeDeepeningStrategy,
    SolveError,
    SolveResult,
    SolveStrategy,
    StrategyInfo,
    StrategyRegistry,
    TrailReversalStrategy,
    UnknownStrategyError,
    default_registry,
    simplify_moves,
)


class EchoStrategy(SolveStrategy):
    info = StrategyInfo("Echo", "Returns fixed moves", "O(1)", "O(1)", "Test", "Easy")

    def __init__(self, moves):
        self.moves = moves

    async def solve(self, state, size):
        return SolveResult(moves=list(self.moves), strategy=self.info.name)


class TestIterativeDeepening(unittest.TestCase):
    def test_solves_short_scrambles(self):
        strategy = IterativeDeepeningStrategy(TWO_PHASE_INFO, max_depth=3)
        for size, scramble in ((3, "R U"), (3, "F' D2 L"), (2, "R U'"), (4, "U R")):
            state = apply_move_sequence(generate_solved_cube(size), scramble)
            result = asyncio.run(strategy.solve(state, size))
            self.assertLessEqual(len(result.moves), len(scramble.split()))
            self.assertTrue(is_solved(apply_move_sequence(state, result.moves)), msg=scramble)
            self.assertEqual(result.strategy, TWO_PHASE_INFO.name)

    def test_does_not_mutate_input(self):
        state = apply_move_sequence(generate_solved_cube(3), "R U")
        snapshot = state.stickers.copy()
        asyncio.run(IterativeDeepeningStrategy(TWO_PHASE_INFO, max_depth=2).solve(state, 3))
        self.assertTrue((snapshot == state.stickers).all())

    def test_solved_cube_needs_no_moves(self):
        result = asyncio.run(
            IterativeDeepeningStrategy(TWO_PHASE_INFO).solve(generate_solved_cube(3), 3)
        )
        self.assertEqual(result.moves, [])

    def test_depth_limit_raises(self):
        state = apply_move_sequence(generate_solved_cube(3), "R U F")
        with self.assertRaises(SolveError):
            asyncio.run(IterativeDeepeningStrategy(TWO_PHASE_INFO, max_depth=1).solve(state, 3))

    def test_size_mismatch_raises(self):
        with self.assertRaises(SolveError):
            asyncio.run(IterativeDeepeningStrategy(TWO_PHASE_INFO).solve(generate_solved_cube(3), 2))


class TestRegistry(unittest.TestCase):
    def test_default_registry(self):
        registry = default_registry()
        infos = registry.available()
        self.assertEqual(set(infos), {"two-phase", "layer-by-layer", "cfop"})
        self.assertEqual(infos["cfop"].difficulty, "Advanced")
        self.assertEqual(len(infos["layer-by-layer"].steps), 6)
        self.assertIn("two-phase", registry)

    def test_unknown_strategy(self):
        with self.assertRaises(UnknownStrategyError):
            default_registry().get("random")

    def test_register_custom_strategy(self):
        registry = StrategyRegistry()
        registry.register("echo", EchoStrategy(["R"]))
        self.assertIsInstance(registry.get("echo"), EchoStrategy)
        with self.assertRaises(TypeError):
            registry.register("bad", object())

    def test_info_to_dict(self):
        out = TWO_PHASE_INFO.to_dict()
        self.assertEqual(out["name"], "Advanced Two-Phase Algorithm")
        self.assertEqual(len(out["steps"]), 2)
        self.assertIsInstance(out["advantages"], list)

    def test_registry_with_trail_reverses_moves(self):
        trail = scramble_moves(3, seed=5)
        registry = default_registry(max_depth=2, trail=lambda: trail)
        state = apply_move_sequence(generate_solved_cube(3), trail)
        for key in ("two-phase", "layer-by-layer", "cfop"):
            result = asyncio.run(registry.get(key).solve(state, 3))
            self.assertTrue(is_solved(apply_move_sequence(state, result.moves)), msg=key)
            self.assertEqual(result.metadata["method"], "trail")


class TestSimplifyMoves(unittest.TestCase):
    def test_merges_and_cancels_same_face_turns(self):
        self.assertEqual(simplify_moves("R U U' R2"), ["R'"])
        self.assertEqual(simplify_moves(["F", "F"]), ["F2"])
        self.assertEqual(simplify_moves("F2 F'"), ["F"])
        self.assertEqual(simplify_moves("L L'"), [])
        self.assertEqual(simplify_moves("R L R"), ["R", "L", "R"])

    def test_result_has_the_same_effect(self):
        moves = "U U R R' R2 D D2 F' F B"
        state = generate_solved_cube(3)
        self.assertEqual(
            apply_move_sequence(state, moves),
            apply_move_sequence(state, simplify_moves(moves)),
        )


class TestTrailReversal(unittest.TestCase):
    def _state(self, moves, size=3):
        return apply_move_sequence(generate_solved_cube(size), moves)

    def test_reverses_a_long_scramble(self):
        trail = scramble_moves(4, seed=21)
        strategy = TrailReversalStrategy(TWO_PHASE_INFO, lambda: trail)
        state = self._state(trail, size=4)
        result = asyncio.run(strategy.solve(state, 4))
        self.assertEqual(len(result.moves), len(trail))
        self.assertTrue(is_solved(apply_move_sequence(state, result.moves)))
        self.assertEqual(result.strategy, TWO_PHASE_INFO.name)

    def test_unknown_trail_uses_fallback(self):
        fallback = IterativeDeepeningStrategy(TWO_PHASE_INFO, max_depth=2)
        strategy = TrailReversalStrategy(TWO_PHASE_INFO, lambda: None, fallback=fallback)
        state = self._state("R U")
        result = asyncio.run(strategy.solve(state, 3))
        self.assertEqual(result.metadata["method"], "search")
        self.assertTrue(is_solved(apply_move_sequence(state, result.moves)))

    def test_trail_that_does_not_match_uses_fallback(self):
        strategy = TrailReversalStrategy(TWO_PHASE_INFO, lambda: ["F"], fallback=EchoStrategy(["U'"]))
        result = asyncio.run(strategy.solve(self._state("U"), 3))
        self.assertEqual(result.moves, ["U'"])

    def test_without_fallback_raises(self):
        strategy = TrailReversalStrategy(TWO_PHASE_INFO, lambda: None)
        with self.assertRaises(SolveError):
            asyncio.run(strategy.solve(self._state("R"), 3))

    def test_size_mismatch_raises(self):
        strategy = TrailReversalStrategy(TWO_PHASE_INFO, lambda: [])
        with self.assertRaises(SolveError):
            asyncio.run(strategy.solve(generate_solved_cube(3), 2))


if __name__ == "__main__":
    unittest.main()
