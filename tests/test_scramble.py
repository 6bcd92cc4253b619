import unittest

import numpy as np

from rubik_engine.engine import (
    apply_move_sequence,
    default_scramble_length,
    generate_scrambled_cube,
    generate_solved_cube,
    scramble_moves,
)
from rubik_engine.errors import CubeError, ScrambleLengthError
from rubik_engine.moves import MOVES, invert_sequence
from rubik_engine.solved_check import is_solved


class TestScramble(unittest.TestCase):
    def test_scramble_is_deterministic_for_fixed_seed(self):
        s1 = generate_scrambled_cube(3, seed=123)
        s2 = generate_scrambled_cube(3, seed=123)
        self.assertEqual(s1, s2)
        self.assertEqual(scramble_moves(3, seed=7), scramble_moves(3, seed=7))

    def test_injected_generator_is_used(self):
        a = scramble_moves(3, rng=np.random.default_rng(42))
        b = scramble_moves(3, rng=np.random.default_rng(42))
        self.assertEqual(a, b)

    def test_scrambled_cube_is_not_solved(self):
        for seed in range(30):
            self.assertFalse(is_solved(generate_scrambled_cube(3, seed=seed)), msg=f"seed={seed}")

    def test_default_lengths_scale_with_size(self):
        self.assertEqual(len(scramble_moves(2, seed=0)), 10)
        self.assertEqual(len(scramble_moves(3, seed=0)), 25)
        self.assertEqual(len(scramble_moves(4, seed=0)), 35)
        self.assertEqual(default_scramble_length(5), 50)
        self.assertEqual(len(scramble_moves(3, seed=0, length=7)), 7)

    def test_scramble_never_repeats_a_face(self):
        moves = scramble_moves(3, seed=99, length=300)
        self.assertTrue(all(m in MOVES for m in moves))
        for prev, nxt in zip(moves[:-1], moves[1:]):
            self.assertNotEqual(prev[0], nxt[0])

    def test_scramble_matches_its_moves_and_inverts(self):
        moves = scramble_moves(4, seed=11)
        scrambled = generate_scrambled_cube(4, seed=11)
        self.assertEqual(scrambled, apply_move_sequence(generate_solved_cube(4), moves))
        self.assertEqual(generate_solved_cube(4), apply_move_sequence(scrambled, invert_sequence(moves)))

    def test_bad_length_rejected(self):
        for length in (-1, True, 2.5, "10"):
            with self.assertRaises(ScrambleLengthError, msg=f"length={length!r}"):
                scramble_moves(3, length=length)

    def test_bad_length_is_a_cube_error(self):
        with self.assertRaises(CubeError):
            generate_scrambled_cube(2, length=-5)


if __name__ == "__main__":
    unittest.main()
