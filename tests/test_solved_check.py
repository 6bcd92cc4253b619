import unittest

import numpy as np

from rubik_engine.engine import apply_move, generate_solved_cube
from rubik_engine.solved_check import is_solved, is_solved_canonical
from rubik_engine.state_codec import CubeState


class TestSolvedCheck(unittest.TestCase):
    def test_solved_state_is_true(self):
        for size in (2, 3, 4, 5):
            state = generate_solved_cube(size)
            self.assertTrue(is_solved(state))
            self.assertTrue(is_solved_canonical(state))

    def test_single_turn_is_not_solved(self):
        self.assertFalse(is_solved(apply_move(generate_solved_cube(3), "R")))

    def test_recolored_uniform_faces_count_as_solved(self):
        # Swap the colors of front and back: every face is still uniform.
        area = 9
        stickers = generate_solved_cube(3).stickers.copy()
        stickers[:area], stickers[area : 2 * area] = 1, 0
        state = CubeState(3, stickers)
        self.assertTrue(is_solved(state))
        self.assertFalse(is_solved_canonical(state))

    def test_corrupted_state_is_false(self):
        stickers = generate_solved_cube(3).stickers.copy()
        stickers[0], stickers[9] = stickers[9], stickers[0]
        state = CubeState(3, stickers)
        self.assertFalse(is_solved(state))
        self.assertFalse(is_solved_canonical(state))

    def test_two_by_two_slice_pair_is_a_whole_cube_rotation(self):
        # On a 2x2, R followed by L' turns the whole cube.
        state = apply_move(apply_move(generate_solved_cube(2), "R"), "L'")
        self.assertTrue(is_solved(state))
        self.assertFalse(is_solved_canonical(state))
        self.assertFalse(np.array_equal(state.stickers, generate_solved_cube(2).stickers))


if __name__ == "__main__":
    unittest.main()
