import io
import json
import os
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout

from rubik_engine.cli import build_parser, main


def run_cli(*argv: str) -> tuple[int, str]:
    out = io.StringIO()
    with redirect_stdout(out):
        code = main(list(argv))
    return code, out.getvalue()


class TestCLI(unittest.TestCase):
    def test_parser_requires_mode(self):
        with redirect_stderr(io.StringIO()), self.assertRaises(SystemExit):
            build_parser().parse_args([])

    def test_apply_prints_faces(self):
        code, out = run_cli("apply", "R R'")
        self.assertEqual(code, 0)
        self.assertIn(" front WWWWWWWWW", out)
        self.assertIn("solved=True", out)

    def test_apply_json_on_2x2(self):
        code, out = run_cli("apply", "--size", "2", "--json", "U")
        self.assertEqual(code, 0)
        state = json.loads(out.splitlines()[0])
        self.assertEqual(state["size"], 2)
        self.assertEqual(state["faces"]["front"][:2], ["red", "red"])
        self.assertIn("solved=False", out)

    def test_invalid_move_exits_with_error(self):
        code, out = run_cli("apply", "R Q")
        self.assertEqual(code, 2)
        self.assertTrue(out.startswith("error: "))

    def test_scramble_is_seeded(self):
        code, first = run_cli("scramble", "--length", "8", "--seed", "4")
        self.assertEqual(code, 0)
        _, second = run_cli("scramble", "--length", "8", "--seed", "4")
        self.assertEqual(first, second)
        line = first.splitlines()[0]
        self.assertTrue(line.startswith("scramble moves="))
        self.assertEqual(len(line[len("scramble moves=") :].split()), 8)

    def test_solve_from_given_moves(self):
        code, out = run_cli("solve", "--moves", "R U", "--strategy", "cfop")
        self.assertEqual(code, 0)
        lines = out.splitlines()
        self.assertEqual(lines[0], "start moves=R U")
        self.assertEqual(sum(line.startswith("step=") for line in lines), 2)
        self.assertIn("solved=True", lines[-1])

    def test_solve_default_scramble(self):
        for size, length in (("2", 10), ("3", 25)):
            code, out = run_cli("solve", "--size", size, "--seed", "5")
            self.assertEqual(code, 0, msg=out)
            lines = out.splitlines()
            self.assertEqual(len(lines[0].split("=", 1)[1].split()), length)
            self.assertEqual(sum(line.startswith("step=") for line in lines), length)
            self.assertIn("solved=True", lines[-1])

    def test_unknown_strategy_exits_with_error(self):
        code, out = run_cli("solve", "--moves", "R", "--strategy", "random")
        self.assertEqual(code, 2)
        self.assertIn("Unknown strategy", out)

    def test_config_file_sets_size(self):
        fd, path = tempfile.mkstemp(suffix=".yaml")
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write("default_size: 2\n")
        self.addCleanup(os.remove, path)

        code, out = run_cli("apply", "--config", path, "--json", "F")
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out.splitlines()[0])["size"], 2)

    def test_patterns_listing(self):
        code, out = run_cli("patterns")
        self.assertEqual(code, 0)
        self.assertIn("checkerboard", out)
        self.assertIn("R2 L2 U2 D2 F2 B2", out)


if __name__ == "__main__":
    unittest.main()
