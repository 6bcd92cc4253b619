"""CLI entrypoint for the cube engine."""

from __future__ import annotations

import argparse
import asyncio
import json

from .config import load_config
from .engine import apply_move_sequence, generate_solved_cube
from .errors import CubeError
from .patterns import PATTERNS
from .server import CubeHTTPServer
from .session import CubeSession
from .solved_check import is_solved
from .state_codec import faces_to_letters, state_to_dict


def _print_state(state, as_json: bool) -> None:
    if as_json:
        print(json.dumps(state_to_dict(state)), flush=True)
        return
    for face, letters in faces_to_letters(state).items():
        print(f"{face:>6} {letters}", flush=True)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="N x N x N Rubik's cube engine")
    sub = parser.add_subparsers(dest="mode", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--config", type=str, default=None, help="YAML config file")
    common.add_argument("--size", type=int, default=None)
    common.add_argument("--json", action="store_true", help="Print the state as JSON")

    headless = sub.add_parser("headless", parents=[common], help="Run the HTTP API")
    headless.add_argument("--host", default=None)
    headless.add_argument("--port", type=int, default=None)
    headless.add_argument("--scramble", action="store_true", help="Start from a scrambled cube")

    scramble = sub.add_parser("scramble", parents=[common], help="Print a random scramble")
    scramble.add_argument("--length", type=int, default=None)
    scramble.add_argument("--seed", type=int, default=None)

    apply = sub.add_parser("apply", parents=[common], help="Apply moves to a solved cube")
    apply.add_argument("moves", help="Moves separated by spaces, e.g. \"R U R' U'\"")

    solve = sub.add_parser("solve", parents=[common], help="Scramble, then solve with a strategy")
    solve.add_argument("--strategy", default=None)
    solve.add_argument("--moves", default=None, help="Start from these moves instead of a random scramble")
    solve.add_argument("--length", type=int, default=None, help="Scramble length (default: per size from config)")
    solve.add_argument("--seed", type=int, default=None)

    sub.add_parser("patterns", help="List the pattern library")
    return parser


def _run_solve(session: CubeSession, args) -> int:
    if args.moves:
        session.apply_sequence(args.moves)
        print(f"start moves={args.moves}", flush=True)
    else:
        moves = session.scramble(length=args.length, seed=args.seed)
        print(f"scramble moves={' '.join(moves)}", flush=True)

    def on_move(move, state):
        print(f"step={session.step_count} move={move} solved={is_solved(state)}", flush=True)

    result = asyncio.run(session.solve(args.strategy, on_move=on_move))
    print(
        f"solve_done strategy={result.strategy!r} moves={len(result.moves)} "
        f"elapsed_s={result.elapsed_s:.3f} solved={session.is_solved()}",
        flush=True,
    )
    return 0 if session.is_solved() else 1


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.mode == "patterns":
        for key, p in PATTERNS.items():
            print(f"{key:<22} {p.category:<9} {p.difficulty:<7} {' '.join(p.moves)}", flush=True)
        return 0

    config = load_config(args.config)
    size = config.default_size if args.size is None else args.size

    try:
        if args.mode == "scramble":
            session = CubeSession(size=size, config=config)
            moves = session.scramble(length=args.length, seed=args.seed)
            print(f"scramble moves={' '.join(moves)}", flush=True)
            _print_state(session.state, args.json)
            return 0

        if args.mode == "apply":
            state = apply_move_sequence(generate_solved_cube(size), args.moves)
            _print_state(state, args.json)
            print(f"solved={is_solved(state)}", flush=True)
            return 0

        if args.mode == "solve":
            return _run_solve(CubeSession(size=size, config=config), args)

        if args.mode == "headless":
            session = CubeSession(size=size, config=config)
            if args.scramble:
                session.scramble()
            host = config.host if args.host is None else args.host
            port = config.port if args.port is None else args.port
            server = CubeHTTPServer(session=session, host=host, port=port, mode="headless")
            print(f"Cube engine listening on http://{server.host}:{server.port}", flush=True)
            try:
                server.serve_forever()
            except KeyboardInterrupt:
                pass
            finally:
                server.shutdown()
            return 0
    except CubeError as exc:
        print(f"error: {exc}", flush=True)
        return 2

    parser.error(f"Unsupported mode: {args.mode}")
    return 2


if __name__ == "__main__":
    raise SystemExit(main())
