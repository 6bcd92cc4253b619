"""HTTP API server exposing a CubeSession to a renderer."""

from __future__ import annotations

import asyncio
import json
import threading
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from typing import Any

from .errors import CubeError, StateValidationError
from .patterns import PATTERNS
from .session import CubeSession


def _optional_int(body: dict[str, Any], key: str) -> int | None:
    value = body.get(key)
    if value is not None and (isinstance(value, bool) or not isinstance(value, int)):
        raise StateValidationError(f"{key} must be an integer or null")
    return value


class CubeHTTPServer:
    def __init__(
        self,
        session: CubeSession,
        host: str = "127.0.0.1",
        port: int = 8000,
        mode: str = "headless",
    ):
        self.session = session
        self.mode = mode
        self._lock = threading.RLock()

        handler_cls = self._build_handler()
        self.httpd = ThreadingHTTPServer((host, port), handler_cls)
        self.host, self.port = self.httpd.server_address[:2]

    def _build_handler(self):
        parent = self

        class Handler(BaseHTTPRequestHandler):
            server_version = "RubikEngine/1.0"

            def log_message(self, fmt: str, *args):
                return

            def _send_json(self, code: int, payload: dict[str, Any]):
                body = json.dumps(payload).encode("utf-8")
                self.send_response(code)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                self.wfile.write(body)

            def _read_json(self) -> dict[str, Any]:
                length = int(self.headers.get("Content-Length", "0"))
                if length == 0:
                    return {}
                data = self.rfile.read(length)
                try:
                    obj = json.loads(data.decode("utf-8"))
                except json.JSONDecodeError as exc:
                    raise StateValidationError(f"Invalid JSON body: {exc}") from exc
                if not isinstance(obj, dict):
                    raise StateValidationError("JSON body must be an object")
                return obj

            def do_GET(self):
                session = parent.session
                with parent._lock:
                    if self.path == "/health":
                        self._send_json(
                            200,
                            {"mode": parent.mode, "cube_size": session.size, "ready": True},
                        )
                        return

                    if self.path == "/state":
                        self._send_json(200, session.payload())
                        return

                    if self.path == "/solved":
                        self._send_json(200, {"solved": session.is_solved()})
                        return

                    if self.path == "/strategies":
                        infos = session.registry.available()
                        self._send_json(
                            200, {"strategies": {k: v.to_dict() for k, v in infos.items()}}
                        )
                        return

                    if self.path == "/patterns":
                        self._send_json(
                            200,
                            {
                                "patterns": {
                                    key: {
                                        "name": p.name,
                                        "description": p.description,
                                        "moves": list(p.moves),
                                        "difficulty": p.difficulty,
                                        "category": p.category,
                                    }
                                    for key, p in PATTERNS.items()
                                }
                            },
                        )
                        return

                self._send_json(404, {"error": "Not Found"})

            def do_POST(self):
                session = parent.session
                try:
                    body = self._read_json()
                    with parent._lock:
                        if self.path == "/reset":
                            session.reset(size=body.get("size"))
                            self._send_json(200, session.payload())
                            return

                        if self.path == "/scramble":
                            length = _optional_int(body, "length")
                            seed = _optional_int(body, "seed")
                            moves = session.scramble(length=length, seed=seed)
                            out = session.payload()
                            out["moves"] = moves
                            self._send_json(200, out)
                            return

                        if self.path == "/move":
                            if "move" in body:
                                session.apply(body["move"])
                            elif "moves" in body:
                                session.apply_sequence(body["moves"])
                            else:
                                raise StateValidationError("Missing required field: move or moves")
                            self._send_json(200, session.payload())
                            return

                        if self.path == "/undo":
                            undone = session.undo()
                            out = session.payload()
                            out["undone"] = undone
                            self._send_json(200, out)
                            return

                        if self.path == "/pattern":
                            if not isinstance(body.get("name"), str):
                                raise StateValidationError("Missing required field: name")
                            pattern = session.apply_pattern(body["name"])
                            out = session.payload()
                            out["pattern"] = pattern.key
                            self._send_json(200, out)
                            return

                        for path, control in (
                            ("/skip", session.skip_to_end),
                            ("/pause", session.pause),
                            ("/resume", session.resume),
                        ):
                            if self.path == path:
                                accepted = control()
                                out = session.payload()
                                out["accepted"] = accepted
                                self._send_json(200, out)
                                return

                    # Solve runs outside the server lock; the session locks its own state.
                    if self.path == "/solve":
                        strategy = body.get("strategy")
                        if strategy is not None and not isinstance(strategy, str):
                            raise StateValidationError("strategy must be a string or null")
                        result = asyncio.run(session.solve(strategy))
                        out = session.payload()
                        out["moves"] = result.moves
                        out["strategy"] = result.strategy
                        out["elapsed_s"] = result.elapsed_s
                        self._send_json(200, out)
                        return

                except (CubeError, TypeError) as exc:
                    self._send_json(400, {"error": str(exc)})
                    return

                self._send_json(404, {"error": "Not Found"})

        return Handler

    def serve_forever(self):
        self.httpd.serve_forever()

    def start_background(self, daemon: bool = True) -> threading.Thread:
        thread = threading.Thread(target=self.serve_forever, daemon=daemon)
        thread.start()
        return thread

    def shutdown(self):
        self.httpd.shutdown()
        self.httpd.server_close()
