from __future__ import annotations

import argparse
import logging
import time
from typing import List, Optional

import uvicorn

from ..engine.game import STARTPOS, Game
from ..engine.perft import divide, perft


logger = logging.getLogger(__name__)

LOG_LEVELS = ["CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG"]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="raychess", description="Ray-cast chess rules engine")
    parser.add_argument(
        "--log-level",
        default="INFO",
        type=str.upper,
        choices=LOG_LEVELS,
        help="Logging level (default: INFO)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    serve = sub.add_parser("serve", help="Run the HTTP API")
    serve.add_argument("--host", default="0.0.0.0", help="Bind address (default: 0.0.0.0)")
    serve.add_argument("--port", type=int, default=8000, help="Port (default: 8000)")

    play = sub.add_parser("play", help="Play in the terminal")
    play.add_argument(
        "--position", default=STARTPOS, help="Placement and side, e.g. '4k3/8/8/8/8/8/8/4K3 w'"
    )
    play.add_argument("--no-color", action="store_true", help="Disable ANSI colours")

    pf = sub.add_parser("perft", help="Count leaf nodes of the legal move tree")
    pf.add_argument("--position", default=STARTPOS, help="Placement and side (default: startpos)")
    pf.add_argument("--depth", type=int, default=3, help="Perft depth (default: 3)")
    pf.add_argument("--divide", action="store_true", help="Print per-move counts")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level.upper())

    if args.command == "serve":
        uvicorn.run(
            "src.protocol.http.app:create_app",
            factory=True,
            host=args.host,
            port=args.port,
            log_level=args.log_level.lower(),
        )
        return 0

    try:
        game = Game.from_position(args.position)
    except ValueError as e:
        logger.error("invalid position: %s", e)
        return 2

    if args.command == "play":
        from ..protocol.terminal.loop import run_terminal

        run_terminal(game, color=not args.no_color)
        return 0

    if args.depth < 0:
        logger.error("depth must be >= 0")
        return 2
    start = time.perf_counter()
    if args.divide and args.depth >= 1:
        counts = divide(game, args.depth)
        for mv in sorted(counts):
            print(f"{mv}: {counts[mv]}")
        nodes = sum(counts.values())
    else:
        nodes = perft(game, args.depth)
    dt = time.perf_counter() - start
    print(f"nodes={nodes} depth={args.depth} time_ms={int(dt*1000)} nps={int(nodes/max(dt,1e-9))}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
