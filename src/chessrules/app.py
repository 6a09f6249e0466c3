"""Command-line entry point: play a sequence of moves and print the outcome."""

from __future__ import annotations

import argparse
import logging
import sys

from chessrules.core.errors import ChessRulesError
from chessrules.core.notation import STARTING_FEN, position_to_fen
from chessrules.game.controller import GameController


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chessrules-play",
        description="Play coordinate moves (e2e4, e7e8n) from a FEN position.",
    )
    parser.add_argument("moves", nargs="*", help="moves in coordinate form")
    parser.add_argument("--fen", default=STARTING_FEN, help="starting position")
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    return parser


def main(argv: list[str] | None = None) -> int:
    """Run the command line; returns the process exit status."""
    args = _build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    ctrl = GameController()
    try:
        ctrl.load_position(args.fen)
        for ply, text in enumerate(args.moves):
            record = ctrl.play_uci(text)
            prefix = f"{ply // 2 + 1}." if ply % 2 == 0 else ""
            print(f"{prefix:<5}{record.notation:<16}{record.san}")
    except ChessRulesError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1

    obs = ctrl.observation()
    print(position_to_fen(ctrl.state.position))
    if obs.game_over:
        print(f"{obs.terminal_reason} {obs.result}")
    else:
        print(f"{obs.turn} to move{' (check)' if obs.in_check else ''}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
