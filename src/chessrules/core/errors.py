"""Exception taxonomy for the rules engine."""

from __future__ import annotations


class ChessRulesError(Exception):
    """Base class for every error raised by this package."""


class ParseError(ChessRulesError, ValueError):
    """Malformed FEN input. The load that raised it changed nothing."""


class IllegalMoveRequest(ChessRulesError, ValueError):
    """A caller asked to play a move that is not in the legal set."""

    def __init__(self, move: object, reason: str = "not a legal move") -> None:
        super().__init__(f"Illegal move {move}: {reason}")
        self.move = move
        self.reason = reason


class InvariantViolation(ChessRulesError, RuntimeError):
    """Position bookkeeping is inconsistent with the requested operation.

    Raised when a caller bypassed the legality filter, e.g. executing a
    move whose piece id is not on the board.
    """
