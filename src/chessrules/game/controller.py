"""GameController — the boundary a rendering layer talks to.

Loads positions, answers legal-move queries, plays moves, and publishes
what changed through simple callbacks so the UI / tests can subscribe.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from dataclasses import dataclass, field

from chessrules.core.attacks import attackers_of, king_square
from chessrules.core.enums import (
    Color,
    GameResult,
    PieceType,
    TerminalReason,
    result_token,
)
from chessrules.core.errors import IllegalMoveRequest
from chessrules.core.executor import PromotionChooser
from chessrules.core.move import Move
from chessrules.core.notation import STARTING_FEN
from chessrules.core.position import Position
from chessrules.core.types import Square, parse_square
from chessrules.game.settings import GameSettings
from chessrules.game.state import GameState, MoveRecord

_LOGGER = logging.getLogger(__name__)

# ── Event definitions ────────────────────────────────────────────────────────

MoveCallback = Callable[[MoveRecord, "GameState"], None]
GameOverCallback = Callable[[GameResult, TerminalReason], None]
LoadCallback = Callable[[str], None]  # fen


@dataclass
class GameEvents:
    """Observable callbacks. Multiple handlers per event."""

    on_move: list[MoveCallback] = field(default_factory=list)
    on_game_over: list[GameOverCallback] = field(default_factory=list)
    on_position_loaded: list[LoadCallback] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class Observation:
    """What a renderer needs after every command."""

    turn: Color
    game_over: bool
    result: str | None
    terminal_reason: TerminalReason | None
    last_move: Move | None
    notation: str | None
    san: str | None
    checkers: tuple[Square, ...] = ()

    @property
    def in_check(self) -> bool:
        return bool(self.checkers)


def _checkers(position: Position) -> tuple[Square, ...]:
    # After a mating move the turn does not pass, so the checked king may
    # belong to either side.
    for color in (position.turn, position.turn.opposite):
        found = attackers_of(position, king_square(position, color), color.opposite)
        if found:
            return tuple(found)
    return ()


# ── Controller ───────────────────────────────────────────────────────────────


class GameController:
    """Owns one :class:`GameState` and validates every move against it.

    Thread-safety: every public method holds the controller lock, which
    outlives any one position, so a reader never sees the board in the
    middle of a tried-and-reverted move and a load never lands between a
    legality check and the move it approved. Separate controllers share
    nothing.
    """

    __slots__ = ("_state", "_settings", "_choose_promotion", "_lock", "events")

    def __init__(
        self,
        settings: GameSettings | None = None,
        choose_promotion: PromotionChooser | None = None,
    ) -> None:
        self._settings = settings or GameSettings()
        self._choose_promotion = choose_promotion or self._default_promotion
        self.events = GameEvents()
        self._lock = threading.RLock()
        self._state = GameState()
        self._state.setup(self._settings.start_fen)

    # ── Properties ───────────────────────────────────────────────────────

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def settings(self) -> GameSettings:
        return self._settings

    # ── Commands ─────────────────────────────────────────────────────────

    def load_position(self, fen: str) -> None:
        """Replace the game with *fen*; a malformed FEN changes nothing."""
        with self._lock:
            self._state.setup(fen)
        self._emit_loaded(fen)
        if self._state.is_game_over:
            self._emit_game_over()

    def reset(self) -> None:
        """Back to the standard starting position with empty history."""
        self.load_position(STARTING_FEN)

    def play_move(
        self, move: Move, choose_promotion: PromotionChooser | None = None
    ) -> MoveRecord:
        """Play *move* if it is legal, else raise :class:`IllegalMoveRequest`."""
        with self._lock:
            if self._state.is_game_over:
                raise IllegalMoveRequest(move, "the game is over")
            if move not in self._state.legal_moves(move.from_sq):
                raise IllegalMoveRequest(move)
            record = self._state.apply_move(
                move, choose_promotion or self._choose_promotion
            )

        _LOGGER.debug("Played %s", record.notation)
        self._emit_move(record)
        if self._state.is_game_over:
            self._emit_game_over()
        return record

    def submit_move(self, move: Move) -> bool:
        """Non-raising :meth:`play_move`. Returns True if legal and applied."""
        try:
            self.play_move(move)
        except IllegalMoveRequest as exc:
            _LOGGER.debug("Rejected move: %s", exc)
            return False
        return True

    def play_uci(self, text: str) -> MoveRecord:
        """Play a coordinate move such as ``e2e4`` or ``e7e8n``."""
        text = text.strip()
        if len(text) not in (4, 5):
            raise IllegalMoveRequest(text, "expected a move like e2e4 or e7e8q")
        try:
            from_sq = parse_square(text[:2])
            to_sq = parse_square(text[2:4])
        except ValueError:
            raise IllegalMoveRequest(text, "bad square name") from None

        with self._lock:
            move = self.find_move(from_sq, to_sq)
            if move is None:
                raise IllegalMoveRequest(text)
            if len(text) == 4:
                return self.play_move(move)
            if not move.is_promotion:
                raise IllegalMoveRequest(text, "not a promotion")
            letter = text[4]
            return self.play_move(move, lambda _choices: letter)

    # ── Queries ──────────────────────────────────────────────────────────

    def legal_moves(self, square: Square) -> list[Move]:
        """Legal moves for the piece on *square* (empty if none apply)."""
        with self._lock:
            return self._state.legal_moves(square)

    def find_move(self, from_sq: Square, to_sq: Square) -> Move | None:
        """The legal move from *from_sq* to *to_sq*, if there is one."""
        with self._lock:
            for move in self._state.legal_moves(from_sq):
                if move.to_sq == to_sq:
                    return move
            return None

    def snapshot(self) -> tuple[object, ...]:
        """Hashable value of the current position, read in one piece."""
        with self._lock:
            return self._state.position.snapshot()

    def observation(self) -> Observation:
        """Snapshot of turn, result, last move and its notation."""
        with self._lock:
            state = self._state
            position = state.position
            record = state.last_record
            return Observation(
                turn=position.turn,
                game_over=position.game_over,
                result=result_token(position.result),
                terminal_reason=position.terminal_reason,
                last_move=position.last_move,
                notation=record.notation if record else None,
                san=record.san if record else None,
                checkers=_checkers(position),
            )

    # ── Internal helpers ─────────────────────────────────────────────────

    def _default_promotion(self, _choices: tuple[PieceType, ...]) -> PieceType:
        return self._settings.default_promotion

    def _emit_move(self, record: MoveRecord) -> None:
        for cb in self.events.on_move:
            cb(record, self._state)

    def _emit_game_over(self) -> None:
        reason = self._state.terminal_reason
        assert reason is not None
        for cb in self.events.on_game_over:
            cb(self._state.result, reason)

    def _emit_loaded(self, fen: str) -> None:
        for cb in self.events.on_position_loaded:
            cb(fen)
