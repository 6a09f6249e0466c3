"""Game state — the owned position plus move history and captured pieces."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from chessrules.core.enums import Color, GameResult, PieceType, TerminalReason
from chessrules.core.executor import PromotionChooser, always_queen, execute
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import STARTING_FEN, position_from_fen, position_to_fen
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.rules import Rules
from chessrules.core.types import Square

_LOGGER = logging.getLogger(__name__)


@dataclass
class MoveRecord:
    """A single entry in the move history."""

    move: Move
    notation: str
    san: str
    fen_after: str
    piece_type: PieceType
    captured: Piece | None = None
    promotion: PieceType | None = None
    was_check: bool = False

    @property
    def was_capture(self) -> bool:
        return self.captured is not None


@dataclass
class GameState:
    """One game session: a single position it owns exclusively.

    A pure data and logic class with no UI. Two states never share a
    position.
    """

    position: Position = field(init=False)
    start_fen: str = field(default=STARTING_FEN, init=False)
    move_history: list[MoveRecord] = field(default_factory=list, init=False)
    captured: dict[Color, list[Piece]] = field(init=False)

    def __post_init__(self) -> None:
        self.position = self._load(STARTING_FEN)
        self.captured = {Color.WHITE: [], Color.BLACK: []}

    # ── Initialisation ───────────────────────────────────────────────────

    def setup(self, fen: str | None = None) -> None:
        """Load *fen* (default: standard start) and clear all history.

        Raises :class:`~chessrules.core.errors.ParseError` without
        touching the current game when *fen* is malformed.
        """
        fen = fen or STARTING_FEN
        position = self._load(fen)

        self.start_fen = fen
        self.position = position
        self.move_history.clear()
        self.captured = {Color.WHITE: [], Color.BLACK: []}
        _LOGGER.debug("Loaded position %s", fen)

    @staticmethod
    def _load(fen: str) -> Position:
        position = position_from_fen(fen)
        Rules.update_terminal_state(position)
        return position

    # ── Move application ─────────────────────────────────────────────────

    def apply_move(
        self, move: Move, choose_promotion: PromotionChooser = always_queen
    ) -> MoveRecord:
        """Apply a validated move and return the history record.

        Caller is responsible for legality check.
        """
        outcome = execute(self.position, move, choose_promotion)
        if outcome.captured is not None:
            self.captured[outcome.captured.color].append(outcome.captured)

        record = MoveRecord(
            move=move,
            notation=outcome.notation,
            san=outcome.san,
            fen_after=position_to_fen(self.position),
            piece_type=outcome.piece_type,
            captured=outcome.captured,
            promotion=outcome.promotion,
            was_check=outcome.gives_check,
        )
        self.move_history.append(record)
        return record

    # ── Query helpers ────────────────────────────────────────────────────

    @property
    def side_to_move(self) -> Color:
        return self.position.turn

    @property
    def is_game_over(self) -> bool:
        return self.position.game_over

    @property
    def result(self) -> GameResult:
        return self.position.result

    @property
    def terminal_reason(self) -> TerminalReason | None:
        return self.position.terminal_reason

    @property
    def last_record(self) -> MoveRecord | None:
        return self.move_history[-1] if self.move_history else None

    @property
    def ply_count(self) -> int:
        """Number of half-moves played."""
        return len(self.move_history)

    @property
    def fullmove_display(self) -> int:
        """Current full-move number for display."""
        return (self.ply_count // 2) + 1

    def legal_moves(self, square: Square) -> list[Move]:
        """Legal moves of the piece on *square*.

        Empty when the square is empty, holds a piece of the side not to
        move, or the game is over.
        """
        position = self.position
        with position.lock:
            piece = position.board[square]
            if position.game_over or piece is None or piece.color != position.turn:
                return []
            return MoveGenerator(position).legal_moves(piece)

    def all_legal_moves(self) -> list[Move]:
        """Legal moves in the current position."""
        if self.position.game_over:
            return []
        return MoveGenerator(self.position).generate_legal_moves()
