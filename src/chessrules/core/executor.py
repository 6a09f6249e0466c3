"""Move executor — the only code path that commits a move to a position."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass

from chessrules.core.attacks import is_in_check
from chessrules.core.enums import (
    PROMOTION_TYPES,
    GameResult,
    PieceType,
    TerminalReason,
)
from chessrules.core.errors import InvariantViolation
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation.long import encode
from chessrules.core.notation.san import check_suffix, san_body
from chessrules.core.piece import Piece
from chessrules.core.position import Position
from chessrules.core.rules import Rules

_LOGGER = logging.getLogger(__name__)

# Receives the eligible piece types, returns the chosen one.
PromotionChooser = Callable[[tuple[PieceType, ...]], object]

_PROMOTION_NAMES: dict[str, PieceType] = {
    "queen": PieceType.QUEEN,
    "rook": PieceType.ROOK,
    "bishop": PieceType.BISHOP,
    "knight": PieceType.KNIGHT,
}


def always_queen(_choices: tuple[PieceType, ...]) -> PieceType:
    """Promotion chooser for non-interactive play."""
    return PieceType.QUEEN


def coerce_promotion(choice: object) -> PieceType:
    """Turn a chooser's answer into a promotion type, Queen if unrecognised.

    Accepts a :class:`PieceType` from the eligible set, a letter (``"n"``)
    or a name (``"Knight"``).
    """
    if isinstance(choice, PieceType):
        if choice in PROMOTION_TYPES:
            return choice
    elif isinstance(choice, str):
        text = choice.strip().lower()
        if text in _PROMOTION_NAMES:
            return _PROMOTION_NAMES[text]
        if len(text) == 1:
            try:
                ptype = PieceType.from_letter(text)
            except ValueError:
                ptype = None
            if ptype in PROMOTION_TYPES:
                return ptype
    _LOGGER.warning("Unrecognised promotion choice %r, promoting to queen", choice)
    return PieceType.QUEEN


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """What happened when a move was committed."""

    move: Move
    piece_id: str
    piece_type: PieceType
    captured: Piece | None
    promotion: PieceType | None
    gives_check: bool
    terminal_reason: TerminalReason | None
    result: GameResult
    notation: str
    san: str

    @property
    def is_checkmate(self) -> bool:
        return self.terminal_reason == TerminalReason.CHECKMATE

    @property
    def is_stalemate(self) -> bool:
        return self.terminal_reason == TerminalReason.STALEMATE


def execute(
    position: Position,
    move: Move,
    choose_promotion: PromotionChooser = always_queen,
) -> ExecutionResult:
    """Commit *move*, which the caller has already checked is legal.

    The promotion choice is resolved before anything changes, so a chooser
    that raises leaves *position* as it was. On success the opponent is
    examined: with no legal move the game is over (checkmate if in check,
    otherwise stalemate) and the turn stays put; otherwise the turn passes.
    """
    with position.lock:
        piece = position.pieces.get(move.piece_id)
        if piece is None or position.board[move.from_sq] is not piece:
            raise InvariantViolation(
                f"Cannot execute {move}: piece {move.piece_id!r} is not on its square"
            )
        if position.game_over:
            raise InvariantViolation(f"Cannot execute {move}: the game is over")
        if piece.color != position.turn:
            raise InvariantViolation(
                f"Cannot execute {move}: {piece.color} is not to move"
            )

        promotion: PieceType | None = None
        if move.is_promotion:
            promotion = coerce_promotion(choose_promotion(PROMOTION_TYPES))

        mover = piece.color
        opponent = mover.opposite
        piece_type = piece.piece_type
        body = san_body(position, move, promotion or PieceType.QUEEN)

        undo = position.apply(move, promotion or PieceType.QUEEN)
        position.last_move = move

        gives_check = is_in_check(position, opponent)
        reason: TerminalReason | None = None
        if not MoveGenerator(position).has_any_legal_move(opponent):
            reason = (
                TerminalReason.CHECKMATE if gives_check else TerminalReason.STALEMATE
            )
            position.game_over = True
            position.terminal_reason = reason
            position.result = Rules.game_result(reason, opponent)
        else:
            position.turn = opponent

        mate = reason == TerminalReason.CHECKMATE
        result = ExecutionResult(
            move=move,
            piece_id=piece.id,
            piece_type=piece_type,
            captured=undo.captured,
            promotion=promotion,
            gives_check=gives_check,
            terminal_reason=reason,
            result=position.result,
            notation=encode(
                move,
                piece_type,
                promotion=promotion,
                gives_check=gives_check,
                is_mate=mate,
            ),
            san=body + check_suffix(gives_check, mate),
        )

    _LOGGER.debug("Executed %s as %s", move, result.notation)
    if reason is not None:
        _LOGGER.debug("Game over: %s (%s)", reason, result.result.name)
    return result
