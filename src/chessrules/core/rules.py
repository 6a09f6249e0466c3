"""High-level chess rules: check, checkmate, stalemate and game result."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.attacks import is_in_check
from chessrules.core.enums import Color, GameResult, PieceType, TerminalReason
from chessrules.core.move_generator import MoveGenerator

if TYPE_CHECKING:
    from chessrules.core.move import Move
    from chessrules.core.position import Position


class Rules:
    """Static rule-checker that operates on a :class:`Position`."""

    @staticmethod
    def is_in_check(position: Position, color: Color | None = None) -> bool:
        return is_in_check(position, position.turn if color is None else color)

    @staticmethod
    def is_checkmate(position: Position, color: Color | None = None) -> bool:
        color = position.turn if color is None else color
        if not is_in_check(position, color):
            return False
        return not MoveGenerator(position).has_any_legal_move(color)

    @staticmethod
    def is_stalemate(position: Position, color: Color | None = None) -> bool:
        color = position.turn if color is None else color
        if is_in_check(position, color):
            return False
        return not MoveGenerator(position).has_any_legal_move(color)

    @staticmethod
    def terminal_reason(
        position: Position, color: Color | None = None
    ) -> TerminalReason | None:
        """Checkmate or stalemate for *color*, None while it can still move."""
        color = position.turn if color is None else color
        if MoveGenerator(position).has_any_legal_move(color):
            return None
        if is_in_check(position, color):
            return TerminalReason.CHECKMATE
        return TerminalReason.STALEMATE

    @staticmethod
    def game_result(reason: TerminalReason | None, loser: Color) -> GameResult:
        """Result for a game that ended with *loser* to move."""
        if reason is None:
            return GameResult.IN_PROGRESS
        if reason == TerminalReason.CHECKMATE:
            return GameResult.win_for(loser.opposite)
        return GameResult.DRAW

    @staticmethod
    def move_consequences(
        position: Position, move: Move, promotion: PieceType = PieceType.QUEEN
    ) -> tuple[bool, bool]:
        """(gives check, gives mate) for *move*, tried and taken back."""
        with position.lock:
            opponent = position.pieces[move.piece_id].color.opposite
            undo = position.apply(move, promotion)
            try:
                check = is_in_check(position, opponent)
                stuck = not MoveGenerator(position).has_any_legal_move(opponent)
            finally:
                position.revert(undo)
        return check, check and stuck

    @staticmethod
    def update_terminal_state(position: Position) -> TerminalReason | None:
        """Mark *position* finished if its side to move has no legal move."""
        reason = Rules.terminal_reason(position, position.turn)
        position.terminal_reason = reason
        position.game_over = reason is not None
        position.result = Rules.game_result(reason, position.turn)
        return reason
