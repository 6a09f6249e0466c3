"""SAN (Standard Algebraic Notation) with full disambiguation."""

from __future__ import annotations

from chessrules.core.enums import PieceType
from chessrules.core.errors import InvariantViolation
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.position import Position
from chessrules.core.rules import Rules
from chessrules.core.types import FILES, file_of, rank_of, square_name


def check_suffix(gives_check: bool, is_mate: bool) -> str:
    """``#`` for mate, ``+`` for check, nothing otherwise."""
    if is_mate:
        return "#"
    return "+" if gives_check else ""


def san_body(
    position: Position, move: Move, promotion: PieceType = PieceType.QUEEN
) -> str:
    """SAN of *move* without the check suffix, given the position before it.

    Two pieces of the same type able to reach the destination are told
    apart by file, then rank, then the full origin square.
    """
    piece = position.pieces.get(move.piece_id)
    if piece is None:
        raise InvariantViolation(f"Piece {move.piece_id!r} is not on the board")

    if move.castle is not None:
        return move.castle.value

    san = ""
    if piece.piece_type == PieceType.PAWN:
        if move.is_capture:
            san += FILES[file_of(move.from_sq)]
    else:
        san += piece.piece_type.letter
        san += _disambiguation(position, move, piece.piece_type)

    if move.is_capture:
        san += "x"
    san += square_name(move.to_sq)

    if move.is_promotion:
        san += "=" + promotion.letter
    return san


def _disambiguation(position: Position, move: Move, piece_type: PieceType) -> str:
    mover = position.pieces[move.piece_id]
    gen = MoveGenerator(position)
    rivals = [
        other.square
        for other in position.pieces_of(mover.color)
        if other is not mover
        and other.piece_type == piece_type
        and any(m.to_sq == move.to_sq for m in gen.legal_moves(other))
    ]
    if not rivals:
        return ""
    if all(file_of(sq) != file_of(move.from_sq) for sq in rivals):
        return FILES[file_of(move.from_sq)]
    if all(rank_of(sq) != rank_of(move.from_sq) for sq in rivals):
        return str(rank_of(move.from_sq))
    return square_name(move.from_sq)


def move_to_san(
    position: Position, move: Move, promotion: PieceType = PieceType.QUEEN
) -> str:
    """Convert a legal *move* to SAN given the *position* before the move."""
    check, mate = Rules.move_consequences(position, move, promotion)
    return san_body(position, move, promotion) + check_suffix(check, mate)
