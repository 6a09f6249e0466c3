"""Display notation: piece letter, origin, separator, destination.

``Ng1-f3``, ``e4xd5``, ``e5xd6 e.p.``, ``O-O``, ``e7-e8=Q+``. This is the
string shown in a move list next to each executed move.
"""

from __future__ import annotations

from chessrules.core.enums import PieceType
from chessrules.core.move import Move
from chessrules.core.notation.san import check_suffix
from chessrules.core.position import Position
from chessrules.core.rules import Rules
from chessrules.core.types import square_name

QUIET_SEPARATOR = "-"
CAPTURE_SEPARATOR = "x"
EN_PASSANT_SUFFIX = " e.p."


def encode(
    move: Move,
    piece_type: PieceType,
    *,
    promotion: PieceType | None = None,
    gives_check: bool = False,
    is_mate: bool = False,
) -> str:
    """Render *move* made by a piece of *piece_type* (its type before moving)."""
    suffix = check_suffix(gives_check, is_mate)
    if move.castle is not None:
        return move.castle.value + suffix

    letter = "" if piece_type == PieceType.PAWN else piece_type.letter
    sep = CAPTURE_SEPARATOR if move.is_capture else QUIET_SEPARATOR
    text = f"{letter}{square_name(move.from_sq)}{sep}{square_name(move.to_sq)}"
    if move.is_promotion and promotion is not None:
        text += "=" + promotion.letter
    if move.is_en_passant:
        text += EN_PASSANT_SUFFIX
    return text + suffix


def move_to_long(
    position: Position, move: Move, promotion: PieceType = PieceType.QUEEN
) -> str:
    """Display notation for a legal *move* given the position before it."""
    piece = position.pieces[move.piece_id]
    check, mate = Rules.move_consequences(position, move, promotion)
    return encode(
        move,
        piece.piece_type,
        promotion=promotion if move.is_promotion else None,
        gives_check=check,
        is_mate=mate,
    )
