"""Piece record: a physical piece with a stable identity."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import Color, PieceType
from chessrules.core.types import Square, square_name


def char_to_kind(char: str) -> tuple[Color, PieceType]:
    """Split a FEN character into color and type, e.g. 'n' → black knight."""
    color = Color.WHITE if char.isupper() else Color.BLACK
    return color, PieceType.from_letter(char)


@dataclass(slots=True, eq=False)
class Piece:
    """A piece on the board.

    ``id`` is assigned when the position is loaded and never moves to
    another piece. Promotion changes ``piece_type`` in place, so a promoted
    pawn keeps its id. Equality is identity: two pieces with the same type
    and color on different squares are different pieces.
    """

    id: str
    piece_type: PieceType
    color: Color
    square: Square
    has_moved: bool = False

    # ── Serialisation ────────────────────────────────────────────────────

    def __str__(self) -> str:
        """FEN character (uppercase = white, lowercase = black)."""
        letter = self.piece_type.letter
        return letter if self.color == Color.WHITE else letter.lower()

    def __repr__(self) -> str:
        return (
            f"Piece({self.id!r}, {self.color}, {self.piece_type.name.lower()}, "
            f"{square_name(self.square)}{', moved' if self.has_moved else ''})"
        )

    def state(self) -> tuple[str, PieceType, Color, Square, bool]:
        """Plain-value view of every field, used for position snapshots."""
        return (self.id, self.piece_type, self.color, self.square, self.has_moved)
