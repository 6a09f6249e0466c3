"""Move value object."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import CastleSide
from chessrules.core.types import Square, square_name


@dataclass(frozen=True, slots=True)
class Move:
    """Immutable candidate or executed transition of one piece.

    Generating a move never touches the position. The promotion piece is
    not part of the move: ``is_promotion`` marks a pawn reaching the last
    rank, and the piece it becomes is decided when the move is executed.
    """

    piece_id: str
    from_sq: Square
    to_sq: Square
    is_capture: bool = False
    is_en_passant: bool = False
    castle: CastleSide | None = None
    is_pawn_double_step: bool = False
    is_promotion: bool = False

    # ── Display ──────────────────────────────────────────────────────────

    def __str__(self) -> str:
        return f"{square_name(self.from_sq)}{square_name(self.to_sq)}"

    @property
    def is_castle(self) -> bool:
        return self.castle is not None
