"""Notation package: FEN parsing and serialization, display notation, SAN."""

from chessrules.core.notation.fen import STARTING_FEN, position_from_fen, position_to_fen
from chessrules.core.notation.long import encode, move_to_long
from chessrules.core.notation.san import check_suffix, move_to_san, san_body

__all__ = [
    "STARTING_FEN",
    "check_suffix",
    "encode",
    "move_to_long",
    "move_to_san",
    "position_from_fen",
    "position_to_fen",
    "san_body",
]
