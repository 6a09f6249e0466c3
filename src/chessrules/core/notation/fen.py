"""FEN parsing and serialization."""

from __future__ import annotations

import logging

from chessrules.core.enums import CastleSide, Color, PieceType
from chessrules.core.errors import ParseError
from chessrules.core.piece import Piece, char_to_kind
from chessrules.core.position import Position, castle_squares
from chessrules.core.types import Square, make_square, parse_square, rank_of, square_name

_LOGGER = logging.getLogger(__name__)

STARTING_FEN = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR w KQkq - 0 1"
_EMPTY_COUNTS = "12345678"


def position_from_fen(fen: str) -> Position:
    """Parse a FEN string into a fresh :class:`Position`.

    Only the placement field is required. A missing or unrecognised active
    color means White. The castling field is accepted but ignored: castling
    rights come from the pieces' ``has_moved`` flags, which start False.
    The en passant field is honoured when it names a plausible square;
    clock fields are ignored.

    Piece ids are ``<color><type><n>`` (``wP1``, ``bN2``) with ``n``
    counted per color and type in scan order, rank 8 to 1 and file a to h.
    """
    parts = fen.split()
    if not parts:
        raise ParseError(f"Invalid FEN (empty): {fen!r}")

    # 1. Piece placement
    ranks = parts[0].split("/")
    if len(ranks) != 8:
        raise ParseError(f"Invalid FEN: bad rank count ({len(ranks)}): {fen!r}")

    counters: dict[tuple[Color, PieceType], int] = {}
    placed: list[Piece] = []
    for rank_idx, rank_text in enumerate(ranks):
        rank = 8 - rank_idx
        file = 0
        for ch in rank_text:
            if ch in _EMPTY_COUNTS:
                file += int(ch)
                continue
            try:
                color, ptype = char_to_kind(ch)
            except ValueError:
                raise ParseError(f"Invalid piece in FEN: {ch!r}") from None
            if file >= 8:
                raise ParseError(f"Invalid FEN: rank length mismatch: {rank_text!r}")
            ordinal = counters.get((color, ptype), 0) + 1
            counters[(color, ptype)] = ordinal
            placed.append(
                Piece(
                    f"{color.letter}{ptype.letter}{ordinal}",
                    ptype,
                    color,
                    make_square(file, rank),
                )
            )
            file += 1
        if file != 8:
            raise ParseError(f"Invalid FEN: rank length mismatch: {rank_text!r}")

    # 2. Side to move
    side = Color.BLACK if len(parts) > 1 and parts[1] == "b" else Color.WHITE

    pos = Position(side)
    for piece in placed:
        pos.place(piece)

    # 3. Castling field: rights are carried by has_moved, nothing to do.
    # 4. En passant
    if len(parts) > 3 and parts[3] != "-":
        pos.ep_target = _parse_en_passant(parts[3], side)

    return pos


def _parse_en_passant(text: str, side: Color) -> Square | None:
    try:
        ep = parse_square(text)
    except ValueError:
        _LOGGER.debug("Ignoring malformed en passant field %r", text)
        return None
    expected_rank = 6 if side == Color.WHITE else 3
    if rank_of(ep) != expected_rank:
        _LOGGER.debug("Ignoring en passant square %s for %s to move", text, side)
        return None
    return ep


def position_to_fen(pos: Position) -> str:
    """Serialise *pos* to FEN.

    Castling rights are derived from unmoved kings and rooks on their home
    squares. Clocks are always ``0 1``.
    """
    # 1. Board
    rows: list[str] = []
    for rank in range(8, 0, -1):
        empty = 0
        row = ""
        for file in range(8):
            piece = pos.board[make_square(file, rank)]
            if piece is None:
                empty += 1
            else:
                if empty:
                    row += str(empty)
                    empty = 0
                row += str(piece)
        if empty:
            row += str(empty)
        rows.append(row)
    board_str = "/".join(rows)

    # 2. Side
    side_str = "w" if pos.turn == Color.WHITE else "b"

    # 3. Castling
    castling_str = ""
    for color in (Color.WHITE, Color.BLACK):
        for side, letter in ((CastleSide.KINGSIDE, "K"), (CastleSide.QUEENSIDE, "Q")):
            if _has_castling_right(pos, color, side):
                castling_str += letter if color == Color.WHITE else letter.lower()
    if not castling_str:
        castling_str = "-"

    # 4. En passant
    ep_str = square_name(pos.ep_target) if pos.ep_target is not None else "-"

    return f"{board_str} {side_str} {castling_str} {ep_str} 0 1"


def _has_castling_right(pos: Position, color: Color, side: CastleSide) -> bool:
    king = pos.board[make_square(4, color.back_rank)]
    rook_sq, _, _ = castle_squares(color, side)
    rook = pos.board[rook_sq]
    return (
        king is not None
        and king.piece_type == PieceType.KING
        and king.color == color
        and not king.has_moved
        and rook is not None
        and rook.piece_type == PieceType.ROOK
        and rook.color == color
        and not rook.has_moved
    )
