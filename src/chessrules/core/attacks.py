"""Attack detection: is a square attacked, where is the king, is it in check.

Pure reads over a :class:`Position`; nothing here mutates the board.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.enums import Color, PieceType
from chessrules.core.errors import InvariantViolation
from chessrules.core.types import Square

if TYPE_CHECKING:
    from chessrules.core.position import Position


KNIGHT_OFFSETS: tuple[tuple[int, int], ...] = (
    (-2, -1),
    (-2, 1),
    (-1, -2),
    (-1, 2),
    (1, -2),
    (1, 2),
    (2, -1),
    (2, 1),
)

KING_OFFSETS: tuple[tuple[int, int], ...] = (
    (-1, -1),
    (-1, 0),
    (-1, 1),
    (0, -1),
    (0, 1),
    (1, -1),
    (1, 0),
    (1, 1),
)

BISHOP_DIRS: tuple[tuple[int, int], ...] = ((-1, -1), (-1, 1), (1, -1), (1, 1))
ROOK_DIRS: tuple[tuple[int, int], ...] = ((-1, 0), (1, 0), (0, -1), (0, 1))
QUEEN_DIRS: tuple[tuple[int, int], ...] = BISHOP_DIRS + ROOK_DIRS

_DIAGONAL_ATTACKERS = (PieceType.BISHOP, PieceType.QUEEN)
_ORTHOGONAL_ATTACKERS = (PieceType.ROOK, PieceType.QUEEN)


# -- Precomputed lookup tables ---------------------------------------------


def _build_targets(
    offsets: tuple[tuple[int, int], ...],
) -> tuple[tuple[Square, ...], ...]:
    targets: list[tuple[Square, ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        squares: list[Square] = []
        for df, dr in offsets:
            af = file_idx + df
            ar = rank_idx + dr
            if 0 <= af < 8 and 0 <= ar < 8:
                squares.append(ar * 8 + af)
        targets.append(tuple(squares))
    return tuple(targets)


def _build_rays(
    directions: tuple[tuple[int, int], ...],
) -> tuple[tuple[tuple[Square, ...], ...], ...]:
    rays_per_square: list[tuple[tuple[Square, ...], ...]] = []
    for sq in range(64):
        file_idx = sq & 7
        rank_idx = sq >> 3
        square_rays: list[tuple[Square, ...]] = []
        for df, dr in directions:
            af = file_idx + df
            ar = rank_idx + dr
            ray: list[Square] = []
            while 0 <= af < 8 and 0 <= ar < 8:
                ray.append(ar * 8 + af)
                af += df
                ar += dr
            square_rays.append(tuple(ray))
        rays_per_square.append(tuple(square_rays))
    return tuple(rays_per_square)


KNIGHT_TARGETS = _build_targets(KNIGHT_OFFSETS)
KING_TARGETS = _build_targets(KING_OFFSETS)
# [color] -> squares a pawn of that color must stand on to attack the index.
PAWN_ATTACKER_SQUARES = (
    _build_targets(((-1, -1), (1, -1))),
    _build_targets(((-1, 1), (1, 1))),
)

BISHOP_RAYS = _build_rays(BISHOP_DIRS)
ROOK_RAYS = _build_rays(ROOK_DIRS)
QUEEN_RAYS = _build_rays(QUEEN_DIRS)


# -- Queries ---------------------------------------------------------------


def is_square_attacked(position: Position, sq: Square, by_color: Color) -> bool:
    """Is *sq* attacked by any piece of *by_color*?

    Checked in order: pawns, knights, sliding rays, king. Each ray stops at
    the first occupied square.
    """
    board = position.board

    for from_sq in PAWN_ATTACKER_SQUARES[int(by_color)][sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.PAWN
        ):
            return True

    for from_sq in KNIGHT_TARGETS[sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.KNIGHT
        ):
            return True

    for rays, attackers in (
        (BISHOP_RAYS[sq], _DIAGONAL_ATTACKERS),
        (ROOK_RAYS[sq], _ORTHOGONAL_ATTACKERS),
    ):
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in attackers:
                    return True
                break

    for from_sq in KING_TARGETS[sq]:
        piece = board[from_sq]
        if (
            piece is not None
            and piece.color == by_color
            and piece.piece_type == PieceType.KING
        ):
            return True

    return False


def king_square(position: Position, color: Color) -> Square:
    """Square of *color*'s king, found by scanning the piece registry."""
    for piece in position.pieces.values():
        if piece.piece_type == PieceType.KING and piece.color == color:
            return piece.square
    raise InvariantViolation(f"No {color} king on board")


def is_in_check(position: Position, color: Color) -> bool:
    """Is *color*'s king attacked by the opponent?"""
    return is_square_attacked(position, king_square(position, color), color.opposite)


def attackers_of(position: Position, sq: Square, by_color: Color) -> list[Square]:
    """Squares of every *by_color* piece attacking *sq* (for highlighting checks)."""
    board = position.board
    found: list[Square] = []

    for from_sq in PAWN_ATTACKER_SQUARES[int(by_color)][sq]:
        piece = board[from_sq]
        if piece and piece.color == by_color and piece.piece_type == PieceType.PAWN:
            found.append(from_sq)
    for from_sq in KNIGHT_TARGETS[sq]:
        piece = board[from_sq]
        if piece and piece.color == by_color and piece.piece_type == PieceType.KNIGHT:
            found.append(from_sq)
    for rays, attackers in (
        (BISHOP_RAYS[sq], _DIAGONAL_ATTACKERS),
        (ROOK_RAYS[sq], _ORTHOGONAL_ATTACKERS),
    ):
        for ray in rays:
            for to_sq in ray:
                piece = board[to_sq]
                if piece is None:
                    continue
                if piece.color == by_color and piece.piece_type in attackers:
                    found.append(to_sq)
                break
    for from_sq in KING_TARGETS[sq]:
        piece = board[from_sq]
        if piece and piece.color == by_color and piece.piece_type == PieceType.KING:
            found.append(from_sq)
    return found
