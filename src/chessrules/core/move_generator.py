"""Pseudo-legal move generation and the legality filter."""

from __future__ import annotations

from typing import TYPE_CHECKING

from chessrules.core.attacks import (
    BISHOP_RAYS,
    KING_TARGETS,
    KNIGHT_TARGETS,
    QUEEN_RAYS,
    ROOK_RAYS,
    is_in_check,
    is_square_attacked,
)
from chessrules.core.enums import CastleSide, Color, PieceType
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.position import castle_squares
from chessrules.core.types import Square, make_square, offset, rank_of

if TYPE_CHECKING:
    from chessrules.core.position import Position

_SLIDER_RAYS = {
    PieceType.BISHOP: BISHOP_RAYS,
    PieceType.ROOK: ROOK_RAYS,
    PieceType.QUEEN: QUEEN_RAYS,
}
_KING_HOME_FILE = 4


class MoveGenerator:
    """Generates pseudo-legal and legal moves for pieces of a :class:`Position`.

    Legality is decided by applying the move to the live position,
    asking whether the mover's king is attacked, and reverting. The
    position is always restored before a method returns.
    """

    __slots__ = ("_pos", "_board")

    def __init__(self, position: Position) -> None:
        self._pos = position
        self._board = position.board

    # -- Public API ---------------------------------------------------------

    def pseudo_moves(self, piece: Piece) -> list[Move]:
        """Moves obeying *piece*'s movement pattern; own-king safety unchecked."""
        moves: list[Move] = []
        pt = piece.piece_type
        if pt == PieceType.PAWN:
            self._gen_pawn(piece, moves)
        elif pt == PieceType.KNIGHT:
            self._gen_steps(piece, KNIGHT_TARGETS[piece.square], moves)
        elif pt == PieceType.KING:
            self._gen_steps(piece, KING_TARGETS[piece.square], moves)
            self._gen_castling(piece, moves)
        else:
            self._gen_sliding(piece, _SLIDER_RAYS[pt][piece.square], moves)
        return moves

    def is_legal(self, move: Move) -> bool:
        """Does *move* leave the mover's own king safe?"""
        pos = self._pos
        with pos.lock:
            mover = pos.pieces[move.piece_id].color
            undo = pos.apply(move)
            try:
                return not is_in_check(pos, mover)
            finally:
                pos.revert(undo)

    def legal_moves(self, piece: Piece) -> list[Move]:
        """Pseudo-legal moves of *piece* that pass :meth:`is_legal`."""
        with self._pos.lock:
            return [m for m in self.pseudo_moves(piece) if self.is_legal(m)]

    def generate_legal_moves(self, color: Color | None = None) -> list[Move]:
        """All legal moves for *color* (default: side to move)."""
        pos = self._pos
        color = pos.turn if color is None else color
        with pos.lock:
            legal: list[Move] = []
            for piece in pos.pieces_of(color):
                legal.extend(self.legal_moves(piece))
            return legal

    def has_any_legal_move(self, color: Color) -> bool:
        """Whether any piece of *color* still on the board can move legally."""
        with self._pos.lock:
            for piece in self._pos.pieces_of(color):
                for move in self.pseudo_moves(piece):
                    if self.is_legal(move):
                        return True
            return False

    # -- Piece-specific generators (private) -------------------------------

    def _gen_pawn(self, piece: Piece, moves: list[Move]) -> None:
        board = self._board
        sq = piece.square
        color = piece.color
        forward = color.forward
        last_rank = color.promotion_rank

        one_step = offset(sq, 0, forward)
        if one_step is not None and board[one_step] is None:
            moves.append(
                Move(
                    piece.id,
                    sq,
                    one_step,
                    is_promotion=rank_of(one_step) == last_rank,
                )
            )
            if rank_of(sq) == color.pawn_rank:
                two_step = offset(sq, 0, 2 * forward)
                if two_step is not None and board[two_step] is None:
                    moves.append(
                        Move(piece.id, sq, two_step, is_pawn_double_step=True)
                    )

        for df in (-1, 1):
            cap_sq = offset(sq, df, forward)
            if cap_sq is None:
                continue
            target = board[cap_sq]
            if target is not None:
                if target.color != color:
                    moves.append(
                        Move(
                            piece.id,
                            sq,
                            cap_sq,
                            is_capture=True,
                            is_promotion=rank_of(cap_sq) == last_rank,
                        )
                    )
            elif cap_sq == self._pos.ep_target:
                victim = board[cap_sq - 8 * forward]
                if (
                    victim is not None
                    and victim.color != color
                    and victim.piece_type == PieceType.PAWN
                ):
                    moves.append(
                        Move(
                            piece.id,
                            sq,
                            cap_sq,
                            is_capture=True,
                            is_en_passant=True,
                        )
                    )

    def _gen_steps(
        self, piece: Piece, targets: tuple[Square, ...], moves: list[Move]
    ) -> None:
        board = self._board
        for to_sq in targets:
            target = board[to_sq]
            if target is None:
                moves.append(Move(piece.id, piece.square, to_sq))
            elif target.color != piece.color:
                moves.append(Move(piece.id, piece.square, to_sq, is_capture=True))

    def _gen_sliding(
        self,
        piece: Piece,
        rays: tuple[tuple[Square, ...], ...],
        moves: list[Move],
    ) -> None:
        board = self._board
        for ray in rays:
            for to_sq in ray:
                target = board[to_sq]
                if target is None:
                    moves.append(Move(piece.id, piece.square, to_sq))
                    continue
                if target.color != piece.color:
                    moves.append(
                        Move(piece.id, piece.square, to_sq, is_capture=True)
                    )
                break

    def _gen_castling(self, king: Piece, moves: list[Move]) -> None:
        color = king.color
        if king.has_moved or king.square != make_square(
            _KING_HOME_FILE, color.back_rank
        ):
            return

        board = self._board
        opponent = color.opposite
        king_sq = king.square

        for side in (CastleSide.KINGSIDE, CastleSide.QUEENSIDE):
            rook_sq, _, king_to = castle_squares(color, side)
            rook = board[rook_sq]
            if (
                rook is None
                or rook.color != color
                or rook.piece_type != PieceType.ROOK
                or rook.has_moved
            ):
                continue

            lo, hi = sorted((king_sq, rook_sq))
            if any(board[sq] is not None for sq in range(lo + 1, hi)):
                continue

            step = 1 if king_to > king_sq else -1
            path = range(king_sq, king_to + step, step)
            if any(is_square_attacked(self._pos, sq, opponent) for sq in path):
                continue

            moves.append(Move(king.id, king_sq, king_to, castle=side))
