"""Position — board occupancy, piece registry and game metadata, with apply/revert."""

from __future__ import annotations

import threading
from collections.abc import Iterator
from dataclasses import dataclass

from chessrules.core.enums import (
    CastleSide,
    Color,
    GameResult,
    PieceType,
    TerminalReason,
)
from chessrules.core.errors import InvariantViolation
from chessrules.core.move import Move
from chessrules.core.piece import Piece
from chessrules.core.types import Square, make_square, square_name

# (rook file before, rook file after, king file after) per castling side.
_CASTLE_FILES: dict[CastleSide, tuple[int, int, int]] = {
    CastleSide.KINGSIDE: (7, 5, 6),
    CastleSide.QUEENSIDE: (0, 3, 2),
}


def castle_squares(color: Color, side: CastleSide) -> tuple[Square, Square, Square]:
    """(rook home, rook destination, king destination) for *color* castling *side*."""
    rook_from, rook_to, king_to = _CASTLE_FILES[side]
    rank = color.back_rank
    return (
        make_square(rook_from, rank),
        make_square(rook_to, rank),
        make_square(king_to, rank),
    )


def en_passant_victim_square(move: Move, color: Color) -> Square:
    """Square of the pawn removed by an en passant *move* made by *color*."""
    return move.to_sq - 8 * color.forward


@dataclass(slots=True)
class UndoRecord:
    """Everything :meth:`Position.revert` needs to restore the prior position."""

    piece: Piece
    from_sq: Square
    had_moved: bool
    piece_type: PieceType
    captured: Piece | None
    rook: Piece | None
    rook_from: Square | None
    rook_had_moved: bool
    ep_target: Square | None


class Position:
    """Full chess position: who stands where, whose turn, and how it ended.

    ``board`` maps each of the 64 squares to the :class:`Piece` standing on
    it (or None) and ``pieces`` maps piece ids to the same objects. Every
    piece on the board is in the registry and vice versa.

    :meth:`apply` / :meth:`revert` are exact inverses and are used by the
    legality filter to try a move and take it back. ``lock`` serialises
    that cycle against any other reader.
    """

    __slots__ = (
        "board",
        "pieces",
        "turn",
        "ep_target",
        "last_move",
        "game_over",
        "result",
        "terminal_reason",
        "lock",
    )

    def __init__(self, turn: Color = Color.WHITE) -> None:
        self.board: list[Piece | None] = [None] * 64
        self.pieces: dict[str, Piece] = {}
        self.turn = turn
        self.ep_target: Square | None = None
        self.last_move: Move | None = None
        self.game_over = False
        self.result = GameResult.IN_PROGRESS
        self.terminal_reason: TerminalReason | None = None
        self.lock = threading.RLock()

    # ── Element access ───────────────────────────────────────────────────

    def __getitem__(self, sq: Square) -> Piece | None:
        return self.board[sq]

    def is_empty(self, sq: Square) -> bool:
        return self.board[sq] is None

    def piece(self, piece_id: str) -> Piece | None:
        return self.pieces.get(piece_id)

    def pieces_of(self, color: Color) -> list[Piece]:
        """Pieces of *color* that are still on the board."""
        return [
            p
            for p in list(self.pieces.values())
            if p.color == color and self.board[p.square] is p
        ]

    def __iter__(self) -> Iterator[Piece]:
        return iter(list(self.pieces.values()))

    # ── Set-up ───────────────────────────────────────────────────────────

    def place(self, piece: Piece) -> None:
        """Put a new piece on an empty square and register it."""
        if piece.id in self.pieces:
            raise InvariantViolation(f"Duplicate piece id {piece.id!r}")
        if self.board[piece.square] is not None:
            raise InvariantViolation(
                f"Square {square_name(piece.square)} is already occupied"
            )
        self.board[piece.square] = piece
        self.pieces[piece.id] = piece

    def _remove(self, piece: Piece) -> None:
        self.board[piece.square] = None
        del self.pieces[piece.id]

    def _restore(self, piece: Piece) -> None:
        self.board[piece.square] = piece
        self.pieces[piece.id] = piece

    # ── Apply / revert ───────────────────────────────────────────────────

    def apply(self, move: Move, promotion: PieceType = PieceType.QUEEN) -> UndoRecord:
        """Play *move* on the board and return the record that undoes it.

        Touches occupancy, the registry, ``has_moved``, promotion type and
        the en passant target. Turn, last move and terminal fields belong
        to the executor. Nothing is mutated if the move does not fit the
        board.
        """
        piece = self.pieces.get(move.piece_id)
        if piece is None:
            raise InvariantViolation(f"Piece {move.piece_id!r} is not on the board")
        if piece.square != move.from_sq or self.board[move.from_sq] is not piece:
            raise InvariantViolation(
                f"Piece {move.piece_id!r} is not on {square_name(move.from_sq)}"
            )

        if move.is_en_passant:
            captured = self.board[en_passant_victim_square(move, piece.color)]
            if captured is None or captured.piece_type != PieceType.PAWN:
                raise InvariantViolation(f"No pawn to take en passant for {move}")
        else:
            captured = self.board[move.to_sq]
        if captured is not None and captured.color == piece.color:
            raise InvariantViolation(f"{move} would capture its own piece")

        rook: Piece | None = None
        rook_from: Square | None = None
        rook_to: Square | None = None
        if move.castle is not None:
            rook_from, rook_to, _ = castle_squares(piece.color, move.castle)
            rook = self.board[rook_from]
            if rook is None or rook.piece_type != PieceType.ROOK:
                raise InvariantViolation(f"No rook to castle with for {move}")

        undo = UndoRecord(
            piece=piece,
            from_sq=move.from_sq,
            had_moved=piece.has_moved,
            piece_type=piece.piece_type,
            captured=captured,
            rook=rook,
            rook_from=rook_from,
            rook_had_moved=rook.has_moved if rook is not None else False,
            ep_target=self.ep_target,
        )

        # 1. Captured piece leaves the board (en passant victim is beside,
        #    not on, the destination)
        if captured is not None:
            self._remove(captured)

        # 2. Rook slide for castling
        if rook is not None and rook_to is not None:
            self.board[rook.square] = None
            rook.square = rook_to
            rook.has_moved = True
            self.board[rook_to] = rook

        # 3. Mover
        self.board[move.from_sq] = None
        piece.square = move.to_sq
        piece.has_moved = True
        self.board[move.to_sq] = piece

        # 4. Promotion keeps the piece id
        if move.is_promotion:
            piece.piece_type = promotion

        # 5. En passant target lives for exactly one ply
        if move.is_pawn_double_step:
            self.ep_target = (move.from_sq + move.to_sq) // 2
        else:
            self.ep_target = None

        return undo

    def revert(self, undo: UndoRecord) -> None:
        """Undo the :meth:`apply` call that produced *undo*."""
        piece = undo.piece
        self.board[piece.square] = None
        piece.square = undo.from_sq
        piece.has_moved = undo.had_moved
        piece.piece_type = undo.piece_type
        self.board[undo.from_sq] = piece

        rook = undo.rook
        if rook is not None and undo.rook_from is not None:
            self.board[rook.square] = None
            rook.square = undo.rook_from
            rook.has_moved = undo.rook_had_moved
            self.board[undo.rook_from] = rook

        if undo.captured is not None:
            self._restore(undo.captured)

        self.ep_target = undo.ep_target

    # ── Utilities ────────────────────────────────────────────────────────

    def copy(self) -> Position:
        """Independent deep copy (fresh piece objects, same ids)."""
        pos = Position(self.turn)
        for p in self.pieces.values():
            pos.place(Piece(p.id, p.piece_type, p.color, p.square, p.has_moved))
        pos.ep_target = self.ep_target
        pos.last_move = self.last_move
        pos.game_over = self.game_over
        pos.result = self.result
        pos.terminal_reason = self.terminal_reason
        return pos

    def snapshot(self) -> tuple[object, ...]:
        """Hashable value of the whole position, independent of object identity."""
        occupancy = tuple(p.id if p is not None else None for p in self.board)
        pieces = tuple(sorted(p.state() for p in self.pieces.values()))
        return (
            occupancy,
            pieces,
            self.turn,
            self.ep_target,
            self.last_move,
            self.game_over,
            self.result,
            self.terminal_reason,
        )

    def __repr__(self) -> str:
        rows: list[str] = []
        for rank in range(8, 0, -1):
            row = []
            for file in range(8):
                p = self.board[make_square(file, rank)]
                row.append(str(p) if p else ".")
            rows.append(f"{rank} {' '.join(row)}")
        rows.append("  a b c d e f g h")
        return "\n".join(rows)

