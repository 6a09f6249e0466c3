"""Shared pytest fixtures used across the test suite."""

from __future__ import annotations

import os
import sys
from collections.abc import Iterator

import pytest

from chessrules.core.enums import PieceType
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.position import Position
from chessrules.core.types import Square

# Linux CI runners are often headless. Force an offscreen backend only there.
if (
    sys.platform.startswith("linux")
    and "QT_QPA_PLATFORM" not in os.environ
    and "DISPLAY" not in os.environ
    and "WAYLAND_DISPLAY" not in os.environ
):
    os.environ["QT_QPA_PLATFORM"] = "offscreen"


@pytest.fixture(scope="session")
def qapp() -> Iterator[object]:
    """Provide a singleton QCoreApplication for signal tests."""
    from PyQt6.QtCore import QCoreApplication

    app = QCoreApplication.instance()
    if app is None:
        app = QCoreApplication([])
    yield app


def move_between(position: Position, from_sq: Square, to_sq: Square) -> Move:
    """The legal move from *from_sq* to *to_sq*; fails the test if absent."""
    piece = position.board[from_sq]
    assert piece is not None, f"no piece on {from_sq}"
    for move in MoveGenerator(position).legal_moves(piece):
        if move.to_sq == to_sq:
            return move
    raise AssertionError(f"no legal move {from_sq}->{to_sq}")


def perft(position: Position, depth: int) -> int:
    """Count leaf nodes at *depth*, expanding each promotion into four moves."""
    if depth == 0:
        return 1
    gen = MoveGenerator(position)
    nodes = 0
    for move in gen.generate_legal_moves():
        choices = (
            (PieceType.QUEEN, PieceType.ROOK, PieceType.BISHOP, PieceType.KNIGHT)
            if move.is_promotion
            else (PieceType.QUEEN,)
        )
        for promotion in choices:
            if depth == 1:
                nodes += 1
                continue
            mover = position.pieces[move.piece_id].color
            undo = position.apply(move, promotion)
            position.turn = mover.opposite
            nodes += perft(position, depth - 1)
            position.turn = mover
            position.revert(undo)
    return nodes
