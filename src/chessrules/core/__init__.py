"""Core domain layer — pure chess rules with zero external dependencies.

Quick start::

    from chessrules.core import MoveGenerator, position_from_fen, STARTING_FEN

    pos = position_from_fen(STARTING_FEN)
    gen = MoveGenerator(pos)
    for move in gen.generate_legal_moves():
        print(move)
"""

from chessrules.core.attacks import (
    attackers_of,
    is_in_check,
    is_square_attacked,
    king_square,
)
from chessrules.core.enums import (
    PROMOTION_TYPES,
    CastleSide,
    Color,
    GameResult,
    PieceType,
    TerminalReason,
    result_token,
)
from chessrules.core.errors import (
    ChessRulesError,
    IllegalMoveRequest,
    InvariantViolation,
    ParseError,
)
from chessrules.core.executor import (
    ExecutionResult,
    PromotionChooser,
    always_queen,
    coerce_promotion,
    execute,
)
from chessrules.core.move import Move
from chessrules.core.move_generator import MoveGenerator
from chessrules.core.notation import (
    STARTING_FEN,
    encode,
    move_to_long,
    move_to_san,
    position_from_fen,
    position_to_fen,
)
from chessrules.core.piece import Piece
from chessrules.core.position import Position, UndoRecord
from chessrules.core.rules import Rules
from chessrules.core.types import (
    Square,
    file_of,
    make_square,
    parse_square,
    rank_of,
    square_name,
)

__all__ = [
    # Enums
    "PROMOTION_TYPES",
    "CastleSide",
    "Color",
    "GameResult",
    "PieceType",
    "TerminalReason",
    "result_token",
    # Errors
    "ChessRulesError",
    "IllegalMoveRequest",
    "InvariantViolation",
    "ParseError",
    # Types / helpers
    "Square",
    "file_of",
    "make_square",
    "parse_square",
    "rank_of",
    "square_name",
    # Domain objects
    "Move",
    "MoveGenerator",
    "Piece",
    "Position",
    "Rules",
    "UndoRecord",
    # Attacks
    "attackers_of",
    "is_in_check",
    "is_square_attacked",
    "king_square",
    # Execution
    "ExecutionResult",
    "PromotionChooser",
    "always_queen",
    "coerce_promotion",
    "execute",
    # Notation
    "STARTING_FEN",
    "encode",
    "move_to_long",
    "move_to_san",
    "position_from_fen",
    "position_to_fen",
]
