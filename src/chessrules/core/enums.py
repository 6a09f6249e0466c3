"""Core enumerations for the rules engine."""

from __future__ import annotations

from enum import Enum, IntEnum


class Color(IntEnum):
    """Side color."""

    WHITE = 0
    BLACK = 1

    @property
    def opposite(self) -> Color:
        return Color(1 - self.value)

    @property
    def letter(self) -> str:
        """FEN / piece-id prefix: ``w`` or ``b``."""
        return "w" if self is Color.WHITE else "b"

    @property
    def forward(self) -> int:
        """Rank direction pawns of this color advance in."""
        return 1 if self is Color.WHITE else -1

    @property
    def back_rank(self) -> int:
        return 1 if self is Color.WHITE else 8

    @property
    def pawn_rank(self) -> int:
        """Home rank of this color's pawns (double-step origin)."""
        return 2 if self is Color.WHITE else 7

    @property
    def promotion_rank(self) -> int:
        return 8 if self is Color.WHITE else 1

    def __str__(self) -> str:
        return self.name.lower()


class PieceType(IntEnum):
    """Chess piece types ordered by conventional value."""

    PAWN = 1
    KNIGHT = 2
    BISHOP = 3
    ROOK = 4
    QUEEN = 5
    KING = 6

    @property
    def letter(self) -> str:
        """Uppercase letter used in FEN, notation and piece ids."""
        return _LETTERS[self]

    @classmethod
    def from_letter(cls, letter: str) -> PieceType:
        try:
            return _BY_LETTER[letter.upper()]
        except KeyError:
            raise ValueError(f"Invalid piece letter: {letter!r}") from None


_LETTERS: dict[PieceType, str] = {
    PieceType.PAWN: "P",
    PieceType.KNIGHT: "N",
    PieceType.BISHOP: "B",
    PieceType.ROOK: "R",
    PieceType.QUEEN: "Q",
    PieceType.KING: "K",
}
_BY_LETTER: dict[str, PieceType] = {v: k for k, v in _LETTERS.items()}

PROMOTION_TYPES: tuple[PieceType, ...] = (
    PieceType.QUEEN,
    PieceType.ROOK,
    PieceType.BISHOP,
    PieceType.KNIGHT,
)


class CastleSide(Enum):
    """Which wing a castling move goes to."""

    KINGSIDE = "O-O"
    QUEENSIDE = "O-O-O"


class TerminalReason(Enum):
    """Why a game ended on the board."""

    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"

    def __str__(self) -> str:
        return self.value


class GameResult(IntEnum):
    """Outcome of a game."""

    IN_PROGRESS = 0
    WHITE_WINS = 1
    BLACK_WINS = 2
    DRAW = 3

    @classmethod
    def win_for(cls, color: Color) -> GameResult:
        return cls.WHITE_WINS if color == Color.WHITE else cls.BLACK_WINS


_RESULT_TOKENS: dict[GameResult, str] = {
    GameResult.WHITE_WINS: "1-0",
    GameResult.BLACK_WINS: "0-1",
    GameResult.DRAW: "1/2-1/2",
}


def result_token(result: GameResult) -> str | None:
    """Score string for a finished game, None while it is in progress."""
    return _RESULT_TOKENS.get(result)
