"""User-configurable game settings."""

from __future__ import annotations

from dataclasses import dataclass

from chessrules.core.enums import PROMOTION_TYPES, PieceType
from chessrules.core.notation import STARTING_FEN


@dataclass
class GameSettings:
    """Settings a :class:`~chessrules.game.controller.GameController` starts from."""

    # Position a new controller loads; reset() always goes to the standard start
    start_fen: str = STARTING_FEN

    # Used when no promotion callback is given (non-interactive play)
    default_promotion: PieceType = PieceType.QUEEN

    def __post_init__(self) -> None:
        if self.default_promotion not in PROMOTION_TYPES:
            raise ValueError(
                f"Cannot promote to {self.default_promotion.name.lower()}"
            )
