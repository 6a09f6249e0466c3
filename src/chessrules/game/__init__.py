"""Game layer — one owned position per session, move history, controller.

Quick start::

    from chessrules.game import GameController

    ctrl = GameController()
    ctrl.play_uci("e2e4")
    print(ctrl.observation().notation)

The Qt bridge lives in :mod:`chessrules.game.qt_bridge` and is imported
on demand so headless callers never load Qt.
"""

from chessrules.game.controller import GameController, GameEvents, Observation
from chessrules.game.settings import GameSettings
from chessrules.game.state import GameState, MoveRecord

__all__ = [
    "GameController",
    "GameEvents",
    "GameSettings",
    "GameState",
    "MoveRecord",
    "Observation",
]
