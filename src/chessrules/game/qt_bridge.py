"""Qt bridge exposing a game controller to a Qt rendering layer."""

from __future__ import annotations

from PyQt6.QtCore import QObject, pyqtSignal, pyqtSlot

from chessrules.core.enums import GameResult, TerminalReason, result_token
from chessrules.core.errors import ChessRulesError, IllegalMoveRequest
from chessrules.core.move import Move
from chessrules.game.controller import GameController
from chessrules.game.state import GameState, MoveRecord


class GameSignals(QObject):
    """Re-emits controller events as Qt signals and accepts moves as a slot.

    Lives on the thread that owns the controller; other threads talk to it
    through queued signal/slot connections.
    """

    move_played = pyqtSignal(object, object)  # MoveRecord, Observation
    game_over = pyqtSignal(str, str)  # result token, terminal reason
    position_loaded = pyqtSignal(str)  # fen
    move_rejected = pyqtSignal(object, str)  # move, reason
    load_failed = pyqtSignal(str, str)  # fen, error

    def __init__(self, controller: GameController, parent: QObject | None = None) -> None:
        super().__init__(parent)
        self._controller = controller
        events = controller.events
        events.on_move.append(self._on_move)
        events.on_game_over.append(self._on_game_over)
        events.on_position_loaded.append(self.position_loaded.emit)

    @property
    def controller(self) -> GameController:
        return self._controller

    @pyqtSlot(object)
    def request_move(self, move_obj: object) -> None:
        """Play *move_obj*; emits ``move_rejected`` instead of raising."""
        if not isinstance(move_obj, Move):
            self.move_rejected.emit(move_obj, "not a move")
            return
        try:
            self._controller.play_move(move_obj)
        except IllegalMoveRequest as exc:
            self.move_rejected.emit(move_obj, exc.reason)

    @pyqtSlot(str)
    def load_position(self, fen: str) -> None:
        try:
            self._controller.load_position(fen)
        except ChessRulesError as exc:
            self.load_failed.emit(fen, str(exc))

    @pyqtSlot()
    def reset(self) -> None:
        self._controller.reset()

    def _on_move(self, record: MoveRecord, _state: GameState) -> None:
        self.move_played.emit(record, self._controller.observation())

    def _on_game_over(self, result: GameResult, reason: TerminalReason) -> None:
        self.game_over.emit(result_token(result) or "", str(reason))
