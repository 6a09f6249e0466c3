"""Tests for GameController — the command and query boundary."""

import threading

import pytest

from chessrules.core.enums import Color, GameResult, PieceType, TerminalReason
from chessrules.core.errors import IllegalMoveRequest, InvariantViolation, ParseError
from chessrules.core.move import Move
from chessrules.core.notation import STARTING_FEN, position_to_fen
from chessrules.core.types import D5, D6, E1, E2, E4, E5, E7, E8, H4, parse_square
from chessrules.game.controller import GameController
from chessrules.game.settings import GameSettings
from chessrules.game.state import GameState, MoveRecord

STALEMATE = "7k/5Q2/6K1/8/8/8/8/8 b - - 0 1"
CASTLING = "r3k2r/8/8/8/8/8/8/R3K2R w KQkq - 0 1"


def _play_all(ctrl: GameController, *moves: str) -> list[MoveRecord]:
    return [ctrl.play_uci(m) for m in moves]


def _fen(ctrl: GameController) -> str:
    return position_to_fen(ctrl.state.position)


class TestLoad:
    def test_default_start(self) -> None:
        ctrl = GameController()
        assert _fen(ctrl) == STARTING_FEN
        assert ctrl.observation().turn == Color.WHITE

    def test_settings_start_fen(self) -> None:
        fen = "4k3/8/8/8/8/8/8/4K3 b - - 0 1"
        ctrl = GameController(GameSettings(start_fen=fen))
        assert ctrl.state.side_to_move == Color.BLACK

    def test_stalemate_position_is_over(self) -> None:
        ctrl = GameController()
        ctrl.load_position(STALEMATE)
        obs = ctrl.observation()
        assert obs.game_over
        assert obs.terminal_reason == TerminalReason.STALEMATE
        assert obs.result == "1/2-1/2"
        assert not obs.in_check

    def test_mated_position_is_over(self) -> None:
        ctrl = GameController()
        ctrl.load_position(
            "rnb1kbnr/pppp1ppp/8/4p3/6Pq/5P2/PPPPP2P/RNBQKBNR w KQkq - 0 1"
        )
        obs = ctrl.observation()
        assert obs.game_over
        assert obs.result == "0-1"
        assert obs.checkers == (H4,)

    def test_bad_fen_keeps_game(self) -> None:
        ctrl = GameController()
        ctrl.play_uci("e2e4")
        before = _fen(ctrl)
        with pytest.raises(ParseError):
            ctrl.load_position("not a fen at all")
        assert _fen(ctrl) == before
        assert ctrl.state.ply_count == 1

    def test_missing_king_is_rejected(self) -> None:
        ctrl = GameController()
        with pytest.raises(InvariantViolation):
            ctrl.load_position("4k3/8/8/8/8/8/8/8 w - - 0 1")
        assert _fen(ctrl) == STARTING_FEN

    def test_reset(self) -> None:
        ctrl = GameController(GameSettings(start_fen="4k3/8/8/8/8/8/8/4K3 w - - 0 1"))
        ctrl.play_uci("e1e2")
        ctrl.reset()
        assert _fen(ctrl) == STARTING_FEN
        assert ctrl.state.move_history == []


class TestPlayMove:
    def test_legal_move_passes_turn(self) -> None:
        ctrl = GameController()
        record = ctrl.play_uci("e2e4")
        assert record.san == "e4"
        assert ctrl.state.side_to_move == Color.BLACK

    def test_illegal_move_raises_and_changes_nothing(self) -> None:
        ctrl = GameController()
        with pytest.raises(IllegalMoveRequest):
            ctrl.play_move(Move("wP5", E2, parse_square("e5")))
        assert _fen(ctrl) == STARTING_FEN

    def test_submit_move_returns_false(self) -> None:
        ctrl = GameController()
        assert not ctrl.submit_move(Move("wP5", E2, parse_square("e5")))
        assert ctrl.state.ply_count == 0

    def test_submit_move_accepts_legal(self) -> None:
        ctrl = GameController()
        assert ctrl.submit_move(Move("wP5", E2, E4, is_pawn_double_step=True))
        assert ctrl.state.side_to_move == Color.BLACK

    def test_wrong_side_rejected(self) -> None:
        ctrl = GameController()
        with pytest.raises(IllegalMoveRequest):
            ctrl.play_uci("e7e5")

    def test_promotion_letter_on_ordinary_move(self) -> None:
        ctrl = GameController()
        with pytest.raises(IllegalMoveRequest, match="not a promotion"):
            ctrl.play_uci("e2e4q")
        assert _fen(ctrl) == STARTING_FEN

    @pytest.mark.parametrize("text", ["", "e2", "e2e4e5", "z9e4", "e2x4"])
    def test_malformed_uci(self, text: str) -> None:
        with pytest.raises(IllegalMoveRequest):
            GameController().play_uci(text)

    def test_move_leaving_king_in_check_rejected(self) -> None:
        ctrl = GameController()
        ctrl.load_position("4r1k1/8/8/8/8/8/4B3/4K3 w - - 0 1")
        with pytest.raises(IllegalMoveRequest):
            ctrl.play_uci("e2d3")

    def test_no_moves_after_game_over(self) -> None:
        ctrl = GameController()
        ctrl.load_position(STALEMATE)
        with pytest.raises(IllegalMoveRequest, match="over"):
            ctrl.play_move(Move("bK1", parse_square("h8"), parse_square("g8")))
        assert ctrl.legal_moves(parse_square("h8")) == []


class TestFoolsMate:
    def test_checkmate(self) -> None:
        ctrl = GameController()
        records = _play_all(ctrl, "f2f3", "e7e5", "g2g4", "d8h4")
        assert records[-1].san == "Qh4#"
        assert records[-1].notation == "Qd8-h4#"

        obs = ctrl.observation()
        assert obs.game_over
        assert obs.terminal_reason == TerminalReason.CHECKMATE
        assert obs.result == "0-1"
        assert ctrl.state.result == GameResult.BLACK_WINS
        assert obs.checkers == (H4,)

    def test_turn_stays_with_mating_side(self) -> None:
        ctrl = GameController()
        _play_all(ctrl, "f2f3", "e7e5", "g2g4", "d8h4")
        assert ctrl.observation().turn == Color.BLACK


class TestEnPassant:
    def test_available_immediately(self) -> None:
        ctrl = GameController()
        _play_all(ctrl, "e2e4", "a7a6", "e4e5", "d7d5")
        move = ctrl.find_move(E5, D6)
        assert move is not None and move.is_en_passant
        victim = ctrl.state.position.board[D5]
        record = ctrl.play_move(move)
        assert record.captured is victim
        assert record.notation == "e5xd6 e.p."
        assert ctrl.state.position.board[D5] is None

    def test_expires_after_one_ply(self) -> None:
        ctrl = GameController()
        _play_all(ctrl, "e2e4", "a7a6", "e4e5", "d7d5", "h2h3", "h7h6")
        assert ctrl.find_move(E5, D6) is None


class TestCastling:
    def _castle_targets(self, ctrl: GameController, square: int = E1) -> set[int]:
        return {m.to_sq for m in ctrl.legal_moves(square) if m.is_castle}

    def test_both_sides_available(self) -> None:
        ctrl = GameController(GameSettings(start_fen=CASTLING))
        assert self._castle_targets(ctrl) == {parse_square("g1"), parse_square("c1")}

    def test_castle_moves_rook(self) -> None:
        ctrl = GameController(GameSettings(start_fen=CASTLING))
        record = ctrl.play_uci("e1g1")
        board = ctrl.state.position.board
        assert record.notation == "O-O"
        assert board[parse_square("f1")].piece_type == PieceType.ROOK  # type: ignore[union-attr]
        assert board[parse_square("h1")] is None

    def test_king_returning_home_cannot_castle(self) -> None:
        ctrl = GameController(GameSettings(start_fen=CASTLING))
        _play_all(ctrl, "e1f1", "e8f8", "f1e1", "f8e8")
        assert self._castle_targets(ctrl) == set()
        assert _fen(ctrl).split()[2] == "-"

    def test_rook_returning_home_loses_that_side(self) -> None:
        ctrl = GameController(GameSettings(start_fen=CASTLING))
        _play_all(ctrl, "h1h2", "a8a7", "h2h1", "a7a8")
        assert self._castle_targets(ctrl) == {parse_square("c1")}
        assert _fen(ctrl).split()[2] == "Qk"

    def test_fen_castling_field_is_ignored(self) -> None:
        ctrl = GameController(
            GameSettings(start_fen="r3k2r/8/8/8/8/8/8/R3K2R w - - 0 1")
        )
        assert self._castle_targets(ctrl) == {parse_square("g1"), parse_square("c1")}


class TestPromotion:
    PROMO = "8/4P3/8/8/8/8/k7/4K3 w - - 0 1"

    def test_uci_letter_selects_piece(self) -> None:
        ctrl = GameController(GameSettings(start_fen=self.PROMO))
        record = ctrl.play_uci("e7e8n")
        assert record.promotion == PieceType.KNIGHT
        assert ctrl.state.position.board[E8].piece_type == PieceType.KNIGHT  # type: ignore[union-attr]

    def test_controller_chooser(self) -> None:
        asked: list[tuple[PieceType, ...]] = []

        def choose(choices: tuple[PieceType, ...]) -> PieceType:
            asked.append(choices)
            return PieceType.ROOK

        ctrl = GameController(GameSettings(start_fen=self.PROMO), choose)
        record = ctrl.play_uci("e7e8")
        assert len(asked) == 1
        assert record.promotion == PieceType.ROOK

    def test_settings_default_promotion(self) -> None:
        settings = GameSettings(start_fen=self.PROMO, default_promotion=PieceType.BISHOP)
        record = GameController(settings).play_uci("e7e8")
        assert record.san == "e8=B"

    def test_invalid_choice_becomes_queen(self) -> None:
        ctrl = GameController(
            GameSettings(start_fen=self.PROMO), lambda _c: PieceType.KING
        )
        assert ctrl.play_uci("e7e8").promotion == PieceType.QUEEN

    def test_promoted_piece_keeps_id(self) -> None:
        ctrl = GameController(GameSettings(start_fen=self.PROMO))
        pawn_id = ctrl.state.position.board[E7].id  # type: ignore[union-attr]
        ctrl.play_uci("e7e8")
        assert ctrl.state.position.board[E8].id == pawn_id  # type: ignore[union-attr]

    def test_settings_reject_king(self) -> None:
        with pytest.raises(ValueError):
            GameSettings(default_promotion=PieceType.KING)


class TestEvents:
    def test_move_event(self) -> None:
        ctrl = GameController()
        seen: list[tuple[MoveRecord, GameState]] = []
        ctrl.events.on_move.append(lambda rec, st: seen.append((rec, st)))
        ctrl.play_uci("e2e4")
        assert len(seen) == 1
        assert seen[0][0].san == "e4"
        assert seen[0][1] is ctrl.state

    def test_rejected_move_emits_nothing(self) -> None:
        ctrl = GameController()
        seen: list[MoveRecord] = []
        ctrl.events.on_move.append(lambda rec, _st: seen.append(rec))
        ctrl.submit_move(Move("wP5", E2, parse_square("e5")))
        assert seen == []

    def test_game_over_event(self) -> None:
        ctrl = GameController()
        seen: list[tuple[GameResult, TerminalReason]] = []
        ctrl.events.on_game_over.append(lambda res, why: seen.append((res, why)))
        _play_all(ctrl, "f2f3", "e7e5", "g2g4", "d8h4")
        assert seen == [(GameResult.BLACK_WINS, TerminalReason.CHECKMATE)]

    def test_load_events(self) -> None:
        ctrl = GameController()
        loaded: list[str] = []
        over: list[TerminalReason] = []
        ctrl.events.on_position_loaded.append(loaded.append)
        ctrl.events.on_game_over.append(lambda _res, why: over.append(why))
        ctrl.load_position(STALEMATE)
        assert loaded == [STALEMATE]
        assert over == [TerminalReason.STALEMATE]


class TestObservation:
    def test_before_any_move(self) -> None:
        obs = GameController().observation()
        assert obs.last_move is None
        assert obs.notation is None
        assert obs.result is None
        assert not obs.game_over

    def test_after_move(self) -> None:
        ctrl = GameController()
        record = ctrl.play_uci("g1f3")
        obs = ctrl.observation()
        assert obs.last_move == record.move
        assert obs.notation == "Ng1-f3"
        assert obs.san == "Nf3"
        assert obs.turn == Color.BLACK

    def test_check_reported(self) -> None:
        ctrl = GameController()
        ctrl.load_position("4k3/8/8/8/8/8/8/R3K3 w - - 0 1")
        ctrl.play_uci("a1a8")
        obs = ctrl.observation()
        assert obs.in_check
        assert obs.checkers == (parse_square("a8"),)
        assert obs.san == "Ra8+"


class TestConcurrency:
    MOVES = ("e2e4", "e7e5", "g1f3", "b8c6", "f1c4", "g8f6", "e1g1", "f6e4")

    def _reachable(self) -> set[tuple[object, ...]]:
        ctrl = GameController()
        seen = {ctrl.snapshot()}
        for uci in self.MOVES:
            ctrl.play_uci(uci)
            seen.add(ctrl.snapshot())
        return seen

    def test_readers_never_see_a_simulated_move(self) -> None:
        reachable = self._reachable()
        ctrl = GameController()
        stop = threading.Event()
        stray: list[tuple[object, ...]] = []
        reads = 0

        def reader() -> None:
            nonlocal reads
            squares = [parse_square(n) for n in ("e1", "e2", "e4", "f3", "c4", "e8")]
            while not stop.is_set():
                for sq in squares:
                    ctrl.legal_moves(sq)
                ctrl.observation()
                snap = ctrl.snapshot()
                if snap not in reachable:
                    stray.append(snap)
                reads += 1

        thread = threading.Thread(target=reader)
        thread.start()
        try:
            for _ in range(15):
                _play_all(ctrl, *self.MOVES)
                ctrl.reset()
        finally:
            stop.set()
            thread.join(timeout=30)

        assert not thread.is_alive()
        assert reads > 0
        assert stray == []

    def test_moves_from_two_threads_alternate_sides(self) -> None:
        ctrl = GameController()
        errors: list[Exception] = []

        def play(moves: tuple[str, ...]) -> None:
            for uci in moves:
                while True:
                    try:
                        ctrl.play_uci(uci)
                        break
                    except IllegalMoveRequest:
                        if ctrl.state.ply_count >= len(self.MOVES):
                            errors.append(AssertionError(uci))
                            return
                    except Exception as exc:  # noqa: BLE001
                        errors.append(exc)
                        return

        white = threading.Thread(target=play, args=(self.MOVES[0::2],))
        black = threading.Thread(target=play, args=(self.MOVES[1::2],))
        white.start()
        black.start()
        white.join(timeout=30)
        black.join(timeout=30)

        assert errors == []
        sans = [rec.san for rec in ctrl.state.move_history]
        assert sans == ["e4", "e5", "Nf3", "Nc6", "Bc4", "Nf6", "O-O", "Nxe4"]
        assert ctrl.state.side_to_move == Color.WHITE
