"""Unit tests for chess_trainer/services/chess_service.py"""

from typing import Generator
from unittest.mock import Mock

import pytest

from chess_trainer.api.models import PromotionRequest, SelectSquareRequest
from chess_trainer.chess.board import Board
from chess_trainer.chess.game import GameState
from chess_trainer.core.config import TrainerConfig
from chess_trainer.core.shared_types import (
    ChessEventType,
    Color,
    FeedbackType,
    GameStatus,
    PieceType,
    RuleId,
)
from chess_trainer.services.chess_service import ChessService
from chess_trainer.services.event_sinks import RecordingEventSink


# --- MOCK DEPENDENCIES ----
class FakeClock:
    """Monotonic clock that only moves when told to"""

    def __init__(self) -> None:
        self.now = 100.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def sink() -> Generator[RecordingEventSink, None, None]:
    """Ensures to clear the recorded events between tests"""
    recording_sink = RecordingEventSink()
    try:
        yield recording_sink
    finally:
        recording_sink.clear()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(sink: RecordingEventSink, clock: FakeClock) -> ChessService:
    return ChessService(sink, TrainerConfig(toast_duration_ms=4000, seed=3), clock=clock)


def select(service: ChessService, *squares: str):
    response = None
    for square in squares:
        response = service.select_square(SelectSquareRequest(square=square))
    return response


# --- SESSION START ---
def test_new_session_publishes_game_start(service: ChessService, sink: RecordingEventSink) -> None:
    assert [event.type for event in sink.events] == [ChessEventType.GAME_START]
    response = service.game_state()
    assert response.explanation == {"event": "game_start", "recorded": 1}
    assert response.last_event is not None and response.last_event.type == ChessEventType.GAME_START
    assert response.current_player == Color.WHITE
    assert response.game_status == GameStatus.PLAYING
    assert not response.is_paused


def test_initial_response_shape(service: ChessService) -> None:
    response = service.game_state()
    assert len(response.board) == 8
    assert all(len(row) == 8 for row in response.board)
    white_king = response.board[7][4]
    assert white_king is not None
    assert (white_king.type, white_king.color, white_king.symbol) == (PieceType.KING, Color.WHITE, "♔")
    assert response.board[4][4] is None
    assert response.castling_rights == {
        Color.WHITE: ["king_side", "queen_side"],
        Color.BLACK: ["king_side", "queen_side"],
    }


# --- MOVES ---
def test_select_and_move(service: ChessService, sink: RecordingEventSink) -> None:
    response = select(service, "e2")
    assert response.selected_square == "e2"
    assert set(response.legal_moves) == {"e3", "e4"}

    response = select(service, "e4")
    assert response.current_player == Color.BLACK
    assert response.en_passant_target == "e3"
    assert response.fen == "rnbqkbnr/pppppppp/8/8/4P3/8/PPPP1PPP/RNBQKBNR"
    assert [move.notation for move in response.move_history] == ["e4"]
    assert sink.events[-1].type == ChessEventType.MOVE
    assert response.explanation == {"event": "move", "recorded": 3}


def test_checkmate_shows_blocking_modal(service: ChessService) -> None:
    response = select(service, "f2", "f3", "e7", "e5", "g2", "g4", "d8", "h4")
    assert response.game_status == GameStatus.CHECKMATE
    assert response.king_in_check == "e1"
    assert response.modal is not None
    assert response.modal.type == FeedbackType.SUCCESS
    assert response.is_paused


# --- MODAL / PAUSE ---
def test_error_pauses_the_game_until_dismissed(service: ChessService) -> None:
    response = select(service, "e2", "e5")
    assert response.modal is not None
    assert response.modal.type == FeedbackType.ERROR
    assert response.modal.rule_id == RuleId.INVALID_PAWN_MOVE
    assert response.modal.icon == "❌"
    assert response.modal.expires_at is None
    assert response.is_paused

    # clicks are ignored while paused
    response = select(service, "e2")
    assert response.selected_square is None

    response = service.dismiss_modal()
    assert not response.is_paused
    response = select(service, "e2")
    assert response.selected_square == "e2"


def test_newest_modal_replaces_previous(service: ChessService) -> None:
    first = select(service, "e7").modal
    second = service.undo_move().modal
    assert first is not None and second is not None
    assert first.id != second.id
    assert second.message == "No move to undo."


def test_remove_modal_by_id(service: ChessService) -> None:
    response = select(service, "e7")
    assert response.modal is not None
    response = service.remove_feedback(response.modal.id)
    assert response.modal is None
    assert not response.is_paused


# --- TOASTS ---
def test_toasts_expire(service: ChessService, clock: FakeClock) -> None:
    response = service.toggle_training_mode()
    assert response.is_training_mode
    assert len(response.toasts) == 1
    toast = response.toasts[0]
    assert toast.type == FeedbackType.INFO
    assert toast.expires_at == pytest.approx(clock.now + 4.0)

    clock.advance(3.9)
    assert len(service.game_state().toasts) == 1
    clock.advance(0.2)
    assert service.game_state().toasts == []


def test_remove_toast(service: ChessService) -> None:
    toast = service.toggle_training_mode().toasts[0]
    response = service.remove_feedback(toast.id)
    assert response.toasts == []


def test_training_tip_after_move(service: ChessService) -> None:
    service.toggle_training_mode()
    response = select(service, "g1", "f3")
    messages = [toast.message for toast in response.toasts]
    assert len(messages) == 2


def test_capture_shows_success_toast(service: ChessService) -> None:
    response = select(service, "e2", "e4", "d7", "d5", "e4", "d5")
    assert any(toast.type == FeedbackType.SUCCESS for toast in response.toasts)
    assert response.move_history[-1].captured == PieceType.PAWN


# --- PROMOTION ---
def test_promotion_uses_requested_piece(service: ChessService) -> None:
    service.state = GameState(board=Board.from_fen("8/P6k/8/8/8/8/8/4K3"))
    response = select(service, "a7", "a8")
    assert response.promotion_pending == "a8"

    response = service.promote_pawn(PromotionRequest(piece_type=PieceType.ROOK))
    assert response.promotion_pending is None
    assert response.board[0][0] is not None and response.board[0][0].type == PieceType.ROOK
    assert response.move_history[-1].notation == "a8=R"


def test_promotion_defaults_to_configured_piece(sink: RecordingEventSink, clock: FakeClock) -> None:
    service = ChessService(sink, TrainerConfig(default_promotion="knight"), clock=clock)
    service.state = GameState(board=Board.from_fen("8/P6k/8/8/8/8/8/4K3"))
    select(service, "a7", "a8")
    response = service.promote_pawn(PromotionRequest())
    assert response.move_history[-1].notation == "a8=N"
    assert sink.events[-1].type == ChessEventType.PROMOTION


# --- UNDO / RESET ---
def test_undo_move(service: ChessService) -> None:
    select(service, "e2", "e4")
    response = service.undo_move()
    assert response.current_player == Color.WHITE
    assert response.move_history == []
    assert response.fen == "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"


def test_undo_without_moves_warns(service: ChessService) -> None:
    response = service.undo_move()
    assert response.modal is not None
    assert response.modal.type == FeedbackType.WARNING


def test_reset_clears_messages(service: ChessService, sink: RecordingEventSink) -> None:
    service.toggle_training_mode()
    select(service, "e2", "e4", "d2")
    assert service.game_state().is_paused

    response = service.reset_game()
    assert not response.is_paused
    assert not response.is_training_mode
    assert response.move_history == []
    # only the "new game" notice is left
    assert [toast.type for toast in response.toasts] == [FeedbackType.INFO]
    assert sink.events[-1].type == ChessEventType.GAME_START


# --- EVENT SINK FAILURES ---
def test_failing_sink_never_changes_the_game(clock: FakeClock) -> None:
    failing_sink = Mock()
    failing_sink.publish.side_effect = RuntimeError("ontology unavailable")
    service = ChessService(failing_sink, clock=clock)

    response = select(service, "e2", "e4")
    assert response.current_player == Color.BLACK
    assert response.move_history[-1].notation == "e4"
    assert response.explanation is None
    assert response.last_event is not None and response.last_event.type == ChessEventType.MOVE
    assert failing_sink.publish.call_count == 3
