"""Orchestration of communication from the display to the game-state machine and the explanation collaborator (and the reverse direction)."""

import random
import time
from typing import Any, Callable, Optional
from uuid import UUID

from loguru import logger

from chess_trainer.api.models import (
    GameStateResponse,
    MoveView,
    PieceView,
    PromotionRequest,
    SelectSquareRequest,
)
from chess_trainer.chess.events import EventSink, game_start_event
from chess_trainer.chess.game import (
    Action,
    Feedback,
    GameState,
    PromotePawn,
    ResetGame,
    SelectSquare,
    ToggleTrainingMode,
    UndoMove,
    transition,
)
from chess_trainer.chess.pieces import Piece
from chess_trainer.chess.position import Position
from chess_trainer.core.config import TrainerConfig
from chess_trainer.core.models import FEEDBACK_ICONS, ChessEvent, FeedbackMessage
from chess_trainer.core.shared_types import CastlingSide, Color, FeedbackType, PieceType

# Feedback of these kinds interrupts the game until the player dismisses it
MODAL_FEEDBACK = (FeedbackType.ERROR, FeedbackType.WARNING)


class ChessService:
    """
    One trainer session: owns the single game state and everything shown around it.

    * errors, warnings and blocking notices become THE modal message, and the board ignores clicks until it is dismissed
    * info and success messages become toasts that disappear after `config.toast_duration_ms`
    * events go to the event sink once the new state is in place. Whatever the sink returns is shown as the explanation.
    """

    def __init__(
        self,
        event_sink: EventSink,
        config: Optional[TrainerConfig] = None,
        rng: Optional[random.Random] = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.event_sink = event_sink
        self.config = config or TrainerConfig()
        self.rng = rng or random.Random(self.config.seed)
        self.clock = clock

        self.state = GameState.initial()
        self.toasts: list[FeedbackMessage] = []
        self.modal: Optional[FeedbackMessage] = None
        self.explanation: Optional[Any] = None
        self.last_event: Optional[ChessEvent] = None

        self._publish((game_start_event(),))

    @property
    def is_paused(self) -> bool:
        return self.modal is not None

    # -- Player actions --
    def select_square(self, request: SelectSquareRequest) -> GameStateResponse:
        """The player clicked a square. Ignored while a modal message is shown."""
        if self.is_paused:
            logger.debug(f"Click on {request.square} ignored: game paused")
            return self.game_state()
        return self._apply(SelectSquare(request.position))

    def promote_pawn(self, request: PromotionRequest) -> GameStateResponse:
        piece_type = request.piece_type or PieceType(self.config.default_promotion)
        return self._apply(PromotePawn(piece_type))

    def undo_move(self) -> GameStateResponse:
        return self._apply(UndoMove())

    def reset_game(self) -> GameStateResponse:
        """Start over. Messages left from the previous game are thrown away."""
        self.toasts.clear()
        self.modal = None
        return self._apply(ResetGame())

    def toggle_training_mode(self) -> GameStateResponse:
        return self._apply(ToggleTrainingMode())

    # -- Messages --
    def dismiss_modal(self) -> GameStateResponse:
        """Close the modal message and resume the game."""
        self.modal = None
        return self.game_state()

    def remove_feedback(self, feedback_id: UUID) -> GameStateResponse:
        """Close a message before it expires. Unknown ids (ex. an expired toast) are ignored."""
        self.toasts = [toast for toast in self.toasts if toast.id != feedback_id]
        if self.modal is not None and self.modal.id == feedback_id:
            self.modal = None
        return self.game_state()

    def game_state(self) -> GameStateResponse:
        """Current state, as read by the display. Expired toasts are dropped first."""
        self._prune_toasts()
        return self._create_game_state_response()

    # -- Internal helpers --
    def _apply(self, action: Action) -> GameStateResponse:
        """Run the reducer, commit the new state, then show the feedback and publish the events."""
        logger.debug(f"Action: {action}")
        result = transition(self.state, action, self.rng)
        self.state = result.state
        for feedback in result.feedback:
            self._show(feedback)
        self._publish(result.events)
        return self.game_state()

    def _show(self, feedback: Feedback) -> None:
        message = FeedbackMessage(
            type=feedback.kind,
            message=feedback.message,
            icon=FEEDBACK_ICONS[feedback.kind],
            explanation=feedback.explanation,
            rule_id=feedback.rule_id,
        )
        if feedback.kind in MODAL_FEEDBACK or feedback.blocking:
            # only one modal at a time: the newest replaces the previous one
            self.modal = message
            return

        message.expires_at = self.clock() + self.config.toast_duration_ms / 1000
        self.toasts.append(message)

    def _publish(self, events: tuple[ChessEvent, ...]) -> None:
        """A failing sink is logged and otherwise ignored: it must never change the game."""
        for event in events:
            self.last_event = event
            try:
                self.explanation = self.event_sink.publish(event)
            except Exception:
                logger.exception(f"Event sink failed to handle {event.type} event")

    def _prune_toasts(self) -> None:
        now = self.clock()
        self.toasts = [
            toast
            for toast in self.toasts
            if toast.expires_at is None or toast.expires_at > now
        ]

    def _create_game_state_response(self) -> GameStateResponse:
        """Convert the GameState (plus the messages) to a GameStateResponse."""
        state = self.state
        return GameStateResponse(
            board=[[_piece_view(piece) for piece in row] for row in state.board.squares],
            fen=state.board.to_fen(),
            current_player=state.current_player,
            selected_square=_algebraic(state.selected_position),
            legal_moves=[position.to_algebraic() for position in state.legal_moves],
            move_history=[
                MoveView(
                    from_square=move.from_square.to_algebraic(),
                    to_square=move.to_square.to_algebraic(),
                    piece=move.piece.type,
                    color=move.piece.color,
                    captured=move.captured.type if move.captured is not None else None,
                    notation=move.notation,
                    special_move=move.special_move,
                )
                for move in state.move_history
            ],
            game_status=state.game_status,
            is_training_mode=state.is_training_mode,
            king_in_check=_algebraic(state.king_in_check),
            en_passant_target=_algebraic(state.en_passant_target),
            castling_rights={
                color: [side for side in CastlingSide if state.castling_rights.has(color, side)]
                for color in Color
            },
            promotion_pending=_algebraic(state.promotion_pending),
            is_paused=self.is_paused,
            toasts=list(self.toasts),
            modal=self.modal,
            explanation=self.explanation,
            last_event=self.last_event,
        )


def _piece_view(piece: Optional[Piece]) -> Optional[PieceView]:
    if piece is None:
        return None
    return PieceView(
        type=piece.type, color=piece.color, symbol=piece.symbol, has_moved=piece.has_moved
    )


def _algebraic(position: Optional[Position]) -> Optional[str]:
    return position.to_algebraic() if position is not None else None
