"""Requests and Response models"""

from typing import Any, Optional

from pydantic import BaseModel, field_validator

from chess_trainer.chess.pieces import PROMOTION_OPTIONS
from chess_trainer.chess.position import FILES, Position
from chess_trainer.core.exceptions import InvalidRequestError
from chess_trainer.core.models import ChessEvent, FeedbackMessage
from chess_trainer.core.shared_types import (
    CastlingSide,
    Color,
    GameStatus,
    PieceType,
    SpecialMove,
)

AlgebraicSquare = str


# --- REQUEST MODELS ---
class SelectSquareRequest(BaseModel):
    """The player clicked a square"""

    square: AlgebraicSquare

    @field_validator("square")
    @classmethod
    def validate_square(cls, value: str) -> str:
        value = value.strip().lower()
        if len(value) != 2 or value[0] not in FILES or value[1] not in "12345678":
            raise InvalidRequestError(
                f"Cannot interpret square: {value!r} as a valid square name."
            )
        return value

    @property
    def position(self) -> Position:
        return Position.from_algebraic(self.square)


class PromotionRequest(BaseModel):
    """Choice of piece for a pawn waiting for promotion. When left out, the configured default is used."""

    piece_type: Optional[PieceType] = None

    @field_validator("piece_type")
    @classmethod
    def validate_piece_type(cls, value: Optional[PieceType]) -> Optional[PieceType]:
        if value is not None and value not in PROMOTION_OPTIONS:
            raise InvalidRequestError(f"A pawn cannot promote into a {value}.")
        return value


# --- RESPONSE MODELS ---
class PieceView(BaseModel):
    type: PieceType
    color: Color
    symbol: str
    has_moved: bool


class MoveView(BaseModel):
    from_square: AlgebraicSquare
    to_square: AlgebraicSquare
    piece: PieceType
    color: Color
    captured: Optional[PieceType]
    notation: str
    special_move: SpecialMove


class GameStateResponse(BaseModel):
    """Everything the display reads after an action"""

    board: list[list[Optional[PieceView]]]  # row 0 is black's back rank
    fen: str
    current_player: Color
    selected_square: Optional[AlgebraicSquare]
    legal_moves: list[AlgebraicSquare]
    move_history: list[MoveView]
    game_status: GameStatus
    is_training_mode: bool
    king_in_check: Optional[AlgebraicSquare]
    en_passant_target: Optional[AlgebraicSquare]
    castling_rights: dict[Color, list[CastlingSide]]
    promotion_pending: Optional[AlgebraicSquare]
    is_paused: bool
    toasts: list[FeedbackMessage]
    modal: Optional[FeedbackMessage]
    explanation: Optional[Any]  # whatever the event sink returned for the last event
    last_event: Optional[ChessEvent]
