"""
Boundary layer data model(s).

The game-state machine produces these, the service passes them onwards:
* ChessEvent goes to the explanation/query collaborator (rules ontology)
* FeedbackMessage goes to the UI (toast or blocking modal)
"""

from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field

from chess_trainer.core.shared_types import (
    CastlingSide,
    ChessEventType,
    Color,
    FeedbackType,
    PieceType,
    RuleId,
)

# Squares are sent across the boundary in algebraic notation, ex. "e4"
AlgebraicSquare = str

FEEDBACK_ICONS: dict[FeedbackType, str] = {
    FeedbackType.ERROR: "❌",
    FeedbackType.WARNING: "⚠️",
    FeedbackType.INFO: "ℹ️",
    FeedbackType.SUCCESS: "✅",
}


class ChessEvent(BaseModel):
    """Abstract record of what just happened on the board"""

    model_config = ConfigDict(frozen=True)

    type: ChessEventType
    piece: Optional[PieceType] = None
    piece_color: Optional[Color] = None
    from_square: Optional[AlgebraicSquare] = None
    to_square: Optional[AlgebraicSquare] = None
    captured_piece: Optional[PieceType] = None
    promotion_piece: Optional[PieceType] = None
    castling_side: Optional[CastlingSide] = None
    winner: Optional[Color] = None
    current_player: Optional[Color] = None


class FeedbackMessage(BaseModel):
    """A message shown to the player. Errors and warnings block the board until dismissed."""

    id: UUID = Field(default_factory=uuid4)
    type: FeedbackType
    message: str
    icon: str
    explanation: Optional[str] = None
    rule_id: Optional[RuleId] = None
    # monotonic clock time after which a toast disappears. None for blocking messages.
    expires_at: Optional[float] = None
