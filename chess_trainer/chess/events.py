"""
Event adapter: translates state-machine transitions into ChessEvent records for the explanation collaborator.

The collaborator sits behind the EventSink protocol. The core only ever pushes events into it and never reads
anything back that could influence the rules.
"""

from typing import TYPE_CHECKING, Optional, Protocol

from chess_trainer.chess.castling import castling_side_for
from chess_trainer.chess.pieces import Piece
from chess_trainer.chess.position import Position
from chess_trainer.core.models import ChessEvent
from chess_trainer.core.shared_types import (
    ChessEventType,
    Color,
    GameStatus,
    PieceType,
    SpecialMove,
)

if TYPE_CHECKING:
    from chess_trainer.chess.game import Move


class EventSink(Protocol):
    """Consumer of chess events (ex. the rules ontology query layer)"""

    def publish(self, event: ChessEvent) -> object:
        """Handle the event and return whatever the display should show about it."""
        ...


STATUS_EVENTS: dict[GameStatus, ChessEventType] = {
    GameStatus.CHECKMATE: ChessEventType.CHECKMATE,
    GameStatus.STALEMATE: ChessEventType.STALEMATE,
    GameStatus.CHECK: ChessEventType.CHECK,
}

SPECIAL_MOVE_EVENTS: dict[SpecialMove, ChessEventType] = {
    SpecialMove.PROMOTION: ChessEventType.PROMOTION,
    SpecialMove.CASTLE_KINGSIDE: ChessEventType.CASTLING,
    SpecialMove.CASTLE_QUEENSIDE: ChessEventType.CASTLING,
    SpecialMove.EN_PASSANT: ChessEventType.CAPTURE,
    SpecialMove.CAPTURE: ChessEventType.CAPTURE,
    SpecialMove.NORMAL: ChessEventType.MOVE,
}


def game_start_event() -> ChessEvent:
    return ChessEvent(type=ChessEventType.GAME_START, current_player=Color.WHITE)


def selection_event(piece: Piece, position: Position) -> ChessEvent:
    return ChessEvent(
        type=ChessEventType.PIECE_SELECT,
        piece=piece.type,
        piece_color=piece.color,
        from_square=position.to_algebraic(),
        current_player=piece.color,
    )


def move_event_type(special_move: SpecialMove, status: GameStatus) -> ChessEventType:
    """
    One event describes the whole move. Its type is the most significant thing that happened:
    checkmate > stalemate > check > promotion > castling > capture > move
    """
    if status in STATUS_EVENTS:
        return STATUS_EVENTS[status]
    return SPECIAL_MOVE_EVENTS[special_move]


def move_event(move: "Move", mover: Color, status: GameStatus) -> ChessEvent:
    """`status` is the game status of the player who is to move next"""
    is_promotion = move.special_move == SpecialMove.PROMOTION
    is_castling = move.special_move in (
        SpecialMove.CASTLE_KINGSIDE,
        SpecialMove.CASTLE_QUEENSIDE,
    )
    winner: Optional[Color] = mover if status == GameStatus.CHECKMATE else None
    return ChessEvent(
        type=move_event_type(move.special_move, status),
        # the piece that moved was a pawn, even if a queen now stands on the destination
        piece=PieceType.PAWN if is_promotion else move.piece.type,
        piece_color=mover,
        from_square=move.from_square.to_algebraic(),
        to_square=move.to_square.to_algebraic(),
        captured_piece=move.captured.type if move.captured is not None else None,
        promotion_piece=move.piece.type if is_promotion else None,
        castling_side=castling_side_for(move.from_square, move.to_square)
        if is_castling
        else None,
        winner=winner,
        current_player=mover.opponent,
    )
