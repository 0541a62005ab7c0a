"""
The game-state machine: the entrypoint into the domain layer for the service layer.

`transition(state, action)` is a pure reducer. It never mutates the GameState it receives, it returns
the next state together with the feedback for the player and the events for the explanation collaborator.
Chess rule violations are never raised: they turn into feedback and leave the state (mostly) untouched.
"""

import random
from dataclasses import dataclass, field, replace
from typing import Callable, Optional, Self, Union

from loguru import logger

from chess_trainer.chess.board import Board
from chess_trainer.chess.castling import CastlingRights, update_castling_rights
from chess_trainer.chess.events import game_start_event, move_event, selection_event
from chess_trainer.chess.executor import execute_move
from chess_trainer.chess.explanations import (
    MoveExplanation,
    explain_illegal_destination,
    explain_no_legal_moves,
    explain_uncapturable_piece,
    explain_wrong_color,
)
from chess_trainer.chess.moves import (
    PROMOTION_ROW,
    calculate_legal_moves,
    has_legal_moves,
    is_king_in_check,
)
from chess_trainer.chess.notation import create_move_notation
from chess_trainer.chess.pieces import PROMOTION_OPTIONS, Piece
from chess_trainer.chess.position import Position
from chess_trainer.chess.training import training_tip
from chess_trainer.core.exceptions import GameStateError
from chess_trainer.core.models import ChessEvent
from chess_trainer.core.shared_types import (
    TERMINAL_STATUSES,
    Color,
    FeedbackType,
    GameStatus,
    PieceType,
    RuleId,
    SpecialMove,
)


@dataclass(frozen=True)
class Move:
    """A committed move, as stored in the history"""

    from_square: Position
    to_square: Position
    piece: Piece  # post-move identity: the promoted piece for a promotion
    captured: Optional[Piece]
    notation: str
    special_move: SpecialMove = SpecialMove.NORMAL


@dataclass(frozen=True)
class GameState:
    board: Board
    current_player: Color = Color.WHITE
    selected_position: Optional[Position] = None
    legal_moves: tuple[Position, ...] = ()  # cached for the current selection
    move_history: tuple[Move, ...] = ()
    game_status: GameStatus = GameStatus.PLAYING
    is_training_mode: bool = False
    king_in_check: Optional[Position] = None
    en_passant_target: Optional[Position] = None
    castling_rights: CastlingRights = field(default_factory=CastlingRights)
    # destination of a pawn move waiting for the player to pick a piece
    promotion_pending: Optional[Position] = None

    @classmethod
    def initial(cls) -> Self:
        """Standard starting position, white to move, all castling rights"""
        return cls(board=Board.initial())


# --- ACTIONS ---
@dataclass(frozen=True)
class SelectSquare:
    position: Position


@dataclass(frozen=True)
class PromotePawn:
    piece_type: PieceType


@dataclass(frozen=True)
class UndoMove:
    pass


@dataclass(frozen=True)
class ResetGame:
    pass


@dataclass(frozen=True)
class ToggleTrainingMode:
    pass


Action = Union[SelectSquare, PromotePawn, UndoMove, ResetGame, ToggleTrainingMode]


@dataclass(frozen=True)
class Feedback:
    """What the player should be told about a transition. The service decides how to show it."""

    kind: FeedbackType
    message: str
    explanation: Optional[str] = None
    rule_id: Optional[RuleId] = None
    blocking: bool = False

    @classmethod
    def from_explanation(cls, kind: FeedbackType, explanation: MoveExplanation) -> Self:
        return cls(
            kind=kind,
            message=explanation.message,
            explanation=explanation.explanation,
            rule_id=explanation.rule_id,
        )


@dataclass(frozen=True)
class Transition:
    state: GameState
    feedback: tuple[Feedback, ...] = ()
    events: tuple[ChessEvent, ...] = ()


# --- GAME END ---
def get_game_end_state(
    board: Board,
    player: Color,
    en_passant_target: Optional[Position],
    castling_rights: CastlingRights,
) -> GameStatus:
    """The sole authority for the game status after a move. `player` is the side to move next."""
    in_check = is_king_in_check(board, player)
    can_move = has_legal_moves(board, player, en_passant_target, castling_rights)
    if in_check and not can_move:
        return GameStatus.CHECKMATE
    if not can_move:
        return GameStatus.STALEMATE
    if in_check:
        return GameStatus.CHECK
    return GameStatus.PLAYING


# --- REDUCER ---
def transition(
    state: GameState, action: Action, rng: Optional[random.Random] = None
) -> Transition:
    """nextState = transition(currentState, action)"""
    handler = ACTION_HANDLERS[type(action)]
    return handler(state, action, rng)


def _select_square(
    state: GameState, action: SelectSquare, rng: Optional[random.Random]
) -> Transition:
    """
    Selection logic
    ----

    * game over or waiting for a promotion choice --> ignore
    * nothing selected yet --> try to select the piece on the square
    * something selected --> commit the move, switch selection, or explain why the destination is refused
    """
    if state.game_status in TERMINAL_STATUSES or state.promotion_pending is not None:
        return Transition(state)

    if state.selected_position is None:
        return _select_piece(state, action.position)

    if action.position in state.legal_moves:
        return _commit_move(state, state.selected_position, action.position, rng)

    piece = state.board.piece(action.position)
    if piece is not None and piece.color == state.current_player:
        # reselect: the previous selection is silently dropped
        legal_moves = _legal_moves_for(state, action.position)
        return Transition(
            replace(state, selected_position=action.position, legal_moves=legal_moves),
            events=(selection_event(piece, action.position),),
        )

    return _reject_destination(state, action.position)


def _select_piece(state: GameState, position: Position) -> Transition:
    piece = state.board.piece(position)
    if piece is None:
        return Transition(state)

    if piece.color != state.current_player:
        feedback = Feedback.from_explanation(
            FeedbackType.WARNING, explain_wrong_color(state.current_player)
        )
        return Transition(state, feedback=(feedback,))

    legal_moves = _legal_moves_for(state, position)
    feedback: tuple[Feedback, ...] = ()
    if not legal_moves:
        feedback = (
            Feedback.from_explanation(FeedbackType.INFO, explain_no_legal_moves(piece)),
        )
    return Transition(
        replace(state, selected_position=position, legal_moves=legal_moves),
        feedback=feedback,
        events=(selection_event(piece, position),),
    )


def _reject_destination(state: GameState, destination: Position) -> Transition:
    """Enemy piece or empty square that is not in the legal set"""
    # for the typechecker: only called with a selection in place
    assert state.selected_position is not None
    selected_piece = state.board.piece(state.selected_position)
    assert selected_piece is not None

    target = state.board.piece(destination)
    if target is not None:
        explanation = explain_uncapturable_piece(
            selected_piece, state.selected_position, destination, target
        )
    else:
        explanation = explain_illegal_destination(
            selected_piece, state.selected_position, destination, None
        )
    logger.debug(
        f"Refused {state.selected_position.to_algebraic()}->{destination.to_algebraic()}: {explanation.rule_id}"
    )
    return Transition(
        replace(state, selected_position=None, legal_moves=()),
        feedback=(Feedback.from_explanation(FeedbackType.ERROR, explanation),),
    )


def _commit_move(
    state: GameState,
    from_square: Position,
    to_square: Position,
    rng: Optional[random.Random],
) -> Transition:
    """A pawn reaching the last row waits for the player to choose its new type"""
    moving_piece = _piece_to_move(state, from_square)
    if (
        moving_piece.type == PieceType.PAWN
        and to_square.row == PROMOTION_ROW[moving_piece.color]
    ):
        return Transition(replace(state, promotion_pending=to_square, legal_moves=()))
    return _complete_move(state, from_square, to_square, None, rng)


def _promote_pawn(
    state: GameState, action: PromotePawn, rng: Optional[random.Random]
) -> Transition:
    if state.promotion_pending is None or state.selected_position is None:
        return Transition(
            state, feedback=(Feedback(FeedbackType.WARNING, "No pawn is waiting for promotion."),)
        )

    if action.piece_type not in PROMOTION_OPTIONS:
        return Transition(
            state,
            feedback=(
                Feedback(
                    FeedbackType.ERROR,
                    f"A pawn cannot promote into a {action.piece_type}.",
                    explanation="Choose a queen, a rook, a bishop or a knight.",
                ),
            ),
        )

    return _complete_move(
        state, state.selected_position, state.promotion_pending, action.piece_type, rng
    )


def _complete_move(
    state: GameState,
    from_square: Position,
    to_square: Position,
    promotion_piece_type: Optional[PieceType],
    rng: Optional[random.Random],
) -> Transition:
    """
    Bookkeeping after a confirmed move
    -----

    1. execute the move on a new board
    2. update castling rights
    3. determine the status of the player to move next (check, mate, stalemate)
    4. write the notation and append to the history
    5. collect feedback and the event describing the move
    """
    moving_piece = _piece_to_move(state, from_square)
    mover = state.current_player
    next_player = mover.opponent

    result = execute_move(
        state.board, from_square, to_square, state.en_passant_target, promotion_piece_type
    )
    castling_rights = update_castling_rights(state.castling_rights, moving_piece, from_square)
    status = get_game_end_state(
        result.board, next_player, result.en_passant_target, castling_rights
    )
    king_in_check = (
        result.board.locate_king(next_player)
        if status in (GameStatus.CHECK, GameStatus.CHECKMATE)
        else None
    )

    moved_piece = result.board.piece(to_square)
    assert moved_piece is not None
    move = Move(
        from_square=from_square,
        to_square=to_square,
        piece=moved_piece,
        captured=result.captured_piece,
        notation=create_move_notation(
            moved_piece, from_square, to_square, result.captured_piece, result.special_move
        ),
        special_move=result.special_move,
    )
    logger.info(f"{mover} plays {move.notation} ({status})")

    new_state = replace(
        state,
        board=result.board,
        current_player=next_player,
        selected_position=None,
        legal_moves=(),
        move_history=state.move_history + (move,),
        game_status=status,
        king_in_check=king_in_check,
        en_passant_target=result.en_passant_target,
        castling_rights=castling_rights,
        promotion_pending=None,
    )

    feedback = _move_feedback(move, mover, status)
    if state.is_training_mode:
        feedback += (Feedback(FeedbackType.INFO, training_tip(moving_piece.type, rng)),)

    return Transition(new_state, feedback=feedback, events=(move_event(move, mover, status),))


def _move_feedback(move: Move, mover: Color, status: GameStatus) -> tuple[Feedback, ...]:
    feedback: list[Feedback] = []
    if move.special_move == SpecialMove.EN_PASSANT:
        feedback.append(Feedback(FeedbackType.SUCCESS, "En passant! The pawn is captured."))
    elif move.captured is not None:
        feedback.append(Feedback(FeedbackType.SUCCESS, f"{move.captured.name.capitalize()} captured!"))

    if move.special_move == SpecialMove.CASTLE_KINGSIDE:
        feedback.append(Feedback(FeedbackType.SUCCESS, f"{mover.capitalize()} castles kingside."))
    elif move.special_move == SpecialMove.CASTLE_QUEENSIDE:
        feedback.append(Feedback(FeedbackType.SUCCESS, f"{mover.capitalize()} castles queenside."))
    elif move.special_move == SpecialMove.PROMOTION:
        feedback.append(Feedback(FeedbackType.SUCCESS, f"Pawn promoted to {move.piece.type}!"))

    if status == GameStatus.CHECKMATE:
        feedback.append(
            Feedback(
                FeedbackType.SUCCESS,
                f"Checkmate! {mover.capitalize()} wins.",
                explanation="The king is attacked and has no legal move left to escape.",
                blocking=True,
            )
        )
    elif status == GameStatus.STALEMATE:
        feedback.append(
            Feedback(
                FeedbackType.INFO,
                "Stalemate! The game is a draw.",
                explanation=f"{mover.opponent.capitalize()} is not in check but has no legal move.",
                blocking=True,
            )
        )
    elif status == GameStatus.CHECK:
        feedback.append(
            Feedback(
                FeedbackType.WARNING,
                f"Check! The {mover.opponent} king is under attack.",
                explanation="The next move must get the king out of check.",
            )
        )
    return tuple(feedback)


def _undo_move(state: GameState, action: UndoMove, rng: Optional[random.Random]) -> Transition:
    """
    Take back the last move
    ----

    NOTE: simplified. Only the moved piece and the captured piece are put back:
    * a promotion move is taken back as a pawn, any other move keeps the piece type; restored pieces count as unmoved
    * castling rights, en passant target and game status are NOT restored
    * the rook of a castling move stays where it is, and a pawn taken en passant is put back on the destination square
    """
    if not state.move_history:
        return Transition(state, feedback=(Feedback(FeedbackType.WARNING, "No move to undo."),))

    last_move = state.move_history[-1]
    restored_type = (
        PieceType.PAWN if last_move.special_move == SpecialMove.PROMOTION else last_move.piece.type
    )
    board = state.board.copy()
    board.place_piece(Piece(restored_type, last_move.piece.color), last_move.from_square)
    board.place_piece(last_move.captured, last_move.to_square)

    logger.info(f"Undo {last_move.notation}")
    return Transition(
        replace(
            state,
            board=board,
            current_player=state.current_player.opponent,
            selected_position=None,
            legal_moves=(),
            move_history=state.move_history[:-1],
            promotion_pending=None,
        ),
        feedback=(Feedback(FeedbackType.INFO, "Move undone."),),
    )


def _reset_game(state: GameState, action: ResetGame, rng: Optional[random.Random]) -> Transition:
    return Transition(
        GameState.initial(),
        feedback=(Feedback(FeedbackType.INFO, "New game. White to move."),),
        events=(game_start_event(),),
    )


def _toggle_training_mode(
    state: GameState, action: ToggleTrainingMode, rng: Optional[random.Random]
) -> Transition:
    enabled = not state.is_training_mode
    message = (
        "Training mode on. You will see a tip after each move."
        if enabled
        else "Training mode off."
    )
    return Transition(
        replace(state, is_training_mode=enabled),
        feedback=(Feedback(FeedbackType.INFO, message),),
    )


def _piece_to_move(state: GameState, from_square: Position) -> Piece:
    piece = state.board.piece(from_square)
    if piece is None:
        raise GameStateError(f"No piece on {from_square.to_algebraic()} to move.")
    return piece


def _legal_moves_for(state: GameState, position: Position) -> tuple[Position, ...]:
    return tuple(
        calculate_legal_moves(
            state.board,
            position,
            state.current_player,
            state.en_passant_target,
            state.castling_rights,
        )
    )


# -- STRATEGY PATTERN: ONE HANDLER PER ACTION --
ActionHandler = Callable[[GameState, Action, Optional[random.Random]], Transition]
ACTION_HANDLERS: dict[type, ActionHandler] = {
    SelectSquare: _select_square,
    PromotePawn: _promote_pawn,
    UndoMove: _undo_move,
    ResetGame: _reset_game,
    ToggleTrainingMode: _toggle_training_mode,
}
