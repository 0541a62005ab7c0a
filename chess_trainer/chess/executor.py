"""
Applying a chosen move to a board.

The input board is never touched: every update happens on a copy that is handed back to the caller.
"""

from dataclasses import dataclass
from typing import Optional

from loguru import logger

from chess_trainer.chess.board import Board
from chess_trainer.chess.castling import CASTLING_RULES, CastlingSide, castling_side_for
from chess_trainer.chess.moves import PROMOTION_ROW
from chess_trainer.chess.pieces import PROMOTION_OPTIONS, Piece
from chess_trainer.chess.position import Position
from chess_trainer.core.exceptions import IllegalMoveError
from chess_trainer.core.shared_types import PieceType, SpecialMove

CASTLING_MOVES: dict[CastlingSide, SpecialMove] = {
    CastlingSide.KING_SIDE: SpecialMove.CASTLE_KINGSIDE,
    CastlingSide.QUEEN_SIDE: SpecialMove.CASTLE_QUEENSIDE,
}


@dataclass(frozen=True)
class MoveResult:
    board: Board
    captured_piece: Optional[Piece]
    en_passant_target: Optional[Position]
    special_move: SpecialMove


def detect_special_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    en_passant_target: Optional[Position],
) -> SpecialMove:
    """
    Classify the move without making it
    ----

    1. a king moving two files --> castling (side given by the direction)
    2. a pawn reaching the opposite back rank --> promotion
    3. a pawn moving diagonally onto the en passant target --> en passant
    4. destination occupied --> capture
    5. otherwise a normal move
    """
    moving_piece = board.piece(from_square)
    if moving_piece is None:
        raise IllegalMoveError(f"No piece on {from_square.to_algebraic()} to move.")

    if moving_piece.type == PieceType.KING:
        side = castling_side_for(from_square, to_square)
        if side is not None:
            return CASTLING_MOVES[side]

    if moving_piece.type == PieceType.PAWN:
        if to_square.row == PROMOTION_ROW[moving_piece.color]:
            return SpecialMove.PROMOTION
        if to_square == en_passant_target and to_square.col != from_square.col:
            return SpecialMove.EN_PASSANT

    if not board.is_empty(to_square):
        return SpecialMove.CAPTURE
    return SpecialMove.NORMAL


def execute_move(
    board: Board,
    from_square: Position,
    to_square: Position,
    en_passant_target: Optional[Position],
    promotion_piece_type: Optional[PieceType] = None,
) -> MoveResult:
    """
    Make the move on a copy of the board
    ---

    Returns the new board, the piece that got captured (if any), the en passant target for the next ply
    and the classification of the move.
    NOTE: the en passant target only survives a single ply. Any move other than a pawn double step clears it.
    """
    special_move = detect_special_move(board, from_square, to_square, en_passant_target)
    new_board = board.copy()
    moving_piece = new_board.remove_piece(from_square)
    # for the typechecker: detect_special_move() already refused an empty origin
    assert moving_piece is not None

    captured_piece: Optional[Piece] = None
    new_en_passant_target: Optional[Position] = None

    if special_move in (SpecialMove.CASTLE_KINGSIDE, SpecialMove.CASTLE_QUEENSIDE):
        side = castling_side_for(from_square, to_square)
        squares = CASTLING_RULES[(moving_piece.color, side)]
        rook = new_board.remove_piece(squares.rook_from)
        new_board.place_piece(moving_piece.mark_moved(), to_square)
        if rook is not None:
            new_board.place_piece(rook.mark_moved(), squares.rook_to)

    elif special_move == SpecialMove.EN_PASSANT:
        # The pawn taken stands next to the capturing pawn: same row as the origin, same column as the destination
        captured_piece = new_board.remove_piece(Position(from_square.row, to_square.col))
        new_board.place_piece(moving_piece.mark_moved(), to_square)

    elif special_move == SpecialMove.PROMOTION:
        new_type = promotion_piece_type or PieceType.QUEEN
        if new_type not in PROMOTION_OPTIONS:
            raise IllegalMoveError(f"A pawn cannot promote into a {new_type}.")
        captured_piece = new_board.piece(to_square)
        new_board.place_piece(Piece(new_type, moving_piece.color, has_moved=True), to_square)

    else:
        captured_piece = new_board.piece(to_square)
        new_board.place_piece(moving_piece.mark_moved(), to_square)
        is_double_step = (
            moving_piece.type == PieceType.PAWN
            and abs(to_square.row - from_square.row) == 2
        )
        if is_double_step:
            new_en_passant_target = Position(
                (from_square.row + to_square.row) // 2, from_square.col
            )

    logger.debug(
        f"Executed {special_move} {from_square.to_algebraic()}->{to_square.to_algebraic()}: {new_board.to_fen()}"
    )
    return MoveResult(new_board, captured_piece, new_en_passant_target, special_move)
