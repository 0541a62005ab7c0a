"""
Geometry/Base movement and capturing/attacking rules + the check filter on top of them

Key idea: Use strategy pattern to define the move sets for each piece type.

Raw moves only follow the geometry of a piece. `calculate_legal_moves()` removes those that leave your own king in check
and adds castling.
"""

from typing import Callable, Optional

from loguru import logger

from chess_trainer.chess.board import Board
from chess_trainer.chess.castling import CASTLING_RULES, CastlingRights, CastlingSide
from chess_trainer.chess.position import Position
from chess_trainer.core.shared_types import Color, PieceType


# (delta row, delta col). Row 0 is black's back rank, so white moves towards negative rows.
Vector = tuple[int, int]

STRAIGHTS: list[Vector] = [(0, 1), (0, -1), (1, 0), (-1, 0)]
DIAGONALS: list[Vector] = [(1, 1), (1, -1), (-1, 1), (-1, -1)]
KNIGHT_DELTAS: list[Vector] = [
    (2, 1),
    (2, -1),
    (-2, 1),
    (-2, -1),
    (1, 2),
    (1, -2),
    (-1, 2),
    (-1, -2),
]
KING_DELTAS: list[Vector] = STRAIGHTS + DIAGONALS

PAWN_DIRECTION: dict[Color, int] = {Color.WHITE: -1, Color.BLACK: 1}
PAWN_START_ROW: dict[Color, int] = {Color.WHITE: 6, Color.BLACK: 1}
PROMOTION_ROW: dict[Color, int] = {Color.WHITE: 0, Color.BLACK: 7}


# --- MOVEMENT RULES ---
def raycasting_move(
    position: Position, board: Board, directions: list[Vector]
) -> list[Position]:
    """
    Raycasting algorithm
    -----

    ---
    The main trick we use to check the 'line of sight of a piece'.
    We define move directions and move along them until we hit another piece or
    the edge of the board. An occupied square is included only if it holds an opponent's piece.
    """
    moving_piece = board.piece(position)
    if moving_piece is None:
        return []

    moves: list[Position] = []
    for d_row, d_col in directions:
        target = position.offset(d_row, d_col)
        while target.is_within_bounds():
            occupant = board.piece(target)
            if occupant is not None:
                # only need to add the first occupied square found if it is the opponent's: then it can be captured.
                if occupant.color != moving_piece.color:
                    moves.append(target)
                break
            moves.append(target)
            target = target.offset(d_row, d_col)
    return moves


def single_step_move(
    position: Position, board: Board, deltas: list[Vector]
) -> list[Position]:
    """Raycasting is for sliding pieces. This is the equivalent for kings and knights that just jump a fixed offset"""
    moving_piece = board.piece(position)
    if moving_piece is None:
        return []

    moves: list[Position] = []
    for d_row, d_col in deltas:
        target = position.offset(d_row, d_col)
        if not target.is_within_bounds():
            continue

        occupant = board.piece(target)
        if occupant is None or occupant.color != moving_piece.color:
            moves.append(target)
    return moves


def candidate_pawn_moves(
    position: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Position]:
    """
    A pawn:
    - moves by a single square forward, onto an empty square only.
    - It can move by two in their first move (so when on their starting row), if both squares are empty
    - takes diagonally, either an enemy piece or on the en passant target square
    """
    pawn = board.piece(position)
    if pawn is None:
        return []

    moves: list[Position] = []
    direction = PAWN_DIRECTION[pawn.color]
    one_step = position.offset(direction, 0)
    if one_step.is_within_bounds() and board.is_empty(one_step):
        moves.append(one_step)
        two_steps = position.offset(2 * direction, 0)
        if position.row == PAWN_START_ROW[pawn.color] and board.is_empty(two_steps):
            moves.append(two_steps)

    for d_col in (-1, 1):
        target = position.offset(direction, d_col)
        if not target.is_within_bounds():
            continue
        occupant = board.piece(target)
        is_opponent_piece = occupant is not None and occupant.color != pawn.color
        if is_opponent_piece or target == en_passant_target:
            moves.append(target)
    return moves


def candidate_knight_moves(
    position: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Position]:
    """Knights always move such that |delta_row| + |delta_col| = 3"""
    return single_step_move(position, board, KNIGHT_DELTAS)


def candidate_bishop_moves(
    position: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Position]:
    """Bishops move diagonally: |delta_row| = |delta_col|"""
    return raycasting_move(position, board, DIAGONALS)


def candidate_rook_moves(
    position: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Position]:
    """Rooks move either horizontally or vertically"""
    return raycasting_move(position, board, STRAIGHTS)


def candidate_queen_moves(
    position: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Position]:
    """
    The Queen combines the rook moves (horizontal + vertical movements) and bishop moves (diagonal movement)
    """
    return raycasting_move(position, board, STRAIGHTS + DIAGONALS)


def candidate_king_moves(
    position: Position, board: Board, en_passant_target: Optional[Position] = None
) -> list[Position]:
    """
    The king can move by a single square at the time.

    Castling is modelled as a special king move (handled separately).
    """
    return single_step_move(position, board, KING_DELTAS)


# -- STRATEGY PATTERN: MOVEMENT RULES ---
# NOTE: every rule receives the en passant target, only the pawn rule uses it
CandidateMovesFn = Callable[[Position, Board, Optional[Position]], list[Position]]
MOVEMENT_RULES: dict[PieceType, CandidateMovesFn] = {
    PieceType.PAWN: candidate_pawn_moves,
    PieceType.KNIGHT: candidate_knight_moves,
    PieceType.BISHOP: candidate_bishop_moves,
    PieceType.ROOK: candidate_rook_moves,
    PieceType.QUEEN: candidate_queen_moves,
    PieceType.KING: candidate_king_moves,
}


def raw_moves(
    board: Board, position: Position, en_passant_target: Optional[Position] = None
) -> list[Position]:
    """Geometry-only destinations of the piece on `position`. Empty list for an empty square."""
    piece = board.piece(position)
    if piece is None:
        return []
    movement_rule = MOVEMENT_RULES[piece.type]
    return movement_rule(position, board, en_passant_target)


# --- CAPTURING RULES / ATTACKING RULES ---
def raycasting_attack(
    position: Position,
    by_color: Color,
    by_piece_types: tuple[PieceType, ...],
    board: Board,
    directions: list[Vector],
) -> bool:
    """
    Raycasting algorithm for attacks.
    ---

    Where `raycasting_move()` determines
    _"What is the line-of-sight of the piece standing on the specified square?"_

    This function determines:
    _"Is the specified square in the line-of-sight of a piece of the specified color that
    is allowed to move along the given directions?"_

    ---
    Returns TRUE if the first piece encountered along a direction is of the given color and one of the given types.
    """
    for d_row, d_col in directions:
        target = position.offset(d_row, d_col)
        while target.is_within_bounds():
            piece_found = board.piece(target)
            if piece_found is not None:
                if piece_found.color == by_color and piece_found.type in by_piece_types:
                    return True
                break
            target = target.offset(d_row, d_col)
    return False


def single_step_attack(
    position: Position,
    by_color: Color,
    by_piece_type: PieceType,
    board: Board,
    deltas: list[Vector],
) -> bool:
    """
    Equivalent of `raycasting_attack()` for pawns, kings, and knights.

    ---
    Returns TRUE if a piece of the specified color and type stands on one of the offsets.
    """
    for d_row, d_col in deltas:
        target = position.offset(d_row, d_col)
        if not target.is_within_bounds():
            continue

        piece_found = board.piece(target)
        if (
            piece_found is not None
            and piece_found.color == by_color
            and piece_found.type == by_piece_type
        ):
            return True
    return False


def is_attacked_by_pawn(position: Position, by_color: Color, board: Board) -> bool:
    """
    Pawns take diagonally
    ----

    NOTE: Pawn moves are not symmetric. A white pawn moves towards row 0, so a white pawn attacking this square
    must stand one row FURTHER from row 0. Hence the deltas are the inverse of the pawn's own capture direction.
    """
    behind = -PAWN_DIRECTION[by_color]
    inverse_pawn_take_deltas: list[Vector] = [(behind, 1), (behind, -1)]
    return single_step_attack(
        position, by_color, PieceType.PAWN, board, inverse_pawn_take_deltas
    )


def is_attacked_by_knight(position: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(position, by_color, PieceType.KNIGHT, board, KNIGHT_DELTAS)


def is_attacked_by_king(position: Position, by_color: Color, board: Board) -> bool:
    return single_step_attack(position, by_color, PieceType.KING, board, KING_DELTAS)


def is_attacked_on_straight(position: Position, by_color: Color, board: Board) -> bool:
    """Rooks and the queen attack along ranks and files"""
    return raycasting_attack(
        position, by_color, (PieceType.ROOK, PieceType.QUEEN), board, STRAIGHTS
    )


def is_attacked_on_diagonal(position: Position, by_color: Color, board: Board) -> bool:
    """Bishops and the queen attack along diagonals"""
    return raycasting_attack(
        position, by_color, (PieceType.BISHOP, PieceType.QUEEN), board, DIAGONALS
    )


# --- STRATEGY PATTERN: ATTACKING RULES ---
IsAttackedFn = Callable[[Position, Color, Board], bool]
ATTACK_RULES: list[IsAttackedFn] = [
    is_attacked_by_pawn,
    is_attacked_by_knight,
    is_attacked_by_king,
    is_attacked_on_straight,
    is_attacked_on_diagonal,
]


def is_square_attacked(board: Board, position: Position, by_color: Color) -> bool:
    return any(rule(position, by_color, board) for rule in ATTACK_RULES)


# --- CHECK DETECTION ---
def is_king_in_check(board: Board, color: Color) -> bool:
    """A board without a king of this color is treated as 'not in check'."""
    king_position = board.locate_king(color)
    if king_position is None:
        logger.debug(f"No {color} king on the board. Treating as not in check.")
        return False
    return is_square_attacked(board, king_position, color.opponent)


def would_be_in_check(
    board: Board,
    from_square: Position,
    to_square: Position,
    color: Color,
    en_passant_target: Optional[Position] = None,
) -> bool:
    """Return True if the move leaves the king of `color` in check

    plan:
    1. Copy the board
    2. make the candidate move (removing the pawn taken en passant, if that is what the move does)
    3. determine if king is in check on the new board
    """
    scratch = board.copy()
    moving_piece = scratch.remove_piece(from_square)
    is_en_passant = (
        moving_piece is not None
        and moving_piece.type == PieceType.PAWN
        and to_square == en_passant_target
        and to_square.col != from_square.col
        and scratch.is_empty(to_square)
    )
    if is_en_passant:
        scratch.remove_piece(Position(from_square.row, to_square.col))
    scratch.place_piece(moving_piece, to_square)
    return is_king_in_check(scratch, color)


# -- CASTLING RULES ---
def can_castle(
    board: Board, color: Color, side: CastlingSide, castling_rights: CastlingRights
) -> bool:
    """
    **you are allowed to castle if**

    * Castling rights are not yet revoked.
    * King and rook are on their starting squares and neither of them has moved.
    * You are not currently in check (you cannot castle out of check).
    * All squares between king and rook are empty.
    * None of the squares the king passes through (destination included) is under attack.
    """
    if not castling_rights.has(color, side):
        return False

    squares = CASTLING_RULES[(color, side)]
    king = board.piece(squares.king_from)
    rook = board.piece(squares.rook_from)
    if king is None or king.type != PieceType.KING or king.color != color:
        return False
    if rook is None or rook.type != PieceType.ROOK or rook.color != color:
        return False
    if king.has_moved or rook.has_moved:
        return False

    if is_king_in_check(board, color):
        return False

    if any(not board.is_empty(square) for square in squares.squares_between()):
        return False

    return not any(
        is_square_attacked(board, square, color.opponent)
        for square in squares.king_path()
    )


# --- LEGAL MOVES ---
def calculate_legal_moves(
    board: Board,
    position: Position,
    current_player: Color,
    en_passant_target: Optional[Position],
    castling_rights: CastlingRights,
) -> list[Position]:
    """
    List of legal destinations for the piece on `position`
    ----

    1. no piece or not yours? --> nothing
    2. generate raw moves using the basic movement rule of the piece
    3. remove those that would put (or leave) you in check
    4. a king additionally gets its castling destinations
    """
    piece = board.piece(position)
    if piece is None or piece.color != current_player:
        return []

    legal_moves = [
        to_square
        for to_square in raw_moves(board, position, en_passant_target)
        if not would_be_in_check(
            board, position, to_square, current_player, en_passant_target
        )
    ]

    if piece.type == PieceType.KING:
        for side in CastlingSide:
            squares = CASTLING_RULES[(current_player, side)]
            if squares.king_from == position and can_castle(
                board, current_player, side, castling_rights
            ):
                legal_moves.append(squares.king_to)

    return legal_moves


def has_legal_moves(
    board: Board,
    color: Color,
    en_passant_target: Optional[Position],
    castling_rights: CastlingRights,
) -> bool:
    return any(
        calculate_legal_moves(board, position, color, en_passant_target, castling_rights)
        for position in board.locate_color(color)
    )
