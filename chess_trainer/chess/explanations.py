"""
Natural language explanations of why a move attempt was refused.

Every function here is pure: the same inputs always give the same message triple.
The rule identifier is a cross-reference token for the rules ontology and is never interpreted here.
"""

from dataclasses import dataclass
from typing import Callable, Optional

from chess_trainer.chess.pieces import Piece
from chess_trainer.chess.position import Position
from chess_trainer.core.shared_types import Color, PieceType, RuleId

SIDE_NAMES: dict[Color, str] = {Color.WHITE: "White", Color.BLACK: "Black"}


@dataclass(frozen=True)
class MoveExplanation:
    message: str
    explanation: str
    rule_id: RuleId


def explain_illegal_move(
    piece: Piece,
    from_square: Position,
    to_square: Position,
    target_piece: Optional[Piece],
    current_player: Color,
) -> MoveExplanation:
    """
    Diagnose a move attempt whose destination is NOT in the set of legal moves
    ----

    1. Not your piece? --> turn violation
    2. Otherwise look at the geometry of the attempt for the type of piece that tried to move
    """
    if piece.color != current_player:
        return MoveExplanation(
            message="It is not your turn",
            explanation=f"It is {SIDE_NAMES[current_player]}'s turn to play. You cannot move your opponent's pieces.",
            rule_id=RuleId.TURN_VIOLATION,
        )

    diagnose = PIECE_DIAGNOSES[piece.type]
    return diagnose(piece, from_square, to_square, target_piece)


def explain_illegal_destination(
    piece: Piece,
    from_square: Position,
    to_square: Position,
    target_piece: Optional[Piece],
) -> MoveExplanation:
    """The selected piece always belongs to the player to move, so only the geometry is left to diagnose."""
    return explain_illegal_move(piece, from_square, to_square, target_piece, piece.color)


def explain_uncapturable_piece(
    piece: Piece,
    from_square: Position,
    to_square: Position,
    target_piece: Piece,
) -> MoveExplanation:
    """The player clicked an enemy piece the selected piece cannot legally take"""
    diagnosis = explain_illegal_destination(piece, from_square, to_square, target_piece)
    return MoveExplanation(
        message=f"Your {piece.type} cannot capture the {target_piece.type} on {to_square.to_algebraic()}",
        explanation=diagnosis.explanation,
        rule_id=diagnosis.rule_id,
    )


def explain_no_selection() -> MoveExplanation:
    return MoveExplanation(
        message="No piece selected",
        explanation="First click on one of your pieces to select it, then on its destination square.",
        rule_id=RuleId.NO_SELECTION,
    )


def explain_wrong_color(current_player: Color) -> MoveExplanation:
    return MoveExplanation(
        message="That is not your piece",
        explanation=f"It is {SIDE_NAMES[current_player]}'s turn. You can only select your own pieces.",
        rule_id=RuleId.TURN_VIOLATION,
    )


def explain_no_legal_moves(piece: Piece) -> MoveExplanation:
    return MoveExplanation(
        message=f"The {piece.type} is blocked",
        explanation=(
            "This piece has no legal move available. Either other pieces block it, "
            "or every move it could make would put your king in check."
        ),
        rule_id=RuleId.NO_LEGAL_MOVES,
    )


# --- DIAGNOSIS PER PIECE TYPE ---
def _diagnose_pawn(
    piece: Piece, from_square: Position, to_square: Position, target_piece: Optional[Piece]
) -> MoveExplanation:
    """
    Distinguish:
    - diagonal step onto an empty square
    - straight move onto an occupied square
    - moving backwards (or sideways)
    - anything else
    """
    direction = -1 if piece.color == Color.WHITE else 1
    d_row = to_square.row - from_square.row
    d_col = abs(to_square.col - from_square.col)
    is_forward = d_row * direction > 0
    is_diagonal = d_col == 1 and d_row == direction
    square_name = to_square.to_algebraic()

    if is_diagonal and target_piece is None:
        return MoveExplanation(
            message="Diagonal capture not possible",
            explanation=(
                "A pawn only moves diagonally when it captures an enemy piece standing on the target square. "
                f"The square {square_name} is empty."
            ),
            rule_id=RuleId.INVALID_PAWN_CAPTURE,
        )

    if d_col == 0 and target_piece is not None:
        return MoveExplanation(
            message="A pawn cannot capture straight ahead",
            explanation=(
                "A pawn moves straight ahead but only captures diagonally. "
                f"A piece blocks its way on {square_name}."
            ),
            rule_id=RuleId.INVALID_PAWN_MOVE,
        )

    if not is_forward:
        return MoveExplanation(
            message="A pawn cannot move backwards",
            explanation="A pawn only moves forward, towards the opponent's side. It can never retreat.",
            rule_id=RuleId.INVALID_PAWN_DIRECTION,
        )

    return MoveExplanation(
        message="Invalid pawn move",
        explanation=(
            "A pawn advances one square (or two from its starting square) and captures diagonally. "
            "This move does not follow those rules."
        ),
        rule_id=RuleId.INVALID_PAWN_MOVE,
    )


def _diagnose_rook(
    piece: Piece, from_square: Position, to_square: Position, target_piece: Optional[Piece]
) -> MoveExplanation:
    d_row = abs(to_square.row - from_square.row)
    d_col = abs(to_square.col - from_square.col)
    if d_row != 0 and d_col != 0:
        return MoveExplanation(
            message="A rook does not move diagonally",
            explanation=(
                "A rook moves only in straight lines, horizontally or vertically, as far as it likes. "
                "Diagonal moves belong to the bishop and the queen."
            ),
            rule_id=RuleId.INVALID_ROOK_MOVE,
        )
    return MoveExplanation(
        message="Rook move blocked",
        explanation=(
            "A rook cannot jump over other pieces. Something stands in its way to "
            f"{to_square.to_algebraic()}, or the move would leave your king in check."
        ),
        rule_id=RuleId.ROOK_PATH_BLOCKED,
    )


def _diagnose_bishop(
    piece: Piece, from_square: Position, to_square: Position, target_piece: Optional[Piece]
) -> MoveExplanation:
    d_row = abs(to_square.row - from_square.row)
    d_col = abs(to_square.col - from_square.col)
    if d_row != d_col:
        return MoveExplanation(
            message="A bishop only moves diagonally",
            explanation=(
                "A bishop moves only along diagonals, as far as it likes. "
                "It always stays on squares of the same color."
            ),
            rule_id=RuleId.INVALID_BISHOP_MOVE,
        )
    return MoveExplanation(
        message="Bishop move blocked",
        explanation=(
            "A bishop cannot jump over other pieces. Something stands on the diagonal to "
            f"{to_square.to_algebraic()}, or the move would leave your king in check."
        ),
        rule_id=RuleId.BISHOP_PATH_BLOCKED,
    )


def _diagnose_queen(
    piece: Piece, from_square: Position, to_square: Position, target_piece: Optional[Piece]
) -> MoveExplanation:
    d_row = abs(to_square.row - from_square.row)
    d_col = abs(to_square.col - from_square.col)
    if d_row != d_col and d_row != 0 and d_col != 0:
        return MoveExplanation(
            message="Invalid queen move",
            explanation=(
                "The queen combines the moves of the rook and the bishop: straight lines or diagonals, "
                "but never an L-shape like the knight."
            ),
            rule_id=RuleId.INVALID_QUEEN_MOVE,
        )
    return MoveExplanation(
        message="Queen move blocked",
        explanation=(
            "The queen cannot jump over other pieces. Something stands in its way to "
            f"{to_square.to_algebraic()}, or the move would leave your king in check."
        ),
        rule_id=RuleId.QUEEN_PATH_BLOCKED,
    )


def _diagnose_king(
    piece: Piece, from_square: Position, to_square: Position, target_piece: Optional[Piece]
) -> MoveExplanation:
    d_row = abs(to_square.row - from_square.row)
    d_col = abs(to_square.col - from_square.col)
    if d_row > 1 or d_col > 1:
        return MoveExplanation(
            message="The king only moves one square",
            explanation=(
                "The king moves in every direction, but one square at a time. "
                "Moving two squares is only possible by castling, under special conditions."
            ),
            rule_id=RuleId.INVALID_KING_MOVE,
        )
    return MoveExplanation(
        message="The king would be in check",
        explanation="The king cannot move to a square attacked by an enemy piece. The opponent controls this square.",
        rule_id=RuleId.KING_INTO_CHECK,
    )


def _diagnose_knight(
    piece: Piece, from_square: Position, to_square: Position, target_piece: Optional[Piece]
) -> MoveExplanation:
    d_row = abs(to_square.row - from_square.row)
    d_col = abs(to_square.col - from_square.col)
    if {d_row, d_col} != {1, 2}:
        return MoveExplanation(
            message="A knight moves in an L-shape",
            explanation=(
                "A knight moves two squares in one direction (horizontal or vertical), then one square "
                "perpendicular to it. It is the only piece that can jump over others."
            ),
            rule_id=RuleId.INVALID_KNIGHT_MOVE,
        )
    return MoveExplanation(
        message="Invalid knight move",
        explanation="The knight must make an L-shaped move (2 squares + 1 square perpendicular) without exposing your king.",
        rule_id=RuleId.INVALID_KNIGHT_MOVE,
    )


DiagnosisFn = Callable[[Piece, Position, Position, Optional[Piece]], MoveExplanation]
PIECE_DIAGNOSES: dict[PieceType, DiagnosisFn] = {
    PieceType.PAWN: _diagnose_pawn,
    PieceType.ROOK: _diagnose_rook,
    PieceType.BISHOP: _diagnose_bishop,
    PieceType.QUEEN: _diagnose_queen,
    PieceType.KING: _diagnose_king,
    PieceType.KNIGHT: _diagnose_knight,
}
