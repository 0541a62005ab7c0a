"""Short algebraic notation for the move history"""

from typing import Optional

from chess_trainer.chess.pieces import PIECE_LETTERS, Piece
from chess_trainer.chess.position import Position
from chess_trainer.core.shared_types import PieceType, SpecialMove

CASTLING_NOTATION: dict[SpecialMove, str] = {
    SpecialMove.CASTLE_KINGSIDE: "O-O",
    SpecialMove.CASTLE_QUEENSIDE: "O-O-O",
}


def create_move_notation(
    piece: Piece,
    from_square: Position,
    to_square: Position,
    captured: Optional[Piece] = None,
    special_move: SpecialMove = SpecialMove.NORMAL,
) -> str:
    """
    `piece` is the piece as it stands AFTER the move, so for a promotion it is the promoted piece.
    That way the stored Move record holds everything needed to write its notation again.

    examples:
    * "e4": pawn push
    * "exd5": pawn takes (also en passant)
    * "Nf3", "Bxc6": piece moves/takes
    * "O-O", "O-O-O": castling
    * "e8=Q", "dxe8=N": promotion

    NOTE: no check (+) or mate (#) suffix
    """
    if special_move in CASTLING_NOTATION:
        return CASTLING_NOTATION[special_move]

    moving_type = PieceType.PAWN if special_move == SpecialMove.PROMOTION else piece.type
    destination = to_square.to_algebraic()

    if moving_type == PieceType.PAWN and captured is not None:
        notation = f"{from_square.to_algebraic()[0]}x{destination}"
    else:
        capture_symbol = "x" if captured is not None else ""
        notation = f"{PIECE_LETTERS[moving_type]}{capture_symbol}{destination}"

    if special_move == SpecialMove.PROMOTION:
        notation += f"={PIECE_LETTERS[piece.type]}"
    return notation
