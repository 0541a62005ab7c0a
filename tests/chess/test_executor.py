"""Unit tests for /chess_trainer/chess/executor.py"""

import pytest

from chess_trainer.chess.board import STARTING_PLACEMENT, Board
from chess_trainer.chess.executor import detect_special_move, execute_move
from chess_trainer.chess.pieces import Piece
from chess_trainer.chess.position import Position
from chess_trainer.core.exceptions import IllegalMoveError
from chess_trainer.core.shared_types import Color, PieceType, SpecialMove


def sq(name: str) -> Position:
    return Position.from_algebraic(name)


@pytest.mark.parametrize(
    "placement, from_square, to_square, en_passant, expected",
    [
        (STARTING_PLACEMENT, "e2", "e4", None, SpecialMove.NORMAL),
        (STARTING_PLACEMENT, "g1", "f3", None, SpecialMove.NORMAL),
        ("4k3/8/8/3p4/4P3/8/8/4K3", "e4", "d5", None, SpecialMove.CAPTURE),
        ("4k3/8/8/3Pp3/8/8/8/4K3", "d5", "e6", "e6", SpecialMove.EN_PASSANT),
        ("r3k2r/8/8/8/8/8/8/R3K2R", "e1", "g1", None, SpecialMove.CASTLE_KINGSIDE),
        ("r3k2r/8/8/8/8/8/8/R3K2R", "e8", "c8", None, SpecialMove.CASTLE_QUEENSIDE),
        ("1r2k3/P7/8/8/8/8/8/4K3", "a7", "b8", None, SpecialMove.PROMOTION),
        ("4k3/8/8/8/8/8/p7/4K3", "a2", "a1", None, SpecialMove.PROMOTION),
    ],
)
def test_detect_special_move(
    placement: str, from_square: str, to_square: str, en_passant: str | None, expected: SpecialMove
) -> None:
    board = Board.from_fen(placement)
    ep_target = sq(en_passant) if en_passant else None
    assert detect_special_move(board, sq(from_square), sq(to_square), ep_target) == expected


def test_detect_special_move_from_empty_square() -> None:
    with pytest.raises(IllegalMoveError):
        detect_special_move(Board.initial(), sq("e4"), sq("e5"), None)


def test_pawn_double_step() -> None:
    """The square skipped by the pawn becomes the en passant target. The original board stays as it was."""
    board = Board.initial()
    result = execute_move(board, sq("e2"), sq("e4"), None)

    assert result.special_move == SpecialMove.NORMAL
    assert result.captured_piece is None
    assert result.en_passant_target == Position(5, 4)
    assert result.board.is_empty(sq("e2"))
    assert result.board.piece(sq("e4")) == Piece(PieceType.PAWN, Color.WHITE, has_moved=True)
    assert board.to_fen() == STARTING_PLACEMENT


def test_en_passant_target_cleared_by_other_moves() -> None:
    result = execute_move(Board.initial(), sq("g1"), sq("f3"), sq("e3"))
    assert result.en_passant_target is None


def test_capture() -> None:
    board = Board.from_fen("4k3/8/8/3p4/4P3/8/8/4K3")
    result = execute_move(board, sq("e4"), sq("d5"), None)
    assert result.special_move == SpecialMove.CAPTURE
    assert result.captured_piece == Piece(PieceType.PAWN, Color.BLACK)
    assert result.board.to_fen() == "4k3/8/8/3P4/8/8/8/4K3"


def test_en_passant_removes_the_passed_pawn() -> None:
    board = Board.from_fen("4k3/8/8/3Pp3/8/8/8/4K3")
    result = execute_move(board, sq("d5"), sq("e6"), sq("e6"))
    assert result.special_move == SpecialMove.EN_PASSANT
    assert result.captured_piece == Piece(PieceType.PAWN, Color.BLACK)
    assert result.board.to_fen() == "4k3/8/4P3/8/8/8/8/4K3"
    assert result.en_passant_target is None


@pytest.mark.parametrize(
    "king_from, king_to, rook_from, rook_to, special_move",
    [
        ("e1", "g1", "h1", "f1", SpecialMove.CASTLE_KINGSIDE),
        ("e1", "c1", "a1", "d1", SpecialMove.CASTLE_QUEENSIDE),
        ("e8", "g8", "h8", "f8", SpecialMove.CASTLE_KINGSIDE),
        ("e8", "c8", "a8", "d8", SpecialMove.CASTLE_QUEENSIDE),
    ],
)
def test_castling_moves_king_and_rook(
    castling_board: Board,
    king_from: str,
    king_to: str,
    rook_from: str,
    rook_to: str,
    special_move: SpecialMove,
) -> None:
    result = execute_move(castling_board, sq(king_from), sq(king_to), None)
    assert result.special_move == special_move
    assert result.captured_piece is None

    king = result.board.piece(sq(king_to))
    rook = result.board.piece(sq(rook_to))
    assert king is not None and king.type == PieceType.KING and king.has_moved
    assert rook is not None and rook.type == PieceType.ROOK and rook.has_moved
    assert result.board.is_empty(sq(king_from))
    assert result.board.is_empty(sq(rook_from))


@pytest.mark.parametrize(
    "promotion_piece_type, expected_type",
    [
        (None, PieceType.QUEEN),
        (PieceType.QUEEN, PieceType.QUEEN),
        (PieceType.ROOK, PieceType.ROOK),
        (PieceType.BISHOP, PieceType.BISHOP),
        (PieceType.KNIGHT, PieceType.KNIGHT),
    ],
)
def test_promotion(promotion_piece_type: PieceType | None, expected_type: PieceType) -> None:
    board = Board.from_fen("8/P6k/8/8/8/8/8/4K3")
    result = execute_move(board, sq("a7"), sq("a8"), None, promotion_piece_type)
    assert result.special_move == SpecialMove.PROMOTION
    assert result.board.piece(sq("a8")) == Piece(expected_type, Color.WHITE, has_moved=True)
    assert result.board.is_empty(sq("a7"))


def test_promotion_with_capture() -> None:
    board = Board.from_fen("1r2k3/P7/8/8/8/8/8/4K3")
    result = execute_move(board, sq("a7"), sq("b8"), None, PieceType.KNIGHT)
    assert result.captured_piece == Piece(PieceType.ROOK, Color.BLACK)
    assert result.board.to_fen() == "1N2k3/8/8/8/8/8/8/4K3"


@pytest.mark.parametrize("piece_type", [PieceType.KING, PieceType.PAWN])
def test_promotion_into_invalid_piece(piece_type: PieceType) -> None:
    board = Board.from_fen("8/P6k/8/8/8/8/8/4K3")
    with pytest.raises(IllegalMoveError):
        execute_move(board, sq("a7"), sq("a8"), None, piece_type)
