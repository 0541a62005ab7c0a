"""Unit tests for /chess_trainer/chess/pieces.py"""

import pytest

from chess_trainer.chess.pieces import Piece
from chess_trainer.core.shared_types import Color, PieceType


@pytest.mark.parametrize(
    "fen, piece_type, color",
    [
        ("K", PieceType.KING, Color.WHITE),
        ("q", PieceType.QUEEN, Color.BLACK),
        ("R", PieceType.ROOK, Color.WHITE),
        ("b", PieceType.BISHOP, Color.BLACK),
        ("N", PieceType.KNIGHT, Color.WHITE),
        ("p", PieceType.PAWN, Color.BLACK),
    ],
)
def test_piece_from_fen(fen: str, piece_type: PieceType, color: Color) -> None:
    piece = Piece.from_fen(fen)
    assert piece.type == piece_type
    assert piece.color == color
    assert not piece.has_moved
    assert piece.to_fen() == fen


def test_mark_moved_returns_new_piece() -> None:
    """Pieces are immutable: marking a piece as moved gives a new value with the same identity"""
    knight = Piece(PieceType.KNIGHT, Color.WHITE)
    moved = knight.mark_moved()
    assert moved.has_moved
    assert not knight.has_moved
    assert (moved.type, moved.color) == (knight.type, knight.color)
    assert moved.mark_moved() is moved


@pytest.mark.parametrize(
    "piece, letter, symbol, name",
    [
        (Piece(PieceType.KNIGHT, Color.WHITE), "N", "♘", "white knight"),
        (Piece(PieceType.PAWN, Color.BLACK), "", "♟", "black pawn"),
        (Piece(PieceType.QUEEN, Color.BLACK), "Q", "♛", "black queen"),
    ],
)
def test_piece_display_properties(piece: Piece, letter: str, symbol: str, name: str) -> None:
    assert piece.letter == letter
    assert piece.symbol == symbol
    assert piece.name == name
