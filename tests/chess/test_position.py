"""Unit tests for /chess_trainer/chess/position.py"""

import pytest

from chess_trainer.chess.position import Position
from chess_trainer.core.exceptions import InvalidSquareError


@pytest.mark.parametrize(
    "algebraic, row, col",
    [
        ("a8", 0, 0),
        ("h8", 0, 7),
        ("a1", 7, 0),
        ("h1", 7, 7),
        ("e4", 4, 4),
        ("d5", 3, 3),
    ],
)
def test_from_algebraic(algebraic: str, row: int, col: int) -> None:
    """Row 0 is black's back rank (the 8th rank), column 0 is the a-file"""
    position = Position.from_algebraic(algebraic)
    assert position == Position(row, col)
    assert position.to_algebraic() == algebraic


@pytest.mark.parametrize("invalid_square", ["", "e", "i1", "a0", "a9", "e44", "4e"])
def test_from_algebraic_rejects_invalid_squares(invalid_square: str) -> None:
    with pytest.raises(InvalidSquareError):
        Position.from_algebraic(invalid_square)


@pytest.mark.parametrize(
    "position, expected",
    [
        (Position(0, 0), True),
        (Position(7, 7), True),
        (Position(-1, 0), False),
        (Position(0, 8), False),
        (Position(8, 3), False),
    ],
)
def test_is_within_bounds(position: Position, expected: bool) -> None:
    assert position.is_within_bounds() == expected


def test_offset_returns_new_position() -> None:
    """Positions are values: offsetting never changes the original"""
    e2 = Position.from_algebraic("e2")
    e4 = e2.offset(-2, 0)
    assert e4 == Position.from_algebraic("e4")
    assert e2 == Position(6, 4)
