"""
A square on the board, addressed by (row, col)

(placed in its own module as multiple other modules need to import it)
"""

from __future__ import annotations

from dataclasses import dataclass

from chess_trainer.core.exceptions import InvalidSquareError

# Chess board is always 8x8. Rows count down from black's back rank, columns count the files a-h.
BOARD_DIMENSIONS = (8, 8)
FILES = "abcdefgh"


@dataclass(frozen=True)
class Position:
    row: int
    col: int

    @classmethod
    def from_algebraic(cls, sq: str) -> Position:
        """Algebraic notation: 'a8' is (0, 0), 'h1' is (7, 7)"""
        if len(sq) != 2 or sq[0] not in FILES or not sq[1].isdigit():
            raise InvalidSquareError(f"Cannot read {sq!r} as a square name.")
        col = FILES.index(sq[0])
        row = BOARD_DIMENSIONS[0] - int(sq[1])
        position = cls(row, col)
        if not position.is_within_bounds():
            raise InvalidSquareError(f"Square {sq!r} is not on the board.")
        return position

    def to_algebraic(self) -> str:
        return f"{FILES[self.col]}{BOARD_DIMENSIONS[0] - self.row}"

    def is_within_bounds(self) -> bool:
        return (0 <= self.row < BOARD_DIMENSIONS[0]) and (
            0 <= self.col < BOARD_DIMENSIONS[1]
        )

    def offset(self, d_row: int, d_col: int) -> Position:
        return Position(self.row + d_row, self.col + d_col)
