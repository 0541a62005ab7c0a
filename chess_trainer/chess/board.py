"""The Game board: an 8x8 grid of cells that are either empty or hold exactly one piece."""

from dataclasses import dataclass
from typing import Optional, Self

from chess_trainer.chess.pieces import Piece
from chess_trainer.chess.position import BOARD_DIMENSIONS, Position
from chess_trainer.core.shared_types import Color, PieceType

Grid = list[list[Optional[Piece]]]

STARTING_PLACEMENT = "rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR"
BACK_RANK_ORDER: tuple[PieceType, ...] = (
    PieceType.ROOK,
    PieceType.KNIGHT,
    PieceType.BISHOP,
    PieceType.QUEEN,
    PieceType.KING,
    PieceType.BISHOP,
    PieceType.KNIGHT,
    PieceType.ROOK,
)


@dataclass
class Board:
    squares: Grid

    @classmethod
    def empty(cls) -> Self:
        return cls([[None] * BOARD_DIMENSIONS[1] for _ in range(BOARD_DIMENSIONS[0])])

    @classmethod
    def initial(cls) -> Self:
        """Standard starting position: black on rows 0-1, white on rows 6-7."""
        board = cls.empty()
        for col, piece_type in enumerate(BACK_RANK_ORDER):
            board.squares[0][col] = Piece(piece_type, Color.BLACK)
            board.squares[1][col] = Piece(PieceType.PAWN, Color.BLACK)
            board.squares[6][col] = Piece(PieceType.PAWN, Color.WHITE)
            board.squares[7][col] = Piece(piece_type, Color.WHITE)
        return board

    @classmethod
    def from_fen(cls, placement: str) -> Self:
        """Construct a board from the piece placement field of a FEN string.

        ex. standard starting position:
        rnbqkbnr/pppppppp/8/8/8/8/PPPPPPPP/RNBQKBNR
        means:
        * the first group is row 0 (black's back rank, the 8th rank), read from the a-file to the h-file
        * a number denotes that many consecutive empty squares
        * capital letters are white pieces

        Only the placement is read: every piece starts with has_moved = False.
        """
        board = cls.empty()
        for row, fen_one_row in enumerate(placement.split("/")):
            col = 0
            for character in fen_one_row:
                if character.isalpha():
                    board.squares[row][col] = Piece.from_fen(character)
                    col += 1
                else:
                    col += int(character)
        return board

    def to_fen(self) -> str:
        """Rows are separated by slashes in the placement string."""
        return "/".join(self._row_to_fen(row) for row in self.squares)

    @staticmethod
    def _row_to_fen(row: list[Optional[Piece]]) -> str:
        fen_characters: list[str] = []
        empty_count = 0
        for piece in row:
            if piece is None:
                empty_count += 1
                continue
            if empty_count > 0:
                fen_characters.append(str(empty_count))
                empty_count = 0
            fen_characters.append(piece.to_fen())

        # if the entire row is empty, then we still place this number in the string
        if empty_count > 0:
            fen_characters.append(str(empty_count))
        return "".join(fen_characters)

    def piece(self, position: Position) -> Optional[Piece]:
        return self.squares[position.row][position.col]

    def is_empty(self, position: Position) -> bool:
        return self.piece(position) is None

    def place_piece(self, piece: Optional[Piece], position: Position) -> None:
        self.squares[position.row][position.col] = piece

    def remove_piece(self, position: Position) -> Optional[Piece]:
        piece = self.piece(position)
        self.squares[position.row][position.col] = None
        return piece

    def copy(self) -> Self:
        """Independent grid. Pieces are immutable values, so sharing them between copies is safe."""
        return type(self)([row[:] for row in self.squares])

    def locate_color(self, color: Color) -> list[Position]:
        return [
            Position(row, col)
            for row, pieces in enumerate(self.squares)
            for col, piece in enumerate(pieces)
            if piece is not None and piece.color == color
        ]

    def locate_king(self, color: Color) -> Optional[Position]:
        """None on malformed boards without a king of that color"""
        for position in self.locate_color(color):
            piece = self.piece(position)
            if piece is not None and piece.type == PieceType.KING:
                return position
        return None
