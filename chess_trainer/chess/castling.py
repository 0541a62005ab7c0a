"""Helpers for implementing Castling rules. Need to be imported by multiple sources"""

from dataclasses import dataclass, field, replace
from typing import Optional, Self

from chess_trainer.chess.pieces import Piece
from chess_trainer.chess.position import Position
from chess_trainer.core.shared_types import CastlingSide, Color, PieceType


@dataclass(frozen=True)
class CastlingSquares:
    """
    Store the squares where king/rook start from/end up in by castling.
    NOTE: The rook always ends up on the square adjacent to the king, on the castled side.
    """

    king_from: Position
    king_to: Position
    rook_from: Position
    rook_to: Position

    @classmethod
    def from_algebraic(cls, k_from: str, k_to: str, r_from: str, r_to: str) -> Self:
        """Convenience method: to make mapping shown below more readable"""
        return cls(
            Position.from_algebraic(k_from),
            Position.from_algebraic(k_to),
            Position.from_algebraic(r_from),
            Position.from_algebraic(r_to),
        )

    def king_path(self) -> list[Position]:
        """Squares the king passes through, including its destination (but not its starting square)"""
        step = 1 if self.king_to.col > self.king_from.col else -1
        return [
            Position(self.king_from.row, col)
            for col in range(self.king_from.col + step, self.king_to.col + step, step)
        ]

    def squares_between(self) -> list[Position]:
        """Squares strictly between king and rook. These must all be empty."""
        low, high = sorted((self.king_from.col, self.rook_from.col))
        return [Position(self.king_from.row, col) for col in range(low + 1, high)]


# The moves (in classical chess) made when castling
CASTLING_RULES: dict[tuple[Color, CastlingSide], CastlingSquares] = {
    (Color.WHITE, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e1", "g1", "h1", "f1"
    ),
    (Color.WHITE, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e1", "c1", "a1", "d1"
    ),
    (Color.BLACK, CastlingSide.KING_SIDE): CastlingSquares.from_algebraic(
        "e8", "g8", "h8", "f8"
    ),
    (Color.BLACK, CastlingSide.QUEEN_SIDE): CastlingSquares.from_algebraic(
        "e8", "c8", "a8", "d8"
    ),
}


def castling_side_for(king_from: Position, king_to: Position) -> Optional[CastlingSide]:
    """A king moving two files is castling. Anything else is not."""
    file_difference = king_to.col - king_from.col
    if king_from.row != king_to.row or abs(file_difference) != 2:
        return None
    return CastlingSide.KING_SIDE if file_difference > 0 else CastlingSide.QUEEN_SIDE


@dataclass(frozen=True)
class SideRights:
    king_side: bool = True
    queen_side: bool = True

    def has(self, side: CastlingSide) -> bool:
        return self.king_side if side == CastlingSide.KING_SIDE else self.queen_side


@dataclass(frozen=True)
class CastlingRights:
    """Rights are only ever revoked during a game, never handed back."""

    white: SideRights = field(default_factory=SideRights)
    black: SideRights = field(default_factory=SideRights)

    def for_color(self, color: Color) -> SideRights:
        return self.white if color == Color.WHITE else self.black

    def has(self, color: Color, side: CastlingSide) -> bool:
        return self.for_color(color).has(side)

    def revoke(self, color: Color, side: Optional[CastlingSide] = None) -> Self:
        """Revoke one side, or both when no side is given"""
        current = self.for_color(color)
        if side is None:
            updated = SideRights(king_side=False, queen_side=False)
        elif side == CastlingSide.KING_SIDE:
            updated = replace(current, king_side=False)
        else:
            updated = replace(current, queen_side=False)
        return replace(self, **{color.value: updated})


def update_castling_rights(
    rights: CastlingRights, moving_piece: Piece, from_square: Position
) -> CastlingRights:
    """
    Checks which rights should get revoked by a move
    ----

    1. If you are moving your king (castling included) --> revoke both
    2. If you are moving a rook away from its starting square --> revoke the right on that side

    NOTE: Capturing a rook that never moved does NOT revoke its owner's right.
    """
    color = moving_piece.color
    if moving_piece.type == PieceType.KING:
        return rights.revoke(color)

    if moving_piece.type == PieceType.ROOK:
        for side in CastlingSide:
            if CASTLING_RULES[(color, side)].rook_from == from_square:
                return rights.revoke(color, side)

    return rights
