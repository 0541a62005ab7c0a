"""
Type definitions used across layers
"""

from enum import StrEnum


class Color(StrEnum):
    WHITE = "white"
    BLACK = "black"

    @property
    def opponent(self) -> "Color":
        return Color.BLACK if self == Color.WHITE else Color.WHITE


class PieceType(StrEnum):
    PAWN = "pawn"
    KNIGHT = "knight"
    BISHOP = "bishop"
    ROOK = "rook"
    QUEEN = "queen"
    KING = "king"


class GameStatus(StrEnum):
    PLAYING = "playing"
    CHECK = "check"
    CHECKMATE = "checkmate"
    STALEMATE = "stalemate"
    # NOTE: reserved. No transition produces a draw (no repetition / fifty-move detection)
    DRAW = "draw"


TERMINAL_STATUSES: frozenset[GameStatus] = frozenset(
    {GameStatus.CHECKMATE, GameStatus.STALEMATE, GameStatus.DRAW}
)


class SpecialMove(StrEnum):
    NORMAL = "normal"
    CAPTURE = "capture"
    EN_PASSANT = "en_passant"
    CASTLE_KINGSIDE = "castle_kingside"
    CASTLE_QUEENSIDE = "castle_queenside"
    PROMOTION = "promotion"


class ChessEventType(StrEnum):
    MOVE = "move"
    CAPTURE = "capture"
    CHECK = "check"
    CHECKMATE = "checkmate"
    CASTLING = "castling"
    PROMOTION = "promotion"
    STALEMATE = "stalemate"
    PIECE_SELECT = "piece_select"
    GAME_START = "game_start"


class FeedbackType(StrEnum):
    ERROR = "error"
    WARNING = "warning"
    INFO = "info"
    SUCCESS = "success"


class RuleId(StrEnum):
    """Cross-reference tokens for the rules ontology. Only compared by identity."""

    TURN_VIOLATION = "TurnViolation"
    INVALID_PAWN_CAPTURE = "InvalidPawnCapture"
    INVALID_PAWN_MOVE = "InvalidPawnMove"
    INVALID_PAWN_DIRECTION = "InvalidPawnDirection"
    INVALID_ROOK_MOVE = "InvalidRookMove"
    ROOK_PATH_BLOCKED = "RookPathBlocked"
    INVALID_BISHOP_MOVE = "InvalidBishopMove"
    BISHOP_PATH_BLOCKED = "BishopPathBlocked"
    INVALID_QUEEN_MOVE = "InvalidQueenMove"
    QUEEN_PATH_BLOCKED = "QueenPathBlocked"
    INVALID_KING_MOVE = "InvalidKingMove"
    KING_INTO_CHECK = "KingIntoCheck"
    INVALID_KNIGHT_MOVE = "InvalidKnightMove"
    NO_SELECTION = "NoSelection"
    NO_LEGAL_MOVES = "NoLegalMoves"


class CastlingSide(StrEnum):
    KING_SIDE = "king_side"
    QUEEN_SIDE = "queen_side"
