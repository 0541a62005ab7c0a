"""Didactic tips shown after each move while training mode is on"""

import random
from typing import Optional

from chess_trainer.core.shared_types import PieceType

TRAINING_TIPS: dict[PieceType, tuple[str, ...]] = {
    PieceType.PAWN: (
        "Pawns move straight ahead but capture diagonally.",
        "Control the center with your pawns in the opening.",
        "A passed pawn can become a formidable threat.",
    ),
    PieceType.KNIGHT: (
        "Knights excel in closed positions.",
        "Knights move in an L-shape and can jump over other pieces.",
        "Place your knights in the center for maximum control.",
    ),
    PieceType.BISHOP: (
        "Bishops are strong on long diagonals.",
        "The bishop pair can be a significant advantage.",
        "Bishops excel in open positions.",
    ),
    PieceType.ROOK: (
        "Rooks are strongest on open files.",
        "Connect your rooks for maximum power.",
        "The seventh rank is an ideal spot for a rook.",
    ),
    PieceType.QUEEN: (
        "Don't bring your queen out too early.",
        "The queen is your most powerful piece.",
        "Use your queen to create multiple threats at once.",
    ),
    PieceType.KING: (
        "Keep your king safe, especially in the middlegame.",
        "In the endgame the king becomes an active piece.",
        "Castle early to protect your king.",
    ),
}


def training_tip(piece_type: PieceType, rng: Optional[random.Random] = None) -> str:
    """Pick one of the tips for the piece that just moved at random"""
    return (rng or random).choice(TRAINING_TIPS[piece_type])
