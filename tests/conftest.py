"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/variables required for testing multiple layers.
"""

from typing import Callable

import pytest

from chess_trainer.chess.board import Board
from chess_trainer.chess.game import GameState, PromotePawn, SelectSquare, transition
from chess_trainer.chess.pieces import FEN_TO_PIECE
from chess_trainer.chess.position import Position

EMPTY_FEN = "/".join(["8"] * 8)


@pytest.fixture
def kings_only_board() -> Board:
    """
    Create a board with only kings on their canonical starting squares.
    Most positions need both kings: a missing king is never in check, so checkmate/stalemate detection becomes meaningless.
    """
    return Board.from_fen("4k3/8/8/8/8/8/8/4K3")


@pytest.fixture
def castling_board() -> Board:
    """Create a board with only the Kings and the Rooks. Ready to perform any castling move (if allowed)."""
    return Board.from_fen("r3k2r/8/8/8/8/8/8/R3K2R")


@pytest.fixture
def play() -> Callable[..., GameState]:
    """
    Play moves given in UCI-like notation ('e2e4', 'a7a8q') through the state machine, one click per square.
    Returns the state after the last move.
    """

    def _play(state: GameState, *moves: str) -> GameState:
        for move in moves:
            for square in (move[:2], move[2:4]):
                state = transition(state, SelectSquare(Position.from_algebraic(square))).state
            if len(move) == 5:
                state = transition(state, PromotePawn(FEN_TO_PIECE[move[4]])).state
        return state

    return _play
