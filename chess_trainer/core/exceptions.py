"""
Custom exceptions.

Chess rule violations made by a player are NOT exceptions: the state machine turns them into feedback.
These are raised for malformed requests, bad configuration, and calls that can only happen through a programming error.
"""


class GameError(Exception):
    """Top-level exception for everything raised by this package."""


class GameStateError(GameError):
    """The game is not in a state where the requested operation makes sense."""


class IllegalMoveError(GameError):
    """A move was executed that the move generator would never have produced."""


class InvalidSquareError(GameError):
    """A square outside of the board, or a string that cannot be read as one."""


class InvalidRequestError(GameError):
    """Request data coming in through the API models failed validation."""


class ConfigError(GameError):
    """Configuration file missing or containing invalid values."""
