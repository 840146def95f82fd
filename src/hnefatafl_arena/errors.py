"""Exceptions raised by the rules engine.

Every rejected operation leaves the game state untouched. All errors derive
from ``ValueError`` so callers can treat them like any other invalid input.
"""

from __future__ import annotations


class GameError(ValueError):
    """Base class for rule violations."""


class IllegalMoveError(GameError):
    """The move is not among the legal moves of the side to move."""


class GameOverError(IllegalMoveError):
    """The game already has a result; no further moves are accepted."""


class OutOfBoundsError(GameError):
    """A position lies outside the board."""
