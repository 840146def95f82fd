"""Core value types for Hnefatafl Arena.

Rule reminders:
- Boards are square (7x7 Brandubh, 11x11 Copenhagen), coordinates (row, col) from top-left.
- Attackers move first; the King belongs to the Defenders.
- Corners and the centre Throne are restricted to the King.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Tuple


Coord = Tuple[int, int]

COPENHAGEN_SIZE = 11
BRANDUBH_SIZE = 7


class Variant(Enum):
    """Supported rule variants, keyed by board size."""

    COPENHAGEN = COPENHAGEN_SIZE
    BRANDUBH = BRANDUBH_SIZE

    @property
    def board_size(self) -> int:
        return self.value

    @property
    def label(self) -> str:
        return "Copenhagen Hnefatafl" if self is Variant.COPENHAGEN else "Brandubh"

    @classmethod
    def from_name(cls, name: str) -> "Variant":
        try:
            return cls[name.strip().upper()]
        except KeyError as exc:
            raise ValueError(f"Unknown variant '{name}'") from exc


class Piece(Enum):
    ATTACKER = auto()
    DEFENDER = auto()
    KING = auto()

    @property
    def owner(self) -> "Player":
        return Player.ATTACKERS if self is Piece.ATTACKER else Player.DEFENDERS

    @property
    def symbol(self) -> str:
        return {Piece.ATTACKER: "A", Piece.DEFENDER: "D", Piece.KING: "K"}[self]


class Player(Enum):
    """The two sides."""

    ATTACKERS = auto()
    DEFENDERS = auto()

    def opponent(self) -> "Player":
        """Return the opposing side."""

        return Player.DEFENDERS if self is Player.ATTACKERS else Player.ATTACKERS


class GameResult(Enum):
    ATTACKERS_WIN = auto()
    DEFENDERS_WIN = auto()
    DRAW = auto()

    @classmethod
    def win_for(cls, player: Player) -> "GameResult":
        return cls.ATTACKERS_WIN if player is Player.ATTACKERS else cls.DEFENDERS_WIN

    def winner(self) -> Player | None:
        if self is GameResult.ATTACKERS_WIN:
            return Player.ATTACKERS
        if self is GameResult.DEFENDERS_WIN:
            return Player.DEFENDERS
        return None


class SquareKind(Enum):
    """Derived classification of a square; never stored on the board."""

    NORMAL = auto()
    CORNER = auto()
    THRONE = auto()


@dataclass(frozen=True, order=True)
class Position:
    """A (row, col) square, 0-indexed from the top-left."""

    row: int
    col: int

    def offset(self, dr: int, dc: int) -> "Position":
        return Position(self.row + dr, self.col + dc)

    def __str__(self) -> str:
        return f"({self.row}, {self.col})"


@dataclass(frozen=True, order=True)
class Move:
    """A single orthogonal slide."""

    from_pos: Position
    to_pos: Position

    @classmethod
    def of(cls, from_rc: Coord, to_rc: Coord) -> "Move":
        return cls(Position(*from_rc), Position(*to_rc))

    def __str__(self) -> str:
        return f"{self.from_pos} -> {self.to_pos}"


ORTHOGONAL: Tuple[Coord, ...] = ((0, 1), (0, -1), (1, 0), (-1, 0))
