"""Board storage and square classification.

The board is an N x N matrix of ``Optional[Piece]``. Square kinds (corner,
throne) are derived from the size. No rule validation happens here; the
engine and capture modules are the only callers that mutate a board.
"""

from __future__ import annotations

from typing import Iterator, List, Optional, Tuple

from .errors import OutOfBoundsError
from .types import Piece, Player, Position, SquareKind


class Board:
    """Grid storage with O(1) lookup and a cached king position."""

    __slots__ = ("size", "cells", "king_pos", "_key_cache")

    def __init__(self, size: int) -> None:
        if size < 3 or size % 2 == 0:
            raise ValueError(f"board size must be odd and >= 3, got {size}")
        self.size = size
        self.cells: List[List[Optional[Piece]]] = [[None for _ in range(size)] for _ in range(size)]
        self.king_pos: Optional[Position] = None
        self._key_cache: Optional[Tuple] = None

    def clone(self) -> "Board":
        """Return an independent copy."""

        other = Board.__new__(Board)
        other.size = self.size
        other.cells = [row[:] for row in self.cells]
        other.king_pos = self.king_pos
        other._key_cache = self._key_cache
        return other

    @property
    def center(self) -> Position:
        mid = self.size // 2
        return Position(mid, mid)

    def in_bounds(self, pos: Position) -> bool:
        return 0 <= pos.row < self.size and 0 <= pos.col < self.size

    def require_in_bounds(self, pos: Position) -> None:
        if not self.in_bounds(pos):
            raise OutOfBoundsError(f"{pos} is outside the {self.size}x{self.size} board")

    def is_corner(self, pos: Position) -> bool:
        edge = self.size - 1
        return pos.row in (0, edge) and pos.col in (0, edge)

    def is_throne(self, pos: Position) -> bool:
        mid = self.size // 2
        return pos.row == mid and pos.col == mid

    def is_adjacent_to_throne(self, pos: Position) -> bool:
        mid = self.size // 2
        return abs(pos.row - mid) + abs(pos.col - mid) == 1

    def square_kind(self, pos: Position) -> SquareKind:
        if self.is_corner(pos):
            return SquareKind.CORNER
        if self.is_throne(pos):
            return SquareKind.THRONE
        return SquareKind.NORMAL

    def corners(self) -> Tuple[Position, ...]:
        edge = self.size - 1
        return (Position(0, 0), Position(0, edge), Position(edge, 0), Position(edge, edge))

    def get(self, pos: Position) -> Optional[Piece]:
        """Piece at ``pos``; ``None`` for empty or off-board squares."""

        if not self.in_bounds(pos):
            return None
        return self.cells[pos.row][pos.col]

    def place(self, pos: Position, piece: Piece) -> None:
        self.cells[pos.row][pos.col] = piece
        if piece is Piece.KING:
            self.king_pos = pos
        self._key_cache = None

    def remove(self, pos: Position) -> Optional[Piece]:
        piece = self.cells[pos.row][pos.col]
        self.cells[pos.row][pos.col] = None
        if piece is Piece.KING:
            self.king_pos = None
        self._key_cache = None
        return piece

    def relocate(self, src: Position, dst: Position) -> Piece:
        piece = self.remove(src)
        if piece is None:
            raise ValueError(f"no piece at {src}")
        self.place(dst, piece)
        return piece

    def pieces(self) -> Iterator[Tuple[Position, Piece]]:
        for r, row in enumerate(self.cells):
            for c, piece in enumerate(row):
                if piece is not None:
                    yield Position(r, c), piece

    def pieces_of(self, player: Player) -> Iterator[Tuple[Position, Piece]]:
        for pos, piece in self.pieces():
            if piece.owner is player:
                yield pos, piece

    def count(self, piece: Piece) -> int:
        return sum(1 for row in self.cells for cell in row if cell is piece)

    def key(self) -> Tuple:
        """Hashable snapshot of the piece layout."""

        if self._key_cache is None:
            self._key_cache = tuple(
                0 if cell is None else cell.value for row in self.cells for cell in row
            )
        return self._key_cache

    def render(self, title: Optional[str] = None) -> str:
        """Text dump: X corner, T empty throne, A/D/K pieces, '.' empty."""

        lines: List[str] = []
        if title:
            lines.append(f"[{title}]")
        lines.append("   " + "".join(f"{col:2} " for col in range(self.size)))
        for r in range(self.size):
            cells = []
            for c in range(self.size):
                pos = Position(r, c)
                piece = self.cells[r][c]
                if piece is not None:
                    ch = piece.symbol
                elif self.is_corner(pos):
                    ch = "X"
                elif self.is_throne(pos):
                    ch = "T"
                else:
                    ch = "."
                cells.append(f" {ch} ")
            lines.append(f"{r:2} " + "".join(cells))
        return "\n".join(lines)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self.cells == other.cells

    def __repr__(self) -> str:
        return f"Board(size={self.size}, pieces={sum(1 for _ in self.pieces())})"
