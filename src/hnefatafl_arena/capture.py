"""Capture resolution.

Captures are triggered only by the piece that just moved and only against
the four orthogonal neighbours of its destination.

Hostile squares:
- Corners are hostile to every piece.
- The throne is hostile to attackers always and to defenders while empty.
  It never counts against the king.

The king is captured according to where it stands relative to the throne
(see :func:`king_capture_mode`), and only by an attacker's move, after the
regular captures of that move have been removed.
"""

from __future__ import annotations

from enum import Enum
from typing import List, Tuple

from .board import Board
from .types import ORTHOGONAL, Piece, Position


class KingMode(str, Enum):
    AWAY = "away"
    ON_THRONE = "on_throne"
    ADJACENT = "adjacent"


def king_capture_mode(board: Board, king_pos: Position) -> KingMode:
    """Derive the capture rule from the king's current square."""

    if board.is_throne(king_pos):
        return KingMode.ON_THRONE
    if board.is_adjacent_to_throne(king_pos):
        return KingMode.ADJACENT
    return KingMode.AWAY


def is_hostile_to(board: Board, square: Position, target: Piece) -> bool:
    """Whether ``square`` acts as the far side of a sandwich against ``target``."""

    if not board.in_bounds(square):
        return False
    if board.is_corner(square):
        return True
    occupant = board.get(square)
    if board.is_throne(square):
        if target is Piece.ATTACKER:
            return True
        if target is Piece.DEFENDER and occupant is None:
            return True
    if target is Piece.KING:
        return occupant is Piece.ATTACKER
    return occupant is not None and occupant.owner is not target.owner


def _surrounded(board: Board, king_pos: Position, skip_throne: bool) -> bool:
    for dr, dc in ORTHOGONAL:
        side = king_pos.offset(dr, dc)
        if skip_throne and board.is_throne(side):
            continue
        if board.get(side) is not Piece.ATTACKER:
            return False
    return True


def is_king_captured(board: Board, king_pos: Position, attacker_pos: Position) -> bool:
    """Evaluate the king capture rule for an attacker that just arrived next to it."""

    mode = king_capture_mode(board, king_pos)
    if mode is KingMode.ON_THRONE:
        return _surrounded(board, king_pos, skip_throne=False)
    if mode is KingMode.ADJACENT:
        return _surrounded(board, king_pos, skip_throne=True)
    dr = king_pos.row - attacker_pos.row
    dc = king_pos.col - attacker_pos.col
    return is_hostile_to(board, king_pos.offset(dr, dc), Piece.KING)


def resolve_captures(board: Board, moved_to: Position) -> List[Tuple[Position, Piece]]:
    """Remove every piece captured by the piece now standing on ``moved_to``.

    Returns the captured (position, piece) pairs in direction order.
    """

    mover = board.get(moved_to)
    if mover is None:
        return []

    regular: List[Tuple[Position, Piece]] = []
    king_neighbours: List[Position] = []
    for dr, dc in ORTHOGONAL:
        target = moved_to.offset(dr, dc)
        victim = board.get(target)
        if victim is None or victim.owner is mover.owner:
            continue
        if victim is Piece.KING:
            king_neighbours.append(target)
            continue
        if is_hostile_to(board, target.offset(dr, dc), victim):
            regular.append((target, victim))

    for pos, _ in regular:
        board.remove(pos)

    captured = list(regular)
    if mover is Piece.ATTACKER:
        for king_pos in king_neighbours:
            if is_king_captured(board, king_pos, moved_to):
                board.remove(king_pos)
                captured.append((king_pos, Piece.KING))
    return captured
