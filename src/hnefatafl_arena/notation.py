"""Square names and move text for human input.

Columns are letters from the left ("a".."k"), rows are numbers from the
top row ("1"..), so (0, 0) is "a1" and (6, 3) on Brandubh is "d7".
"""
from __future__ import annotations

import re

from .errors import OutOfBoundsError
from .types import Move, Position

COLUMNS = "abcdefghijk"

_SQUARE = r"([a-kA-K])\s*(\d{1,2})"
_COORD = r"\(?\s*(\d{1,2})\s*,\s*(\d{1,2})\s*\)?"


def square_name(pos: Position) -> str:
    """Convert a position to its square name (e.g. (0, 0) -> "a1")."""

    if not (0 <= pos.col < len(COLUMNS)) or pos.row < 0:
        raise OutOfBoundsError(f"no square name for {pos}")
    return f"{COLUMNS[pos.col]}{pos.row + 1}"


def parse_square(text: str, size: int) -> Position:
    """Convert a square name such as "d4" to a position on a ``size`` board."""

    match = re.fullmatch(_SQUARE, text.strip())
    if not match:
        raise ValueError(f"Invalid square '{text}'")
    pos = Position(int(match.group(2)) - 1, COLUMNS.index(match.group(1).lower()))
    if not (0 <= pos.row < size and 0 <= pos.col < size):
        raise OutOfBoundsError(f"square '{text}' is outside the {size}x{size} board")
    return pos


def move_name(move: Move) -> str:
    return f"{square_name(move.from_pos)}-{square_name(move.to_pos)}"


def parse_move_text(raw: str, size: int) -> Move:
    """Parse a move typed by a user.

    Accepted examples (case-insensitive):
    - "a4-d4", "a4 d4", "a4d4"
    - "(3,0)->(3,4)", "3,0 3,4"

    Raises:
        ValueError: if the text cannot be parsed or names an off-board square.
    """

    text = raw.strip()
    if not text:
        raise ValueError("Move text is empty")

    match = re.fullmatch(rf"{_SQUARE}\s*(?:-|x|\s)?\s*{_SQUARE}", text)
    if match:
        src = parse_square(match.group(1) + match.group(2), size)
        dst = parse_square(match.group(3) + match.group(4), size)
        return Move(src, dst)

    match = re.fullmatch(rf"{_COORD}\s*(?:->|-|\s)\s*{_COORD}", text)
    if match:
        r1, c1, r2, c2 = (int(g) for g in match.groups())
        src, dst = Position(r1, c1), Position(r2, c2)
        for pos in (src, dst):
            if not (0 <= pos.row < size and 0 <= pos.col < size):
                raise OutOfBoundsError(f"{pos} is outside the {size}x{size} board")
        return Move(src, dst)

    raise ValueError("Could not parse move; use formats like 'a4-d4' or '(3,0)->(3,4)'")
