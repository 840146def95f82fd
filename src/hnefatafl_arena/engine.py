"""Rules engine for Hnefatafl Arena.

Rules:
- Pieces slide like rooks: any distance along a row or column, never jumping
  and never landing on an occupied square.
- Only the King may stop on a corner or on the throne.
- Captures are resolved by :mod:`hnefatafl_arena.capture`.
- Defenders win when the King reaches a corner; Attackers win when the King
  is captured. A side left without moves, or the move limit, ends in a draw
  (see :class:`RulesConfig` for the alternatives).
"""

from __future__ import annotations

import logging
from typing import Iterator, List, Optional, Sequence, Tuple

from .board import Board
from .capture import resolve_captures
from .config import NO_MOVES_LOSS, RulesConfig
from .errors import GameOverError, IllegalMoveError
from .state import GameState
from .types import ORTHOGONAL, GameResult, Move, Piece, Player, Position, Variant

logger = logging.getLogger(__name__)

Cells = Tuple[Tuple[int, int], ...]

BRANDUBH_DEFENDERS: Cells = ((2, 3), (4, 3), (3, 2), (3, 4))
BRANDUBH_ATTACKERS: Cells = (
    (0, 3),
    (1, 3),
    (5, 3),
    (6, 3),
    (3, 0),
    (3, 1),
    (3, 5),
    (3, 6),
)

COPENHAGEN_DEFENDERS: Cells = (
    (4, 5),
    (6, 5),
    (5, 4),
    (5, 6),
    (3, 5),
    (7, 5),
    (5, 3),
    (5, 7),
)
COPENHAGEN_ATTACKERS: Cells = (
    # Top
    (0, 3), (0, 4), (0, 5), (0, 6), (0, 7), (1, 5),
    # Bottom
    (10, 3), (10, 4), (10, 5), (10, 6), (10, 7), (9, 5),
    # Left
    (3, 0), (4, 0), (5, 0), (6, 0), (7, 0), (5, 1),
    # Right
    (3, 10), (4, 10), (5, 10), (6, 10), (7, 10), (5, 9),
)

LAYOUTS = {
    Variant.BRANDUBH: (BRANDUBH_ATTACKERS, BRANDUBH_DEFENDERS),
    Variant.COPENHAGEN: (COPENHAGEN_ATTACKERS, COPENHAGEN_DEFENDERS),
}


def new_game(variant: Variant = Variant.BRANDUBH, rules: Optional[RulesConfig] = None) -> GameState:
    """Create a game with the variant's cross formation. Attackers move first."""

    attackers, defenders = LAYOUTS[variant]
    board = Board(variant.board_size)
    board.place(board.center, Piece.KING)
    for r, c in defenders:
        board.place(Position(r, c), Piece.DEFENDER)
    for r, c in attackers:
        board.place(Position(r, c), Piece.ATTACKER)

    state = GameState(board=board, variant=variant, rules=rules or RulesConfig())
    _record_position(state)
    return state


def from_layout(
    variant: Variant,
    attackers: Sequence[Tuple[int, int]] = (),
    defenders: Sequence[Tuple[int, int]] = (),
    king: Optional[Tuple[int, int]] = None,
    turn: Player = Player.ATTACKERS,
    rules: Optional[RulesConfig] = None,
) -> GameState:
    """Build a non-terminal position from explicit piece lists."""

    board = Board(variant.board_size)
    placements = [(coord, Piece.ATTACKER) for coord in attackers] + [(coord, Piece.DEFENDER) for coord in defenders]
    if king is not None:
        placements.append((king, Piece.KING))
    for coord, piece in placements:
        pos = Position(*coord)
        board.require_in_bounds(pos)
        if board.get(pos) is not None:
            raise ValueError(f"two pieces placed on {pos}")
        board.place(pos, piece)

    state = GameState(board=board, variant=variant, turn=turn, rules=rules or RulesConfig())
    _record_position(state)
    return state


def _slides(board: Board, from_pos: Position, piece: Piece) -> Iterator[Position]:
    for dr, dc in ORTHOGONAL:
        pos = from_pos.offset(dr, dc)
        while board.in_bounds(pos):
            if board.get(pos) is not None:
                break
            # Non-king pieces may cross the empty throne but never stop on it.
            if piece is not Piece.KING and board.is_corner(pos):
                break
            if piece is Piece.KING or not board.is_throne(pos):
                yield pos
            pos = pos.offset(dr, dc)


def legal_moves_for_piece(board: Board, from_pos: Position) -> List[Move]:
    piece = board.get(from_pos)
    if piece is None:
        return []
    return [Move(from_pos, to_pos) for to_pos in _slides(board, from_pos, piece)]


def _moves_for(board: Board, player: Player) -> List[Move]:
    moves: List[Move] = []
    for pos, piece in board.pieces_of(player):
        moves.extend(Move(pos, to_pos) for to_pos in _slides(board, pos, piece))
    return moves


def _has_any_move(board: Board, player: Player) -> bool:
    for pos, piece in board.pieces_of(player):
        for _ in _slides(board, pos, piece):
            return True
    return False


def generate_legal_moves(state: GameState, player: Optional[Player] = None) -> List[Move]:
    """All legal moves for ``player`` (default: side to move), row-major by source.

    A terminal state has no legal moves.
    """

    if state.result is not None:
        return []
    return _moves_for(state.board, state.turn if player is None else player)


def is_legal_move(state: GameState, move: Move) -> bool:
    if state.result is not None:
        return False
    board = state.board
    board.require_in_bounds(move.from_pos)
    board.require_in_bounds(move.to_pos)
    piece = board.get(move.from_pos)
    if piece is None or piece.owner is not state.turn:
        return False
    src, dst = move.from_pos, move.to_pos
    if (src.row != dst.row) == (src.col != dst.col):
        return False
    return dst in set(_slides(board, src, piece))


def _record_position(state: GameState) -> int:
    key = state.key()
    count = state.position_counts.get(key, 0) + 1
    state.position_counts[key] = count
    return count


def _evaluate_result(state: GameState, mover: Player, piece: Piece, move: Move, repeats: int) -> Optional[GameResult]:
    board = state.board
    if board.king_pos is None:
        return GameResult.ATTACKERS_WIN
    if piece is Piece.KING and board.is_corner(move.to_pos):
        return GameResult.DEFENDERS_WIN
    rules = state.rules
    if rules.repetition_limit is not None and repeats >= rules.repetition_limit:
        return GameResult.ATTACKERS_WIN
    if not _has_any_move(board, mover.opponent()):
        if rules.no_moves_outcome == NO_MOVES_LOSS:
            return GameResult.win_for(mover)
        return GameResult.DRAW
    if state.move_count >= rules.max_moves:
        return GameResult.DRAW
    return None


def apply_move_inplace(state: GameState, move: Move) -> List[Tuple[Position, Piece]]:
    """Validate and apply ``move``; return captured pieces.

    Raises ``GameOverError``, ``OutOfBoundsError`` or ``IllegalMoveError``
    without touching the state.
    """

    if state.result is not None:
        raise GameOverError(f"game already over ({state.result.name})")
    if not is_legal_move(state, move):
        raise IllegalMoveError(f"Move {move} is not legal for {state.turn.name}")

    mover = state.turn
    piece = state.board.relocate(move.from_pos, move.to_pos)
    captured = resolve_captures(state.board, move.to_pos)

    state.move_count += 1
    state.turn = mover.opponent()
    state.last_move = move
    state.last_captures = captured
    repeats = _record_position(state)
    state.result = _evaluate_result(state, mover, piece, move, repeats)
    if state.result is not None:
        logger.debug("game over after %d moves: %s", state.move_count, state.result.name)
    return captured


def apply_move(state: GameState, move: Move) -> GameState:
    """Apply a move to a copy and return the resulting state."""

    next_state = state.clone()
    apply_move_inplace(next_state, move)
    return next_state


def winner(state: GameState) -> Player | None:
    """Return the winning side if the game is decided."""

    return None if state.result is None else state.result.winner()


def is_terminal(state: GameState) -> bool:
    return state.result is not None
