"""Alpha-beta search agent.

Negamax with alpha-beta pruning under iterative deepening. Every node checks
the deadline before expanding; when it passes, the move from the deepest
fully completed iteration is returned.

Tie-breaking: at each node moves are searched in a fixed order (the
transposition-table move first, then engine enumeration order) and a move
only replaces the current best when it scores strictly higher, so the first
move encountered wins among equals.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from . import engine
from .agents import Agent
from .config import EvalWeights, SearchConfig
from .state import GameState
from .time_manager import Deadline, TimeManagerConfig, compute_search_budget_ms, preset_time_manager
from .types import Move, Piece, Player, Position

logger = logging.getLogger(__name__)

WIN_SCORE = 1_000_000.0
MAX_PLY = 1_000


@dataclass
class SearchStats:
    """Aggregated statistics from a single search."""

    nodes: int
    depth_reached: int
    tt_hits: int
    cutoffs: int
    elapsed_ms: float
    best_score: float
    short_circuit: bool = False


def _manhattan(a: Position, b: Position) -> int:
    return abs(a.row - b.row) + abs(a.col - b.col)


def evaluate(state: GameState, player: Player, weights: EvalWeights, ply: int = 0) -> float:
    """Score ``state`` from ``player``'s point of view (higher is better).

    Decided games score +/- ``WIN_SCORE`` adjusted by ``ply`` so quicker
    wins and slower losses are preferred. Otherwise the score combines
    material, the king's distance to the nearest corner (``weight / d``),
    open king routes to a corner, attacker pressure around the king and
    king mobility.
    """

    if state.result is not None:
        victor = state.result.winner()
        if victor is None:
            return 0.0
        return WIN_SCORE - ply if victor is player else -(WIN_SCORE - ply)

    board = state.board
    king_pos = board.king_pos
    score = 0.0

    score += weights.material_defender * board.count(Piece.DEFENDER)
    score -= weights.material_attacker * board.count(Piece.ATTACKER)

    if king_pos is not None:
        nearest = min(_manhattan(king_pos, corner) for corner in board.corners())
        score += weights.king_distance / max(1, nearest)

        king_moves = engine.legal_moves_for_piece(board, king_pos)
        escapes = sum(1 for mv in king_moves if board.is_corner(mv.to_pos))
        score += weights.king_escape * escapes
        score += weights.mobility * len(king_moves)

        pressure = 0
        for dr, dc in ((0, 1), (0, -1), (1, 0), (-1, 0)):
            if board.get(king_pos.offset(dr, dc)) is Piece.ATTACKER:
                pressure += 1
        score -= weights.king_pressure * pressure

    return score if player is Player.DEFENDERS else -score


class AlphaBetaAgent(Agent):
    """Deadline-bounded negamax agent with iterative deepening."""

    def __init__(
        self,
        config: Optional[SearchConfig] = None,
        max_depth: Optional[int] = None,
        time_cfg: Optional[TimeManagerConfig] = None,
        name: Optional[str] = None,
    ):
        super().__init__(name)
        self.config = config or SearchConfig()
        self.max_depth = max_depth if max_depth is not None else self.config.max_depth
        if self.max_depth < 1:
            raise ValueError("max_depth must be at least 1")
        self.time_cfg = time_cfg or preset_time_manager(self.config.time_preset)
        self.weights = self.config.weights
        self.last_stats: Optional[SearchStats] = None
        self._tt: Dict[Tuple, Move] = {}
        self._deadline = Deadline(None)
        self._nodes = 0
        self._tt_hits = 0
        self._cutoffs = 0

    def _reset(self, budget_ms: Optional[int]) -> None:
        self._tt = {}
        self._deadline = Deadline(budget_ms)
        self._nodes = 0
        self._tt_hits = 0
        self._cutoffs = 0

    def _finish(self, depth: int, score: float, short_circuit: bool = False) -> None:
        self.last_stats = SearchStats(
            nodes=self._nodes,
            depth_reached=depth,
            tt_hits=self._tt_hits,
            cutoffs=self._cutoffs,
            elapsed_ms=self._deadline.elapsed_ms(),
            best_score=score,
            short_circuit=short_circuit,
        )

    def get_move(self, state: GameState, time_budget_ms: Optional[int] = None) -> Optional[Move]:
        budget_ms = compute_search_budget_ms(time_budget_ms, self.time_cfg)
        self._reset(budget_ms)
        self.last_stats = None

        moves = engine.generate_legal_moves(state)
        if not moves:
            self._finish(0, 0.0)
            return None

        player = state.turn
        for mv in moves:
            if engine.winner(engine.apply_move(state, mv)) is player:
                logger.debug("%s: immediate win %s", self.name(), mv)
                self._finish(0, WIN_SCORE, short_circuit=True)
                return mv

        best_move = moves[0]
        best_score = 0.0
        depth_reached = 0
        plies_left = max(1, state.rules.max_moves - state.move_count)

        for depth in range(1, self.max_depth + 1):
            try:
                score, move = self._search_root(state, moves, depth, best_move if depth_reached else None)
            except TimeoutError:
                logger.debug("%s: deadline hit during depth %d", self.name(), depth)
                break
            best_move, best_score, depth_reached = move, score, depth
            logger.debug("%s: depth=%d score=%.1f move=%s nodes=%d", self.name(), depth, score, move, self._nodes)
            if abs(score) >= WIN_SCORE - MAX_PLY or depth >= plies_left:
                break

        self._finish(depth_reached, best_score)
        return best_move

    def _time_check(self) -> None:
        if self._deadline.expired():
            raise TimeoutError

    def _order_moves(self, moves: List[Move], first: Optional[Move]) -> List[Move]:
        """Promote ``first`` (if legal here) and keep enumeration order otherwise."""

        if first is None or first not in moves:
            return moves
        return [first] + [mv for mv in moves if mv != first]

    def _search_root(
        self, state: GameState, moves: List[Move], depth: int, previous_best: Optional[Move]
    ) -> Tuple[float, Move]:
        self._time_check()
        self._nodes += 1
        alpha = float("-inf")
        beta = float("inf")
        best_score = float("-inf")
        best_move = moves[0]
        for mv in self._order_moves(moves, previous_best):
            child = engine.apply_move(state, mv)
            value = -self._negamax(child, depth - 1, -beta, -alpha, 1)
            if value > best_score:
                best_score, best_move = value, mv
            alpha = max(alpha, best_score)
        return best_score, best_move

    def _negamax(self, state: GameState, depth: int, alpha: float, beta: float, ply: int) -> float:
        self._time_check()
        self._nodes += 1
        if depth == 0 or state.result is not None:
            return evaluate(state, state.turn, self.weights, ply)

        moves = engine.generate_legal_moves(state)
        if not moves:
            return evaluate(state, state.turn, self.weights, ply)

        key = state.key() if self.config.use_tt else None
        hint = self._tt.get(key) if key is not None else None
        if hint is not None:
            self._tt_hits += 1

        best_score = float("-inf")
        best_move: Optional[Move] = None
        for mv in self._order_moves(moves, hint):
            child = engine.apply_move(state, mv)
            value = -self._negamax(child, depth - 1, -beta, -alpha, ply + 1)
            if value > best_score:
                best_score, best_move = value, mv
            alpha = max(alpha, best_score)
            if beta <= alpha:
                self._cutoffs += 1
                break

        if key is not None and best_move is not None:
            self._tt[key] = best_move
        return best_score
