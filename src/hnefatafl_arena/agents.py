"""Agents for playing Hnefatafl Arena matches."""

from __future__ import annotations

import random
from typing import Iterable, List, Optional

from . import engine
from .state import GameState
from .types import Move, Piece, Player


class Agent:
    """Player capability used by the match driver.

    ``get_move`` must return a move from ``state.legal_moves()`` or ``None``
    when no move exists. The lifecycle hooks are optional.
    """

    def __init__(self, name: Optional[str] = None):
        self._name = name or self.__class__.__name__

    def name(self) -> str:
        return self._name

    def get_move(self, state: GameState, time_budget_ms: Optional[int] = None) -> Optional[Move]:  # noqa: D401
        """Return a move for the given state."""

        raise NotImplementedError

    def game_start(self, side: Player) -> None:
        """Called once before the first move with the side this agent plays."""

    def notify_move(self, move: Move) -> None:
        """Called after every applied move, including the opponent's."""

    def game_end(self) -> None:
        """Called once the match has an outcome."""


class RandomAgent(Agent):
    """Agent that selects a random legal move with reproducible seeding."""

    def __init__(self, seed: Optional[int] = None, name: Optional[str] = None):
        super().__init__(name)
        self._rng = random.Random(seed)

    def get_move(self, state: GameState, time_budget_ms: Optional[int] = None) -> Optional[Move]:
        moves = engine.generate_legal_moves(state)
        if not moves:
            return None
        return self._rng.choice(moves)


def material_score(state: GameState, player: Player) -> int:
    """One-ply material balance from ``player``'s view; king loss dominates."""

    board = state.board
    if board.king_pos is None:
        return 1000 if player is Player.ATTACKERS else -1000
    attackers = board.count(Piece.ATTACKER)
    defenders = board.count(Piece.DEFENDER)
    if player is Player.ATTACKERS:
        return attackers - defenders * 2
    return defenders * 2 - attackers


class GreedyAgent(Agent):
    """Pick the move with the best material balance after one ply.

    A move that wins outright is taken first. Ties keep the first move in
    enumeration order.
    """

    def get_move(self, state: GameState, time_budget_ms: Optional[int] = None) -> Optional[Move]:
        player = state.turn
        moves = engine.generate_legal_moves(state)
        if not moves:
            return None

        best_move = None
        best_score = None
        for mv in moves:
            next_state = engine.apply_move(state, mv)
            if engine.winner(next_state) is player:
                return mv
            score = material_score(next_state, player)
            if best_score is None or score > best_score:
                best_score, best_move = score, mv
        return best_move


class ScriptedAgent(Agent):
    """Replay a fixed list of moves, then give up by returning ``None``."""

    def __init__(self, moves: Iterable[Move], name: Optional[str] = None):
        super().__init__(name)
        self._script: List[Move] = list(moves)
        self._cursor = 0

    def game_start(self, side: Player) -> None:
        self._cursor = 0

    def get_move(self, state: GameState, time_budget_ms: Optional[int] = None) -> Optional[Move]:
        if self._cursor >= len(self._script):
            return None
        move = self._script[self._cursor]
        self._cursor += 1
        return move
