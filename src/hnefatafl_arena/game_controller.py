"""Game controller utilities for UI-driven or scripted play.

This module keeps UI concerns separate from core game logic so the
underlying sequencing and validation can be tested without driving a GUI.
"""
from __future__ import annotations

from typing import List, Optional, Set

from . import engine
from .agents import Agent, GreedyAgent
from .config import RulesConfig
from .errors import GameError, GameOverError, IllegalMoveError
from .notation import parse_move_text
from .state import GameState
from .types import Move, Player, Position, Variant


class GameController:
    """Manage a single game between humans and/or agents, including history."""

    def __init__(
        self,
        attacker_agent: Optional[Agent] = None,
        defender_agent: Optional[Agent] = None,
        variant: Variant = Variant.BRANDUBH,
        rules: Optional[RulesConfig] = None,
    ) -> None:
        self.attacker_agent = attacker_agent
        self.defender_agent = defender_agent
        self.variant = variant
        self.rules = rules or RulesConfig()
        self.state: GameState
        self.history: List[Move]
        self.new_game()

    def new_game(self, variant: Optional[Variant] = None) -> None:
        """Start a new game, optionally switching variant."""

        if variant is not None:
            self.variant = variant
        self.state = engine.new_game(self.variant, self.rules)
        self.history = []
        for side, agent in ((Player.ATTACKERS, self.attacker_agent), (Player.DEFENDERS, self.defender_agent)):
            if agent is not None:
                agent.game_start(side)

    def legal_moves(self) -> List[Move]:
        return engine.generate_legal_moves(self.state)

    def legal_destinations(self, pos: Position) -> Set[Position]:
        """Return destination squares for the piece on ``pos`` if it belongs to the side to move."""

        return {mv.to_pos for mv in self.legal_moves() if mv.from_pos == pos}

    def apply_human_move(self, move: Move) -> GameState:
        self._apply_move(move)
        return self.state

    def apply_text_move(self, raw: str) -> Move:
        """Parse and apply a move string against the current state."""

        move = parse_move_text(raw, self.state.board_size)
        self._apply_move(move)
        return move

    def _apply_move(self, move: Move) -> None:
        self.state.apply(move)
        self.history.append(move)
        for agent in (self.attacker_agent, self.defender_agent):
            if agent is not None:
                agent.notify_move(move)
        if self.state.result is not None:
            for agent in (self.attacker_agent, self.defender_agent):
                if agent is not None:
                    agent.game_end()

    def undo(self) -> Optional[Move]:
        """Take back the last move by replaying the rest of the history."""

        if not self.history:
            return None
        moves = self.history[:-1]
        undone = self.history[-1]
        state = engine.new_game(self.variant, self.rules)
        for mv in moves:
            state.apply(mv)
        self.state = state
        self.history = moves
        return undone

    def _current_agent(self) -> Optional[Agent]:
        return self.attacker_agent if self.state.turn is Player.ATTACKERS else self.defender_agent

    def _usable(self, move: Optional[Move]) -> bool:
        if not isinstance(move, Move):
            return False
        try:
            return self.state.is_legal(move)
        except GameError:
            return False

    def compute_ai_move(self, time_budget_ms: Optional[int] = None) -> Move:
        if self.state.result is not None:
            raise GameOverError("game already over")
        agent = self._current_agent()
        if agent is None:
            raise ValueError("No agent configured for current player")
        move = agent.get_move(self.state.clone(), time_budget_ms)
        if not self._usable(move):
            move = GreedyAgent().get_move(self.state, time_budget_ms)
        if move is None:
            raise IllegalMoveError("no legal move available")
        return move

    def step_ai(self, time_budget_ms: Optional[int] = None) -> Move:
        move = self.compute_ai_move(time_budget_ms=time_budget_ms)
        self._apply_move(move)
        return move

    def display(self) -> str:
        return self.state.display()
