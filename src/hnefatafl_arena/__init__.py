"""Hnefatafl Arena package."""

from .types import GameResult, Move, Piece, Player, Position, SquareKind, Variant
from .board import Board
from .errors import GameError, GameOverError, IllegalMoveError, OutOfBoundsError
from .config import ArenaConfig, EvalWeights, MatchConfig, RulesConfig, SearchConfig, load_config
from .state import GameState
from .engine import (
    apply_move,
    from_layout,
    generate_legal_moves,
    is_legal_move,
    is_terminal,
    new_game,
    winner,
)
from .agents import Agent, GreedyAgent, RandomAgent, ScriptedAgent
from .search import AlphaBetaAgent, SearchStats, evaluate
from .arena import MatchOutcome, MatchResult, play_match, run_round_robin

__all__ = [
    "Agent",
    "AlphaBetaAgent",
    "ArenaConfig",
    "Board",
    "EvalWeights",
    "GameError",
    "GameOverError",
    "GameResult",
    "GameState",
    "GreedyAgent",
    "IllegalMoveError",
    "MatchConfig",
    "MatchOutcome",
    "MatchResult",
    "Move",
    "OutOfBoundsError",
    "Piece",
    "Player",
    "Position",
    "RandomAgent",
    "RulesConfig",
    "ScriptedAgent",
    "SearchConfig",
    "SearchStats",
    "SquareKind",
    "Variant",
    "apply_move",
    "evaluate",
    "from_layout",
    "generate_legal_moves",
    "is_legal_move",
    "is_terminal",
    "load_config",
    "new_game",
    "play_match",
    "run_round_robin",
    "winner",
]
