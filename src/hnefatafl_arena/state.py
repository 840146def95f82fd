"""Game state container."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .board import Board
from .config import RulesConfig
from .types import GameResult, Move, Piece, Player, Position, Variant


@dataclass
class GameState:
    """Board, side to move, move counter and result of one game.

    Mutate only through :meth:`apply`. Once ``result`` is set the state is
    terminal and every further :meth:`apply` raises ``GameOverError``.
    """

    board: Board
    variant: Variant
    turn: Player = Player.ATTACKERS
    move_count: int = 0
    result: Optional[GameResult] = None
    rules: RulesConfig = field(default_factory=RulesConfig)
    position_counts: Dict[Tuple, int] = field(default_factory=dict, repr=False)
    last_move: Optional[Move] = None
    last_captures: List[Tuple[Position, Piece]] = field(default_factory=list, repr=False)

    def clone(self) -> "GameState":
        """Return a deep copy safe to mutate independently."""

        return GameState(
            board=self.board.clone(),
            variant=self.variant,
            turn=self.turn,
            move_count=self.move_count,
            result=self.result,
            rules=self.rules,
            position_counts=dict(self.position_counts),
            last_move=self.last_move,
            last_captures=list(self.last_captures),
        )

    def key(self) -> Tuple:
        """Hashable key capturing board layout and side to move."""

        return (self.turn, self.board.key())

    @property
    def board_size(self) -> int:
        return self.board.size

    @property
    def is_terminal(self) -> bool:
        return self.result is not None

    def get_piece(self, pos: Position) -> Optional[Piece]:
        self.board.require_in_bounds(pos)
        return self.board.get(pos)

    def legal_moves(self, player: Optional[Player] = None) -> List[Move]:
        from . import engine

        return engine.generate_legal_moves(self, player)

    def is_legal(self, move: Move) -> bool:
        from . import engine

        return engine.is_legal_move(self, move)

    def apply(self, move: Move) -> List[Tuple[Position, Piece]]:
        """Apply ``move`` in place and return the captured pieces."""

        from . import engine

        return engine.apply_move_inplace(self, move)

    def display(self) -> str:
        return self.board.render(title=self.variant.label)
