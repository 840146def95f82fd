import random

import pytest

from hnefatafl_arena import engine
from hnefatafl_arena.config import RulesConfig
from hnefatafl_arena.types import GameResult, Piece, Variant


def check_invariants(state):
    board = state.board
    kings = [pos for pos, piece in board.pieces() if piece is Piece.KING]
    assert len(kings) <= 1
    assert board.count(Piece.KING) == len(kings)
    if kings:
        assert board.king_pos == kings[0]
    else:
        assert board.king_pos is None
        assert state.result is GameResult.ATTACKERS_WIN
    for pos, piece in board.pieces():
        if piece is not Piece.KING:
            assert not board.is_corner(pos)
            assert not board.is_throne(pos)


@pytest.mark.parametrize(
    "variant,games,max_moves",
    [(Variant.BRANDUBH, 20, 120), (Variant.COPENHAGEN, 6, 80)],
)
def test_random_playouts_keep_invariants(variant, games, max_moves):
    rng = random.Random(2024)
    for _ in range(games):
        state = engine.new_game(variant, RulesConfig(max_moves=max_moves))
        check_invariants(state)
        while state.result is None:
            moves = state.legal_moves()
            assert moves
            move = rng.choice(moves)
            before_count = state.move_count
            before_turn = state.turn
            attackers = state.board.count(Piece.ATTACKER)
            defenders = state.board.count(Piece.DEFENDER)

            captured = state.apply(move)

            assert state.move_count == before_count + 1
            assert state.turn is before_turn.opponent()
            assert state.board.get(move.to_pos) is not None
            assert state.board.get(move.from_pos) is None
            assert state.board.count(Piece.ATTACKER) == attackers - sum(1 for _, p in captured if p is Piece.ATTACKER)
            assert state.board.count(Piece.DEFENDER) == defenders - sum(1 for _, p in captured if p is Piece.DEFENDER)
            check_invariants(state)
        assert state.move_count <= max_moves
        assert state.legal_moves() == []
