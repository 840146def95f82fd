import pytest

from hnefatafl_arena import engine
from hnefatafl_arena.config import NO_MOVES_LOSS, RulesConfig
from hnefatafl_arena.errors import GameOverError, IllegalMoveError, OutOfBoundsError
from hnefatafl_arena.types import GameResult, Move, Player, Position, Variant


def build_state(attackers=(), defenders=(), king=None, turn=Player.ATTACKERS, rules=None):
    return engine.from_layout(
        Variant.BRANDUBH, attackers=attackers, defenders=defenders, king=king, turn=turn, rules=rules
    )


def blockade_state(rules=None):
    # After (2, 3) -> (2, 1) neither the king nor its two defenders can move.
    return build_state(
        attackers=[(0, 2), (2, 0), (1, 2), (2, 3)],
        defenders=[(0, 1), (1, 0)],
        king=(1, 1),
        rules=rules,
    )


@pytest.mark.parametrize(
    "start,corner",
    [((0, 3), (0, 0)), ((0, 3), (0, 6)), ((6, 3), (6, 0)), ((6, 3), (6, 6))],
)
def test_king_reaching_corner_wins(start, corner):
    state = build_state(attackers=[(3, 0)], king=start, turn=Player.DEFENDERS)

    state.apply(Move.of(start, corner))

    assert state.result is GameResult.DEFENDERS_WIN
    assert engine.winner(state) is Player.DEFENDERS
    assert engine.is_terminal(state)
    assert state.move_count == 1
    assert state.turn is Player.ATTACKERS


def test_king_capture_wins_for_attackers():
    state = build_state(attackers=[(1, 2), (5, 4)], king=(1, 3))

    state.apply(Move.of((5, 4), (1, 4)))

    assert engine.winner(state) is Player.ATTACKERS
    assert state.is_terminal


def test_move_limit_draw():
    state = engine.new_game(Variant.BRANDUBH, RulesConfig(max_moves=1))

    state.apply(state.legal_moves()[0])

    assert state.result is GameResult.DRAW
    assert engine.winner(state) is None
    assert state.legal_moves() == []


def test_no_moves_is_a_draw_by_default():
    state = blockade_state()

    state.apply(Move.of((2, 3), (2, 1)))

    assert state.board.king_pos == Position(1, 1)
    assert engine.generate_legal_moves(state, Player.DEFENDERS) == []
    assert state.result is GameResult.DRAW


def test_no_moves_can_lose():
    state = blockade_state(RulesConfig(no_moves_outcome=NO_MOVES_LOSS))

    state.apply(Move.of((2, 3), (2, 1)))

    assert state.result is GameResult.ATTACKERS_WIN


def play_shuffle(state):
    for mv in [((0, 3), (0, 2)), ((2, 3), (2, 2)), ((0, 2), (0, 3)), ((2, 2), (2, 3))]:
        state.apply(Move.of(*mv))


def test_repetition_limit_ends_game():
    state = engine.new_game(Variant.BRANDUBH, RulesConfig(repetition_limit=2))

    play_shuffle(state)

    assert state.result is GameResult.ATTACKERS_WIN
    assert state.move_count == 4


def test_repetition_ignored_by_default():
    state = engine.new_game(Variant.BRANDUBH)

    play_shuffle(state)

    assert state.result is None
    assert state.position_counts[state.key()] == 2


def test_no_moves_after_game_over():
    state = build_state(attackers=[(3, 0)], king=(0, 3), turn=Player.DEFENDERS)
    state.apply(Move.of((0, 3), (0, 0)))
    board_before = state.board.clone()

    with pytest.raises(GameOverError):
        state.apply(Move.of((3, 0), (3, 1)))

    assert state.move_count == 1
    assert state.result is GameResult.DEFENDERS_WIN
    assert state.board == board_before
    assert issubclass(GameOverError, IllegalMoveError)


def test_illegal_move_leaves_state_unchanged():
    state = engine.new_game(Variant.BRANDUBH)
    board_before = state.board.clone()

    with pytest.raises(IllegalMoveError):
        state.apply(Move.of((0, 3), (0, 0)))
    with pytest.raises(IllegalMoveError):
        state.apply(Move.of((2, 3), (2, 2)))
    with pytest.raises(OutOfBoundsError):
        state.apply(Move.of((0, 3), (-1, 3)))

    assert state.board == board_before
    assert state.move_count == 0
    assert state.turn is Player.ATTACKERS
    assert state.result is None


def test_apply_move_returns_new_state():
    state = engine.new_game(Variant.BRANDUBH)
    move = state.legal_moves()[0]

    child = engine.apply_move(state, move)

    assert child.move_count == 1
    assert child.turn is Player.DEFENDERS
    assert child.last_move == move
    assert state.move_count == 0
    assert state.board.get(move.from_pos) is not None
