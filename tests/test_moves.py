import pytest

from hnefatafl_arena import engine
from hnefatafl_arena.errors import OutOfBoundsError
from hnefatafl_arena.types import Move, Player, Position, Variant


def build_state(attackers=(), defenders=(), king=None, turn=Player.ATTACKERS, variant=Variant.BRANDUBH):
    return engine.from_layout(variant, attackers=attackers, defenders=defenders, king=king, turn=turn)


def destinations(state, src):
    return {mv.to_pos for mv in engine.legal_moves_for_piece(state.board, Position(*src))}


def test_rook_slides_on_open_board():
    state = build_state(attackers=[(1, 1)], king=(5, 5))

    dests = destinations(state, (1, 1))

    assert len(dests) == 12
    assert Position(1, 0) in dests
    assert Position(0, 1) in dests
    assert Position(6, 1) in dests


def test_blocked_by_pieces_and_corners():
    state = build_state(attackers=[(0, 3)], defenders=[(0, 5)], king=(5, 1))

    dests = destinations(state, (0, 3))

    assert dests == {
        Position(0, 4),
        Position(0, 2),
        Position(0, 1),
        Position(1, 3),
        Position(2, 3),
        Position(4, 3),
        Position(5, 3),
        Position(6, 3),
    }
    assert Position(0, 0) not in dests
    assert Position(0, 6) not in dests
    assert Position(3, 3) not in dests


def test_occupied_throne_blocks_sliding():
    state = build_state(attackers=[(0, 3)], king=(3, 3))

    dests = destinations(state, (0, 3))

    assert Position(2, 3) in dests
    assert Position(4, 3) not in dests


def test_king_may_stop_on_throne_and_corner():
    state = build_state(attackers=[(6, 3)], king=(3, 1), turn=Player.DEFENDERS)
    assert Position(3, 3) in destinations(state, (3, 1))

    state = build_state(attackers=[(6, 3)], king=(0, 2), turn=Player.DEFENDERS)
    assert Position(0, 0) in destinations(state, (0, 2))
    assert Position(0, 6) in destinations(state, (0, 2))


def test_defender_cannot_stop_on_throne():
    state = build_state(attackers=[(6, 3)], defenders=[(3, 1)], king=(5, 5), turn=Player.DEFENDERS)

    dests = destinations(state, (3, 1))

    assert Position(3, 3) not in dests
    assert Position(3, 4) in dests
    assert not state.is_legal(Move.of((3, 1), (3, 3)))


def test_is_legal_rejects_bad_shapes():
    state = build_state(attackers=[(1, 1)], defenders=[(1, 4)], king=(5, 5))

    assert state.is_legal(Move.of((1, 1), (1, 3)))
    assert not state.is_legal(Move.of((1, 1), (2, 2)))
    assert not state.is_legal(Move.of((1, 1), (1, 1)))
    assert not state.is_legal(Move.of((1, 1), (1, 4)))
    assert not state.is_legal(Move.of((1, 1), (1, 5)))
    assert not state.is_legal(Move.of((2, 2), (2, 3)))
    assert not state.is_legal(Move.of((1, 4), (1, 5)))


def test_out_of_bounds_position_raises():
    state = build_state(attackers=[(1, 1)], king=(5, 5))

    with pytest.raises(OutOfBoundsError):
        state.is_legal(Move.of((1, 1), (-1, 1)))
    with pytest.raises(OutOfBoundsError):
        state.get_piece(Position(7, 7))


def test_moves_are_enumerated_row_major():
    state = engine.new_game(Variant.BRANDUBH)

    moves = engine.generate_legal_moves(state)

    assert moves[0].from_pos == Position(0, 3)
    sources = [mv.from_pos for mv in moves]
    assert sources == sorted(sources)


def test_generate_for_other_player():
    state = engine.new_game(Variant.BRANDUBH)

    defender_moves = engine.generate_legal_moves(state, Player.DEFENDERS)

    assert defender_moves
    assert all(state.board.get(mv.from_pos).owner is Player.DEFENDERS for mv in defender_moves)


def test_from_layout_rejects_overlaps():
    with pytest.raises(ValueError):
        build_state(attackers=[(1, 1)], defenders=[(1, 1)], king=(5, 5))
    with pytest.raises(OutOfBoundsError):
        build_state(attackers=[(9, 1)], king=(5, 5))
