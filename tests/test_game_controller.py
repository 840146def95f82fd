import pytest

from hnefatafl_arena import engine
from hnefatafl_arena.agents import GreedyAgent, ScriptedAgent
from hnefatafl_arena.config import RulesConfig
from hnefatafl_arena.errors import GameOverError, IllegalMoveError
from hnefatafl_arena.game_controller import GameController
from hnefatafl_arena.types import Move, Player, Position, Variant


def test_apply_text_move():
    controller = GameController()

    move = controller.apply_text_move("d1-c1")

    assert move == Move.of((0, 3), (0, 2))
    assert controller.state.turn is Player.DEFENDERS
    assert controller.history == [move]


def test_illegal_text_move_is_rejected():
    controller = GameController()

    with pytest.raises(IllegalMoveError):
        controller.apply_text_move("d1-a1")
    with pytest.raises(ValueError):
        controller.apply_text_move("nonsense")

    assert controller.history == []
    assert controller.state.move_count == 0


def test_legal_destinations():
    controller = GameController()

    assert controller.legal_destinations(Position(0, 3)) == {
        Position(0, 1),
        Position(0, 2),
        Position(0, 4),
        Position(0, 5),
    }
    assert controller.legal_destinations(Position(2, 3)) == set()


def test_undo_replays_history():
    controller = GameController()
    first = controller.apply_human_move(Move.of((0, 3), (0, 2))).board.clone()
    controller.apply_text_move("d3-c3")

    undone = controller.undo()

    assert undone == Move.of((2, 3), (2, 2))
    assert controller.state.board == first
    assert controller.state.move_count == 1
    assert controller.state.turn is Player.DEFENDERS
    assert controller.history == [Move.of((0, 3), (0, 2))]

    controller.undo()
    assert controller.undo() is None
    assert controller.state.move_count == 0


def test_step_ai():
    controller = GameController(attacker_agent=GreedyAgent())

    move = controller.step_ai()

    assert controller.history == [move]
    assert controller.state.turn is Player.DEFENDERS
    with pytest.raises(ValueError):
        controller.step_ai()


def test_ai_falls_back_when_agent_misbehaves():
    controller = GameController(attacker_agent=ScriptedAgent([Move.of((0, 3), (0, 0))]))

    move = controller.step_ai()

    assert move != Move.of((0, 3), (0, 0))
    assert controller.state.move_count == 1


def test_no_ai_move_after_game_over():
    controller = GameController(attacker_agent=GreedyAgent(), rules=RulesConfig(max_moves=1))
    controller.step_ai()

    assert controller.state.is_terminal
    with pytest.raises(GameOverError):
        controller.compute_ai_move()


def test_new_game_switches_variant():
    controller = GameController()
    controller.apply_text_move("d1-c1")

    controller.new_game(Variant.COPENHAGEN)

    assert controller.state.board_size == 11
    assert controller.history == []
    assert "[Copenhagen Hnefatafl]" in controller.display()


def test_ai_falls_back_on_off_board_move():
    controller = GameController(attacker_agent=ScriptedAgent([Move.of((0, 3), (-1, 3))]))

    move = controller.step_ai()

    assert move in engine.new_game().legal_moves()
    assert controller.state.move_count == 1
