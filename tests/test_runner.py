import pytest

from hnefatafl_arena import runner
from hnefatafl_arena.agents import GreedyAgent, RandomAgent
from hnefatafl_arena.config import CONFIG_ENV_VAR
from hnefatafl_arena.search import AlphaBetaAgent


@pytest.fixture(autouse=True)
def no_config_env(monkeypatch):
    monkeypatch.delenv(CONFIG_ENV_VAR, raising=False)


def test_build_agent():
    assert isinstance(runner.build_agent("random", 1), RandomAgent)
    assert isinstance(runner.build_agent("greedy", None), GreedyAgent)
    assert isinstance(runner.build_agent("alphabeta", None), AlphaBetaAgent)
    with pytest.raises(ValueError):
        runner.build_agent("oracle", None)


def test_match_mode(capsys):
    runner.main(["--mode", "match", "--attacker", "greedy", "--defender", "random", "--max-moves", "20", "--seed", "1"])

    out = capsys.readouterr().out
    assert "wins" in out or "Draw" in out


def test_match_with_search_agent(capsys):
    runner.main(
        [
            "--attacker",
            "alphabeta",
            "--defender",
            "random",
            "--search-preset",
            "fast",
            "--max-moves",
            "6",
            "--time-per-move-ms",
            "2000",
            "--show-board",
        ]
    )

    out = capsys.readouterr().out
    assert "Move 1:" in out
    assert "[Brandubh]" in out


def test_tournament_mode(capsys):
    runner.main(["--mode", "tournament", "--agents", "random,greedy", "--max-moves", "10", "--seed", "2"])

    out = capsys.readouterr().out
    assert "Standings:" in out
    assert "random:" in out
    assert "greedy:" in out


@pytest.mark.parametrize(
    "argv",
    [
        ["--repetition-limit", "1"],
        ["--max-moves", "0"],
        ["--mode", "tournament", "--agents", "greedy"],
        ["--mode", "tournament", "--agents", "greedy,oracle"],
    ],
)
def test_invalid_configuration_exits(argv):
    with pytest.raises(SystemExit) as exc:
        runner.main(argv)

    assert exc.value.code == 1
