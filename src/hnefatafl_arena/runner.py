"""CLI runner for Hnefatafl Arena.

Usage examples:
- Single match: ``python -m hnefatafl_arena.runner --mode match --attacker greedy --defender alphabeta``
- Round robin: ``python -m hnefatafl_arena.runner --mode tournament --agents random,greedy,alphabeta``
"""

from __future__ import annotations

import argparse
import logging
from typing import Callable, List, Optional

from .agents import Agent, GreedyAgent, RandomAgent
from .arena import MatchResult, play_match, run_round_robin
from .config import NO_MOVES_DRAW, NO_MOVES_LOSS, ArenaConfig, MatchConfig, SearchConfig, load_config, preset_search
from .search import AlphaBetaAgent
from .types import Variant

AGENT_CHOICES = ["random", "greedy", "alphabeta"]


def build_agent(name: str, seed: Optional[int], search_cfg: Optional[SearchConfig] = None) -> Agent:
    if name == "random":
        return RandomAgent(seed=seed, name="Random")
    if name == "greedy":
        return GreedyAgent(name="Greedy")
    if name == "alphabeta":
        return AlphaBetaAgent(config=search_cfg, name="AlphaBeta")
    raise ValueError(f"Unknown agent '{name}'")


def _agent_factory(name: str, seed: Optional[int], search_cfg: SearchConfig) -> Callable[[], Agent]:
    return lambda: build_agent(name, seed, search_cfg)


def describe_result(result: MatchResult) -> str:
    outcome = result.outcome.value
    if result.violator is not None:
        return f"{result.winner} wins: {result.violator} forfeits by {outcome} ({result.reason})"
    if result.winner is not None:
        return f"{result.winner} wins ({outcome}) in {result.moves} moves"
    return f"Draw after {result.moves} moves"


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Hnefatafl Arena runner")
    parser.add_argument("--mode", choices=["match", "tournament"], default="match")
    parser.add_argument("--attacker", choices=AGENT_CHOICES, default="greedy")
    parser.add_argument("--defender", choices=AGENT_CHOICES, default="alphabeta")
    parser.add_argument("--agents", type=str, default="random,greedy,alphabeta", help="Comma-separated tournament entries")
    parser.add_argument("--variant", choices=[v.name.lower() for v in Variant], default=None)
    parser.add_argument("--time-per-move-ms", type=int, default=None)
    parser.add_argument("--max-moves", type=int, default=None)
    parser.add_argument("--no-moves", choices=[NO_MOVES_DRAW, NO_MOVES_LOSS], default=None, help="Outcome when a side cannot move")
    parser.add_argument("--repetition-limit", type=int, default=None, help="Attackers win on this many repetitions")
    parser.add_argument("--search-preset", choices=["fast", "default", "slow"], default=None)
    parser.add_argument("--config", type=str, default=None, help="Path to a TOML configuration file")
    parser.add_argument("--workers", type=int, default=1, help="Parallel matches in tournament mode")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--show-board", action="store_true", help="Print the board after every move")
    parser.add_argument("--verbose", action="store_true")
    return parser.parse_args(argv)


def _config_from_args(args: argparse.Namespace) -> ArenaConfig:
    cfg = load_config(args.config)
    match: MatchConfig = cfg.match
    if args.variant is not None:
        match.variant = Variant.from_name(args.variant)
    if args.time_per_move_ms is not None:
        match.time_per_move_ms = args.time_per_move_ms
    if args.max_moves is not None:
        match.max_moves = args.max_moves
    if args.no_moves is not None:
        match.no_moves_outcome = args.no_moves
    if args.repetition_limit is not None:
        match.repetition_limit = args.repetition_limit
    match.rules()
    if args.search_preset is not None:
        cfg.search = preset_search(args.search_preset)
    return cfg


def main(argv: Optional[List[str]] = None) -> None:
    args = parse_args(argv)

    try:
        cfg = _config_from_args(args)
    except ValueError as exc:
        print(f"Invalid configuration: {exc}")
        raise SystemExit(1)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else getattr(logging, cfg.log_level, logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.mode == "match":
        attacker = build_agent(args.attacker, args.seed, cfg.search)
        defender = build_agent(args.defender, None if args.seed is None else args.seed + 1, cfg.search)
        on_move = None
        if args.show_board:
            def on_move(state, move):
                print(f"Move {state.move_count}: {move}")
                print(state.display())
                print()
        result = play_match(attacker, defender, cfg.match, on_move=on_move)
        print(describe_result(result))
        return

    names = [n.strip() for n in args.agents.split(",") if n.strip()]
    unknown = [n for n in names if n not in AGENT_CHOICES]
    if len(names) < 2 or unknown:
        print(f"Invalid configuration: tournament needs two or more of {AGENT_CHOICES}, got {names}")
        raise SystemExit(1)
    entries = [(name, _agent_factory(name, args.seed, cfg.search)) for name in names]
    tournament = run_round_robin(entries, cfg.match, workers=args.workers)
    for attacker_name, defender_name, result in tournament.matches:
        print(f"{attacker_name} (A) vs {defender_name} (D): {describe_result(result)}")
    print("Standings:")
    for standing in tournament.ranking():
        print(f"  {standing.name}: {standing.points:.1f} pts (W{standing.wins} D{standing.draws} L{standing.losses})")


if __name__ == "__main__":
    main()
