"""Match driver and round-robin tournament.

Each ``get_move`` call runs under a hard wall-clock limit. Timeouts, agent
errors and illegal moves forfeit the match to the opponent; they are match
outcomes, never engine errors. Matches share nothing, so a tournament may
run several of them at once.
"""

from __future__ import annotations

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeout
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from . import engine
from .agents import Agent
from .config import MatchConfig
from .errors import GameError
from .state import GameState
from .types import GameResult, Move, Player

logger = logging.getLogger(__name__)


class MatchOutcome(str, Enum):
    ATTACKERS_WIN = "attackers_win"
    DEFENDERS_WIN = "defenders_win"
    DRAW = "draw"
    TIMEOUT = "timeout"
    ILLEGAL_MOVE = "illegal_move"


@dataclass
class MatchResult:
    outcome: MatchOutcome
    moves: int
    winner: Optional[str] = None
    winner_side: Optional[Player] = None
    violator: Optional[str] = None
    reason: str = ""
    move_times: Dict[Player, List[float]] = field(default_factory=dict)
    final_state: Optional[GameState] = field(default=None, repr=False)

    @property
    def is_draw(self) -> bool:
        return self.outcome is MatchOutcome.DRAW


@dataclass
class MoveRequest:
    move: Optional[Move]
    elapsed_ms: float
    timed_out: bool = False
    error: Optional[BaseException] = None


def request_move(agent: Agent, state: GameState, time_limit_ms: Optional[int]) -> MoveRequest:
    """Ask ``agent`` for a move on a private copy of ``state`` under a hard limit."""

    snapshot = state.clone()
    start = time.monotonic()
    executor = ThreadPoolExecutor(max_workers=1)
    future = executor.submit(agent.get_move, snapshot, time_limit_ms)
    timeout = None if time_limit_ms is None else time_limit_ms / 1000.0
    try:
        move = future.result(timeout=timeout)
    except FuturesTimeout:
        executor.shutdown(wait=False, cancel_futures=True)
        return MoveRequest(None, (time.monotonic() - start) * 1000.0, timed_out=True)
    except Exception as exc:  # noqa: BLE001
        executor.shutdown(wait=False)
        return MoveRequest(None, (time.monotonic() - start) * 1000.0, error=exc)
    executor.shutdown(wait=True)
    elapsed_ms = (time.monotonic() - start) * 1000.0
    timed_out = time_limit_ms is not None and elapsed_ms > time_limit_ms
    return MoveRequest(move, elapsed_ms, timed_out=timed_out)


def _result_from_game(state: GameState, names: Dict[Player, str], move_times) -> MatchResult:
    result = state.result
    if result is GameResult.DRAW:
        return MatchResult(MatchOutcome.DRAW, state.move_count, move_times=move_times, final_state=state)
    side = Player.ATTACKERS if result is GameResult.ATTACKERS_WIN else Player.DEFENDERS
    outcome = MatchOutcome.ATTACKERS_WIN if side is Player.ATTACKERS else MatchOutcome.DEFENDERS_WIN
    return MatchResult(
        outcome,
        state.move_count,
        winner=names[side],
        winner_side=side,
        move_times=move_times,
        final_state=state,
    )


def _forfeit(
    outcome: MatchOutcome, offender: Player, state: GameState, names: Dict[Player, str], reason: str, move_times
) -> MatchResult:
    logger.info("%s forfeits (%s): %s", names[offender], outcome.value, reason)
    return MatchResult(
        outcome,
        state.move_count,
        winner=names[offender.opponent()],
        winner_side=offender.opponent(),
        violator=names[offender],
        reason=reason,
        move_times=move_times,
        final_state=state,
    )


def play_match(
    attacker: Agent,
    defender: Agent,
    config: Optional[MatchConfig] = None,
    on_move: Optional[Callable[[GameState, Move], None]] = None,
) -> MatchResult:
    """Play one game to completion and report the outcome."""

    config = config or MatchConfig()
    state = engine.new_game(config.variant, config.rules())
    agents = {Player.ATTACKERS: attacker, Player.DEFENDERS: defender}
    names = {side: agent.name() for side, agent in agents.items()}
    move_times: Dict[Player, List[float]] = {Player.ATTACKERS: [], Player.DEFENDERS: []}

    logger.info(
        "match start: %s (attackers) vs %s (defenders), %s, %d ms/move",
        names[Player.ATTACKERS],
        names[Player.DEFENDERS],
        config.variant.label,
        config.time_per_move_ms,
    )
    attacker.game_start(Player.ATTACKERS)
    defender.game_start(Player.DEFENDERS)
    try:
        while state.result is None:
            side = state.turn
            req = request_move(agents[side], state, config.time_per_move_ms)
            move_times[side].append(req.elapsed_ms)

            if req.timed_out:
                reason = f"took {req.elapsed_ms:.0f} ms (limit {config.time_per_move_ms} ms)"
                return _forfeit(MatchOutcome.TIMEOUT, side, state, names, reason, move_times)
            if req.error is not None:
                return _forfeit(MatchOutcome.ILLEGAL_MOVE, side, state, names, f"agent error: {req.error!r}", move_times)
            if req.move is None:
                if not engine.generate_legal_moves(state):
                    logger.info("%s has no move; draw", names[side])
                    return MatchResult(
                        MatchOutcome.DRAW,
                        state.move_count,
                        reason="no legal move",
                        move_times=move_times,
                        final_state=state,
                    )
                return _forfeit(MatchOutcome.ILLEGAL_MOVE, side, state, names, "returned no move", move_times)
            if not isinstance(req.move, Move):
                reason = f"returned {type(req.move).__name__} instead of a Move"
                return _forfeit(MatchOutcome.ILLEGAL_MOVE, side, state, names, reason, move_times)

            try:
                state.apply(req.move)
            except GameError as exc:
                return _forfeit(MatchOutcome.ILLEGAL_MOVE, side, state, names, str(exc), move_times)

            logger.debug("move %d: %s plays %s", state.move_count, names[side], req.move)
            attacker.notify_move(req.move)
            defender.notify_move(req.move)
            if on_move is not None:
                on_move(state, req.move)
    finally:
        attacker.game_end()
        defender.game_end()

    result = _result_from_game(state, names, move_times)
    logger.info("match end after %d moves: %s", result.moves, result.outcome.value)
    return result


AgentFactory = Callable[[], Agent]


@dataclass
class Standing:
    name: str
    wins: int = 0
    draws: int = 0
    losses: int = 0

    @property
    def points(self) -> float:
        return self.wins + 0.5 * self.draws

    @property
    def games(self) -> int:
        return self.wins + self.draws + self.losses


@dataclass
class TournamentResult:
    standings: Dict[str, Standing]
    matches: List[Tuple[str, str, MatchResult]]

    def ranking(self) -> List[Standing]:
        return sorted(self.standings.values(), key=lambda s: (-s.points, -s.wins, s.name))


def run_round_robin(
    entries: Sequence[Tuple[str, AgentFactory]],
    config: Optional[MatchConfig] = None,
    workers: int = 1,
) -> TournamentResult:
    """Every pair plays twice, once on each side. Fresh agents per match."""

    config = config or MatchConfig()
    names = [name for name, _ in entries]
    if len(set(names)) != len(names):
        raise ValueError("tournament entry names must be unique")

    pairings: List[Tuple[int, int]] = []
    for i in range(len(entries)):
        for j in range(i + 1, len(entries)):
            pairings.append((i, j))
            pairings.append((j, i))

    def _run(pair: Tuple[int, int]) -> MatchResult:
        a, d = pair
        return play_match(entries[a][1](), entries[d][1](), config)

    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        results = list(pool.map(_run, pairings))

    standings = {name: Standing(name) for name in names}
    matches: List[Tuple[str, str, MatchResult]] = []
    for (a, d), result in zip(pairings, results):
        attacker_name, defender_name = names[a], names[d]
        matches.append((attacker_name, defender_name, result))
        if result.winner_side is None:
            standings[attacker_name].draws += 1
            standings[defender_name].draws += 1
            continue
        won, lost = (attacker_name, defender_name) if result.winner_side is Player.ATTACKERS else (defender_name, attacker_name)
        standings[won].wins += 1
        standings[lost].losses += 1
    return TournamentResult(standings=standings, matches=matches)
