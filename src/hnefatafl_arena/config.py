"""Configuration dataclasses, named presets, and TOML loading."""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field, fields
from typing import Any, Dict, Optional

from .types import Variant

NO_MOVES_DRAW = "draw"
NO_MOVES_LOSS = "loss"

CONFIG_ENV_VAR = "HNEFATAFL_CONFIG"


@dataclass
class RulesConfig:
    """Rule switches that differ between tables.

    ``no_moves_outcome`` decides what happens when the side to move next has
    no legal move: ``"draw"`` or ``"loss"`` for that side.
    ``repetition_limit`` ends the game as an attackers' win once the same
    position (board and side to move) has occurred that many times.
    """

    max_moves: int = 200
    no_moves_outcome: str = NO_MOVES_DRAW
    repetition_limit: Optional[int] = None

    def __post_init__(self) -> None:
        if self.max_moves < 1:
            raise ValueError("max_moves must be positive")
        if self.no_moves_outcome not in (NO_MOVES_DRAW, NO_MOVES_LOSS):
            raise ValueError(f"no_moves_outcome must be 'draw' or 'loss', got '{self.no_moves_outcome}'")
        if self.repetition_limit is not None and self.repetition_limit < 2:
            raise ValueError("repetition_limit must be at least 2")


@dataclass
class EvalWeights:
    material_attacker: float = 10.0
    material_defender: float = 20.0
    king_distance: float = 400.0
    king_escape: float = 5000.0
    king_pressure: float = 15.0
    mobility: float = 0.5


@dataclass
class SearchConfig:
    max_depth: int = 64
    time_preset: str = "default"
    use_tt: bool = True
    weights: EvalWeights = field(default_factory=EvalWeights)
    preset: str = "custom"


@dataclass
class MatchConfig:
    time_per_move_ms: int = 5000
    max_moves: int = 200
    variant: Variant = Variant.BRANDUBH
    no_moves_outcome: str = NO_MOVES_DRAW
    repetition_limit: Optional[int] = None

    def rules(self) -> RulesConfig:
        return RulesConfig(
            max_moves=self.max_moves,
            no_moves_outcome=self.no_moves_outcome,
            repetition_limit=self.repetition_limit,
        )


@dataclass
class ArenaConfig:
    search: SearchConfig = field(default_factory=SearchConfig)
    match: MatchConfig = field(default_factory=MatchConfig)
    log_level: str = "WARNING"


def preset_search(name: str) -> SearchConfig:
    preset = name.lower()
    if preset == "fast":
        return SearchConfig(max_depth=3, time_preset="fast", preset="fast")
    if preset == "default":
        return SearchConfig(max_depth=64, time_preset="default", preset="default")
    if preset == "slow":
        return SearchConfig(max_depth=64, time_preset="slow", preset="slow")
    raise ValueError(f"Unknown search preset '{name}'")


def _merge(target: Any, raw: Dict[str, Any]) -> None:
    known = {f.name for f in fields(target)}
    for key, value in raw.items():
        if key in known and not isinstance(value, dict):
            setattr(target, key, value)


def load_config(path: Optional[str] = None) -> ArenaConfig:
    """Load an :class:`ArenaConfig` from TOML, falling back to defaults.

    Recognised tables: ``[search]``, ``[search.weights]``, ``[match]``; the
    top-level ``log_level`` key is also read. Unknown keys are ignored.
    """

    cfg = ArenaConfig()
    path = path or os.environ.get(CONFIG_ENV_VAR)
    if not path or not os.path.exists(path):
        return cfg
    with open(path, "rb") as f:
        raw = tomllib.load(f)

    if "search" in raw:
        search_raw = dict(raw["search"])
        if "preset" in search_raw:
            cfg.search = preset_search(str(search_raw.pop("preset")))
        _merge(cfg.search, search_raw)
        if isinstance(search_raw.get("weights"), dict):
            _merge(cfg.search.weights, search_raw["weights"])
    if "match" in raw:
        match_raw = dict(raw["match"])
        if "variant" in match_raw:
            cfg.match.variant = Variant.from_name(str(match_raw.pop("variant")))
        _merge(cfg.match, match_raw)
        cfg.match.rules()  # validate
    if "log_level" in raw:
        cfg.log_level = str(raw["log_level"]).upper()
    return cfg
