"""Search deadline allocation.

The match driver enforces a hard wall-clock limit per move. Search agents
aim for an internal deadline strictly inside that limit so that unwinding
the search and returning the move never crosses it.
"""
import time
from dataclasses import dataclass
from typing import Optional, Union


@dataclass
class TimeManagerConfig:
    safety_frac: float = 0.85
    min_margin_ms: int = 15
    min_ms: int = 1
    max_ms: Optional[int] = None
    preset: str = "custom"


def preset_time_manager(name: str) -> TimeManagerConfig:
    preset = name.lower()
    if preset == "fast":
        return TimeManagerConfig(safety_frac=0.6, min_margin_ms=25, min_ms=1, max_ms=500, preset="fast")
    if preset == "default":
        return TimeManagerConfig(safety_frac=0.85, min_margin_ms=15, min_ms=1, max_ms=None, preset="default")
    if preset == "slow":
        return TimeManagerConfig(safety_frac=0.95, min_margin_ms=10, min_ms=1, max_ms=None, preset="slow")
    raise ValueError(f"Unknown time manager preset '{name}'")


def compute_search_budget_ms(
    time_per_move_ms: Union[int, float, None],
    cfg: Optional[TimeManagerConfig] = None,
) -> Optional[int]:
    """Return the internal search budget for a given hard per-move limit.

    ``None`` means unlimited and is passed through.
    """

    cfg = cfg or TimeManagerConfig()
    if time_per_move_ms is None or time_per_move_ms == float("inf"):
        return cfg.max_ms
    if time_per_move_ms <= 0:
        return 0

    budget = min(time_per_move_ms * cfg.safety_frac, time_per_move_ms - cfg.min_margin_ms)
    if cfg.max_ms is not None:
        budget = min(budget, cfg.max_ms)
    budget = max(cfg.min_ms, budget)
    budget = min(budget, time_per_move_ms)
    return int(max(0, budget))


class Deadline:
    """A point on the monotonic clock; ``None`` budget never expires."""

    __slots__ = ("started_at", "expires_at")

    def __init__(self, budget_ms: Optional[float]):
        self.started_at = time.monotonic()
        self.expires_at = None if budget_ms is None else self.started_at + budget_ms / 1000.0

    def expired(self) -> bool:
        return self.expires_at is not None and time.monotonic() >= self.expires_at

    def remaining_ms(self) -> float:
        if self.expires_at is None:
            return float("inf")
        return max(0.0, (self.expires_at - time.monotonic()) * 1000.0)

    def elapsed_ms(self) -> float:
        return (time.monotonic() - self.started_at) * 1000.0
