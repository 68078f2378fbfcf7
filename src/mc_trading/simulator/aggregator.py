"""Streaming statistics over final capitals.

Mean, worst and best are tracked exactly. Percentiles come from a
fixed-capacity reservoir (Algorithm R), so they are estimates whose error
shrinks with the reservoir size, not with the number of simulations.
"""

from __future__ import annotations

import math
import random
from dataclasses import dataclass
from typing import Iterable, Optional

from mc_trading.simulator.models import DistributionStats


DEFAULT_RESERVOIR_CAPACITY = 20000
PERCENTILES = (0.10, 0.25, 0.50, 0.75, 0.90)


@dataclass
class RunningStats:
    count: int = 0
    total: float = 0.0
    minimum: float = math.inf
    maximum: float = -math.inf

    def update(self, value: float) -> None:
        self.count += 1
        self.total += value
        self.minimum = min(self.minimum, value)
        self.maximum = max(self.maximum, value)

    @property
    def mean(self) -> float:
        return self.total / self.count if self.count else 0.0


def reservoir_capacity_for(total_simulations: int, limit: int = DEFAULT_RESERVOIR_CAPACITY) -> int:
    return max(0, min(limit, total_simulations))


class StreamingAggregator:
    """Single-consumer aggregator; ``observe`` must never run concurrently."""

    def __init__(self, capacity: int, rng: Optional[random.Random] = None) -> None:
        if capacity < 0:
            raise ValueError("Reservoir capacity must be non-negative")
        self.capacity = capacity
        self.stats = RunningStats()
        self._reservoir: list[float] = []
        self._rng = rng or random.Random()

    @property
    def reservoir(self) -> list[float]:
        return list(self._reservoir)

    @property
    def count(self) -> int:
        return self.stats.count

    def observe(self, value: float) -> None:
        self.stats.update(value)
        if len(self._reservoir) < self.capacity:
            self._reservoir.append(value)
            return
        slot = self._rng.randrange(self.stats.count)
        if slot < self.capacity:
            self._reservoir[slot] = value

    def observe_many(self, values: Iterable[float]) -> None:
        for value in values:
            self.observe(value)

    def percentile(self, p: float) -> float:
        ordered = sorted(self._reservoir)
        return _pick(ordered, p)

    def finalize(self) -> DistributionStats:
        ordered = sorted(self._reservoir)
        p10, p25, median, p75, p90 = (_pick(ordered, p) for p in PERCENTILES)
        empty = self.stats.count == 0
        return DistributionStats(
            count=self.stats.count,
            mean=self.stats.mean,
            median=median,
            p10=p10,
            p25=p25,
            p75=p75,
            p90=p90,
            worst=0.0 if empty else self.stats.minimum,
            best=0.0 if empty else self.stats.maximum,
        )


def _pick(ordered: list[float], p: float) -> float:
    if not ordered:
        return 0.0
    index = min(int(math.floor(len(ordered) * p)), len(ordered) - 1)
    return ordered[index]
