"""Representative trajectories for charting."""

from __future__ import annotations

import math
import random
from typing import Optional, Sequence

from mc_trading.simulator.models import ChartPoint, SimulatedPath, StrategyParams
from mc_trading.simulator.trajectory import generate_paths


RANK_FRACTIONS = (0.25, 0.5, 0.75)


def representative_ranks(n: int) -> list[int]:
    if n <= 0:
        return []
    return [0] + [int(math.floor(n * fraction)) for fraction in RANK_FRACTIONS] + [n - 1]


def select_representative_paths(paths: Sequence[SimulatedPath]) -> list[SimulatedPath]:
    """Worst, 25th, median, 75th and best path by final capital."""
    ordered = sorted(paths, key=lambda path: path.final_capital)
    return [ordered[rank] for rank in representative_ranks(len(ordered))]


def sample_paths(
    params: StrategyParams,
    simulations: int,
    rng: Optional[random.Random] = None,
) -> list[SimulatedPath]:
    return select_representative_paths(generate_paths(params, simulations, rng))


def build_chart_points(paths: Sequence[SimulatedPath], time_months: int) -> list[ChartPoint]:
    if not paths:
        return []
    if len(paths) != 5:
        raise ValueError(f"Expected 5 representative paths, got {len(paths)}")

    worst, p25, median, p75, best = paths
    return [
        ChartPoint(
            month=month,
            worst=worst.capital_at(month),
            p25=p25.capital_at(month),
            median=median.capital_at(month),
            p75=p75.capital_at(month),
            best=best.capital_at(month),
        )
        for month in range(time_months + 1)
    ]
