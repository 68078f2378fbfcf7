"""Capital trajectories under a fixed-fractional risk rule."""

from __future__ import annotations

import random
from typing import Callable, Iterator, Optional

from mc_trading.simulator.models import (
    CompoundingFrequency,
    MonthlyPoint,
    SimulatedPath,
    StrategyParams,
    TradeSizing,
)


TradeDraw = Callable[[], bool]

_INTERVAL_MONTHS = {
    CompoundingFrequency.DAILY: 0,
    CompoundingFrequency.MONTHLY: 1,
    CompoundingFrequency.QUARTERLY: 3,
    CompoundingFrequency.YEARLY: 12,
}


def recompute_interval(frequency: CompoundingFrequency) -> int:
    """Months between risk recalculations; 0 means after every trade."""
    return _INTERVAL_MONTHS[CompoundingFrequency(frequency)]


def sizing_for(capital: float, params: StrategyParams) -> TradeSizing:
    risk = min(capital * params.risk_percentage / 100.0, params.risk_cap_dollars)
    return TradeSizing(risk=risk, reward=risk * params.risk_reward_ratio)


def simulate_path(params: StrategyParams, draw: TradeDraw) -> SimulatedPath:
    """Run one path, asking ``draw`` for the outcome of every trade."""
    capital = params.initial_capital
    monthly_data = [MonthlyPoint(month=0, capital=capital)]
    sizing = sizing_for(capital, params)
    interval = recompute_interval(params.compounding_frequency)

    for month in range(1, params.time_months + 1):
        for _ in range(params.trades_per_month):
            if draw():
                capital += sizing.reward
            else:
                capital -= sizing.risk
            if capital < 0:
                capital = 0.0
            if interval == 0:
                sizing = sizing_for(capital, params)

        if interval > 0 and month % interval == 0:
            sizing = sizing_for(capital, params)

        monthly_data.append(MonthlyPoint(month=month, capital=capital))

    return SimulatedPath(final_capital=capital, monthly_data=monthly_data)


def random_draw(params: StrategyParams, rng: Optional[random.Random] = None) -> TradeDraw:
    rng = rng or random.Random()
    win_probability = params.win_rate / 100.0

    def draw() -> bool:
        return rng.random() < win_probability

    return draw


def generate_paths(
    params: StrategyParams,
    count: int,
    rng: Optional[random.Random] = None,
) -> list[SimulatedPath]:
    draw = random_draw(params, rng)
    return [simulate_path(params, draw) for _ in range(count)]


def iter_final_capitals(
    params: StrategyParams,
    count: int,
    rng: Optional[random.Random] = None,
) -> Iterator[float]:
    draw = random_draw(params, rng)
    for _ in range(count):
        yield simulate_path(params, draw).final_capital
