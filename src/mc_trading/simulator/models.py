"""Simulation data structures."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class CompoundingFrequency(str, Enum):
    DAILY = "daily"
    MONTHLY = "monthly"
    QUARTERLY = "quarterly"
    YEARLY = "yearly"


@dataclass(frozen=True)
class StrategyParams:
    initial_capital: float
    risk_percentage: float  # percent of capital
    risk_reward_ratio: float
    win_rate: float  # percent
    trades_per_month: int
    time_months: int
    risk_cap_dollars: float
    compounding_frequency: CompoundingFrequency = CompoundingFrequency.QUARTERLY

    @property
    def total_trades(self) -> int:
        return self.trades_per_month * self.time_months


@dataclass(frozen=True)
class TradeSizing:
    risk: float
    reward: float


@dataclass(frozen=True)
class MonthlyPoint:
    month: int
    capital: float


@dataclass(frozen=True)
class SimulatedPath:
    final_capital: float
    monthly_data: list[MonthlyPoint] = field(default_factory=list)

    def capital_at(self, month: int) -> Optional[float]:
        if 0 <= month < len(self.monthly_data):
            return self.monthly_data[month].capital
        return None


@dataclass(frozen=True)
class BatchAssignment:
    start: int
    stop: int

    @property
    def size(self) -> int:
        return self.stop - self.start


CHART_LABELS = ("Worst Sim", "25th %ile", "Median", "75th %ile", "Best Sim")


@dataclass(frozen=True)
class ChartPoint:
    month: int
    worst: Optional[float] = None
    p25: Optional[float] = None
    median: Optional[float] = None
    p75: Optional[float] = None
    best: Optional[float] = None

    def as_dict(self) -> dict[str, float | int]:
        payload: dict[str, float | int] = {"month": self.month}
        values = (self.worst, self.p25, self.median, self.p75, self.best)
        for label, value in zip(CHART_LABELS, values):
            if value is not None:
                payload[label] = value
        return payload


@dataclass(frozen=True)
class DistributionStats:
    count: int
    mean: float
    median: float
    p10: float
    p25: float
    p75: float
    p90: float
    worst: float
    best: float


@dataclass(frozen=True)
class StrategyOutlook:
    initial_risk: float
    initial_reward: float
    expected_value_per_trade: float
    total_trades: int
    cap_activation_capital: Optional[float]


@dataclass(frozen=True)
class SimulationSummary:
    simulations: int
    mean: float
    median: float
    p10: float
    p25: float
    p75: float
    p90: float
    worst: float
    best: float
    all_wins_capital: float
    all_losses_capital: float
    total_trades: int
