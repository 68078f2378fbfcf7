"""Simulation helpers."""

from mc_trading.simulator.aggregator import (
    DEFAULT_RESERVOIR_CAPACITY,
    RunningStats,
    StreamingAggregator,
    reservoir_capacity_for,
)
from mc_trading.simulator.extremes import (
    all_losses_capital,
    all_wins_capital,
    extreme_path,
    strategy_outlook,
)
from mc_trading.simulator.models import (
    CHART_LABELS,
    BatchAssignment,
    ChartPoint,
    CompoundingFrequency,
    DistributionStats,
    MonthlyPoint,
    SimulatedPath,
    SimulationSummary,
    StrategyOutlook,
    StrategyParams,
    TradeSizing,
)
from mc_trading.simulator.sampler import build_chart_points, sample_paths, select_representative_paths
from mc_trading.simulator.trajectory import (
    generate_paths,
    iter_final_capitals,
    recompute_interval,
    simulate_path,
    sizing_for,
)
from mc_trading.simulator.worker import (
    BatchKind,
    FinalsResponse,
    PathsResponse,
    WorkerRequest,
    run_batch,
)

__all__ = [
    "BatchAssignment",
    "BatchKind",
    "CHART_LABELS",
    "ChartPoint",
    "CompoundingFrequency",
    "DEFAULT_RESERVOIR_CAPACITY",
    "DistributionStats",
    "FinalsResponse",
    "MonthlyPoint",
    "PathsResponse",
    "RunningStats",
    "SimulatedPath",
    "SimulationSummary",
    "StrategyOutlook",
    "StrategyParams",
    "StreamingAggregator",
    "TradeSizing",
    "WorkerRequest",
    "all_losses_capital",
    "all_wins_capital",
    "build_chart_points",
    "extreme_path",
    "generate_paths",
    "iter_final_capitals",
    "recompute_interval",
    "reservoir_capacity_for",
    "run_batch",
    "sample_paths",
    "select_representative_paths",
    "simulate_path",
    "sizing_for",
    "strategy_outlook",
]
