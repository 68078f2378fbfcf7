"""Simulation entry points consumed by the presentation layer."""

from __future__ import annotations

import asyncio
import random
from dataclasses import asdict, dataclass, field
from typing import Optional

from mc_trading.monitoring.monitor import Monitor
from mc_trading.runtime.errors import ChartSamplingFailure, SimulationError
from mc_trading.runtime.scheduler import (
    DEFAULT_BATCH_SIZE,
    BatchFn,
    BatchScheduler,
    ExecutorFactory,
    ProgressCallback,
    SchedulerConfig,
    executor_factory_for,
)
from mc_trading.simulator.aggregator import (
    DEFAULT_RESERVOIR_CAPACITY,
    StreamingAggregator,
    reservoir_capacity_for,
)
from mc_trading.simulator.extremes import all_losses_capital, all_wins_capital, strategy_outlook
from mc_trading.simulator.models import (
    ChartPoint,
    SimulatedPath,
    SimulationSummary,
    StrategyOutlook,
    StrategyParams,
)
from mc_trading.simulator.sampler import build_chart_points
from mc_trading.simulator.worker import BatchKind, PathsResponse, WorkerRequest, run_batch


DEFAULT_CHART_SAMPLE_SIZE = 1000


@dataclass(frozen=True)
class ServiceConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: Optional[int] = None
    reservoir_capacity: int = DEFAULT_RESERVOIR_CAPACITY
    chart_sample_size: int = DEFAULT_CHART_SAMPLE_SIZE
    executor: str = "process"


@dataclass(frozen=True)
class SimulationReport:
    summary: Optional[SimulationSummary]
    outlook: StrategyOutlook
    chart: list[ChartPoint] = field(default_factory=list)
    error: Optional[str] = None
    chart_error: Optional[str] = None


class SimulationService:
    def __init__(
        self,
        config: Optional[ServiceConfig] = None,
        batch_fn: BatchFn = run_batch,
        executor_factory: Optional[ExecutorFactory] = None,
        audit_log: Optional[object] = None,
        monitor: Optional[Monitor] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config or ServiceConfig()
        self._batch_fn = batch_fn
        self._executor_factory = executor_factory or executor_factory_for(self.config.executor)
        self._audit_log = audit_log
        self.monitor = monitor
        self._rng = rng
        self.scheduler = BatchScheduler(
            SchedulerConfig(
                batch_size=self.config.batch_size,
                max_workers=self.config.max_workers,
                executor=self.config.executor,
            ),
            batch_fn=batch_fn,
            executor_factory=self._executor_factory,
            audit_log=audit_log,
        )

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)

    async def run_simulation(
        self,
        params: StrategyParams,
        total_simulations: int,
        on_progress: ProgressCallback | None = None,
    ) -> SimulationSummary:
        capacity = reservoir_capacity_for(total_simulations, self.config.reservoir_capacity)
        aggregator = StreamingAggregator(capacity, rng=self._rng)
        self._log(
            "simulation_start",
            {
                "params": asdict(params),
                "simulations": total_simulations,
                "pool_size": self.scheduler.pool_size(total_simulations),
                "reservoir_capacity": capacity,
            },
        )

        try:
            await self.scheduler.run(params, total_simulations, aggregator, on_progress)
        except SimulationError as exc:
            self._log("simulation_failed", {"kind": type(exc).__name__, "error": exc.message})
            if self.monitor is not None:
                self.monitor.run_failed(exc.message)
            raise

        stats = aggregator.finalize()
        summary = SimulationSummary(
            simulations=stats.count,
            mean=stats.mean,
            median=stats.median,
            p10=stats.p10,
            p25=stats.p25,
            p75=stats.p75,
            p90=stats.p90,
            worst=stats.worst,
            best=stats.best,
            all_wins_capital=all_wins_capital(params),
            all_losses_capital=all_losses_capital(params),
            total_trades=params.total_trades,
        )
        self._log("simulation_complete", asdict(summary))
        return summary

    async def sample_chart_paths(self, params: StrategyParams, sample_simulations: int) -> list[ChartPoint]:
        if sample_simulations <= 0:
            return []

        request = WorkerRequest(kind=BatchKind.PATHS, params=params, simulations=sample_simulations)
        loop = asyncio.get_running_loop()
        executor = self._executor_factory(1)
        try:
            response = await loop.run_in_executor(executor, self._batch_fn, request)
        except Exception as exc:
            raise self._chart_failure(f"Failed to compute chart paths: {exc}") from exc
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if (
            not isinstance(response, PathsResponse)
            or not isinstance(response.paths, list)
            or len(response.paths) != 5
            or not all(isinstance(path, SimulatedPath) for path in response.paths)
        ):
            raise self._chart_failure("Failed to compute chart paths: unexpected worker response.")
        try:
            return build_chart_points(response.paths, params.time_months)
        except (AttributeError, TypeError, ValueError) as exc:
            raise self._chart_failure(f"Failed to compute chart paths: {exc}") from exc

    def _chart_failure(self, message: str) -> ChartSamplingFailure:
        self._log("chart_sample_failed", {"error": message})
        if self.monitor is not None:
            self.monitor.chart_failed(message)
        return ChartSamplingFailure(message)

    async def run(
        self,
        params: StrategyParams,
        total_simulations: int,
        on_progress: ProgressCallback | None = None,
    ) -> SimulationReport:
        """Summary statistics plus chart paths; failures become report messages."""
        outlook = strategy_outlook(params)
        try:
            summary = await self.run_simulation(params, total_simulations, on_progress)
        except SimulationError as exc:
            return SimulationReport(summary=None, outlook=outlook, error=exc.message)

        sample_simulations = min(self.config.chart_sample_size, total_simulations)
        try:
            chart = await self.sample_chart_paths(params, sample_simulations)
        except ChartSamplingFailure as exc:
            return SimulationReport(summary=summary, outlook=outlook, chart_error=exc.message)

        return SimulationReport(summary=summary, outlook=outlook, chart=chart)
