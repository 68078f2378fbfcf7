"""Runtime exports."""

from mc_trading.runtime.context import RunContext, create_run_context, strategy_hash
from mc_trading.runtime.errors import (
    ChartSamplingFailure,
    MalformedWorkerResult,
    SimulationError,
    WorkerRuntimeFault,
)
from mc_trading.runtime.scheduler import (
    BatchCursor,
    BatchProgress,
    BatchScheduler,
    SchedulerConfig,
    default_concurrency,
    executor_factory_for,
    pool_size_for,
)
from mc_trading.runtime.service import ServiceConfig, SimulationReport, SimulationService

__all__ = [
    "BatchCursor",
    "BatchProgress",
    "BatchScheduler",
    "ChartSamplingFailure",
    "MalformedWorkerResult",
    "RunContext",
    "SchedulerConfig",
    "ServiceConfig",
    "SimulationError",
    "SimulationReport",
    "SimulationService",
    "WorkerRuntimeFault",
    "create_run_context",
    "default_concurrency",
    "executor_factory_for",
    "pool_size_for",
    "strategy_hash",
]
