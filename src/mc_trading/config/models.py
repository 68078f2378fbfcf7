"""Configuration models for simulation runs."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from mc_trading.simulator.models import StrategyParams


@dataclass(frozen=True)
class SimulationSettings:
    simulations: int = 10000
    batch_size: int = 20000
    max_workers: Optional[int] = None
    reservoir_capacity: int = 20000
    chart_sample_size: int = 1000
    executor: str = "process"


@dataclass(frozen=True)
class MonitoringConfig:
    audit_log_path: str = "runtime/audit.log"


@dataclass(frozen=True)
class AppConfig:
    name: str
    version: str
    run_id_prefix: str
    strategy: StrategyParams
    simulation: SimulationSettings = SimulationSettings()
    monitoring: MonitoringConfig = MonitoringConfig()
