"""Load simulation configuration files."""

from __future__ import annotations

import hashlib
from dataclasses import asdict
from pathlib import Path
from typing import Any, Optional

import yaml

from mc_trading.config.models import AppConfig, MonitoringConfig, SimulationSettings
from mc_trading.simulator.models import CompoundingFrequency, StrategyParams


EXECUTORS = ("process", "thread")


def load_config(path: str | Path) -> AppConfig:
    path = Path(path)
    data = _load_yaml(path)

    name = _require(data, "name")
    version = str(_require(data, "version"))
    run_id_prefix = data.get("run_id_prefix", name)

    strategy = _parse_strategy(_require(data, "strategy"))
    simulation = _parse_simulation(data.get("simulation", {}))
    monitoring = _parse_monitoring(data.get("monitoring", {}))

    return AppConfig(
        name=name,
        version=version,
        run_id_prefix=run_id_prefix,
        strategy=strategy,
        simulation=simulation,
        monitoring=monitoring,
    )


def compute_config_hash(path: str | Path) -> str:
    path = Path(path)
    content = path.read_bytes()
    return hashlib.sha256(content).hexdigest()


def _load_yaml(path: Path) -> dict[str, Any]:
    data = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError("Config must be a mapping")
    return data


def _require(data: dict[str, Any], key: str) -> Any:
    if key not in data:
        raise ValueError(f"Missing required config key: {key}")
    return data[key]


def _parse_strategy(data: dict[str, Any]) -> StrategyParams:
    try:
        frequency = CompoundingFrequency(data.get("compounding_frequency", "quarterly"))
    except ValueError as exc:
        raise ValueError(f"Invalid compounding_frequency: {data.get('compounding_frequency')}") from exc

    return StrategyParams(
        initial_capital=float(_require(data, "initial_capital")),
        risk_percentage=float(_require(data, "risk_percentage")),
        risk_reward_ratio=float(_require(data, "risk_reward_ratio")),
        win_rate=float(_require(data, "win_rate")),
        trades_per_month=int(_require(data, "trades_per_month")),
        time_months=int(_require(data, "time_months")),
        risk_cap_dollars=float(_require(data, "risk_cap_dollars")),
        compounding_frequency=frequency,
    )


def _parse_simulation(data: dict[str, Any]) -> SimulationSettings:
    def optional_int(value: Any) -> Optional[int]:
        if value is None:
            return None
        return int(value)

    executor = str(data.get("executor", "process")).lower()
    if executor not in EXECUTORS:
        raise ValueError(f"Invalid executor: {executor}")

    batch_size = int(data.get("batch_size", 20000))
    if batch_size <= 0:
        raise ValueError(f"Invalid batch_size: {batch_size}")

    return SimulationSettings(
        simulations=int(data.get("simulations", 10000)),
        batch_size=batch_size,
        max_workers=optional_int(data.get("max_workers")),
        reservoir_capacity=int(data.get("reservoir_capacity", 20000)),
        chart_sample_size=int(data.get("chart_sample_size", 1000)),
        executor=executor,
    )


def _parse_monitoring(data: dict[str, Any]) -> MonitoringConfig:
    return MonitoringConfig(
        audit_log_path=str(data.get("audit_log_path", "runtime/audit.log")),
    )


def serialize_config(config: AppConfig) -> dict[str, Any]:
    payload = asdict(config)
    payload["strategy"]["compounding_frequency"] = config.strategy.compounding_frequency.value
    return payload
