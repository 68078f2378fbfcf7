"""Config loading."""

from mc_trading.config.loader import compute_config_hash, load_config, serialize_config
from mc_trading.config.models import AppConfig, MonitoringConfig, SimulationSettings

__all__ = [
    "AppConfig",
    "MonitoringConfig",
    "SimulationSettings",
    "compute_config_hash",
    "load_config",
    "serialize_config",
]
