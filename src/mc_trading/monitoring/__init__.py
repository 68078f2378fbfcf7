"""Monitoring exports."""

from mc_trading.monitoring.audit import AuditLog
from mc_trading.monitoring.monitor import Monitor
from mc_trading.monitoring.notifier import LogNotifier, MemoryNotifier, Notifier

__all__ = [
    "AuditLog",
    "LogNotifier",
    "MemoryNotifier",
    "Monitor",
    "Notifier",
]
