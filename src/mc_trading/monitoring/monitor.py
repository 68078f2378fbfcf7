"""Monitoring and alert routing."""

from __future__ import annotations

from dataclasses import dataclass

from mc_trading.monitoring.notifier import Notifier


@dataclass
class Monitor:
    notifier: Notifier

    def progress(self, completed: int, total: int) -> None:
        self.notifier.notify("PROGRESS", f"{completed}/{total} batches")

    def run_failed(self, reason: str) -> None:
        self.notifier.notify("RUN_FAILED", reason)

    def chart_failed(self, reason: str) -> None:
        self.notifier.notify("CHART_FAILED", reason)
