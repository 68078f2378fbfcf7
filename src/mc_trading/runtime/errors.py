"""Failures surfaced by the simulation runtime."""

from __future__ import annotations


class SimulationError(RuntimeError):
    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class MalformedWorkerResult(SimulationError):
    pass


class WorkerRuntimeFault(SimulationError):
    pass


class ChartSamplingFailure(SimulationError):
    pass
