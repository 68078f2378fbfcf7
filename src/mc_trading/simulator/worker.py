"""Batch worker entry point.

``run_batch`` is executed inside a process (or thread) pool, so requests and
responses are plain picklable dataclasses.
"""

from __future__ import annotations

from array import array
from dataclasses import dataclass, field
from enum import Enum
from typing import Union

from mc_trading.simulator.models import SimulatedPath, StrategyParams
from mc_trading.simulator.sampler import sample_paths
from mc_trading.simulator.trajectory import iter_final_capitals


class BatchKind(str, Enum):
    FINALS = "finals"
    PATHS = "paths"


@dataclass(frozen=True)
class WorkerRequest:
    kind: BatchKind
    params: StrategyParams
    simulations: int


@dataclass(frozen=True)
class FinalsResponse:
    finals: array
    kind: BatchKind = BatchKind.FINALS


@dataclass(frozen=True)
class PathsResponse:
    paths: list[SimulatedPath] = field(default_factory=list)
    kind: BatchKind = BatchKind.PATHS


WorkerResponse = Union[FinalsResponse, PathsResponse]


def run_batch(request: WorkerRequest) -> WorkerResponse:
    if request.kind == BatchKind.FINALS:
        finals = array("d", iter_final_capitals(request.params, request.simulations))
        return FinalsResponse(finals=finals)
    if request.kind == BatchKind.PATHS:
        return PathsResponse(paths=sample_paths(request.params, request.simulations))
    raise ValueError(f"Unknown batch kind: {request.kind}")
