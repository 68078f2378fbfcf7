"""Bounded worker pool feeding batch results into a single aggregator.

Workers pull contiguous batches from a shared cursor, generate them in an
executor and push the final capitals onto a fan-in queue. One consumer task
drains the queue and is the only code that touches the aggregator, so the
reservoir update rule is applied strictly one value at a time. A worker
waits for its batch to be acknowledged by the consumer before claiming the
next one.
"""

from __future__ import annotations

import asyncio
import inspect
import math
import os
import threading
from array import array
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Optional, Sequence

from mc_trading.runtime.errors import MalformedWorkerResult, SimulationError, WorkerRuntimeFault
from mc_trading.simulator.aggregator import StreamingAggregator
from mc_trading.simulator.models import BatchAssignment, StrategyParams
from mc_trading.simulator.worker import BatchKind, FinalsResponse, WorkerRequest, run_batch


DEFAULT_BATCH_SIZE = 20000
MAX_POOL_SIZE = 8

BatchFn = Callable[[WorkerRequest], Any]
ExecutorFactory = Callable[[int], Executor]


@dataclass(frozen=True)
class BatchProgress:
    completed_batches: int
    total_batches: int

    @property
    def done(self) -> bool:
        return self.completed_batches >= self.total_batches


ProgressCallback = Callable[[BatchProgress], Awaitable[None] | None]


def default_concurrency() -> int:
    return min(max(1, os.cpu_count() or 4), MAX_POOL_SIZE)


def pool_size_for(total_simulations: int, batch_size: int, max_workers: int) -> int:
    if total_simulations <= 0:
        return 0
    return min(max(1, max_workers), math.ceil(total_simulations / batch_size))


def executor_factory_for(kind: str) -> ExecutorFactory:
    kind = kind.lower()
    if kind == "process":
        return lambda workers: ProcessPoolExecutor(max_workers=workers)
    if kind == "thread":
        return lambda workers: ThreadPoolExecutor(max_workers=workers, thread_name_prefix="mc-batch")
    raise ValueError(f"Unsupported executor: {kind}")


class BatchCursor:
    """Hands out ``[start, stop)`` ranges covering ``[0, total)`` exactly once."""

    def __init__(self, total: int, batch_size: int) -> None:
        if batch_size <= 0:
            raise ValueError("Batch size must be positive")
        self.total = max(0, total)
        self.batch_size = batch_size
        self._next_start = 0
        self._lock = threading.Lock()

    @property
    def total_batches(self) -> int:
        return math.ceil(self.total / self.batch_size)

    @property
    def remaining(self) -> int:
        with self._lock:
            return self.total - self._next_start

    def claim(self) -> Optional[BatchAssignment]:
        with self._lock:
            if self._next_start >= self.total:
                return None
            start = self._next_start
            self._next_start = min(start + self.batch_size, self.total)
            return BatchAssignment(start=start, stop=self._next_start)


@dataclass
class _BatchReport:
    worker_id: int
    assignment: BatchAssignment
    finals: Sequence[float]
    ack: asyncio.Future


@dataclass(frozen=True)
class SchedulerConfig:
    batch_size: int = DEFAULT_BATCH_SIZE
    max_workers: Optional[int] = None
    executor: str = "process"


class BatchScheduler:
    def __init__(
        self,
        config: Optional[SchedulerConfig] = None,
        batch_fn: BatchFn = run_batch,
        executor_factory: Optional[ExecutorFactory] = None,
        audit_log: Optional[object] = None,
    ) -> None:
        self.config = config or SchedulerConfig()
        self._batch_fn = batch_fn
        self._executor_factory = executor_factory or executor_factory_for(self.config.executor)
        self._audit_log = audit_log

    def _log(self, event: str, payload: dict) -> None:
        if self._audit_log is None:
            return
        self._audit_log.log(event, payload)

    async def _maybe_call(self, callback: ProgressCallback | None, progress: BatchProgress) -> None:
        if callback is None:
            return
        result = callback(progress)
        if inspect.isawaitable(result):
            await result

    def pool_size(self, total_simulations: int) -> int:
        max_workers = self.config.max_workers or default_concurrency()
        return pool_size_for(total_simulations, self.config.batch_size, max_workers)

    async def run(
        self,
        params: StrategyParams,
        total_simulations: int,
        aggregator: StreamingAggregator,
        on_progress: ProgressCallback | None = None,
    ) -> BatchProgress:
        cursor = BatchCursor(total_simulations, self.config.batch_size)
        pool_size = self.pool_size(cursor.total)
        if pool_size == 0:
            return BatchProgress(0, 0)

        queue: asyncio.Queue = asyncio.Queue(maxsize=pool_size)
        executor = self._executor_factory(pool_size)
        finished = False
        try:
            async with asyncio.TaskGroup() as group:
                for worker_id in range(pool_size):
                    group.create_task(self._work(worker_id, executor, params, cursor, queue))
                consumer = group.create_task(
                    self._consume(queue, aggregator, pool_size, cursor.total_batches, on_progress)
                )
            finished = True
        except ExceptionGroup as group_error:
            raise _first_failure(group_error)
        finally:
            if finished:
                executor.shutdown(wait=True)
            else:
                _terminate_workers(executor)

        return consumer.result()

    async def _work(
        self,
        worker_id: int,
        executor: Executor,
        params: StrategyParams,
        cursor: BatchCursor,
        queue: asyncio.Queue,
    ) -> None:
        loop = asyncio.get_running_loop()
        while True:
            assignment = cursor.claim()
            if assignment is None:
                break

            request = WorkerRequest(kind=BatchKind.FINALS, params=params, simulations=assignment.size)
            try:
                response = await loop.run_in_executor(executor, self._batch_fn, request)
            except Exception as exc:
                raise WorkerRuntimeFault(
                    "A worker encountered an error. Try lowering the number of simulations "
                    f"or batch size. ({type(exc).__name__}: {exc})"
                ) from exc

            finals = _validated_finals(response, assignment)
            ack = loop.create_future()
            await queue.put(_BatchReport(worker_id, assignment, finals, ack))
            await ack

        await queue.put(None)

    async def _consume(
        self,
        queue: asyncio.Queue,
        aggregator: StreamingAggregator,
        pool_size: int,
        total_batches: int,
        on_progress: ProgressCallback | None,
    ) -> BatchProgress:
        progress = BatchProgress(0, total_batches)
        retired = 0
        while retired < pool_size:
            report = await queue.get()
            if report is None:
                retired += 1
                continue

            aggregator.observe_many(report.finals)
            if not report.ack.done():
                report.ack.set_result(None)

            progress = BatchProgress(progress.completed_batches + 1, total_batches)
            self._log(
                "batch_complete",
                {
                    "worker": report.worker_id,
                    "start": report.assignment.start,
                    "stop": report.assignment.stop,
                    "completed_batches": progress.completed_batches,
                    "total_batches": total_batches,
                },
            )
            await self._maybe_call(on_progress, progress)
        return progress


def _validated_finals(response: Any, assignment: BatchAssignment) -> Sequence[float]:
    if not isinstance(response, FinalsResponse) or not isinstance(response.finals, (array, list, tuple)):
        raise MalformedWorkerResult("Unexpected worker response received.")
    finals = response.finals
    if len(finals) != assignment.size:
        raise MalformedWorkerResult(
            f"Unexpected worker response received: expected {assignment.size} results, "
            f"got {len(finals)}."
        )
    if isinstance(finals, array):
        numeric = finals.typecode in ("f", "d")
    else:
        numeric = all(isinstance(value, (int, float)) and not isinstance(value, bool) for value in finals)
    if not numeric:
        raise MalformedWorkerResult("Unexpected worker response received: non-numeric results.")
    return finals


def _terminate_workers(executor: Executor) -> None:
    """Stop an aborted pool, killing process workers mid-batch."""
    # Thread workers cannot be interrupted; their running batch is discarded.
    processes = list((getattr(executor, "_processes", None) or {}).values())
    for process in processes:
        if process.is_alive():
            process.terminate()
    executor.shutdown(wait=False, cancel_futures=True)
    for process in processes:
        process.join(timeout=5)


def _first_failure(group_error: BaseExceptionGroup) -> SimulationError:
    leaves = list(_leaves(group_error))
    for leaf in leaves:
        if isinstance(leaf, SimulationError):
            return leaf
    first = leaves[0]
    error = WorkerRuntimeFault(f"Worker pool failed: {type(first).__name__}: {first}")
    error.__cause__ = first
    return error


def _leaves(group_error: BaseExceptionGroup):
    for exc in group_error.exceptions:
        if isinstance(exc, BaseExceptionGroup):
            yield from _leaves(exc)
        else:
            yield exc
