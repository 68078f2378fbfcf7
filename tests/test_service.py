from __future__ import annotations

import asyncio
import random

from mc_trading.monitoring import AuditLog, MemoryNotifier, Monitor
from mc_trading.runtime import ChartSamplingFailure, ServiceConfig, SimulationService
from mc_trading.simulator import (
    CHART_LABELS,
    BatchKind,
    PathsResponse,
    SimulatedPath,
    StrategyParams,
    all_losses_capital,
    all_wins_capital,
    run_batch,
)


PARAMS = StrategyParams(
    initial_capital=50000,
    risk_percentage=1,
    risk_reward_ratio=3,
    win_rate=30,
    trades_per_month=7,
    time_months=12,
    risk_cap_dollars=3000,
)


def _service(batch_fn=run_batch, tmp_path=None, notifier=None, **overrides):
    values = dict(batch_size=100, max_workers=3, chart_sample_size=50, executor="thread")
    values.update(overrides)
    audit = AuditLog(tmp_path / "audit.log") if tmp_path is not None else None
    monitor = Monitor(notifier) if notifier is not None else None
    return SimulationService(
        ServiceConfig(**values),
        batch_fn=batch_fn,
        audit_log=audit,
        monitor=monitor,
        rng=random.Random(),
    )


def test_run_simulation_summary_is_ordered():
    summary = asyncio.run(_service().run_simulation(PARAMS, 1000))

    assert summary.simulations == 1000
    assert summary.worst <= summary.p10 <= summary.p25 <= summary.median
    assert summary.median <= summary.p75 <= summary.p90 <= summary.best
    assert summary.all_losses_capital <= summary.worst
    assert summary.best <= summary.all_wins_capital
    assert summary.all_wins_capital == all_wins_capital(PARAMS)
    assert summary.all_losses_capital == all_losses_capital(PARAMS)
    assert summary.total_trades == 84


def test_sample_chart_paths_emits_one_point_per_month():
    chart = asyncio.run(_service().sample_chart_paths(PARAMS, 200))

    assert [point.month for point in chart] == list(range(PARAMS.time_months + 1))
    first = chart[0].as_dict()
    assert all(first[label] == PARAMS.initial_capital for label in CHART_LABELS)
    last = chart[-1]
    assert last.worst <= last.p25 <= last.median <= last.p75 <= last.best


def test_run_report_with_chart(tmp_path):
    report = asyncio.run(_service(tmp_path=tmp_path).run(PARAMS, 300))

    assert report.error is None
    assert report.chart_error is None
    assert report.summary.simulations == 300
    assert len(report.chart) == PARAMS.time_months + 1
    assert report.outlook.total_trades == 84

    events = [record["event"] for record in AuditLog(tmp_path / "audit.log").events()]
    assert events[0] == "simulation_start"
    assert events.count("batch_complete") == 3
    assert events[-1] == "simulation_complete"


def test_malformed_batch_leaves_no_results(tmp_path):
    notifier = MemoryNotifier()

    def malformed(request):
        return None

    report = asyncio.run(_service(malformed, tmp_path=tmp_path, notifier=notifier).run(PARAMS, 1000))

    assert report.summary is None
    assert report.chart == []
    assert isinstance(report.error, str) and report.error
    assert notifier.messages == [("RUN_FAILED", report.error)]
    events = [record["event"] for record in AuditLog(tmp_path / "audit.log").events()]
    assert "simulation_complete" not in events
    assert events.count("simulation_failed") == 1


def test_chart_failure_keeps_summary():
    notifier = MemoryNotifier()

    def paths_broken(request):
        if request.kind == BatchKind.PATHS:
            raise RuntimeError("renderer exploded")
        return run_batch(request)

    report = asyncio.run(_service(paths_broken, notifier=notifier).run(PARAMS, 200))

    assert report.summary is not None
    assert report.error is None
    assert report.chart == []
    assert "renderer exploded" in report.chart_error
    assert [event for event, _ in notifier.messages] == ["CHART_FAILED"]


def test_chart_malformed_response_raises():
    def paths_malformed(request):
        return run_batch(request) if request.kind == BatchKind.FINALS else []

    service = _service(paths_malformed)
    try:
        asyncio.run(service.sample_chart_paths(PARAMS, 10))
    except ChartSamplingFailure as exc:
        assert "unexpected worker response" in exc.message
    else:
        raise AssertionError("expected ChartSamplingFailure")


def test_zero_simulations_reports_zeros():
    report = asyncio.run(_service().run(PARAMS, 0))

    assert report.summary.simulations == 0
    assert report.summary.mean == 0.0
    assert report.summary.worst == report.summary.best == 0.0
    assert report.chart == []


def test_chart_sample_size_is_capped_by_total():
    seen = []

    def recording(request):
        seen.append((request.kind, request.simulations))
        return run_batch(request)

    asyncio.run(_service(recording, chart_sample_size=1000).run(PARAMS, 40))

    assert (BatchKind.PATHS, 40) in seen


def test_chart_paths_of_wrong_type_keep_summary():
    notifier = MemoryNotifier()

    def bad_paths(request):
        if request.kind == BatchKind.PATHS:
            return PathsResponse(paths=[None] * 5)
        return run_batch(request)

    report = asyncio.run(_service(bad_paths, notifier=notifier).run(PARAMS, 200))

    assert report.summary is not None
    assert report.summary.simulations == 200
    assert report.chart == []
    assert report.chart_error
    assert [event for event, _ in notifier.messages] == ["CHART_FAILED"]


def test_chart_paths_with_broken_points_keep_summary():
    def broken_points(request):
        if request.kind == BatchKind.PATHS:
            path = SimulatedPath(final_capital=1.0, monthly_data=[object()])
            return PathsResponse(paths=[path] * 5)
        return run_batch(request)

    report = asyncio.run(_service(broken_points).run(PARAMS, 100))

    assert report.summary is not None
    assert "Failed to compute chart paths" in report.chart_error
