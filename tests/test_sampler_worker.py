import pytest

from mc_trading.simulator import (
    CHART_LABELS,
    BatchKind,
    FinalsResponse,
    MonthlyPoint,
    PathsResponse,
    SimulatedPath,
    StrategyParams,
    WorkerRequest,
    build_chart_points,
    run_batch,
    select_representative_paths,
)


def _flat_path(final, months=2):
    points = [MonthlyPoint(month=month, capital=final) for month in range(months + 1)]
    return SimulatedPath(final_capital=final, monthly_data=points)


def _params(**overrides):
    values = dict(
        initial_capital=10000,
        risk_percentage=2,
        risk_reward_ratio=2,
        win_rate=40,
        trades_per_month=5,
        time_months=6,
        risk_cap_dollars=1000,
    )
    values.update(overrides)
    return StrategyParams(**values)


def test_select_representative_paths_uses_floor_ranks():
    paths = [_flat_path(float(value)) for value in (7, 3, 5, 1, 0, 6, 2, 4)]
    selected = select_representative_paths(paths)
    assert [path.final_capital for path in selected] == [0.0, 2.0, 4.0, 6.0, 7.0]


def test_single_path_fills_every_series():
    selected = select_representative_paths([_flat_path(42.0)])
    assert len(selected) == 5
    assert {path.final_capital for path in selected} == {42.0}


def test_build_chart_points_labels_every_month():
    paths = [_flat_path(float(value)) for value in range(5)]
    points = build_chart_points(paths, time_months=2)
    assert [point.month for point in points] == [0, 1, 2]
    payload = points[1].as_dict()
    assert payload["month"] == 1
    assert [payload[label] for label in CHART_LABELS] == [0.0, 1.0, 2.0, 3.0, 4.0]


def test_build_chart_points_leaves_missing_months_empty():
    paths = [_flat_path(1.0, months=0)] * 5
    points = build_chart_points(paths, time_months=2)
    assert points[2].median is None
    assert points[2].as_dict() == {"month": 2}


def test_build_chart_points_rejects_wrong_path_count():
    with pytest.raises(ValueError):
        build_chart_points([_flat_path(1.0)], time_months=2)


def test_run_batch_finals_returns_one_value_per_simulation():
    response = run_batch(WorkerRequest(kind=BatchKind.FINALS, params=_params(), simulations=250))
    assert isinstance(response, FinalsResponse)
    assert len(response.finals) == 250
    assert all(value >= 0 for value in response.finals)


def test_run_batch_paths_returns_five_sorted_paths():
    params = _params()
    response = run_batch(WorkerRequest(kind=BatchKind.PATHS, params=params, simulations=100))
    assert isinstance(response, PathsResponse)
    finals = [path.final_capital for path in response.paths]
    assert len(finals) == 5
    assert finals == sorted(finals)
    assert all(len(path.monthly_data) == params.time_months + 1 for path in response.paths)


def test_run_batch_rejects_unknown_kind():
    with pytest.raises(ValueError):
        run_batch(WorkerRequest(kind="bogus", params=_params(), simulations=1))
