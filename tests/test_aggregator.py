import random

import pytest

from mc_trading.simulator import StreamingAggregator, reservoir_capacity_for


class _ScriptedRandom:
    def __init__(self, values):
        self.values = list(values)
        self.calls = []

    def randrange(self, stop):
        self.calls.append(stop)
        return self.values.pop(0)


def test_reservoir_fills_then_replaces_with_algorithm_r():
    rng = _ScriptedRandom([0, 5])
    aggregator = StreamingAggregator(2, rng=rng)
    aggregator.observe_many([1.0, 2.0, 3.0, 4.0])

    assert rng.calls == [3, 4]
    assert aggregator.reservoir == [3.0, 2.0]


def test_running_stats_are_exact_beyond_reservoir():
    aggregator = StreamingAggregator(10, rng=random.Random())
    values = [float(value) for value in range(1000)]
    random.shuffle(values)
    aggregator.observe_many(values)
    stats = aggregator.finalize()

    assert stats.count == 1000
    assert stats.mean == pytest.approx(499.5)
    assert stats.worst == 0.0
    assert stats.best == 999.0
    assert len(aggregator.reservoir) == 10


def test_reservoir_size_bound():
    capacity = reservoir_capacity_for(5000, limit=300)
    aggregator = StreamingAggregator(capacity)
    for value in range(5000):
        aggregator.observe(float(value))
        assert len(aggregator.reservoir) <= 300
    assert reservoir_capacity_for(50) == 50
    assert reservoir_capacity_for(10_000_000) == 20000


def test_percentile_ordering_law():
    aggregator = StreamingAggregator(500)
    rng = random.Random()
    aggregator.observe_many(rng.lognormvariate(10, 1) for _ in range(5000))
    stats = aggregator.finalize()
    assert stats.worst <= stats.p10 <= stats.p25 <= stats.median <= stats.p75 <= stats.p90 <= stats.best


def test_percentiles_use_floor_rank():
    aggregator = StreamingAggregator(10)
    aggregator.observe_many([float(value) for value in range(10, 0, -1)])
    stats = aggregator.finalize()
    assert stats.p10 == 2.0
    assert stats.p25 == 3.0
    assert stats.median == 6.0
    assert stats.p75 == 8.0
    assert stats.p90 == 10.0
    assert aggregator.percentile(0.5) == 6.0


def test_empty_stream_finalizes_to_zero():
    stats = StreamingAggregator(0).finalize()
    assert stats.count == 0
    assert (stats.mean, stats.median, stats.worst, stats.best) == (0.0, 0.0, 0.0, 0.0)


def test_negative_capacity_rejected():
    with pytest.raises(ValueError):
        StreamingAggregator(-1)
