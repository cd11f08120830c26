"""
Projection builder tests
========================
Current month = straight-line forecast; previous month = actual cumulative.
"""

import sys
import os
from types import MappingProxyType

sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from ceo_metrics.aggregation import AggregationResult
from ceo_metrics.projection import build_projection


def _agg(total=0.0, by_day=None):
    return AggregationResult(total_revenue=total, revenue_by_day_of_month=MappingProxyType(by_day or {}))


def test_linear_projection_example():
    """$120,000 by day 10 of a 30-day month -> $12,000/day -> 360,000 on day 30."""
    series = build_projection(_agg(120_000), _agg(), elapsed_days=10, days_in_month=30, previous_days_in_month=31)
    assert series.current_period_projected[0] == 12_000
    assert series.current_period_projected[9] == 120_000
    assert series.current_period_projected[29] == 360_000
    assert series.current_projected_final == 360_000
    assert series.current_total == 120_000


def test_projection_formula_every_day():
    series = build_projection(_agg(1000), _agg(), elapsed_days=7, days_in_month=31, previous_days_in_month=30)
    for d, value in enumerate(series.current_period_projected, start=1):
        assert value == int(d * (1000 / 7) + 0.5)


def test_zero_elapsed_days_projects_zero():
    series = build_projection(_agg(5000), _agg(), elapsed_days=0, days_in_month=31, previous_days_in_month=30)
    assert set(series.current_period_projected) == {0}
    assert series.current_projected_final == 0


def test_previous_cumulative_example():
    series = build_projection(_agg(), _agg(3000, {1: 1000, 3: 2000}), elapsed_days=1,
                              days_in_month=28, previous_days_in_month=28)
    assert list(series.previous_period_actual) == [1000, 1000] + [3000] * 26
    assert series.previous_total == 3000


def test_previous_stops_accumulating_past_its_length():
    """A 28-day previous month laid on a 31-day axis holds its total on days 29-31."""
    previous = _agg(3500, {1: 1000, 3: 2000, 30: 500})
    series = build_projection(_agg(), previous, elapsed_days=5, days_in_month=31, previous_days_in_month=28)
    assert len(series.previous_period_actual) == 31
    assert series.previous_period_actual[-4:] == (3000, 3000, 3000, 3000)
    assert series.previous_total == 3000


def test_shared_day_axis():
    series = build_projection(_agg(10), _agg(10, {31: 10}), elapsed_days=3, days_in_month=30, previous_days_in_month=31)
    assert series.day_labels[0] == "Day 1"
    assert series.day_labels[-1] == "Day 30"
    assert len(series.day_labels) == len(series.current_period_projected) == len(series.previous_period_actual) == 30
    # day 31 of the longer previous month has no slot on a 30-day axis
    assert series.previous_total == 0
