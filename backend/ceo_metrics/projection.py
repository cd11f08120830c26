"""
Month-over-month revenue chart.

Current month is a forecast: the revenue observed so far extended at the same
daily rate to the end of the month. Previous month is the actual running total
of its daily deal revenue. The two are deliberately not computed the same way.
"""

from dataclasses import dataclass

from ceo_metrics.aggregation import AggregationResult
from ceo_metrics.normalizer import round_half_up


@dataclass(frozen=True)
class ProjectionSeries:
    day_labels: tuple[str, ...]
    current_period_projected: tuple[int, ...]
    previous_period_actual: tuple[int, ...]
    current_total: float
    current_projected_final: int
    previous_total: float


def build_projection(
    current: AggregationResult,
    previous: AggregationResult,
    elapsed_days: int,
    days_in_month: int,
    previous_days_in_month: int,
) -> ProjectionSeries:
    """
    One point per day of the current month.

    Previous-month buckets stop accumulating past its own length (a 28-day
    February simply holds its total across days 29-31 of a longer month).
    """
    current_total = current.total_revenue or 0.0
    daily_rate = current_total / elapsed_days if elapsed_days > 0 else 0.0

    labels: list[str] = []
    projected: list[int] = []
    cumulative: list[int] = []
    running = 0.0

    for day in range(1, days_in_month + 1):
        labels.append(f"Day {day}")
        projected.append(round_half_up(day * daily_rate))
        if day <= previous_days_in_month:
            running += previous.revenue_by_day_of_month.get(day, 0.0)
        cumulative.append(round_half_up(running))

    return ProjectionSeries(
        day_labels=tuple(labels),
        current_period_projected=tuple(projected),
        previous_period_actual=tuple(cumulative),
        current_total=current_total,
        current_projected_final=round_half_up(days_in_month * daily_rate),
        previous_total=running,
    )
