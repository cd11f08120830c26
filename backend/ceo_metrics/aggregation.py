"""
Deal aggregation engine.

Window membership is decided by the deal's creation date (not its close date),
and only post-migration deals count. Per-day revenue is keyed by day-of-month
(1..31) because the current and previous months are later laid side by side on
one day axis.
"""

from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from ceo_metrics.normalizer import deal_created_date, deal_facts, is_post_migration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DateWindow:
    """Inclusive YYYY-MM-DD range."""
    start: str
    end: str

    def contains(self, day: Optional[str]) -> bool:
        if not day:
            return False
        return self.start <= day[:10] <= self.end


@dataclass(frozen=True)
class AggregationResult:
    total_revenue: float = 0.0
    count: int = 0
    revenue_by_owner: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    count_by_link_key: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    revenue_by_day_of_month: Mapping[int, float] = field(default_factory=lambda: MappingProxyType({}))


def _day_of_month(created_date: Optional[str]) -> Optional[int]:
    if not created_date:
        return None
    try:
        day = int(created_date[8:10])
    except ValueError:
        return None
    return day if 1 <= day <= 31 else None


def aggregate_deals(records: Iterable[dict], window: DateWindow) -> AggregationResult:
    """Fold post-migration deals created inside `window` into revenue rollups."""
    records = list(records)
    facts = [deal_facts(r) for r in records]
    in_window = [f for f in facts if f.is_post_migration and window.contains(f.created_date)]

    if records and not in_window:
        logger.info(
            f"aggregate_deals: 0 of {len(records)} deals in {window.start}..{window.end}; sample: "
            f"{[(f.created_date, f.is_post_migration, f.amount) for f in facts[:3]]}"
        )

    total = 0.0
    by_owner: dict[str, float] = defaultdict(float)
    by_link_key: dict[str, int] = defaultdict(int)
    by_day: dict[int, float] = defaultdict(float)

    for deal in in_window:
        total += deal.amount
        share = deal.amount / len(deal.owners)
        for owner in deal.owners:
            by_owner[owner] += share
        if deal.link_key:
            by_link_key[deal.link_key] += 1
        day = _day_of_month(deal.created_date)
        if day is not None:
            by_day[day] += deal.amount

    logger.info(
        f"aggregate_deals {window.start}..{window.end}: revenue={total} count={len(in_window)}"
    )
    return AggregationResult(
        total_revenue=total,
        count=len(in_window),
        revenue_by_owner=MappingProxyType(dict(by_owner)),
        count_by_link_key=MappingProxyType(dict(by_link_key)),
        revenue_by_day_of_month=MappingProxyType(dict(by_day)),
    )


def count_created_on(records: Iterable[dict], day: str) -> int:
    """Post-migration deals created on one business day (contracts today / yesterday)."""
    window = DateWindow(day, day)
    return sum(1 for r in records if is_post_migration(r) and window.contains(deal_created_date(r)))
