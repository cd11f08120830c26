"""
Brand performance: joins deal counts onto event brands through the meeting link key.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from ceo_metrics.activity import EventSummary
    from ceo_metrics.aggregation import AggregationResult

UNRESOLVED_BRAND = "Other"


@dataclass(frozen=True)
class BrandBucket:
    leads: int = 0
    meetings: int = 0
    deals: int = 0


def merge_brand_performance(events: EventSummary, deals: AggregationResult) -> dict[str, BrandBucket]:
    """
    Brand table = event buckets (deals reset to 0) + deal counts per link key.

    Deals whose meeting reference is not among the window's events land in
    "Other"; a brand first seen through a deal starts from a zeroed bucket.
    """
    performance = {brand: replace(bucket, deals=0) for brand, bucket in events.brand_buckets.items()}
    for link_key, deal_count in deals.count_by_link_key.items():
        brand = events.link_key_to_brand.get(link_key, UNRESOLVED_BRAND)
        bucket = performance.get(brand, BrandBucket())
        performance[brand] = replace(bucket, deals=bucket.deals + deal_count)
    return performance
