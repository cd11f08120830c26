"""
CEO Overview metrics pipeline.

compute_metrics(): one call = one fresh MetricsSnapshot.

    resolve_period ─► fetch_deals (schema fallback, all dates)
                   ─► aggregate current / previous windows
                   ─► gather leads + events for current, previous, today, yesterday
                   ─► brand join, leaderboard, status funnel, projection (month only)

No step raises for data or transport problems. A missing/unready source, a
failed schema variant or a failed lead/event select each degrade to empty
aggregates, so the snapshot always has the same shape.
"""

import asyncio
import logging
from datetime import datetime
from typing import Optional

from crm_adapters import QuerySource
from ceo_metrics.activity import SourceChannel, fetch_events, fetch_leads
from ceo_metrics.aggregation import DateWindow, aggregate_deals, count_created_on
from ceo_metrics.brands import merge_brand_performance
from ceo_metrics.config import COQL_PAGE_DELAY, COQL_PAGE_SIZE, LEADERBOARD_SIZE
from ceo_metrics.deal_queries import fetch_deals
from ceo_metrics.leaderboard import build_leaderboard
from ceo_metrics.periods import DEFAULT_FILTER, resolve_period
from ceo_metrics.projection import build_projection
from ceo_metrics.snapshot import (
    DateRange,
    MarketingSummary,
    MetricsSnapshot,
    TopLineMetrics,
    build_capacity,
    channel_lead_counts,
    count_change_pct,
    direction,
    revenue_change_pct,
)
from ceo_metrics.status_funnel import aggregate_status_counts

logger = logging.getLogger(__name__)


async def compute_metrics(
    source: Optional[QuerySource],
    filter_name: str = DEFAULT_FILTER,
    now: Optional[datetime] = None,
    page_size: int = COQL_PAGE_SIZE,
    delay: float = COQL_PAGE_DELAY,
) -> MetricsSnapshot:
    """
    Build the CEO snapshot for "today", "week" or "month" (default).

    Args:
        source: QuerySource to read Deals/Leads/Events from; None or not ready
                yields an all-zero snapshot
        filter_name: logical date filter; unknown values behave like "month"
        now: instant to resolve "today" from (default: current time)
        page_size / delay: pagination knobs, passed to every select
    """
    period = resolve_period(filter_name, now)
    logger.info(
        f"compute_metrics filter={period.filter} range={period.start}..{period.end} "
        f"previous={period.previous_start}..{period.previous_end} tz={period.utc_offset}"
    )

    all_deals = await fetch_deals(source, page_size=page_size, delay=delay)
    deals = aggregate_deals(all_deals, DateWindow(period.start, period.end))
    previous_deals = aggregate_deals(all_deals, DateWindow(period.previous_start, period.previous_end))

    knobs = {"page_size": page_size, "delay": delay}
    tz = period.utc_offset
    (
        leads,
        previous_leads,
        events,
        previous_events,
        today_leads,
        yesterday_leads,
        today_events,
        yesterday_events,
    ) = await asyncio.gather(
        fetch_leads(source, period.start, period.end, tz, **knobs),
        fetch_leads(source, period.previous_start, period.previous_end, tz, **knobs),
        fetch_events(source, period.start, period.end, tz, **knobs),
        fetch_events(source, period.previous_start, period.previous_end, tz, **knobs),
        fetch_leads(source, period.today, period.today, tz, **knobs),
        fetch_leads(source, period.yesterday, period.yesterday, tz, **knobs),
        fetch_events(source, period.today, period.today, tz, **knobs),
        fetch_events(source, period.yesterday, period.yesterday, tz, **knobs),
    )

    contracts_today = count_created_on(all_deals, period.today)
    contracts_yesterday = count_created_on(all_deals, period.yesterday)

    projection = None
    if period.filter == "month":
        projection = build_projection(
            deals,
            previous_deals,
            elapsed_days=period.elapsed_days,
            days_in_month=period.days_in_month,
            previous_days_in_month=period.previous_days_in_month,
        )

    metrics = TopLineMetrics(
        revenue=deals.total_revenue,
        previous_revenue=previous_deals.total_revenue,
        revenue_change_pct=revenue_change_pct(deals.total_revenue, previous_deals.total_revenue),
        revenue_direction=direction(deals.total_revenue, previous_deals.total_revenue),
        leads=today_leads.count,
        previous_leads=yesterday_leads.count,
        leads_change_pct=count_change_pct(today_leads.count, yesterday_leads.count),
        leads_direction=direction(today_leads.count, yesterday_leads.count),
        meetings=today_events.count,
        previous_meetings=yesterday_events.count,
        meetings_change_pct=count_change_pct(today_events.count, yesterday_events.count),
        meetings_direction=direction(today_events.count, yesterday_events.count),
        deals=contracts_today,
        previous_deals=contracts_yesterday,
        deals_change_pct=count_change_pct(contracts_today, contracts_yesterday),
        deals_direction=direction(contracts_today, contracts_yesterday),
    )

    channels = channel_lead_counts(leads.count_by_source)

    snapshot = MetricsSnapshot(
        filter=period.filter,
        metrics=metrics,
        leaderboard=build_leaderboard(deals.revenue_by_owner, size=LEADERBOARD_SIZE),
        status_counts=aggregate_status_counts(events.count_by_stage),
        marketing_summary=MarketingSummary(
            marketing_leads=channels[SourceChannel.MARKETING],
            partner_leads=channels[SourceChannel.PARTNER],
            meetings=events.count,
            deals=deals.count,
        ),
        brand_performance=merge_brand_performance(events, deals),
        date_range=DateRange(start=period.start, end=period.end),
        projection=projection,
        capacity=build_capacity(leads),
    )

    logger.info(
        f"compute_metrics DONE revenue={metrics.revenue} leads_today={metrics.leads} "
        f"meetings_today={metrics.meetings} contracts_today={metrics.deals} "
        f"previous_period_leads={previous_leads.count} previous_period_meetings={previous_events.count}"
    )
    return snapshot
