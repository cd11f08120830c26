"""
MetricsSnapshot: the single value returned by compute_metrics().

Pydantic models so the snapshot serializes straight to JSON for the API and
for export. Frozen: callers that need the last snapshot (e.g. for export) keep
the returned value themselves.
"""

from dataclasses import asdict
from types import MappingProxyType
from typing import Annotated, Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer, PlainValidator

from ceo_metrics.activity import LeadSummary, SourceChannel
from ceo_metrics.brands import BrandBucket
from ceo_metrics.leaderboard import LeaderboardEntry
from ceo_metrics.normalizer import round_half_away, round_half_up
from ceo_metrics.projection import ProjectionSeries
from ceo_metrics.status_funnel import CanonicalStatus


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True)


def _read_only(value: Mapping) -> Mapping:
    return MappingProxyType(dict(value))


def _as_dict(value: Mapping) -> dict:
    return dict(value)


def _brand_rows(value: Mapping) -> dict:
    return {brand: asdict(bucket) for brand, bucket in value.items()}


# frozen=True only blocks reassignment; table fields are also read-only views
StatusCounts = Annotated[Mapping[str, int], PlainValidator(_read_only), PlainSerializer(_as_dict)]
BrandTable = Annotated[Mapping[str, BrandBucket], PlainValidator(_read_only), PlainSerializer(_brand_rows)]


class TopLineMetrics(_Frozen):
    """Revenue compares period vs previous period; leads/meetings/deals compare today vs yesterday."""
    revenue: float = 0.0
    previous_revenue: float = 0.0
    revenue_change_pct: int = 0
    revenue_direction: str = "up"    # "up" | "down"
    leads: int = 0
    previous_leads: int = 0
    leads_change_pct: int = 0
    leads_direction: str = "up"
    meetings: int = 0
    previous_meetings: int = 0
    meetings_change_pct: int = 0
    meetings_direction: str = "up"
    deals: int = 0
    previous_deals: int = 0
    deals_change_pct: int = 0
    deals_direction: str = "up"


class MarketingSummary(_Frozen):
    marketing_leads: int = 0
    partner_leads: int = 0
    meetings: int = 0
    deals: int = 0


class Capacity(_Frozen):
    """Canvassing vs Digital split of the period's leads."""
    canvassing: int = 0
    digital: int = 0
    total: int = 0
    canvassing_pct: int = 50
    digital_pct: int = 50


class DateRange(_Frozen):
    start: str
    end: str


class MetricsSnapshot(_Frozen):
    filter: str
    metrics: TopLineMetrics
    leaderboard: tuple[LeaderboardEntry, ...] = ()
    status_counts: StatusCounts = Field(
        default_factory=lambda: MappingProxyType({status.value: 0 for status in CanonicalStatus})
    )
    marketing_summary: MarketingSummary = Field(default_factory=MarketingSummary)
    brand_performance: BrandTable = Field(default_factory=lambda: MappingProxyType({}))
    date_range: DateRange
    projection: Optional[ProjectionSeries] = None   # month filter only
    capacity: Capacity = Field(default_factory=Capacity)


# ---------------------------------------------------------------------------
# Trend math
# ---------------------------------------------------------------------------

def revenue_change_pct(current: float, previous: float) -> int:
    if previous > 0:
        return round_half_away((current - previous) / previous * 100)
    return 0


def count_change_pct(current: int, previous: int) -> int:
    """Like revenue_change_pct, but growth from zero reads as +100%."""
    if previous > 0:
        return round_half_away((current - previous) / previous * 100)
    return 100 if current > 0 else 0


def direction(current: float, previous: float) -> str:
    return "up" if current >= previous else "down"


# ---------------------------------------------------------------------------
# Lead breakdowns
# ---------------------------------------------------------------------------

# Marketing summary counts these exact Lead_Source labels only
CHANNEL_LEAD_LABELS = {
    SourceChannel.MARKETING: ("Marketing", "Digital"),
    SourceChannel.PARTNER: ("Partner", "Canvassing"),
}


def channel_lead_counts(count_by_source: Mapping[str, int]) -> dict[SourceChannel, int]:
    return {
        channel: sum(count_by_source.get(label, 0) for label in labels)
        for channel, labels in CHANNEL_LEAD_LABELS.items()
    }


def build_capacity(leads: LeadSummary) -> Capacity:
    canvassing = sum(
        count for label, count in leads.count_by_source.items()
        if label and "canvassing" in str(label).lower()
    )
    total = leads.count
    digital = max(0, total - canvassing)
    if total <= 0:
        return Capacity(canvassing=canvassing, digital=digital, total=total)

    canvassing_pct = round_half_up(canvassing / total * 100)
    digital_pct = round_half_up(digital / total * 100)
    if canvassing_pct + digital_pct != 100:
        digital_pct = 100 - canvassing_pct
    return Capacity(
        canvassing=canvassing,
        digital=digital,
        total=total,
        canvassing_pct=canvassing_pct,
        digital_pct=digital_pct,
    )


# ---------------------------------------------------------------------------
# Export
# ---------------------------------------------------------------------------

def export_metrics(snapshot: MetricsSnapshot) -> dict[str, Any]:
    """Flat label -> value mapping of a snapshot, in display order."""
    m = snapshot.metrics
    kv: dict[str, Any] = {
        "Date Range": f"{snapshot.date_range.start} to {snapshot.date_range.end}",
        "Revenue": m.revenue,
        "Revenue Trend %": m.revenue_change_pct,
        "Leads Today": m.leads,
        "Meetings Today": m.meetings,
        "Contracts Today": m.deals,
    }
    for status in CanonicalStatus:
        kv[f"Status - {status.value}"] = snapshot.status_counts.get(status.value, 0)

    ms = snapshot.marketing_summary
    kv["Marketing Leads"] = ms.marketing_leads
    kv["Partner Leads"] = ms.partner_leads
    kv["Marketing Meetings"] = ms.meetings
    kv["Marketing Deals"] = ms.deals

    cap = snapshot.capacity
    kv["Capacity - Canvassing"] = cap.canvassing
    kv["Capacity - Digital"] = cap.digital
    kv["Capacity - Canvassing %"] = f"{cap.canvassing_pct}%"

    for entry in snapshot.leaderboard:
        kv[f"Sales Rep #{entry.rank}"] = f"{entry.name}: ${entry.revenue:,.2f}"

    for brand, bucket in snapshot.brand_performance.items():
        kv[f"Brand {brand} - Leads"] = bucket.leads
        kv[f"Brand {brand} - Meetings"] = bucket.meetings
        kv[f"Brand {brand} - Deals"] = bucket.deals

    return kv
