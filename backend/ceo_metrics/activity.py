"""
Leads and Events (meetings) for one date window.

Unlike Deals, both modules are filtered by date inside the COQL WHERE clause,
so each window costs one paginated select. A failed select yields an empty
summary; the snapshot renders with partial data instead of failing.
"""

from __future__ import annotations

import logging
from collections import Counter, defaultdict
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Iterable, Mapping, Optional

from crm_adapters import QuerySource
from ceo_metrics.brands import BrandBucket
from ceo_metrics.config import COQL_PAGE_DELAY, COQL_PAGE_SIZE, FALLBACK_UTC_OFFSET
from ceo_metrics.normalizer import UNKNOWN_OWNER, lookup_name, parse_amount
from ceo_metrics.pagination import fetch_all

logger = logging.getLogger(__name__)

DEFAULT_LEAD_SOURCE = "Direct"
DEFAULT_STAGE = "None"
DEFAULT_BRAND = "Other"


class SourceChannel(str, Enum):
    MARKETING = "Marketing"
    PARTNER = "Partner"
    OTHER = "Other"


def classify_source(label: Optional[str]) -> SourceChannel:
    """Coarse channel from a free-text lead source (case-insensitive substring match)."""
    text = (label or "").lower()
    if "marketing" in text or "digital" in text:
        return SourceChannel.MARKETING
    if "partner" in text or "canvassing" in text:
        return SourceChannel.PARTNER
    return SourceChannel.OTHER


def _frozen(mapping: Mapping) -> Mapping:
    return MappingProxyType(dict(mapping))


# ---------------------------------------------------------------------------
# Leads
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class LeadSummary:
    count: int = 0
    count_by_source: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))


def lead_source_label(record: dict) -> str:
    return str(record.get("Lead_Source") or DEFAULT_LEAD_SOURCE).strip() or DEFAULT_LEAD_SOURCE


def summarize_leads(records: Iterable[dict]) -> LeadSummary:
    records = list(records)
    by_source = Counter(lead_source_label(r) for r in records)
    return LeadSummary(count=len(records), count_by_source=_frozen(by_source))


def leads_query(start: str, end: str, utc_offset: str) -> str:
    # COQL wants full ISO 8601 datetimes with offset for Created_Time
    return (
        "select id,Lead_Source from Leads "
        f"where Created_Time >= '{start}T00:00:00{utc_offset}' "
        f"and Created_Time <= '{end}T23:59:59{utc_offset}'"
    )


async def fetch_leads(
    source: QuerySource,
    start: str,
    end: str,
    utc_offset: str = FALLBACK_UTC_OFFSET,
    page_size: int = COQL_PAGE_SIZE,
    delay: float = COQL_PAGE_DELAY,
) -> LeadSummary:
    if source is None or not source.is_ready:
        return LeadSummary()
    try:
        records = await fetch_all(source, leads_query(start, end, utc_offset), page_size=page_size, delay=delay)
    except Exception as e:
        logger.error(f"fetch_leads {start}..{end} failed: {e}")
        return LeadSummary()
    summary = summarize_leads(records)
    logger.info(f"fetch_leads {start}..{end}: count={summary.count} by_source={dict(summary.count_by_source)}")
    return summary


# ---------------------------------------------------------------------------
# Events (meetings)
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class EventFacts:
    stage: str
    owner_name: str
    amount: float
    brand: str
    source_label: str


@dataclass(frozen=True)
class EventSummary:
    count: int = 0
    count_by_stage: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))
    revenue_by_owner: Mapping[str, float] = field(default_factory=lambda: MappingProxyType({}))
    brand_buckets: Mapping[str, BrandBucket] = field(default_factory=lambda: MappingProxyType({}))
    link_key_to_brand: Mapping[str, str] = field(default_factory=lambda: MappingProxyType({}))
    count_by_channel: Mapping[str, int] = field(
        default_factory=lambda: MappingProxyType({SourceChannel.MARKETING.value: 0, SourceChannel.PARTNER.value: 0})
    )


def event_facts(record: dict) -> EventFacts:
    stage = record.get("Meeting_Stage") or DEFAULT_STAGE
    return EventFacts(
        stage=str(stage).strip() or DEFAULT_STAGE,
        owner_name=lookup_name(record.get("Sales_Rep")) or UNKNOWN_OWNER,
        amount=parse_amount(record.get("Amount")),
        brand=lookup_name(record.get("Brand")) or DEFAULT_BRAND,
        source_label=str(record.get("Lead_Source") or ""),
    )


def summarize_events(records: Iterable[dict]) -> EventSummary:
    records = list(records)
    by_stage: Counter = Counter()
    by_owner: dict[str, float] = defaultdict(float)
    meetings_by_brand: Counter = Counter()
    link_key_to_brand: dict[str, str] = {}
    by_channel = {SourceChannel.MARKETING.value: 0, SourceChannel.PARTNER.value: 0}

    for record in records:
        facts = event_facts(record)
        by_stage[facts.stage] += 1
        by_owner[facts.owner_name] += facts.amount
        meetings_by_brand[facts.brand] += 1
        if record.get("id"):
            link_key_to_brand[str(record["id"])] = facts.brand
        channel = classify_source(facts.source_label)
        if channel is not SourceChannel.OTHER:
            by_channel[channel.value] += 1

    return EventSummary(
        count=len(records),
        count_by_stage=_frozen(by_stage),
        revenue_by_owner=_frozen(by_owner),
        brand_buckets=_frozen({b: BrandBucket(meetings=n) for b, n in meetings_by_brand.items()}),
        link_key_to_brand=_frozen(link_key_to_brand),
        count_by_channel=_frozen(by_channel),
    )


def events_query(start: str, end: str, utc_offset: str) -> str:
    return (
        "select id,Meeting_Stage,Sales_Rep,Amount,Brand,Lead_Source from Events "
        f"where Start_DateTime between '{start}T00:00:00{utc_offset}' and '{end}T23:59:59{utc_offset}'"
    )


async def fetch_events(
    source: QuerySource,
    start: str,
    end: str,
    utc_offset: str = FALLBACK_UTC_OFFSET,
    page_size: int = COQL_PAGE_SIZE,
    delay: float = COQL_PAGE_DELAY,
) -> EventSummary:
    if source is None or not source.is_ready:
        return EventSummary()
    try:
        records = await fetch_all(source, events_query(start, end, utc_offset), page_size=page_size, delay=delay)
    except Exception as e:
        logger.error(f"fetch_events {start}..{end} failed: {e}")
        return EventSummary()
    summary = summarize_events(records)
    logger.info(f"fetch_events {start}..{end}: count={summary.count} stages={list(summary.count_by_stage)}")
    return summary
