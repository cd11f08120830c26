"""
Record normalizer.

Extracts typed facts from loosely-typed Zoho records. Field presence and shape
vary by org: lookups come back either as {"id", "name"} dicts or bare strings,
datetimes as ISO strings or {"date": ...} objects, amounts as numbers or
formatted strings. Every extractor degrades to a neutral default instead of raising.
"""

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Any, Optional

UNKNOWN_OWNER = "Unknown"

# Lookup fields that can carry a rep, in attribution order
DEAL_REP_FIELDS = ("Sales_Rep", "Sales_Rep_2", "Trainee")
DEAL_DATE_FIELDS = ("Close_Date", "Closing_Date", "Modified_Time", "Created_Time")
LINK_KEY_FIELDS = ("Meeting_ID", "Events")
MIGRATION_SENTINEL_FIELD = "OLD_CRM_ID"

_ISO_DATE_RE = re.compile(r"(\d{4})-(\d{2})-(\d{2})")
_AMOUNT_NOISE_RE = re.compile(r"[^0-9.\-]")
_FLOAT_PREFIX_RE = re.compile(r"-?(\d+\.?\d*|\.\d+)")


@dataclass(frozen=True)
class DealFacts:
    amount: float
    effective_date: Optional[str]
    created_date: Optional[str]
    owners: tuple[str, ...]
    is_post_migration: bool
    link_key: Optional[str]


def parse_amount(value: Any) -> float:
    """
    Lenient money parser.

    Numbers pass through (NaN -> 0). Strings lose everything except digits,
    '.' and '-', then the longest leading float is taken ("$1,234.50" -> 1234.5).
    """
    if value is None or isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        return 0.0 if math.isnan(value) else float(value)
    if isinstance(value, str):
        match = _FLOAT_PREFIX_RE.match(_AMOUNT_NOISE_RE.sub("", value))
        return float(match.group(0)) if match else 0.0
    return 0.0


def extract_date(value: Any) -> Optional[str]:
    """Return the YYYY-MM-DD part of a date/datetime field, or None when absent."""
    if not value:
        return None
    if isinstance(value, dict):
        if value.get("date"):
            return str(value["date"])
        value = str(value)
    text = str(value)
    match = _ISO_DATE_RE.search(text)
    return match.group(0) if match else text


def lookup_name(value: Any) -> Optional[str]:
    """Display name of a lookup field (dict or bare string); blank -> None."""
    if not value:
        return None
    name = (value.get("name") or value.get("id")) if isinstance(value, dict) else value
    if name is None:
        return None
    name = str(name).strip()
    return name or None


def is_post_migration(record: dict) -> bool:
    """True when the legacy-CRM id is absent/blank, i.e. the record was born in this CRM."""
    value = record.get(MIGRATION_SENTINEL_FIELD)
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def deal_owners(record: dict) -> tuple[str, ...]:
    """
    Reps credited on a deal, deduplicated in field order.

    Owner is consulted only when Sales_Rep is empty. No reps at all means
    the synthetic "Unknown" owner, so revenue is never dropped.
    """
    lookups = [record.get(f) for f in DEAL_REP_FIELDS]
    if not lookup_name(record.get("Sales_Rep")):
        lookups.append(record.get("Owner"))

    owners: list[str] = []
    for lookup in lookups:
        name = lookup_name(lookup)
        if name and name not in owners:
            owners.append(name)
    return tuple(owners) or (UNKNOWN_OWNER,)


def deal_effective_date(record: dict) -> Optional[str]:
    for field_name in DEAL_DATE_FIELDS:
        if record.get(field_name):
            return extract_date(record[field_name])
    return None


def deal_created_date(record: dict) -> Optional[str]:
    return extract_date(record.get("Created_Time"))


def deal_link_key(record: dict) -> Optional[str]:
    """Meeting reference on a deal (Meeting_ID, else the Events lookup)."""
    lookup = None
    for field_name in LINK_KEY_FIELDS:
        if record.get(field_name):
            lookup = record[field_name]
            break
    key = lookup.get("id") if isinstance(lookup, dict) else lookup
    return str(key) if key else None


def deal_facts(record: dict) -> DealFacts:
    return DealFacts(
        amount=parse_amount(record.get("Amount")),
        effective_date=deal_effective_date(record),
        created_date=deal_created_date(record),
        owners=deal_owners(record),
        is_post_migration=is_post_migration(record),
        link_key=deal_link_key(record),
    )


def round_half_up(value: float) -> int:
    """Half-up rounding: 2.5 -> 3, -2.5 -> -2 (round(2.5) gives 2)."""
    return int(math.floor(value + 0.5))


def round_half_away(value: float) -> int:
    """Sign-symmetric rounding for trend percentages: 2.5 -> 3, -2.5 -> -3."""
    rounded = int(math.floor(abs(value) + 0.5))
    return -rounded if value < 0 else rounded
