"""
Status funnel classifier.
Maps free-text Meeting_Stage values onto five canonical funnel buckets.
"""

from enum import Enum
from typing import Mapping, Optional


class CanonicalStatus(str, Enum):
    CLOSED = "Closed"
    CONTACTED = "Contacted"
    CANCELLED = "Cancelled"
    NO_SHOW = "No Show"
    INITIALLY = "Initially"


STAGE_TO_STATUS: dict[str, CanonicalStatus] = {
    "Contract Signed": CanonicalStatus.CLOSED,
    "Full Demo Financial TD": CanonicalStatus.CONTACTED,
    "Full Demo No Sale": CanonicalStatus.CONTACTED,
    "Meeting Acknowledged": CanonicalStatus.CONTACTED,
    "One Leg": CanonicalStatus.CONTACTED,
    "Can Save": CanonicalStatus.CONTACTED,
    "Issued Appointment": CanonicalStatus.INITIALLY,
    "None": CanonicalStatus.INITIALLY,
    "Customer no show": CanonicalStatus.NO_SHOW,
    "Cancelled - Rescheduled": CanonicalStatus.CANCELLED,
    "Cancelled - Not Rescheduled": CanonicalStatus.CANCELLED,
    "Cancelled because unconfirmed": CanonicalStatus.CANCELLED,
    "ID - Not Interested": CanonicalStatus.CANCELLED,
    "ID - Ran OutofTime": CanonicalStatus.CANCELLED,
    "DNC": CanonicalStatus.CANCELLED,
    "No Rep Available": CanonicalStatus.CANCELLED,
}


def classify_stage(stage: Optional[str]) -> CanonicalStatus:
    """Unmapped or missing stages land in Initially."""
    if not stage:
        return CanonicalStatus.INITIALLY
    return STAGE_TO_STATUS.get(stage, CanonicalStatus.INITIALLY)


def aggregate_status_counts(count_by_stage: Mapping[str, int]) -> dict[str, int]:
    """Sum per-stage counts into all five statuses (zeros included)."""
    counts = {status.value: 0 for status in CanonicalStatus}
    for stage, count in (count_by_stage or {}).items():
        counts[classify_stage(stage).value] += count
    return counts
