"""
Sales rep leaderboard built from per-owner deal revenue.
"""

from dataclasses import dataclass
from typing import Mapping

from ceo_metrics.config import LEADERBOARD_SIZE
from ceo_metrics.normalizer import round_half_up


@dataclass(frozen=True)
class LeaderboardEntry:
    rank: int
    name: str
    initials: str
    revenue: float
    percent_of_leader: int


def initials(name: str) -> str:
    if not name or not isinstance(name, str) or not name.strip():
        return "??"
    parts = name.strip().split()
    if len(parts) >= 2:
        return (parts[0][0] + parts[-1][0]).upper()
    return name.strip()[:2].upper()


def build_leaderboard(revenue_by_owner: Mapping[str, float], size: int = LEADERBOARD_SIZE) -> list[LeaderboardEntry]:
    """Top `size` reps by revenue; non-positive revenue never ranks. Leader is always 100%."""
    ranked = sorted(
        ((name, revenue) for name, revenue in revenue_by_owner.items() if revenue > 0),
        key=lambda item: item[1],
        reverse=True,
    )[:size]
    if not ranked:
        return []

    top_revenue = ranked[0][1]
    return [
        LeaderboardEntry(
            rank=i,
            name=name,
            initials=initials(name),
            revenue=revenue,
            percent_of_leader=round_half_up(revenue / top_revenue * 100),
        )
        for i, (name, revenue) in enumerate(ranked, start=1)
    ]
