"""
Abstract query source.
All CRM-specific transport details live behind this abstraction.
The metrics engine never sees endpoints, tokens or response envelopes.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class QueryPage:
    """One page of raw records returned by a select."""
    records: list[dict] = field(default_factory=list)
    more_available: bool = False


class QuerySource(ABC):
    """One implementation per CRM. Executes select-like queries."""

    @property
    def is_ready(self) -> bool:
        """False when the host/credentials are not initialized; callers skip all fetches."""
        return True

    @abstractmethod
    async def execute(self, query: str) -> QueryPage:
        """
        Execute one query (already carrying its own offset/limit).

        Returns:
            QueryPage of raw records

        Raises:
            Any transport or query error. Callers decide whether to fall back.
        """
