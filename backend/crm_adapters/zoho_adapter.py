"""
Zoho CRM Adapter.
Wraps ZohoCRM COQL access behind the QuerySource contract.
"""

import logging

from .base import QueryPage, QuerySource

logger = logging.getLogger(__name__)


class ZohoCoqlSource(QuerySource):
    """Query source backed by Zoho CRM COQL."""

    def __init__(self, client):
        """
        Args:
            client: ZohoCRM instance (from zoho_crm.py)
        """
        self.client = client

    @property
    def is_ready(self) -> bool:
        return self.client is not None and self.client.is_configured

    async def execute(self, query: str) -> QueryPage:
        result = await self.client.coql(query) or {}
        records = result.get("data") or []
        more = (result.get("info") or {}).get("more_records") is True
        logger.debug(f"COQL page: {len(records)} records, more={more}")
        return QueryPage(records=records, more_available=more)
