"""
Query Source Factory.
Creates the appropriate source based on CRM type and credentials.
"""

from .base import QueryPage, QuerySource
from .zoho_adapter import ZohoCoqlSource


def create_source(crm_type: str, credentials: dict = None) -> QuerySource:
    """
    Factory function to create the appropriate query source.

    Args:
        crm_type: CRM type string (only 'zoho' speaks COQL)
        credentials: Optional dict with access_token / datacenter / api_domain.
                     Falls back to ZOHO_* environment variables when omitted.

    Returns:
        QuerySource instance

    Raises:
        ValueError: If CRM type is not supported
    """
    if crm_type == "zoho":
        from zoho_crm import ZohoCRM
        if credentials is None:
            return ZohoCoqlSource(ZohoCRM.from_env())
        client = ZohoCRM(
            access_token=credentials.get("access_token", ""),
            datacenter=credentials.get("datacenter", "us"),
            api_domain=credentials.get("api_domain"),
        )
        return ZohoCoqlSource(client)

    raise ValueError(f"Unsupported CRM type: {crm_type}")


__all__ = [
    "QueryPage",
    "QuerySource",
    "ZohoCoqlSource",
    "create_source",
]
