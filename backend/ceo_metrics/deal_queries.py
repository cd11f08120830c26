"""
Schema-fallback query chain for Deals.

Zoho orgs provision different optional fields (Owner vs Sales_Rep,
Close_Date vs Closing_Date, Meeting_ID vs Events). A COQL select naming a
missing field fails outright, so the chain walks from the richest field set to
a minimal guaranteed one and keeps the first select that executes.

A select that executes but matches zero rows is a valid answer and ends the
chain; only an error advances it.
"""

import logging
from dataclasses import dataclass

from crm_adapters import QuerySource
from ceo_metrics.config import COQL_MAX_PAGES, COQL_PAGE_DELAY, COQL_PAGE_SIZE
from ceo_metrics.pagination import PaginationLimitExceeded, fetch_all

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DealQueryVariant:
    """One schema guess for the Deals module."""
    name: str
    select_query: str

    async def fetch(self, source: QuerySource, page_size: int = COQL_PAGE_SIZE,
                    delay: float = COQL_PAGE_DELAY, max_pages: int = COQL_MAX_PAGES) -> list[dict]:
        return await fetch_all(source, self.select_query, page_size=page_size, delay=delay, max_pages=max_pages)


# Most informative first. COQL requires a WHERE clause, hence the `is not null` guards.
DEAL_QUERY_CHAIN: tuple[DealQueryVariant, ...] = (
    DealQueryVariant(
        "meeting_id_closing_date",
        "select id,Amount,Deal_Name,Stage,Sales_Rep,Sales_Rep_2,Trainee,Close_Date,Closing_Date,"
        "Created_Time,Modified_Time,Account_Name,Meeting_ID,OLD_CRM_ID from Deals where Meeting_ID is not null",
    ),
    DealQueryVariant(
        "events_lookup",
        "select id,Amount,Deal_Name,Stage,Sales_Rep,Sales_Rep_2,Trainee,Close_Date,"
        "Created_Time,Modified_Time,Events,OLD_CRM_ID from Deals where Events is not null",
    ),
    DealQueryVariant(
        "meeting_id",
        "select id,Amount,Deal_Name,Stage,Sales_Rep,Sales_Rep_2,Trainee,Close_Date,"
        "Created_Time,Modified_Time,Meeting_ID,OLD_CRM_ID from Deals where Meeting_ID is not null",
    ),
    DealQueryVariant(
        "owner_and_reps",
        "select id,Amount,Deal_Name,Stage,Owner,Sales_Rep,Sales_Rep_2,Trainee,Close_Date,"
        "Created_Time,Modified_Time,OLD_CRM_ID from Deals where id is not null",
    ),
    DealQueryVariant(
        "reps_close_date",
        "select id,Amount,Deal_Name,Sales_Rep,Sales_Rep_2,Trainee,Close_Date,"
        "Created_Time,Modified_Time,OLD_CRM_ID from Deals where id is not null",
    ),
    DealQueryVariant(
        "reps_closing_date",
        "select id,Amount,Sales_Rep,Sales_Rep_2,Trainee,Closing_Date,"
        "Created_Time,Modified_Time,OLD_CRM_ID from Deals where id is not null",
    ),
    DealQueryVariant(
        "reps_only",
        "select id,Amount,Sales_Rep,Sales_Rep_2,Trainee,Created_Time,Modified_Time,OLD_CRM_ID "
        "from Deals where id is not null",
    ),
    DealQueryVariant(
        "minimal",
        "select id,Amount,Created_Time,Modified_Time from Deals where id is not null",
    ),
)


async def fetch_deals(
    source: QuerySource,
    chain: tuple[DealQueryVariant, ...] = DEAL_QUERY_CHAIN,
    page_size: int = COQL_PAGE_SIZE,
    delay: float = COQL_PAGE_DELAY,
    max_pages: int = COQL_MAX_PAGES,
) -> list[dict]:
    """
    Fetch all Deals through the first schema variant that executes.

    Returns [] when the source is not ready, every variant fails, or the
    Deals module is larger than the page cap allows.
    """
    if source is None or not source.is_ready:
        logger.info("fetch_deals SKIP - query source not ready")
        return []

    for index, variant in enumerate(chain, start=1):
        try:
            deals = await variant.fetch(source, page_size=page_size, delay=delay, max_pages=max_pages)
        except PaginationLimitExceeded as e:
            # not a schema problem; leaner variants would overflow the same way
            logger.error(f"Deal query {variant.name} too large, no deals loaded: {e}")
            return []
        except Exception as e:
            logger.warning(f"Deal query {index}/{len(chain)} ({variant.name}) failed: {e}")
            continue
        logger.info(f"Deal query {variant.name} succeeded with {len(deals)} records")
        return deals

    logger.error(f"All {len(chain)} deal queries failed")
    return []
