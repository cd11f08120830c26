"""
Paginated fetcher.
Pulls every record of one COQL select in bounded pages, sequentially.
"""

import asyncio
import logging

from crm_adapters import QuerySource
from ceo_metrics.config import COQL_MAX_PAGES, COQL_PAGE_DELAY, COQL_PAGE_SIZE

logger = logging.getLogger(__name__)


class PaginationLimitExceeded(Exception):
    """More pages remained after max_pages; the partial result is discarded."""


async def fetch_all(
    source: QuerySource,
    select_query: str,
    page_size: int = COQL_PAGE_SIZE,
    delay: float = COQL_PAGE_DELAY,
    max_pages: int = COQL_MAX_PAGES,
) -> list[dict]:
    """
    Run `select_query` with an increasing `limit offset,size` suffix until exhausted.

    Stops on an empty page, on more_available=False, or on a short page; any
    one of these is enough, so an inconsistent more_records flag cannot loop
    forever. Errors propagate: the caller either gets every record or an exception.
    Hitting max_pages while the source still reports more rows is an error too.
    """
    logger.debug(f"fetch_all START query={select_query[:80]}...")
    records: list[dict] = []
    offset = 0
    page_count = 0

    while True:
        page = await source.execute(f"{select_query} limit {offset},{page_size}")
        page_count += 1

        if not page.records:
            break
        records.extend(page.records)

        has_more = page.more_available and len(page.records) >= page_size
        if not has_more:
            break

        # Safety cap: prevent runaway pagination
        if page_count >= max_pages:
            logger.warning(f"Hit max_pages ({max_pages}) at offset {offset} with more rows pending")
            raise PaginationLimitExceeded(
                f"{select_query[:60]}... exceeded {max_pages} pages of {page_size}"
            )

        offset += page_size
        await asyncio.sleep(delay)

    logger.debug(f"fetch_all END pages={page_count} total={len(records)}")
    return records
