"""
CEO metrics settings.
Read once from the environment at import time; override via .env or the process env.
"""

import os

# All "today" / "week" / "month" boundaries are computed in this zone
BUSINESS_TIMEZONE = os.environ.get("CEO_BUSINESS_TIMEZONE", "America/Chicago")
FALLBACK_UTC_OFFSET = os.environ.get("CEO_FALLBACK_UTC_OFFSET", "-06:00")

# Zoho allows up to 200 rows per COQL page
COQL_PAGE_SIZE = int(os.environ.get("COQL_PAGE_SIZE", "200"))
COQL_PAGE_DELAY = float(os.environ.get("COQL_PAGE_DELAY", "0.1"))

# Safety cap: 200 pages x 200 rows = 40,000 records per query
COQL_MAX_PAGES = int(os.environ.get("COQL_MAX_PAGES", "200"))

LEADERBOARD_SIZE = int(os.environ.get("CEO_LEADERBOARD_SIZE", "5"))
