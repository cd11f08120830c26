"""
Zoho CRM COQL client.
Read-only access to Deals / Leads / Events through the COQL endpoint, any datacenter.
"""

import asyncio
import logging
import os
import time
from collections import deque
from typing import Any, Dict, Optional

import httpx

logger = logging.getLogger(__name__)

ZOHO_TIMEOUT = 30.0
# COQL shares the org-wide API credit pool; stay well under the burst limit
ZOHO_COQL_CALLS_PER_WINDOW = 5
ZOHO_COQL_WINDOW_SECONDS = 1.0

ZOHO_ACCESS_TOKEN = os.environ.get("ZOHO_ACCESS_TOKEN", "")
ZOHO_DATACENTER = os.environ.get("ZOHO_DATACENTER", "us")
ZOHO_API_DOMAIN = os.environ.get("ZOHO_API_DOMAIN") or None

COQL_PATH = "/crm/v7/coql"

ZOHO_API_HOSTS = {
    "us": "https://www.zohoapis.com",
    "eu": "https://www.zohoapis.eu",
    "in": "https://www.zohoapis.in",
    "au": "https://www.zohoapis.com.au",
    "jp": "https://www.zohoapis.jp",
    "ca": "https://www.zohoapis.ca",
}

_STATUS_MESSAGES = {
    401: "Authentication failed. Access token invalid or expired",
    403: "Access denied. Token lacks the ZohoCRM.coql.READ scope",
    429: "Rate limit exceeded",
}


class CoqlThrottle:
    """Sliding-window throttle shared by every client talking to one API host."""

    def __init__(self, calls: int = ZOHO_COQL_CALLS_PER_WINDOW, window: float = ZOHO_COQL_WINDOW_SECONDS):
        self.calls = calls
        self.window = window
        self._sent: dict[str, deque] = {}
        self._lock = asyncio.Lock()

    async def wait(self, host: str):
        async with self._lock:
            sent = self._sent.setdefault(host, deque())
            now = time.monotonic()
            while sent and now - sent[0] >= self.window:
                sent.popleft()
            if len(sent) >= self.calls:
                pause = self.window - (now - sent[0])
                if pause > 0:
                    logger.debug(f"COQL throttle: sleeping {pause:.2f}s for {host}")
                    await asyncio.sleep(pause)
                sent.popleft()
            sent.append(time.monotonic())


_coql_throttle = CoqlThrottle()


class ZohoAPIError(Exception):
    """A COQL request that did not produce rows: HTTP error, timeout or connection failure."""

    def __init__(self, message: str, status_code: Optional[int] = None, code: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.code = code


def _error_code(response: httpx.Response) -> Optional[str]:
    """Zoho puts a machine-readable code (e.g. INVALID_QUERY) in the error body."""
    try:
        body = response.json()
    except ValueError:
        return None
    return body.get("code") if isinstance(body, dict) else None


class ZohoCRM:
    """COQL client bound to one access token and datacenter."""

    def __init__(self, access_token: str, datacenter: str = "us", api_domain: str = None):
        self.access_token = access_token
        self.datacenter = datacenter
        self.api_base = (api_domain or ZOHO_API_HOSTS.get(datacenter, ZOHO_API_HOSTS["us"])).rstrip("/")

    @classmethod
    def from_env(cls) -> "ZohoCRM":
        return cls(access_token=ZOHO_ACCESS_TOKEN, datacenter=ZOHO_DATACENTER, api_domain=ZOHO_API_DOMAIN)

    @property
    def is_configured(self) -> bool:
        return bool(self.access_token)

    async def coql(self, select_query: str) -> Dict[str, Any]:
        """
        Run one COQL select and return the raw envelope ({"data": [...], "info": {...}}).

        Zoho answers 204 when nothing matches, and 400 INVALID_QUERY when the
        select names a field the org does not have. The former comes back as
        an empty dict, the latter as ZohoAPIError.
        """
        await _coql_throttle.wait(self.api_base)
        headers = {"Authorization": f"Zoho-oauthtoken {self.access_token}"}

        try:
            async with httpx.AsyncClient(base_url=self.api_base, timeout=ZOHO_TIMEOUT) as client:
                response = await client.post(COQL_PATH, headers=headers, json={"select_query": select_query})
        except httpx.TimeoutException:
            raise ZohoAPIError(f"COQL timeout after {ZOHO_TIMEOUT:.0f}s")
        except httpx.RequestError as e:
            raise ZohoAPIError(f"Connection error: {e}")

        if response.status_code == 204:
            return {}
        if response.status_code >= 400:
            code = _error_code(response)
            message = _STATUS_MESSAGES.get(response.status_code, f"COQL error {response.status_code}")
            if code:
                message = f"{message} ({code})"
            logger.error(f"Zoho COQL {response.status_code} {code or ''}: {response.text[:300]}")
            raise ZohoAPIError(message, status_code=response.status_code, code=code)
        return response.json()
