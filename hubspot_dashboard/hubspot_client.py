"""HTTP client for the HubSpot CRM tickets API."""
from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Generator, List, Optional, Sequence
from urllib.parse import urljoin

import requests

from .tickets import TicketRecord

LOGGER = logging.getLogger(__name__)

TICKETS_PATH = "/crm/v3/objects/tickets"

TICKET_PROPERTIES: Sequence[str] = (
    "subject",
    "content",
    "hs_pipeline_stage",
    "hs_ticket_priority",
    "source_type",
    "hs_ticket_category",
    "hubspot_owner_id",
    "createdate",
    "hs_lastmodifieddate",
    "closed_date",
    "time_to_close",
    "service_provided",
    "county",
    "zip_code_for_request",
    "amount_needed",
    "crisis_wish",
    "birthday",
)


class HubSpotAPIError(requests.HTTPError):
    """Raised when HubSpot answers with a non-success status or a malformed body."""


def _next_cursor(paging: Any) -> Optional[str]:
    if paging is None:
        return None
    if not isinstance(paging, dict) or not isinstance(paging.get("next") or {}, dict):
        raise HubSpotAPIError("HubSpot API error: malformed paging cursor")
    after = (paging.get("next") or {}).get("after")
    return str(after) if after else None


class HubSpotClient:
    """Wrapper around the HubSpot CRM API used to read tickets."""

    def __init__(
        self,
        *,
        base_url: str,
        api_key: str,
        verify_ssl: bool = True,
        timeout: int = 30,
        page_size: int = 100,
    ) -> None:
        self.base_url = base_url.strip().rstrip("/")
        self.session = requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        })
        self.verify_ssl = verify_ssl
        self.timeout = timeout
        self.page_size = min(max(page_size, 1), 100)  # API maximum is 100

    # -- Low level request helpers -------------------------------------------------
    def _request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        url = self._build_url(path)
        LOGGER.debug("HTTP %s %s params=%s", method, url, kwargs.get("params"))
        response = self.session.request(
            method,
            url,
            timeout=self.timeout,
            verify=self.verify_ssl,
            **kwargs,
        )
        LOGGER.debug("Response status=%s", response.status_code)
        if not response.ok:
            raise HubSpotAPIError(
                f"HubSpot API error: {response.status_code} {response.reason}",
                response=response,
            )
        if not response.content:
            return {}
        payload = response.json()
        if not isinstance(payload, dict):
            raise HubSpotAPIError(
                f"HubSpot API error: expected a JSON object, got {type(payload).__name__}",
                response=response,
            )
        return payload

    def _build_url(self, path: str) -> str:
        return urljoin(self.base_url + "/", path.lstrip("/"))

    # -- Public API ----------------------------------------------------------------
    def iter_tickets(
        self,
        *,
        properties: Sequence[str] = TICKET_PROPERTIES,
        progress_callback: Optional[Callable[[int], None]] = None,
    ) -> Generator[Dict[str, Any], None, None]:
        """Yield raw ticket objects, following the ``paging.next.after`` cursor.

        ``progress_callback`` receives the cumulative number of tickets
        fetched after each page.
        """
        after: Optional[str] = None
        page = 1
        processed = 0
        while True:
            params: Dict[str, Any] = {
                "limit": self.page_size,
                "properties": ",".join(properties),
            }
            if after:
                params["after"] = after
            payload = self._request("GET", TICKETS_PATH, params=params)
            tickets = payload.get("results") or []
            if not isinstance(tickets, list):
                raise HubSpotAPIError("HubSpot API error: 'results' is not a list")
            LOGGER.info("Fetched %s tickets from page %s", len(tickets), page)
            for ticket in tickets:
                if not isinstance(ticket, dict):
                    raise HubSpotAPIError("HubSpot API error: ticket entry is not an object")
                yield ticket
            processed += len(tickets)
            if progress_callback:
                progress_callback(processed)
            after = _next_cursor(payload.get("paging"))
            if not after:
                break
            page += 1

    def fetch_ticket_records(
        self, progress_callback: Optional[Callable[[int], None]] = None
    ) -> List[TicketRecord]:
        """Return the full normalised ticket collection or raise."""
        records = [
            TicketRecord.from_api(ticket)
            for ticket in self.iter_tickets(progress_callback=progress_callback)
        ]
        LOGGER.info("Fetched %s tickets", len(records))
        return records
