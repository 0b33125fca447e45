"""Normalised ticket records built from HubSpot CRM objects."""
from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from dateutil import parser as date_parser

from .status import status_from_stage

LOGGER = logging.getLogger(__name__)

_EPOCH_MILLIS_MIN_DIGITS = 11
# Plain decimal text only: no currency symbols, group separators or underscores.
_DECIMAL_PATTERN = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)


def _as_utc(dt: datetime) -> datetime:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_timestamp(value: Any) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp, returning ``None`` when it is unusable."""
    if not value:
        return None
    if isinstance(value, datetime):
        return _as_utc(value)
    try:
        return _as_utc(date_parser.isoparse(str(value)))
    except (ValueError, TypeError, OverflowError):
        LOGGER.debug("Unable to parse timestamp %r", value)
        return None


def parse_birthday(value: Any) -> Optional[datetime]:
    """Parse a HubSpot date property.

    HubSpot returns date properties either as ``YYYY-MM-DD`` strings or as
    epoch milliseconds depending on the account, so both are accepted.
    """
    if not value:
        return None
    text = str(value).strip()
    try:
        if text.isdigit() and len(text) >= _EPOCH_MILLIS_MIN_DIGITS:
            return datetime.fromtimestamp(int(text) / 1000.0, tz=timezone.utc)
        return _as_utc(date_parser.parse(text))
    except (ValueError, TypeError, OverflowError, OSError):
        LOGGER.debug("Unable to parse birthday %r", value)
        return None


def parse_amount(value: Any) -> Optional[float]:
    """Parse a monetary amount stored as plain decimal text such as ``"1250.50"``.

    Formatted values like ``"$1,250"`` are rejected rather than guessed at.
    """
    if value is None:
        return None
    text = str(value).strip()
    if not _DECIMAL_PATTERN.fullmatch(text):
        if text:
            LOGGER.debug("Unable to parse amount %r", value)
        return None
    amount = float(text)
    if not math.isfinite(amount):
        return None
    return amount


@dataclass(frozen=True)
class TicketRecord:
    """Read-only view of one HubSpot ticket used by the dashboard."""

    id: str
    status: str
    created_at: Optional[str] = None
    properties: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "TicketRecord":
        properties = payload.get("properties") or {}
        if not isinstance(properties, dict):
            LOGGER.warning("Ticket %s has non-object properties; ignoring them", payload.get("id"))
            properties = {}
        return cls(
            id=str(payload.get("id", "")),
            status=status_from_stage(properties.get("hs_pipeline_stage")),
            created_at=properties.get("createdate"),
            properties=dict(properties),
        )

    def prop(self, name: str) -> Any:
        return self.properties.get(name)

    @property
    def created_datetime(self) -> Optional[datetime]:
        return parse_timestamp(self.created_at)

    @property
    def crisis_wish_amount(self) -> Optional[float]:
        return parse_amount(self.prop("crisis_wish"))

    @property
    def service_provided(self) -> Optional[str]:
        service = self.prop("service_provided")
        if service is None:
            return None
        service = str(service)
        if service in ("", "null"):
            return None
        return service

    def age_in_years(self, reference: datetime) -> Optional[int]:
        """Whole years between the birthday and ``reference`` using 365.25-day years."""
        birthday = parse_birthday(self.prop("birthday"))
        if birthday is None:
            return None
        delta = _as_utc(reference) - birthday
        return math.floor(delta.total_seconds() / (365.25 * 86400))
