"""Headline counters shown at the top of the dashboard."""
from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from datetime import datetime, time, timedelta
from typing import Dict, Iterable, Optional

from .status import is_closed, is_open
from .tickets import TicketRecord

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class DashboardStats:
    open_tickets: int = 0
    new_tickets_this_week: int = 0
    osw_count: int = 0
    staffmark_count: int = 0
    closed_tickets: int = 0

    def to_dict(self) -> Dict[str, int]:
        return asdict(self)


def start_of_week(now: Optional[datetime] = None) -> datetime:
    """Return the most recent Sunday at midnight.

    Naive values (and the default) are interpreted as local time; aware values
    keep their own timezone. The result is always timezone-aware.
    """
    now = now or datetime.now()
    days_since_sunday = (now.weekday() + 1) % 7
    sunday = now.date() - timedelta(days=days_since_sunday)
    if now.tzinfo is None:
        return datetime.combine(sunday, time()).astimezone()
    return datetime.combine(sunday, time(), tzinfo=now.tzinfo)


def compute_dashboard_stats(
    tickets: Iterable[TicketRecord], now: Optional[datetime] = None
) -> DashboardStats:
    tickets = list(tickets)
    week_start = start_of_week(now)

    created = (ticket.created_datetime for ticket in tickets)
    new_this_week = sum(1 for dt in created if dt is not None and dt >= week_start)

    stats = DashboardStats(
        open_tickets=sum(1 for ticket in tickets if is_open(ticket.status)),
        new_tickets_this_week=new_this_week,
        osw_count=sum(1 for ticket in tickets if ticket.status == "IN_PROCESS_OSW"),
        staffmark_count=sum(1 for ticket in tickets if ticket.status == "IN_PROCESS_STAFFMARK"),
        closed_tickets=sum(1 for ticket in tickets if is_closed(ticket.status)),
    )
    LOGGER.info("Dashboard stats: %s", stats.to_dict())
    return stats
