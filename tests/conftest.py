from __future__ import annotations

import sys
from pathlib import Path
from typing import Any, Dict, Optional

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from hubspot_dashboard.tickets import TicketRecord  # noqa: E402


def make_payload(
    ticket_id: str = "1",
    *,
    stage: Optional[str] = "1",
    created: Optional[str] = "2024-01-08T10:00:00Z",
    **properties: Any,
) -> Dict[str, Any]:
    props: Dict[str, Any] = {"hs_pipeline_stage": stage, "createdate": created}
    props.update(properties)
    return {"id": ticket_id, "properties": props}


def make_ticket(ticket_id: str = "1", **kwargs: Any) -> TicketRecord:
    return TicketRecord.from_api(make_payload(ticket_id, **kwargs))


@pytest.fixture(name="quiet_logging_config")
def fixture_quiet_logging_config() -> Dict[str, Any]:
    return {"logging": {"console": {"enabled": False}, "file": {"enabled": False}}}
