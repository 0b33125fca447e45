"""Pipeline stage classification for HubSpot tickets."""
from __future__ import annotations

from types import MappingProxyType
from typing import Mapping, Optional

UNKNOWN_STATUS = "UNKNOWN"

STAGE_STATUS: Mapping[str, str] = MappingProxyType(
    {
        "1": "NEW",
        "2": "BACKLOG",
        "3": "RESOURCE_SUPPORT",
        "4": "CLOSED",
        "257285392": "WAITING_FOR_RESPONSE",
        "257285393": "COMPLETED",
        "1686843097": "IN_PROCESS_STAFFMARK",
        "1687677633": "EMPLOYMENT_SUPPORT",
        "999098012": "IN_PROCESS_OSW",
        "1746656967": "ARCHIVED",
    }
)

OPEN_STATUSES = frozenset(
    {
        "NEW",
        "BACKLOG",
        "RESOURCE_SUPPORT",
        "EMPLOYMENT_SUPPORT",
        "IN_PROCESS_STAFFMARK",
        "IN_PROCESS_OSW",
        "WAITING_FOR_RESPONSE",
    }
)
CLOSED_STATUSES = frozenset({"CLOSED", "COMPLETED", "ARCHIVED"})


def status_from_stage(stage_id: Optional[str]) -> str:
    """Map a raw ``hs_pipeline_stage`` value to its status label.

    Unrecognised stages become ``STAGE_<code>`` and fall outside both the open
    and closed sets.
    """
    if not stage_id:
        return UNKNOWN_STATUS
    stage = str(stage_id)
    return STAGE_STATUS.get(stage, f"STAGE_{stage}")


def is_open(status: str) -> bool:
    return status in OPEN_STATUSES


def is_closed(status: str) -> bool:
    return status in CLOSED_STATUSES
