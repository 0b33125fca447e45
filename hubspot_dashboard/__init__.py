"""HubSpot ticket reporting dashboard."""

from .config import ConfigError, load_config, resolve_path
from .logging_setup import configure_logging
from .hubspot_client import HubSpotAPIError, HubSpotClient
from .tickets import TicketRecord
from .aggregation import DashboardStats, compute_dashboard_stats
from .charts import ChartPayload, build_charts
from .dashboard import DashboardResponse, build_dashboard, load_dashboard

__all__ = [
    "ConfigError",
    "load_config",
    "resolve_path",
    "configure_logging",
    "HubSpotAPIError",
    "HubSpotClient",
    "TicketRecord",
    "DashboardStats",
    "compute_dashboard_stats",
    "ChartPayload",
    "build_charts",
    "DashboardResponse",
    "build_dashboard",
    "load_dashboard",
]
