"""Dashboard assembly: fetch, aggregate, chart and package one response."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

import requests

from .aggregation import DashboardStats, compute_dashboard_stats
from .charts import build_charts
from .config import DEFAULT_BASE_URL, ConfigError, load_config, resolve_api_key, resolve_path
from .hubspot_client import HubSpotClient
from .logging_setup import configure_logging
from .rendering import render_dashboard_html, save_dashboard_json
from .tickets import TicketRecord

LOGGER = logging.getLogger(__name__)


def _current_timestamp() -> str:
    return datetime.now().strftime("%Y%m%d-%H%M%S")


@dataclass(frozen=True)
class DashboardResponse:
    success: bool
    stats: Optional[DashboardStats] = None
    charts: Dict[str, str] = field(default_factory=dict)
    error: Optional[str] = None

    @classmethod
    def failure(cls, message: str) -> "DashboardResponse":
        return cls(success=False, error=message or "Failed to fetch dashboard data")

    def to_dict(self) -> Dict[str, Any]:
        if not self.success:
            return {"success": False, "error": self.error}
        return {
            "success": True,
            "stats": self.stats.to_dict() if self.stats else DashboardStats().to_dict(),
            "charts": dict(self.charts),
        }


@dataclass
class ExportOptions:
    config_path: Optional[str]
    output_directory: Optional[str]
    formats: Optional[List[str]] = None
    disable_console: bool = False
    simple_console: bool = False
    console_level: Optional[str] = None


def _config_int(hs_cfg: Dict[str, Any], key: str, default: int) -> int:
    value = hs_cfg.get(key, default)
    if isinstance(value, bool):
        raise ConfigError(f"hubspot.{key} must be an integer, got {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"hubspot.{key} must be an integer, got {value!r}") from exc


def create_client(config: Dict[str, Any]) -> HubSpotClient:
    hs_cfg = config.get("hubspot") or {}
    if not isinstance(hs_cfg, dict):
        raise ConfigError("The 'hubspot' configuration section must be a mapping")
    return HubSpotClient(
        base_url=hs_cfg.get("base_url") or DEFAULT_BASE_URL,
        api_key=resolve_api_key(config),
        verify_ssl=hs_cfg.get("verify_ssl", True),
        timeout=_config_int(hs_cfg, "timeout", 30),
        page_size=_config_int(hs_cfg, "page_size", 100),
    )


def build_dashboard(
    tickets: Sequence[TicketRecord], now: Optional[datetime] = None
) -> DashboardResponse:
    stats = compute_dashboard_stats(tickets, now)
    charts = build_charts(tickets, now)
    return DashboardResponse(
        success=True,
        stats=stats,
        charts={name: chart.to_json() for name, chart in charts.items()},
    )


def load_dashboard(
    config: Dict[str, Any],
    *,
    now: Optional[datetime] = None,
    progress_callback: Optional[Callable[[int], None]] = None,
) -> DashboardResponse:
    """Fetch every ticket and build the dashboard, never raising for upstream failures.

    ``progress_callback`` receives the running ticket count after each page.
    """
    try:
        client = create_client(config)
        LOGGER.info("Fetching HubSpot tickets...")
        tickets = client.fetch_ticket_records(progress_callback=progress_callback)
    except ConfigError as exc:
        LOGGER.error("Dashboard configuration error: %s", exc)
        return DashboardResponse.failure(str(exc))
    except requests.RequestException as exc:
        LOGGER.error("Error fetching HubSpot tickets: %s", exc)
        return DashboardResponse.failure(str(exc))
    return build_dashboard(tickets, now)


def _prepare_logging(config: dict, options: ExportOptions, *, base_dir: Path) -> None:
    logging_config = config.setdefault("logging", {})
    console_cfg = logging_config.setdefault("console", {})
    if options.disable_console:
        console_cfg["enabled"] = False
    if options.simple_console:
        console_cfg["rich_format"] = False
    if options.console_level:
        console_cfg["level"] = options.console_level
    configure_logging(config, base_dir=base_dir)


def _log_fetch_progress(processed: int) -> None:
    LOGGER.info("Fetched %s tickets so far", processed)


def export_dashboard(
    options: ExportOptions, *, base_dir: Optional[Path] = None
) -> tuple[Path, DashboardResponse]:
    """Write the dashboard as JSON and/or HTML into a timestamped directory."""
    base_dir = base_dir or Path.cwd()
    config = load_config(options.config_path)
    _prepare_logging(config, options, base_dir=base_dir)

    dashboard_cfg = config.get("dashboard", {})
    output_directory = resolve_path(
        options.output_directory or dashboard_cfg.get("output_directory", "reports"), base=base_dir
    )
    export_root = output_directory / f"dashboard_{_current_timestamp()}"
    export_root.mkdir(parents=True, exist_ok=True)

    response = load_dashboard(config, progress_callback=_log_fetch_progress)

    formats = options.formats or dashboard_cfg.get("formats", ["json", "html"])
    formats = [fmt.lower() for fmt in formats]

    if "json" in formats:
        json_path = export_root / "dashboard.json"
        save_dashboard_json(response, json_path)
        LOGGER.info("Dashboard JSON written to %s", json_path)

    if "html" in formats:
        html_path = export_root / "dashboard.html"
        html_path.write_text(render_dashboard_html(response), encoding="utf-8")
        LOGGER.info("Dashboard HTML written to %s", html_path)

    return export_root, response
