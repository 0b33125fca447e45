"""Configuration helpers for the HubSpot ticket dashboard."""
from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

LOGGER = logging.getLogger(__name__)

API_KEY_ENV = "HUBSPOT_API_KEY"
DEFAULT_BASE_URL = "https://api.hubapi.com"


class ConfigError(RuntimeError):
    """Raised when configuration cannot be loaded."""


PACKAGE_ROOT = Path(__file__).resolve().parents[1]

DEFAULT_CONFIG_LOCATIONS = (
    PACKAGE_ROOT / "config" / "config.yaml",
    PACKAGE_ROOT / "config" / "config.yml",
    Path("./config/config.yaml"),
    Path("./config/config.yml"),
    Path.home() / ".hubspot_dashboard" / "config.yaml",
)


def resolve_path(path_str: str | None, *, base: Path | None = None) -> Path:
    """Resolve a path string that may be relative to an optional base directory."""
    base_path = base or Path.cwd()
    if not path_str:
        return base_path
    path = Path(path_str)
    if not path.is_absolute():
        path = base_path / path
    return path


def load_config(path: str | os.PathLike[str] | None = None) -> Dict[str, Any]:
    """Load configuration from YAML.

    Parameters
    ----------
    path: Optional path to a configuration file. If not provided, default
        locations will be searched and an empty configuration is returned
        when none exist, so the dashboard can run from environment variables.
    """
    load_dotenv()
    if path:
        candidate = Path(path)
        if not candidate.exists():
            raise ConfigError(f"Configuration file {candidate} does not exist")
        return _read_yaml(candidate)

    for candidate in DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return _read_yaml(candidate)
    LOGGER.debug("No configuration file found; relying on environment variables")
    return {}


def _read_yaml(candidate: Path) -> Dict[str, Any]:
    with candidate.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as exc:
            raise ConfigError(f"Unable to parse configuration file {candidate}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Configuration file {candidate} must contain a mapping")
    LOGGER.debug("Loaded configuration from %s", candidate)
    return data


def resolve_api_key(config: Dict[str, Any]) -> str:
    """Return the HubSpot private app token, preferring the environment."""
    api_key = os.environ.get(API_KEY_ENV) or (config.get("hubspot") or {}).get("api_key")
    if not api_key:
        raise ConfigError(f"{API_KEY_ENV} environment variable is not set")
    return str(api_key)
