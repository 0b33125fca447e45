from __future__ import annotations

import logging
from pathlib import Path

import pytest

from hubspot_dashboard import config as config_module
from hubspot_dashboard.config import ConfigError, load_config, resolve_api_key, resolve_path
from hubspot_dashboard.logging_setup import configure_logging


def test_load_config_reads_yaml(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("hubspot:\n  timeout: 10\n", encoding="utf-8")
    assert load_config(path) == {"hubspot": {"timeout": 10}}


def test_load_config_missing_explicit_path(tmp_path: Path) -> None:
    with pytest.raises(ConfigError):
        load_config(tmp_path / "missing.yaml")


def test_load_config_rejects_non_mapping(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    path = tmp_path / "config.yaml"
    path.write_text("hubspot: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_load_config_without_any_file_is_empty(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setattr(config_module, "DEFAULT_CONFIG_LOCATIONS", (tmp_path / "nope.yaml",))
    assert load_config() == {}


def test_api_key_prefers_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("HUBSPOT_API_KEY", "env-key")
    assert resolve_api_key({"hubspot": {"api_key": "file-key"}}) == "env-key"


def test_api_key_falls_back_to_config(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HUBSPOT_API_KEY", raising=False)
    assert resolve_api_key({"hubspot": {"api_key": "file-key"}}) == "file-key"


def test_missing_api_key(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("HUBSPOT_API_KEY", raising=False)
    with pytest.raises(ConfigError, match="HUBSPOT_API_KEY environment variable is not set"):
        resolve_api_key({"hubspot": {}})


def test_resolve_path(tmp_path: Path) -> None:
    assert resolve_path("logs/x.log", base=tmp_path) == tmp_path / "logs" / "x.log"
    assert resolve_path(None, base=tmp_path) == tmp_path
    absolute = tmp_path / "abs.log"
    assert resolve_path(str(absolute), base=Path("/elsewhere")) == absolute


def test_configure_logging_writes_file(tmp_path: Path) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        configure_logging(
            {
                "logging": {
                    "console": {"enabled": True, "rich_format": True},
                    "file": {"enabled": True, "path": "logs/dashboard.log"},
                }
            },
            base_dir=tmp_path,
        )
        logging.getLogger("hubspot_dashboard.test").info("hello dashboard")
        for handler in root.handlers:
            handler.flush()
        log_file = tmp_path / "logs" / "dashboard.log"
        assert "hello dashboard" in log_file.read_text(encoding="utf-8")
    finally:
        for handler in root.handlers:
            handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_configure_logging_quiets_noisy_loggers_and_keeps_foreign_handlers() -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    foreign = logging.NullHandler()
    root.addHandler(foreign)
    try:
        config = {
            "logging": {
                "console": {"enabled": True, "level": "warning"},
                "quiet_loggers": {"urllib3": "ERROR", "hubspot_dashboard.noisy": "critical"},
            }
        }
        first = configure_logging(config)
        second = configure_logging(config)

        assert logging.getLogger("urllib3").level == logging.ERROR
        assert logging.getLogger("hubspot_dashboard.noisy").level == logging.CRITICAL
        assert foreign in root.handlers
        assert first[0] not in root.handlers
        assert second[0] in root.handlers
        assert second[0].level == logging.WARNING
    finally:
        for handler in root.handlers:
            if handler not in saved_handlers:
                handler.close()
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("urllib3").setLevel(logging.NOTSET)
        logging.getLogger("hubspot_dashboard.noisy").setLevel(logging.NOTSET)


def test_configure_logging_defaults_quiet_http_client(quiet_logging_config) -> None:
    root = logging.getLogger()
    saved_handlers, saved_level = list(root.handlers), root.level
    try:
        assert configure_logging(quiet_logging_config) == []
        assert logging.getLogger("urllib3").level == logging.WARNING
        assert logging.getLogger("werkzeug").level == logging.WARNING
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)
        logging.getLogger("urllib3").setLevel(logging.NOTSET)
        logging.getLogger("werkzeug").setLevel(logging.NOTSET)
