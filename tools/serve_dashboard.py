#!/usr/bin/env python3
"""Run the dashboard web server."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = BASE_DIR / "config" / "config.yaml"
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from hubspot_dashboard.config import load_config  # type: ignore  # pylint: disable=import-error
from hubspot_dashboard.logging_setup import configure_logging  # type: ignore  # pylint: disable=import-error
from hubspot_dashboard.web import create_app  # type: ignore  # pylint: disable=import-error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Serve the ticket dashboard over HTTP.")
    parser.add_argument(
        "--config",
        help=(
            "Path to configuration YAML file. Defaults to "
            f"{DEFAULT_CONFIG_PATH} or config/config.yaml if present."
        ),
    )
    parser.add_argument("--host", help="Interface to bind (default: server.host or 127.0.0.1).")
    parser.add_argument("--port", type=int, help="Port to listen on (default: server.port or 5000).")
    parser.add_argument("--debug", action="store_true", help="Enable the Flask debugger and reloader.")
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    config = load_config(args.config)
    configure_logging(config, base_dir=BASE_DIR)
    server_cfg = config.get("server", {})
    app = create_app(config)
    app.run(
        host=args.host or server_cfg.get("host", "127.0.0.1"),
        port=args.port or int(server_cfg.get("port", 5000)),
        debug=args.debug,
    )


if __name__ == "__main__":
    main()
