#!/usr/bin/env python3
"""Fetch HubSpot tickets once and write the dashboard to disk."""
from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Optional

BASE_DIR = Path(__file__).resolve().parents[1]
DEFAULT_CONFIG_PATH = BASE_DIR / "config" / "config.yaml"
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from hubspot_dashboard.dashboard import ExportOptions, export_dashboard  # type: ignore  # pylint: disable=import-error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Export the ticket dashboard as JSON and/or a standalone HTML page."
    )
    parser.add_argument(
        "--config",
        help=(
            "Path to configuration YAML file. Defaults to "
            f"{DEFAULT_CONFIG_PATH} or config/config.yaml if present."
        ),
    )
    parser.add_argument(
        "--output-directory",
        help="Directory where the export should be written. Overrides configuration defaults.",
    )
    parser.add_argument(
        "--format",
        action="append",
        choices=["json", "html"],
        help="Output formats to generate (default: json, html).",
    )
    parser.add_argument(
        "--disable-console-log",
        action="store_true",
        help="Disable console logging output.",
    )
    parser.add_argument(
        "--simple-console",
        action="store_true",
        help="Use a simple console log format instead of Rich formatting.",
    )
    parser.add_argument(
        "--console-level",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Override the console logging level.",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    options = ExportOptions(
        config_path=args.config,
        output_directory=args.output_directory,
        formats=args.format,
        disable_console=args.disable_console_log,
        simple_console=args.simple_console,
        console_level=args.console_level,
    )
    export_dir, response = export_dashboard(options, base_dir=BASE_DIR)
    if not response.success:
        print(f"Dashboard failed: {response.error}", file=sys.stderr)
        return 1
    print(f"Dashboard export available at {export_dir}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
