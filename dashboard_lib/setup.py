"""Server setup helper for the dashboard.

Provides CLI parsing and helpers to create the configuration template.
The module contains only CLI and I/O logic; loading is delegated to
`YamlConfigStore`.
"""
from __future__ import annotations
import argparse
import sys
from typing import Iterable, Optional

import yaml

from dashboard_lib.config.config import DashboardConfig, YamlConfigStore, DEFAULT_CONFIG_PATH

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3000


def get_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="mserv service dashboard")
    p.add_argument("--config", default=str(DEFAULT_CONFIG_PATH), help="Path to the dashboard YAML configuration")
    p.add_argument("--host", default=DEFAULT_HOST, help="Interface to bind")
    p.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to listen on")
    p.add_argument("--print-template", action="store_true", help="Print the default YAML template to stdout and exit")
    p.add_argument("--write-template", action="store_true", help="Write the default YAML template to --config if missing and exit")
    return p


def parse_args(argv: Optional[Iterable[str]] = None) -> argparse.Namespace:
    parser = get_parser()
    if argv is not None:
        argv = list(argv)
    args, _ = parser.parse_known_args(argv)
    return args


def render_template() -> str:
    return yaml.safe_dump(DashboardConfig().to_dict(), sort_keys=False)


def setup(argv: Optional[Iterable[str]]) -> int:
    """Handle the template-related CLI actions.

    Returns 0 when an action was performed, -1 when the caller should go on
    to start the server, and a positive code on error.
    """
    args = parse_args(list(argv) if argv else [])
    if args.print_template:
        sys.stdout.write(render_template())
        return 0

    if args.write_template:
        store = YamlConfigStore(args.config)
        if store.exists():
            print(f"Configuration already exists at {args.config}")
            return 1
        store.save(DashboardConfig())
        print(f"Wrote configuration template to {args.config}")
        return 0

    return -1
