#!/usr/bin/env python3
"""Run outyet: poll the change URL for go<version> and serve the answer over HTTP.

Config comes from config/config.yaml (or the path given, or $OUTYET_CONFIG); flags override it.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

# Project root
_PROJECT_ROOT = Path(__file__).resolve().parent.parent
if str(_PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(_PROJECT_ROOT))


def _apply_overrides(config: dict, args: argparse.Namespace) -> dict:
    """Return config with CLI flags applied on top (server.host/port, poll.period, version)."""
    from outyet.config.settings import parse_duration, parse_listen_address

    config = dict(config)
    if args.http:
        host, port = parse_listen_address(args.http)
        config["server"] = {**(config.get("server") or {}), "host": host, "port": port}
    if args.poll:
        config["poll"] = {**(config.get("poll") or {}), "period": parse_duration(args.poll)}
    if args.version:
        config["version"] = args.version
    return config


def main(argv: Optional[List[str]] = None) -> int:
    logging.basicConfig(
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        level=logging.INFO,
    )
    parser = argparse.ArgumentParser(description="Announce whether a Go version has been tagged.")
    parser.add_argument("config", nargs="?", default=None, help="Config file (default config/config.yaml)")
    parser.add_argument("--http", default=None, help="Listen address, e.g. :8080 or 127.0.0.1:8080")
    parser.add_argument("--poll", default=None, help="Poll period, e.g. 5s, 1m")
    parser.add_argument("--version", default=None, help="Go version, e.g. 1.9.0")
    args = parser.parse_args(argv)

    from outyet.config.settings import read_config
    from outyet.status_server.app import run_server

    config, resolved = read_config(args.config)
    logging.getLogger(__name__).info("Config: %s", resolved)
    try:
        config = _apply_overrides(config, args)
    except ValueError as e:
        print(f"Invalid flag: {e}", file=sys.stderr)
        return 2
    run_server(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
