"""Command line entry point.

Usage:
    minirel serve [--host HOST] [--port PORT]
    minirel shell
    python -m minirel serve
"""

from __future__ import annotations

import argparse
import sys

from minirel import __version__
from minirel.adapters.inbound.rest_api import run_server
from minirel.adapters.inbound.shell import Shell
from minirel.application import DatabaseEngine
from minirel.infrastructure import (
    get_config,
    get_logger,
    setup_logging,
    setup_metrics,
    setup_tracing,
)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minirel",
        description="minirel - an in-memory relational table engine",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    subparsers = parser.add_subparsers(dest="command", required=True)

    serve = subparsers.add_parser("serve", help="Run the REST API server")
    serve.add_argument("--host", default=None, help="Host to bind to (default from config)")
    serve.add_argument("--port", type=int, default=None, help="Port to bind to (default 3000)")

    shell = subparsers.add_parser("shell", help="Run the interactive shell")
    shell.add_argument(
        "--log-level",
        default="WARNING",
        help="Log level for the shell session (default: WARNING)",
    )

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    config = get_config()
    obs = config.observability

    if args.command == "shell":
        setup_logging(level=args.log_level, log_format="console")
        db = DatabaseEngine.from_config(config, metrics=setup_metrics())
        Shell(db).run()
        return 0

    setup_logging(level=obs.log_level, log_format=obs.log_format)
    if obs.otel_endpoint:
        setup_tracing(service_name=obs.otel_service_name, otlp_endpoint=obs.otel_endpoint)
    metrics = setup_metrics()
    db = DatabaseEngine.from_config(config, metrics=metrics)

    host = args.host or config.server.host
    port = args.port or config.server.port
    get_logger(__name__).info("server_starting", host=host, port=port)
    run_server(db, host=host, port=port, metrics_enabled=obs.metrics_enabled)
    return 0


if __name__ == "__main__":
    sys.exit(main())
