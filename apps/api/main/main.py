"""
CLI entrypoint for running Burnlink FastAPI service.
"""

from __future__ import annotations

import argparse
import logging

import uvicorn

_APP_IMPORT_PATH = "apps.api.main.app:app"


def _configure_logging(*, level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s %(name)s %(message)s",
    )


def _build_parser() -> argparse.ArgumentParser:
    """
    Build command-line parser for API process.

    Args:
        None.
    Returns:
        argparse.ArgumentParser: Configured parser.
    Assumptions:
        Defaults are suitable for local development.
    Raises:
        None.
    Side Effects:
        None.
    """
    parser = argparse.ArgumentParser(prog="burnlink-api")
    parser.add_argument("--host", default="0.0.0.0", help="Bind host")
    parser.add_argument("--port", type=int, default=8000, help="Bind port")
    parser.add_argument(
        "--workers",
        type=int,
        default=1,
        help="Worker processes; more than one requires SECRETS_PG_DSN shared storage.",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        choices=("debug", "info", "warning", "error"),
        help="Root logging level.",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Run API process using uvicorn.

    Args:
        argv: Optional command arguments without program name.
    Returns:
        int: Process exit code.
    Assumptions:
        Import path `apps.api.main.app:app` is available in PYTHONPATH.
    Raises:
        None.
    Side Effects:
        Configures logging and starts HTTP server loop.
    """
    args = _build_parser().parse_args(argv)
    if args.workers <= 0:
        print("--workers must be > 0")
        return 2
    _configure_logging(level=args.log_level)
    uvicorn.run(
        _APP_IMPORT_PATH,
        host=args.host,
        port=args.port,
        workers=args.workers,
        log_level=args.log_level,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
