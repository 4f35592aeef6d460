"""Command-line entrypoint for running either xmlrelay service."""

from __future__ import annotations

import argparse

import uvicorn

from .config import get_settings
from .main import INGESTION_SERVICE, STORAGE_SERVICE
from .utils.logging import configure_logging


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments for the launcher."""

    settings = get_settings()
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument(
        "service",
        choices=(INGESTION_SERVICE, STORAGE_SERVICE),
        help="Which service to run.",
    )
    parser.add_argument("--host", default=settings.host, help="Host interface to bind.")
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to bind (defaults to INGESTION_PORT or STORAGE_PORT).",
    )
    parser.add_argument(
        "--log-level", default=settings.log_level, help="Log level passed to Uvicorn."
    )
    parser.add_argument(
        "--reload", action="store_true", default=False, help="Enable autoreload."
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    """Launch the selected FastAPI application with Uvicorn."""

    args = parse_args(argv)
    settings = get_settings()
    configure_logging(args.log_level)

    port = args.port
    if port is None:
        port = (
            settings.ingestion_port
            if args.service == INGESTION_SERVICE
            else settings.storage_port
        )

    uvicorn.run(
        f"xmlrelay.main:{args.service}_app",
        host=args.host,
        port=port,
        log_level=args.log_level.lower(),
        reload=args.reload,
    )


if __name__ == "__main__":
    main()
