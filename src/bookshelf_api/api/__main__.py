"""
bookshelf_api.api.__main__

Run the API with uvicorn: `python -m bookshelf_api.api` or the `bookshelf-api` script.

Host and port default to `BOOKSHELF_API_HOST` / `BOOKSHELF_API_PORT` and can be
overridden on the command line.
"""

from __future__ import annotations

import argparse

import uvicorn

from bookshelf_api.api.app import create_app
from bookshelf_api.settings import get_settings


def _parse_args(argv: list[str] | None, *, host: str, port: int) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="bookshelf-api", description="Serve the Bookshelf API.")
    parser.add_argument("--host", default=host)
    parser.add_argument("--port", type=int, default=port)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    settings = get_settings()
    args = _parse_args(argv, host=settings.api_host, port=settings.api_port)

    uvicorn.run(
        create_app(settings=settings),
        host=args.host,
        port=args.port,
        log_config=None,  # structlog owns logging
    )


if __name__ == "__main__":
    main()
