"""
Command-line front end: `python -m client status` polls the status endpoint.
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from pydantic import ValidationError

from core import log

from .api import Api
from .fetch_api import ApiError, FetchApi
from .tokens import default_token_store

logger = logging.getLogger("client")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="client", description="Talk to the status service.")
    parser.add_argument("--base-url", default=None, help="Defaults to API_BASE_URL.")
    parser.add_argument("--timeout", type=float, default=None, help="Per-request timeout in seconds.")
    parser.add_argument("--log-level", default=None)

    sub = parser.add_subparsers(dest="command", required=True)

    status = sub.add_parser("status", help="Print the backend status message.")
    status.add_argument("--interval", type=float, default=0.0, help="Seconds between polls (0 = once).")
    status.add_argument("--count", type=int, default=1, help="Number of polls when --interval is set.")

    download = sub.add_parser("download", help="Save an endpoint's payload to a file.")
    download.add_argument("endpoint")
    download.add_argument("--filename", default=None)
    download.add_argument("--dir", dest="directory", default=None)
    return parser


async def poll_status(api: Api, *, interval: float, count: int) -> int:
    polls = max(count, 1) if interval > 0 else 1
    exit_code = 0
    for i in range(polls):
        try:
            status = await api.status()
        except (ApiError, ValidationError) as exc:
            logger.error("Backend connection failed: %s", exc)
            print("Status: unavailable")
            exit_code = 1
        else:
            print(f"Status: {status.message}")
            exit_code = 0
        if i + 1 < polls:
            await asyncio.sleep(interval)
    return exit_code


async def run(args: argparse.Namespace) -> int:
    store = default_token_store()
    api = Api(FetchApi(args.base_url, token_provider=store, timeout_s=args.timeout), token_store=store)

    if args.command == "status":
        return await poll_status(api, interval=args.interval, count=args.count)

    saved = await api.download(args.endpoint, args.filename, directory=args.directory)
    if saved is None:
        return 1
    print(saved)
    return 0


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    log.configure_logging(args.log_level)
    return asyncio.run(run(args))


if __name__ == "__main__":
    sys.exit(main())
