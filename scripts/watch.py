#!/usr/bin/env python3
"""Print realtime events for one database path.

Configuration comes from the environment (see ``RtdbConfig.from_env``):
- RTDB_DATABASE_URL (required)
- RTDB_AUTH (optional database secret / ID token)

Example::

    RTDB_DATABASE_URL=https://my-db.firebaseio.com ./scripts/watch.py users --keep-alive
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
import time
from pathlib import Path

# Allow running from repo root without installing the package.
_repo = Path(__file__).resolve().parent.parent
_src = _repo / "src"
if _src.is_dir():
    sys.path.insert(0, str(_src))

from pyrtdb import RtdbClient, RtdbConfig, RtdbError  # noqa: E402


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Stream realtime events for a database path.")
    parser.add_argument("path", nargs="?", default="", help="Path below the database root.")
    parser.add_argument(
        "--duration",
        type=float,
        default=0,
        help="Maximum runtime in seconds (0 = run until Ctrl+C).",
    )
    parser.add_argument("--keep-alive", action="store_true", help="Also print keep-alive events.")
    parser.add_argument("--json", action="store_true", help="Pretty-print event payloads.")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logs.")
    return parser.parse_args()


def _format_payload(data: str | None, pretty: bool) -> str:
    if data is None:
        return "-"
    if not pretty:
        return data
    try:
        return json.dumps(json.loads(data), indent=2, ensure_ascii=False)
    except json.JSONDecodeError:
        return data


async def _watch(config: RtdbConfig, args: argparse.Namespace) -> int:
    count = 0
    started = time.monotonic()
    async with RtdbClient(config) as client:
        ref = client.reference(args.path)
        print(f"[watch] listening on /{args.path}")
        async for event in client.stream(ref, keep_alive_friendly=args.keep_alive):
            count += 1
            print(f"[watch] {event.event_type}: {_format_payload(event.data, args.json)}")
            if args.duration and time.monotonic() - started >= args.duration:
                break
    print(f"[watch] {count} event(s) in {time.monotonic() - started:.1f}s")
    return 0


def _main() -> int:
    args = _parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    if not os.environ.get("RTDB_DATABASE_URL"):
        print("[watch] RTDB_DATABASE_URL is not set", file=sys.stderr)
        return 2
    config = RtdbConfig.from_env()

    try:
        return asyncio.run(_watch(config, args))
    except KeyboardInterrupt:
        return 0
    except RtdbError as exc:
        print(f"[watch] {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    raise SystemExit(_main())
