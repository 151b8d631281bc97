#!/usr/bin/env python3
"""Drive a running relay as capture provider or answer subscriber."""

from __future__ import annotations

import sys
import base64
import asyncio
import logging
import argparse
from pathlib import Path

if __package__ in {None, ""}:
    sys.path.insert(0, str(Path(__file__).resolve().parents[2]))

from relay.state import AnswerRecord  # noqa: E402
from tests.client import RelayClient  # noqa: E402
from tests.params.env import derive_default_server  # noqa: E402


def parse_args() -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Capture relay peer over /ws")
    p.add_argument("role", choices=["provider", "subscriber"])
    p.add_argument("--server", default=derive_default_server(), help="host:port or ws://host:port")
    p.add_argument("--secure", action="store_true", help="Use wss://")
    p.add_argument("--file", help="File sent (base64) as the capture payload; defaults to a placeholder")
    p.add_argument("--duration", type=float, default=None, help="Seconds to stay connected (default: forever)")
    p.add_argument("--debug", action="store_true")
    return p.parse_args()


def _capture_fn(path: str | None):
    if path is None:
        return lambda: base64.b64encode(b"relay-e2e").decode("ascii")
    data = Path(path).read_bytes()
    encoded = base64.b64encode(data).decode("ascii")
    return lambda: encoded


def _print_answer(record: AnswerRecord) -> None:
    print(f"answer: {record.value!r} (version {record.version})")


async def run(args: argparse.Namespace) -> int:
    client = RelayClient(
        args.server,
        args.secure,
        debug=args.debug,
        capture_fn=_capture_fn(args.file),
        on_answer=_print_answer,
    )
    print(f"connecting to {client.url} as {args.role}")
    await client.run(args.role, duration_s=args.duration)
    if args.role == "provider":
        print(f"captures sent: {client.captures_sent}")
    return 0


def main() -> None:
    args = parse_args()
    logging.basicConfig(level=logging.DEBUG if args.debug else logging.WARNING, format="%(levelname)s: %(message)s")
    try:
        raise SystemExit(asyncio.run(run(args)))
    except KeyboardInterrupt:
        raise SystemExit(130) from None


if __name__ == "__main__":
    main()
