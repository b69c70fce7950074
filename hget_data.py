#!/usr/bin/env python3
#
# Print the 'data' field of one workflow history hash.
#
# With no arguments this reads the hard-wired key from localhost:6379, db 0.
# Any error (server down, key or field missing, bad reply) is left
# unhandled, so the traceback goes to stderr and the exit status is non-zero.
#
# Usage:
#   python hget_data.py
#   python hget_data.py --address redis.local:6380 --db 2 some-key
#   python hget_data.py -v --field other some-key

import argparse
import logging
import sys
from typing import List, Optional

from redis_hash_fetcher import (
    DEFAULT_ADDRESS,
    DEFAULT_FIELD,
    DEFAULT_KEY,
    FetchConfig,
    fetch_field,
    format_result,
)


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    ap = argparse.ArgumentParser(description="Read one field of one Redis hash and print it")
    ap.add_argument("key", nargs="?", default=DEFAULT_KEY, help="hash key (opaque)")
    ap.add_argument("--address", type=str, default=DEFAULT_ADDRESS,
                    help="Redis host:port ('[::1]:6379' for IPv6 with a port)")
    ap.add_argument("--password", type=str, default="", help="Redis password; empty for none")
    ap.add_argument("--db", type=int, default=0, help="logical database index")
    ap.add_argument("--field", type=str, default=DEFAULT_FIELD, help="hash field to read")
    ap.add_argument("-v", "--verbose", action="store_true", help="debug logging on stderr")
    return ap.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> FetchConfig:
    return FetchConfig(
        address=args.address,
        password=args.password,
        db=args.db,
        key=args.key,
        field=args.field,
    )


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    value = fetch_field(config_from_args(args))

    # The value goes out as stored, so write bytes rather than print().
    out = sys.stdout.buffer
    out.write(format_result(value) + b"\n")
    out.flush()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
