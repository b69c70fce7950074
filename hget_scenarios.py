#!/usr/bin/env python3
"""
Live check of hget_data.py against a real Redis server.

Seeds a few hashes under a throwaway namespace, runs hget_data.py as a
subprocess for each scenario and compares stdout/exit status:
  A - hash with field 'data' = 'hello'  -> 'key hello', exit 0
  B - hash without field 'data'         -> non-zero, no 'key ' line
  C - no hash at all                    -> same as B
  D - nothing listening                 -> non-zero, ConnectionError on stderr
  E - A repeated N times                -> identical output every time
plus values (spaces/tabs/newlines, and bytes that are not UTF-8) that must
come back untouched.

The keys are deleted at the end.

Usage:
  python hget_scenarios.py \
    --address localhost:6379 \
    --db 0 \
    --dead-address localhost:1 \
    --namespace hget-scenarios \
    --repeat 5
"""

import argparse
import subprocess
import sys
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List

from redis_hash_fetcher import FetchConfig, make_client

SCRIPT = Path(__file__).resolve().parent / "hget_data.py"


# Keys for this run. The uuid keeps concurrent runs apart.
def scenario_keys(ns: str) -> Dict[str, str]:
    run = uuid.uuid4().hex[:8]
    return {
        "present": f"{ns}:{run}:present",      # HASH with data=hello
        "no_field": f"{ns}:{run}:no-field",    # HASH with only 'other'
        "missing": f"{ns}:{run}:missing",      # never written
        "raw": f"{ns}:{run}:raw",              # HASH with an awkward value
        "binary": f"{ns}:{run}:binary",        # HASH with non-UTF-8 bytes
    }


@dataclass
class Outcome:
    name: str
    ok: bool
    detail: str = ""


@dataclass
class Report:
    outcomes: List[Outcome] = field(default_factory=list)

    def add(self, name: str, ok: bool, detail: str = "") -> None:
        self.outcomes.append(Outcome(name, ok, detail))

    @property
    def failed(self) -> int:
        return sum(1 for o in self.outcomes if not o.ok)


def run_fetch(address: str, db: int, key: str, password: str = "") -> subprocess.CompletedProcess:
    cmd = [sys.executable, str(SCRIPT), "--address", address, "--db", str(db), key]
    if password:
        cmd += ["--password", password]
    return subprocess.run(cmd, capture_output=True)


def check_failure(report: Report, name: str, proc: subprocess.CompletedProcess, expect: str) -> None:
    stderr = proc.stderr.decode("utf-8", "replace")
    ok = proc.returncode != 0 and not proc.stdout.startswith(b"key ") and expect in stderr
    detail = f"rc={proc.returncode} stderr tail={stderr.strip().splitlines()[-1:]}"
    report.add(name, ok, detail)


def main():
    ap = argparse.ArgumentParser(description="Run the hget_data.py scenarios against a live Redis")
    ap.add_argument("--address", type=str, default="localhost:6379", help="Redis host:port")
    ap.add_argument("--password", type=str, default="", help="Redis password")
    ap.add_argument("--db", type=int, default=0, help="logical database index")
    ap.add_argument("--dead-address", type=str, default="localhost:1", help="address with no server")
    ap.add_argument("--namespace", type=str, default="hget-scenarios", help="key prefix")
    ap.add_argument("--repeat", type=int, default=5, help="runs for the idempotence scenario")
    args = ap.parse_args()

    r = make_client(FetchConfig(address=args.address, password=args.password, db=args.db))
    keys = scenario_keys(args.namespace)
    raw_value = "  two spaces\tand a tab\nsecond line ünïcode  ".encode("utf-8")
    binary_value = b"\xff\xfe\x00bin\r\n"

    r.hset(keys["present"], mapping={"data": "hello"})
    r.hset(keys["no_field"], mapping={"other": "x"})
    r.hset(keys["raw"], mapping={"data": raw_value})
    r.hset(keys["binary"], mapping={"data": binary_value})

    report = Report()
    try:
        proc = run_fetch(args.address, args.db, keys["present"], args.password)
        report.add("A success", proc.returncode == 0 and proc.stdout == b"key hello\n",
                   f"rc={proc.returncode} stdout={proc.stdout!r}")

        proc = run_fetch(args.address, args.db, keys["no_field"], args.password)
        check_failure(report, "B missing field", proc, "FieldNotFoundError")

        proc = run_fetch(args.address, args.db, keys["missing"], args.password)
        check_failure(report, "C missing key", proc, "FieldNotFoundError")

        proc = run_fetch(args.dead_address, args.db, keys["present"])
        check_failure(report, "D unreachable", proc, "ConnectionError")

        outputs = {run_fetch(args.address, args.db, keys["present"], args.password).stdout
                   for _ in range(args.repeat)}
        report.add("E idempotence", outputs == {b"key hello\n"}, f"distinct outputs={len(outputs)}")

        proc = run_fetch(args.address, args.db, keys["raw"], args.password)
        report.add("value untouched", proc.returncode == 0 and proc.stdout == b"key " + raw_value + b"\n",
                   f"stdout={proc.stdout!r}")

        proc = run_fetch(args.address, args.db, keys["binary"], args.password)
        report.add("binary untouched", proc.returncode == 0 and proc.stdout == b"key " + binary_value + b"\n",
                   f"stdout={proc.stdout!r}")
    finally:
        r.delete(*keys.values())

    print("\n=== Scenarios ===")
    for o in report.outcomes:
        print(f"  {'PASS' if o.ok else 'FAIL'}  {o.name:<16} {o.detail}")
    print(f"\n{len(report.outcomes) - report.failed}/{len(report.outcomes)} passed")

    return 1 if report.failed else 0


if __name__ == "__main__":
    sys.exit(main())
