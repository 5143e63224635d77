#!/usr/bin/env python3
"""Normalize raw reviewer output into validated review payload JSON."""

import argparse
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from pkg.dualreview import ExtractionError, extract_review_payload


def read_input(path: str | None) -> str:
    if path:
        return Path(path).read_text(encoding="utf-8")
    return sys.stdin.read()


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="extract-review.py", description=__doc__)
    p.add_argument("input", nargs="?", default=None, help="Raw reviewer output file (default: stdin)")
    args = p.parse_args(sys.argv[1:] if argv is None else argv)

    try:
        raw = read_input(args.input)
    except OSError as exc:
        print(f"extract-review: unable to read input: {exc}", file=sys.stderr)
        return 1

    try:
        payload = extract_review_payload(raw)
    except ExtractionError as exc:
        print(f"extract-review: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(payload.to_dict(), indent=2, sort_keys=False))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
