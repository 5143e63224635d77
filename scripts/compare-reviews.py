#!/usr/bin/env python3
"""Compare two saved reviewer outputs and print the score and merged report.

Stdout: one JSON line with the merge metrics, a blank line, then the report
(unless --output is given, in which case only the JSON line is printed).
"""

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from pkg.dualreview import ExtractionError, extract_review_payload, reconcile, render_report


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="compare-reviews.py", description="Score two reviewer outputs against each other.")
    p.add_argument("review_a", help="Raw output of reviewer A")
    p.add_argument("review_b", help="Raw output of reviewer B")
    p.add_argument("--a-label", default="Reviewer A", help="Report heading for reviewer A")
    p.add_argument("--b-label", default="Reviewer B", help="Report heading for reviewer B")
    p.add_argument("--output", default="", help="Write the markdown report here instead of stdout")
    return p.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)

    payloads = []
    for label, path in ((args.a_label, Path(args.review_a)), (args.b_label, Path(args.review_b))):
        try:
            raw = path.read_text(encoding="utf-8")
        except OSError as exc:
            print(f"compare-reviews: failed to read {path}: {exc}", file=sys.stderr)
            return 1
        try:
            payloads.append(extract_review_payload(raw))
        except ExtractionError as exc:
            print(f"compare-reviews: {label}: {exc}", file=sys.stderr)
            return 1

    a, b = payloads
    merged = reconcile(a, b)
    report = render_report(a, b, merged, a_label=args.a_label, b_label=args.b_label)
    metrics = json.dumps(merged.to_dict())

    if args.output:
        out_path = Path(args.output)
        try:
            out_path.write_text(report + "\n", encoding="utf-8")
        except OSError as exc:
            print(f"compare-reviews: failed to write {out_path}: {exc}", file=sys.stderr)
            return 1
        print(metrics)
        return 0

    print(metrics)
    print()
    print(report)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
