#!/usr/bin/env python3
"""Run two reviewer CLIs on the current git diff and print a merged report.

Flow: diff -> reviewer A -> reviewer B -> extract both -> reconcile -> render.
Any reviewer or extraction failure aborts the run; there is no one-sided report.
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import replace
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from lib.dual_review_config import ConfigError, DualReviewConfig, load_dual_review_config
from lib.git_diff import compute_diff
from lib.review_runner import ReviewerError, ReviewerRequest, require_output, run_reviewer
from pkg.dualreview import ExtractionError, extract_review_payload, reconcile, render_dry_run, render_report


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="dual-review.py", description=__doc__.splitlines()[0])
    p.add_argument("--config", default="", help="Path to dual-review YAML (default: env DUAL_REVIEW_CONFIG or defaults/dual-review.yml)")
    p.add_argument("--cwd", default="", help="Repository directory (default: env DUAL_REVIEW_GIT_CWD or current directory)")
    p.add_argument("--unstaged", action="store_true", help="Review the unstaged diff instead of the staged one")
    p.add_argument("--dry-run", action="store_true", help="Report diff size without running reviewers")
    p.add_argument("--json", action="store_true", help="Print a score JSON line before the report")
    return p.parse_args(argv)


def resolve_config(args: argparse.Namespace, environ: dict[str, str]) -> DualReviewConfig:
    config_path = args.config or environ.get("DUAL_REVIEW_CONFIG") or ""
    cfg = load_dual_review_config(Path(config_path) if config_path else None, environ)
    if args.cwd:
        cfg = replace(cfg, cwd=args.cwd)
    if args.unstaged:
        cfg = replace(cfg, staged=False)
    if args.dry_run:
        cfg = replace(cfg, dry_run=True)
    return cfg


def run(cfg: DualReviewConfig, *, emit_json: bool = False) -> str:
    cwd = Path(cfg.cwd) if cfg.cwd else Path.cwd()
    diff = compute_diff(cwd, staged=cfg.staged, max_bytes=cfg.limits.max_output_bytes)

    if cfg.dry_run:
        return render_dry_run(diff)

    payloads = []
    for spec in cfg.reviewers:
        req = ReviewerRequest(
            spec=spec,
            diff=diff,
            timeout_seconds=cfg.limits.timeout_seconds,
            max_output_bytes=cfg.limits.max_output_bytes,
            cwd=cwd,
        )
        raw = require_output(run_reviewer(req), req)
        try:
            payloads.append(extract_review_payload(raw))
        except ExtractionError as exc:
            raise ReviewerError(f"{spec.name}: {exc}") from exc

    a, b = payloads
    merged = reconcile(a, b)
    report = render_report(
        a,
        b,
        merged,
        a_label=cfg.reviewer_a.name,
        b_label=cfg.reviewer_b.name,
    )
    if emit_json:
        return json.dumps({"score": merged.score}) + "\n\n" + report
    return report


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        cfg = resolve_config(args, dict(os.environ))
    except ConfigError as exc:
        print(f"dual-review: config error: {exc}", file=sys.stderr)
        return 2

    try:
        output = run(cfg, emit_json=args.json)
    except ReviewerError as exc:
        print(f"dual-review: {exc}", file=sys.stderr)
        return 1

    print(output)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
