#!/usr/bin/env python3
"""Run one reviewer CLI on a diff and print its validated review payload JSON.

The reviewer is either one of the two configured in defaults/dual-review.yml
(picked with --reviewer, default the first) or an ad-hoc binary given with
--command. The diff comes from git unless --diff names a file ('-' for stdin).
"""

from __future__ import annotations

import argparse
import json
import os
import sys
from dataclasses import dataclass, replace
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parent.parent
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from lib.dual_review_config import (
    ConfigError,
    LimitsConfig,
    ReviewerSpec,
    load_dual_review_config,
    load_env_overrides,
)
from lib.git_diff import compute_diff
from lib.review_runner import ReviewerError, ReviewerRequest, require_output, run_reviewer
from pkg.dualreview import ExtractionError, extract_review_payload


@dataclass(frozen=True)
class ReviewTarget:
    spec: ReviewerSpec
    limits: LimitsConfig
    cwd: str | None = None
    staged: bool = True


def parse_args(argv: list[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="run-review.py", description=__doc__.splitlines()[0])
    target = p.add_mutually_exclusive_group()
    target.add_argument("--reviewer", default="", help="Configured reviewer name (default: the first configured reviewer)")
    target.add_argument("--command", default="", help="Reviewer binary to run instead of a configured one")
    p.add_argument("--config", default="", help="Path to dual-review YAML (default: env DUAL_REVIEW_CONFIG or defaults/dual-review.yml)")
    p.add_argument("--model", default="", help="Model override")
    p.add_argument("--model-arg", default="", help="Flag used to pass the model (default: --model)")
    p.add_argument("--prompt-arg", default="", help="Flag used to pass the prompt (default: -p)")
    p.add_argument("--extra-arg", action="append", default=[], help="Extra reviewer argument, repeatable (use --extra-arg=--flag)")
    p.add_argument("--stdin-prompt", action="store_true", help="Send prompt and diff on stdin instead of as arguments")
    p.add_argument("--diff", default="", help="Read the diff from this file ('-' for stdin) instead of git")
    p.add_argument("--cwd", default="", help="Repository directory (default: env DUAL_REVIEW_GIT_CWD or current directory)")
    p.add_argument("--unstaged", action="store_true", help="Review the unstaged diff instead of the staged one")
    return p.parse_args(argv)


def _adhoc_target(command: str, environ: dict[str, str]) -> ReviewTarget:
    overrides = load_env_overrides(environ)
    limits = LimitsConfig()
    if overrides.max_output_bytes is not None:
        limits = replace(limits, max_output_bytes=overrides.max_output_bytes)
    spec = ReviewerSpec(name=command, command=command, model=overrides.default_model)
    return ReviewTarget(spec=spec, limits=limits, cwd=overrides.git_cwd)


def _configured_target(args: argparse.Namespace, environ: dict[str, str]) -> ReviewTarget:
    config_path = args.config or environ.get("DUAL_REVIEW_CONFIG") or ""
    cfg = load_dual_review_config(Path(config_path) if config_path else None, environ)
    by_name = {spec.name: spec for spec in cfg.reviewers}
    name = args.reviewer or cfg.reviewer_a.name
    if name not in by_name:
        raise ConfigError(f"unknown reviewer {name!r} (configured: {', '.join(by_name)})")
    return ReviewTarget(spec=by_name[name], limits=cfg.limits, cwd=cfg.cwd, staged=cfg.staged)


def resolve_target(args: argparse.Namespace, environ: dict[str, str]) -> ReviewTarget:
    target = _adhoc_target(args.command, environ) if args.command else _configured_target(args, environ)

    spec = target.spec
    if args.model:
        spec = replace(spec, model=args.model)
    if args.model_arg:
        spec = replace(spec, model_arg=args.model_arg)
    if args.prompt_arg:
        spec = replace(spec, prompt_arg=args.prompt_arg)
    if args.extra_arg:
        spec = replace(spec, extra_args=tuple(args.extra_arg))
    if args.stdin_prompt:
        spec = replace(spec, stdin_prompt=True)
    target = replace(target, spec=spec)

    if args.cwd:
        target = replace(target, cwd=args.cwd)
    if args.unstaged:
        target = replace(target, staged=False)
    return target


def read_diff(source: str, target: ReviewTarget) -> str:
    if source == "-":
        return sys.stdin.read()
    if source:
        return Path(source).read_text(encoding="utf-8")
    cwd = Path(target.cwd) if target.cwd else Path.cwd()
    return compute_diff(cwd, staged=target.staged, max_bytes=target.limits.max_output_bytes)


def run(target: ReviewTarget, diff: str) -> dict:
    req = ReviewerRequest(
        spec=target.spec,
        diff=diff,
        timeout_seconds=target.limits.timeout_seconds,
        max_output_bytes=target.limits.max_output_bytes,
        cwd=Path(target.cwd) if target.cwd else None,
    )
    raw = require_output(run_reviewer(req), req)
    try:
        payload = extract_review_payload(raw)
    except ExtractionError as exc:
        raise ReviewerError(f"{target.spec.name}: {exc}") from exc
    return payload.to_dict()


def main(argv: list[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    try:
        target = resolve_target(args, dict(os.environ))
    except ConfigError as exc:
        print(f"run-review: config error: {exc}", file=sys.stderr)
        return 2

    try:
        diff = read_diff(args.diff, target)
    except OSError as exc:
        print(f"run-review: unable to read diff: {exc}", file=sys.stderr)
        return 1

    try:
        payload = run(target, diff)
    except ReviewerError as exc:
        print(f"run-review: {exc}", file=sys.stderr)
        return 1

    print(json.dumps(payload, indent=2))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
