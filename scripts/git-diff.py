#!/usr/bin/env python3
"""Print the repository diff reviewers are given (staged by default)."""

from __future__ import annotations

import argparse
import os
import sys

from lib.dual_review_config import ConfigError, load_env_overrides
from lib.git_diff import compute_diff


def main(argv: list[str] | None = None) -> int:
    p = argparse.ArgumentParser(prog="git-diff.py", description=__doc__)
    p.add_argument("--cwd", default="", help="Repository directory (default: env DUAL_REVIEW_GIT_CWD or current directory)")
    p.add_argument("--unstaged", action="store_true", help="Print the unstaged diff")
    args = p.parse_args(sys.argv[1:] if argv is None else argv)

    try:
        overrides = load_env_overrides()
    except ConfigError as exc:
        print(f"git-diff: config error: {exc}", file=sys.stderr)
        return 2

    cwd = args.cwd or overrides.git_cwd or os.getcwd()
    kwargs = {}
    if overrides.max_output_bytes is not None:
        kwargs["max_bytes"] = overrides.max_output_bytes
    sys.stdout.write(compute_diff(cwd, staged=not args.unstaged, **kwargs))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
