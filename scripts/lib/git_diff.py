"""Git diff retrieval that tolerates older/newer git flag spellings."""

from __future__ import annotations

import subprocess
import sys
from pathlib import Path

from .dual_review_config import DEFAULT_MAX_OUTPUT_BYTES

STAGED_COMMANDS = (
    ["git", "diff", "--cached"],
    ["git", "diff", "--staged"],
)
PLAIN_COMMAND = ["git", "diff"]


def _try_diff(cmd: list[str], cwd: str | Path | None, max_bytes: int) -> str | None:
    try:
        result = subprocess.run(
            cmd,
            cwd=cwd,
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            check=False,
        )
    except OSError as exc:
        print(f"git-diff: unable to run {' '.join(cmd)}: {exc}", file=sys.stderr)
        return None
    if result.returncode != 0:
        return None
    if len(result.stdout.encode("utf-8")) > max_bytes:
        print(f"git-diff: {' '.join(cmd)} output exceeds {max_bytes} bytes", file=sys.stderr)
        return None
    return result.stdout


def compute_diff(
    cwd: str | Path | None = None,
    *,
    staged: bool = True,
    max_bytes: int = DEFAULT_MAX_OUTPUT_BYTES,
) -> str:
    """Return the diff; tries --cached, then --staged, then plain diff.

    Returns an empty string when every attempt fails.
    """
    if staged:
        for cmd in STAGED_COMMANDS:
            out = _try_diff(cmd, cwd, max_bytes)
            if out is not None:
                return out
    out = _try_diff(PLAIN_COMMAND, cwd, max_bytes)
    return out if out is not None else ""
