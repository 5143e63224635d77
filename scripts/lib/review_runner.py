"""Reviewer CLI execution.

Runs one headless reviewer command on a diff and returns its raw output.
Interpreting that output is the extractor's job.
"""

from __future__ import annotations

import os
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .dual_review_config import ReviewerSpec
from .review_prompt import REVIEW_PROMPT, stdin_prompt

EXIT_TIMEOUT = 124
EXIT_NOT_FOUND = 127


class ReviewerError(RuntimeError):
    """Reviewer command failed or produced unusable output."""


@dataclass(frozen=True)
class ReviewerRequest:
    spec: ReviewerSpec
    diff: str
    timeout_seconds: int
    max_output_bytes: int
    cwd: Path | None = None


@dataclass(frozen=True)
class ReviewerResult:
    exit_code: int
    timed_out: bool
    stdout: str
    stderr: str


def build_reviewer_command(spec: ReviewerSpec, prompt: str = REVIEW_PROMPT) -> list[str]:
    if spec.stdin_prompt:
        return [spec.command, "-", *spec.extra_args]

    cmd = [spec.command, spec.prompt_arg, prompt, *spec.output_json_args, *spec.extra_args]
    if spec.model:
        cmd.extend([spec.model_arg, spec.model])
    return cmd


def reviewer_input(spec: ReviewerSpec, diff: str) -> str:
    return stdin_prompt(diff) if spec.stdin_prompt else diff


def _as_text(value: str | bytes | None) -> str:
    if value is None:
        return ""
    if isinstance(value, bytes):
        return value.decode("utf-8", errors="replace")
    return value


def run_reviewer(req: ReviewerRequest) -> ReviewerResult:
    """Execute one reviewer attempt and return a normalized result."""
    cmd = build_reviewer_command(req.spec)
    try:
        proc = subprocess.run(
            cmd,
            input=reviewer_input(req.spec, req.diff),
            capture_output=True,
            text=True,
            encoding="utf-8",
            errors="replace",
            timeout=req.timeout_seconds,
            env=os.environ.copy(),
            cwd=req.cwd,
        )
    except FileNotFoundError as exc:
        return ReviewerResult(
            exit_code=EXIT_NOT_FOUND,
            timed_out=False,
            stdout="",
            stderr=f"{req.spec.command}: command not found ({exc})",
        )
    except subprocess.TimeoutExpired as exc:
        return ReviewerResult(
            exit_code=EXIT_TIMEOUT,
            timed_out=True,
            stdout=_as_text(exc.stdout),
            stderr=_as_text(exc.stderr),
        )
    return ReviewerResult(
        exit_code=proc.returncode,
        timed_out=False,
        stdout=proc.stdout or "",
        stderr=proc.stderr or "",
    )


def require_output(result: ReviewerResult, req: ReviewerRequest) -> str:
    """Return trimmed stdout, or raise ReviewerError for any failed attempt."""
    name = req.spec.command
    if result.timed_out:
        raise ReviewerError(f"{name} timed out after {req.timeout_seconds}s")
    if result.exit_code != 0:
        raise ReviewerError(result.stderr.strip() or f"{name} CLI failed")
    if len(result.stdout.encode("utf-8")) > req.max_output_bytes:
        raise ReviewerError(f"{name} output exceeds {req.max_output_bytes} bytes")
    return result.stdout.strip()
