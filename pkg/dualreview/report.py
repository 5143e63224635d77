"""Plain markdown report for a dual review.

Headings and line formats are scraped by other tooling; keep them stable.
"""

from __future__ import annotations

from .reconcile import KEY_LIST_LIMIT, MergeResult
from .schema import ReviewPayload

REPORT_TITLE = "# Dual Review Report"
NONE_BULLET = "- (none)"


def summarize_payload(payload: ReviewPayload) -> str:
    counts = payload.summary
    return (
        f"Issues: {len(payload.issues)} | "
        f"High: {counts.high}, Med: {counts.med}, Low: {counts.low}"
    )


def _bullets(keys: tuple[str, ...]) -> list[str]:
    if not keys:
        return [NONE_BULLET]
    return [f"- {key}" for key in keys]


def render_report(
    a: ReviewPayload,
    b: ReviewPayload,
    merge: MergeResult,
    *,
    a_label: str = "Reviewer A",
    b_label: str = "Reviewer B",
) -> str:
    """Render both payloads and their merge metrics as markdown."""
    lines = [
        REPORT_TITLE,
        "",
        f"**Score:** {merge.score}/10",
        "",
        f"## {a_label} Review",
        summarize_payload(a),
        "",
        f"## {b_label} Review",
        summarize_payload(b),
        "",
        "## Overlap",
        f"Matched: {merge.overlap} of {merge.union} unique issues",
        "",
        f"## {a_label}-only (first {KEY_LIST_LIMIT})",
        *_bullets(merge.a_only_keys),
        "",
        f"## {b_label}-only (first {KEY_LIST_LIMIT})",
        *_bullets(merge.b_only_keys),
    ]
    return "\n".join(lines)


def render_dry_run(diff: str) -> str:
    size = len(diff.encode("utf-8"))
    return "\n".join(
        [
            f"{REPORT_TITLE} (dry-run)",
            "",
            f"Diff bytes: {size}",
            "",
            "This is a dry-run. No reviewers were run; unset DUAL_REVIEW_DRY_RUN "
            "and make sure both reviewer commands are on PATH to run a real review.",
        ]
    )
