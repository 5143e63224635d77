"""Reviewer prompt shared by every reviewer command.

Both reviewers get the same instructions so their findings are comparable.
"""

from __future__ import annotations

REVIEW_PROMPT = """You are a senior reviewer. You will receive a git diff via STDIN.
Output ONLY valid JSON, no Markdown, no prose:

{
  "issues": [{
    "category": "security|correctness|reliability|architecture|performance|tests|docs",
    "severity": "low|med|high",
    "file": "path",
    "line": 123,
    "message": "problem summary",
    "fix": "specific actionable fix"
  }],
  "summary": { "counts": { "low": 0, "med": 0, "high": 0 } }
}

Look for:
- Input validation gaps, schema mismatches, missing sanitization
- AuthZ/AuthN gaps, secrets handling, injection risks
- Transaction boundaries, idempotency, retry and compensation concerns
- Separation of concerns and layering violations
- Error handling, logging and observability
- Performance footguns (N+1 queries, unbounded concurrency, blocking calls)
- Tests: missing cases, flaky patterns
- Docs and readability: naming, misleading comments"""


def stdin_prompt(diff: str) -> str:
    """Prompt and diff combined, for reviewers that read everything from stdin."""
    return f"{REVIEW_PROMPT}\n\n{diff}"
