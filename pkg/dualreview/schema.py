"""Review payload data model and validation contract.

A payload is one reviewer's findings: an ordered list of issues plus the
reviewer's own severity counts. Validation mirrors the wire schema the
reviewers are prompted with; anything else is a ``PayloadError``.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass
from typing import Any, Literal

Category = Literal[
    "security",
    "correctness",
    "reliability",
    "architecture",
    "performance",
    "tests",
    "docs",
]
Severity = Literal["low", "med", "high"]

# Weight tables double as the closed enumerations.
CATEGORY_WEIGHTS: dict[str, float] = {
    "security": 1.0,
    "correctness": 0.9,
    "reliability": 0.9,
    "architecture": 0.7,
    "performance": 0.6,
    "tests": 0.5,
    "docs": 0.3,
}
SEVERITY_WEIGHTS: dict[str, float] = {
    "low": 0.3,
    "med": 0.6,
    "high": 1.0,
}

CATEGORIES: tuple[str, ...] = tuple(CATEGORY_WEIGHTS)
SEVERITIES: tuple[str, ...] = tuple(SEVERITY_WEIGHTS)


class PayloadError(ValueError):
    """Decoded JSON does not match the review payload schema."""


def _require_mapping(value: Any, ctx: str) -> dict[str, Any]:
    if not isinstance(value, dict):
        raise PayloadError(f"{ctx}: expected object")
    return value


def _require_list(value: Any, ctx: str) -> list[Any]:
    if not isinstance(value, list):
        raise PayloadError(f"{ctx}: expected array")
    return value


def _require_str(value: Any, ctx: str) -> str:
    if not isinstance(value, str):
        raise PayloadError(f"{ctx}: expected string")
    return value


def _require_choice(value: Any, choices: tuple[str, ...], ctx: str) -> str:
    text = _require_str(value, ctx)
    if text not in choices:
        raise PayloadError(f"{ctx}: must be one of {', '.join(choices)} (got {text!r})")
    return text


def _require_count(value: Any, ctx: str) -> int:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PayloadError(f"{ctx}: expected number")
    if isinstance(value, float):
        if not math.isfinite(value) or not value.is_integer():
            raise PayloadError(f"{ctx}: expected a whole number")
        value = int(value)
    if value < 0:
        raise PayloadError(f"{ctx}: must be >= 0")
    return value


@dataclass(frozen=True)
class Issue:
    """One finding reported by a reviewer."""

    category: str
    severity: str
    file: str
    message: str
    fix: str
    line: int | None = None

    @classmethod
    def from_dict(cls, raw: Any, ctx: str = "issue") -> "Issue":
        obj = _require_mapping(raw, ctx)
        line = None
        if "line" in obj:
            line = _require_count(obj["line"], f"{ctx}.line")
        return cls(
            category=_require_choice(obj.get("category"), CATEGORIES, f"{ctx}.category"),
            severity=_require_choice(obj.get("severity"), SEVERITIES, f"{ctx}.severity"),
            file=_require_str(obj.get("file"), f"{ctx}.file"),
            message=_require_str(obj.get("message"), f"{ctx}.message"),
            fix=_require_str(obj.get("fix"), f"{ctx}.fix"),
            line=line,
        )

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "category": self.category,
            "severity": self.severity,
            "file": self.file,
        }
        if self.line is not None:
            out["line"] = self.line
        out["message"] = self.message
        out["fix"] = self.fix
        return out


@dataclass(frozen=True)
class SummaryCounts:
    """Declared per-severity counts. A hint only; may disagree with the issue list."""

    low: int = 0
    med: int = 0
    high: int = 0

    @classmethod
    def from_dict(cls, raw: Any, ctx: str = "summary.counts") -> "SummaryCounts":
        obj = _require_mapping(raw, ctx)
        return cls(
            low=_require_count(obj.get("low"), f"{ctx}.low"),
            med=_require_count(obj.get("med"), f"{ctx}.med"),
            high=_require_count(obj.get("high"), f"{ctx}.high"),
        )

    def to_dict(self) -> dict[str, int]:
        return {"low": self.low, "med": self.med, "high": self.high}


@dataclass(frozen=True)
class ReviewPayload:
    """Validated findings from one reviewer."""

    issues: tuple[Issue, ...]
    summary: SummaryCounts

    @classmethod
    def from_dict(cls, raw: Any) -> "ReviewPayload":
        """Validate a decoded JSON value against the payload schema."""
        obj = _require_mapping(raw, "payload")
        issues_raw = _require_list(obj.get("issues"), "issues")
        issues = tuple(
            Issue.from_dict(item, f"issues[{idx}]") for idx, item in enumerate(issues_raw)
        )
        summary = _require_mapping(obj.get("summary"), "summary")
        counts = SummaryCounts.from_dict(summary.get("counts"))
        return cls(issues=issues, summary=counts)

    def to_dict(self) -> dict[str, Any]:
        return {
            "issues": [issue.to_dict() for issue in self.issues],
            "summary": {"counts": self.summary.to_dict()},
        }


def parse_payload(text: str) -> ReviewPayload:
    """Decode JSON text and validate it as a review payload."""
    # ValueError also covers int literals past the digit limit.
    try:
        value = json.loads(text)
    except (ValueError, RecursionError) as exc:
        raise PayloadError(f"invalid JSON: {exc}") from exc
    return ReviewPayload.from_dict(value)
