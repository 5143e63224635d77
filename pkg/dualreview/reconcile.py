"""Compare two review payloads and compute a bounded 1-10 agreement score.

The score rewards coverage (both reviewers report the same findings) and
balance (similar thoroughness), and is pulled down as declared
high-severity counts accumulate.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any

from .schema import CATEGORY_WEIGHTS, SEVERITY_WEIGHTS, Issue, ReviewPayload

KEY_LIST_LIMIT = 50

SCORE_MIN = 1
SCORE_MAX = 10

COVERAGE_WEIGHT = 0.55
BALANCE_WEIGHT = 0.35
SEVERITY_MASS_WEIGHT = 0.10

HIGH_PENALTY_BASE = 0.3
HIGH_PENALTY_PER_ISSUE = 0.07
HIGH_PENALTY_CAP = 0.9


@dataclass(frozen=True)
class MergeResult:
    """Outcome of reconciling reviewer A against reviewer B."""

    score: int
    overlap: int
    union: int
    a_only_keys: tuple[str, ...] = ()
    b_only_keys: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "score": self.score,
            "overlap": self.overlap,
            "union": self.union,
            "a_only_keys": list(self.a_only_keys),
            "b_only_keys": list(self.b_only_keys),
        }


def issue_key(issue: Issue) -> str:
    """Matching identity: category, file and message. Line, severity and fix are ignored."""
    return f"{issue.category}|{issue.file}|{issue.message}"


def weighted_sum(payload: ReviewPayload) -> float:
    return sum(
        CATEGORY_WEIGHTS[issue.category] * SEVERITY_WEIGHTS[issue.severity]
        for issue in payload.issues
    )


def high_penalty(a: ReviewPayload, b: ReviewPayload) -> float:
    # Declared counts, not a recount of the issue list.
    declared = a.summary.high + b.summary.high
    return min(HIGH_PENALTY_BASE + HIGH_PENALTY_PER_ISSUE * declared, HIGH_PENALTY_CAP)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _bounded_score(raw: float, penalty: float) -> int:
    adjusted = raw * (1 - penalty)
    if not math.isfinite(adjusted):
        return SCORE_MIN
    rounded = _round_half_up(adjusted)
    if rounded == 0:
        return SCORE_MIN
    return max(SCORE_MIN, min(SCORE_MAX, rounded))


def reconcile(a: ReviewPayload, b: ReviewPayload) -> MergeResult:
    """Merge two payloads into overlap metrics and a score in [1, 10]."""
    a_keys = list(dict.fromkeys(issue_key(issue) for issue in a.issues))
    b_keys = list(dict.fromkeys(issue_key(issue) for issue in b.issues))
    a_set = set(a_keys)
    b_set = set(b_keys)

    overlap = sum(1 for key in a_keys if key in b_set)
    union = len(a_keys) + len(b_keys) - overlap or 1

    coverage = overlap / union
    total = len(a_keys) + len(b_keys)
    balance = 1 - abs(len(a_keys) - len(b_keys)) / (total or 1)
    severity_mass = math.tanh((weighted_sum(a) + weighted_sum(b)) / 10)

    raw = (
        COVERAGE_WEIGHT * coverage
        + BALANCE_WEIGHT * balance
        + SEVERITY_MASS_WEIGHT * severity_mass
    ) * 10
    score = _bounded_score(raw, high_penalty(a, b))

    a_only = [key for key in a_keys if key not in b_set]
    b_only = [key for key in b_keys if key not in a_set]
    return MergeResult(
        score=score,
        overlap=overlap,
        union=union,
        a_only_keys=tuple(a_only[:KEY_LIST_LIMIT]),
        b_only_keys=tuple(b_only[:KEY_LIST_LIMIT]),
    )
