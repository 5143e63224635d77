"""Dual review reconciliation: extract, compare and score two code reviews."""

from .extract import ExtractionError, extract_review_payload, strip_code_fences
from .reconcile import MergeResult, issue_key, reconcile
from .report import render_dry_run, render_report
from .schema import (
    CATEGORIES,
    SEVERITIES,
    Issue,
    PayloadError,
    ReviewPayload,
    SummaryCounts,
    parse_payload,
)

__all__ = [
    "CATEGORIES",
    "ExtractionError",
    "Issue",
    "MergeResult",
    "PayloadError",
    "ReviewPayload",
    "SEVERITIES",
    "SummaryCounts",
    "extract_review_payload",
    "issue_key",
    "parse_payload",
    "reconcile",
    "render_dry_run",
    "render_report",
    "strip_code_fences",
]
