"""Recover a review payload from raw reviewer output.

Reviewer CLIs do not reliably emit bare JSON. They wrap it in a result
envelope, a fenced code block, or surrounding prose. Strategies run from
strictest to most permissive; the first one that yields a valid payload
wins.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Callable

from .schema import PayloadError, ReviewPayload, parse_payload

logger = logging.getLogger(__name__)

ERROR_PREVIEW_CHARS = 120

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```", re.IGNORECASE)


class ExtractionError(ValueError):
    """No strategy recovered a schema-conforming payload."""

    def __init__(self, raw: str) -> None:
        self.raw = raw
        preview = raw.strip()[:ERROR_PREVIEW_CHARS]
        super().__init__(
            "Reviewer did not emit valid review JSON (issues/summary). "
            f"First {ERROR_PREVIEW_CHARS} chars: {preview}"
        )


def strip_code_fences(text: str) -> str:
    """Return the first fenced block's body, else the outermost ``{...}`` span."""
    match = _FENCE_RE.search(text)
    if match and match.group(1):
        return match.group(1).strip()
    first = text.find("{")
    last = text.rfind("}")
    if first != -1 and last != -1 and last > first:
        return text[first : last + 1]
    return text.strip()


def _direct(raw: str) -> ReviewPayload:
    return parse_payload(raw)


def _envelope(raw: str) -> ReviewPayload:
    try:
        envelope = json.loads(raw)
    except (ValueError, RecursionError) as exc:
        raise PayloadError(f"invalid JSON: {exc}") from exc
    if not isinstance(envelope, dict):
        raise PayloadError("envelope: expected object")
    for key in ("type", "result"):
        if key in envelope and not isinstance(envelope[key], str):
            raise PayloadError(f"envelope.{key}: expected string")
    result = envelope.get("result")
    if not result:
        raise PayloadError("envelope: no result")
    return parse_payload(strip_code_fences(result))


def _stripped(raw: str) -> ReviewPayload:
    return parse_payload(strip_code_fences(raw))


STRATEGIES: tuple[tuple[str, Callable[[str], ReviewPayload]], ...] = (
    ("direct", _direct),
    ("envelope", _envelope),
    ("fenced", _stripped),
)


def extract_review_payload(raw: str) -> ReviewPayload:
    """Extract a validated payload from arbitrary reviewer stdout.

    Accepts plain schema JSON, a JSON envelope whose ``result`` string
    holds the payload (optionally fenced), or fenced/embedded JSON in the
    output itself.

    Raises:
        ExtractionError: every strategy failed.
    """
    text = raw.strip()
    for name, strategy in STRATEGIES:
        try:
            payload = strategy(text)
        except PayloadError as exc:
            logger.debug("extraction strategy %s failed: %s", name, exc)
            continue
        logger.debug("extraction strategy %s succeeded", name)
        return payload
    raise ExtractionError(raw)
