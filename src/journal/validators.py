"""Validator chain gating acceptance of generator output.

Three pure checks run in order, and the first failure aborts synthesis:

V1 shape & limits
    Keys are exactly ``summary`` and ``focus``, both non-empty after
    stripping, and within their word limits (whitespace-delimited tokens).
V2 window & links
    No ``http://`` or ``https://`` anywhere in summary or focus, and every
    ``YYYY-MM-DD`` token is a real date inside the week window. Any
    occurrence of a scheme counts, including one quoted as an example.
    A token that is not a valid calendar date is rejected as well.
V3 actionability
    The focus contains a whole-word imperative verb from
    ``IMPERATIVE_VERBS`` and a timebox (``15 min``, ``2 hours``,
    ``15-minute``) or one of ``FREQUENCY_WORDS``. Matching is
    case-insensitive and word-bounded, so "planning" does not count as
    "plan" and "15minutes" does count as a timebox.

Given the same input and week start the outcome is always the same.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from datetime import date

from reflect.errors import ActionabilityError, ShapeError, WindowError
from reflect.journal.models import SynthesisResult, WeekWindow

IMPERATIVE_VERBS: tuple[str, ...] = (
    "schedule",
    "plan",
    "block",
    "review",
    "write",
    "read",
    "practice",
    "prepare",
    "email",
    "call",
    "draft",
    "set",
)
FREQUENCY_WORDS: tuple[str, ...] = ("daily", "weekly", "morning", "evening")
ALLOWED_KEYS: frozenset[str] = frozenset({"summary", "focus"})

_URL_RE = re.compile(r"https?://\S*", re.IGNORECASE)
_ISO_DATE_RE = re.compile(r"\b\d{4}-\d{2}-\d{2}\b")
_VERB_RE = re.compile(
    r"\b(?:" + "|".join(IMPERATIVE_VERBS) + r")\b", re.IGNORECASE
)
_TIMEBOX_RE = re.compile(
    r"\b\d+\s?-?(?:min|mins|minute|minutes|hour|hours)\b"
    r"|\b(?:" + "|".join(FREQUENCY_WORDS) + r")\b",
    re.IGNORECASE,
)


def word_count(text: str) -> int:
    return len(text.split())


def validate_shape_and_limits(
    data: Mapping[str, object],
    *,
    summary_limit: int = 120,
    focus_limit: int = 60,
) -> SynthesisResult:
    """V1: exact key set, non-empty strings, word limits.

    Raises:
        ShapeError: Naming the violated condition and offending value.
    """
    keys = set(data)
    extra = sorted(keys - ALLOWED_KEYS)
    if extra:
        raise ShapeError("extra-keys", extra)
    missing = sorted(ALLOWED_KEYS - keys)
    if missing:
        raise ShapeError("missing-keys", missing)

    for key in ("summary", "focus"):
        value = data[key]
        if not isinstance(value, str) or not value.strip():
            raise ShapeError(f"empty-{key}", value)

    summary = str(data["summary"])
    focus = str(data["focus"])

    summary_words = word_count(summary)
    if summary_words > summary_limit:
        raise ShapeError(
            "summary-word-limit",
            summary_words,
            f"summary has {summary_words} words, max {summary_limit}",
        )
    focus_words = word_count(focus)
    if focus_words > focus_limit:
        raise ShapeError(
            "focus-word-limit",
            focus_words,
            f"focus has {focus_words} words, max {focus_limit}",
        )

    return SynthesisResult(summary=summary, focus=focus)


def validate_window_and_links(result: SynthesisResult, week_start: date) -> None:
    """V2: no URLs, no ISO dates outside the window.

    Raises:
        WindowError: Naming the offending URL or date.
    """
    window = WeekWindow(week_start=week_start)
    combined = f"{result.summary} {result.focus}"

    url = _URL_RE.search(combined)
    if url is not None:
        raise WindowError("no-links", url.group(0))

    for token in _ISO_DATE_RE.findall(combined):
        try:
            mentioned = date.fromisoformat(token)
        except ValueError:
            raise WindowError("invalid-date", token) from None
        if not window.contains(mentioned):
            raise WindowError(
                "date-outside-window",
                token,
                f"window is {window.week_start.isoformat()}..{window.week_end.isoformat()}",
            )


def validate_actionability(result: SynthesisResult) -> None:
    """V3: focus needs an imperative verb and a timebox or frequency.

    Raises:
        ActionabilityError: When either is missing.
    """
    if _VERB_RE.search(result.focus) is None:
        raise ActionabilityError(
            "imperative-verb",
            result.focus,
            f"expected one of: {', '.join(IMPERATIVE_VERBS)}",
        )
    if _TIMEBOX_RE.search(result.focus) is None:
        raise ActionabilityError(
            "timebox-or-frequency",
            result.focus,
            'expected a duration like "15 minutes" or one of: '
            + ", ".join(FREQUENCY_WORDS),
        )


def validate_synthesis(
    data: Mapping[str, object],
    week_start: date,
    *,
    summary_limit: int = 120,
    focus_limit: int = 60,
) -> SynthesisResult:
    """Run V1, V2 and V3 in order and return the accepted result."""
    result = validate_shape_and_limits(
        data, summary_limit=summary_limit, focus_limit=focus_limit
    )
    validate_window_and_links(result, week_start)
    validate_actionability(result)
    return result
