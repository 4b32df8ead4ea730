"""Deterministic weekly statistics.

Everything numeric about a week is computed here, never by the
text-generation service. Fully testable without any LLM calls.
"""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from decimal import ROUND_HALF_UP, Decimal

from reflect.journal.models import JournalEntry, WeeklyAggregate, WeekWindow

_HUNDREDTHS = Decimal("0.01")


def average_rating(ratings: Sequence[int]) -> float:
    """Mean of ``ratings`` rounded to 2 decimal places; 0 when empty."""
    if not ratings:
        return 0.0
    mean = Decimal(sum(ratings)) / Decimal(len(ratings))
    return float(mean.quantize(_HUNDREDTHS, rounding=ROUND_HALF_UP))


def compute_weekly_aggregate(
    entries: Sequence[JournalEntry], week_start: date
) -> WeeklyAggregate:
    """Compute entry count, average rating and missing days for a week.

    Args:
        entries: One user's entries inside the window, sorted by date.
            Entries outside the window are a caller error and are not
            filtered here.
        week_start: First day of the window.

    Returns:
        WeeklyAggregate with missing days as ISO date strings in order.
    """
    window = WeekWindow(week_start=week_start)
    entry_dates = {e.date for e in entries}

    return WeeklyAggregate(
        entry_count=len(entries),
        avg_rating=average_rating([e.rating for e in entries]),
        missing_days=[d.isoformat() for d in window.days() if d not in entry_dates],
        source_entry_ids=[e.id for e in entries],
    )
