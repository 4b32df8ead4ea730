"""Data models for journal entries and weekly summaries."""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta

from pydantic import BaseModel, Field, field_validator

from reflect.journal.config import PromptVariant

VALID_RATINGS: frozenset[int] = frozenset({-2, -1, 0, 1, 2})
WEEK_LENGTH_DAYS = 7


class JournalEntry(BaseModel):
    """A single day's structured reflection."""

    id: str
    user_id: str
    date: date
    gratitude: str = ""
    did_today: str = ""
    proud_of: str = ""
    tomorrow_plan: str = ""
    rating: int

    @field_validator("rating")
    @classmethod
    def _check_rating(cls, value: int) -> int:
        if value not in VALID_RATINGS:
            raise ValueError(f"rating must be in {sorted(VALID_RATINGS)}, got {value}")
        return value


class WeekWindow(BaseModel):
    """Inclusive seven-day range starting at ``week_start``."""

    week_start: date

    @property
    def week_end(self) -> date:
        return self.week_start + timedelta(days=WEEK_LENGTH_DAYS - 1)

    def days(self) -> Iterator[date]:
        """Yield every date in the window, in order."""
        for offset in range(WEEK_LENGTH_DAYS):
            yield self.week_start + timedelta(days=offset)

    def contains(self, day: date) -> bool:
        return self.week_start <= day <= self.week_end

    def label(self) -> str:
        return f"{self.week_start.isoformat()} to {self.week_end.isoformat()}"


def week_start_for(day: date) -> date:
    """Return the Monday of the week containing ``day``."""
    return day - timedelta(days=day.weekday())


class WeeklyAggregate(BaseModel):
    """Deterministic statistics for one week of entries."""

    entry_count: int = Field(default=0, ge=0)
    avg_rating: float = 0.0
    missing_days: list[str] = Field(default_factory=list)
    source_entry_ids: list[str] = Field(default_factory=list)


class SynthesisResult(BaseModel):
    """Validated output of the text-generation call."""

    summary: str
    focus: str


class WeeklySummary(BaseModel):
    """Persisted weekly synthesis for one (user, week_start)."""

    user_id: str
    week_start: date
    week_end: date
    entry_count: int
    avg_rating: float
    missing_days: list[str] = Field(default_factory=list)
    source_entry_ids: list[str] = Field(default_factory=list)
    summary: str
    focus: str
    variant: PromptVariant = PromptVariant.BASE
    generated_at: datetime = Field(default_factory=datetime.now)
