"""Weekly synthesis pipeline.

aggregate -> prompt -> generator call -> parse -> validate -> upsert.
Storage is written only after every validator has passed, so a rejected
response leaves any earlier summary for the same week untouched.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import date, datetime
from typing import TYPE_CHECKING

from reflect.errors import NoEntriesError, ValidationFailure
from reflect.journal.aggregate import compute_weekly_aggregate
from reflect.journal.config import PromptVariant, SynthesisConfig
from reflect.journal.models import WeeklySummary, WeekWindow
from reflect.journal.parser import parse_synthesis_response
from reflect.journal.prompts import build_weekly_prompt
from reflect.journal.synthesizer import TextGenerator
from reflect.journal.validators import validate_synthesis

if TYPE_CHECKING:
    from reflect.store import EntryStore, SummaryStore

logger = logging.getLogger(__name__)


class WeeklySynthesizer:
    """Coordinates one synthesis per (user, week_start).

    Calls for the same key are serialized; calls for different keys do
    not block each other.
    """

    def __init__(
        self,
        entries: EntryStore,
        summaries: SummaryStore,
        generator: TextGenerator,
        config: SynthesisConfig | None = None,
    ) -> None:
        self._entries = entries
        self._summaries = summaries
        self._generator = generator
        self._config = config or SynthesisConfig()
        self._key_locks: dict[tuple[str, date], list] = {}
        self._registry_lock = threading.Lock()

    @contextmanager
    def _locked(self, key: tuple[str, date]) -> Iterator[None]:
        """Hold the lock for ``key``; drop it once no caller holds or awaits it."""
        with self._registry_lock:
            slot = self._key_locks.setdefault(key, [threading.Lock(), 0])
            slot[1] += 1
        try:
            with slot[0]:
                yield
        finally:
            with self._registry_lock:
                slot[1] -= 1
                if slot[1] == 0:
                    del self._key_locks[key]

    def synthesize_week(
        self,
        user_id: str,
        week_start: date,
        variant: PromptVariant | None = None,
    ) -> WeeklySummary:
        """Generate, validate and store the summary for one week.

        Args:
            user_id: Owner of the entries.
            week_start: First day of the seven-day window.
            variant: Prompt variant; defaults to the configured one.

        Returns:
            The stored WeeklySummary.

        Raises:
            NoEntriesError: If the window has no entries. The generator
                is not called.
            TransportError: If the generator call fails.
            ParseError: If the response has no usable JSON object.
            ShapeError, WindowError, ActionabilityError: If a validator
                rejects the response.
            OSError: If the summary store cannot be written. Any earlier
                summary for the week is kept.
        """
        variant = variant or self._config.default_variant
        with self._locked((user_id, week_start)):
            return self._run(user_id, week_start, variant)

    def _run(
        self, user_id: str, week_start: date, variant: PromptVariant
    ) -> WeeklySummary:
        window = WeekWindow(week_start=week_start)
        week_entries = self._entries.list_range(user_id, window.week_start, window.week_end)
        if not week_entries:
            raise NoEntriesError(
                f"No entries found for user {user_id} in week starting "
                f"{week_start.isoformat()}"
            )

        aggregate = compute_weekly_aggregate(week_entries, week_start)
        prompt = build_weekly_prompt(
            week_entries,
            aggregate,
            week_start,
            variant,
            summary_limit=self._config.summary_word_limit,
            focus_limit=self._config.focus_word_limit,
        )

        logger.debug(
            "Synthesizing week %s for %s (%d entries, variant=%s)",
            week_start,
            user_id,
            aggregate.entry_count,
            variant.value,
        )
        response = self._generator.generate(prompt)
        logger.debug("Raw synthesis response: %s", response)

        data = parse_synthesis_response(response)
        try:
            result = validate_synthesis(
                data,
                week_start,
                summary_limit=self._config.summary_word_limit,
                focus_limit=self._config.focus_word_limit,
            )
        except ValidationFailure as e:
            logger.warning(
                "Rejected synthesis for %s week %s: %s", user_id, week_start, e.rule
            )
            raise

        summary = WeeklySummary(
            user_id=user_id,
            week_start=window.week_start,
            week_end=window.week_end,
            entry_count=aggregate.entry_count,
            avg_rating=aggregate.avg_rating,
            missing_days=aggregate.missing_days,
            source_entry_ids=aggregate.source_entry_ids,
            summary=result.summary,
            focus=result.focus,
            variant=variant,
            generated_at=datetime.now(),
        )
        self._summaries.upsert(summary)
        logger.info("Stored weekly summary for %s week %s", user_id, week_start)
        return summary

    def get_weekly_summary(self, user_id: str, week_start: date) -> WeeklySummary | None:
        """Return the stored summary for a week, if one exists."""
        return self._summaries.get(user_id, week_start)
