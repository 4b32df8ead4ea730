"""Tests for weekly prompt construction."""

from datetime import date

import pytest

from reflect.journal.aggregate import compute_weekly_aggregate
from reflect.journal.config import PromptVariant
from reflect.journal.models import JournalEntry
from reflect.journal.prompts import (
    VARIANT_ADDENDA,
    build_weekly_prompt,
    get_variant_addendum,
    render_entry,
)
from reflect.journal.validators import IMPERATIVE_VERBS

WEEK_START = date(2025, 10, 6)


def _entries() -> list[JournalEntry]:
    return [
        JournalEntry(
            id="entry-1",
            user_id="user-1",
            date=date(2025, 10, 6),
            gratitude="Grateful for my health",
            did_today="Light workout, read a book",
            proud_of="Took time for self-care",
            tomorrow_plan="Start the project {draft}",
            rating=2,
        ),
        JournalEntry(
            id="entry-2",
            user_id="user-1",
            date=date(2025, 10, 9),
            gratitude="Thankful for friends",
            did_today="Dinner with the team",
            proud_of="Finished the report",
            tomorrow_plan="Review notes",
            rating=1,
        ),
    ]


def _prompt(variant: PromptVariant = PromptVariant.BASE) -> str:
    entries = _entries()
    agg = compute_weekly_aggregate(entries, WEEK_START)
    return build_weekly_prompt(entries, agg, WEEK_START, variant)


class TestRenderEntry:
    def test_contains_all_fields(self):
        text = render_entry(_entries()[0])
        assert "Date: 2025-10-06" in text
        assert "Gratitude: Grateful for my health" in text
        assert "Did Today: Light workout, read a book" in text
        assert "Proud Of: Took time for self-care" in text
        assert "Tomorrow Plan: Start the project {draft}" in text
        assert "Rating: 2" in text


class TestBuildWeeklyPrompt:
    def test_includes_statistics(self):
        prompt = _prompt()
        assert "WEEK STATISTICS" in prompt
        assert "- Entry Count: 2" in prompt
        assert "- Average Rating: 1.5" in prompt
        assert "2025-10-07, 2025-10-08, 2025-10-10, 2025-10-11, 2025-10-12" in prompt
        assert "- Week Window: 2025-10-06 to 2025-10-12" in prompt

    def test_includes_entries_verbatim_and_separated(self):
        prompt = _prompt()
        assert "Dinner with the team" in prompt
        assert "{draft}" in prompt
        assert "\n\n---\n\n" in prompt
        assert prompt.index("2025-10-06\nGratitude") < prompt.index("Date: 2025-10-09")

    def test_includes_base_requirements(self):
        prompt = _prompt()
        assert "Use ONLY the provided journal entries" in prompt
        assert "<= 120 words" in prompt
        assert "<= 60 words" in prompt
        assert '"summary"' in prompt
        assert '"focus"' in prompt
        assert "Return ONLY the JSON object" in prompt

    def test_base_has_no_addendum(self):
        assert "\n6. " not in _prompt(PromptVariant.BASE)

    def test_section_order(self):
        prompt = _prompt()
        assert (
            prompt.index("WEEK STATISTICS")
            < prompt.index("JOURNAL ENTRIES FOR THIS WEEK")
            < prompt.index("CRITICAL REQUIREMENTS")
            < prompt.index("Return your response as a JSON object")
        )

    def test_no_missing_days_renders_none(self):
        entries = [
            JournalEntry(id=f"e{i}", user_id="u", date=date(2025, 10, 6 + i), rating=0)
            for i in range(7)
        ]
        agg = compute_weekly_aggregate(entries, WEEK_START)
        prompt = build_weekly_prompt(entries, agg, WEEK_START)
        assert "- Missing Days: None" in prompt

    def test_custom_limits(self):
        entries = _entries()
        agg = compute_weekly_aggregate(entries, WEEK_START)
        prompt = build_weekly_prompt(
            entries, agg, WEEK_START, summary_limit=90, focus_limit=30
        )
        assert "<= 90 words" in prompt
        assert "<= 30 words" in prompt


class TestVariants:
    @pytest.mark.parametrize("variant", list(PromptVariant))
    def test_every_variant_has_addendum_entry(self, variant):
        assert variant in VARIANT_ADDENDA

    def test_compressed(self):
        prompt = _prompt(PromptVariant.COMPRESSED)
        assert "6. Be extremely concise" in prompt
        assert "80 words" in prompt
        assert "40 words" in prompt

    def test_strict(self):
        prompt = _prompt(PromptVariant.STRICT)
        assert "No external links" in prompt
        assert "dates outside the target week" in prompt
        assert "say so" in prompt

    def test_actionable_lists_full_vocabulary(self):
        addendum = get_variant_addendum(PromptVariant.ACTIONABLE)
        for verb in IMPERATIVE_VERBS:
            assert verb in addendum
        for word in ("daily", "weekly", "morning", "evening"):
            assert f'"{word}"' in addendum
        assert "15 minutes" in addendum

    def test_addendum_appended_after_base_instructions(self):
        prompt = _prompt(PromptVariant.ACTIONABLE)
        assert prompt.index("5. Base insights") < prompt.index("6. Include at least one")
