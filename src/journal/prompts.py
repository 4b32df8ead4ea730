"""Prompt construction for weekly synthesis."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date

from reflect.journal.config import PromptVariant
from reflect.journal.models import JournalEntry, WeeklyAggregate, WeekWindow
from reflect.journal.validators import FREQUENCY_WORDS, IMPERATIVE_VERBS

PREAMBLE = (
    "You are a helpful assistant that synthesizes a week of journal entries "
    "into concise insights."
)

BASE_INSTRUCTIONS = """\
CRITICAL REQUIREMENTS:
1. Use ONLY the provided journal entries - do not invent facts or add information not present
2. Write a concise summary (<= {summary_limit} words) that captures the week's key themes, patterns, and emotional arc
3. Write a focus suggestion (<= {focus_limit} words) with concrete, actionable recommendations for next week
4. Adhere strictly to the word limits
5. Base insights only on what is explicitly stated in the entries"""

VARIANT_ADDENDA: dict[PromptVariant, str] = {
    PromptVariant.BASE: "",
    PromptVariant.COMPRESSED: (
        "Be extremely concise - aim for 80 words in summary and 40 words in focus"
    ),
    PromptVariant.STRICT: (
        "No external links or dates outside the target week. "
        "If the entries do not contain enough information, say so instead of guessing"
    ),
    PromptVariant.ACTIONABLE: (
        "Include at least one imperative verb from [{verbs}] and at least one "
        'timebox or frequency (e.g., "15 minutes", "2 hours", {frequencies}). '
        "Be concrete and low-lift"
    ),
}

RESPONSE_FORMAT = """\
Return your response as a JSON object with this exact structure:
{{
  "summary": "your concise weekly summary here (<= {summary_limit} words)",
  "focus": "your concrete focus suggestions here (<= {focus_limit} words)"
}}

Return ONLY the JSON object, no additional text."""

ENTRY_SEPARATOR = "\n\n---\n\n"


def get_variant_addendum(variant: PromptVariant) -> str:
    """Return the extra instruction for a variant, or "" for the base prompt."""
    template = VARIANT_ADDENDA[variant]
    return template.format(
        verbs=", ".join(IMPERATIVE_VERBS),
        frequencies=", ".join(f'"{w}"' for w in FREQUENCY_WORDS),
    )


def render_entry(entry: JournalEntry) -> str:
    """Render one entry verbatim for the prompt."""
    return "\n".join(
        [
            f"Date: {entry.date.isoformat()}",
            f"Gratitude: {entry.gratitude}",
            f"Did Today: {entry.did_today}",
            f"Proud Of: {entry.proud_of}",
            f"Tomorrow Plan: {entry.tomorrow_plan}",
            f"Rating: {entry.rating}",
        ]
    )


def render_statistics(aggregate: WeeklyAggregate, window: WeekWindow) -> str:
    missing = ", ".join(aggregate.missing_days) if aggregate.missing_days else "None"
    return "\n".join(
        [
            "WEEK STATISTICS (computed by code, for your context):",
            f"- Entry Count: {aggregate.entry_count}",
            f"- Average Rating: {aggregate.avg_rating}",
            f"- Missing Days: {missing}",
            f"- Week Window: {window.label()}",
        ]
    )


def build_weekly_prompt(
    entries: Sequence[JournalEntry],
    aggregate: WeeklyAggregate,
    week_start: date,
    variant: PromptVariant = PromptVariant.BASE,
    *,
    summary_limit: int = 120,
    focus_limit: int = 60,
) -> str:
    """Build the full request text for one week.

    Args:
        entries: The week's entries, sorted by date.
        aggregate: Statistics computed for those entries.
        week_start: First day of the window.
        variant: Which instruction addendum to append.
        summary_limit: Word limit stated for the summary.
        focus_limit: Word limit stated for the focus.

    Returns:
        Prompt text with a preamble, statistics, entries, instructions and the
        required response format, in that order.
    """
    window = WeekWindow(week_start=week_start)
    entries_text = ENTRY_SEPARATOR.join(render_entry(e) for e in entries)

    instructions = BASE_INSTRUCTIONS.format(
        summary_limit=summary_limit, focus_limit=focus_limit
    )
    addendum = get_variant_addendum(variant)
    if addendum:
        instructions += f"\n6. {addendum}"

    sections = [
        PREAMBLE,
        render_statistics(aggregate, window),
        f"JOURNAL ENTRIES FOR THIS WEEK:\n{entries_text}",
        instructions,
        RESPONSE_FORMAT.format(summary_limit=summary_limit, focus_limit=focus_limit),
    ]
    return "\n\n".join(sections)
