"""Weekly synthesis of daily journal entries.

Two-phase pipeline: deterministic aggregation and prompt assembly
(testable without an LLM), then a single Claude call whose output is
parsed and validated before the summary is stored.
"""

from reflect.journal.aggregate import compute_weekly_aggregate
from reflect.journal.config import PromptVariant, SynthesisConfig
from reflect.journal.models import (
    JournalEntry,
    SynthesisResult,
    WeeklyAggregate,
    WeeklySummary,
    WeekWindow,
    week_start_for,
)
from reflect.journal.orchestrator import WeeklySynthesizer
from reflect.journal.parser import parse_synthesis_response
from reflect.journal.prompts import build_weekly_prompt
from reflect.journal.synthesizer import ClaudeCliGenerator, TextGenerator
from reflect.journal.validators import validate_synthesis

__all__ = [
    "ClaudeCliGenerator",
    "JournalEntry",
    "PromptVariant",
    "SynthesisConfig",
    "SynthesisResult",
    "TextGenerator",
    "WeekWindow",
    "WeeklyAggregate",
    "WeeklySummary",
    "WeeklySynthesizer",
    "build_weekly_prompt",
    "compute_weekly_aggregate",
    "parse_synthesis_response",
    "validate_synthesis",
    "week_start_for",
]
