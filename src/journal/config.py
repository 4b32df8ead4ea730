"""Configuration models for weekly synthesis."""

from enum import StrEnum

from pydantic import BaseModel


class PromptVariant(StrEnum):
    """Instruction addenda appended to the base synthesis prompt."""

    BASE = "base"
    COMPRESSED = "compressed"
    STRICT = "strict"
    ACTIONABLE = "actionable"


class SynthesisConfig(BaseModel):
    """Configuration for weekly summary generation."""

    model: str | None = None
    claude_timeout: int = 120
    default_variant: PromptVariant = PromptVariant.BASE
    summary_word_limit: int = 120
    focus_word_limit: int = 60
