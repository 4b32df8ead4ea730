"""Error taxonomy for entry bookkeeping and weekly synthesis.

Every failure is terminal for the call that raised it. Validation
errors carry the rule that failed and the offending fragment so a
rejected response can be diagnosed without calling the generator again.
"""

from __future__ import annotations


class ReflectError(Exception):
    """Base error for the reflect package."""


# ---------------------------------------------------------------------------
# Entry bookkeeping
# ---------------------------------------------------------------------------


class EntryError(ReflectError):
    """Raised when a journal entry operation is rejected."""


class DuplicateEntryError(EntryError):
    """An entry already exists for this (user, date)."""


class EntryNotFoundError(EntryError):
    """No entry exists with the given ID."""


class InvalidRatingError(EntryError):
    """Rating is outside {-2, -1, 0, 1, 2}."""


# ---------------------------------------------------------------------------
# Synthesis
# ---------------------------------------------------------------------------


class SynthesisError(ReflectError):
    """Raised when a weekly synthesis attempt fails."""


class NoEntriesError(SynthesisError):
    """No entries exist for the requested week."""


class TransportError(SynthesisError):
    """The text-generation call failed."""


class TransportTimeoutError(TransportError):
    """The text-generation call did not finish within its timeout."""


class ParseError(SynthesisError):
    """The response did not contain a usable JSON object."""


class ValidationFailure(SynthesisError):
    """A validator rejected the parsed response.

    Attributes:
        rule: Name of the violated rule.
        offending: The value that violated it.
    """

    stage = "validation"

    def __init__(self, rule: str, offending: object, detail: str = "") -> None:
        self.rule = rule
        self.offending = offending
        message = f"{self.stage} failed [{rule}]: {offending!r}"
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)


class ShapeError(ValidationFailure):
    """V1: wrong key set, empty field, or word limit exceeded."""

    stage = "V1 shape & limits"


class WindowError(ValidationFailure):
    """V2: URL present or date outside the week window."""

    stage = "V2 window & links"


class ActionabilityError(ValidationFailure):
    """V3: focus lacks an imperative verb or a timebox/frequency."""

    stage = "V3 actionability"
