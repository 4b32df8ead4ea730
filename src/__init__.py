"""Daily journal entries with a validated, LLM-assisted weekly synthesis."""

__version__ = "0.1.0"
