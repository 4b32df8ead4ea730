"""Extract the summary/focus JSON object from raw generator output."""

from __future__ import annotations

import json
import logging
import re

from reflect.errors import ParseError

logger = logging.getLogger(__name__)

REQUIRED_KEYS: tuple[str, ...] = ("summary", "focus")

# Greedy: first "{" through last "}". Markdown fences around the object fall
# outside the match.
_JSON_OBJECT_RE = re.compile(r"\{.*\}", re.DOTALL)


def parse_synthesis_response(text: str) -> dict[str, object]:
    """Parse the JSON object embedded in a generator response.

    Extra keys are kept so the shape validator can reject them.

    Args:
        text: Raw response text.

    Returns:
        The parsed mapping, guaranteed to hold string ``summary`` and
        ``focus`` values.

    Raises:
        ParseError: If no object is found, it is not valid JSON, or the
            required keys are missing or not strings.
    """
    match = _JSON_OBJECT_RE.search(text)
    if match is None:
        logger.debug("No JSON object in response: %r", text[:500])
        raise ParseError("No JSON object found in response")

    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        logger.debug("Invalid JSON in response: %r", match.group(0)[:500])
        raise ParseError(f"Response contains invalid JSON: {e}") from e

    if not isinstance(data, dict):
        raise ParseError(f"Expected a JSON object, got {type(data).__name__}")

    missing = [k for k in REQUIRED_KEYS if k not in data]
    if missing:
        raise ParseError(f"Response is missing required keys: {', '.join(missing)}")

    wrong_type = [k for k in REQUIRED_KEYS if not isinstance(data[k], str)]
    if wrong_type:
        raise ParseError(f"Values must be strings: {', '.join(wrong_type)}")

    return data
