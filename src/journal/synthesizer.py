"""Claude CLI integration for weekly synthesis.

Calls ``claude -p`` with the assembled weekly prompt and returns the raw
response text. The call is the pipeline's only blocking step and is
bounded by ``SynthesisConfig.claude_timeout``.
"""

from __future__ import annotations

import logging
import subprocess
from typing import Protocol

from reflect.errors import TransportError, TransportTimeoutError
from reflect.journal.config import SynthesisConfig

logger = logging.getLogger(__name__)


class TextGenerator(Protocol):
    """Anything that turns one request text into one response text."""

    def generate(self, prompt: str) -> str: ...


class ClaudeCliGenerator:
    """Generates text via Claude CLI."""

    def __init__(self, config: SynthesisConfig) -> None:
        self._config = config

    def generate(self, prompt: str) -> str:
        """Send the prompt to Claude and return its response.

        Args:
            prompt: Full request text.

        Returns:
            Stripped stdout from the CLI.

        Raises:
            TransportTimeoutError: If the call exceeds the configured timeout.
            TransportError: If the CLI is missing, fails, or returns nothing.
        """
        cmd: list[str] = ["claude", "-p"]
        if self._config.model:
            cmd.extend(["--model", self._config.model])
        cmd.append(prompt)

        logger.debug("Calling Claude CLI for weekly synthesis")

        try:
            result = subprocess.run(
                cmd,
                capture_output=True,
                text=True,
                timeout=self._config.claude_timeout,
            )
        except FileNotFoundError as e:
            raise TransportError(
                "Claude CLI not found -- is 'claude' on the PATH?"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise TransportTimeoutError(
                f"Claude CLI timed out after {self._config.claude_timeout}s"
            ) from e
        except OSError as e:
            raise TransportError(f"Failed to run Claude CLI: {e}") from e

        if result.returncode != 0:
            err_text = result.stderr.strip() if result.stderr else ""
            raise TransportError(
                f"Claude CLI exited {result.returncode}: {err_text}"
            )

        output = result.stdout.strip()
        if not output:
            raise TransportError("Claude CLI returned an empty response")
        return output
