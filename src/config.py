"""Configuration loaded from .reflect.toml and env vars.

Loading order: defaults → TOML file → env vars.
"""

from __future__ import annotations

import logging
import os
import tomllib
from pathlib import Path

from pydantic import BaseModel, Field

from reflect.journal.config import PromptVariant, SynthesisConfig

logger = logging.getLogger(__name__)

CONFIG_FILENAME = ".reflect.toml"
# Candidate files, first match wins.
CONFIG_SEARCH_PATHS = [
    Path(CONFIG_FILENAME),
    Path.home() / ".config" / "reflect" / "config.toml",
]


class StorageConfig(BaseModel):
    """[storage] section."""

    directory: str = ""

    @property
    def path(self) -> Path | None:
        return Path(self.directory).expanduser() if self.directory else None


class SynthesisSectionConfig(BaseModel):
    """[synthesis] section."""

    model: str | None = None
    claude_timeout: int = 120
    default_variant: PromptVariant = PromptVariant.BASE
    summary_word_limit: int = 120
    focus_word_limit: int = 60


class ReflectConfig(BaseModel):
    """Top-level configuration model."""

    storage: StorageConfig = Field(default_factory=StorageConfig)
    synthesis: SynthesisSectionConfig = Field(default_factory=SynthesisSectionConfig)

    def to_synthesis_config(self) -> SynthesisConfig:
        """Convert to SynthesisConfig for the weekly pipeline."""
        return SynthesisConfig(
            model=self.synthesis.model,
            claude_timeout=self.synthesis.claude_timeout,
            default_variant=self.synthesis.default_variant,
            summary_word_limit=self.synthesis.summary_word_limit,
            focus_word_limit=self.synthesis.focus_word_limit,
        )


def load_config(path: str | Path | None = None) -> ReflectConfig:
    """Load configuration from a TOML file.

    Search order:
    1. Explicit path (if provided)
    2. .reflect.toml in CWD
    3. ~/.config/reflect/config.toml

    Then overlay environment variables.

    Args:
        path: Explicit path to a TOML file.

    Returns:
        Merged ReflectConfig.
    """
    data: dict[str, object] = {}

    if path is not None:
        toml_path = Path(path)
        if toml_path.exists():
            data = _load_toml(toml_path)
        else:
            logger.warning("Config file not found: %s", toml_path)
    else:
        for candidate in CONFIG_SEARCH_PATHS:
            if candidate.exists():
                data = _load_toml(candidate)
                logger.info("Loaded config from %s", candidate)
                break

    config = ReflectConfig.model_validate(data) if data else ReflectConfig()
    return _apply_env_vars(config)


def _load_toml(path: Path) -> dict[str, object]:
    """Load a TOML file and return the data dict."""
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (tomllib.TOMLDecodeError, OSError) as exc:
        logger.warning("Failed to parse %s: %s", path, exc)
        return {}


def _apply_env_vars(config: ReflectConfig) -> ReflectConfig:
    """Apply environment variable overrides to config."""
    data = config.model_dump()

    env_mapping: dict[str, tuple[str, str]] = {
        "REFLECT_STORAGE_DIR": ("storage", "directory"),
        "REFLECT_MODEL": ("synthesis", "model"),
        "REFLECT_CLAUDE_TIMEOUT": ("synthesis", "claude_timeout"),
        "REFLECT_VARIANT": ("synthesis", "default_variant"),
    }

    for env_var, (section, field) in env_mapping.items():
        value = os.environ.get(env_var)
        if value is not None:
            data[section][field] = value

    return ReflectConfig.model_validate(data)
