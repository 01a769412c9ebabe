"""
Configuration for the Psychiatric Note Generation Engine

This module defines the configuration dataclass used to initialize the
engine. Configuration is:
    1. Loaded from environment variables (with .env support)
    2. Validated at startup for settings that can never work
    3. Checked per request for a usable backend credential

A missing credential is NOT a startup error: the engine keeps serving and
every request returns a CONFIG_ERROR outcome until the key is fixed.

Configuration Hierarchy:
    EngineConfiguration
    ├── LLM Settings (provider, API keys, model names)
    └── Generation Settings (length ceiling, temperatures, post-processing)

Usage:
    from psych_note_generation.core.config import EngineConfiguration

    config = EngineConfiguration.from_environment()
    if config.credential_problem():
        ...

Author: Shubham Singh
Date: January 2026
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from psych_note_generation.core.constants import (
    DEFAULT_LENGTH_CEILING,
    MAX_TEMPERATURE,
    MIN_CREDENTIAL_LENGTH,
    MIN_TEMPERATURE,
    PLACEHOLDER_CREDENTIALS,
)
from psych_note_generation.core.enums import LLMProvider
from psych_note_generation.core.exceptions import ConfigurationError


# =============================================================================
# STAGE 1: DEFAULT VALUES
# =============================================================================


class ConfigDefaults:
    """Default configuration values."""

    # -------------------------------------------------------------------------
    # 1.1 LLM Provider Defaults
    # -------------------------------------------------------------------------
    DEFAULT_PROVIDER = LLMProvider.GEMINI.value
    DEFAULT_GEMINI_MODEL = "gemini-3-flash-preview"
    DEFAULT_OPENAI_MODEL = "gpt-4o-mini"

    # -------------------------------------------------------------------------
    # 1.2 Generation Defaults
    # -------------------------------------------------------------------------
    DEFAULT_LENGTH_CEILING = DEFAULT_LENGTH_CEILING
    DEFAULT_BASE_TEMPERATURE = MIN_TEMPERATURE
    DEFAULT_DIVERSIFIED_TEMPERATURE = MAX_TEMPERATURE
    DEFAULT_STRIP_BOLD_MARKUP = True


# =============================================================================
# STAGE 2: CREDENTIAL CHECK
# =============================================================================


def is_usable_credential(value: Optional[str]) -> bool:
    """
    Decide whether a credential string could possibly authenticate.

    Rejects empty values, known placeholders ("undefined", "your_api_key_here")
    and anything shorter than the minimum plausible key length.

    Example:
        >>> is_usable_credential("undefined")
        False
    """
    if not value:
        return False
    stripped = value.strip()
    if stripped.lower() in PLACEHOLDER_CREDENTIALS:
        return False
    return len(stripped) >= MIN_CREDENTIAL_LENGTH


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return raw.strip().lower() in ("1", "true", "yes", "on")


def _env_number(name: str, default, cast):
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return cast(raw)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid value for {name}: {raw!r}", context={"setting": name}
        ) from e


# =============================================================================
# STAGE 3: CONFIGURATION DATACLASS
# =============================================================================


@dataclass
class EngineConfiguration:
    """
    Configuration for the psychiatric note generation engine.

    What it does:
        Holds the backend selection, credentials and generation knobs the
        NoteGenerator needs for every request.

    Why it exists:
        1. Single source of truth for all configuration
        2. Lets tests build a config without touching the environment
        3. Keeps credential checks in one place

    When to use:
        - At pipeline initialization
        - When creating test fixtures with custom config

    Example:
        >>> config = EngineConfiguration(api_key="test-key-1234567890")
        >>> config.credential_problem() is None
        True
    """

    # -------------------------------------------------------------------------
    # 3.1 LLM Provider Configuration
    # -------------------------------------------------------------------------
    llm_provider: str = ConfigDefaults.DEFAULT_PROVIDER
    """Which LLM provider to use: 'gemini' or 'openai'."""

    api_key: Optional[str] = None
    """Provider-neutral credential (API_KEY). Wins over provider-specific keys."""

    gemini_api_key: Optional[str] = None
    """Google Gemini API key."""

    gemini_model: str = ConfigDefaults.DEFAULT_GEMINI_MODEL
    """Gemini model name."""

    openai_api_key: Optional[str] = None
    """OpenAI API key."""

    openai_model: str = ConfigDefaults.DEFAULT_OPENAI_MODEL
    """OpenAI model name."""

    # -------------------------------------------------------------------------
    # 3.2 Generation Configuration
    # -------------------------------------------------------------------------
    length_ceiling: int = ConfigDefaults.DEFAULT_LENGTH_CEILING
    """Maximum CJK characters for length-constrained record types."""

    base_temperature: float = ConfigDefaults.DEFAULT_BASE_TEMPERATURE
    """Temperature when no prior same-type record exists."""

    diversified_temperature: float = ConfigDefaults.DEFAULT_DIVERSIFIED_TEMPERATURE
    """Temperature when the anti-repetition rule is in force."""

    strip_bold_markup: bool = ConfigDefaults.DEFAULT_STRIP_BOLD_MARKUP
    """Remove '**' from generated text before returning it."""

    # -------------------------------------------------------------------------
    # 3.3 Derived Properties
    # -------------------------------------------------------------------------

    @property
    def active_api_key(self) -> Optional[str]:
        """Credential for the selected provider."""
        if self.api_key:
            return self.api_key
        if self.llm_provider == LLMProvider.OPENAI.value:
            return self.openai_api_key
        return self.gemini_api_key

    @property
    def active_model(self) -> str:
        """Model name for the selected provider."""
        if self.llm_provider == LLMProvider.OPENAI.value:
            return self.openai_model
        return self.gemini_model

    def credential_problem(self) -> Optional[str]:
        """
        Describe why the active credential is unusable.

        Returns:
            None when the credential looks usable, else a short reason
        """
        key = self.active_api_key
        if not key or not key.strip():
            return "API key not configured"
        if key.strip().lower() in PLACEHOLDER_CREDENTIALS:
            return "API key is a placeholder value"
        if not is_usable_credential(key):
            return f"API key shorter than {MIN_CREDENTIAL_LENGTH} characters"
        return None

    # -------------------------------------------------------------------------
    # 3.4 Validation Methods
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Checks:
            1. Provider is supported
            2. Length ceiling is positive
            3. Temperatures lie within [0.7, 0.85] and base <= diversified

        Raises:
            ConfigurationError: If configuration is invalid
        """
        valid_providers = [provider.value for provider in LLMProvider]
        if self.llm_provider not in valid_providers:
            raise ConfigurationError(
                f"Unknown LLM provider: {self.llm_provider}",
                context={"setting": "LLM_PROVIDER", "valid": valid_providers},
            )

        if self.length_ceiling <= 0:
            raise ConfigurationError(
                f"Length ceiling must be positive, got {self.length_ceiling}",
                context={"setting": "NOTE_LENGTH_CEILING"},
            )

        for name, value in (
            ("BASE_TEMPERATURE", self.base_temperature),
            ("DIVERSIFIED_TEMPERATURE", self.diversified_temperature),
        ):
            if not (MIN_TEMPERATURE <= value <= MAX_TEMPERATURE):
                raise ConfigurationError(
                    f"{name} must be within [{MIN_TEMPERATURE}, {MAX_TEMPERATURE}], got {value}",
                    context={"setting": name, "value": value},
                )

        if self.base_temperature > self.diversified_temperature:
            raise ConfigurationError(
                "BASE_TEMPERATURE must not exceed DIVERSIFIED_TEMPERATURE",
                context={
                    "base": self.base_temperature,
                    "diversified": self.diversified_temperature,
                },
            )

    # -------------------------------------------------------------------------
    # 3.5 Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_environment(
        cls, env_file: Optional[str] = None, validate_on_load: bool = True
    ) -> "EngineConfiguration":
        """
        Load configuration from environment variables.

        STAGE 1: Load .env file (if specified or found)
        STAGE 2: Read environment variables
        STAGE 3: Convert to typed configuration
        STAGE 4: Validate configuration (optional)

        Args:
            env_file: Path to .env file (optional, auto-detected if not provided)
            validate_on_load: Whether to validate after loading

        Returns:
            Configured EngineConfiguration instance

        Raises:
            ConfigurationError: If numeric settings or the provider are invalid
        """
        # STAGE 1: Load .env file
        if env_file:
            load_dotenv(env_file)
        else:
            possible_locations = [
                Path.cwd() / ".env",
                Path(__file__).parent.parent / ".env",
            ]
            for location in possible_locations:
                if location.exists():
                    load_dotenv(location)
                    break

        # STAGE 2: Read environment variables
        gemini_key = os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY")
        openai_key = os.getenv("OPENAI_API_KEY")

        llm_provider = os.getenv("LLM_PROVIDER", ConfigDefaults.DEFAULT_PROVIDER).strip().lower()
        if not os.getenv("LLM_PROVIDER") and not gemini_key and openai_key:
            llm_provider = LLMProvider.OPENAI.value

        # STAGE 3: Create configuration
        config = cls(
            llm_provider=llm_provider,
            api_key=os.getenv("API_KEY"),
            gemini_api_key=gemini_key,
            gemini_model=os.getenv("GEMINI_MODEL", ConfigDefaults.DEFAULT_GEMINI_MODEL),
            openai_api_key=openai_key,
            openai_model=os.getenv("OPENAI_MODEL", ConfigDefaults.DEFAULT_OPENAI_MODEL),
            length_ceiling=_env_number(
                "NOTE_LENGTH_CEILING", ConfigDefaults.DEFAULT_LENGTH_CEILING, int
            ),
            base_temperature=_env_number(
                "BASE_TEMPERATURE", ConfigDefaults.DEFAULT_BASE_TEMPERATURE, float
            ),
            diversified_temperature=_env_number(
                "DIVERSIFIED_TEMPERATURE", ConfigDefaults.DEFAULT_DIVERSIFIED_TEMPERATURE, float
            ),
            strip_bold_markup=_env_bool(
                "STRIP_BOLD_MARKUP", ConfigDefaults.DEFAULT_STRIP_BOLD_MARKUP
            ),
        )

        # STAGE 4: Validate
        if validate_on_load:
            config.validate()

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary (for logging/debugging)."""
        return {
            "llm_provider": self.llm_provider,
            "active_model": self.active_model,
            "api_key": "***" if self.api_key else None,
            "gemini_api_key": "***" if self.gemini_api_key else None,
            "openai_api_key": "***" if self.openai_api_key else None,
            "length_ceiling": self.length_ceiling,
            "base_temperature": self.base_temperature,
            "diversified_temperature": self.diversified_temperature,
            "strip_bold_markup": self.strip_bold_markup,
        }
