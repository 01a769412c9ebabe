"""
LLM Client Protocol and Base Implementation

This module defines the interface for text generation backends and a base
class with the behaviour every backend shares: one call per request,
SDK error translation, and call metrics.

Protocol Pattern:
    - LLMClientProtocol defines the interface
    - BaseLLMClient provides common implementation
    - Concrete clients (GeminiClient, OpenAIClient) extend base

No Retries:
    generate() makes exactly one backend call. Retrying a rate-limited or
    empty call is the user's decision, guided by the outcome message.

Rate-Limit Detection:
    is_rate_limit_error() is the single adapter that decides whether an SDK
    exception means "quota / frequency exceeded". Structured status fields
    are checked first; message text is only a last resort.

Author: Shubham Singh
Date: January 2026
"""

from abc import ABC, abstractmethod
from typing import Any, Optional, Protocol, runtime_checkable

from loguru import logger

from psych_note_generation.core.constants import RATE_LIMIT_MESSAGE_MARKERS
from psych_note_generation.core.exceptions import (
    BackendError,
    BackendRateLimitError,
)


# =============================================================================
# STAGE 1: LLM CLIENT PROTOCOL
# =============================================================================


@runtime_checkable
class LLMClientProtocol(Protocol):
    """
    Protocol defining the interface for text generation backends.

    What it does:
        Specifies the one method the NoteGenerator calls, enabling
        dependency injection of fakes in tests.

    Required Methods:
        generate(prompt, system_instruction, temperature) → text or None
    """

    def generate(self, prompt: str, system_instruction: str, temperature: float) -> Optional[str]:
        """
        Generate text for one request.

        Returns:
            Generated text, or None/empty when the backend produced nothing

        Raises:
            BackendRateLimitError: If the backend refused due to quota
            BackendError: For any other backend failure
        """
        ...

    @property
    def model_name(self) -> str:
        ...

    @property
    def provider_name(self) -> str:
        ...


# =============================================================================
# STAGE 2: ERROR TRANSLATION
# =============================================================================

RATE_LIMIT_STATUS = 429
RATE_LIMIT_STATUS_NAMES = ("RESOURCE_EXHAUSTED", "TOO_MANY_REQUESTS")


def _is_rate_limit_status(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, int) and not isinstance(value, bool):
        return value == RATE_LIMIT_STATUS
    name = getattr(value, "name", None)
    if isinstance(name, str) and name.upper() in RATE_LIMIT_STATUS_NAMES:
        return True
    text = str(value).strip().upper()
    return text == str(RATE_LIMIT_STATUS) or any(status in text for status in RATE_LIMIT_STATUS_NAMES)


def is_rate_limit_error(error: BaseException) -> bool:
    """
    Decide whether an SDK exception is a quota / frequency refusal.

    Checks, in order:
        1. Structured status on the error: code, status_code, http_status,
           grpc_status_code (429 or RESOURCE_EXHAUSTED)
        2. Status code on an attached HTTP response
        3. Message markers ("429", "quota", "rate limit", ...) as last resort,
           only when the error carries no structured status at all

    Example:
        >>> is_rate_limit_error(Exception("429 Too Many Requests"))
        True
    """
    if isinstance(error, BackendRateLimitError):
        return True

    has_status = False
    for attribute in ("code", "status_code", "http_status", "grpc_status_code", "status"):
        value = getattr(error, attribute, None)
        if value is None or callable(value):
            continue
        if _is_rate_limit_status(value):
            return True
        has_status = True

    response = getattr(error, "response", None)
    response_status = getattr(response, "status_code", None) if response is not None else None
    if response_status is not None:
        if _is_rate_limit_status(response_status):
            return True
        has_status = True

    # A definite non-429 status outranks words in the message
    if has_status:
        return False

    message = str(error).lower()
    return any(marker in message for marker in RATE_LIMIT_MESSAGE_MARKERS)


def extract_retry_after(error: BaseException) -> Optional[int]:
    """Seconds the backend asked us to wait, when it said so."""
    value = getattr(error, "retry_after", None)
    if value is None:
        response = getattr(error, "response", None)
        headers = getattr(response, "headers", None)
        if headers is not None:
            try:
                value = headers.get("retry-after")
            except AttributeError:
                value = None
    if value is None:
        return None
    try:
        seconds = int(float(value))
    except (TypeError, ValueError):
        return None
    return seconds if seconds > 0 else None


def translate_backend_error(error: BaseException, provider: str) -> BackendError:
    """Wrap an SDK exception into the domain exception hierarchy."""
    if isinstance(error, BackendError):
        return error
    if is_rate_limit_error(error):
        return BackendRateLimitError(
            provider=provider, retry_after=extract_retry_after(error), original_error=error
        )
    return BackendError(f"{provider} API error: {error}", provider=provider, original_error=error)


# =============================================================================
# STAGE 3: BASE LLM CLIENT (ABSTRACT)
# =============================================================================


class BaseLLMClient(ABC):
    """
    Abstract base class for text generation backends.

    What it does:
        Wraps the provider call so every exception leaving generate() is a
        BackendError, and counts successful / failed calls.

    What subclasses must implement:
        - _call_api(prompt, system_instruction, temperature): Actual API call
        - provider_name: Property returning provider name
    """

    def __init__(self, api_key: str, model_name: str):
        """
        Initialize base LLM client.

        Args:
            api_key: API key for the provider
            model_name: Name of model to use
        """
        # =====================================================================
        # STAGE 3.1: STORE CONFIGURATION
        # =====================================================================
        self._api_key = api_key
        self._model_name = model_name

        # =====================================================================
        # STAGE 3.2: TRACKING STATE
        # =====================================================================
        self._total_calls = 0
        self._failed_calls = 0

    # =========================================================================
    # STAGE 4: PUBLIC API
    # =========================================================================

    def generate(self, prompt: str, system_instruction: str, temperature: float) -> Optional[str]:
        """
        Make exactly one backend call.

        Args:
            prompt: Composed request body
            system_instruction: Global rules
            temperature: Sampling temperature

        Returns:
            Generated text (None or empty when the backend produced nothing)

        Raises:
            BackendRateLimitError: If rate limited
            BackendError: For any other failure
        """
        try:
            result = self._call_api(prompt, system_instruction, temperature)
        except Exception as e:
            self._failed_calls += 1
            translated = translate_backend_error(e, self.provider_name)
            logger.warning(
                f"Backend call failed | Provider: {self.provider_name} | "
                f"Type: {type(translated).__name__}"
            )
            raise translated from e

        self._total_calls += 1
        logger.debug(
            f"Backend call complete | Provider: {self.provider_name} | "
            f"Chars: {len(result or '')}"
        )
        return result

    # =========================================================================
    # STAGE 5: ABSTRACT METHODS
    # =========================================================================

    @abstractmethod
    def _call_api(self, prompt: str, system_instruction: str, temperature: float) -> Optional[str]:
        """Make the actual API call. Must be implemented by subclasses."""
        ...

    @property
    @abstractmethod
    def provider_name(self) -> str:
        """Return the provider name (e.g., 'gemini', 'openai')."""
        ...

    @property
    def model_name(self) -> str:
        """Return the model name."""
        return self._model_name

    # =========================================================================
    # STAGE 6: METRICS
    # =========================================================================

    @property
    def total_calls(self) -> int:
        """Total number of successful API calls."""
        return self._total_calls

    @property
    def failed_calls(self) -> int:
        """Number of failed API calls."""
        return self._failed_calls

    @property
    def success_rate(self) -> float:
        """Percentage of successful calls."""
        total = self._total_calls + self._failed_calls
        if total == 0:
            return 100.0
        return (self._total_calls / total) * 100
