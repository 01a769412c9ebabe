"""
Domain Exceptions for Psychiatric Note Generation

This module defines all custom exceptions used inside the note generation
engine. Exceptions travel between layers (clients, repository, generation);
the NoteGenerator boundary converts them into a GenerationOutcome so callers
always receive a displayable result instead of an unhandled fault.

Exception Hierarchy:
    NoteGenerationError (base)
    ├── ConfigurationError          → Invalid configuration / credential
    ├── GenerationError             → Note generation failures
    │   └── BackendError            → Text generation backend failure
    │       └── BackendRateLimitError
    └── RecordStoreError            → Clinical record store failures
        ├── PatientNotFoundError
        └── RecordStoreLoadError

Usage:
    from psych_note_generation.core.exceptions import PatientNotFoundError

    try:
        patient = store.get_patient("P001")
    except PatientNotFoundError as e:
        logger.error(f"Patient not found: {e.patient_id}")

Author: Shubham Singh
Date: January 2026
"""

from typing import Optional


# =============================================================================
# STAGE 1: BASE EXCEPTION
# =============================================================================
# All domain exceptions inherit from this base class.


class NoteGenerationError(Exception):
    """
    Base exception for all psychiatric note generation errors.

    What it does:
        Provides a common base class for all domain-specific exceptions,
        enabling catch-all handling while preserving specific error types.

    Attributes:
        message: Human-readable error description
        context: Dictionary of additional context for debugging
    """

    def __init__(self, message: str, context: Optional[dict] = None):
        """
        Initialize with message and optional context.

        Args:
            message: Human-readable error description
            context: Additional debugging context (setting, provider, path)
        """
        self.message = message
        self.context = context or {}
        super().__init__(self._format_message())

    def _format_message(self) -> str:
        """Format message with context for display."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} [{context_str}]"
        return self.message


# =============================================================================
# STAGE 2: CONFIGURATION ERRORS
# =============================================================================


class ConfigurationError(NoteGenerationError):
    """
    Error in engine configuration.

    When raised:
        - Missing or placeholder backend credential
        - Unknown LLM provider
        - Temperatures or length ceiling outside their valid ranges

    Example:
        >>> raise ConfigurationError(
        ...     "API key not configured",
        ...     context={"setting": "API_KEY", "source": "environment"}
        ... )
    """

    pass


class CredentialError(ConfigurationError):
    """Backend credential is missing, a placeholder, or too short to be real."""

    pass


# =============================================================================
# STAGE 3: GENERATION ERRORS
# =============================================================================


class GenerationError(NoteGenerationError):
    """Base exception for errors raised while generating a note."""

    pass


class BackendError(GenerationError):
    """
    Error from the text generation backend.

    What it does:
        Wraps errors from the underlying SDK (Gemini, OpenAI) with the
        provider name, keeping the raw diagnostic for human triage.

    Attributes:
        provider: The LLM provider (gemini, openai)
        original_error: The wrapped original exception
    """

    def __init__(self, message: str, provider: str, original_error: Optional[Exception] = None):
        self.provider = provider
        self.original_error = original_error
        super().__init__(
            message,
            context={
                "provider": provider,
                "original_error": str(original_error) if original_error else None,
            },
        )


class BackendRateLimitError(BackendError):
    """
    Backend refused the call because of quota or request frequency.

    Attributes:
        retry_after: Seconds to wait before resubmitting (if the backend said so)
    """

    def __init__(
        self,
        provider: str,
        retry_after: Optional[int] = None,
        original_error: Optional[Exception] = None,
    ):
        self.retry_after = retry_after
        super().__init__(
            f"Rate limit exceeded for {provider}", provider=provider, original_error=original_error
        )
        self.context["retry_after"] = retry_after


# =============================================================================
# STAGE 4: RECORD STORE ERRORS
# =============================================================================


class RecordStoreError(NoteGenerationError):
    """Error reading from the clinical record store."""

    pass


class PatientNotFoundError(RecordStoreError):
    """
    Requested patient does not exist in the record store.

    Attributes:
        patient_id: The identifier that was looked up
    """

    def __init__(self, patient_id: str):
        self.patient_id = patient_id
        super().__init__(f"Patient not found: {patient_id}", context={"patient_id": patient_id})


class RecordStoreLoadError(RecordStoreError):
    """
    The record store document could not be loaded.

    When raised:
        - File not found
        - Invalid JSON format
        - Permission denied

    Attributes:
        file_path: Path to the store document
        reason: Why loading failed
    """

    def __init__(self, file_path: str, reason: str):
        self.file_path = file_path
        self.reason = reason
        super().__init__(
            f"Failed to load record store from {file_path}: {reason}",
            context={"file_path": file_path, "reason": reason},
        )
