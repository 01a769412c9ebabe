"""
Response Classifier

This module maps whatever came back from the backend (text or an
exception) onto a GenerationOutcome. Every function here is total: it
never raises, so the caller always has something to display.

Classification Table:
    non-empty text           → Success
    None / whitespace text   → Failure(EMPTY_RESPONSE)
    ConfigurationError       → Failure(CONFIG_ERROR) with the reason appended
    rate-limit error         → Failure(RATE_LIMITED) with a wait hint
    anything else            → Failure(UPSTREAM) with the raw diagnostic

Author: Shubham Singh
Date: January 2026
"""

import re
from typing import Optional

from psych_note_generation.clients.llm_client import extract_retry_after, is_rate_limit_error
from psych_note_generation.core.constants import (
    CONFIG_ERROR_MESSAGE,
    CONFIG_INVALID_MESSAGE,
    DEFAULT_RATE_LIMIT_WAIT_SECONDS,
    EMPTY_RESPONSE_MESSAGE,
    RATE_LIMITED_MESSAGE,
    UPSTREAM_MESSAGE,
)
from psych_note_generation.core.enums import FailureKind
from psych_note_generation.core.exceptions import (
    BackendError,
    BackendRateLimitError,
    ConfigurationError,
    CredentialError,
)
from psych_note_generation.core.models import Failure, GenerationOutcome, Success

BOLD_MARKUP = re.compile(r"\*\*")
EXCESS_BLANK_LINES = re.compile(r"\n{3,}")


# =============================================================================
# STAGE 1: MESSAGE HELPERS
# =============================================================================


def format_wait_hint(seconds: Optional[int]) -> str:
    """'1 分鐘', '2 分鐘' or '45 秒'."""
    wait = seconds if seconds and seconds > 0 else DEFAULT_RATE_LIMIT_WAIT_SECONDS
    if wait % 60 == 0:
        return f"{wait // 60} 分鐘"
    return f"{wait} 秒"


def _raw_diagnostic(error: BaseException) -> str:
    if isinstance(error, BackendError) and error.original_error is not None:
        diagnostic = str(error.original_error)
    elif hasattr(error, "message"):
        diagnostic = str(getattr(error, "message"))
    else:
        diagnostic = str(error)
    return diagnostic or type(error).__name__


# =============================================================================
# STAGE 2: CLASSIFICATION
# =============================================================================


def classify_result(text: Optional[str]) -> GenerationOutcome:
    """Success for usable text, EMPTY_RESPONSE otherwise."""
    if not isinstance(text, str) or not text.strip():
        return Failure(FailureKind.EMPTY_RESPONSE, EMPTY_RESPONSE_MESSAGE)
    return Success(text)


def classify_error(error: BaseException) -> Failure:
    """
    Map an exception onto a Failure.

    Example:
        >>> classify_error(Exception("429 quota exceeded")).kind
        <FailureKind.RATE_LIMITED: 'RATE_LIMITED'>
    """
    if isinstance(error, ConfigurationError):
        template = CONFIG_ERROR_MESSAGE if isinstance(error, CredentialError) else CONFIG_INVALID_MESSAGE
        return Failure(FailureKind.CONFIG_ERROR, template.format(detail=error.message))

    if isinstance(error, BackendRateLimitError) or is_rate_limit_error(error):
        retry_after = getattr(error, "retry_after", None) or extract_retry_after(error)
        return Failure(
            FailureKind.RATE_LIMITED,
            RATE_LIMITED_MESSAGE.format(wait=format_wait_hint(retry_after)),
        )

    return Failure(FailureKind.UPSTREAM, UPSTREAM_MESSAGE.format(diagnostic=_raw_diagnostic(error)))


def classify(
    result: Optional[str] = None, error: Optional[BaseException] = None
) -> GenerationOutcome:
    """Classify either a backend error or a backend result; the error wins."""
    if error is not None:
        return classify_error(error)
    return classify_result(result)


# =============================================================================
# STAGE 3: POST-PROCESSING
# =============================================================================


def sanitize_note_text(text: str) -> str:
    """Strip bold markup and surrounding whitespace, collapse runs of blank lines."""
    cleaned = BOLD_MARKUP.sub("", text)
    cleaned = EXCESS_BLANK_LINES.sub("\n\n", cleaned)
    return cleaned.strip()
