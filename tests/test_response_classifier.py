"""Tests for response classification and rate-limit detection.

These tests verify that every backend result or error maps onto exactly one
outcome and that classification never raises.
"""

from http import HTTPStatus

import pytest

from psych_note_generation.clients import is_rate_limit_error, translate_backend_error
from psych_note_generation.core.enums import FailureKind
from psych_note_generation.core.exceptions import (
    BackendError,
    BackendRateLimitError,
    ConfigurationError,
    CredentialError,
)
from psych_note_generation.generation import (
    classify,
    classify_error,
    classify_result,
    format_wait_hint,
    sanitize_note_text,
)


class StatusError(Exception):
    """SDK-style error carrying a structured status."""

    def __init__(self, message, **attributes):
        super().__init__(message)
        for name, value in attributes.items():
            setattr(self, name, value)


class TestClassifyResult:
    """Test suite for successful backend calls."""

    def test_text_is_success(self):
        outcome = classify_result("S: 睡眠改善")
        assert outcome.is_success
        assert outcome.display_text == "S: 睡眠改善"

    @pytest.mark.parametrize("text", [None, "", "   \n  "])
    def test_empty_is_empty_response(self, text):
        outcome = classify_result(text)
        assert not outcome.is_success
        assert outcome.kind == FailureKind.EMPTY_RESPONSE
        assert outcome.retry_recommended


class TestClassifyError:
    """Test suite for failed backend calls."""

    def test_configuration_error(self):
        outcome = classify_error(ConfigurationError("API key not configured"))
        assert outcome.kind == FailureKind.CONFIG_ERROR
        assert not outcome.retry_recommended

    def test_credential_error_keeps_reason(self):
        outcome = classify_error(CredentialError("API key is a placeholder value"))
        assert outcome.kind == FailureKind.CONFIG_ERROR
        assert "API 金鑰" in outcome.display_text
        assert "API key is a placeholder value" in outcome.display_text

    def test_other_configuration_error_not_reported_as_missing_key(self):
        outcome = classify_error(ConfigurationError("Unknown LLM provider: claude"))
        assert outcome.kind == FailureKind.CONFIG_ERROR
        assert "API 金鑰" not in outcome.display_text
        assert "Unknown LLM provider: claude" in outcome.display_text

    def test_rate_limit_from_status_code(self):
        outcome = classify_error(StatusError("slow down", status_code=429))
        assert outcome.kind == FailureKind.RATE_LIMITED
        assert "1 分鐘" in outcome.display_text
        assert outcome.retry_recommended

    def test_rate_limit_from_message(self):
        """Test that a message containing 429 is a rate limit."""
        outcome = classify_error(Exception("429 Resource has been exhausted"))
        assert outcome.kind == FailureKind.RATE_LIMITED

    def test_rate_limit_uses_retry_after(self):
        error = BackendRateLimitError(provider="gemini", retry_after=30)
        assert "30 秒" in classify_error(error).display_text

    def test_upstream_carries_raw_diagnostic(self):
        outcome = classify_error(ValueError("boom"))
        assert outcome.kind == FailureKind.UPSTREAM
        assert "boom" in outcome.display_text
        assert not outcome.retry_recommended

    def test_upstream_from_wrapped_backend_error(self):
        original = RuntimeError("503 Service Unavailable")
        error = BackendError("gemini API error", provider="gemini", original_error=original)
        outcome = classify_error(error)
        assert outcome.kind == FailureKind.UPSTREAM
        assert outcome.display_text == "⚠️ 生成失敗：503 Service Unavailable"

    def test_classify_prefers_error(self):
        outcome = classify(result="text", error=ValueError("x"))
        assert outcome.kind == FailureKind.UPSTREAM
        assert classify(result="text").is_success


class TestRateLimitDetection:
    """Test suite for the rate-limit adapter."""

    def test_http_status_enum(self):
        assert is_rate_limit_error(StatusError("x", code=HTTPStatus.TOO_MANY_REQUESTS))

    def test_grpc_status_name(self):
        assert is_rate_limit_error(StatusError("x", grpc_status_code="RESOURCE_EXHAUSTED"))

    def test_response_status(self):
        class Response:
            status_code = 429
            headers = {"retry-after": "120"}

        error = StatusError("x", response=Response())
        assert is_rate_limit_error(error)
        translated = translate_backend_error(error, "openai")
        assert isinstance(translated, BackendRateLimitError)
        assert translated.retry_after == 120

    @pytest.mark.parametrize("message", ["Quota exceeded", "Too Many Requests", "rate limit hit"])
    def test_message_markers(self, message):
        assert is_rate_limit_error(Exception(message))

    def test_other_errors(self):
        assert not is_rate_limit_error(StatusError("internal", status_code=500))
        assert not is_rate_limit_error(Exception("connection reset"))

    def test_non_rate_limit_status_outranks_message(self):
        """Test that a 403 mentioning quota is not treated as a rate limit."""
        error = StatusError("403 PERMISSION_DENIED: quota project not set", status_code=403)
        assert not is_rate_limit_error(error)
        outcome = classify_error(error)
        assert outcome.kind == FailureKind.UPSTREAM
        assert "quota project not set" in outcome.display_text

    def test_non_rate_limit_response_status_outranks_message(self):
        class Response:
            status_code = 500

        assert not is_rate_limit_error(StatusError("quota backend crashed", response=Response()))


class TestHelpers:
    """Test suite for wait hints and post-processing."""

    def test_wait_hint(self):
        assert format_wait_hint(None) == "1 分鐘"
        assert format_wait_hint(120) == "2 分鐘"
        assert format_wait_hint(45) == "45 秒"

    def test_sanitize_strips_bold(self):
        assert sanitize_note_text("  **S:** 穩定\n\n\n\nP: 持續觀察 ") == "S: 穩定\n\nP: 持續觀察"
