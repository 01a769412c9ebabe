"""
OpenAI Client - OpenAI API Implementation

This module provides the text generation backend for OpenAI chat models.
The system instruction is sent as the system message and the composed
request as the user message.

Author: Shubham Singh
Date: January 2026
"""

from typing import Optional

from loguru import logger

from psych_note_generation.clients.llm_client import BaseLLMClient
from psych_note_generation.core.enums import LLMProvider
from psych_note_generation.core.exceptions import BackendError


# =============================================================================
# STAGE 1: OPENAI CLIENT IMPLEMENTATION
# =============================================================================


class OpenAIClient(BaseLLMClient):
    """
    OpenAI API client for note generation.

    When to use:
        - LLM_PROVIDER=openai
        - Alternative to Gemini

    Example:
        >>> client = OpenAIClient(api_key="...", model_name="gpt-4o-mini")
        >>> text = client.generate(prompt, system_instruction, 0.85)
    """

    def __init__(self, api_key: str, model_name: str = "gpt-4o-mini"):
        super().__init__(api_key=api_key, model_name=model_name)

        self._client = None
        self._initialize_client()

        logger.info(f"OpenAIClient initialized | Model: {model_name}")

    def _initialize_client(self) -> None:
        """
        Initialize the OpenAI client.

        Lazy import to avoid requiring openai at module load.
        """
        try:
            from openai import OpenAI
        except ImportError as e:
            raise BackendError(
                "openai package not installed. Install with: pip install openai",
                provider=LLMProvider.OPENAI.value,
                original_error=e,
            )

        self._client = OpenAI(api_key=self._api_key)

    # =========================================================================
    # STAGE 2: API CALL IMPLEMENTATION
    # =========================================================================

    def _call_api(self, prompt: str, system_instruction: str, temperature: float) -> Optional[str]:
        """Make the actual OpenAI API call; no choices yields None."""
        response = self._client.chat.completions.create(
            model=self._model_name,
            messages=[
                {"role": "system", "content": system_instruction},
                {"role": "user", "content": prompt},
            ],
            temperature=temperature,
        )

        if not response.choices:
            return None
        return response.choices[0].message.content

    # =========================================================================
    # STAGE 3: PROPERTIES
    # =========================================================================

    @property
    def provider_name(self) -> str:
        """Return provider name."""
        return LLMProvider.OPENAI.value
