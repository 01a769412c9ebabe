"""
Gemini Client - Google Gemini API Implementation

This module provides the concrete implementation of the text generation
backend for Google's Gemini models.

Provider-Specific Handling:
    1. System instruction is set on the GenerativeModel per request
    2. Temperature travels in the generation config
    3. Safety filters are relaxed: psychiatric notes routinely describe
       self-harm, violence and delusions, which default filters would block

Author: Shubham Singh
Date: January 2026
"""

from typing import Optional

from loguru import logger

from psych_note_generation.clients.llm_client import BaseLLMClient
from psych_note_generation.core.enums import LLMProvider
from psych_note_generation.core.exceptions import BackendError


# Permissive for medical content
SAFETY_SETTINGS = [
    {"category": "HARM_CATEGORY_HARASSMENT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_HATE_SPEECH", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_SEXUALLY_EXPLICIT", "threshold": "BLOCK_NONE"},
    {"category": "HARM_CATEGORY_DANGEROUS_CONTENT", "threshold": "BLOCK_NONE"},
]


# =============================================================================
# STAGE 1: GEMINI CLIENT IMPLEMENTATION
# =============================================================================


class GeminiClient(BaseLLMClient):
    """
    Google Gemini API client for note generation.

    What it does:
        Sends one generate_content call per request through the
        google-generativeai library.

    When to use:
        - Default provider (LLM_PROVIDER=gemini)

    Example:
        >>> client = GeminiClient(api_key="...", model_name="gemini-3-flash-preview")
        >>> text = client.generate(prompt, system_instruction, 0.7)
    """

    def __init__(self, api_key: str, model_name: str = "gemini-3-flash-preview"):
        """
        Initialize Gemini client.

        Args:
            api_key: Google API key (Gemini)
            model_name: Model to use
        """
        super().__init__(api_key=api_key, model_name=model_name)

        self._genai = None
        self._initialize_client()

        logger.info(f"GeminiClient initialized | Model: {model_name}")

    def _initialize_client(self) -> None:
        """
        Configure the Gemini SDK.

        Lazy import to avoid requiring google-generativeai at module load.
        """
        try:
            import google.generativeai as genai
        except ImportError as e:
            raise BackendError(
                "google-generativeai package not installed. "
                "Install with: pip install google-generativeai",
                provider=LLMProvider.GEMINI.value,
                original_error=e,
            )

        genai.configure(api_key=self._api_key)
        self._genai = genai

    # =========================================================================
    # STAGE 2: API CALL IMPLEMENTATION
    # =========================================================================

    def _call_api(self, prompt: str, system_instruction: str, temperature: float) -> Optional[str]:
        """
        Make the actual Gemini API call.

        A blocked or candidate-less response yields None, which the
        classifier reports as an empty response.
        """
        model = self._genai.GenerativeModel(
            model_name=self._model_name,
            safety_settings=SAFETY_SETTINGS,
            system_instruction=system_instruction,
        )
        response = model.generate_content(
            prompt,
            generation_config={"temperature": temperature},
        )

        feedback = getattr(response, "prompt_feedback", None)
        if feedback is not None and getattr(feedback, "block_reason", None):
            logger.warning(f"Gemini blocked prompt | Reason: {feedback.block_reason}")
            return None

        # response.text raises ValueError when the candidate has no parts
        try:
            return response.text
        except ValueError:
            return None

    # =========================================================================
    # STAGE 3: PROPERTIES
    # =========================================================================

    @property
    def provider_name(self) -> str:
        """Return provider name."""
        return LLMProvider.GEMINI.value
