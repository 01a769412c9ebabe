"""
Client Factory

Builds the configured text generation backend.

Author: Shubham Singh
Date: January 2026
"""

from loguru import logger

from psych_note_generation.clients.gemini_client import GeminiClient
from psych_note_generation.clients.llm_client import BaseLLMClient
from psych_note_generation.clients.openai_client import OpenAIClient
from psych_note_generation.core.config import EngineConfiguration
from psych_note_generation.core.enums import LLMProvider
from psych_note_generation.core.exceptions import ConfigurationError


def create_llm_client(config: EngineConfiguration) -> BaseLLMClient:
    """
    Create the backend client for config.llm_provider.

    Raises:
        ConfigurationError: If the provider is unknown
    """
    provider = config.llm_provider
    logger.debug(f"Creating LLM client | Provider: {provider} | Model: {config.active_model}")

    if provider == LLMProvider.GEMINI.value:
        return GeminiClient(api_key=config.active_api_key, model_name=config.gemini_model)
    if provider == LLMProvider.OPENAI.value:
        return OpenAIClient(api_key=config.active_api_key, model_name=config.openai_model)

    raise ConfigurationError(
        f"Unknown LLM provider: {provider}",
        context={"setting": "LLM_PROVIDER", "valid": [p.value for p in LLMProvider]},
    )
