"""
Clients Layer - Text Generation Backend Abstractions

This layer provides clean abstractions over LLM providers (Gemini, OpenAI),
enabling the rest of the system to work with any provider interchangeably.

Submodules:
    llm_client.py    → Protocol, base implementation, rate-limit adapter
    gemini_client.py → Google Gemini implementation
    openai_client.py → OpenAI implementation
    factory.py       → Provider selection from configuration

Author: Shubham Singh
Date: January 2026
"""

from psych_note_generation.clients.llm_client import (
    LLMClientProtocol,
    BaseLLMClient,
    extract_retry_after,
    is_rate_limit_error,
    translate_backend_error,
)
from psych_note_generation.clients.gemini_client import GeminiClient
from psych_note_generation.clients.openai_client import OpenAIClient
from psych_note_generation.clients.factory import create_llm_client

__all__ = [
    "LLMClientProtocol",
    "BaseLLMClient",
    "extract_retry_after",
    "is_rate_limit_error",
    "translate_backend_error",
    "GeminiClient",
    "OpenAIClient",
    "create_llm_client",
]
