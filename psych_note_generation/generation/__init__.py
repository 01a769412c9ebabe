"""
Generation Layer - Request Composition, Backend Call, Classification

Submodules:
    request_composer.py    → Builds the GenerationRequest
    response_classifier.py → Maps results / errors to outcomes
    note_generator.py      → Runs one request end to end

Dependency Rule:
    This layer depends on: core, formatting, instructions, clients
    This layer is used by: pipeline (orchestrator)

Author: Shubham Singh
Date: January 2026
"""

from psych_note_generation.generation.note_generator import NoteGenerator
from psych_note_generation.generation.request_composer import (
    choose_temperature,
    compose,
    select_most_recent_record,
)
from psych_note_generation.generation.response_classifier import (
    classify,
    classify_error,
    classify_result,
    format_wait_hint,
    sanitize_note_text,
)

__all__ = [
    "NoteGenerator",
    "choose_temperature",
    "compose",
    "select_most_recent_record",
    "classify",
    "classify_error",
    "classify_result",
    "format_wait_hint",
    "sanitize_note_text",
]
