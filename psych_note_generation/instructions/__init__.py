"""
Instructions Layer - Record-Type Rules and System Instruction

Author: Shubham Singh
Date: January 2026
"""

from psych_note_generation.instructions.instruction_selector import (
    DEFAULT_TEMPLATE,
    LENGTH_CONSTRAINED_TYPES,
    RECORD_TYPE_TEMPLATES,
    InstructionContext,
    InstructionSet,
    build_system_instruction,
    is_length_constrained,
    record_type_title,
    select_instructions,
)

__all__ = [
    "DEFAULT_TEMPLATE",
    "LENGTH_CONSTRAINED_TYPES",
    "RECORD_TYPE_TEMPLATES",
    "InstructionContext",
    "InstructionSet",
    "build_system_instruction",
    "is_length_constrained",
    "record_type_title",
    "select_instructions",
]
