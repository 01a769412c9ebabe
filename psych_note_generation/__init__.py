"""
Psychiatric Note Generation Module

Drafts psychiatric ward documentation (progress notes, psychotherapy
records, weekly / monthly / discharge summaries) from a patient's
structured clinical record using an LLM backend.

Architecture Overview:
    psych_note_generation/
    ├── core/           → Domain models, enums, configuration (Layer 0 - Pure)
    ├── formatting/     → Canonical clinical text (Layer 1 - Pure)
    ├── instructions/   → Record-type rules + system instruction (Layer 1 - Pure)
    ├── repository/     → Clinical record store (Layer 2 - Infrastructure)
    ├── clients/        → LLM client abstractions (Layer 2 - Infrastructure)
    ├── generation/     → Compose, call, classify (Layer 3 - Business Logic)
    └── pipeline.py     → Main orchestrator (Layer 4 - Public API)

Quick Start:
    from psych_note_generation import NoteGenerationPipeline

    pipeline = NoteGenerationPipeline.from_environment(store_path="records.json")
    outcome = pipeline.generate_note("P001", "PROGRESS_NOTE")

Author: Shubham Singh
Date: January 2026
"""

__version__ = "1.0.0"
__author__ = "Shubham Singh"

# =============================================================================
# PUBLIC API EXPORTS
# =============================================================================

# Main Entry Point
from psych_note_generation.pipeline import NoteGenerationPipeline

# Generator
from psych_note_generation.generation import NoteGenerator

# Core Models
from psych_note_generation.core.models import (
    Choice,
    Diagnosis,
    MentalStatusExam,
    PhysicalExam,
    Patient,
    MedicalRecord,
    GenerationRequest,
    Success,
    Failure,
    GenerationOutcome,
)

# Enums
from psych_note_generation.core.enums import (
    RecordType,
    FailureKind,
    OtherMarker,
    OTHERS,
)

# Configuration
from psych_note_generation.core.config import EngineConfiguration

__all__ = [
    # Main Entry Point (use this!)
    "NoteGenerationPipeline",
    "NoteGenerator",
    # Core Models
    "Choice",
    "Diagnosis",
    "MentalStatusExam",
    "PhysicalExam",
    "Patient",
    "MedicalRecord",
    "GenerationRequest",
    "Success",
    "Failure",
    "GenerationOutcome",
    # Enums
    "RecordType",
    "FailureKind",
    "OtherMarker",
    "OTHERS",
    # Configuration
    "EngineConfiguration",
]
