"""
Core Layer - Domain Models, Enums, and Configuration

This layer contains the side-effect-free foundation of the engine: frozen
clinical snapshots, enumerations, canonical phrases and exceptions.

Submodules:
    models.py     → Data structures (Choice, Patient, MedicalRecord, outcomes)
    enums.py      → Enumerations (RecordType, FailureKind, OtherMarker)
    constants.py  → Canonical phrases, labels and limits
    config.py     → Configuration dataclass
    exceptions.py → Domain-specific exceptions

Dependency Rule:
    This layer depends on NOTHING else in the package.
    All other layers may depend on this layer.

Author: Shubham Singh
Date: January 2026
"""

from psych_note_generation.core.models import (
    Choice,
    Diagnosis,
    AppearanceSection,
    SpeechSection,
    MoodSection,
    ThoughtSection,
    PerceptionSection,
    OrientationFlags,
    CognitionSection,
    MentalStatusExam,
    PhysicalExam,
    Patient,
    MedicalRecord,
    GenerationRequest,
    Success,
    Failure,
    GenerationOutcome,
)
from psych_note_generation.core.enums import (
    RecordType,
    OtherMarker,
    OTHERS,
    FailureKind,
    Gender,
    LLMProvider,
)
from psych_note_generation.core.config import EngineConfiguration, is_usable_credential
from psych_note_generation.core.exceptions import (
    NoteGenerationError,
    ConfigurationError,
    CredentialError,
    GenerationError,
    BackendError,
    BackendRateLimitError,
    RecordStoreError,
    PatientNotFoundError,
    RecordStoreLoadError,
)

__all__ = [
    # Models
    "Choice",
    "Diagnosis",
    "AppearanceSection",
    "SpeechSection",
    "MoodSection",
    "ThoughtSection",
    "PerceptionSection",
    "OrientationFlags",
    "CognitionSection",
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
    "OtherMarker",
    "OTHERS",
    "FailureKind",
    "Gender",
    "LLMProvider",
    # Configuration
    "EngineConfiguration",
    "is_usable_credential",
    # Exceptions
    "NoteGenerationError",
    "ConfigurationError",
    "CredentialError",
    "GenerationError",
    "BackendError",
    "BackendRateLimitError",
    "RecordStoreError",
    "PatientNotFoundError",
    "RecordStoreLoadError",
]
