"""
Enumerations for Psychiatric Note Generation

This module defines all enumeration types used throughout the psychiatric
note generation engine. Enums provide:
    1. Type safety for categorical values
    2. IDE autocomplete support
    3. Clear domain semantics

Enumeration Categories:
    RecordType     → Kinds of psychiatric ward documentation
    OtherMarker    → The "others" escape hatch for categorical fields
    FailureKind    → Outcome taxonomy for failed generation calls
    Gender         → Administrative gender as stored by the record store
    LLMProvider    → Supported text generation backends

Author: Shubham Singh
Date: January 2026
"""

from enum import Enum


# =============================================================================
# STAGE 1: RECORD TYPE ENUMERATION
# =============================================================================
# Represents the kinds of ward documentation the engine can draft.
# Each type maps to exactly one instruction template and one length class.


class RecordType(str, Enum):
    """
    Types of psychiatric records that can be generated.

    What it does:
        Categorizes ward documentation by purpose and structure, enabling
        type-specific instruction templates and length constraints.

    Why it exists:
        1. Different record types have different structural rules
        2. Enables table-driven instruction selection
        3. Tags stored MedicalRecords so the latest one per type can be found

    Record Families:
        Short clinical notes: PROGRESS_NOTE, SUPPORTIVE_PSYCHOTHERAPY,
                              PSYCHOTHERAPY, SPECIAL_HANDLING, PHYSIO_PSYCHO_EXAM
        Narrative summaries:  WEEKLY_SUMMARY, MONTHLY_SUMMARY,
                              OFF_DUTY_SUMMARY, DISCHARGE_NOTE
    """

    # -------------------------------------------------------------------------
    # 1.1 Short Clinical Notes
    # -------------------------------------------------------------------------
    PROGRESS_NOTE = "PROGRESS_NOTE"
    """Routine progress note in SOAP format."""

    SUPPORTIVE_PSYCHOTHERAPY = "SUPPORTIVE_PSYCHOTHERAPY"
    """Supportive psychotherapy session record (goal / content / effect)."""

    PSYCHOTHERAPY = "PSYCHOTHERAPY"
    """Specialized psychotherapy session record (CBT, DBT, ...)."""

    SPECIAL_HANDLING = "SPECIAL_HANDLING"
    """Special-handling record justifying intensive care for risk behaviour."""

    PHYSIO_PSYCHO_EXAM = "PHYSIO_PSYCHO_EXAM"
    """Combined physical and psychiatric examination record."""

    # -------------------------------------------------------------------------
    # 1.2 Narrative Summaries
    # -------------------------------------------------------------------------
    WEEKLY_SUMMARY = "WEEKLY_SUMMARY"
    MONTHLY_SUMMARY = "MONTHLY_SUMMARY"
    OFF_DUTY_SUMMARY = "OFF_DUTY_SUMMARY"
    DISCHARGE_NOTE = "DISCHARGE_NOTE"

    @property
    def display_title(self) -> str:
        """Human-readable title used inside prompts and note headings."""
        return RECORD_TYPE_TITLES[self]

    @classmethod
    def get_all_types(cls) -> list:
        """Return all record type values as a list."""
        return [record_type.value for record_type in cls]

    @classmethod
    def from_string(cls, value: str) -> "RecordType":
        """
        Convert string to RecordType with case-insensitive matching.

        Accepts the enum value, the member name or the display title
        (e.g. "progress-note", "Progress Note", "PROGRESS_NOTE").

        Raises:
            ValueError: If string doesn't match any record type
        """
        normalized = value.strip().upper().replace(" ", "_").replace("-", "_")
        for record_type in cls:
            title = record_type.display_title.upper().replace(" ", "_").replace("-", "_")
            if normalized in (record_type.value, record_type.name, title):
                return record_type
        raise ValueError(f"Unknown record type: '{value}'. Valid types: {cls.get_all_types()}")


RECORD_TYPE_TITLES = {
    RecordType.PROGRESS_NOTE: "Progress Note",
    RecordType.SUPPORTIVE_PSYCHOTHERAPY: "Supportive Psychotherapy",
    RecordType.PSYCHOTHERAPY: "Psychotherapy",
    RecordType.SPECIAL_HANDLING: "Special Handling Note",
    RecordType.PHYSIO_PSYCHO_EXAM: "Physio-Psycho Exam",
    RecordType.WEEKLY_SUMMARY: "Weekly Summary",
    RecordType.MONTHLY_SUMMARY: "Monthly Summary",
    RecordType.OFF_DUTY_SUMMARY: "Off Duty Summary",
    RecordType.DISCHARGE_NOTE: "Discharge Note",
}


# =============================================================================
# STAGE 2: OTHER MARKER
# =============================================================================
# The form UI stores the literal "others" next to real enumerated values.
# Models normalise it into this marker so formatting code can ask
# isinstance(item, OtherMarker) instead of comparing strings.


class OtherMarker(str, Enum):
    """Escape hatch meaning "not in the fixed list; see the free text"."""

    OTHERS = "others"


OTHERS = OtherMarker.OTHERS


# =============================================================================
# STAGE 3: FAILURE KIND ENUMERATION
# =============================================================================


class FailureKind(str, Enum):
    """
    Classification of a failed generation call.

    All kinds are terminal for the call that produced them; the engine never
    retries on its own.
    """

    CONFIG_ERROR = "CONFIG_ERROR"
    """Missing or placeholder credential. Retrying cannot help."""

    RATE_LIMITED = "RATE_LIMITED"
    """Backend refused due to quota/frequency. Recoverable by waiting."""

    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    """Backend succeeded but returned no usable text. Recoverable by resubmitting."""

    UPSTREAM = "UPSTREAM"
    """Any other backend failure, surfaced with the raw diagnostic."""

    @property
    def retry_recommended(self) -> bool:
        """Whether the UI should suggest the user try again."""
        return self in (FailureKind.RATE_LIMITED, FailureKind.EMPTY_RESPONSE)


# =============================================================================
# STAGE 4: DEMOGRAPHIC ENUMERATIONS
# =============================================================================


class Gender(str, Enum):
    """Administrative gender as stored by the clinical record store."""

    MALE = "male"
    FEMALE = "female"
    OTHER = "other"

    @classmethod
    def from_raw(cls, value) -> "Gender":
        """Map stored values onto a member; anything unrecognised is OTHER."""
        if isinstance(value, cls):
            return value
        normalized = str(value or "").strip().lower()
        if normalized in ("male", "m"):
            return cls.MALE
        if normalized in ("female", "f"):
            return cls.FEMALE
        return cls.OTHER


# =============================================================================
# STAGE 5: LLM PROVIDER ENUMERATION
# =============================================================================


class LLMProvider(str, Enum):
    """Supported text generation backends."""

    GEMINI = "gemini"
    OPENAI = "openai"
