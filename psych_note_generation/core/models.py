"""
Domain Models for Psychiatric Note Generation

This module defines the core data structures used throughout the engine.
Clinical inputs are frozen dataclasses: the engine receives a read-only
snapshot of the record store per request and never writes back.

Model Hierarchy:
    Choice            → One categorical field (selected values + free-text "other")
    Diagnosis         → Psychiatric and medical diagnosis selections
    MentalStatusExam  → MSE sections (appearance ... risk)
    PhysicalExam      → PE/NE sections (consciousness ... neurological)
    Patient           → Demographics + assessments for one patient
    MedicalRecord     → A previously generated, timestamped note
    GenerationRequest → Prompt + system instruction + temperature for one call
    Success / Failure → The two shapes of a GenerationOutcome

Absent vs Empty:
    A section set to None was never assessed and is omitted from summaries.
    A section that exists but whose fields are None/empty was assessed and
    found normal. Every from_dict factory preserves that distinction.

Usage:
    from psych_note_generation.core.models import Choice, MentalStatusExam

    mse = MentalStatusExam(insight=Choice.from_raw("partial"))

Author: Shubham Singh
Date: January 2026
"""

from dataclasses import dataclass, field, fields
from datetime import date, datetime
from typing import Any, Dict, Mapping, Optional, Tuple, Union

from psych_note_generation.core.enums import (
    FailureKind,
    Gender,
    OtherMarker,
    RecordType,
)


ChoiceItem = Union[str, OtherMarker]


def _normalize_item(item: Any) -> Optional[ChoiceItem]:
    """Turn one raw selection into a clean string or the OTHERS marker."""
    if isinstance(item, OtherMarker):
        return item
    if item is None:
        return None
    text = str(item).strip()
    if not text:
        return None
    if text.lower() == OtherMarker.OTHERS.value:
        return OtherMarker.OTHERS
    return text


# =============================================================================
# STAGE 1: CATEGORICAL FIELD MODEL
# =============================================================================


@dataclass(frozen=True)
class Choice:
    """
    A categorical field: enumerated selections plus an optional free-text override.

    What it does:
        Holds the values picked in the form UI. The literal "others" is
        normalised into OtherMarker.OTHERS, whose display text is other_text.

    Why it exists:
        The form stores "others" in the same list as real values. Keeping
        the marker typed makes "is this the escape hatch" an isinstance check
        instead of string comparisons scattered through formatting code.

    Attributes:
        selected: Selected values in input order (may include OTHERS)
        other_text: Free text shown in place of OTHERS

    Example:
        >>> choice = Choice.from_raw(["Schizophrenia", "others"], other_text="Catatonia")
        >>> choice.has_other
        True
    """

    selected: Tuple[ChoiceItem, ...] = ()
    other_text: Optional[str] = None

    def __post_init__(self):
        raw = self.selected
        if raw is None:
            raw = ()
        elif isinstance(raw, (str, OtherMarker)):
            raw = (raw,)
        elif isinstance(raw, (set, frozenset)):
            raw = sorted(raw, key=str)
        normalized = tuple(item for item in (_normalize_item(v) for v in raw) if item is not None)
        object.__setattr__(self, "selected", normalized)

    @property
    def is_empty(self) -> bool:
        """True when nothing was selected (assessed, nothing abnormal)."""
        return len(self.selected) == 0

    @property
    def has_other(self) -> bool:
        """True when the OTHERS escape hatch is among the selections."""
        return any(isinstance(item, OtherMarker) for item in self.selected)

    @classmethod
    def from_raw(cls, value: Any, other_text: Optional[str] = None) -> Optional["Choice"]:
        """
        Build a Choice from a record-store value.

        Accepted shapes:
            None                                → None (field absent)
            "partial"                           → single selection
            ["a", "others"]                     → multiple selections
            {"selected": [...], "other_text": "..."} → explicit structure

        Args:
            value: Raw stored value
            other_text: Companion free text when not embedded in value

        Returns:
            Choice, or None when the field is absent
        """
        if value is None:
            return None
        if isinstance(value, Choice):
            return value
        if isinstance(value, Mapping):
            return cls(
                selected=value.get("selected") or (),
                other_text=value.get("other_text", value.get("other", other_text)),
            )
        if isinstance(value, (list, tuple, set, frozenset)):
            return cls(selected=value, other_text=other_text)
        return cls(selected=(value,), other_text=other_text)


def _first_present(data: Mapping[str, Any], *keys: str) -> Any:
    """Value of the first key present with a non-None value."""
    for key in keys:
        value = data.get(key)
        if value is not None:
            return value
    return None


TRUE_STRINGS = ("true", "1", "yes", "y")


def _parse_bool(value: Any) -> bool:
    """Interpret stored flags; "false" and "0" strings are False."""
    if isinstance(value, str):
        return value.strip().lower() in TRUE_STRINGS
    return bool(value)


def _camel_case(name: str) -> str:
    head, *rest = name.split("_")
    return head + "".join(part.capitalize() for part in rest)


def _other_text_keys(name: str) -> Tuple[str, ...]:
    """Free-text keys for a field: "cleanliness_other" or "cleanlinessOther"."""
    return (f"{name}_other", f"{_camel_case(name)}Other")


# The form UI stores one field per section under a bare "other" key.
SHARED_OTHER_FIELD = {
    "AppearanceSection": "psychomotor",
    "SpeechSection": "coherence",
    "MoodSection": "subjective",
    "ThoughtSection": "content",
    "PerceptionSection": "hallucinations",
}

# Short keys written by the form UI for PE/NE fields.
FIELD_KEY_ALIASES = {
    "consciousness": ("conscious",),
    "neurological": ("ne",),
}


def _section_from_dict(section_cls, data: Any):
    """
    Build a section dataclass whose fields are all Choices.

    None means the section was never assessed. Any other non-mapping value
    is treated as "present with nothing recorded". Both snake_case and the
    form UI's camelCase / bare "other" keys are read.
    """
    if data is None:
        return None
    if not isinstance(data, Mapping):
        return section_cls()
    shared_other = SHARED_OTHER_FIELD.get(section_cls.__name__)
    values = {}
    for section_field in fields(section_cls):
        name = section_field.name
        aliases = FIELD_KEY_ALIASES.get(name, ())
        other_keys = _other_text_keys(name)
        for alias in aliases:
            other_keys += _other_text_keys(alias)
        if name == shared_other:
            other_keys += ("other",)
        values[name] = Choice.from_raw(
            _first_present(data, name, *aliases), other_text=_first_present(data, *other_keys)
        )
    return section_cls(**values)


# =============================================================================
# STAGE 2: DIAGNOSIS MODEL
# =============================================================================


@dataclass(frozen=True)
class Diagnosis:
    """
    Psychiatric and medical diagnosis selections.

    Attributes:
        psychiatric: Psychiatric diagnoses (other_text = psychiatric "other")
        medical: Medical diagnoses (other_text = medical "other")
    """

    psychiatric: Choice = field(default_factory=Choice)
    medical: Choice = field(default_factory=Choice)

    @classmethod
    def from_dict(cls, data: Optional[Mapping[str, Any]]) -> "Diagnosis":
        """Create from the record-store diagnosis mapping."""
        if not isinstance(data, Mapping):
            return cls()
        psychiatric_other = _first_present(data, *_other_text_keys("psychiatric"))
        medical_other = _first_present(data, *_other_text_keys("medical"))
        psychiatric = Choice.from_raw(data.get("psychiatric"), psychiatric_other)
        medical = Choice.from_raw(data.get("medical"), medical_other)
        return cls(
            psychiatric=psychiatric or Choice(other_text=psychiatric_other),
            medical=medical or Choice(other_text=medical_other),
        )


# =============================================================================
# STAGE 3: MENTAL STATUS EXAM MODELS
# =============================================================================


@dataclass(frozen=True)
class AppearanceSection:
    cleanliness: Optional[Choice] = None
    cooperation: Optional[Choice] = None
    psychomotor: Optional[Choice] = None


@dataclass(frozen=True)
class SpeechSection:
    speed: Optional[Choice] = None
    volume: Optional[Choice] = None
    coherence: Optional[Choice] = None


@dataclass(frozen=True)
class MoodSection:
    subjective: Optional[Choice] = None
    objective: Optional[Choice] = None


@dataclass(frozen=True)
class ThoughtSection:
    process: Optional[Choice] = None
    content: Optional[Choice] = None


@dataclass(frozen=True)
class PerceptionSection:
    hallucinations: Optional[Choice] = None


@dataclass(frozen=True)
class OrientationFlags:
    """Orientation impairment flags; True means impaired in that sphere."""

    time: bool = False
    place: bool = False
    person: bool = False

    @property
    def is_oriented(self) -> bool:
        """Oriented x3: no sphere impaired."""
        return not (self.time or self.place or self.person)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["OrientationFlags"]:
        if data is None:
            return None
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            time=_parse_bool(data.get("time")),
            place=_parse_bool(data.get("place")),
            person=_parse_bool(data.get("person")),
        )


@dataclass(frozen=True)
class CognitionSection:
    orientation: Optional[OrientationFlags] = None
    attention: Optional[Choice] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["CognitionSection"]:
        if data is None:
            return None
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            orientation=OrientationFlags.from_dict(data.get("orientation")),
            attention=Choice.from_raw(
                data.get("attention"), _first_present(data, *_other_text_keys("attention"))
            ),
        )


@dataclass(frozen=True)
class MentalStatusExam:
    """
    Structured Mental Status Exam.

    Every section is optional: None means "not assessed" and the section is
    left out of the canonical summary; a present section with empty fields
    renders as within normal limits.

    Example:
        >>> mse = MentalStatusExam.from_dict({"insight": "partial"})
        >>> mse.appearance is None
        True
    """

    appearance: Optional[AppearanceSection] = None
    speech: Optional[SpeechSection] = None
    mood: Optional[MoodSection] = None
    thought: Optional[ThoughtSection] = None
    perception: Optional[PerceptionSection] = None
    cognition: Optional[CognitionSection] = None
    insight: Optional[Choice] = None
    risk: Optional[Choice] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["MentalStatusExam"]:
        """Create from the record-store MSE mapping (None when not assessed)."""
        if data is None:
            return None
        if not isinstance(data, Mapping):
            return cls()
        return cls(
            appearance=_section_from_dict(AppearanceSection, data.get("appearance")),
            speech=_section_from_dict(SpeechSection, data.get("speech")),
            mood=_section_from_dict(MoodSection, data.get("mood")),
            thought=_section_from_dict(ThoughtSection, data.get("thought")),
            perception=_section_from_dict(PerceptionSection, data.get("perception")),
            cognition=CognitionSection.from_dict(data.get("cognition")),
            insight=Choice.from_raw(data.get("insight"), _first_present(data, *_other_text_keys("insight"))),
            risk=Choice.from_raw(data.get("risk"), _first_present(data, *_other_text_keys("risk"))),
        )


# =============================================================================
# STAGE 4: PHYSICAL / NEUROLOGICAL EXAM MODEL
# =============================================================================


@dataclass(frozen=True)
class PhysicalExam:
    """System-by-system physical and neurological exam findings."""

    consciousness: Optional[Choice] = None
    heent: Optional[Choice] = None
    chest: Optional[Choice] = None
    heart: Optional[Choice] = None
    abdomen: Optional[Choice] = None
    extremities: Optional[Choice] = None
    skin: Optional[Choice] = None
    neurological: Optional[Choice] = None

    @classmethod
    def from_dict(cls, data: Any) -> Optional["PhysicalExam"]:
        """Create from the record-store PE/NE mapping (None when not examined)."""
        return _section_from_dict(cls, data)


# =============================================================================
# STAGE 5: PATIENT MODEL
# =============================================================================


def _parse_date(value: Any) -> Optional[date]:
    if value is None or isinstance(value, date):
        return value.date() if isinstance(value, datetime) else value
    try:
        return date.fromisoformat(str(value)[:10])
    except ValueError:
        return None


def _parse_int(value: Any) -> Optional[int]:
    if value is None or value == "":
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


@dataclass(frozen=True)
class Patient:
    """
    Read-only snapshot of one patient's record.

    The name is kept for display by callers; the engine never sends it
    to the generation backend.

    Attributes:
        patient_id: Record-store identifier
        name: Patient name (not used in prompts)
        birth_year_roc: Birth year in the Republic of China calendar
        gender: Administrative gender
        has_disability_certificate: Holds a disability certificate
        has_catastrophic_illness_card: Holds a catastrophic illness card
        admission_date: Date of the current admission
        diagnosis: Psychiatric and medical diagnoses
        mse: Mental Status Exam (None if not assessed)
        pe: Physical/neurological exam (None if not examined)
        clinical_focus: Free-text clinical focus for the current period
    """

    patient_id: str
    name: str = ""
    birth_year_roc: Optional[int] = None
    gender: Gender = Gender.OTHER
    has_disability_certificate: bool = False
    has_catastrophic_illness_card: bool = False
    admission_date: Optional[date] = None
    diagnosis: Diagnosis = field(default_factory=Diagnosis)
    mse: Optional[MentalStatusExam] = None
    pe: Optional[PhysicalExam] = None
    clinical_focus: str = ""

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "Patient":
        """Create from a record-store patient document."""
        return cls(
            patient_id=str(_first_present(data, "patient_id", "patientId", "id") or ""),
            name=data.get("name") or "",
            birth_year_roc=_parse_int(_first_present(data, "birth_year_roc", "birthYearROC")),
            gender=Gender.from_raw(data.get("gender")),
            has_disability_certificate=_parse_bool(
                _first_present(data, "has_disability_certificate", "hasDisabilityCertificate")
            ),
            has_catastrophic_illness_card=_parse_bool(
                _first_present(data, "has_catastrophic_illness_card", "hasCatastrophicIllnessCard")
            ),
            admission_date=_parse_date(_first_present(data, "admission_date", "admissionDate")),
            diagnosis=Diagnosis.from_dict(data.get("diagnosis")),
            mse=MentalStatusExam.from_dict(data.get("mse")),
            pe=PhysicalExam.from_dict(data.get("pe")),
            clinical_focus=_first_present(data, "clinical_focus", "clinicalFocus") or "",
        )


# =============================================================================
# STAGE 6: MEDICAL RECORD MODEL
# =============================================================================


def _parse_datetime(value: Any) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day)
    if value is None:
        raise ValueError("created_at is missing")
    return datetime.fromisoformat(str(value).replace("Z", "+00:00"))


@dataclass(frozen=True)
class MedicalRecord:
    """
    A previously generated note, tagged with the record type it satisfies.

    Attributes:
        record_type: RecordType (or raw string for types outside the enum)
        content: The stored note text
        created_at: When the record was saved
        record_id: Record-store identifier
        patient_id: Owning patient
        author: Staff member who saved the record
    """

    record_type: Union[RecordType, str]
    content: str
    created_at: datetime
    record_id: Optional[str] = None
    patient_id: Optional[str] = None
    author: Optional[str] = None

    @property
    def timestamp(self) -> float:
        """POSIX timestamp used to order records (naive times are local)."""
        return self.created_at.timestamp()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "MedicalRecord":
        """
        Create from a record-store document.

        Raises:
            ValueError: If created_at is missing or not ISO-8601
        """
        raw_type = str(_first_present(data, "record_type", "type") or "")
        try:
            record_type: Union[RecordType, str] = RecordType.from_string(raw_type)
        except ValueError:
            record_type = raw_type
        return cls(
            record_type=record_type,
            content=data.get("content") or "",
            created_at=_parse_datetime(_first_present(data, "created_at", "createdAt")),
            record_id=_first_present(data, "record_id", "id"),
            patient_id=_first_present(data, "patient_id", "patientId"),
            author=data.get("author"),
        )


# =============================================================================
# STAGE 7: GENERATION REQUEST MODEL
# =============================================================================


@dataclass(frozen=True)
class GenerationRequest:
    """
    Everything the backend needs for one call. Built fresh per invocation.

    Attributes:
        prompt_text: Composed request body
        system_instruction: Global rules plus length clause
        temperature: Sampling temperature within [0.7, 0.85]
        record_type: Requested record type (for logging)
        length_constrained: Whether the length ceiling clause is present
        has_prior_record: Whether a prior same-type record was found
    """

    prompt_text: str
    system_instruction: str
    temperature: float
    record_type: Union[RecordType, str] = RecordType.PROGRESS_NOTE
    length_constrained: bool = False
    has_prior_record: bool = False

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary (used by the CLI dry run)."""
        return {
            "record_type": str(getattr(self.record_type, "value", self.record_type)),
            "temperature": self.temperature,
            "length_constrained": self.length_constrained,
            "has_prior_record": self.has_prior_record,
            "system_instruction": self.system_instruction,
            "prompt_text": self.prompt_text,
        }


# =============================================================================
# STAGE 8: GENERATION OUTCOME MODELS
# =============================================================================


@dataclass(frozen=True)
class Success:
    """A generated note ready for display."""

    text: str

    @property
    def is_success(self) -> bool:
        return True

    @property
    def display_text(self) -> str:
        return self.text


@dataclass(frozen=True)
class Failure:
    """
    A classified failure with a message the UI can show verbatim.

    Attributes:
        kind: Which failure class this is
        message: Displayable message (includes wait hints / raw diagnostics)
    """

    kind: FailureKind
    message: str

    @property
    def is_success(self) -> bool:
        return False

    @property
    def display_text(self) -> str:
        return self.message

    @property
    def retry_recommended(self) -> bool:
        return self.kind.retry_recommended


GenerationOutcome = Union[Success, Failure]
