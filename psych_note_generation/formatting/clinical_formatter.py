"""
Clinical Data Formatter

This module turns structured clinical assessments into the canonical text
blocks that are embedded in generation requests.

Formatting Rules:
    1. Every function is total: missing or malformed input yields a fixed
       fallback phrase, never an exception
    2. The "others" marker never appears literally; its free text does
       (or the generic label when the free text is blank)
    3. Input order is preserved, nothing is re-sorted
    4. A section that is absent was not assessed and is omitted; a section
       that is present but empty renders as within normal limits

Output Shapes:
    Diagnoses → "Schizophrenia, Hypertension"
    MSE       → "[外觀] 整潔: ..., 合作: ..., 精神運動: ..."  (one line per section)
    PE/NE     → "[意識] ..."                                (one line per system)
    Summary   → "45歲，男性，領有身心障礙手冊，無重大傷病卡，此次入院精神科診斷為：..."

Usage:
    from psych_note_generation.formatting import format_mse

    text = format_mse(patient.mse)

Author: Shubham Singh
Date: January 2026
"""

from datetime import date
from typing import Any, Iterable, List, Optional

from psych_note_generation.core.constants import (
    GENDER_LABELS,
    MSE_NO_SECTIONS,
    MSE_NOT_ASSESSED,
    MSE_SECTION_LABELS,
    NO_SPECIFIC_DIAGNOSIS,
    ORIENTATION_IMPAIRED_SUFFIX,
    ORIENTATION_LABELS,
    ORIENTATION_NORMAL,
    OTHER_DIAGNOSIS_LABEL,
    OTHER_FINDING_LABEL,
    PE_NO_SECTIONS,
    PE_NOT_ASSESSED,
    PE_SECTION_LABELS,
    ROC_YEAR_OFFSET,
    UNKNOWN_AGE,
    WITHIN_NORMAL_LIMITS,
)
from psych_note_generation.core.enums import Gender, OtherMarker
from psych_note_generation.core.models import (
    Choice,
    CognitionSection,
    MentalStatusExam,
    OrientationFlags,
    Patient,
    PhysicalExam,
)

ITEM_SEPARATOR = ", "


# =============================================================================
# STAGE 1: FIELD RENDERING
# =============================================================================


def _display_items(items: Iterable[Any], other_text: Optional[str], other_label: str) -> List[str]:
    """Render each selection, substituting the free text for the OTHERS marker."""
    rendered = []
    for item in items:
        if isinstance(item, OtherMarker):
            text = (other_text or "").strip()
            rendered.append(text or other_label)
            continue
        text = str(item).strip()
        if text:
            rendered.append(text)
    return rendered


def format_choice(choice: Optional[Choice], fallback: str = WITHIN_NORMAL_LIMITS) -> str:
    """
    Render one categorical field.

    Args:
        choice: The field value; raw values are converted, None or empty → fallback
        fallback: Phrase used when nothing was selected

    Returns:
        Comma-joined selections, or the fallback phrase

    Example:
        >>> format_choice(Choice.from_raw(["others"], other_text="mutism"))
        'mutism'
    """
    if choice is not None and not isinstance(choice, Choice):
        try:
            choice = Choice.from_raw(choice)
        except TypeError:
            choice = None
    if choice is None or choice.is_empty:
        return fallback
    rendered = _display_items(choice.selected, choice.other_text, OTHER_FINDING_LABEL)
    return ITEM_SEPARATOR.join(rendered) if rendered else fallback


def format_diagnoses(items: Any, other_text: Optional[str] = None) -> str:
    """
    Join diagnoses in input order with the "others" entry replaced.

    Accepts a Choice (its own other_text is used unless one is passed) or
    any iterable of raw values.

    Returns:
        "Schizophrenia, Catatonia" style text, or 無特定診斷 when empty
    """
    if isinstance(items, Choice):
        choice = items if other_text is None else Choice(items.selected, other_text)
    else:
        try:
            choice = Choice.from_raw(items, other_text=other_text)
        except TypeError:
            choice = None
    if choice is None or choice.is_empty:
        return NO_SPECIFIC_DIAGNOSIS
    rendered = _display_items(choice.selected, choice.other_text, OTHER_DIAGNOSIS_LABEL)
    return ITEM_SEPARATOR.join(rendered) if rendered else NO_SPECIFIC_DIAGNOSIS


# =============================================================================
# STAGE 2: MENTAL STATUS EXAM
# =============================================================================


def format_orientation(orientation: Optional[OrientationFlags]) -> str:
    """時間/地點定向感異常 for impaired spheres, or 定向感正常 when oriented x3."""
    if orientation is None or orientation.is_oriented:
        return ORIENTATION_NORMAL
    impaired = [label for key, label in ORIENTATION_LABELS if getattr(orientation, key, False)]
    return f"{'/'.join(impaired)}{ORIENTATION_IMPAIRED_SUFFIX}"


def _cognition_line(cognition: CognitionSection) -> str:
    return f"{format_orientation(cognition.orientation)}, 注意力: {format_choice(cognition.attention)}"


def _appearance_body(section) -> str:
    return (
        f"整潔: {format_choice(section.cleanliness)}, "
        f"合作: {format_choice(section.cooperation)}, "
        f"精神運動: {format_choice(section.psychomotor)}"
    )


def _speech_body(section) -> str:
    return (
        f"速度/音量: {format_choice(section.speed)}/{format_choice(section.volume)}, "
        f"連貫性: {format_choice(section.coherence)}"
    )


def _mood_body(section) -> str:
    return f"{format_choice(section.subjective)} / {format_choice(section.objective)}"


def _thought_body(section) -> str:
    return f"邏輯: {format_choice(section.process)}, 妄想: {format_choice(section.content)}"


def _perception_body(section) -> str:
    return f"幻覺: {format_choice(section.hallucinations)}"


MSE_SECTION_RENDERERS = {
    "appearance": _appearance_body,
    "speech": _speech_body,
    "mood": _mood_body,
    "thought": _thought_body,
    "perception": _perception_body,
    "cognition": _cognition_line,
    "insight": format_choice,
    "risk": format_choice,
}


def _mse_lines(mse: MentalStatusExam) -> List[str]:
    lines = []
    for key, label in MSE_SECTION_LABELS:
        section = getattr(mse, key, None)
        if section is not None:
            lines.append(f"[{label}] {MSE_SECTION_RENDERERS[key](section)}")
    return lines


def format_mse(mse: Optional[MentalStatusExam]) -> str:
    """
    Render the Mental Status Exam as one labelled line per present section.

    Returns:
        Newline-joined section lines, 尚未進行 MSE 評估。 when the exam is
        absent, or MSE 未記錄任何項目。 when it exists with no sections

    Example:
        >>> format_mse(MentalStatusExam(insight=Choice.from_raw("partial")))
        '[病識感] partial'
    """
    if not isinstance(mse, MentalStatusExam):
        return MSE_NOT_ASSESSED
    lines = _mse_lines(mse)
    return "\n".join(lines) if lines else MSE_NO_SECTIONS


# =============================================================================
# STAGE 3: PHYSICAL / NEUROLOGICAL EXAM
# =============================================================================


def format_pe(pe: Optional[PhysicalExam]) -> str:
    """Render PE/NE findings, same presence rules as format_mse."""
    if not isinstance(pe, PhysicalExam):
        return PE_NOT_ASSESSED
    lines = []
    for key, label in PE_SECTION_LABELS:
        finding = getattr(pe, key, None)
        if finding is None:
            continue
        lines.append(f"[{label}] {format_choice(finding)}")
    return "\n".join(lines) if lines else PE_NO_SECTIONS


# =============================================================================
# STAGE 4: DEMOGRAPHICS
# =============================================================================


def calculate_age(birth_year_roc: Optional[int], today: Optional[date] = None) -> str:
    """
    Age in years from an ROC-calendar birth year.

    Returns:
        The age as text, or 不詳 when the birth year is unknown or implausible
    """
    if birth_year_roc is None or isinstance(birth_year_roc, bool):
        return UNKNOWN_AGE
    try:
        birth_year = int(birth_year_roc)
    except (TypeError, ValueError):
        return UNKNOWN_AGE
    current_year = (today or date.today()).year
    age = current_year - ROC_YEAR_OFFSET - birth_year
    if age < 0:
        return UNKNOWN_AGE
    return str(age)


def format_gender(gender: Any) -> str:
    return GENDER_LABELS[Gender.from_raw(gender).value]


def format_welfare_status(patient: Patient) -> str:
    """Disability certificate and catastrophic illness card flags, comma-joined."""
    disability = "領有身心障礙手冊" if patient.has_disability_certificate else "無身心障礙手冊"
    catastrophic = "領有重大傷病卡" if patient.has_catastrophic_illness_card else "無重大傷病卡"
    return f"{disability}，{catastrophic}"


def format_patient_summary_line(
    patient: Patient, psych_diagnosis: Optional[str] = None, today: Optional[date] = None
) -> str:
    """
    One-line patient summary used by narrative summary records.

    The patient's name is deliberately absent.
    """
    diagnosis_text = psych_diagnosis or format_diagnoses(patient.diagnosis.psychiatric)
    age = calculate_age(patient.birth_year_roc, today)
    age_text = f"{age}歲" if age != UNKNOWN_AGE else f"年齡{UNKNOWN_AGE}"
    return (
        f"{age_text}，{format_gender(patient.gender)}性，{format_welfare_status(patient)}，"
        f"此次入院精神科診斷為：{diagnosis_text}。"
    )
