"""
Request Composer

This module assembles one GenerationRequest from a patient snapshot, the
requested record type, the patient's record history and optional
supplementary text.

Composition Pipeline:
    STAGE 1: Find the most recent record of the same type (anti-repetition)
    STAGE 2: Select structural rules and length class
    STAGE 3: Build the system instruction
    STAGE 4: Render the request body sections
    STAGE 5: Pick the temperature

Request Body Sections (in order):
    【病患現況】                   → Summary line, diagnoses, welfare, focus, MSE, PE/NE
    【參考素材：過去的病程紀錄】   → All prior records, oldest first
    【對照組：前次同類型紀錄】     → Prior same-type record, or 無前次紀錄
    【任務】                       → Record title + structural rules

Composition is pure: no I/O, no clock reads except when `today` is omitted.

Author: Shubham Singh
Date: January 2026
"""

from datetime import date
from typing import Iterable, List, Optional, Sequence, Union

from loguru import logger

from psych_note_generation.core.constants import (
    DEFAULT_CLINICAL_FOCUS,
    DEFAULT_LENGTH_CEILING,
    MAX_TEMPERATURE,
    MIN_TEMPERATURE,
    NO_PRIOR_RECORD,
    NO_REFERENCE_RECORDS,
)
from psych_note_generation.core.enums import RecordType
from psych_note_generation.core.models import GenerationRequest, MedicalRecord, Patient
from psych_note_generation.formatting import (
    format_diagnoses,
    format_mse,
    format_patient_summary_line,
    format_pe,
    format_welfare_status,
)
from psych_note_generation.instructions import (
    InstructionContext,
    build_system_instruction,
    record_type_title,
    select_instructions,
)

RECORD_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M"


# =============================================================================
# STAGE 1: HISTORY SELECTION
# =============================================================================


def select_most_recent_record(
    history: Iterable[MedicalRecord], record_type: Union[RecordType, str]
) -> Optional[MedicalRecord]:
    """
    Latest record of the given type, or None.

    History arrives unordered. On equal timestamps the first one seen wins.

    Example:
        >>> latest = select_most_recent_record(records, RecordType.PROGRESS_NOTE)
    """
    candidates = [record for record in history or () if record.record_type == record_type]
    if not candidates:
        return None
    return max(candidates, key=lambda record: record.timestamp)


def choose_temperature(
    has_prior_record: bool,
    base: float = MIN_TEMPERATURE,
    diversified: float = MAX_TEMPERATURE,
) -> float:
    """Higher temperature when the note must diverge from a prior one; clamped to [0.7, 0.85]."""
    chosen = diversified if has_prior_record else base
    return min(max(chosen, MIN_TEMPERATURE), MAX_TEMPERATURE)


# =============================================================================
# STAGE 2: SECTION RENDERING
# =============================================================================


def _patient_status_section(
    patient: Patient, summary_line: str, psych_diagnosis: str, extra_info: Optional[str]
) -> str:
    lines = ["【病患現況】", f"基本資料：{summary_line}"]
    if patient.admission_date is not None:
        lines.append(f"入院日期：{patient.admission_date.isoformat()}")
    lines.extend(
        [
            f"精神科診斷：{psych_diagnosis}",
            f"內外科診斷：{format_diagnoses(patient.diagnosis.medical)}",
            f"福利身分：{format_welfare_status(patient)}",
            f"臨床重點：{patient.clinical_focus.strip() or DEFAULT_CLINICAL_FOCUS}",
            f"MSE：\n{format_mse(patient.mse)}",
            f"PE/NE：\n{format_pe(patient.pe)}",
        ]
    )
    if extra_info:
        lines.append(f"補充資訊：{extra_info}")
    return "\n".join(lines)


def _reference_section(history: Sequence[MedicalRecord]) -> str:
    if not history:
        return f"【參考素材：過去的病程紀錄】\n{NO_REFERENCE_RECORDS}"
    ordered = sorted(history, key=lambda record: record.timestamp)
    entries = [
        f"[{record.created_at.strftime(RECORD_TIMESTAMP_FORMAT)}] {record.content}"
        for record in ordered
    ]
    return "【參考素材：過去的病程紀錄】\n" + "\n\n".join(entries)


def _prior_record_section(prior: Optional[MedicalRecord]) -> str:
    content = prior.content if prior is not None else NO_PRIOR_RECORD
    return f"【對照組：前次同類型紀錄】\n{content}"


def _task_section(record_type: Union[RecordType, str], structural_rules: str) -> str:
    return (
        f"【任務】\n生成一份 {record_type_title(record_type)}。請遵守格式要求與禁令：\n"
        f"{structural_rules}"
    )


# =============================================================================
# STAGE 3: COMPOSITION
# =============================================================================


def compose(
    patient: Patient,
    record_type: Union[RecordType, str],
    history: Optional[Iterable[MedicalRecord]] = None,
    extra_info: Optional[str] = None,
    *,
    today: Optional[date] = None,
    length_ceiling: int = DEFAULT_LENGTH_CEILING,
    base_temperature: float = MIN_TEMPERATURE,
    diversified_temperature: float = MAX_TEMPERATURE,
) -> GenerationRequest:
    """
    Build the generation request for one note.

    Args:
        patient: Patient snapshot
        record_type: Requested record type (RecordType or raw string)
        history: The patient's prior records, any order
        extra_info: Supplementary free text (off-duty reason, placement plan, ...)
        today: Reference date for age calculation
        length_ceiling: CJK character ceiling for constrained types
        base_temperature: Temperature without a prior same-type record
        diversified_temperature: Temperature with one

    Returns:
        GenerationRequest ready for the backend
    """
    records: List[MedicalRecord] = list(history or ())
    extra_text = (extra_info or "").strip() or None

    # STAGE 1: Anti-repetition anchor
    prior = select_most_recent_record(records, record_type)
    has_prior_record = prior is not None

    # STAGE 2: Structural rules
    psych_diagnosis = format_diagnoses(patient.diagnosis.psychiatric)
    summary_line = format_patient_summary_line(patient, psych_diagnosis, today)
    instructions = select_instructions(
        record_type,
        InstructionContext(patient_summary_line=summary_line, extra_info=extra_text),
    )

    # STAGE 3: System instruction
    system_instruction = build_system_instruction(
        length_constrained=instructions.length_constrained,
        has_prior_record=has_prior_record,
        length_ceiling=length_ceiling,
    )

    # STAGE 4: Request body
    prompt_text = "\n\n".join(
        [
            _patient_status_section(patient, summary_line, psych_diagnosis, extra_text),
            _reference_section(records),
            _prior_record_section(prior),
            _task_section(record_type, instructions.structural_rules),
        ]
    )

    # STAGE 5: Temperature
    temperature = choose_temperature(has_prior_record, base_temperature, diversified_temperature)

    logger.debug(
        f"Composed request | Type: {record_type_title(record_type)} | "
        f"History: {len(records)} | Prior: {has_prior_record} | "
        f"Constrained: {instructions.length_constrained} | Temperature: {temperature}"
    )

    return GenerationRequest(
        prompt_text=prompt_text,
        system_instruction=system_instruction,
        temperature=temperature,
        record_type=record_type,
        length_constrained=instructions.length_constrained,
        has_prior_record=has_prior_record,
    )
