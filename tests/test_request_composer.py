"""Tests for request composition.

These tests verify most-recent record selection, temperature choice and the
sections of the composed request body.
"""

from datetime import date, datetime, timezone

from psych_note_generation.core.enums import RecordType
from psych_note_generation.core.models import MedicalRecord, Patient
from psych_note_generation.generation import (
    choose_temperature,
    compose,
    select_most_recent_record,
)

from conftest import TODAY


def _record(record_type, content, day):
    return MedicalRecord(record_type, content, datetime(2026, 1, day, 8, 0))


class TestSelectMostRecentRecord:
    """Test suite for anti-repetition anchor selection."""

    def test_latest_of_requested_type(self):
        """Test that a newer record of another type is ignored."""
        history = [
            _record("A", "t:1", 1),
            _record("A", "t:5", 5),
            _record("B", "t:9", 9),
        ]
        assert select_most_recent_record(history, "A").content == "t:5"

    def test_unordered_history(self):
        history = [
            _record(RecordType.PROGRESS_NOTE, "newest", 20),
            _record(RecordType.PROGRESS_NOTE, "oldest", 2),
            _record(RecordType.PROGRESS_NOTE, "middle", 10),
        ]
        assert select_most_recent_record(history, RecordType.PROGRESS_NOTE).content == "newest"

    def test_no_record_of_type(self):
        history = [_record(RecordType.WEEKLY_SUMMARY, "weekly", 3)]
        assert select_most_recent_record(history, RecordType.PROGRESS_NOTE) is None
        assert select_most_recent_record([], RecordType.PROGRESS_NOTE) is None

    def test_raw_string_matches_enum_member(self):
        history = [_record(RecordType.PROGRESS_NOTE, "note", 3)]
        assert select_most_recent_record(history, "PROGRESS_NOTE").content == "note"

    def test_mixed_naive_and_aware_timestamps(self):
        history = [
            MedicalRecord("A", "aware", datetime(2030, 1, 1, tzinfo=timezone.utc)),
            MedicalRecord("A", "naive", datetime(2020, 1, 1)),
        ]
        assert select_most_recent_record(history, "A").content == "aware"


class TestChooseTemperature:
    """Test suite for temperature selection."""

    def test_default_and_diversified(self):
        assert choose_temperature(False) == 0.7
        assert choose_temperature(True) == 0.85

    def test_clamped_into_range(self):
        assert choose_temperature(False, base=0.2) == 0.7
        assert choose_temperature(True, diversified=1.5) == 0.85


class TestCompose:
    """Test suite for the composed GenerationRequest."""

    def test_sections_in_order(self, patient, history):
        request = compose(patient, RecordType.PROGRESS_NOTE, history, today=TODAY)
        text = request.prompt_text
        positions = [
            text.index("【病患現況】"),
            text.index("【參考素材：過去的病程紀錄】"),
            text.index("【對照組：前次同類型紀錄】"),
            text.index("【任務】"),
        ]
        assert positions == sorted(positions)

    def test_prior_record_included(self, patient, history):
        request = compose(patient, RecordType.PROGRESS_NOTE, history, today=TODAY)
        assert request.has_prior_record
        assert "【對照組：前次同類型紀錄】\nlatest progress" in request.prompt_text
        assert request.temperature == 0.85
        assert "30%" in request.system_instruction

    def test_prior_record_marker_when_missing(self, patient, history):
        request = compose(patient, RecordType.PSYCHOTHERAPY, history, today=TODAY)
        assert not request.has_prior_record
        assert "【對照組：前次同類型紀錄】\n無前次紀錄" in request.prompt_text
        assert request.temperature == 0.7
        assert "30%" not in request.system_instruction

    def test_reference_records_chronological(self, patient, history):
        request = compose(patient, RecordType.PROGRESS_NOTE, list(reversed(history)), today=TODAY)
        text = request.prompt_text
        assert text.index("[2026-01-01 09:00] first progress") < text.index(
            "[2026-01-09 09:00] weekly"
        )

    def test_no_history(self, patient):
        request = compose(patient, RecordType.PROGRESS_NOTE, [], today=TODAY)
        assert "無過去紀錄" in request.prompt_text
        assert "無前次紀錄" in request.prompt_text

    def test_patient_name_never_sent(self, patient, history):
        request = compose(patient, RecordType.WEEKLY_SUMMARY, history, today=TODAY)
        assert patient.name not in request.prompt_text
        assert patient.name not in request.system_instruction

    def test_clinical_focus_fallback(self, patient):
        request = compose(patient, RecordType.PROGRESS_NOTE, today=TODAY)
        assert "臨床重點：穩定" in request.prompt_text

    def test_supplementary_info_only_when_given(self, patient):
        without = compose(patient, RecordType.DISCHARGE_NOTE, today=TODAY)
        with_info = compose(patient, RecordType.DISCHARGE_NOTE, extra_info="轉護理之家", today=TODAY)
        assert "補充資訊" not in without.prompt_text
        assert "補充資訊：轉護理之家" in with_info.prompt_text
        assert "Discharge 安置計畫：轉護理之家" in with_info.prompt_text

    def test_admission_date_when_known(self):
        patient = Patient(patient_id="P002", admission_date=date(2025, 12, 20))
        request = compose(patient, RecordType.PROGRESS_NOTE, today=TODAY)
        assert "入院日期：2025-12-20" in request.prompt_text
        assert "入院日期" not in compose(Patient(patient_id="P003"), "X", today=TODAY).prompt_text

    def test_unknown_record_type(self, patient):
        request = compose(patient, "FAMILY_MEETING", today=TODAY)
        assert not request.length_constrained
        assert "生成一份 FAMILY_MEETING" in request.prompt_text
        assert "字數限制" not in request.system_instruction
