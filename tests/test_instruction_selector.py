"""Tests for the instruction selector.

These tests verify template selection per record type, the default
template for unknown types, the length class, and the conditional rules of
the system instruction.
"""

import pytest

from psych_note_generation.core.enums import RecordType
from psych_note_generation.instructions import (
    LENGTH_CONSTRAINED_TYPES,
    RECORD_TYPE_TEMPLATES,
    InstructionContext,
    build_system_instruction,
    is_length_constrained,
    select_instructions,
)


class TestLengthClass:
    """Test suite for length-constraint membership."""

    @pytest.mark.parametrize(
        "record_type",
        [
            RecordType.PROGRESS_NOTE,
            RecordType.SPECIAL_HANDLING,
            RecordType.SUPPORTIVE_PSYCHOTHERAPY,
            RecordType.PSYCHOTHERAPY,
            RecordType.PHYSIO_PSYCHO_EXAM,
        ],
    )
    def test_constrained_types(self, record_type):
        assert select_instructions(record_type).length_constrained

    @pytest.mark.parametrize(
        "record_type",
        [
            RecordType.WEEKLY_SUMMARY,
            RecordType.MONTHLY_SUMMARY,
            RecordType.OFF_DUTY_SUMMARY,
            RecordType.DISCHARGE_NOTE,
        ],
    )
    def test_unconstrained_types(self, record_type):
        assert not select_instructions(record_type).length_constrained

    def test_unknown_type_is_unconstrained(self):
        """Test that a type outside the enumeration gets no length ceiling."""
        assert not is_length_constrained("FAMILY_MEETING")
        assert not select_instructions("FAMILY_MEETING").length_constrained

    def test_set_is_exactly_five_types(self):
        assert len(LENGTH_CONSTRAINED_TYPES) == 5


class TestTemplateSelection:
    """Test suite for structural rule selection."""

    def test_progress_note_is_soap(self):
        rules = select_instructions(RecordType.PROGRESS_NOTE).structural_rules
        assert "SOAP" in rules
        assert "主治醫師評語與建議" in rules

    def test_supportive_psychotherapy_structure(self):
        rules = select_instructions(RecordType.SUPPORTIVE_PSYCHOTHERAPY).structural_rules
        for heading in ("治療目標", "治療內容", "效果評估"):
            assert heading in rules

    def test_physio_psycho_exam_uses_default_template(self):
        """Test that a type without a row gets the default template."""
        assert RecordType.PHYSIO_PSYCHO_EXAM not in RECORD_TYPE_TEMPLATES
        rules = select_instructions(RecordType.PHYSIO_PSYCHO_EXAM).structural_rules
        assert rules == "專業醫療筆記格式，紀錄名稱為「Physio-Psycho Exam」。"

    def test_unknown_type_uses_its_own_name(self):
        rules = select_instructions("FAMILY_MEETING").structural_rules
        assert "FAMILY_MEETING" in rules

    def test_narrative_summary_embeds_title_and_summary_line(self):
        context = InstructionContext(patient_summary_line="45歲，男性")
        rules = select_instructions(RecordType.WEEKLY_SUMMARY, context).structural_rules
        assert "禁止使用 SOAP 格式" in rules
        assert "Weekly Summary" in rules
        assert "45歲，男性" in rules

    def test_off_duty_reason_surfaced(self):
        context = InstructionContext(extra_info="主治醫師休假")
        rules = select_instructions(RecordType.OFF_DUTY_SUMMARY, context).structural_rules
        assert "Off Duty note 原因：主治醫師休假" in rules

    def test_discharge_plan_surfaced(self):
        context = InstructionContext(extra_info="返家由家屬照顧")
        rules = select_instructions(RecordType.DISCHARGE_NOTE, context).structural_rules
        assert "Discharge 安置計畫：返家由家屬照顧" in rules

    def test_supplementary_clause_omitted_without_text(self):
        rules = select_instructions(
            RecordType.DISCHARGE_NOTE, InstructionContext(extra_info="  ")
        ).structural_rules
        assert "安置計畫" not in rules
        assert "特定補充" not in rules

    def test_supplementary_text_ignored_for_other_types(self):
        context = InstructionContext(extra_info="返家")
        rules = select_instructions(RecordType.WEEKLY_SUMMARY, context).structural_rules
        assert "返家" not in rules

    def test_raw_string_matches_enum_row(self):
        assert (
            select_instructions("PROGRESS_NOTE").structural_rules
            == select_instructions(RecordType.PROGRESS_NOTE).structural_rules
        )


class TestSystemInstruction:
    """Test suite for the global system instruction."""

    def test_always_present_rules(self):
        text = build_system_instruction(length_constrained=False, has_prior_record=False)
        assert "嚴禁幻覺" in text
        assert "嚴禁擅自增加護理細節" in text
        assert "證據基礎" in text
        assert "(**)" in text

    def test_diversity_rule_only_with_prior_record(self):
        without = build_system_instruction(length_constrained=False, has_prior_record=False)
        with_prior = build_system_instruction(length_constrained=False, has_prior_record=True)
        assert "30%" not in without
        assert "30%" in with_prior

    def test_length_rule_only_when_constrained(self):
        unconstrained = build_system_instruction(length_constrained=False, has_prior_record=False)
        constrained = build_system_instruction(length_constrained=True, has_prior_record=False)
        assert "字數限制" not in unconstrained
        assert "總字數禁止超過 400 個中文字" in constrained

    def test_custom_ceiling(self):
        text = build_system_instruction(True, False, length_ceiling=300)
        assert "300 個中文字" in text

    def test_rules_numbered_consecutively(self):
        text = build_system_instruction(length_constrained=False, has_prior_record=False)
        numbered = [line for line in text.split("\n") if line[:1].isdigit()]
        assert [line.split(".")[0] for line in numbered] == ["1", "2", "3", "4"]

        full = build_system_instruction(length_constrained=True, has_prior_record=True)
        numbered = [line for line in full.split("\n") if line[:1].isdigit()]
        assert len(numbered) == 6
        assert numbered[-1].startswith("6. 禁止使用粗體語法")
