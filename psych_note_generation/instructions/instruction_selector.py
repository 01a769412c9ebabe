"""
Instruction Selector

This module decides WHAT the backend is told to write: the structural rules
for each record type and the global system instruction.

Selection Strategy:
    1. Look the record type up in RECORD_TYPE_TEMPLATES
    2. Fall back to DEFAULT_TEMPLATE for any type without a row
       (including raw strings outside the RecordType enumeration)
    3. Fill in the record title and patient summary line
    4. Append the supplementary clause for OFF_DUTY_SUMMARY / DISCHARGE_NOTE
       when supplementary text was supplied
    5. Report whether the record type is length-constrained

The length class is a separate set, LENGTH_CONSTRAINED_TYPES, so a type can
share the default template and still be length-constrained
(PHYSIO_PSYCHO_EXAM does exactly that).

Usage:
    from psych_note_generation.instructions import select_instructions

    instructions = select_instructions(RecordType.PROGRESS_NOTE, InstructionContext())
    print(instructions.structural_rules)

Author: Shubham Singh
Date: January 2026
"""

from dataclasses import dataclass
from typing import Dict, FrozenSet, List, Optional, Union

from psych_note_generation.core.constants import DEFAULT_LENGTH_CEILING
from psych_note_generation.core.enums import RecordType


# =============================================================================
# STAGE 1: SELECTION TYPES
# =============================================================================


@dataclass(frozen=True)
class InstructionContext:
    """
    Request-specific values some templates interpolate.

    Attributes:
        patient_summary_line: One-line demographic summary (narrative records)
        extra_info: Caller-supplied supplementary text (off-duty reason,
                    discharge placement plan, ...)
    """

    patient_summary_line: str = ""
    extra_info: Optional[str] = None


@dataclass(frozen=True)
class InstructionSet:
    """Structural rules for one record type plus its length class."""

    structural_rules: str
    length_constrained: bool


# =============================================================================
# STAGE 2: RECORD TYPE TEMPLATES
# =============================================================================
# Placeholders: {title}, {patient_summary_line}

PROGRESS_NOTE_TEMPLATE = """【格式要求】
1. 採用 SOAP 格式。
2. S: 描述病患主觀訴求。
3. O: 簡短摘要 MSE 與 PE/NE。
4. A: 僅列出精神科與內外科診斷，禁止補充說明。
5. P: 列出 3-5 點治療計畫。
6. 【重要】在 P 之後換行，新增區塊「主治醫師評語與建議」，內容應根據病患風險與現況提供臨床照護提醒（如預防跌倒、副作用觀察等）。"""

SUPPORTIVE_PSYCHOTHERAPY_TEMPLATE = """【格式要求】必須採下列結構撰寫：
治療目標：[具體目標，如建立關係或衛教]
治療內容：[具體行動或衛教項目，若為過程請採 1. 2. 3. 條列]
效果評估：[如 mild effect / effective / 可接受 / 穩定]
(參考範例：目標為建立治療性關係，內容為傾聽關懷，評估為 mild effect)"""

PSYCHOTHERAPY_TEMPLATE = """【特殊心理治療紀錄生成原則】
1. 具體病徵描述：著重以具體例子說明個案狀況。例如個案的特定負向思考（如「我一點用處都沒有」、「大家都在針對我」）或其他具體臨床表現。
2. 治療技巧運用：詳細紀錄使用的專業治療技巧（如認知行為治療 CBT 之認知重建、辯證行為治療之正念、或給予同理、情感反映等技巧）。
3. 適應技能發展：描述如何協助病患發展新的適應技能（Adaptive skills），以改善其應對能力或心理功能。"""

SPECIAL_HANDLING_TEMPLATE = """【特別處理紀錄生成原則】
1. 特別處理原因：重點記錄病患因精神症狀影響（如幻聽指示、嚴重妄想、情緒極度不穩），導致有攻擊他人或自傷之虞。請合理連結 MSE 中的欄位資訊（如衝動控制、被害妄想、易怒等）來強化此項處置的合理性。
2. 處置內容：說明治療團隊必須提供密集的經常性照護，並採取必要之心理支持、行為引導或藥物調整，以避免危險行為發生。
3. 若欄位內容與風險差異過大，則無需強行連結。"""

NARRATIVE_SUMMARY_TEMPLATE = """【彙整紀錄生成原則】
1. 禁止使用 SOAP 格式。
2. 請採用專業的「敘事方式 (Narrative)」撰寫，整合並摘要病患的住院病程。
3. 紀錄結構如下：
   第一行：紀錄名稱（{title}）
   第二行：{patient_summary_line}
   第三行開始：根據提供的病程紀錄 (Progress Note) 進行內容整合與彙寫。"""

DEFAULT_TEMPLATE = "專業醫療筆記格式，紀錄名稱為「{title}」。"

RECORD_TYPE_TEMPLATES: Dict[RecordType, str] = {
    RecordType.PROGRESS_NOTE: PROGRESS_NOTE_TEMPLATE,
    RecordType.SUPPORTIVE_PSYCHOTHERAPY: SUPPORTIVE_PSYCHOTHERAPY_TEMPLATE,
    RecordType.PSYCHOTHERAPY: PSYCHOTHERAPY_TEMPLATE,
    RecordType.SPECIAL_HANDLING: SPECIAL_HANDLING_TEMPLATE,
    RecordType.WEEKLY_SUMMARY: NARRATIVE_SUMMARY_TEMPLATE,
    RecordType.MONTHLY_SUMMARY: NARRATIVE_SUMMARY_TEMPLATE,
    RecordType.OFF_DUTY_SUMMARY: NARRATIVE_SUMMARY_TEMPLATE,
    RecordType.DISCHARGE_NOTE: NARRATIVE_SUMMARY_TEMPLATE,
}

# Clauses that surface caller-supplied text; omitted when the text is blank.
SUPPLEMENTARY_CLAUSES: Dict[RecordType, str] = {
    RecordType.OFF_DUTY_SUMMARY: "必須包含 Off Duty note 原因：{extra_info}",
    RecordType.DISCHARGE_NOTE: "必須包含 Discharge 安置計畫：{extra_info}",
}

LENGTH_CONSTRAINED_TYPES: FrozenSet[RecordType] = frozenset(
    {
        RecordType.PROGRESS_NOTE,
        RecordType.SPECIAL_HANDLING,
        RecordType.SUPPORTIVE_PSYCHOTHERAPY,
        RecordType.PSYCHOTHERAPY,
        RecordType.PHYSIO_PSYCHO_EXAM,
    }
)


# =============================================================================
# STAGE 3: SELECTION
# =============================================================================


def record_type_title(record_type: Union[RecordType, str]) -> str:
    """Display title; raw strings outside the enumeration are used as-is."""
    if isinstance(record_type, RecordType):
        return record_type.display_title
    return str(record_type)


def is_length_constrained(record_type: Union[RecordType, str]) -> bool:
    """Unknown types are never length-constrained."""
    return record_type in LENGTH_CONSTRAINED_TYPES


def select_instructions(
    record_type: Union[RecordType, str], context: Optional[InstructionContext] = None
) -> InstructionSet:
    """
    Produce the structural rules for a record type.

    Args:
        record_type: Requested record type (RecordType or raw string)
        context: Summary line and supplementary text for interpolation

    Returns:
        InstructionSet with rendered rules and the length class

    Example:
        >>> select_instructions("CUSTOM_TYPE").length_constrained
        False
    """
    context = context or InstructionContext()
    template = RECORD_TYPE_TEMPLATES.get(record_type, DEFAULT_TEMPLATE)
    rules = template.format(
        title=record_type_title(record_type),
        patient_summary_line=context.patient_summary_line,
    )

    clause = SUPPLEMENTARY_CLAUSES.get(record_type)
    extra_info = (context.extra_info or "").strip()
    if clause and extra_info:
        rules = f"{rules}\n4. 特定補充：\n   - {clause.format(extra_info=extra_info)}"

    return InstructionSet(
        structural_rules=rules,
        length_constrained=is_length_constrained(record_type),
    )


# =============================================================================
# STAGE 4: SYSTEM INSTRUCTION
# =============================================================================

SYSTEM_PREAMBLE = "你是一位精神科醫療寫作專家。\n【基本準則】"

NO_HALLUCINATION_RULE = "嚴禁幻覺：禁止發明病患引句、對話或資料未提及的症狀。"
NO_CARE_DETAIL_RULE = "嚴禁擅自增加護理細節：除非資料明確記載，禁止寫入具體監控頻率或餵食計畫。"
EVIDENCE_RULE = "證據基礎：所有推論必須基於提供的 MSE/PE 資料。"
DIVERSITY_RULE = "內容多樣性：新紀錄必須與前次紀錄有 30% 以上的差異化。"
LENGTH_RULE = "字數限制：總字數禁止超過 {ceiling} 個中文字。"
NO_BOLD_RULE = "禁止使用粗體語法 (**)。"


def build_system_instruction(
    length_constrained: bool,
    has_prior_record: bool,
    length_ceiling: int = DEFAULT_LENGTH_CEILING,
) -> str:
    """
    Build the global system instruction.

    The diversity rule is present only when a prior same-type record exists;
    the length rule only for length-constrained types. Rules are numbered
    consecutively after the optional ones are dropped.
    """
    rules: List[str] = [NO_HALLUCINATION_RULE, NO_CARE_DETAIL_RULE, EVIDENCE_RULE]
    if has_prior_record:
        rules.append(DIVERSITY_RULE)
    if length_constrained:
        rules.append(LENGTH_RULE.format(ceiling=length_ceiling))
    rules.append(NO_BOLD_RULE)

    numbered = [f"{index}. {rule}" for index, rule in enumerate(rules, start=1)]
    return "\n".join([SYSTEM_PREAMBLE, *numbered])
