"""
Constants for Psychiatric Note Generation

This module defines the constant values used throughout the engine.
Canonical display phrases live here so formatter, composer and classifier
agree on the exact wording that tests and the UI rely on.

Constant Categories:
    FALLBACK_PHRASES      → Fixed text for absent / normal / other values
    SECTION_LABELS        → Labels of MSE and PE/NE lines
    GENERATION_LIMITS     → Length ceiling and temperature range
    CREDENTIAL_RULES      → Placeholder credential values
    OUTCOME_MESSAGES      → Displayable failure messages
    LOGGING               → loguru format string

Author: Shubham Singh
Date: January 2026
"""

from typing import Dict, FrozenSet, List, Tuple


# =============================================================================
# STAGE 1: FALLBACK PHRASES
# =============================================================================

NO_SPECIFIC_DIAGNOSIS = "無特定診斷"
OTHER_DIAGNOSIS_LABEL = "其他診斷"
OTHER_FINDING_LABEL = "其他"
WITHIN_NORMAL_LIMITS = "正常/無異常"

MSE_NOT_ASSESSED = "尚未進行 MSE 評估。"
MSE_NO_SECTIONS = "MSE 未記錄任何項目。"
PE_NOT_ASSESSED = "尚未進行 PE/NE 檢查。"
PE_NO_SECTIONS = "PE/NE 未記錄任何系統。"

ORIENTATION_NORMAL = "定向感正常"
ORIENTATION_IMPAIRED_SUFFIX = "定向感異常"

UNKNOWN_AGE = "不詳"
DEFAULT_CLINICAL_FOCUS = "穩定"
NO_PRIOR_RECORD = "無前次紀錄"
NO_REFERENCE_RECORDS = "無過去紀錄"


# =============================================================================
# STAGE 2: SECTION LABELS
# =============================================================================
# Order of the tuples is the canonical output order.

MSE_SECTION_LABELS: Tuple[Tuple[str, str], ...] = (
    ("appearance", "外觀"),
    ("speech", "言語"),
    ("mood", "情緒情感"),
    ("thought", "思維"),
    ("perception", "知覺"),
    ("cognition", "認知"),
    ("insight", "病識感"),
    ("risk", "風險"),
)

PE_SECTION_LABELS: Tuple[Tuple[str, str], ...] = (
    ("consciousness", "意識"),
    ("heent", "頭頸部"),
    ("chest", "胸部"),
    ("heart", "心臟"),
    ("abdomen", "腹部"),
    ("extremities", "四肢"),
    ("skin", "皮膚"),
    ("neurological", "神經學"),
)

ORIENTATION_LABELS: Tuple[Tuple[str, str], ...] = (
    ("time", "時間"),
    ("place", "地點"),
    ("person", "人物"),
)

GENDER_LABELS: Dict[str, str] = {
    "male": "男",
    "female": "女",
    "other": "其他",
}


# =============================================================================
# STAGE 3: GENERATION LIMITS
# =============================================================================

DEFAULT_LENGTH_CEILING = 400  # CJK characters
MIN_TEMPERATURE = 0.7
MAX_TEMPERATURE = 0.85

# Republic of China calendar year 1 == 1912 CE
ROC_YEAR_OFFSET = 1911


# =============================================================================
# STAGE 4: CREDENTIAL RULES
# =============================================================================

MIN_CREDENTIAL_LENGTH = 10

PLACEHOLDER_CREDENTIALS: FrozenSet[str] = frozenset(
    value.lower()
    for value in (
        "undefined",
        "null",
        "none",
        "your_api_key_here",
        "YOUR_GEMINI_API_KEY_HERE",
        "YOUR_OPENAI_API_KEY_HERE",
        "YOUR_API_KEY_HERE",
        "REPLACE_WITH_YOUR_API_KEY",
    )
)


# =============================================================================
# STAGE 5: OUTCOME MESSAGES
# =============================================================================

CONFIG_ERROR_MESSAGE = "⚠️ 系統錯誤：未偵測到有效的 API 金鑰，請檢查環境設定。（{detail}）"
CONFIG_INVALID_MESSAGE = "⚠️ 系統錯誤：引擎設定無效，請檢查環境設定。（{detail}）"
EMPTY_RESPONSE_MESSAGE = "⚠️ API 回傳空內容，請重新送出。"
RATE_LIMITED_MESSAGE = "⚠️ 頻率限制中，請稍候 {wait} 後再試。"
UPSTREAM_MESSAGE = "⚠️ 生成失敗：{diagnostic}"

DEFAULT_RATE_LIMIT_WAIT_SECONDS = 60

# Last-resort markers for rate-limit detection when no status field exists
RATE_LIMIT_MESSAGE_MARKERS: List[str] = [
    "429",
    "quota",
    "rate limit",
    "rate_limit",
    "resource exhausted",
    "resource_exhausted",
    "too many requests",
]


# =============================================================================
# STAGE 6: LOGGING CONFIGURATION
# =============================================================================

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> | "
    "<level>{message}</level>"
)
