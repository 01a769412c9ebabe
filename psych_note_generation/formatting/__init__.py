"""
Formatting Layer - Canonical Clinical Text

Pure functions that render diagnoses, MSE and PE/NE findings and patient
demographics into the text blocks embedded in generation requests.

Author: Shubham Singh
Date: January 2026
"""

from psych_note_generation.formatting.clinical_formatter import (
    calculate_age,
    format_choice,
    format_diagnoses,
    format_gender,
    format_mse,
    format_orientation,
    format_patient_summary_line,
    format_pe,
    format_welfare_status,
)

__all__ = [
    "calculate_age",
    "format_choice",
    "format_diagnoses",
    "format_gender",
    "format_mse",
    "format_orientation",
    "format_patient_summary_line",
    "format_pe",
    "format_welfare_status",
]
