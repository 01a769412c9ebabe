"""Shared fixtures for the psychiatric note generation tests."""

from datetime import date, datetime

import pytest

from psych_note_generation.core.config import EngineConfiguration
from psych_note_generation.core.enums import Gender, RecordType
from psych_note_generation.core.models import (
    Choice,
    Diagnosis,
    MedicalRecord,
    MentalStatusExam,
    Patient,
)

VALID_KEY = "test-key-0123456789"
TODAY = date(2026, 1, 15)


class FakeLLMClient:
    """Backend double that records every call."""

    def __init__(self, response="S: 病患表示睡眠改善。", error=None):
        self.response = response
        self.error = error
        self.calls = []

    def generate(self, prompt, system_instruction, temperature):
        self.calls.append(
            {"prompt": prompt, "system_instruction": system_instruction, "temperature": temperature}
        )
        if self.error is not None:
            raise self.error
        return self.response

    @property
    def model_name(self):
        return "fake-model"

    @property
    def provider_name(self):
        return "fake"


@pytest.fixture
def config():
    return EngineConfiguration(api_key=VALID_KEY)


@pytest.fixture
def fake_client():
    return FakeLLMClient()


@pytest.fixture
def patient():
    return Patient(
        patient_id="P001",
        name="王小明",
        birth_year_roc=70,
        gender=Gender.MALE,
        has_disability_certificate=True,
        diagnosis=Diagnosis(
            psychiatric=Choice.from_raw(["Schizophrenia"]),
            medical=Choice.from_raw(["Hypertension"]),
        ),
        mse=MentalStatusExam(insight=Choice.from_raw("partial")),
    )


@pytest.fixture
def history():
    return [
        MedicalRecord(RecordType.PROGRESS_NOTE, "first progress", datetime(2026, 1, 1, 9, 0)),
        MedicalRecord(RecordType.PROGRESS_NOTE, "latest progress", datetime(2026, 1, 5, 9, 0)),
        MedicalRecord(RecordType.WEEKLY_SUMMARY, "weekly", datetime(2026, 1, 9, 9, 0)),
    ]
