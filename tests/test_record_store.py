"""Tests for the clinical record stores and record-store parsing."""

import json
from dataclasses import replace
from datetime import date

import pytest

from psych_note_generation.core.enums import OTHERS, Gender, RecordType
from psych_note_generation.core.exceptions import PatientNotFoundError, RecordStoreLoadError
from psych_note_generation.formatting import format_choice, format_diagnoses
from psych_note_generation.repository import (
    ClinicalRecordStore,
    InMemoryClinicalRecordStore,
    JsonFileClinicalRecordStore,
)

STORE_DOCUMENT = {
    "patients": [
        {
            "patient_id": "P001",
            "name": "王小明",
            "birth_year_roc": "70",
            "gender": "M",
            "has_disability_certificate": True,
            "admission_date": "2025-12-20",
            "diagnosis": {
                "psychiatric": ["Schizophrenia", "others"],
                "psychiatric_other": "Catatonia",
                "medical": ["Diabetes mellitus"],
            },
            "mse": {
                "appearance": {},
                "cognition": {"orientation": {"time": True}},
                "insight": "partial",
            },
            "clinical_focus": "睡眠",
        }
    ],
    "records": [
        {
            "patient_id": "P001",
            "record_type": "PROGRESS_NOTE",
            "content": "first",
            "created_at": "2026-01-02T08:00:00Z",
        },
        {
            "patient_id": "P001",
            "record_type": "Family Meeting",
            "content": "custom",
            "created_at": "2026-01-03T08:00:00",
        },
    ],
}


@pytest.fixture
def store_file(tmp_path):
    path = tmp_path / "records.json"
    path.write_text(json.dumps(STORE_DOCUMENT, ensure_ascii=False), encoding="utf-8")
    return path


class TestJsonFileClinicalRecordStore:
    """Test suite for the JSON-backed store."""

    def test_loads_patient(self, store_file):
        store = JsonFileClinicalRecordStore(str(store_file))
        patient = store.get_patient("P001")
        assert patient.birth_year_roc == 70
        assert patient.gender == Gender.MALE
        assert patient.admission_date == date(2025, 12, 20)
        assert patient.diagnosis.psychiatric.selected == ("Schizophrenia", OTHERS)
        assert patient.diagnosis.psychiatric.other_text == "Catatonia"
        assert patient.pe is None

    def test_mse_presence_preserved(self, store_file):
        """Test that an empty section stays present and a missing one stays absent."""
        mse = JsonFileClinicalRecordStore(str(store_file)).get_patient("P001").mse
        assert mse.appearance is not None
        assert mse.appearance.cleanliness is None
        assert mse.speech is None
        assert mse.cognition.orientation.time
        assert mse.insight.selected == ("partial",)

    def test_records(self, store_file):
        records = JsonFileClinicalRecordStore(str(store_file)).list_medical_records("P001")
        assert len(records) == 2
        assert records[0].record_type == RecordType.PROGRESS_NOTE
        assert records[0].created_at.tzinfo is not None
        assert records[1].record_type == "Family Meeting"

    def test_unknown_patient(self, store_file):
        store = JsonFileClinicalRecordStore(str(store_file))
        with pytest.raises(PatientNotFoundError) as exc:
            store.get_patient("P999")
        assert exc.value.patient_id == "P999"
        assert store.list_medical_records("P999") == []

    def test_missing_file(self, tmp_path):
        with pytest.raises(RecordStoreLoadError, match="File not found"):
            JsonFileClinicalRecordStore(str(tmp_path / "missing.json"))

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(RecordStoreLoadError, match="Invalid JSON"):
            JsonFileClinicalRecordStore(str(path))

    def test_invalid_record_timestamp(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(
            json.dumps({"records": [{"record_type": "PROGRESS_NOTE", "created_at": "yesterday"}]}),
            encoding="utf-8",
        )
        with pytest.raises(RecordStoreLoadError, match="Invalid record #0"):
            JsonFileClinicalRecordStore(str(path))

    def test_satisfies_protocol(self, store_file):
        assert isinstance(JsonFileClinicalRecordStore(str(store_file)), ClinicalRecordStore)


class TestInMemoryClinicalRecordStore:
    """Test suite for the in-memory store."""

    def test_records_copied(self, patient, history):
        records = [replace(record, patient_id="P001") for record in history]
        store = InMemoryClinicalRecordStore([patient], records)
        listed = store.list_medical_records("P001")
        listed.clear()
        assert len(store.list_medical_records("P001")) == 3
        assert store.total_records == 3


FORM_UI_DOCUMENT = {
    "patients": [
        {
            "id": "P002",
            "name": "陳美玲",
            "birthYearROC": 70,
            "gender": "female",
            "hasDisabilityCertificate": "false",
            "hasCatastrophicIllnessCard": True,
            "admissionDate": "2025-12-01",
            "clinicalFocus": "幻聽",
            "diagnosis": {
                "psychiatric": ["others"],
                "psychiatricOther": "Catatonia",
                "medical": ["others"],
                "medicalOther": "Gout",
            },
            "mse": {
                "appearance": {"cleanliness": "others", "cleanlinessOther": "disheveled", "psychomotor": "others", "other": "retardation"},
                "perception": {"hallucinations": ["others"], "other": "olfactory"},
                "cognition": {"orientation": {"time": "false", "place": "true"}},
            },
            "pe": {"conscious": "others", "consciousOther": "drowsy", "ne": ["tremor"]},
        }
    ],
    "records": [
        {
            "id": "R1",
            "patientId": "P002",
            "type": "PROGRESS_NOTE",
            "content": "saved from the form",
            "createdAt": "2026-01-05T09:30:00.000Z",
        }
    ],
}


class TestFormUiDocument:
    """Test suite for documents written with the form UI's camelCase keys."""

    @pytest.fixture
    def store(self, tmp_path):
        path = tmp_path / "form.json"
        path.write_text(json.dumps(FORM_UI_DOCUMENT, ensure_ascii=False), encoding="utf-8")
        return JsonFileClinicalRecordStore(str(path))

    def test_patient_fields(self, store):
        patient = store.get_patient("P002")
        assert patient.birth_year_roc == 70
        assert patient.has_disability_certificate is False
        assert patient.has_catastrophic_illness_card is True
        assert patient.admission_date == date(2025, 12, 1)
        assert patient.clinical_focus == "幻聽"

    def test_diagnosis_other_text(self, store):
        diagnosis = store.get_patient("P002").diagnosis
        assert format_diagnoses(diagnosis.psychiatric) == "Catatonia"
        assert format_diagnoses(diagnosis.medical) == "Gout"

    def test_section_other_keys(self, store):
        """Test that camelCase and the shared "other" key both reach the right field."""
        mse = store.get_patient("P002").mse
        assert format_choice(mse.appearance.cleanliness) == "disheveled"
        assert format_choice(mse.appearance.psychomotor) == "retardation"
        assert mse.appearance.cooperation is None
        assert format_choice(mse.perception.hallucinations) == "olfactory"
        assert not mse.cognition.orientation.time
        assert mse.cognition.orientation.place

    def test_pe_short_keys(self, store):
        pe = store.get_patient("P002").pe
        assert format_choice(pe.consciousness) == "drowsy"
        assert format_choice(pe.neurological) == "tremor"

    def test_record_loads(self, store):
        records = store.list_medical_records("P002")
        assert len(records) == 1
        assert records[0].record_type == RecordType.PROGRESS_NOTE
        assert records[0].record_id == "R1"
        assert records[0].created_at.tzinfo is not None
