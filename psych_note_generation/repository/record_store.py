"""
Clinical Record Store

This module provides read-only access to patient snapshots and their prior
medical records. The engine only ever reads; saving generated notes is the
surrounding application's job.

Implementations:
    InMemoryClinicalRecordStore → Built from model objects (tests, embedding)
    JsonFileClinicalRecordStore → Loads one JSON document from disk

Document Format:
    {
        "patients": [{"patient_id": "P001", "name": "...", "mse": {...}, ...}],
        "records":  [{"patient_id": "P001", "record_type": "PROGRESS_NOTE",
                      "content": "...", "created_at": "2026-01-05T09:30:00"}]
    }

Author: Shubham Singh
Date: January 2026
"""

import json
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Protocol, runtime_checkable

from loguru import logger

from psych_note_generation.core.exceptions import PatientNotFoundError, RecordStoreLoadError
from psych_note_generation.core.models import MedicalRecord, Patient


# =============================================================================
# STAGE 1: RECORD STORE PROTOCOL
# =============================================================================


@runtime_checkable
class ClinicalRecordStore(Protocol):
    """
    Protocol for clinical record sources.

    Required Methods:
        get_patient(patient_id)          → Patient snapshot
        list_medical_records(patient_id) → All prior records, any order
    """

    def get_patient(self, patient_id: str) -> Patient:
        """
        Raises:
            PatientNotFoundError: If the patient does not exist
        """
        ...

    def list_medical_records(self, patient_id: str) -> List[MedicalRecord]:
        ...


# =============================================================================
# STAGE 2: IN-MEMORY IMPLEMENTATION
# =============================================================================


class InMemoryClinicalRecordStore:
    """
    Record store held entirely in memory.

    Example:
        >>> store = InMemoryClinicalRecordStore([patient], [record])
        >>> store.get_patient("P001").patient_id
        'P001'
    """

    def __init__(
        self,
        patients: Iterable[Patient] = (),
        records: Iterable[MedicalRecord] = (),
    ):
        # Primary index: patient_id → Patient
        self._patients: Dict[str, Patient] = {}
        # Secondary index: patient_id → records
        self._records_by_patient: Dict[str, List[MedicalRecord]] = {}

        for patient in patients:
            self._patients[patient.patient_id] = patient
        for record in records:
            self.add_record(record)

    def add_record(self, record: MedicalRecord) -> None:
        """Index one record under its patient_id."""
        key = record.patient_id or ""
        self._records_by_patient.setdefault(key, []).append(record)

    def get_patient(self, patient_id: str) -> Patient:
        patient = self._patients.get(patient_id)
        if patient is None:
            raise PatientNotFoundError(patient_id)
        return patient

    def list_medical_records(self, patient_id: str) -> List[MedicalRecord]:
        """Return a copy so callers cannot mutate the index."""
        return list(self._records_by_patient.get(patient_id, []))

    @property
    def patient_ids(self) -> List[str]:
        return list(self._patients)

    @property
    def total_records(self) -> int:
        return sum(len(records) for records in self._records_by_patient.values())


# =============================================================================
# STAGE 3: JSON FILE IMPLEMENTATION
# =============================================================================


class JsonFileClinicalRecordStore(InMemoryClinicalRecordStore):
    """
    Record store backed by a local JSON document.

    How it works:
        STAGE 3.1: Validate file path
        STAGE 3.2: Parse JSON
        STAGE 3.3: Build Patient / MedicalRecord objects and index them

    Raises:
        RecordStoreLoadError: If the file is missing, unreadable or malformed
    """

    def __init__(self, store_path: str):
        # =====================================================================
        # STAGE 3.1: VALIDATE FILE PATH
        # =====================================================================
        self._store_path = Path(store_path)
        if not self._store_path.exists():
            raise RecordStoreLoadError(str(self._store_path), "File not found")

        # =====================================================================
        # STAGE 3.2-3.3: LOAD AND INDEX
        # =====================================================================
        document = self._load_document()
        patients, records = self._parse_document(document)
        super().__init__(patients, records)

        logger.info(
            f"JsonFileClinicalRecordStore initialized | "
            f"Patients: {len(self.patient_ids):,} | Records: {self.total_records:,}"
        )

    def _load_document(self) -> dict:
        logger.debug(f"Loading record store from: {self._store_path}")
        try:
            with open(self._store_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except json.JSONDecodeError as e:
            raise RecordStoreLoadError(str(self._store_path), f"Invalid JSON: {e}")
        except PermissionError:
            raise RecordStoreLoadError(str(self._store_path), "Permission denied")
        except OSError as e:
            raise RecordStoreLoadError(str(self._store_path), str(e))

        if not isinstance(document, dict):
            raise RecordStoreLoadError(str(self._store_path), "Top-level value must be an object")
        return document

    def _parse_document(self, document: dict):
        patients: List[Patient] = []
        records: List[MedicalRecord] = []

        for index, raw in enumerate(document.get("patients") or []):
            try:
                patients.append(Patient.from_dict(raw))
            except (AttributeError, TypeError, ValueError) as e:
                raise RecordStoreLoadError(str(self._store_path), f"Invalid patient #{index}: {e}")

        for index, raw in enumerate(document.get("records") or []):
            try:
                records.append(MedicalRecord.from_dict(raw))
            except (AttributeError, TypeError, ValueError) as e:
                raise RecordStoreLoadError(str(self._store_path), f"Invalid record #{index}: {e}")

        return patients, records

    @property
    def store_path(self) -> Optional[Path]:
        return self._store_path
