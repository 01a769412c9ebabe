"""
Repository Layer - Clinical Record Access

This layer provides read-only access to patient snapshots and prior
medical records, whether from a JSON document or objects in memory.

Submodules:
    record_store.py → Store protocol + implementations

Dependency Rule:
    This layer depends on: core (models, exceptions)
    This layer is used by: pipeline

Author: Shubham Singh
Date: January 2026
"""

from psych_note_generation.repository.record_store import (
    ClinicalRecordStore,
    InMemoryClinicalRecordStore,
    JsonFileClinicalRecordStore,
)

__all__ = [
    "ClinicalRecordStore",
    "InMemoryClinicalRecordStore",
    "JsonFileClinicalRecordStore",
]
