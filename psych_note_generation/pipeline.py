"""
Psychiatric Note Generation Pipeline - Main Orchestrator

This is the PUBLIC API entry point of the engine. It looks the patient up
in the record store, hands the snapshot and history to the NoteGenerator
and returns the outcome.

Architecture Diagram:
    ┌─────────────────────────────────────────────────────────────────────┐
    │                       NoteGenerationPipeline                        │
    ├─────────────────────────────────────────────────────────────────────┤
    │   ┌───────────┐    ┌───────────┐    ┌────────────┐    ┌─────────┐   │
    │   │  Record   │ →  │ Formatter │ →  │ Composer   │ →  │ Backend │   │
    │   │  Store    │    │ Selector  │    │ Classifier │    │ Client  │   │
    │   └───────────┘    └───────────┘    └────────────┘    └─────────┘   │
    └─────────────────────────────────────────────────────────────────────┘

Usage:
    from psych_note_generation import NoteGenerationPipeline

    pipeline = NoteGenerationPipeline.from_environment(store_path="records.json")
    outcome = pipeline.generate_note("P001", "PROGRESS_NOTE")
    print(outcome.display_text)

Author: Shubham Singh
Date: January 2026
"""

from datetime import date
from typing import Optional, Union

from loguru import logger

from psych_note_generation.core.config import EngineConfiguration
from psych_note_generation.core.enums import RecordType
from psych_note_generation.core.exceptions import ConfigurationError
from psych_note_generation.core.models import GenerationOutcome, GenerationRequest
from psych_note_generation.generation import NoteGenerator
from psych_note_generation.repository import ClinicalRecordStore, JsonFileClinicalRecordStore


def resolve_record_type(value: Union[RecordType, str]) -> Union[RecordType, str]:
    """
    Parse a record type name, keeping unknown names as raw strings.

    Unknown types are still generated, with the default template.
    """
    if isinstance(value, RecordType):
        return value
    try:
        return RecordType.from_string(value)
    except ValueError:
        logger.warning(f"Unknown record type, using default template | Type: {value}")
        return value


# =============================================================================
# STAGE 1: PIPELINE CLASS
# =============================================================================


class NoteGenerationPipeline:
    """
    Main orchestrator for psychiatric note generation.

    What it does:
        Connects the clinical record store to the NoteGenerator so callers
        only pass a patient id and a record type.

    When to use:
        - From the command line script
        - From any application that owns a record store

    Example:
        >>> pipeline = NoteGenerationPipeline(config, store=store)
        >>> outcome = pipeline.generate_note("P001", RecordType.WEEKLY_SUMMARY)
    """

    def __init__(
        self,
        config: EngineConfiguration,
        store: Optional[ClinicalRecordStore] = None,
        generator: Optional[NoteGenerator] = None,
        store_path: Optional[str] = None,
    ):
        """
        Initialize pipeline with configuration and optional component overrides.

        Args:
            config: Engine configuration
            store: Record store override (for testing)
            generator: Generator override (for testing)
            store_path: JSON record store to load when no store is given

        Raises:
            ConfigurationError: If neither store nor store_path is given
            RecordStoreLoadError: If the store file cannot be loaded
        """
        # =====================================================================
        # STAGE 1.1: STORE CONFIGURATION
        # =====================================================================
        self._config = config

        # =====================================================================
        # STAGE 1.2: INITIALIZE RECORD STORE
        # =====================================================================
        if store is not None:
            self._store = store
        elif store_path:
            self._store = JsonFileClinicalRecordStore(store_path)
        else:
            raise ConfigurationError(
                "Record store not configured", context={"setting": "store_path"}
            )

        # =====================================================================
        # STAGE 1.3: INITIALIZE GENERATOR
        # =====================================================================
        self._generator = generator or NoteGenerator(config)

        logger.info(
            f"NoteGenerationPipeline initialized | "
            f"Provider: {config.llm_provider} | Model: {config.active_model}"
        )

    # =========================================================================
    # STAGE 2: MAIN GENERATION API
    # =========================================================================

    def generate_note(
        self,
        patient_id: str,
        record_type: Union[RecordType, str],
        extra_info: Optional[str] = None,
        today: Optional[date] = None,
    ) -> GenerationOutcome:
        """
        Generate one note for a stored patient.

        Args:
            patient_id: Record-store patient identifier
            record_type: RecordType or its name / title
            extra_info: Supplementary free text
            today: Reference date for age calculation

        Returns:
            GenerationOutcome (never raises for backend failures)

        Raises:
            PatientNotFoundError: If the patient does not exist
        """
        resolved = resolve_record_type(record_type)
        patient = self._store.get_patient(patient_id)
        history = self._store.list_medical_records(patient_id)
        return self._generator.generate(patient, resolved, history, extra_info, today)

    def preview_request(
        self,
        patient_id: str,
        record_type: Union[RecordType, str],
        extra_info: Optional[str] = None,
        today: Optional[date] = None,
    ) -> GenerationRequest:
        """Compose the request for a stored patient without calling the backend."""
        resolved = resolve_record_type(record_type)
        patient = self._store.get_patient(patient_id)
        history = self._store.list_medical_records(patient_id)
        return self._generator.compose_request(patient, resolved, history, extra_info, today)

    # =========================================================================
    # STAGE 3: FACTORY METHODS
    # =========================================================================

    @classmethod
    def from_environment(
        cls, store_path: str, env_file: Optional[str] = None
    ) -> "NoteGenerationPipeline":
        """
        Create pipeline from environment configuration.

        A missing API key does not fail here; each request reports it as a
        CONFIG_ERROR outcome instead.

        Raises:
            ConfigurationError: If numeric settings or the provider are invalid
            RecordStoreLoadError: If the store file cannot be loaded
        """
        config = EngineConfiguration.from_environment(env_file=env_file, validate_on_load=True)
        return cls(config, store_path=store_path)

    # =========================================================================
    # STAGE 4: PROPERTIES
    # =========================================================================

    @property
    def config(self) -> EngineConfiguration:
        """Access to engine configuration."""
        return self._config

    @property
    def store(self) -> ClinicalRecordStore:
        """Access to the clinical record store."""
        return self._store

    @property
    def generator(self) -> NoteGenerator:
        return self._generator
