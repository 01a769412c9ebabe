"""
Note Generator - Psychiatric Note Generation with an LLM Backend

This module runs one generation request end to end and is the single place
where exceptions become displayable outcomes.

Request Flow:
    STAGE 1: Credential precondition (fails fast with zero backend calls)
    STAGE 2: Compose the request (formatter + selector + composer)
    STAGE 3: Exactly one backend call
    STAGE 4: Post-process (strip bold markup)
    STAGE 5: Classify into Success / Failure

Pipeline Position:
    Record store → Pipeline → [NoteGenerator] → Backend
                               ^^^^^^^^^^^^^
                               You are here

Author: Shubham Singh
Date: January 2026
"""

from datetime import date
from typing import Callable, Iterable, Optional, Union

from loguru import logger

from psych_note_generation.clients import LLMClientProtocol, create_llm_client
from psych_note_generation.core.config import EngineConfiguration
from psych_note_generation.core.enums import RecordType
from psych_note_generation.core.exceptions import CredentialError
from psych_note_generation.core.models import (
    GenerationOutcome,
    GenerationRequest,
    MedicalRecord,
    Patient,
)
from psych_note_generation.generation.request_composer import compose
from psych_note_generation.generation.response_classifier import (
    classify_error,
    classify_result,
    sanitize_note_text,
)
from psych_note_generation.instructions import record_type_title


# =============================================================================
# STAGE 1: NOTE GENERATOR CLASS
# =============================================================================


class NoteGenerator:
    """
    Generates psychiatric notes and classifies the result.

    What it does:
        Takes a patient snapshot, a record type and the patient's history,
        and returns a GenerationOutcome. It never raises.

    Why it exists:
        1. Keeps the "one call, no retries" policy in one place
        2. Converts every failure into a message the UI can show verbatim
        3. Lets tests inject a fake client and count calls

    How it works:
        The backend client is created lazily on the first request that
        passes the credential check, so a misconfigured engine never
        touches the SDK.

    Example:
        >>> generator = NoteGenerator(EngineConfiguration.from_environment())
        >>> outcome = generator.generate(patient, RecordType.PROGRESS_NOTE, history)
        >>> print(outcome.display_text)
    """

    def __init__(
        self,
        config: EngineConfiguration,
        llm_client: Optional[LLMClientProtocol] = None,
        client_factory: Callable[[EngineConfiguration], LLMClientProtocol] = create_llm_client,
    ):
        """
        Initialize the note generator.

        Args:
            config: Engine configuration (credential, temperatures, ceiling)
            llm_client: Backend client (created from config when omitted)
            client_factory: Builds the client when none was injected
        """
        # =====================================================================
        # STAGE 1.1: STORE DEPENDENCIES
        # =====================================================================
        self._config = config
        self._llm_client = llm_client
        self._client_factory = client_factory

        # Track generation statistics
        self._success_count = 0
        self._failure_count = 0

        logger.debug(
            f"NoteGenerator initialized | Provider: {config.llm_provider} | "
            f"Strip bold: {config.strip_bold_markup}"
        )

    # =========================================================================
    # STAGE 2: PUBLIC API
    # =========================================================================

    def compose_request(
        self,
        patient: Patient,
        record_type: Union[RecordType, str],
        history: Optional[Iterable[MedicalRecord]] = None,
        extra_info: Optional[str] = None,
        today: Optional[date] = None,
    ) -> GenerationRequest:
        """Build the request this generator would send, without sending it."""
        return compose(
            patient,
            record_type,
            history,
            extra_info,
            today=today,
            length_ceiling=self._config.length_ceiling,
            base_temperature=self._config.base_temperature,
            diversified_temperature=self._config.diversified_temperature,
        )

    def generate(
        self,
        patient: Patient,
        record_type: Union[RecordType, str],
        history: Optional[Iterable[MedicalRecord]] = None,
        extra_info: Optional[str] = None,
        today: Optional[date] = None,
    ) -> GenerationOutcome:
        """
        Generate one note.

        Args:
            patient: Patient snapshot
            record_type: Requested record type
            history: Prior records of this patient, any order
            extra_info: Supplementary free text
            today: Reference date for age calculation

        Returns:
            Success with the note text, or a classified Failure
        """
        title = record_type_title(record_type)

        # STAGE 1: Credential precondition
        problem = self._config.credential_problem()
        if problem:
            logger.warning(f"Generation skipped | Type: {title} | Reason: {problem}")
            return self._record(
                classify_error(
                    CredentialError(problem, context={"provider": self._config.llm_provider})
                )
            )

        try:
            # STAGE 2: Compose
            request = self.compose_request(patient, record_type, history, extra_info, today)

            # STAGE 3: One backend call
            client = self._get_client()
            raw_text = client.generate(
                request.prompt_text, request.system_instruction, request.temperature
            )
        except Exception as e:
            logger.error(f"Generation failed | Type: {title} | Error: {type(e).__name__}")
            return self._record(classify_error(e))

        # STAGE 4: Post-process
        if self._config.strip_bold_markup and isinstance(raw_text, str):
            raw_text = sanitize_note_text(raw_text)

        # STAGE 5: Classify
        outcome = classify_result(raw_text)
        logger.info(
            f"Generation complete | Type: {title} | "
            f"Outcome: {'SUCCESS' if outcome.is_success else outcome.kind.value} | "
            f"Chars: {len(raw_text or '')}"
        )
        return self._record(outcome)

    # =========================================================================
    # STAGE 3: PRIVATE HELPERS
    # =========================================================================

    def _get_client(self) -> LLMClientProtocol:
        if self._llm_client is None:
            self._llm_client = self._client_factory(self._config)
        return self._llm_client

    def _record(self, outcome: GenerationOutcome) -> GenerationOutcome:
        if outcome.is_success:
            self._success_count += 1
        else:
            self._failure_count += 1
        return outcome

    # =========================================================================
    # STAGE 4: METRICS
    # =========================================================================

    @property
    def success_count(self) -> int:
        """Number of successful generations."""
        return self._success_count

    @property
    def failure_count(self) -> int:
        """Number of failed generations."""
        return self._failure_count
