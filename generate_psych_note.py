"""
Generate One Psychiatric Note from a Record Store

Looks a patient up in a JSON record store, composes the request for the
chosen record type and prints the generated note (or the failure message).

Usage:
    python generate_psych_note.py --store records.json --patient-id P001 \\
        --record-type PROGRESS_NOTE

    python generate_psych_note.py --store records.json --patient-id P001 \\
        --record-type DISCHARGE_NOTE --extra-info "返家，由家屬照顧" --dry-run

Exit Codes:
    0 → note generated (or dry run printed)
    1 → failure outcome, unknown patient or unusable store

Author: Shubham Singh
Date: January 2026
"""

import argparse
import json
import sys

from loguru import logger

from psych_note_generation.core.constants import LOG_FORMAT
from psych_note_generation.core.enums import RecordType
from psych_note_generation.core.exceptions import NoteGenerationError
from psych_note_generation.pipeline import NoteGenerationPipeline


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a psychiatric note for one patient.")
    parser.add_argument("--store", required=True, help="Path to the JSON record store")
    parser.add_argument("--patient-id", required=True, help="Patient identifier in the store")
    parser.add_argument(
        "--record-type",
        required=True,
        help=f"Record type, one of: {', '.join(RecordType.get_all_types())}",
    )
    parser.add_argument("--extra-info", default=None, help="Supplementary free text")
    parser.add_argument("--env-file", default=None, help="Path to a .env file")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the composed request without contacting the backend",
    )
    parser.add_argument("--log-level", default="INFO", help="loguru log level")
    return parser


def main(argv=None) -> int:
    """Run one generation and return the process exit code."""
    args = build_parser().parse_args(argv)

    # Configure logger for clean output
    logger.remove()
    logger.add(sys.stderr, level=args.log_level.upper(), format=LOG_FORMAT)

    # =========================================================================
    # STAGE 1: INITIALIZE PIPELINE
    # =========================================================================
    try:
        pipeline = NoteGenerationPipeline.from_environment(
            store_path=args.store, env_file=args.env_file
        )
    except NoteGenerationError as e:
        print(f"[FAIL] Failed to initialize pipeline: {e}", file=sys.stderr)
        return 1

    # =========================================================================
    # STAGE 2: DRY RUN
    # =========================================================================
    if args.dry_run:
        try:
            request = pipeline.preview_request(args.patient_id, args.record_type, args.extra_info)
        except NoteGenerationError as e:
            print(f"[FAIL] {e}", file=sys.stderr)
            return 1
        print(json.dumps(request.to_dict(), indent=2, ensure_ascii=False))
        return 0

    # =========================================================================
    # STAGE 3: GENERATE
    # =========================================================================
    try:
        outcome = pipeline.generate_note(args.patient_id, args.record_type, args.extra_info)
    except NoteGenerationError as e:
        print(f"[FAIL] {e}", file=sys.stderr)
        return 1

    print(outcome.display_text)
    return 0 if outcome.is_success else 1


if __name__ == "__main__":
    sys.exit(main())
