"""
Graduate import processor.

Runs one ImportRun: every row goes through validation, transformation,
duplicate detection and persistence, strictly in input order. Row-level
problems are recorded in the run's report and never abort the run.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from django.core.files import File as DjangoFile
from django.db import transaction
from django.utils import timezone
from loguru import logger

from apps.ingest.models import ImportRun

from .reconciler import find_duplicate
from .reporter import ImportRunReport, row_number
from .row_validator import validate_row
from .standardizer import (
    ROW_NUMBER_COLUMN,
    SUPPORTED_SUFFIXES,
    ImportFileError,
    read_graduate_rows,
)
from .transformer import ImportPolicy, transform_row
from .writer import create_graduate


class GraduateImportProcessor:
    """
    Processes the rows of one import run and stores the summary on it.

    The run executes inside a single transaction; each create runs in a
    nested savepoint (see writer.create_graduate). If anything outside the
    per-row handling fails, including the final summary write, the whole
    run is rolled back, the ImportRun is marked FAILED and the exception
    is re-raised.
    """

    def __init__(self, run: ImportRun, policy: ImportPolicy | None = None):
        self.run = run
        self.policy = policy or ImportPolicy.from_settings()
        self.report = ImportRunReport()

    def process(self, rows: list[dict[str, Any]] | None = None) -> ImportRunReport:
        """
        Main processing entry point.

        Args:
            rows: Standardized row dicts; read from ``run.source_file`` when omitted.
                A ``row_number`` key gives the physical spreadsheet row, otherwise
                rows are numbered by position after the header row.

        Returns:
            The accumulated ImportRunReport (already persisted to the run)
        """
        try:
            self.run.started_at = timezone.now()
            if rows is None:
                rows = read_graduate_rows(self.run.source_file.path)
            self.run.total_rows = len(rows)
            self.run.save(update_fields=["started_at", "total_rows"])

            logger.info(f"Import #{self.run.pk}: processing {len(rows)} rows")

            with transaction.atomic():
                for index, row in enumerate(rows):
                    row = dict(row)
                    number = row.pop(ROW_NUMBER_COLUMN, None) or row_number(index)
                    self._process_row(int(number), row)
                self.report.persist(self.run)

            logger.info(f"Import #{self.run.pk} complete: {self.report.summary()}")

        except Exception as e:
            logger.error(f"Import #{self.run.pk} failed: {e}")
            self.run.status = ImportRun.Status.FAILED
            self.run.error_message = str(e)
            self.run.completed_at = timezone.now()
            self.run.save(update_fields=["status", "error_message", "completed_at"])
            raise

        return self.report

    def _process_row(self, number: int, row: dict[str, Any]) -> None:
        validation = validate_row(row, number)
        if not validation.is_valid:
            logger.debug(
                f"Row {validation.row_number} invalid: "
                f"{', '.join(sorted(validation.errors))}"
            )
            self.report.record_invalid(number, validation.data, validation.errors)
            return

        payload = transform_row(validation.validated, self.policy)

        match = find_duplicate(payload, self.policy)
        if match is not None:
            logger.debug(
                f"Row {validation.row_number} conflicts with graduate "
                f"#{match.graduate.pk} ({match.conflict_type})"
            )
            self.report.record_conflict(number, validation.data, match)
            return

        try:
            graduate = create_graduate(payload)
        except Exception as e:
            logger.exception(
                f"Failed to create graduate {payload['email']} "
                f"(row {validation.row_number})"
            )
            self.report.record_persistence_failure(number, validation.data, str(e))
            return

        logger.debug(f"Row {validation.row_number} created graduate #{graduate.pk}")
        self.report.record_valid(number, validation.data, graduate.pk)


def create_import_run(file_path: str | Path) -> ImportRun:
    """Store a copy of the spreadsheet and create a PENDING ImportRun for it."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise ImportFileError(f"File not found: {file_path}")
    if file_path.suffix.lower() not in SUPPORTED_SUFFIXES:
        raise ImportFileError(f"Unsupported file type '{file_path.suffix}'")

    with file_path.open("rb") as f:
        run = ImportRun.objects.create(
            source_file=DjangoFile(f, name=file_path.name),
        )
    logger.info(f"Created import #{run.pk} for {file_path.name}")
    return run


def execute_import_run(
    run: ImportRun, policy: ImportPolicy | None = None
) -> ImportRunReport:
    """Process a stored run from its source file."""
    return GraduateImportProcessor(run, policy).process()


def import_graduates_from_file(
    file_path: str | Path, policy: ImportPolicy | None = None
) -> ImportRun:
    """Create a run for ``file_path`` and process it synchronously."""
    run = create_import_run(file_path)
    execute_import_run(run, policy)
    return run
