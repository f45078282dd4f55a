"""
In-memory accumulation of import outcomes.

Every processed row lands in exactly one of valid_rows / invalid_rows /
conflicts. The report is written to its ImportRun once, at the end of the
run, by ``persist``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from django.utils import timezone

from apps.ingest.models import ImportRun

from .reconciler import DuplicateMatch


def row_number(index: int) -> int:
    """Physical spreadsheet row for a 0-based data row index, header on row 1."""
    return index + 2


@dataclass
class ImportRunReport:
    processed_rows: int = 0
    created_count: int = 0
    updated_count: int = 0
    skipped_count: int = 0
    valid_rows: list[dict[str, Any]] = field(default_factory=list)
    invalid_rows: list[dict[str, Any]] = field(default_factory=list)
    conflicts: list[dict[str, Any]] = field(default_factory=list)

    def record_valid(self, row: int, data: dict, graduate_id: int) -> None:
        self.processed_rows += 1
        self.created_count += 1
        self.valid_rows.append(
            {
                "row": row,
                "data": data,
                "graduate_id": graduate_id,
                "action": "created",
            }
        )

    def record_invalid(self, row: int, data: dict, errors: dict) -> None:
        """Row failed validation; ``errors`` is {field: [{message, code}]}."""
        self.processed_rows += 1
        self.skipped_count += 1
        self.invalid_rows.append(
            {"row": row, "data": data, "errors": errors}
        )

    def record_persistence_failure(self, row: int, data: dict, error: str) -> None:
        """Row was valid but could not be stored."""
        self.processed_rows += 1
        self.skipped_count += 1
        self.invalid_rows.append({"row": row, "data": data, "error": error})

    def record_conflict(self, row: int, data: dict, match: DuplicateMatch) -> None:
        self.processed_rows += 1
        self.skipped_count += 1
        self.conflicts.append(
            {
                "row": row,
                "data": data,
                "existing": match.existing_summary(),
                "conflict_type": match.conflict_type,
                "similarity_score": match.similarity_score,
            }
        )

    def summary(self) -> str:
        return (
            f"{self.processed_rows} processed: "
            f"{self.created_count} created, "
            f"{len(self.invalid_rows)} invalid, "
            f"{len(self.conflicts)} conflicts"
        )

    def persist(self, run: ImportRun) -> ImportRun:
        """Write the whole snapshot to ``run`` in one save, status COMPLETED."""
        run.processed_rows = self.processed_rows
        run.created_count = self.created_count
        run.updated_count = self.updated_count
        run.skipped_count = self.skipped_count
        run.valid_rows = self.valid_rows
        run.invalid_rows = self.invalid_rows
        run.conflicts = self.conflicts
        run.status = ImportRun.Status.COMPLETED
        run.completed_at = timezone.now()
        run.error_message = None
        run.save(
            update_fields=[
                "processed_rows",
                "created_count",
                "updated_count",
                "skipped_count",
                "valid_rows",
                "invalid_rows",
                "conflicts",
                "status",
                "completed_at",
                "error_message",
            ]
        )
        return run
