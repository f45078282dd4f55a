"""
Management command to import graduates from a spreadsheet.

Usage:
    python manage.py import_graduates <file_path>
    python manage.py import_graduates <file_path> --detect-similar
    python manage.py import_graduates <file_path> --enqueue
"""

from django.core.management.base import BaseCommand, CommandError

from apps.ingest.models import ImportRun
from apps.ingest.services import ImportFileError, create_import_run
from apps.ingest.tasks import run_graduate_import


class Command(BaseCommand):
    help = "Import graduates from an xlsx or csv file"

    def add_arguments(self, parser):
        parser.add_argument(
            "file_path",
            type=str,
            help="The absolute or relative path to the spreadsheet.",
        )
        parser.add_argument(
            "--detect-similar",
            action="store_true",
            help="Also report graduates with a similar name and year as conflicts",
        )
        parser.add_argument(
            "--enqueue",
            action="store_true",
            help="Hand the run to the task backend instead of processing inline",
        )

    def handle(self, *args, **options):
        try:
            run = create_import_run(options["file_path"])
        except ImportFileError as e:
            raise CommandError(str(e)) from e

        self.stdout.write(self.style.SUCCESS(f"Created ImportRun #{run.pk}"))
        detect_similar = True if options["detect_similar"] else None

        if options["enqueue"]:
            result = run_graduate_import.enqueue(run.pk, detect_similar)
            self.stdout.write(f"Enqueued import #{run.pk} (task {result.id})")
            return

        self.stdout.write("Processing rows...")
        try:
            run_graduate_import.func(run.pk, detect_similar)
        except Exception as e:
            raise CommandError(f"Import failed: {e}") from e

        run.refresh_from_db()
        self.stdout.write(self.style.SUCCESS("Import complete!"))
        self.stdout.write(f"  Rows processed: {run.processed_rows}")
        self.stdout.write(f"  Created: {run.created_count}")
        self.stdout.write(f"  Invalid: {len(run.invalid_rows)}")
        self.stdout.write(f"  Conflicts: {len(run.conflicts)}")

        for outcome in run.invalid_rows:
            self.stderr.write(
                self.style.WARNING(f"  Row {outcome['row']}: {_describe(outcome)}")
            )
        for outcome in run.conflicts:
            existing = outcome["existing"]
            self.stderr.write(
                self.style.WARNING(
                    f"  Row {outcome['row']}: {outcome['conflict_type']} "
                    f"(graduate #{existing['id']} {existing['email']})"
                )
            )

        if run.status != ImportRun.Status.COMPLETED:
            raise CommandError(f"Import #{run.pk} ended as {run.status}")


def _describe(outcome: dict) -> str:
    if "error" in outcome:
        return outcome["error"]
    return "; ".join(
        f"{field}: {error['message']}"
        for field, errors in outcome["errors"].items()
        for error in errors
    )
