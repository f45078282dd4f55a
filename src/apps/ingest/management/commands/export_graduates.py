"""
Management command to export graduates to xlsx, csv or json.

Usage:
    python manage.py export_graduates --output graduates.xlsx
    python manage.py export_graduates --format csv --employment-status employed
    python manage.py export_graduates --format json --job-search-active yes
    python manage.py export_graduates --graduation-year-range 2018-2020 --fields name,email
"""

import argparse
from datetime import datetime
from pathlib import Path

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from pydantic import ValidationError

from apps.ingest.services import (
    ExcelBuilder,
    ExportSpec,
    GraduateExportService,
    safe_bool,
)

FILTER_OPTIONS = [
    "course_id",
    "graduation_year",
    "graduation_year_range",
    "employment_status",
    "academic_standing",
    "skills",
    "gpa_min",
    "gpa_max",
    "created_from",
    "created_to",
    "profile_completion_min",
    "search",
    "sort_by",
    "sort_order",
    "fields",
]


def _flag(value: str) -> bool:
    parsed = safe_bool(value)
    if parsed is None:
        raise argparse.ArgumentTypeError(
            f"expected true/false, yes/no, 1/0, y/n or on/off, got '{value}'"
        )
    return parsed


class Command(BaseCommand):
    help = "Export graduates to an xlsx, csv or json file"

    def add_arguments(self, parser):
        parser.add_argument(
            "--output",
            type=str,
            help="Output file (default: EXPORT_DIR/graduates_export_<timestamp>.<format>)",
        )
        parser.add_argument(
            "--format",
            choices=["xlsx", "csv", "json"],
            default="xlsx",
            help="Output format (default: xlsx)",
        )
        parser.add_argument("--course-id", help="Course id(s), comma-separated")
        parser.add_argument("--graduation-year", help="Year(s), comma-separated")
        parser.add_argument("--graduation-year-range", help="Inclusive range, e.g. 2018-2020")
        parser.add_argument("--employment-status", help="Status(es), comma-separated")
        parser.add_argument("--academic-standing", help="Standing(s), comma-separated")
        parser.add_argument("--skills", help="Required skills, comma-separated")
        parser.add_argument("--gpa-min")
        parser.add_argument("--gpa-max")
        parser.add_argument("--created-from", help="YYYY-MM-DD")
        parser.add_argument("--created-to", help="YYYY-MM-DD")
        parser.add_argument("--profile-completion-min")
        parser.add_argument("--search", help="Match name, email or student id")
        parser.add_argument("--job-search-active", type=_flag)
        parser.add_argument("--allow-employer-contact", type=_flag)
        parser.add_argument("--sort-by")
        parser.add_argument("--sort-order", choices=["asc", "desc"])
        parser.add_argument("--fields", help="Columns to export, comma-separated")
        parser.add_argument(
            "--no-headers",
            action="store_true",
            help="Omit the heading row",
        )

    def handle(self, *args, **options):
        spec_data = {
            key: options[key] for key in FILTER_OPTIONS if options.get(key) is not None
        }
        for key in ("job_search_active", "allow_employer_contact"):
            if options.get(key) is not None:
                spec_data[key] = options[key]
        spec_data["include_headers"] = not options["no_headers"]

        try:
            spec = ExportSpec.model_validate(spec_data)
        except ValidationError as e:
            raise CommandError(f"Invalid export options:\n{e}") from e

        fmt = options["format"]
        output = Path(
            options["output"]
            or Path(settings.EXPORT_DIR)
            / f"graduates_export_{datetime.now():%Y-%m-%d_%H-%M-%S}.{fmt}"
        )

        service = GraduateExportService(spec)
        table = service.build_table()
        if fmt == "csv":
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(service.to_csv(table), encoding="utf-8", newline="")
        elif fmt == "json":
            output.parent.mkdir(parents=True, exist_ok=True)
            output.write_text(service.to_json(table), encoding="utf-8")
        else:
            ExcelBuilder().save(table, output)

        self.stdout.write(
            self.style.SUCCESS(f"Exported {len(table.rows)} graduates to {output}")
        )
