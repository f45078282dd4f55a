"""
Graduate export service.

Turns an ``ExportSpec`` (filters, sort, field selection) into an
``ExportTable``: positional rows of formatted values, a heading row and
column-width hints keyed by spreadsheet column letter. Rendering to xlsx is
done by ExcelBuilder; csv and json rendering live here.
"""

from __future__ import annotations

import csv
import io
import json
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path
from typing import Any, Literal

from django.core.serializers.json import DjangoJSONEncoder
from django.db.models import Q, QuerySet
from loguru import logger
from openpyxl.utils import get_column_letter
from pydantic import BaseModel, Field, field_validator, model_validator

from apps.core.models import AcademicStanding, EmploymentStatus, Graduate

from .export_config import DEFAULT_EXPORT_FIELDS, EXPORT_FIELDS, ExportFieldName

SortField = Literal[
    "created_at",
    "updated_at",
    "name",
    "email",
    "graduation_year",
    "gpa",
    "profile_completion_percentage",
]


def _as_list(value: Any) -> Any:
    """Accept a single value or a comma-separated string where a list is expected."""
    if value is None or isinstance(value, (list, tuple, set)):
        return value
    if isinstance(value, str):
        items = [item.strip() for item in value.split(",")]
        return [item for item in items if item]
    return [value]


class ExportSpec(BaseModel):
    """Filters, sort and column selection for one graduate export."""

    course_id: list[int] | None = Field(None, description="One or more course ids")
    graduation_year: list[int] | None = None
    graduation_year_range: tuple[int, int] | None = Field(
        None, description="Inclusive (start, end); also accepts '2018-2020'"
    )
    employment_status: list[str] | None = None
    academic_standing: list[str] | None = None
    job_search_active: bool | None = None
    allow_employer_contact: bool | None = None
    skills: list[str] | None = Field(None, description="Every skill must be present")
    gpa_min: Decimal | None = Field(None, ge=0, le=4)
    gpa_max: Decimal | None = Field(None, ge=0, le=4)
    created_from: date | None = None
    created_to: date | None = None
    profile_completion_min: int | None = Field(None, ge=0, le=100)
    search: str | None = Field(None, max_length=255)

    sort_by: SortField = "created_at"
    sort_order: Literal["asc", "desc"] = "desc"

    fields: list[ExportFieldName] | None = Field(None, min_length=1)
    include_headers: bool = True

    @field_validator(
        "course_id",
        "graduation_year",
        "employment_status",
        "academic_standing",
        "skills",
        "fields",
        mode="before",
    )
    @classmethod
    def coerce_list(cls, v: Any) -> Any:
        return _as_list(v)

    @field_validator("graduation_year_range", mode="before")
    @classmethod
    def parse_year_range(cls, v: Any) -> Any:
        """'2018-2020' -> (2018, 2020)."""
        if isinstance(v, str):
            start, sep, end = v.partition("-")
            if not sep:
                raise ValueError("graduation_year_range must look like 'YYYY-YYYY'")
            return (start.strip(), end.strip())
        return v

    @field_validator("employment_status")
    @classmethod
    def validate_employment_status(cls, v: list[str] | None) -> list[str] | None:
        if v is not None:
            unknown = set(v) - set(EmploymentStatus.values)
            if unknown:
                raise ValueError(f"Unknown employment status: {', '.join(sorted(unknown))}")
        return v

    @field_validator("academic_standing")
    @classmethod
    def validate_academic_standing(cls, v: list[str] | None) -> list[str] | None:
        if v is not None:
            unknown = set(v) - set(AcademicStanding.values)
            if unknown:
                raise ValueError(f"Unknown academic standing: {', '.join(sorted(unknown))}")
        return v

    @field_validator("search")
    @classmethod
    def clean_search(cls, v: str | None) -> str | None:
        return v.strip() or None if v else None

    @model_validator(mode="after")
    def validate_ranges(self) -> "ExportSpec":
        if self.graduation_year_range and (
            self.graduation_year_range[0] > self.graduation_year_range[1]
        ):
            raise ValueError("graduation_year_range start must not exceed its end")
        if (
            self.gpa_min is not None
            and self.gpa_max is not None
            and self.gpa_min > self.gpa_max
        ):
            raise ValueError("gpa_min must not exceed gpa_max")
        if self.created_from and self.created_to and self.created_from > self.created_to:
            raise ValueError("created_from must not be after created_to")
        return self

    @property
    def selected_fields(self) -> list[ExportFieldName]:
        return list(self.fields) if self.fields else list(DEFAULT_EXPORT_FIELDS)


@dataclass
class ExportTable:
    fields: list[ExportFieldName]
    headings: list[str] | None
    rows: list[tuple] = field(default_factory=list)
    column_widths: dict[str, int] = field(default_factory=dict)

    def all_rows(self) -> list[list[Any]]:
        """Heading row (if any) followed by the data rows."""
        out = [list(self.headings)] if self.headings else []
        out.extend(list(row) for row in self.rows)
        return out

    def records(self) -> list[dict[str, Any]]:
        """Data rows as dicts keyed by field name; headings are not used."""
        keys = [name.value for name in self.fields]
        return [dict(zip(keys, row)) for row in self.rows]


class GraduateExportService:
    """Projects stored graduates into an ExportTable."""

    def __init__(self, spec: ExportSpec | None = None):
        self.spec = spec or ExportSpec()

    def get_queryset(self) -> QuerySet[Graduate]:
        """Filtered and sorted queryset (everything except the skills filter)."""
        spec = self.spec
        qs = Graduate.objects.select_related("course")

        if spec.course_id:
            qs = qs.filter(course_id__in=spec.course_id)
        if spec.graduation_year:
            qs = qs.filter(graduation_year__in=spec.graduation_year)
        if spec.graduation_year_range:
            qs = qs.filter(graduation_year__range=spec.graduation_year_range)
        if spec.employment_status:
            qs = qs.filter(employment_status__status__in=spec.employment_status)
        if spec.academic_standing:
            qs = qs.filter(academic_standing__in=spec.academic_standing)
        if spec.job_search_active is not None:
            qs = qs.filter(job_search_active=spec.job_search_active)
        if spec.allow_employer_contact is not None:
            qs = qs.filter(allow_employer_contact=spec.allow_employer_contact)
        if spec.gpa_min is not None:
            qs = qs.filter(gpa__gte=spec.gpa_min)
        if spec.gpa_max is not None:
            qs = qs.filter(gpa__lte=spec.gpa_max)
        if spec.created_from:
            qs = qs.filter(created_at__date__gte=spec.created_from)
        if spec.created_to:
            qs = qs.filter(created_at__date__lte=spec.created_to)
        if spec.profile_completion_min is not None:
            qs = qs.filter(profile_completion_percentage__gte=spec.profile_completion_min)
        if spec.search:
            qs = qs.filter(
                Q(name__icontains=spec.search)
                | Q(email__icontains=spec.search)
                | Q(student_id__icontains=spec.search)
            )

        prefix = "-" if spec.sort_order == "desc" else ""
        return qs.order_by(f"{prefix}{spec.sort_by}", f"{prefix}id")

    def get_graduates(self) -> list[Graduate]:
        """
        Graduates matching the spec, in export order.

        JSON containment lookups are not available on every backend, so the
        skills filter (all listed skills present, case-insensitive) is applied
        here rather than in SQL.
        """
        graduates = list(self.get_queryset())
        if self.spec.skills:
            wanted = {skill.lower() for skill in self.spec.skills}
            graduates = [
                g
                for g in graduates
                if wanted <= {str(skill).lower() for skill in g.skills or []}
            ]
        return graduates

    def build_table(self) -> ExportTable:
        selected = self.spec.selected_fields
        export_fields = [EXPORT_FIELDS[name] for name in selected]

        rows = [
            tuple(f.extract(graduate) for f in export_fields)
            for graduate in self.get_graduates()
        ]
        headings = (
            [f.label for f in export_fields] if self.spec.include_headers else None
        )
        widths = {
            get_column_letter(idx): f.width
            for idx, f in enumerate(export_fields, start=1)
        }

        logger.info(f"Exporting {len(rows)} graduates ({len(selected)} columns)")
        return ExportTable(
            fields=selected, headings=headings, rows=rows, column_widths=widths
        )

    def to_csv(self, table: ExportTable | None = None) -> str:
        table = table or self.build_table()
        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerows(table.all_rows())
        return buffer.getvalue()

    def to_json(self, table: ExportTable | None = None) -> str:
        """JSON array with one object per graduate, keyed by field name."""
        table = table or self.build_table()
        return json.dumps(table.records(), cls=DjangoJSONEncoder, indent=2)

    def write_csv(self, target_path: str | Path) -> Path:
        target_path = Path(target_path)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        with target_path.open("w", newline="", encoding="utf-8") as fh:
            fh.write(self.to_csv())
        return target_path
