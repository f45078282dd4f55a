"""
Per-row validation for graduate imports.

Each spreadsheet row is bound to ``GraduateRowForm``; a row either yields a
cleaned payload (with ``course_name`` resolved to ``course_id``) or the full
set of field-level errors. Validation has no side effects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from django import forms
from django.core.exceptions import ValidationError
from django.core.validators import RegexValidator
from django.utils import timezone

from apps.core.models import AcademicStanding, Course, EmploymentStatus

from .standardizer import safe_bool, safe_date

MIN_GRADUATION_YEAR = 1900


class BooleanLikeField(forms.Field):
    """Accepts true/false, 1/0, yes/no, y/n, on/off. Blank -> None."""

    default_error_messages = {
        "invalid": "The %(field)s field must be true or false.",
    }

    def to_python(self, value):
        if value in self.empty_values:
            return None
        parsed = safe_bool(value)
        if parsed is None:
            raise ValidationError(
                self.error_messages["invalid"],
                code="invalid",
                params={"field": self.label or "value"},
            )
        return parsed


class LenientDateField(forms.Field):
    """Date parsed with dateutil, so '2021-03-01', '1 March 2021' and '03/01/2021' all work."""

    default_error_messages = {
        "invalid": "Enter a valid date.",
    }

    def to_python(self, value):
        if value in self.empty_values:
            return None
        parsed = safe_date(value)
        if parsed is None:
            raise ValidationError(self.error_messages["invalid"], code="invalid")
        return parsed


class GraduateRowForm(forms.Form):
    """Validation rules for one graduate spreadsheet row."""

    # Required
    name = forms.CharField(max_length=255)
    email = forms.EmailField(max_length=255)
    graduation_year = forms.CharField(
        validators=[
            RegexValidator(
                r"^\d{4}$",
                message="The graduation year must be 4 digits.",
                code="digits",
            )
        ],
    )
    course_name = forms.CharField(max_length=255)
    employment_status = forms.ChoiceField(choices=EmploymentStatus.choices)

    # Optional
    phone = forms.CharField(max_length=255, required=False, empty_value=None)
    address = forms.CharField(max_length=255, required=False, empty_value=None)
    student_id = forms.CharField(max_length=255, required=False, empty_value=None)
    gpa = forms.DecimalField(min_value=0, max_value=4, required=False)
    academic_standing = forms.ChoiceField(
        choices=AcademicStanding.choices, required=False
    )
    current_job_title = forms.CharField(
        max_length=255, required=False, empty_value=None
    )
    current_company = forms.CharField(max_length=255, required=False, empty_value=None)
    current_salary = forms.DecimalField(
        min_value=0, max_digits=12, decimal_places=2, required=False
    )
    employment_start_date = LenientDateField(required=False)
    skills = forms.CharField(required=False, empty_value=None)
    certifications = forms.CharField(required=False, empty_value=None)
    allow_employer_contact = BooleanLikeField(
        required=False, label="allow employer contact"
    )
    job_search_active = BooleanLikeField(required=False, label="job search active")

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.course: Course | None = None

    def clean_graduation_year(self) -> int:
        year = int(self.cleaned_data["graduation_year"])
        max_year = timezone.now().year + 1
        if year < MIN_GRADUATION_YEAR:
            raise ValidationError(
                "The graduation year must be at least %(min)s.",
                code="min_value",
                params={"min": MIN_GRADUATION_YEAR},
            )
        if year > max_year:
            raise ValidationError(
                "The graduation year must not be greater than %(max)s.",
                code="max_value",
                params={"max": max_year},
            )
        return year

    def clean_course_name(self) -> str:
        course_name = self.cleaned_data["course_name"]
        self.course = Course.objects.filter(name=course_name).first()
        if self.course is None:
            raise ValidationError(
                "The selected course name is invalid.",
                code="exists",
            )
        return course_name


@dataclass
class RowValidation:
    """Result of validating one row."""

    row_number: int
    data: dict[str, Any]
    validated: dict[str, Any] | None = None
    errors: dict[str, list[dict[str, str]]] = field(default_factory=dict)

    @property
    def is_valid(self) -> bool:
        return self.validated is not None


def validate_row(row: dict[str, Any], row_number: int) -> RowValidation:
    """
    Validate one raw spreadsheet row.

    Args:
        row: Mapping of normalized column name -> cell string (or None)
        row_number: Physical spreadsheet row, used in the outcome

    Returns:
        RowValidation with either ``validated`` (course_name replaced by
        course_id) or ``errors`` as {field: [{"message", "code"}]}
    """
    data = dict(row)
    form = GraduateRowForm(data=data)

    if not form.is_valid():
        return RowValidation(
            row_number=row_number, data=data, errors=form.errors.get_json_data()
        )

    validated = dict(form.cleaned_data)
    validated.pop("course_name")
    validated["course_id"] = form.course.pk
    return RowValidation(row_number=row_number, data=data, validated=validated)
