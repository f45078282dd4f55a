"""
Export column configuration.

Defines which graduate fields can appear in exports, their headings and
column widths, and how each value is formatted. Every field is one entry in
``EXPORT_FIELDS``, keyed by the closed ``ExportFieldName`` enumeration.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from django.utils import timezone

from apps.core.models import Graduate

NOT_AVAILABLE = "N/A"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"


class ExportFieldName(str, Enum):
    ID = "id"
    NAME = "name"
    EMAIL = "email"
    PHONE = "phone"
    ADDRESS = "address"
    STUDENT_ID = "student_id"
    COURSE = "course"
    GRADUATION_YEAR = "graduation_year"
    GPA = "gpa"
    ACADEMIC_STANDING = "academic_standing"
    EMPLOYMENT_STATUS = "employment_status"
    CURRENT_JOB_TITLE = "current_job_title"
    CURRENT_COMPANY = "current_company"
    CURRENT_SALARY = "current_salary"
    EMPLOYMENT_START_DATE = "employment_start_date"
    SKILLS = "skills"
    CERTIFICATIONS = "certifications"
    ALLOW_EMPLOYER_CONTACT = "allow_employer_contact"
    JOB_SEARCH_ACTIVE = "job_search_active"
    PROFILE_COMPLETION = "profile_completion"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"


@dataclass(frozen=True)
class ExportField:
    """Configuration for a single column in the export."""

    key: ExportFieldName
    label: str  # Heading shown in the export
    width: int  # Column width hint (spreadsheet character units)
    extract: Callable[[Graduate], Any]


# Formatting helpers


def or_na(value: Any) -> Any:
    return NOT_AVAILABLE if value is None or value == "" else value


def or_empty(value: Any) -> Any:
    return "" if value is None else value


def yes_no(value: Any) -> str:
    return "Yes" if value else "No"


def title_case(value: str | None) -> str:
    """'self_employed' -> 'Self Employed'."""
    if not value:
        return NOT_AVAILABLE
    return value.replace("_", " ").title()


def format_timestamp(value) -> str:
    if value is None:
        return ""
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime(TIMESTAMP_FORMAT)


def format_skills(skills: list[str] | None) -> str:
    return ", ".join(skills or [])


def format_certification(cert: dict) -> str:
    """{'name': 'AWS', 'issuer': 'Amazon', 'date_obtained': '2020'} -> 'AWS (Amazon) [2020]'."""
    parts = [cert.get("name") or ""]
    if cert.get("issuer"):
        parts.append(f"({cert['issuer']})")
    if cert.get("date_obtained"):
        parts.append(f"[{cert['date_obtained']}]")
    return " ".join(part for part in parts if part)


def format_certifications(certifications: list[dict] | None) -> str:
    return "; ".join(format_certification(cert) for cert in certifications or [])


def _gpa(graduate: Graduate) -> Any:
    return float(graduate.gpa) if graduate.gpa is not None else NOT_AVAILABLE


def _course(graduate: Graduate) -> str:
    return graduate.course.name if graduate.course_id else NOT_AVAILABLE


FIELD_LIST = [
    ExportField(ExportFieldName.ID, "ID", 10, lambda g: g.pk),
    ExportField(ExportFieldName.NAME, "Name", 25, lambda g: g.name),
    ExportField(ExportFieldName.EMAIL, "Email", 30, lambda g: g.email),
    ExportField(ExportFieldName.PHONE, "Phone", 15, lambda g: or_na(g.phone)),
    ExportField(ExportFieldName.ADDRESS, "Address", 40, lambda g: or_na(g.address)),
    ExportField(
        ExportFieldName.STUDENT_ID, "Student ID", 15, lambda g: or_na(g.student_id)
    ),
    ExportField(ExportFieldName.COURSE, "Course", 30, _course),
    ExportField(
        ExportFieldName.GRADUATION_YEAR,
        "Graduation Year",
        15,
        lambda g: g.graduation_year,
    ),
    ExportField(ExportFieldName.GPA, "GPA", 10, _gpa),
    ExportField(
        ExportFieldName.ACADEMIC_STANDING,
        "Academic Standing",
        20,
        lambda g: title_case(g.academic_standing),
    ),
    ExportField(
        ExportFieldName.EMPLOYMENT_STATUS,
        "Employment Status",
        20,
        lambda g: title_case(g.employment.get("status")),
    ),
    ExportField(
        ExportFieldName.CURRENT_JOB_TITLE,
        "Current Job Title",
        25,
        lambda g: or_na(g.employment.get("job_title")),
    ),
    ExportField(
        ExportFieldName.CURRENT_COMPANY,
        "Current Company",
        25,
        lambda g: or_na(g.employment.get("company")),
    ),
    ExportField(
        ExportFieldName.CURRENT_SALARY,
        "Current Salary",
        15,
        lambda g: or_empty(g.employment.get("salary")),
    ),
    ExportField(
        ExportFieldName.EMPLOYMENT_START_DATE,
        "Employment Start Date",
        20,
        lambda g: or_empty(g.employment.get("start_date")),
    ),
    ExportField(ExportFieldName.SKILLS, "Skills", 40, lambda g: format_skills(g.skills)),
    ExportField(
        ExportFieldName.CERTIFICATIONS,
        "Certifications",
        40,
        lambda g: format_certifications(g.certifications),
    ),
    ExportField(
        ExportFieldName.ALLOW_EMPLOYER_CONTACT,
        "Allow Employer Contact",
        22,
        lambda g: yes_no(g.allow_employer_contact),
    ),
    ExportField(
        ExportFieldName.JOB_SEARCH_ACTIVE,
        "Job Search Active",
        18,
        lambda g: yes_no(g.job_search_active),
    ),
    ExportField(
        ExportFieldName.PROFILE_COMPLETION,
        "Profile Completion (%)",
        22,
        lambda g: g.profile_completion_percentage,
    ),
    ExportField(
        ExportFieldName.CREATED_AT,
        "Created At",
        20,
        lambda g: format_timestamp(g.created_at),
    ),
    ExportField(
        ExportFieldName.UPDATED_AT,
        "Updated At",
        20,
        lambda g: format_timestamp(g.updated_at),
    ),
]

EXPORT_FIELDS: dict[ExportFieldName, ExportField] = {f.key: f for f in FIELD_LIST}

# Default column set, in output order
DEFAULT_EXPORT_FIELDS = [
    ExportFieldName.NAME,
    ExportFieldName.EMAIL,
    ExportFieldName.PHONE,
    ExportFieldName.STUDENT_ID,
    ExportFieldName.COURSE,
    ExportFieldName.GRADUATION_YEAR,
    ExportFieldName.GPA,
    ExportFieldName.ACADEMIC_STANDING,
    ExportFieldName.EMPLOYMENT_STATUS,
    ExportFieldName.CURRENT_JOB_TITLE,
    ExportFieldName.CURRENT_COMPANY,
    ExportFieldName.CURRENT_SALARY,
    ExportFieldName.EMPLOYMENT_START_DATE,
    ExportFieldName.SKILLS,
    ExportFieldName.CERTIFICATIONS,
    ExportFieldName.ALLOW_EMPLOYER_CONTACT,
    ExportFieldName.JOB_SEARCH_ACTIVE,
    ExportFieldName.PROFILE_COMPLETION,
    ExportFieldName.CREATED_AT,
    ExportFieldName.UPDATED_AT,
]


def get_field(name: str | ExportFieldName) -> ExportField:
    """Registry lookup; raises ValueError for unknown field names."""
    return EXPORT_FIELDS[ExportFieldName(name)]
