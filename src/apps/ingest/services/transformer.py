"""
Field transformation for validated graduate rows.

Pure functions: a validated row payload goes in, the structured payload
used to create a Graduate comes out. Defaults for blank preferences and the
privacy settings of imported records come from an explicit ImportPolicy.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any

from django.conf import settings

from .standardizer import safe_bool

SKILL_SEPARATOR = ","
CERTIFICATION_SEPARATOR = ";"
CERTIFICATION_PART_SEPARATOR = "|"


def _default_privacy() -> dict[str, bool]:
    return {
        "profile_visible": True,
        "contact_visible": True,
        "employment_visible": True,
    }


@dataclass(frozen=True)
class ImportPolicy:
    """Defaults and matching options for one import run."""

    default_allow_employer_contact: bool = True
    default_job_search_active: bool = True
    default_privacy: dict[str, bool] = field(default_factory=_default_privacy)
    detect_similar_names: bool = False
    similarity_threshold: float = 0.8

    @classmethod
    def from_settings(cls, **overrides) -> "ImportPolicy":
        """Build a policy from settings.GRADUATE_IMPORT, with keyword overrides."""
        conf = getattr(settings, "GRADUATE_IMPORT", {})
        values = {
            "default_allow_employer_contact": conf.get(
                "DEFAULT_ALLOW_EMPLOYER_CONTACT", True
            ),
            "default_job_search_active": conf.get("DEFAULT_JOB_SEARCH_ACTIVE", True),
            "default_privacy": dict(conf.get("DEFAULT_PRIVACY", _default_privacy())),
            "detect_similar_names": conf.get("DETECT_SIMILAR_NAMES", False),
            "similarity_threshold": conf.get("SIMILARITY_THRESHOLD", 0.8),
        }
        values.update(overrides)
        return cls(**values)


def parse_skills(raw: str | None) -> list[str]:
    """
    Split a comma-separated skills cell.

    Tokens are trimmed and empties dropped; order is preserved and duplicates
    are kept.

        >>> parse_skills("Go, Rust ,  , Python")
        ['Go', 'Rust', 'Python']
    """
    if not raw:
        return []
    return [token.strip() for token in raw.split(SKILL_SEPARATOR) if token.strip()]


def parse_certification(entry: str) -> dict[str, str]:
    """'name|issuer|date' -> {name, issuer, date_obtained}; missing parts are ''."""
    parts = [part.strip() for part in entry.split(CERTIFICATION_PART_SEPARATOR)]
    parts += [""] * (3 - len(parts))
    return {
        "name": parts[0],
        "issuer": parts[1],
        "date_obtained": parts[2],
    }


def parse_certifications(raw: str | None) -> list[dict[str, str]]:
    """
    Split a semicolon-separated certifications cell.

        >>> parse_certifications("AWS|Amazon|2020;Scrum Master")
        [{'name': 'AWS', 'issuer': 'Amazon', 'date_obtained': '2020'},
         {'name': 'Scrum Master', 'issuer': '', 'date_obtained': ''}]
    """
    if not raw:
        return []
    return [
        parse_certification(entry.strip())
        for entry in raw.split(CERTIFICATION_SEPARATOR)
        if entry.strip()
    ]


def resolve_bool(value: Any, default: bool) -> bool:
    """Parsed boolean, or ``default`` when absent/unparseable."""
    parsed = safe_bool(value)
    return default if parsed is None else parsed


def build_employment_status(validated: dict[str, Any]) -> dict[str, Any]:
    """Fold the flat employment columns into one JSON-safe structure."""
    salary = validated.get("current_salary")
    start_date = validated.get("employment_start_date")
    return {
        "status": validated["employment_status"],
        "job_title": validated.get("current_job_title") or None,
        "company": validated.get("current_company") or None,
        "salary": float(salary) if salary is not None else None,
        "start_date": start_date.isoformat() if isinstance(start_date, date) else None,
    }


def transform_row(
    validated: dict[str, Any], policy: ImportPolicy | None = None
) -> dict[str, Any]:
    """
    Turn a validated row into the Graduate creation payload.

    Args:
        validated: Output of the row validator (course already resolved)
        policy: Import defaults; read from settings when omitted

    Returns:
        Keyword arguments for ``Graduate.objects.create``
    """
    policy = policy or ImportPolicy.from_settings()

    gpa = validated.get("gpa")
    if isinstance(gpa, Decimal):
        gpa = gpa.quantize(Decimal("0.01"))

    return {
        "name": validated["name"],
        "email": validated["email"],
        "phone": validated.get("phone") or None,
        "address": validated.get("address") or None,
        "student_id": validated.get("student_id") or None,
        "course_id": validated["course_id"],
        "graduation_year": validated["graduation_year"],
        "gpa": gpa,
        "academic_standing": validated.get("academic_standing") or None,
        "employment_status": build_employment_status(validated),
        "skills": parse_skills(validated.get("skills")),
        "certifications": parse_certifications(validated.get("certifications")),
        "allow_employer_contact": resolve_bool(
            validated.get("allow_employer_contact"),
            policy.default_allow_employer_contact,
        ),
        "job_search_active": resolve_bool(
            validated.get("job_search_active"), policy.default_job_search_active
        ),
        "privacy_settings": dict(policy.default_privacy),
    }
