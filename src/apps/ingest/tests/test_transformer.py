"""
Tests for the field transformer.

Pure function tests - no database needed.
"""

from datetime import date
from decimal import Decimal

import pytest

from apps.ingest.services.transformer import (
    ImportPolicy,
    parse_certifications,
    parse_skills,
    resolve_bool,
    transform_row,
)


def validated_row(**overrides):
    row = {
        "name": "Jane Doe",
        "email": "jane@example.com",
        "phone": None,
        "address": None,
        "student_id": None,
        "course_id": 1,
        "graduation_year": 2020,
        "gpa": None,
        "academic_standing": "",
        "employment_status": "employed",
        "current_job_title": None,
        "current_company": None,
        "current_salary": None,
        "employment_start_date": None,
        "skills": None,
        "certifications": None,
        "allow_employer_contact": None,
        "job_search_active": None,
    }
    row.update(overrides)
    return row


class TestParseSkills:
    def test_trims_and_drops_empties(self):
        assert parse_skills("Go, Rust ,  , Python") == ["Go", "Rust", "Python"]

    def test_keeps_order_and_duplicates(self):
        assert parse_skills("SQL,Go,SQL") == ["SQL", "Go", "SQL"]

    @pytest.mark.parametrize("raw", [None, "", " , ,"])
    def test_empty(self, raw):
        assert parse_skills(raw) == []


class TestParseCertifications:
    def test_positional_parts(self):
        assert parse_certifications("AWS|Amazon|2020;Scrum Master") == [
            {"name": "AWS", "issuer": "Amazon", "date_obtained": "2020"},
            {"name": "Scrum Master", "issuer": "", "date_obtained": ""},
        ]

    def test_missing_date(self):
        assert parse_certifications(" PMP | PMI ") == [
            {"name": "PMP", "issuer": "PMI", "date_obtained": ""}
        ]

    def test_empty_entries_dropped(self):
        assert parse_certifications("AWS;;  ;CKA|CNCF") == [
            {"name": "AWS", "issuer": "", "date_obtained": ""},
            {"name": "CKA", "issuer": "CNCF", "date_obtained": ""},
        ]

    def test_empty(self):
        assert parse_certifications(None) == []


class TestImportPolicy:
    def test_defaults(self):
        policy = ImportPolicy()

        assert policy.default_allow_employer_contact is True
        assert policy.default_job_search_active is True
        assert policy.default_privacy == {
            "profile_visible": True,
            "contact_visible": True,
            "employment_visible": True,
        }
        assert policy.detect_similar_names is False
        assert policy.similarity_threshold == 0.8

    def test_from_settings(self, settings):
        settings.GRADUATE_IMPORT = {
            "DEFAULT_ALLOW_EMPLOYER_CONTACT": False,
            "DEFAULT_JOB_SEARCH_ACTIVE": True,
            "DEFAULT_PRIVACY": {"profile_visible": False},
            "DETECT_SIMILAR_NAMES": True,
            "SIMILARITY_THRESHOLD": 0.9,
        }

        policy = ImportPolicy.from_settings(similarity_threshold=0.5)

        assert policy.default_allow_employer_contact is False
        assert policy.default_privacy == {"profile_visible": False}
        assert policy.detect_similar_names is True
        assert policy.similarity_threshold == 0.5


class TestResolveBool:
    def test_parsed_value_wins(self):
        assert resolve_bool("no", default=True) is False
        assert resolve_bool(True, default=False) is True

    def test_missing_or_unparseable_uses_default(self):
        assert resolve_bool(None, default=True) is True
        assert resolve_bool("perhaps", default=False) is False


class TestTransformRow:
    def test_employment_structure(self):
        payload = transform_row(
            validated_row(
                current_job_title="Engineer",
                current_company="Acme",
                current_salary=Decimal("52000.50"),
                employment_start_date=date(2021, 3, 1),
            ),
            ImportPolicy(),
        )

        assert payload["employment_status"] == {
            "status": "employed",
            "job_title": "Engineer",
            "company": "Acme",
            "salary": 52000.5,
            "start_date": "2021-03-01",
        }
        assert "current_job_title" not in payload

    def test_booleans_take_policy_defaults(self):
        policy = ImportPolicy(
            default_allow_employer_contact=False, default_job_search_active=False
        )

        payload = transform_row(validated_row(), policy)

        assert payload["allow_employer_contact"] is False
        assert payload["job_search_active"] is False

    def test_explicit_booleans_override_defaults(self):
        payload = transform_row(
            validated_row(allow_employer_contact=False, job_search_active=True),
            ImportPolicy(default_job_search_active=False),
        )

        assert payload["allow_employer_contact"] is False
        assert payload["job_search_active"] is True

    def test_privacy_is_a_copy_of_policy(self):
        policy = ImportPolicy()

        payload = transform_row(validated_row(), policy)
        payload["privacy_settings"]["profile_visible"] = False

        assert policy.default_privacy["profile_visible"] is True

    def test_gpa_and_standing(self):
        payload = transform_row(
            validated_row(gpa=Decimal("3.456"), academic_standing=""), ImportPolicy()
        )

        assert payload["gpa"] == Decimal("3.46")
        assert payload["academic_standing"] is None

    def test_lists_and_blank_student_id(self):
        payload = transform_row(
            validated_row(
                skills="Go, Rust",
                certifications="AWS|Amazon",
                student_id="",
            ),
            ImportPolicy(),
        )

        assert payload["skills"] == ["Go", "Rust"]
        assert payload["certifications"] == [
            {"name": "AWS", "issuer": "Amazon", "date_obtained": ""}
        ]
        assert payload["student_id"] is None
