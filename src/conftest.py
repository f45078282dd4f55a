"""
Central pytest configuration and shared fixtures.

This file provides common fixtures for all tests in the project.
Fixtures are available to all test files automatically.
"""
import csv
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from apps.core.models import Course, Graduate
from apps.ingest.services.transformer import ImportPolicy

GRADUATE_COLUMNS = [
    "name",
    "email",
    "phone",
    "address",
    "graduation_year",
    "course_name",
    "student_id",
    "gpa",
    "academic_standing",
    "employment_status",
    "current_job_title",
    "current_company",
    "current_salary",
    "employment_start_date",
    "skills",
    "certifications",
    "allow_employer_contact",
    "job_search_active",
]


# ============================================================================
# Path / Storage Fixtures
# ============================================================================

@pytest.fixture(scope="session")
def project_root() -> Path:
    """Return the project root directory."""
    return Path(__file__).parent.parent


@pytest.fixture(autouse=True)
def media_root(settings, tmp_path: Path) -> Path:
    """Keep uploaded import files out of the project tree."""
    media = tmp_path / "media"
    settings.MEDIA_ROOT = media
    return media


# ============================================================================
# Model Fixtures
# ============================================================================

@pytest.fixture
def course(db) -> Course:
    return Course.objects.create(name="Computer Science", code="CS")


@pytest.fixture
def other_course(db) -> Course:
    return Course.objects.create(name="Business Administration", code="BA")


@pytest.fixture
def make_graduate(db, course: Course) -> Callable[..., Graduate]:
    """
    Factory for stored graduates.

    Usage:
        grad = make_graduate(email="jane@example.com", skills=["Go"])
    """
    counter = {"n": 0}

    def _make(**overrides: Any) -> Graduate:
        counter["n"] += 1
        n = counter["n"]
        values = {
            "name": f"Graduate {n}",
            "email": f"graduate{n}@example.com",
            "course": course,
            "graduation_year": 2020,
        }
        values.update(overrides)
        return Graduate.objects.create(**values)

    return _make


# ============================================================================
# Import Fixtures
# ============================================================================

@pytest.fixture
def import_policy() -> ImportPolicy:
    return ImportPolicy()


@pytest.fixture
def graduate_row(course: Course) -> Callable[..., dict[str, Any]]:
    """
    Factory for a valid, standardized import row (all values strings or None).

    Usage:
        row = graduate_row(email="someone@example.com", gpa="3.2")
    """

    def _row(**overrides: Any) -> dict[str, Any]:
        row = {column: None for column in GRADUATE_COLUMNS}
        row.update(
            {
                "name": "Jane Doe",
                "email": "jane.doe@example.com",
                "graduation_year": "2020",
                "course_name": course.name,
                "employment_status": "employed",
            }
        )
        row.update(overrides)
        return row

    return _row


@pytest.fixture
def write_csv(tmp_path: Path) -> Callable[..., Path]:
    """Write rows (list of lists, header first) to a csv file in tmp_path."""

    def _write(rows: list[list[Any]], name: str = "graduates.csv") -> Path:
        path = tmp_path / name
        with path.open("w", newline="", encoding="utf-8") as fh:
            csv.writer(fh).writerows(rows)
        return path

    return _write


@pytest.fixture
def write_xlsx(tmp_path: Path) -> Callable[..., Path]:
    """Write rows (list of lists, header first) to an xlsx file in tmp_path."""

    def _write(rows: list[list[Any]], name: str = "graduates.xlsx") -> Path:
        path = tmp_path / name
        wb = Workbook()
        ws = wb.active
        for row in rows:
            ws.append(row)
        wb.save(path)
        return path

    return _write


# ============================================================================
# Test Markers Documentation
# ============================================================================

def pytest_configure(config):
    """
    Configure custom pytest markers.

    This makes the markers available to all tests and allows
    pytest to validate marker usage with --strict-markers.
    """
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers",
        "pipeline: marks end-to-end import/export tests"
    )
    config.addinivalue_line(
        "markers",
        "unit: marks fast unit tests"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks integration tests"
    )
