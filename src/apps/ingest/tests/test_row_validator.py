"""Tests for per-row validation of graduate imports."""

from datetime import date
from decimal import Decimal

import pytest
from django.utils import timezone

from apps.ingest.services.row_validator import validate_row


def error_codes(result, field):
    return [error["code"] for error in result.errors.get(field, [])]


@pytest.mark.django_db
class TestValidRows:
    def test_minimal_row(self, graduate_row, course):
        result = validate_row(graduate_row(), 2)

        assert result.is_valid
        assert result.errors == {}
        assert result.validated["course_id"] == course.pk
        assert "course_name" not in result.validated
        assert result.validated["graduation_year"] == 2020

    def test_optional_fields_are_converted(self, graduate_row):
        row = graduate_row(
            gpa="3.45",
            current_salary="52000",
            employment_start_date="1 March 2021",
            academic_standing="very_good",
            allow_employer_contact="No",
            job_search_active="",
        )

        result = validate_row(row, 5)

        assert result.is_valid
        validated = result.validated
        assert validated["gpa"] == Decimal("3.45")
        assert validated["current_salary"] == Decimal("52000")
        assert validated["employment_start_date"] == date(2021, 3, 1)
        assert validated["academic_standing"] == "very_good"
        assert validated["allow_employer_contact"] is False
        assert validated["job_search_active"] is None
        assert validated["phone"] is None

    def test_row_number_is_carried(self, graduate_row):
        """Test that the physical row number is kept on the result."""
        assert validate_row(graduate_row(), 2).row_number == 2
        assert validate_row(graduate_row(name=None), 9).row_number == 9

    def test_original_data_is_kept(self, graduate_row):
        row = graduate_row()
        result = validate_row(row, 2)

        assert result.data == row


@pytest.mark.django_db
class TestInvalidRows:
    """Every failing field is reported, with its error code."""

    def test_missing_name(self, graduate_row):
        result = validate_row(graduate_row(name=None), 2)

        assert not result.is_valid
        assert error_codes(result, "name") == ["required"]

    def test_unknown_course_has_exists_code(self, graduate_row):
        result = validate_row(graduate_row(course_name="Astrology"), 2)

        assert not result.is_valid
        assert error_codes(result, "course_name") == ["exists"]
        assert result.errors["course_name"][0]["message"] == (
            "The selected course name is invalid."
        )

    def test_all_errors_collected(self, graduate_row):
        row = graduate_row(
            email="not-an-email",
            employment_status="retired",
            gpa="4.5",
            current_salary="-1",
        )

        result = validate_row(row, 2)

        assert set(result.errors) == {
            "email",
            "employment_status",
            "gpa",
            "current_salary",
        }
        assert error_codes(result, "email") == ["invalid"]
        assert error_codes(result, "employment_status") == ["invalid_choice"]
        assert error_codes(result, "gpa") == ["max_value"]
        assert error_codes(result, "current_salary") == ["min_value"]

    @pytest.mark.parametrize("year", ["20", "20200", "year", "2020.5"])
    def test_graduation_year_must_be_four_digits(self, graduate_row, year):
        result = validate_row(graduate_row(graduation_year=year), 2)

        assert error_codes(result, "graduation_year") == ["digits"]

    def test_graduation_year_bounds(self, graduate_row):
        too_old = validate_row(graduate_row(graduation_year="1899"), 2)
        too_new = validate_row(
            graduate_row(graduation_year=str(timezone.now().year + 2)), 2
        )
        next_year = validate_row(
            graduate_row(graduation_year=str(timezone.now().year + 1)), 2
        )

        assert error_codes(too_old, "graduation_year") == ["min_value"]
        assert error_codes(too_new, "graduation_year") == ["max_value"]
        assert next_year.is_valid

    def test_boolean_like_values(self, graduate_row):
        result = validate_row(graduate_row(job_search_active="sometimes"), 2)

        assert error_codes(result, "job_search_active") == ["invalid"]

    def test_unparseable_date(self, graduate_row):
        result = validate_row(graduate_row(employment_start_date="someday"), 2)

        assert error_codes(result, "employment_start_date") == ["invalid"]

    def test_unknown_academic_standing(self, graduate_row):
        result = validate_row(graduate_row(academic_standing="legendary"), 2)

        assert error_codes(result, "academic_standing") == ["invalid_choice"]

    @pytest.mark.parametrize(
        "salary, code",
        [
            ("1e400", "max_digits"),
            ("12345678901234", "max_digits"),
            ("52000.505", "max_decimal_places"),
        ],
    )
    def test_salary_out_of_range(self, graduate_row, salary, code):
        """Test that salaries beyond the stored precision are field errors."""
        result = validate_row(graduate_row(current_salary=salary), 2)

        assert not result.is_valid
        assert error_codes(result, "current_salary") == [code]
