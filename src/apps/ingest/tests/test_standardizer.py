"""
Tests for the spreadsheet reader and standardization service.

Pure function tests - no database needed.
"""

from datetime import date

import polars as pl
import pytest

from apps.ingest.services.standardizer import (
    ImportFileError,
    add_row_numbers,
    cast_to_string,
    drop_trailing_empty_rows,
    normalize_column_name,
    normalize_column_names,
    read_graduate_rows,
    replace_null_markers,
    safe_bool,
    safe_date,
    standardize_dataframe,
)


class TestColumnNormalization:
    """Test column name normalization."""

    @pytest.mark.parametrize(
        "raw, expected",
        [
            ("Name", "name"),
            (" Course Name ", "course_name"),
            ("Employment-Start-Date", "employment_start_date"),
            ("student_id", "student_id"),
        ],
    )
    def test_normalize_column_name(self, raw, expected):
        assert normalize_column_name(raw) == expected

    def test_normalize_dataframe_columns(self):
        df = pl.DataFrame({"Full Name": ["a"], "E-mail": ["b"]})

        result = normalize_column_names(df)

        assert result.columns == ["full_name", "e_mail"]


class TestNullMarkerReplacement:
    """Test null marker replacement."""

    def test_markers_become_null(self):
        df = pl.DataFrame({"col": ["value", "-", "N/A", "", "   ", "n/a"]})

        result = replace_null_markers(df)

        assert result["col"].to_list() == ["value", None, None, None, None, None]

    def test_dash_inside_value_is_kept(self):
        df = pl.DataFrame({"col": ["2018-2020", "Jean-Luc"]})

        result = replace_null_markers(df)

        assert result["col"].to_list() == ["2018-2020", "Jean-Luc"]


class TestTypeCasting:
    """Test casting every column to string."""

    def test_whole_floats_lose_trailing_zero(self):
        df = pl.DataFrame({"graduation_year": [2020.0, 2021.0], "gpa": [3.5, 4.0]})

        result = cast_to_string(df)

        assert result["graduation_year"].to_list() == ["2020", "2021"]
        assert result["gpa"].to_list() == ["3.5", "4"]

    def test_integers_and_bools_become_strings(self):
        df = pl.DataFrame({"year": [2020], "flag": [True]})

        result = cast_to_string(df)

        assert result.schema["year"] == pl.String
        assert result["year"].to_list() == ["2020"]
        assert result["flag"].to_list() == ["true"]


class TestStandardizePipeline:
    """Test the full standardization pipeline."""

    def test_row_numbers_start_after_header(self):
        """Test that the first data row is spreadsheet row 2."""
        df = pl.DataFrame({"name": ["Jane", "John"]})

        result = add_row_numbers(df)

        assert result["row_number"].to_list() == [2, 3]

    def test_trailing_blank_rows_are_dropped(self):
        """Test that blank rows after the last data row are dropped."""
        df = add_row_numbers(
            replace_null_markers(
                pl.DataFrame(
                    {"name": ["Jane", None, "-"], "email": ["j@x.nl", None, ""]}
                )
            )
        )

        result = drop_trailing_empty_rows(df)

        assert result.to_dicts() == [
            {"row_number": 2, "name": "Jane", "email": "j@x.nl"}
        ]

    def test_interior_blank_rows_are_kept(self):
        """Test that a blank row between data rows keeps its place."""
        df = add_row_numbers(pl.DataFrame({"name": ["A", None, "B", None]}))

        result = drop_trailing_empty_rows(df)

        assert result["row_number"].to_list() == [2, 3, 4]
        assert result["name"].to_list() == ["A", None, "B"]

    def test_all_blank_rows(self):
        """Test that a sheet with only blank rows yields no rows."""
        df = add_row_numbers(
            pl.DataFrame({"name": [None, None]}, schema={"name": pl.String})
        )

        assert drop_trailing_empty_rows(df).height == 0

    def test_full_pipeline(self):
        """Test normalization, casting, numbering and trimming together."""
        df = pl.DataFrame(
            {
                "Name": ["Jane Doe", None],
                "Graduation Year": [2020, None],
                "Skills": ["Go, Rust", "-"],
            }
        )

        result = standardize_dataframe(df)

        assert result.columns == ["row_number", "name", "graduation_year", "skills"]
        assert result.to_dicts() == [
            {
                "row_number": 2,
                "name": "Jane Doe",
                "graduation_year": "2020",
                "skills": "Go, Rust",
            }
        ]


class TestReadGraduateRows:
    """Reading csv and xlsx files from disk."""

    def test_read_csv(self, write_csv):
        """Test that csv rows keep their physical row number across a blank row."""
        path = write_csv(
            [
                ["Name", "Email", "Graduation Year", "Phone"],
                ["Jane Doe", "jane@example.com", "2020", "0612345678"],
                ["", "", "", ""],
                ["John Roe", "john@example.com", "2019", "-"],
            ]
        )

        rows = read_graduate_rows(path)

        assert rows == [
            {
                "row_number": 2,
                "name": "Jane Doe",
                "email": "jane@example.com",
                "graduation_year": "2020",
                "phone": "0612345678",
            },
            {
                "row_number": 3,
                "name": None,
                "email": None,
                "graduation_year": None,
                "phone": None,
            },
            {
                "row_number": 4,
                "name": "John Roe",
                "email": "john@example.com",
                "graduation_year": "2019",
                "phone": None,
            },
        ]

    def test_read_xlsx_first_sheet(self, write_xlsx):
        """Test reading the first worksheet of an xlsx file."""
        path = write_xlsx(
            [
                ["Name", "Graduation Year", "GPA"],
                ["Jane Doe", 2020, 3.5],
            ]
        )

        rows = read_graduate_rows(path)

        assert rows == [
            {
                "row_number": 2,
                "name": "Jane Doe",
                "graduation_year": "2020",
                "gpa": "3.5",
            }
        ]

    def test_xlsx_interior_blank_row_keeps_numbering(self, write_xlsx):
        """Test that an xlsx row after a blank row reports its own row number."""
        path = write_xlsx(
            [
                ["Name", "Email"],
                ["A", "a@example.com"],
                [None, None],
                ["B", "b@example.com"],
                [None, None],
            ]
        )

        rows = read_graduate_rows(path)

        assert [(row["row_number"], row["name"]) for row in rows] == [
            (2, "A"),
            (3, None),
            (4, "B"),
        ]

    def test_missing_file(self, tmp_path):
        with pytest.raises(ImportFileError, match="File not found"):
            read_graduate_rows(tmp_path / "missing.csv")

    def test_unsupported_suffix(self, tmp_path):
        path = tmp_path / "graduates.txt"
        path.write_text("name\nJane\n")

        with pytest.raises(ImportFileError, match="Unsupported file type"):
            read_graduate_rows(path)


class TestSafeConversions:
    """Test the safe boolean and date converters."""

    @pytest.mark.parametrize(
        "value, expected",
        [
            ("true", True),
            ("YES", True),
            ("1", True),
            ("y", True),
            ("on", True),
            ("false", False),
            ("No", False),
            ("0", False),
            ("off", False),
            (1, True),
            (0, False),
            ("maybe", None),
            (None, None),
            (2, None),
        ],
    )
    def test_safe_bool(self, value, expected):
        assert safe_bool(value) is expected

    @pytest.mark.parametrize(
        "value",
        ["2021-03-01", "1 March 2021", "March 1, 2021"],
    )
    def test_safe_date(self, value):
        assert safe_date(value) == date(2021, 3, 1)

    def test_safe_date_invalid(self):
        assert safe_date("not a date") is None
        assert safe_date("") is None
        assert safe_date(None) is None
