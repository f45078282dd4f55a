"""
Spreadsheet reading and standardization for graduate imports.

Turns an uploaded xlsx/csv file into a list of row dicts keyed by normalized
column names, with every cell as a string (or None when blank). Pure Polars
transformations apart from the initial file read.
"""

from __future__ import annotations

import contextlib
import logging
import os
import warnings
from datetime import date, datetime
from pathlib import Path
from typing import Any

import polars as pl
from loguru import logger

# Markers that mean "no value" in hand-maintained sheets
NULL_MARKERS = {"-", "n/a"}

SUPPORTED_SUFFIXES = {".xlsx", ".xlsm", ".xls", ".csv"}

# Physical spreadsheet row carried on every row dict
ROW_NUMBER_COLUMN = "row_number"


class ImportFileError(Exception):
    """Raised when an import file cannot be read."""

    pass


def _read_excel_quiet(file_path: str | Path, **kwargs) -> pl.DataFrame:
    """
    Reads an Excel file quietly, suppressing dtype inference messages.
    """
    noisy_loggers = ["polars", "fastexcel"]
    prev_levels = {}
    for name in noisy_loggers:
        lg = logging.getLogger(name)
        prev_levels[name] = lg.level
        lg.setLevel(logging.ERROR)
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            with open(os.devnull, "w") as devnull, contextlib.redirect_stdout(
                devnull
            ), contextlib.redirect_stderr(devnull):
                return pl.read_excel(file_path, **kwargs)
    finally:
        for name, level in prev_levels.items():
            logging.getLogger(name).setLevel(level)


def read_spreadsheet(file_path: str | Path) -> pl.DataFrame:
    """Read the first sheet of an xlsx file, or a csv file, into a DataFrame."""
    file_path = Path(file_path)
    if not file_path.exists():
        raise ImportFileError(f"File not found: {file_path}")

    suffix = file_path.suffix.lower()
    if suffix not in SUPPORTED_SUFFIXES:
        raise ImportFileError(
            f"Unsupported file type '{suffix}'. "
            f"Expected one of: {', '.join(sorted(SUPPORTED_SUFFIXES))}"
        )

    logger.info(f"Reading graduate rows from: {file_path.name}")
    try:
        if suffix == ".csv":
            return pl.read_csv(file_path, infer_schema=False)
        return _read_excel_quiet(file_path, sheet_id=1)
    except Exception as e:
        raise ImportFileError(f"Could not read {file_path.name}: {e}") from e


def normalize_column_name(name: str) -> str:
    """'Course Name ' -> 'course_name'."""
    return "_".join(name.strip().lower().replace("-", " ").split())


def normalize_column_names(df: pl.DataFrame) -> pl.DataFrame:
    return df.rename({col: normalize_column_name(col) for col in df.columns})


def cast_to_string(df: pl.DataFrame) -> pl.DataFrame:
    """
    Cast all non-string columns to string.

    Whole-number floats (Excel stores 2020 as 2020.0) lose their ".0" so that
    years and ids survive the round trip. Actual type conversion happens in
    the row validator.
    """
    float_cols = [
        name for name, dtype in df.schema.items() if dtype in (pl.Float32, pl.Float64)
    ]
    df = df.with_columns(pl.exclude(pl.String).cast(pl.String))
    if float_cols:
        df = df.with_columns(
            [pl.col(c).str.replace(r"\.0$", "") for c in float_cols]
        )
    return df


def replace_null_markers(df: pl.DataFrame) -> pl.DataFrame:
    """
    Replace null markers with actual nulls.

    Common null markers: "-", "N/A", "", whitespace
    """
    if not df.columns:
        return df
    return df.with_columns(
        pl.when(
            pl.col(pl.String).str.strip_chars().str.to_lowercase().is_in(
                list(NULL_MARKERS)
            )
            | (pl.col(pl.String).str.strip_chars() == "")
        )
        .then(None)
        .otherwise(pl.col(pl.String))
        .name.keep()
    )


def add_row_numbers(df: pl.DataFrame) -> pl.DataFrame:
    """
    Add row_number column for error reporting.

    Row numbers are 1-indexed to match Excel.
    """
    return df.with_row_index(
        name=ROW_NUMBER_COLUMN, offset=2
    )  # +1 for 1-indexing, +1 for header row


def drop_trailing_empty_rows(df: pl.DataFrame) -> pl.DataFrame:
    """
    Drop the blank rows after the last row that holds any value.

    Blank rows between data rows are kept so they are reported as invalid.
    """
    data_columns = [c for c in df.columns if c != ROW_NUMBER_COLUMN]
    if not data_columns:
        return df
    has_value = df.select(
        ~pl.all_horizontal(pl.col(data_columns).is_null())
    ).to_series()
    filled = has_value.arg_true()
    if filled.is_empty():
        return df.clear()
    return df.head(filled[-1] + 1)


def standardize_dataframe(df: pl.DataFrame) -> pl.DataFrame:
    """
    Complete standardization pipeline.

    Steps:
    1. Normalize column names
    2. Cast all to string
    3. Replace null markers
    4. Number rows by their physical spreadsheet row
    5. Drop trailing blank rows

    Example:
        >>> raw_df = read_spreadsheet("graduates.xlsx")
        >>> rows = standardize_dataframe(raw_df).to_dicts()
    """
    df = normalize_column_names(df)
    df = cast_to_string(df)
    df = replace_null_markers(df)
    df = add_row_numbers(df)
    df = drop_trailing_empty_rows(df)
    return df


def read_graduate_rows(file_path: str | Path) -> list[dict[str, str | None]]:
    """Read and standardize a graduate spreadsheet into row dicts."""
    df = standardize_dataframe(read_spreadsheet(file_path))
    logger.info(f"Read {df.height} graduate rows with columns: {', '.join(df.columns)}")
    return df.to_dicts()


# Safe type conversion utilities (used by validator and transformer)


def safe_bool(value: Any) -> bool | None:
    """Safely convert value to bool, return None on failure."""
    if value is None:
        return None
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        value_lower = value.lower().strip()
        if value_lower in ("true", "yes", "1", "y", "on"):
            return True
        if value_lower in ("false", "no", "0", "n", "off"):
            return False
        return None
    if isinstance(value, (int, float)) and value in (0, 1):
        return bool(value)
    return None


def safe_date(value: Any) -> date | None:
    """
    Safely convert a value to a date, trying multiple formats.
    Returns None on failure.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    from dateutil import parser

    try:
        # Use dateutil.parser for robust parsing of various formats
        return parser.parse(str(value)).date()
    except (ValueError, TypeError, OverflowError):
        return None
