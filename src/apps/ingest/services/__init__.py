"""
Graduate import and export services.

Import: standardizer -> row_validator -> transformer -> reconciler ->
writer -> reporter, orchestrated by GraduateImportProcessor.
Export: ExportSpec -> GraduateExportService -> ExportTable -> ExcelBuilder/csv.
"""

from .excel_builder import ExcelBuilder
from .export import ExportSpec, ExportTable, GraduateExportService
from .export_config import (
    DEFAULT_EXPORT_FIELDS,
    EXPORT_FIELDS,
    ExportField,
    ExportFieldName,
)
from .processor import (
    GraduateImportProcessor,
    create_import_run,
    execute_import_run,
    import_graduates_from_file,
)
from .reconciler import DuplicateMatch, calculate_similarity, find_duplicate
from .reporter import ImportRunReport
from .row_validator import GraduateRowForm, RowValidation, validate_row
from .standardizer import (
    ImportFileError,
    read_graduate_rows,
    safe_bool,
    safe_date,
    standardize_dataframe,
)
from .transformer import (
    ImportPolicy,
    parse_certifications,
    parse_skills,
    transform_row,
)
from .writer import create_graduate

__all__ = [
    # Export
    "DEFAULT_EXPORT_FIELDS",
    "EXPORT_FIELDS",
    "DuplicateMatch",
    "ExcelBuilder",
    "ExportField",
    "ExportFieldName",
    "ExportSpec",
    "ExportTable",
    # Import
    "GraduateExportService",
    "GraduateImportProcessor",
    "GraduateRowForm",
    "ImportFileError",
    "ImportPolicy",
    "ImportRunReport",
    "RowValidation",
    "calculate_similarity",
    "create_graduate",
    "create_import_run",
    "execute_import_run",
    "find_duplicate",
    "import_graduates_from_file",
    "parse_certifications",
    "parse_skills",
    "read_graduate_rows",
    "safe_bool",
    "safe_date",
    "standardize_dataframe",
    "transform_row",
    "validate_row",
]
