"""
Excel rendering for graduate exports.

Writes an ExportTable to a single-sheet workbook: bold shaded heading row,
column widths from the table, frozen heading and an autofilter.
"""
from __future__ import annotations

from io import BytesIO
from pathlib import Path

from loguru import logger
from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from .export import ExportTable


class ExcelBuilder:
    """Builds Excel workbooks for graduate exports."""

    SHEET_NAME = "Graduates"

    def build_workbook(self, table: ExportTable) -> Workbook:
        wb = Workbook()
        ws = wb.active
        ws.title = self.SHEET_NAME

        for row in table.all_rows():
            ws.append(row)

        if table.headings:
            self._style_header(ws, len(table.headings))
            ws.freeze_panes = "A2"
            if table.rows:
                last_col = get_column_letter(len(table.headings))
                ws.auto_filter.ref = f"A1:{last_col}{len(table.rows) + 1}"

        for letter, width in table.column_widths.items():
            ws.column_dimensions[letter].width = width

        return wb

    def _style_header(self, ws: Worksheet, column_count: int) -> None:
        header_font = Font(bold=True)
        header_fill = PatternFill("solid", fgColor="DDDDDD")
        for idx in range(1, column_count + 1):
            cell = ws.cell(row=1, column=idx)
            cell.font = header_font
            cell.fill = header_fill
            cell.alignment = Alignment(vertical="center")

    def to_bytes(self, table: ExportTable) -> BytesIO:
        """Workbook as an in-memory xlsx stream, positioned at the start."""
        output = BytesIO()
        self.build_workbook(table).save(output)
        output.seek(0)
        return output

    def save(self, table: ExportTable, target_path: str | Path) -> Path:
        """Save to a temporary file then rename it to target_path."""
        target_path = Path(target_path)
        target_path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = target_path.with_suffix(".tmp")
        try:
            self.build_workbook(table).save(temp_path)
            temp_path.replace(target_path)
        except Exception:
            logger.exception(f"Error saving workbook to {target_path}")
            temp_path.unlink(missing_ok=True)
            raise
        return target_path
