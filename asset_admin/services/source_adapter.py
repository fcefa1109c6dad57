# File: asset_admin/services/source_adapter.py
"""
Source adapters turning uploaded files into raw import rows.

Both adapters produce the same vocabulary: a list of dictionaries keyed by the
field keys of ``asset_columns``. Every cell is decoded once into a ``CellValue``
so that the validator only ever sees plain ``str`` values for text fields and
native values (dates, numbers) for date and price fields.
"""

import csv
import io
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Sequence

from openpyxl import load_workbook

from asset_admin.core.config import settings
from asset_admin.core.exceptions import BatchInputException
from asset_admin.services.asset_columns import COLUMNS_BY_KEY, TEXT, build_column_map

logger = logging.getLogger(__name__)

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"

RawRow = Dict[str, Any]


class CellKind(str, Enum):
    EMPTY = "empty"
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    FORMULA_RESULT = "formula_result"


@dataclass(frozen=True)
class CellValue:
    """
    A decoded cell.

    Attributes:
        kind: What the cell held
        value: The native value; for formulas, the cached result
    """

    kind: CellKind
    value: Any = None

    @classmethod
    def decode(cls, raw: Any, is_formula: bool = False) -> "CellValue":
        """
        Classify a raw cell value.

        Args:
            raw: Value as returned by the reader
            is_formula: Whether the cell holds a formula whose cached result is ``raw``
        """
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            return cls(CellKind.EMPTY)
        if is_formula:
            return cls(CellKind.FORMULA_RESULT, raw)
        if isinstance(raw, (datetime, date, time)):
            return cls(CellKind.DATE, raw)
        if isinstance(raw, (int, float, Decimal)) and not isinstance(raw, bool):
            return cls(CellKind.NUMBER, raw)
        return cls(CellKind.TEXT, str(raw))

    def as_text(self) -> str:
        """Render the cell as trimmed text; empty cells give ``""``."""
        if self.kind is CellKind.EMPTY:
            return ""
        value = self.value
        if isinstance(value, float) and value.is_integer():
            value = int(value)
        if isinstance(value, datetime) and value.time() == time(0, 0):
            value = value.date()
        if isinstance(value, (date, datetime)):
            return value.isoformat()
        return str(value).strip()

    def as_native(self) -> Any:
        """Return the native value; empty cells give None."""
        if self.kind is CellKind.EMPTY:
            return None
        if isinstance(self.value, str):
            return self.value.strip()
        return self.value


def to_field_value(key: str, cell: CellValue) -> Any:
    """Text fields receive ``str``; date and price fields the native value."""
    if COLUMNS_BY_KEY[key].kind == TEXT:
        return cell.as_text()
    return cell.as_native()


class SourceAdapter(ABC):
    """Base class for import file readers."""

    name = "source"

    @abstractmethod
    def read(self, content: bytes) -> List[RawRow]:
        """
        Parse file content into raw rows.

        Args:
            content: Uploaded file bytes

        Returns:
            One mapping per data row, keyed by field key
        """

    @staticmethod
    def _build_row(column_map: Dict[str, int], cells: Sequence[CellValue]) -> RawRow:
        row: RawRow = {}
        for key, index in column_map.items():
            cell = cells[index] if index < len(cells) else CellValue(CellKind.EMPTY)
            row[key] = to_field_value(key, cell)
        return row


class DelimitedTextSourceAdapter(SourceAdapter):
    """
    Reads comma-separated text.

    The first non-blank line is the header; blank lines are skipped and a
    UTF-8 byte order mark is tolerated.
    """

    name = "csv"

    def __init__(self, delimiter: str = ","):
        self.delimiter = delimiter

    def read(self, content: bytes) -> List[RawRow]:
        text = content.decode("utf-8-sig") if isinstance(content, bytes) else content
        reader = csv.reader(io.StringIO(text), delimiter=self.delimiter)

        column_map: Optional[Dict[str, int]] = None
        rows: List[RawRow] = []
        for record in reader:
            if not any(cell.strip() for cell in record):
                continue
            if column_map is None:
                column_map = build_column_map(record)
                logger.debug(f"CSV header mapped to fields: {sorted(column_map)}")
                continue
            cells = [CellValue.decode(cell) for cell in record]
            rows.append(self._build_row(column_map, cells))

        return rows


class SpreadsheetSourceAdapter(SourceAdapter):
    """
    Reads an ``.xlsx`` workbook with openpyxl.

    Data comes from the sheet named ``sheet_name`` or, failing that, the first
    sheet. Rows without an item number are dropped.
    """

    name = "xlsx"

    def __init__(self, sheet_name: Optional[str] = None):
        self.sheet_name = sheet_name or settings.IMPORT_SHEET_NAME

    def _select_sheet(self, workbook):
        if not workbook.worksheets:
            raise BatchInputException("No worksheet found in file")
        if self.sheet_name in workbook.sheetnames:
            return workbook[self.sheet_name]
        return workbook.worksheets[0]

    def read(self, content: bytes) -> List[RawRow]:
        values_book = load_workbook(io.BytesIO(content), data_only=True, read_only=True)
        formulas_book = load_workbook(io.BytesIO(content), data_only=False, read_only=True)
        try:
            values_sheet = self._select_sheet(values_book)
            formulas_sheet = formulas_book[values_sheet.title]
            logger.debug(f"Reading worksheet '{values_sheet.title}'")
            return self._read_rows(
                values_sheet.iter_rows(values_only=True),
                formulas_sheet.iter_rows(values_only=True),
            )
        finally:
            values_book.close()
            formulas_book.close()

    def _read_rows(self, value_rows: Iterable, formula_rows: Iterable) -> List[RawRow]:
        column_map: Optional[Dict[str, int]] = None
        rows: List[RawRow] = []

        for values, formulas in zip(value_rows, formula_rows):
            if column_map is None:
                column_map = build_column_map(list(values))
                logger.debug(f"Worksheet header mapped to fields: {sorted(column_map)}")
                continue

            cells = [
                CellValue.decode(
                    value,
                    is_formula=isinstance(formula, str) and formula.startswith("="),
                )
                for value, formula in zip(values, formulas)
            ]
            row = self._build_row(column_map, cells)
            if row.get("item_number"):
                rows.append(row)

        return rows


def is_spreadsheet(filename: Optional[str], content_type: Optional[str]) -> bool:
    """Whether an upload should be read as an ``.xlsx`` workbook."""
    if content_type == XLSX_CONTENT_TYPE:
        return True
    return bool(filename) and filename.lower().endswith(".xlsx")


def select_adapter(filename: Optional[str], content_type: Optional[str]) -> SourceAdapter:
    """
    Choose the adapter for an upload.

    Args:
        filename: Original file name
        content_type: Media type reported by the client

    Returns:
        Spreadsheet adapter for ``.xlsx`` uploads, delimited-text otherwise
    """
    if is_spreadsheet(filename, content_type):
        return SpreadsheetSourceAdapter()
    return DelimitedTextSourceAdapter()
