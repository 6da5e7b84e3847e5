"""
Spreadsheet module.

This module provides the A1 range algebra and the value objects and batch-update
requests used to read and mutate Google Sheets metadata.
"""

from sheetcraft.spreadsheet.model import (
    GridRange,
    NamedRange,
    SheetProperties,
    SpreadsheetMetadata,
)
from sheetcraft.spreadsheet.a1 import (
    CellReference,
    build_a1_range,
    column_index_to_letter,
    column_letter_to_index,
    format_sheet_name_for_range,
    normalize_range_text,
    parse_cell_reference,
    parse_range,
    split_sheet_and_range,
)
from sheetcraft.spreadsheet.operations import (
    AddNamedRange,
    DeleteNamedRange,
    RepeatCellFormat,
    SpreadsheetOp,
    op_from_dict,
    to_requests,
)

__all__ = [
    "GridRange",
    "NamedRange",
    "SheetProperties",
    "SpreadsheetMetadata",
    "CellReference",
    "build_a1_range",
    "column_index_to_letter",
    "column_letter_to_index",
    "format_sheet_name_for_range",
    "normalize_range_text",
    "parse_cell_reference",
    "parse_range",
    "split_sheet_and_range",
    "AddNamedRange",
    "DeleteNamedRange",
    "RepeatCellFormat",
    "SpreadsheetOp",
    "op_from_dict",
    "to_requests",
]
