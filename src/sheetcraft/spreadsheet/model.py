"""
Spreadsheet model classes.

This module provides value objects for the parts of a Google Sheets spreadsheet
that sheetcraft reads or mutates:
- GridRange: A half-open rectangular region bound to a numeric sheet id
- SheetProperties: A sheet (tab) title and its numeric id
- NamedRange: A persisted, named GridRange stored in spreadsheet metadata
- SpreadsheetMetadata: The sheets and named ranges of one spreadsheet

All classes convert to and from the camelCase dictionaries used by the Sheets API.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sheetcraft.exceptions import ValidationError


@dataclass(frozen=True)
class GridRange:
    """A rectangular cell region in Sheets API form.

    IMPORTANT: all indices are 0-indexed and end indices are exclusive
    (``end = last + 1``). An end index of None means the range is unbounded in
    that dimension: a whole column (no end row) or a whole row (no end column).

    Attributes:
        sheet_id: Numeric id of the sheet
        start_row_index: First row (0-indexed, inclusive)
        end_row_index: Row after the last row, or None for unbounded
        start_column_index: First column (0-indexed, inclusive)
        end_column_index: Column after the last column, or None for unbounded
    """
    sheet_id: int
    start_row_index: int
    end_row_index: Optional[int]
    start_column_index: int
    end_column_index: Optional[int]

    def __post_init__(self) -> None:
        if self.start_row_index < 0 or self.start_column_index < 0:
            raise ValidationError("Start indices must be non-negative (0-indexed)")
        if self.end_row_index is not None and self.end_row_index <= self.start_row_index:
            raise ValidationError("End row index must be greater than start row index")
        if self.end_column_index is not None and self.end_column_index <= self.start_column_index:
            raise ValidationError("End column index must be greater than start column index")

    @property
    def is_whole_column(self) -> bool:
        return self.end_row_index is None

    @property
    def is_whole_row(self) -> bool:
        return self.end_column_index is None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a Sheets API GridRange dictionary.

        Unbounded end indices are omitted, which is how the API expresses
        whole rows and whole columns.
        """
        data: Dict[str, Any] = {
            "sheetId": self.sheet_id,
            "startRowIndex": self.start_row_index,
        }
        if self.end_row_index is not None:
            data["endRowIndex"] = self.end_row_index
        data["startColumnIndex"] = self.start_column_index
        if self.end_column_index is not None:
            data["endColumnIndex"] = self.end_column_index
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GridRange":
        """Create from a Sheets API GridRange dictionary.

        The API omits zero-valued fields, so missing start indices default to 0.
        """
        return cls(
            sheet_id=data.get("sheetId", 0),
            start_row_index=data.get("startRowIndex", 0),
            end_row_index=data.get("endRowIndex"),
            start_column_index=data.get("startColumnIndex", 0),
            end_column_index=data.get("endColumnIndex"),
        )


@dataclass(frozen=True)
class SheetProperties:
    """A single sheet tab.

    Attributes:
        sheet_id: Numeric sheet id
        title: Sheet title (case-sensitive)
    """
    sheet_id: int
    title: str

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SheetProperties":
        return cls(sheet_id=data.get("sheetId", 0), title=data.get("title", ""))


@dataclass(frozen=True)
class NamedRange:
    """A named range persisted in spreadsheet metadata.

    Named ranges are never updated in place: a change is a delete of the old
    entry followed by an add under the same name, inside one batch.

    Attributes:
        named_range_id: Server-assigned id
        name: The symbolic name
        range: The region the name refers to
    """
    named_range_id: str
    name: str
    range: Optional[GridRange] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "NamedRange":
        grid = data.get("range")
        return cls(
            named_range_id=str(data.get("namedRangeId", "")),
            name=data.get("name", ""),
            range=GridRange.from_dict(grid) if grid else None,
        )


@dataclass(frozen=True)
class SpreadsheetMetadata:
    """Sheets and named ranges read from one metadata fetch.

    Attributes:
        spreadsheet_id: Id of the spreadsheet
        sheets: All sheet tabs in workbook order
        named_ranges: All named ranges
    """
    spreadsheet_id: str
    sheets: List[SheetProperties] = field(default_factory=list)
    named_ranges: List[NamedRange] = field(default_factory=list)

    @property
    def titles(self) -> List[str]:
        return [sheet.title for sheet in self.sheets]

    def find_sheet(self, title: str) -> Optional[SheetProperties]:
        """Return the sheet whose title matches exactly (case-sensitive)."""
        for sheet in self.sheets:
            if sheet.title == title:
                return sheet
        return None

    def find_named_range(self, name: str) -> Optional[NamedRange]:
        """Return the named range with the given name, if any."""
        for named_range in self.named_ranges:
            if named_range.name == name:
                return named_range
        return None

    @classmethod
    def from_dict(cls, spreadsheet_id: str, data: Dict[str, Any]) -> "SpreadsheetMetadata":
        """Create from a ``spreadsheets.get`` response body."""
        sheets = [
            SheetProperties.from_dict(sheet.get("properties") or {})
            for sheet in data.get("sheets") or []
        ]
        named_ranges = [NamedRange.from_dict(nr) for nr in data.get("namedRanges") or []]
        return cls(spreadsheet_id=spreadsheet_id, sheets=sheets, named_ranges=named_ranges)
