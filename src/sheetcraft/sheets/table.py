"""
Typed access to a schema's rows.

SheetTable reads the data range of a FeatureSchema into a pandas DataFrame and
writes frames back, applying in Python the same decode and encode rules the
generated TypeScript mappers use:
- boolean with sentinel format: equality with the true sentinel / sentinel pair
- boolean without sentinel: truthiness of the cell text
- number: numeric parse, NaN when the cell does not parse
- string, date: unchanged
"""

import logging
from typing import Any, Dict, List, Optional

import pandas as pd

from sheetcraft.exceptions import NotFoundError, ValidationError
from sheetcraft.schema.model import (
    FeatureSchema,
    FieldSchema,
    FieldType,
    compute_data_range,
    compute_header_range,
)
from sheetcraft.spreadsheet.a1 import parse_range, split_sheet_and_range
from sheetcraft.spreadsheet.operations import RepeatCellFormat


logger = logging.getLogger(__name__)

HEADER_FORMAT = {"textFormat": {"bold": True}}


def decode_cell(field: FieldSchema, value: Any) -> Any:
    """Convert one cell value to the field's type."""
    if field.type == FieldType.BOOLEAN:
        sentinels = field.sentinels
        if sentinels:
            return value == sentinels[0]
        return bool(value)
    if field.type == FieldType.NUMBER:
        return pd.to_numeric(value, errors="coerce")
    return value


def encode_value(field: FieldSchema, value: Any) -> Any:
    """Convert one attribute value to its cell value."""
    sentinels = field.sentinels
    if sentinels:
        return sentinels[0] if value else sentinels[1]
    return value


class SheetTable:
    """Rows of one schema in one spreadsheet.

    Args:
        client: Sheets boundary (see sheetcraft.sheets.client.SheetsClient)
        spreadsheet_id: Spreadsheet holding the rows
        schema: Schema describing the rows
    """

    def __init__(self, client: Any, spreadsheet_id: str, schema: FeatureSchema):
        if not schema.fields:
            raise ValidationError("SheetTable requires a schema with fields")
        self.client = client
        self.spreadsheet_id = spreadsheet_id
        self.schema = schema
        self._first_index = schema.ordered_fields[0].column_index

    @property
    def columns(self) -> List[str]:
        return [f.name for f in self.schema.ordered_fields]

    def decode_row(self, row: List[Any]) -> Dict[str, Any]:
        """Decode one row array positioned at the schema's first column."""
        record = {}
        for f in self.schema.ordered_fields:
            offset = f.column_index - self._first_index
            value = row[offset] if offset < len(row) else ""
            record[f.name] = decode_cell(f, value)
        return record

    def encode_record(self, record: Dict[str, Any]) -> List[Any]:
        """Encode one entity into a row array; uncovered columns are empty strings."""
        ordered = self.schema.ordered_fields
        width = ordered[-1].column_index - self._first_index + 1
        row: List[Any] = [""] * width
        for f in ordered:
            value = record.get(f.name)
            if value is None or (isinstance(value, float) and pd.isna(value)):
                value = ""
            row[f.column_index - self._first_index] = encode_value(f, value)
        return row

    def read_frame(self) -> pd.DataFrame:
        """Read every entity into a DataFrame with one column per field.

        Rows whose first cell is blank are skipped.
        """
        data_range = compute_data_range(self.schema, quote=True)
        rows = self.client.get_values(self.spreadsheet_id, data_range)
        records = [
            self.decode_row(row)
            for row in rows
            if row and str(row[0]).strip() != ""
        ]
        logger.debug("Read %d rows from %s", len(records), data_range)
        return pd.DataFrame.from_records(records, columns=self.columns)

    def to_rows(self, frame: pd.DataFrame) -> List[List[Any]]:
        """Encode a DataFrame into row arrays. Missing columns are written empty."""
        return [self.encode_record(record) for record in frame.to_dict(orient="records")]

    def append_frame(self, frame: pd.DataFrame) -> int:
        """Append the rows of a DataFrame after the existing data.

        Returns:
            Number of rows appended
        """
        rows = self.to_rows(frame)
        if rows:
            self.client.append_values(
                self.spreadsheet_id, compute_data_range(self.schema, quote=True), rows
            )
        return len(rows)

    def format_header(self, cell_format: Optional[Dict[str, Any]] = None) -> RepeatCellFormat:
        """Apply a cell format (bold by default) to the header row.

        Raises:
            NotFoundError: If the schema's sheet does not exist
        """
        sheet_name, cell_range = split_sheet_and_range(compute_header_range(self.schema, quote=True))
        metadata = self.client.get_metadata(self.spreadsheet_id)
        sheet = metadata.find_sheet(sheet_name)
        if sheet is None:
            raise NotFoundError(f'Sheet "{sheet_name}" not found in spreadsheet.')

        op = RepeatCellFormat(parse_range(cell_range, sheet.sheet_id), cell_format or HEADER_FORMAT)
        self.client.batch_update(self.spreadsheet_id, [op])
        return op
