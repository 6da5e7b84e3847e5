"""
Schema model classes.

A FeatureSchema binds the columns of one sheet to the typed attributes of one
entity ("feature"):
- FieldType: The attribute types a column can hold
- FieldSchema: One column bound to one attribute
- FeatureSchema: The fields of one sheet plus their shared header row

Field declaration order carries no meaning. The canonical order is ascending
column index and it drives decoding, encoding, range bounds and default
generation.
"""

import re
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

from sheetcraft.exceptions import ValidationError
from sheetcraft.spreadsheet.a1 import (
    build_a1_range,
    column_index_to_letter,
    column_letter_to_index,
)


_IDENTIFIER_RE = re.compile(r"^[A-Za-z_$][A-Za-z0-9_$]*$")

DEFAULT_KEY_FIELD = "id"


class FieldType(str, Enum):
    """Attribute types supported by generated code."""
    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    DATE = "date"


@dataclass
class FieldSchema:
    """One spreadsheet column bound to one typed attribute.

    Attributes:
        name: Attribute identifier (camelCase)
        type: Attribute type
        column: Column letter(s) (A, B, ..., AA)
        row: Header row number (1-indexed)
        required: Whether generated code rejects a falsy value
        storage_format: How the value is stored in the sheet, e.g. "TRUE/FALSE"
        description: Free text, emitted as a doc comment
    """
    name: str
    type: FieldType
    column: str
    row: int = 1
    required: bool = False
    storage_format: Optional[str] = None
    description: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.name, str) or not _IDENTIFIER_RE.match(self.name):
            raise ValidationError(f"Invalid field name: {self.name!r}")
        try:
            self.type = FieldType(self.type)
        except ValueError:
            raise ValidationError(
                f"Invalid type {self.type!r} for field '{self.name}'"
            ) from None
        self.column = self.column.strip().upper() if isinstance(self.column, str) else self.column
        # raises ValidationError on bad letters
        column_letter_to_index(self.column)
        if not isinstance(self.row, int) or self.row <= 0:
            raise ValidationError(f"Row for field '{self.name}' must be a positive integer")

    @property
    def column_index(self) -> int:
        """Column as a 0-indexed number."""
        return column_letter_to_index(self.column)

    @property
    def sentinels(self) -> Optional[Tuple[str, str]]:
        """(true, false) strings from a boolean storage format like "TRUE/FALSE"."""
        if self.type != FieldType.BOOLEAN or not self.storage_format:
            return None
        true_text, sep, false_text = self.storage_format.partition("/")
        if not sep or not true_text or not false_text:
            return None
        return true_text, false_text

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation (wire keys)."""
        data: Dict[str, Any] = {
            "name": self.name,
            "type": self.type.value,
            "column": self.column,
            "row": self.row,
        }
        if self.required:
            data["required"] = True
        if self.storage_format is not None:
            data["sheetsFormat"] = self.storage_format
        if self.description is not None:
            data["description"] = self.description
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FieldSchema":
        """Create from dictionary representation.

        Raises:
            ValidationError: If a required key is missing or a value is invalid
        """
        try:
            return cls(
                name=data["name"],
                type=data.get("type", FieldType.STRING.value),
                column=data["column"],
                row=data.get("row", 1),
                required=bool(data.get("required", False)),
                storage_format=data.get("sheetsFormat", data.get("storage_format")),
                description=data.get("description"),
            )
        except KeyError as e:
            raise ValidationError(f"Field definition is missing {e}") from e


@dataclass
class FeatureSchema:
    """The column schema of one sheet.

    Invariant: all fields share one header row (see validate_schema).

    Attributes:
        fields: Field definitions, in any order
        sheet_name: Title of the sheet holding the data
        spreadsheet_id: Spreadsheet the schema was inferred from, if any
        range_name: Named range / constant name for the data range, if any
    """
    fields: List[FieldSchema]
    sheet_name: str
    spreadsheet_id: Optional[str] = None
    range_name: Optional[str] = None

    def __post_init__(self) -> None:
        if not isinstance(self.sheet_name, str) or not self.sheet_name.strip():
            raise ValidationError("Schema sheet name must be a non-empty string")
        self.fields = list(self.fields)

    @property
    def ordered_fields(self) -> List[FieldSchema]:
        """Fields in canonical (ascending column index) order."""
        return sorted(self.fields, key=lambda f: f.column_index)

    @property
    def header_row(self) -> int:
        """The shared header row, 1 for an empty schema."""
        return self.fields[0].row if self.fields else 1

    @property
    def natural_key(self) -> str:
        """Name of the lookup/update/delete key: the first field in canonical order."""
        ordered = self.ordered_fields
        return ordered[0].name if ordered else DEFAULT_KEY_FIELD

    @property
    def header_range(self) -> str:
        return compute_header_range(self)

    @property
    def data_range(self) -> str:
        return compute_data_range(self)

    def get_field(self, name: str) -> Optional[FieldSchema]:
        """Return the field with the given name, if any."""
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation, including the derived ranges."""
        data: Dict[str, Any] = {
            "sheetName": self.sheet_name,
            "fields": [f.to_dict() for f in self.fields],
        }
        if self.fields:
            data["headerRange"] = compute_header_range(self)
            data["dataRange"] = compute_data_range(self)
        if self.spreadsheet_id is not None:
            data["spreadsheetId"] = self.spreadsheet_id
        if self.range_name is not None:
            data["rangeName"] = self.range_name
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "FeatureSchema":
        """Create from dictionary representation.

        Derived keys (headerRange, dataRange) are ignored: ranges are always
        recomputed from the fields.
        """
        if "sheetName" not in data:
            raise ValidationError("Schema definition is missing 'sheetName'")
        return cls(
            fields=[FieldSchema.from_dict(f) for f in data.get("fields", [])],
            sheet_name=data["sheetName"],
            spreadsheet_id=data.get("spreadsheetId"),
            range_name=data.get("rangeName"),
        )


def validate_schema(schema: FeatureSchema) -> None:
    """Check the header-row invariant.

    Args:
        schema: Schema to check

    Raises:
        ValidationError: If fields declare different header rows
    """
    if not schema.fields:
        return

    first_row = schema.fields[0].row
    if any(f.row != first_row for f in schema.fields):
        raise ValidationError("All fields must have the same row number")


def compute_column_bounds(schema: FeatureSchema) -> Tuple[str, str]:
    """Return the first and last column letters of a schema.

    Columns are compared by index, so Z < AA.

    Raises:
        ValidationError: If the schema has no fields
    """
    if not schema.fields:
        raise ValidationError("Cannot compute column bounds of a schema without fields")

    indices = [f.column_index for f in schema.fields]
    return column_index_to_letter(min(indices)), column_index_to_letter(max(indices))


def compute_header_range(schema: FeatureSchema, quote: bool = False) -> str:
    """Return ``sheet!first{row}:last{row}`` for the header row.

    Args:
        schema: Source schema
        quote: Quote the sheet name for use in API calls
    """
    validate_schema(schema)
    first_col, last_col = compute_column_bounds(schema)
    row = schema.header_row
    return build_a1_range(schema.sheet_name, first_col, row, last_col, row, quote=quote)


def compute_data_range(schema: FeatureSchema, quote: bool = False) -> str:
    """Return ``sheet!first{row+1}:last`` for the data rows.

    The row axis is left open so the range keeps covering appended rows.

    Args:
        schema: Source schema
        quote: Quote the sheet name for use in API calls
    """
    validate_schema(schema)
    first_col, last_col = compute_column_bounds(schema)
    return build_a1_range(
        schema.sheet_name, first_col, schema.header_row + 1, last_col, quote=quote
    )
