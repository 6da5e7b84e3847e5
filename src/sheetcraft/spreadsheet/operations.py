"""
Spreadsheet batch-update request classes.

This module defines the structured change operations sheetcraft submits through
``spreadsheets.batchUpdate``:
- AddNamedRange: Register a named range over a GridRange
- DeleteNamedRange: Remove a named range by id
- RepeatCellFormat: Apply a user-entered format to every cell of a GridRange

A batch is an ordered list of these operations applied atomically by the API.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Union

from sheetcraft.spreadsheet.model import GridRange


@dataclass(frozen=True)
class AddNamedRange:
    """Register a named range.

    Attributes:
        name: The symbolic name for the range
        range: The region the name refers to
    """
    name: str
    range: GridRange

    def to_request(self) -> Dict[str, Any]:
        """Convert to a Sheets API request object."""
        return {
            "addNamedRange": {
                "namedRange": {
                    "name": self.name,
                    "range": self.range.to_dict(),
                }
            }
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "type": "AddNamedRange",
            "name": self.name,
            "range": self.range.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AddNamedRange":
        """Create from dictionary representation."""
        return cls(name=data["name"], range=GridRange.from_dict(data["range"]))


@dataclass(frozen=True)
class DeleteNamedRange:
    """Remove a named range.

    Attributes:
        named_range_id: Server-assigned id of the named range
    """
    named_range_id: str

    def to_request(self) -> Dict[str, Any]:
        """Convert to a Sheets API request object."""
        return {"deleteNamedRange": {"namedRangeId": self.named_range_id}}

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {"type": "DeleteNamedRange", "named_range_id": self.named_range_id}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DeleteNamedRange":
        """Create from dictionary representation."""
        return cls(named_range_id=data["named_range_id"])


@dataclass(frozen=True)
class RepeatCellFormat:
    """Apply a user-entered cell format to a region.

    Attributes:
        range: Target region
        format: Sheets API CellFormat dictionary (e.g. {"textFormat": {"bold": True}})
    """
    range: GridRange
    format: Dict[str, Any]

    def to_request(self) -> Dict[str, Any]:
        """Convert to a Sheets API request object."""
        return {
            "repeatCell": {
                "range": self.range.to_dict(),
                "cell": {"userEnteredFormat": self.format},
                "fields": "userEnteredFormat",
            }
        }

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary representation."""
        return {
            "type": "RepeatCellFormat",
            "range": self.range.to_dict(),
            "format": self.format,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RepeatCellFormat":
        """Create from dictionary representation."""
        return cls(range=GridRange.from_dict(data["range"]), format=data["format"])


# Type alias for all operation types
SpreadsheetOp = Union[AddNamedRange, DeleteNamedRange, RepeatCellFormat]


def op_from_dict(data: Dict[str, Any]) -> SpreadsheetOp:
    """Deserialize an operation from dictionary representation.

    Args:
        data: Dictionary with 'type' key indicating operation type

    Returns:
        The corresponding operation object

    Raises:
        ValueError: If the operation type is unknown
    """
    op_type = data.get("type")
    if op_type == "AddNamedRange":
        return AddNamedRange.from_dict(data)
    elif op_type == "DeleteNamedRange":
        return DeleteNamedRange.from_dict(data)
    elif op_type == "RepeatCellFormat":
        return RepeatCellFormat.from_dict(data)
    raise ValueError(f"Unknown operation type: {op_type}")


def to_requests(ops: List[SpreadsheetOp]) -> List[Dict[str, Any]]:
    """Convert operations to the ``requests`` list of one batchUpdate body, in order."""
    return [op.to_request() for op in ops]
