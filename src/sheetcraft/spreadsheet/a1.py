"""
A1 notation range algebra.

This module converts between the three ways a spreadsheet location is written:
- Column letters (A, Z, AA) and zero-based column indices (0, 25, 26)
- A1 range strings (A1:C10, E:E, 1:5) and structured GridRange values
- Raw user-supplied range text (possibly shell-escaped or quoted) and its
  sheet-name / cell-range parts

IMPORTANT: indices are 0-indexed (Python and Sheets API convention) while A1
strings are 1-indexed. GridRange end indices are exclusive.
"""

import re
from dataclasses import dataclass
from typing import Optional, Tuple

from sheetcraft.exceptions import ValidationError
from sheetcraft.spreadsheet.model import GridRange


SHEET_SEPARATOR = "!"
RANGE_SEPARATOR = ":"

_LETTERS_RE = re.compile(r"^[A-Za-z]+$")
_DIGITS_RE = re.compile(r"^\d+$")
_COORD_RE = re.compile(r"^([A-Za-z]+)(\d+)$")
_PLAIN_SHEET_NAME_RE = re.compile(r"[^A-Za-z0-9_]")
_CELL_WITH_SHEET_RE = re.compile(r"^(?P<sheet>[^!]+)!(?P<column>[A-Z]+)(?P<row>\d+)$")


@dataclass(frozen=True)
class CellReference:
    """A single-cell reference such as ``Sheet1!A3``.

    Attributes:
        sheet: Sheet title (unquoted)
        column: Column letters, upper-case
        row: Row number (1-indexed)
    """
    sheet: str
    column: str
    row: int

    @property
    def column_index(self) -> int:
        return column_letter_to_index(self.column)


def column_letter_to_index(letters: str) -> int:
    """Convert column letter(s) to a 0-indexed column number.

    The letters are read as a base-26 numeral without a zero digit (A=1 ... Z=26).

    Args:
        letters: Column letter(s) (A, Z, AA, etc.), case-insensitive

    Returns:
        Column index (0-indexed: A = 0, Z = 25, AA = 26)

    Raises:
        ValidationError: If letters is empty or contains a non-letter
    """
    if not isinstance(letters, str) or not _LETTERS_RE.match(letters):
        raise ValidationError(f"Invalid column letters: {letters!r}")

    acc = 0
    for char in letters.upper():
        acc = acc * 26 + (ord(char) - 64)
    return acc - 1


def column_index_to_letter(index: int) -> str:
    """Convert a 0-indexed column number to column letter(s).

    Args:
        index: Column index (0 = A, 25 = Z, 26 = AA)

    Returns:
        Column letter(s) in A1 notation

    Raises:
        ValidationError: If index is negative
    """
    if index < 0:
        raise ValidationError(f"Column index must be non-negative, got {index}")

    n = index + 1
    letters = ""
    while n > 0:
        remainder = (n - 1) % 26
        letters = chr(65 + remainder) + letters
        n = (n - 1) // 26
    return letters


def _parse_coordinate(coord: str) -> Tuple[int, int]:
    match = _COORD_RE.match(coord)
    if not match:
        raise ValidationError(f"Invalid coordinate: {coord}")
    letters, digits = match.groups()
    return int(digits) - 1, column_letter_to_index(letters)


def parse_range(text: str, sheet_id: int) -> GridRange:
    """Parse the cell part of an A1 range into a GridRange.

    Four shapes are recognised after splitting on ``:``:
    - Whole columns (``E:E``, ``A:C``): rows unbounded
    - Whole rows (``1:5``): columns unbounded
    - Rectangles (``A1:B2``): both axes bounded
    - Open-ended data ranges (``A2:C``): columns bounded, rows from the start
      coordinate down

    A single coordinate (``B2``) is treated as a one-cell rectangle.

    Args:
        text: Cell range without sheet name (e.g. "A1:B2")
        sheet_id: Numeric id of the sheet the range belongs to

    Returns:
        GridRange with exclusive end indices

    Raises:
        ValidationError: If the text is empty or a coordinate is malformed
    """
    text = text.strip()
    if not text:
        raise ValidationError("Empty range notation")

    parts = [p.strip() for p in text.split(RANGE_SEPARATOR)]
    if len(parts) == 1:
        parts = [parts[0], parts[0]]
    if len(parts) != 2:
        raise ValidationError(f"Invalid range notation: {text}")

    start, end = parts

    if _LETTERS_RE.match(start) and _LETTERS_RE.match(end):
        return GridRange(
            sheet_id=sheet_id,
            start_row_index=0,
            end_row_index=None,
            start_column_index=column_letter_to_index(start),
            end_column_index=column_letter_to_index(end) + 1,
        )

    if _DIGITS_RE.match(start) and _DIGITS_RE.match(end):
        return GridRange(
            sheet_id=sheet_id,
            start_row_index=int(start) - 1,
            end_row_index=int(end),
            start_column_index=0,
            end_column_index=None,
        )

    start_row, start_col = _parse_coordinate(start)

    if _LETTERS_RE.match(end):
        # open-ended data range such as A2:C
        return GridRange(
            sheet_id=sheet_id,
            start_row_index=start_row,
            end_row_index=None,
            start_column_index=start_col,
            end_column_index=column_letter_to_index(end) + 1,
        )

    end_row, end_col = _parse_coordinate(end)
    return GridRange(
        sheet_id=sheet_id,
        start_row_index=start_row,
        end_row_index=end_row + 1,
        start_column_index=start_col,
        end_column_index=end_col + 1,
    )


def normalize_range_text(raw: str) -> str:
    """Clean up range text received from a shell or a tool call.

    - ``Todos\\!A1:B2`` (shell-escaped separator) becomes ``Todos!A1:B2``
    - ``"Todos!A1:B2"`` or ``'Todos!A1:B2'`` loses its wrapping quotes
    - ``'Sheet Name'!A1:B2`` is left alone: the quote closing right before the
      separator belongs to the sheet name

    Args:
        raw: Range text as received

    Returns:
        Normalized range text
    """
    text = raw.strip().replace("\\" + SHEET_SEPARATOR, SHEET_SEPARATOR)

    if len(text) >= 2 and text[0] in ("'", '"') and text[-1] == text[0]:
        quote = text[0]
        if quote + SHEET_SEPARATOR not in text[:-1]:
            text = text[1:-1].strip()

    return text


def split_sheet_and_range(text: str) -> Tuple[str, str]:
    """Split ``Sheet!A1:B2`` into its sheet name and cell range.

    Splits at the first separator only. One layer of single quotes is removed
    from the sheet name and doubled quotes inside it are collapsed.

    Args:
        text: Normalized range text

    Returns:
        (sheet_name, cell_range)

    Raises:
        ValidationError: If the separator is missing or either side is empty
    """
    idx = text.find(SHEET_SEPARATOR)
    if idx == -1:
        raise ValidationError('Range must be in format "SheetName!A1:B2"')

    sheet_name = text[:idx].strip()
    cell_range = text[idx + 1:].strip()

    if len(sheet_name) >= 2 and sheet_name.startswith("'") and sheet_name.endswith("'"):
        sheet_name = sheet_name[1:-1].replace("''", "'")

    if not sheet_name or not cell_range:
        raise ValidationError('Range must be in format "SheetName!A1:B2"')

    return sheet_name, cell_range


def format_sheet_name_for_range(name: str) -> str:
    """Quote a sheet name for use in an A1 range string when needed.

    Args:
        name: Sheet title

    Returns:
        The trimmed name, wrapped in single quotes (with embedded quotes doubled)
        if it contains any character outside ``[A-Za-z0-9_]``
    """
    normalized = name.strip()
    if _PLAIN_SHEET_NAME_RE.search(normalized):
        escaped = normalized.replace("'", "''")
        return f"'{escaped}'"
    return normalized


def parse_cell_reference(ref: str, fallback_sheet: str) -> CellReference:
    """Parse ``Sheet!A3`` or bare ``A3`` into a CellReference.

    Args:
        ref: Cell reference, with or without sheet name
        fallback_sheet: Sheet used when ref has no sheet part

    Returns:
        CellReference with the unquoted sheet name

    Raises:
        ValidationError: If the reference is not a single cell
    """
    ref = ref.strip()
    cell_with_sheet = ref if SHEET_SEPARATOR in ref else f"{fallback_sheet}{SHEET_SEPARATOR}{ref}"

    match = _CELL_WITH_SHEET_RE.match(cell_with_sheet)
    if not match:
        raise ValidationError("invalid headerStartCell format")

    sheet = match.group("sheet")
    if len(sheet) >= 2 and sheet.startswith("'") and sheet.endswith("'"):
        sheet = sheet[1:-1].replace("''", "'")

    return CellReference(
        sheet=sheet,
        column=match.group("column"),
        row=int(match.group("row")),
    )


def build_a1_range(
    sheet: str,
    start_col: str,
    start_row: int,
    end_col: str,
    end_row: Optional[int] = None,
    quote: bool = True,
) -> str:
    """Build a sheet-qualified A1 range string.

    Args:
        sheet: Sheet title
        start_col: First column letter(s)
        start_row: First row (1-indexed)
        end_col: Last column letter(s)
        end_row: Last row (1-indexed); None leaves the row axis open (``A2:B``)
        quote: Quote the sheet name with format_sheet_name_for_range

    Returns:
        A1 range string (e.g. "Tasks!A1:B1" or "'My Tasks'!A2:B")
    """
    sheet_part = format_sheet_name_for_range(sheet) if quote else sheet
    end = f"{end_col}{end_row}" if end_row is not None else end_col
    return f"{sheet_part}{SHEET_SEPARATOR}{start_col}{start_row}{RANGE_SEPARATOR}{end}"
