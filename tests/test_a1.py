"""
Unit tests for the A1 range algebra.

Covers column letter conversion, range parsing into GridRange, range text
normalization, sheet/range splitting and sheet name quoting.
"""

import pytest

from sheetcraft.exceptions import ValidationError
from sheetcraft.spreadsheet.a1 import (
    build_a1_range,
    column_index_to_letter,
    column_letter_to_index,
    format_sheet_name_for_range,
    normalize_range_text,
    parse_cell_reference,
    parse_range,
    split_sheet_and_range,
)
from sheetcraft.spreadsheet.model import GridRange


class TestColumnConversion:

    @pytest.mark.parametrize("letters,index", [
        ("A", 0), ("B", 1), ("Z", 25), ("AA", 26), ("AZ", 51), ("BA", 52), ("ZZ", 701), ("AAA", 702),
    ])
    def test_letter_to_index(self, letters, index):
        assert column_letter_to_index(letters) == index
        assert column_index_to_letter(index) == letters

    def test_lowercase_letters_accepted(self):
        assert column_letter_to_index("aa") == 26

    def test_round_trip_first_thousand(self):
        for i in range(1000):
            assert column_letter_to_index(column_index_to_letter(i)) == i

    @pytest.mark.parametrize("bad", ["", "A1", "1", "A-B", " "])
    def test_invalid_letters_rejected(self, bad):
        with pytest.raises(ValidationError):
            column_letter_to_index(bad)

    def test_negative_index_rejected(self):
        with pytest.raises(ValidationError):
            column_index_to_letter(-1)


class TestParseRange:

    def test_rectangle(self):
        grid = parse_range("A1:B2", 7)
        assert grid == GridRange(7, 0, 2, 0, 2)

    def test_whole_column(self):
        grid = parse_range("E:E", 0)
        assert grid.start_row_index == 0
        assert grid.end_row_index is None
        assert grid.start_column_index == 4
        assert grid.end_column_index == 5
        assert grid.is_whole_column

    def test_whole_row(self):
        grid = parse_range("1:5", 0)
        assert grid.start_row_index == 0
        assert grid.end_row_index == 5
        assert grid.start_column_index == 0
        assert grid.end_column_index is None
        assert grid.is_whole_row

    def test_whole_row_has_no_end_column_in_request(self):
        assert "endColumnIndex" not in parse_range("1:5", 0).to_dict()

    def test_open_ended_data_range(self):
        grid = parse_range("A2:C", 3)
        assert grid == GridRange(3, 1, None, 0, 3)

    def test_single_cell(self):
        assert parse_range("B2", 0) == GridRange(0, 1, 2, 1, 2)

    def test_double_letter_columns(self):
        grid = parse_range("Z1:AA10", 0)
        assert grid.start_column_index == 25
        assert grid.end_column_index == 27

    def test_malformed_coordinate(self):
        with pytest.raises(ValidationError, match="Invalid coordinate: 1A"):
            parse_range("1A:B2", 0)

    def test_too_many_parts(self):
        with pytest.raises(ValidationError):
            parse_range("A1:B2:C3", 0)

    def test_empty(self):
        with pytest.raises(ValidationError):
            parse_range("  ", 0)


class TestRangeText:

    def test_shell_escape_removed(self):
        assert normalize_range_text("Todos\\!A1:B2") == "Todos!A1:B2"

    @pytest.mark.parametrize("raw", ['"Todos!A1:B2"', "'Todos!A1:B2'"])
    def test_wrapping_quotes_removed(self, raw):
        assert normalize_range_text(raw) == "Todos!A1:B2"

    def test_quoted_sheet_name_kept(self):
        assert normalize_range_text("'Sheet Name'!A1:B2") == "'Sheet Name'!A1:B2"

    def test_split_plain(self):
        assert split_sheet_and_range("Todos!A1:B2") == ("Todos", "A1:B2")

    def test_split_quoted(self):
        assert split_sheet_and_range("'Sheet Name'!A1:B2") == ("Sheet Name", "A1:B2")

    def test_split_embedded_quote(self):
        assert split_sheet_and_range("'Bob''s'!A1") == ("Bob's", "A1")

    def test_split_first_separator_only(self):
        assert split_sheet_and_range("Todos!A1!B2") == ("Todos", "A1!B2")

    @pytest.mark.parametrize("bad", ["Todos", "!A1:B2", "Todos!"])
    def test_split_rejects_missing_parts(self, bad):
        with pytest.raises(ValidationError, match="SheetName!A1:B2"):
            split_sheet_and_range(bad)


class TestSheetNameQuoting:

    def test_plain_name_unchanged(self):
        assert format_sheet_name_for_range("Sheet_1") == "Sheet_1"

    def test_space_quoted(self):
        assert format_sheet_name_for_range("My Tasks") == "'My Tasks'"

    def test_non_ascii_quoted(self):
        assert format_sheet_name_for_range("【東美】メール") == "'【東美】メール'"

    def test_embedded_quote_doubled(self):
        assert format_sheet_name_for_range("Bob's") == "'Bob''s'"

    def test_build_range(self):
        assert build_a1_range("My Tasks", "A", 2, "C") == "'My Tasks'!A2:C"
        assert build_a1_range("My Tasks", "A", 1, "C", 1, quote=False) == "My Tasks!A1:C1"


class TestCellReference:

    def test_bare_cell_uses_fallback_sheet(self):
        ref = parse_cell_reference("A3", "Tasks")
        assert (ref.sheet, ref.column, ref.row) == ("Tasks", "A", 3)
        assert ref.column_index == 0

    def test_qualified_cell(self):
        ref = parse_cell_reference("'My Tasks'!C10", "Other")
        assert (ref.sheet, ref.column, ref.row) == ("My Tasks", "C", 10)

    @pytest.mark.parametrize("bad", ["3A", "A", "A1:B2", "a1"])
    def test_malformed(self, bad):
        with pytest.raises(ValidationError, match="invalid headerStartCell format"):
            parse_cell_reference(bad, "Tasks")
