"""
Unit tests for spreadsheet model classes and batch-update requests.

Tests cover:
- GridRange: index validation, unbounded axes, API dictionary form
- SpreadsheetMetadata: parsing a spreadsheets.get body, lookups
- AddNamedRange / DeleteNamedRange / RepeatCellFormat: request bodies and
  dictionary round trips
"""

import pytest

from sheetcraft.exceptions import ValidationError
from sheetcraft.spreadsheet.model import GridRange, NamedRange, SpreadsheetMetadata
from sheetcraft.spreadsheet.operations import (
    AddNamedRange,
    DeleteNamedRange,
    RepeatCellFormat,
    op_from_dict,
    to_requests,
)


class TestGridRange:

    def test_negative_start_rejected(self):
        with pytest.raises(ValidationError):
            GridRange(0, -1, 2, 0, 2)

    def test_empty_row_span_rejected(self):
        with pytest.raises(ValidationError, match="End row index"):
            GridRange(0, 3, 3, 0, 2)

    def test_empty_column_span_rejected(self):
        with pytest.raises(ValidationError, match="End column index"):
            GridRange(0, 0, 2, 4, 1)

    def test_whole_column_omits_end_row(self):
        grid = GridRange(3, 0, None, 4, 5)

        assert grid.is_whole_column
        assert grid.to_dict() == {
            "sheetId": 3,
            "startRowIndex": 0,
            "startColumnIndex": 4,
            "endColumnIndex": 5,
        }

    def test_whole_row_omits_end_column(self):
        grid = GridRange(0, 0, 5, 0, None)

        assert grid.is_whole_row
        assert "endColumnIndex" not in grid.to_dict()

    def test_from_dict_defaults_missing_starts(self):
        grid = GridRange.from_dict({"sheetId": 9, "endRowIndex": 2, "endColumnIndex": 3})

        assert grid == GridRange(9, 0, 2, 0, 3)


class TestSpreadsheetMetadata:

    BODY = {
        "sheets": [
            {"properties": {"sheetId": 0, "title": "Todos"}},
            {"properties": {"sheetId": 1234, "title": "todos"}},
        ],
        "namedRanges": [
            {"namedRangeId": "abc", "name": "TODO_RANGE",
             "range": {"sheetId": 0, "startRowIndex": 1, "startColumnIndex": 0, "endColumnIndex": 3}},
            {"namedRangeId": "def", "name": "EMPTY"},
        ],
    }

    def test_parse(self):
        metadata = SpreadsheetMetadata.from_dict("sheet-123", self.BODY)

        assert metadata.spreadsheet_id == "sheet-123"
        assert metadata.titles == ["Todos", "todos"]
        assert metadata.named_ranges[0] == NamedRange("abc", "TODO_RANGE", GridRange(0, 1, None, 0, 3))
        assert metadata.named_ranges[1].range is None

    def test_sheet_lookup_is_case_sensitive(self):
        metadata = SpreadsheetMetadata.from_dict("sheet-123", self.BODY)

        assert metadata.find_sheet("todos").sheet_id == 1234
        assert metadata.find_sheet("TODOS") is None

    def test_named_range_lookup(self):
        metadata = SpreadsheetMetadata.from_dict("sheet-123", self.BODY)

        assert metadata.find_named_range("TODO_RANGE").named_range_id == "abc"
        assert metadata.find_named_range("OTHER") is None

    def test_empty_body(self):
        metadata = SpreadsheetMetadata.from_dict("sheet-123", {})

        assert metadata.titles == []
        assert metadata.named_ranges == []


class TestOperations:

    def test_add_named_range_request(self):
        op = AddNamedRange("TODO_RANGE", GridRange(0, 1, None, 0, 2))

        assert op.to_request() == {
            "addNamedRange": {
                "namedRange": {
                    "name": "TODO_RANGE",
                    "range": {"sheetId": 0, "startRowIndex": 1, "startColumnIndex": 0, "endColumnIndex": 2},
                }
            }
        }

    def test_delete_named_range_request(self):
        assert DeleteNamedRange("abc").to_request() == {"deleteNamedRange": {"namedRangeId": "abc"}}

    def test_repeat_cell_request(self):
        op = RepeatCellFormat(GridRange(0, 0, 1, 0, 3), {"textFormat": {"bold": True}})

        request = op.to_request()["repeatCell"]
        assert request["cell"] == {"userEnteredFormat": {"textFormat": {"bold": True}}}
        assert request["fields"] == "userEnteredFormat"

    def test_to_requests_keeps_order(self):
        ops = [DeleteNamedRange("abc"), AddNamedRange("TODO_RANGE", GridRange(0, 0, 2, 0, 2))]

        assert [list(r) for r in to_requests(ops)] == [["deleteNamedRange"], ["addNamedRange"]]

    @pytest.mark.parametrize("op", [
        AddNamedRange("TODO_RANGE", GridRange(0, 1, None, 0, 2)),
        DeleteNamedRange("abc"),
        RepeatCellFormat(GridRange(2, 0, 1, 0, 3), {"textFormat": {"bold": True}}),
    ])
    def test_dict_round_trip(self, op):
        assert op_from_dict(op.to_dict()) == op

    def test_unknown_type(self):
        with pytest.raises(ValueError, match="Unknown operation type"):
            op_from_dict({"type": "SetFormula"})
