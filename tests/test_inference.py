"""
Unit tests for schema inference.

The Sheets boundary is a Mock(spec=SheetsClient); the translation service is a
plain Mock. No real API calls are made.
"""

from unittest.mock import Mock, call

import pytest

from sheetcraft.exceptions import (
    HeaderMismatchError,
    NotFoundError,
    SheetsAPIError,
    ValidationError,
)
from sheetcraft.schema.inference import InferenceStage, SchemaInferrer, build_fields
from sheetcraft.schema.model import FieldType
from sheetcraft.schema.translation import HeaderTranslator
from sheetcraft.spreadsheet.model import SheetProperties, SpreadsheetMetadata


def _metadata(*titles):
    return SpreadsheetMetadata(
        spreadsheet_id="sheet-123",
        sheets=[SheetProperties(i, t) for i, t in enumerate(titles)],
    )


@pytest.fixture
def service():
    return Mock()


@pytest.fixture
def inferrer(sheets_client, service):
    return SchemaInferrer(sheets_client, HeaderTranslator(service=service))


class TestInferenceSuccess:

    def test_dictionary_headers_need_no_service(self, inferrer, sheets_client, service):
        sheets_client.get_metadata.return_value = _metadata("Tasks")
        sheets_client.get_values.return_value = [["ID", "名前"]]

        result = inferrer.infer("sheet-123", "Tasks", ["ID", "名前"], "A1", lang="ja")

        assert [f.name for f in result.schema.fields] == ["id", "name"]
        assert [f.column for f in result.schema.fields] == ["A", "B"]
        assert all(f.type is FieldType.STRING for f in result.schema.fields)
        assert result.schema.fields[1].description == "source(ja): 名前"
        service.translate.assert_not_called()
        sheets_client.get_values.assert_called_once_with("sheet-123", "Tasks!A1:B1")

        assert result.header_range == "Tasks!A1:B1"
        assert result.data_range == "Tasks!A2:B"
        assert result.debug["translationMethod"] == "dictionary"
        assert result.debug["exactSheetName"] == "Tasks"
        assert result.schema.spreadsheet_id == "sheet-123"

    def test_without_language_uses_original_text(self, inferrer, sheets_client, service):
        sheets_client.get_metadata.return_value = _metadata("Tasks")
        sheets_client.get_values.return_value = [["Title", " Due date "]]

        result = inferrer.infer("sheet-123", "Tasks", ["Title", "Due date"], "A1")

        assert [f.name for f in result.schema.fields] == ["title", "dueDate"]
        assert result.schema.fields[0].description == "Title"
        assert "translationMethod" not in result.debug
        service.translate.assert_not_called()

    def test_untranslatable_header_gets_positional_name(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("Tasks")
        sheets_client.get_values.return_value = [["Title", "★"]]

        result = inferrer.infer("sheet-123", "Tasks", ["Title", "★"], "A1")

        assert [f.name for f in result.schema.fields] == ["title", "field2"]

    def test_deep_start_cell(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("Tasks")
        sheets_client.get_values.return_value = [["Title", "Owner"]]

        result = inferrer.infer("sheet-123", "Tasks", ["Title", "Owner"], "C3")

        assert [f.column for f in result.schema.fields] == ["C", "D"]
        assert all(f.row == 3 for f in result.schema.fields)
        assert result.header_range == "Tasks!C3:D3"
        assert result.data_range == "Tasks!C4:D"
        assert result.debug["headerRowIndex"] == 2
        assert result.debug["startColIndex"] == 2

    def test_non_ascii_sheet_name_is_quoted(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("【東美】メール")
        sheets_client.get_values.return_value = [["件名", "名前"]]

        result = inferrer.infer("sheet-123", "【東美】メール", ["件名", "名前"], "A1", lang="ja")

        assert result.header_range == "'【東美】メール'!A1:B1"
        assert result.data_range == "'【東美】メール'!A2:B"
        assert [f.name for f in result.schema.fields] == ["subject", "name"]

    def test_service_translation(self, inferrer, sheets_client, service):
        sheets_client.get_metadata.return_value = _metadata("Tasks")
        sheets_client.get_values.return_value = [["好きな色"]]
        service.translate.return_value = ["Favorite color"]

        result = inferrer.infer("sheet-123", "Tasks", ["好きな色"], "A1", lang="ja")

        assert result.schema.fields[0].name == "favoriteColor"
        service.translate.assert_called_once()


class TestDegradedPaths:

    def test_metadata_failure_uses_given_name(self, inferrer, sheets_client):
        sheets_client.get_metadata.side_effect = SheetsAPIError("quota")
        sheets_client.get_values.return_value = [["Title"]]

        result = inferrer.infer("sheet-123", "Tasks", ["Title"], "A1")

        assert result.schema.sheet_name == "Tasks"
        assert result.debug["metadataWarning"] == "quota"
        assert "metadataFetched" not in result.debug

    def test_header_fetch_retries_with_unquoted_range(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("My Tasks")
        sheets_client.get_values.side_effect = [SheetsAPIError("bad range"), [["Title"]]]

        result = inferrer.infer("sheet-123", "My Tasks", ["Title"], "A1")

        assert sheets_client.get_values.call_args_list == [
            call("sheet-123", "'My Tasks'!A1:A1"),
            call("sheet-123", "My Tasks!A1:A1"),
        ]
        assert result.debug["headerRangeFallback"] == "My Tasks!A1:A1"
        assert "headerRangeError" not in result.debug

    def test_header_fetch_failing_twice_is_a_mismatch(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("Tasks")
        sheets_client.get_values.side_effect = SheetsAPIError("down")

        with pytest.raises(HeaderMismatchError) as exc_info:
            inferrer.infer("sheet-123", "Tasks", ["Title"], "A1")

        assert sheets_client.get_values.call_count == 2
        assert exc_info.value.debug["headerRangeErrorFallback"] == "down"


class TestInferenceFailures:

    def test_header_mismatch(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("Tasks")
        sheets_client.get_values.return_value = [["X", "Y"]]

        with pytest.raises(HeaderMismatchError, match="header row not found") as exc_info:
            inferrer.infer("sheet-123", "Tasks", ["ID", "名前"], "A1", lang="ja")

        debug = exc_info.value.debug
        assert debug["failedStage"] == InferenceStage.VALIDATE_MATCH.value
        assert debug["headerRangeInput"] == "Tasks!A1:B1"

    def test_short_header_row_is_a_mismatch(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("Tasks")
        sheets_client.get_values.return_value = [["ID"]]

        with pytest.raises(HeaderMismatchError):
            inferrer.infer("sheet-123", "Tasks", ["ID", "名前"], "A1")

    def test_sheet_not_found(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("Todos", "Archive")

        with pytest.raises(NotFoundError, match="Available sheets: Todos, Archive") as exc_info:
            inferrer.infer("sheet-123", "todos", ["ID"], "A1")

        assert exc_info.value.debug["sheetNotFound"] is True
        sheets_client.get_values.assert_not_called()

    def test_malformed_start_cell(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("Tasks")

        with pytest.raises(ValidationError, match="invalid headerStartCell format") as exc_info:
            inferrer.infer("sheet-123", "Tasks", ["ID"], "1A")

        assert exc_info.value.debug["failedStage"] == InferenceStage.PARSE_HEADER_CELL.value

    @pytest.mark.parametrize("args", [
        ("", "Tasks", ["ID"], "A1"),
        ("sheet-123", "", ["ID"], "A1"),
        ("sheet-123", "Tasks", [], "A1"),
        ("sheet-123", "Tasks", ["ID"], ""),
    ])
    def test_missing_arguments(self, inferrer, sheets_client, args):
        with pytest.raises(ValidationError):
            inferrer.infer(*args)
        sheets_client.get_metadata.assert_not_called()


class TestBuildFields:

    def test_repeated_identifiers_get_suffixes(self):
        fields = build_fields(["Name", "name", "NAME", "Title"], ["Name", "name", "NAME", "Title"], 0, 1)

        assert [f.name for f in fields] == ["name", "name2", "name3", "title"]
        assert [f.column for f in fields] == ["A", "B", "C", "D"]

    def test_suffix_skips_taken_names(self):
        fields = build_fields(["name2", "name", "name"], ["name2", "name", "name"], 2, 3)

        assert [f.name for f in fields] == ["name2", "name", "name3"]
        assert all(f.row == 3 for f in fields)

    def test_inferred_schema_has_unique_fields(self, inferrer, sheets_client):
        sheets_client.get_metadata.return_value = _metadata("Tasks")
        sheets_client.get_values.return_value = [["Name", "name"]]

        result = inferrer.infer("sheet-123", "Tasks", ["Name", "name"], "A1")

        assert [f.name for f in result.schema.fields] == ["name", "name2"]
        assert [f.description for f in result.schema.fields] == ["Name", "name"]
