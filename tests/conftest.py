"""Shared pytest configuration and fixtures for sheetcraft tests."""

from unittest.mock import Mock

import gspread
import pytest
from gspread.exceptions import APIError

from sheetcraft.schema.model import FeatureSchema, FieldSchema
from sheetcraft.sheets.client import SheetsClient
from sheetcraft.spreadsheet.model import NamedRange, SheetProperties, SpreadsheetMetadata


def pytest_addoption(parser):
    parser.addoption(
        "--run-slow",
        action="store_true",
        default=False,
        help="Include tests marked @pytest.mark.slow (e.g. live Google Sheets)",
    )


def pytest_configure(config):
    config.addinivalue_line("markers", "slow: marks tests as slow (skipped unless --run-slow)")


def pytest_collection_modifyitems(config, items):
    if config.getoption("--run-slow"):
        return
    skip = pytest.mark.skip(reason="slow test, pass --run-slow to include")
    for item in items:
        if "slow" in item.keywords:
            item.add_marker(skip)


def make_api_error(code: int = 429, message: str = "Quota exceeded") -> APIError:
    """Build a gspread APIError the way the HTTP client raises it."""
    response = Mock()
    response.json.return_value = {
        "error": {"code": code, "message": message, "status": "RESOURCE_EXHAUSTED"}
    }
    return APIError(response)


@pytest.fixture
def mock_gc():
    """A gspread client whose HTTP client is a plain Mock."""
    gc = Mock(spec=gspread.Client)
    gc.http_client = Mock()
    return gc


@pytest.fixture
def sheets_client():
    """A SheetsClient double for pipeline tests."""
    return Mock(spec=SheetsClient)


@pytest.fixture
def todo_metadata() -> SpreadsheetMetadata:
    return SpreadsheetMetadata(
        spreadsheet_id="sheet-123",
        sheets=[SheetProperties(0, "Todos"), SheetProperties(42, "Sheet Name")],
        named_ranges=[],
    )


@pytest.fixture
def todo_metadata_with_range(todo_metadata) -> SpreadsheetMetadata:
    return SpreadsheetMetadata(
        spreadsheet_id=todo_metadata.spreadsheet_id,
        sheets=todo_metadata.sheets,
        named_ranges=[NamedRange(named_range_id="existing-id", name="TODO_RANGE")],
    )


@pytest.fixture
def task_schema() -> FeatureSchema:
    return FeatureSchema(
        fields=[
            FieldSchema(name="id", type="string", column="A", required=True),
            FieldSchema(name="title", type="string", column="B", required=True),
            FieldSchema(name="completed", type="boolean", column="C", storage_format="TRUE/FALSE"),
            FieldSchema(name="priority", type="number", column="D"),
        ],
        sheet_name="Tasks",
    )
