"""
Google Sheets API client wrapper.

This module provides the remote sheet boundary used by inference, synchronization
and the table reader. All calls go through the HTTP client of an authenticated
gspread client and are made one at a time, blocking, in the caller's order.
"""

import logging
from typing import Any, Dict, List, Sequence

import gspread
import requests
from gspread.exceptions import APIError

from sheetcraft.exceptions import SheetsAPIError
from sheetcraft.spreadsheet.model import SpreadsheetMetadata
from sheetcraft.spreadsheet.operations import SpreadsheetOp, to_requests


logger = logging.getLogger(__name__)

_ROWS = {"majorDimension": "ROWS"}


class SheetsClient:
    """
    A wrapper around gspread for the Sheets API calls sheetcraft needs.

    Every gspread ``APIError`` and transport error is re-raised as SheetsAPIError.

    Attributes:
        gc: The authenticated gspread client instance
    """

    def __init__(self, gc: gspread.Client) -> None:
        """
        Initialize the Sheets client with an authenticated gspread client.

        Args:
            gc: An authenticated gspread client, e.g. from ``gspread.service_account()``
        """
        self.gc = gc

    @property
    def http(self):
        return self.gc.http_client

    def get_metadata(self, spreadsheet_id: str) -> SpreadsheetMetadata:
        """
        Read the sheets and named ranges of a spreadsheet (``spreadsheets.get``).

        Raises:
            SheetsAPIError: If the API call fails
        """
        logger.debug("Fetching metadata of %s", spreadsheet_id)
        try:
            data = self.http.fetch_sheet_metadata(spreadsheet_id)
        except (APIError, requests.RequestException) as e:
            raise SheetsAPIError(
                f"Failed to read metadata of spreadsheet '{spreadsheet_id}': {e}"
            ) from e
        return SpreadsheetMetadata.from_dict(spreadsheet_id, data)

    def get_values(self, spreadsheet_id: str, range_name: str) -> List[List[Any]]:
        """
        Read the values of one range, row-major.

        Returns:
            Rows of cell values; [] when the range is empty

        Raises:
            SheetsAPIError: If the API call fails
        """
        logger.debug("Reading %s from %s", range_name, spreadsheet_id)
        try:
            res = self.http.values_get(spreadsheet_id, range_name, params=dict(_ROWS))
        except (APIError, requests.RequestException) as e:
            raise SheetsAPIError(f"Failed to read range '{range_name}': {e}") from e
        return res.get("values", [])

    def batch_get_values(
        self, spreadsheet_id: str, ranges: Sequence[str]
    ) -> List[List[List[Any]]]:
        """
        Read several ranges in one call.

        Returns:
            One row list per requested range, in request order

        Raises:
            SheetsAPIError: If the API call fails
        """
        if not ranges:
            return []

        logger.debug("Reading %d ranges from %s", len(ranges), spreadsheet_id)
        try:
            res = self.http.values_batch_get(spreadsheet_id, list(ranges), params=dict(_ROWS))
        except (APIError, requests.RequestException) as e:
            raise SheetsAPIError(f"Failed to batch read {len(ranges)} ranges: {e}") from e

        value_ranges = res.get("valueRanges", [])
        return [
            value_ranges[i].get("values", []) if i < len(value_ranges) else []
            for i in range(len(ranges))
        ]

    def append_values(
        self, spreadsheet_id: str, range_name: str, rows: List[List[Any]]
    ) -> Dict[str, Any]:
        """
        Append rows after the last row of a range.

        Values are written as entered by a user, so "TRUE" stays a string.

        Raises:
            SheetsAPIError: If the API call fails
        """
        if not rows:
            return {}

        logger.debug("Appending %d rows to %s", len(rows), range_name)
        try:
            return self.http.values_append(
                spreadsheet_id,
                range_name,
                params={"valueInputOption": "RAW", "insertDataOption": "INSERT_ROWS"},
                body={"values": rows},
            )
        except (APIError, requests.RequestException) as e:
            raise SheetsAPIError(
                f"Failed to append {len(rows)} rows to '{range_name}': {e}"
            ) from e

    def batch_update(
        self, spreadsheet_id: str, ops: Sequence[SpreadsheetOp]
    ) -> Dict[str, Any]:
        """
        Submit operations as one atomic ``spreadsheets.batchUpdate`` request.

        Args:
            spreadsheet_id: Target spreadsheet
            ops: Operations, applied by the API in order

        Raises:
            SheetsAPIError: If the API call fails
        """
        if not ops:
            return {}

        body = {"requests": to_requests(list(ops))}
        logger.debug("Submitting %d requests to %s", len(ops), spreadsheet_id)
        try:
            return self.http.batch_update(spreadsheet_id, body)
        except (APIError, requests.RequestException) as e:
            raise SheetsAPIError(
                f"Failed to apply {len(ops)} requests to spreadsheet '{spreadsheet_id}': {e}"
            ) from e
