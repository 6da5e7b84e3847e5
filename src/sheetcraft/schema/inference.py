"""
Schema inference from a live sheet.

SchemaInferrer reads the header row of a sheet, checks it against the headers the
caller expects, optionally translates the header texts and builds a FeatureSchema.
It runs as a strictly sequential pipeline of stages:

    RESOLVE_SHEET -> PARSE_HEADER_CELL -> FETCH_HEADER_ROW -> VALIDATE_MATCH
    -> TRANSLATE -> BUILD_FIELDS -> DONE

Every invocation owns one DebugLedger. When a stage fails the ledger contents are
attached to the raised error; degraded paths are recorded in the ledger and logged.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence

from sheetcraft.exceptions import (
    HeaderMismatchError,
    NotFoundError,
    SheetcraftError,
    TransientServiceError,
    ValidationError,
)
from sheetcraft.schema.model import FeatureSchema, FieldSchema, FieldType
from sheetcraft.schema.translation import HeaderTranslator
from sheetcraft.spreadsheet.a1 import (
    CellReference,
    build_a1_range,
    column_index_to_letter,
    parse_cell_reference,
)
from sheetcraft.utils.debug import DebugLedger
from sheetcraft.utils.naming import to_camel_case


logger = logging.getLogger(__name__)

HEADER_NOT_FOUND = "header row not found in the provided sheet/headers"


class InferenceStage(Enum):
    RESOLVE_SHEET = "resolve_sheet"
    PARSE_HEADER_CELL = "parse_header_cell"
    FETCH_HEADER_ROW = "fetch_header_row"
    VALIDATE_MATCH = "validate_match"
    TRANSLATE = "translate"
    BUILD_FIELDS = "build_fields"
    DONE = "done"


@dataclass
class InferenceResult:
    """Outcome of a successful inference.

    Attributes:
        schema: The inferred schema
        header_range: Header row range with the sheet name quoted for API use
        data_range: Open-ended data range with the sheet name quoted for API use
        debug: Ledger contents collected during the run
    """
    schema: FeatureSchema
    header_range: str
    data_range: str
    debug: Dict[str, Any]

    def to_dict(self) -> Dict[str, Any]:
        data = self.schema.to_dict()
        data["headerRange"] = self.header_range
        data["dataRange"] = self.data_range
        return data


class SchemaInferrer:
    """Infer a FeatureSchema from the header row of a sheet.

    Args:
        client: Sheets boundary providing ``get_metadata`` and ``get_values``
            (see sheetcraft.sheets.client.SheetsClient)
        translator: Header translator used when a source language is given
    """

    def __init__(self, client: Any, translator: Optional[HeaderTranslator] = None):
        self.client = client
        self.translator = translator or HeaderTranslator()

    def infer(
        self,
        spreadsheet_id: str,
        sheet_name: str,
        headers: Sequence[str],
        header_start_cell: str,
        lang: Optional[str] = None,
    ) -> InferenceResult:
        """Run the inference pipeline.

        Args:
            spreadsheet_id: Spreadsheet to read
            sheet_name: Expected sheet title (case-sensitive)
            headers: Header texts expected at the start cell, left to right
            header_start_cell: First header cell, e.g. "A3" or "Sheet!A3"
            lang: Source language of the headers; None skips translation

        Returns:
            InferenceResult

        Raises:
            ValidationError: If an argument is missing or the start cell is malformed
            NotFoundError: If the sheet does not exist
            HeaderMismatchError: If the sheet's header row differs from headers
        """
        ledger = DebugLedger()
        stage = InferenceStage.RESOLVE_SHEET
        try:
            _check_arguments(spreadsheet_id, sheet_name, headers, header_start_cell)
            headers = [str(h) for h in headers]

            exact_name = self._resolve_sheet(spreadsheet_id, sheet_name, ledger)

            stage = InferenceStage.PARSE_HEADER_CELL
            cell = parse_cell_reference(header_start_cell, exact_name)
            start_index = cell.column_index
            end_col = column_index_to_letter(start_index + len(headers) - 1)

            stage = InferenceStage.FETCH_HEADER_ROW
            values = self._fetch_header_row(spreadsheet_id, cell, end_col, ledger)

            stage = InferenceStage.VALIDATE_MATCH
            _validate_header_match(headers, values)

            header_range = build_a1_range(exact_name, cell.column, cell.row, end_col, cell.row)
            data_range = build_a1_range(exact_name, cell.column, cell.row + 1, end_col)
            ledger.set("headerRange", header_range)
            ledger.set("dataRange", data_range)
            ledger.set("headerRowIndex", cell.row - 1)
            ledger.set("startColIndex", start_index)

            stage = InferenceStage.TRANSLATE
            translated = headers
            if lang:
                translated = self.translator.translate(headers, lang, ledger)

            stage = InferenceStage.BUILD_FIELDS
            fields = build_fields(translated, headers, start_index, cell.row, lang)
            schema = FeatureSchema(
                fields=fields,
                sheet_name=exact_name,
                spreadsheet_id=spreadsheet_id,
            )
        except SheetcraftError as e:
            ledger.set("failedStage", stage.value)
            e.attach_debug(ledger)
            raise

        logger.debug("Inferred %d fields from %s", len(fields), header_range)
        return InferenceResult(
            schema=schema,
            header_range=header_range,
            data_range=data_range,
            debug=ledger.get_data(),
        )

    def _resolve_sheet(self, spreadsheet_id: str, sheet_name: str, ledger: DebugLedger) -> str:
        try:
            metadata = self.client.get_metadata(spreadsheet_id)
        except TransientServiceError as e:
            logger.warning(
                "Could not read metadata of %s, using sheet name %r as given: %s",
                spreadsheet_id, sheet_name, e,
            )
            ledger.set("metadataWarning", str(e))
            return sheet_name

        ledger.set("metadataFetched", "success")
        sheet = metadata.find_sheet(sheet_name)
        if sheet is None:
            available = ", ".join(metadata.titles) or "none"
            ledger.set("sheetNotFound", True)
            ledger.set("availableSheets", available)
            raise NotFoundError(
                f'Sheet "{sheet_name}" not found in the spreadsheet. '
                f"Available sheets: {available}. "
                f"Please verify the spreadsheetId ({spreadsheet_id}) and sheetName are correct."
            )

        ledger.set("sheetId", sheet.sheet_id)
        ledger.set("exactSheetName", sheet.title)
        return sheet.title

    def _fetch_header_row(
        self,
        spreadsheet_id: str,
        cell: CellReference,
        end_col: str,
        ledger: DebugLedger,
    ) -> List[List[Any]]:
        primary = build_a1_range(cell.sheet, cell.column, cell.row, end_col, cell.row, quote=True)
        fallback = build_a1_range(cell.sheet, cell.column, cell.row, end_col, cell.row, quote=False)
        ledger.set("headerRangeInput", primary)

        try:
            return self.client.get_values(spreadsheet_id, primary)
        except TransientServiceError as e:
            ledger.set("headerRangeError", str(e))
            ledger.set("headerRangeFallback", fallback)

        try:
            values = self.client.get_values(spreadsheet_id, fallback)
        except TransientServiceError as e:
            logger.warning("Header row fetch failed for %s and %s: %s", primary, fallback, e)
            ledger.set("headerRangeErrorFallback", str(e))
            return []

        ledger.delete("headerRangeError")
        return values


def _check_arguments(spreadsheet_id, sheet_name, headers, header_start_cell) -> None:
    if not spreadsheet_id or not sheet_name:
        raise ValidationError("spreadsheetId and sheetName are required")
    if isinstance(headers, str) or not headers:
        raise ValidationError("headers must be a non-empty array")
    if not header_start_cell:
        raise ValidationError("headerStartCell is required")


def _validate_header_match(expected: Sequence[str], values: List[List[Any]]) -> None:
    normalized = [h.strip() for h in expected]
    row = values[0] if values else []
    fetched = [str(v if v is not None else "").strip() for v in row[:len(normalized)]]

    if fetched != normalized:
        raise HeaderMismatchError(HEADER_NOT_FOUND)


def build_fields(
    translated: Sequence[str],
    originals: Sequence[str],
    start_column_index: int,
    header_row: int,
    lang: Optional[str] = None,
) -> List[FieldSchema]:
    """Build string fields for consecutive columns starting at start_column_index.

    Args:
        translated: Texts the identifiers are derived from
        originals: Header texts as they appear in the sheet
        start_column_index: Column of the first header (0-indexed)
        header_row: Header row number (1-indexed)
        lang: Source language, recorded in each description when given

    Identifiers are unique: a repeated one gets a numeric suffix (name, name2).

    Returns:
        One FieldSchema per header
    """
    fields = []
    seen = set()
    for idx, (text, original) in enumerate(zip(translated, originals)):
        fallback = f"field{idx + 1}"
        base = to_camel_case(text or original or fallback, fallback)
        name, suffix = base, 2
        while name in seen:
            name = f"{base}{suffix}"
            suffix += 1
        seen.add(name)
        fields.append(FieldSchema(
            name=name,
            type=FieldType.STRING,
            column=column_index_to_letter(start_column_index + idx),
            row=header_row,
            description=f"source({lang}): {original}" if lang else original,
        ))
    return fields
