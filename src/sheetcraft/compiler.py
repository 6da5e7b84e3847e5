"""
End-to-end compilation utilities.

Each function wires the gspread-backed clients to one pipeline:
- compile_feature: schema -> generated feature files
- infer_schema: live sheet -> schema
- compile_from_sheet: live sheet -> schema -> generated feature files
- sync_named_range: range text -> named range in the spreadsheet
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Sequence, Union

from sheetcraft.codegen.scaffold import FeatureArtifacts, FeatureScaffolder
from sheetcraft.config import Config
from sheetcraft.schema.inference import InferenceResult, SchemaInferrer
from sheetcraft.schema.model import FeatureSchema
from sheetcraft.schema.translation import HeaderTranslator
from sheetcraft.sheets.client import SheetsClient
from sheetcraft.sheets.named_ranges import NamedRangeSynchronizer, SyncResult
from sheetcraft.sheets.translate import TranslationClient


@dataclass
class CompiledFeature:
    """Schema inferred from a sheet and the feature generated from it."""
    inference: InferenceResult
    artifacts: FeatureArtifacts


def _inferrer(gc: Any, config: Optional[Config]) -> SchemaInferrer:
    config = config or Config()
    translator = HeaderTranslator(
        service=TranslationClient(gc, endpoint=config.SHEETCRAFT_TRANSLATE_ENDPOINT),
        target_language=config.SHEETCRAFT_TARGET_LANGUAGE,
    )
    return SchemaInferrer(SheetsClient(gc), translator)


def compile_feature(
    feature_name: str,
    schema: Optional[FeatureSchema] = None,
    operations: Optional[Sequence[str]] = None,
    range_name: Optional[str] = None,
) -> FeatureArtifacts:
    """Generate the files of a feature from a hand-written schema.

    Args:
        feature_name: Feature name (e.g. "Todo")
        schema: Feature schema; None renders only the skeleton
        operations: Operation ids; None or ["all"] selects every operation
        range_name: Data range constant name

    Returns:
        FeatureArtifacts; call ``write(root)`` to put them on disk
    """
    return FeatureScaffolder().scaffold(
        feature_name, operations=operations, schema=schema, range_name=range_name
    )


def infer_schema(
    gc: Any,
    spreadsheet_id: str,
    sheet_name: str,
    headers: Sequence[str],
    header_start_cell: str,
    lang: Optional[str] = None,
    config: Optional[Config] = None,
) -> InferenceResult:
    """Infer a schema from the header row of a sheet.

    Args:
        gc: An authenticated ``gspread.Client`` (see ``Config.authorize``)
        spreadsheet_id: Spreadsheet to read
        sheet_name: Sheet title
        headers: Expected header texts
        header_start_cell: First header cell (e.g. "A3")
        lang: Source language of the headers; None skips translation
        config: Settings; defaults are used when None
    """
    return _inferrer(gc, config).infer(
        spreadsheet_id, sheet_name, headers, header_start_cell, lang=lang
    )


def compile_from_sheet(
    gc: Any,
    feature_name: str,
    spreadsheet_id: str,
    sheet_name: str,
    headers: Sequence[str],
    header_start_cell: str,
    lang: Optional[str] = None,
    operations: Optional[Sequence[str]] = None,
    range_name: Optional[str] = None,
    config: Optional[Config] = None,
) -> CompiledFeature:
    """Infer a schema from a sheet, then generate the feature files from it."""
    inference = infer_schema(
        gc, spreadsheet_id, sheet_name, headers, header_start_cell, lang=lang, config=config
    )
    artifacts = compile_feature(
        feature_name, schema=inference.schema, operations=operations, range_name=range_name
    )
    return CompiledFeature(inference=inference, artifacts=artifacts)


def sync_named_range(
    gc: Any,
    spreadsheet_id: str,
    range_name: str,
    range_text: str,
    constants_path: Optional[Union[str, Path]] = None,
) -> SyncResult:
    """Create or replace the named range range_name over range_text.

    Args:
        gc: An authenticated ``gspread.Client``
        spreadsheet_id: Target spreadsheet
        range_name: Named range name
        range_text: Sheet-qualified A1 range (e.g. "Todos!A2:C")
        constants_path: Generated constants module whose range constant is
            rewritten after the named range is set
    """
    return NamedRangeSynchronizer(SheetsClient(gc)).synchronize(
        spreadsheet_id, range_name, range_text, constants_path=constants_path
    )
