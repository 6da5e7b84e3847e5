"""
Named range synchronization.

A named range is reconciled with a computed rectangle by replacement, never by
in-place update. One synchronization makes exactly one metadata read and submits
exactly one batch:

    [DeleteNamedRange(existing)]?  +  [AddNamedRange(name, grid)]

Repeating a synchronization with an unchanged range converges to the same state,
and the single batch means no partial state is ever visible.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from sheetcraft.codegen.scaffold import has_range_constant, upsert_range_constant
from sheetcraft.exceptions import NotFoundError, SheetcraftError, ValidationError
from sheetcraft.schema.model import FeatureSchema, compute_data_range
from sheetcraft.spreadsheet.a1 import normalize_range_text, parse_range, split_sheet_and_range
from sheetcraft.spreadsheet.model import GridRange
from sheetcraft.spreadsheet.operations import AddNamedRange, DeleteNamedRange, SpreadsheetOp
from sheetcraft.utils.debug import DebugLedger


logger = logging.getLogger(__name__)


@dataclass
class SyncResult:
    """Outcome of one synchronization.

    Attributes:
        range_name: The named range name
        grid_range: The region the name now refers to
        replaced_id: Id of the named range that was deleted, if one existed
        operations: The batch that was submitted
        messages: Human-readable progress lines
    """
    range_name: str
    grid_range: GridRange
    replaced_id: Optional[str]
    operations: List[SpreadsheetOp]
    messages: List[str] = field(default_factory=list)

    @property
    def created(self) -> bool:
        return self.replaced_id is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "rangeName": self.range_name,
            "range": self.grid_range.to_dict(),
            "replacedId": self.replaced_id,
            "operations": [op.to_dict() for op in self.operations],
        }


class NamedRangeSynchronizer:
    """Create or replace a named range.

    Args:
        client: Sheets boundary providing ``get_metadata`` and ``batch_update``
            (see sheetcraft.sheets.client.SheetsClient)
    """

    def __init__(self, client: Any):
        self.client = client

    def synchronize(
        self,
        spreadsheet_id: str,
        range_name: str,
        range_text: str,
        constants_path: Optional[Union[str, Path]] = None,
    ) -> SyncResult:
        """Point range_name at range_text.

        Args:
            spreadsheet_id: Target spreadsheet
            range_name: Named range name (e.g. "TODO_RANGE")
            range_text: Sheet-qualified A1 range; shell escapes and wrapping
                quotes are accepted (e.g. ``Todos\\!A2:B``, ``'My Sheet'!E:E``)
            constants_path: Generated constants module (e.g. "src/core/constants.ts");
                when given, its ``export const {range_name}`` line is rewritten
                to the new range after the batch succeeds

        Returns:
            SyncResult

        Raises:
            ValidationError: If an argument is missing or the range is malformed
            NotFoundError: If the sheet does not exist
            SheetsAPIError: If the metadata read or the batch update fails
        """
        ledger = DebugLedger()
        try:
            if not spreadsheet_id or not range_name or not range_text:
                raise ValidationError("spreadsheetId, rangeName, and range are required")

            messages = [f"Setting up Named Range: {range_name} -> {range_text}"]
            normalized = normalize_range_text(range_text)
            sheet_name, cell_range = split_sheet_and_range(normalized)
            ledger.set("sheetName", sheet_name)
            ledger.set("cellRange", cell_range)

            metadata = self.client.get_metadata(spreadsheet_id)
            sheet = metadata.find_sheet(sheet_name)
            if sheet is None:
                ledger.set("availableSheets", ", ".join(metadata.titles) or "none")
                raise NotFoundError(f'Sheet "{sheet_name}" not found in spreadsheet.')
            ledger.set("sheetId", sheet.sheet_id)

            grid = parse_range(cell_range, sheet.sheet_id)

            ops: List[SpreadsheetOp] = []
            existing = metadata.find_named_range(range_name)
            replaced_id = None
            if existing is not None and existing.named_range_id:
                replaced_id = existing.named_range_id
                messages.append(f"Updating existing named range (ID: {replaced_id})...")
                ops.append(DeleteNamedRange(replaced_id))
            ops.append(AddNamedRange(range_name, grid))
            ledger.set("requestCount", len(ops))

            self.client.batch_update(spreadsheet_id, ops)
        except SheetcraftError as e:
            e.attach_debug(ledger)
            raise

        messages.append(f"Named range {range_name} is set.")
        if constants_path is not None:
            messages.append(_update_constant(Path(constants_path), range_name, normalized))
        logger.info(
            "%s named range %s on sheet %s",
            "Replaced" if replaced_id else "Created", range_name, sheet_name,
        )
        return SyncResult(
            range_name=range_name,
            grid_range=grid,
            replaced_id=replaced_id,
            operations=ops,
            messages=messages,
        )

    def synchronize_schema(
        self,
        spreadsheet_id: str,
        schema: FeatureSchema,
        range_name: Optional[str] = None,
        constants_path: Optional[Union[str, Path]] = None,
    ) -> SyncResult:
        """Point a named range at the data range of a schema.

        Args:
            spreadsheet_id: Target spreadsheet
            schema: Schema whose data range is used
            range_name: Name to use; defaults to ``schema.range_name``
            constants_path: Generated constants module to update, see synchronize

        Raises:
            ValidationError: If no name is available or the schema is invalid
        """
        name = range_name or schema.range_name
        if not name:
            raise ValidationError("rangeName is required")
        return self.synchronize(
            spreadsheet_id, name, compute_data_range(schema, quote=True), constants_path
        )


def _update_constant(path: Path, range_name: str, range_text: str) -> str:
    """Rewrite or append the range constant in an existing constants module."""
    if not path.exists():
        logger.warning("Constants file not found at %s, skipping code update", path)
        return f"Constants file not found at {path}. Skipping code update."

    content = path.read_text(encoding="utf-8")
    replaced = has_range_constant(content, range_name)
    path.write_text(upsert_range_constant(content, range_name, range_text), encoding="utf-8")
    if replaced:
        return f"Updated existing constant in {path}"
    return f"Appended constant to {path}"
