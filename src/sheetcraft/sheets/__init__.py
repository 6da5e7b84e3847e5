"""
Sheets module.

gspread-backed access to Google Sheets and the Cloud Translation API, named range
synchronization and typed table access.
"""

from sheetcraft.sheets.client import SheetsClient
from sheetcraft.sheets.named_ranges import NamedRangeSynchronizer, SyncResult
from sheetcraft.sheets.table import SheetTable
from sheetcraft.sheets.translate import TranslationClient

__all__ = [
    "SheetsClient",
    "NamedRangeSynchronizer",
    "SyncResult",
    "SheetTable",
    "TranslationClient",
]
