"""
Exception classes for sheetcraft.

Every error raised by the package derives from ``SheetcraftError``. Errors that end an
invocation carry the debug ledger collected up to the failure in their ``debug``
attribute, so a failed inference or synchronization can be diagnosed without running
it again.
"""

from typing import Any, Dict, Optional


class SheetcraftError(Exception):
    """Base class for sheetcraft errors.

    Attributes:
        debug: Key/value facts gathered during the failed invocation
    """

    def __init__(self, message: str, debug: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message)
        self.debug: Dict[str, Any] = dict(debug or {})

    def attach_debug(self, ledger: Any) -> "SheetcraftError":
        """Merge a ``DebugLedger`` (or plain mapping) into ``debug``.

        Facts already present on the error win over the ledger's.
        """
        data = ledger.get_data() if hasattr(ledger, "get_data") else dict(ledger)
        merged = dict(data)
        merged.update(self.debug)
        self.debug = merged
        return self


class ValidationError(SheetcraftError, ValueError):
    """Raised when caller input is malformed.

    Examples:
        - Bad A1 range syntax or an invalid column letter
        - Fields of one schema declaring different header rows
        - A required call argument that is missing or empty
    """
    pass


class NotFoundError(SheetcraftError):
    """Raised when a referenced sheet title or named range does not exist."""
    pass


class TransientServiceError(SheetcraftError):
    """Raised when a remote call fails.

    Callers that have a safe degraded path (falling back to the caller-supplied sheet
    name, or to dictionary translation) absorb this error into their debug ledger.
    Where no such path exists it propagates as a terminal failure.
    """
    pass


class SheetsAPIError(TransientServiceError):
    """Raised when a Google Sheets API call fails.

    Wraps ``gspread.exceptions.APIError`` and transport errors from ``requests``.
    Common causes include authentication failures, rate limiting (HTTP 429),
    invalid spreadsheet ids and missing permissions.
    """
    pass


class TranslationAPIError(TransientServiceError):
    """Raised when the Cloud Translation API call fails or answers malformed data."""
    pass


class UnknownOperationError(SheetcraftError):
    """Raised when an operation id is not in the operation catalog."""
    pass


class HeaderMismatchError(SheetcraftError):
    """Raised when the fetched header row does not match the expected headers."""
    pass
