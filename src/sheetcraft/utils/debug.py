"""
Per-invocation debug ledger.

A DebugLedger collects key/value facts while one inference or synchronization
runs. Each invocation owns its own ledger; when the invocation fails the ledger is
attached to the raised SheetcraftError (see ``SheetcraftError.attach_debug``).
"""

import json
import logging
from typing import Any, Dict


logger = logging.getLogger(__name__)


class DebugLedger:
    """Mutable key/value store of diagnostic facts for one invocation."""

    def __init__(self) -> None:
        self._data: Dict[str, Any] = {}

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value
        logger.debug("%s = %r", key, value)

    def delete(self, key: str) -> None:
        self._data.pop(key, None)

    def get(self, key: str, default: Any = None) -> Any:
        return self._data.get(key, default)

    def get_data(self) -> Dict[str, Any]:
        """Return a shallow copy of the collected facts."""
        return dict(self._data)

    def is_empty(self) -> bool:
        return not self._data

    def to_json(self) -> str:
        return json.dumps(self._data, indent=2, ensure_ascii=False, default=str)

    def __contains__(self, key: str) -> bool:
        return key in self._data

    def __repr__(self) -> str:
        return f"DebugLedger({self._data!r})"
