"""
Utility module.

Debug ledger, logging setup, identifier helpers and schema serialization.
"""

from sheetcraft.utils.debug import DebugLedger
from sheetcraft.utils.log import configure_logging
from sheetcraft.utils.naming import NameVariants, feature_name_variants, to_camel_case

__all__ = [
    "DebugLedger",
    "configure_logging",
    "NameVariants",
    "feature_name_variants",
    "to_camel_case",
]
