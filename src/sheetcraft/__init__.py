"""
sheetcraft - A compiler from spreadsheet schemas to data-access code.

A Google Sheets sheet is treated as a schema-typed data store. sheetcraft infers a
column schema from a live header row, generates repository code from the schema
and keeps the spreadsheet's named ranges in step with it.

Usage:
    >>> import sheetcraft
    >>> schema = sheetcraft.FeatureSchema(
    ...     fields=[sheetcraft.FieldSchema(name="id", type="string", column="A"),
    ...             sheetcraft.FieldSchema(name="title", type="string", column="B")],
    ...     sheet_name="Tasks",
    ... )
    >>> schema.data_range
    'Tasks!A2:B'
    >>> artifacts = sheetcraft.compile_feature("Task", schema=schema)

Key components:
- FeatureSchema: Column schema of one sheet
- SchemaInferrer: Builds a schema from a live header row
- OperationContext / generate_operations_codes: The operation catalog
- FeatureScaffolder: Renders complete feature modules
- NamedRangeSynchronizer: Reconciles a named range with a computed range
"""

from sheetcraft.codegen import (
    FeatureScaffolder,
    OperationContext,
    generate_exports_list,
    generate_operations_codes,
)
from sheetcraft.compiler import (
    CompiledFeature,
    compile_feature,
    compile_from_sheet,
    infer_schema,
    sync_named_range,
)
from sheetcraft.config import Config
from sheetcraft.exceptions import (
    HeaderMismatchError,
    NotFoundError,
    SheetcraftError,
    SheetsAPIError,
    TranslationAPIError,
    TransientServiceError,
    UnknownOperationError,
    ValidationError,
)
from sheetcraft.schema import FeatureSchema, FieldSchema, FieldType, SchemaInferrer
from sheetcraft.sheets import NamedRangeSynchronizer, SheetsClient, SheetTable
from sheetcraft.utils.log import configure_logging

# Version
__version__ = "0.1.0"

__all__ = [
    "FeatureScaffolder",
    "OperationContext",
    "generate_exports_list",
    "generate_operations_codes",
    "CompiledFeature",
    "compile_feature",
    "compile_from_sheet",
    "infer_schema",
    "sync_named_range",
    "Config",
    "HeaderMismatchError",
    "NotFoundError",
    "SheetcraftError",
    "SheetsAPIError",
    "TranslationAPIError",
    "TransientServiceError",
    "UnknownOperationError",
    "ValidationError",
    "FeatureSchema",
    "FieldSchema",
    "FieldType",
    "SchemaInferrer",
    "NamedRangeSynchronizer",
    "SheetsClient",
    "SheetTable",
    "configure_logging",
]
