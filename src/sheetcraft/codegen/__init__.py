"""
Code generation module.

Renders TypeScript data-access code from feature schemas: row mappers, type
definitions, defaults and validation, the operation catalog, and whole feature
modules through the scaffolder.
"""

from sheetcraft.codegen.catalog import (
    OPERATION_CATALOG,
    OperationCategory,
    OperationContext,
    OperationDefinition,
    OperationParameter,
    generate_exports_list,
    generate_operation_code,
    generate_operations_codes,
    get_all_operation_ids,
    get_operation_definition,
    get_operations_by_category,
)
from sheetcraft.codegen.schema_codegen import (
    DEFAULT_RULES,
    DefaultValueRule,
    generate_defaults,
    generate_object_to_row,
    generate_row_to_object,
    generate_type_definition,
    generate_validation,
)
from sheetcraft.codegen.scaffold import (
    FeatureArtifacts,
    FeatureScaffolder,
    upsert_range_constant,
    upsert_type_definition,
)

__all__ = [
    "OPERATION_CATALOG",
    "OperationCategory",
    "OperationContext",
    "OperationDefinition",
    "OperationParameter",
    "generate_exports_list",
    "generate_operation_code",
    "generate_operations_codes",
    "get_all_operation_ids",
    "get_operation_definition",
    "get_operations_by_category",
    "DEFAULT_RULES",
    "DefaultValueRule",
    "generate_defaults",
    "generate_object_to_row",
    "generate_row_to_object",
    "generate_type_definition",
    "generate_validation",
    "FeatureArtifacts",
    "FeatureScaffolder",
    "upsert_range_constant",
    "upsert_type_definition",
]
