"""
Schema module.

Feature schemas, their header/data range derivation, header translation and
inference of a schema from a live sheet.
"""

from sheetcraft.schema.model import (
    FeatureSchema,
    FieldSchema,
    FieldType,
    compute_column_bounds,
    compute_data_range,
    compute_header_range,
    validate_schema,
)
from sheetcraft.schema.translation import (
    JA_EN_DICTIONARY,
    ContainmentDictionaryResolver,
    ExactDictionaryResolver,
    HeaderResolver,
    HeaderTranslator,
)
from sheetcraft.schema.inference import InferenceResult, InferenceStage, SchemaInferrer

__all__ = [
    "FeatureSchema",
    "FieldSchema",
    "FieldType",
    "compute_column_bounds",
    "compute_data_range",
    "compute_header_range",
    "validate_schema",
    "JA_EN_DICTIONARY",
    "ContainmentDictionaryResolver",
    "ExactDictionaryResolver",
    "HeaderResolver",
    "HeaderTranslator",
    "InferenceResult",
    "InferenceStage",
    "SchemaInferrer",
]
