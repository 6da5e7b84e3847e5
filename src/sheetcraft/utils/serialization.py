"""
Schema serialization utilities.

Provides JSON serialization and deserialization for feature schemas. The serialized
format carries a version for forward compatibility. Non-ASCII sheet names and
header descriptions are written as-is.
"""

import json
from typing import Any, Dict

from sheetcraft.exceptions import ValidationError
from sheetcraft.schema.model import FeatureSchema


# Current serialization format version
SERIALIZATION_VERSION = "1.0"


def serialize(schema: FeatureSchema) -> Dict[str, Any]:
    """Serialize a feature schema to a JSON-serializable dictionary.

    The serialized format includes:
    - version: Format version string
    - schema: The schema in its wire form (see FeatureSchema.to_dict)

    Args:
        schema: The schema to serialize

    Returns:
        Dictionary that can be serialized to JSON

    Raises:
        TypeError: If schema is not a FeatureSchema instance
    """
    if not isinstance(schema, FeatureSchema):
        raise TypeError(f"Expected FeatureSchema, got {type(schema)}")

    return {
        "version": SERIALIZATION_VERSION,
        "schema": schema.to_dict(),
    }


def deserialize(data: Dict[str, Any]) -> FeatureSchema:
    """Deserialize a feature schema from a dictionary.

    Args:
        data: Dictionary produced by serialize

    Returns:
        Reconstructed FeatureSchema

    Raises:
        TypeError: If data is not a dictionary
        ValidationError: If data is missing fields, has an unsupported version or
            describes an invalid schema
    """
    if not isinstance(data, dict):
        raise TypeError(f"Expected dict, got {type(data)}")

    if "version" not in data:
        raise ValidationError("Serialized schema must have 'version' field")
    if "schema" not in data:
        raise ValidationError("Serialized schema must have 'schema' field")

    version = data["version"]
    if version != SERIALIZATION_VERSION:
        raise ValidationError(
            f"Unsupported serialization version: {version}. "
            f"Expected {SERIALIZATION_VERSION}"
        )

    return FeatureSchema.from_dict(data["schema"])


def to_json(schema: FeatureSchema, **kwargs) -> str:
    """Serialize a feature schema to a JSON string.

    Args:
        schema: The schema to serialize
        **kwargs: Additional arguments to pass to json.dumps (e.g., indent=2)
    """
    kwargs.setdefault("ensure_ascii", False)
    return json.dumps(serialize(schema), **kwargs)


def from_json(json_str: str) -> FeatureSchema:
    """Deserialize a feature schema from a JSON string.

    Raises:
        ValidationError: If the string is not valid JSON or not a valid schema
    """
    try:
        data = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ValidationError(f"Invalid JSON: {e}") from e
    return deserialize(data)
