"""
Value conversion rules for generated row mappers.

Each rule turns an accessor expression (``row[2]``, ``todo.completed``) into the
TypeScript expression that converts a cell value to an attribute value (decode)
or back (encode).

Decode rules:
- boolean with sentinel format ("TRUE/FALSE"): ``x === 'TRUE'``
- boolean without sentinel: ``Boolean(x)``
- number: ``Number(x)``
- string, date: pass through

Encode rules:
- boolean with sentinel format: ``x ? 'TRUE' : 'FALSE'``
- everything else: pass through
"""

from sheetcraft.schema.model import FieldSchema, FieldType


def js_string(value: str) -> str:
    """Render a single-quoted TypeScript string literal."""
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("\n", "\\n")
    return f"'{escaped}'"


def decode_expression(field: FieldSchema, accessor: str) -> str:
    """Expression converting the cell at ``accessor`` to the field's type.

    Example:
        >>> f = FieldSchema(name="done", type="boolean", column="C", storage_format="TRUE/FALSE")
        >>> decode_expression(f, "row[2]")
        "row[2] === 'TRUE'"
    """
    if field.type == FieldType.BOOLEAN:
        sentinels = field.sentinels
        if sentinels:
            return f"{accessor} === {js_string(sentinels[0])}"
        return f"Boolean({accessor})"
    if field.type == FieldType.NUMBER:
        return f"Number({accessor})"
    return accessor


def encode_expression(field: FieldSchema, accessor: str) -> str:
    """Expression converting the attribute at ``accessor`` to its cell value."""
    sentinels = field.sentinels
    if sentinels:
        true_text, false_text = sentinels
        return f"{accessor} ? {js_string(true_text)} : {js_string(false_text)}"
    return accessor


def typescript_type(field: FieldSchema) -> str:
    """TypeScript type of a field. Dates are ISO 8601 strings."""
    if field.type == FieldType.DATE:
        return "string"
    return field.type.value
