"""
Schema-driven code generation.

Generates the schema-dependent pieces of a feature repository module:
- generate_type_definition: the entity interface
- generate_row_to_object / generate_object_to_row: row mappers
- generate_validation: required-field guards
- generate_defaults: default-value expressions per field

Row arrays are positioned relative to the schema's first column: the mapper reads
the data range, which starts at that column, so the first field in canonical
order is always ``row[0]``. Columns inside the bounds that no field covers are
written as empty strings.
"""

import re
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Pattern, Sequence, Union

from sheetcraft.codegen.converters import decode_expression, encode_expression, typescript_type
from sheetcraft.schema.model import FeatureSchema, FieldSchema, FieldType


@dataclass(frozen=True)
class DefaultValueRule:
    """Maps matching field names to a default-value expression.

    Attributes:
        pattern: Exact field name, or a compiled regex tested with ``search``
        value: Expression text, or a callable producing it from the field
    """
    pattern: Union[str, Pattern]
    value: Union[str, Callable[[FieldSchema], str]]

    def matches(self, field: FieldSchema) -> bool:
        if isinstance(self.pattern, str):
            return field.name == self.pattern
        return self.pattern.search(field.name) is not None

    def value_for(self, field: FieldSchema) -> str:
        return self.value(field) if callable(self.value) else self.value


UUID_EXPRESSION = "generateUuid()"
TIMESTAMP_EXPRESSION = "new Date().toISOString()"

DEFAULT_RULES = (
    DefaultValueRule("id", UUID_EXPRESSION),
    DefaultValueRule(re.compile(r"^createdAt$", re.IGNORECASE), TIMESTAMP_EXPRESSION),
    DefaultValueRule(re.compile(r"^updatedAt$", re.IGNORECASE), TIMESTAMP_EXPRESSION),
)


def generate_type_definition(feature_name: str, schema: FeatureSchema) -> str:
    """Generate the TypeScript interface of a feature.

    Fields keep declaration order; fields that are not required are optional.

    Example:
        export interface Task {
          /** Task id */
          id: string;
          done?: boolean;
        }
    """
    lines = [f"export interface {feature_name} {{"]
    for f in schema.fields:
        if f.description:
            lines.append(f"  /** {f.description} */")
        optional = "" if f.required else "?"
        lines.append(f"  {f.name}{optional}: {typescript_type(f)};")
    lines.append("}")
    return "\n".join(lines)


def _positioned_fields(schema: FeatureSchema) -> List[Any]:
    """Fields in canonical order with their offset from the first column."""
    ordered = schema.ordered_fields
    if not ordered:
        return []
    first = ordered[0].column_index
    return [(f.column_index - first, f) for f in ordered]


def generate_row_to_object(feature_name: str, schema: FeatureSchema) -> str:
    """Generate ``rowTo{Feature}``, decoding a row array into an entity."""
    mappings = [
        f"    {f.name}: {decode_expression(f, f'row[{offset}]')},"
        for offset, f in _positioned_fields(schema)
    ]
    body = "\n".join(mappings)
    return (
        f"  const rowTo{feature_name} = (row: string[]): {feature_name} => ({{\n"
        f"{body}\n"
        f"  }});"
    )


def generate_object_to_row(feature_name_camel: str, schema: FeatureSchema) -> str:
    """Generate ``{feature}ToRow``, encoding an entity into a row array."""
    pascal = feature_name_camel[:1].upper() + feature_name_camel[1:]
    lines = []
    expected = 0
    for offset, f in _positioned_fields(schema):
        while expected < offset:
            lines.append("    '',")
            expected += 1
        lines.append(f"    {encode_expression(f, f'{feature_name_camel}.{f.name}')},")
        expected = offset + 1
    body = "\n".join(lines)
    return (
        f"  const {feature_name_camel}ToRow = "
        f"({feature_name_camel}: {pascal}): (string | undefined)[] => [\n"
        f"{body}\n"
        f"  ];"
    )


def generate_validation(schema: FeatureSchema) -> str:
    """Generate one guard per required field; empty when none is required."""
    return "\n".join(
        f"    if (!data.{f.name}) throw new Error('{f.name} is required');"
        for f in schema.fields
        if f.required
    )


def generate_defaults(
    schema: FeatureSchema,
    custom_rules: Sequence[DefaultValueRule] = (),
) -> Dict[str, Any]:
    """Compute default values per field.

    Built-in rules come first, then custom_rules; the first matching rule wins.
    A boolean field no rule matches defaults to False. Other fields get no entry.

    Args:
        schema: Source schema
        custom_rules: Extra rules evaluated after the built-in ones

    Returns:
        Field name to expression text (or False), in canonical field order
    """
    rules = list(DEFAULT_RULES) + list(custom_rules)
    defaults: Dict[str, Any] = {}

    for f in schema.ordered_fields:
        rule = next((r for r in rules if r.matches(f)), None)
        if rule is not None:
            defaults[f.name] = rule.value_for(f)
        elif f.type == FieldType.BOOLEAN:
            defaults[f.name] = False

    return defaults


def render_defaults(defaults: Dict[str, Any]) -> str:
    """Render a defaults mapping as object-literal entries."""
    lines = []
    for name, value in defaults.items():
        rendered = "false" if value is False else "true" if value is True else str(value)
        lines.append(f"    {name}: {rendered},")
    return "\n".join(lines)
