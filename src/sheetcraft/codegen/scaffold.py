"""
Feature scaffolding.

FeatureScaffolder assembles the generated pieces of one feature into source files:
- features/{feature}/Universal{Feature}Repo.ts: the repository module
- features/{feature}/{Feature}UseCase.ts: a use-case stub delegating to the repository
- core/types.ts: the entity interface, inserted or replaced in place
- core/constants.ts: the data range constant, inserted or replaced in place

Rendering is pure; only FeatureArtifacts.write touches the filesystem.
"""

import logging
import re
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Union

from sheetcraft.codegen.catalog import (
    OperationContext,
    generate_exports_list,
    generate_operations_codes,
    get_all_operation_ids,
    get_operation_definition,
)
from sheetcraft.codegen.converters import js_string
from sheetcraft.codegen.schema_codegen import (
    generate_defaults,
    generate_object_to_row,
    generate_row_to_object,
    generate_type_definition,
    generate_validation,
    render_defaults,
)
from sheetcraft.exceptions import ValidationError
from sheetcraft.schema.model import FeatureSchema, compute_data_range, validate_schema
from sheetcraft.utils.naming import NameVariants, feature_name_variants


logger = logging.getLogger(__name__)

ALL_OPERATIONS = "all"
TYPES_PATH = Path("core") / "types.ts"
CONSTANTS_PATH = Path("core") / "constants.ts"
TYPES_HEADER = "/** Auto-generated types */\n"
CONSTANTS_HEADER = "/** Auto-generated range constants */\n"


def resolve_operation_list(operations: Optional[Sequence[str]]) -> List[str]:
    """Expand None, an empty list or a list containing "all" to every operation id.

    Operations the selected ones call (``getAll`` for lookups and row updates)
    are prepended when missing. Unknown ids are kept for the generator to reject.
    """
    if not operations or ALL_OPERATIONS in operations:
        return get_all_operation_ids()

    resolved = list(operations)
    missing = []
    for operation_id in resolved:
        definition = get_operation_definition(operation_id)
        for required in definition.requires if definition else ():
            if required not in resolved and required not in missing:
                missing.append(required)
    return missing + resolved


def default_range_name(names: NameVariants) -> str:
    return f"{names.upper}_RANGE"


def _upsert(content: str, pattern: "re.Pattern", replacement: str, header: str) -> str:
    if not content:
        content = header
    if pattern.search(content):
        return pattern.sub(lambda _: replacement, content, count=1)
    if not content.endswith("\n"):
        content += "\n"
    return content + replacement + "\n"


def upsert_type_definition(content: str, feature_name: str, type_definition: str) -> str:
    """Replace the ``export interface {feature_name}`` block or append it.

    Args:
        content: Current text of types.ts ("" when the file does not exist)
        feature_name: PascalCase interface name
        type_definition: New interface text
    """
    pattern = re.compile(
        rf"export interface {re.escape(feature_name)}\b[\s\S]*?\n}}", re.MULTILINE
    )
    return _upsert(content, pattern, type_definition, TYPES_HEADER)


def _range_constant_pattern(range_name: str) -> "re.Pattern":
    return re.compile(rf"export const {re.escape(range_name)} = ['`\"].*['`\"];")


def has_range_constant(content: str, range_name: str) -> bool:
    return _range_constant_pattern(range_name).search(content) is not None


def upsert_range_constant(content: str, range_name: str, range_text: str) -> str:
    """Replace the ``export const {range_name} = '...';`` line or append it."""
    declaration = f"export const {range_name} = {js_string(range_text)};"
    pattern = _range_constant_pattern(range_name)
    return _upsert(content, pattern, declaration, CONSTANTS_HEADER)


@dataclass
class FeatureArtifacts:
    """Rendered output of one scaffold run.

    Attributes:
        names: Feature name variants
        operation_ids: Operations rendered into the repository
        files: Relative path to file content for the feature directory
        type_definition: Entity interface, when a schema was given
        range_name: Data range constant name
        data_range: Data range the constant points at, when a schema was given
        messages: Human-readable progress lines
    """
    names: NameVariants
    operation_ids: List[str]
    files: Dict[Path, str]
    type_definition: Optional[str] = None
    range_name: Optional[str] = None
    data_range: Optional[str] = None
    messages: List[str] = field(default_factory=list)

    def write(self, root: Union[str, Path]) -> List[Path]:
        """Write the feature files and upsert the core types and constants under root.

        Returns:
            Every path written
        """
        root = Path(root)
        written = []

        for relative, content in self.files.items():
            path = root / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")
            written.append(path)
            self.messages.append(f"Created: {path}")

        if self.type_definition:
            path = root / TYPES_PATH
            updated = upsert_type_definition(
                _read_text(path), self.names.pascal, self.type_definition
            )
            _write_text(path, updated)
            written.append(path)
            self.messages.append(f"Updated core types: {self.names.pascal}")

        if self.range_name and self.data_range:
            path = root / CONSTANTS_PATH
            updated = upsert_range_constant(_read_text(path), self.range_name, self.data_range)
            _write_text(path, updated)
            written.append(path)
            self.messages.append(f"Updated core constants: {self.range_name}")

        logger.info("Wrote %d files for feature %s", len(written), self.names.pascal)
        return written


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8") if path.exists() else ""


def _write_text(path: Path, content: str) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")


class FeatureScaffolder:
    """Render the repository and use-case modules of a feature."""

    def __init__(self, clock=None):
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def scaffold(
        self,
        feature_name: str,
        operations: Optional[Sequence[str]] = None,
        schema: Optional[FeatureSchema] = None,
        range_name: Optional[str] = None,
    ) -> FeatureArtifacts:
        """Render a feature.

        Without a schema, or with one that has no fields, only the skeleton is
        rendered: every operation needs the row shape of a schema.

        Args:
            feature_name: Feature name in any leading case (e.g. "todo")
            operations: Operation ids; None, [] or ["all"] selects every operation
            schema: Feature schema
            range_name: Data range constant name, ``{FEATURE}_RANGE`` by default

        Raises:
            ValidationError: If feature_name is empty or the schema is invalid
            UnknownOperationError: If an operation id is not registered
        """
        if not feature_name:
            raise ValidationError("featureName is required")

        names = feature_name_variants(feature_name)
        messages = [f"Scaffolding feature: {names.pascal}"]

        operation_ids = resolve_operation_list(operations)
        messages.append(f"Using operations: {', '.join(operation_ids)}")

        range_name = range_name or (schema.range_name if schema else None) or default_range_name(names)
        timestamp = self._clock().isoformat()

        if schema is not None:
            validate_schema(schema)

        if schema is not None and schema.fields:
            context = OperationContext.for_feature(names.pascal, schema=schema, range_name=range_name)
            repo = render_repository(names, schema, range_name, operation_ids, context, timestamp)
            type_definition = generate_type_definition(names.pascal, schema)
            data_range = compute_data_range(schema, quote=True)
        else:
            repo = render_repository(names, None, range_name, [], None, timestamp)
            type_definition = None
            data_range = None

        feature_dir = Path("features") / names.camel
        files = {
            feature_dir / f"Universal{names.pascal}Repo.ts": repo,
            feature_dir / f"{names.pascal}UseCase.ts": render_use_case(names, timestamp),
        }

        messages.append(f"Generated {len(operation_ids) if type_definition else 0} operations")
        logger.info("Scaffolded feature %s", names.pascal)

        return FeatureArtifacts(
            names=names,
            operation_ids=operation_ids,
            files=files,
            type_definition=type_definition,
            range_name=range_name,
            data_range=data_range,
            messages=messages,
        )


def render_repository(
    names: NameVariants,
    schema: Optional[FeatureSchema],
    range_name: str,
    operation_ids: Sequence[str],
    context: Optional[OperationContext],
    timestamp: str,
) -> str:
    """Render ``Universal{Feature}Repo.ts``."""
    lines = [
        f"// Generated by sheetcraft at {timestamp}",
        "import { SheetsClient } from '../../core/client';",
    ]
    if schema is not None:
        lines.append(f"import {{ {names.pascal} }} from '../../core/types';")
        lines.append(f"import {{ {range_name} }} from '../../core/constants';")
    lines += [
        "",
        "function generateUuid(): string {",
        "  if (typeof Utilities !== 'undefined') {",
        "    return Utilities.getUuid();",
        "  }",
        "  return crypto.randomUUID();",
        "}",
        "",
        f"export const createUniversal{names.pascal}Repo = (spreadsheetId: string) => {{",
    ]

    if schema is not None and context is not None:
        lines.append(generate_row_to_object(names.pascal, schema))
        lines.append("")
        lines.append(generate_object_to_row(names.camel, schema))
        lines.append("")

        validation = generate_validation(schema)
        lines.append(f"  const validate = (data: Partial<{names.pascal}>): void => {{")
        if validation:
            lines.append(validation)
        lines.append("  };")
        lines.append("")

        lines.append(f"  const defaults = (): Partial<{names.pascal}> => ({{")
        rendered = render_defaults(generate_defaults(schema))
        if rendered:
            lines.append(rendered)
        lines.append("  });")

        lines.extend(generate_operations_codes(operation_ids, context))
        lines.append("")
        lines.append("    return {")
        exports = ["validate", "defaults"]
        listed = generate_exports_list(operation_ids)
        lines.append("      " + ",\n      ".join(exports + ([listed] if listed else [])))
        lines.append("    };")
    else:
        lines.append("  return {};")

    lines.append("};")
    return "\n".join(lines) + "\n"


def render_use_case(names: NameVariants, timestamp: str) -> str:
    """Render ``{Feature}UseCase.ts``."""
    return f"""// Generated by sheetcraft at {timestamp}
import {{ createUniversal{names.pascal}Repo }} from './Universal{names.pascal}Repo';

export const create{names.pascal}UseCase = (spreadsheetId: string) => {{
  const repo = createUniversal{names.pascal}Repo(spreadsheetId);
  return {{
    ...repo,
  }};
}};
"""
