"""
Operation catalog.

The catalog is a read-only registry of the data-access operations a feature
repository module can expose. Each OperationDefinition owns a pure generator
``(OperationContext) -> str`` that renders the operation as TypeScript source.

Registered ids:
- data: getAll, getById, create, update, delete, getRange, setRange, clearRange,
  search, batchCreate, batchUpdate
- format: formatCells
- analysis: count

The registry is built once at import time and exposed as a MappingProxyType.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple

from sheetcraft.codegen.converters import js_string
from sheetcraft.exceptions import UnknownOperationError, ValidationError
from sheetcraft.schema.model import (
    DEFAULT_KEY_FIELD,
    FeatureSchema,
    compute_column_bounds,
    compute_data_range,
)
from sheetcraft.spreadsheet.a1 import column_letter_to_index
from sheetcraft.utils.naming import feature_name_variants


# Row span used by update/delete when no schema bounds are known
DEFAULT_FIRST_COLUMN = "A"
DEFAULT_LAST_COLUMN = "Z"
DEFAULT_ROW_WIDTH = 10

EXPORT_RENAMES = MappingProxyType({"delete": "deleteById"})
EXPORTS_SEPARATOR = ",\n      "


class OperationCategory(str, Enum):
    DATA = "data"
    FORMAT = "format"
    STRUCTURE = "structure"
    ANALYSIS = "analysis"
    CUSTOM = "custom"


@dataclass(frozen=True)
class OperationParameter:
    """A parameter of a generated operation.

    Attributes:
        name: Parameter name
        type: TypeScript type; ``{{featureName}}`` is replaced by the feature name
        required: Whether callers must pass it
        default: Default value expression, if any
        description: Free text
    """
    name: str
    type: str
    required: bool = False
    default: Optional[str] = None
    description: Optional[str] = None


@dataclass(frozen=True)
class OperationContext:
    """Everything a generator may read. Built fresh for every generation call.

    Attributes:
        feature_name: PascalCase feature name (e.g. "Todo")
        feature_name_camel: camelCase feature name (e.g. "todo")
        schema: Feature schema, if any
        range_name: Name of the data range constant, if any
        params: Custom generator parameters
    """
    feature_name: str
    feature_name_camel: str
    schema: Optional[FeatureSchema] = None
    range_name: Optional[str] = None
    params: Mapping[str, Any] = field(default_factory=dict)

    @classmethod
    def for_feature(
        cls,
        feature_name: str,
        schema: Optional[FeatureSchema] = None,
        range_name: Optional[str] = None,
        params: Optional[Mapping[str, Any]] = None,
    ) -> "OperationContext":
        names = feature_name_variants(feature_name)
        return cls(
            feature_name=names.pascal,
            feature_name_camel=names.camel,
            schema=schema,
            range_name=range_name,
            params=MappingProxyType(dict(params or {})),
        )

    @property
    def key_field(self) -> str:
        return self.schema.natural_key if self.schema is not None else DEFAULT_KEY_FIELD

    @property
    def range_expression(self) -> str:
        """Expression evaluating to the data range: the constant name or a literal."""
        if self.range_name:
            return self.range_name
        if self.schema is not None and self.schema.fields:
            return js_string(compute_data_range(self.schema, quote=True))
        raise ValidationError(
            f"Generating data operations for {self.feature_name} requires a range name or a schema"
        )

    @property
    def sheet_name_expression(self) -> str:
        return f"{self.range_expression}.split('!')[0]"

    @property
    def row_columns(self) -> Tuple[str, str]:
        """First and last column of one entity row."""
        if self.schema is not None and self.schema.fields:
            return compute_column_bounds(self.schema)
        return DEFAULT_FIRST_COLUMN, DEFAULT_LAST_COLUMN

    @property
    def row_width(self) -> int:
        if self.schema is not None and self.schema.fields:
            first, last = compute_column_bounds(self.schema)
            return column_letter_to_index(last) - column_letter_to_index(first) + 1
        return DEFAULT_ROW_WIDTH

    @property
    def first_data_row(self) -> int:
        """Sheet row number of the first entity (index 0 of getAll)."""
        if self.schema is not None and self.schema.fields:
            return self.schema.header_row + 1
        return 2

    @property
    def has_id_field(self) -> bool:
        return self.schema is not None and self.schema.get_field("id") is not None


@dataclass(frozen=True)
class OperationDefinition:
    """A catalog entry.

    Attributes:
        id: Operation id (e.g. "getAll")
        name: Display name
        category: Operation category
        description: What the generated operation does
        parameters: Parameters of the generated function
        return_type: Return type template using ``{{featureName}}``
        generator: Pure function rendering the operation source
        requires: Operations the generated code calls, which must be rendered too
    """
    id: str
    name: str
    category: OperationCategory
    description: str
    parameters: Tuple[OperationParameter, ...]
    return_type: str
    generator: Callable[[OperationContext], str] = field(repr=False, compare=False)
    requires: Tuple[str, ...] = ()

    def generate(self, context: OperationContext) -> str:
        return self.generator(context)

    def render_return_type(self, context: OperationContext) -> str:
        return self.return_type.replace("{{featureName}}", context.feature_name)

    @property
    def export_name(self) -> str:
        return EXPORT_RENAMES.get(self.id, self.id)


def _generate_get_all(ctx: OperationContext) -> str:
    f = ctx.feature_name
    return f"""
    const getAll = async (): Promise<{f}[]> => {{
      const response = await SheetsClient.batchGet(spreadsheetId, [{ctx.range_expression}]);
      const rows = response.valueRanges?.[0]?.values || [];

      return rows
        .filter((row: string[]) => row && row[0] && row[0].trim() !== '')
        .map((row: string[]) => rowTo{f}(row));
    }};"""


def _generate_get_by_id(ctx: OperationContext) -> str:
    f, key = ctx.feature_name, ctx.key_field
    return f"""
    const getById = async ({key}: string): Promise<{f} | null> => {{
      const items = await getAll();
      return items.find(item => item.{key} === {key}) || null;
    }};"""


def _id_line(ctx: OperationContext) -> str:
    return "\n        id: generateUuid()," if ctx.has_id_field else ""


def _generate_create(ctx: OperationContext) -> str:
    f = ctx.feature_name
    return f"""
    const create = async (data: Partial<{f}>): Promise<{f}> => {{
      const item: {f} = {{{_id_line(ctx)}
        ...data,
        createdAt: new Date().toISOString(),
        updatedAt: new Date().toISOString(),
      }} as {f};

      const rowValues = {ctx.feature_name_camel}ToRow(item);
      await SheetsClient.appendValues(spreadsheetId, {ctx.range_expression}, [rowValues]);
      return item;
    }};"""


def _row_range(ctx: OperationContext) -> str:
    first, last = ctx.row_columns
    return f"`${{sheetName}}!{first}${{rowNumber}}:{last}${{rowNumber}}`"


def _generate_update(ctx: OperationContext) -> str:
    f, key = ctx.feature_name, ctx.key_field
    return f"""
    const update = async ({key}: string, updates: Partial<{f}>): Promise<void> => {{
      const items = await getAll();
      const index = items.findIndex(item => item.{key} === {key});
      if (index === -1) throw new Error(`{f} ${{{key}}} not found`);

      const rowNumber = index + {ctx.first_data_row};
      const current = items[index];
      const updated = {{
        ...current,
        ...updates,
        updatedAt: new Date().toISOString(),
      }};

      const values = {ctx.feature_name_camel}ToRow(updated);
      const sheetName = {ctx.sheet_name_expression};
      const range = {_row_range(ctx)};
      await SheetsClient.updateValues(spreadsheetId, range, [values]);
    }};"""


def _generate_delete(ctx: OperationContext) -> str:
    f, key = ctx.feature_name, ctx.key_field
    return f"""
    const deleteById = async ({key}: string): Promise<void> => {{
      const items = await getAll();
      const index = items.findIndex(item => item.{key} === {key});
      if (index === -1) throw new Error(`{f} ${{{key}}} not found`);

      const rowNumber = index + {ctx.first_data_row};
      const sheetName = {ctx.sheet_name_expression};
      const range = {_row_range(ctx)};

      const emptyValues = new Array({ctx.row_width}).fill('');
      await SheetsClient.updateValues(spreadsheetId, range, [emptyValues]);
    }};"""


def _generate_get_range(ctx: OperationContext) -> str:
    return """
    const getRange = async (range: string): Promise<any[][]> => {
      const response = await SheetsClient.batchGet(spreadsheetId, [range]);
      return response.valueRanges?.[0]?.values || [];
    };"""


def _generate_set_range(ctx: OperationContext) -> str:
    return """
    const setRange = async (range: string, values: any[][]): Promise<void> => {
      await SheetsClient.updateValues(spreadsheetId, range, values);
    };"""


def _generate_clear_range(ctx: OperationContext) -> str:
    return """
    const clearRange = async (range: string): Promise<void> => {
      await SheetsClient.clearValues(spreadsheetId, range);
    };"""


def _generate_format_cells(ctx: OperationContext) -> str:
    return """
    const formatCells = async (range: string, format: any): Promise<void> => {
      await SheetsClient.batchUpdate(spreadsheetId, [
        {
          repeatCell: {
            range: SheetsClient.a1ToGridRange(range),
            cell: { userEnteredFormat: format },
            fields: 'userEnteredFormat',
          },
        },
      ]);
    };"""


def _generate_search(ctx: OperationContext) -> str:
    f = ctx.feature_name
    return f"""
    const search = async (predicate: (item: {f}) => boolean): Promise<{f}[]> => {{
      const items = await getAll();
      return items.filter(predicate);
    }};"""


def _generate_count(ctx: OperationContext) -> str:
    return """
    const count = async (): Promise<number> => {
      const items = await getAll();
      return items.length;
    };"""


def _generate_batch_create(ctx: OperationContext) -> str:
    f = ctx.feature_name
    return f"""
    const batchCreate = async (items: Partial<{f}>[]): Promise<{f}[]> => {{
      const created = items.map(data => ({{{_id_line(ctx)}
        ...data,
        createdAt: new Date().toISOString(),
        updatedAt: new Date().toISOString(),
      }} as {f}));

      const rows = created.map(item => {ctx.feature_name_camel}ToRow(item));
      await SheetsClient.appendValues(spreadsheetId, {ctx.range_expression}, rows);
      return created;
    }};"""


def _generate_batch_update(ctx: OperationContext) -> str:
    f, key = ctx.feature_name, ctx.key_field
    return f"""
    const batchUpdate = async (updates: Array<{{ id: string; data: Partial<{f}> }}>): Promise<void> => {{
      const items = await getAll();
      const updateMap = new Map(updates.map(u => [u.id, u.data]));

      const valueRanges = items
        .map((item, index) => {{
          const key = item.{key};
          if (!key) return null;
          const updateData = updateMap.get(key);
          if (!updateData) return null;

          const updated = {{ ...item, ...updateData, updatedAt: new Date().toISOString() }};
          const rowNumber = index + {ctx.first_data_row};
          const sheetName = {ctx.sheet_name_expression};

          return {{
            range: {_row_range(ctx)},
            values: [{ctx.feature_name_camel}ToRow(updated)],
          }};
        }})
        .filter((vr): vr is {{ range: string; values: any[][] }} => vr !== null);

      if (valueRanges.length > 0) {{
        await SheetsClient.batchUpdateValues(spreadsheetId, valueRanges);
      }}
    }};"""


_ID_PARAM = OperationParameter("id", "string", required=True, description="Entity key")
_RANGE_PARAM = OperationParameter("range", "string", required=True, description="Range in A1 notation")
_NEEDS_GET_ALL = ("getAll",)


def _build_catalog() -> Mapping[str, OperationDefinition]:
    data = OperationCategory.DATA
    definitions = [
        OperationDefinition(
            "getAll", "Get All", data, "Read every entity", (),
            "{{featureName}}[]", _generate_get_all,
        ),
        OperationDefinition(
            "getById", "Get By ID", data, "Read one entity by key", (_ID_PARAM,),
            "{{featureName}} | null", _generate_get_by_id, _NEEDS_GET_ALL,
        ),
        OperationDefinition(
            "create", "Create", data, "Append a new entity",
            (OperationParameter("data", "Partial<{{featureName}}>", required=True,
                                description="Entity values"),),
            "{{featureName}}", _generate_create,
        ),
        OperationDefinition(
            "update", "Update", data, "Overwrite the row of an entity",
            (_ID_PARAM,
             OperationParameter("updates", "Partial<{{featureName}}>", required=True,
                                description="Changed values")),
            "void", _generate_update, _NEEDS_GET_ALL,
        ),
        OperationDefinition(
            "delete", "Delete", data, "Clear the row of an entity", (_ID_PARAM,),
            "void", _generate_delete, _NEEDS_GET_ALL,
        ),
        OperationDefinition(
            "getRange", "Get Range", data, "Read the values of a range", (_RANGE_PARAM,),
            "any[][]", _generate_get_range,
        ),
        OperationDefinition(
            "setRange", "Set Range", data, "Write values to a range",
            (_RANGE_PARAM,
             OperationParameter("values", "any[][]", required=True,
                                description="Values, row by row")),
            "void", _generate_set_range,
        ),
        OperationDefinition(
            "clearRange", "Clear Range", data, "Clear the values of a range", (_RANGE_PARAM,),
            "void", _generate_clear_range,
        ),
        OperationDefinition(
            "formatCells", "Format Cells", OperationCategory.FORMAT,
            "Apply a cell format to a range",
            (_RANGE_PARAM,
             OperationParameter("format", "any", required=True,
                                description="CellFormat object")),
            "void", _generate_format_cells,
        ),
        OperationDefinition(
            "search", "Search", data, "Filter entities with a predicate",
            (OperationParameter("predicate", "(item: {{featureName}}) => boolean",
                                required=True, description="Filter predicate"),),
            "{{featureName}}[]", _generate_search, _NEEDS_GET_ALL,
        ),
        OperationDefinition(
            "count", "Count", OperationCategory.ANALYSIS, "Count entities", (),
            "number", _generate_count, _NEEDS_GET_ALL,
        ),
        OperationDefinition(
            "batchCreate", "Batch Create", data, "Append several entities in one call",
            (OperationParameter("items", "Partial<{{featureName}}>[]", required=True,
                                description="Entity values"),),
            "{{featureName}}[]", _generate_batch_create,
        ),
        OperationDefinition(
            "batchUpdate", "Batch Update", data, "Overwrite several entity rows in one call",
            (OperationParameter("updates", "Array<{ id: string; data: Partial<{{featureName}}> }>",
                                required=True, description="Keys and changed values"),),
            "void", _generate_batch_update, _NEEDS_GET_ALL,
        ),
    ]
    return MappingProxyType({d.id: d for d in definitions})


OPERATION_CATALOG: Mapping[str, OperationDefinition] = _build_catalog()


def get_operation_definition(operation_id: str) -> Optional[OperationDefinition]:
    return OPERATION_CATALOG.get(operation_id)


def get_operations_by_category(category) -> List[OperationDefinition]:
    """Definitions of one category, in registry order."""
    category = OperationCategory(category)
    return [d for d in OPERATION_CATALOG.values() if d.category == category]


def get_all_operation_ids() -> List[str]:
    return list(OPERATION_CATALOG)


def generate_operation_code(operation_id: str, context: OperationContext) -> str:
    """Render one operation.

    Raises:
        UnknownOperationError: If the id is not registered
        ValidationError: If a data operation has neither a range name nor a schema
    """
    definition = get_operation_definition(operation_id)
    if definition is None:
        raise UnknownOperationError(f"Unknown operation: {operation_id}")
    return definition.generate(context)


def generate_operations_codes(
    operation_ids: Sequence[str], context: OperationContext
) -> List[str]:
    """Render several operations in the given order.

    Raises:
        UnknownOperationError: If any id is not registered
    """
    return [generate_operation_code(op_id, context) for op_id in operation_ids]


def generate_exports_list(operation_ids: Sequence[str]) -> str:
    """Join the export names of the given operations.

    ``delete`` is exported as ``deleteById``. Unregistered ids are skipped.
    """
    names = [
        OPERATION_CATALOG[op_id].export_name
        for op_id in operation_ids
        if op_id in OPERATION_CATALOG
    ]
    return EXPORTS_SEPARATOR.join(names)


def describe_operations() -> List[Dict[str, Any]]:
    """Summaries of every registered operation, for listings."""
    return [
        {
            "id": d.id,
            "name": d.name,
            "category": d.category.value,
            "description": d.description,
            "parameters": [p.name for p in d.parameters],
            "returnType": d.return_type,
        }
        for d in OPERATION_CATALOG.values()
    ]
