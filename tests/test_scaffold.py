"""
Unit tests for feature scaffolding.

Rendering is checked in memory; FeatureArtifacts.write is exercised against
pytest's tmp_path.
"""

from datetime import datetime, timezone
from pathlib import Path

import pytest

from sheetcraft.codegen.catalog import get_all_operation_ids
from sheetcraft.codegen.scaffold import (
    FeatureScaffolder,
    resolve_operation_list,
    upsert_range_constant,
    upsert_type_definition,
)
from sheetcraft.exceptions import UnknownOperationError, ValidationError
from sheetcraft.schema.model import FeatureSchema


FIXED = datetime(2024, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


@pytest.fixture
def scaffolder():
    return FeatureScaffolder(clock=lambda: FIXED)


class TestOperationList:

    @pytest.mark.parametrize("ops", [None, [], ["all"], ["create", "all"]])
    def test_all_operations(self, ops):
        assert resolve_operation_list(ops) == get_all_operation_ids()

    def test_explicit_list_kept(self):
        assert resolve_operation_list(["count", "getAll"]) == ["count", "getAll"]

    def test_get_all_added_for_operations_that_call_it(self):
        assert resolve_operation_list(["create", "update", "delete"]) == [
            "getAll", "create", "update", "delete",
        ]

    def test_independent_operations_unchanged(self):
        assert resolve_operation_list(["create", "getRange"]) == ["create", "getRange"]

    def test_unknown_ids_kept(self):
        assert resolve_operation_list(["explode", "count"]) == ["getAll", "explode", "count"]


class TestScaffold:

    def test_with_schema(self, scaffolder, task_schema):
        artifacts = scaffolder.scaffold("task", operations=["getAll", "delete"], schema=task_schema)

        assert artifacts.range_name == "TASK_RANGE"
        assert artifacts.data_range == "Tasks!A2:D"
        assert artifacts.type_definition.startswith("export interface Task {")

        repo = artifacts.files[Path("features/task/UniversalTaskRepo.ts")]
        assert "// Generated by sheetcraft at 2024-01-02T03:04:05+00:00" in repo
        assert "import { TASK_RANGE } from '../../core/constants';" in repo
        assert "const rowToTask = (row: string[]): Task => ({" in repo
        assert "const taskToRow = (task: Task)" in repo
        assert "if (!data.title) throw new Error('title is required');" in repo
        assert "    completed: false," in repo
        assert "const deleteById = async" in repo
        assert "      validate,\n      defaults,\n      getAll,\n      deleteById" in repo

        use_case = artifacts.files[Path("features/task/TaskUseCase.ts")]
        assert "createUniversalTaskRepo(spreadsheetId)" in use_case

    def test_schema_range_name_used(self, scaffolder, task_schema):
        task_schema.range_name = "TASKS"
        assert scaffolder.scaffold("Task", schema=task_schema).range_name == "TASKS"

    def test_explicit_range_name_wins(self, scaffolder, task_schema):
        task_schema.range_name = "TASKS"
        artifacts = scaffolder.scaffold("Task", schema=task_schema, range_name="MY_RANGE")
        assert artifacts.range_name == "MY_RANGE"

    def test_without_schema(self, scaffolder):
        artifacts = scaffolder.scaffold("todo")

        repo = artifacts.files[Path("features/todo/UniversalTodoRepo.ts")]
        assert "return {};" in repo
        assert "getAll" not in repo
        assert artifacts.type_definition is None
        assert artifacts.data_range is None
        assert artifacts.messages[-1] == "Generated 0 operations"

    def test_subset_renders_get_all_it_depends_on(self, scaffolder, task_schema):
        artifacts = scaffolder.scaffold("Task", operations=["update", "delete"], schema=task_schema)

        repo = artifacts.files[Path("features/task/UniversalTaskRepo.ts")]
        assert artifacts.operation_ids == ["getAll", "update", "delete"]
        assert "const getAll = async" in repo
        assert "Using operations: getAll, update, delete" in artifacts.messages

    def test_schema_without_fields_renders_skeleton(self, scaffolder, tmp_path):
        artifacts = scaffolder.scaffold("Task", schema=FeatureSchema(fields=[], sheet_name="Tasks"))

        repo = artifacts.files[Path("features/task/UniversalTaskRepo.ts")]
        assert "TASK_RANGE" not in repo
        assert "return {};" in repo
        assert artifacts.type_definition is None
        assert artifacts.messages[-1] == "Generated 0 operations"

        artifacts.write(tmp_path)
        assert not (tmp_path / "core" / "constants.ts").exists()

    def test_requires_feature_name(self, scaffolder):
        with pytest.raises(ValidationError, match="featureName is required"):
            scaffolder.scaffold("")

    def test_unknown_operation(self, scaffolder, task_schema):
        with pytest.raises(UnknownOperationError):
            scaffolder.scaffold("Task", operations=["getAll", "explode"], schema=task_schema)

    def test_write(self, scaffolder, task_schema, tmp_path):
        artifacts = scaffolder.scaffold("Task", operations=["getAll"], schema=task_schema)
        written = artifacts.write(tmp_path)

        assert tmp_path / "features" / "task" / "UniversalTaskRepo.ts" in written
        types = (tmp_path / "core" / "types.ts").read_text(encoding="utf-8")
        constants = (tmp_path / "core" / "constants.ts").read_text(encoding="utf-8")
        assert types.startswith("/** Auto-generated types */\n")
        assert "export interface Task {" in types
        assert "export const TASK_RANGE = 'Tasks!A2:D';" in constants
        assert "Updated core constants: TASK_RANGE" in artifacts.messages

        # a second run replaces the declarations instead of appending
        artifacts.write(tmp_path)
        assert (tmp_path / "core" / "types.ts").read_text(encoding="utf-8").count("export interface Task ") == 1


class TestUpserts:

    def test_type_replaced_in_place(self):
        content = (
            "export interface Task {\n  old: string;\n}\n"
            "export interface TaskList {\n  items: Task[];\n}\n"
        )
        updated = upsert_type_definition(content, "Task", "export interface Task {\n  id: string;\n}")
        assert "old: string" not in updated
        assert "export interface TaskList {\n  items: Task[];\n}" in updated
        assert updated.count("export interface Task {") == 1

    def test_type_appended(self):
        updated = upsert_type_definition("export interface Other {\n}", "Task", "export interface Task {\n}")
        assert updated == "export interface Other {\n}\nexport interface Task {\n}\n"

    def test_constant_replaced(self):
        content = "export const TASK_RANGE = 'Old!A2:B';\nexport const OTHER = 'X!A:A';\n"
        updated = upsert_range_constant(content, "TASK_RANGE", "Tasks!A2:D")
        assert updated == "export const TASK_RANGE = 'Tasks!A2:D';\nexport const OTHER = 'X!A:A';\n"

    def test_constant_with_quoted_sheet(self):
        updated = upsert_range_constant("", "MAIL_RANGE", "'My Mail'!A2:B")
        assert updated == "/** Auto-generated range constants */\nexport const MAIL_RANGE = '\\'My Mail\\'!A2:B';\n"
