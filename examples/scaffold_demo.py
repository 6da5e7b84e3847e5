"""
Scaffold demo: hand-written schema -> generated feature files.

This script builds a small Task schema, prints the operation catalog, then
renders the Task feature (types, repository, use case) into a scratch directory.
No credentials are needed.

Usage:
    python examples/scaffold_demo.py [output_dir]
"""

import sys
import tempfile
from pathlib import Path

from sheetcraft import FeatureSchema, FieldSchema, compile_feature, configure_logging
from sheetcraft.codegen.catalog import describe_operations


def build_schema() -> FeatureSchema:
    return FeatureSchema(
        fields=[
            FieldSchema(name="id", type="string", column="A", required=True),
            FieldSchema(name="title", type="string", column="B", required=True),
            FieldSchema(name="completed", type="boolean", column="C", storage_format="TRUE/FALSE"),
            FieldSchema(name="dueDate", type="date", column="E"),
        ],
        sheet_name="Tasks",
    )


def main():
    configure_logging("INFO")

    for op in describe_operations():
        print(f"{op['category']:>8}  {op['id']:<12} {op['description']}")
    print()

    artifacts = compile_feature("Task", schema=build_schema(), operations=["all"])
    for line in artifacts.messages:
        print(line)

    root = Path(sys.argv[1]) if len(sys.argv) > 1 else Path(tempfile.mkdtemp(prefix="sheetcraft-"))
    for path in artifacts.write(root):
        print(f"  wrote {path}")

    print()
    print(artifacts.type_definition)


if __name__ == "__main__":
    main()
