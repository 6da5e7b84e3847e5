"""
Live demo: infer a schema from a sheet and point a named range at its data.

Steps:
1. Read the header row of a sheet and infer a schema (translating Japanese
   headers when --lang is given)
2. Create or replace the named range over the schema's data range
3. Read the current rows into a pandas DataFrame

Requires Google credentials (GOOGLE_APPLICATION_CREDENTIALS or gspread's default
service account file) with access to the spreadsheet.

Usage:
    python examples/infer_and_sync_demo.py SPREADSHEET_ID SHEET_NAME A1 "ID,Title,Done" [--lang ja]
"""

import argparse
import sys

from sheetcraft import Config, SheetcraftError, configure_logging
from sheetcraft.compiler import infer_schema
from sheetcraft.sheets import NamedRangeSynchronizer, SheetsClient, SheetTable


def parse_args():
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[1])
    parser.add_argument("spreadsheet_id")
    parser.add_argument("sheet_name")
    parser.add_argument("header_start_cell")
    parser.add_argument("headers", help="Comma-separated header texts")
    parser.add_argument("--lang", default=None)
    parser.add_argument("--range-name", default=None)
    return parser.parse_args()


def main():
    args = parse_args()
    config = Config.from_env()
    configure_logging(config.SHEETCRAFT_LOG_LEVEL)
    gc = config.authorize()

    try:
        result = infer_schema(
            gc,
            args.spreadsheet_id,
            args.sheet_name,
            [h.strip() for h in args.headers.split(",")],
            args.header_start_cell,
            lang=args.lang,
            config=config,
        )
    except SheetcraftError as exc:
        print(f"Error: {exc}")
        for key, value in exc.debug.items():
            print(f"  {key}: {value}")
        sys.exit(1)

    schema = result.schema
    for f in schema.fields:
        print(f"  {f.column}: {f.name} ({f.description})")

    range_name = args.range_name or f"{args.sheet_name.upper()}_RANGE"
    client = SheetsClient(gc)
    sync = NamedRangeSynchronizer(client).synchronize_schema(args.spreadsheet_id, schema, range_name)
    for line in sync.messages:
        print(line)

    frame = SheetTable(client, args.spreadsheet_id, schema).read_frame()
    print(frame.head().to_string(index=False))


if __name__ == "__main__":
    main()
