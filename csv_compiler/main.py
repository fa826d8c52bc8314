#!/usr/bin/env python3

import argparse
import sys

from csv_compiler.config import logging_config
from csv_compiler.controllers.compiler_controller import CompilerController
from csv_compiler.services.errors import CompilationError


def parse_args(argv=None):
    ap = argparse.ArgumentParser(
        prog="csv-compiler",
        description="Merge CSV files with different columns into one CSV holding the union of their headers.",
    )
    ap.add_argument("inputs", nargs="+", help="Input CSV/CSV.GZ files, merged in the given order.")
    ap.add_argument("-o", "--output", help="Output CSV file ('-' for stdout). Defaults to compiled-<timestamp>.csv.")
    ap.add_argument("--excel", help="Also write the compiled table to this .xlsx file.")
    ap.add_argument("--sort", action="store_true", help="Merge inputs in file name order instead of argument order.")
    ap.add_argument("--log-level", default="INFO", help="Logging level (default: INFO).")
    return ap.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    logger = logging_config(args.log_level)

    controller = CompilerController()
    try:
        controller.load_paths(args.inputs, sort=args.sort)
        result = controller.compile()
    except CompilationError as e:
        logger.error("Compilation failed: %s", e)
        return 1

    output = args.output or controller.default_output_name()
    if output == "-":
        sys.stdout.write(controller.to_csv_text())
    else:
        controller.export_csv(output)
    if args.excel:
        controller.export_excel(args.excel)

    summary = result.summary()
    print(summary['message'], file=sys.stderr)
    print(f"  sources: {summary['source_count']}", file=sys.stderr)
    print(f"  rows:    {summary['total_rows']}", file=sys.stderr)
    print(f"  columns: {summary['total_columns']}", file=sys.stderr)
    print(f"  headers: {', '.join(summary['headers'])}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())
