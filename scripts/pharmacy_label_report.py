#!/usr/bin/env python
"""Command line entry point for resolving warning labels over a prescription table."""
from __future__ import annotations

import argparse
import logging
from pathlib import Path
from typing import Optional, Tuple

import pandas as pd

from pharmacy_labels.reference import ReferenceDataError, load_reference_data
from pharmacy_labels.report import LabelReportBuilder, report_frame
from pharmacy_labels.resolver import WarningLabelResolver
from pharmacy_labels.shorthand import ShorthandExpander


def _parse_input_argument(value: str) -> Tuple[Path, Optional[str]]:
    sheet = None
    path_text = value
    if "::" in value:
        path_text, sheet = value.split("::", 1)
    path = Path(path_text).expanduser().resolve()
    if not path.exists():
        raise argparse.ArgumentTypeError(f"Input file '{path}' does not exist")
    return path, sheet


def _load_table(path: Path, sheet: Optional[str]) -> pd.DataFrame:
    if path.suffix.lower() in {".xls", ".xlsx", ".xlsm"}:
        return pd.read_excel(path, sheet_name=sheet or 0)
    return pd.read_csv(path)


def build_argument_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Resolve BNF warning labels and expand shorthand directions")
    parser.add_argument("--input", required=True, type=_parse_input_argument, help="CSV or Excel file of prescriptions, as path[::sheet]")
    parser.add_argument("--drug-column", default="Drug", help="Column holding the medication name")
    parser.add_argument("--formulation-column", default="Formulation", help="Column holding the formulation")
    parser.add_argument("--directions-column", default=None, help="Optional column of shorthand directions to expand")
    parser.add_argument("--reference", default=None, help="Directory or http(s) base URL of the reference JSON tables (defaults to the bundled sample data)")
    parser.add_argument("--timeout", type=int, default=10, help="Timeout in seconds when fetching reference data over HTTP")
    parser.add_argument("--output", default="pharmacy_label_report.xlsx", help="Where to write the resulting report")
    parser.add_argument("--output-format", choices=["excel", "csv"], default="excel", help="Output format")
    parser.add_argument("--verbose", action="store_true", help="Log loading and matching details")
    return parser


def main() -> None:
    parser = build_argument_parser()
    args = parser.parse_args()
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        reference = load_reference_data(args.reference, timeout=args.timeout)
    except ReferenceDataError as exc:
        parser.error(str(exc))

    input_path, sheet = args.input
    frame = _load_table(input_path, sheet)

    builder = LabelReportBuilder(WarningLabelResolver.from_reference(reference), ShorthandExpander())
    try:
        rows = builder.build_report(
            frame,
            drug_column=args.drug_column,
            formulation_column=args.formulation_column,
            directions_column=args.directions_column,
        )
    except KeyError as exc:
        parser.error(exc.args[0])

    output_df = report_frame(rows)
    output_path = Path(args.output).expanduser().resolve()
    if args.output_format == "excel":
        output_df.to_excel(output_path, index=False)
    else:
        output_df.to_csv(output_path, index=False)
    print(f"Report written to {output_path}")


if __name__ == "__main__":
    main()
