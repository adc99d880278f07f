"""Converter CLI entry points.
This module exposes the convert and run-spec commands.
It maps argparse commands onto the ingest pipeline.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import ConverterConfig
from core.constants import ITEMS_FILE_NAME
from core.conversion_spec import load_conversion_spec
from core.errors import FlyExpressionError
from core.logging_config import configure_logging
from core.types import ConversionOptions, ConversionSummary
from ingest.pipeline import convert_expression_data


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(
        prog="flyexpr",
        description="Convert modENCODE expression tables into gene-linked items",
    )
    parser.add_argument("--output-root", help="Override FLYEXPR_OUTPUT_ROOT for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_convert_command(subparsers)
    _add_run_spec_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the converter CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.output_root)
        configure_logging(config.log_level)
        if args.command == "convert":
            return _run_convert_command(config, args)
        if args.command == "run-spec":
            return _run_run_spec_command(config, args)
    except FlyExpressionError as error:
        print(f"error: {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(output_root: str | None) -> ConverterConfig:
    """Build config with optional output-root override.

    Args:
        output_root: Optional override path.

    Returns:
        Validated runtime config.
    """
    config = ConverterConfig.from_env()
    if output_root:
        config = replace(config, output_root=Path(output_root).expanduser().resolve())
    return config


def _run_convert_command(config: ConverterConfig, args: argparse.Namespace) -> int:
    """Handle convert command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    output_dir = Path(args.output_dir).expanduser().resolve() if args.output_dir else None
    id_file = Path(args.id_file).expanduser().resolve() if args.id_file else None
    options = ConversionOptions(
        score_path=Path(args.scores),
        stage_path=Path(args.stages),
        term_path=Path(args.terms),
        output_dir=output_dir or config.output_root,
        id_resolver_path=id_file or config.id_resolver_path,
    )
    summary = convert_expression_data(options, config)
    _print_summary(options, summary)
    return 0


def _run_run_spec_command(config: ConverterConfig, args: argparse.Namespace) -> int:
    """Handle run-spec command."""
    options = load_conversion_spec(args.spec_file, config)
    summary = convert_expression_data(options, config)
    _print_summary(options, summary)
    return 0


def _print_summary(options: ConversionOptions, summary: ConversionSummary) -> None:
    print(f"items_path={options.output_dir / ITEMS_FILE_NAME}")
    print(f"rows_read={summary.rows_read}")
    print(f"observations_emitted={summary.observations_emitted}")
    print(f"genes_created={summary.genes_created}")
    print(f"bad_scores={summary.bad_scores}")
    for reason, count in sorted(summary.skipped_rows.items()):
        print(f"skipped_{reason}={count}")


def _add_convert_command(subparsers: Any) -> None:
    """Register convert subcommand."""
    parser = subparsers.add_parser("convert", help="Convert expression tables into items")
    parser.add_argument("--scores", required=True, help="Tab-delimited expression score file")
    parser.add_argument("--stages", required=True, help="Tab-delimited stage vocabulary file")
    parser.add_argument("--terms", required=True, help="Tab-delimited expression level file")
    parser.add_argument("--id-file", help="Optional gene identifier file for resolution")
    parser.add_argument("--output-dir", help="Output directory, defaults to the output root")


def _add_run_spec_command(subparsers: Any) -> None:
    """Register run-spec subcommand."""
    parser = subparsers.add_parser("run-spec", help="Run a declarative YAML conversion spec")
    parser.add_argument("spec_file", help="Path to YAML conversion spec")
