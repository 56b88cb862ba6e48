"""Importer CLI entry points.
This module exposes commands to import files and inspect transforms.
It maps argparse commands onto SDK calls.
"""

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, Sequence

from core.config import SkyConfig
from core.constants import SUPPORTED_FILE_TYPES
from core.errors import SkyConfigError, SkyError
from core.types import Expression, ImportOptions
from ingest.transform_loader import list_named_transforms, load_transform_text
from sky_import import import_to_jsonl
from transform.compiler import compile_transform


def build_parser() -> argparse.ArgumentParser:
    """Build the top-level CLI parser.

    Returns:
        Configured argument parser.
    """
    parser = argparse.ArgumentParser(prog="sky-import", description="Event file importer")
    parser.add_argument("--transforms-dir", help="Override SKY_TRANSFORMS_DIR for this command")
    subparsers = parser.add_subparsers(dest="command", required=True)
    _add_import_command(subparsers)
    _add_compile_command(subparsers)
    _add_transforms_command(subparsers)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the importer CLI.

    Args:
        argv: Optional argument vector.

    Returns:
        Process exit code.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    try:
        config = _build_config(args.transforms_dir)
        if args.command == "import":
            return _run_import_command(config, args)
        if args.command == "compile":
            return _run_compile_command(config, args)
        if args.command == "transforms":
            return _run_transforms_command(config)
    except SkyError as error:
        print(f"[ERROR] {error}", file=sys.stderr)
        return 1
    parser.error(f"Unsupported command: {args.command}")
    return 2


def _build_config(transforms_dir: str | None) -> SkyConfig:
    """Build config with optional transforms-dir override.

    Args:
        transforms_dir: Optional override path.

    Returns:
        Runtime config.
    """
    config = SkyConfig.from_env()
    if transforms_dir:
        config = replace(config, transforms_dir=Path(transforms_dir).expanduser().resolve())
    return config


def _run_import_command(config: SkyConfig, args: argparse.Namespace) -> int:
    """Handle import command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    options = ImportOptions(
        files=tuple(args.files),
        transform=args.transform,
        table_name=args.table,
        headers=_parse_headers(args.headers),
        file_type=args.file_type,
    )
    if args.batch_size is not None:
        if args.batch_size <= 0:
            raise SkyConfigError(
                f"Invalid --batch-size value: expected a positive integer, got {args.batch_size}."
            )
        config = replace(config, batch_size=args.batch_size)
    if args.output is None:
        import_to_jsonl(options, sys.stdout, config)
        return 0
    with open(args.output, "w", encoding="utf-8") as output_stream:
        import_to_jsonl(options, output_stream, config)
    return 0


def _run_compile_command(config: SkyConfig, args: argparse.Namespace) -> int:
    """Handle compile command.

    Args:
        config: Runtime config.
        args: Parsed CLI args.

    Returns:
        Exit code.
    """
    spec = compile_transform(load_transform_text(args.transform, config))
    for rule in spec.rules:
        action = rule.action
        if isinstance(action, Expression):
            print(f"{rule.dotted_path}\texpression\t{action.code}")
        else:
            print(f"{rule.dotted_path}\textract\t{action.input_field}\t{action.coercion or '-'}")
    if spec.translate is not None:
        print(f"translate\texpression\t{spec.translate}")
    for module_name in spec.requires:
        print(f"require\t{module_name}")
    return 0


def _run_transforms_command(config: SkyConfig) -> int:
    """Handle transforms command."""
    for name in list_named_transforms(config):
        print(name)
    return 0


def _parse_headers(raw_headers: str | None) -> tuple[str, ...] | None:
    if raw_headers is None:
        return None
    return tuple(header.strip() for header in raw_headers.split(","))


def _add_import_command(subparsers: Any) -> None:
    """Register import subcommand."""
    parser = subparsers.add_parser("import", help="Translate input files into events")
    parser.add_argument("files", nargs="+", help="Input .csv, .tsv, .txt or .json files")
    parser.add_argument(
        "-t",
        "--transform",
        required=True,
        help="Named transform or path to a YAML transform file",
    )
    parser.add_argument("--table", help="Destination table (defaults to SKY_TABLE)")
    parser.add_argument(
        "--headers",
        help="Comma-separated column names; delimited files are then read without a header row",
    )
    parser.add_argument(
        "--file-type",
        choices=SUPPORTED_FILE_TYPES,
        help="Override file type detection by extension",
    )
    parser.add_argument("-o", "--output", help="Output JSONL path (defaults to stdout)")
    parser.add_argument("--batch-size", type=int, help="Override SKY_BATCH_SIZE")


def _add_compile_command(subparsers: Any) -> None:
    """Register compile subcommand."""
    parser = subparsers.add_parser("compile", help="Print the compiled rules of a transform")
    parser.add_argument("transform", help="Named transform or path to a YAML transform file")


def _add_transforms_command(subparsers: Any) -> None:
    """Register transforms subcommand."""
    subparsers.add_parser("transforms", help="List named transforms")
