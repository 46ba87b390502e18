"""
Command-line interface for eda-sexp.

    eda-sexp check <file>...            Verify files parse and re-render canonically
    eda-sexp get <file> <path>          Print the typed value at a path
    eda-sexp format <file>              Re-render a file in canonical form
    eda-sexp config [--show|--init]     Show or create the configuration file

Examples:
    eda-sexp check project/boards/*/board.lp
    eda-sexp get library/pkg.lp name
    eda-sexp get board.lp "layers/layer[1]" --type str
    eda-sexp get board.lp default_font_size --type int
    eda-sexp format board.lp -o board.formatted.lp
    eda-sexp format board.lp --in-place --indent "  "
"""

from __future__ import annotations

import argparse
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import List, Optional
from uuid import UUID

from pydantic import AnyUrl

from eda_sexp import __version__
from eda_sexp.config import CONFIG_FILENAMES, Config, generate_template
from eda_sexp.exceptions import SExpError
from eda_sexp.sexp import SExpression, parse, parse_file, save_file
from eda_sexp.types import Color, UInt

from .utils import get_console, print_error

__all__ = ["main"]

logger = logging.getLogger(__name__)

# Value types selectable with `get --type`
VALUE_TYPES = {
    "str": str,
    "int": int,
    "uint": UInt,
    "bool": bool,
    "datetime": datetime,
    "color": Color,
    "url": AnyUrl,
    "uuid": UUID,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point for the eda-sexp CLI."""
    parser = argparse.ArgumentParser(
        prog="eda-sexp",
        description="Inspect and format S-expression project files",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument("--version", action="version", version=f"eda-sexp {__version__}")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    check_parser = subparsers.add_parser("check", help="Verify files round-trip canonically")
    check_parser.add_argument("files", nargs="+", help="Files to check")

    get_parser = subparsers.add_parser("get", help="Print the value at a path")
    get_parser.add_argument("file", help="File to read")
    get_parser.add_argument("path", help="Path like 'layers/layer[1]'")
    get_parser.add_argument("--type", choices=sorted(VALUE_TYPES), default="str")
    get_parser.add_argument("--non-empty", action="store_true", help="Fail on empty values")

    format_parser = subparsers.add_parser("format", help="Re-render a file canonically")
    format_parser.add_argument("file", help="File to format")
    format_group = format_parser.add_mutually_exclusive_group()
    format_group.add_argument("-o", "--output", help="Write to this file instead of stdout")
    format_group.add_argument("--in-place", action="store_true", help="Overwrite the file")
    format_parser.add_argument("--indent", help="Indentation unit (default from config)")
    format_parser.add_argument(
        "--flatten", action="store_true", help="Drop line breaks (single-line output)"
    )

    config_parser = subparsers.add_parser("config", help="Show or create configuration")
    config_group = config_parser.add_mutually_exclusive_group()
    config_group.add_argument("--show", action="store_true", help="Show effective configuration")
    config_group.add_argument("--init", action="store_true", help="Create template config file")

    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )

    if not args.command:
        parser.print_help()
        return 0

    try:
        config = Config.load()
        if args.command == "check":
            return _run_check(args, config)
        if args.command == "get":
            return _run_get(args, config)
        if args.command == "format":
            return _run_format(args, config)
        return _run_config(args, config)
    except SExpError as e:
        print_error(e, verbose=args.verbose)
        return 1


def _run_check(args, config: Config) -> int:
    """Handle check command."""
    console = get_console()
    indent = config.format.indent
    failures = 0

    for file in args.files:
        try:
            root = parse_file(
                file, keep_line_breaks=True, snippet_length=config.parse.snippet_length
            )
        except SExpError as e:
            print_error(e, verbose=args.verbose)
            failures += 1
            continue

        problem = _canonical_problem(root, indent)
        if problem:
            console.print(f"[red]FAIL[/red] {file}: {problem}")
            failures += 1
        else:
            console.print(f"[green]OK[/green]   {file}")

    logger.debug("Checked %d files, %d failed", len(args.files), failures)
    return 1 if failures else 0


def _canonical_problem(root: SExpression, indent: str) -> Optional[str]:
    """Return why ``root`` does not survive render/parse, or None."""
    text = root.to_string(indent_unit=indent)
    reparsed = parse(text, keep_line_breaks=True)
    if reparsed.to_string(indent_unit=indent) != text:
        return "rendering is not stable"

    expected = root.copy()
    expected.remove_line_breaks()
    reparsed.remove_line_breaks()
    if reparsed != expected:
        return "re-parsed tree differs"
    return None


def _run_get(args, config: Config) -> int:
    """Handle get command."""
    root = parse_file(args.file, snippet_length=config.parse.snippet_length)
    value = root.get_value_by_path(args.path, VALUE_TYPES[args.type], args.non_empty)
    print(value)
    return 0


def _run_format(args, config: Config) -> int:
    """Handle format command."""
    indent = args.indent if args.indent is not None else config.format.indent
    root = parse_file(
        args.file,
        keep_line_breaks=config.parse.keep_line_breaks,
        snippet_length=config.parse.snippet_length,
    )
    if args.flatten:
        root.remove_line_breaks()

    if args.in_place or args.output:
        target = Path(args.file) if args.in_place else Path(args.output)
        save_file(root, target, indent, config.format.trailing_newline)
        logger.info("Wrote %s", target)
    else:
        sys.stdout.write(root.to_string(indent_unit=indent) + "\n")
    return 0


def _run_config(args, config: Config) -> int:
    """Handle config command."""
    if args.init:
        target = Path.cwd() / CONFIG_FILENAMES[0]
        if target.exists():
            print(f"Config file already exists: {target}", file=sys.stderr)
            return 1
        target.write_text(generate_template(), encoding="utf-8")
        print(f"Created {target}")
        return 0

    print("# Effective eda-sexp configuration")
    for section in ("format", "parse"):
        print(f"\n[{section}]")
        values = getattr(config, section)
        for key, value in vars(values).items():
            source = config.get_source(f"{section}.{key}")
            print(f"{key} = {value!r}  # from {source}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
