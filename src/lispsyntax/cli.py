"""Command-line interface for lispsyntax."""

from __future__ import annotations

import argparse
import sys
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from lispsyntax.errors import ReaderError, TranslationError


@dataclass(frozen=True, slots=True)
class CliOptions:
    """Parsed CLI options."""

    input_file: Path
    output_file: Path | None
    top_level: bool
    blank_lines: int
    check: bool
    debug: bool


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser (separate function for testability)."""
    p = argparse.ArgumentParser(
        prog="lispsyntax",
        description="Translate S-expression source to host AST and back",
    )
    p.add_argument("input", help="Input .clj file")
    p.add_argument("-o", "--output", help="Output file (default: stdout)")
    p.add_argument(
        "--config",
        metavar="FILE",
        help="Config file (default: auto-discover lispsyntax.toml)",
    )
    p.add_argument(
        "--nested",
        action="store_true",
        help="Render forms as nested rather than top-level (fn instead of defn)",
    )
    p.add_argument(
        "--blank-lines",
        type=int,
        default=None,
        metavar="N",
        help="Blank lines between rendered forms (default: 0)",
    )
    p.add_argument("--check", action="store_true", help="Only check that the input translates")
    p.add_argument("--debug", action="store_true", help="Dump host AST to stderr")
    return p


def load_config(config_path: Path | None, input_dir: Path) -> dict[str, Any]:
    """Read the explicit config file, or lispsyntax.toml beside the input, if present."""
    path = config_path if config_path is not None else input_dir / "lispsyntax.toml"

    if not path.is_file():
        return {}

    with open(path, "rb") as f:
        return tomllib.load(f)


def _format_settings(config: dict[str, Any]) -> tuple[bool, int]:
    """Read the [format] table; values of the wrong type are ignored."""
    top_level, blank_lines = True, 0
    table = config.get("format")
    if not isinstance(table, dict):
        return top_level, blank_lines
    if isinstance(table.get("top_level"), bool):
        top_level = table["top_level"]
    value = table.get("blank_lines")
    if isinstance(value, int) and not isinstance(value, bool):
        blank_lines = value
    return top_level, blank_lines


def resolve_options(args: argparse.Namespace) -> CliOptions:
    """Merge config file and CLI args into CliOptions.

    Precedence: config file < CLI flags.
    """
    input_file = Path(args.input)
    input_dir = input_file.parent
    if not input_dir.parts:
        input_dir = Path(".")

    config = load_config(Path(args.config) if args.config else None, input_dir)
    top_level, blank_lines = _format_settings(config)

    if args.nested:
        top_level = False
    if args.blank_lines is not None:
        blank_lines = args.blank_lines
    if blank_lines < 0:
        raise argparse.ArgumentTypeError(f"blank lines must be non-negative: {blank_lines}")

    output_file = Path(args.output) if args.output else None

    return CliOptions(
        input_file=input_file,
        output_file=output_file,
        top_level=top_level,
        blank_lines=blank_lines,
        check=args.check,
        debug=args.debug,
    )


def translate_file(options: CliOptions) -> str:
    """Read a source file, translate it to host AST, and render it back."""
    from lispsyntax.debug import dump_ast
    from lispsyntax.detranspiler import to_form
    from lispsyntax.render import render_all
    from lispsyntax.transpiler import transpile

    source = options.input_file.read_text(encoding="utf-8")
    nodes = transpile(source, str(options.input_file))

    if options.debug:
        dump_ast(nodes)

    forms = [to_form(node, options.top_level) for node in nodes]
    text = render_all(forms, options.blank_lines)
    return text + "\n" if text else text


def main(argv: list[str] | None = None) -> int:
    """CLI entry point. Returns exit code (0/1/2). Does not call sys.exit()."""
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except argparse.ArgumentTypeError as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 2

    try:
        text = translate_file(options)
    except TranslationError as exc:
        print(exc.format(str(options.input_file)), file=sys.stderr)
        # malformed text is 1, untranslatable forms are 2
        return 1 if isinstance(exc, ReaderError) else 2

    if options.check:
        return 0

    if options.output_file:
        options.output_file.write_text(text, encoding="utf-8")
    else:
        sys.stdout.write(text)

    return 0
