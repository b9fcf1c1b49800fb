"""Command-line interface for halgen."""

import argparse
import logging
import os
import sys
import time
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler

from .core import parse_yaml
from .errors import HalgenError
from .generator import CodeGenerator
from .snippets import load_snippets

# Environment variable naming the default snippet table (file or directory)
HALGEN_SNIPPETS_ENV = "HALGEN_SNIPPETS"


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="halgen",
        description="HAL interface code generator - Render parsed interface definitions",
    )
    ap.add_argument("input", nargs="?", help="Input YAML syntax tree")
    ap.add_argument("-d", "--debug", action="store_true", help="Enable debug logging")
    ap.add_argument(
        "-s",
        "--snippets",
        type=Path,
        default=None,
        metavar="PATH",
        help=f"Snippet table, YAML file or directory (also: {HALGEN_SNIPPETS_ENV} env var)",
    )
    ap.add_argument(
        "--section",
        action="append",
        dest="sections",
        default=None,
        metavar="NAME",
        help="Section to generate; repeat for several (default: all sections)",
    )
    ap.add_argument(
        "-o",
        "--output",
        default=Path.cwd() / "generated",
        help="Output directory (relative to invocation directory)",
    )

    mode = ap.add_mutually_exclusive_group()
    mode.add_argument(
        "--stdout",
        action="store_true",
        help="Print generated text instead of writing files",
    )
    mode.add_argument(
        "--list-sections",
        action="store_true",
        help="List the sections of the snippet table and exit",
    )
    return ap


def main(argv: list[str] | None = None) -> int:
    """Main entry point for halgen CLI.

    Args:
        argv: Command-line arguments. If None, uses sys.argv[1:].

    Returns:
        Exit code (0 for success, non-zero for failure).
    """
    start_time = time.time()

    ap = build_parser()
    args = ap.parse_args(argv)

    # Setup logging
    log = logging.getLogger("halgen")
    log_level = logging.DEBUG if args.debug else logging.INFO
    log.handlers = [
        RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            show_time=False,
        )
    ]
    log.setLevel(log_level)

    snippets_path: Path | None = args.snippets
    if snippets_path is None and HALGEN_SNIPPETS_ENV in os.environ:
        snippets_path = Path(os.environ[HALGEN_SNIPPETS_ENV])
    if snippets_path is None:
        log.error(f"No snippet table given. Use --snippets or {HALGEN_SNIPPETS_ENV}.")
        return 1

    try:
        table = load_snippets(snippets_path)
    except Exception as e:
        log.error(f"Could not load snippets: {e}")
        if args.debug:
            raise
        return 1

    if args.list_sections:
        for name in table.section_names:
            print(name)
        return 0

    if args.input is None:
        log.error("No input file given.")
        return 1

    sections: list[str] = args.sections or table.section_names
    if not sections:
        log.error("Snippet table has no sections.")
        return 1

    code_gen = CodeGenerator(table, Path(args.output))
    try:
        if args.stdout:
            unit = code_gen.validate(parse_yaml(Path(args.input)))
            for section in sections:
                sys.stdout.write(code_gen.render(unit, section))
        else:
            code_gen.generate_from_file(Path(args.input), sections)
    except HalgenError:
        # Already reported through the diagnostics
        return 1
    except Exception as e:
        log.error(f"Generation failed: {e}")
        if args.debug:
            raise
        return 1

    if code_gen.diagnostics.errors:
        log.warning(f"Finished with {len(code_gen.diagnostics.errors)} error(s)")

    end_time = time.time()
    log.debug(f"Done after {end_time - start_time:.2f} seconds.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
