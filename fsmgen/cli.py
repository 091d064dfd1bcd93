# fsmgen/cli.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Command line entry point.

    fsmgen -type CBMDeclaration[,OtherDeclaration] [-dir DIR] [-v]

Each requested declaration is compiled independently; a failing declaration is
reported and the others are still generated. The exit status is 1 if any
declaration failed.
"""

import argparse
import logging
import sys
from typing import List, Optional, Sequence

from fsmgen import __version__
from fsmgen.compiler import compile_declaration
from fsmgen.core.config import CompilerConfig, load_config
from fsmgen.core.errors import FSMGenError, MalformedDeclarationError
from fsmgen.core.naming import verify_type_names
from fsmgen.introspection.source import SourceScanner
from fsmgen.writer import write_generated

logger = logging.getLogger("fsmgen")

LOG_FORMAT = "%(levelname)s %(name)s: %(message)s"


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fsmgen",
        description="Generate typed finite state machines from annotated declaration classes.",
    )
    parser.add_argument(
        "-type",
        "--type",
        dest="types",
        required=True,
        help="comma-separated list of declaration class names; must be set",
    )
    parser.add_argument("-dir", "--dir", dest="directory", default=".", help="working directory (default: .)")
    parser.add_argument("-v", "--verbose", action="store_true", help="verbose output from generator")
    parser.add_argument("--config", default=None, help="pyproject.toml holding a [tool.fsmgen] table")
    parser.add_argument(
        "--min-event-length", dest="min_event_name_length", type=int, default=None, help="minimum event name length"
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def split_type_names(value: str) -> List[str]:
    return [name.strip() for name in value.split(",") if name.strip()]


def run(type_names: Sequence[str], directory: str, config: CompilerConfig, verbose: bool = False) -> int:
    """
    Compile and write every requested declaration found in ``directory``.

    :return: Number of declarations that failed.
    """
    verify_type_names(type_names, config)
    scanner = SourceScanner(directory)
    failures = 0
    for type_name in type_names:
        try:
            declaration = scanner.find(type_name)
            if declaration is None:
                raise MalformedDeclarationError(f"type `{type_name}` not found in {scanner.directory}")
            result = compile_declaration(declaration, config)
            write_generated(result, directory)
        except FSMGenError as e:
            failures += 1
            logger.error(f"{type_name}: {e}")
            continue
        if verbose:
            logger.info("\n" + result.description.rstrip("\n"))
    return failures


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, format=LOG_FORMAT, stream=sys.stderr)

    type_names = split_type_names(args.types)
    if not type_names:
        parser.error("the flag -type must be set")
    if not args.directory:
        parser.error("the flag -dir must be set")

    try:
        config = load_config(args.config).merged(min_event_name_length=args.min_event_name_length)
        failures = run(type_names, args.directory, config, verbose=args.verbose)
    except FSMGenError as e:
        logger.error(str(e))
        return 1
    return 1 if failures else 0
