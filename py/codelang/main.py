#!/usr/bin/env python3
"""
Main entry point for the CODE language interpreter
"""

import argparse
import logging
import sys
from typing import List, Optional

from termcolor import colored

from .config import DEFAULT_MAX_DEPTH, Settings
from .lexer_0 import Lexer
from .pipeline import Failure, compile_source, run_source

logger = logging.getLogger(__name__)


def load_source(path: str) -> str:
    with open(path, 'r', encoding='utf-8') as f:
        return f.read().replace('\r', '')


def configure_logging(level: str):
    logging.basicConfig(
        level=getattr(logging, level, logging.WARNING),
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def format_failure(failure: Failure, color: bool = True) -> str:
    """Plain output is exactly `(row,column): message`; a terminal also gets a coloured phase label."""
    if color:
        return colored(f"{failure.phase} error: ", "red", attrs=["bold"]) + failure.render()
    return failure.render()


def report(message: str, settings: Settings):
    if settings.color:
        message = colored("error: ", "red", attrs=["bold"]) + message
    else:
        message = "error: " + message
    print(message, file=sys.stderr)


def run_file(filename: str, settings: Settings) -> int:
    try:
        source = load_source(filename)
    except FileNotFoundError:
        report(f"File '{filename}' not found", settings)
        return 1
    except (OSError, UnicodeDecodeError) as e:
        report(f"File '{filename}' could not be read: {e}", settings)
        return 1

    if settings.echo:
        print(source)

    if settings.dump_tokens:
        for token in Lexer(source).tokenize():
            print(token)
        return 0

    logger.debug("running %s", filename)
    if settings.check_only:
        result = compile_source(source, settings.max_depth)
    else:
        result = run_source(source, max_depth=settings.max_depth)

    if not result.ok:
        sys.stdout.flush()
        print(format_failure(result.failure, settings.color), file=sys.stderr)
        return 1
    return 0


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="codelang", description="Run a CODE language program.")
    parser.add_argument("file", help="program to interpret and run")
    parser.add_argument("--check", action="store_true", help="parse and type-check only, do not run")
    parser.add_argument("--echo", action="store_true", help="print the program source before running it")
    parser.add_argument("--tokens", action="store_true", help="print the token stream and exit")
    parser.add_argument("--no-color", action="store_true", help="plain error messages")
    parser.add_argument("--log-level", default=None,
                        help="DEBUG, INFO, WARNING (default) or ERROR; also read from CODELANG_LOG_LEVEL")
    parser.add_argument("--max-depth", type=int, default=DEFAULT_MAX_DEPTH,
                        help="deepest allowed nesting of blocks and parentheses")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_arg_parser().parse_args(argv)
    settings = Settings.from_args(args)
    configure_logging(settings.log_level)
    return run_file(args.file, settings)


if __name__ == '__main__':
    sys.exit(main())
