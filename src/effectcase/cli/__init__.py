"""Command-line entry point: run the welcome program against the terminal.

Usage:
    effectcase                      # accept "Joe", 1000 attempts
    effectcase --name Ann --attempts 3
    effectcase --log-format json --log-level DEBUG
"""

from __future__ import annotations

import argparse
import sys
from typing import TYPE_CHECKING

from effectcase.examples import welcome
from effectcase.foundation.config import get_settings
from effectcase.foundation.errors import InvalidCount, ProgramFailure
from effectcase.runtime.observability import configure_from_settings, configure_logging

if TYPE_CHECKING:
    from collections.abc import Sequence


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="effectcase",
        description="Ask for a name until the accepted one is entered.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Environment:
    EFFECTCASE_WELCOME_ACCEPTED_NAME, EFFECTCASE_WELCOME_ATTEMPTS,
    EFFECTCASE_LOG_FORMAT, EFFECTCASE_LOG_LEVEL, EFFECTCASE_RETRY_BACKOFF
        """,
    )
    parser.add_argument("--name", help="Accepted name (default: settings, 'Joe')")
    parser.add_argument("--attempts", type=int, help="Total attempts before giving up")
    parser.add_argument("--log-format", choices=("console", "json", "none"), help="Log output format")
    parser.add_argument("--log-level", choices=("DEBUG", "INFO", "WARNING", "ERROR"), help="Minimum log level")
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Run the welcome program. Returns the process exit code."""
    args = build_parser().parse_args(argv)
    settings = get_settings()

    if args.log_format or args.log_level:
        configure_logging(
            args.log_format or settings.logging.format,
            args.log_level or settings.log_level,
            output=sys.stderr,
        )
    else:
        configure_from_settings(settings, output=sys.stderr)

    try:
        program = welcome(accepted=args.name, attempts=args.attempts)
    except InvalidCount as e:
        print(f"effectcase: {e}", file=sys.stderr)
        return 2

    try:
        program.run()
    except ProgramFailure as e:
        print(f"effectcase: gave up: {e.trace.format()}", file=sys.stderr)
        return 1
    return 0
