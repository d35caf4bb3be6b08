"""Interactive shell (``bloodbath`` / ``python -m bloodbath``)."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import IO, Final

from .errors import BloodbathError
from .evaluator import Session
from .values import render

logger = logging.getLogger(__name__)

EXIT_COMMAND: Final[str] = "quit"
_DEFAULT_PROMPT: Final[str] = os.environ.get("BLOODBATH_PROMPT", "> ")
_DEFAULT_LOG_LEVEL: Final[str] = os.environ.get("BLOODBATH_LOG_LEVEL", "WARNING")

_LOG_LEVELS: Final[tuple[str, ...]] = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def _log_level(text: str) -> str:
    level = text.upper()
    if level not in _LOG_LEVELS:
        raise argparse.ArgumentTypeError(
            f"invalid log level {text!r} (choose from {', '.join(_LOG_LEVELS)})"
        )
    return level


def _run_line(session: Session, line: str, dest: IO[str]) -> bool:
    """Evaluate *line* and print the outcome. Returns False if it failed."""
    try:
        value = session.evaluate(line)
    except BloodbathError as err:
        logger.debug("line %r failed with %s", line, type(err).__name__)
        print(err, file=dest)
        return False
    print(render(value), file=dest)
    return True


def _process_line(session: Session, line: str, dest: IO[str]) -> bool:
    """Process one input line. Returns False when the session should end."""
    line = line.rstrip("\r\n")
    if line == EXIT_COMMAND:
        print("Goodbye!", file=dest)
        return False
    if line.strip():
        _run_line(session, line, dest)
    return True


def interact(session: Session, source: IO[str], dest: IO[str], *, prompt: str = _DEFAULT_PROMPT) -> None:
    print("Welcome to the Bloodbath REPL!", file=dest)
    print(f'Enter an expression to evaluate it. Type "{EXIT_COMMAND}" to exit.', file=dest)

    while True:
        print(prompt, end="", file=dest, flush=True)
        line = source.readline()
        if not line:
            print(file=dest)
            break
        if not _process_line(session, line, dest):
            break


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bloodbath",
        description="Evaluator for a small prefix-notation expression language.",
    )
    parser.add_argument(
        "-c",
        "--command",
        action="append",
        metavar="TEXT",
        help="evaluate TEXT as one line and exit; may be given more than once",
    )
    parser.add_argument(
        "--log-level",
        type=_log_level,
        default=_DEFAULT_LOG_LEVEL,
        help="logging level (default: %(default)s, or $BLOODBATH_LOG_LEVEL)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    args = _build_parser().parse_args(argv)
    logging.basicConfig(level=args.log_level)

    session = Session()
    if args.command:
        ok = True
        for line in args.command:
            ok = _run_line(session, line, sys.stdout) and ok
        return 0 if ok else 1

    try:
        interact(session, sys.stdin, sys.stdout)
    except KeyboardInterrupt:
        print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
