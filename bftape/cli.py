from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path
from typing import Optional

from .errors import RunFailed
from .runner import Runner
from .streams import stdin_input, stdout_output

DEFAULT_MAX_SIZE = 2**29

logger = logging.getLogger(__name__)


def _read_source(path: str) -> str:
    source_path = Path(path)
    if not source_path.exists():
        raise FileNotFoundError(f"Source file not found: {path}")
    return source_path.read_text(encoding="utf-8")


def _positive_int(value: str) -> int:
    number = int(value)
    if number < 1:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[list[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Run a tape machine program")
    parser.add_argument("source", nargs="?", help="Path to the source file")
    parser.add_argument(
        "-s",
        "--source-file",
        dest="source_file",
        help="Path to the source file (alternative to the positional argument)",
    )
    parser.add_argument(
        "-m",
        "--max-size",
        type=_positive_int,
        default=DEFAULT_MAX_SIZE,
        help=f"Maximum number of tape cells (default: {DEFAULT_MAX_SIZE})",
    )
    parser.add_argument(
        "-b",
        "--steps-before-interrupt",
        type=_positive_int,
        help="Pause the machine every N steps before resuming it",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = parser.parse_args(argv)

    source = args.source_file or args.source
    if source is None:
        parser.error("a source file is required")

    _configure_logging(args.verbose)

    try:
        source_text = _read_source(source)
    except FileNotFoundError as exc:
        print(str(exc), file=sys.stderr)
        return 1

    runner = Runner(args.max_size, source_text, stdin_input(), stdout_output())
    try:
        if args.steps_before_interrupt:
            while not runner.run_for(args.steps_before_interrupt).terminated:
                logger.debug("interrupted after %d total steps", runner.step_count)
        else:
            runner.run()
    except RunFailed as exc:
        sys.stdout.buffer.flush()
        print(f"error after {runner.step_count} steps: {exc.error}", file=sys.stderr)
        return 1

    sys.stdout.buffer.flush()
    sys.stdout.write("Program halted!\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
