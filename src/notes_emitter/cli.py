"""CLI entry point for apple-notes-emitter."""

import argparse
import io
import logging
import sys
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path

from notes_emitter.channels.apple_notes import run_bridge
from notes_emitter.config import ConfigError, EmitterConfig, load_config
from notes_emitter.errors import EX_CONFIG, EX_OK, NotesError, exit_code_for
from notes_emitter.license import UNLICENSE
from notes_emitter.pipeline import LoggingObserver, run_pipeline

PROG = "apple-notes-emitter"

logger = logging.getLogger(__name__)


def _version() -> str:
    try:
        return version(PROG)
    except PackageNotFoundError:
        return "unknown"


def _positive_int(value: str) -> int:
    try:
        n = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if n < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer: {value!r}")
    return n


def configure_logging(verbose: int = 0, debug: bool = False) -> None:
    """Send log records to stderr. stdout carries documents only."""
    if debug or verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(
        stream=sys.stderr,
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
    )


def handle_error(err: NotesError) -> int:
    """Report an error on stderr and return its exit code."""
    print(f"Error: {err}", file=sys.stderr)
    logger.debug("%s details: %s", type(err).__name__, err.details())
    return exit_code_for(err)


def cmd_emit(config: EmitterConfig) -> int:
    """Export all notes to stdout as JSON lines."""
    stdout = sys.stdout
    if isinstance(stdout, io.TextIOWrapper) and stdout.encoding.lower() not in ("utf-8", "utf8"):
        stdout.reconfigure(encoding="utf-8")

    try:
        run_pipeline(config, stdout, bridge=run_bridge, observer=LoggingObserver())
    except NotesError as err:
        return handle_error(err)
    return EX_OK


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog=PROG,
        description="Emit every Apple Notes note as a line of JSON on stdout.",
    )
    parser.add_argument(
        "-w",
        "--wrap-width",
        type=_positive_int,
        metavar="WIDTH",
        help="Wrap width for plain-text conversion from HTML (default: 80)",
    )
    parser.add_argument(
        "--skip-invalid",
        action="store_true",
        help="Skip notes that cannot be parsed instead of stopping",
    )
    parser.add_argument("--config", type=Path, help="Path to a config.yaml")
    parser.add_argument(
        "-v", "--verbose", action="count", default=0, help="More log output (repeatable)"
    )
    parser.add_argument("-d", "--debug", action="store_true", help="Debug log output")
    parser.add_argument("-V", "--version", action="store_true", help="Print version and exit")
    parser.add_argument("--license", action="store_true", help="Print license and exit")
    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"{PROG} {_version()}")
        return EX_OK

    if args.license:
        print(UNLICENSE, end="")
        return EX_OK

    configure_logging(args.verbose, args.debug)

    try:
        config = load_config(args.config).with_overrides(
            wrap_width=args.wrap_width,
            skip_invalid=True if args.skip_invalid else None,
        )
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return EX_CONFIG

    return cmd_emit(config)


if __name__ == "__main__":
    raise SystemExit(main())
