"""tagdump CLI - print the metadata tags embedded in a media file."""
import os
import sys
import argparse
import logging
from typing import List, Optional

from .core import TagFile, FormatError, UsageError
from .render import render_tag_file
from .utils import (
    Config,
    setup_logging,
    register_signal_handlers,
    unregister_signal_handlers,
    EXIT_CODE_SUCCESS,
    EXIT_CODE_ERROR,
    EXIT_CODE_USAGE,
    EXIT_CODE_NO_FILE,
    EXIT_CODE_UNSUPPORTED,
    EXIT_CODE_INTERRUPTED
)

logger = logging.getLogger(__name__)

# ---------- CLI & Main ----------
def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="tagdump",
        description="tagdump - dump the Xiph comment and ID3v2 tags of a media file"
    )
    # Arity is checked by validate_args so the usage goes to stdout
    parser.add_argument("files", nargs='*', metavar="file", help="path to file to dump tags for")
    parser.add_argument("--width", type=int, default=None,
                        help="Output width in columns (default: terminal width)")
    parser.add_argument("--interactive", action='store_true',
                        help="Wait for Enter before exiting")
    parser.add_argument("--verbose", action='store_true', default=None,
                        help="Enable verbose logging (overrides TAGDUMP_VERBOSE env var)")
    return parser

def validate_args(args: argparse.Namespace) -> str:
    """Return the single file path to dump, or raise UsageError / FileNotFoundError."""
    if not args.files:
        raise UsageError("File not provided")
    if len(args.files) != 1:
        raise UsageError(f"Expected one file, got {len(args.files)}")
    if args.width is not None and args.width <= 0:
        raise UsageError("--width must be positive")
    if args.width is not None and args.width <= Config.VALUE_INDENT:
        raise UsageError(f"--width must be larger than the value indent ({Config.VALUE_INDENT})")

    file_path = args.files[0]
    if not os.path.isfile(file_path):
        raise FileNotFoundError(f"File {file_path} does not exist")
    return file_path

def dump_file(file_path: str, width: Optional[int] = None) -> int:
    """Render the tags of one file to stdout. Returns exit code."""
    try:
        with TagFile.managed(file_path) as tag_file:
            render_tag_file(tag_file, width=width)
    except FormatError as e:
        logger.error(f"Cannot read tags from {file_path}: {e}")
        print(f"*** {e}", file=sys.stderr)
        return EXIT_CODE_UNSUPPORTED
    return EXIT_CODE_SUCCESS

def wait_for_enter() -> None:
    try:
        input("Press Enter to Exit")
    except EOFError:
        # stdin closed, nothing to wait for
        print()

def main(argv: Optional[List[str]] = None) -> int:
    """Main CLI entry point. Returns the process exit code."""
    register_signal_handlers()
    try:
        parser = build_parser()
        args = parser.parse_args(argv)

        # Configuration precedence: CLI flag > environment variable > default
        try:
            Config.load_from_env()
        except ValueError as e:
            print(f"*** Configuration error: {e}", file=sys.stderr)
            return EXIT_CODE_USAGE

        if args.verbose is None:
            args.verbose = Config.DEFAULT_VERBOSE
        setup_logging(args.verbose)

        try:
            file_path = validate_args(args)
        except UsageError as e:
            logger.debug(f"Usage error: {e}")
            print(f"*** {e}", file=sys.stderr)
            parser.print_help()
            return EXIT_CODE_USAGE
        except FileNotFoundError as e:
            logger.debug(f"Missing input: {e}")
            print(f"*** {e}", file=sys.stderr)
            parser.print_help()
            return EXIT_CODE_NO_FILE

        try:
            exit_code = dump_file(file_path, width=args.width)
        except KeyboardInterrupt:
            return EXIT_CODE_INTERRUPTED
        except OSError as e:
            logger.error(f"Failed to read {file_path}: {e}")
            print(f"*** Could not read {file_path}: {e}", file=sys.stderr)
            return EXIT_CODE_ERROR
        except Exception as e:
            logger.error(f"Unexpected error: {e}", exc_info=True)
            print(f"*** Unexpected error: {e}", file=sys.stderr)
            return EXIT_CODE_ERROR

        if args.interactive:
            wait_for_enter()
        return exit_code

    finally:
        unregister_signal_handlers()


if __name__ == '__main__':
    sys.exit(main())
