"""
ucon Command Line

Converts the conversion given as arguments, a batch of lines from a file, or
whatever is typed at the console.

Usage:
    ucon 1 in mm
    ucon -v 350 cid L
    ucon -b conversions.txt -o results.txt
    ucon --list-units length
    ucon                            # interactive console
"""

import argparse
import logging
import sys
from typing import List, Optional

from ucon import __version__
from ucon.config.loader import load_registry
from ucon.config.settings import find_units_file, load_settings
from ucon.config.validator import ConfigurationError
from ucon.console import Console, describe_units
from ucon.formatting import MAX_PRECISION, OutputStyle
from ucon.session import Session

logger = logging.getLogger(__name__)

PROMPT = "> "
LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR']


def _precision(text: str) -> int:
    try:
        precision = int(text)
    except ValueError:
        raise argparse.ArgumentTypeError(f"not an integer: '{text}'") from None
    if not 1 <= precision <= MAX_PRECISION:
        raise argparse.ArgumentTypeError(f"must be within 1..{MAX_PRECISION}")
    return precision


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="ucon", description="Unit converter")

    style = parser.add_mutually_exclusive_group()
    style.add_argument("-s", "--simple", dest="style", action="store_const",
                       const=OutputStyle.SIMPLE, help="Print the result only")
    style.add_argument("-d", "--descriptive", dest="style", action="store_const",
                       const=OutputStyle.DESCRIPTIVE, help="Print the result and its unit")
    style.add_argument("-v", "--verbose", dest="style", action="store_const",
                       const=OutputStyle.VERBOSE, help="Print the whole conversion")

    parser.add_argument("--precision", type=_precision, help="Significant digits")
    parser.add_argument("--config", help="Path to settings YAML")
    parser.add_argument("--units", help="Path to unit definitions")
    parser.add_argument("--log-level", default="WARNING", choices=LOG_LEVELS,
                        type=str.upper, help="Logging level")
    parser.add_argument("-b", "--batch", nargs="?", const="-", metavar="FILE",
                        help="Read conversions from FILE, or stdin if omitted")
    parser.add_argument("-o", "--output", metavar="FILE",
                        help="Also write results to FILE")
    parser.add_argument("-q", "--quiet", action="store_true",
                        help="Do not print results (use with -o)")
    parser.add_argument("--list-units", nargs="?", const="", metavar="TYPE",
                        help="List units, optionally of one type")
    parser.add_argument("--version", action="version", version=f"ucon {__version__}")
    parser.add_argument("conversion", nargs="*",
                        help="VALUE... INPUT_UNIT OUTPUT_UNIT...")
    return parser


def _run(args: argparse.Namespace, console: Console) -> int:
    if args.conversion:
        console.execute_words(args.conversion)
        return 1 if console.failures else 0

    if args.batch is not None:
        if args.batch == "-":
            failures = console.run(sys.stdin)
        else:
            try:
                with open(args.batch) as f:
                    failures = console.run(f)
            except OSError as e:
                print(f"ucon: cannot read {args.batch}: {e.strerror}", file=sys.stderr)
                return 1
        return 1 if failures else 0

    try:
        console.run(sys.stdin, prompt=PROMPT)
    except KeyboardInterrupt:
        print()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format='%(message)s')

    if args.conversion and args.batch is not None:
        parser.error("conversion arguments cannot be combined with --batch")

    # Load settings and units
    try:
        settings = load_settings(args.config)
        units_path = find_units_file(args.units, settings)
        logger.info(f"Units: {units_path}")
        registry = load_registry(units_path)
    except ConfigurationError as e:
        print(f"ucon: {e}", file=sys.stderr)
        return 1

    if args.list_units is not None:
        try:
            lines = describe_units(registry, args.list_units or None)
        except ValueError as e:
            parser.error(str(e))
        print("\n".join(lines))
        return 0

    session = Session(
        registry,
        style=args.style or settings.style,
        precision=args.precision if args.precision is not None else settings.precision,
    )

    if args.output:
        try:
            record = open(args.output, "w")
        except OSError as e:
            print(f"ucon: cannot write {args.output}: {e.strerror}", file=sys.stderr)
            return 1
        with record:
            return _run(args, Console(session, record=record, quiet=args.quiet))

    return _run(args, Console(session, quiet=args.quiet))


if __name__ == "__main__":
    sys.exit(main())
