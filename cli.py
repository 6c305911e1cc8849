#!/usr/bin/env python3
"""CLI for converting Maven Surefire XML reports to CSV."""

import argparse
import logging
import sys

from surefire_csv.converter import CsvConverter, config_flag, load_config
from surefire_csv.errors import ConversionError

logger = logging.getLogger(__name__)

TRUE_VALUES = {'1', 't', 'true', 'yes', 'on'}
FALSE_VALUES = {'0', 'f', 'false', 'no', 'off'}


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(levelname)s: %(message)s'
    )


def parse_bool(value: str) -> bool:
    """Value of a boolean flag given as -flag=value."""
    lowered = value.strip().lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise argparse.ArgumentTypeError(f"invalid boolean value: {value!r}")


def build_parser(config: dict) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description='Convert Maven Surefire XML reports to CSV')
    parser.add_argument('-src', default='',
                        help='Source directory containing Maven Surefire XML reports')
    parser.add_argument('-dest', default='',
                        help='Destination directory where CSV will be written to')
    # -concat, -concat=true and -concat=false are all accepted
    parser.add_argument('-concat', nargs='?', const=True, type=parse_bool,
                        default=config_flag(config, 'SUREFIRE_CONCAT'),
                        help='Concatenate all reports into a single surefire.csv')
    parser.add_argument('-debug', nargs='?', const=True, type=parse_bool,
                        default=config_flag(config, 'SUREFIRE_DEBUG'),
                        help='Print debug information')
    return parser


def run(argv=None, out=None) -> int:
    """Parse flags and convert. Returns the process exit code."""
    args = build_parser(load_config()).parse_args(argv)

    if not args.src:
        print("src must be provided", file=sys.stderr)
        return 1
    if not args.dest:
        print("dest must be provided", file=sys.stderr)
        return 1

    setup_logging(args.debug)

    converter = CsvConverter(args.src, concat=args.concat,
                             log=out if out is not None else sys.stdout,
                             debug=args.debug)
    try:
        summary = converter.to(args.dest)
    except ConversionError as e:
        print(e, file=sys.stderr)
        return 1

    if not summary.ok:
        logger.warning(f"{len(summary.failed)} entries failed, "
                       f"{len(summary.converted)} reports converted")
    return 0


def main():
    return run(sys.argv[1:])


if __name__ == '__main__':
    sys.exit(main())
