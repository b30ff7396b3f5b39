#!/usr/bin/env python3
"""
ltrkit CLI
==========
Command-line interface for LTR name tables.

Usage:
    ltrkit -g 20 human_male.ltr            generate 20 names
    ltrkit -p human_male.ltr               print the tables
    ltrkit -b elves.ltr < elves.txt        build a table from a word list
    ltrkit -b -g 10 -s 42 elves.ltr < elves.txt
"""

import argparse
import logging
import sys

from ltrkit import __version__
from ltrkit.builder import build_table, iter_words
from ltrkit.config import LtrConfig
from ltrkit.errors import LtrError
from ltrkit.printer import format_table
from ltrkit.repair import repair_table
from ltrkit.sampler import NameSampler, make_rng
from ltrkit.settings import resolve_path
from ltrkit.table import read_table, write_table

# =============================================================================
# Utilities
# =============================================================================

class Output:
    """Handles CLI output with quiet mode support."""

    def __init__(self, quiet: bool = False):
        self.quiet = quiet

    def print(self, *args, **kwargs):
        if not self.quiet:
            print(*args, **kwargs)

    def error(self, msg: str):
        print(f"Error: {msg}", file=sys.stderr)

    def success(self, msg: str):
        if not self.quiet:
            print(f"OK: {msg}", file=sys.stderr)


def setup_logging(verbose: bool = False, quiet: bool = False):
    level = logging.INFO
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.ERROR
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s", stream=sys.stderr)


def resolve_generate(args, default_count: int) -> int:
    """
    Number of names to generate, 0 if -g was not given.

    "-g FILE" leaves the file in the count slot; move it back to ltrfile
    and fall back to the default count.
    """
    value = args.generate
    if value is None:
        return 0
    if value is True:
        return default_count
    try:
        return int(value)
    except ValueError:
        if args.ltrfile is None:
            args.ltrfile = value
            return default_count
        raise


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='ltrkit',
        description='NWN name generator tool: build, print and sample .ltr Markov tables',
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument('--version', action='version', version=f'ltrkit {__version__}')
    parser.add_argument('-p', '--print', action='store_true',
                        help='Print Markov chain tables for LTRFILE in a human readable format')
    parser.add_argument('-b', '--build', action='store_true',
                        help='Build Markov chain tables using words from stdin and store in LTRFILE')
    parser.add_argument('-g', '--generate', nargs='?', const=True, metavar='NUM',
                        help='Generate NUM names from LTRFILE and print to stdout (default: 100)')
    parser.add_argument('-s', '--seed', type=int,
                        help='Set the RNG seed (default: current time). 0 is used as a seed, not as "use the time"')
    parser.add_argument('-n', '--nofix', action='store_true',
                        help='Do not fix corrupted tables in ltr files')
    parser.add_argument('-v', '--verbose', action='store_true', help='Show repair details')
    parser.add_argument('-q', '--quiet', action='store_true', help='Only log errors')
    parser.add_argument('ltrfile', nargs='?', help='Path to the .ltr file')
    return parser


# =============================================================================
# Main
# =============================================================================

def main(argv=None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    out = Output(quiet=args.quiet)
    setup_logging(verbose=args.verbose, quiet=args.quiet)

    try:
        config = LtrConfig()
        count = resolve_generate(args, config.default_count)
    except (ValueError, OSError) as e:
        out.error(str(e))
        return 1

    if not (args.print or args.build or count):
        print("Need at least one of -p, -b, -g")
        parser.print_help()
        return 0

    if not args.ltrfile:
        out.error("LTRFILE is required")
        return 1

    path = resolve_path(args.ltrfile)
    rng = make_rng(args.seed)

    try:
        if args.build:
            table = build_table(iter_words(sys.stdin), config)
            write_table(table, path)
            out.success(f"Table written to {path}")
        else:
            table = read_table(path)

        if not args.nofix:
            repair_table(table, config)

        if args.print:
            for line in format_table(table):
                print(line)

        if count:
            for name in NameSampler(table, rng, config).generate(count):
                print(name)
    except KeyboardInterrupt:
        out.print("\nCancelled.", file=sys.stderr)
        return 130
    except (LtrError, OSError) as e:
        out.error(str(e))
        if args.verbose:
            import traceback
            traceback.print_exc()
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
