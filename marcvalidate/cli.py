#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Command Line Interface"""
import sys
import os
import argparse
import logging
from urllib.error import URLError

from xmlschema import XMLSchemaException

from marcvalidate.exceptions import MarcValidateException
from marcvalidate.documents import validate_records
from marcvalidate.helpers import get_loglevel, logger

PROGRAM_NAME = os.path.basename(sys.argv[0])

EXIT_VALID = 0
EXIT_INVALID = 1
EXIT_ABORTED = 3


def get_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog=PROGRAM_NAME, add_help=True,
                                     description="validate the records of a MARCXML "
                                                 "collection against the MARC21 slim schema.")
    parser.usage = "%(prog)s [OPTION]... [FILE]\n" \
                   "Try '%(prog)s --help' for more information."

    parser.add_argument('-v', dest='verbosity', action='count', default=0,
                        help="increase output verbosity.")
    parser.add_argument('-z', '--gunzip', action='store_true', default=None,
                        help="expect gzipped input (implied by a '.gz' file suffix).")
    parser.add_argument('-r', '--replace-malformed', action='store_true', default=False,
                        help="replace malformed UTF-8 sequences and report them.")
    parser.add_argument('--schema', type=str, metavar='PATH',
                        help="path to an alternative XSD schema.")
    parser.add_argument('--no-defuse', dest='defuse', action='store_false', default=True,
                        help="allow entity declarations in the input.")
    parser.add_argument('file', metavar='[FILE]', nargs='?', default='-',
                        help="input file, '-' or unspecified for standard input.")
    return parser


def validate() -> None:
    args = get_parser().parse_args()

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter('%(levelname)s: %(message)s'))
    logger.addHandler(handler)

    try:
        summary = validate_records(
            source=args.file,
            report=sys.stdout,
            schema=args.schema,
            gunzip=args.gunzip,
            replace_malformed=args.replace_malformed,
            defuse=args.defuse,
            loglevel=get_loglevel(args.verbosity),
        )
    except (MarcValidateException, XMLSchemaException, URLError) as err:
        sys.stderr.write(f"{err}\n")
        sys.exit(EXIT_ABORTED)
    finally:
        logger.removeHandler(handler)

    sys.exit(EXIT_INVALID if summary.bad else EXIT_VALID)
