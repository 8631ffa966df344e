#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
import sys
import zlib
from typing import Any, IO, Optional, TextIO, Union
from xml.sax import SAXParseException

from marcvalidate.exceptions import MarcParseError, MarcResourceForbidden
from marcvalidate.helpers import logged, logger
from marcvalidate.accumulator import RecordAccumulator, ValidationSummary
from marcvalidate.parser import RecordValidatingParser, SchemaSourceType
from marcvalidate.sources import open_source, PathType

__all__ = ('validate_records',)


@logged
def validate_records(source: Union[None, PathType, IO[Any]] = None,
                     report: Optional[TextIO] = None,
                     schema: Optional[SchemaSourceType] = None,
                     gunzip: Optional[bool] = None,
                     replace_malformed: bool = False,
                     defuse: bool = True) -> ValidationSummary:
    """
    Validates the records of a MARCXML collection, writing the invalid
    records with their located diagnostics and a final summary line
    to a report stream.

    :param source: a path, a file-like object, or `None` or '-' for standard input.
    :param report: the text stream for the report, `sys.stdout` for default.
    :param schema: an optional XSD schema instance or path. For default the \
    bundled MARC21 slim schema is used.
    :param gunzip: if `True` the input is decompressed with gzip. For default \
    it's decompressed only if the path ends with '.gz'.
    :param replace_malformed: if `True` malformed UTF-8 sequences are replaced \
    and reported as diagnostics instead of stopping the parsing.
    :param defuse: if `True`, the default, entity declarations are forbidden.
    :param loglevel: an optional logging level to apply during the call.
    :return: a named tuple with the counts of good and bad records.
    :raises MarcResourceError: if the input file cannot be opened.
    :raises MarcParseError: when the parsing cannot continue, because of \
    malformed markup or of a read or decompression error. The message \
    refers to the last record identifier seen.
    """
    if report is None:
        report = sys.stdout

    parser = RecordValidatingParser(schema, defuse=defuse,
                                    replace_malformed=replace_malformed)
    accumulator = RecordAccumulator(report)

    with open_source(source, gunzip=gunzip,
                     replace_malformed=replace_malformed) as stream:
        try:
            parser.parse(stream, accumulator)
        except (SAXParseException, MarcResourceForbidden,
                OSError, EOFError, zlib.error) as err:
            record_id = accumulator.record_id
            logger.debug("Validation stopped near record %r: %s", record_id, err)
            raise MarcParseError(f"problem near record {record_id!r}", record_id) from err

    return accumulator.end()
