#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from .exceptions import MarcValidateException, MarcValidateTypeError, \
    MarcValidateValueError, MarcResourceError, MarcResourceForbidden, MarcParseError
from .names import MARC21_NAMESPACE, MARC21_SLIM_SCHEMA
from .helpers import set_logging_level
from .accumulator import Position, ValidationSummary, RecordAccumulator
from .parser import RecordHandler, RecordValidatingParser, get_marc_schema
from .sources import open_source
from .documents import validate_records

__version__ = '1.0.0'
__author__ = "Davide Brunato"
__contact__ = "brunato@sissa.it"
__copyright__ = "Copyright 2016-2024, SISSA"
__license__ = "MIT"
__status__ = "Production/Stable"

__all__ = [
    'MarcValidateException', 'MarcValidateTypeError', 'MarcValidateValueError',
    'MarcResourceError', 'MarcResourceForbidden', 'MarcParseError',
    'MARC21_NAMESPACE', 'MARC21_SLIM_SCHEMA', 'set_logging_level',
    'Position', 'ValidationSummary', 'RecordAccumulator', 'RecordHandler',
    'RecordValidatingParser', 'get_marc_schema', 'open_source', 'validate_records',
]
