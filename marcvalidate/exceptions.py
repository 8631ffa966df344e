#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
This module contains the exception classes for the package.
"""
from typing import Optional


class MarcValidateException(Exception):
    """
    The base exception that let you catch all the errors generated by the library.
    Validation diagnostics are never raised: they are reported per record.
    """


class MarcValidateTypeError(MarcValidateException, TypeError):
    pass


class MarcValidateValueError(MarcValidateException, ValueError):
    pass


class MarcResourceError(MarcValidateException, OSError):
    """
    A generic error on an input source, raised for errors opening,
    decompressing or reading MARCXML data.
    """


class MarcResourceForbidden(MarcResourceError):
    """Raised when the parsing of an input is forbidden for safety reasons."""


class MarcParseError(MarcValidateException, ValueError):
    """
    Raised when the parsing of a MARCXML stream cannot continue, because
    of malformed markup or of an I/O failure. Records finalized before
    the error have already been reported.

    :param message: the error message.
    :param record_id: the identifier of the last record seen before the error.
    """
    def __init__(self, message: str, record_id: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.record_id = record_id

    def __str__(self) -> str:
        if self.__cause__ is None:
            return self.message
        return f'{self.message}: {self.__cause__}'


__all__ = ['MarcValidateException', 'MarcValidateTypeError', 'MarcValidateValueError',
           'MarcResourceError', 'MarcResourceForbidden', 'MarcParseError']
