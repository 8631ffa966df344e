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
This module contains the helpers for opening MARCXML input sources.
"""
import gzip
import io
import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager, ExitStack
from pathlib import Path
from typing import Any, IO, Optional, Union

from marcvalidate.exceptions import MarcResourceError

logger = logging.getLogger('marcvalidate')

STDIN_NAME = '-'

PathType = Union[str, Path]


def is_gzip_path(path: Optional[PathType]) -> bool:
    return path is not None and str(path).endswith('.gz')


def is_file_object(obj: object) -> bool:
    return hasattr(obj, 'read') and hasattr(obj, 'close') and hasattr(obj, 'closed')


@contextmanager
def open_source(path: Union[None, PathType, IO[Any]] = None,
                gunzip: Optional[bool] = None,
                replace_malformed: bool = False) -> Iterator[IO[Any]]:
    """
    Opens a MARCXML input source, returning a readable stream. A file object
    argument is wrapped but never closed.

    :param path: a file path, a file object, or `None` or '-' for standard input.
    :param gunzip: if `True` the input is decompressed with gzip. For default \
    the input is decompressed only if the path ends with '.gz'.
    :param replace_malformed: if `True` the stream is a text stream that decodes \
    UTF-8 replacing malformed sequences, otherwise it's a binary stream.
    """
    if gunzip is None:
        gunzip = not is_file_object(path) and is_gzip_path(path)  # type: ignore[arg-type]

    if isinstance(path, io.TextIOBase) and not hasattr(path, 'buffer'):
        # An in-memory text stream is already decoded
        yield path
        return

    with ExitStack() as stack:
        stream: IO[Any]
        if is_file_object(path):
            stream = getattr(path, 'buffer', path)
        elif path is None or path == STDIN_NAME:
            logger.debug("Read input from standard input")
            stream = getattr(sys.stdin, 'buffer', sys.stdin)
        else:
            logger.debug("Read input from %r", str(path))
            try:
                stream = stack.enter_context(open(path, 'rb'))  # type: ignore[arg-type]
            except OSError as err:
                raise MarcResourceError(err.errno, err.strerror, err.filename) from err

        if gunzip:
            stream = stack.enter_context(gzip.GzipFile(fileobj=stream, mode='rb'))
        elif isinstance(stream, io.RawIOBase):
            stream = io.BufferedReader(stream)  # type: ignore[arg-type]

        if replace_malformed:
            text_stream = io.TextIOWrapper(stream, encoding='utf-8', errors='replace')
            stream = stack.enter_context(_detached(text_stream))

        yield stream


@contextmanager
def _detached(text_stream: io.TextIOWrapper) -> Iterator[io.TextIOWrapper]:
    # Detach the wrapper at exit, so the underlying stream is closed
    # only by its owner.
    try:
        yield text_stream
    finally:
        text_stream.detach()
