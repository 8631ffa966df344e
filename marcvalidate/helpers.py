#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Logging helpers for the marcvalidate package."""
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, Optional, TypeVar, Union

from marcvalidate.exceptions import MarcValidateValueError

logger = logging.getLogger('marcvalidate')

LOG_LEVELS = {'DEBUG', 'INFO', 'WARN', 'WARNING', 'ERROR', 'CRITICAL'}


def get_loglevel(verbosity: int) -> int:
    """Maps a count of CLI verbosity flags to a logging level."""
    if verbosity <= 0:
        return logging.ERROR
    elif verbosity == 1:
        return logging.WARNING
    elif verbosity == 2:
        return logging.INFO
    else:
        return logging.DEBUG


def set_logging_level(level: Union[str, int]) -> None:
    """Set the level of the package logger, from a level name or number."""
    if not isinstance(level, str):
        logger.setLevel(level)
        return

    name = level.strip().upper()
    if name not in LOG_LEVELS:
        raise MarcValidateValueError(f"{level!r} is not a valid loglevel")
    logger.setLevel(getattr(logging, name))


RT = TypeVar('RT')


def logged(func: Callable[..., RT]) -> Callable[..., RT]:
    """
    A decorator that applies the optional keyword argument 'loglevel' to the
    package logger for the duration of the call, then restores the previous
    level.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        loglevel: Optional[Union[int, str]] = kwargs.pop('loglevel', None)
        if loglevel is None:
            return func(*args, **kwargs)

        previous_level = logger.level
        set_logging_level(loglevel)
        try:
            return func(*args, **kwargs)
        finally:
            logger.setLevel(previous_level)

    return wrapper
