#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any, Optional, TypeVar, Union

from xmlschematron.exceptions import SchematronValueError
from xmlschematron.utils.etree import is_etree_element, is_etree_document, etree_tostring

logger = logging.getLogger('xmlschematron')

LOG_LEVELS = {'DEBUG', 'INFO', 'WARN', 'WARNING', 'ERROR', 'CRITICAL'}


def set_logging_level(level: Union[str, int]) -> None:
    """set logging level of xmlschematron's logger."""
    if isinstance(level, str):
        _level = level.strip().upper()
        if _level not in LOG_LEVELS:
            raise SchematronValueError(f"{level!r} is not a valid loglevel")
        logger.setLevel(getattr(logging, _level))
    else:
        logger.setLevel(level)


RT = TypeVar('RT')


def logged(func: Callable[..., RT]) -> Callable[..., RT]:
    """
    A decorator for activating a logging level for a function. The keyword
    argument 'loglevel' is obtained from the keyword arguments and used by the
    wrapper function to set the logging level of the decorated function and
    to restore the original level after the call.
    """
    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        loglevel: Optional[Union[int, str]] = kwargs.pop('loglevel', None)
        if loglevel is None:
            return func(*args, **kwargs)
        else:
            current_level = logger.level
            set_logging_level(loglevel)
            try:
                return func(*args, **kwargs)
            finally:
                logger.setLevel(current_level)

    return wrapper


def dump_document(title: str, document: Any, max_lines: Optional[int] = None) -> None:
    """
    Dump an XML document to the logger for debugging purposes. Does nothing
    if the logger isn't enabled for the DEBUG level.

    :param title: a short description of the dumped document.
    :param document: an Element or an ElementTree instance.
    :param max_lines: truncate the dump after a number of lines.
    """
    if not logger.isEnabledFor(logging.DEBUG) or document is None:
        return

    if is_etree_element(document) or is_etree_document(document):
        logger.debug("%s:\n%s", title, etree_tostring(document, '  ', max_lines))
    else:
        logger.debug("%s: %r", title, document)
