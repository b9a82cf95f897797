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
Error handlers for the structural checks of Schematron model elements. The
checks report the violations to a handler, that decides if stop the process
raising an exception or to continue, collecting or logging the errors.
"""
import logging
from typing import Any

from xmlschematron.exceptions import SchematronTypeError, SchematronValueError, \
    SchematronModelError

logger = logging.getLogger('xmlschematron')

VALIDATION_MODES = frozenset(('strict', 'lax', 'skip'))


class ErrorHandler:
    """Base class for error handlers."""

    def __repr__(self) -> str:
        return '%s()' % self.__class__.__name__

    def error(self, source: Any, message: str) -> None:
        """
        Reports a structural error.

        :param source: the model element that has the error.
        :param message: the error message.
        """
        raise NotImplementedError()

    def warning(self, source: Any, message: str) -> None:
        """Reports a warning, for default writes it to the logger."""
        logger.warning("%s: %r", message, source)


class LoggingErrorHandler(ErrorHandler):
    """The default error handler, that writes errors to the logger."""

    def error(self, source: Any, message: str) -> None:
        logger.error("%s: %r", message, source)


class CollectingErrorHandler(ErrorHandler):
    """An error handler that collects errors and warnings."""

    def __init__(self) -> None:
        self.errors: list[SchematronModelError] = []
        self.warnings: list[SchematronModelError] = []

    def __repr__(self) -> str:
        return '%s(errors=%d, warnings=%d)' % (
            self.__class__.__name__, len(self.errors), len(self.warnings)
        )

    def error(self, source: Any, message: str) -> None:
        self.errors.append(SchematronModelError(source, message))

    def warning(self, source: Any, message: str) -> None:
        self.warnings.append(SchematronModelError(source, message))

    @property
    def messages(self) -> list[str]:
        return [e.message for e in self.errors]

    def has_errors(self) -> bool:
        return bool(self.errors)

    def clear(self) -> None:
        self.errors.clear()
        self.warnings.clear()


class RaisingErrorHandler(ErrorHandler):
    """An error handler that raises the first error reported."""

    def error(self, source: Any, message: str) -> None:
        raise SchematronModelError(source, message)


class SilentErrorHandler(ErrorHandler):
    """An error handler that ignores errors and warnings."""

    def error(self, source: Any, message: str) -> None:
        return

    def warning(self, source: Any, message: str) -> None:
        return


def check_validation_mode(validation: str) -> None:
    if not isinstance(validation, str):
        raise SchematronTypeError("validation mode must be a string")
    if validation not in VALIDATION_MODES:
        raise SchematronValueError(
            "validation mode can be 'strict', 'lax' or 'skip': %r" % validation
        )


def get_error_handler(validation: str = 'lax') -> ErrorHandler:
    """
    Returns an error handler for a validation mode: 'strict' raises at the
    first error, 'lax' collects the errors and 'skip' ignores them.
    """
    check_validation_mode(validation)
    if validation == 'strict':
        return RaisingErrorHandler()
    elif validation == 'lax':
        return CollectingErrorHandler()
    else:
        return SilentErrorHandler()
