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
This module contains the exception classes of the package.
"""
from typing import Any, Optional


class SchematronException(Exception):
    """The base exception that let you catch all the errors generated by the library."""


class SchematronTypeError(SchematronException, TypeError):
    pass


class SchematronValueError(SchematronException, ValueError):
    pass


class SchematronOwnershipError(SchematronValueError):
    """Raised when a foreign element already belongs to another tree or model element."""


class SchematronParseError(SchematronValueError):
    """Raised when an error is found when reading a Schematron schema."""

    def __init__(self, message: str, elem: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.elem = elem

    def __str__(self) -> str:
        sourceline = getattr(self.elem, 'sourceline', None)
        if sourceline is None:
            return self.message
        return f'{self.message} (line {sourceline})'


class SchematronModelError(SchematronValueError):
    """
    Structural violation of a Schematron model element.

    :param source: the model element that contains the error.
    :param message: the error message.
    """
    def __init__(self, source: Any, message: str) -> None:
        super().__init__(message)
        self.source = source
        self.message = message

    def __str__(self) -> str:
        return f'{self.message}: {self.source!r}'

    def __repr__(self) -> str:
        return '%s(message=%r)' % (self.__class__.__name__, self.message)


class SchematronResourceError(SchematronException, OSError):
    """Raised when an error is found accessing or parsing an XML resource."""


class SchematronTransformError(SchematronException, RuntimeError):
    """
    Raised when the execution of a validation program fails. No partial
    result is available when this error is raised.

    :param message: the error message.
    :param entries: the log entries reported by the engine, if any.
    """
    def __init__(self, message: str, entries: Optional[list[Any]] = None) -> None:
        super().__init__(message)
        self.message = message
        self.entries = list(entries) if entries else []

    def __str__(self) -> str:
        if not self.entries:
            return self.message
        return '\n  '.join([self.message] + [str(e) for e in self.entries])


class SchematronValidationError(SchematronValueError):
    """
    Raised when an XML document is not valid against a Schematron.

    :param source: the validated XML source.
    :param report: the SVRL report of the validation, `None` if no report \
    has been produced.
    """
    def __init__(self, source: Any, report: Optional[Any] = None) -> None:
        if report is None:
            message = "no validation report produced"
        else:
            message = "failed validation"
        super().__init__(message)
        self.message = message
        self.source = source
        self.report = report

    def __str__(self) -> str:
        lines = [f"{self.message} of {self.source!r}"]
        if self.report is not None:
            for result in self.report.iter_failed_asserts():
                lines.append(f"  {result.location}: {result.text}")
        return "\n".join(lines)


class SVRLConsistencyError(SchematronException):
    """
    Raised when a validation program output doesn't conform to the SVRL
    grammar. This is a defect of the compiled program, not of the
    validated document.
    """
    def __init__(self, message: str, elem: Optional[Any] = None) -> None:
        super().__init__(message)
        self.message = message
        self.elem = elem

    def __str__(self) -> str:
        if self.elem is None:
            return self.message
        return f'{self.message}: {self.elem!r}'


__all__ = ['SchematronException', 'SchematronTypeError', 'SchematronValueError',
           'SchematronOwnershipError', 'SchematronParseError', 'SchematronModelError',
           'SchematronResourceError', 'SchematronTransformError', 'SchematronValidationError',
           'SVRLConsistencyError']
