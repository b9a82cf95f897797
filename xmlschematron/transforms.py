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
This module contains the helpers for executing validation programs: the error
listeners of the transformation engine, the output sink and the XSLT program.
"""
import logging
from decimal import Decimal
from collections.abc import Iterable
from typing import Any, Optional, Union

from lxml import etree

from xmlschematron.exceptions import SchematronTypeError, SchematronTransformError
from xmlschematron.aliases import ElementType, ElementTreeType, ParameterValueType, \
    ParametersType
from xmlschematron.utils.etree import is_lxml_element
from xmlschematron.resources import get_safe_parser

logger = logging.getLogger('xmlschematron')


class ErrorListener:
    """
    Base class for the listeners of the messages of a transformation engine.
    The methods receive lxml log entries, or any object with a *message*.
    """
    def __repr__(self) -> str:
        return '%s()' % self.__class__.__name__

    def warning(self, entry: Any) -> None:
        raise NotImplementedError()

    def error(self, entry: Any) -> None:
        raise NotImplementedError()

    def fatal_error(self, entry: Any) -> None:
        raise NotImplementedError()

    def dispatch(self, entries: Iterable[Any]) -> None:
        """Forwards lxml log entries to the listener methods, by error level."""
        for entry in entries:
            level = getattr(entry, 'level', etree.ErrorLevels.ERROR)
            if level == etree.ErrorLevels.FATAL:
                self.fatal_error(entry)
            elif level == etree.ErrorLevels.ERROR:
                self.error(entry)
            elif level == etree.ErrorLevels.WARNING:
                self.warning(entry)


def _format_entry(entry: Any) -> str:
    message = getattr(entry, 'message', None) or str(entry)
    line = getattr(entry, 'line', 0)
    return f'{message} (line {line})' if line else message


class LoggingErrorListener(ErrorListener):
    """The default error listener, that writes the messages to the logger."""

    def warning(self, entry: Any) -> None:
        logger.warning("Transformation warning: %s", _format_entry(entry))

    def error(self, entry: Any) -> None:
        logger.error("Transformation error: %s", _format_entry(entry))

    def fatal_error(self, entry: Any) -> None:
        logger.critical("Transformation fatal error: %s", _format_entry(entry))


class CollectingErrorListener(ErrorListener):
    """An error listener that collects the messages by level."""

    def __init__(self) -> None:
        self.warnings: list[Any] = []
        self.errors: list[Any] = []
        self.fatal_errors: list[Any] = []

    def warning(self, entry: Any) -> None:
        self.warnings.append(entry)

    def error(self, entry: Any) -> None:
        self.errors.append(entry)

    def fatal_error(self, entry: Any) -> None:
        self.fatal_errors.append(entry)

    def clear(self) -> None:
        self.warnings.clear()
        self.errors.clear()
        self.fatal_errors.clear()


class TransformResult:
    """
    An empty output sink for the execution of a validation program. After a
    successful execution it's populated with the root of the output document.
    """
    def __init__(self) -> None:
        self.root: Optional[ElementType] = None

    def __repr__(self) -> str:
        if self.root is None:
            return '%s()' % self.__class__.__name__
        return '%s(root=%r)' % (self.__class__.__name__, self.root)

    def is_empty(self) -> bool:
        return self.root is None

    def set_document(self, document: Optional[ElementTreeType]) -> None:
        if self.root is not None:
            raise SchematronTypeError(f"{self!r} has already been populated")
        self.root = None if document is None else document.getroot()

    @property
    def document(self) -> Optional[ElementTreeType]:
        """The output document, `None` if the sink is still empty."""
        if self.root is None:
            return None
        return self.root.getroottree()


def get_xpath_number(value: Union[float, Decimal]) -> str:
    """
    Returns an XPath 1.0 expression for a float or decimal value. Infinities
    and NaN are expressed as divisions by zero, finite values in plain decimal
    notation because XPath 1.0 numbers have no exponent.
    """
    if isinstance(value, float):
        value = Decimal(repr(value))

    if value.is_nan():
        return '(0 div 0)'
    elif value.is_infinite():
        return '(-1 div 0)' if value.is_signed() else '(1 div 0)'
    return format(value, 'f')


def get_xslt_parameter(value: ParameterValueType) -> Any:
    """
    Converts a parameter value for an XSLT program. Strings and element
    values are passed as string parameters, booleans and numbers as
    XPath expressions.
    """
    if isinstance(value, bool):
        return 'true()' if value else 'false()'
    elif isinstance(value, int):
        return str(value)
    elif isinstance(value, (float, Decimal)):
        return get_xpath_number(value)
    elif isinstance(value, str):
        return etree.XSLT.strparam(value)
    elif is_lxml_element(value):
        return etree.XSLT.strparam(''.join(value.itertext()))
    raise SchematronTypeError(f"invalid type {type(value)!r} for a parameter value")


class XSLTProgram:
    """
    A compiled XSLT validation program.

    :param stylesheet: the XSLT document of the program.
    """
    def __init__(self, stylesheet: ElementTreeType) -> None:
        self.stylesheet = stylesheet
        self.xslt = etree.XSLT(stylesheet)

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.stylesheet.docinfo.URL)

    def get_xslt(self, resolver: Optional[etree.Resolver] = None) -> etree.XSLT:
        """
        Returns the XSLT to use for a transformation. If a resolver is provided
        the stylesheet is compiled again by a parser that uses the resolver for
        loading secondary documents.
        """
        if resolver is None:
            return self.xslt

        parser = get_safe_parser(resolver)
        stylesheet = etree.fromstring(etree.tostring(self.stylesheet), parser,
                                      base_url=self.stylesheet.docinfo.URL)
        return etree.XSLT(stylesheet)

    def transform(self, document: ElementTreeType,
                  result: TransformResult,
                  *, error_listener: ErrorListener,
                  resolver: Optional[etree.Resolver] = None,
                  parameters: Optional[ParametersType] = None) -> None:
        """
        Executes the program against a document, populating the result.

        :raises SchematronTransformError: if the execution fails or if it \
        produces no output.
        """
        xslt = self.get_xslt(resolver)
        kwargs = {k: get_xslt_parameter(v) for k, v in (parameters or {}).items()}

        try:
            output = xslt(document, **kwargs)
        except etree.XSLTApplyError as err:
            error_listener.dispatch(xslt.error_log)
            raise SchematronTransformError(
                f"execution of {self!r} failed: {err}", list(xslt.error_log)
            ) from err
        else:
            error_listener.dispatch(xslt.error_log)

        if output.getroot() is None:
            raise SchematronTransformError(f"execution of {self!r} produced no output")
        result.set_document(output)


__all__ = ['ErrorListener', 'LoggingErrorListener', 'CollectingErrorListener',
           'TransformResult', 'get_xpath_number', 'get_xslt_parameter',
           'XSLTProgram']
