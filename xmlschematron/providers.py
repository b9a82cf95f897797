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
This module contains the providers of validation programs. A provider builds
a program from a Schematron source at initialization and tells if the source
is a valid Schematron. A provider with an invalid source has no program.
"""
import logging
from typing import Any, Optional, Union

from lxml import etree
from lxml import isoschematron

from xmlschematron.exceptions import SchematronException
from xmlschematron.aliases import ElementTreeType
from xmlschematron.resources import ReadableResource
from xmlschematron.model import Schema, LoggingErrorHandler, read_schematron
from xmlschematron.transforms import XSLTProgram
from xmlschematron.pure import XPathProgram

logger = logging.getLogger('xmlschematron')


class ValidationProgramProvider:
    """Base class for the providers of validation programs."""
    program: Optional[Any] = None

    def __init__(self, source: Union[ReadableResource, Schema]) -> None:
        self.source = source

    def __repr__(self) -> str:
        return '%s(source=%r)' % (self.__class__.__name__, self.source)

    def is_valid_schematron(self) -> bool:
        """Returns `True` if the source has been compiled to a validation program."""
        return self.program is not None

    def get_debug_document(self) -> Optional[ElementTreeType]:
        """Returns a document for debugging the program, `None` if there is no program."""
        return None

    def _parse_resource(self, resource: ReadableResource) -> Optional[ElementTreeType]:
        try:
            document = resource.parse()
        except SchematronException as err:
            logger.error("Can't parse Schematron resource %r: %s", resource, err)
            return None
        else:
            if document is None:
                logger.warning("Schematron resource %r doesn't exist", resource)
            return document


class SCHProvider(ValidationProgramProvider):
    """
    A provider that compiles a Schematron schema to an XSLT validation program,
    using lxml's implementation of ISO Schematron.

    :param source: the resource of the Schematron schema or a Schematron model.
    :param phase: the phase to compile, for default is the default phase of the schema.
    """
    def __init__(self, source: Union[ReadableResource, Schema],
                 phase: Optional[str] = None) -> None:
        super().__init__(source)
        self.phase = phase

        document: Optional[Any]
        if isinstance(source, Schema):
            document = source.to_document()
        else:
            document = self._parse_resource(source)
        if document is None:
            return

        try:
            schematron = isoschematron.Schematron(document, phase=phase, store_xslt=True)
        except (etree.SchematronParseError, etree.XSLTParseError,
                etree.XSLTApplyError) as err:
            logger.error("Can't compile Schematron %r: %s", source, err)
        else:
            self.program = XSLTProgram(schematron.validator_xslt)

    def get_debug_document(self) -> Optional[ElementTreeType]:
        if self.program is None:
            return None
        return self.program.stylesheet


class XSLTProvider(ValidationProgramProvider):
    """
    A provider for validation programs that are already compiled to XSLT.

    :param source: the resource of the XSLT validation program.
    """
    def __init__(self, source: ReadableResource) -> None:
        super().__init__(source)

        document = self._parse_resource(source)
        if document is None:
            return

        try:
            self.program = XSLTProgram(document)
        except etree.XSLTParseError as err:
            logger.error("Can't compile XSLT %r: %s", source, err)

    def get_debug_document(self) -> Optional[ElementTreeType]:
        if self.program is None:
            return None
        return self.program.stylesheet


class PureProvider(ValidationProgramProvider):
    """
    A provider of programs that evaluate a Schematron model with XPath,
    without compiling it to XSLT. The model is checked for structural
    errors before building the program.

    :param source: the resource of the Schematron schema or a Schematron model.
    """
    def __init__(self, source: Union[ReadableResource, Schema]) -> None:
        super().__init__(source)

        schema: Schema
        if isinstance(source, Schema):
            schema = source
        else:
            document = self._parse_resource(source)
            if document is None:
                return
            try:
                schema = read_schematron(document)
            except SchematronException as err:
                logger.error("Can't read Schematron %r: %s", source, err)
                return

        if not schema.is_valid(LoggingErrorHandler()):
            logger.error("Schematron %r is not structurally valid", source)
            return

        try:
            self.program = XPathProgram(schema)
        except (SchematronException, etree.XPathSyntaxError) as err:
            logger.error("Can't build a program for %r: %s", source, err)

    def get_debug_document(self) -> Optional[ElementTreeType]:
        if self.program is None:
            return None
        return self.program.get_debug_document()


__all__ = ['ValidationProgramProvider', 'SCHProvider', 'XSLTProvider', 'PureProvider']
