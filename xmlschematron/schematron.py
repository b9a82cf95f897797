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
This module contains the Schematron resources, the objects that execute a
validation program against XML documents and reduce the produced SVRL report
to a validity verdict.
"""
import logging
from collections.abc import Hashable
from typing import Any, Optional, Union

from lxml import etree

from xmlschematron.exceptions import SchematronTypeError, SchematronValueError
from xmlschematron.aliases import ElementTreeType, ParameterValueType, \
    ParametersType, XMLSourceType
from xmlschematron.utils.etree import is_lxml_element, is_lxml_document
from xmlschematron.utils.logger import dump_document
from xmlschematron.resources import ReadableResource, get_resource
from xmlschematron.caching import ProviderCache, default_cache
from xmlschematron.model import ErrorHandler, LoggingErrorHandler, Schema
from xmlschematron.transforms import ErrorListener, LoggingErrorListener, TransformResult
from xmlschematron.providers import ValidationProgramProvider, SCHProvider, \
    XSLTProvider, PureProvider
from xmlschematron.svrl import SchematronOutput, read_svrl
from xmlschematron.validity import Validity, ValidityClassifier

logger = logging.getLogger('xmlschematron')


class SchematronResource:
    """
    Base class for Schematron resources. A resource builds its validation program
    provider at the first use and keeps the configuration of the executions:
    error listener, URI resolver and parameters. An instance must not be used
    concurrently by different threads.

    :param source: the Schematron source, a path, a URL, XML data, a file-like \
    object or a readable resource. Subclasses can accept also a Schematron model.
    :param base_url: an optional base URL for locating the source.
    :param timeout: the timeout in seconds for accessing remote resources.
    :param error_listener: an optional listener for the messages of the \
    transformation engine, for default the messages are written to the logger.
    :param uri_resolver: an optional lxml resolver for loading the documents \
    referred during the validation.
    :param parameters: an optional mapping with the parameters for the program.
    :param validity_classifier: an optional classifier for the SVRL reports, \
    for default a report with a failed assert is invalid.
    """
    _provider: Optional[ValidationProgramProvider] = None

    def __init__(self, source: Union[XMLSourceType, Schema],
                 base_url: Optional[str] = None,
                 timeout: int = 30,
                 error_listener: Optional[ErrorListener] = None,
                 uri_resolver: Optional[etree.Resolver] = None,
                 parameters: Optional[ParametersType] = None,
                 validity_classifier: Optional[ValidityClassifier] = None) -> None:

        self.source: Union[ReadableResource, Schema]
        if isinstance(source, Schema):
            self.source = source
        else:
            self.source = get_resource(source, base_url, timeout)

        self.timeout = timeout
        self.error_listener = error_listener
        self.uri_resolver = uri_resolver
        self.parameters = parameters or {}
        self.validity_classifier = validity_classifier or ValidityClassifier()

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.source)

    @property
    def error_listener(self) -> Optional[ErrorListener]:
        """The custom error listener, `None` if the default logging listener is used."""
        return self._error_listener

    @error_listener.setter
    def error_listener(self, error_listener: Optional[ErrorListener]) -> None:
        if error_listener is not None and not isinstance(error_listener, ErrorListener):
            raise SchematronTypeError(f"{error_listener!r} is not an ErrorListener")
        self._error_listener = error_listener

    @property
    def uri_resolver(self) -> Optional[etree.Resolver]:
        return self._uri_resolver

    @uri_resolver.setter
    def uri_resolver(self, uri_resolver: Optional[etree.Resolver]) -> None:
        if uri_resolver is not None and not isinstance(uri_resolver, etree.Resolver):
            raise SchematronTypeError(f"{uri_resolver!r} is not an lxml Resolver")
        self._uri_resolver = uri_resolver

    @property
    def parameters(self) -> ParametersType:
        """A copy of the parameters, in insertion order."""
        return self._parameters.copy()

    @parameters.setter
    def parameters(self, parameters: ParametersType) -> None:
        if not isinstance(parameters, dict):
            raise SchematronTypeError(f"{parameters!r} is not a dictionary")
        self._parameters = {}
        for name, value in parameters.items():
            self.set_parameter(name, value)

    def has_parameters(self) -> bool:
        return bool(self._parameters)

    def set_parameter(self, name: str, value: ParameterValueType) -> None:
        if not isinstance(name, str) or not name.strip():
            raise SchematronValueError(f"invalid parameter name {name!r}")
        self._parameters[name] = value

    def remove_parameter(self, name: str) -> bool:
        return self._parameters.pop(name, None) is not None

    def clear_parameters(self) -> None:
        self._parameters.clear()

    @property
    def validity_classifier(self) -> ValidityClassifier:
        return self._validity_classifier

    @validity_classifier.setter
    def validity_classifier(self, classifier: ValidityClassifier) -> None:
        if not isinstance(classifier, ValidityClassifier):
            raise SchematronTypeError(f"{classifier!r} is not a ValidityClassifier")
        self._validity_classifier = classifier

    ###
    # Validation program provider
    def create_provider(self) -> ValidationProgramProvider:
        raise NotImplementedError()

    @property
    def provider(self) -> ValidationProgramProvider:
        """The validation program provider, built at first access."""
        if self._provider is None:
            self._provider = self.create_provider()
        return self._provider

    def is_valid_schematron(self) -> bool:
        """Returns `True` if the Schematron source has a validation program."""
        return self.provider.is_valid_schematron()

    ###
    # Validation entry points
    def get_document(self, xml_source: XMLSourceType) -> Optional[ElementTreeType]:
        """
        Returns the lxml ElementTree of an XML source, `None` if the source
        is missing.

        :raises SchematronResourceError: if the source isn't well-formed XML.
        """
        if is_lxml_document(xml_source):
            return xml_source
        elif is_lxml_element(xml_source):
            return xml_source.getroottree()

        resource = get_resource(xml_source, timeout=self.timeout)
        document = resource.parse()
        if document is None:
            logger.warning("XML resource %r doesn't exist", resource)
        return document

    def apply_validation(self, xml_source: XMLSourceType) -> Optional[ElementTreeType]:
        """
        Executes the validation program against an XML source.

        :return: the SVRL document produced, or `None` if the Schematron is \
        invalid or the XML source is missing.
        :raises SchematronTransformError: if the execution of the program fails.
        """
        provider = self.provider
        if not provider.is_valid_schematron():
            logger.warning("%r has no validation program", self)
            return None

        document = self.get_document(xml_source)
        if document is None:
            return None

        dump_document(f"Validation program of {self!r}", provider.get_debug_document())

        result = TransformResult()
        provider.program.transform(
            document,
            result,
            error_listener=self._error_listener or LoggingErrorListener(),
            resolver=self._uri_resolver,
            parameters=self.parameters,
        )
        dump_document("SVRL report", result.document)
        return result.document

    def apply_validation_to_svrl(self, xml_source: XMLSourceType) \
            -> Optional[SchematronOutput]:
        """
        Executes the validation program and builds a typed SVRL report.

        :return: the report, or `None` if no SVRL document has been produced.
        :raises SVRLConsistencyError: if the SVRL document isn't conformant.
        """
        document = self.apply_validation(xml_source)
        if document is None:
            return None
        return read_svrl(document)

    def get_schematron_validity(self, xml_source: XMLSourceType) -> Validity:
        """Returns the validity of an XML source, INVALID if no report is produced."""
        return self._validity_classifier.classify(self.apply_validation_to_svrl(xml_source))

    def is_valid(self, xml_source: XMLSourceType) -> bool:
        return self.get_schematron_validity(xml_source) is Validity.VALID


def _get_checked_schema(schema: Schema, error_handler: Optional[ErrorHandler]) -> Schema:
    if not isinstance(schema, Schema):
        raise SchematronTypeError(f"{schema!r} is not a Schema instance")
    elif not schema.is_valid(error_handler or LoggingErrorHandler()):
        raise SchematronValueError(f"{schema!r} is not structurally valid")
    return schema


class SchematronResourceSCH(SchematronResource):
    """
    A Schematron resource for Schematron schemas, compiled to XSLT.

    :param phase: the phase to validate, for default the default phase of the schema.
    :param use_cache: if `True` the compiled programs of schemas with a URL are \
    shared between instances through a cache.
    :param cache: the cache to use, for default is the package's default cache.
    """
    def __init__(self, source: Union[XMLSourceType, Schema],
                 phase: Optional[str] = None,
                 use_cache: bool = True,
                 cache: Optional[ProviderCache] = None,
                 **kwargs: Any) -> None:
        super().__init__(source, **kwargs)
        self.phase = phase
        self.use_cache = use_cache
        self.cache = default_cache if cache is None else cache

    @classmethod
    def from_schema(cls, schema: Schema,
                    error_handler: Optional[ErrorHandler] = None,
                    **kwargs: Any) -> 'SchematronResourceSCH':
        """
        Builds a resource from a Schematron model, that is checked before.

        :raises SchematronValueError: if the model is not structurally valid.
        """
        return cls(_get_checked_schema(schema, error_handler), **kwargs)

    def get_cache_key(self) -> Optional[Hashable]:
        if not self.use_cache or not isinstance(self.source, ReadableResource) \
                or self.source.url is None:
            return None
        return self.__class__.__name__, self.source.url, self.phase

    def create_provider(self) -> ValidationProgramProvider:
        key = self.get_cache_key()
        if key is None:
            return SCHProvider(self.source, self.phase)
        return self.cache.get_provider(key, lambda: SCHProvider(self.source, self.phase))


class SchematronResourceXSLT(SchematronResource):
    """A Schematron resource for validation programs already compiled to XSLT."""

    def __init__(self, source: XMLSourceType, **kwargs: Any) -> None:
        if isinstance(source, Schema):
            raise SchematronTypeError("an XSLT resource can't be built from a Schema")
        super().__init__(source, **kwargs)

    def create_provider(self) -> ValidationProgramProvider:
        assert isinstance(self.source, ReadableResource)
        return XSLTProvider(self.source)


class SchematronResourcePure(SchematronResource):
    """
    A Schematron resource that evaluates the rules with XPath, without
    compiling them to XSLT. Phases are not supported.
    """
    @classmethod
    def from_schema(cls, schema: Schema,
                    error_handler: Optional[ErrorHandler] = None,
                    **kwargs: Any) -> 'SchematronResourcePure':
        """
        Builds a resource from a Schematron model, that is checked before.

        :raises SchematronValueError: if the model is not structurally valid.
        """
        return cls(_get_checked_schema(schema, error_handler), **kwargs)

    def create_provider(self) -> ValidationProgramProvider:
        return PureProvider(self.source)


__all__ = ['SchematronResource', 'SchematronResourceSCH', 'SchematronResourceXSLT',
           'SchematronResourcePure']
