#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from typing import Any, Optional, Union

from xmlschematron.exceptions import SchematronValueError, SchematronValidationError
from xmlschematron.aliases import XMLSourceType
from xmlschematron.utils.logger import logged
from xmlschematron.model import Schema
from xmlschematron.schematron import SchematronResource, SchematronResourceSCH, \
    SchematronResourceXSLT, SchematronResourcePure
from xmlschematron.svrl import SchematronOutput
from xmlschematron.validity import Validity

__all__ = ('get_schematron', 'validate', 'is_valid', 'get_svrl', 'ENGINES')

ENGINES = {
    'sch': SchematronResourceSCH,
    'xslt': SchematronResourceXSLT,
    'pure': SchematronResourcePure,
}


def get_schematron(schematron: Union[XMLSourceType, Schema, SchematronResource],
                   engine: str = 'sch',
                   **kwargs: Any) -> SchematronResource:
    """
    Returns a Schematron resource for a source. If the source is already
    a resource it's returned as is and the other arguments are ignored.

    :param schematron: a Schematron resource, a Schematron model or the source \
    of a Schematron schema or of an XSLT validation program.
    :param engine: the validation engine, can be 'sch', 'xslt' or 'pure'.
    :param kwargs: other optional arguments for building the resource.
    """
    if isinstance(schematron, SchematronResource):
        return schematron

    try:
        cls = ENGINES[engine]
    except (KeyError, TypeError):
        raise SchematronValueError(f"engine must be one of {tuple(ENGINES)!r}") from None

    if isinstance(schematron, Schema):
        if cls is SchematronResourceXSLT:
            raise SchematronValueError("a Schematron model requires 'sch' or 'pure' engine")
        return cls.from_schema(schematron, **kwargs)  # type: ignore[attr-defined]
    return cls(schematron, **kwargs)


@logged
def validate(xml_document: XMLSourceType,
             schematron: Union[XMLSourceType, Schema, SchematronResource],
             engine: str = 'sch',
             **kwargs: Any) -> SchematronOutput:
    """
    Validates an XML document against a Schematron. Raises a
    :exc:`SchematronValidationError` if the XML document is not valid.

    :param xml_document: the XML document, can be a path, a URL, a file-like \
    object, XML data or an lxml Element or ElementTree.
    :param schematron: the Schematron resource or source.
    :param engine: the validation engine, used if a resource has to be built.
    :param kwargs: other optional arguments for building the resource.
    :return: the SVRL report of a successful validation.
    """
    resource = get_schematron(schematron, engine, **kwargs)
    report = resource.apply_validation_to_svrl(xml_document)
    if report is None or resource.validity_classifier.classify(report) is Validity.INVALID:
        raise SchematronValidationError(xml_document, report)
    return report


@logged
def is_valid(xml_document: XMLSourceType,
             schematron: Union[XMLSourceType, Schema, SchematronResource],
             engine: str = 'sch',
             **kwargs: Any) -> bool:
    """
    Like :meth:`validate` except that do not raise an exception but returns
    ``True`` if the XML document is valid, ``False`` if it's invalid or missing.
    """
    return get_schematron(schematron, engine, **kwargs).is_valid(xml_document)


@logged
def get_svrl(xml_document: XMLSourceType,
             schematron: Union[XMLSourceType, Schema, SchematronResource],
             engine: str = 'sch',
             **kwargs: Any) -> Optional[SchematronOutput]:
    """
    Returns the SVRL report of the validation of an XML document, `None` if the
    Schematron is invalid or the XML document is missing.
    """
    return get_schematron(schematron, engine, **kwargs).apply_validation_to_svrl(xml_document)
