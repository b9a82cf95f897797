#
# Copyright (c), 2021, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""
Type aliases for static typing analysis. In a type checking context the aliases
are defined from effective classes imported from package modules. In a runtime
context the aliases that can't be set from the same bases, due to circular
imports, are set to `Any`.
"""
from decimal import Decimal
from pathlib import Path
from collections.abc import MutableMapping
from typing import Any, IO, TYPE_CHECKING, Union

from lxml import etree

__all__ = ['ElementType', 'ElementTreeType', 'NsmapType', 'ParameterValueType',
           'ParametersType', 'XMLSourceType', 'ResourceSourceType', 'ErrorHandlerType',
           'ErrorListenerType', 'ProviderType']

if TYPE_CHECKING:
    from xmlschematron.resources import ReadableResource
    from xmlschematron.model.errorhandlers import ErrorHandler
    from xmlschematron.transforms import ErrorListener
    from xmlschematron.providers import ValidationProgramProvider

##
# Type aliases for lxml's ElementTree API
ElementType = etree._Element
ElementTreeType = etree._ElementTree

##
# Type aliases for namespaces and XSLT/XPath parameters
NsmapType = MutableMapping[str, str]
ParameterValueType = Union[str, bool, int, float, Decimal, ElementType]
ParametersType = dict[str, ParameterValueType]

##
# Type aliases for sources of XML data
ResourceSourceType = Union[str, bytes, Path, IO[bytes]]

if TYPE_CHECKING:
    XMLSourceType = Union[ResourceSourceType, ElementType, ElementTreeType, ReadableResource]
    ErrorHandlerType = ErrorHandler
    ErrorListenerType = ErrorListener
    ProviderType = ValidationProgramProvider
else:
    XMLSourceType = Any
    ErrorHandlerType = Any
    ErrorListenerType = Any
    ProviderType = Any
