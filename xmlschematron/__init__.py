#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from .exceptions import SchematronException, SchematronTypeError, \
    SchematronValueError, SchematronOwnershipError, SchematronParseError, \
    SchematronModelError, SchematronResourceError, SchematronTransformError, \
    SchematronValidationError, SVRLConsistencyError
from .utils.etree import etree_tostring
from .utils.logger import set_logging_level
from .resources import ReadableResource, PackageResource, get_resource
from .caching import ProviderCache, default_cache
from .model import ErrorHandler, LoggingErrorHandler, CollectingErrorHandler, \
    RaisingErrorHandler, SilentErrorHandler, Name, ValueOf, Emph, Dir, Span, \
    Include, Let, Extends, AssertReport, Diagnostic, Rule, Namespace, Pattern, \
    Schema, read_rule, read_schematron
from .svrl import SchematronOutput, ActivePattern, FiredRule, FailedAssert, \
    SuccessfulReport, DiagnosticReference, NsPrefix, read_svrl
from .validity import Validity, ValidityClassifier, RoleClassifier, \
    IgnoreWarningsClassifier
from .transforms import ErrorListener, LoggingErrorListener, \
    CollectingErrorListener, TransformResult
from .schematron import SchematronResource, SchematronResourceSCH, \
    SchematronResourceXSLT, SchematronResourcePure
from .documents import get_schematron, validate, is_valid, get_svrl

__version__ = '1.0.0'
__author__ = "Davide Brunato"
__contact__ = "brunato@sissa.it"
__copyright__ = "Copyright 2016-2024, SISSA"
__license__ = "MIT"
__status__ = "Production/Stable"

__all__ = [
    'SchematronException', 'SchematronTypeError', 'SchematronValueError',
    'SchematronOwnershipError', 'SchematronParseError', 'SchematronModelError',
    'SchematronResourceError', 'SchematronTransformError', 'SchematronValidationError',
    'SVRLConsistencyError', 'etree_tostring', 'set_logging_level',
    'ReadableResource', 'PackageResource', 'get_resource', 'ProviderCache',
    'default_cache', 'ErrorHandler', 'LoggingErrorHandler', 'CollectingErrorHandler',
    'RaisingErrorHandler', 'SilentErrorHandler', 'Name', 'ValueOf', 'Emph', 'Dir',
    'Span', 'Include', 'Let', 'Extends', 'AssertReport', 'Diagnostic', 'Rule',
    'Namespace', 'Pattern', 'Schema', 'read_rule', 'read_schematron',
    'SchematronOutput', 'ActivePattern', 'FiredRule', 'FailedAssert',
    'SuccessfulReport', 'DiagnosticReference', 'NsPrefix', 'read_svrl',
    'Validity', 'ValidityClassifier', 'RoleClassifier', 'IgnoreWarningsClassifier',
    'ErrorListener', 'LoggingErrorListener', 'CollectingErrorListener',
    'TransformResult', 'SchematronResource', 'SchematronResourceSCH',
    'SchematronResourceXSLT', 'SchematronResourcePure', 'get_schematron',
    'validate', 'is_valid', 'get_svrl',
]
