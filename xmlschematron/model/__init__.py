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
The Schematron model: rules, assertions and the other elements of a schema,
with their structural checks, serialization and the reader for building them.
"""
from .errorhandlers import ErrorHandler, LoggingErrorHandler, CollectingErrorHandler, \
    RaisingErrorHandler, SilentErrorHandler, get_error_handler
from .base import SchematronElement, ForeignContentMixin, RichGroup, LinkableGroup
from .elements import InlineElement, Name, ValueOf, Emph, Dir, Span, Include, \
    Let, Extends, AssertReport, Diagnostic, Rule
from .schema import Namespace, Pattern, Schema
from .reader import SchematronReader, read_rule, read_schematron

__all__ = ['ErrorHandler', 'LoggingErrorHandler', 'CollectingErrorHandler',
           'RaisingErrorHandler', 'SilentErrorHandler', 'get_error_handler',
           'SchematronElement', 'ForeignContentMixin', 'RichGroup', 'LinkableGroup',
           'InlineElement', 'Name', 'ValueOf', 'Emph', 'Dir', 'Span', 'Include',
           'Let', 'Extends', 'AssertReport', 'Diagnostic', 'Rule', 'Namespace',
           'Pattern', 'Schema', 'SchematronReader', 'read_rule', 'read_schematron']
