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
This module contains the reader that builds a Schematron model from the
element tree of a Schematron schema.
"""
import copy
from typing import Any, Optional, Union

from xmlschematron.exceptions import SchematronParseError, SchematronResourceError
from xmlschematron.names import SCH_NAMESPACE, SCH_SCHEMA, SCH_TITLE, SCH_P, \
    SCH_NS, SCH_PHASE, SCH_PATTERN, SCH_RULE, SCH_ASSERT, SCH_REPORT, SCH_EXTENDS, \
    SCH_LET, SCH_INCLUDE, SCH_DIAGNOSTICS, SCH_DIAGNOSTIC, SCH_NAME, SCH_VALUE_OF, \
    SCH_EMPH, SCH_DIR, SCH_SPAN
from xmlschematron.aliases import ElementType, XMLSourceType
from xmlschematron.utils.etree import is_etree_element, is_etree_document
from xmlschematron.utils.qnames import get_namespace, local_name
from xmlschematron.resources import get_resource

from .errorhandlers import ErrorHandler, LoggingErrorHandler
from .base import SchematronElement, ForeignContentMixin, RichGroup, LinkableGroup
from .elements import InlineElement, Name, ValueOf, Emph, Dir, Span, \
    Include, Let, Extends, AssertReport, Diagnostic, Rule
from .schema import Namespace, Pattern, Schema


class SchematronReader:
    """
    Builds model elements from the elements of a Schematron schema. Unsupported
    or unknown Schematron elements and attributes are reported to the error
    handler as warnings and skipped. Elements and attributes of other namespaces
    are kept as foreign content where the model element supports it.

    :param error_handler: the handler for the warnings, for default the warnings \
    are written to the logger.
    """
    def __init__(self, error_handler: Optional[ErrorHandler] = None) -> None:
        self.error_handler = error_handler or LoggingErrorHandler()

    def __repr__(self) -> str:
        return '%s(error_handler=%r)' % (self.__class__.__name__, self.error_handler)

    def _check_tag(self, elem: ElementType, tag: str) -> None:
        if elem.tag != tag:
            msg = f"expected a <sch:{local_name(tag)}> element, found {elem.tag!r}"
            raise SchematronParseError(msg, elem)

    def _read_attributes(self, elem: ElementType, obj: SchematronElement, *names: str) -> None:
        """Reports or stores as foreign content the attributes not in *names*."""
        for qname, value in elem.attrib.items():
            if qname in names:
                continue
            elif isinstance(obj, ForeignContentMixin) and get_namespace(qname) and \
                    get_namespace(qname) != SCH_NAMESPACE:
                obj.add_foreign_attribute(qname, value)
            else:
                msg = f"unsupported attribute {qname!r} of <{local_name(elem.tag)}>"
                self.error_handler.warning(obj, msg)

    def _read_foreign_child(self, child: ElementType, obj: SchematronElement) -> None:
        if get_namespace(child.tag) == SCH_NAMESPACE:
            msg = f"unsupported element <{local_name(child.tag)}>"
            self.error_handler.warning(obj, msg)
        elif isinstance(obj, ForeignContentMixin):
            foreign_elem = copy.deepcopy(child)
            foreign_elem.tail = None
            obj.add_foreign_element(foreign_elem)
        else:
            msg = f"unsupported foreign element {child.tag!r}"
            self.error_handler.warning(obj, msg)

    @staticmethod
    def _get_groups(elem: ElementType) -> tuple[Any, Any]:
        return RichGroup.from_attributes(elem.attrib), LinkableGroup.from_attributes(elem.attrib)

    @staticmethod
    def _group_names(*groups: type) -> tuple[str, ...]:
        return tuple(x[0] for g in groups for x in g._attributes)  # type: ignore

    def read_include(self, elem: ElementType) -> Include:
        self._check_tag(elem, SCH_INCLUDE)
        include = Include(elem.get('href'))
        self._read_attributes(elem, include, 'href')
        return include

    def read_let(self, elem: ElementType) -> Let:
        self._check_tag(elem, SCH_LET)
        let = Let(elem.get('name'), elem.get('value'))
        self._read_attributes(elem, let, 'name', 'value')
        return let

    def read_extends(self, elem: ElementType) -> Extends:
        self._check_tag(elem, SCH_EXTENDS)
        extends = Extends(elem.get('rule'), elem.get('href'))
        self._read_attributes(elem, extends, 'rule', 'href')
        return extends

    def read_inline(self, elem: ElementType) -> Optional[InlineElement]:
        inline: InlineElement
        if elem.tag == SCH_NAME:
            inline = Name(elem.get('path'))
            names: tuple[str, ...] = ('path',)
        elif elem.tag == SCH_VALUE_OF:
            inline = ValueOf(elem.get('select'))
            names = ('select',)
        elif elem.tag == SCH_EMPH:
            inline = Emph(elem.text)
            names = ()
        elif elem.tag == SCH_DIR:
            inline = Dir(elem.text, elem.get('value'))
            names = ('value',)
        elif elem.tag == SCH_SPAN:
            inline = Span(elem.text, elem.get('class'))
            names = ('class',)
        else:
            return None

        self._read_attributes(elem, inline, *names)
        return inline

    def _read_message(self, elem: ElementType, obj: Any) -> None:
        if elem.text:
            obj.add_text(elem.text)
        for child in elem:
            if not callable(child.tag):
                inline = self.read_inline(child)
                if inline is not None:
                    obj.add_inline(inline)
                else:
                    self._read_foreign_child(child, obj)
            if child.tail:
                obj.add_text(child.tail)

    def read_assert_report(self, elem: ElementType) -> AssertReport:
        if elem.tag != SCH_REPORT:
            self._check_tag(elem, SCH_ASSERT)

        diagnostics = elem.get('diagnostics')
        rich, linkable = self._get_groups(elem)
        assert_report = AssertReport(
            test=elem.get('test'),
            is_assert=elem.tag == SCH_ASSERT,
            id=elem.get('id'),
            flag=elem.get('flag'),
            diagnostics=diagnostics.split() if diagnostics else None,
            rich=rich,
            linkable=linkable,
        )
        self._read_attributes(elem, assert_report, 'test', 'id', 'flag', 'diagnostics',
                              *self._group_names(RichGroup, LinkableGroup))
        self._read_message(elem, assert_report)
        return assert_report

    def read_diagnostic(self, elem: ElementType) -> Diagnostic:
        self._check_tag(elem, SCH_DIAGNOSTIC)
        diagnostic = Diagnostic(elem.get('id'), RichGroup.from_attributes(elem.attrib))
        self._read_attributes(elem, diagnostic, 'id', *self._group_names(RichGroup))
        self._read_message(elem, diagnostic)
        return diagnostic

    def read_rule(self, elem: ElementType) -> Rule:
        self._check_tag(elem, SCH_RULE)

        rich, linkable = self._get_groups(elem)
        rule = Rule(
            context=elem.get('context'),
            abstract=elem.get('abstract', '').strip() == 'true',
            id=elem.get('id'),
            flag=elem.get('flag'),
            rich=rich,
            linkable=linkable,
        )
        self._read_attributes(elem, rule, 'context', 'abstract', 'id', 'flag',
                              *self._group_names(RichGroup, LinkableGroup))

        for child in elem:
            if callable(child.tag):
                continue
            elif child.tag == SCH_INCLUDE:
                rule.add_include(self.read_include(child))
            elif child.tag == SCH_LET:
                rule.add_let(self.read_let(child))
            elif child.tag in (SCH_ASSERT, SCH_REPORT):
                rule.add_assert_report(self.read_assert_report(child))
            elif child.tag == SCH_EXTENDS:
                rule.add_extends(self.read_extends(child))
            else:
                self._read_foreign_child(child, rule)
        return rule

    def read_pattern(self, elem: ElementType) -> Pattern:
        self._check_tag(elem, SCH_PATTERN)

        pattern = Pattern(elem.get('id'), rich=RichGroup.from_attributes(elem.attrib))
        self._read_attributes(elem, pattern, 'id', *self._group_names(RichGroup))

        for child in elem:
            if callable(child.tag) or child.tag == SCH_P:
                continue
            elif child.tag == SCH_TITLE:
                pattern.title = child.text
            elif child.tag == SCH_LET:
                pattern.add_let(self.read_let(child))
            elif child.tag == SCH_RULE:
                pattern.add_rule(self.read_rule(child))
            else:
                self._read_foreign_child(child, pattern)
        return pattern

    def read_schema(self, elem: ElementType) -> Schema:
        self._check_tag(elem, SCH_SCHEMA)

        schema = Schema(
            query_binding=elem.get('queryBinding'),
            schema_version=elem.get('schemaVersion'),
            default_phase=elem.get('defaultPhase'),
        )
        self._read_attributes(elem, schema, 'queryBinding', 'schemaVersion', 'defaultPhase')

        for child in elem:
            if callable(child.tag) or child.tag == SCH_P:
                continue
            elif child.tag == SCH_TITLE:
                schema.title = child.text
            elif child.tag == SCH_NS:
                namespace = Namespace(child.get('prefix'), child.get('uri'))
                self._read_attributes(child, namespace, 'prefix', 'uri')
                schema.add_namespace(namespace)
            elif child.tag == SCH_LET:
                schema.add_let(self.read_let(child))
            elif child.tag == SCH_PATTERN:
                schema.add_pattern(self.read_pattern(child))
            elif child.tag == SCH_DIAGNOSTICS:
                for diagnostic in child:
                    if not callable(diagnostic.tag):
                        schema.add_diagnostic(self.read_diagnostic(diagnostic))
            elif child.tag == SCH_PHASE:
                msg = "phases are not included in the model, <phase> skipped"
                self.error_handler.warning(schema, msg)
            else:
                self._read_foreign_child(child, schema)
        return schema


def read_rule(elem: ElementType, error_handler: Optional[ErrorHandler] = None) -> Rule:
    """Builds a rule from a `sch:rule` lxml element."""
    return SchematronReader(error_handler).read_rule(elem)


def read_schematron(source: Union[XMLSourceType, ElementType],
                    error_handler: Optional[ErrorHandler] = None,
                    base_url: Optional[str] = None) -> Schema:
    """
    Builds a Schematron schema model from a source.

    :param source: an lxml Element or ElementTree, or a source for a resource.
    :param error_handler: the handler for the warnings of the reader.
    :param base_url: an optional base URL for locating the resource.
    """
    if is_etree_document(source):
        root = source.getroot()
    elif is_etree_element(source):
        root = source
    else:
        resource = get_resource(source, base_url)
        document = resource.parse()
        if document is None:
            raise SchematronResourceError(f"missing Schematron resource {resource!r}")
        root = document.getroot()

    return SchematronReader(error_handler).read_schema(root)


__all__ = ['SchematronReader', 'read_rule', 'read_schematron']
