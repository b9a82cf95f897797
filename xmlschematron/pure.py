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
This module contains a validation program that evaluates a Schematron model
directly with XPath 1.0 expressions, producing a SVRL report without an XSLT
compilation step.
"""
import logging
from decimal import Decimal
from typing import Any, Optional
from urllib.parse import urljoin

from lxml import etree

from xmlschematron.exceptions import SchematronTransformError
from xmlschematron.names import SVRL_NAMESPACE, SVRL_SCHEMATRON_OUTPUT, SVRL_TEXT, \
    SVRL_NS_PREFIX_IN_ATTRIBUTE_VALUES, SVRL_ACTIVE_PATTERN, SVRL_FIRED_RULE, \
    SVRL_FAILED_ASSERT, SVRL_SUCCESSFUL_REPORT, SVRL_DIAGNOSTIC_REFERENCE
from xmlschematron.aliases import ElementType, ElementTreeType, ParametersType
from xmlschematron.utils.etree import is_lxml_element, etree_getpath
from xmlschematron.resources import get_safe_parser
from xmlschematron.model import Name, ValueOf, Let, AssertReport, Diagnostic, \
    Rule, Schema
from xmlschematron.model.elements import MessageItemType, RichInlineElement
from xmlschematron.transforms import ErrorListener, TransformResult

logger = logging.getLogger('xmlschematron')

SVRL_NSMAP = {'svrl': SVRL_NAMESPACE}

_COMPILE_EXTENSIONS = {(None, 'document'): lambda context, *args: None}


def split_union(expression: str) -> list[str]:
    """
    Splits an XPath expression on its top-level union operators. Operators
    inside predicates, parenthesized expressions or string literals are
    not separators.
    """
    branches = []
    depth = 0
    quote = None
    start = 0
    for k, char in enumerate(expression):
        if quote is not None:
            if char == quote:
                quote = None
        elif char in '"\'':
            quote = char
        elif char in '[(':
            depth += 1
        elif char in '])':
            depth -= 1
        elif char == '|' and not depth:
            branches.append(expression[start:k])
            start = k + 1
    branches.append(expression[start:])
    return branches


def get_context_path(context: str) -> str:
    """
    Returns the path for selecting the nodes matched by a rule context.
    Each relative branch of a union is matched at any depth.
    """
    paths = []
    for branch in split_union(context):
        branch = branch.strip()
        paths.append(branch if branch.startswith('/') else f'//{branch}')
    return ' | '.join(paths)


def get_xpath_variable(value: Any) -> Any:
    if isinstance(value, Decimal):
        return float(value)
    return value


def xpath_boolean(value: Any) -> bool:
    """Converts the result of an XPath evaluation following the boolean() function."""
    if isinstance(value, float):
        return value == value and value != 0.0
    return bool(value)


class XPathProgram:
    """
    A validation program that evaluates the rules of a Schematron model with
    lxml's XPath 1.0 engine. The expressions are compiled at initialization,
    so syntax errors are detected before the validation.

    :param schema: a structurally valid Schematron model.
    :raises etree.XPathSyntaxError: if an expression of the model is invalid.
    :raises SchematronValueError: if an extension refers to an unknown rule.
    """
    def __init__(self, schema: Schema) -> None:
        self.schema = schema
        self.namespaces = schema.namespaces
        self.diagnostics = schema.diagnostics

        self._patterns: list[tuple[Any, list[tuple[Rule, list[AssertReport]]]]] = []
        for pattern in schema.patterns:
            abstract_rules = pattern.abstract_rules
            rules = [(rule, rule.get_extended_content(abstract_rules))
                     for rule in pattern.rules if not rule.abstract]
            self._patterns.append((pattern, rules))

        for expression in self.iter_expressions():
            etree.XPath(expression, namespaces=self.namespaces,
                        extensions=_COMPILE_EXTENSIONS)

    def __repr__(self) -> str:
        return '%s(%r)' % (self.__class__.__name__, self.schema)

    def iter_expressions(self) -> Any:
        for let in self.schema.lets:
            yield let.value
        for pattern, rules in self._patterns:
            for let in pattern.lets:
                yield let.value
            for rule, assert_reports in rules:
                yield get_context_path(rule.context or '')
                for let in rule.lets:
                    yield let.value
                for assert_report in assert_reports:
                    yield assert_report.test
                    yield from self._iter_message_expressions(assert_report)
        for diagnostic in self.diagnostics.values():
            yield from self._iter_message_expressions(diagnostic)

    @staticmethod
    def _iter_message_expressions(obj: Any) -> Any:
        for item in obj.iter_inline_elements():
            if isinstance(item, Name) and item.path:
                yield f'name({item.path})'
            elif isinstance(item, ValueOf):
                yield f'string({item.select})'

    def get_debug_document(self) -> ElementTreeType:
        return self.schema.to_document()

    def transform(self, document: ElementTreeType,
                  result: TransformResult,
                  *, error_listener: ErrorListener,
                  resolver: Optional[etree.Resolver] = None,
                  parameters: Optional[ParametersType] = None) -> None:
        """
        Evaluates the rules against a document, populating the result with
        a SVRL report.

        :raises SchematronTransformError: if the evaluation of an expression fails.
        """
        evaluation = _Evaluation(self, document, resolver)
        variables = {k: get_xpath_variable(v) for k, v in (parameters or {}).items()}

        try:
            root = evaluation.run(variables)
        except (etree.XPathError, etree.XMLSyntaxError, OSError) as err:
            error_listener.fatal_error(err)
            raise SchematronTransformError(
                f"execution of {self!r} failed: {err}", [err]
            ) from err

        result.set_document(etree.ElementTree(root))


class _Evaluation:
    """The state of one execution of an XPath program."""

    def __init__(self, program: XPathProgram,
                 document: ElementTreeType,
                 resolver: Optional[etree.Resolver] = None) -> None:
        self.program = program
        self.document = document
        self.resolver = resolver
        self.namespaces = program.namespaces
        self.extensions = {(None, 'document'): self.document_function}
        self._documents: dict[str, ElementType] = {}

    def document_function(self, context: Any, uri: Any, *args: Any) -> ElementType:
        """
        An implementation of the document() function of XSLT. Returns an element
        that stands for the document node and that contains the root element of
        the loaded document.
        """
        if isinstance(uri, list):
            uri = str(uri[0]) if uri else ''
        base_url = self.document.docinfo.URL
        url = urljoin(base_url, str(uri)) if base_url else str(uri)

        try:
            return self._documents[url]
        except KeyError:
            logger.debug("Load secondary document %r", url)
            tree = etree.parse(url, get_safe_parser(self.resolver))
            node = etree.Element('document')
            node.append(tree.getroot())
            self._documents[url] = node
            return node

    def evaluate(self, node: Any, expression: str, variables: dict[str, Any]) -> Any:
        return node.xpath(expression, namespaces=self.namespaces,
                          extensions=self.extensions, **variables)

    def bind_lets(self, node: Any, lets: list[Let], variables: dict[str, Any]) -> dict[str, Any]:
        if not lets:
            return variables
        variables = variables.copy()
        for let in lets:
            variables[let.name] = self.evaluate(node, let.value, variables)
        return variables

    def render(self, node: Any, message: list[MessageItemType],
               variables: dict[str, Any]) -> str:
        chunks = []
        for item in message:
            if isinstance(item, str):
                chunks.append(item)
            elif isinstance(item, Name):
                expression = f'name({item.path})' if item.path else 'name()'
                chunks.append(self.evaluate(node, expression, variables))
            elif isinstance(item, ValueOf):
                chunks.append(self.evaluate(node, f'string({item.select})', variables))
            elif isinstance(item, RichInlineElement):
                chunks.append(item.text or '')
        return ''.join(chunks).strip()

    def run(self, variables: dict[str, Any]) -> ElementType:
        schema = self.program.schema
        root = etree.Element(SVRL_SCHEMATRON_OUTPUT, nsmap=SVRL_NSMAP)
        if schema.title is not None:
            root.set('title', schema.title)
        if schema.schema_version is not None:
            root.set('schemaVersion', schema.schema_version)

        for prefix, uri in self.namespaces.items():
            etree.SubElement(root, SVRL_NS_PREFIX_IN_ATTRIBUTE_VALUES, prefix=prefix, uri=uri)

        variables = self.bind_lets(self.document, schema.lets, variables)

        for pattern, rules in self.program._patterns:
            active_pattern = etree.SubElement(root, SVRL_ACTIVE_PATTERN)
            if pattern.id is not None:
                active_pattern.set('id', pattern.id)
            if pattern.title is not None:
                active_pattern.set('name', pattern.title)
            if self.document.docinfo.URL:
                active_pattern.set('document', self.document.docinfo.URL)

            pattern_variables = self.bind_lets(self.document, pattern.lets, variables)
            matched = set()
            for rule, assert_reports in rules:
                nodes = self.evaluate(self.document, get_context_path(rule.context or ''),
                                      pattern_variables)
                if not isinstance(nodes, list):
                    continue

                for node in nodes:
                    if not is_lxml_element(node):
                        logger.debug("Skip non-element node %r matched by %r", node, rule)
                        continue
                    location = etree_getpath(node, self.document)
                    if location in matched:
                        continue
                    matched.add(location)
                    self.fire_rule(root, rule, assert_reports, node, location,
                                   pattern_variables)
        return root

    def fire_rule(self, root: ElementType, rule: Rule, assert_reports: list[AssertReport],
                  node: ElementType, location: str, variables: dict[str, Any]) -> None:
        fired_rule = etree.SubElement(root, SVRL_FIRED_RULE, context=rule.context or '')
        for name in ('id', 'flag'):
            if getattr(rule, name) is not None:
                fired_rule.set(name, getattr(rule, name))
        if rule.linkable is not None and rule.linkable.role is not None:
            fired_rule.set('role', rule.linkable.role)

        variables = self.bind_lets(node, rule.lets, variables)
        for assert_report in assert_reports:
            value = xpath_boolean(self.evaluate(node, assert_report.test, variables))
            if assert_report.is_assert is value:
                continue

            tag = SVRL_FAILED_ASSERT if assert_report.is_assert else SVRL_SUCCESSFUL_REPORT
            elem = etree.SubElement(root, tag, test=assert_report.test, location=location)
            for name in ('id', 'flag'):
                if getattr(assert_report, name) is not None:
                    elem.set(name, getattr(assert_report, name))
            if assert_report.linkable is not None and assert_report.linkable.role is not None:
                elem.set('role', assert_report.linkable.role)

            for id_ in assert_report.diagnostics:
                diagnostic: Optional[Diagnostic] = self.program.diagnostics.get(id_)
                reference = etree.SubElement(elem, SVRL_DIAGNOSTIC_REFERENCE, diagnostic=id_)
                if diagnostic is not None:
                    reference.text = self.render(node, diagnostic.message, variables)

            text = etree.SubElement(elem, SVRL_TEXT)
            text.text = self.render(node, assert_report.message, variables)


__all__ = ['XPathProgram', 'split_union', 'get_context_path', 'xpath_boolean']
