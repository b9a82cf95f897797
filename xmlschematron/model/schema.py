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
This module contains the schema level classes of the Schematron model,
that assemble rules into patterns and patterns into a schema.
"""
from collections.abc import Iterator
from typing import Any, Optional

from lxml import etree

from xmlschematron.exceptions import SchematronTypeError
from xmlschematron.names import SCH_SCHEMA, SCH_TITLE, SCH_NS, SCH_PATTERN, \
    SCH_DIAGNOSTICS
from xmlschematron.aliases import ElementType
from xmlschematron.utils.qnames import has_text

from .base import make_element, SchematronElement, ForeignContentMixin, RichGroup
from .elements import Let, Rule, Diagnostic


class Namespace(SchematronElement):
    """A namespace declaration, that binds a prefix used in expressions to a URI."""
    tag = SCH_NS

    def __init__(self, prefix: Optional[str] = None, uri: Optional[str] = None) -> None:
        self.prefix = prefix
        self.uri = uri

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        yield 'prefix', self.prefix
        yield 'uri', self.uri

    def iter_errors(self) -> Iterator[str]:
        if not has_text(self.prefix):
            yield "<ns> has no 'prefix'"
        if not has_text(self.uri):
            yield "<ns> has no 'uri'"

    def to_etree(self) -> ElementType:
        return make_element(self.tag, prefix=self.prefix, uri=self.uri)


def _title_element(title: str) -> ElementType:
    elem = make_element(SCH_TITLE)
    elem.text = title
    return elem


class Pattern(ForeignContentMixin, SchematronElement):
    """A pattern, an ordered set of rules. A node is matched by one rule for pattern."""
    tag = SCH_PATTERN

    def __init__(self, id: Optional[str] = None,
                 title: Optional[str] = None,
                 rich: Optional[RichGroup] = None) -> None:
        self.id = id
        self.title = title
        self.rich = rich
        self._lets: list[Let] = []
        self._rules: list[Rule] = []

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        for name in ('id', 'title', 'rich'):
            if getattr(self, name) is not None:
                yield name, getattr(self, name)
        yield 'rules', self._rules

    def add_let(self, let: Let) -> None:
        if not isinstance(let, Let):
            raise SchematronTypeError(f"{let!r} is not a {Let!r} instance")
        self._lets.append(let)

    def add_rule(self, rule: Rule) -> None:
        if not isinstance(rule, Rule):
            raise SchematronTypeError(f"{rule!r} is not a {Rule!r} instance")
        self._rules.append(rule)

    @property
    def lets(self) -> list[Let]:
        return self._lets.copy()

    @property
    def rules(self) -> list[Rule]:
        return self._rules.copy()

    @property
    def abstract_rules(self) -> dict[str, Rule]:
        """A mapping from ids to the abstract rules of the pattern."""
        return {r.id: r for r in self._rules if r.abstract and r.id is not None}

    def get_abstract_rule(self, id: str) -> Optional[Rule]:
        return self.abstract_rules.get(id)

    def iter_children(self) -> Iterator[SchematronElement]:
        yield from self._lets
        yield from self._rules

    def to_etree(self) -> ElementType:
        elem = make_element(self.tag, id=self.id)
        if self.rich is not None:
            self.rich.fill_element(elem)
        if self.title is not None:
            elem.append(_title_element(self.title))
        self._fill_foreign_elements(elem)
        for child in self.iter_children():
            elem.append(child.to_etree())
        self._fill_foreign_attributes(elem)
        return elem


class Schema(ForeignContentMixin, SchematronElement):
    """
    A Schematron schema, the top-level element of the model.

    :param title: an optional title.
    :param query_binding: the query language binding, for default is XSLT 1.0.
    :param schema_version: an optional version of the schema.
    :param default_phase: an optional phase to use when none is provided.
    """
    tag = SCH_SCHEMA

    def __init__(self, title: Optional[str] = None,
                 query_binding: Optional[str] = None,
                 schema_version: Optional[str] = None,
                 default_phase: Optional[str] = None) -> None:
        self.title = title
        self.query_binding = query_binding
        self.schema_version = schema_version
        self.default_phase = default_phase
        self._namespaces: list[Namespace] = []
        self._lets: list[Let] = []
        self._patterns: list[Pattern] = []
        self._diagnostics: list[Diagnostic] = []

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        for name in ('title', 'query_binding', 'schema_version', 'default_phase'):
            if getattr(self, name) is not None:
                yield name, getattr(self, name)
        yield 'patterns', self._patterns

    def add_namespace(self, namespace: Namespace) -> None:
        if not isinstance(namespace, Namespace):
            raise SchematronTypeError(f"{namespace!r} is not a {Namespace!r} instance")
        self._namespaces.append(namespace)

    def add_let(self, let: Let) -> None:
        if not isinstance(let, Let):
            raise SchematronTypeError(f"{let!r} is not a {Let!r} instance")
        self._lets.append(let)

    def add_pattern(self, pattern: Pattern) -> None:
        if not isinstance(pattern, Pattern):
            raise SchematronTypeError(f"{pattern!r} is not a {Pattern!r} instance")
        self._patterns.append(pattern)

    def add_diagnostic(self, diagnostic: Diagnostic) -> None:
        if not isinstance(diagnostic, Diagnostic):
            raise SchematronTypeError(f"{diagnostic!r} is not a {Diagnostic!r} instance")
        self._diagnostics.append(diagnostic)

    @property
    def namespaces(self) -> dict[str, str]:
        """An ordered mapping from prefixes to URIs of the declared namespaces."""
        return {ns.prefix: ns.uri for ns in self._namespaces
                if ns.prefix is not None and ns.uri is not None}

    @property
    def lets(self) -> list[Let]:
        return self._lets.copy()

    @property
    def patterns(self) -> list[Pattern]:
        return self._patterns.copy()

    @property
    def diagnostics(self) -> dict[str, Diagnostic]:
        """An ordered mapping from ids to diagnostics."""
        return {d.id: d for d in self._diagnostics if d.id is not None}

    def iter_errors(self) -> Iterator[str]:
        if not self._patterns:
            yield "<schema> has no <pattern>"

        diagnostics = self.diagnostics
        for pattern in self._patterns:
            abstract_rules = pattern.abstract_rules
            for rule in pattern.rules:
                for extends in rule.extends:
                    if extends.rule is not None and extends.rule not in abstract_rules:
                        yield f"<extends> refers to unknown abstract rule {extends.rule!r}"
                for assert_report in rule.assert_reports:
                    for id_ in assert_report.diagnostics:
                        if id_ not in diagnostics:
                            yield f"<{assert_report.local_name}> refers to " \
                                  f"unknown diagnostic {id_!r}"

    def iter_children(self) -> Iterator[SchematronElement]:
        yield from self._namespaces
        yield from self._lets
        yield from self._patterns
        yield from self._diagnostics

    def to_etree(self) -> ElementType:
        elem = make_element(
            self.tag,
            queryBinding=self.query_binding,
            schemaVersion=self.schema_version,
            defaultPhase=self.default_phase,
        )
        if self.title is not None:
            elem.append(_title_element(self.title))

        self._fill_foreign_elements(elem)
        for child in self._namespaces:
            elem.append(child.to_etree())
        for child in self._lets:
            elem.append(child.to_etree())
        for child in self._patterns:
            elem.append(child.to_etree())
        if self._diagnostics:
            diagnostics = make_element(SCH_DIAGNOSTICS)
            for child in self._diagnostics:
                diagnostics.append(child.to_etree())
            elem.append(diagnostics)

        self._fill_foreign_attributes(elem)
        etree.cleanup_namespaces(elem)
        return elem

    def to_document(self) -> etree._ElementTree:
        """Returns the schema serialized as an lxml ElementTree."""
        return etree.ElementTree(self.to_etree())
