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
This module contains the classes of the Schematron Validation Report Language
(SVRL) and the reader that builds a typed report from the output of a
validation program.
"""
import dataclasses as dc
from collections.abc import Iterator
from typing import Any, Optional, Union

from xmlschematron.exceptions import SchematronTypeError, SVRLConsistencyError
from xmlschematron.names import SVRL_NAMESPACE, SVRL_SCHEMATRON_OUTPUT, SVRL_TEXT, \
    SVRL_NS_PREFIX_IN_ATTRIBUTE_VALUES, SVRL_ACTIVE_PATTERN, SVRL_FIRED_RULE, \
    SVRL_FAILED_ASSERT, SVRL_SUCCESSFUL_REPORT, SVRL_DIAGNOSTIC_REFERENCE
from xmlschematron.aliases import ElementType
from xmlschematron.utils.etree import is_etree_element, is_etree_document
from xmlschematron.utils.qnames import get_namespace, local_name, normalize_text


@dc.dataclass
class DiagnosticReference:
    """A diagnostic message bound to an assertion result."""
    diagnostic: str
    text: str = ''


@dc.dataclass
class AssertionResult:
    """Base class of the results of assertions."""
    location: str
    test: str
    id: Optional[str] = None
    role: Optional[str] = None
    flag: Optional[str] = None
    diagnostic_references: list[DiagnosticReference] = dc.field(default_factory=list)
    text: str = ''

    @property
    def is_failed_assert(self) -> bool:
        return False


@dc.dataclass
class FailedAssert(AssertionResult):
    """An assert whose test evaluated to false."""

    @property
    def is_failed_assert(self) -> bool:
        return True


@dc.dataclass
class SuccessfulReport(AssertionResult):
    """A report whose test evaluated to true."""


@dc.dataclass
class FiredRule:
    """A rule that matched a node, with the results of its assertions."""
    context: str
    id: Optional[str] = None
    role: Optional[str] = None
    flag: Optional[str] = None
    results: list[AssertionResult] = dc.field(default_factory=list)

    @property
    def failed_asserts(self) -> list[FailedAssert]:
        return [x for x in self.results if isinstance(x, FailedAssert)]

    @property
    def successful_reports(self) -> list[SuccessfulReport]:
        return [x for x in self.results if isinstance(x, SuccessfulReport)]


@dc.dataclass
class ActivePattern:
    """A pattern processed by the validation, with its fired rules."""
    id: Optional[str] = None
    name: Optional[str] = None
    role: Optional[str] = None
    document: Optional[str] = None
    fired_rules: list[FiredRule] = dc.field(default_factory=list)


@dc.dataclass
class NsPrefix:
    """A namespace prefix used in the expressions reported."""
    prefix: str
    uri: str


@dc.dataclass
class SchematronOutput:
    """The root of a SVRL report."""
    title: Optional[str] = None
    phase: Optional[str] = None
    schema_version: Optional[str] = None
    texts: list[str] = dc.field(default_factory=list)
    ns_prefixes: list[NsPrefix] = dc.field(default_factory=list)
    active_patterns: list[ActivePattern] = dc.field(default_factory=list)

    def iter_fired_rules(self) -> Iterator[FiredRule]:
        for active_pattern in self.active_patterns:
            yield from active_pattern.fired_rules

    def iter_results(self) -> Iterator[AssertionResult]:
        for fired_rule in self.iter_fired_rules():
            yield from fired_rule.results

    def iter_failed_asserts(self) -> Iterator[FailedAssert]:
        for result in self.iter_results():
            if isinstance(result, FailedAssert):
                yield result

    def iter_successful_reports(self) -> Iterator[SuccessfulReport]:
        for result in self.iter_results():
            if isinstance(result, SuccessfulReport):
                yield result

    @property
    def failed_asserts(self) -> list[FailedAssert]:
        return list(self.iter_failed_asserts())

    @property
    def successful_reports(self) -> list[SuccessfulReport]:
        return list(self.iter_successful_reports())


###
# SVRL reader

def _get_required(elem: ElementType, name: str) -> str:
    value = elem.get(name)
    if value is None:
        msg = f"missing required attribute {name!r} of <svrl:{local_name(elem.tag)}>"
        raise SVRLConsistencyError(msg, elem)
    return value


def _iter_svrl_children(elem: ElementType) -> Iterator[ElementType]:
    """Iterates the SVRL children, skipping comments, PIs and foreign elements."""
    for child in elem:
        if callable(child.tag):
            continue
        elif get_namespace(child.tag) == SVRL_NAMESPACE:
            yield child


def _read_result(elem: ElementType) -> AssertionResult:
    cls = FailedAssert if elem.tag == SVRL_FAILED_ASSERT else SuccessfulReport
    result = cls(
        location=_get_required(elem, 'location'),
        test=_get_required(elem, 'test'),
        id=elem.get('id'),
        role=elem.get('role'),
        flag=elem.get('flag'),
    )

    # Diagnostic references are accepted before the text or right after it,
    # but not on both sides.
    text = None
    references_before_text = 0
    for child in _iter_svrl_children(elem):
        if child.tag == SVRL_DIAGNOSTIC_REFERENCE:
            if text is not None and references_before_text:
                raise SVRLConsistencyError("misplaced <svrl:diagnostic-reference>", child)
            result.diagnostic_references.append(DiagnosticReference(
                diagnostic=_get_required(child, 'diagnostic'),
                text=normalize_text(''.join(child.itertext())),
            ))
        elif child.tag == SVRL_TEXT:
            if text is not None:
                raise SVRLConsistencyError("multiple <svrl:text> in an assertion result", child)
            text = normalize_text(''.join(child.itertext()))
            references_before_text = len(result.diagnostic_references)
        else:
            raise SVRLConsistencyError("unexpected SVRL element in an assertion result", child)

    if text is None:
        raise SVRLConsistencyError("missing <svrl:text> in an assertion result", elem)
    result.text = text
    return result


def read_svrl(source: Any) -> SchematronOutput:
    """
    Builds a typed SVRL report from the output of a validation program,
    enforcing the order and the cardinality of the SVRL elements.

    :param source: an lxml Element or ElementTree, or a `TransformResult`.
    :raises SVRLConsistencyError: if the output doesn't conform to SVRL grammar.
    """
    root: Union[ElementType, None]
    if is_etree_element(source):
        root = source
    elif is_etree_document(source):
        root = source.getroot()
    elif hasattr(source, 'root'):
        root = source.root
    else:
        raise SchematronTypeError(f"invalid type {type(source)!r} for source")

    if root is None:
        raise SVRLConsistencyError("the validation output is empty")
    elif root.tag != SVRL_SCHEMATRON_OUTPUT:
        raise SVRLConsistencyError("the root is not a <svrl:schematron-output>", root)

    report = SchematronOutput(
        title=root.get('title') or None,
        phase=root.get('phase'),
        schema_version=root.get('schemaVersion') or None,
    )

    active_pattern: Optional[ActivePattern] = None
    fired_rule: Optional[FiredRule] = None

    for child in _iter_svrl_children(root):
        if child.tag == SVRL_TEXT:
            if report.ns_prefixes or report.active_patterns:
                raise SVRLConsistencyError("misplaced <svrl:text>", child)
            report.texts.append(normalize_text(''.join(child.itertext())))

        elif child.tag == SVRL_NS_PREFIX_IN_ATTRIBUTE_VALUES:
            if report.active_patterns:
                raise SVRLConsistencyError(
                    "misplaced <svrl:ns-prefix-in-attribute-values>", child
                )
            report.ns_prefixes.append(NsPrefix(
                prefix=_get_required(child, 'prefix'),
                uri=_get_required(child, 'uri'),
            ))

        elif child.tag == SVRL_ACTIVE_PATTERN:
            active_pattern = ActivePattern(
                id=child.get('id'),
                name=child.get('name'),
                role=child.get('role'),
                document=child.get('document'),
            )
            fired_rule = None
            report.active_patterns.append(active_pattern)

        elif child.tag == SVRL_FIRED_RULE:
            if active_pattern is None:
                raise SVRLConsistencyError(
                    "<svrl:fired-rule> without a preceding <svrl:active-pattern>", child
                )
            fired_rule = FiredRule(
                context=_get_required(child, 'context'),
                id=child.get('id'),
                role=child.get('role'),
                flag=child.get('flag'),
            )
            active_pattern.fired_rules.append(fired_rule)

        elif child.tag in (SVRL_FAILED_ASSERT, SVRL_SUCCESSFUL_REPORT):
            if fired_rule is None:
                raise SVRLConsistencyError(
                    f"<svrl:{local_name(child.tag)}> without a preceding <svrl:fired-rule>",
                    child
                )
            fired_rule.results.append(_read_result(child))

        elif child.tag == SVRL_DIAGNOSTIC_REFERENCE:
            raise SVRLConsistencyError("misplaced <svrl:diagnostic-reference>", child)
        else:
            raise SVRLConsistencyError("unexpected SVRL element", child)

    return report


__all__ = ['DiagnosticReference', 'AssertionResult', 'FailedAssert', 'SuccessfulReport',
           'FiredRule', 'ActivePattern', 'NsPrefix', 'SchematronOutput', 'read_svrl']
