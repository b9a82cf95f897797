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
This module contains the classes of the Schematron rule model: rules with their
assertions, extensions, variables and includes, and the inline elements of the
assertion and diagnostic messages.
"""
from collections.abc import Iterable, Iterator
from typing import Any, Optional, Union

from xmlschematron.exceptions import SchematronTypeError, SchematronValueError
from xmlschematron.names import SCH_RULE, SCH_ASSERT, SCH_REPORT, SCH_EXTENDS, \
    SCH_LET, SCH_INCLUDE, SCH_DIAGNOSTIC, SCH_NAME, SCH_VALUE_OF, SCH_EMPH, \
    SCH_DIR, SCH_SPAN
from xmlschematron.aliases import ElementType
from xmlschematron.utils.qnames import has_text

from .base import make_element, SchematronElement, ForeignContentMixin, \
    RichGroup, LinkableGroup


###
# Inline elements of messages

class InlineElement(SchematronElement):
    """Base class for the elements that can be mixed with the text of a message."""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return dict(self.iter_repr_fields()) == dict(other.iter_repr_fields())


class Name(InlineElement):
    """
    Provides the name of the context node, or of the node selected by
    an optional path, for including it in the message.
    """
    tag = SCH_NAME

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = path

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        if self.path is not None:
            yield 'path', self.path

    def to_etree(self) -> ElementType:
        return make_element(self.tag, path=self.path)


class ValueOf(InlineElement):
    """Provides the string value of an expression for including it in the message."""
    tag = SCH_VALUE_OF

    def __init__(self, select: Optional[str] = None) -> None:
        self.select = select

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        yield 'select', self.select

    def iter_errors(self) -> Iterator[str]:
        if not has_text(self.select):
            yield "<value-of> has no 'select'"

    def to_etree(self) -> ElementType:
        return make_element(self.tag, select=self.select)


class RichInlineElement(InlineElement):
    """Base class for the inline elements for rich formatting of messages."""

    def __init__(self, text: Optional[str] = None) -> None:
        self.text = text

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        if self.text:
            yield 'text', self.text

    def is_minimal(self) -> bool:
        return False

    def to_etree(self) -> ElementType:
        elem = make_element(self.tag)
        elem.text = self.text
        return elem


class Emph(RichInlineElement):
    tag = SCH_EMPH


class Dir(RichInlineElement):
    """A section of text with a writing direction, 'ltr' or 'rtl'."""
    tag = SCH_DIR

    def __init__(self, text: Optional[str] = None, value: Optional[str] = None) -> None:
        super().__init__(text)
        self.value = value

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        if self.value is not None:
            yield 'value', self.value
        yield from super().iter_repr_fields()

    def to_etree(self) -> ElementType:
        elem = make_element(self.tag, value=self.value)
        elem.text = self.text
        return elem


class Span(RichInlineElement):
    """A section of text with a class, for rendering purposes."""
    tag = SCH_SPAN

    def __init__(self, text: Optional[str] = None, class_: Optional[str] = None) -> None:
        super().__init__(text)
        self.class_ = class_

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        if self.class_ is not None:
            yield 'class_', self.class_
        yield from super().iter_repr_fields()

    def to_etree(self) -> ElementType:
        elem = make_element(self.tag, **{'class': self.class_})
        elem.text = self.text
        return elem


MessageItemType = Union[str, InlineElement]


def fill_mixed_content(elem: ElementType, content: Iterable[MessageItemType]) -> None:
    """Appends a sequence of strings and inline elements as mixed content of an element."""
    for item in content:
        if not isinstance(item, str):
            elem.append(item.to_etree())
        elif len(elem):
            elem[-1].tail = (elem[-1].tail or '') + item
        else:
            elem.text = (elem.text or '') + item


class MessageContentMixin:
    """Mixin for elements with a message, made of text mixed with inline elements."""
    _message: list[MessageItemType]

    def add_text(self, text: str) -> None:
        if not isinstance(text, str):
            raise SchematronTypeError(f"{text!r} is not a string")
        elif text:
            if self._message and isinstance(self._message[-1], str):
                self._message[-1] += text
            else:
                self._message.append(text)

    def add_inline(self, item: InlineElement) -> None:
        if not isinstance(item, InlineElement):
            raise SchematronTypeError(f"{item!r} is not an inline element")
        self._message.append(item)

    def has_message(self) -> bool:
        return bool(self._message)

    @property
    def message(self) -> list[MessageItemType]:
        """A copy of the message content."""
        return self._message.copy()

    def get_text(self) -> str:
        """Returns the plain text of the message, without the inline elements."""
        return ''.join(x for x in self._message if isinstance(x, str))

    def iter_inline_elements(self) -> Iterator[InlineElement]:
        for item in self._message:
            if isinstance(item, InlineElement):
                yield item


###
# Rule sub-elements

class Include(SchematronElement):
    """A reference to an external fragment, that has to be replaced by its content."""
    tag = SCH_INCLUDE

    def __init__(self, href: Optional[str] = None) -> None:
        self.href = href

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        yield 'href', self.href

    def iter_errors(self) -> Iterator[str]:
        if not has_text(self.href):
            yield "<include> has no 'href'"

    def is_minimal(self) -> bool:
        return False

    def to_etree(self) -> ElementType:
        return make_element(self.tag, href=self.href)


class Let(SchematronElement):
    """A variable declaration, that binds a name to the value of an expression."""
    tag = SCH_LET

    def __init__(self, name: Optional[str] = None, value: Optional[str] = None) -> None:
        self.name = name
        self.value = value

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        yield 'name', self.name
        yield 'value', self.value

    def iter_errors(self) -> Iterator[str]:
        if not has_text(self.name):
            yield "<let> has no 'name'"
        if not has_text(self.value):
            yield "<let> has no 'value'"

    def to_etree(self) -> ElementType:
        return make_element(self.tag, name=self.name, value=self.value)


class Extends(SchematronElement):
    """
    A reference to an abstract rule, whose content is added to the content
    of the rule, or to an external definition of a rule.
    """
    tag = SCH_EXTENDS

    def __init__(self, rule: Optional[str] = None, href: Optional[str] = None) -> None:
        self.rule = rule
        self.href = href

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        if self.rule is not None:
            yield 'rule', self.rule
        if self.href is not None:
            yield 'href', self.href

    def iter_errors(self) -> Iterator[str]:
        if not has_text(self.rule) and not has_text(self.href):
            yield "<extends> has neither 'rule' nor 'href'"

    def is_minimal(self) -> bool:
        return False

    def to_etree(self) -> ElementType:
        return make_element(self.tag, rule=self.rule, href=self.href)


class AssertReport(ForeignContentMixin, MessageContentMixin, SchematronElement):
    """
    An assertion of a rule. An assert fails when its test is false, a report
    is successful when its test is true.

    :param test: the test expression.
    :param is_assert: `True` for an assert, `False` for a report.
    :param id: an optional identifier.
    :param flag: an optional flag name, set when the assertion fires.
    :param diagnostics: an optional sequence of diagnostic identifiers.
    :param rich: an optional group of rich attributes.
    :param linkable: an optional group of linkable attributes.
    """
    def __init__(self, test: Optional[str] = None,
                 is_assert: bool = True,
                 id: Optional[str] = None,
                 flag: Optional[str] = None,
                 diagnostics: Optional[Iterable[str]] = None,
                 rich: Optional[RichGroup] = None,
                 linkable: Optional[LinkableGroup] = None) -> None:
        self.test = test
        self.is_assert = is_assert
        self.id = id
        self.flag = flag
        self.diagnostics = list(diagnostics) if diagnostics else []
        self.rich = rich
        self.linkable = linkable
        self._message = []

    @property
    def tag(self) -> str:  # type: ignore[override]
        return SCH_ASSERT if self.is_assert else SCH_REPORT

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        yield 'test', self.test
        if not self.is_assert:
            yield 'is_assert', False
        for name in ('id', 'flag', 'rich', 'linkable'):
            if getattr(self, name) is not None:
                yield name, getattr(self, name)
        if self.diagnostics:
            yield 'diagnostics', self.diagnostics

    def iter_errors(self) -> Iterator[str]:
        if not has_text(self.test):
            yield f"<{self.local_name}> has no 'test'"

    def iter_children(self) -> Iterator[SchematronElement]:
        yield from self.iter_inline_elements()

    def to_etree(self) -> ElementType:
        elem = make_element(
            self.tag,
            test=self.test,
            id=self.id,
            flag=self.flag,
            diagnostics=' '.join(self.diagnostics) if self.diagnostics else None,
        )
        if self.rich is not None:
            self.rich.fill_element(elem)
        if self.linkable is not None:
            self.linkable.fill_element(elem)
        self._fill_foreign_elements(elem)
        fill_mixed_content(elem, self._message)
        self._fill_foreign_attributes(elem)
        return elem


class Diagnostic(ForeignContentMixin, MessageContentMixin, SchematronElement):
    """A detailed message, referred by assertions with their 'diagnostics' attribute."""
    tag = SCH_DIAGNOSTIC

    def __init__(self, id: Optional[str] = None, rich: Optional[RichGroup] = None) -> None:
        self.id = id
        self.rich = rich
        self._message = []

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        yield 'id', self.id
        if self.rich is not None:
            yield 'rich', self.rich

    def iter_errors(self) -> Iterator[str]:
        if not has_text(self.id):
            yield "<diagnostic> has no 'id'"

    def iter_children(self) -> Iterator[SchematronElement]:
        yield from self.iter_inline_elements()

    def to_etree(self) -> ElementType:
        elem = make_element(self.tag, id=self.id)
        if self.rich is not None:
            self.rich.fill_element(elem)
        self._fill_foreign_elements(elem)
        fill_mixed_content(elem, self._message)
        self._fill_foreign_attributes(elem)
        return elem


RuleContentType = Union[AssertReport, Extends]


class Rule(ForeignContentMixin, SchematronElement):
    """
    A Schematron rule, that binds a context expression to a sequence of assertions
    and extensions. An abstract rule has no context and can be used only through
    an extension, referring it by its id.

    :param context: the context expression, required for concrete rules.
    :param abstract: `True` if the rule is abstract.
    :param id: the identifier of the rule, required for abstract rules.
    :param flag: an optional flag name, set when the rule fires.
    :param rich: an optional group of rich attributes.
    :param linkable: an optional group of linkable attributes.
    """
    tag = SCH_RULE

    def __init__(self, context: Optional[str] = None,
                 abstract: bool = False,
                 id: Optional[str] = None,
                 flag: Optional[str] = None,
                 rich: Optional[RichGroup] = None,
                 linkable: Optional[LinkableGroup] = None) -> None:
        self.context = context
        self.abstract = abstract
        self.id = id
        self.flag = flag
        self.rich = rich
        self.linkable = linkable
        self._includes: list[Include] = []
        self._lets: list[Let] = []
        self._content: list[RuleContentType] = []

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        if self.flag is not None:
            yield 'flag', self.flag
        if self.abstract:
            yield 'abstract', True
        for name in ('context', 'id', 'rich', 'linkable'):
            if getattr(self, name) is not None:
                yield name, getattr(self, name)
        if self._includes:
            yield 'includes', self._includes
        if self._lets:
            yield 'lets', self._lets
        if self._content:
            yield 'content', self._content
        if self.has_foreign_attributes():
            yield 'foreign_attributes', self.foreign_attributes
        if self.has_foreign_elements():
            yield 'foreign_elements', self.foreign_elements

    def add_include(self, include: Include) -> None:
        if not isinstance(include, Include):
            raise SchematronTypeError(f"{include!r} is not an {Include!r} instance")
        self._includes.append(include)

    def add_let(self, let: Let) -> None:
        if not isinstance(let, Let):
            raise SchematronTypeError(f"{let!r} is not a {Let!r} instance")
        self._lets.append(let)

    def add_assert_report(self, assert_report: AssertReport) -> None:
        if not isinstance(assert_report, AssertReport):
            raise SchematronTypeError(f"{assert_report!r} is not an {AssertReport!r} instance")
        self._content.append(assert_report)

    def add_extends(self, extends: Extends) -> None:
        if not isinstance(extends, Extends):
            raise SchematronTypeError(f"{extends!r} is not an {Extends!r} instance")
        self._content.append(extends)

    def add_content(self, item: RuleContentType) -> None:
        if isinstance(item, Extends):
            self.add_extends(item)
        else:
            self.add_assert_report(item)

    @property
    def includes(self) -> list[Include]:
        return self._includes.copy()

    @property
    def lets(self) -> list[Let]:
        return self._lets.copy()

    @property
    def lets_as_dict(self) -> dict[str, Optional[str]]:
        """An ordered mapping from variable names to value expressions."""
        return {x.name: x.value for x in self._lets if x.name is not None}

    @property
    def content(self) -> list[RuleContentType]:
        """The asserts, the reports and the extends of the rule, in declaration order."""
        return self._content.copy()

    @property
    def assert_reports(self) -> list[AssertReport]:
        return [x for x in self._content if isinstance(x, AssertReport)]

    @property
    def extends(self) -> list[Extends]:
        return [x for x in self._content if isinstance(x, Extends)]

    def has_any_include(self) -> bool:
        return bool(self._includes)

    def has_any_let(self) -> bool:
        return bool(self._lets)

    def has_any_assert_report(self) -> bool:
        return any(isinstance(x, AssertReport) for x in self._content)

    def has_any_extends(self) -> bool:
        return any(isinstance(x, Extends) for x in self._content)

    @property
    def extends_count(self) -> int:
        return sum(isinstance(x, Extends) for x in self._content)

    def iter_errors(self) -> Iterator[str]:
        if self.abstract:
            if not has_text(self.id):
                yield "abstract <rule> has no 'id'"
            if has_text(self.context):
                yield "abstract <rule> may not have a 'context'"
        elif not has_text(self.context):
            yield "<rule> must have a 'context'"

        if not self._content:
            yield "<rule> has no content"

    def iter_children(self) -> Iterator[SchematronElement]:
        yield from self._includes
        yield from self._lets
        yield from self._content

    def to_etree(self) -> ElementType:
        elem = make_element(
            self.tag,
            flag=self.flag,
            abstract='true' if self.abstract else None,
            context=self.context,
            id=self.id,
        )
        if self.rich is not None:
            self.rich.fill_element(elem)
        if self.linkable is not None:
            self.linkable.fill_element(elem)

        self._fill_foreign_elements(elem)
        for child in self.iter_children():
            elem.append(child.to_etree())
        self._fill_foreign_attributes(elem)
        return elem

    def get_extended_content(self, abstract_rules: dict[str, 'Rule'],
                             _ancestors: Optional[set[str]] = None) -> list[AssertReport]:
        """
        Returns the assertions of the rule with the extensions replaced by the
        assertions of the referred abstract rules.

        :param abstract_rules: a mapping from ids to abstract rules.
        """
        if _ancestors is None:
            _ancestors = set()

        assert_reports: list[AssertReport] = []
        for item in self._content:
            if isinstance(item, AssertReport):
                assert_reports.append(item)
            elif item.rule is None:
                raise SchematronValueError(f"{item!r}: external extensions are not supported")
            elif item.rule in _ancestors:
                raise SchematronValueError(f"circular extension of rule {item.rule!r}")
            else:
                try:
                    rule = abstract_rules[item.rule]
                except KeyError:
                    msg = f"<extends> refers to unknown abstract rule {item.rule!r}"
                    raise SchematronValueError(msg) from None
                else:
                    assert_reports.extend(rule.get_extended_content(
                        abstract_rules, _ancestors | {item.rule}
                    ))
        return assert_reports
