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
This module contains the base classes of Schematron model elements.
"""
from collections.abc import Iterator, Mapping
from typing import Any, Optional

from lxml import etree

from xmlschematron.exceptions import SchematronTypeError, SchematronOwnershipError
from xmlschematron.names import SCH_NAMESPACE, XML_LANG, XML_SPACE
from xmlschematron.aliases import ElementType
from xmlschematron.utils.etree import is_lxml_element
from xmlschematron.utils.qnames import local_name

from .errorhandlers import ErrorHandler


SCH_NSMAP = {'sch': SCH_NAMESPACE}


def copy_element(elem: ElementType) -> ElementType:
    """Returns a detached deep copy of an element, without its tail."""
    return etree.fromstring(etree.tostring(elem, with_tail=False))


def make_element(tag: str, **attrib: Optional[str]) -> ElementType:
    """
    Creates an lxml element for serializing a model element. The attributes
    are set in the order of the keyword arguments, skipping `None` values.
    """
    elem = etree.Element(tag, nsmap=SCH_NSMAP)
    for name, value in attrib.items():
        if value is not None:
            elem.set(name, value)
    return elem


class SchematronElement:
    """
    Base class for Schematron model elements. A concrete model element
    defines its structural checks, yielding the messages of the violations
    with *iter_errors()*, and its subelements with *iter_children()*. The
    two validation modes share the same checks and differ only in the control
    flow: *is_valid()* stops at the first violation, *validate_completely()*
    reports all the violations of the element and of its subelements.
    """
    tag: str = ''

    def __repr__(self) -> str:
        fields = ', '.join(f'{k}={v!r}' for k, v in self.iter_repr_fields())
        return f'{self.__class__.__name__}({fields})'

    def iter_repr_fields(self) -> Iterator[tuple[str, Any]]:
        yield from ()

    @property
    def local_name(self) -> str:
        return local_name(self.tag)

    def iter_errors(self) -> Iterator[str]:
        """Yields the messages of the structural violations of the element itself."""
        yield from ()

    def iter_children(self) -> Iterator['SchematronElement']:
        """Yields the model subelements, in declaration order."""
        yield from ()

    def is_valid(self, error_handler: ErrorHandler) -> bool:
        """
        Fail-fast structural validation. Reports the first violation of the element
        to the error handler, otherwise validates the subelements in declaration
        order, stopping at the first invalid one.

        :param error_handler: the handler for reporting the error.
        :return: `True` if the element and its subelements are valid.
        """
        for message in self.iter_errors():
            error_handler.error(self, message)
            return False
        return all(child.is_valid(error_handler) for child in self.iter_children())

    def validate_completely(self, error_handler: ErrorHandler) -> None:
        """
        Collect-all structural validation. Reports all the violations of the
        element and of its subelements to the error handler.
        """
        for message in self.iter_errors():
            error_handler.error(self, message)
        for child in self.iter_children():
            child.validate_completely(error_handler)

    def is_minimal(self) -> bool:
        """
        Returns `True` if the element is in minimal syntax, that is without
        includes, extensions and rich formatting of messages. A schema that
        is not minimal needs a normalization before further processing.
        """
        return all(child.is_minimal() for child in self.iter_children())

    def to_etree(self) -> ElementType:
        """Returns the element serialized as an lxml Element."""
        raise NotImplementedError()


class ForeignContentMixin:
    """
    Mixin for model elements that carry foreign content, that is attributes
    and elements outside the Schematron namespace that are preserved verbatim.
    A foreign element is owned by one model element at a time, so an element
    that has a parent can't be added.
    """
    _foreign_attributes: Optional[dict[str, str]] = None
    _foreign_container: Optional[ElementType] = None

    def add_foreign_element(self, elem: ElementType) -> None:
        if not is_lxml_element(elem):
            raise SchematronTypeError(f"a foreign element must be an lxml Element: {elem!r}")
        elif elem.getparent() is not None:
            raise SchematronOwnershipError(f"foreign element {elem!r} already has a parent")

        if self._foreign_container is None:
            self._foreign_container = etree.Element('foreign-content')
        self._foreign_container.append(elem)

    def has_foreign_elements(self) -> bool:
        return self._foreign_container is not None and len(self._foreign_container) > 0

    @property
    def foreign_elements(self) -> list[ElementType]:
        """A list with copies of the foreign elements, in insertion order."""
        if self._foreign_container is None:
            return []
        return [copy_element(child) for child in self._foreign_container]

    def add_foreign_attribute(self, name: str, value: str) -> None:
        if not isinstance(name, str) or not isinstance(value, str):
            raise SchematronTypeError("foreign attribute name and value must be strings")

        if self._foreign_attributes is None:
            self._foreign_attributes = {}
        self._foreign_attributes[name] = value

    def has_foreign_attributes(self) -> bool:
        return bool(self._foreign_attributes)

    @property
    def foreign_attributes(self) -> dict[str, str]:
        """A copy of the mapping of foreign attributes, in insertion order."""
        return dict(self._foreign_attributes) if self._foreign_attributes else {}

    def _fill_foreign_elements(self, elem: ElementType) -> None:
        if self._foreign_container is not None:
            for child in self._foreign_container:
                elem.append(copy_element(child))

    def _fill_foreign_attributes(self, elem: ElementType) -> None:
        if self._foreign_attributes:
            for name, value in self._foreign_attributes.items():
                elem.set(name, value)


class AttributeGroup:
    """Base class for groups of optional attributes shared by several elements."""
    _attributes: tuple[tuple[str, str], ...] = ()

    __slots__ = ()

    def __init__(self, **kwargs: Optional[str]) -> None:
        for _, name in self._attributes:
            setattr(self, name, kwargs.pop(name, None))
        if kwargs:
            msg = "unexpected arguments for {}: {!r}"
            raise SchematronTypeError(msg.format(self.__class__.__name__, tuple(kwargs)))

    def __repr__(self) -> str:
        fields = ', '.join(f'{name}={getattr(self, name)!r}' for _, name in self._attributes
                           if getattr(self, name) is not None)
        return f'{self.__class__.__name__}({fields})'

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, self.__class__):
            return NotImplemented
        return all(getattr(self, name) == getattr(other, name) for _, name in self._attributes)

    def is_empty(self) -> bool:
        return all(getattr(self, name) is None for _, name in self._attributes)

    @classmethod
    def from_attributes(cls, attrib: Mapping[str, str]) -> Optional['AttributeGroup']:
        """
        Builds the group from a mapping of XML attributes, returns
        `None` if none of the attributes of the group is present.
        """
        kwargs = {name: attrib[qname] for qname, name in cls._attributes if qname in attrib}
        return cls(**kwargs) if kwargs else None

    @classmethod
    def is_group_attribute(cls, qname: str) -> bool:
        return any(qname == x[0] for x in cls._attributes)

    def fill_element(self, elem: ElementType) -> None:
        for qname, name in self._attributes:
            value = getattr(self, name)
            if value is not None:
                elem.set(qname, value)


class RichGroup(AttributeGroup):
    """Rich attributes, for documentation and rich user interfaces."""
    _attributes = (('icon', 'icon'), ('see', 'see'), ('fpi', 'fpi'),
                   (XML_LANG, 'lang'), (XML_SPACE, 'space'))

    __slots__ = ('icon', 'see', 'fpi', 'lang', 'space')


class LinkableGroup(AttributeGroup):
    """Linkable attributes, for identifying parts of a pattern in the outcome."""
    _attributes = (('role', 'role'), ('subject', 'subject'))

    __slots__ = ('role', 'subject')
