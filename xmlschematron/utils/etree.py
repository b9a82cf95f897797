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

from lxml import etree

from xmlschematron.aliases import ElementType, ElementTreeType


def is_etree_element(obj: object) -> bool:
    """A validator for ElementTree elements."""
    return hasattr(obj, 'append') and hasattr(obj, 'tag') and hasattr(obj, 'attrib')


def is_etree_document(obj: object) -> bool:
    """A validator for ElementTree objects."""
    return hasattr(obj, 'getroot') and hasattr(obj, 'parse') and hasattr(obj, 'iter')


def is_lxml_element(obj: object) -> bool:
    """A validator for lxml elements."""
    return hasattr(obj, 'append') and hasattr(obj, 'tag') and hasattr(obj, 'attrib') \
        and hasattr(obj, 'getparent') and hasattr(obj, 'nsmap') and hasattr(obj, 'xpath')


def is_lxml_document(obj: Any) -> bool:
    return is_etree_document(obj) and hasattr(obj, 'xpath') and hasattr(obj, 'xslt')


def etree_getpath(node: Any, document: Optional[ElementTreeType] = None) -> str:
    """
    Returns the absolute XPath location of a node selected from an lxml tree.
    Attribute and text nodes, returned by lxml as *smart strings*, are located
    from their parent element.

    :param node: an lxml element or a smart string result of an XPath selection.
    :param document: the tree of the node, for default is the tree of the node.
    """
    if is_lxml_element(node):
        if callable(node.tag):
            parent = node.getparent()
            if parent is None:
                return '/'
            return etree_getpath(parent, document)
        return (document or node.getroottree()).getpath(node)

    getparent = getattr(node, 'getparent', None)
    parent = getparent() if getparent is not None else None
    if parent is None:
        return '/'

    path = etree_getpath(parent, document)
    if getattr(node, 'is_attribute', False):
        return f'{path}/@{node.attrname}'
    return f'{path}/text()'


def etree_tostring(elem: Union[ElementType, ElementTreeType],
                   indent: str = '',
                   max_lines: Optional[int] = None,
                   xml_declaration: bool = False,
                   pretty_print: bool = True) -> str:
    """
    Serialize an lxml Element tree to a string.

    :param elem: the Element instance or the ElementTree instance.
    :param indent: the baseline indentation.
    :param max_lines: if truncate serialization after a number of lines \
    (default: do not truncate).
    :param xml_declaration: if set to `True` inserts the XML declaration at the head.
    :param pretty_print: indent the serialized tree, `True` for default.
    :return: a Unicode string.
    """
    if xml_declaration:
        xml_text = etree.tostring(elem, encoding='utf-8', xml_declaration=True,
                                  pretty_print=pretty_print).decode('utf-8')
    else:
        xml_text = etree.tostring(elem, encoding='unicode', pretty_print=pretty_print)

    lines = xml_text.splitlines()
    while lines and not lines[-1].strip():
        lines.pop(-1)

    if max_lines is not None and len(lines) > max_lines + 2:
        lines = lines[:max_lines // 2] + ['...'] + lines[-max_lines // 2:]

    return '\n'.join(indent + line if line else line for line in lines)
