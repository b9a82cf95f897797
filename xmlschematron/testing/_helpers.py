#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
import re
from typing import Any

from xmlschematron.aliases import ElementType

_REGEX_SPACES = re.compile(r'\s+')


def _is_skipped(elem: Any, skip_comments: bool) -> bool:
    return skip_comments and callable(elem.tag)


def _texts_differ(text1: Any, text2: Any, strict: bool) -> bool:
    if text1 == text2:
        return False
    elif strict:
        return True
    elif text1 is None or text2 is None:
        return bool((text1 or text2).strip())
    return _REGEX_SPACES.sub(' ', text1.strip()) != _REGEX_SPACES.sub(' ', text2.strip())


def etree_elements_assert_equal(elem: ElementType, other: ElementType,
                                strict: bool = True, skip_comments: bool = True,
                                check_nsmap: bool = False) -> None:
    """
    Tests the equality of two lxml Element trees.

    :param elem: the master Element tree, reference for namespace mapping.
    :param other: the other Element tree that has to be compared.
    :param strict: asserts strictly equality, `True` for default. If `False` \
    the differences of whitespace in texts and tails are ignored.
    :param skip_comments: skip comments and processing instructions from comparison.
    :param check_nsmap: if to check namespace maps.
    :raise: an AssertionError containing information about first difference encountered.
    """
    if elem.tag != other.tag:
        raise AssertionError(f"{elem!r} != {other!r}: tags differ")
    elif dict(elem.attrib) != dict(other.attrib):
        msg = "{!r} != {!r}: attributes differ: {!r} != {!r}"
        raise AssertionError(msg.format(elem, other, dict(elem.attrib), dict(other.attrib)))
    elif check_nsmap and elem.nsmap != other.nsmap:
        msg = "{!r} != {!r}: nsmaps differ: {!r} != {!r}"
        raise AssertionError(msg.format(elem, other, elem.nsmap, other.nsmap))
    elif _texts_differ(elem.text, other.text, strict):
        raise AssertionError(f"{elem!r} != {other!r}: texts differ: "
                             f"{elem.text!r} != {other.text!r}")

    children = [e for e in elem if not _is_skipped(e, skip_comments)]
    other_children = [e for e in other if not _is_skipped(e, skip_comments)]
    if len(children) != len(other_children):
        msg = "%r != %r: children number differ: %r != %r"
        raise AssertionError(msg % (elem, other, len(children), len(other_children)))

    for e1, e2 in zip(children, other_children):
        if _texts_differ(e1.tail, e2.tail, strict):
            raise AssertionError(f"{e1!r} != {e2!r}: tails differ: "
                                 f"{e1.tail!r} != {e2.tail!r}")
        if callable(e1.tag):
            if e1.tag is not e2.tag or e1.text != e2.text:
                raise AssertionError(f"{e1!r} != {e2!r}: nodes differ")
        else:
            etree_elements_assert_equal(e1, e2, strict, skip_comments, check_nsmap)
