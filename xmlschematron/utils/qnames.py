#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Helper functions for QNames, namespaces and attribute values."""
import re
from typing import Any, Optional

from xmlschematron.exceptions import SchematronTypeError

_REGEX_SPACES = re.compile(r'\s+')


def get_namespace(qname: str) -> str:
    """
    Returns the namespace URI associated with a QName in extended form or a local name.
    If the argument is not conformant to QName format returns the empty string, which
    means no namespace.
    """
    try:
        if qname[0] != '{':
            return ''
        namespace, _ = qname[1:].split('}')
    except (IndexError, ValueError):
        return ''
    except TypeError:
        raise SchematronTypeError("the argument must be a string-like object")
    else:
        return namespace


def get_qname(uri: Optional[str], name: str) -> str:
    """
    Returns an expanded QName from URI and local part. If the URI is empty
    or if the name is already an expanded QName, returns the *name* argument.
    """
    if not uri or not name or name[0] == '{':
        return name
    return f'{{{uri}}}{name}'


def local_name(qname: str) -> str:
    """
    Return the local part of an expanded QName or a prefixed name.

    :param qname: an expanded QName or a prefixed name or a local name.
    """
    try:
        if qname[0] == '{':
            return qname.split('}', 1)[1]
        elif ':' in qname:
            return qname.split(':', 1)[1]
    except IndexError:
        return ''
    except (TypeError, AttributeError):
        raise SchematronTypeError("the argument 'qname' must be a string-like object")
    else:
        return qname


def has_text(value: Any) -> bool:
    """Returns `True` if the argument is a string with at least a not blank character."""
    return isinstance(value, str) and bool(value.strip())


def normalize_text(text: Optional[str]) -> str:
    """Collapses the whitespaces of a text, returning an empty string for `None`."""
    if not text:
        return ''
    return _REGEX_SPACES.sub(' ', text).strip()
