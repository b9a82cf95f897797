#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
# mypy: ignore-errors
"""
Subpackage with unittest extensions for xmlschematron.

Includes a base test case class with helpers for building Schematron models from
fragments and test case files, and a comparison helper for lxml element trees.
"""
import platform
import unittest

from lxml import etree

from ._helpers import etree_elements_assert_equal
from ._case_class import SchematronTestCase


def print_test_header():
    """Print a header that displays Python version and platform used for test session."""
    header = f"Test xmlschematron with Python {platform.python_version()} " \
             f"on {platform.platform()} (lxml {etree.__version__})"
    print('{0}\n{1}\n{0}'.format("*" * len(header), header))


def run_xmlschematron_tests(name):
    print_test_header()
    print(f"Run tests on {name} ...\n")
    unittest.main()


__all__ = ['etree_elements_assert_equal', 'SchematronTestCase',
           'print_test_header', 'run_xmlschematron_tests']
