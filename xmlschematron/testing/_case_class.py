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
Tests subpackage module: common definitions for unittest scripts of the 'xmlschematron' package.
"""
import unittest
import os
from textwrap import dedent

from lxml import etree

from xmlschematron.model import CollectingErrorHandler, read_rule, read_schematron
from ._helpers import etree_elements_assert_equal

SCHEMATRON_TEMPLATE = """<?xml version="1.0" encoding="UTF-8"?>
<sch:schema xmlns:sch="http://purl.oclc.org/dsdl/schematron">
    {0}
</sch:schema>"""

RULE_TEMPLATE = """<sch:rule xmlns:sch="http://purl.oclc.org/dsdl/schematron" {0}>
    {1}
</sch:rule>"""


class SchematronTestCase(unittest.TestCase):
    """
    Base class for testing Schematron models and resources.
    """
    TEST_CASES_DIR = None

    @classmethod
    def casepath(cls, relative_path):
        """
        Returns the absolute path from a relative path specified from the referenced TEST_CASES_DIR.
        """
        return os.path.join(cls.TEST_CASES_DIR or '', relative_path)

    def get_schematron_source(self, source):
        """
        Returns a Schematron source. A fragment of Schematron elements is wrapped
        into a <sch:schema> element, a text not starting with '<' is a test case path.
        """
        source = dedent(source.strip())
        if not source.startswith('<'):
            return self.casepath(source)
        elif source.startswith('<?xml ') or source.startswith('<sch:schema '):
            return source
        else:
            return SCHEMATRON_TEMPLATE.format(source)

    def get_schema(self, source, error_handler=None):
        """Returns the Schematron model read from a source."""
        return read_schematron(self.get_schematron_source(source), error_handler)

    def get_rule(self, attributes, content, error_handler=None):
        """Returns the model of a <sch:rule> built from its attributes and content."""
        elem = etree.fromstring(RULE_TEMPLATE.format(attributes, dedent(content.strip())))
        return read_rule(elem, error_handler)

    def check_errors(self, obj, *messages):
        """Checks the error messages of a complete validation of a model element."""
        error_handler = CollectingErrorHandler()
        obj.validate_completely(error_handler)
        self.assertListEqual(error_handler.messages, list(messages))

    def check_etree_elements(self, elem, other):
        """Checks if two lxml elements are equal, ignoring whitespace differences."""
        try:
            self.assertIsNone(
                etree_elements_assert_equal(elem, other, strict=False, skip_comments=True)
            )
        except AssertionError as err:
            self.assertIsNone(err, None)
