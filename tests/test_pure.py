#!/usr/bin/env python
#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Tests concerning the XPath evaluation of Schematron models"""
import os

from lxml import etree

from xmlschematron.exceptions import SchematronTransformError
from xmlschematron.names import SVRL_SCHEMATRON_OUTPUT, SVRL_NS_PREFIX_IN_ATTRIBUTE_VALUES
from xmlschematron.pure import XPathProgram, split_union, get_context_path, xpath_boolean
from xmlschematron.providers import PureProvider
from xmlschematron.transforms import CollectingErrorListener
from xmlschematron.schematron import SchematronResourceSCH, SchematronResourcePure
from xmlschematron.validity import Validity, RoleClassifier
from xmlschematron.testing import SchematronTestCase


class VirtualRatesResolver(etree.Resolver):

    def resolve(self, url, pubid, context):
        if url.endswith('rates.xml'):
            return self.resolve_string('<rates><rate currency="XYZ"/></rates>', context)


class TestXPathHelpers(SchematronTestCase):

    def test_context_path(self):
        self.assertEqual(get_context_path('Invoice/Amount'), '//Invoice/Amount')
        self.assertEqual(get_context_path(' /Invoice '), '/Invoice')
        self.assertEqual(get_context_path('//Amount'), '//Amount')
        self.assertEqual(get_context_path('Amount | Number'), '//Amount | //Number')
        self.assertEqual(get_context_path('/Invoice|Line/Amount'), '/Invoice | //Line/Amount')
        self.assertEqual(get_context_path('Line[Amount | Number]'), '//Line[Amount | Number]')
        self.assertEqual(get_context_path('Line[@code = "a|b"] | Number'),
                         '//Line[@code = "a|b"] | //Number')

    def test_split_union(self):
        self.assertEqual(split_union('a'), ['a'])
        self.assertEqual(split_union('a | b/c'), ['a ', ' b/c'])
        self.assertEqual(split_union("a[contains(., '|')] | id('x|y')"),
                         ["a[contains(., '|')] ", " id('x|y')"])

    def test_xpath_boolean(self):
        self.assertFalse(xpath_boolean(float('nan')))
        self.assertFalse(xpath_boolean(0.0))
        self.assertTrue(xpath_boolean(-1.0))
        self.assertFalse(xpath_boolean([]))
        self.assertTrue(xpath_boolean(['node']))
        self.assertFalse(xpath_boolean(''))
        self.assertTrue(xpath_boolean(True))


class TestXPathProgram(SchematronTestCase):
    TEST_CASES_DIR = os.path.join(os.path.dirname(__file__), 'test_cases')

    def test_program_expressions(self):
        program = XPathProgram(self.get_schema('invoice-extends.sch'))
        self.assertIn('//inv:Invoice/inv:Amount', list(program.iter_expressions()))
        self.assertIn('string($max-amount)', list(program.iter_expressions()))
        self.assertEqual(program.get_debug_document().getroot().tag,
                         '{http://purl.oclc.org/dsdl/schematron}schema')

    def test_syntax_errors_are_detected_at_build(self):
        schema = self.get_schema("""
            <sch:pattern>
              <sch:rule context="Invoice"><sch:assert test="(((">Broken</sch:assert></sch:rule>
            </sch:pattern>
        """)
        with self.assertRaises(etree.XPathSyntaxError):
            XPathProgram(schema)

        with self.assertLogs('xmlschematron', level='ERROR'):
            provider = PureProvider(schema)
        self.assertFalse(provider.is_valid_schematron())
        self.assertIsNone(provider.get_debug_document())

    def test_structurally_invalid_schema(self):
        schema = self.get_schema("""
            <sch:pattern><sch:rule context="Invoice"/></sch:pattern>
        """)
        with self.assertLogs('xmlschematron', level='ERROR'):
            provider = PureProvider(schema)
        self.assertFalse(provider.is_valid_schematron())


class TestPureValidation(SchematronTestCase):
    TEST_CASES_DIR = os.path.join(os.path.dirname(__file__), 'test_cases')

    def test_simple_report(self):
        resource = SchematronResourcePure(self.casepath('invoice.sch'))
        report = resource.apply_validation_to_svrl(self.casepath('invoice-invalid.xml'))

        self.assertEqual(report.title, 'Invoice checks')
        self.assertEqual(report.schema_version, '1.0')
        self.assertEqual(len(report.active_patterns), 1)
        self.assertEqual(report.active_patterns[0].id, 'amounts')
        self.assertEqual(report.active_patterns[0].name, 'Amounts')
        self.assertTrue(report.active_patterns[0].document.endswith('invoice-invalid.xml'))

        fired_rules = list(report.iter_fired_rules())
        self.assertEqual(len(fired_rules), 1)
        self.assertEqual(fired_rules[0].context, 'Invoice/Amount')
        self.assertEqual(fired_rules[0].id, 'amount-rule')

        failed_assert = report.failed_asserts[0]
        self.assertEqual(failed_assert.id, 'positive-amount')
        self.assertEqual(failed_assert.location, '/Invoice/Amount')
        self.assertEqual(failed_assert.text, 'The amount must be positive')

        self.assertTrue(resource.is_valid(self.casepath('invoice-valid.xml')))
        self.assertIs(resource.get_schematron_validity(self.casepath('invoice-invalid.xml')),
                      Validity.INVALID)

    def test_extended_rules_and_diagnostics(self):
        resource = SchematronResourcePure(self.casepath('invoice-extends.sch'))
        document = resource.apply_validation(self.casepath('invoice-ns.xml'))
        root = document.getroot()
        self.assertEqual(root.tag, SVRL_SCHEMATRON_OUTPUT)
        self.assertEqual(root[0].tag, SVRL_NS_PREFIX_IN_ATTRIBUTE_VALUES)
        self.assertEqual(root[0].get('prefix'), 'inv')

        report = resource.apply_validation_to_svrl(self.casepath('invoice-ns.xml'))
        self.assertEqual(len(list(report.iter_fired_rules())), 3)
        self.assertEqual([x.context for x in report.iter_fired_rules()],
                         ['inv:Invoice/inv:Amount', 'inv:Invoice/inv:Amount', 'inv:Invoice/*'])

        failed_asserts = report.failed_asserts
        self.assertEqual(len(failed_asserts), 2)
        self.assertEqual(failed_asserts[0].text, 'The inv:Amount must be positive')
        self.assertEqual(len(failed_asserts[0].diagnostic_references), 1)
        self.assertEqual(failed_asserts[0].diagnostic_references[0].diagnostic, 'amount-value')
        self.assertEqual(failed_asserts[0].diagnostic_references[0].text, 'Found -5')
        self.assertIn('Amount[1]', failed_asserts[0].location)
        self.assertEqual(failed_asserts[1].text, 'The amount exceeds 1000')
        self.assertIn('Amount[2]', failed_asserts[1].location)

        successful_reports = report.successful_reports
        self.assertEqual(len(successful_reports), 1)
        self.assertEqual(successful_reports[0].text, 'Other element inv:Number')

    def test_parameters(self):
        resource = SchematronResourcePure(self.get_schematron_source("""
            <sch:pattern>
              <sch:rule context="Invoice/Amount">
                <sch:assert test="number(.) &gt;= $min">Too low</sch:assert>
              </sch:rule>
            </sch:pattern>
        """), error_listener=CollectingErrorListener())
        xml_file = self.casepath('invoice-valid.xml')

        with self.assertRaises(SchematronTransformError):
            resource.apply_validation(xml_file)
        self.assertTrue(resource.error_listener.fatal_errors)

        resource.set_parameter('min', 100)
        self.assertTrue(resource.is_valid(xml_file))
        resource.set_parameter('min', 200)
        self.assertFalse(resource.is_valid(xml_file))

    def test_document_function(self):
        resource = SchematronResourcePure(self.casepath('invoice-rates.sch'))
        report = resource.apply_validation_to_svrl(self.casepath('invoice-currency.xml'))
        self.assertEqual(len(list(report.iter_fired_rules())), 2)
        self.assertEqual([x.text for x in report.failed_asserts], ['Unknown currency XYZ'])

    def test_document_function_with_resolver(self):
        with open(self.casepath('invoice-currency.xml'), 'rb') as fp:
            document = etree.parse(fp, base_url=self.casepath('virtual/invoice.xml'))

        resource = SchematronResourcePure(self.casepath('invoice-rates.sch'),
                                          error_listener=CollectingErrorListener())
        with self.assertRaises(SchematronTransformError):
            resource.apply_validation(document)

        resource.uri_resolver = VirtualRatesResolver()
        report = resource.apply_validation_to_svrl(document)
        self.assertEqual([x.text for x in report.failed_asserts], ['Unknown currency EUR'])

    def test_rules_fire_once_per_node(self):
        resource = SchematronResourcePure(self.get_schematron_source("""
            <sch:pattern>
              <sch:rule context="Amount"><sch:report test="true()">First</sch:report></sch:rule>
              <sch:rule context="Invoice/Amount"><sch:report test="true()">Second</sch:report></sch:rule>
              <sch:rule context="text()"><sch:report test="true()">Text</sch:report></sch:rule>
            </sch:pattern>
            <sch:pattern>
              <sch:rule context="Invoice/Amount"><sch:report test="true()">Third</sch:report></sch:rule>
            </sch:pattern>
        """))
        report = resource.apply_validation_to_svrl(self.casepath('invoice-valid.xml'))
        self.assertEqual([x.text for x in report.successful_reports], ['First', 'Third'])

    def test_from_schema(self):
        resource = SchematronResourcePure.from_schema(self.get_schema('invoice.sch'))
        self.assertFalse(resource.is_valid(self.casepath('invoice-invalid.xml')))
        self.assertTrue(resource.is_valid(etree.parse(self.casepath('invoice-valid.xml'))))

    def test_verdicts_agree_with_compiled_programs(self):
        for name in ('invoice.sch', 'invoice-roles.sch'):
            pure = SchematronResourcePure(self.casepath(name))
            sch = SchematronResourceSCH(self.casepath(name), use_cache=False)

            for xml_file in ('invoice-valid.xml', 'invoice-invalid.xml'):
                pure_report = pure.apply_validation_to_svrl(self.casepath(xml_file))
                sch_report = sch.apply_validation_to_svrl(self.casepath(xml_file))

                self.assertIs(pure.validity_classifier.classify(pure_report),
                              sch.validity_classifier.classify(sch_report))
                self.assertEqual(len(pure_report.failed_asserts),
                                 len(sch_report.failed_asserts))
                self.assertEqual(len(pure_report.successful_reports),
                                 len(sch_report.successful_reports))

    def test_union_contexts_agree_with_compiled_programs(self):
        source = self.get_schematron_source("""
            <sch:pattern>
              <sch:rule context="Amount | Number">
                <sch:assert test="false()">Unexpected element</sch:assert>
              </sch:rule>
            </sch:pattern>
        """)
        document = etree.ElementTree(etree.fromstring(
            '<Invoice><Number/><Lines><Line><Number/><Amount/></Line></Lines></Invoice>'
        ))
        pure = SchematronResourcePure(source)
        sch = SchematronResourceSCH(source, use_cache=False)
        pure_report = pure.apply_validation_to_svrl(document)
        sch_report = sch.apply_validation_to_svrl(document)

        locations = ['/Invoice/Number', '/Invoice/Lines/Line/Number',
                     '/Invoice/Lines/Line/Amount']
        self.assertEqual(len(sch_report.failed_asserts), 3)
        self.assertEqual([x.location for x in pure_report.failed_asserts], locations)
        self.assertEqual(len(list(pure_report.iter_fired_rules())),
                         len(list(sch_report.iter_fired_rules())))

    def test_roles_in_report(self):
        resource = SchematronResourcePure(self.casepath('invoice-roles.sch'),
                                          validity_classifier=RoleClassifier())
        xml_file = self.casepath('invoice-valid.xml')
        report = resource.apply_validation_to_svrl(xml_file)

        self.assertEqual([x.role for x in report.failed_asserts], ['warning'])
        self.assertEqual(report.successful_reports[0].id, 'has-number')
        self.assertEqual(report.successful_reports[0].text, 'The invoice number is 2024-001')
        self.assertTrue(resource.is_valid(xml_file))


if __name__ == '__main__':
    from xmlschematron.testing import run_xmlschematron_tests
    run_xmlschematron_tests('XPath validation programs')
