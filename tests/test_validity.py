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
"""Tests concerning the validity classifiers"""
import unittest

from xmlschematron.svrl import FailedAssert, SuccessfulReport, FiredRule, \
    ActivePattern, SchematronOutput
from xmlschematron.validity import Validity, ValidityClassifier, RoleClassifier, \
    IgnoreWarningsClassifier


def make_report(*results):
    return SchematronOutput(active_patterns=[
        ActivePattern(fired_rules=[FiredRule(context='Invoice', results=list(results))])
    ])


class TestValidity(unittest.TestCase):

    def test_validity_enum(self):
        self.assertTrue(Validity.VALID)
        self.assertFalse(Validity.INVALID)
        self.assertIs(Validity.from_bool(True), Validity.VALID)
        self.assertIs(Validity.from_bool(False), Validity.INVALID)
        self.assertEqual(Validity.VALID, 'valid')


class TestValidityClassifiers(unittest.TestCase):

    def setUp(self):
        self.error = FailedAssert(location='/Invoice', test='Amount', role='error')
        self.warning = FailedAssert(location='/Invoice', test='Note', role='warning')
        self.info_flag = FailedAssert(location='/Invoice', test='Date', flag='info')
        self.no_role = FailedAssert(location='/Invoice', test='Number')
        self.report = SuccessfulReport(location='/Invoice', test='Number')

    def test_default_classifier(self):
        classifier = ValidityClassifier()
        self.assertEqual(repr(classifier), 'ValidityClassifier()')
        self.assertIs(classifier.classify(None), Validity.INVALID)
        self.assertIs(classifier.classify(SchematronOutput()), Validity.VALID)
        self.assertIs(classifier.classify(make_report(self.report)), Validity.VALID)
        self.assertIs(classifier.classify(make_report(self.warning)), Validity.INVALID)
        self.assertIs(classifier.classify(make_report(self.report, self.error)),
                      Validity.INVALID)

    def test_role_classifier(self):
        classifier = RoleClassifier()
        self.assertEqual(repr(classifier), "RoleClassifier(error_roles=['error', 'fatal'])")
        self.assertIs(classifier.classify(None), Validity.INVALID)
        self.assertIs(classifier.classify(make_report(self.warning)), Validity.VALID)
        self.assertIs(classifier.classify(make_report(self.error)), Validity.INVALID)
        self.assertIs(classifier.classify(make_report(self.no_role)), Validity.INVALID)

        classifier = RoleClassifier(error_roles=['Warning'])
        self.assertIs(classifier.classify(make_report(self.warning)), Validity.INVALID)
        self.assertIs(classifier.classify(make_report(self.error)), Validity.VALID)

    def test_ignore_warnings_classifier(self):
        classifier = IgnoreWarningsClassifier()
        self.assertIs(classifier.classify(None), Validity.INVALID)
        self.assertIs(classifier.classify(make_report(self.warning, self.info_flag)),
                      Validity.VALID)
        self.assertIs(classifier.classify(make_report(self.warning, self.no_role)),
                      Validity.INVALID)
        self.assertIs(classifier.classify(make_report(self.report)), Validity.VALID)

    def test_custom_classifier(self):
        class ReportsAreErrors(ValidityClassifier):
            def is_error(self, result):
                return not result.is_failed_assert

        classifier = ReportsAreErrors()
        self.assertIs(classifier.classify(make_report(self.error)), Validity.VALID)
        self.assertIs(classifier.classify(make_report(self.report)), Validity.INVALID)


if __name__ == '__main__':
    from xmlschematron.testing import run_xmlschematron_tests
    run_xmlschematron_tests('validity classifiers')
