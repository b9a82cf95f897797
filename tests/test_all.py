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
if __name__ == '__main__':
    import unittest
    import os

    from xmlschematron.testing import print_test_header

    def load_tests(loader, tests, pattern):
        tests_dir = os.path.dirname(__file__)
        if pattern is not None:
            tests.addTests(loader.discover(start_dir=tests_dir, pattern=pattern))
            return tests

        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_resources.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_model.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_reader.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_svrl.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_validity.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_transforms.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_pure.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_schematron.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_documents.py"))
        tests.addTests(loader.discover(start_dir=tests_dir, pattern="test_cli.py"))
        return tests

    print_test_header()
    unittest.main()
