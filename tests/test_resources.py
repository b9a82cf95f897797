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
"""Tests concerning the access to XML resources and the provider cache"""
import unittest
import io
import os
import pathlib

from lxml import etree

from xmlschematron.exceptions import SchematronTypeError, SchematronResourceError
from xmlschematron.resources import is_url, normalize_url, get_safe_parser, \
    ReadableResource, PackageResource, get_resource
from xmlschematron.caching import ProviderCache, default_cache
from xmlschematron.providers import SCHProvider

TEST_CASES_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'test_cases/')


def casepath(relative_path):
    return os.path.join(TEST_CASES_DIR, relative_path)


class TestResourceHelpers(unittest.TestCase):

    def test_is_url(self):
        self.assertTrue(is_url('http://example.test/invoice.xml'))
        self.assertTrue(is_url('file:///tmp/invoice.xml'))
        self.assertFalse(is_url('invoice.xml'))
        self.assertFalse(is_url('/tmp/invoice.xml'))
        self.assertFalse(is_url('<Invoice/>'))
        self.assertFalse(is_url('  '))
        self.assertFalse(is_url(None))

    def test_normalize_url(self):
        url = 'http://example.test/invoice.xml'
        self.assertEqual(normalize_url(url), url)
        self.assertEqual(normalize_url('rates.xml', 'http://example.test/data/'),
                         'http://example.test/data/rates.xml')

        url = normalize_url('invoice.xml', '/tmp')
        self.assertTrue(url.startswith('file:///'))
        self.assertTrue(url.endswith('/tmp/invoice.xml'))

        url = normalize_url(pathlib.Path(casepath('invoice.sch')))
        self.assertEqual(url, pathlib.Path(casepath('invoice.sch')).absolute().as_uri())

    def test_safe_parser(self):
        parser = get_safe_parser()
        self.assertIsInstance(parser, etree.XMLParser)
        self.assertIsNot(parser, get_safe_parser())

        data = b'<!DOCTYPE a [<!ENTITY e "expanded">]><a>&e;</a>'
        root = etree.fromstring(data, parser)
        self.assertNotEqual(root.text, 'expanded')


class TestReadableResource(unittest.TestCase):

    def test_file_resource(self):
        resource = ReadableResource(casepath('invoice-valid.xml'))
        self.assertTrue(resource.url.startswith('file:///'))
        self.assertEqual(resource.name, 'invoice-valid.xml')
        self.assertEqual(resource.filepath, os.path.abspath(casepath('invoice-valid.xml')))
        self.assertEqual(resource.key, resource.url)
        self.assertFalse(resource.is_remote())
        self.assertTrue(resource.exists())
        self.assertEqual(repr(resource), f'ReadableResource(url={resource.url!r})')

        document = resource.parse()
        self.assertEqual(document.getroot().tag, 'Invoice')
        self.assertEqual(document.docinfo.URL, resource.url)

    def test_data_resources(self):
        for source in ('<Invoice/>', b'<Invoice/>', io.BytesIO(b'<Invoice/>'),
                       io.StringIO('<Invoice/>')):
            resource = ReadableResource(source)
            self.assertIsNone(resource.url)
            self.assertIsNone(resource.name)
            self.assertIsNone(resource.filepath)
            self.assertTrue(resource.key.startswith('data:'))
            self.assertEqual(resource.parse().getroot().tag, 'Invoice')

        resource = ReadableResource('<Invoice/>')
        self.assertEqual(repr(resource), "ReadableResource(data=b'<Invoice/>')")
        with resource.open() as stream:
            self.assertEqual(stream.read(), b'<Invoice/>')

    def test_file_object_resource(self):
        with open(casepath('invoice-valid.xml'), 'rb') as fp:
            resource = ReadableResource(fp)
        self.assertTrue(resource.url.endswith('invoice-valid.xml'))
        self.assertEqual(resource.parse().getroot().tag, 'Invoice')

    def test_missing_resource(self):
        resource = ReadableResource(casepath('missing.xml'))
        self.assertFalse(resource.exists())
        self.assertIsNone(resource.open())
        self.assertIsNone(resource.parse())

        resource = ReadableResource('unknown://example.test/missing.xml')
        self.assertTrue(resource.is_remote())
        self.assertIsNone(resource.open())

    def test_malformed_resource(self):
        resource = ReadableResource(casepath('invoice-malformed.xml'))
        with self.assertRaises(SchematronResourceError) as ctx:
            resource.parse()
        self.assertIsInstance(ctx.exception.__cause__, etree.XMLSyntaxError)
        self.assertIsInstance(ctx.exception, OSError)

    def test_streams_are_closed_after_parsing(self):
        class TrackedResource(ReadableResource):
            streams = []

            def open(self):
                stream = super().open()
                self.streams.append(stream)
                return stream

        resource = TrackedResource('<Invoice><Amount>10</Amount></Invoice>')
        self.assertEqual(resource.parse().getroot().tag, 'Invoice')
        self.assertEqual(len(resource.streams), 1)
        self.assertTrue(resource.streams[0].closed)

        resource = TrackedResource('<Invoice><Amount>10</Invoice>')
        with self.assertRaises(SchematronResourceError):
            resource.parse()
        self.assertEqual(len(resource.streams), 2)
        self.assertTrue(resource.streams[1].closed)

        resource = TrackedResource(casepath('invoice-malformed.xml'))
        with self.assertRaises(SchematronResourceError):
            resource.parse()
        self.assertTrue(resource.streams[2].closed)

    def test_wrong_source_type(self):
        with self.assertRaises(SchematronTypeError):
            ReadableResource(None)
        with self.assertRaises(SchematronTypeError):
            ReadableResource(['<Invoice/>'])

    def test_get_resource(self):
        resource = ReadableResource('<Invoice/>')
        self.assertIs(get_resource(resource), resource)
        self.assertIsInstance(get_resource('<Invoice/>'), ReadableResource)

        other = ReadableResource(resource)
        self.assertIsNot(other, resource)
        self.assertEqual(other.parse().getroot().tag, 'Invoice')

    def test_package_resource(self):
        resource = PackageResource('xmlschematron', 'py.typed')
        self.assertEqual(repr(resource),
                         "PackageResource(package='xmlschematron', name='py.typed')")
        self.assertTrue(resource.exists())

        resource = PackageResource('xmlschematron', 'missing.sch')
        self.assertFalse(resource.exists())
        self.assertIsNone(resource.parse())


class TestProviderCache(unittest.TestCase):

    def test_cache(self):
        cache = ProviderCache()
        self.assertTrue(cache.enabled)
        self.assertEqual(len(cache), 0)

        url = normalize_url(casepath('invoice.sch'))
        factory_calls = []

        def factory():
            factory_calls.append(url)
            return SCHProvider(ReadableResource(url))

        provider = cache.get_provider(('key', url), factory)
        self.assertTrue(provider.is_valid_schematron())
        self.assertIs(cache.get_provider(('key', url), factory), provider)
        self.assertEqual(len(factory_calls), 1)
        self.assertIn(('key', url), cache)
        self.assertEqual(repr(cache), 'ProviderCache(enabled=True, size=1)')

        self.assertTrue(cache.remove(('key', url)))
        self.assertFalse(cache.remove(('key', url)))

        cache.get_provider(('key', url), factory)
        cache.clear()
        self.assertEqual(len(cache), 0)

        with self.assertRaises(SchematronTypeError):
            cache.get_provider('key', None)

    def test_invalid_providers_are_not_cached(self):
        cache = ProviderCache()
        resource = ReadableResource(casepath('missing.sch'))

        with self.assertLogs('xmlschematron'):
            provider = cache.get_provider('missing', lambda: SCHProvider(resource))
        self.assertFalse(provider.is_valid_schematron())
        self.assertNotIn('missing', cache)

    def test_disabled_cache(self):
        cache = ProviderCache(enabled=False)
        url = normalize_url(casepath('invoice.sch'))
        provider = cache.get_provider(url, lambda: SCHProvider(ReadableResource(url)))
        self.assertIsNot(cache.get_provider(url, lambda: SCHProvider(ReadableResource(url))),
                         provider)
        self.assertEqual(len(cache), 0)

        cache.enabled = True
        cache.get_provider(url, lambda: SCHProvider(ReadableResource(url)))
        self.assertEqual(len(cache), 1)
        cache.enabled = False
        self.assertEqual(len(cache), 0)

    def test_maxsize(self):
        cache = ProviderCache(maxsize=1)
        url = normalize_url(casepath('invoice.sch'))
        cache.get_provider('first', lambda: SCHProvider(ReadableResource(url)))
        cache.get_provider('second', lambda: SCHProvider(ReadableResource(url)))
        self.assertNotIn('first', cache)
        self.assertIn('second', cache)

    def test_default_cache(self):
        self.assertIsInstance(default_cache, ProviderCache)


if __name__ == '__main__':
    from xmlschematron.testing import run_xmlschematron_tests
    run_xmlschematron_tests('XML resources')
