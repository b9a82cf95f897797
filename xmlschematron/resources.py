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
This module contains the readable resources, the loaders of XML data
used for Schematron schemas, for validation programs and for the
XML documents to validate.
"""
import io
import logging
import os.path
from importlib import resources as importlib_resources
from pathlib import Path
from typing import IO, Optional, Union
from urllib.parse import urljoin, urlsplit
from urllib.request import pathname2url, url2pathname, urlopen

from lxml import etree

from .exceptions import SchematronTypeError, SchematronResourceError
from .aliases import ElementTreeType, ResourceSourceType

logger = logging.getLogger('xmlschematron')


def is_url(obj: object) -> bool:
    """Returns `True` if the argument is a string containing a URL with a scheme."""
    if not isinstance(obj, str) or not obj.strip() or obj.lstrip()[0] == '<':
        return False
    try:
        return len(urlsplit(obj.strip()).scheme) > 1
    except ValueError:
        return False


def normalize_url(location: Union[str, Path], base_url: Optional[str] = None) -> str:
    """
    Returns a normalized URL from a location, that can be a URL, a path or a
    `pathlib.Path` instance. Relative locations are joined with the base URL,
    that can be a URL or a path to a directory.

    :param location: a URL or a file path.
    :param base_url: reference base URL for normalizing local and relative URLs.
    """
    location = str(location).strip()
    if is_url(location):
        return location
    elif base_url and is_url(base_url):
        return urljoin(base_url, pathname2url(location))

    path = Path(location)
    if base_url and not path.is_absolute():
        path = Path(base_url).joinpath(path)
    return path.absolute().as_uri()


def get_safe_parser(resolver: Optional[etree.Resolver] = None) -> etree.XMLParser:
    """
    Returns a new XML parser that doesn't resolve entities and doesn't access
    the network. If a resolver is provided it's registered on the new parser.
    """
    parser = etree.XMLParser(resolve_entities=False, no_network=True)
    if resolver is not None:
        parser.resolvers.add(resolver)
    return parser


class ReadableResource:
    """
    A readable resource, that yields a binary stream for XML data or `None`
    if the resource doesn't exist.

    :param source: a path or a URL of the resource, or a `pathlib.Path`, or \
    bytes or a string containing XML data, or a binary file-like object.
    :param base_url: is an optional base URL, used for the normalization \
    of the location of the resource.
    :param timeout: the timeout in seconds for the connection attempt in case \
    of remote data.
    """
    _url: Optional[str] = None
    _data: Optional[bytes] = None

    def __init__(self, source: Union[ResourceSourceType, 'ReadableResource'],
                 base_url: Optional[str] = None,
                 timeout: int = 30) -> None:
        if isinstance(source, ReadableResource):
            self._url, self._data = source._url, source._data
        elif isinstance(source, bytes):
            self._data = source
        elif isinstance(source, str):
            if source.lstrip().startswith('<'):
                self._data = source.encode('utf-8')
            else:
                self._url = normalize_url(source, base_url)
        elif isinstance(source, Path):
            self._url = normalize_url(source, base_url)
        elif hasattr(source, 'read'):
            data = source.read()
            self._data = data.encode('utf-8') if isinstance(data, str) else data
            self._url = getattr(source, 'name', None)
            if isinstance(self._url, str):
                self._url = normalize_url(self._url, base_url)
            else:
                self._url = None
        else:
            msg = "wrong type {!r} for 'source' argument"
            raise SchematronTypeError(msg.format(type(source)))

        self.timeout = timeout

    def __repr__(self) -> str:
        if self._url is not None:
            return '%s(url=%r)' % (self.__class__.__name__, self._url)
        return '%s(data=%r)' % (self.__class__.__name__, self._data[:40] if self._data else b'')

    @property
    def url(self) -> Optional[str]:
        """The URL of the resource, `None` if the resource has been provided as data."""
        return self._url

    @property
    def name(self) -> Optional[str]:
        """The basename of the resource URL, `None` if the URL is not set."""
        if self._url is None:
            return None
        return os.path.basename(urlsplit(self._url).path)

    @property
    def filepath(self) -> Optional[str]:
        """The resource filepath if the resource is a local file, `None` otherwise."""
        if self._url is None:
            return None
        url_parts = urlsplit(self._url)
        if url_parts.scheme != 'file':
            return None
        return url2pathname(url_parts.path)

    @property
    def key(self) -> str:
        """A key that identifies the resource, used by caches."""
        return self._url if self._url is not None else f'data:{id(self)}'

    def is_remote(self) -> bool:
        return self._url is not None and self.filepath is None

    def exists(self) -> bool:
        stream = self.open()
        if stream is None:
            return False
        stream.close()
        return True

    def open(self) -> Optional[IO[bytes]]:
        """
        Returns a new binary stream for reading the resource, `None` if the
        resource doesn't exist or isn't reachable. The caller must close the
        stream.
        """
        if self._data is not None:
            return io.BytesIO(self._data)

        filepath = self.filepath
        if filepath is not None:
            if not os.path.isfile(filepath):
                return None
            return open(filepath, 'rb')

        try:
            return urlopen(self._url, timeout=self.timeout)
        except (OSError, ValueError) as err:
            logger.debug("Can't open %r: %s", self, err)
            return None

    def parse(self, parser: Optional[etree.XMLParser] = None) -> Optional[ElementTreeType]:
        """
        Parses the resource, returning an lxml ElementTree or `None` if the resource
        doesn't exist. The stream opened for reading the resource is closed at the
        end of the parsing, also in case of errors.

        :param parser: an optional lxml parser, for default uses a new safe parser.
        """
        stream = self.open()
        if stream is None:
            return None

        with stream:
            try:
                return etree.parse(stream, parser or get_safe_parser(), base_url=self._url)
            except etree.XMLSyntaxError as err:
                msg = f"invalid XML syntax in {self!r}: {err}"
                raise SchematronResourceError(msg) from err


class PackageResource(ReadableResource):
    """
    A resource contained in an installed Python package.

    :param package: the name of the package.
    :param name: the relative path of the resource in the package.
    """
    def __init__(self, package: str, name: str) -> None:
        self.package = package
        self.resource_name = name
        try:
            path = importlib_resources.files(package).joinpath(name)
        except ModuleNotFoundError:
            self._path = None
            super().__init__(Path(name))
        else:
            self._path = path
            super().__init__(Path(str(path)))

    def __repr__(self) -> str:
        return '%s(package=%r, name=%r)' % (
            self.__class__.__name__, self.package, self.resource_name
        )

    def open(self) -> Optional[IO[bytes]]:
        if self._path is None or not self._path.is_file():
            return None
        return self._path.open('rb')


def get_resource(source: Union[ResourceSourceType, ReadableResource],
                 base_url: Optional[str] = None,
                 timeout: int = 30) -> ReadableResource:
    """Returns a readable resource from a source argument."""
    if isinstance(source, ReadableResource):
        return source
    return ReadableResource(source, base_url, timeout)


__all__ = ['is_url', 'normalize_url', 'get_safe_parser', 'ReadableResource',
           'PackageResource', 'get_resource']
