#
# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
from threading import Lock
from collections.abc import Callable, Hashable
from typing import TYPE_CHECKING, Optional

from xmlschematron.exceptions import SchematronTypeError

if TYPE_CHECKING:
    from xmlschematron.providers import ValidationProgramProvider  # noqa


class ProviderCache:
    """
    A cache of validation program providers, keyed by resource and compile options.
    Only providers that are valid are stored, so a schema that was missing or broken
    is compiled again at the next request.

    :param enabled: if `False` the cache is disabled and each request builds a new \
    provider with the factory.
    :param maxsize: the maximum number of stored providers, `None` means unlimited. \
    When the limit is reached the oldest entry is discarded.
    """
    __slots__ = ('_enabled', '_maxsize', '_providers', '_lock')

    def __init__(self, enabled: bool = True, maxsize: Optional[int] = None) -> None:
        self._enabled = enabled
        self._maxsize = maxsize
        self._providers: dict[Hashable, 'ValidationProgramProvider'] = {}
        self._lock = Lock()

    def __repr__(self) -> str:
        return '%s(enabled=%r, size=%d)' % (
            self.__class__.__name__, self._enabled, len(self._providers)
        )

    def __len__(self) -> int:
        return len(self._providers)

    def __contains__(self, key: Hashable) -> bool:
        return key in self._providers

    @property
    def enabled(self) -> bool:
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        if value is not self._enabled:
            self._enabled = value
            self.clear()

    def get_provider(self, key: Hashable,
                     factory: Callable[[], 'ValidationProgramProvider']) \
            -> 'ValidationProgramProvider':
        """
        Returns the cached provider for the key, building and storing it with
        the factory callable if it's missing.
        """
        if not callable(factory):
            raise SchematronTypeError(f"{factory!r} is not callable")
        elif not self._enabled:
            return factory()

        with self._lock:
            try:
                return self._providers[key]
            except KeyError:
                provider = factory()
                if provider.is_valid_schematron():
                    if self._maxsize is not None and len(self._providers) >= self._maxsize:
                        self._providers.pop(next(iter(self._providers)))
                    self._providers[key] = provider
                return provider

    def remove(self, key: Hashable) -> bool:
        with self._lock:
            return self._providers.pop(key, None) is not None

    def clear(self) -> None:
        with self._lock:
            self._providers.clear()


default_cache = ProviderCache()
