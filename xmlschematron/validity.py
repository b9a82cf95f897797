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
This module contains the validity verdict and the classifiers that reduce
a SVRL report to a verdict.
"""
from collections.abc import Iterable
from enum import Enum
from typing import Optional

from xmlschematron.svrl import AssertionResult, SchematronOutput


class Validity(str, Enum):
    VALID = 'valid'
    INVALID = 'invalid'

    def __bool__(self) -> bool:
        return self is Validity.VALID

    @classmethod
    def from_bool(cls, value: bool) -> 'Validity':
        return cls.VALID if value else cls.INVALID


class ValidityClassifier:
    """
    The default classifier: a report is invalid if it contains at least a failed
    assert. A missing report is always invalid. Subclasses can change the policy
    overriding *is_error()*.
    """
    def __repr__(self) -> str:
        return '%s()' % self.__class__.__name__

    def is_error(self, result: AssertionResult) -> bool:
        """Returns `True` if an assertion result makes the document invalid."""
        return result.is_failed_assert

    def classify(self, report: Optional[SchematronOutput]) -> Validity:
        if report is None:
            return Validity.INVALID
        elif any(self.is_error(x) for x in report.iter_results()):
            return Validity.INVALID
        return Validity.VALID


WARNING_ROLES = frozenset(('warning', 'warn', 'info', 'information', 'caution'))


class RoleClassifier(ValidityClassifier):
    """
    A classifier that considers only failed asserts with an error role. Failed
    asserts without a role, or with an empty role, are considered errors.

    :param error_roles: the roles of the failed asserts to consider as errors.
    """
    def __init__(self, error_roles: Iterable[str] = ('error', 'fatal')) -> None:
        self.error_roles = frozenset(x.strip().lower() for x in error_roles)

    def __repr__(self) -> str:
        return '%s(error_roles=%r)' % (self.__class__.__name__, sorted(self.error_roles))

    def is_error(self, result: AssertionResult) -> bool:
        if not result.is_failed_assert:
            return False
        elif not result.role or not result.role.strip():
            return True
        return result.role.strip().lower() in self.error_roles


class IgnoreWarningsClassifier(ValidityClassifier):
    """
    A classifier that ignores the failed asserts whose role, or flag,
    marks them as warnings or informational messages.
    """
    warning_roles = WARNING_ROLES

    def is_error(self, result: AssertionResult) -> bool:
        if not result.is_failed_assert:
            return False
        for value in (result.role, result.flag):
            if value and value.strip().lower() in self.warning_roles:
                return False
        return True


__all__ = ['Validity', 'ValidityClassifier', 'RoleClassifier',
           'IgnoreWarningsClassifier', 'WARNING_ROLES']
