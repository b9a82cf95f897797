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
This module contains namespace definitions and qualified names of
Schematron (ISO/IEC 19757-3) and SVRL elements.
"""

###
# Namespace URIs
SCH_NAMESPACE = 'http://purl.oclc.org/dsdl/schematron'
"URI of the ISO Schematron namespace (sch)"

SVRL_NAMESPACE = 'http://purl.oclc.org/dsdl/svrl'
"URI of the Schematron Validation Report Language namespace (svrl)"

XSLT_NAMESPACE = 'http://www.w3.org/1999/XSL/Transform'
"URI of the XSL Transformations namespace (xsl)"

XML_NAMESPACE = 'http://www.w3.org/XML/1998/namespace'
"URI of the XML namespace (xml)"


###
# Schematron elements and attributes
SCH_SCHEMA = f'{{{SCH_NAMESPACE}}}schema'
SCH_TITLE = f'{{{SCH_NAMESPACE}}}title'
SCH_P = f'{{{SCH_NAMESPACE}}}p'
SCH_NS = f'{{{SCH_NAMESPACE}}}ns'
SCH_PHASE = f'{{{SCH_NAMESPACE}}}phase'
SCH_PATTERN = f'{{{SCH_NAMESPACE}}}pattern'
SCH_RULE = f'{{{SCH_NAMESPACE}}}rule'
SCH_ASSERT = f'{{{SCH_NAMESPACE}}}assert'
SCH_REPORT = f'{{{SCH_NAMESPACE}}}report'
SCH_EXTENDS = f'{{{SCH_NAMESPACE}}}extends'
SCH_LET = f'{{{SCH_NAMESPACE}}}let'
SCH_INCLUDE = f'{{{SCH_NAMESPACE}}}include'
SCH_DIAGNOSTICS = f'{{{SCH_NAMESPACE}}}diagnostics'
SCH_DIAGNOSTIC = f'{{{SCH_NAMESPACE}}}diagnostic'
SCH_NAME = f'{{{SCH_NAMESPACE}}}name'
SCH_VALUE_OF = f'{{{SCH_NAMESPACE}}}value-of'
SCH_EMPH = f'{{{SCH_NAMESPACE}}}emph'
SCH_DIR = f'{{{SCH_NAMESPACE}}}dir'
SCH_SPAN = f'{{{SCH_NAMESPACE}}}span'

XML_LANG = f'{{{XML_NAMESPACE}}}lang'
XML_SPACE = f'{{{XML_NAMESPACE}}}space'


###
# SVRL elements
SVRL_SCHEMATRON_OUTPUT = f'{{{SVRL_NAMESPACE}}}schematron-output'
SVRL_TEXT = f'{{{SVRL_NAMESPACE}}}text'
SVRL_NS_PREFIX_IN_ATTRIBUTE_VALUES = f'{{{SVRL_NAMESPACE}}}ns-prefix-in-attribute-values'
SVRL_ACTIVE_PATTERN = f'{{{SVRL_NAMESPACE}}}active-pattern'
SVRL_FIRED_RULE = f'{{{SVRL_NAMESPACE}}}fired-rule'
SVRL_FAILED_ASSERT = f'{{{SVRL_NAMESPACE}}}failed-assert'
SVRL_SUCCESSFUL_REPORT = f'{{{SVRL_NAMESPACE}}}successful-report'
SVRL_DIAGNOSTIC_REFERENCE = f'{{{SVRL_NAMESPACE}}}diagnostic-reference'


###
# Other constants
DEFAULT_PHASE = '#DEFAULT'
ALL_PHASES = '#ALL'
