# Copyright (c), 2016-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
# mypy: ignore-errors
"""Command Line Interface"""
import sys
import os
import argparse
import logging

from xmlschematron.exceptions import SchematronException
from xmlschematron.utils.etree import etree_tostring
from xmlschematron.utils.logger import set_logging_level
from xmlschematron.documents import ENGINES, get_schematron
from xmlschematron.svrl import read_svrl
from xmlschematron.validity import IgnoreWarningsClassifier

PROGRAM_NAME = os.path.basename(sys.argv[0])


def get_loglevel(verbosity):
    if verbosity <= 0:
        return logging.ERROR
    elif verbosity == 1:
        return logging.WARNING
    elif verbosity == 2:
        return logging.INFO
    else:
        return logging.DEBUG


def engine_name(value):
    if value not in ENGINES:
        raise argparse.ArgumentTypeError("%r is not a valid engine" % value)
    return value


def validate():
    parser = argparse.ArgumentParser(prog=PROGRAM_NAME, add_help=True,
                                     description="validate a set of XML files "
                                                 "against a Schematron.")
    parser.usage = "%(prog)s [OPTION]... [FILE]...\n" \
                   "Try '%(prog)s --help' for more information."
    parser.add_argument('-v', dest='verbosity', action='count', default=0,
                        help="increase output verbosity.")
    parser.add_argument('--schematron', type=str, metavar='PATH', required=True,
                        help="path or URL to a Schematron schema or XSLT program.")
    parser.add_argument('--engine', type=engine_name, default='sch',
                        help="validation engine to use, can be 'sch', 'xslt' or "
                             "'pure' (default is 'sch').")
    parser.add_argument('--phase', type=str, default=None,
                        help="the phase to validate, only for 'sch' engine.")
    parser.add_argument('-p', dest='parameters', nargs=2, type=str, action='append',
                        metavar=('NAME', 'VALUE'), help="a parameter for the program.")
    parser.add_argument('--ignore-warnings', action='store_true', default=False,
                        help="ignore failed asserts with a warning role or flag.")
    parser.add_argument('--svrl', action='store_true', default=False,
                        help="print the SVRL report of each file.")
    parser.add_argument('files', metavar='[XML_FILE ...]', nargs='+',
                        help="XML files to be validated.")

    args = parser.parse_args()
    set_logging_level(get_loglevel(args.verbosity))

    kwargs = {'parameters': dict(args.parameters or ())}
    if args.phase is not None:
        if args.engine != 'sch':
            parser.error("--phase is supported only by 'sch' engine")
        kwargs['phase'] = args.phase
    if args.ignore_warnings:
        kwargs['validity_classifier'] = IgnoreWarningsClassifier()

    resource = get_schematron(args.schematron, args.engine, **kwargs)
    if not resource.is_valid_schematron():
        sys.stderr.write(f"{args.schematron} is not a valid Schematron\n")
        sys.exit(len(args.files))

    tot_errors = 0
    for filepath in args.files:
        try:
            document = resource.apply_validation(filepath)
            report = None if document is None else read_svrl(document)
        except SchematronException as err:
            tot_errors += 1
            sys.stderr.write(f"{err}\n")
            continue

        if report is not None and args.svrl:
            sys.stdout.write(etree_tostring(document) + '\n')

        if resource.validity_classifier.classify(report):
            sys.stdout.write(f"{filepath} is valid\n")
        else:
            tot_errors += 1
            sys.stderr.write(f"{filepath} is not valid\n")
            if args.verbosity > 0 and report is not None:
                for result in report.iter_failed_asserts():
                    sys.stderr.write(f"  {result.location}: {result.text}\n")

    sys.exit(tot_errors)
