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
"""Tests on internal helper functions and names"""
import unittest
import logging

from marcvalidate import MarcValidateValueError, MarcParseError, set_logging_level
from marcvalidate.helpers import get_loglevel, logged, logger
from marcvalidate.names import MARC_COLLECTION, local_name


class TestHelpers(unittest.TestCase):

    def setUp(self):
        self.level = logger.level

    def tearDown(self):
        logger.setLevel(self.level)

    def test_get_loglevel(self):
        self.assertEqual(get_loglevel(0), logging.ERROR)
        self.assertEqual(get_loglevel(-1), logging.ERROR)
        self.assertEqual(get_loglevel(1), logging.WARNING)
        self.assertEqual(get_loglevel(2), logging.INFO)
        self.assertEqual(get_loglevel(3), logging.DEBUG)
        self.assertEqual(get_loglevel(10), logging.DEBUG)

    def test_set_logging_level(self):
        set_logging_level('debug')
        self.assertEqual(logger.level, logging.DEBUG)
        set_logging_level(' Warning ')
        self.assertEqual(logger.level, logging.WARNING)
        set_logging_level(logging.INFO)
        self.assertEqual(logger.level, logging.INFO)

        with self.assertRaises(MarcValidateValueError) as ctx:
            set_logging_level('verbose')
        self.assertEqual(str(ctx.exception), "'verbose' is not a valid loglevel")
        self.assertIsInstance(ctx.exception, ValueError)

    def test_logged_decorator(self):
        levels = []

        @logged
        def func(value):
            levels.append(logger.level)
            if value is None:
                raise ValueError("missing value")
            return value

        logger.setLevel(logging.WARNING)
        self.assertEqual(func(1, loglevel='DEBUG'), 1)
        self.assertEqual(levels[-1], logging.DEBUG)
        self.assertEqual(logger.level, logging.WARNING)

        self.assertEqual(func(2), 2)
        self.assertEqual(levels[-1], logging.WARNING)

        with self.assertRaises(ValueError):
            func(None, loglevel=logging.INFO)
        self.assertEqual(levels[-1], logging.INFO)
        self.assertEqual(logger.level, logging.WARNING)

    def test_local_name(self):
        self.assertEqual(local_name(MARC_COLLECTION), 'collection')
        self.assertEqual(local_name('{http://example.test/ns}record'), 'record')
        self.assertEqual(local_name('datafield'), 'datafield')
        self.assertEqual(local_name(''), '')

    def test_parse_error(self):
        err = MarcParseError("problem near record 'r1'", 'r1')
        self.assertEqual(err.record_id, 'r1')
        self.assertEqual(str(err), "problem near record 'r1'")

        try:
            raise MarcParseError("problem near record 'r2'", 'r2') from OSError('read failed')
        except MarcParseError as e:
            self.assertEqual(str(e), "problem near record 'r2': read failed")


if __name__ == '__main__':
    import platform
    header_template = "Test marcvalidate helpers with Python {} on platform {}"
    header = header_template.format(platform.python_version(), platform.platform())
    print('{0}\n{1}\n{0}'.format("*" * len(header), header))

    unittest.main()
