#!/usr/bin/env python
#
# Copyright (c), 2018-2024, SISSA (International School for Advanced Studies).
# All rights reserved.
# This file is distributed under the terms of the MIT License.
# See the file 'LICENSE' in the root directory of the present
# distribution, or http://opensource.org/licenses/MIT.
#
# @author Davide Brunato <brunato@sissa.it>
#
"""Tests about the packaging of the code"""

import unittest
import glob
import fileinput
import os
import re
import importlib


class TestPackaging(unittest.TestCase):

    @classmethod
    def setUpClass(cls):
        cls.test_dir = os.path.dirname(os.path.abspath(__file__))
        cls.package_dir = os.path.dirname(cls.test_dir)
        cls.source_dir = os.path.join(cls.package_dir, 'marcvalidate')
        cls.missing_debug = re.compile(
            r"(\bimport\s+pdb\b|\bpdb\s*\.\s*set_trace\(\s*\)|\bprint\s*\()|\bbreakpoint\s*\("
        )
        cls.get_version = re.compile(
            r"(?:\bversion|__version__)(?:\s*=\s*)(\'[^\']*\'|\"[^\"]*\")"
        )

    def test_missing_debug_statements(self):
        message = "\nFound a debug missing statement at line %d or file %r: %r"
        filename = None
        files = glob.glob(os.path.join(self.source_dir, '*.py'))
        for line in fileinput.input(files):
            if fileinput.isfirstline():
                filename = fileinput.filename()
            lineno = fileinput.filelineno()

            match = self.missing_debug.search(line)
            self.assertIsNone(match, message % (lineno, filename, match and match.group(0)))

    def test_version(self):
        message = "\nFound a different version at line %d or file %r: %r (may be %r)."

        files = [
            os.path.join(self.source_dir, '__init__.py'),
            os.path.join(self.package_dir, 'setup.py'),
        ]
        version = filename = None
        for line in fileinput.input(files):
            if fileinput.isfirstline():
                filename = fileinput.filename()
            lineno = fileinput.filelineno()

            match = self.get_version.search(line)
            if match is not None:
                if version is None:
                    version = match.group(1).strip('\'\"')
                else:
                    self.assertTrue(
                        version == match.group(1).strip('\'\"'),
                        message % (lineno, filename, match.group(1).strip('\'\"'), version)
                    )

        self.assertIsNotNone(version)
        marcvalidate = importlib.import_module('marcvalidate')
        self.assertEqual(marcvalidate.__version__, version)

    def test_schema_files(self):
        et = importlib.import_module('xml.etree.ElementTree')
        filename = os.path.join(self.source_dir, 'schemas/MARC21slim.xsd')
        self.assertTrue(os.path.isfile(filename), msg="schema file %r is missing!" % filename)
        self.assertIsInstance(et.parse(filename), et.ElementTree)

        names = importlib.import_module('marcvalidate.names')
        self.assertEqual(os.path.abspath(names.MARC21_SLIM_SCHEMA), os.path.abspath(filename))

    def test_typed_package(self):
        self.assertTrue(os.path.isfile(os.path.join(self.source_dir, 'py.typed')))


if __name__ == '__main__':
    import platform
    header_template = "Packaging tests for marcvalidate with Python {} on {}"
    header = header_template.format(platform.python_version(), platform.platform())
    print('{0}\n{1}\n{0}'.format("*" * len(header), header))

    unittest.main()
