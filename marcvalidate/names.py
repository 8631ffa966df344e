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
This module contains namespace and name definitions for MARCXML documents.
"""
import os

###
# Namespace URI
MARC21_NAMESPACE = 'http://www.loc.gov/MARC21/slim'
"URI of the MARC21 slim namespace (marc)"

###
# Local names of MARCXML elements
COLLECTION = 'collection'
RECORD = 'record'
LEADER = 'leader'
CONTROLFIELD = 'controlfield'
DATAFIELD = 'datafield'
SUBFIELD = 'subfield'

###
# Qualified names of MARCXML elements
MARC_COLLECTION = f'{{{MARC21_NAMESPACE}}}{COLLECTION}'

###
# Identifier attributes and values
TAG_ATTRIBUTE = 'tag'
CODE_ATTRIBUTE = 'code'
RECORD_ID_TAG = '001'
"Tag of the control field that holds the record identifier"

###
# Bundled schema
SCHEMAS_DIR = os.path.join(os.path.dirname(__file__), 'schemas')
MARC21_SLIM_SCHEMA = os.path.join(SCHEMAS_DIR, 'MARC21slim.xsd')


def local_name(tag: str) -> str:
    """Returns the local part of a tag in Clark notation ('{uri}name')."""
    return tag.rpartition('}')[2]
