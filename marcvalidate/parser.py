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
This module contains the validating parser, that streams the structural events
and the validation diagnostics of a MARCXML document to a record handler.
"""
import logging
from collections.abc import Iterator, Mapping
from functools import lru_cache
from pathlib import Path
from typing import Any, IO, Optional, Protocol, Union
from xml.etree.ElementTree import Element, TreeBuilder
from xml.sax import SAXParseException, handler as sax_handler
from xml.sax import expatreader  # type: ignore[attr-defined, unused-ignore]

from xmlschema import XMLSchema, XMLSchemaBase, XMLSchemaValidationError

from marcvalidate.exceptions import MarcResourceForbidden, MarcValidateTypeError
from marcvalidate.helpers import logged
from marcvalidate.names import MARC21_NAMESPACE, MARC21_SLIM_SCHEMA, MARC_COLLECTION, \
    COLLECTION, local_name

logger = logging.getLogger('marcvalidate')

READ_CHUNK_SIZE = 64 * 1024

REPLACEMENT_CHARACTER = '\ufffd'

SchemaSourceType = Union[str, Path, XMLSchemaBase]


class RecordHandler(Protocol):
    """The callbacks invoked by a validating parser, in document order."""

    def start_element(self, tag: str, attrib: Mapping[str, str]) -> None: ...

    def end_element(self, tag: str) -> None: ...

    def characters(self, text: str) -> None: ...

    def diagnostic(self, message: str) -> None: ...


@lru_cache(maxsize=None)
def get_marc_schema() -> XMLSchema:
    """Returns the bundled MARC21 slim schema, built once."""
    logger.info("Build MARC21 slim schema from %r", MARC21_SLIM_SCHEMA)
    return XMLSchema(MARC21_SLIM_SCHEMA)


def get_error_message(error: XMLSchemaValidationError) -> str:
    """Returns a single line message for a validation error."""
    message = error.reason or error.message
    return ' '.join(message.split())


class SafeExpatParser(expatreader.ExpatParser):  # type: ignore[misc, unused-ignore]
    """An expat SAX reader that rejects entity declarations and references."""

    def forbid_entity_declaration(self, name, is_parameter_entity,  # type: ignore
                                  value, base, sysid, pubid, notation_name):
        raise MarcResourceForbidden(f"Entities are forbidden (entity_name={name!r})")

    def forbid_unparsed_entity_declaration(self, name, base,  # type: ignore
                                           sysid, pubid, notation_name):
        raise MarcResourceForbidden(f"Unparsed entities are forbidden (entity_name={name!r})")

    def forbid_external_entity_reference(self, context, base, sysid, pubid):  # type: ignore
        raise MarcResourceForbidden(
            f"External references are forbidden (system_id={sysid!r}, public_id={pubid!r})"
        )  # pragma: no cover

    def reset(self) -> None:
        super().reset()
        self._parser.EntityDeclHandler = self.forbid_entity_declaration
        self._parser.UnparsedEntityDeclHandler = self.forbid_unparsed_entity_declaration
        self._parser.ExternalEntityRefHandler = self.forbid_external_entity_reference


class _RecordContentHandler(sax_handler.ContentHandler, sax_handler.ErrorHandler):
    """
    Forwards the events outside records directly to the record handler and
    collects each record in a tree, that is validated as a whole and then
    replayed to the record handler at the record's end.
    """
    def __init__(self, parser: 'RecordValidatingParser', handler: RecordHandler) -> None:
        super().__init__()
        self.parser = parser
        self.schema = parser.schema
        self.handler = handler
        self.depth = 0
        self.builder: Optional[TreeBuilder] = None
        self.elements: list[Element] = []
        self.warnings: dict[int, list[str]] = {}

    def startElementNS(self, name: tuple[Optional[str], str],
                       qname: Optional[str], attrs: Any) -> None:
        tag = '{%s}%s' % name if name[0] else name[1]
        attrib = {
            ('{%s}%s' % k if k[0] else k[1]): v for k, v in attrs.items()
        }

        if self.depth == 0:
            self.handler.start_element(tag, attrib)
            if tag != self.parser.collection_tag:
                self.handler.diagnostic(
                    f"Unexpected root element {local_name(tag)!r}, "
                    f"the root must be a {COLLECTION!r} element."
                )
        else:
            if self.depth == 1:
                self.builder = TreeBuilder()
            assert self.builder is not None
            elem = self.builder.start(tag, attrib)
            self.elements.append(elem)
            if self.parser.replace_malformed and \
                    any(REPLACEMENT_CHARACTER in v for v in attrib.values()):
                self.add_warning(elem, "malformed character sequence replaced "
                                       "in attribute value")
        self.depth += 1

    def endElementNS(self, name: tuple[Optional[str], str], qname: Optional[str]) -> None:
        self.depth -= 1
        tag = '{%s}%s' % name if name[0] else name[1]

        if self.depth == 0:
            self.handler.end_element(tag)
            return

        assert self.builder is not None
        self.builder.end(tag)
        self.elements.pop()
        if self.depth == 1:
            record = self.builder.close()
            self.builder = None
            self.validate_record(record)

    def characters(self, content: str) -> None:
        if self.builder is None:
            self.handler.characters(content)
            return

        self.builder.data(content)
        if self.parser.replace_malformed and REPLACEMENT_CHARACTER in content:
            self.add_warning(self.elements[-1], "malformed character sequence replaced "
                                                "in character data")

    def add_warning(self, elem: Element, message: str) -> None:
        messages = self.warnings.setdefault(id(elem), [])
        if message not in messages:
            messages.append(message)

    def validate_record(self, record: Element) -> None:
        diagnostics: dict[int, list[str]] = self.warnings
        self.warnings = {}

        elements = {id(e) for e in record.iter()}
        for error in self.schema.iter_errors(record):
            key = id(error.elem) if id(error.elem) in elements else id(record)
            diagnostics.setdefault(key, []).append(get_error_message(error))

        if diagnostics:
            logger.debug("Found %d invalid elements in record",
                         len(diagnostics))
        self.replay(record, diagnostics)

    def replay(self, elem: Element, diagnostics: dict[int, list[str]]) -> None:
        handler = self.handler
        handler.start_element(elem.tag, elem.attrib)
        if elem.text:
            handler.characters(elem.text)
        for child in elem:
            self.replay(child, diagnostics)
            if child.tail:
                handler.characters(child.tail)
        for message in diagnostics.get(id(elem), ()):
            handler.diagnostic(message)
        handler.end_element(elem.tag)

    def replay_open(self, elem: Element) -> None:
        """Replays an element that is still open, without its end event."""
        handler = self.handler
        handler.start_element(elem.tag, elem.attrib)
        if elem.text:
            handler.characters(elem.text)
        for child in elem:
            if any(child is e for e in self.elements):
                self.replay_open(child)
                break
            self.replay(child, {})
            if child.tail:
                handler.characters(child.tail)

    ###
    # Error handler callbacks
    def error(self, exception: SAXParseException) -> None:
        self.handler.diagnostic(exception.getMessage())

    def fatalError(self, exception: SAXParseException) -> None:
        # The partial record is replayed, so the handler sees the
        # position where the parsing stopped.
        if self.elements:
            self.replay_open(self.elements[0])
            self.elements.clear()
        self.handler.diagnostic(exception.getMessage())
        raise exception

    def warning(self, exception: SAXParseException) -> None:
        self.handler.diagnostic(exception.getMessage())


class RecordValidatingParser:
    """
    A streaming validating parser for MARCXML collections.

    The document is read with a namespace aware SAX parser. The elements
    outside records are streamed directly to the handler, while each record
    is collected into an ElementTree subtree, validated against the schema
    and then replayed to the handler, so only one record at a time is kept
    in memory. The validation errors of an element are reported just before
    the end event of that element.

    :param schema: an XSD schema instance or a path to a schema file. \
    For default the bundled MARC21 slim schema is used.
    :param defuse: if `True`, the default, entity declarations and external \
    references are forbidden.
    :param replace_malformed: if `True` the input is expected to be decoded \
    with replacement of malformed sequences, and each replacement character \
    is reported as a diagnostic.
    """
    def __init__(self, schema: Optional[SchemaSourceType] = None,
                 defuse: bool = True,
                 replace_malformed: bool = False) -> None:

        if schema is None:
            self.schema = get_marc_schema()
        elif isinstance(schema, XMLSchemaBase):
            self.schema = schema
        elif isinstance(schema, (str, Path)):
            self.schema = XMLSchema(str(schema))
        else:
            msg = "'schema' argument must be a path or an XMLSchema instance, not {!r}"
            raise MarcValidateTypeError(msg.format(type(schema)))

        self.defuse = defuse
        self.replace_malformed = replace_malformed

        namespace = self.schema.target_namespace
        if namespace == MARC21_NAMESPACE:
            self.collection_tag = MARC_COLLECTION
        elif namespace:
            self.collection_tag = f'{{{namespace}}}{COLLECTION}'
        else:
            self.collection_tag = COLLECTION

    def __repr__(self) -> str:
        return '%s(schema=%r, defuse=%r, replace_malformed=%r)' % (
            self.__class__.__name__, self.schema, self.defuse, self.replace_malformed
        )

    def create_sax_parser(self) -> expatreader.ExpatParser:
        if self.defuse:
            parser = SafeExpatParser()
        else:
            parser = expatreader.ExpatParser()
        parser.setFeature(sax_handler.feature_namespaces, True)
        return parser

    @logged
    def parse(self, source: IO[Any], handler: RecordHandler) -> None:
        """
        Parses a binary or text stream, pushing the events to a record handler.
        Malformed markup is reported to the handler as a diagnostic and then
        raised as a `SAXParseException`.

        :param source: a readable file-like object.
        :param handler: the record handler that receives the events.
        """
        content_handler = _RecordContentHandler(self, handler)
        parser = self.create_sax_parser()
        parser.setContentHandler(content_handler)
        parser.setErrorHandler(content_handler)

        chunks = 0
        for chunks, chunk in enumerate(iter_chunks(source), start=1):
            parser.feed(chunk)

        if not chunks:
            logger.warning("Empty input, there are no records to validate")
        else:
            parser.close()


def iter_chunks(source: IO[Any]) -> Iterator[Union[str, bytes]]:
    while True:
        chunk = source.read(READ_CHUNK_SIZE)
        if not chunk:
            break
        yield chunk
