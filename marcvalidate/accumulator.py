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
This module contains the record accumulator, a listener that turns the flat
stream of structural events and validation diagnostics produced by a
validating parser into a per-record report.
"""
import logging
from collections.abc import Mapping
from enum import IntEnum
from typing import NamedTuple, Optional, TextIO

from marcvalidate.names import RECORD, LEADER, CONTROLFIELD, DATAFIELD, \
    SUBFIELD, TAG_ATTRIBUTE, CODE_ATTRIBUTE, RECORD_ID_TAG, local_name

logger = logging.getLogger('marcvalidate')

NO_TAG = '[no-tag]'
"Label of a field or subfield that lacks its identifying attribute"

UNLABELED = '*'
"Rendering of a location slot that has no label"


class Position(IntEnum):
    """
    The structural position of the accumulator. The value is the number of
    open elements, capped at the subfield level.
    """
    OUTSIDE_DOCUMENT = 0
    IN_DOCUMENT = 1
    IN_RECORD = 2
    IN_FIELD = 3
    IN_SUBFIELD = 4


class ValidationSummary(NamedTuple):
    good: int
    bad: int

    def __str__(self) -> str:
        return f'{self.good} good; {self.bad} bad.'


def format_location(location: tuple[Optional[str], ...]) -> str:
    """Renders a location path, outermost slot first: `[245, a]`."""
    return '[%s]' % ', '.join(UNLABELED if x is None else x for x in location)


def format_messages(messages: tuple[str, ...]) -> str:
    return '[%s]' % ', '.join(messages)


class RecordAccumulator:
    """
    Accumulates validation diagnostics for a stream of MARCXML records.

    The accumulator is driven by a validating parser through the callbacks
    `start_element`, `end_element`, `characters` and `diagnostic`. Diagnostics
    are collected as a set of pending messages and flushed, on every element
    entry and exit, under the location that is current at that moment. At
    each record boundary the previous record is classified as good or bad;
    the report lines of a bad record are written to the report stream as soon
    as the record is finalized. Call `end` after the last event to finalize
    the last record and write the summary line.

    :param report: a text stream where bad records and the summary are written.
    """
    def __init__(self, report: TextIO) -> None:
        self.report = report
        self._path: list[Optional[str]] = []  # a slot for each open element
        self._pending: dict[str, None] = {}  # insertion ordered set
        self._log: list[str] = []
        self._record_id: list[str] = []
        self._capture_depth: Optional[int] = None
        self._record_pending = False
        self._good = 0
        self._bad = 0

    def __repr__(self) -> str:
        return '%s(good=%d, bad=%d, location=%r)' % (
            self.__class__.__name__, self._good, self._bad, self.location
        )

    @property
    def position(self) -> Position:
        return Position(min(len(self._path), Position.IN_SUBFIELD))

    @property
    def depth(self) -> int:
        """Nesting depth: -1 outside the document, 0 between records, 1 in a record."""
        return len(self._path) - 1

    @property
    def location(self) -> tuple[Optional[str], ...]:
        """The location slots from the current record down to the current node."""
        return tuple(self._path[1:])

    @property
    def record_id(self) -> str:
        """The identifier of the current record, as far as it has been read."""
        return ''.join(self._record_id)

    @property
    def good(self) -> int:
        return self._good

    @property
    def bad(self) -> int:
        return self._bad

    @property
    def summary(self) -> ValidationSummary:
        return ValidationSummary(self._good, self._bad)

    ###
    # Parser callbacks
    def start_element(self, tag: str, attrib: Mapping[str, str]) -> None:
        # Diagnostics reported before this element belong to its parent
        self.flush_diagnostics()

        name = local_name(tag)
        position = self.position
        label: Optional[str] = None

        if position == Position.IN_DOCUMENT:
            if name == RECORD:
                if self._record_pending:
                    self.finalize_record()
                self._record_pending = True
        elif position == Position.IN_RECORD:
            if name in (CONTROLFIELD, DATAFIELD):
                label = attrib.get(TAG_ATTRIBUTE, NO_TAG)
                if name == CONTROLFIELD and label == RECORD_ID_TAG:
                    self._capture_depth = len(self._path)
                    self._record_id.clear()
            elif name == LEADER:
                label = LEADER
        elif position == Position.IN_FIELD:
            if name == SUBFIELD:
                label = attrib.get(CODE_ATTRIBUTE, NO_TAG)

        self._path.append(label)

    def end_element(self, tag: str) -> None:
        if self._capture_depth == len(self._path) - 1:
            self._capture_depth = None
        self.flush_diagnostics()
        self._path.pop()

    def characters(self, text: str) -> None:
        if self._capture_depth is not None:
            self._record_id.append(text)

    def diagnostic(self, message: str) -> None:
        self._pending[message] = None

    ###
    # Flushing and reporting
    def flush_diagnostics(self) -> None:
        """Moves pending diagnostics to the record log, under the current location."""
        if self._pending:
            self._log.append('  %s: %s\n' % (
                format_location(self.location[1:]), format_messages(tuple(self._pending))
            ))
            self._pending.clear()

    def finalize_record(self) -> None:
        """Classifies the current record, reporting it if it has diagnostics."""
        record_id = self.record_id
        if self._log:
            self._bad += 1
            logger.debug("Record %r is not valid (%d locations)", record_id, len(self._log))
            self.report.write(f'{record_id}\n')
            self.report.write(''.join(self._log))
            self._log.clear()
        else:
            self._good += 1
            logger.debug("Record %r is valid", record_id)
        self._record_id.clear()

    def end(self) -> ValidationSummary:
        """
        Finalizes the last record and writes the summary line. Diagnostics
        that were never followed by a record boundary are reported as a
        record of their own.
        """
        self.flush_diagnostics()
        if self._record_pending or self._log:
            self.finalize_record()
            self._record_pending = False

        summary = self.summary
        self.report.write(f'{summary}\n')
        logger.info("Validation completed: %s", summary)
        return summary
