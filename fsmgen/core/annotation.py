# fsmgen/core/annotation.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Parser for state annotations.

An annotation lists the outgoing transitions of one state::

    Entry ("," Entry)*        Entry = EventName ":" '"' DestinationState '"'

e.g. ``Success:"Closed",Failure:"Opened"``. An absent or blank annotation
marks a terminal state.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from fsmgen.core.config import CompilerConfig
from fsmgen.core.errors import AnnotationSyntaxError, DuplicateEventError, ReservedEventError
from fsmgen.core.naming import member_name_problem
from fsmgen.core.types import EventName, SourcePosition, StateName

logger = logging.getLogger(__name__)

ENTRY_SEPARATOR = ","
EVENT_SEPARATOR = ":"
QUOTE = '"'


@dataclass
class ParsedAnnotation:
    """
    Transitions declared by one state, in annotation order.

    Attributes:
        events: event -> destination state
        destinations: destination state -> events targeting it (derived)
    """

    events: Dict[EventName, StateName] = field(default_factory=dict)
    destinations: Dict[StateName, List[EventName]] = field(default_factory=dict)

    def add(self, event: EventName, destination: StateName) -> None:
        self.events[event] = destination
        self.destinations.setdefault(destination, []).append(event)


def parse_annotation(
    state: StateName,
    raw: Optional[str],
    position: Optional[SourcePosition] = None,
    config: Optional[CompilerConfig] = None,
) -> ParsedAnnotation:
    """
    Parse the annotation of one state.

    :param state: Name of the state owning the annotation.
    :param raw: Annotation text, or None when the field has no annotation.
    :param position: Source position reported with any error.
    :param config: Compiler configuration; defaults when omitted.
    :return: The ordered transitions; empty for a terminal state.
    :raises AnnotationSyntaxError: If an entry is malformed.
    :raises ReservedEventError: If the reserved event is declared.
    :raises DuplicateEventError: If an event is declared twice on this state.
    """
    config = config or CompilerConfig()
    parsed = ParsedAnnotation()
    if raw is None or not raw.strip():
        return parsed

    for entry in raw.split(ENTRY_SEPARATOR):
        event, destination = _parse_entry(state, entry, position, config)
        if event in parsed.events:
            raise DuplicateEventError(state, event, position)
        parsed.add(event, destination)

    logger.debug(f"State {state}: {len(parsed.events)} events")
    return parsed


def _parse_entry(
    state: StateName, entry: str, position: Optional[SourcePosition], config: CompilerConfig
) -> tuple:
    parts = entry.split(EVENT_SEPARATOR)
    if len(parts) != 2:
        raise AnnotationSyntaxError(state, entry, "expected exactly one `:`", position)
    event, quoted = parts[0].strip(), parts[1].strip()
    if not event or not quoted:
        raise AnnotationSyntaxError(state, entry, "event and destination must both be non-empty", position)

    _check_event_name(state, entry, event, position, config)

    if len(quoted) < 3 or not (quoted.startswith(QUOTE) and quoted.endswith(QUOTE)):
        raise AnnotationSyntaxError(state, entry, "destination must be a non-empty double-quoted state name", position)
    destination = quoted[1:-1].strip()
    if not destination:
        raise AnnotationSyntaxError(state, entry, "destination must be a non-empty double-quoted state name", position)
    return event, destination


def _check_event_name(
    state: StateName, entry: str, event: str, position: Optional[SourcePosition], config: CompilerConfig
) -> None:
    if event == config.reserved_event:
        raise ReservedEventError(state, event, position)
    if len(event) < config.min_event_name_length:
        raise AnnotationSyntaxError(
            state, entry, f"event name must be at least {config.min_event_name_length} characters long", position
        )
    problem = member_name_problem(event)
    if problem:
        raise AnnotationSyntaxError(
            state, entry, f"event name `{event}` is not a usable identifier: it {problem}", position
        )
