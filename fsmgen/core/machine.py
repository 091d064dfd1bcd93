# fsmgen/core/machine.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Dict, Iterator, List, Mapping, Optional, Tuple

from fsmgen.core.annotation import ParsedAnnotation
from fsmgen.core.declaration import StateSkeleton
from fsmgen.core.errors import BuilderError, MalformedDeclarationError, MalformedFieldError
from fsmgen.core.types import EventName, SourcePosition, StateName

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateDefinition:
    """
    One node of the machine: its outgoing events and the derived reverse index.

    ``events`` and ``destinations`` keep annotation order and are read-only.
    """

    name: StateName
    is_terminal: bool
    events: Mapping[EventName, StateName] = field(default_factory=lambda: MappingProxyType({}))
    destinations: Mapping[StateName, Tuple[EventName, ...]] = field(default_factory=lambda: MappingProxyType({}))
    position: Optional[SourcePosition] = None

    @classmethod
    def create(
        cls,
        name: StateName,
        events: Optional[Mapping[EventName, StateName]] = None,
        position: Optional[SourcePosition] = None,
    ) -> "StateDefinition":
        """
        Build a state from its event map, deriving the reverse index.

        :param name: State name.
        :param events: Ordered event -> destination map; empty or None for a terminal state.
        :param position: Source position of the field.
        """
        events = dict(events or {})
        destinations: Dict[StateName, List[EventName]] = {}
        for event, destination in events.items():
            destinations.setdefault(destination, []).append(event)
        return cls(
            name=name,
            is_terminal=not events,
            events=MappingProxyType(events),
            destinations=MappingProxyType({dst: tuple(evs) for dst, evs in destinations.items()}),
            position=position,
        )


@dataclass(frozen=True)
class MachineDefinition:
    """
    The complete, immutable graph of one machine.

    Attributes:
        machine_name: Name of the generated machine (declaration name without suffix)
        package: Opaque package context passed through to emission
        states: State name -> definition, in field declaration order
        description: Graph description, filled in after validation
        position: Where the declaration lives
    """

    machine_name: str
    package: str
    states: Mapping[StateName, StateDefinition]
    description: str = ""
    position: Optional[SourcePosition] = None

    def __iter__(self) -> Iterator[StateDefinition]:
        return iter(self.states.values())

    def __len__(self) -> int:
        return len(self.states)

    def __contains__(self, name: object) -> bool:
        return name in self.states

    @property
    def terminal_states(self) -> List[StateName]:
        return [s.name for s in self.states.values() if s.is_terminal]

    def transitions(self) -> Iterator[Tuple[StateName, EventName, StateName]]:
        """Yield ``(state, event, destination)`` in declaration order."""
        for state in self.states.values():
            for event, destination in state.events.items():
                yield state.name, event, destination

    def with_description(self, description: str) -> "MachineDefinition":
        """Return a copy carrying the given description."""
        return dataclasses.replace(self, description=description)


class MachineBuilder:
    """
    Folds per-state parse results into one MachineDefinition.

    The builder is single use: once ``build()`` returns, further calls raise
    BuilderError.
    """

    def __init__(self, machine_name: str, package: str = "", position: Optional[SourcePosition] = None) -> None:
        """
        :param machine_name: Name of the machine being built.
        :param package: Package context passed through to emission.
        :param position: Source position of the declaration.
        """
        self._machine_name = machine_name
        self._package = package
        self._position = position
        self._states: Dict[StateName, StateDefinition] = {}
        self._built = False

    @property
    def machine_name(self) -> str:
        return self._machine_name

    def add_state(self, skeleton: StateSkeleton, parsed: ParsedAnnotation) -> StateDefinition:
        """
        Add one parsed state.

        :param skeleton: Extracted field information.
        :param parsed: Parsed annotation of the field.
        :raises BuilderError: If the builder has already been built.
        :raises MalformedFieldError: If a state of that name was already added.
        """
        if self._built:
            raise BuilderError(f"machine {self._machine_name} already built")
        if skeleton.name in self._states:
            raise MalformedFieldError(
                [skeleton.name], f"field `{skeleton.name}` declared more than once", skeleton.position
            )
        state = StateDefinition.create(skeleton.name, parsed.events, skeleton.position)
        self._states[state.name] = state
        return state

    def build(self) -> MachineDefinition:
        """
        Finish the definition.

        :raises BuilderError: If called twice.
        :raises MalformedDeclarationError: If no state was added.
        """
        if self._built:
            raise BuilderError(f"machine {self._machine_name} already built")
        if not self._states:
            raise MalformedDeclarationError(f"machine {self._machine_name} has zero states", self._position)
        self._built = True
        logger.debug(f"Built machine {self._machine_name} with {len(self._states)} states")
        return MachineDefinition(
            machine_name=self._machine_name,
            package=self._package,
            states=MappingProxyType(dict(self._states)),
            position=self._position,
        )
