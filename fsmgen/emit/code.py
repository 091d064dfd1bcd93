# fsmgen/emit/code.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Logical layer of code emission.

Turns a validated MachineDefinition into a GeneratedMachine: the enumerations,
dispatch contract and transition table of the generated artifact, in
deterministic order and free of any target-language syntax. A renderer (see
``fsmgen.emit.python``) turns it into source text.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from fsmgen.core.config import CompilerConfig
from fsmgen.core.errors import ValidationError
from fsmgen.core.machine import MachineDefinition
from fsmgen.core.naming import snake_case
from fsmgen.core.ordering import ordered_items, ordered_names
from fsmgen.core.types import EventName, StateName


@dataclass(frozen=True)
class StateConstant:
    """One member of the state enumeration."""

    name: StateName
    is_terminal: bool


@dataclass(frozen=True)
class EventConstant:
    """
    One (state, event) constant. ``destination`` is the state entered when a
    handler returns it; for the reserved event it is the owning state itself.
    """

    state: StateName
    event: EventName
    destination: StateName
    reserved: bool = False


@dataclass(frozen=True)
class EventEnumeration:
    """The events a non-terminal state's handler may return."""

    state: StateName
    type_name: str
    members: Tuple[EventConstant, ...]


@dataclass(frozen=True)
class HandlerContract:
    """One required handler: called in ``state`` and returning ``event_type``."""

    state: StateName
    method_name: str
    event_type: str


@dataclass(frozen=True)
class GeneratedMachine:
    """
    Everything a renderer needs to write one machine.

    Attributes:
        machine_name: Machine name (``CBM``)
        package: Package context of the declaration
        file_name: Output file name, ``lowercase(machine).fsm.<ext>``
        description: Graph description of the machine
        state_type: Name of the state enumeration type
        handler_type: Name of the handler protocol type
        reserved_event: Event meaning "no transition occurred"
        states: State enumeration, sorted by name
        events: Per non-terminal state event enumerations, sorted by state
        handlers: Dispatch contract, one entry per non-terminal state
        transitions: (state, event) -> destination, declared events only
    """

    machine_name: str
    package: str
    file_name: str
    description: str
    state_type: str
    handler_type: str
    reserved_event: EventName
    states: Tuple[StateConstant, ...]
    events: Tuple[EventEnumeration, ...]
    handlers: Tuple[HandlerContract, ...]
    transitions: Tuple[Tuple[StateName, EventName, StateName], ...]

    @property
    def terminal_states(self) -> Tuple[StateName, ...]:
        return tuple(s.name for s in self.states if s.is_terminal)

    def event_type_for(self, state: StateName) -> Optional[str]:
        for enumeration in self.events:
            if enumeration.state == state:
                return enumeration.type_name
        return None

    def transition_map(self) -> Dict[Tuple[StateName, EventName], StateName]:
        return {(state, event): destination for state, event, destination in self.transitions}


def output_file_name(machine_name: str, config: CompilerConfig) -> str:
    """``CBM`` -> ``cbm.fsm.py``."""
    return f"{machine_name}.fsm.{config.output_extension}".lower()


def emit_machine(definition: MachineDefinition, config: Optional[CompilerConfig] = None) -> GeneratedMachine:
    """
    Serialize a validated definition into the generated artifact's structure.

    The reserved event is added as the first member of every state's event
    enumeration; it maps back to the owning state.

    :param definition: Validated machine definition (with its description).
    :param config: Compiler configuration; defaults when omitted.
    """
    config = config or CompilerConfig()
    name = definition.machine_name
    reserved = config.reserved_event

    states = tuple(
        StateConstant(name=state_name, is_terminal=state.is_terminal)
        for state_name, state in ordered_items(definition.states)
    )

    events = []
    handlers = []
    for state_name, state in ordered_items(definition.states):
        if state.is_terminal:
            continue
        type_name = f"{name}{state_name}Event"
        members = [EventConstant(state_name, reserved, state_name, reserved=True)]
        for event in ordered_names(state.events):
            members.append(EventConstant(state_name, event, state.events[event]))
        events.append(EventEnumeration(state_name, type_name, tuple(members)))
        handlers.append(HandlerContract(state_name, f"operate_{snake_case(state_name)}", type_name))

    seen: Dict[str, StateName] = {}
    for handler in handlers:
        if handler.method_name in seen:
            raise ValidationError(
                f"states `{seen[handler.method_name]}` and `{handler.state}` both need handler "
                f"`{handler.method_name}`",
                definition.states[handler.state].position,
            )
        seen[handler.method_name] = handler.state

    return GeneratedMachine(
        machine_name=name,
        package=definition.package,
        file_name=output_file_name(name, config),
        description=definition.description,
        state_type=f"{name}State",
        handler_type=f"{name}Handler",
        reserved_event=reserved,
        states=states,
        events=tuple(events),
        handlers=tuple(handlers),
        transitions=tuple(sorted(definition.transitions())),
    )
