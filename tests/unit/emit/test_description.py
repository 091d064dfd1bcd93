# tests/unit/emit/test_description.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Unit tests for fsmgen.emit.description."""
from types import MappingProxyType

from fsmgen.core.machine import MachineDefinition, StateDefinition
from fsmgen.emit.description import describe_machine

EXPECTED_CBM = (
    "// Definition for CBM in Graphviz format\n"
    "digraph CBM {\n"
    "\tClosed -> Terminal [label=Error];\n"
    "\tClosed -> Opened [label=Failure];\n"
    "\tClosed -> Terminal [label=Panic];\n"
    "\tHalfOpened -> Opened [label=Failure];\n"
    "\tHalfOpened -> Closed [label=Success];\n"
    "\tOpened -> HalfOpened [label=Try];\n"
    "\tTerminal [shape=Msquare];\n"
    "}\n"
)


def _definition(states):
    return MachineDefinition("CBM", "examples", MappingProxyType({s.name: s for s in states}))


def _cbm_states():
    return [
        StateDefinition.create("Opened", {"Try": "HalfOpened"}),
        StateDefinition.create("HalfOpened", {"Success": "Closed", "Failure": "Opened"}),
        StateDefinition.create("Closed", {"Failure": "Opened", "Panic": "Terminal", "Error": "Terminal"}),
        StateDefinition.create("Terminal"),
    ]


def test_cbm_description():
    assert describe_machine(_definition(_cbm_states())) == EXPECTED_CBM


def test_order_independent_of_declaration_order():
    reversed_states = [
        StateDefinition.create(s.name, dict(reversed(list(s.events.items())))) for s in reversed(_cbm_states())
    ]
    assert describe_machine(_definition(reversed_states)) == EXPECTED_CBM


def test_terminal_states_are_leaf_nodes():
    definition = _definition([StateDefinition.create("Only")])
    assert describe_machine(definition) == (
        "// Definition for CBM in Graphviz format\ndigraph CBM {\n\tOnly [shape=Msquare];\n}\n"
    )
