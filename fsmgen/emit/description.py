# fsmgen/emit/description.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Graphviz description of a validated machine.

States and events are emitted in the deterministic ordering of
``fsmgen.core.ordering``, so two runs over the same definition produce
byte-identical text.
"""

from typing import List

from fsmgen.core.machine import MachineDefinition
from fsmgen.core.ordering import ordered_items

TERMINAL_SHAPE = "Msquare"
INDENT = "\t"


def describe_machine(definition: MachineDefinition) -> str:
    """
    Render the machine as a Graphviz digraph.

    Terminal states become ``[shape=Msquare]`` leaf nodes; every event of a
    non-terminal state becomes one labelled edge.

    :param definition: A validated machine definition.
    :return: DOT source ending with a newline.
    """
    name = definition.machine_name
    lines: List[str] = [
        f"// Definition for {name} in Graphviz format",
        f"digraph {name} {{",
    ]
    for state_name, state in ordered_items(definition.states):
        if state.is_terminal:
            lines.append(f"{INDENT}{state_name} [shape={TERMINAL_SHAPE}];")
            continue
        for event, destination in ordered_items(state.events):
            lines.append(f"{INDENT}{state_name} -> {destination} [label={event}];")
    lines.append("}")
    return "\n".join(lines) + "\n"
