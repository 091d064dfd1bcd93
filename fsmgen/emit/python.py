# fsmgen/emit/python.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Python renderer for generated machines.

The emitted module is statically typed: each non-terminal state has its own
event enumeration and the handler protocol's per-state method returns exactly
that enumeration, so a type checker rejects a handler that returns an event of
another state or that omits a state. Transitions are looked up in a table.
"""

from typing import List

from fsmgen.emit.code import EventEnumeration, GeneratedMachine

INDENT = "    "


class PythonRenderer:
    """
    Renders a GeneratedMachine as the source of a Python module.

    Rendering is a pure function of its input: the same GeneratedMachine
    always yields the same text.
    """

    def render(self, generated: GeneratedMachine) -> str:
        """
        Render the module source.

        :param generated: Logical content produced by ``emit_machine``.
        :return: Module source ending with a newline.
        """
        sections = [
            self._header(generated),
            self._imports(generated),
            self._state_enum(generated),
            *[self._event_enum(enumeration) for enumeration in generated.events],
            self._event_alias(generated),
            self._handler_protocol(generated),
            self._tables(generated),
            self._machine_class(generated),
        ]
        return "\n\n\n".join(s for s in sections if s) + "\n"

    def _header(self, generated: GeneratedMachine) -> str:
        origin = f" (package {generated.package})" if generated.package else ""
        lines = [
            "# Code generated by fsmgen. DO NOT EDIT.",
            '"""',
            f"Finite state machine {generated.machine_name}{origin}.",
        ]
        if generated.description:
            lines.append("")
            lines.extend(generated.description.rstrip("\n").split("\n"))
        lines.append('"""')
        return "\n".join(lines)

    def _imports(self, generated: GeneratedMachine) -> str:
        names = ["FrozenSet"]
        if generated.events:
            names.extend(["Dict", "Tuple"])
        if generated.handlers:
            names.append("Protocol")
        if len(generated.events) > 1:
            names.append("Union")
        return "from enum import Enum\n" + f"from typing import {', '.join(sorted(names))}"

    def _state_enum(self, generated: GeneratedMachine) -> str:
        lines = [
            f"class {generated.state_type}(Enum):",
            f'{INDENT}"""States of the {generated.machine_name} machine."""',
            "",
        ]
        lines.extend(f'{INDENT}{state.name} = "{state.name}"' for state in generated.states)
        lines.extend(
            [
                "",
                f"{INDENT}def __str__(self) -> str:",
                f"{INDENT * 2}return self.value",
            ]
        )
        return "\n".join(lines)

    def _event_enum(self, enumeration: EventEnumeration) -> str:
        lines = [
            f"class {enumeration.type_name}(Enum):",
            f'{INDENT}"""Events the {enumeration.state} handler may return."""',
            "",
        ]
        lines.extend(f'{INDENT}{member.event} = "{member.event}"' for member in enumeration.members)
        return "\n".join(lines)

    def _event_type(self, generated: GeneratedMachine) -> str:
        return f"{generated.machine_name}Event"

    def _event_alias(self, generated: GeneratedMachine) -> str:
        if not generated.events:
            return ""
        types = [e.type_name for e in generated.events]
        if len(types) == 1:
            return f"{self._event_type(generated)} = {types[0]}"
        return f"{self._event_type(generated)} = Union[{', '.join(types)}]"

    def _handler_protocol(self, generated: GeneratedMachine) -> str:
        if not generated.handlers:
            return ""
        lines = [
            f"class {generated.handler_type}(Protocol):",
            f'{INDENT}"""One handler per non-terminal state of {generated.machine_name}."""',
        ]
        for handler in generated.handlers:
            lines.append("")
            lines.append(f"{INDENT}def {handler.method_name}(self) -> {handler.event_type}: ...")
        return "\n".join(lines)

    def _tables(self, generated: GeneratedMachine) -> str:
        prefix = f"_{generated.machine_name.upper()}"
        state_type = generated.state_type
        terminal = ", ".join(f"{state_type}.{name}" for name in generated.terminal_states)
        members = f"{{{terminal}}}" if terminal else ""
        lines = [f"{prefix}_TERMINAL: FrozenSet[{state_type}] = frozenset({members})"]
        if not generated.events:
            return "\n".join(lines)

        lines.append("")
        event_type = self._event_type(generated)
        lines.append(f"{prefix}_TRANSITIONS: Dict[Tuple[{state_type}, {event_type}], {state_type}] = {{")
        for state, event, destination in generated.transitions:
            event_enum = generated.event_type_for(state)
            lines.append(f"{INDENT}({state_type}.{state}, {event_enum}.{event}): {state_type}.{destination},")
        lines.append("}")
        return "\n".join(lines)

    def _machine_class(self, generated: GeneratedMachine) -> str:
        name = generated.machine_name
        state_type = generated.state_type
        prefix = f"_{name.upper()}"
        lines: List[str] = [
            f"class {name}:",
            f'{INDENT}"""',
            f"{INDENT}The {name} finite state machine.",
            "",
            f"{INDENT}Call ``step`` to run the current state's handler once, or ``operate`` to",
            f"{INDENT}run handlers until a terminal state is reached or a handler returns",
            f"{INDENT}``{generated.reserved_event}``.",
            f'{INDENT}"""',
            "",
            f"{INDENT}def __init__(self, state: {state_type}) -> None:",
            f"{INDENT * 2}self._state = state",
            "",
            f"{INDENT}@classmethod",
            f'{INDENT}def from_string(cls, value: str) -> "{name}":',
            f"{INDENT * 2}try:",
            f"{INDENT * 3}return cls({state_type}(value))",
            f"{INDENT * 2}except ValueError:",
            f'{INDENT * 3}raise ValueError(f"unknown {name} state {{value!r}}") from None',
            "",
            f"{INDENT}def __repr__(self) -> str:",
            f'{INDENT * 2}return f"{name}({{self._state.value}})"',
            "",
            f"{INDENT}def current(self) -> {state_type}:",
            f"{INDENT * 2}return self._state",
            "",
            f"{INDENT}def is_terminal(self) -> bool:",
            f"{INDENT * 2}return self._state in {prefix}_TERMINAL",
            "",
        ]
        lines.extend(self._step(generated))
        lines.extend(
            [
                "",
                f"{INDENT}def operate(self, handler: {self._handler_annotation(generated)}) -> {state_type}:",
                f"{INDENT * 2}while self.step(handler):",
                f"{INDENT * 3}pass",
                f"{INDENT * 2}return self._state",
            ]
        )
        return "\n".join(lines)

    def _handler_annotation(self, generated: GeneratedMachine) -> str:
        return generated.handler_type if generated.handlers else "object"

    def _step(self, generated: GeneratedMachine) -> List[str]:
        state_type = generated.state_type
        lines = [
            f"{INDENT}def step(self, handler: {self._handler_annotation(generated)}) -> bool:",
            f'{INDENT * 2}"""Run the current state\'s handler once; return True if the state changed."""',
        ]
        if not generated.handlers:
            lines.append(f"{INDENT * 2}return False")
            return lines

        lines.append(f"{INDENT * 2}event: {self._event_type(generated)}")
        for i, handler in enumerate(generated.handlers):
            keyword = "if" if i == 0 else "elif"
            lines.append(f"{INDENT * 2}{keyword} self._state is {state_type}.{handler.state}:")
            lines.append(f"{INDENT * 3}event = handler.{handler.method_name}()")
        lines.extend(
            [
                f"{INDENT * 2}else:",
                f"{INDENT * 3}return False",
                f'{INDENT * 2}if event.name == "{generated.reserved_event}":',
                f"{INDENT * 3}return False",
                f"{INDENT * 2}try:",
                f"{INDENT * 3}self._state = _{generated.machine_name.upper()}_TRANSITIONS[(self._state, event)]",
                f"{INDENT * 2}except KeyError:",
                f'{INDENT * 3}raise ValueError(f"event {{event!r}} is not declared for state {{self._state}}") from None',
                f"{INDENT * 2}return True",
            ]
        )
        return lines
