# fsmgen/core/errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from __future__ import annotations

from typing import TYPE_CHECKING, Optional, Sequence, Tuple

if TYPE_CHECKING:
    from fsmgen.core.types import SourcePosition


class FSMGenError(Exception):
    """
    Base exception class for every fatal compilation error.

    :param message: Human readable description of the problem.
    :param position: Source position of the offending declaration, if known.
    """

    def __init__(self, message: str, position: Optional["SourcePosition"] = None) -> None:
        self.message = message
        self.position = position
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.position is None:
            return self.message
        return f"{self.message}. {self.position}"


class ConfigError(FSMGenError):
    """
    Raised when compiler configuration contains unknown keys or invalid values.
    """


class NamingPolicyError(FSMGenError):
    """
    Raised when a requested type name lacks the declaration suffix or is too short.
    """

    def __init__(self, type_name: str, message: str) -> None:
        self.type_name = type_name
        super().__init__(message)


class SourceScanError(FSMGenError):
    """
    Raised when a source file in the working directory cannot be read or parsed.
    """


class DeclarationError(FSMGenError):
    """
    Base class for structural problems of a declaration.
    """


class MalformedDeclarationError(DeclarationError):
    """
    Raised when the target type is absent, is not a class, or has zero fields.
    """


class MalformedFieldError(DeclarationError):
    """
    Raised when a field binds zero or several names, or repeats a name.
    """

    def __init__(self, names: Sequence[str], message: str, position: Optional["SourcePosition"] = None) -> None:
        self.names = tuple(names)
        super().__init__(message, position)


class AnnotationError(FSMGenError):
    """
    Base class for errors found while parsing a state annotation.
    """

    def __init__(self, state: str, message: str, position: Optional["SourcePosition"] = None) -> None:
        self.state = state
        super().__init__(message, position)


class AnnotationSyntaxError(AnnotationError):
    """
    Raised when an annotation entry does not match ``Event:"Destination"``.
    """

    def __init__(self, state: str, entry: str, reason: str, position: Optional["SourcePosition"] = None) -> None:
        self.entry = entry
        self.reason = reason
        super().__init__(state, f"unsupported annotation entry {entry!r} on state `{state}`: {reason}", position)


class ReservedEventError(AnnotationError):
    """
    Raised when a declaration uses the reserved ``Noop`` event.
    """

    def __init__(self, state: str, event: str, position: Optional["SourcePosition"] = None) -> None:
        self.event = event
        super().__init__(state, f"event `{event}` is reserved by system (state `{state}`)", position)


class DuplicateEventError(AnnotationError):
    """
    Raised when the same event name is declared twice on one state.
    """

    def __init__(self, state: str, event: str, position: Optional["SourcePosition"] = None) -> None:
        self.event = event
        super().__init__(state, f"event `{event}` duplicate on state `{state}`", position)


class ValidationError(FSMGenError):
    """
    Raised when a built machine definition violates a graph invariant.
    """


class DanglingReferenceError(ValidationError):
    """
    Raised when events point at destinations that are not declared states.

    ``violations`` holds every ``(state, destination, events)`` triple found;
    ``state``, ``destination`` and ``events`` describe the first one.
    """

    def __init__(
        self,
        violations: Sequence[Tuple[str, str, Tuple[str, ...]]],
        position: Optional["SourcePosition"] = None,
    ) -> None:
        if not violations:
            raise ValueError("DanglingReferenceError requires at least one violation")
        self.violations = tuple(violations)
        self.state, self.destination, self.events = self.violations[0]
        lines = [
            f"({state}) -[{', '.join(events)}]-> ({destination}) but there is no such destination state "
            f"as `{destination}`"
            for state, destination, events in self.violations
        ]
        super().__init__("; ".join(lines), position)


class BuilderError(FSMGenError):
    """
    Raised when the machine builder is misused (e.g. built twice).
    """


class OutputError(FSMGenError):
    """
    Raised when a generated artifact cannot be written to disk.
    """
