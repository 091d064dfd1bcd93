# fsmgen/interfaces/protocols.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from typing import TYPE_CHECKING, List, Optional, Protocol, runtime_checkable

from fsmgen.core.types import DeclarationKind, DeclaredField, SourcePosition

if TYPE_CHECKING:
    from fsmgen.emit.code import GeneratedMachine


@runtime_checkable
class Declaration(Protocol):
    """
    Declaration introspection protocol.

    An introspection backend (source scanning, runtime reflection, ...) exposes
    one located declaration through this interface so the compiler pipeline
    never depends on how the declaration was found.

    Attributes:
        type_name: Name of the declared type (``CBMDeclaration``)
        package: Opaque package/namespace context passed through to emission
        position: Where the type is declared
        kind: What the name refers to; only ``DeclarationKind.CLASS`` compiles

    Runtime Invariants:
    - fields() returns fields in declaration order
    - fields() is side-effect free and may be called repeatedly
    """

    @property
    def type_name(self) -> str: ...

    @property
    def package(self) -> str: ...

    @property
    def position(self) -> Optional[SourcePosition]: ...

    @property
    def kind(self) -> DeclarationKind: ...

    def fields(self) -> List[DeclaredField]:
        """Return the ordered field statements of the declaration."""
        ...


@runtime_checkable
class Renderer(Protocol):
    """
    Turns the logical content of a generated machine into target source text.

    Runtime Invariants:
    - render() is deterministic for a given input
    """

    def render(self, generated: "GeneratedMachine") -> str: ...
