# fsmgen/core/types.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple

StateName = str
EventName = str


@dataclass(frozen=True)
class SourcePosition:
    """
    Location of a declaration or field in its source.

    Positions are produced by introspection backends and only passed through
    by the compiler, so every fatal error can point back at the source.
    """

    filename: str
    line: int = 0
    column: int = 0

    def __str__(self) -> str:
        if self.line <= 0:
            return self.filename
        if self.column <= 0:
            return f"{self.filename}:{self.line}"
        return f"{self.filename}:{self.line}:{self.column}"


class DeclarationKind(Enum):
    """What a looked-up declaration name turned out to be."""

    CLASS = auto()
    FUNCTION = auto()
    VARIABLE = auto()
    OTHER = auto()


@dataclass(frozen=True)
class DeclaredField:
    """
    One field statement of a declaration, as reported by an introspection backend.

    Attributes:
        names: Identifiers bound by the statement (normally exactly one)
        raw_annotation: Annotation grammar string, or None when absent
        position: Where the field is declared
    """

    names: Tuple[str, ...]
    raw_annotation: Optional[str]
    position: Optional[SourcePosition] = None
