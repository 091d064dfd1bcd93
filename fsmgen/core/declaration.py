# fsmgen/core/declaration.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, List, Optional, Set

from fsmgen.core.errors import MalformedDeclarationError, MalformedFieldError
from fsmgen.core.naming import member_name_problem
from fsmgen.core.types import DeclarationKind, DeclaredField, SourcePosition, StateName

if TYPE_CHECKING:
    from fsmgen.interfaces.protocols import Declaration

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StateSkeleton:
    """
    A state before its annotation is parsed.

    Attributes:
        name: State name, taken from the field identifier
        raw_annotation: Annotation grammar string, or None when absent
        position: Where the field is declared
    """

    name: StateName
    raw_annotation: Optional[str]
    position: Optional[SourcePosition] = None

    @property
    def is_terminal(self) -> bool:
        """A state with an absent or blank annotation has no outgoing events."""
        return self.raw_annotation is None or not self.raw_annotation.strip()


def extract_fields(declaration: Optional["Declaration"]) -> List[StateSkeleton]:
    """
    Turn the fields of a declaration into one state skeleton per field.

    :param declaration: The located declaration, or None when it was not found.
    :return: Skeletons in field declaration order.
    :raises MalformedDeclarationError: If the declaration is missing, not a class, or has no fields.
    :raises MalformedFieldError: If a field binds zero or several names, or repeats a name, or its name
        can't be a member of the generated state enumeration.
    """
    if declaration is None:
        raise MalformedDeclarationError("target declaration is missing")
    if declaration.kind is not DeclarationKind.CLASS:
        raise MalformedDeclarationError(
            f"target type `{declaration.type_name}` kind unsupported: {declaration.kind.name.lower()}",
            declaration.position,
        )

    fields = declaration.fields()
    if not fields:
        raise MalformedDeclarationError(
            f"target class `{declaration.type_name}` is incomplete or has zero fields", declaration.position
        )

    skeletons = []
    seen: Set[str] = set()
    for field in fields:
        skeleton = _skeleton_for(field)
        if skeleton.name in seen:
            raise MalformedFieldError(
                field.names, f"field `{skeleton.name}` declared more than once", field.position
            )
        seen.add(skeleton.name)
        skeletons.append(skeleton)

    logger.debug(f"Extracted {len(skeletons)} fields from {declaration.type_name}")
    return skeletons


def _skeleton_for(field: DeclaredField) -> StateSkeleton:
    if len(field.names) != 1:
        raise MalformedFieldError(
            field.names,
            f"target field names have unexpected len: {list(field.names)}",
            field.position,
        )
    problem = member_name_problem(field.names[0])
    if problem:
        raise MalformedFieldError(
            field.names, f"field `{field.names[0]}` can't be used as a state name: it {problem}", field.position
        )
    return StateSkeleton(name=field.names[0], raw_annotation=field.raw_annotation, position=field.position)
