# fsmgen/introspection/runtime.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Runtime introspection backend: exposes an imported class as a declaration.

Only the class's own annotations are fields; inherited annotations and plain
class attributes are ignored.
"""

import inspect
import typing
from typing import Any, List, Optional

from fsmgen.core.errors import MalformedDeclarationError, MalformedFieldError
from fsmgen.core.types import DeclarationKind, DeclaredField, SourcePosition


class ClassDeclaration:
    """
    Declaration backed by a live Python object.

    :param target: The class to compile (any other object yields a non-class kind).
    :param package: Package context; defaults to the object's module.
    """

    def __init__(self, target: Any, package: Optional[str] = None) -> None:
        self._target = target
        self._package = package if package is not None else getattr(target, "__module__", "") or ""

    @property
    def type_name(self) -> str:
        return getattr(self._target, "__name__", type(self._target).__name__)

    @property
    def package(self) -> str:
        return self._package

    @property
    def kind(self) -> DeclarationKind:
        if inspect.isclass(self._target):
            return DeclarationKind.CLASS
        if inspect.isroutine(self._target):
            return DeclarationKind.FUNCTION
        return DeclarationKind.VARIABLE

    @property
    def position(self) -> Optional[SourcePosition]:
        try:
            filename = inspect.getsourcefile(self._target)
            _, line = inspect.getsourcelines(self._target)
        except (OSError, TypeError):
            return SourcePosition(f"<{self._package or 'unknown'}>")
        return SourcePosition(filename or f"<{self._package}>", line)

    def fields(self) -> List[DeclaredField]:
        """
        Return one field per own annotation, in definition order.

        :raises MalformedDeclarationError: If string annotations can't be evaluated.
        """
        if not inspect.isclass(self._target):
            return []
        position = self.position
        try:
            annotations = inspect.get_annotations(self._target, eval_str=True)
        except (NameError, AttributeError, SyntaxError, TypeError) as e:
            raise MalformedDeclarationError(
                f"can't evaluate annotations of `{self.type_name}`: {e}", position
            ) from e
        return [
            DeclaredField((name,), _annotation_text(name, hint, position), position)
            for name, hint in annotations.items()
            if not (name.startswith("__") and name.endswith("__"))
        ]


def _annotation_text(name: str, hint: Any, position: Optional[SourcePosition]) -> Optional[str]:
    if typing.get_origin(hint) is not typing.Annotated:
        return None
    texts = [m for m in hint.__metadata__ if isinstance(m, str)]
    if len(texts) > 1:
        raise MalformedFieldError([name], f"field {[name]} carries more than one annotation string", position)
    return texts[0] if texts else None
