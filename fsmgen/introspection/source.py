# fsmgen/introspection/source.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Source-scanning introspection backend.

Parses the Python files of one directory with :mod:`ast` and exposes the
requested top-level classes as declarations, without importing any of them.
Each annotated attribute of a class body is one field. Plain class attributes
are ignored, as they are by the runtime backend.
"""

from __future__ import annotations

import ast
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, List, Optional, Tuple, Union

from fsmgen.core.errors import MalformedFieldError, SourceScanError
from fsmgen.core.types import DeclarationKind, DeclaredField, SourcePosition

logger = logging.getLogger(__name__)

GENERATED_SUFFIX = ".fsm.py"
ANNOTATED = "Annotated"


@dataclass(frozen=True)
class SourceDeclaration:
    """A top-level definition found in a scanned file."""

    type_name: str
    package: str
    position: Optional[SourcePosition]
    kind: DeclarationKind
    node: Optional[ast.AST] = None

    def fields(self) -> List[DeclaredField]:
        if not isinstance(self.node, ast.ClassDef):
            return []
        filename = self.position.filename if self.position else "<unknown>"
        fields = []
        for statement in self.node.body:
            field = _field_from_statement(statement, filename)
            if field is not None:
                fields.append(field)
        return fields


class SourceScanner:
    """
    Finds declarations in the ``*.py`` files of a working directory.

    Files are read in sorted order; generated ``*.fsm.py`` files are skipped.
    Sources are parsed once, on first use.
    """

    def __init__(self, directory: Union[str, Path]) -> None:
        self._directory = Path(directory)
        self._modules: Optional[List[Tuple[Path, ast.Module]]] = None

    @property
    def directory(self) -> Path:
        return self._directory

    @property
    def package(self) -> str:
        """Package context of the scanned directory: its base name."""
        return self._directory.resolve().name

    def files(self) -> List[Path]:
        if not self._directory.is_dir():
            raise SourceScanError(f"can't scan `{self._directory}`: not a directory")
        return sorted(
            p for p in self._directory.glob("*.py") if p.is_file() and not p.name.endswith(GENERATED_SUFFIX)
        )

    def scan(self, type_names: Iterable[str]) -> Dict[str, Optional[SourceDeclaration]]:
        """
        Look up each requested type name.

        :param type_names: Names to look for.
        :return: Mapping of name to its declaration, or None when no file defines it.
        :raises SourceScanError: If the directory or one of its files can't be parsed.
        """
        return {name: self.find(name) for name in type_names}

    def find(self, type_name: str) -> Optional[SourceDeclaration]:
        """
        Find the top-level definition of ``type_name``.

        When several files define the name the first file wins and a warning
        is logged.
        """
        found: List[SourceDeclaration] = []
        for path, module in self._parsed():
            declaration = _lookup(module, type_name, str(path), self.package)
            if declaration is not None:
                found.append(declaration)
        if not found:
            logger.debug(f"{type_name} not found in {self._directory}")
            return None
        if len(found) > 1:
            others = ", ".join(str(d.position) for d in found[1:])
            logger.warning(f"{type_name} is defined more than once; using {found[0].position}, ignoring {others}")
        return found[0]

    def _parsed(self) -> List[Tuple[Path, ast.Module]]:
        if self._modules is None:
            modules = []
            for path in self.files():
                try:
                    source = path.read_text(encoding="utf-8")
                    modules.append((path, ast.parse(source, filename=str(path))))
                except SyntaxError as e:
                    raise SourceScanError(
                        f"can't parse {path}: {e.msg}", SourcePosition(str(path), e.lineno or 0, e.offset or 0)
                    ) from e
                except (OSError, UnicodeDecodeError, ValueError) as e:
                    raise SourceScanError(f"can't read {path}: {e}") from e
            logger.debug(f"Parsed {len(modules)} files in {self._directory}")
            self._modules = modules
        return self._modules


def _position(node: ast.AST, filename: str) -> SourcePosition:
    return SourcePosition(filename, getattr(node, "lineno", 0), getattr(node, "col_offset", -1) + 1)


def _lookup(module: ast.Module, type_name: str, filename: str, package: str) -> Optional[SourceDeclaration]:
    # Later top-level bindings shadow earlier ones, as at import time.
    result = None
    for node in module.body:
        kind = _binding_kind(node, type_name)
        if kind is not None:
            result = SourceDeclaration(type_name, package, _position(node, filename), kind, node)
    return result


def _binding_kind(node: ast.stmt, name: str) -> Optional[DeclarationKind]:
    if isinstance(node, ast.ClassDef):
        return DeclarationKind.CLASS if node.name == name else None
    if isinstance(node, (ast.FunctionDef, ast.AsyncFunctionDef)):
        return DeclarationKind.FUNCTION if node.name == name else None
    if isinstance(node, (ast.Assign, ast.AnnAssign)):
        targets = node.targets if isinstance(node, ast.Assign) else [node.target]
        return DeclarationKind.VARIABLE if name in _bound_names(targets) else None
    if isinstance(node, (ast.Import, ast.ImportFrom)):
        for alias in node.names:
            if (alias.asname or alias.name.split(".")[0]) == name:
                return DeclarationKind.OTHER
    return None


def _bound_names(targets: Iterable[ast.expr]) -> List[str]:
    names = []
    for target in targets:
        if isinstance(target, ast.Name):
            names.append(target.id)
        elif isinstance(target, (ast.Tuple, ast.List)):
            names.extend(_bound_names(target.elts))
        elif isinstance(target, ast.Starred):
            names.extend(_bound_names([target.value]))
    return names


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _field_from_statement(statement: ast.stmt, filename: str) -> Optional[DeclaredField]:
    position = _position(statement, filename)
    if isinstance(statement, ast.AnnAssign):
        names = (statement.target.id,) if isinstance(statement.target, ast.Name) else ()
        if len(names) == 1 and _is_dunder(names[0]):
            return None
        return DeclaredField(names, _annotation_text(statement.annotation, names, position), position)
    if isinstance(statement, ast.Assign):
        names = tuple(_bound_names(statement.targets))
        # Plain class attributes are not states; a = b = ... and a, b = ... are reported as malformed.
        if len(names) < 2 or all(_is_dunder(n) for n in names):
            return None
        return DeclaredField(names, None, position)
    return None


def _annotation_text(annotation: ast.expr, names: Tuple[str, ...], position: SourcePosition) -> Optional[str]:
    """Extract the grammar string from ``Annotated[T, "..."]``; None when absent."""
    if isinstance(annotation, ast.Constant) and isinstance(annotation.value, str):
        try:
            annotation = ast.parse(annotation.value, mode="eval").body
        except SyntaxError:
            return None
    if not isinstance(annotation, ast.Subscript) or not _is_annotated(annotation.value):
        return None
    elements = annotation.slice.elts if isinstance(annotation.slice, ast.Tuple) else [annotation.slice]
    texts = [e.value for e in elements[1:] if isinstance(e, ast.Constant) and isinstance(e.value, str)]
    if len(texts) > 1:
        raise MalformedFieldError(names, f"field {list(names)} carries more than one annotation string", position)
    return texts[0] if texts else None


def _is_annotated(node: ast.expr) -> bool:
    if isinstance(node, ast.Name):
        return node.id == ANNOTATED
    if isinstance(node, ast.Attribute):
        return node.attr == ANNOTATED
    return False
