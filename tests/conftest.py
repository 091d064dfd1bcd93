# tests/conftest.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details

import sys
import textwrap
import types
from dataclasses import dataclass, field
from typing import List, Optional, Tuple

import pytest

from fsmgen.core.config import CompilerConfig
from fsmgen.core.types import DeclarationKind, DeclaredField, SourcePosition

CBM_SOURCE = '''
from typing import Annotated


class FSMState(int):
    """Placeholder type of every state field."""


class CBMDeclaration:
    Opened: Annotated[FSMState, 'Try:"HalfOpened"']
    HalfOpened: Annotated[FSMState, 'Success:"Closed",Failure:"Opened"']
    Closed: Annotated[FSMState, 'Failure:"Opened",Panic:"Terminal",Error:"Terminal"']
    Terminal: FSMState
'''

CBM_FIELDS = [
    ("Opened", 'Try:"HalfOpened"'),
    ("HalfOpened", 'Success:"Closed",Failure:"Opened"'),
    ("Closed", 'Failure:"Opened",Panic:"Terminal",Error:"Terminal"'),
    ("Terminal", None),
]


def pytest_configure(config):
    """Register custom marks."""
    config.addinivalue_line("markers", "property: mark test as a property-based test")
    config.addinivalue_line("markers", "integration: mark test as an end-to-end test")


@dataclass
class StaticDeclaration:
    """In-memory declaration, standing in for an introspection backend."""

    type_name: str
    declared: List[DeclaredField] = field(default_factory=list)
    package: str = "examples"
    position: Optional[SourcePosition] = None
    kind: DeclarationKind = DeclarationKind.CLASS

    def fields(self) -> List[DeclaredField]:
        return list(self.declared)


def _make_declaration(
    type_name: str, fields: List[Tuple[str, Optional[str]]], kind: DeclarationKind = DeclarationKind.CLASS
) -> StaticDeclaration:
    filename = f"{type_name.lower()}.py"
    declared = [
        DeclaredField((name,), annotation, SourcePosition(filename, line, 5))
        for line, (name, annotation) in enumerate(fields, start=2)
    ]
    return StaticDeclaration(type_name, declared, position=SourcePosition(filename, 1, 1), kind=kind)


@pytest.fixture
def config() -> CompilerConfig:
    """Default compiler configuration."""
    return CompilerConfig()


@pytest.fixture
def make_declaration():
    """Factory building in-memory declarations from (name, annotation) pairs."""
    return _make_declaration


@pytest.fixture
def cbm_declaration() -> StaticDeclaration:
    """The circuit breaker declaration."""
    return _make_declaration("CBMDeclaration", CBM_FIELDS)


@pytest.fixture
def source_dir(tmp_path):
    """A working directory holding the circuit breaker declaration source."""
    (tmp_path / "circuitbreaker.py").write_text(CBM_SOURCE, encoding="utf-8")
    return tmp_path


@pytest.fixture
def write_source(tmp_path):
    """Write a dedented module into the temporary working directory."""

    def _write(name: str, source: str):
        path = tmp_path / name
        path.write_text(textwrap.dedent(source), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def load_generated():
    """Execute generated source as a throwaway module and return it."""
    loaded = []

    def _load(source: str, name: str = "generated_fsm"):
        module = types.ModuleType(name)
        sys.modules[name] = module
        loaded.append(name)
        exec(compile(source, f"<{name}>", "exec"), module.__dict__)
        return module

    yield _load
    for name in loaded:
        sys.modules.pop(name, None)
