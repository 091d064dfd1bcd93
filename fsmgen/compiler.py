# fsmgen/compiler.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""
Compilation pipeline driver.

    extract_fields -> parse_annotation -> MachineBuilder -> Validator
        -> describe_machine + emit_machine -> renderer

Every stage raises an FSMGenError on failure and nothing after it runs. Each
call builds its own builder, validator and definition; no state is shared
between compilations.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Optional

from fsmgen.core.annotation import parse_annotation
from fsmgen.core.config import CompilerConfig
from fsmgen.core.declaration import extract_fields
from fsmgen.core.errors import MalformedDeclarationError
from fsmgen.core.machine import MachineBuilder, MachineDefinition
from fsmgen.core.naming import machine_name_for
from fsmgen.core.validation import Validator
from fsmgen.emit.code import GeneratedMachine, emit_machine
from fsmgen.emit.description import describe_machine
from fsmgen.emit.python import PythonRenderer
from fsmgen.introspection.runtime import ClassDeclaration

if TYPE_CHECKING:
    from fsmgen.interfaces.protocols import Declaration, Renderer

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CompilationResult:
    """
    Output of one successful compilation.

    Attributes:
        definition: The validated machine definition, description included
        generated: Logical content of the generated artifact
        source: Rendered source text of the generated artifact
    """

    definition: MachineDefinition
    generated: GeneratedMachine
    source: str

    @property
    def file_name(self) -> str:
        return self.generated.file_name

    @property
    def description(self) -> str:
        return self.definition.description


def build_definition(declaration: Optional["Declaration"], config: Optional[CompilerConfig] = None) -> MachineDefinition:
    """
    Run extraction, parsing and graph building for one declaration.

    The result is not validated yet.

    :raises NamingPolicyError: If the declaration's type name breaks the naming policy.
    :raises DeclarationError: If the declaration or one of its fields is malformed.
    :raises AnnotationError: If an annotation is malformed.
    """
    config = config or CompilerConfig()
    if declaration is None:
        raise MalformedDeclarationError("target declaration is missing")
    machine_name = machine_name_for(declaration.type_name, config)
    skeletons = extract_fields(declaration)
    builder = MachineBuilder(machine_name, declaration.package, declaration.position)
    for skeleton in skeletons:
        parsed = parse_annotation(skeleton.name, skeleton.raw_annotation, skeleton.position, config)
        builder.add_state(skeleton, parsed)
    return builder.build()


def compile_declaration(
    declaration: Optional["Declaration"],
    config: Optional[CompilerConfig] = None,
    renderer: Optional["Renderer"] = None,
) -> CompilationResult:
    """
    Compile one declaration into a validated definition and generated source.

    :param declaration: Declaration from any introspection backend, or None if it was not found.
    :param config: Compiler configuration; defaults when omitted.
    :param renderer: Target renderer; the Python renderer when omitted.
    :raises FSMGenError: On the first problem found; no partial result is returned.
    """
    config = config or CompilerConfig()
    renderer = renderer or PythonRenderer()

    definition = build_definition(declaration, config)
    Validator(config).validate(definition)
    definition = definition.with_description(describe_machine(definition))

    generated = emit_machine(definition, config)
    source = renderer.render(generated)
    logger.debug(f"Compiled {definition.machine_name}: {len(definition)} states -> {generated.file_name}")
    return CompilationResult(definition=definition, generated=generated, source=source)


def compile_class(
    cls: Any,
    config: Optional[CompilerConfig] = None,
    renderer: Optional["Renderer"] = None,
    package: Optional[str] = None,
) -> CompilationResult:
    """Compile an imported declaration class."""
    return compile_declaration(ClassDeclaration(cls, package=package), config, renderer)
