"""
Core package providing the compilation pipeline for FSM declarations.

Architecture:
- Extracts states from a declaration's fields
- Parses per-state annotations into event/destination maps
- Builds an immutable machine definition
- Validates graph invariants before any output is produced

Cross-cutting:
- Every failure is an FSMGenError carrying a source position
- Deterministic ordering for everything enumerated in output
"""

from .annotation import ParsedAnnotation, parse_annotation
from .declaration import StateSkeleton, extract_fields
from .errors import (
    AnnotationError,
    AnnotationSyntaxError,
    BuilderError,
    ConfigError,
    DanglingReferenceError,
    DeclarationError,
    DuplicateEventError,
    FSMGenError,
    MalformedDeclarationError,
    MalformedFieldError,
    NamingPolicyError,
    OutputError,
    ReservedEventError,
    SourceScanError,
    ValidationError,
)
from .machine import MachineBuilder, MachineDefinition, StateDefinition
from .types import DeclarationKind, DeclaredField, SourcePosition
from .validation import ValidationResult, ValidationRule, ValidationSeverity, Validator

__all__ = [
    # Pipeline stages
    "extract_fields",
    "parse_annotation",
    "MachineBuilder",
    "Validator",
    # Data model
    "StateSkeleton",
    "ParsedAnnotation",
    "StateDefinition",
    "MachineDefinition",
    "DeclaredField",
    "DeclarationKind",
    "SourcePosition",
    "ValidationResult",
    "ValidationRule",
    "ValidationSeverity",
    # Errors
    "FSMGenError",
    "ConfigError",
    "NamingPolicyError",
    "SourceScanError",
    "DeclarationError",
    "MalformedDeclarationError",
    "MalformedFieldError",
    "AnnotationError",
    "AnnotationSyntaxError",
    "ReservedEventError",
    "DuplicateEventError",
    "ValidationError",
    "DanglingReferenceError",
    "BuilderError",
    "OutputError",
]
