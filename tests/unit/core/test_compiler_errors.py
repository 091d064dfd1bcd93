# tests/unit/core/test_compiler_errors.py
# Copyright (c) 2024 Brad Edwards
# Licensed under the MIT License - see LICENSE file for details
"""Unit tests for fsmgen.core.errors."""
import pytest

from fsmgen.core import errors
from fsmgen.core.types import SourcePosition


@pytest.mark.parametrize(
    "error_class",
    [
        errors.ConfigError,
        errors.NamingPolicyError,
        errors.SourceScanError,
        errors.MalformedDeclarationError,
        errors.MalformedFieldError,
        errors.AnnotationSyntaxError,
        errors.ReservedEventError,
        errors.DuplicateEventError,
        errors.DanglingReferenceError,
        errors.BuilderError,
        errors.OutputError,
    ],
)
def test_hierarchy(error_class):
    assert issubclass(error_class, errors.FSMGenError)


def test_message_with_and_without_position():
    assert str(errors.FSMGenError("boom")) == "boom"
    error = errors.FSMGenError("boom", SourcePosition("cbm.py", 3, 7))
    assert str(error) == "boom. cbm.py:3:7"
    assert error.message == "boom"


def test_source_position_rendering():
    assert str(SourcePosition("cbm.py")) == "cbm.py"
    assert str(SourcePosition("cbm.py", 3)) == "cbm.py:3"
    assert str(SourcePosition("cbm.py", 3, 7)) == "cbm.py:3:7"


def test_dangling_reference_requires_violation():
    with pytest.raises(ValueError):
        errors.DanglingReferenceError([])


def test_annotation_errors_share_state():
    for error in (
        errors.AnnotationSyntaxError("First", "Aa", "bad"),
        errors.ReservedEventError("First", "Noop"),
        errors.DuplicateEventError("First", "Aa"),
    ):
        assert isinstance(error, errors.AnnotationError)
        assert error.state == "First"
